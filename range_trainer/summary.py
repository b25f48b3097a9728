"""Combo-weighted summaries of a range matrix for editor side panels."""

from __future__ import annotations

from typing import Dict, List

from range_trainer.combos import expand_combos
from range_trainer.constants import FOLD_LABEL, MIN_ACTION_WEIGHT, SUMMARY_FOLD_COLOR, TOTAL_COMBOS
from range_trainer.hands import max_combos, parse_hand_class
from range_trainer.models import RangeMatrix


def _played_combos(matrix: RangeMatrix) -> Dict[str, dict]:
    by_action: Dict[str, dict] = {}
    for hand, cells in matrix.items():
        hand_combos = max_combos(hand)
        for cell in cells:
            entry = by_action.setdefault(cell.action_name, {"color": cell.color, "combos": 0.0})
            entry["combos"] += cell.weight / 100.0 * hand_combos
    return by_action


def action_summary(matrix: RangeMatrix) -> List[dict]:
    """
    Combo count and share of all 1326 combos per action, plus the fold remainder.

    Rows are sorted by combo count, largest first.
    """
    by_action = _played_combos(matrix)
    played = sum(entry["combos"] for entry in by_action.values())
    fold_combos = max(0.0, TOTAL_COMBOS - played)
    if fold_combos > MIN_ACTION_WEIGHT:
        by_action[FOLD_LABEL] = {"color": SUMMARY_FOLD_COLOR, "combos": fold_combos}

    rows = [
        {
            "name": name,
            "color": entry["color"],
            "combos": round(entry["combos"], 2),
            "percentage": round(entry["combos"] / TOTAL_COMBOS * 100.0, 2),
        }
        for name, entry in by_action.items()
    ]
    rows.sort(key=lambda row: row["combos"], reverse=True)
    return rows


def range_stats(matrix: RangeMatrix) -> dict:
    played = sum(entry["combos"] for entry in _played_combos(matrix).values())
    return {
        "hands": len(matrix),
        "combos": round(played, 2),
        "percentage": round(played / TOTAL_COMBOS * 100.0, 2),
    }


def hand_detail(matrix: RangeMatrix, hand: str) -> dict:
    """Actions, fold remainder and concrete combos for one grid cell."""
    hand_class = parse_hand_class(hand)
    if hand_class is None:
        raise ValueError(f"Unknown hand: {hand!r}")
    key = str(hand_class)

    actions = [cell.to_dict() for cell in matrix.get(key, [])]
    fold_weight = 100.0 - sum(a["weight"] for a in actions)
    if fold_weight > MIN_ACTION_WEIGHT:
        actions.append({"actionName": FOLD_LABEL, "color": SUMMARY_FOLD_COLOR, "weight": fold_weight})

    return {
        "hand": key,
        "category": hand_class.category.value,
        "max_combos": hand_class.max_combos,
        "actions": actions,
        "combos": expand_combos(hand_class),
    }
