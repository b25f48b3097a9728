"""Application service layer for range authoring and drills."""

from __future__ import annotations

import logging
import random
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from range_trainer.constants import ACTION_KEYS, ACTIONS, POSITIONS, RANK_ORDER, STACK_DEPTHS
from range_trainer.hands import hand_grid, parse_hand_class
from range_trainer.matrix import parse_range_actions, refresh_range_data
from range_trainer.models import (
    PokerRange,
    QuizScenario,
    RangeActions,
    RangeData,
    matrix_to_dict,
)
from range_trainer.sampler import grade_answer, sample_scenario
from range_trainer.session import SessionStats
from range_trainer.storage import RangeStore
from range_trainer.summary import action_summary, hand_detail, range_stats

logger = logging.getLogger(__name__)


def _require_text(payload: dict, key: str) -> str:
    value = str(payload.get(key, "") or "").strip()
    if not value:
        raise ValueError(f"{key} is required")
    return value


def _optional_int(payload: dict, key: str) -> Optional[int]:
    value = payload.get(key)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be an integer") from None


def _actions_from_payload(payload: dict) -> RangeActions:
    raw = payload.get("rawText", payload.get("raw_text"))
    if raw is None:
        raw = {k: payload.get(k) for k in ACTION_KEYS}
    return RangeActions.from_raw(raw)


class RangeTrainerService:
    """High-level API used by HTTP handlers and scripts."""

    def __init__(self, db_path: Path):
        self.store = RangeStore(db_path=db_path)

    def app_config(self) -> Dict[str, Any]:
        return {
            "positions": list(POSITIONS),
            "stack_depths": list(STACK_DEPTHS),
            "rank_order": list(RANK_ORDER),
            "hand_grid": hand_grid(),
            "actions": [
                {"key": key, "name": ACTIONS[key][0], "color": ACTIONS[key][1]}
                for key in ACTION_KEYS
            ],
        }

    def _load_range(self, range_id: str) -> PokerRange:
        raw = self.store.get_range(range_id)
        if raw is None:
            raise KeyError(f"Unknown range: {range_id}")
        poker_range = PokerRange.from_dict(raw)
        if refresh_range_data(poker_range):
            # Write back so the legacy or stale shape is not read again.
            self.store.save_range(poker_range.to_dict())
            logger.info("Migrated stored range %s", range_id)
        return poker_range

    def create_range(self, payload: dict) -> dict:
        name = _require_text(payload, "name")
        poker_range = PokerRange(id=f"rng_{uuid.uuid4().hex[:12]}", name=name)
        self.store.save_range(poker_range.to_dict())
        logger.info("Created range %s (%s)", poker_range.id, name)
        return poker_range.to_dict()

    def get_range(self, range_id: str) -> dict:
        return self._load_range(range_id).to_dict()

    def list_ranges(self) -> List[dict]:
        return self.store.list_ranges()

    def delete_range(self, range_id: str) -> dict:
        if not self.store.delete_range(range_id):
            raise KeyError(f"Unknown range: {range_id}")
        return {"deleted": range_id}

    def update_position(self, payload: dict) -> dict:
        """
        Replace the raw text for one stack/position spot and re-derive its matrix.

        Blank text in every box removes the spot, and a stack left with no
        spots is removed too.
        """
        range_id = _require_text(payload, "range_id")
        stack_depth = _require_text(payload, "stack_depth")
        position = _require_text(payload, "position")
        if stack_depth not in STACK_DEPTHS:
            raise ValueError(f"stack_depth must be one of {list(STACK_DEPTHS)}")
        if position not in POSITIONS:
            raise ValueError(f"position must be one of {list(POSITIONS)}")

        poker_range = self._load_range(range_id)
        actions = _actions_from_payload(payload)
        parsed = parse_range_actions(actions)

        if actions.is_blank():
            spots = poker_range.ranges_by_stack.get(stack_depth, {})
            spots.pop(position, None)
            if not spots:
                poker_range.ranges_by_stack.pop(stack_depth, None)
        else:
            poker_range.ranges_by_stack.setdefault(stack_depth, {})[position] = RangeData(
                raw_text=actions,
                matrix=parsed.matrix,
            )

        self.store.save_range(poker_range.to_dict())
        logger.info("Saved %sbb %s for range %s", stack_depth, position, range_id)
        return {
            "range": poker_range.to_dict(),
            "warnings": [w.to_dict() for w in parsed.warnings],
        }

    def preview(self, payload: dict) -> dict:
        parsed = parse_range_actions(_actions_from_payload(payload))
        return {
            "matrix": matrix_to_dict(parsed.matrix),
            "warnings": [w.to_dict() for w in parsed.warnings],
            "summary": action_summary(parsed.matrix),
            "stats": range_stats(parsed.matrix),
        }

    def hand_detail(self, payload: dict) -> dict:
        hand = _require_text(payload, "hand")
        if payload.get("range_id"):
            spot = self._load_range(str(payload["range_id"])).spot(
                str(payload.get("stack_depth", "")),
                str(payload.get("position", "")),
            )
            matrix = spot.matrix if spot else {}
        else:
            matrix = parse_range_actions(_actions_from_payload(payload)).matrix
        return hand_detail(matrix, hand)

    def draw(self, payload: dict) -> dict:
        """Draw a drill scenario from a saved range; `available` is False when it has none."""
        range_id = _require_text(payload, "range_id")
        poker_range = self._load_range(range_id)
        seed = _optional_int(payload, "seed")
        if seed is None:
            seed = random.randint(1, 10_000_000)
        scenario = sample_scenario(poker_range, rng=random.Random(seed))
        if scenario is None:
            return {"available": False, "range_id": range_id}

        out = scenario.to_dict()
        out.update(
            {
                "available": True,
                "scenario_id": f"scn_{uuid.uuid4().hex[:12]}",
                "created_at": datetime.now(timezone.utc).isoformat(),
                "range_id": range_id,
                "seed": seed,
            }
        )
        self.store.save_scenario(out)
        return out

    def answer(self, payload: dict) -> dict:
        scenario_id = _require_text(payload, "scenario_id")
        action = _require_text(payload, "action")
        raw_session = payload.get("session")
        if raw_session is None:
            raw_session = {}
        if not isinstance(raw_session, dict):
            raise ValueError("session must be an object")
        try:
            session = SessionStats.from_dict(raw_session)
        except (TypeError, ValueError):
            raise ValueError("session counters must be integers") from None

        stored = self.store.get_scenario(scenario_id)
        if stored is None:
            raise KeyError(f"Unknown scenario: {scenario_id}")

        scenario = QuizScenario.from_dict(stored)
        is_correct = grade_answer(scenario, action)
        hand_class = parse_hand_class(scenario.hand)
        self.store.save_attempt(
            range_id=stored["range_id"],
            scenario=stored,
            hand_category=hand_class.category.value if hand_class else "unknown",
            chosen_action=action,
            is_correct=is_correct,
        )

        session.record(is_correct)
        return {
            "scenario_id": scenario_id,
            "chosen_action": action,
            "is_correct": is_correct,
            "correct_actions": [a.to_dict() for a in scenario.correct_actions],
            "session": session.to_dict(),
        }

    def progress(self, range_id: str = "") -> dict:
        return self.store.progress_summary(range_id or None)

    def clear_attempts(self) -> dict:
        return self.store.clear_attempts()
