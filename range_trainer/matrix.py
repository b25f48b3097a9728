"""Merge per-action matrices into one range matrix and cap each hand at 100%."""

from __future__ import annotations

import logging
from typing import Iterable, List

from range_trainer.constants import ACTION_KEYS, ACTIONS, OVERFLOW_TOLERANCE
from range_trainer.models import (
    ActionWeight,
    ParseResult,
    ParseWarning,
    PokerRange,
    RangeActions,
    RangeMatrix,
    matrix_to_dict,
)
from range_trainer.notation import parse_action_text

logger = logging.getLogger(__name__)


def merge_action_matrices(matrices: Iterable[RangeMatrix]) -> RangeMatrix:
    """Append each action's rows per hand, keeping the order matrices arrive in."""
    combined: RangeMatrix = {}
    for matrix in matrices:
        for hand, cells in matrix.items():
            combined.setdefault(hand, []).extend(
                ActionWeight(c.action_name, c.color, c.weight) for c in cells
            )
    return combined


def normalize_matrix(matrix: RangeMatrix) -> RangeMatrix:
    """
    Scale down any hand whose weights sum past 100, preserving proportions.

    Hands at or under 100 are left alone; the remainder is an implicit fold.
    Running this on an already normalized matrix changes nothing.
    """
    out: RangeMatrix = {}
    for hand, cells in matrix.items():
        total = sum(c.weight for c in cells)
        if total > OVERFLOW_TOLERANCE:
            factor = 100.0 / total
            out[hand] = [ActionWeight(c.action_name, c.color, c.weight * factor) for c in cells]
        else:
            out[hand] = [ActionWeight(c.action_name, c.color, c.weight) for c in cells]
    return out


def parse_range_actions(actions: RangeActions) -> ParseResult:
    """Parse raise, call and all-in text in that order, then merge and normalize."""
    partials: List[RangeMatrix] = []
    warnings: List[ParseWarning] = []
    for key in ACTION_KEYS:
        text = actions.text_for(key)
        if not text.strip():
            continue
        name, color = ACTIONS[key]
        parsed = parse_action_text(text, name, color)
        partials.append(parsed.matrix)
        warnings.extend(parsed.warnings)
    return ParseResult(
        matrix=normalize_matrix(merge_action_matrices(partials)),
        warnings=warnings,
    )


def build_range_matrix(actions: RangeActions) -> RangeMatrix:
    return parse_range_actions(actions).matrix


def refresh_range_data(poker_range: PokerRange) -> bool:
    """
    Re-derive every spot's matrix from its raw text.

    Returns True when any spot changed: a legacy string rawText, or a
    matrix that was missing or out of date with its text.
    """
    changed = False
    for stack, positions in poker_range.ranges_by_stack.items():
        for position, data in positions.items():
            rebuilt = build_range_matrix(data.raw_text)
            if data.legacy or matrix_to_dict(rebuilt) != matrix_to_dict(data.matrix):
                logger.info(
                    "Rebuilt matrix for range %s at %sbb %s%s",
                    poker_range.id,
                    stack,
                    position,
                    " (legacy text)" if data.legacy else "",
                )
                data.matrix = rebuilt
                data.legacy = False
                changed = True
    return changed
