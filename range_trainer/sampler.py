"""Random drill scenarios drawn from an authored range set."""

from __future__ import annotations

import random
from typing import List, Optional

from range_trainer.constants import (
    ACTIONS,
    FOLD_COLOR,
    FOLD_LABEL,
    FOLD_THRESHOLD,
    MIN_ACTION_WEIGHT,
    QUIZ_BASE_ACTIONS,
)
from range_trainer.hands import ALL_HANDS
from range_trainer.models import ActionWeight, PokerRange, QuizScenario, RangeMatrix


def hand_actions(matrix: RangeMatrix, hand: str) -> List[ActionWeight]:
    """
    Ground-truth actions for one hand, with any fold remainder made explicit.

    Rows at or below MIN_ACTION_WEIGHT are ignored. When the rest sums to
    under FOLD_THRESHOLD a Fold row carries the remainder; a hand absent
    from the matrix is a pure fold.
    """
    actions = [
        ActionWeight(c.action_name, c.color, c.weight)
        for c in matrix.get(hand, [])
        if c.weight > MIN_ACTION_WEIGHT
    ]
    total = sum(a.weight for a in actions)
    if total < FOLD_THRESHOLD:
        actions.append(ActionWeight(FOLD_LABEL, FOLD_COLOR, 100.0 - total))
    return actions


def _possible_actions(matrix: RangeMatrix) -> List[str]:
    out = list(QUIZ_BASE_ACTIONS)
    allin_name = ACTIONS["allin"][0]
    if any(c.action_name == allin_name for cells in matrix.values() for c in cells):
        out.append(allin_name)
    return out


def sample_scenario(poker_range: PokerRange, rng=None) -> Optional[QuizScenario]:
    """
    Draw a random stack, position and hand from a range set.

    Args:
        poker_range: Range set to draw from
        rng: Anything with a `choice(seq)` method; defaults to random.Random()

    Returns:
        A QuizScenario, or None when no spot has a non-empty matrix
    """
    rng = rng or random.Random()

    stacks = sorted(
        stack
        for stack, positions in poker_range.ranges_by_stack.items()
        if any(data is not None and data.matrix for data in positions.values())
    )
    if not stacks:
        return None
    stack_depth = rng.choice(stacks)

    spots = poker_range.ranges_by_stack[stack_depth]
    positions = sorted(pos for pos, data in spots.items() if data is not None and data.matrix)
    hero_position = rng.choice(positions)
    matrix = spots[hero_position].matrix

    # Uniform over all 169 classes, whether or not the hand is in the range.
    hand = rng.choice(ALL_HANDS)

    return QuizScenario(
        hand=hand,
        hero_position=hero_position,
        stack_depth=stack_depth,
        correct_actions=hand_actions(matrix, hand),
        all_possible_actions=_possible_actions(matrix),
    )


def grade_answer(scenario: QuizScenario, label: str) -> bool:
    """True when the chosen action is one of the scenario's correct actions."""
    chosen = str(label or "").strip().lower()
    return any(chosen == name.lower() for name in scenario.correct_labels)
