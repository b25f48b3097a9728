"""Starting-hand taxonomy: rank ordering, the 169 hand classes, combo counts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from range_trainer.constants import RANK_ORDER

RANK_INDEX = {r: i for i, r in enumerate(RANK_ORDER)}


class HandCategory(Enum):
    """Pair, suited or offsuit."""
    PAIR = "pair"
    SUITED = "suited"
    OFFSUIT = "offsuit"


COMBOS_BY_CATEGORY = {
    HandCategory.PAIR: 6,
    HandCategory.SUITED: 4,
    HandCategory.OFFSUIT: 12,
}


@dataclass(frozen=True)
class HandClass:
    """
    One of the 169 canonical starting hands.

    `high` always ranks at or above `low` in RANK_ORDER; build instances
    through canonicalize() or parse_hand_class() to keep that true.
    """

    high: str
    low: str
    category: HandCategory

    def __str__(self) -> str:
        if self.category is HandCategory.PAIR:
            return f"{self.high}{self.low}"
        suffix = "s" if self.category is HandCategory.SUITED else "o"
        return f"{self.high}{self.low}{suffix}"

    @property
    def max_combos(self) -> int:
        return COMBOS_BY_CATEGORY[self.category]


def canonicalize(rank1: str, rank2: str, suited: bool) -> HandClass:
    """Order two ranks high-first and tag the hand's category."""
    if rank1 == rank2:
        return HandClass(rank1, rank2, HandCategory.PAIR)
    if RANK_INDEX[rank1] > RANK_INDEX[rank2]:
        rank1, rank2 = rank2, rank1
    category = HandCategory.SUITED if suited else HandCategory.OFFSUIT
    return HandClass(rank1, rank2, category)


def parse_hand_class(text: str) -> Optional[HandClass]:
    """
    Parse `AA`, `AKs`, `KAo` style text into a HandClass.

    Matching is exact: ranks must be upper-case (`T` for ten) and the
    suffix lower-case `s` or `o`. Returns None for anything that is not
    one of the 169 classes.
    """
    if not isinstance(text, str):
        return None
    text = text.strip()
    if len(text) == 2:
        r1, r2 = text[0], text[1]
        if r1 != r2 or r1 not in RANK_INDEX:
            return None
        return HandClass(r1, r2, HandCategory.PAIR)
    if len(text) == 3:
        r1, r2, tag = text[0], text[1], text[2]
        if r1 not in RANK_INDEX or r2 not in RANK_INDEX or r1 == r2:
            return None
        if tag not in ("s", "o"):
            return None
        return canonicalize(r1, r2, suited=tag == "s")
    return None


def max_combos(hand) -> int:
    """Combo count for a HandClass or hand string; 0 when not a valid class."""
    if not isinstance(hand, HandClass):
        hand = parse_hand_class(hand)
        if hand is None:
            return 0
    return hand.max_combos


def _grid_hand(row: int, col: int) -> HandClass:
    r1, r2 = RANK_ORDER[row], RANK_ORDER[col]
    if row < col:
        return HandClass(r1, r2, HandCategory.SUITED)
    if col < row:
        return HandClass(r2, r1, HandCategory.OFFSUIT)
    return HandClass(r1, r2, HandCategory.PAIR)


def hand_grid() -> List[List[str]]:
    """13x13 grid: suited above the diagonal, offsuit below, pairs on it."""
    size = len(RANK_ORDER)
    return [[str(_grid_hand(row, col)) for col in range(size)] for row in range(size)]


ALL_HAND_CLASSES = tuple(
    _grid_hand(row, col)
    for row in range(len(RANK_ORDER))
    for col in range(len(RANK_ORDER))
)
ALL_HANDS = tuple(str(h) for h in ALL_HAND_CLASSES)
VALID_HANDS = frozenset(ALL_HANDS)


def all_hand_classes() -> List[HandClass]:
    return list(ALL_HAND_CLASSES)
