"""Concrete two-card combos for a hand class."""

from __future__ import annotations

from typing import List, Optional

from range_trainer.constants import CARD_SUITS
from range_trainer.hands import RANK_INDEX, HandCategory, HandClass, canonicalize, parse_hand_class


def expand_combos(hand) -> List[str]:
    """
    List the concrete combos of a hand class in fixed suit order (c, d, h, s).

    Pairs yield 6 unordered suit pairs, suited hands 4, offsuit hands 12 with
    the higher rank holding the first suit. Unknown hands yield [].
    """
    if not isinstance(hand, HandClass):
        hand = parse_hand_class(hand)
        if hand is None:
            return []

    r1, r2 = hand.high, hand.low
    if hand.category is HandCategory.PAIR:
        return [
            f"{r1}{CARD_SUITS[i]}{r2}{CARD_SUITS[j]}"
            for i in range(len(CARD_SUITS))
            for j in range(i + 1, len(CARD_SUITS))
        ]
    if hand.category is HandCategory.SUITED:
        return [f"{r1}{s}{r2}{s}" for s in CARD_SUITS]
    return [
        f"{r1}{s1}{r2}{s2}"
        for s1 in CARD_SUITS
        for s2 in CARD_SUITS
        if s1 != s2
    ]


def combo_to_hand_class(combo: str) -> Optional[HandClass]:
    """Map a 4-char combo like `AcKd` or `kh9h` to its hand class."""
    if not isinstance(combo, str) or len(combo) != 4:
        return None
    r1, s1, r2, s2 = combo[0].upper(), combo[1], combo[2].upper(), combo[3]
    if r1 not in RANK_INDEX or r2 not in RANK_INDEX:
        return None
    return canonicalize(r1, r2, suited=s1 == s2)
