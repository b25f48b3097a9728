"""Shared constants for the range trainer."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Tuple

RANK_ORDER: Tuple[str, ...] = ("A", "K", "Q", "J", "T", "9", "8", "7", "6", "5", "4", "3", "2")
CARD_SUITS: Tuple[str, ...] = ("c", "d", "h", "s")

POSITIONS: Tuple[str, ...] = ("UTG", "UTG+1", "LJ", "HJ", "CO", "BTN", "SB", "BB")
STACK_DEPTHS: Tuple[str, ...] = ("80", "60", "50", "40", "35", "30", "25", "20", "17", "14", "12")

# Parse order is raise -> call -> all-in.
ACTION_KEYS: Tuple[str, ...] = ("raise", "call", "allin")
ACTIONS: Mapping[str, Tuple[str, str]] = MappingProxyType(
    {
        "raise": ("Raise", "#f97316"),
        "call": ("Call", "#22c55e"),
        "allin": ("All-in", "#a855f7"),
    }
)

FOLD_LABEL = "Fold"
FOLD_COLOR = "#808080"
SUMMARY_FOLD_COLOR = "#4b5563"
QUIZ_BASE_ACTIONS: Tuple[str, ...] = ("Fold", "Call", "Raise")

TOTAL_COMBOS = 1326
OVERFLOW_TOLERANCE = 100.01
FOLD_THRESHOLD = 99.9
MIN_ACTION_WEIGHT = 0.01
