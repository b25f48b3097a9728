"""
Parser for range notation text.

Two dialects are accepted for a single action box:

Simple:
    AA, KK, AQs(50) A5s(25.5)
    Tokens split on whitespace and/or commas. An optional `(number)`
    suffix gives the percentage of the class taken by the action;
    without it the class is taken at 100%.

Solver:
    AcKc:1,AdKd:0.5,AhKh:1
    Comma separated `combo:frequency` pairs. Frequencies are in combo
    units and are summed per hand class, then divided by the class's
    combo count to get a percentage.

Any text containing `:` is read as solver notation. Tokens that cannot
be understood are dropped and reported as warnings; parsing never raises.
"""

import logging
import math
import re
from typing import Dict, List

from range_trainer.combos import combo_to_hand_class
from range_trainer.hands import parse_hand_class
from range_trainer.models import ActionWeight, ParseResult, ParseWarning

logger = logging.getLogger(__name__)

SIMPLE_DIALECT = "simple"
SOLVER_DIALECT = "solver"

_TOKEN_SPLIT = re.compile(r"[\s,]+")
_FREQUENCY_SUFFIX = re.compile(r"(.+)\((\d+(?:\.\d*)?)\)")


def detect_dialect(text: str) -> str:
    return SOLVER_DIALECT if ":" in text else SIMPLE_DIALECT


def parse_action_text(text: str, action_name: str, color: str) -> ParseResult:
    """
    Parse one action box into a partial matrix for that action.

    Args:
        text: Raw range text in either dialect
        action_name: Label stored on every produced ActionWeight
        color: Display color stored on every produced ActionWeight

    Returns:
        ParseResult with the partial matrix and any dropped-token warnings
    """
    if not isinstance(text, str) or not text.strip():
        return ParseResult()
    if detect_dialect(text) == SOLVER_DIALECT:
        result = parse_solver_text(text, action_name, color)
    else:
        result = parse_simple_text(text, action_name, color)

    if result.warnings:
        logger.debug(
            "Dropped %d token(s) while parsing %s range",
            len(result.warnings),
            action_name,
        )
    return result


def parse_simple_text(text: str, action_name: str, color: str) -> ParseResult:
    result = ParseResult()
    for token in _TOKEN_SPLIT.split(text):
        if not token:
            continue

        hand_text = token
        weight = 100.0
        match = _FREQUENCY_SUFFIX.fullmatch(token)
        if match:
            hand_text = match.group(1)
            weight = float(match.group(2))

        hand = parse_hand_class(hand_text)
        if hand is None:
            _drop(result, action_name, token, "unknown hand")
            continue

        result.matrix.setdefault(str(hand), []).append(
            ActionWeight(action_name=action_name, color=color, weight=weight)
        )
    return result


def parse_solver_text(text: str, action_name: str, color: str) -> ParseResult:
    result = ParseResult()
    # Kept separate from the simple path: these are combo counts, not percentages.
    frequency_sums: Dict[str, float] = {}
    hands_by_key = {}

    segments: List[str] = [part.strip() for part in text.split(",")]
    for segment in segments:
        if not segment:
            continue

        pieces = segment.split(":")
        if len(pieces) != 2:
            _drop(result, action_name, segment, "expected combo:frequency")
            continue
        combo_text, freq_text = pieces[0].strip(), pieces[1].strip()
        if not combo_text or not freq_text:
            _drop(result, action_name, segment, "expected combo:frequency")
            continue

        hand = combo_to_hand_class(combo_text)
        if hand is None:
            _drop(result, action_name, segment, "unknown combo")
            continue

        try:
            frequency = float(freq_text)
        except ValueError:
            _drop(result, action_name, segment, "bad frequency")
            continue
        if not math.isfinite(frequency):
            _drop(result, action_name, segment, "bad frequency")
            continue

        key = str(hand)
        hands_by_key[key] = hand
        frequency_sums[key] = frequency_sums.get(key, 0.0) + frequency

    for key, total in frequency_sums.items():
        weight = min(100.0, round(total / hands_by_key[key].max_combos * 100.0, 2))
        if weight > 0:
            result.matrix[key] = [ActionWeight(action_name=action_name, color=color, weight=weight)]
    return result


def _drop(result: ParseResult, action_name: str, token: str, reason: str) -> None:
    result.warnings.append(ParseWarning(action_name=action_name, token=token, reason=reason))
    logger.debug("Dropping %r from %s range: %s", token, action_name, reason)
