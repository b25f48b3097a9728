"""Poker range notation parsing, range matrices and drill sampling."""

from range_trainer.combos import expand_combos
from range_trainer.hands import (
    HandCategory,
    HandClass,
    all_hand_classes,
    canonicalize,
    max_combos,
    parse_hand_class,
)
from range_trainer.matrix import build_range_matrix, parse_range_actions
from range_trainer.notation import parse_action_text
from range_trainer.sampler import grade_answer, sample_scenario
from range_trainer.service import RangeTrainerService

__all__ = [
    "HandCategory",
    "HandClass",
    "RangeTrainerService",
    "all_hand_classes",
    "build_range_matrix",
    "canonicalize",
    "expand_combos",
    "grade_answer",
    "max_combos",
    "parse_action_text",
    "parse_hand_class",
    "parse_range_actions",
    "sample_scenario",
]
