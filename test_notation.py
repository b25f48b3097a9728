#!/usr/bin/env python3
"""Tests for hand taxonomy, combo expansion, notation parsing and matrix building."""

import logging

import pytest

from range_trainer.combos import combo_to_hand_class, expand_combos
from range_trainer.hands import (
    ALL_HAND_CLASSES,
    HandCategory,
    all_hand_classes,
    canonicalize,
    hand_grid,
    max_combos,
    parse_hand_class,
)
from range_trainer.matrix import (
    build_range_matrix,
    merge_action_matrices,
    normalize_matrix,
    parse_range_actions,
)
from range_trainer.models import ActionWeight, RangeActions
from range_trainer.notation import detect_dialect, parse_action_text


def _weights(matrix, hand):
    return [(c.action_name, c.weight) for c in matrix[hand]]


def test_taxonomy_counts():
    hands = all_hand_classes()
    assert len(hands) == 169
    assert len({str(h) for h in hands}) == 169
    assert sum(max_combos(h) for h in hands) == 1326
    assert hands == list(ALL_HAND_CLASSES)
    assert [str(h) for h in hands[:3]] == ["AA", "AKs", "AQs"]

    categories = [h.category for h in ALL_HAND_CLASSES]
    assert categories.count(HandCategory.PAIR) == 13
    assert categories.count(HandCategory.SUITED) == 78
    assert categories.count(HandCategory.OFFSUIT) == 78


def test_canonicalize_is_order_independent():
    assert canonicalize("K", "A", suited=True) == canonicalize("A", "K", suited=True)
    assert str(canonicalize("T", "J", suited=False)) == "JTo"
    assert str(canonicalize("9", "9", suited=True)) == "99"

    hand = canonicalize("2", "Q", suited=True)
    assert canonicalize(hand.high, hand.low, suited=True) == hand


def test_parse_hand_class():
    assert str(parse_hand_class("KAs")) == "AKs"
    assert str(parse_hand_class("TJo")) == "JTo"
    assert parse_hand_class("tjo") is None
    assert parse_hand_class("qq") is None
    assert parse_hand_class("AKS") is None
    assert parse_hand_class("AK") is None
    assert parse_hand_class("AAs") is None
    assert parse_hand_class("XY") is None
    assert parse_hand_class("AKx") is None
    assert max_combos("AKo") == 12
    assert max_combos("nope") == 0


def test_hand_grid_layout():
    grid = hand_grid()
    assert len(grid) == 13
    assert all(len(row) == 13 for row in grid)
    assert grid[0][0] == "AA"
    assert grid[0][1] == "AKs"
    assert grid[1][0] == "AKo"
    assert grid[12][12] == "22"
    assert grid[3][7] == "J7s"


def test_expand_combos_counts_and_order():
    assert expand_combos("AA") == ["AcAd", "AcAh", "AcAs", "AdAh", "AdAs", "AhAs"]
    assert expand_combos("KQs") == ["KcQc", "KdQd", "KhQh", "KsQs"]

    offsuit = expand_combos("T9o")
    assert len(offsuit) == 12
    assert offsuit[0] == "Tc9d"
    assert all(c[1] != c[3] for c in offsuit)
    assert expand_combos("ZZ") == []


def test_expand_then_recanonicalize_round_trip():
    for hand in ALL_HAND_CLASSES:
        combos = expand_combos(hand)
        assert len(combos) == hand.max_combos
        assert all(combo_to_hand_class(c) == hand for c in combos)


def test_detect_dialect():
    assert detect_dialect("AA, KK") == "simple"
    assert detect_dialect("AcKc:1") == "solver"


def test_simple_dialect_basic():
    result = parse_action_text("AA, KK, AQs(50)", "Raise", "#f97316")
    assert set(result.matrix) == {"AA", "KK", "AQs"}
    assert _weights(result.matrix, "AA") == [("Raise", 100.0)]
    assert _weights(result.matrix, "KK") == [("Raise", 100.0)]
    assert _weights(result.matrix, "AQs") == [("Raise", 50.0)]
    assert result.warnings == []


def test_simple_dialect_canonicalizes_and_keeps_duplicates():
    result = parse_action_text("KAs\nAKs(25)  T9o,9To(12.5)", "Call", "#22c55e")
    assert _weights(result.matrix, "AKs") == [("Call", 100.0), ("Call", 25.0)]
    assert _weights(result.matrix, "T9o") == [("Call", 100.0), ("Call", 12.5)]


def test_simple_dialect_drops_malformed_tokens():
    result = parse_action_text("XY(50), AA, AK, QQ(abc), 72", "Raise", "#f97316")
    assert set(result.matrix) == {"AA"}
    dropped = [w.token for w in result.warnings]
    assert dropped == ["XY(50)", "AK", "QQ(abc)", "72"]


def test_simple_dialect_is_case_sensitive():
    result = parse_action_text("aa, aks, tjo, Kk(50)", "Raise", "#f97316")
    assert result.matrix == {}
    assert [w.token for w in result.warnings] == ["aa", "aks", "tjo", "Kk(50)"]


def test_solver_dialect_accepts_lower_case_ranks():
    result = parse_action_text("acKc:1,adkd:1,AhKh:1,asks:1", "Raise", "#f97316")
    assert _weights(result.matrix, "AKs") == [("Raise", 100.0)]


def test_solver_dialect_full_suited_class():
    result = parse_action_text("AcKc:1,AdKd:1,AhKh:1,AsKs:1", "Raise", "#f97316")
    assert _weights(result.matrix, "AKs") == [("Raise", 100.0)]


def test_solver_dialect_fractions_and_categories():
    text = "AcAd:1, AhAs:0.5, KdAc:1, 7h6h:0.25, 6s7s:0.25, 2c2d:0"
    result = parse_action_text(text, "Call", "#22c55e")
    # AA: 1.5 of 6 combos
    assert _weights(result.matrix, "AA") == [("Call", 25.0)]
    # one offsuit combo of 12
    assert _weights(result.matrix, "AKo") == [("Call", 8.33)]
    # 0.5 of 4 suited combos
    assert _weights(result.matrix, "76s") == [("Call", 12.5)]
    # zero weight hands are not emitted
    assert "22" not in result.matrix


def test_solver_dialect_caps_at_100():
    result = parse_action_text("AcKc:3,AdKd:3", "Raise", "#f97316")
    assert _weights(result.matrix, "AKs") == [("Raise", 100.0)]


def test_solver_dialect_drops_malformed_segments():
    text = "AKq:1, AcKc:1:2, XcYc:1, AdKd:, :1, AhKh:abc, AsKs:nan, QcQd:1,,"
    result = parse_action_text(text, "Raise", "#f97316")
    assert set(result.matrix) == {"QQ"}
    assert len(result.warnings) == 7


def test_parser_never_raises_on_noise():
    for text in ["", "   ", ",,,", "(((", ":", "AA(", "::::", None]:
        result = parse_action_text(text, "Raise", "#f97316")
        assert result.matrix == {}


def test_parser_logs_dropped_tokens(caplog):
    with caplog.at_level(logging.DEBUG, logger="range_trainer.notation"):
        parse_action_text("AA, XY", "Raise", "#f97316")
    assert any("XY" in record.getMessage() for record in caplog.records)


def test_merge_preserves_action_order():
    raise_matrix = {"AA": [ActionWeight("Raise", "#f97316", 60.0)]}
    call_matrix = {"AA": [ActionWeight("Call", "#22c55e", 30.0)], "KK": [ActionWeight("Call", "#22c55e", 100.0)]}
    merged = merge_action_matrices([raise_matrix, call_matrix])
    assert _weights(merged, "AA") == [("Raise", 60.0), ("Call", 30.0)]
    assert _weights(merged, "KK") == [("Call", 100.0)]


def test_overflow_normalization_preserves_proportions():
    actions = RangeActions(raise_text="AA", call_text="AA(50)")
    matrix = build_range_matrix(actions)
    rows = _weights(matrix, "AA")
    assert [name for name, _ in rows] == ["Raise", "Call"]
    assert rows[0][1] == pytest.approx(66.67, abs=0.01)
    assert rows[1][1] == pytest.approx(33.33, abs=0.01)
    assert sum(w for _, w in rows) == pytest.approx(100.0)


def test_normalization_is_idempotent_and_keeps_partial_hands():
    matrix = {
        "AA": [ActionWeight("Raise", "", 70.0), ActionWeight("Call", "", 70.0), ActionWeight("All-in", "", 70.0)],
        "KK": [ActionWeight("Raise", "", 40.0)],
        "QQ": [ActionWeight("Raise", "", 60.0), ActionWeight("Call", "", 40.005)],
    }
    once = normalize_matrix(matrix)
    twice = normalize_matrix(once)
    assert [c.weight for c in once["AA"]] == [c.weight for c in twice["AA"]]
    assert sum(c.weight for c in once["AA"]) == pytest.approx(100.0)
    assert _weights(once, "KK") == [("Raise", 40.0)]
    assert _weights(once, "QQ") == [("Raise", 60.0), ("Call", 40.005)]


def test_parse_range_actions_mixes_dialects_and_collects_warnings():
    actions = RangeActions(
        raise_text="AA, KK, AQs(50), XY(50)",
        call_text="AcQc:1,AdQd:1",
        allin_text="22 33",
    )
    result = parse_range_actions(actions)
    assert _weights(result.matrix, "AQs") == [("Raise", 50.0), ("Call", 50.0)]
    assert _weights(result.matrix, "22") == [("All-in", 100.0)]
    assert [w.token for w in result.warnings] == ["XY(50)"]
    assert result.warnings[0].action_name == "Raise"


def test_blank_actions_produce_empty_matrix():
    assert build_range_matrix(RangeActions()) == {}
    assert build_range_matrix(RangeActions(raise_text="   ", call_text="\n")) == {}
