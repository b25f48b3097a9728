"""
Core data models for range authoring and drills.

Persisted JSON uses the camelCase keys of the stored range documents
(`rangesByStack`, `rawText`, `actionName`); the dataclasses here use
snake_case and convert through to_dict / from_dict.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from range_trainer.constants import ACTION_KEYS


@dataclass
class ActionWeight:
    """Share (0-100) of a hand class's combos assigned to one action."""

    action_name: str
    color: str
    weight: float

    def to_dict(self) -> dict:
        return {
            "actionName": self.action_name,
            "color": self.color,
            "weight": self.weight,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "ActionWeight":
        return cls(
            action_name=str(raw.get("actionName", "")),
            color=str(raw.get("color", "")),
            weight=float(raw.get("weight", 0.0)),
        )


# Hand string (e.g. "AKs") -> action rows in priority order.
RangeMatrix = Dict[str, List[ActionWeight]]


def matrix_to_dict(matrix: RangeMatrix) -> Dict[str, List[dict]]:
    return {hand: [cell.to_dict() for cell in cells] for hand, cells in matrix.items()}


def matrix_from_dict(raw: Any) -> RangeMatrix:
    if not isinstance(raw, dict):
        return {}
    out: RangeMatrix = {}
    for hand, cells in raw.items():
        if not isinstance(cells, list):
            continue
        out[str(hand)] = [ActionWeight.from_dict(c) for c in cells if isinstance(c, dict)]
    return out


@dataclass
class ParseWarning:
    """A token the parser dropped."""

    action_name: str
    token: str
    reason: str

    def to_dict(self) -> dict:
        return {"action": self.action_name, "token": self.token, "reason": self.reason}


@dataclass
class ParseResult:
    matrix: RangeMatrix = field(default_factory=dict)
    warnings: List[ParseWarning] = field(default_factory=list)


@dataclass
class RangeActions:
    """Raw authored text for the raise, call and all-in boxes of one spot."""

    raise_text: str = ""
    call_text: str = ""
    allin_text: str = ""

    def text_for(self, key: str) -> str:
        return {
            "raise": self.raise_text,
            "call": self.call_text,
            "allin": self.allin_text,
        }[key]

    def is_blank(self) -> bool:
        return all(not self.text_for(k).strip() for k in ACTION_KEYS)

    def to_dict(self) -> dict:
        return {k: self.text_for(k) for k in ACTION_KEYS if self.text_for(k)}

    @classmethod
    def from_dict(cls, raw: Any) -> "RangeActions":
        if not isinstance(raw, dict):
            return cls()

        def _text(key: str) -> str:
            value = raw.get(key)
            return value if isinstance(value, str) else ""

        return cls(
            raise_text=_text("raise"),
            call_text=_text("call"),
            allin_text=_text("allin"),
        )

    @classmethod
    def from_raw(cls, raw: Any) -> "RangeActions":
        """Accept both the structured form and the legacy single-string form."""
        if isinstance(raw, str):
            return cls(raise_text=raw)
        return cls.from_dict(raw)


@dataclass
class RangeData:
    """
    Authored text plus its derived matrix for one (stack, position) spot.

    The matrix is a cache of `raw_text`. `legacy` is set when the stored
    document held the old single-string rawText and still needs rewriting.
    """

    raw_text: RangeActions = field(default_factory=RangeActions)
    matrix: RangeMatrix = field(default_factory=dict)
    legacy: bool = False

    def to_dict(self) -> dict:
        return {
            "rawText": self.raw_text.to_dict(),
            "matrix": matrix_to_dict(self.matrix),
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "RangeData":
        if not isinstance(raw, dict):
            return cls(legacy=True)
        raw_text = raw.get("rawText")
        return cls(
            raw_text=RangeActions.from_raw(raw_text),
            matrix=matrix_from_dict(raw.get("matrix")),
            legacy=isinstance(raw_text, str),
        )


@dataclass
class PokerRange:
    """A named range set indexed by stack depth, then hero position."""

    id: str
    name: str = ""
    ranges_by_stack: Dict[str, Dict[str, RangeData]] = field(default_factory=dict)

    def spot(self, stack_depth: str, position: str) -> Optional[RangeData]:
        return self.ranges_by_stack.get(stack_depth, {}).get(position)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "rangesByStack": {
                stack: {pos: data.to_dict() for pos, data in positions.items()}
                for stack, positions in self.ranges_by_stack.items()
            },
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "PokerRange":
        by_stack: Dict[str, Dict[str, RangeData]] = {}
        raw_stacks = raw.get("rangesByStack") or {}
        if isinstance(raw_stacks, dict):
            for stack, positions in raw_stacks.items():
                if not isinstance(positions, dict):
                    continue
                by_stack[str(stack)] = {
                    str(pos): RangeData.from_dict(data) for pos, data in positions.items()
                }
        return cls(
            id=str(raw.get("id", "")),
            name=str(raw.get("name") or ""),
            ranges_by_stack=by_stack,
        )


@dataclass
class QuizScenario:
    """One drill question: a hand, a spot and the actions that grade as correct."""

    hand: str
    hero_position: str
    stack_depth: str
    correct_actions: List[ActionWeight]
    all_possible_actions: List[str]

    @property
    def correct_labels(self) -> List[str]:
        return [a.action_name for a in self.correct_actions]

    def to_dict(self) -> dict:
        return {
            "hand": self.hand,
            "heroPosition": self.hero_position,
            "stackDepth": self.stack_depth,
            "correctActions": [a.to_dict() for a in self.correct_actions],
            "allPossibleActions": list(self.all_possible_actions),
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "QuizScenario":
        return cls(
            hand=str(raw.get("hand", "")),
            hero_position=str(raw.get("heroPosition", "")),
            stack_depth=str(raw.get("stackDepth", "")),
            correct_actions=[
                ActionWeight.from_dict(a) for a in raw.get("correctActions") or [] if isinstance(a, dict)
            ],
            all_possible_actions=[str(a) for a in raw.get("allPossibleActions") or []],
        )
