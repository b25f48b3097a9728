"""Running score for a drill session."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SessionStats:
    played: int = 0
    correct: int = 0
    errors: int = 0
    streak: int = 0
    longest_streak: int = 0

    @property
    def accuracy(self) -> str:
        if self.played == 0:
            return "0.0"
        return f"{self.correct / self.played * 100.0:.1f}"

    def record(self, is_correct: bool) -> None:
        self.played += 1
        if is_correct:
            self.correct += 1
            self.streak += 1
            self.longest_streak = max(self.longest_streak, self.streak)
        else:
            self.errors += 1
            self.streak = 0

    def to_dict(self) -> dict:
        return {
            "played": self.played,
            "correct": self.correct,
            "errors": self.errors,
            "accuracy": self.accuracy,
            "streak": self.streak,
            "longest_streak": self.longest_streak,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "SessionStats":
        return cls(
            played=int(raw.get("played", 0)),
            correct=int(raw.get("correct", 0)),
            errors=int(raw.get("errors", 0)),
            streak=int(raw.get("streak", 0)),
            longest_streak=int(raw.get("longest_streak", 0)),
        )
