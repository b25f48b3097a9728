"""SQLite persistence for range sets and drill attempts."""

from __future__ import annotations

import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


class RangeStore:
    """Persistence layer for authored ranges and drill progress."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        return conn

    def _init_db(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS ranges (
                    range_id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    payload_json TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS scenarios (
                    scenario_id TEXT PRIMARY KEY,
                    created_at TEXT NOT NULL,
                    payload_json TEXT NOT NULL
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS attempts (
                    attempt_id INTEGER PRIMARY KEY AUTOINCREMENT,
                    created_at TEXT NOT NULL,
                    range_id TEXT NOT NULL,
                    stack_depth TEXT NOT NULL,
                    hero_position TEXT NOT NULL,
                    hand TEXT NOT NULL,
                    hand_category TEXT NOT NULL,
                    chosen_action TEXT NOT NULL,
                    correct_actions_json TEXT NOT NULL,
                    is_correct INTEGER NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_attempts_range ON attempts(range_id)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_attempts_position ON attempts(hero_position)"
            )

    def save_range(self, payload: dict) -> None:
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO ranges (range_id, name, created_at, updated_at, payload_json)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(range_id) DO UPDATE SET
                    name = excluded.name,
                    updated_at = excluded.updated_at,
                    payload_json = excluded.payload_json
                """,
                (
                    payload["id"],
                    payload.get("name") or "",
                    now,
                    now,
                    json.dumps(payload),
                ),
            )

    def get_range(self, range_id: str) -> Optional[dict]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT payload_json FROM ranges WHERE range_id = ?",
                (range_id,),
            ).fetchone()
            if not row:
                return None
            return json.loads(row["payload_json"])

    def list_ranges(self) -> List[dict]:
        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT range_id, name, created_at, updated_at
                FROM ranges
                ORDER BY updated_at DESC, name ASC
                """
            ).fetchall()
        return [
            {
                "id": r["range_id"],
                "name": r["name"],
                "created_at": r["created_at"],
                "updated_at": r["updated_at"],
            }
            for r in rows
        ]

    def delete_range(self, range_id: str) -> bool:
        with self._connect() as conn:
            cur = conn.execute("DELETE FROM ranges WHERE range_id = ?", (range_id,))
            conn.execute("DELETE FROM attempts WHERE range_id = ?", (range_id,))
            return cur.rowcount > 0

    def save_scenario(self, scenario: dict) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO scenarios (scenario_id, created_at, payload_json)
                VALUES (?, ?, ?)
                """,
                (
                    scenario["scenario_id"],
                    scenario.get("created_at") or datetime.now(timezone.utc).isoformat(),
                    json.dumps(scenario),
                ),
            )

    def get_scenario(self, scenario_id: str) -> Optional[dict]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT payload_json FROM scenarios WHERE scenario_id = ?",
                (scenario_id,),
            ).fetchone()
            if not row:
                return None
            return json.loads(row["payload_json"])

    def save_attempt(
        self,
        range_id: str,
        scenario: dict,
        hand_category: str,
        chosen_action: str,
        is_correct: bool,
    ) -> int:
        now = datetime.now(timezone.utc).isoformat()
        with self._connect() as conn:
            cur = conn.execute(
                """
                INSERT INTO attempts (
                    created_at,
                    range_id,
                    stack_depth,
                    hero_position,
                    hand,
                    hand_category,
                    chosen_action,
                    correct_actions_json,
                    is_correct
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    now,
                    range_id,
                    scenario["stackDepth"],
                    scenario["heroPosition"],
                    scenario["hand"],
                    hand_category,
                    chosen_action,
                    json.dumps(scenario.get("correctActions", [])),
                    1 if is_correct else 0,
                ),
            )
            return int(cur.lastrowid)

    def _by_dimension(self, column: str, range_id: Optional[str]) -> List[dict]:
        where, params = self._range_filter(range_id)
        with self._connect() as conn:
            rows = conn.execute(
                f"""
                SELECT
                    {column} AS label,
                    COUNT(*) AS attempts,
                    AVG(is_correct) AS accuracy
                FROM attempts
                {where}
                GROUP BY {column}
                ORDER BY attempts DESC, accuracy ASC
                """,
                params,
            ).fetchall()
            return [
                {
                    "label": row["label"],
                    "attempts": int(row["attempts"]),
                    "accuracy": round(float(row["accuracy"] or 0.0), 3),
                }
                for row in rows
            ]

    @staticmethod
    def _range_filter(range_id: Optional[str]) -> tuple:
        if range_id:
            return "WHERE range_id = ?", (range_id,)
        return "", ()

    def progress_summary(self, range_id: Optional[str] = None) -> Dict[str, Any]:
        where, params = self._range_filter(range_id)
        with self._connect() as conn:
            row = conn.execute(
                f"""
                SELECT
                    COUNT(*) AS attempts,
                    SUM(is_correct) AS correct,
                    AVG(is_correct) AS accuracy
                FROM attempts
                {where}
                """,
                params,
            ).fetchone()
            latest = conn.execute(
                f"""
                SELECT
                    attempt_id,
                    created_at,
                    range_id,
                    stack_depth,
                    hero_position,
                    hand,
                    chosen_action,
                    is_correct
                FROM attempts
                {where}
                ORDER BY attempt_id DESC
                LIMIT 20
                """,
                params,
            ).fetchall()

        return {
            "totals": {
                "attempts": int(row["attempts"] or 0),
                "correct": int(row["correct"] or 0),
                "accuracy": round(float(row["accuracy"] or 0.0), 3),
            },
            "by_position": self._by_dimension("hero_position", range_id),
            "by_stack": self._by_dimension("stack_depth", range_id),
            "by_hand_category": self._by_dimension("hand_category", range_id),
            "recent_attempts": [
                {
                    "attempt_id": int(r["attempt_id"]),
                    "created_at": r["created_at"],
                    "range_id": r["range_id"],
                    "stack_depth": r["stack_depth"],
                    "hero_position": r["hero_position"],
                    "hand": r["hand"],
                    "chosen_action": r["chosen_action"],
                    "is_correct": bool(r["is_correct"]),
                }
                for r in latest
            ],
        }

    def clear_attempts(self) -> dict:
        """Delete all stored drill scenarios and attempts."""
        with self._connect() as conn:
            attempts_count = conn.execute("SELECT COUNT(*) AS c FROM attempts").fetchone()["c"]
            scenarios_count = conn.execute("SELECT COUNT(*) AS c FROM scenarios").fetchone()["c"]
            conn.execute("DELETE FROM attempts")
            conn.execute("DELETE FROM scenarios")
        return {
            "attempts_deleted": int(attempts_count or 0),
            "scenarios_deleted": int(scenarios_count or 0),
        }
