"""WSGI app exposing the range trainer JSON API."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from flask import Flask, jsonify, request

from range_trainer.service import RangeTrainerService

PROJECT_ROOT = Path(__file__).resolve().parent.parent

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return int(default)
    try:
        return int(str(raw).strip())
    except ValueError:
        return int(default)


def _resolve_db_path(raw: str) -> Path:
    raw_value = str(raw or "").strip()
    if not raw_value:
        return PROJECT_ROOT / "range_trainer" / "data" / "ranges.db"
    candidate = Path(raw_value)
    if candidate.is_absolute():
        return candidate
    return (PROJECT_ROOT / candidate).resolve()


def _api_error(message: str, status: int = 400):
    return jsonify({"error": str(message)}), int(status)


def _error_message(exc: Exception) -> str:
    # KeyError wraps its message in quotes when stringified.
    if isinstance(exc, KeyError) and exc.args:
        return str(exc.args[0])
    return str(exc)


@dataclass(frozen=True)
class RuntimeConfig:
    env: str
    db_path: Path
    log_level: str
    host: str
    port: int


def load_runtime_config() -> RuntimeConfig:
    return RuntimeConfig(
        env=str(os.getenv("RANGES_ENV", "development")).strip().lower(),
        db_path=_resolve_db_path(os.getenv("RANGES_DB_PATH", "range_trainer/data/ranges.db")),
        log_level=str(os.getenv("RANGES_LOG_LEVEL", "INFO")).strip().upper(),
        host=str(os.getenv("RANGES_HOST", "127.0.0.1")).strip(),
        port=_env_int("RANGES_PORT", 8787),
    )


def create_app(runtime: Optional[RuntimeConfig] = None) -> Flask:
    runtime = runtime or load_runtime_config()
    service = RangeTrainerService(db_path=runtime.db_path)

    app = Flask(__name__)
    # Keep grid and action priority order in JSON responses.
    app.json.sort_keys = False

    def _call(handler, *args):
        try:
            return jsonify(handler(*args))
        except KeyError as exc:
            return _api_error(_error_message(exc), status=404)
        except ValueError as exc:
            logger.warning("Rejected %s %s: %s", request.method, request.path, exc)
            return _api_error(str(exc), status=400)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed %s %s", request.method, request.path)
            return _api_error(str(exc), status=400)

    def _request_payload() -> dict:
        payload = request.get_json(silent=True)
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise ValueError("Request body must be a JSON object")
        return payload

    def _json_post(payload_handler):
        return _call(lambda: payload_handler(_request_payload()))

    @app.get("/api/health")
    @app.get("/healthz")
    def health():
        return jsonify({"ok": True})

    @app.get("/api/config")
    def api_config():
        return jsonify(service.app_config())

    @app.get("/api/ranges")
    def api_list_ranges():
        return jsonify({"ranges": service.list_ranges()})

    @app.post("/api/ranges")
    def api_create_range():
        return _json_post(service.create_range)

    @app.get("/api/ranges/<range_id>")
    def api_get_range(range_id: str):
        return _call(service.get_range, range_id)

    @app.delete("/api/ranges/<range_id>")
    def api_delete_range(range_id: str):
        return _call(service.delete_range, range_id)

    @app.post("/api/ranges/<range_id>/positions")
    def api_update_position(range_id: str):
        def _update():
            payload = _request_payload()
            payload["range_id"] = range_id
            return service.update_position(payload)

        return _call(_update)

    @app.post("/api/parse")
    def api_parse():
        return _json_post(service.preview)

    @app.post("/api/hand_detail")
    def api_hand_detail():
        return _json_post(service.hand_detail)

    @app.post("/api/quiz/draw")
    def api_quiz_draw():
        return _json_post(service.draw)

    @app.post("/api/quiz/answer")
    def api_quiz_answer():
        return _json_post(service.answer)

    @app.get("/api/progress")
    def api_progress():
        range_id = str(request.args.get("range_id", "")).strip()
        return jsonify(service.progress(range_id))

    @app.post("/api/clear_attempts")
    def api_clear_attempts():
        return _json_post(lambda _payload: service.clear_attempts())

    @app.errorhandler(404)
    def not_found(_err):
        return _api_error("Not found", status=404)

    @app.errorhandler(405)
    def method_not_allowed(_err):
        return _api_error("Method not allowed", status=405)

    return app
