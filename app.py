from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from pydantic import ValidationError

from backend.calculations import calculate, to_payload
from backend.constants import get_rules
from backend.logging_config import setup_logging
from backend.models import INVALID_INPUT, CalculationInput, error_detail, validation_errors
from backend.settings import cors_headers, get_allowed_origins, get_log_level, get_port

logger = logging.getLogger(__name__)

app = Flask(__name__)
# Garde l'ordre des champs du bulletin
app.json.sort_keys = False

ALLOWED_ORIGINS = get_allowed_origins()


def _json_error(message: str, status_code: int, **extra: Any) -> tuple[Any, int]:
    return jsonify({"detail": message, **extra}), status_code


def _get_payload() -> Optional[Dict[str, Any]]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return None
    return payload


@app.after_request
def _add_cors_headers(response: Any) -> Any:
    for name, value in cors_headers(request.headers.get("Origin"), ALLOWED_ORIGINS).items():
        if name == "Vary":
            response.headers.add(name, value)
        else:
            response.headers[name] = value
    return response


@app.get("/health")
def health_check() -> Any:
    return jsonify({"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()})


@app.get("/config")
def get_config() -> Any:
    return jsonify(get_rules())


@app.route("/api/calculate", methods=["POST", "OPTIONS"])
def calculate_salary() -> Any:
    if request.method == "OPTIONS":
        return "", 200

    payload = _get_payload()
    if payload is None:
        return _json_error(INVALID_INPUT, 400, errors=[{"field": "body", "message": "Payload JSON invalide"}])

    try:
        parsed = CalculationInput.model_validate(payload)
    except ValidationError as exc:
        errors = validation_errors(exc)
        return _json_error(error_detail(errors), 400, errors=errors)

    try:
        result = calculate(parsed, as_of=date.today())
        return jsonify(to_payload(result))
    except Exception:
        logger.exception("Erreur de calcul")
        return _json_error("Erreur interne du serveur lors du calcul", 500)


if __name__ == "__main__":
    setup_logging(get_log_level())
    app.run(host="0.0.0.0", port=get_port())
