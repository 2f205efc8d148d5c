from __future__ import annotations

import logging
from datetime import date, datetime, timezone

import uvicorn
from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .calculations import calculate, to_payload
from .constants import get_rules
from .logging_config import setup_logging
from .models import CalculationInput, error_detail, validation_errors
from .settings import cors_headers, get_allowed_origins, get_log_level, get_port

logger = logging.getLogger(__name__)

ALLOWED_ORIGINS = get_allowed_origins()

app = FastAPI(title="Calculateur de salaire net")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# Enregistre apres CORSMiddleware, donc execute avant lui: le preflight
# repond toujours 200 sans corps, comme l'application Flask.
@app.middleware("http")
async def _preflight(request: Request, call_next):
    if request.method == "OPTIONS" and "access-control-request-method" in request.headers:
        headers = cors_headers(request.headers.get("origin"), ALLOWED_ORIGINS)
        return Response(status_code=status.HTTP_200_OK, headers=headers)
    return await call_next(request)


@app.exception_handler(RequestValidationError)
async def _validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = validation_errors(exc)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": error_detail(errors), "errors": errors},
    )


@app.get("/health")
def health_check() -> dict:
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}


@app.get("/config")
def get_config() -> dict:
    return get_rules()


@app.options("/api/calculate")
def calculate_preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK)


@app.post("/api/calculate")
def calculate_salary(payload: CalculationInput) -> JSONResponse:
    try:
        result = calculate(payload, as_of=date.today())
        return JSONResponse(content=to_payload(result))
    except Exception:
        logger.exception("Erreur de calcul")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Erreur interne du serveur lors du calcul"},
        )


def run() -> None:
    setup_logging(get_log_level())
    port = get_port()
    logger.info("Serveur de calcul demarre sur le port %s", port)
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    run()
