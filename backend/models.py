from __future__ import annotations

from datetime import date
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

BASE_SALARY_FIELD = "salaireDeBaseMensuel"
BASE_SALARY_REQUIRED = "Le salaire de base est requis"
INVALID_INPUT = "Donnees invalides"
# Plafond des montants mensuels: garde tous les calculs en valeurs finies
MAX_AMOUNT = 1_000_000_000.0


class CalculationInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    base_salary: float = Field(..., alias=BASE_SALARY_FIELD, ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    hire_date: date | None = Field(None, alias="dateEmbauche")
    dependent_count: int = Field(0, alias="nbCharges", ge=0)
    transport_allowance: float = Field(0, alias="indemniteTransport", ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    meal_allowance: float = Field(0, alias="indemnitePanier", ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    complementary_retirement_rate: float = Field(0, alias="tauxCIMR", ge=0, le=100, allow_inf_nan=False)
    complementary_retirement_active: bool = Field(False, alias="isCIMRActive")
    # Acceptes mais sans effet sur le calcul: les indemnites restent toujours incluses
    transport_active: bool = Field(False, alias="isTransportActive")
    meal_active: bool = Field(False, alias="isPanierActive")
    health_insurance_active: bool = Field(False, alias="isAMOActive")

    @field_validator("base_salary", mode="before")
    @classmethod
    def validate_base_salary(cls, value: Any) -> Any:
        if value is None:
            raise ValueError(BASE_SALARY_REQUIRED)
        return value

    @field_validator("hire_date", mode="before")
    @classmethod
    def empty_hire_date(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator(
        "dependent_count",
        "transport_allowance",
        "meal_allowance",
        "complementary_retirement_rate",
        mode="before",
    )
    @classmethod
    def null_as_zero(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator(
        "complementary_retirement_active",
        "transport_active",
        "meal_active",
        "health_insurance_active",
        mode="before",
    )
    @classmethod
    def null_as_false(cls, value: Any) -> Any:
        return False if value is None else value


def validation_errors(exc: ValidationError | Any) -> List[Dict[str, str]]:
    """Une entree {field, message} par champ invalide (pydantic ou FastAPI)."""
    errors: List[Dict[str, str]] = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body") or "body"
        message = error["msg"]
        if field == BASE_SALARY_FIELD and (error["type"] == "missing" or BASE_SALARY_REQUIRED in message):
            message = BASE_SALARY_REQUIRED
        errors.append({"field": field, "message": message})
    return errors


def error_detail(errors: List[Dict[str, str]]) -> str:
    if any(error["field"] == BASE_SALARY_FIELD and error["message"] == BASE_SALARY_REQUIRED for error in errors):
        return BASE_SALARY_REQUIRED
    return INVALID_INPUT
