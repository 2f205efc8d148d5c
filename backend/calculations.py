from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from .constants import get_rules
from .models import CalculationInput

# Cles JSON historiques du bulletin, dans l'ordre des champs du resultat
RESULT_KEYS: Dict[str, str] = {
    "base_salary": "salaireDeBase",
    "seniority_bonus": "primeAnciennete",
    "transport_allowance": "indemniteTransport",
    "meal_allowance": "indemnitePanier",
    "gross_salary_total": "salaireBrutGlobal",
    "social_security_contribution": "cotisationCnss",
    "health_insurance_contribution": "cotisationAmo",
    "complementary_retirement_contribution": "cotisationCimr",
    "professional_expense_deduction": "fraisPro",
    "net_taxable_salary": "salaireNetImposable",
    "gross_income_tax": "irBrut",
    "family_tax_reduction": "reductionFamille",
    "net_income_tax": "irNet",
    "net_monthly_salary": "salaireNetMensuel",
}


@dataclass(frozen=True)
class CalculationResult:
    base_salary: float
    seniority_bonus: float
    transport_allowance: float
    meal_allowance: float
    gross_salary_total: float
    social_security_contribution: float
    health_insurance_contribution: float
    complementary_retirement_contribution: float
    professional_expense_deduction: float
    net_taxable_salary: float
    gross_income_tax: float
    family_tax_reduction: float
    net_income_tax: float
    net_monthly_salary: float


def seniority_years(hire_date: Optional[date], as_of: date) -> int:
    """Annees completes d'anciennete a la date `as_of` (0 sans date d'embauche)."""
    if hire_date is None:
        return 0
    years = as_of.year - hire_date.year
    if (as_of.month, as_of.day) < (hire_date.month, hire_date.day):
        years -= 1
    return max(0, years)


def seniority_rate(years: int, tiers: Sequence[Sequence[float]]) -> float:
    for min_years, rate in sorted(tiers, key=lambda tier: tier[0], reverse=True):
        if years >= min_years:
            return rate
    return 0.0


def professional_expenses(taxable_gross: float, rules: Dict[str, Any]) -> float:
    frais = rules["frais_pro"]
    if taxable_gross <= frais["threshold"]:
        return taxable_gross * frais["low_rate"]
    return min(taxable_gross * frais["high_rate"], frais["ceiling"])


def income_tax(net_taxable: float, brackets: List[Sequence[Any]]) -> float:
    """IR brut selon le bareme progressif: base * taux - somme a deduire, jamais negatif."""
    rate, abatement = brackets[-1][1], brackets[-1][2]
    for upper, bracket_rate, bracket_abatement in brackets:
        if upper is None or net_taxable <= upper:
            rate, abatement = bracket_rate, bracket_abatement
            break
    return max(0.0, net_taxable * rate - abatement)


def family_reduction(dependent_count: int, rules: Dict[str, Any]) -> float:
    famille = rules["famille"]
    dependents = min(dependent_count, famille["max_dependents"])
    return dependents * (famille["annual_per_dependent"] / famille["months"])


def calculate(
    data: CalculationInput,
    as_of: date,
    rules: Optional[Dict[str, Any]] = None,
) -> CalculationResult:
    """Calcule le salaire net mensuel a partir du salaire de base brut."""
    rules = rules or get_rules()

    years = seniority_years(data.hire_date, as_of)
    seniority_bonus = data.base_salary * seniority_rate(years, rules["anciennete"]["paliers"])

    # Les indemnites sont toujours incluses, quels que soient isTransportActive / isPanierActive
    gross_total = (
        data.base_salary
        + seniority_bonus
        + data.transport_allowance
        + data.meal_allowance
    )

    cnss = min(gross_total, rules["cnss"]["ceiling"]) * rules["cnss"]["rate"]

    amo = 0.0
    if data.health_insurance_active:
        amo = gross_total * rules["amo"]["rate"]

    # Transport et panier sont exoneres: meme base pour la CIMR et l'IR
    taxable_gross = gross_total - data.transport_allowance - data.meal_allowance

    cimr = 0.0
    if data.complementary_retirement_active:
        cimr = taxable_gross * (data.complementary_retirement_rate / 100)

    frais_pro = professional_expenses(taxable_gross, rules)
    net_taxable = taxable_gross - cnss - amo - cimr - frais_pro

    ir_brut = income_tax(net_taxable, rules["ir"]["bareme"])
    reduction = family_reduction(data.dependent_count, rules)
    ir_net = max(0.0, ir_brut - reduction)

    net_salary = gross_total - (cnss + amo + cimr + ir_net)

    return CalculationResult(
        base_salary=data.base_salary,
        seniority_bonus=seniority_bonus,
        transport_allowance=data.transport_allowance,
        meal_allowance=data.meal_allowance,
        gross_salary_total=gross_total,
        social_security_contribution=cnss,
        health_insurance_contribution=amo,
        complementary_retirement_contribution=cimr,
        professional_expense_deduction=frais_pro,
        net_taxable_salary=net_taxable,
        gross_income_tax=ir_brut,
        family_tax_reduction=reduction,
        net_income_tax=ir_net,
        net_monthly_salary=net_salary,
    )


def to_payload(result: CalculationResult) -> Dict[str, float]:
    return {RESULT_KEYS[key]: value for key, value in asdict(result).items()}
