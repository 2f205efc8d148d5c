"""Constantes e chargement des regles de paie (CNSS, AMO, IR, frais pro)."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

DEFAULT_RULES: Dict[str, Any] = {
    "version": "2025",
    "anciennete": {
        # [annees minimum, taux], du seuil le plus haut au plus bas
        "paliers": [[25, 0.25], [20, 0.20], [12, 0.15], [5, 0.10], [2, 0.05]],
    },
    "cnss": {
        "rate": 0.0448,
        "ceiling": 6000.0,
    },
    "amo": {
        "rate": 0.0226,
    },
    "frais_pro": {
        "threshold": 6500.0,
        "low_rate": 0.35,
        "high_rate": 0.25,
        "ceiling": 2916.67,
    },
    "ir": {
        # [plafond inclus, taux, somme a deduire]; plafond null = sans limite
        "bareme": [
            [3333.33, 0.0, 0.0],
            [5000.00, 0.10, 333.33],
            [6666.67, 0.20, 833.33],
            [8333.33, 0.30, 1500.00],
            [15000.00, 0.34, 1833.33],
            [None, 0.37, 2283.33],
        ],
    },
    "famille": {
        "annual_per_dependent": 500.0,
        "max_dependents": 6,
        "months": 12,
    },
}

BASE_DIR = Path(__file__).resolve().parent
CONFIG_PATH = BASE_DIR / "data" / "payroll_rules.json"


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _config_path() -> Path:
    override = os.getenv("PAYROLL_RULES_PATH")
    return Path(override) if override else CONFIG_PATH


def get_rules() -> Dict[str, Any]:
    path = _config_path()
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("Fichier de regles illisible, regles par defaut utilisees: %s", path)
            return DEFAULT_RULES
        if not isinstance(data, dict):
            logger.warning("Fichier de regles invalide, regles par defaut utilisees: %s", path)
            return DEFAULT_RULES
        return _deep_merge(DEFAULT_RULES, data)
    return DEFAULT_RULES
