from datetime import date

import pytest


@pytest.fixture
def scenario_payload():
    """Salarie a 10 ans d'anciennete, 2 enfants, AMO active."""
    today = date.today()
    return {
        "salaireDeBaseMensuel": 10000,
        "dateEmbauche": date(today.year - 10, 1, 1).isoformat(),
        "nbCharges": 2,
        "indemniteTransport": 500,
        "indemnitePanier": 0,
        "tauxCIMR": 0,
        "isCIMRActive": False,
        "isTransportActive": True,
        "isPanierActive": False,
        "isAMOActive": True,
    }
