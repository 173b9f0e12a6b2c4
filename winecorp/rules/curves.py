"""
Courbes de normalisation partagées par les services (prestige, âge,
régularité, tirages asymétriques).
"""

import math
from typing import Sequence

import numpy as np

from winecorp.utils import clamp01

# =====================================================
# Prestige -> 0..1 (croissance rapide puis longue traîne)
# =====================================================

_PRESTIGE_POINTS = [0.0, 1.0, 5.0, 10.0, 50.0, 100.0, 500.0, 1000.0, 2000.0]
_PRESTIGE_VALUES = [0.100, 0.195, 0.445, 0.700, 0.822, 0.900, 0.953, 0.980, 0.999]


def normalize_prestige(prestige: float) -> float:
    """
    Ramène un prestige (0..+inf) sur 0..1.

    Interpolation linéaire entre points d'ancrage jusqu'à 2000, puis
    approche asymptotique de 1.0.

    Exemple
    -------
    0.9   (prestige 100)
    0.445 (prestige 5)
    """
    x = max(0.0, float(prestige))
    last = _PRESTIGE_POINTS[-1]
    if x <= last:
        return float(np.interp(x, _PRESTIGE_POINTS, _PRESTIGE_VALUES))
    tail = 1.0 - math.exp(-(x - last) / last)
    return min(1.0, _PRESTIGE_VALUES[-1] + (1.0 - _PRESTIGE_VALUES[-1]) * tail)


# Âge (années) -> 0..1, fortement pondéré sur les premières décennies
_AGE_POINTS = [0.0, 5.0, 10.0, 20.0, 40.0, 60.0, 100.0, 200.0]
_AGE_VALUES = [0.0, 0.10, 0.20, 0.35, 0.60, 0.75, 0.90, 1.0]


def age_modifier(years: float) -> float:
    """0 an = 0.0, 40 ans = 0.6, 200 ans et plus = 1.0."""
    return float(np.interp(max(0.0, years), _AGE_POINTS, _AGE_VALUES))


def skewed_multiplier(value: float) -> float:
    """Tirage 0..1 asymétrique : la majorité des résultats reste faible."""
    v = clamp01(value)
    return v * v


# =====================================================
# Régularité (écart-type population)
# =====================================================


def consistency_score(
    history: Sequence[float],
    current: float,
    min_samples: int = 4,
    default: float = 0.7,
    max_std: float = 0.3,
) -> float:
    """1.0 = série parfaitement régulière, 0.0 = écart-type >= `max_std`.

    Retourne `default` tant que l'historique compte moins de `min_samples` valeurs.
    """
    if len(history) < min_samples:
        return default
    values = np.asarray(list(history) + [current], dtype=float)
    return clamp01(1.0 - float(np.std(values)) / max_std)
