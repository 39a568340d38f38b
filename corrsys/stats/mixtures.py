"""
Moment formulas for continuous normal mixtures.

A mixture variable ``M = sum_i 1{component i} * Y_i`` is described by its
mixing weights ``pis``, component means ``mus`` and component standard
deviations ``sigmas``. The functions here convert correlations stated
between mixture *components* into correlations with the whole mixture
variable (Davenport, Bezder & Headrick).

Usage:
    from corrsys.stats.mixtures import rho_M1Y, rho_M1M2
"""

from typing import Sequence, Tuple

import numpy as np

from ..errors import ConfigurationError, NumericDegeneracyError

__all__ = ["mixture_moments", "rho_M1Y", "rho_M1M2"]


def _as_params(pis, mus, sigmas) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Coerce mixture parameters to equal-length float arrays."""
    pis = np.atleast_1d(np.asarray(pis, dtype=np.float64))
    mus = np.atleast_1d(np.asarray(mus, dtype=np.float64))
    sigmas = np.atleast_1d(np.asarray(sigmas, dtype=np.float64))

    if not (len(pis) == len(mus) == len(sigmas)):
        raise ConfigurationError(
            f"Mixture parameters must have equal lengths, got pis={len(pis)}, mus={len(mus)}, sigmas={len(sigmas)}"
        )
    if len(pis) == 0:
        raise ConfigurationError("Mixture must have at least one component")

    return pis, mus, sigmas


def mixture_moments(pis, mus, sigmas) -> Tuple[float, float]:
    """Mean and variance of a normal mixture.

    The variance includes the spread of the component means:
    ``sum(pi * (sigma^2 + mu^2)) - mean^2``.

    Args:
        pis: Mixing weights (should sum to 1).
        mus: Component means.
        sigmas: Component standard deviations.

    Returns:
        ``(mean, variance)`` as floats.
    """
    pis, mus, sigmas = _as_params(pis, mus, sigmas)

    mean = float(np.sum(pis * mus))
    variance = float(np.sum(pis * (sigmas**2 + mus**2)) - mean**2)
    return mean, variance


def _mixture_sd(pis, mus, sigmas) -> float:
    _, variance = mixture_moments(pis, mus, sigmas)
    if not np.isfinite(variance) or variance <= 0:
        raise NumericDegeneracyError(f"Mixture variance must be positive, got {variance}")
    return float(np.sqrt(variance))


def rho_M1Y(pis, mus, sigmas, p_M1Y) -> float:
    """Correlation between a mixture variable and another variable ``Y``.

    Args:
        pis: Mixing weights of the mixture.
        mus: Component means.
        sigmas: Component standard deviations.
        p_M1Y: Correlations between ``Y`` and each component, in component order.

    Returns:
        ``sum(pi_i * sigma_i * p_i) / sd(M)``.
    """
    pis, mus, sigmas = _as_params(pis, mus, sigmas)
    p_M1Y = np.ravel(np.asarray(p_M1Y, dtype=np.float64))

    if len(p_M1Y) != len(pis):
        raise ConfigurationError(f"Expected {len(pis)} component correlations, got {len(p_M1Y)}")

    return float(np.sum(pis * sigmas * p_M1Y) / _mixture_sd(pis, mus, sigmas))


def rho_M1M2(pis: Sequence, mus: Sequence, sigmas: Sequence, p_M1M2) -> float:
    """Correlation between two mixture variables.

    Args:
        pis: Pair ``(pis_1, pis_2)`` of mixing weights.
        mus: Pair ``(mus_1, mus_2)`` of component means.
        sigmas: Pair ``(sigmas_1, sigmas_2)`` of component standard deviations.
        p_M1M2: ``(k1, k2)`` matrix of correlations between the components of
            the first mixture (rows) and of the second (columns).

    Returns:
        ``(pi_1 * sigma_1)' P (pi_2 * sigma_2) / (sd(M1) * sd(M2))``.
    """
    if len(pis) != 2 or len(mus) != 2 or len(sigmas) != 2:
        raise ConfigurationError("rho_M1M2 needs parameters for exactly two mixtures")

    pis1, mus1, sigmas1 = _as_params(pis[0], mus[0], sigmas[0])
    pis2, mus2, sigmas2 = _as_params(pis[1], mus[1], sigmas[1])
    p_M1M2 = np.atleast_2d(np.asarray(p_M1M2, dtype=np.float64))

    if p_M1M2.shape != (len(pis1), len(pis2)):
        raise ConfigurationError(
            f"Component correlation block must have shape ({len(pis1)}, {len(pis2)}), got {p_M1M2.shape}"
        )

    weighted1 = pis1 * sigmas1
    weighted2 = pis2 * sigmas2
    cov = float(weighted1 @ p_M1M2 @ weighted2)

    return cov / (_mixture_sd(pis1, mus1, sigmas1) * _mixture_sd(pis2, mus2, sigmas2))
