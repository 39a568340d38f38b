"""
Theoretical correlations among the outcomes of a correlated system.
"""

from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from ..config import BETA_ZERO_DECIMALS, CORR_TOLERANCE, DEFAULT_ERROR_TYPE
from ..errors import ConfigurationError
from ..utils.validators import _coerce_float_array, _validate_correlation_block
from .accounting import nonzero_betas
from .corr_yx import outcome_sd, weighted_sds
from .resolve import resolve_system, shape_errors
from .system import CovariateConvention, EquationSystem


def calc_corr_y(
    betas,
    corr_x: Sequence,
    corr_e,
    vars: Sequence,
    mix_pis: Optional[Sequence] = None,
    mix_mus: Optional[Sequence] = None,
    mix_sigmas: Optional[Sequence] = None,
    error_type: str = DEFAULT_ERROR_TYPE,
    convention: Optional[Union[CovariateConvention, str]] = None,
    decimals: int = BETA_ZERO_DECIMALS,
    tol: float = CORR_TOLERANCE,
) -> pd.DataFrame:
    """Expected correlation matrix of the outcomes ``Y_1..Y_M``.

    ``cov(Y_p, Y_q) = w_p' C_pq w_q + corr_e[p, q] sd(E_p) sd(E_q)`` where
    ``w = beta * sd(X)`` and ``C_pq`` is the covariate block; each term is
    divided by the outcome standard deviations used in ``calc_corr_yx``.

    An equation without covariates is its error term alone; since only
    correlations are returned, its error is taken to have unit variance.

    Args:
        betas: ``(M, K)`` slope matrix, zero-padded.
        corr_x: Covariate correlation blocks, as for ``calc_corr_yx``.
        corr_e: ``(M, M)`` correlation matrix of the error terms.
        vars: Per-equation covariate variances, error variance last.
        mix_pis, mix_mus, mix_sigmas, error_type, convention, decimals, tol:
            As for ``calc_corr_yx``.

    Returns:
        ``DataFrame`` indexed and labelled ``Y1..YM`` with unit diagonal.
    """
    system = EquationSystem.from_lists(corr_x, vars, mix_pis, mix_mus, mix_sigmas, error_type)
    n_eq = system.n_equations

    corr_e, coerced = _coerce_float_array(corr_e, "corr_e")
    coerced.raise_if_invalid()
    corr_e = np.atleast_2d(corr_e)
    if corr_e.shape != (n_eq, n_eq):
        raise ConfigurationError(f"corr_e must be {n_eq} x {n_eq}, got {corr_e.shape}")
    _validate_correlation_block(corr_e, "corr_e", tol).raise_if_invalid()

    system, betas, _ = resolve_system(system, betas, convention, decimals, tol)

    weights: List[np.ndarray] = []
    error_sd = np.ones(n_eq)
    outcome_sds = np.ones(n_eq)

    with shape_errors("outcome correlation"):
        for p in range(n_eq):
            if not system.present[p]:
                weights.append(np.empty(0))
                continue
            betas_p = nonzero_betas(betas[p], decimals)
            variances_p = system.variances[p]
            weights.append(weighted_sds(betas_p, variances_p))
            error_sd[p] = np.sqrt(variances_p[-1])
            outcome_sds[p] = outcome_sd(betas_p, variances_p, system.block(p, p))

        corr_y = np.eye(n_eq)
        for p in range(n_eq):
            for q in range(p + 1, n_eq):
                cov = corr_e[p, q] * error_sd[p] * error_sd[q]
                if system.present[p] and system.present[q]:
                    cov += float(weights[p] @ system.block(p, q) @ weights[q])
                corr_y[p, q] = corr_y[q, p] = cov / (outcome_sds[p] * outcome_sds[q])

    labels = [f"Y{p + 1}" for p in range(n_eq)]
    return pd.DataFrame(corr_y, index=labels, columns=labels)
