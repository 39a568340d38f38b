"""
Theoretical correlations between outcomes (Y) and covariates (X).

For a system ``Y_q = sum_k beta_qk X_qk + E_q``, q = 1..M, the correlation
between outcome ``Y_q`` and covariate ``X_pi`` follows from the betas, the
covariate variances and the covariate correlation blocks:

    corr(Y_q, X_pi) = sum_k beta_qk sd(X_qk) corr(X_pi, X_qk) / sd(Y_q)

with ``var(Y_q) = var(E_q) + sum_k beta_qk^2 var(X_qk)
+ 2 sum_{i<j} beta_qi beta_qj sd(X_qi) sd(X_qj) corr(X_qi, X_qj)``.

The result is used to compare a simulated system against theory
(Headrick & Beasley, 2004).
"""

from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from ..config import BETA_ZERO_DECIMALS, CORR_TOLERANCE, DEFAULT_ERROR_TYPE
from ..errors import ConfigurationError, NumericDegeneracyError
from .accounting import nonzero_betas
from .resolve import resolve_system, shape_errors
from .system import CovariateConvention, EquationSystem


def weighted_sds(betas_q: np.ndarray, variances_q: np.ndarray) -> np.ndarray:
    """``beta_k * sd(X_k)`` for each covariate of one equation."""
    if len(betas_q) != len(variances_q) - 1:
        raise ConfigurationError(
            f"{len(betas_q)} nonzero betas but {len(variances_q) - 1} covariate variances"
        )
    return betas_q * np.sqrt(variances_q[:-1])


def outcome_sd(betas_q: np.ndarray, variances_q: np.ndarray, block_qq: np.ndarray) -> float:
    """Standard deviation of an outcome implied by its linear model.

    Args:
        betas_q: Nonzero betas of the equation, in covariate order.
        variances_q: Covariate variances followed by the error variance.
        block_qq: Within-equation covariate correlation matrix.

    Raises:
        NumericDegeneracyError: If the implied variance is not positive.
    """
    w = weighted_sds(betas_q, variances_q)
    if block_qq.shape != (len(w), len(w)):
        raise ConfigurationError(f"Correlation block of shape {block_qq.shape} does not match {len(w)} covariates")

    # Pairwise cross terms i < j; empty for a single covariate
    sum1 = float(w @ np.triu(block_qq, 1) @ w)
    var_y = float(variances_q[-1] + np.sum(betas_q**2 * variances_q[:-1]) + 2 * sum1)

    if not np.isfinite(var_y) or var_y <= 0:
        raise NumericDegeneracyError(
            f"Implied outcome variance is {var_y}; the covariates and error term cannot all be degenerate"
        )
    return float(np.sqrt(var_y))


def outcome_covariate_block(system: EquationSystem, betas: np.ndarray, p: int, decimals: int) -> np.ndarray:
    """``(M, K_p)`` matrix of correlations between every outcome and the covariates of equation *p*."""
    n_eq = system.n_equations
    out = np.zeros((n_eq, system.n_covariates(p)))

    for q in range(n_eq):
        # Outcomes without covariates have no channel to X_p here
        if not system.present[q]:
            continue

        betas_q = nonzero_betas(betas[q], decimals)
        variances_q = system.variances[q]
        denom = outcome_sd(betas_q, variances_q, system.block(q, q))
        out[q, :] = system.block(p, q) @ weighted_sds(betas_q, variances_q) / denom

    return out


def _label(block: np.ndarray, p: int) -> pd.DataFrame:
    n_eq, k = block.shape
    return pd.DataFrame(
        block,
        index=[f"Y{q + 1}" for q in range(n_eq)],
        columns=[f"X{p + 1}_{i + 1}" for i in range(k)],
    )


def calc_corr_yx(
    betas,
    corr_x: Sequence,
    vars: Sequence,
    mix_pis: Optional[Sequence] = None,
    mix_mus: Optional[Sequence] = None,
    mix_sigmas: Optional[Sequence] = None,
    error_type: str = DEFAULT_ERROR_TYPE,
    convention: Optional[Union[CovariateConvention, str]] = None,
    decimals: int = BETA_ZERO_DECIMALS,
    tol: float = CORR_TOLERANCE,
) -> List[Optional[pd.DataFrame]]:
    """Expected correlations between outcomes (rows) and covariates (columns).

    If the nonzero betas of every equation match the width of its ``corr_x``
    diagonal block, the result is stated per mixture component. Otherwise the
    betas are taken to be per mixture variable, ``mix_pis``, ``mix_mus`` and
    ``mix_sigmas`` are required, ``corr_x`` is re-expressed with
    ``rho_M1Y`` / ``rho_M1M2`` and the result is stated per mixture variable.

    Args:
        betas: ``(M, K)`` slope matrix, one row per outcome, zero-padded.
        corr_x: ``corr_x[p][q]`` is the correlation block between the
            covariates of equations ``p`` (rows) and ``q`` (columns);
            ``corr_x[p]`` is ``None`` for an equation without covariates.
            Column order: continuous non-mixture first, then mixture
            components.
        vars: Per-equation variances of the covariates, error variance last.
        mix_pis: Per-equation lists of mixing probabilities, one per mixture
            covariate (error mixture last when ``error_type="mix"``).
        mix_mus: Component means, same layout as *mix_pis*.
        mix_sigmas: Component standard deviations, same layout.
        error_type: ``"non_mix"`` or ``"mix"``.
        convention: Optional ``CovariateConvention`` to assert; a mismatch
            with the data raises ``ConfigurationError``.
        decimals: Betas rounding to zero at this many decimals are padding.
        tol: Slack for out-of-range correlation warnings.

    Returns:
        Length-``M`` list; element ``p`` is ``None`` for an absent equation,
        otherwise a ``DataFrame`` indexed ``Y1..YM`` with columns
        ``X{p}_1..X{p}_K``.

    Raises:
        ConfigurationError: Inconsistent dimensions that cannot be resolved.
        NumericDegeneracyError: An outcome with zero implied variance.

    Example:
        >>> betas = calc_betas(corr_yx, corr_x, vars)
        >>> calc_corr_yx(betas, corr_x, vars)[0]
    """
    system = EquationSystem.from_lists(corr_x, vars, mix_pis, mix_mus, mix_sigmas, error_type)
    system, betas, _ = resolve_system(system, betas, convention, decimals, tol)

    corr_yx: List[Optional[pd.DataFrame]] = []
    with shape_errors("outcome-covariate correlation"):
        for p in range(system.n_equations):
            if not system.present[p]:
                corr_yx.append(None)
                continue
            corr_yx.append(_label(outcome_covariate_block(system, betas, p, decimals), p))

    return corr_yx
