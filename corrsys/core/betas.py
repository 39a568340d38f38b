"""
Slope coefficients that produce target outcome-covariate correlations.
"""

from typing import Sequence

import numpy as np
from scipy import linalg

from ..errors import ConfigurationError, NumericDegeneracyError
from .resolve import shape_errors
from .system import EquationSystem


def calc_betas(
    corr_yx: Sequence,
    corr_x: Sequence,
    vars: Sequence,
) -> np.ndarray:
    """Betas for which each outcome hits its target correlations with its own covariates.

    For equation ``p`` with covariate correlation matrix ``R``, target
    correlations ``r = corr(Y_p, X_p)`` and error variance ``var(E_p)``:

    - standardized betas ``b = R^{-1} r``;
    - ``var(Y_p) = var(E_p) / (1 - r' R^{-1} r)``;
    - ``beta_k = b_k * sd(Y_p) / sd(X_pk)``.

    Args:
        corr_yx: Length-``M`` list; ``corr_yx[p]`` holds the target
            correlations between ``Y_p`` and each of its covariates
            (``None`` for an absent equation).
        corr_x: Covariate correlation blocks, as for ``calc_corr_yx``.
        vars: Per-equation covariate variances, error variance last.

    Returns:
        ``(M, K_max)`` array, rows zero-padded on the right; absent
        equations get a zero row.

    Raises:
        ConfigurationError: Mismatched lengths or a singular ``R``.
        NumericDegeneracyError: Targets implying ``R^2 >= 1`` or a covariate
            with zero variance.
    """
    system = EquationSystem.from_lists(corr_x, vars)

    if len(corr_yx) != system.n_equations:
        raise ConfigurationError(f"corr_yx has {len(corr_yx)} entries, expected {system.n_equations}")

    n_cols = max((system.n_covariates(p) for p in range(system.n_equations)), default=0)
    betas = np.zeros((system.n_equations, n_cols))

    with shape_errors("beta calculation"):
        for p in system.present_equations:
            if corr_yx[p] is None:
                raise ConfigurationError(f"corr_yx[{p + 1}] is missing for an equation with covariates")

            r = np.ravel(np.asarray(corr_yx[p], dtype=np.float64))
            block = system.block(p, p)
            variances = system.variances[p]
            k = block.shape[0]

            if len(r) != k or len(variances) != k + 1:
                raise ConfigurationError(
                    f"Equation {p + 1}: {k} covariates in corr_x, {len(r)} target correlations, "
                    f"{len(variances) - 1} covariate variances"
                )
            if np.any(variances[:-1] <= 0):
                raise NumericDegeneracyError(f"Equation {p + 1}: covariate variances must be positive")

            try:
                b_std = linalg.solve(block, r, assume_a="sym")
            except linalg.LinAlgError as exc:
                raise ConfigurationError(f"corr_x[{p + 1}][{p + 1}] is singular") from exc

            r_squared = float(r @ b_std)
            if r_squared >= 1:
                raise NumericDegeneracyError(
                    f"Equation {p + 1}: target correlations imply R^2 = {r_squared:.6f}, which must be below 1"
                )

            var_y = variances[-1] / (1 - r_squared)
            betas[p, :k] = b_std * np.sqrt(var_y) / np.sqrt(variances[:-1])

    return betas
