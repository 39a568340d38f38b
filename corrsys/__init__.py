"""CorrSys - theoretical correlations for correlated systems of equations.

Computes the correlations implied by a system of linear statistical
equations whose covariates may be continuous non-mixture or continuous
normal-mixture variables (Headrick & Beasley power-method systems): betas
from target correlations, outcome-covariate and outcome-outcome
correlations, and mixture-level re-expression of component correlations.

Example:
    >>> import numpy as np
    >>> from corrsys import calc_betas, calc_corr_yx
    >>>
    >>> corr_x = [[np.array([[1, 0.1], [0.1, 1]])]]
    >>> vars = [[1, 1, 1]]
    >>> betas = calc_betas([[0.4, 0.4]], corr_x, vars)
    >>> calc_corr_yx(betas, corr_x, vars)[0]
"""

from importlib.metadata import version as _get_version

from .core import (
    CovariateConvention,
    EquationSystem,
    Mixture,
    calc_betas,
    calc_corr_y,
    calc_corr_yx,
)
from .errors import ConfigurationError, NumericDegeneracyError
from .stats.mixtures import mixture_moments, rho_M1M2, rho_M1Y

__version__ = _get_version("CorrSys")

__all__ = [
    "calc_corr_yx",
    "calc_corr_y",
    "calc_betas",
    "rho_M1Y",
    "rho_M1M2",
    "mixture_moments",
    "CovariateConvention",
    "EquationSystem",
    "Mixture",
    "ConfigurationError",
    "NumericDegeneracyError",
]
