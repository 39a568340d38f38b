"""Core components of the CorrSys correlation engine.

Re-exports the building blocks, in pipeline order:

- ``EquationSystem``, ``Mixture``, ``CovariateConvention``: the data model.
- ``compute_counts``, ``detect_convention``, ``VariableCounts``: variable
  accounting across the fine and aggregated conventions.
- ``reexpress_blocks``: component-level correlations restated per mixture.
- ``calc_corr_yx``, ``calc_corr_y``, ``calc_betas``: theoretical
  correlations and the betas that produce them.
"""

from .accounting import VariableCounts, compute_counts, count_nonzero_betas, detect_convention
from .betas import calc_betas
from .corr_y import calc_corr_y
from .corr_yx import calc_corr_yx, outcome_sd
from .reexpression import reexpress_blocks
from .resolve import resolve_system
from .system import CovariateConvention, EquationSystem, Mixture

__all__ = [
    # Data model
    "EquationSystem",
    "Mixture",
    "CovariateConvention",
    # Accounting
    "VariableCounts",
    "compute_counts",
    "count_nonzero_betas",
    "detect_convention",
    # Re-expression
    "reexpress_blocks",
    "resolve_system",
    # Correlations
    "calc_corr_yx",
    "calc_corr_y",
    "calc_betas",
    "outcome_sd",
]
