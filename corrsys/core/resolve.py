"""
Stages 1 and 2 of the correlation engine, run as one step.

``resolve_system`` turns the caller's inputs into an ``EquationSystem`` whose
blocks and variances are stated at the same level as the betas, ready for
the outcome-correlation formulas.
"""

from contextlib import contextmanager
from typing import Optional, Tuple, Union

import numpy as np

from ..config import BETA_ZERO_DECIMALS, CORR_TOLERANCE
from ..errors import ConfigurationError
from ..utils.validators import _validate_betas
from .accounting import compute_counts, derive_component_variances, detect_convention
from .reexpression import reexpress_blocks
from .system import CovariateConvention, EquationSystem


@contextmanager
def shape_errors(stage: str):
    """Re-raise indexing and broadcasting failures as ``ConfigurationError``."""
    try:
        yield
    except ConfigurationError:
        raise
    except (IndexError, KeyError, ValueError) as exc:
        raise ConfigurationError(f"Inconsistent block dimensions during {stage}: {exc}") from exc


def resolve_system(
    system: EquationSystem,
    betas,
    convention: Optional[Union[CovariateConvention, str]] = None,
    decimals: int = BETA_ZERO_DECIMALS,
    tol: float = CORR_TOLERANCE,
) -> Tuple[EquationSystem, np.ndarray, CovariateConvention]:
    """Bring *system* to the level at which *betas* are stated.

    Args:
        system: System built with ``EquationSystem.from_lists``.
        betas: ``(M, K)`` beta matrix, zero-padded on the right.
        convention: Optional convention the caller asserts.
        decimals: Rounding used to tell padding zeros from real betas.
        tol: Slack for out-of-range correlation warnings.

    Returns:
        ``(resolved_system, betas_array, convention)``.
    """
    _validate_betas(betas, system.n_equations).raise_if_invalid()
    betas = np.array(betas, dtype=np.float64)

    with shape_errors("variable accounting"):
        counts = compute_counts(system, betas, decimals)
        detected = detect_convention(system, counts, convention)

        if detected is CovariateConvention.FINE:
            if system.has_mixture_info:
                system = derive_component_variances(system, counts)
            return system, betas, detected

    with shape_errors("correlation re-expression"):
        system = reexpress_blocks(system, counts, tol)

    return system, betas, detected
