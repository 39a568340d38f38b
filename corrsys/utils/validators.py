"""
Validation utilities for CorrSys.

This module provides validation functions for equation-system inputs:
error types, beta matrices, variance vectors, mixture descriptors and
within-equation correlation blocks.
"""

import warnings
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple

import numpy as np

from ..config import CORR_TOLERANCE, ERROR_TYPES
from ..errors import ConfigurationError

__all__ = []


@dataclass
class _ValidationResult:
    """Outcome of a validation check, carrying errors and warnings.

    Attributes:
        is_valid: ``True`` if no errors were found.
        errors: List of error messages (empty when valid).
        warnings: List of non-fatal warning messages.
    """

    is_valid: bool
    errors: List[str]
    warnings: List[str]

    def raise_if_invalid(self):
        """Raise ``ConfigurationError`` if the validation failed."""
        if not self.is_valid:
            error_msg = "Validation failed:\n" + "\n".join(f"• {err}" for err in self.errors)
            raise ConfigurationError(error_msg)

    def emit_warnings(self):
        """Forward collected warnings through ``warnings.warn``."""
        for msg in self.warnings:
            warnings.warn(msg, UserWarning, stacklevel=3)


def _merge(*results: _ValidationResult) -> _ValidationResult:
    """Combine several results into one."""
    errors: List[str] = []
    warns: List[str] = []
    for result in results:
        errors.extend(result.errors)
        warns.extend(result.warnings)
    return _ValidationResult(len(errors) == 0, errors, warns)


def _coerce_float_array(value: Any, label: str) -> Tuple[Optional[np.ndarray], _ValidationResult]:
    """Convert *value* to a float array, reporting ragged or non-numeric input."""
    try:
        return np.array(value, dtype=np.float64), _ValidationResult(True, [], [])
    except (TypeError, ValueError):
        return None, _ValidationResult(False, [f"{label} must be a rectangular numeric array"], [])


def _validate_error_type(error_type: Any) -> _ValidationResult:
    """Validate the ``error_type`` switch."""
    if error_type not in ERROR_TYPES:
        return _ValidationResult(False, [f"error_type must be one of {list(ERROR_TYPES)}, got {error_type!r}"], [])
    return _ValidationResult(True, [], [])


def _validate_betas(betas: Any, n_equations: int) -> _ValidationResult:
    """Validate that betas is a finite 2-D matrix with one row per equation."""
    errors = []

    if betas is None:
        arr = None
    else:
        arr, coerced = _coerce_float_array(betas, "betas")
        if not coerced.is_valid:
            return _ValidationResult(False, ["betas must be a rectangular 2-D matrix with one row per equation"], [])

    if arr is None or arr.ndim != 2:
        errors.append("betas must be a 2-D matrix with one row per equation")
        return _ValidationResult(False, errors, [])

    if arr.shape[0] != n_equations:
        errors.append(f"betas has {arr.shape[0]} rows but the system has {n_equations} equations")

    if not np.all(np.isfinite(arr)):
        errors.append("betas must be finite")

    return _ValidationResult(len(errors) == 0, errors, [])


def _validate_variances(variances: Optional[np.ndarray], equation: int) -> _ValidationResult:
    """Validate one equation's variance vector (covariates then error)."""
    errors = []
    label = f"vars for equation {equation + 1}"

    if variances is None or variances.ndim != 1 or len(variances) < 2:
        errors.append(f"{label} must hold at least one covariate variance followed by the error variance")
        return _ValidationResult(False, errors, [])

    if not np.all(np.isfinite(variances)):
        errors.append(f"{label} must be finite")
    elif np.any(variances < 0):
        errors.append(f"{label} cannot be negative")

    return _ValidationResult(len(errors) == 0, errors, [])


def _validate_mixture(pis, mus, sigmas, label: str) -> _ValidationResult:
    """Validate a single mixture descriptor."""
    errors: List[str] = []
    warns: List[str] = []

    coerced = [_coerce_float_array(x, f"{label}: {name}") for x, name in ((pis, "pis"), (mus, "mus"), (sigmas, "sigmas"))]
    bad = _merge(*(result for _, result in coerced))
    if not bad.is_valid:
        return bad
    pis, mus, sigmas = (np.atleast_1d(arr) for arr, _ in coerced)

    if pis.ndim != 1 or mus.ndim != 1 or sigmas.ndim != 1:
        errors.append(f"{label}: pis, mus and sigmas must be flat sequences")
        return _ValidationResult(False, errors, warns)

    if not (len(pis) == len(mus) == len(sigmas)):
        errors.append(f"{label}: pis, mus and sigmas must have the same length")
        return _ValidationResult(False, errors, warns)

    if len(pis) == 0:
        errors.append(f"{label}: needs at least one component")
        return _ValidationResult(False, errors, warns)

    if np.any(pis < 0) or np.any(pis > 1):
        errors.append(f"{label}: mixing probabilities must be in [0, 1]")
    elif abs(float(np.sum(pis)) - 1.0) > 1e-6:
        warns.append(f"{label}: mixing probabilities sum to {np.sum(pis):.6f}, not 1")

    if np.any(sigmas <= 0):
        errors.append(f"{label}: component standard deviations must be positive")

    return _ValidationResult(len(errors) == 0, errors, warns)


def _validate_error_variance(error_variance: float, mixture_variance: float, equation: int) -> _ValidationResult:
    """Warn when an equation's error variance disagrees with its error mixture."""
    if np.isclose(error_variance, mixture_variance, rtol=1e-6, atol=CORR_TOLERANCE):
        return _ValidationResult(True, [], [])
    return _ValidationResult(
        True,
        [],
        [
            f"equation {equation + 1}: error variance {error_variance:.6g} differs from the variance "
            f"{mixture_variance:.6g} of its error mixture; the error variance in vars is used"
        ],
    )


def _validate_correlation_block(
    block: Optional[np.ndarray],
    label: str,
    tol: float = CORR_TOLERANCE,
) -> _ValidationResult:
    """Validate that *block* meets correlation-matrix requirements."""
    errors = []

    if block is None:
        errors.append(f"{label} is missing")
        return _ValidationResult(False, errors, [])

    # Shape check
    if block.ndim != 2 or block.shape[0] != block.shape[1]:
        errors.append(f"{label} must be square")
        return _ValidationResult(False, errors, [])

    # Diagonal check
    if not np.allclose(np.diag(block), 1.0, atol=tol):
        errors.append(f"Diagonal elements of {label} must be 1")

    # Symmetry check
    if not np.allclose(block, block.T, atol=tol):
        errors.append(f"{label} must be symmetric")

    # Range check
    if np.any(np.abs(block) > 1 + tol):
        errors.append(f"All correlations in {label} must be between -1 and 1")

    return _ValidationResult(len(errors) == 0, errors, [])


def _validate_cross_block(
    block: Optional[np.ndarray],
    p: int,
    q: int,
    n_rows: int,
    n_cols: int,
) -> _ValidationResult:
    """Validate that block ``(p, q)`` is ``n_rows x n_cols``."""
    label = f"corr_x[{p + 1}][{q + 1}]"

    if block is None:
        return _ValidationResult(False, [f"{label} is missing"], [])

    if block.ndim != 2 or block.shape != (n_rows, n_cols):
        return _ValidationResult(
            False,
            [f"{label} has shape {block.shape}, expected ({n_rows}, {n_cols})"],
            [],
        )

    return _ValidationResult(True, [], [])
