"""
Variable accounting for correlated equation systems.

Reconciles the two ways a caller can describe mixture covariates:

- per component (``CovariateConvention.FINE``): betas, variances and
  ``corr_x`` all carry one slot per mixture component;
- per mixture variable (``CovariateConvention.AGGREGATED``): betas and
  variances carry one slot per mixture while ``corr_x`` is per component.

The convention is read off the data by comparing each equation's diagonal
block width with its count of nonzero betas.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from ..config import BETA_ZERO_DECIMALS
from ..errors import ConfigurationError
from .system import CovariateConvention, EquationSystem


@dataclass(frozen=True)
class VariableCounts:
    """Covariate bookkeeping for a single equation.

    Attributes:
        n_x: Width of the equation's diagonal ``corr_x`` block.
        n_cont: Continuous non-mixture covariates (the leading slots).
        n_mix: Mixture covariates.
        n_components: Total components over all mixture covariates.
        component_offsets: Cumulative component counts, length ``n_mix + 1``;
            mixture ``j`` spans fine columns
            ``n_cont + offsets[j] .. n_cont + offsets[j + 1]``.
        n_betas: Nonzero betas in the equation's row.
    """

    n_x: int = 0
    n_cont: int = 0
    n_mix: int = 0
    n_components: int = 0
    component_offsets: Tuple[int, ...] = (0,)
    n_betas: int = 0

    @property
    def n_aggregated(self) -> int:
        """Covariate slots once each mixture is collapsed to one variable."""
        return self.n_cont + self.n_mix

    def component_slice(self, j: int) -> slice:
        """Fine-grained column span of mixture covariate *j*."""
        return slice(self.n_cont + self.component_offsets[j], self.n_cont + self.component_offsets[j + 1])


def nonzero_mask(row, decimals: int = BETA_ZERO_DECIMALS) -> np.ndarray:
    """Boolean mask of betas that are nonzero after rounding to *decimals*."""
    return np.round(np.asarray(row, dtype=np.float64), decimals) != 0


def nonzero_betas(row, decimals: int = BETA_ZERO_DECIMALS) -> np.ndarray:
    """The structurally present betas of one row, in slot order."""
    row = np.asarray(row, dtype=np.float64)
    return row[nonzero_mask(row, decimals)]


def count_nonzero_betas(betas, decimals: int = BETA_ZERO_DECIMALS) -> np.ndarray:
    """Per-row count of betas that survive rounding to *decimals*."""
    return np.sum(nonzero_mask(np.atleast_2d(betas), decimals), axis=1)


def compute_counts(
    system: EquationSystem,
    betas,
    decimals: int = BETA_ZERO_DECIMALS,
) -> Tuple[VariableCounts, ...]:
    """Build ``VariableCounts`` for every equation (all zero when absent)."""
    n_betas = count_nonzero_betas(betas, decimals)
    counts: List[VariableCounts] = []

    for p in range(system.n_equations):
        if not system.present[p]:
            counts.append(VariableCounts(n_betas=int(n_betas[p])))
            continue

        sizes = [m.n_components for m in system.mixtures[p]]
        offsets = tuple(int(x) for x in np.concatenate([[0], np.cumsum(sizes, dtype=int)]))
        n_x = system.n_covariates(p)
        if offsets[-1] > n_x:
            raise ConfigurationError(
                f"Equation {p + 1}: mixtures have {offsets[-1]} components but corr_x[{p + 1}][{p + 1}] "
                f"only has {n_x} columns"
            )

        counts.append(
            VariableCounts(
                n_x=n_x,
                n_cont=n_x - offsets[-1],
                n_mix=len(sizes),
                n_components=offsets[-1],
                component_offsets=offsets,
                n_betas=int(n_betas[p]),
            )
        )

    return tuple(counts)


def detect_convention(
    system: EquationSystem,
    counts: Sequence[VariableCounts],
    declared: Optional[Union[CovariateConvention, str]] = None,
) -> CovariateConvention:
    """Decide whether betas are stated per component or per mixture.

    Args:
        system: The equation system.
        counts: Per-equation counts from ``compute_counts``.
        declared: Convention asserted by the caller, if any.

    Raises:
        ConfigurationError: If block widths and beta counts disagree while no
            mixture information is available, or if *declared* contradicts
            the data.
    """
    widths = [c.n_x for c in counts]
    n_betas = [c.n_betas for c in counts]

    if widths == n_betas:
        detected = CovariateConvention.FINE
    elif not system.has_mixture_info:
        raise ConfigurationError(
            "Dimension mismatch with no mixture information to resolve it: "
            f"corr_x block widths {widths} do not match nonzero beta counts {n_betas}."
        )
    else:
        detected = CovariateConvention.AGGREGATED

    if declared is not None:
        try:
            declared = CovariateConvention(declared)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown covariate convention: {declared!r}") from exc
        if declared is not detected:
            raise ConfigurationError(
                f"Declared convention '{declared.value}' contradicts the data, which is '{detected.value}' "
                f"(block widths {widths}, nonzero beta counts {n_betas})."
            )

    return detected


def derive_component_variances(system: EquationSystem, counts: Sequence[VariableCounts]) -> EquationSystem:
    """Restate variance vectors at the mixture-component level.

    Keeps the leading continuous variances, replaces the mixture entries by
    the squared standard deviation of every component (matching the fine
    ``corr_x`` columns) and keeps the error variance last.
    """
    variances: List[Optional[np.ndarray]] = []

    for p in range(system.n_equations):
        v = system.variances[p]
        if v is None:
            variances.append(None)
            continue

        c = counts[p]
        if len(v) != c.n_aggregated + 1:
            raise ConfigurationError(
                f"Equation {p + 1}: expected {c.n_cont} continuous variances, {c.n_mix} mixture variances "
                f"and the error variance, got a variance vector of length {len(v)}"
            )

        parts = [v[: c.n_cont]]
        parts.extend(m.component_variances for m in system.mixtures[p])
        parts.append(v[-1:])
        variances.append(np.concatenate(parts))

    return system.with_variances(variances)
