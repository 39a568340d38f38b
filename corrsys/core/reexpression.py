"""
Re-expression of component-level correlation blocks in aggregated terms.

When betas and variances treat each mixture as one variable but ``corr_x``
lists correlations per mixture component, every block is rebuilt at the
aggregated dimension: continuous/continuous cells are copied, cells that
touch a mixture are collapsed with ``rho_M1Y`` / ``rho_M1M2``.
"""

import warnings
from typing import Dict, Sequence, Tuple

import numpy as np

from ..config import CORR_TOLERANCE
from ..errors import ConfigurationError
from ..stats.mixtures import rho_M1M2, rho_M1Y
from .accounting import VariableCounts
from .system import EquationSystem


def reexpress_blocks(
    system: EquationSystem,
    counts: Sequence[VariableCounts],
    tol: float = CORR_TOLERANCE,
) -> EquationSystem:
    """Return a copy of *system* whose blocks are stated per mixture variable.

    Blocks with ``q >= p`` are computed; blocks with ``q < p`` are the exact
    transpose of block ``(q, p)``, which the loop order guarantees is already
    available.

    Raises:
        ConfigurationError: If an equation's variance vector does not match
            its aggregated covariate count.
    """
    present = system.present_equations

    for p in present:
        n_vars = len(system.variances[p]) - 1
        if n_vars != counts[p].n_aggregated:
            raise ConfigurationError(
                f"Equation {p + 1}: {n_vars} covariate variances given, but corr_x and mixtures describe "
                f"{counts[p].n_cont} continuous and {counts[p].n_mix} mixture covariates"
            )

    blocks: Dict[Tuple[int, int], np.ndarray] = {}
    for p in present:
        for q in present:
            if q >= p:
                blocks[(p, q)] = _aggregate_block(system, counts, p, q, tol)
            else:
                blocks[(p, q)] = blocks[(q, p)].T.copy()

    return system.with_blocks(blocks)


def _aggregate_block(
    system: EquationSystem,
    counts: Sequence[VariableCounts],
    p: int,
    q: int,
    tol: float,
) -> np.ndarray:
    cp, cq = counts[p], counts[q]
    out = np.ones((cp.n_aggregated, cq.n_aggregated))

    for i in range(cp.n_aggregated):
        # Diagonal blocks: upper triangle only, mirrored below
        start = i if p == q else 0
        for j in range(start, cq.n_aggregated):
            out[i, j] = _aggregate_cell(system, cp, cq, p, q, i, j)
            if abs(out[i, j]) > 1 + tol:
                warnings.warn(
                    f"Re-expressed correlation corr_x[{p + 1}][{q + 1}][{i + 1}, {j + 1}] = {out[i, j]:.6f} "
                    "lies outside [-1, 1]; check the component correlations and mixture parameters.",
                    UserWarning,
                    stacklevel=3,
                )

    if p == q:
        lower = np.tril_indices(cp.n_aggregated, -1)
        out[lower] = out.T[lower]

    return out


def _aggregate_cell(
    system: EquationSystem,
    cp: VariableCounts,
    cq: VariableCounts,
    p: int,
    q: int,
    i: int,
    j: int,
) -> float:
    fine = system.block(p, q)
    i_cont = i < cp.n_cont
    j_cont = j < cq.n_cont

    if i_cont and j_cont:
        return float(fine[i, j])

    if i_cont:
        mix = system.mixtures[q][j - cq.n_cont]
        return rho_M1Y(mix.pis, mix.mus, mix.sigmas, fine[i, cq.component_slice(j - cq.n_cont)])

    if j_cont:
        mix = system.mixtures[p][i - cp.n_cont]
        return rho_M1Y(mix.pis, mix.mus, mix.sigmas, fine[cp.component_slice(i - cp.n_cont), j])

    # A mixture variable is perfectly correlated with itself
    if p == q and i == j:
        return 1.0

    mix_i = system.mixtures[p][i - cp.n_cont]
    mix_j = system.mixtures[q][j - cq.n_cont]
    return rho_M1M2(
        (mix_i.pis, mix_j.pis),
        (mix_i.mus, mix_j.mus),
        (mix_i.sigmas, mix_j.sigmas),
        fine[cp.component_slice(i - cp.n_cont), cq.component_slice(j - cq.n_cont)],
    )
