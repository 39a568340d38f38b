"""
Monte Carlo check that theoretical correlations match simulated systems.

Normal covariates are drawn jointly across equations, outcomes are built as
``Y = X beta + E`` with correlated errors, and empirical correlations are
compared against ``calc_corr_yx`` / ``calc_corr_y``.
"""

import numpy as np
import pytest

from tests.config import SEED
from tests.helpers.correlations import random_correlation, split_blocks

N_SAMPLES = 200_000
MC_TOL = 0.01


@pytest.fixture
def simulated_system():
    sizes = [2, 3, 1]
    corr = random_correlation(sum(sizes), seed=SEED + 1)
    corr_x = split_blocks(corr, sizes)
    x_vars = [np.array([1.0, 2.0]), np.array([0.5, 1.0, 1.5]), np.array([3.0])]
    e_vars = np.array([1.0, 0.5, 2.0])
    betas = np.array([[0.4, -0.3, 0.0], [0.2, 0.5, 0.3], [0.7, 0.0, 0.0]])
    corr_e = np.array([[1.0, 0.3, 0.1], [0.3, 1.0, 0.2], [0.1, 0.2, 1.0]])

    rng = np.random.default_rng(SEED)
    sd_x = np.sqrt(np.concatenate(x_vars))
    X = rng.multivariate_normal(np.zeros(len(sd_x)), corr * np.outer(sd_x, sd_x), size=N_SAMPLES)
    sd_e = np.sqrt(e_vars)
    E = rng.multivariate_normal(np.zeros(3), corr_e * np.outer(sd_e, sd_e), size=N_SAMPLES)

    bounds = np.concatenate([[0], np.cumsum(sizes)])
    Xs = [X[:, bounds[p] : bounds[p + 1]] for p in range(3)]
    Y = np.column_stack([Xs[p] @ betas[p, : sizes[p]] + E[:, p] for p in range(3)])

    return {
        "corr_x": corr_x,
        "vars": [np.append(x_vars[p], e_vars[p]) for p in range(3)],
        "betas": betas,
        "corr_e": corr_e,
        "X": Xs,
        "Y": Y,
    }


class TestSimulatedCorrelations:
    """Empirical correlations of simulated data agree with theory."""

    def test_outcome_covariate(self, simulated_system):
        from corrsys import calc_corr_yx

        s = simulated_system
        theory = calc_corr_yx(s["betas"], s["corr_x"], s["vars"])

        for p, X_p in enumerate(s["X"]):
            empirical = np.corrcoef(s["Y"], X_p, rowvar=False)[:3, 3:]
            assert np.allclose(empirical, theory[p].to_numpy(), atol=MC_TOL)

    def test_outcome_outcome(self, simulated_system):
        from corrsys import calc_corr_y

        s = simulated_system
        theory = calc_corr_y(s["betas"], s["corr_x"], s["corr_e"], s["vars"])
        empirical = np.corrcoef(s["Y"], rowvar=False)

        assert np.allclose(empirical, theory.to_numpy(), atol=MC_TOL)
