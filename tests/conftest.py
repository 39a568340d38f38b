"""
Shared pytest fixtures for CorrSys tests.
"""

import numpy as np
import pytest

from tests.helpers.correlations import random_correlation, split_blocks


@pytest.fixture
def hb_system():
    """Three equations, two covariates each, unit variances (Headrick & Beasley, 2002)."""
    corr_x = [[None] * 3 for _ in range(3)]
    corr_x[0][0] = np.array([[1, 0.1], [0.1, 1]])
    corr_x[0][1] = np.array([[0.1974318, 0.1859656], [0.1879483, 0.1858601]])
    corr_x[0][2] = np.array([[0.2873190, 0.2589830], [0.2682057, 0.2589542]])
    corr_x[1][0] = corr_x[0][1].T
    corr_x[1][1] = np.array([[1, 0.35], [0.35, 1]])
    corr_x[1][2] = np.array([[0.5723303, 0.4883054], [0.5004441, 0.4841808]])
    corr_x[2][0] = corr_x[0][2].T
    corr_x[2][1] = corr_x[1][2].T
    corr_x[2][2] = np.array([[1, 0.7], [0.7, 1]])

    return {
        "corr_x": corr_x,
        "vars": [[1.0, 1.0, 1.0]] * 3,
        "corr_yx": [[0.4, 0.4], [0.5, 0.5], [0.6, 0.6]],
    }


@pytest.fixture
def mixture_system():
    """Two equations with component-level correlations.

    Equation 1: one continuous covariate and mixture A (2 components).
    Equation 2: two continuous covariates and mixture B (2 components).
    Fine column layout: [c, A1, A2 | c, c, B1, B2].
    """
    from corrsys import mixture_moments

    corr = random_correlation(7)
    mix_a = {"pis": [0.3, 0.7], "mus": [0.0, 2.0], "sigmas": [1.0, 0.5]}
    mix_b = {"pis": [0.5, 0.5], "mus": [-1.0, 1.0], "sigmas": [1.0, 1.0]}
    var_a = mixture_moments(**mix_a)[1]
    var_b = mixture_moments(**mix_b)[1]

    return {
        "corr": corr,
        "corr_x": split_blocks(corr, [3, 4]),
        "mix_a": mix_a,
        "mix_b": mix_b,
        "mix_pis": [[mix_a["pis"]], [mix_b["pis"]]],
        "mix_mus": [[mix_a["mus"]], [mix_b["mus"]]],
        "mix_sigmas": [[mix_a["sigmas"]], [mix_b["sigmas"]]],
        # Per mixture variable: continuous, mixture, error
        "vars": [[1.0, var_a, 1.0], [1.0, 2.0, var_b, 1.0]],
        "betas_aggregated": np.array([[0.3, 0.4, 0.0], [0.2, 0.25, 0.35]]),
        "betas_fine": np.array([[0.3, 0.2, 0.2, 0.0], [0.1, 0.2, 0.3, 0.3]]),
    }


@pytest.fixture
def absent_system():
    """Two outcomes; the first has no covariates."""
    return {
        "corr_x": [None, [None, np.array([[1.0]])]],
        "vars": [None, [1.0, 1.0]],
        "betas": np.array([[0.0], [1.0]]),
    }


@pytest.fixture
def two_mixture_system():
    """Two equations, the first holding two mixtures.

    Equation 1: one continuous covariate, mixture A (2 components) and
    mixture B (3 components). Equation 2: one continuous covariate and
    mixture C (2 components). Fine column layout: [c, A1, A2, B1, B2, B3 | c, C1, C2].
    """
    from corrsys import mixture_moments

    corr = random_correlation(9, seed=7)
    mix_a = {"pis": [0.4, 0.6], "mus": [-1.0, 1.0], "sigmas": [1.0, 0.5]}
    mix_b = {"pis": [0.2, 0.3, 0.5], "mus": [-2.0, 0.0, 1.0], "sigmas": [0.5, 1.0, 0.8]}
    mix_c = {"pis": [0.5, 0.5], "mus": [0.0, 3.0], "sigmas": [1.0, 2.0]}
    var_a, var_b, var_c = (mixture_moments(**m)[1] for m in (mix_a, mix_b, mix_c))

    return {
        "corr": corr,
        "corr_x": split_blocks(corr, [6, 3]),
        "mix_a": mix_a,
        "mix_b": mix_b,
        "mix_c": mix_c,
        "mix_pis": [[mix_a["pis"], mix_b["pis"]], [mix_c["pis"]]],
        "mix_mus": [[mix_a["mus"], mix_b["mus"]], [mix_c["mus"]]],
        "mix_sigmas": [[mix_a["sigmas"], mix_b["sigmas"]], [mix_c["sigmas"]]],
        "vars": [[1.0, var_a, var_b, 1.0], [1.5, var_c, 1.0]],
        "betas_aggregated": np.array([[0.3, 0.2, 0.4], [0.5, 0.25, 0.0]]),
    }
