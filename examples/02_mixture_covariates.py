"""
Mixture Covariates Example
==========================

One continuous covariate and one two-component normal mixture per equation.
Correlations are given per mixture component; betas and variances are given
per mixture variable, so the component correlations are collapsed with
rho_M1Y / rho_M1M2 before the outcome correlations are computed.
"""

import numpy as np

import corrsys

print("=" * 60)
print("MIXTURE COVARIATES")
print("=" * 60)

pis = [0.4, 0.6]
mus = [-1.0, 1.0]
sigmas = [1.0, 1.5]

mean, variance = corrsys.mixture_moments(pis, mus, sigmas)
print(f"\nMixture mean {mean:.4f}, variance {variance:.4f}")

# Columns: continuous, component 1, component 2
corr_x = [[np.array([[1.0, 0.3, 0.2], [0.3, 1.0, 0.1], [0.2, 0.1, 1.0]])]]

# Variances per mixture variable: continuous, whole mixture, error
vars = [[1.0, variance, 1.0]]
betas = np.array([[0.4, 0.5]])

result = corrsys.calc_corr_yx(
    betas,
    corr_x,
    vars,
    mix_pis=[[pis]],
    mix_mus=[[mus]],
    mix_sigmas=[[sigmas]],
)
print("\nOutcome-covariate correlations (per mixture variable):")
print(result[0].round(6))
