"""
Three-Equation System Example
=============================

System of three outcomes with two covariates each and unit-variance errors
(Headrick & Beasley, 2002). Betas are chosen so each outcome hits its target
correlations with its own covariates; the theoretical correlation matrices
are then recovered from those betas.
"""

import numpy as np

import corrsys

print("=" * 60)
print("THREE-EQUATION SYSTEM")
print("=" * 60)

# 1. Covariate correlations, within and across equations
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

# 2. Variances: two covariates, then the error term
vars = [[1, 1, 1]] * 3

# 3. Target correlations of each outcome with its own covariates
corr_yx = [[0.4, 0.4], [0.5, 0.5], [0.6, 0.6]]

betas = corrsys.calc_betas(corr_yx, corr_x, vars)
print("\nBetas:")
print(betas)

print("\nOutcome-covariate correlations:")
for p, block in enumerate(corrsys.calc_corr_yx(betas, corr_x, vars)):
    print(f"\nX{p + 1}:")
    print(block.round(6))

# 4. Outcome correlations with correlated errors
corr_e = np.full((3, 3), 0.4)
np.fill_diagonal(corr_e, 1)
print("\nOutcome correlations:")
print(corrsys.calc_corr_y(betas, corr_x, corr_e, vars).round(6))
