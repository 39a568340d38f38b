"""
Shared numeric settings for CorrSys.

Module-level constants are used as defaults throughout the package; every
function that depends on one also accepts it as an explicit argument.
"""

# Betas are rounded to this many decimals before being compared to zero.
# A rounded zero marks a padding slot, anything else is a real coefficient.
BETA_ZERO_DECIMALS = 10

# Slack allowed when checking that correlations stay within [-1, 1] and
# that correlation matrices are symmetric with unit diagonal.
CORR_TOLERANCE = 1e-8

# Accepted values of ``error_type``
ERROR_TYPES = ("non_mix", "mix")
DEFAULT_ERROR_TYPE = "non_mix"
