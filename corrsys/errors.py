"""Exceptions raised by CorrSys."""


class ConfigurationError(ValueError):
    """Raised when the equation system is structurally inconsistent.

    Covers beta/correlation dimension mismatches that cannot be reconciled,
    blocks whose shape disagrees with their equation's covariate count, and
    malformed mixture descriptors.
    """

    pass


class NumericDegeneracyError(ArithmeticError):
    """Raised when a variance or standard deviation used as a divisor is zero.

    Typical cause: an outcome whose covariates and error term are all
    deterministic, or a mixture whose components collapse to one point.
    """

    pass
