"""Statistical moment formulas."""

from . import mixtures as mixtures
