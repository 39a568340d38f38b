"""
Equation-system data model for CorrSys.

An ``EquationSystem`` holds everything the correlation engine needs about a
system of ``M`` outcome equations: the covariate correlation blocks for
every pair of present equations, per-equation variance vectors and the
mixture descriptors of mixture covariates. It is built once from R-style
nested lists (``None`` marks an absent equation) and treated as read-only
afterwards; every stage that changes it returns a new instance.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from ..config import DEFAULT_ERROR_TYPE
from ..stats.mixtures import mixture_moments
from ..utils.validators import (
    _coerce_float_array,
    _merge,
    _validate_correlation_block,
    _validate_cross_block,
    _validate_error_type,
    _validate_error_variance,
    _validate_mixture,
    _validate_variances,
    _ValidationResult,
)


class CovariateConvention(Enum):
    """Level at which betas and variances describe mixture covariates.

    ``FINE``: one slot per mixture component, matching ``corr_x``.
    ``AGGREGATED``: one slot per whole mixture variable while ``corr_x`` is
    still stated per component.
    """

    FINE = "fine"
    AGGREGATED = "aggregated"


@dataclass(frozen=True, eq=False)
class Mixture:
    """A continuous normal-mixture variable.

    Attributes:
        pis: Mixing probabilities.
        mus: Component means.
        sigmas: Component standard deviations.
    """

    pis: np.ndarray
    mus: np.ndarray
    sigmas: np.ndarray

    @classmethod
    def from_params(cls, pis, mus, sigmas) -> "Mixture":
        return cls(
            pis=np.atleast_1d(np.array(pis, dtype=np.float64)),
            mus=np.atleast_1d(np.array(mus, dtype=np.float64)),
            sigmas=np.atleast_1d(np.array(sigmas, dtype=np.float64)),
        )

    @property
    def n_components(self) -> int:
        return len(self.pis)

    @property
    def variance(self) -> float:
        """Overall variance, including the spread of component means."""
        return mixture_moments(self.pis, self.mus, self.sigmas)[1]

    @property
    def component_variances(self) -> np.ndarray:
        return self.sigmas**2


@dataclass(frozen=True, eq=False)
class EquationSystem:
    """Canonical, read-only description of a correlated equation system.

    Attributes:
        present: ``present[p]`` is ``False`` for equations without covariates.
        blocks: Correlation blocks keyed by ``(p, q)`` for present ``p, q``;
            rows are covariates of equation ``p``, columns those of ``q``.
        variances: Per-equation variance vectors (covariates first, error
            variance last), ``None`` for absent equations.
        mixtures: Per-equation mixture covariates, in covariate order.
        error_mixtures: Per-equation error mixture (``error_type="mix"`` only).
        has_mixture_info: Whether mixture descriptors were supplied at all.
        error_type: ``"non_mix"`` or ``"mix"``.
    """

    present: Tuple[bool, ...]
    blocks: Dict[Tuple[int, int], np.ndarray]
    variances: Tuple[Optional[np.ndarray], ...]
    mixtures: Tuple[Tuple[Mixture, ...], ...]
    error_mixtures: Tuple[Optional[Mixture], ...] = field(default_factory=tuple)
    has_mixture_info: bool = False
    error_type: str = DEFAULT_ERROR_TYPE

    @property
    def n_equations(self) -> int:
        return len(self.present)

    @property
    def present_equations(self) -> List[int]:
        return [p for p, is_present in enumerate(self.present) if is_present]

    def n_covariates(self, p: int) -> int:
        """Width of equation *p*'s diagonal block (0 when absent)."""
        if not self.present[p]:
            return 0
        return self.blocks[(p, p)].shape[1]

    def block(self, p: int, q: int) -> np.ndarray:
        return self.blocks[(p, q)]

    def with_blocks(self, blocks: Dict[Tuple[int, int], np.ndarray]) -> "EquationSystem":
        return replace(self, blocks=blocks)

    def with_variances(self, variances: Sequence[Optional[np.ndarray]]) -> "EquationSystem":
        return replace(self, variances=tuple(variances))

    @classmethod
    def from_lists(
        cls,
        corr_x: Sequence,
        vars: Sequence,
        mix_pis: Optional[Sequence] = None,
        mix_mus: Optional[Sequence] = None,
        mix_sigmas: Optional[Sequence] = None,
        error_type: str = DEFAULT_ERROR_TYPE,
    ) -> "EquationSystem":
        """Build a system from nested lists.

        Args:
            corr_x: Length-``M`` list; ``corr_x[p]`` is ``None`` for an
                absent equation, otherwise a length-``M`` list whose element
                ``q`` is the correlation block between the covariates of
                equations ``p`` and ``q``.
            vars: Length-``M`` list of variance vectors, error variance last.
            mix_pis: Length-``M`` list; ``mix_pis[p]`` lists the mixing
                probabilities of each mixture covariate of equation ``p``
                (and of the error term last when ``error_type="mix"``).
            mix_mus: Component means, same layout as *mix_pis*.
            mix_sigmas: Component standard deviations, same layout.
            error_type: ``"non_mix"`` or ``"mix"``.

        Raises:
            ConfigurationError: If the inputs are structurally inconsistent.
        """
        _validate_error_type(error_type).raise_if_invalid()

        n_eq = len(corr_x)
        if n_eq == 0:
            _ValidationResult(False, ["corr_x must describe at least one equation"], []).raise_if_invalid()

        present = tuple(corr_x[p] is not None and len(corr_x[p]) > 0 for p in range(n_eq))
        checks: List[_ValidationResult] = []

        if len(vars) != n_eq:
            checks.append(_ValidationResult(False, [f"vars has {len(vars)} entries, expected {n_eq}"], []))
            _merge(*checks).raise_if_invalid()

        variances: List[Optional[np.ndarray]] = []
        for p in range(n_eq):
            if not present[p]:
                variances.append(None)
                continue
            v = None
            if vars[p] is not None:
                v, coerced = _coerce_float_array(vars[p], f"vars[{p + 1}]")
                if not coerced.is_valid:
                    checks.append(coerced)
                    variances.append(None)
                    continue
                v = v.ravel()
            checks.append(_validate_variances(v, p))
            variances.append(v)

        blocks: Dict[Tuple[int, int], np.ndarray] = {}
        ragged = set()
        for p in range(n_eq):
            if not present[p]:
                continue
            if len(corr_x[p]) != n_eq:
                checks.append(_ValidationResult(False, [f"corr_x[{p + 1}] has {len(corr_x[p])} blocks, expected {n_eq}"], []))
                continue
            for q in range(n_eq):
                if not present[q] or corr_x[p][q] is None:
                    continue
                block, coerced = _coerce_float_array(corr_x[p][q], f"corr_x[{p + 1}][{q + 1}]")
                if not coerced.is_valid:
                    checks.append(coerced)
                    ragged.add((p, q))
                    continue
                blocks[(p, q)] = np.atleast_2d(block)

        for p in range(n_eq):
            if present[p] and (p, p) not in ragged:
                checks.append(_validate_correlation_block(blocks.get((p, p)), f"corr_x[{p + 1}][{p + 1}]"))
        _merge(*checks).raise_if_invalid()

        # Cross-block shapes are only meaningful once diagonal blocks are sound
        for p in range(n_eq):
            for q in range(n_eq):
                if present[p] and present[q] and p != q:
                    checks.append(
                        _validate_cross_block(
                            blocks.get((p, q)),
                            p,
                            q,
                            blocks[(p, p)].shape[0],
                            blocks[(q, q)].shape[0],
                        )
                    )

        has_mixture_info = mix_pis is not None and len(mix_pis) > 0
        mixtures: List[Tuple[Mixture, ...]] = [() for _ in range(n_eq)]
        error_mixtures: List[Optional[Mixture]] = [None] * n_eq

        if has_mixture_info:
            mix_checks, mixtures, error_mixtures = _collect_mixtures(mix_pis, mix_mus, mix_sigmas, n_eq, error_type)
            checks.extend(mix_checks)

        for p in range(n_eq):
            if error_mixtures[p] is not None and variances[p] is not None and len(variances[p]) > 0:
                checks.append(_validate_error_variance(variances[p][-1], error_mixtures[p].variance, p))

        result = _merge(*checks)
        result.raise_if_invalid()
        result.emit_warnings()

        return cls(
            present=present,
            blocks=blocks,
            variances=tuple(variances),
            mixtures=tuple(mixtures),
            error_mixtures=tuple(error_mixtures),
            has_mixture_info=has_mixture_info,
            error_type=error_type,
        )


def _collect_mixtures(mix_pis, mix_mus, mix_sigmas, n_eq: int, error_type: str):
    """Split per-equation mixture descriptors into covariate and error mixtures.

    With ``error_type="mix"`` the trailing descriptor of each equation is the
    error term; equations holding zero or one descriptor have no mixture
    covariates.
    """
    checks: List[_ValidationResult] = []
    mixtures: List[Tuple[Mixture, ...]] = [() for _ in range(n_eq)]
    error_mixtures: List[Optional[Mixture]] = [None] * n_eq

    mix_mus = mix_mus if mix_mus is not None else []
    mix_sigmas = mix_sigmas if mix_sigmas is not None else []
    if not (len(mix_pis) == len(mix_mus) == len(mix_sigmas) == n_eq):
        checks.append(
            _ValidationResult(False, [f"mix_pis, mix_mus and mix_sigmas must each have {n_eq} entries"], [])
        )
        return checks, mixtures, error_mixtures

    for p in range(n_eq):
        pis_p = list(mix_pis[p]) if mix_pis[p] is not None else []
        mus_p = list(mix_mus[p]) if mix_mus[p] is not None else []
        sigmas_p = list(mix_sigmas[p]) if mix_sigmas[p] is not None else []

        if not (len(pis_p) == len(mus_p) == len(sigmas_p)):
            checks.append(
                _ValidationResult(False, [f"equation {p + 1}: mix_pis, mix_mus and mix_sigmas differ in length"], [])
            )
            continue

        descriptors = []
        for j, params in enumerate(zip(pis_p, mus_p, sigmas_p)):
            result = _validate_mixture(*params, label=f"equation {p + 1}, mixture {j + 1}")
            checks.append(result)
            if result.is_valid:
                descriptors.append(Mixture.from_params(*params))

        if error_type == "mix":
            if descriptors:
                error_mixtures[p] = descriptors[-1]
            descriptors = descriptors[:-1] if len(descriptors) > 1 else []

        mixtures[p] = tuple(descriptors)

    return checks, mixtures, error_mixtures
