"""
Tests for the EquationSystem data model.
"""

import numpy as np
import pytest


class TestFromLists:
    """Test EquationSystem.from_lists."""

    def test_basic_structure(self, hb_system):
        from corrsys.core.system import EquationSystem

        system = EquationSystem.from_lists(hb_system["corr_x"], hb_system["vars"])

        assert system.n_equations == 3
        assert system.present_equations == [0, 1, 2]
        assert system.n_covariates(1) == 2
        assert not system.has_mixture_info
        assert len(system.blocks) == 9

    def test_copies_caller_blocks(self, hb_system):
        from corrsys.core.system import EquationSystem

        system = EquationSystem.from_lists(hb_system["corr_x"], hb_system["vars"])
        system.blocks[(0, 0)][0, 1] = 0.9

        assert hb_system["corr_x"][0][0][0, 1] == 0.1

    def test_absent_equation(self, absent_system):
        from corrsys.core.system import EquationSystem

        system = EquationSystem.from_lists(absent_system["corr_x"], absent_system["vars"])

        assert system.present == (False, True)
        assert system.n_covariates(0) == 0
        assert system.variances[0] is None
        assert set(system.blocks) == {(1, 1)}

    def test_unknown_error_type(self, hb_system):
        from corrsys.core.system import EquationSystem
        from corrsys.errors import ConfigurationError

        with pytest.raises(ConfigurationError, match="error_type"):
            EquationSystem.from_lists(hb_system["corr_x"], hb_system["vars"], error_type="normal")

    def test_bad_diagonal_block(self, hb_system):
        from corrsys.core.system import EquationSystem
        from corrsys.errors import ConfigurationError

        hb_system["corr_x"][1][1] = np.array([[1, 0.35], [0.3, 1]])
        with pytest.raises(ConfigurationError, match="symmetric"):
            EquationSystem.from_lists(hb_system["corr_x"], hb_system["vars"])

    def test_cross_block_shape(self, hb_system):
        from corrsys.core.system import EquationSystem
        from corrsys.errors import ConfigurationError

        hb_system["corr_x"][0][2] = np.ones((2, 3)) * 0.2
        with pytest.raises(ConfigurationError, match=r"corr_x\[1\]\[3\] has shape"):
            EquationSystem.from_lists(hb_system["corr_x"], hb_system["vars"])

    def test_missing_cross_block(self, hb_system):
        from corrsys.core.system import EquationSystem
        from corrsys.errors import ConfigurationError

        hb_system["corr_x"][2][0] = None
        with pytest.raises(ConfigurationError, match="missing"):
            EquationSystem.from_lists(hb_system["corr_x"], hb_system["vars"])

    def test_vars_length(self, hb_system):
        from corrsys.core.system import EquationSystem
        from corrsys.errors import ConfigurationError

        with pytest.raises(ConfigurationError, match="vars has 2 entries"):
            EquationSystem.from_lists(hb_system["corr_x"], hb_system["vars"][:2])

    def test_ragged_cross_block(self, hb_system):
        from corrsys.core.system import EquationSystem
        from corrsys.errors import ConfigurationError

        hb_system["corr_x"][0][1] = [[0.1, 0.1], [0.1]]
        with pytest.raises(ConfigurationError, match=r"corr_x\[1\]\[2\] must be a rectangular numeric array"):
            EquationSystem.from_lists(hb_system["corr_x"], hb_system["vars"])

    def test_ragged_diagonal_block(self, hb_system):
        from corrsys.core.system import EquationSystem
        from corrsys.errors import ConfigurationError

        hb_system["corr_x"][2][2] = [[1.0, 0.7], [0.7]]
        with pytest.raises(ConfigurationError, match=r"corr_x\[3\]\[3\] must be a rectangular") as exc_info:
            EquationSystem.from_lists(hb_system["corr_x"], hb_system["vars"])
        assert "is missing" not in str(exc_info.value)

    def test_ragged_variances(self, hb_system):
        from corrsys.core.system import EquationSystem
        from corrsys.errors import ConfigurationError

        vars = list(hb_system["vars"])
        vars[1] = [1.0, [1.0, 1.0]]
        with pytest.raises(ConfigurationError, match=r"vars\[2\] must be a rectangular numeric array"):
            EquationSystem.from_lists(hb_system["corr_x"], vars)

    def test_mixtures_collected(self, mixture_system):
        from corrsys.core.system import EquationSystem

        s = mixture_system
        system = EquationSystem.from_lists(s["corr_x"], s["vars"], s["mix_pis"], s["mix_mus"], s["mix_sigmas"])

        assert system.has_mixture_info
        assert [len(m) for m in system.mixtures] == [1, 1]
        assert system.mixtures[0][0].n_components == 2
        assert system.error_mixtures == (None, None)

    def test_error_mixture_trimmed(self, mixture_system):
        from corrsys.core.system import EquationSystem

        s = mixture_system
        err = [0.5, 0.5], [-0.6, 0.6], [0.8, 0.8]
        system = EquationSystem.from_lists(
            s["corr_x"],
            s["vars"],
            [s["mix_pis"][0] + [err[0]], [err[0]]],
            [s["mix_mus"][0] + [err[1]], [err[1]]],
            [s["mix_sigmas"][0] + [err[2]], [err[2]]],
            error_type="mix",
        )

        # Equation 2 keeps only its error mixture
        assert len(system.mixtures[0]) == 1
        assert system.mixtures[1] == ()
        assert np.array_equal(system.error_mixtures[1].mus, [-0.6, 0.6])

    def test_error_mixture_matching_variance(self, mixture_system):
        import warnings

        from corrsys.core.system import EquationSystem

        s = mixture_system
        err = [0.5, 0.5], [-0.6, 0.6], [0.8, 0.8]
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            EquationSystem.from_lists(
                s["corr_x"],
                s["vars"],
                [m + [err[0]] for m in s["mix_pis"]],
                [m + [err[1]] for m in s["mix_mus"]],
                [m + [err[2]] for m in s["mix_sigmas"]],
                error_type="mix",
            )

    def test_error_mixture_variance_mismatch(self, mixture_system):
        from corrsys.core.system import EquationSystem

        s = mixture_system
        # Overall variance 1.25 against an error variance of 1.0
        err = [0.5, 0.5], [-0.5, 0.5], [1.0, 1.0]
        with pytest.warns(UserWarning, match="equation 1: error variance 1 differs"):
            EquationSystem.from_lists(
                s["corr_x"],
                s["vars"],
                [m + [err[0]] for m in s["mix_pis"]],
                [m + [err[1]] for m in s["mix_mus"]],
                [m + [err[2]] for m in s["mix_sigmas"]],
                error_type="mix",
            )

    def test_mixture_weights_warning(self, mixture_system):
        from corrsys.core.system import EquationSystem

        s = mixture_system
        with pytest.warns(UserWarning, match="sum to"):
            EquationSystem.from_lists(s["corr_x"], s["vars"], [[[0.3, 0.6]], None], s["mix_mus"][:1] + [None], s["mix_sigmas"][:1] + [None])


class TestMixture:
    """Test the Mixture dataclass."""

    def test_moments(self):
        from corrsys.core.system import Mixture

        mix = Mixture.from_params([0.4, 0.6], [-1.0, 1.0], [1.0, 1.5])
        assert mix.variance == pytest.approx(2.71)
        assert np.allclose(mix.component_variances, [1.0, 2.25])
