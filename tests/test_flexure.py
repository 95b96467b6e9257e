"""Tests for flexural design of rectangular sections."""
import pytest

from rcdesign.core.flexure import FlexureDesigner
from rcdesign.exceptions import DesignInputError

# Reference beam 300x500: d = 500 - 40 - 10 - 8
B, D, D_PRIME = 300, 442, 58
FC, FY = 30, 400


@pytest.fixture(scope="module")
def designer():
    return FlexureDesigner()


@pytest.fixture(scope="module")
def reference(designer):
    return designer.design(180, B, D, D_PRIME, FC, FY)


class TestSinglyReinforced:
    """Mu = 180 kNm on the reference beam."""

    def test_required_area(self, reference):
        assert 900 <= reference.required_ast <= 1300
        assert reference.required_ast == pytest.approx(1219, rel=0.01)

    def test_not_doubly(self, reference):
        assert not reference.is_doubly
        assert reference.required_asc == 0
        assert not reference.clamped

    def test_resistance_coefficients(self, reference):
        assert reference.Rn == pytest.approx(180e6 / (0.9 * B * D ** 2))
        assert reference.Rn_max == pytest.approx(7.78, abs=0.01)
        assert reference.Rn < reference.Rn_max

    def test_bounds(self, reference):
        assert reference.min_ast == pytest.approx(0.0035 * B * D)
        assert reference.max_ast == pytest.approx(reference.rho_max * B * D)
        assert reference.min_ast <= reference.required_ast <= reference.max_ast

    def test_steps_recorded(self, reference):
        assert len(reference.steps) >= 4
        assert all(step.description for step in reference.steps)


class TestMinimumSteel:

    def test_zero_moment_gives_rho_min(self, designer):
        result = designer.design(0, B, D, D_PRIME, FC, FY)
        assert result.required_ast == pytest.approx(0.0035 * B * D)
        assert result.required_asc == 0

    def test_small_moment_governed_by_minimum(self, designer):
        result = designer.design(20, B, D, D_PRIME, FC, FY)
        assert result.required_ast == pytest.approx(result.min_ast)

    def test_override_rho_min(self, designer):
        result = designer.design(0, 1000, 125, 25, 25, 400, rho_min=0.0018)
        assert result.required_ast == pytest.approx(225)


class TestDoublyReinforced:

    def test_large_moment_adds_compression_steel(self, designer):
        result = designer.design(900, B, D, D_PRIME, FC, FY)
        assert result.is_doubly
        assert result.required_asc > 0
        assert result.required_ast == pytest.approx(result.rho_max * B * D + result.required_asc)

    def test_compression_steel_from_excess_moment(self, designer):
        result = designer.design(900, B, D, D_PRIME, FC, FY)
        delta_Mn = 900e6 / 0.9 - result.Rn_max * B * D ** 2
        assert result.required_asc == pytest.approx(delta_Mn / (FY * (D - D_PRIME)))

    def test_threshold(self, designer):
        # Moment at which the singly reinforced limit is reached
        Mu_limit = 0.9 * designer.design(0, B, D, D_PRIME, FC, FY).Rn_max * B * D ** 2 / 1e6
        below = designer.design(Mu_limit * 0.99, B, D, D_PRIME, FC, FY)
        above = designer.design(Mu_limit * 1.01, B, D, D_PRIME, FC, FY)
        assert not below.is_doubly
        assert above.is_doubly

    def test_compression_steel_disallowed_clamps(self, designer):
        result = designer.design(900, B, D, D_PRIME, FC, FY, allow_doubly=False)
        assert result.clamped
        assert not result.is_doubly
        assert result.required_ast == pytest.approx(result.rho_max * B * D)
        assert result.warnings

    def test_no_lever_arm_clamps(self, designer):
        result = designer.design(900, B, 50, 58, FC, FY)
        assert result.clamped
        assert result.required_asc == 0
        assert any("lever arm" in w for w in result.warnings)


class TestMonotonicity:

    def test_steel_grows_with_moment(self, designer):
        areas = [designer.design(m, B, D, D_PRIME, FC, FY).required_ast for m in range(0, 1000, 25)]
        assert all(a2 >= a1 for a1, a2 in zip(areas, areas[1:]))

    def test_sign_of_moment_ignored(self, designer, reference):
        hogging = designer.design(-180, B, D, D_PRIME, FC, FY)
        assert hogging.required_ast == pytest.approx(reference.required_ast)


class TestPreconditions:

    def test_zero_width_rejected(self, designer):
        with pytest.raises(DesignInputError) as exc:
            designer.design(180, 0, D, D_PRIME, FC, FY)
        assert exc.value.field == "geometry.width"

    def test_zero_fc_rejected(self, designer):
        with pytest.raises(DesignInputError) as exc:
            designer.design(180, B, D, D_PRIME, 0, FY)
        assert exc.value.field == "material.fc"
