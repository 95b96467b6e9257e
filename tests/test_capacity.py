"""Tests for capacity verification and the column interaction diagram."""
import math

import numpy as np
import pytest

from rcdesign.core.capacity import CapacityVerifier
from rcdesign.core.flexure import FlexureDesigner
from rcdesign.core.interaction import (
    column_layers,
    face_bar_count,
    generate_interaction,
    required_column_steel,
    strength_reduction_factor,
)
from rcdesign.models.outputs import CheckResult, LimitType

B, D, D_PRIME = 300, 442, 58
FC, FY = 30, 400


@pytest.fixture(scope="module")
def verifier():
    return CapacityVerifier()


class TestFlexuralRoundTrip:
    """Steel designed for Mu verifies at exactly φMn = Mu."""

    @pytest.mark.parametrize("Mu", [120, 180, 250, 300])
    def test_capacity_equals_demand(self, verifier, Mu):
        flexure = FlexureDesigner().design(Mu, B, D, D_PRIME, FC, FY)
        capacity = verifier.flexural_capacity(B, D, D_PRIME, FC, FY, flexure.required_ast)
        assert capacity.phi_Mn == pytest.approx(Mu, rel=1e-6)
        assert capacity.tension_controlled

    def test_minimum_steel_exceeds_demand(self, verifier):
        flexure = FlexureDesigner().design(50, B, D, D_PRIME, FC, FY)
        capacity = verifier.flexural_capacity(B, D, D_PRIME, FC, FY, flexure.required_ast)
        assert capacity.phi_Mn > 50


class TestFlexuralCheck:

    def test_selected_bars_pass(self, verifier):
        capacity = verifier.flexural_capacity(B, 435.5, 58, FC, FY, 1321.04)
        check = verifier.check_flexure(180, capacity)
        assert check.passed
        assert check.ratio > 1
        assert capacity.phi_Mn == pytest.approx(190.7, abs=0.5)

    def test_over_reinforced_fails(self, verifier):
        capacity = verifier.flexural_capacity(B, D, D_PRIME, FC, FY, 0.05 * B * D)
        assert not capacity.tension_controlled
        check = verifier.check_flexure(100, capacity)
        assert check.ratio > 1
        assert not check.passed

    def test_tension_controlled_limit(self, verifier):
        capacity = verifier.flexural_capacity(B, D, D_PRIME, FC, FY, 1000)
        assert capacity.c_limit == pytest.approx(3 / 7 * D)


class TestCompressionSteel:

    def test_equilibrium_without_yield(self, verifier):
        capacity = verifier.flexural_capacity(B, D, D_PRIME, FC, FY, 1500, 1500)
        assert 0 < capacity.c < D
        assert capacity.fs_comp < FY
        assert not capacity.compression_steel_yields
        beta1 = 0.85 - 0.20 * 2 / 27
        compression = 0.85 * FC * beta1 * capacity.c * B + 1500 * capacity.fs_comp
        assert compression == pytest.approx(1500 * FY, rel=1e-9)

    def test_compression_steel_adds_capacity(self, verifier):
        singly = verifier.flexural_capacity(B, D, D_PRIME, FC, FY, 1500)
        doubly = verifier.flexural_capacity(B, D, D_PRIME, FC, FY, 1500, 1500)
        assert doubly.phi_Mn >= singly.phi_Mn
        assert doubly.c < singly.c

    def test_yielding_compression_steel(self, verifier):
        capacity = verifier.flexural_capacity(B, D, D_PRIME, FC, FY, 6000, 1000)
        assert capacity.compression_steel_yields
        assert capacity.fs_comp == FY


class TestShearCapacity:

    def test_stirrups_add_capacity(self, verifier):
        capacity = verifier.shear_capacity(B, 435.5, FC, FY, Av=157.08, spacing=200)
        assert capacity.Vs == pytest.approx(157.08 * 400 * 435.5 / 200 / 1000)
        assert capacity.phi_Vn == pytest.approx(0.75 * (capacity.Vc + capacity.Vs))
        assert verifier.check_shear(120, capacity).passed

    def test_steel_contribution_capped(self, verifier):
        capacity = verifier.shear_capacity(B, D, FC, FY, Av=400, spacing=10)
        assert capacity.Vs == pytest.approx(capacity.Vs_max)

    def test_concrete_only(self, verifier):
        capacity = verifier.shear_capacity(1000, 122, 25, 400)
        assert capacity.Vs == 0
        assert capacity.phi_Vn == pytest.approx(0.75 * 5 / 6 * 1000 * 122 / 1000)


class TestReinforcementLimits:

    def test_within_limits(self, verifier):
        min_check, max_check = verifier.check_reinforcement_limits(1321, 457, 3132)
        assert min_check.passed
        assert max_check.passed
        assert max_check.limit_type == LimitType.MAXIMUM
        assert max_check.ratio == pytest.approx(3132 / 1321)

    def test_above_maximum(self, verifier):
        _, max_check = verifier.check_reinforcement_limits(4000, 457, 3132)
        assert not max_check.passed

    def test_below_minimum(self, verifier):
        min_check, _ = verifier.check_reinforcement_limits(300, 457, 3132)
        assert not min_check.passed


class TestCheckResult:

    def test_zero_demand_passes(self):
        check = CheckResult.evaluate(required=0, provided=25)
        assert check.passed
        assert math.isinf(check.ratio)

    def test_extra_condition(self):
        assert not CheckResult.evaluate(required=10, provided=20, extra_ok=False).passed

    def test_not_applicable(self):
        check = CheckResult.not_applicable("mm")
        assert check.passed
        assert not check.applicable


class TestInteractionDiagram:
    """400x400 column, 8 bars of 20 mm."""

    @pytest.fixture(scope="class")
    def diagram(self):
        layers = column_layers(400, 60, 8 * 314.16, 8)
        return generate_interaction(400, 400, layers, FC, FY)

    def test_squash_load(self, diagram):
        As = 8 * 314.16
        P0 = (0.85 * FC * (400 * 400 - As) + FY * As) / 1000
        assert diagram.P0 == pytest.approx(P0)
        assert diagram.phi_Pn_max == pytest.approx(0.80 * 0.65 * P0)

    def test_sorted_by_axial_load(self, diagram):
        assert np.all(np.diff(diagram.P) >= 0)

    def test_pure_bending_capacity(self, diagram):
        assert diagram.moment_capacity(0) > 0

    def test_above_axial_cap(self, diagram):
        assert diagram.moment_capacity(diagram.phi_Pn_max + 1) == 0
        assert not diagram.contains(diagram.phi_Pn_max + 1, 0)

    def test_tension_limit(self, diagram):
        assert diagram.phi_Pnt_max == pytest.approx(0.9 * FY * 8 * 314.16 / 1000)
        assert diagram.P[0] == pytest.approx(-diagram.phi_Pnt_max)
        assert diagram.contains(-500, 0)
        assert not diagram.contains(-diagram.phi_Pnt_max - 1, 0)

    def test_contains(self, diagram):
        assert diagram.contains(1200, 80)
        assert not diagram.contains(1200, 1000)

    def test_layers_preserve_area(self):
        layers = column_layers(400, 60, 2513, 11)
        assert layers.total_area == pytest.approx(2513)
        assert face_bar_count(11) == 3
        assert face_bar_count(4) == 2

    def test_phi_transition(self):
        phi = strength_reduction_factor(np.array([0.0, 0.002, 0.0035, 0.005, 0.01]), 0.002)
        assert phi.tolist() == pytest.approx([0.65, 0.65, 0.775, 0.90, 0.90])


class TestRequiredColumnSteel:

    def test_light_demand_uses_minimum(self):
        As, found = required_column_steel(400, 400, 60, 11, 1200, 80, FC, FY)
        assert found
        assert As == pytest.approx(0.01 * 400 * 400)

    def test_demand_beyond_maximum(self):
        As, found = required_column_steel(400, 400, 60, 11, 10000, 50, FC, FY)
        assert not found
        assert As == pytest.approx(0.06 * 400 * 400)

    def test_intermediate_demand_is_contained(self):
        As, found = required_column_steel(400, 400, 60, 11, 1500, 200, FC, FY)
        assert found
        assert 0.01 * 160000 <= As <= 0.06 * 160000
        layers = column_layers(400, 60, As, 11)
        assert generate_interaction(400, 400, layers, FC, FY).contains(1500, 200)

    def test_column_checks(self, verifier):
        capacity = verifier.column_capacity(400, 400, 56, 2211.7, 11, FC, FY, 1200)
        axial_check, flexural_check = verifier.check_column(1200, 80, capacity)
        assert axial_check.passed
        assert flexural_check.passed

    def test_tension_demand_needs_more_steel(self):
        As, found = required_column_steel(400, 400, 60, 11, -1500, 150, FC, FY)
        assert found
        assert As >= 1500 * 1000 / (0.9 * FY)

    def test_column_in_tension_checked_against_steel(self, verifier):
        capacity = verifier.column_capacity(400, 400, 56, 2211.7, 11, FC, FY, -1500)
        assert capacity.phi_Pnt_max == pytest.approx(0.9 * FY * 2211.7 / 1000)
        axial_check, flexural_check = verifier.check_column(-1500, 150, capacity)
        assert axial_check.required == pytest.approx(1500)
        assert axial_check.provided == pytest.approx(796.2, abs=0.1)
        assert not axial_check.passed
        assert not flexural_check.passed
