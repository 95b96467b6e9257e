"""Tests for material properties and ACI 318 code provisions."""
import math

import pytest

from rcdesign.codes import ACI318
from rcdesign.core.materials import get_concrete_properties, get_material_model, get_steel_properties
from rcdesign.core.section import build_section
from rcdesign.exceptions import DesignInputError
from rcdesign.models import ElementKind, ExposureClass, GeometryInput


class TestBeta1:
    """Stress-block factor per ACI 318 22.2.2.4.3."""

    def test_below_28_mpa(self):
        assert ACI318().get_beta1(25) == 0.85

    def test_at_28_mpa(self):
        assert ACI318().get_beta1(28) == 0.85

    def test_above_55_mpa(self):
        assert ACI318().get_beta1(60) == 0.65

    def test_linear_midpoint(self):
        assert ACI318().get_beta1(41.5) == pytest.approx(0.75, abs=0.01)

    def test_at_55_mpa(self):
        assert ACI318().get_beta1(55) == pytest.approx(0.65)

    def test_midpoint_exact(self):
        assert ACI318().get_beta1(41.5) == pytest.approx(0.75)

    def test_continuous_at_55_mpa(self):
        code = ACI318()
        assert code.get_beta1(55) == pytest.approx(code.get_beta1(55.001), abs=1e-6)

    def test_monotonic_between_limits(self):
        code = ACI318()
        values = [code.get_beta1(fc) for fc in range(20, 70, 5)]
        assert values == sorted(values, reverse=True)


class TestRatioLimits:

    def test_reference_grade(self):
        limits = ACI318().get_ratio_limits(30, 400)
        assert limits.rho_min == pytest.approx(0.0035)
        assert limits.rho_balanced == pytest.approx(0.031966, rel=1e-3)
        assert limits.rho_max == pytest.approx(0.75 * limits.rho_balanced)

    def test_rho_min_governed_by_strength(self):
        # √fc/(4fy) exceeds 1.4/fy above 31.4 MPa
        limits = ACI318().get_ratio_limits(50, 400)
        assert limits.rho_min == pytest.approx(math.sqrt(50) / 1600)


class TestMaterialModel:

    def test_concrete_properties(self):
        concrete = get_concrete_properties(30)
        assert concrete.Ec == pytest.approx(4700 * math.sqrt(30))
        assert concrete.fr == pytest.approx(0.62 * math.sqrt(30))
        assert concrete.modular_ratio == pytest.approx(200000 / concrete.Ec)
        assert concrete.grade == "fc30"

    def test_steel_properties(self):
        steel = get_steel_properties(400)
        assert steel.epsilon_y == pytest.approx(0.002)
        assert steel.grade == "fy400"

    def test_low_strength_is_modelled(self):
        model = get_material_model(15, 400)
        assert model.concrete.beta1 == 0.85
        assert model.rho_max > 0

    @pytest.mark.parametrize("fc", [0, -5, float("nan")])
    def test_non_positive_fc_rejected(self, fc):
        with pytest.raises(DesignInputError) as exc:
            get_concrete_properties(fc)
        assert exc.value.field == "material.fc"

    def test_non_positive_fy_rejected(self):
        with pytest.raises(DesignInputError) as exc:
            get_steel_properties(0)
        assert exc.value.field == "material.fy"


class TestCodeTables:

    def test_cover_by_exposure(self):
        code = ACI318()
        assert code.get_minimum_cover("mild").nominal_cover == 20
        assert code.get_minimum_cover("severe").nominal_cover == 50
        assert code.get_minimum_cover("extreme").nominal_cover == 75

    def test_unknown_exposure_falls_back_to_moderate(self):
        assert ACI318().get_minimum_cover("unknown").nominal_cover == 40

    def test_development_lengths_small_bar(self):
        lengths = ACI318().get_development_lengths(16, 30, 400)
        assert lengths["tension"] == pytest.approx(556, abs=1)
        assert lengths["compression"] == pytest.approx(280, abs=1)
        assert lengths["hook"] == pytest.approx(280, abs=1)
        assert lengths["splice"] == pytest.approx(723, abs=1)

    def test_development_lengths_large_bar(self):
        lengths = ACI318().get_development_lengths(25, 30, 400)
        assert lengths["tension"] == pytest.approx(1074, abs=1)

    def test_tension_length_minimum(self):
        lengths = ACI318().get_development_lengths(8, 60, 300)
        assert lengths["tension"] == 300

    def test_minimum_shear_reinforcement(self):
        assert ACI318().get_minimum_shear_reinforcement(30, 400, 300) == pytest.approx(0.2625)


class TestSectionGeometry:

    def test_beam_effective_depth(self):
        section = build_section(ElementKind.BEAM, GeometryInput(width=300, height=500, clear_cover=40))
        assert section.effective_depth == pytest.approx(442)
        assert section.compression_depth == pytest.approx(58)

    def test_with_selected_bar(self):
        section = build_section(ElementKind.BEAM, GeometryInput(width=300, height=500, clear_cover=40))
        assert section.with_bar(29).effective_depth == pytest.approx(435.5)

    def test_slab_uses_metre_strip(self):
        section = build_section(ElementKind.SLAB, GeometryInput(width=2500, height=150, clear_cover=20))
        assert section.width == 1000
        assert section.effective_depth == pytest.approx(125)

    def test_no_effective_depth_rejected(self):
        with pytest.raises(DesignInputError) as exc:
            build_section(ElementKind.BEAM, GeometryInput(width=300, height=60, clear_cover=50))
        assert exc.value.field == "geometry.height"


class TestExposureClass:

    def test_ordered_mild_to_extreme(self):
        ranks = [exposure.rank for exposure in ExposureClass]
        assert ranks == sorted(ranks)
        assert ExposureClass.MILD.rank == 0
        assert ExposureClass.EXTREME.rank == 4

    def test_cover_grows_with_severity(self):
        code = ACI318()
        covers = [code.get_minimum_cover(exposure.value).nominal_cover for exposure in ExposureClass]
        assert covers == sorted(covers)
