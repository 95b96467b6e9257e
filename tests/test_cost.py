"""Tests for the cost estimate."""
import pytest

from rcdesign.core.cost import estimate_cost
from rcdesign.core.section import build_section
from rcdesign.models import (
    BarLayout,
    BarSelection,
    DevelopmentLengths,
    ElementKind,
    GeometryInput,
    Reinforcement,
    ShearReinforcement,
    UnitPrices,
)

DEVELOPMENT = DevelopmentLengths(tension=1074, compression=480, hook=480, splice=1396)


def _beam_reinforcement():
    return Reinforcement(
        main=BarSelection(
            diameter=29, count=2, bar_area=660.52, provided_area=1321.04,
            required_area=1240.5, layout=BarLayout.SINGLE_ROW,
        ),
        shear=ShearReinforcement(
            diameter=10, legs=2, spacing=200, area=157.08, area_per_metre=785.4,
        ),
        development=DEVELOPMENT,
    )


def _beam_section(span=6000):
    geometry = GeometryInput(width=300, height=500, span=span, clear_cover=40)
    return build_section(ElementKind.BEAM, geometry).with_bar(29)


@pytest.fixture(scope="module")
def beam_cost():
    return estimate_cost(_beam_section(), _beam_reinforcement(), 30)


class TestBeamCost:
    """300x500 beam, 6 m span, 2D29 with D10@200 stirrups."""

    def test_quantities(self, beam_cost):
        assert beam_cost.breakdown.volume == pytest.approx(0.9)
        assert beam_cost.breakdown.contact_area == pytest.approx(9.6)
        # 62.2 kg of main bars and 24.5 kg of stirrups
        assert beam_cost.breakdown.steel_weight == pytest.approx(86.7, abs=0.1)

    def test_concrete_and_formwork(self, beam_cost):
        assert beam_cost.concrete == 855000
        assert beam_cost.formwork == 1152000

    def test_whole_unit_rounding(self, beam_cost):
        for value in (beam_cost.concrete, beam_cost.steel, beam_cost.formwork,
                      beam_cost.labor, beam_cost.total):
            assert value == int(value)

    def test_totals(self, beam_cost):
        breakdown = beam_cost.breakdown
        assert breakdown.material_cost == pytest.approx(
            beam_cost.concrete + beam_cost.steel + beam_cost.formwork, abs=2
        )
        assert breakdown.construction_cost == pytest.approx(
            breakdown.material_cost + beam_cost.labor, abs=2
        )
        assert beam_cost.total == pytest.approx(breakdown.construction_cost * 1.18, abs=2)

    def test_steel_ratio(self, beam_cost):
        assert beam_cost.breakdown.steel_ratio == pytest.approx(86.7 / 0.9, abs=0.2)


class TestPricing:

    def test_high_grade_concrete_price(self):
        cost = estimate_cost(_beam_section(), _beam_reinforcement(), 40)
        assert cost.concrete == 945000

    def test_custom_prices(self):
        prices = UnitPrices(overhead_factor=1.0)
        cost = estimate_cost(_beam_section(), _beam_reinforcement(), 30, prices)
        assert cost.total == cost.breakdown.construction_cost

    def test_default_length_without_span(self):
        cost = estimate_cost(_beam_section(span=None), _beam_reinforcement(), 30)
        assert cost.breakdown.volume == pytest.approx(0.15)


class TestSlabCost:

    def test_soffit_formwork(self):
        geometry = GeometryInput(width=1000, height=150, span=4000, clear_cover=20)
        section = build_section(ElementKind.SLAB, geometry).with_bar(16)
        reinforcement = Reinforcement(
            main=BarSelection(
                diameter=16, count=3, bar_area=201.06, provided_area=473.08,
                required_area=472.6, layout=BarLayout.SINGLE_ROW, spacing=425,
            ),
            distribution=BarSelection(
                diameter=10, count=4, bar_area=78.54, provided_area=285.6,
                required_area=270, layout=BarLayout.SINGLE_ROW, spacing=275,
            ),
            development=DEVELOPMENT,
        )
        cost = estimate_cost(section, reinforcement, 25)
        assert cost.breakdown.contact_area == pytest.approx(4.0)
        assert cost.breakdown.volume == pytest.approx(0.6)
        assert cost.breakdown.steel_weight == pytest.approx(
            (473.08 + 285.6) * 4000 * 7850 / 1e9, abs=0.1
        )
