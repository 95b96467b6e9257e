"""
Cost estimation module.

Converts the element geometry and its selected reinforcement into concrete
volume, steel weight and formwork area, then prices them with the unit
prices of the design input. No design decisions are made here.
"""

import math
from typing import Optional

from rcdesign.core.section import SectionGeometry
from rcdesign.models.inputs import ElementKind, UnitPrices
from rcdesign.models.outputs import CostBreakdown, CostEstimate, Reinforcement
from rcdesign.utils.constants import STEEL_DENSITY

# Element length used when no span is given (mm)
DEFAULT_LENGTH = 1000.0

# Concrete strength from which the high-grade price applies (MPa)
HIGH_GRADE_FC = 35


def estimate_cost(
    section: SectionGeometry,
    reinforcement: Reinforcement,
    fc: float,
    prices: Optional[UnitPrices] = None,
) -> CostEstimate:
    """
    Estimate the cost of one element.

    Args:
        section: Resolved section (slabs: one-metre strip)
        reinforcement: Selected reinforcement
        fc: Concrete strength in MPa, selects the concrete price
        prices: Unit prices, defaults when omitted

    Returns:
        CostEstimate with whole-unit costs and a rounded breakdown
    """
    prices = prices or UnitPrices()
    length = section.span or DEFAULT_LENGTH

    volume = _concrete_volume(section, length)
    steel_weight = _main_steel_weight(reinforcement, length) + _shear_steel_weight(
        section, reinforcement, length
    )
    contact_area = _contact_area(section, length)

    concrete_price = prices.concrete_high if fc >= HIGH_GRADE_FC else prices.concrete_standard

    concrete_cost = volume * concrete_price
    steel_cost = steel_weight * prices.steel
    formwork_cost = contact_area * prices.formwork
    labor_cost = volume * prices.labor_concrete + steel_weight * prices.labor_steel

    material_cost = concrete_cost + steel_cost + formwork_cost
    construction_cost = material_cost + labor_cost
    total_cost = construction_cost * prices.overhead_factor

    return CostEstimate(
        concrete=_round(concrete_cost),
        steel=_round(steel_cost),
        formwork=_round(formwork_cost),
        labor=_round(labor_cost),
        total=_round(total_cost),
        breakdown=CostBreakdown(
            steel_ratio=_round(steel_weight / volume, 1),
            material_cost=_round(material_cost),
            construction_cost=_round(construction_cost),
            volume=_round(volume, 3),
            steel_weight=_round(steel_weight, 1),
            contact_area=_round(contact_area, 1),
        ),
    )


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------

def _round(value: float, ndigits: int = 0) -> float:
    """Round half away from zero (not banker's rounding)."""
    scale = 10 ** ndigits
    return math.floor(abs(value) * scale + 0.5) / scale * (1 if value >= 0 else -1)


def _concrete_volume(section: SectionGeometry, length: float) -> float:
    """Concrete volume in m3."""
    return section.width * section.height * length / 1e9


def _main_steel_weight(reinforcement: Reinforcement, length: float) -> float:
    """Weight of longitudinal bars in kg (main, compression, distribution)."""
    area = reinforcement.main.provided_area
    if reinforcement.compression is not None:
        area += reinforcement.compression.provided_area
    if reinforcement.distribution is not None:
        area += reinforcement.distribution.provided_area
    return area * length * STEEL_DENSITY / 1e9


def _shear_steel_weight(
    section: SectionGeometry,
    reinforcement: Reinforcement,
    length: float,
) -> float:
    """Weight of closed stirrups or ties in kg."""
    shear = reinforcement.shear
    if shear is None or shear.spacing <= 0:
        return 0.0
    inner_b = max(section.width - 2 * section.cover, 0.0)
    inner_h = max(section.height - 2 * section.cover, 0.0)
    hoop_length = 2 * (inner_b + inner_h)
    count = math.floor(length / shear.spacing) + 1
    bar_area = shear.area / shear.legs
    return hoop_length * bar_area * count * STEEL_DENSITY / 1e9


def _contact_area(section: SectionGeometry, length: float) -> float:
    """Formwork contact area in m2: soffit for slabs, perimeter otherwise."""
    if section.kind == ElementKind.SLAB:
        return section.width * length / 1e6
    return section.perimeter * length / 1e6
