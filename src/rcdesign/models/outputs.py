"""
Output data models for member design results.

All models are frozen and serialise directly to JSON for transport to a UI
or report layer.
"""

import math
from pydantic import BaseModel, ConfigDict, computed_field, field_serializer
from typing import Optional, Union
from enum import Enum

# Relative tolerance applied when comparing a ratio with 1.0
RATIO_TOLERANCE = 1e-9


class DesignStatus(str, Enum):
    """Status of a design check."""
    PASS = "pass"
    FAIL = "fail"


class LimitType(str, Enum):
    """Whether the provided value must reach or stay below the required one."""
    MINIMUM = "minimum"  # provided >= required
    MAXIMUM = "maximum"  # provided <= required (required is the limit)


class BarLayout(str, Enum):
    """Drawing hint derived from the bar count."""
    SINGLE_ROW = "single_row"
    DOUBLE_ROW = "double_row"
    MULTI_ROW = "multi_row"


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class CalculationStep(_FrozenModel):
    """Single calculation step for transparency."""
    step_number: int
    description: str
    formula: str
    substitution: str
    result: float
    unit: str
    code_reference: Optional[str] = None


class CheckResult(_FrozenModel):
    """Outcome of one capacity or serviceability check.

    A check with zero demand has an infinite ratio, written to JSON as the
    string ``"inf"``.
    """
    required: float
    provided: float
    ratio: float
    status: DesignStatus
    limit_type: LimitType = LimitType.MINIMUM
    unit: str = ""
    applicable: bool = True

    @field_serializer("ratio", when_used="json")
    def serialise_ratio(self, ratio: float) -> Union[float, str]:
        return "inf" if math.isinf(ratio) else ratio

    @classmethod
    def evaluate(
        cls,
        required: float,
        provided: float,
        limit_type: LimitType = LimitType.MINIMUM,
        unit: str = "",
        extra_ok: bool = True,
    ) -> "CheckResult":
        """
        Build a check from demand and capacity.

        For MINIMUM checks ratio = provided/required; for MAXIMUM checks
        ratio = required/provided. The check passes when ratio >= 1 and
        *extra_ok* holds.
        """
        if limit_type == LimitType.MINIMUM:
            num, den = provided, required
        else:
            num, den = required, provided

        if den <= 0:
            ratio = math.inf if num >= 0 else 0.0
        else:
            ratio = num / den

        ok = ratio >= 1.0 - RATIO_TOLERANCE and extra_ok
        return cls(
            required=required,
            provided=provided,
            ratio=ratio,
            status=DesignStatus.PASS if ok else DesignStatus.FAIL,
            limit_type=limit_type,
            unit=unit,
        )

    @classmethod
    def not_applicable(cls, unit: str = "") -> "CheckResult":
        """Placeholder for a check that does not apply to the element."""
        return cls(
            required=0.0,
            provided=0.0,
            ratio=1.0,
            status=DesignStatus.PASS,
            unit=unit,
            applicable=False,
        )

    @property
    def passed(self) -> bool:
        return self.status == DesignStatus.PASS


class DesignChecks(_FrozenModel):
    """Fixed set of named checks reported for every element."""
    flexural_strength: CheckResult
    shear_strength: CheckResult
    axial_strength: CheckResult
    deflection: CheckResult
    cracking: CheckResult
    min_reinforcement: CheckResult
    max_reinforcement: CheckResult

    def items(self):
        """Yield (name, check) pairs in declaration order."""
        for name in type(self).model_fields:
            yield name, getattr(self, name)

    @property
    def all_pass(self) -> bool:
        return all(check.passed for _, check in self.items())

    @property
    def failed(self) -> list[str]:
        return [name for name, check in self.items() if not check.passed]


class BarSelection(_FrozenModel):
    """A constructible bar configuration."""
    diameter: int  # mm
    count: int  # bars (per metre for slabs)
    bar_area: float  # mm² per bar
    provided_area: float  # mm² (per metre for slabs)
    required_area: float  # mm²
    layout: BarLayout
    spacing: Optional[float] = None  # mm, slabs only
    within_range: bool = True

    @property
    def label(self) -> str:
        if self.spacing is not None:
            return f"D{self.diameter}@{self.spacing:.0f}"
        return f"{self.count}D{self.diameter}"


class ShearReinforcement(_FrozenModel):
    """Stirrups (beams) or ties (columns)."""
    diameter: int  # mm
    legs: int
    spacing: float  # mm
    area: float  # Av of all legs, mm²
    area_per_metre: float  # mm²/m


class DevelopmentLengths(_FrozenModel):
    """Detailing lengths for the main bars, mm."""
    tension: float
    compression: float
    hook: float
    splice: float


class Reinforcement(_FrozenModel):
    """Selected reinforcement for the element."""
    main: BarSelection
    compression: Optional[BarSelection] = None
    shear: Optional[ShearReinforcement] = None
    distribution: Optional[BarSelection] = None  # slabs
    development: DevelopmentLengths


class CostBreakdown(_FrozenModel):
    """Quantities and subtotals behind the cost estimate."""
    steel_ratio: float  # kg/m³
    material_cost: float
    construction_cost: float
    volume: float  # m³
    steel_weight: float  # kg
    contact_area: float  # m²


class CostEstimate(_FrozenModel):
    """Material, formwork and labour cost of one element."""
    concrete: float
    steel: float
    formwork: float
    labor: float
    total: float
    breakdown: CostBreakdown


class ElementInfo(_FrozenModel):
    """Echo of the resolved element."""
    kind: str
    width: float  # mm
    height: float  # mm
    span: Optional[float] = None  # mm
    effective_depth: float  # mm
    concrete_grade: str
    steel_grade: str


class DesignResult(_FrozenModel):
    """Complete design output for one element."""
    id: Optional[str] = None
    element: ElementInfo
    reinforcement: Reinforcement
    checks: DesignChecks
    cost: CostEstimate
    is_doubly_reinforced: bool = False
    summary: str
    design_code: str = "ACI 318"
    warnings: list[str] = []
    calculation_steps: list[CalculationStep] = []

    @computed_field
    @property
    def is_valid(self) -> bool:
        """True when every check passes."""
        return self.checks.all_pass
