"""
Input data models for member design using Pydantic for validation.

Only hard preconditions are enforced here (positive dimensions and
strengths). Values outside the usual code range, e.g. fc = 15 MPa, are
accepted and designed; judging them is left to the caller.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from enum import Enum

from rcdesign.utils.constants import DEFAULT_PRICES, EXPOSURE_CLASSES


class ElementKind(str, Enum):
    """Type of structural element."""
    BEAM = "beam"
    COLUMN = "column"
    SLAB = "slab"


class ExposureClass(str, Enum):
    """Exposure conditions, ordered mild -> extreme."""
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"
    VERY_SEVERE = "very_severe"
    EXTREME = "extreme"

    @property
    def rank(self) -> int:
        """Severity rank, 0 for mild."""
        return EXPOSURE_CLASSES.index(self.value)


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False, extra="forbid")


class GeometryInput(_FrozenModel):
    """Cross-section and length of the element, all in mm."""
    width: float = Field(..., gt=0, description="Section width b in mm (slabs: ignored, 1 m strip)")
    height: float = Field(..., gt=0, description="Overall depth h in mm (slab thickness)")
    span: Optional[float] = Field(
        None,
        gt=0,
        description="Span or member length in mm"
    )
    clear_cover: float = Field(
        default=40,
        ge=0,
        description="Clear cover to stirrups (or to main bars in slabs) in mm"
    )


class MaterialInput(_FrozenModel):
    """Specified material strengths."""
    fc: float = Field(..., gt=0, description="Concrete compressive strength fc' in MPa")
    fy: float = Field(..., gt=0, description="Steel yield strength fy in MPa")

    @property
    def concrete_grade(self) -> str:
        return f"fc{self.fc:g}"

    @property
    def steel_grade(self) -> str:
        return f"fy{self.fy:g}"


class LoadInput(_FrozenModel):
    """Unfactored line loads in kN/m (informational; used for service moments)."""
    dead: float = Field(default=0.0, ge=0, description="Dead load, kN/m")
    live: float = Field(default=0.0, ge=0, description="Live load, kN/m")
    wind: float = 0.0
    seismic: float = 0.0


class ForceInput(_FrozenModel):
    """Factored design actions. Compression is positive for axial force."""
    moment_x: float = Field(default=0.0, description="Design moment about the strong axis, kN·m")
    moment_y: float = Field(default=0.0, description="Design moment about the weak axis, kN·m")
    shear_x: float = Field(default=0.0, description="Design shear, kN")
    shear_y: float = Field(default=0.0, description="Design shear in the weak direction, kN")
    axial: float = Field(default=0.0, description="Design axial force, kN")
    torsion: float = Field(default=0.0, description="Design torsion, kN·m")


class DesignConstraints(_FrozenModel):
    """Serviceability limits and environment."""
    deflection_limit: float = Field(
        default=360,
        gt=0,
        description="Allowable deflection denominator N in span/N"
    )
    crack_width: float = Field(
        default=0.33,
        gt=0,
        description="Allowable crack width in mm"
    )
    exposure: ExposureClass = ExposureClass.MODERATE


class UnitPrices(_FrozenModel):
    """Unit prices used by the cost estimate."""
    concrete_standard: float = Field(default=DEFAULT_PRICES["concrete_standard"], ge=0)
    concrete_high: float = Field(default=DEFAULT_PRICES["concrete_high"], ge=0)
    steel: float = Field(default=DEFAULT_PRICES["steel"], ge=0)
    formwork: float = Field(default=DEFAULT_PRICES["formwork"], ge=0)
    labor_concrete: float = Field(default=DEFAULT_PRICES["labor_concrete"], ge=0)
    labor_steel: float = Field(default=DEFAULT_PRICES["labor_steel"], ge=0)
    overhead_factor: float = Field(default=DEFAULT_PRICES["overhead_factor"], ge=1.0)


class DesignInput(_FrozenModel):
    """Complete input model for the design of one element."""
    id: Optional[str] = Field(None, description="Caller's element identifier")
    element_kind: ElementKind
    geometry: GeometryInput
    material: MaterialInput
    loads: LoadInput = LoadInput()
    forces: ForceInput = ForceInput()
    constraints: DesignConstraints = DesignConstraints()
    unit_prices: UnitPrices = UnitPrices()
