"""
Shear design calculations per ACI 318.

Implements the strength design method for stirrups and ties:
- Concrete contribution Vc (with axial compression enhancement)
- Required steel contribution Vs
- Stirrup spacing as the minimum of every applicable limit

Key clauses:
- ACI 318 22.5.5: Vc for non-prestressed members
- ACI 318 9.6.3.4: Minimum shear reinforcement
- ACI 318 9.7.6.2.2: Maximum stirrup spacing
- ACI 318 22.5.1.2: Upper limit on Vs
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from rcdesign.codes import ACI318, DesignCode
from rcdesign.exceptions import require_non_negative, require_positive
from rcdesign.models.outputs import CalculationStep
from rcdesign.utils.constants import BAR_AREAS, SPACING_MODULE

logger = logging.getLogger(__name__)


def round_down_spacing(spacing: float) -> float:
    """
    Round a spacing down to a constructible value.

    25 mm module from 50 mm up, 5 mm module below. A spacing under 5 mm is
    returned unrounded so it is never reduced to zero.
    """
    if spacing >= 2 * SPACING_MODULE:
        return math.floor(spacing / SPACING_MODULE) * SPACING_MODULE
    rounded = math.floor(spacing / 5) * 5
    return rounded if rounded > 0 else spacing


@dataclass(frozen=True)
class ShearResult:
    """Internal result from shear design calculations."""
    # Design forces (kN)
    design_shear: float
    phi: float
    Vc: float                # Concrete shear capacity Vc
    Vn_required: float       # Vu / φ
    Vs_required: float       # max(0, Vn,req - Vc)
    Vs_max: float            # (2/3)√fc·b·d

    # Reinforcement
    av_min_per_s: float      # mm²/mm
    stirrup_dia: int         # mm
    stirrup_legs: int
    Av: float                # mm²
    spacing_limits: Dict[str, float]  # mm, by limit name
    governing_limit: str
    spacing: float           # mm, rounded

    high_shear: bool         # Vs,req > ⅓√fc·b·d
    section_adequate: bool   # Vs,req <= Vs,max

    steps: List[CalculationStep] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


class ShearDesigner:
    """
    Shear reinforcement design per ACI 318.

    Stirrups are always provided. The spacing is the smallest of the
    minimum-steel, strength, depth and absolute limits plus any detailing
    limits supplied by the caller (column ties).
    """

    def __init__(self, code: DesignCode = None):
        self.code = code or ACI318()

    def concrete_capacity(
        self,
        width: float,
        effective_depth: float,
        fc: float,
        axial: float = 0.0,
        gross_area: Optional[float] = None,
    ) -> float:
        """
        Nominal concrete shear strength Vc in kN.

        Vc = (1 + Nu/(14·Ag))·(λ/6)·√fc·b·d, axial compression Nu in kN.
        Without axial load the enhancement factor is 1.
        """
        lam = getattr(self.code, "LAMBDA", 1.0)
        factor = 1.0
        if axial > 0 and gross_area:
            factor = 1 + axial * 1000 / (14 * gross_area)
        return factor * lam / 6 * math.sqrt(fc) * width * effective_depth / 1000

    def design(
        self,
        shear_force: float,      # Vu (kN), sign ignored
        width: float,            # Web width b (mm)
        effective_depth: float,  # d (mm)
        fc: float,               # Concrete strength (MPa)
        fy: float,               # Stirrup yield strength (MPa)
        axial: float = 0.0,      # Axial compression Nu (kN)
        gross_area: Optional[float] = None,  # Ag (mm²), needed with axial
        stirrup_dia: int = 10,   # Stirrup diameter (mm)
        legs: int = 2,
        extra_limits: Optional[Dict[str, float]] = None,
    ) -> ShearResult:
        """
        Design stirrups per ACI 318.

        Args:
            shear_force: Factored shear Vu in kN
            width: Web width b in mm
            effective_depth: Effective depth d in mm
            fc: Concrete compressive strength in MPa
            fy: Stirrup yield strength in MPa
            axial: Factored axial compression in kN (columns)
            gross_area: Gross section area in mm² (columns)
            stirrup_dia: Stirrup bar diameter in mm
            legs: Number of stirrup legs
            extra_limits: Additional named spacing limits in mm

        Returns:
            ShearResult with spacing limits and the governing spacing
        """
        require_positive("geometry.width", width)
        require_positive("effective_depth", effective_depth)
        require_positive("material.fc", fc)
        require_positive("material.fy", fy)
        require_non_negative("axial", axial)

        steps = []
        warnings = []
        step_num = 1

        b = width
        d = effective_depth
        Vu = abs(shear_force)
        phi = self.code.get_strength_reduction_factors()['shear']
        sqrt_fc = math.sqrt(fc)

        # Step 1: Concrete contribution
        Vc = self.concrete_capacity(b, d, fc, axial, gross_area)

        if axial > 0 and gross_area:
            formula = "Vc = (1 + Nu/14Ag)·(λ/6)·√fc·b·d"
            substitution = f"= (1 + {axial * 1000:.0f}/(14 × {gross_area:.0f})) × √{fc:g}/6 × {b:.0f} × {d:.0f}"
        else:
            formula = "Vc = (λ/6)·√fc·b·d"
            substitution = f"= √{fc:g}/6 × {b:.0f} × {d:.0f}"

        steps.append(CalculationStep(
            step_number=step_num,
            description="Concrete shear strength (Vc)",
            formula=formula,
            substitution=substitution,
            result=round(Vc, 2),
            unit="kN",
            code_reference="ACI 318 22.5.5.1"
        ))
        step_num += 1

        # Step 2: Required steel contribution
        Vn_req = Vu / phi
        Vs_req = max(0.0, Vn_req - Vc)

        steps.append(CalculationStep(
            step_number=step_num,
            description="Required stirrup contribution (Vs)",
            formula="Vs = max(0, Vu/φ - Vc)",
            substitution=f"= max(0, {Vu:.2f}/{phi} - {Vc:.2f})",
            result=round(Vs_req, 2),
            unit="kN",
            code_reference="ACI 318 22.5.1.1"
        ))
        step_num += 1

        Vs_max = 2 / 3 * sqrt_fc * b * d / 1000
        section_adequate = Vs_req <= Vs_max
        if not section_adequate:
            msg = (f"Required Vs = {Vs_req:.1f} kN exceeds the limit "
                   f"(2/3)√fc·b·d = {Vs_max:.1f} kN; enlarge the section")
            logger.warning(msg)
            warnings.append(msg)

        # Step 3: Minimum shear reinforcement
        av_min_s = self.code.get_minimum_shear_reinforcement(fc, fy, b)
        Av = legs * BAR_AREAS[stirrup_dia]

        steps.append(CalculationStep(
            step_number=step_num,
            description="Minimum shear reinforcement (Av,min/s)",
            formula="Av,min/s = max(0.062√fc·b/fy, 0.35·b/fy)",
            substitution=f"= max({0.062 * sqrt_fc * b / fy:.4f}, {0.35 * b / fy:.4f})",
            result=round(av_min_s, 4),
            unit="mm²/mm",
            code_reference="ACI 318 9.6.3.4"
        ))
        step_num += 1

        # Step 4: Spacing limits
        high_shear = Vs_req > sqrt_fc * b * d / 3 / 1000

        limits = {
            'min_reinforcement': Av / av_min_s,
            'depth': d / 4 if high_shear else d / 2,
            'absolute': 300.0 if high_shear else 600.0,
        }
        if Vs_req > 0:
            limits['strength'] = Av * fy * d / (Vs_req * 1000)
        for name, value in (extra_limits or {}).items():
            limits[name] = float(value)

        governing = min(limits, key=limits.get)
        spacing = round_down_spacing(limits[governing])

        steps.append(CalculationStep(
            step_number=step_num,
            description="Stirrup spacing limits",
            formula="s = min(Av/(Av,min/s), Av·fy·d/Vs, d/2 or d/4, 600 or 300)",
            substitution=", ".join(f"{k} = {v:.0f}" for k, v in limits.items()),
            result=round(limits[governing], 1),
            unit="mm",
            code_reference="ACI 318 9.7.6.2.2"
        ))
        step_num += 1

        steps.append(CalculationStep(
            step_number=step_num,
            description="Stirrup arrangement",
            formula=f"Provide {legs}L-D{stirrup_dia} @ {spacing:.0f} mm",
            substitution=f"Av = {Av:.0f} mm², governed by {governing}",
            result=spacing,
            unit="mm",
            code_reference=""
        ))

        logger.debug("Stirrups %dL-D%d @ %.0f mm (%s)", legs, stirrup_dia, spacing, governing)

        return ShearResult(
            design_shear=Vu,
            phi=phi,
            Vc=Vc,
            Vn_required=Vn_req,
            Vs_required=Vs_req,
            Vs_max=Vs_max,
            av_min_per_s=av_min_s,
            stirrup_dia=stirrup_dia,
            stirrup_legs=legs,
            Av=Av,
            spacing_limits=limits,
            governing_limit=governing,
            spacing=spacing,
            high_shear=high_shear,
            section_adequate=section_adequate,
            steps=steps,
            warnings=warnings,
        )
