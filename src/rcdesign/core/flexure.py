"""
Flexural design of rectangular sections per ACI 318.

Implements the strength design method for:
- Singly reinforced sections (closed-form ρ from the Whitney stress block)
- Doubly reinforced sections when Rn exceeds the limit at ρmax
- Minimum steel (ρmin) governing at low or zero moment

Key clauses:
- ACI 318 22.2: Flexural strength assumptions
- ACI 318 9.6.1: Minimum flexural reinforcement
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional

from rcdesign.codes import ACI318, DesignCode
from rcdesign.core.materials import get_material_model
from rcdesign.exceptions import require_positive
from rcdesign.models.outputs import CalculationStep

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlexureResult:
    """Internal result from flexural design calculations."""
    # Demand
    design_moment: float  # |Mu| in kNm
    required_nominal_moment: float  # Mu/φ in kNm
    phi: float

    # Section
    width: float  # b (mm)
    effective_depth: float  # d (mm)
    compression_depth: float  # d' (mm)

    # Material factors
    beta1: float
    rho_min: float
    rho_balanced: float
    rho_max: float

    # Resistance coefficients (MPa)
    Rn: float
    Rn_max: float

    # Steel
    rho_required: float
    required_ast: float  # mm²
    required_asc: float  # mm²
    min_ast: float  # mm²
    max_ast: float  # mm²

    is_doubly: bool
    clamped: bool  # True when the demand could not be met and ρ was clamped to ρmax

    steps: List[CalculationStep] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


class FlexureDesigner:
    """
    Flexural reinforcement design per ACI 318.

    Works on the required nominal moment Mn = Mu/φ so that steel designed
    here verifies with φMn = Mu.
    """

    def __init__(self, code: DesignCode = None):
        self.code = code or ACI318()

    def design(
        self,
        moment: float,             # Factored moment Mu (kNm), sign ignored
        width: float,              # Section width b (mm)
        effective_depth: float,    # d (mm)
        compression_depth: float,  # d' to compression steel (mm)
        fc: float,                 # Concrete strength (MPa)
        fy: float,                 # Steel yield strength (MPa)
        rho_min: Optional[float] = None,
        allow_doubly: bool = True,
    ) -> FlexureResult:
        """
        Design tension (and if needed compression) steel.

        Args:
            moment: Factored design moment in kNm
            width: Section width b in mm
            effective_depth: Effective depth d in mm
            compression_depth: Depth d' of compression steel in mm
            fc: Concrete compressive strength in MPa
            fy: Steel yield strength in MPa
            rho_min: Override of the minimum ratio (slabs use 0.0018)
            allow_doubly: If False, moments above the singly reinforced
                limit are clamped to ρmax instead of adding compression steel

        Returns:
            FlexureResult with required areas and calculation steps
        """
        require_positive("geometry.width", width)
        require_positive("effective_depth", effective_depth)

        steps = []
        warnings = []
        step_num = 1

        b = width
        d = effective_depth
        d_prime = compression_depth
        phi = self.code.get_strength_reduction_factors()['flexure']

        Mu_kNm = abs(moment)
        Mn_req = Mu_kNm * 1e6 / phi  # N.mm

        material = get_material_model(fc, fy, self.code)
        beta1 = material.concrete.beta1
        rho_b = material.rho_balanced
        rho_max = material.rho_max
        rho_min = material.rho_min if rho_min is None else rho_min

        steps.append(CalculationStep(
            step_number=step_num,
            description="Stress-block factor (β1)",
            formula="β1 = 0.85 - 0.20(fc - 28)/27, 0.65 ≤ β1 ≤ 0.85",
            substitution=f"fc = {fc:g} MPa",
            result=round(beta1, 4),
            unit="",
            code_reference="ACI 318 22.2.2.4.3"
        ))
        step_num += 1

        steps.append(CalculationStep(
            step_number=step_num,
            description="Balanced and maximum reinforcement ratio",
            formula="ρb = 0.85β1·fc/fy · 600/(600+fy), ρmax = 0.75ρb",
            substitution=f"ρb = {rho_b:.5f}, ρmax = {rho_max:.5f}",
            result=round(rho_max, 5),
            unit="",
            code_reference="ACI 318"
        ))
        step_num += 1

        Rn_max = rho_max * fy * (1 - 0.59 * rho_max * fy / fc)
        Rn = Mn_req / (b * d ** 2)
        As_min = rho_min * b * d
        As_max = rho_max * b * d

        steps.append(CalculationStep(
            step_number=step_num,
            description="Flexural resistance coefficient (Rn)",
            formula="Rn = Mu / (φ·b·d²)",
            substitution=f"= {Mu_kNm:.2f}×10⁶ / ({phi} × {b:.0f} × {d:.0f}²)",
            result=round(Rn, 4),
            unit="MPa",
            code_reference=""
        ))
        step_num += 1

        steps.append(CalculationStep(
            step_number=step_num,
            description="Limiting coefficient at ρmax (Rn,max)",
            formula="Rn,max = ρmax·fy·(1 - 0.59·ρmax·fy/fc)",
            substitution=f"= {rho_max:.5f} × {fy:g} × (1 - 0.59 × {rho_max:.5f} × {fy:g}/{fc:g})",
            result=round(Rn_max, 4),
            unit="MPa",
            code_reference=""
        ))
        step_num += 1

        As_comp = 0.0
        is_doubly = False
        clamped = False

        if Mu_kNm == 0:
            rho = rho_min
            As = As_min
            steps.append(CalculationStep(
                step_number=step_num,
                description="No moment - minimum steel governs",
                formula="As = ρmin·b·d",
                substitution=f"= {rho_min:.5f} × {b:.0f} × {d:.0f}",
                result=round(As, 1),
                unit="mm²",
                code_reference="ACI 318 9.6.1.2"
            ))

        elif Rn <= Rn_max:
            discriminant = 1 - 2 * Rn / (0.85 * fc)
            if discriminant < 0:
                rho = rho_max
                clamped = True
                msg = (f"Flexure solve has no real root (Rn = {Rn:.3f} MPa); "
                       f"ρ clamped to ρmax = {rho_max:.5f}")
                logger.warning(msg)
                warnings.append(msg)
            else:
                rho = (0.85 * fc / fy) * (1 - math.sqrt(discriminant))
            As = max(rho * b * d, As_min)

            steps.append(CalculationStep(
                step_number=step_num,
                description="Required tension steel (singly reinforced)",
                formula="ρ = 0.85fc/fy·(1 - √(1 - 2Rn/0.85fc)), As = max(ρbd, ρmin·bd)",
                substitution=f"ρ = {rho:.5f}, As = max({rho * b * d:.0f}, {As_min:.0f})",
                result=round(As, 1),
                unit="mm²",
                code_reference=""
            ))

        elif allow_doubly and d - d_prime > 0:
            is_doubly = True
            rho = rho_max
            delta_Mn = Mn_req - Rn_max * b * d ** 2
            As_comp = delta_Mn / (fy * (d - d_prime))
            As = rho_max * b * d + As_comp

            steps.append(CalculationStep(
                step_number=step_num,
                description="Additional moment for compression steel (ΔMn)",
                formula="ΔMn = Mu/φ - Rn,max·b·d²",
                substitution=f"= {Mn_req / 1e6:.2f} - {Rn_max * b * d ** 2 / 1e6:.2f}",
                result=round(delta_Mn / 1e6, 2),
                unit="kNm",
                code_reference=""
            ))
            step_num += 1

            steps.append(CalculationStep(
                step_number=step_num,
                description="Compression steel (As')",
                formula="As' = ΔMn / (fy·(d - d'))",
                substitution=f"= {delta_Mn / 1e6:.2f}×10⁶ / ({fy:g} × ({d:.0f} - {d_prime:.0f}))",
                result=round(As_comp, 1),
                unit="mm²",
                code_reference=""
            ))
            step_num += 1

            steps.append(CalculationStep(
                step_number=step_num,
                description="Required tension steel (doubly reinforced)",
                formula="As = ρmax·b·d + As'",
                substitution=f"= {rho_max * b * d:.0f} + {As_comp:.0f}",
                result=round(As, 1),
                unit="mm²",
                code_reference=""
            ))

        else:
            rho = rho_max
            As = max(As_max, As_min)
            clamped = True
            if allow_doubly:
                reason = f"no lever arm for compression steel (d = {d:.0f} mm, d' = {d_prime:.0f} mm)"
            else:
                reason = "compression steel not permitted"
            msg = (f"Rn = {Rn:.3f} MPa exceeds Rn,max = {Rn_max:.3f} MPa and {reason}; "
                   f"tension steel clamped to ρmax")
            logger.warning(msg)
            warnings.append(msg)

            steps.append(CalculationStep(
                step_number=step_num,
                description="Section over-stressed - steel clamped to ρmax",
                formula="As = ρmax·b·d",
                substitution=f"= {rho_max:.5f} × {b:.0f} × {d:.0f}",
                result=round(As, 1),
                unit="mm²",
                code_reference=""
            ))

        return FlexureResult(
            design_moment=Mu_kNm,
            required_nominal_moment=Mn_req / 1e6,
            phi=phi,
            width=b,
            effective_depth=d,
            compression_depth=d_prime,
            beta1=beta1,
            rho_min=rho_min,
            rho_balanced=rho_b,
            rho_max=rho_max,
            Rn=Rn,
            Rn_max=Rn_max,
            rho_required=rho,
            required_ast=As,
            required_asc=As_comp,
            min_ast=As_min,
            max_ast=As_max,
            is_doubly=is_doubly,
            clamped=clamped,
            steps=steps,
            warnings=warnings,
        )
