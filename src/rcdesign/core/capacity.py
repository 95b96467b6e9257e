"""
Capacity verification of the selected reinforcement per ACI 318.

Recomputes strengths from the discrete bar arrangement, not from the
continuous required areas, and compares them with the factored demand.

Key clauses:
- ACI 318 22.2: Flexural strength (Whitney block, strain compatibility)
- ACI 318 21.2.2: Tension-controlled limit (εt ≥ 0.004 for design)
- ACI 318 22.5: Shear strength, Vs ≤ (2/3)√fc·b·d
- ACI 318 22.4: Axial strength of tied columns
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from rcdesign.codes import ACI318, DesignCode
from rcdesign.core.interaction import InteractionDiagram, column_layers, generate_interaction
from rcdesign.exceptions import require_non_negative, require_positive
from rcdesign.models.outputs import CalculationStep, CheckResult, LimitType
from rcdesign.utils.constants import EPSILON_CU, ES

logger = logging.getLogger(__name__)

# Net tensile strain at the tension-controlled design limit
EPSILON_T_LIMIT = 0.004


@dataclass(frozen=True)
class FlexuralCapacity:
    """Nominal and design flexural strength of a section."""
    As: float          # Tension steel (mm²)
    As_comp: float     # Compression steel (mm²)
    c: float           # Neutral axis depth (mm)
    a: float           # Stress block depth (mm)
    fs_comp: float     # Compression steel stress (MPa)
    Mn: float          # kNm
    phi: float
    phi_Mn: float      # kNm
    c_limit: float     # Tension-controlled limit (mm)
    fy: float          # MPa
    steps: List[CalculationStep] = field(default_factory=list)

    @property
    def tension_controlled(self) -> bool:
        return self.c <= self.c_limit * (1 + 1e-9)

    @property
    def compression_steel_yields(self) -> bool:
        return self.As_comp > 0 and self.fs_comp >= self.fy


@dataclass(frozen=True)
class ShearCapacity:
    """Design shear strength of a section (kN)."""
    Vc: float
    Vs: float          # Provided, capped at Vs,max
    Vs_max: float
    phi: float
    phi_Vn: float


@dataclass(frozen=True)
class ColumnCapacity:
    """Column strength from the interaction diagram."""
    diagram: InteractionDiagram
    phi_Pn_max: float   # kN
    phi_Pnt_max: float  # kN, tension magnitude
    phi_Mn: float       # kN.m at Pu


class CapacityVerifier:
    """
    Recomputes member strengths from the selected bars and produces checks.
    """

    def __init__(self, code: DesignCode = None):
        self.code = code or ACI318()

    # ------------------------------------------------------------------
    # Flexure
    # ------------------------------------------------------------------

    def flexural_capacity(
        self,
        width: float,
        effective_depth: float,
        compression_depth: float,
        fc: float,
        fy: float,
        As: float,
        As_comp: float = 0.0,
    ) -> FlexuralCapacity:
        """
        Flexural strength of a rectangular section.

        Compression steel stress follows strain compatibility,
        fs' = min(fy, 600·(c - d')/c); when it does not yield, c is solved
        from the force-equilibrium quadratic.
        """
        require_positive("geometry.width", width)
        require_positive("effective_depth", effective_depth)
        require_non_negative("As", As)
        require_non_negative("As_comp", As_comp)

        b = width
        d = effective_depth
        d_prime = compression_depth
        beta1 = self.code.get_beta1(fc)
        phi = self.code.get_strength_reduction_factors()['flexure']
        c_limit = EPSILON_CU / (EPSILON_CU + EPSILON_T_LIMIT) * d
        steps = []

        if As_comp > 0:
            # Try yielding compression steel first
            c = (As - As_comp) * fy / (0.85 * fc * beta1 * b)
            if c > 0 and ES * EPSILON_CU * (c - d_prime) / c >= fy:
                fs_comp = fy
            else:
                A = 0.85 * fc * beta1 * b
                B = ES * EPSILON_CU * As_comp - As * fy
                C = -ES * EPSILON_CU * As_comp * d_prime
                c = (-B + math.sqrt(B ** 2 - 4 * A * C)) / (2 * A)
                fs_comp = max(ES * EPSILON_CU * (c - d_prime) / c, -fy)
            a = beta1 * c
            Mn = 0.85 * fc * a * b * (d - a / 2) + As_comp * fs_comp * (d - d_prime)

            steps.append(CalculationStep(
                step_number=1,
                description="Neutral axis with compression steel",
                formula="0.85fc·β1·c·b + As'·fs' = As·fy, fs' = min(fy, 600(c-d')/c)",
                substitution=f"c = {c:.1f} mm, fs' = {fs_comp:.0f} MPa",
                result=round(c, 1),
                unit="mm",
                code_reference="ACI 318 22.2.1"
            ))
        else:
            fs_comp = 0.0
            a = As * fy / (0.85 * fc * b)
            c = a / beta1
            Mn = As * fy * (d - a / 2)

            steps.append(CalculationStep(
                step_number=1,
                description="Stress block depth (a)",
                formula="a = As·fy / (0.85·fc·b)",
                substitution=f"= {As:.0f} × {fy:g} / (0.85 × {fc:g} × {b:.0f})",
                result=round(a, 1),
                unit="mm",
                code_reference="ACI 318 22.2.2"
            ))

        Mn_kNm = Mn / 1e6
        steps.append(CalculationStep(
            step_number=2,
            description="Design flexural strength (φMn)",
            formula="φMn = φ·[0.85fc·a·b·(d - a/2) + As'·fs'·(d - d')]",
            substitution=f"= {phi} × {Mn_kNm:.2f}",
            result=round(phi * Mn_kNm, 2),
            unit="kNm",
            code_reference="ACI 318 22.3"
        ))
        steps.append(CalculationStep(
            step_number=3,
            description="Tension-controlled check",
            formula="c ≤ 0.003/(0.003 + 0.004)·d",
            substitution=f"{c:.1f} {'≤' if c <= c_limit else '>'} {c_limit:.1f}",
            result=round(c / d, 3),
            unit="c/d",
            code_reference="ACI 318 21.2.2"
        ))

        return FlexuralCapacity(
            As=As,
            As_comp=As_comp,
            c=c,
            a=a,
            fs_comp=fs_comp,
            Mn=Mn_kNm,
            phi=phi,
            phi_Mn=phi * Mn_kNm,
            c_limit=c_limit,
            fy=fy,
            steps=steps,
        )

    def check_flexure(self, moment: float, capacity: FlexuralCapacity) -> CheckResult:
        """φMn ≥ |Mu| and the section is tension-controlled."""
        if not capacity.tension_controlled:
            logger.debug(
                "Section not tension-controlled: c = %.1f mm > %.1f mm",
                capacity.c, capacity.c_limit,
            )
        return CheckResult.evaluate(
            required=abs(moment),
            provided=capacity.phi_Mn,
            unit="kNm",
            extra_ok=capacity.tension_controlled,
        )

    # ------------------------------------------------------------------
    # Shear
    # ------------------------------------------------------------------

    def shear_capacity(
        self,
        width: float,
        effective_depth: float,
        fc: float,
        fy: float,
        Av: float = 0.0,
        spacing: Optional[float] = None,
        axial: float = 0.0,
        gross_area: Optional[float] = None,
    ) -> ShearCapacity:
        """φ(Vc + Vs) with Vs = Av·fy·d/s capped at (2/3)√fc·b·d."""
        b = width
        d = effective_depth
        lam = getattr(self.code, "LAMBDA", 1.0)
        phi = self.code.get_strength_reduction_factors()['shear']

        factor = 1.0
        if axial > 0 and gross_area:
            factor = 1 + axial * 1000 / (14 * gross_area)
        Vc = factor * lam / 6 * math.sqrt(fc) * b * d / 1000

        Vs_max = 2 / 3 * math.sqrt(fc) * b * d / 1000
        Vs = 0.0
        if Av > 0 and spacing:
            Vs = min(Av * fy * d / spacing / 1000, Vs_max)

        return ShearCapacity(Vc=Vc, Vs=Vs, Vs_max=Vs_max, phi=phi, phi_Vn=phi * (Vc + Vs))

    def check_shear(self, shear: float, capacity: ShearCapacity) -> CheckResult:
        return CheckResult.evaluate(required=abs(shear), provided=capacity.phi_Vn, unit="kN")

    # ------------------------------------------------------------------
    # Reinforcement limits
    # ------------------------------------------------------------------

    def check_reinforcement_limits(
        self,
        provided: float,
        minimum: float,
        maximum: float,
    ) -> Tuple[CheckResult, CheckResult]:
        """Return (minimum check, maximum check) for a provided area in mm²."""
        min_check = CheckResult.evaluate(required=minimum, provided=provided, unit="mm²")
        max_check = CheckResult.evaluate(
            required=maximum, provided=provided, limit_type=LimitType.MAXIMUM, unit="mm²"
        )
        return min_check, max_check

    # ------------------------------------------------------------------
    # Columns
    # ------------------------------------------------------------------

    def column_capacity(
        self,
        width: float,
        height: float,
        edge_distance: float,
        As_total: float,
        n_bars: int,
        fc: float,
        fy: float,
        axial: float,
    ) -> ColumnCapacity:
        """Interaction diagram of the selected bars and φMn at Pu."""
        layers = column_layers(height, edge_distance, As_total, n_bars)
        diagram = generate_interaction(width, height, layers, fc, fy, self.code)
        return ColumnCapacity(
            diagram=diagram,
            phi_Pn_max=diagram.phi_Pn_max,
            phi_Pnt_max=diagram.phi_Pnt_max,
            phi_Mn=diagram.moment_capacity(axial),
        )

    def check_column(
        self,
        axial: float,
        moment: float,
        capacity: ColumnCapacity,
    ) -> Tuple[CheckResult, CheckResult]:
        """Return (axial check, flexural check) against the envelope.

        Compression is checked against ``φPn,max`` and tension (negative
        *axial*) against ``φ·fy·Ast``.
        """
        if axial < 0:
            axial_check = CheckResult.evaluate(
                required=-axial, provided=capacity.phi_Pnt_max, unit="kN"
            )
        else:
            axial_check = CheckResult.evaluate(
                required=axial, provided=capacity.phi_Pn_max, unit="kN"
            )
        flexural_check = CheckResult.evaluate(
            required=abs(moment), provided=capacity.phi_Mn, unit="kNm"
        )
        return axial_check, flexural_check
