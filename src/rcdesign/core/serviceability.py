"""
Serviceability checks per ACI 318.

Implements:
- Immediate deflection with the effective moment of inertia (Branson)
- Crack width from the Gergely-Lutz expression

Key clauses:
- ACI 318 24.2.3.5: Effective moment of inertia Ie
- ACI 318 24.2.2: Deflection limits (span/360 live load)
- ACI 224R: Crack width estimate
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Optional

from rcdesign.codes import ACI318, DesignCode
from rcdesign.exceptions import require_non_negative, require_positive
from rcdesign.models.outputs import CalculationStep, CheckResult, LimitType
from rcdesign.utils.constants import ES

logger = logging.getLogger(__name__)

# Service steel stress as a fraction of fy
SERVICE_STRESS_FACTOR = 0.6

# Ratio of distances to the neutral axis from the extreme fibre and the steel
CRACK_BETA = 1.0


@dataclass(frozen=True)
class DeflectionResult:
    """Result from the deflection check."""
    check: CheckResult
    evaluated: bool

    # Section properties
    gross_mi: float        # Ig (mm⁴)
    cracked_mi: float      # Icr (mm⁴)
    effective_mi: float    # Ie (mm⁴)
    neutral_axis_factor: float  # k
    cracking_moment: float  # Mcr (kNm)
    service_moment: float  # Ma (kNm)

    # Deflection
    calculated: float      # mm
    allowable: float       # span / N (mm)

    steps: List[CalculationStep] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CrackWidthResult:
    """Result from the crack width check."""
    check: CheckResult
    steel_stress: float    # fs (MPa)
    cover_to_centre: float  # dc (mm)
    tension_area: float    # A per bar (mm²)
    calculated: float      # w (mm)
    allowable: float       # mm
    steps: List[CalculationStep] = field(default_factory=list)


class ServiceabilityChecker:
    """
    Serviceability checks per ACI 318.

    Both checks are monotonic: more tension steel never increases the
    computed deflection or crack width.
    """

    def __init__(self, code: DesignCode = None):
        self.code = code or ACI318()

    def cracked_section(
        self,
        width: float,
        effective_depth: float,
        As: float,
        modular_ratio: float,
    ) -> tuple:
        """
        Transformed cracked section of a singly reinforced rectangle.

        Returns:
            (k, Icr) with k = √(2ρn + (ρn)²) - ρn and
            Icr = b·(kd)³/3 + n·As·(d - kd)²
        """
        b = width
        d = effective_depth
        rho_n = As / (b * d) * modular_ratio
        k = math.sqrt(2 * rho_n + rho_n ** 2) - rho_n
        kd = k * d
        Icr = b * kd ** 3 / 3 + modular_ratio * As * (d - kd) ** 2
        return k, Icr

    def check_deflection(
        self,
        width: float,            # b (mm)
        height: float,           # h (mm)
        effective_depth: float,  # d (mm)
        fc: float,               # MPa
        As: float,               # Tension steel provided (mm²)
        span: Optional[float],   # mm
        limit: float = 360,      # Allowable deflection = span / limit
        moment: float = 0.0,     # |Mu| fallback service moment (kNm)
        dead_load: float = 0.0,  # Unfactored line loads (kN/m)
        live_load: float = 0.0,
    ) -> DeflectionResult:
        """
        Check immediate deflection of a simply supported member.

        The service moment is (D + L)·span²/8 when line loads are given,
        otherwise |Mu|. With loads, the live-load deflection is compared with
        the limit; without, the total service deflection is.

        Returns:
            DeflectionResult; not evaluated (and passing) without a span
        """
        require_positive("geometry.width", width)
        require_positive("geometry.height", height)
        require_positive("effective_depth", effective_depth)
        require_positive("deflection_limit", limit)
        require_non_negative("loads.dead", dead_load)
        require_non_negative("loads.live", live_load)

        steps = []
        warnings = []
        step_num = 1

        b = width
        h = height
        d = effective_depth

        Ec = self.code.get_ec(fc)
        n = ES / Ec
        fr = self.code.get_modulus_of_rupture(fc)

        Ig = b * h ** 3 / 12
        yt = h / 2
        Mcr = fr * Ig / yt / 1e6  # kNm

        steps.append(CalculationStep(
            step_number=step_num,
            description="Cracking moment (Mcr)",
            formula="Mcr = fr·Ig/yt, fr = 0.62λ√fc",
            substitution=f"= {fr:.3f} × {Ig:.3e} / {yt:.0f}",
            result=round(Mcr, 2),
            unit="kNm",
            code_reference="ACI 318 24.2.3.5"
        ))
        step_num += 1

        k, Icr = self.cracked_section(b, d, As, n)

        steps.append(CalculationStep(
            step_number=step_num,
            description="Cracked moment of inertia (Icr)",
            formula="Icr = b(kd)³/3 + n·As·(d - kd)²",
            substitution=f"k = {k:.4f}, n = {n:.2f}",
            result=round(Icr, 0),
            unit="mm⁴",
            code_reference=""
        ))
        step_num += 1

        if not span:
            msg = "No span given; deflection check not evaluated"
            logger.info(msg)
            warnings.append(msg)
            return DeflectionResult(
                check=CheckResult.not_applicable(unit="mm"),
                evaluated=False,
                gross_mi=Ig,
                cracked_mi=Icr,
                effective_mi=Ig,
                neutral_axis_factor=k,
                cracking_moment=Mcr,
                service_moment=abs(moment),
                calculated=0.0,
                allowable=0.0,
                steps=steps,
                warnings=warnings,
            )

        L = span
        has_loads = dead_load + live_load > 0
        if has_loads:
            Ma = (dead_load + live_load) * L ** 2 / 8 / 1e6  # kN/m × mm² -> kNm
            M_defl = live_load * L ** 2 / 8 / 1e6
        else:
            Ma = abs(moment)
            M_defl = Ma

        if Ma > Mcr:
            Ie = min(Icr + (Ig - Icr) * (Mcr / Ma) ** 3, Ig)
        else:
            Ie = Ig

        steps.append(CalculationStep(
            step_number=step_num,
            description="Effective moment of inertia (Ie)",
            formula="Ie = Icr + (Ig - Icr)(Mcr/Ma)³ ≤ Ig",
            substitution=f"Ma = {Ma:.2f} kNm, Mcr = {Mcr:.2f} kNm",
            result=round(Ie, 0),
            unit="mm⁴",
            code_reference="ACI 318 24.2.3.5"
        ))
        step_num += 1

        delta = 5 * M_defl * 1e6 * L ** 2 / (48 * Ec * Ie)
        allowable = L / limit

        steps.append(CalculationStep(
            step_number=step_num,
            description="Live-load deflection" if has_loads else "Service deflection",
            formula="δ = 5·M·L² / (48·Ec·Ie)",
            substitution=f"= 5 × {M_defl:.2f}×10⁶ × {L:.0f}² / (48 × {Ec:.0f} × {Ie:.3e})",
            result=round(delta, 2),
            unit="mm",
            code_reference=""
        ))
        step_num += 1

        steps.append(CalculationStep(
            step_number=step_num,
            description="Allowable deflection",
            formula=f"δallow = L/{limit:g}",
            substitution=f"= {L:.0f}/{limit:g}",
            result=round(allowable, 2),
            unit="mm",
            code_reference="ACI 318 Table 24.2.2"
        ))

        return DeflectionResult(
            check=CheckResult.evaluate(
                required=allowable,
                provided=delta,
                limit_type=LimitType.MAXIMUM,
                unit="mm",
            ),
            evaluated=True,
            gross_mi=Ig,
            cracked_mi=Icr,
            effective_mi=Ie,
            neutral_axis_factor=k,
            cracking_moment=Mcr,
            service_moment=Ma,
            calculated=delta,
            allowable=allowable,
            steps=steps,
            warnings=warnings,
        )

    def check_crack_width(
        self,
        width: float,            # b (mm)
        cover_to_centre: float,  # dc (mm)
        bar_count: float,        # bars in the tension zone (per metre for slabs)
        fy: float,               # MPa
        limit: float = 0.33,     # mm
    ) -> CrackWidthResult:
        """
        Estimate the surface crack width.

        w = 2.2·β·(fs/Es)·∛(dc·A) with fs = 0.6·fy and A = 2·dc·b/n,
        i.e. 11×10⁻⁶·β·fs·∛(dc·A) at Es = 200 GPa.
        """
        require_positive("geometry.width", width)
        require_positive("cover_to_centre", cover_to_centre)
        require_positive("bar_count", bar_count)

        dc = cover_to_centre
        fs = SERVICE_STRESS_FACTOR * fy
        A = 2 * dc * width / bar_count
        w = 2.2 * CRACK_BETA * (fs / ES) * (dc * A) ** (1 / 3)

        step = CalculationStep(
            step_number=1,
            description="Crack width (w)",
            formula="w = 2.2·β·(fs/Es)·∛(dc·A), fs = 0.6fy, A = 2·dc·b/n",
            substitution=f"= 2.2 × {CRACK_BETA} × ({fs:.0f}/{ES}) × ∛({dc:.1f} × {A:.0f})",
            result=round(w, 3),
            unit="mm",
            code_reference="ACI 224R"
        )

        return CrackWidthResult(
            check=CheckResult.evaluate(
                required=limit,
                provided=w,
                limit_type=LimitType.MAXIMUM,
                unit="mm",
            ),
            steel_stress=fs,
            cover_to_centre=dc,
            tension_area=A,
            calculated=w,
            allowable=limit,
            steps=[step],
        )
