"""
ACI 318 code provisions for reinforced concrete member design (SI units).

Key clauses implemented:
- 20.6.1: Cover for cast-in-place members
- 21.2: Strength reduction factors
- 22.2.2.4.3: Stress-block factor β1
- 9.6.1.2: Minimum flexural reinforcement
- 9.6.3.4: Minimum shear reinforcement
- 19.2.2 / 19.2.3: Ec and modulus of rupture
- 25.4: Development lengths
"""

import math
from typing import Dict

from .base_code import DesignCode, CoverRequirements, RatioLimits


class ACI318(DesignCode):
    """
    ACI 318 - Building Code Requirements for Structural Concrete.

    Flexural ratio limits follow the balanced-ratio formulation
    (ρmax = 0.75 ρb) used throughout this engine.
    """

    # Nominal cover (mm) and minimum concrete strength by exposure
    COVER_TABLE = {
        'mild': {'cover': 20, 'min_fc': 17},
        'moderate': {'cover': 40, 'min_fc': 25},
        'severe': {'cover': 50, 'min_fc': 30},
        'very_severe': {'cover': 50, 'min_fc': 35},
        'extreme': {'cover': 75, 'min_fc': 40},
    }

    PHI = {
        'flexure': 0.90,
        'shear': 0.75,
        'compression_tied': 0.65,
        'compression_spiral': 0.75,
        'torsion': 0.75,
    }

    LAMBDA = 1.0  # Normal-weight concrete
    BALANCED_FRACTION = 0.75  # ρmax / ρb

    @property
    def code_name(self) -> str:
        return "ACI 318"

    def get_strength_reduction_factors(self) -> Dict[str, float]:
        return dict(self.PHI)

    def get_beta1(self, fc: float) -> float:
        """
        Stress-block depth factor per 22.2.2.4.3.

        0.85 up to 28 MPa, linear down to 0.65 at 55 MPa, 0.65 above.
        """
        if fc <= 28:
            return 0.85
        elif fc <= 55:
            return 0.85 - 0.20 * (fc - 28) / 27
        else:
            return 0.65

    def get_ratio_limits(self, fc: float, fy: float) -> RatioLimits:
        beta1 = self.get_beta1(fc)
        rho_b = 0.85 * beta1 * fc / fy * (600 / (600 + fy))
        rho_min = max(1.4 / fy, math.sqrt(fc) / (4 * fy))
        return RatioLimits(
            rho_min=rho_min,
            rho_balanced=rho_b,
            rho_max=self.BALANCED_FRACTION * rho_b,
        )

    def get_ec(self, fc: float) -> float:
        return 4700 * math.sqrt(fc)

    def get_modulus_of_rupture(self, fc: float) -> float:
        return 0.62 * self.LAMBDA * math.sqrt(fc)

    def get_minimum_shear_reinforcement(self, fc: float, fy: float, width: float) -> float:
        """Av,min/s = max(0.062√fc·b/fy, 0.35·b/fy) per 9.6.3.4."""
        return max(0.062 * math.sqrt(fc) * width / fy, 0.35 * width / fy)

    def get_minimum_cover(self, exposure_class: str) -> CoverRequirements:
        """Return nominal cover; unknown classes fall back to 'moderate'."""
        row = self.COVER_TABLE.get(exposure_class, self.COVER_TABLE['moderate'])
        return CoverRequirements(
            nominal_cover=row['cover'],
            exposure_class=exposure_class,
            min_fc=row['min_fc'],
        )

    def get_development_lengths(self, bar_dia: float, fc: float, fy: float) -> Dict[str, float]:
        """
        Simplified development lengths per 25.4 (uncoated bottom bars).

        - Tension: fy·ψt·ψe/(2.1λ√fc)·db for db ≤ 19, /(1.7λ√fc) above, ≥ 300
        - Compression: max(0.24fy/(λ√fc)·db, 0.043fy·db, 200)
        - Standard hook: max(0.24ψe·fy/(λ√fc)·db, 8db, 150)
        - Class B tension splice: 1.3·ld
        """
        psi_t = 1.0
        psi_e = 1.0
        sqrt_fc = math.sqrt(fc)
        lam = self.LAMBDA

        divisor = 2.1 if bar_dia <= 19 else 1.7
        ld = fy * psi_t * psi_e / (divisor * lam * sqrt_fc) * bar_dia
        ld = max(ld, 300)

        ldc = max(0.24 * fy / (lam * sqrt_fc) * bar_dia, 0.043 * fy * bar_dia, 200)
        ldh = max(0.24 * psi_e * fy / (lam * sqrt_fc) * bar_dia, 8 * bar_dia, 150)

        return {
            'tension': round(ld),
            'compression': round(ldc),
            'hook': round(ldh),
            'splice': round(1.3 * ld),
        }

    def get_torsion_threshold(self, fc: float, acp: float, pcp: float) -> float:
        """Threshold torsion φ·0.083λ√fc·Acp²/pcp in N·mm (22.7.4)."""
        return self.PHI['torsion'] * 0.083 * self.LAMBDA * math.sqrt(fc) * acp ** 2 / pcp
