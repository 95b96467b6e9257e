"""Material properties for member design.

Provides frozen dataclasses and factory functions for concrete and
reinforcing steel properties. Derived values (β1, Ec, fr, reinforcement
ratio bounds) come from the :class:`~rcdesign.codes.base_code.DesignCode`
passed in, ACI 318 by default.

No code-range screening is done here: a 15 MPa concrete is modelled with the
same formulas as a 40 MPa one.
"""

from __future__ import annotations

from dataclasses import dataclass

from rcdesign.codes import ACI318, DesignCode
from rcdesign.exceptions import require_positive
from rcdesign.utils.constants import ES


# ---------------------------------------------------------------------------
# Concrete
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ConcreteProperties:
    """Design properties of a concrete.

    Attributes
    ----------
    fc : float
        Specified compressive strength, MPa.
    beta1 : float
        Equivalent stress-block depth factor.
    Ec : float
        Modulus of elasticity, MPa.
    fr : float
        Modulus of rupture, MPa.
    modular_ratio : float
        ``Es / Ec``.
    """

    fc: float
    beta1: float
    Ec: float
    fr: float
    modular_ratio: float

    @property
    def grade(self) -> str:
        return f"fc{self.fc:g}"


def get_concrete_properties(fc: float, code: DesignCode | None = None) -> ConcreteProperties:
    """Build :class:`ConcreteProperties` for a compressive strength.

    Parameters
    ----------
    fc : float
        Specified compressive strength in **MPa**.
    code : DesignCode, optional
        Code provisions (default ACI 318).

    Raises
    ------
    DesignInputError
        If ``fc`` is not positive.
    """
    require_positive("material.fc", fc)
    code = code or ACI318()
    Ec = code.get_ec(fc)
    return ConcreteProperties(
        fc=fc,
        beta1=code.get_beta1(fc),
        Ec=Ec,
        fr=code.get_modulus_of_rupture(fc),
        modular_ratio=ES / Ec,
    )


# ---------------------------------------------------------------------------
# Steel
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SteelProperties:
    """Design properties of reinforcing steel.

    Attributes
    ----------
    fy : float
        Specified yield strength, MPa.
    Es : float
        Modulus of elasticity, MPa.
    epsilon_y : float
        Yield strain ``fy / Es``.
    """

    fy: float
    Es: float
    epsilon_y: float

    @property
    def grade(self) -> str:
        return f"fy{self.fy:g}"


def get_steel_properties(fy: float) -> SteelProperties:
    """Build :class:`SteelProperties` for a yield strength in **MPa**."""
    require_positive("material.fy", fy)
    return SteelProperties(fy=fy, Es=ES, epsilon_y=fy / ES)


# ---------------------------------------------------------------------------
# Combined
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class MaterialModel:
    """Concrete and steel pair with the flexural ratio bounds they imply.

    Attributes
    ----------
    concrete : ConcreteProperties
    steel : SteelProperties
    rho_min : float
        ``max(1.4/fy, √fc/(4·fy))``.
    rho_balanced : float
        ``0.85·β1·fc/fy · 600/(600 + fy)``.
    rho_max : float
        ``0.75·ρb``.
    """

    concrete: ConcreteProperties
    steel: SteelProperties
    rho_min: float
    rho_balanced: float
    rho_max: float


def get_material_model(fc: float, fy: float, code: DesignCode | None = None) -> MaterialModel:
    """Combine concrete and steel properties with the ratio limits of *code*."""
    code = code or ACI318()
    concrete = get_concrete_properties(fc, code)
    steel = get_steel_properties(fy)
    limits = code.get_ratio_limits(fc, fy)
    return MaterialModel(
        concrete=concrete,
        steel=steel,
        rho_min=limits.rho_min,
        rho_balanced=limits.rho_balanced,
        rho_max=limits.rho_max,
    )
