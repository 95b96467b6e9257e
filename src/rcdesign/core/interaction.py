"""P-M interaction diagrams for rectangular tied columns per ACI 318.

Traces the design interaction envelope ``(φPn, φMn)`` of a rectangular
section with three bar layers (compression face, mid-depth and tension face)
using the Whitney stress block and strain compatibility.

Key references
--------------
* ACI 318 22.2 -- Whitney block ``0.85·fc'`` over ``a = β1·c``,
  ``εcu = 0.003``.
* ACI 318 21.2.2 -- ``φ`` from 0.65 (compression-controlled, ``εt ≤ εy``)
  to 0.90 (tension-controlled, ``εt ≥ 0.005``), linear in between.
* ACI 318 22.4.2.1 -- ``Pn,max = 0.80·P0`` for tied columns.

Units convention
----------------
Dimensions in **mm**, stresses in **MPa**. Forces are returned in **kN** and
moments in **kN.m**. Compression is positive.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from rcdesign.codes import ACI318, DesignCode
from rcdesign.exceptions import require_non_negative, require_positive
from rcdesign.utils.constants import EPSILON_CU, ES

# Number of neutral-axis positions used to trace the curve
_N_POINTS: int = 120

# Tension-controlled strain limit
_EPSILON_TC: float = 0.005

# Tied column axial cap factor
_AXIAL_CAP: float = 0.80


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class BarLayers:
    """Steel layers of a column section.

    Attributes
    ----------
    depths : tuple[float, ...]
        Layer depths from the compression face, mm.
    areas : tuple[float, ...]
        Steel area of each layer, mm².
    """

    depths: tuple[float, ...]
    areas: tuple[float, ...]

    @property
    def total_area(self) -> float:
        return float(sum(self.areas))


@dataclass(frozen=True)
class InteractionDiagram:
    """Design interaction envelope of a column section.

    Attributes
    ----------
    P : np.ndarray
        Design axial strengths ``φPn`` in kN, ascending.
    M : np.ndarray
        Matching design moments ``φMn`` in kN.m.
    P0 : float
        Nominal squash load ``0.85·fc'·(Ag − Ast) + fy·Ast``, kN.
    phi_Pn_max : float
        Axial cap ``0.80·φ·P0``, kN.
    phi_Pnt_max : float
        Design tension strength ``φ·fy·Ast`` as a positive magnitude, kN.
    As_total : float
        Total longitudinal steel, mm².
    """

    P: np.ndarray
    M: np.ndarray
    P0: float
    phi_Pn_max: float
    phi_Pnt_max: float
    As_total: float

    def moment_capacity(self, Pu: float) -> float:
        """Design moment ``φMn`` (kN.m) available at axial load *Pu* (kN).

        Returns 0 when *Pu* lies outside the axial range of the diagram.
        """
        if Pu > self.phi_Pn_max or Pu < -self.phi_Pnt_max:
            return 0.0
        return float(np.interp(Pu, self.P, self.M))

    def contains(self, Pu: float, Mu: float) -> bool:
        """True when the demand ``(Pu, |Mu|)`` lies inside the envelope.

        *Pu* is signed: tension beyond ``φ·fy·Ast`` is outside even at zero
        moment.
        """
        if not -self.phi_Pnt_max <= Pu <= self.phi_Pn_max:
            return False
        return abs(Mu) <= self.moment_capacity(Pu)


# ---------------------------------------------------------------------------
# Layout helpers
# ---------------------------------------------------------------------------

def face_bar_count(n_bars: int) -> int:
    """Bars on each of the two faces; the remainder sits at mid-depth."""
    return max(2, n_bars // 4 + 1)


def column_layers(
    height: float,
    edge_distance: float,
    As_total: float,
    n_bars: int,
) -> BarLayers:
    """Distribute *As_total* over three layers for *n_bars* equal bars.

    Parameters
    ----------
    height : float
        Section depth in the bending direction, mm.
    edge_distance : float
        Distance from each face to the centre of the face bars, mm.
    As_total : float
        Total steel area, mm².
    n_bars : int
        Number of bars (at least 4).
    """
    n_face = face_bar_count(n_bars)
    n_mid = max(n_bars - 2 * n_face, 0)
    n_total = 2 * n_face + n_mid
    per_bar = As_total / n_total
    return BarLayers(
        depths=(edge_distance, height / 2, height - edge_distance),
        areas=(n_face * per_bar, n_mid * per_bar, n_face * per_bar),
    )


def strength_reduction_factor(
    epsilon_t: np.ndarray,
    epsilon_y: float,
    phi_compression: float = 0.65,
    phi_tension: float = 0.90,
) -> np.ndarray:
    """``φ`` by net tensile strain, linear between ``εy`` and 0.005."""
    frac = (epsilon_t - epsilon_y) / (_EPSILON_TC - epsilon_y)
    return phi_compression + (phi_tension - phi_compression) * np.clip(frac, 0.0, 1.0)


# ---------------------------------------------------------------------------
# Diagram generation
# ---------------------------------------------------------------------------

def generate_interaction(
    width: float,
    height: float,
    layers: BarLayers,
    fc: float,
    fy: float,
    code: DesignCode | None = None,
    n_points: int = _N_POINTS,
) -> InteractionDiagram:
    """Generate the design P-M envelope of a rectangular tied section.

    The neutral axis depth ``c`` is swept from a small fraction of the depth
    (near pure bending) to well below the section (near pure compression).
    The pure tension and pure compression points close the curve.

    Parameters
    ----------
    width, height : float
        Section dimensions, mm; bending about the axis parallel to ``width``.
    layers : BarLayers
        Steel layers.
    fc, fy : float
        Material strengths, MPa.
    code : DesignCode, optional
        Code provisions (default ACI 318).

    Returns
    -------
    InteractionDiagram
    """
    require_positive("geometry.width", width)
    require_positive("geometry.height", height)
    require_non_negative("As_total", layers.total_area)
    code = code or ACI318()

    phi_factors = code.get_strength_reduction_factors()
    phi_c = phi_factors['compression_tied']
    phi_t = phi_factors['flexure']
    beta1 = code.get_beta1(fc)
    epsilon_y = fy / ES

    b = width
    h = height
    y_c = h / 2
    d_i = np.asarray(layers.depths, dtype=float)
    A_i = np.asarray(layers.areas, dtype=float)
    As_total = float(A_i.sum())
    d_t = float(d_i.max())

    # c along rows, layers along columns
    c = np.linspace(0.05 * h, 3.0 * h, n_points)[:, None]
    a = np.minimum(beta1 * c, h)

    Cc = 0.85 * fc * a * b
    eps = EPSILON_CU * (c - d_i) / c
    fs = np.clip(eps * ES, -fy, fy)
    # Steel inside the stress block displaces concrete
    fs = np.where(d_i < a, fs - 0.85 * fc, fs)
    Fs = fs * A_i

    Pn = (Cc[:, 0] + Fs.sum(axis=1)) / 1000
    Mn = (Cc[:, 0] * (y_c - a[:, 0] / 2) + (Fs * (y_c - d_i)).sum(axis=1)) / 1e6

    eps_t = EPSILON_CU * (d_t - c[:, 0]) / c[:, 0]
    phi = strength_reduction_factor(eps_t, epsilon_y, phi_c, phi_t)

    P0 = (0.85 * fc * (b * h - As_total) + fy * As_total) / 1000
    P_tension = -phi_t * fy * As_total / 1000

    P = np.concatenate(([P_tension], phi * Pn, [phi_c * P0]))
    M = np.concatenate(([0.0], np.abs(phi * Mn), [0.0]))

    order = np.argsort(P, kind="stable")
    return InteractionDiagram(
        P=P[order],
        M=M[order],
        P0=P0,
        phi_Pn_max=_AXIAL_CAP * phi_c * P0,
        phi_Pnt_max=-P_tension,
        As_total=As_total,
    )


def required_column_steel(
    width: float,
    height: float,
    edge_distance: float,
    n_bars: int,
    Pu: float,
    Mu: float,
    fc: float,
    fy: float,
    rho_min: float = 0.01,
    rho_max: float = 0.06,
    code: DesignCode | None = None,
    tolerance: float = 1.0,
) -> tuple[float, bool]:
    """Smallest steel area whose envelope contains ``(Pu, Mu)``.

    Bisection on the total area between ``rho_min·Ag`` and ``rho_max·Ag``.

    Returns
    -------
    tuple[float, bool]
        ``(As_required, found)``. ``found`` is False when even ``rho_max``
        is not enough; the area is then ``rho_max·Ag``.
    """
    Ag = width * height

    def fits(As: float) -> bool:
        layers = column_layers(height, edge_distance, As, n_bars)
        return generate_interaction(width, height, layers, fc, fy, code).contains(Pu, Mu)

    lo = rho_min * Ag
    hi = rho_max * Ag
    if fits(lo):
        return lo, True
    if not fits(hi):
        return hi, False

    iterations = max(1, math.ceil(math.log2((hi - lo) / tolerance)))
    for _ in range(iterations):
        mid = (lo + hi) / 2
        if fits(mid):
            hi = mid
        else:
            lo = mid
    return hi, True
