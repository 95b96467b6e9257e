"""
Abstract base class for design code provisions.
Keeps the calculation modules independent of a particular code edition.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class CoverRequirements:
    """Minimum cover requirements based on exposure."""
    nominal_cover: float  # mm
    exposure_class: str
    min_fc: float  # Minimum concrete strength (MPa)


@dataclass(frozen=True)
class RatioLimits:
    """Reinforcement ratio bounds for a flexural section."""
    rho_min: float
    rho_balanced: float
    rho_max: float


class DesignCode(ABC):
    """
    Abstract base class for structural design codes.

    Purpose:
    - Define interface for code-specific provisions
    - Centralize code clause references
    """

    @property
    @abstractmethod
    def code_name(self) -> str:
        """Return the code name/version."""
        pass

    @abstractmethod
    def get_strength_reduction_factors(self) -> Dict[str, float]:
        """Return strength reduction factors (φ) by action."""
        pass

    @abstractmethod
    def get_beta1(self, fc: float) -> float:
        """Return the stress-block depth factor β1."""
        pass

    @abstractmethod
    def get_ratio_limits(self, fc: float, fy: float) -> RatioLimits:
        """Return minimum, balanced and maximum tension reinforcement ratios."""
        pass

    @abstractmethod
    def get_ec(self, fc: float) -> float:
        """Return the concrete modulus of elasticity (MPa)."""
        pass

    @abstractmethod
    def get_modulus_of_rupture(self, fc: float) -> float:
        """Return the modulus of rupture fr (MPa)."""
        pass

    @abstractmethod
    def get_minimum_shear_reinforcement(self, fc: float, fy: float, width: float) -> float:
        """Return minimum Av/s (mm²/mm)."""
        pass

    @abstractmethod
    def get_minimum_cover(self, exposure_class: str) -> CoverRequirements:
        """Return minimum cover requirement for exposure condition."""
        pass

    @abstractmethod
    def get_development_lengths(self, bar_dia: float, fc: float, fy: float) -> Dict[str, float]:
        """Return tension, compression, hook and splice lengths (mm)."""
        pass
