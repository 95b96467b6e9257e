"""
Engineering constants for RC member design.

Tables are built once at import time and are read-only; they are shared by
every design call.
"""

import math
from types import MappingProxyType

# Standard main bar sizes in mm (ascending)
MAIN_BAR_SIZES = (10, 12, 16, 19, 22, 25, 29, 32)

# Column longitudinal bars start at 16 mm
COLUMN_BAR_SIZES = (16, 19, 22, 25, 29, 32)

# Slab bars in mm
SLAB_BAR_SIZES = (10, 12, 16)

# Slab distribution (shrinkage and temperature) bars in mm
DISTRIBUTION_BAR_SIZES = (8, 10)

# Stirrup / tie bar sizes in mm
STIRRUP_BAR_SIZES = (8, 10, 12, 16)

# Standard bar areas (mm²)
BAR_AREAS = MappingProxyType({
    dia: round(math.pi * dia ** 2 / 4, 2)
    for dia in sorted(set(MAIN_BAR_SIZES + STIRRUP_BAR_SIZES))
})

# Modulus of elasticity of steel (MPa)
ES = 200000

# Ultimate concrete compressive strain
EPSILON_CU = 0.003

# Steel density (kg/m³)
STEEL_DENSITY = 7850.0

# Width of the design strip for one-way slabs (mm)
SLAB_STRIP_WIDTH = 1000.0

# Practical bar-count range for primary steel
BEAM_BAR_COUNT = (2, 12)
COLUMN_BAR_COUNT = (4, 20)

# Spacing module stirrups and slab bars are rounded down to (mm)
SPACING_MODULE = 25

# Exposure classes, mild -> extreme
EXPOSURE_CLASSES = (
    "mild",
    "moderate",
    "severe",
    "very_severe",
    "extreme",
)

# Default unit prices (IDR)
DEFAULT_PRICES = MappingProxyType({
    "concrete_standard": 950000,  # per m³, fc < 35 MPa
    "concrete_high": 1050000,     # per m³, fc >= 35 MPa
    "steel": 16800,               # per kg
    "formwork": 120000,           # per m²
    "labor_concrete": 280000,     # per m³
    "labor_steel": 8500,          # per kg
    "overhead_factor": 1.18,
})
