# Data models for member design
from .inputs import (
    DesignInput, GeometryInput, MaterialInput, LoadInput, ForceInput,
    DesignConstraints, UnitPrices, ElementKind, ExposureClass
)
from .outputs import (
    DesignResult, DesignChecks, CheckResult, CalculationStep, BarSelection,
    ShearReinforcement, DevelopmentLengths, Reinforcement, CostEstimate,
    CostBreakdown, ElementInfo, DesignStatus, LimitType, BarLayout
)
