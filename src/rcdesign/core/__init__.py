# Core calculation engine
from .design import DesignEngine, design
from .flexure import FlexureDesigner
from .shear import ShearDesigner
from .reinforcement import ReinforcementSelector
from .capacity import CapacityVerifier
from .serviceability import ServiceabilityChecker
from .cost import estimate_cost
