# Design code provisions
from .base_code import DesignCode, CoverRequirements, RatioLimits
from .aci318 import ACI318
