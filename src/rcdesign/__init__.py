"""Reinforced concrete member design per ACI 318 (SI units)."""

from rcdesign.core.design import DesignEngine, design
from rcdesign.batch import design_many, format_summary, summarise_results
from rcdesign.exceptions import DesignInputError, RCDesignError
from rcdesign.models import DesignInput, DesignResult

__version__ = "0.1.0"

__all__ = [
    "DesignEngine",
    "DesignInput",
    "DesignInputError",
    "DesignResult",
    "RCDesignError",
    "design",
    "design_many",
    "format_summary",
    "summarise_results",
]
