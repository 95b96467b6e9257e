"""
Discrete reinforcement selection.

Maps a continuous required steel area to a constructible bar arrangement by
enumerating the standard catalog and scoring each feasible (diameter, count)
pair with a cost proxy: steel cost plus a placement penalty per bar. Ties go
to the smaller diameter.
"""

import logging
import math
from typing import Optional, Sequence, Tuple

from rcdesign.exceptions import require_non_negative, require_positive
from rcdesign.models.outputs import BarLayout, BarSelection
from rcdesign.core.shear import round_down_spacing
from rcdesign.utils.constants import (
    BAR_AREAS,
    BEAM_BAR_COUNT,
    COLUMN_BAR_COUNT,
    COLUMN_BAR_SIZES,
    MAIN_BAR_SIZES,
    SLAB_BAR_SIZES,
)

logger = logging.getLogger(__name__)

# Cost proxy coefficients
STEEL_COST_PER_MM2 = 0.0078 * 16500  # per bar-mm² over a unit length
PLACEMENT_COST_PER_BAR = 0.1 * 50000

# Slab bar spacing bounds (mm)
SLAB_MIN_SPACING = 75
SLAB_MAX_SPACING = 450

# Column bars: one bar per 150 mm of perimeter
COLUMN_PERIMETER_PER_BAR = 150


def bar_layout(count: int) -> BarLayout:
    """Drawing hint from the bar count."""
    if count <= 4:
        return BarLayout.SINGLE_ROW
    elif count <= 8:
        return BarLayout.DOUBLE_ROW
    return BarLayout.MULTI_ROW


def selection_cost(diameter: int, count: float) -> float:
    """Cost proxy of *count* bars of *diameter*."""
    return count * BAR_AREAS[diameter] * STEEL_COST_PER_MM2 + count * PLACEMENT_COST_PER_BAR


class ReinforcementSelector:
    """
    Cost-aware bar selection over the standard catalog.

    The search is a full enumeration of the catalog and is deterministic.
    """

    def select_bars(
        self,
        required_area: float,
        catalog: Sequence[int] = MAIN_BAR_SIZES,
        count_range: Tuple[int, int] = BEAM_BAR_COUNT,
    ) -> BarSelection:
        """
        Cheapest bar group with ``count × area ≥ required_area``.

        Args:
            required_area: Required steel area in mm²
            catalog: Candidate diameters in mm, ascending
            count_range: Inclusive (min, max) practical bar count

        Returns:
            BarSelection; ``within_range`` is False when no candidate fits
            the count range and the largest bar was used instead
        """
        require_non_negative("required_area", required_area)
        min_count, max_count = count_range

        best = None
        for dia in catalog:
            bar_area = BAR_AREAS[dia]
            count = max(math.ceil(required_area / bar_area), min_count)
            if count > max_count:
                continue
            score = selection_cost(dia, count)
            # Strict comparison keeps the smaller diameter on ties
            if best is None or score < best[0]:
                best = (score, dia, count)

        if best is not None:
            _, dia, count = best
            within_range = True
        else:
            dia = catalog[-1]
            count = max(math.ceil(required_area / BAR_AREAS[dia]), min_count)
            within_range = False
            logger.warning(
                "No bar arrangement within %d-%d bars for As = %.0f mm²; using %dD%d",
                min_count, max_count, required_area, count, dia,
            )

        bar_area = BAR_AREAS[dia]
        return BarSelection(
            diameter=dia,
            count=count,
            bar_area=bar_area,
            provided_area=count * bar_area,
            required_area=required_area,
            layout=bar_layout(count),
            within_range=within_range,
        )

    def select_column_bars(self, required_area: float, perimeter: float) -> BarSelection:
        """Column bars: at least one bar per 150 mm of perimeter, 4 to 20 bars."""
        require_positive("perimeter", perimeter)
        lo, hi = COLUMN_BAR_COUNT
        min_count = min(max(lo, math.ceil(perimeter / COLUMN_PERIMETER_PER_BAR)), hi)
        return self.select_bars(required_area, COLUMN_BAR_SIZES, (min_count, hi))

    def select_slab_bars(
        self,
        required_area: float,
        thickness: float,
        catalog: Sequence[int] = SLAB_BAR_SIZES,
        max_spacing: Optional[float] = None,
    ) -> BarSelection:
        """
        Bar diameter and spacing for a one-metre slab strip.

        Args:
            required_area: Required steel area per metre in mm²
            thickness: Slab thickness h in mm
            catalog: Candidate diameters in mm
            max_spacing: Spacing cap, default min(3h, 450)

        Returns:
            BarSelection with ``spacing`` set and ``count`` as bars per metre
        """
        require_non_negative("required_area", required_area)
        require_positive("geometry.height", thickness)
        if max_spacing is None:
            max_spacing = min(3 * thickness, SLAB_MAX_SPACING)

        best = None
        for dia in catalog:
            bar_area = BAR_AREAS[dia]
            s_req = bar_area * 1000 / required_area if required_area > 0 else math.inf
            spacing = round_down_spacing(min(s_req, max_spacing))
            if spacing < SLAB_MIN_SPACING:
                continue
            score = selection_cost(dia, 1000 / spacing)
            if best is None or score < best[0]:
                best = (score, dia, spacing)

        if best is not None:
            _, dia, spacing = best
            within_range = True
        else:
            dia = catalog[-1]
            bar_area = BAR_AREAS[dia]
            s_req = bar_area * 1000 / required_area if required_area > 0 else math.inf
            spacing = round_down_spacing(min(s_req, max_spacing))
            within_range = False
            logger.warning(
                "No slab bar spacing within %d-%.0f mm for As = %.0f mm²/m; using D%d@%.0f",
                SLAB_MIN_SPACING, max_spacing, required_area, dia, spacing,
            )

        bar_area = BAR_AREAS[dia]
        count = math.ceil(1000 / spacing)
        return BarSelection(
            diameter=dia,
            count=count,
            bar_area=bar_area,
            provided_area=bar_area * 1000 / spacing,
            required_area=required_area,
            layout=BarLayout.SINGLE_ROW,
            spacing=spacing,
            within_range=within_range,
        )
