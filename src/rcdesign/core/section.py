"""Rectangular section geometry for beams, columns and slab strips.

The element kind decides how the section is modelled:

* **beam** -- ``b × h`` section, 10 mm stirrups, 16 mm main bars assumed
  for the effective depth.
* **column** -- ``b × h`` section bent about the ``h`` direction, 10 mm ties,
  20 mm bars assumed.
* **slab** -- one-metre design strip of thickness ``h``, no stirrups,
  10 mm bars assumed.

Verification later replaces the assumed bar by the selected one through
:meth:`SectionGeometry.with_bar`.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from rcdesign.exceptions import DesignInputError, require_non_negative, require_positive
from rcdesign.models.inputs import ElementKind, GeometryInput
from rcdesign.utils.constants import SLAB_STRIP_WIDTH

# Assumed bar diameters (mm) used before bars are selected
_ASSUMED_BARS = {
    ElementKind.BEAM: {"main": 16, "stirrup": 10},
    ElementKind.COLUMN: {"main": 20, "stirrup": 10},
    ElementKind.SLAB: {"main": 10, "stirrup": 0},
}


@dataclass(frozen=True)
class SectionGeometry:
    """Resolved rectangular section, all lengths in mm.

    Attributes
    ----------
    kind : ElementKind
        Element classification.
    width : float
        Design width ``b`` (1000 for slab strips).
    height : float
        Overall depth ``h``.
    cover : float
        Clear cover to the outermost steel.
    span : float or None
        Span or member length.
    main_bar : float
        Main bar diameter used for ``d`` and ``d'``.
    stirrup_bar : float
        Stirrup or tie diameter (0 for slabs).
    """

    kind: ElementKind
    width: float
    height: float
    cover: float
    span: float | None
    main_bar: float
    stirrup_bar: float

    @property
    def effective_depth(self) -> float:
        """``d = h - cover - stirrup - db/2``."""
        return self.height - self.cover - self.stirrup_bar - self.main_bar / 2

    @property
    def compression_depth(self) -> float:
        """``d' = cover + stirrup + db/2``."""
        return self.cover + self.stirrup_bar + self.main_bar / 2

    @property
    def cover_to_bar_centre(self) -> float:
        """``dc``, extreme tension fibre to the centre of the nearest bar."""
        return self.compression_depth

    @property
    def gross_area(self) -> float:
        return self.width * self.height

    @property
    def perimeter(self) -> float:
        return 2 * (self.width + self.height)

    def with_bar(self, main_bar: float, stirrup_bar: float | None = None) -> "SectionGeometry":
        """Return a copy with the selected bar (and optionally stirrup) sizes."""
        if stirrup_bar is None:
            stirrup_bar = self.stirrup_bar
        return replace(self, main_bar=main_bar, stirrup_bar=stirrup_bar)


def build_section(kind: ElementKind, geometry: GeometryInput) -> SectionGeometry:
    """Resolve the design section of an element.

    Raises
    ------
    DesignInputError
        If a dimension is not positive, or the depth leaves no room for the
        cover and bars (``d <= 0``).
    """
    require_positive("geometry.width", geometry.width)
    require_positive("geometry.height", geometry.height)
    require_non_negative("geometry.clear_cover", geometry.clear_cover)
    if geometry.span is not None:
        require_positive("geometry.span", geometry.span)

    kind = ElementKind(kind)
    bars = _ASSUMED_BARS[kind]
    width = SLAB_STRIP_WIDTH if kind == ElementKind.SLAB else geometry.width

    section = SectionGeometry(
        kind=kind,
        width=width,
        height=geometry.height,
        cover=geometry.clear_cover,
        span=geometry.span,
        main_bar=bars["main"],
        stirrup_bar=bars["stirrup"],
    )

    if section.effective_depth <= 0:
        raise DesignInputError(
            "geometry.height",
            f"{geometry.height:g} mm leaves no effective depth after "
            f"{geometry.clear_cover:g} mm cover and bars",
        )
    return section
