"""
Member design orchestrator per ACI 318.

Coordinates the design workflow for one element:
1. Section and material derivation
2. Flexural design (beams, slabs) or interaction design (columns)
3. Bar selection, re-run when a larger bar reduces the effective depth
4. Shear design (stirrups, ties, or concrete only for slabs)
5. Capacity verification of the selected bars
6. Serviceability checks (deflection, crack width)
7. Cost estimate, development lengths and advisory warnings
"""

import logging
import math
from typing import Any, List, Mapping, Union

from pydantic import ValidationError

from rcdesign.codes import ACI318, DesignCode
from rcdesign.core.capacity import CapacityVerifier
from rcdesign.core.cost import estimate_cost
from rcdesign.core.flexure import FlexureDesigner
from rcdesign.core.interaction import required_column_steel
from rcdesign.core.materials import get_material_model
from rcdesign.core.reinforcement import ReinforcementSelector, COLUMN_PERIMETER_PER_BAR
from rcdesign.core.section import SectionGeometry, build_section
from rcdesign.core.serviceability import ServiceabilityChecker
from rcdesign.core.shear import ShearDesigner, ShearResult
from rcdesign.exceptions import DesignInputError
from rcdesign.models.inputs import DesignInput, ElementKind
from rcdesign.models.outputs import (
    BarSelection,
    CalculationStep,
    CheckResult,
    DesignChecks,
    DesignResult,
    DevelopmentLengths,
    ElementInfo,
    Reinforcement,
    ShearReinforcement,
)
from rcdesign.utils.constants import (
    COLUMN_BAR_COUNT,
    DISTRIBUTION_BAR_SIZES,
    MAIN_BAR_SIZES,
    STIRRUP_BAR_SIZES,
)

logger = logging.getLogger(__name__)

# Column steel ratio bounds
COLUMN_RHO_MIN = 0.01
COLUMN_RHO_MAX = 0.06

# Slab minimum (shrinkage and temperature) ratio
SLAB_RHO_MIN = 0.0018


def _coerce_input(data: Union[DesignInput, Mapping[str, Any]]) -> DesignInput:
    """Validate a mapping into a DesignInput, naming the first bad field."""
    if isinstance(data, DesignInput):
        return data
    try:
        return DesignInput.model_validate(data)
    except ValidationError as exc:
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "input"
        raise DesignInputError(field, error["msg"]) from exc


def _tie_diameter(bar_dia: float) -> int:
    """Smallest catalog tie of at least max(8, db/4)."""
    needed = max(8, bar_dia / 4)
    for dia in STIRRUP_BAR_SIZES:
        if dia >= needed:
            return dia
    return STIRRUP_BAR_SIZES[-1]


def _renumber(steps: List[CalculationStep]) -> List[CalculationStep]:
    return [step.model_copy(update={"step_number": i}) for i, step in enumerate(steps, start=1)]


class DesignEngine:
    """
    Main calculation engine for beam, column and slab design.

    Stateless: one engine may serve any number of concurrent ``design``
    calls.
    """

    def __init__(self, code: DesignCode = None):
        self.code = code or ACI318()
        self.flexure_designer = FlexureDesigner(self.code)
        self.shear_designer = ShearDesigner(self.code)
        self.selector = ReinforcementSelector()
        self.verifier = CapacityVerifier(self.code)
        self.serviceability_checker = ServiceabilityChecker(self.code)

    def design(self, inputs: Union[DesignInput, Mapping[str, Any]]) -> DesignResult:
        """
        Design one element.

        Args:
            inputs: DesignInput, or a mapping validated into one

        Returns:
            DesignResult; design inadequacy is reported in ``checks``

        Raises:
            DesignInputError: if an input violates a hard precondition
        """
        inputs = _coerce_input(inputs)
        logger.debug("Designing %s %s", inputs.element_kind.value, inputs.id or "")

        # Fail fast on material preconditions
        get_material_model(inputs.material.fc, inputs.material.fy, self.code)

        if inputs.element_kind == ElementKind.BEAM:
            return self._design_beam(inputs)
        elif inputs.element_kind == ElementKind.COLUMN:
            return self._design_column(inputs)
        return self._design_slab(inputs)

    # ------------------------------------------------------------------
    # Beam
    # ------------------------------------------------------------------

    def _design_beam(self, inputs: DesignInput) -> DesignResult:
        warnings = []
        fc = inputs.material.fc
        fy = inputs.material.fy
        forces = inputs.forces

        section = build_section(ElementKind.BEAM, inputs.geometry)
        b = section.width

        flexure, main, section = self._design_flexure(
            section, forces.moment_x, fc, fy, warnings
        )
        d = section.effective_depth

        compression = None
        d_prime = section.compression_depth
        if flexure.required_asc > 0:
            compression = self.selector.select_bars(flexure.required_asc)
            self._note_selection(compression, "compression", warnings)
            d_prime = section.cover + section.stirrup_bar + compression.diameter / 2

        shear = self.shear_designer.design(
            shear_force=forces.shear_x,
            width=b,
            effective_depth=d,
            fc=fc,
            fy=fy,
            stirrup_dia=int(section.stirrup_bar),
        )
        warnings.extend(shear.warnings)

        # Verification with the selected bars
        flex_cap = self.verifier.flexural_capacity(
            b, d, d_prime, fc, fy,
            main.provided_area,
            compression.provided_area if compression else 0.0,
        )
        flexural_check = self.verifier.check_flexure(forces.moment_x, flex_cap)
        if not flex_cap.tension_controlled:
            warnings.append(
                f"Section is not tension-controlled (c = {flex_cap.c:.0f} mm > "
                f"{flex_cap.c_limit:.0f} mm)"
            )

        shear_cap = self.verifier.shear_capacity(b, d, fc, fy, shear.Av, shear.spacing)
        shear_check = self.verifier.check_shear(forces.shear_x, shear_cap)

        As_max = flexure.rho_max * b * d
        if compression is not None:
            As_max += compression.provided_area * max(flex_cap.fs_comp, 0.0) / fy
        min_check, max_check = self.verifier.check_reinforcement_limits(
            main.provided_area, flexure.rho_min * b * d, As_max
        )

        deflection = self.serviceability_checker.check_deflection(
            width=b,
            height=section.height,
            effective_depth=d,
            fc=fc,
            As=main.provided_area,
            span=section.span,
            limit=inputs.constraints.deflection_limit,
            moment=forces.moment_x,
            dead_load=inputs.loads.dead,
            live_load=inputs.loads.live,
        )
        warnings.extend(deflection.warnings)

        crack = self.serviceability_checker.check_crack_width(
            width=b,
            cover_to_centre=section.cover_to_bar_centre,
            bar_count=main.count,
            fy=fy,
            limit=inputs.constraints.crack_width,
        )

        if forces.axial:
            warnings.append("Axial force is not considered in beam design; design as a column")

        checks = DesignChecks(
            flexural_strength=flexural_check,
            shear_strength=shear_check,
            axial_strength=CheckResult.not_applicable(unit="kN"),
            deflection=deflection.check,
            cracking=crack.check,
            min_reinforcement=min_check,
            max_reinforcement=max_check,
        )

        reinforcement = Reinforcement(
            main=main,
            compression=compression,
            shear=self._shear_reinforcement(shear),
            development=self._development(main.diameter, fc, fy),
        )

        summary = f"Beam {b:g}x{section.height:g} mm: {main.label} bottom"
        if compression is not None:
            summary += f", {compression.label} top"
        summary += f", stirrups D{shear.stirrup_dia}@{shear.spacing:.0f}"

        steps = flexure.steps + shear.steps + flex_cap.steps + deflection.steps + crack.steps
        return self._build_result(
            inputs, section, reinforcement, checks, summary, warnings, steps,
            is_doubly=flexure.is_doubly,
        )

    # ------------------------------------------------------------------
    # Column
    # ------------------------------------------------------------------

    def _design_column(self, inputs: DesignInput) -> DesignResult:
        warnings = []
        fc = inputs.material.fc
        fy = inputs.material.fy
        forces = inputs.forces

        section = build_section(ElementKind.COLUMN, inputs.geometry)
        b = section.width
        h = section.height
        Ag = section.gross_area

        # Compression positive, tension negative
        Pu = forces.axial
        Mu = abs(forces.moment_x)
        Nu = max(Pu, 0.0)
        if Pu < 0:
            warnings.append(f"Column in axial tension (Pu = {Pu:.0f} kN); no Vc enhancement")

        lo, hi = COLUMN_BAR_COUNT
        n_assumed = min(max(lo, math.ceil(section.perimeter / COLUMN_PERIMETER_PER_BAR)), hi)

        As_req, found = required_column_steel(
            width=b,
            height=h,
            edge_distance=section.compression_depth,
            n_bars=n_assumed,
            Pu=Pu,
            Mu=Mu,
            fc=fc,
            fy=fy,
            rho_min=COLUMN_RHO_MIN,
            rho_max=COLUMN_RHO_MAX,
            code=self.code,
        )
        if not found:
            msg = (f"Pu = {Pu:.0f} kN, Mu = {Mu:.1f} kNm lies outside the interaction "
                   f"diagram at {COLUMN_RHO_MAX:.0%} steel; enlarge the section")
            logger.warning(msg)
            warnings.append(msg)

        steps = [CalculationStep(
            step_number=1,
            description="Required longitudinal steel from P-M interaction",
            formula="min As in [0.01Ag, 0.06Ag] with (Pu, Mu) inside φPn-φMn envelope",
            substitution=f"Pu = {Pu:.1f} kN, Mu = {Mu:.2f} kNm, Ag = {Ag:.0f} mm²",
            result=round(As_req, 1),
            unit="mm²",
            code_reference="ACI 318 22.4"
        )]

        main = self.selector.select_column_bars(As_req, section.perimeter)
        self._note_selection(main, "column", warnings)

        tie = _tie_diameter(main.diameter)
        section = section.with_bar(main.diameter, tie)
        d = section.effective_depth

        shear = self.shear_designer.design(
            shear_force=forces.shear_x,
            width=b,
            effective_depth=d,
            fc=fc,
            fy=fy,
            axial=Nu,
            gross_area=Ag,
            stirrup_dia=tie,
            extra_limits={
                'longitudinal_bar': 16 * main.diameter,
                'tie_bar': 48 * tie,
                'least_dimension': min(b, h),
            },
        )
        warnings.extend(shear.warnings)

        col_cap = self.verifier.column_capacity(
            b, h, section.compression_depth, main.provided_area, main.count, fc, fy, Pu
        )
        axial_check, flexural_check = self.verifier.check_column(Pu, Mu, col_cap)

        steps.append(CalculationStep(
            step_number=2,
            description="Design strengths of selected bars",
            formula="φPn,max = 0.80·φ·[0.85fc(Ag - Ast) + fy·Ast], φMn at Pu",
            substitution=f"{main.label}, Ast = {main.provided_area:.0f} mm²",
            result=round(col_cap.phi_Mn, 2),
            unit="kNm",
            code_reference="ACI 318 22.4.2"
        ))

        shear_cap = self.verifier.shear_capacity(
            b, d, fc, fy, shear.Av, shear.spacing, axial=Nu, gross_area=Ag
        )
        shear_check = self.verifier.check_shear(forces.shear_x, shear_cap)

        min_check, max_check = self.verifier.check_reinforcement_limits(
            main.provided_area, COLUMN_RHO_MIN * Ag, COLUMN_RHO_MAX * Ag
        )

        checks = DesignChecks(
            flexural_strength=flexural_check,
            shear_strength=shear_check,
            axial_strength=axial_check,
            deflection=CheckResult.not_applicable(unit="mm"),
            cracking=CheckResult.not_applicable(unit="mm"),
            min_reinforcement=min_check,
            max_reinforcement=max_check,
        )

        reinforcement = Reinforcement(
            main=main,
            shear=self._shear_reinforcement(shear),
            development=self._development(main.diameter, fc, fy),
        )

        summary = (f"Column {b:g}x{h:g} mm: {main.label}, "
                   f"ties D{tie}@{shear.spacing:.0f}")

        return self._build_result(
            inputs, section, reinforcement, checks, summary, warnings, steps + shear.steps,
        )

    # ------------------------------------------------------------------
    # Slab
    # ------------------------------------------------------------------

    def _design_slab(self, inputs: DesignInput) -> DesignResult:
        warnings = []
        fc = inputs.material.fc
        fy = inputs.material.fy
        forces = inputs.forces

        section = build_section(ElementKind.SLAB, inputs.geometry)
        b = section.width
        h = section.height

        flexure, main, section = self._design_flexure(
            section, forces.moment_x, fc, fy, warnings, slab=True
        )
        d = section.effective_depth

        distribution = self.selector.select_slab_bars(
            SLAB_RHO_MIN * b * h,
            h,
            catalog=DISTRIBUTION_BAR_SIZES,
            max_spacing=min(5 * h, 450),
        )
        self._note_selection(distribution, "distribution", warnings)

        flex_cap = self.verifier.flexural_capacity(
            b, d, section.compression_depth, fc, fy, main.provided_area
        )
        flexural_check = self.verifier.check_flexure(forces.moment_x, flex_cap)

        shear_cap = self.verifier.shear_capacity(b, d, fc, fy)
        shear_check = self.verifier.check_shear(forces.shear_x, shear_cap)
        shear_step = CalculationStep(
            step_number=1,
            description="One-way shear, concrete only (φVc)",
            formula="φVc = φ·(λ/6)·√fc·b·d",
            substitution=f"= {shear_cap.phi} × √{fc:g}/6 × {b:.0f} × {d:.0f}",
            result=round(shear_cap.phi_Vn, 2),
            unit="kN",
            code_reference="ACI 318 22.5.5.1"
        )

        min_check, max_check = self.verifier.check_reinforcement_limits(
            main.provided_area, flexure.min_ast, flexure.rho_max * b * d
        )

        deflection = self.serviceability_checker.check_deflection(
            width=b,
            height=h,
            effective_depth=d,
            fc=fc,
            As=main.provided_area,
            span=section.span,
            limit=inputs.constraints.deflection_limit,
            moment=forces.moment_x,
            dead_load=inputs.loads.dead,
            live_load=inputs.loads.live,
        )
        warnings.extend(deflection.warnings)

        crack = self.serviceability_checker.check_crack_width(
            width=b,
            cover_to_centre=section.cover_to_bar_centre,
            bar_count=b / main.spacing,
            fy=fy,
            limit=inputs.constraints.crack_width,
        )

        checks = DesignChecks(
            flexural_strength=flexural_check,
            shear_strength=shear_check,
            axial_strength=CheckResult.not_applicable(unit="kN"),
            deflection=deflection.check,
            cracking=crack.check,
            min_reinforcement=min_check,
            max_reinforcement=max_check,
        )

        reinforcement = Reinforcement(
            main=main,
            distribution=distribution,
            development=self._development(main.diameter, fc, fy),
        )

        summary = (f"Slab h={h:g} mm: {main.label} main, "
                   f"{distribution.label} distribution")

        steps = flexure.steps + [shear_step] + flex_cap.steps + deflection.steps + crack.steps
        return self._build_result(
            inputs, section, reinforcement, checks, summary, warnings, steps,
        )

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _design_flexure(
        self,
        section: SectionGeometry,
        moment: float,
        fc: float,
        fy: float,
        warnings: List[str],
        slab: bool = False,
    ):
        """
        Flexural design and bar selection.

        Repeated with the selected diameter while it is larger than the one
        the effective depth was based on.

        Returns:
            (FlexureResult, main BarSelection, SectionGeometry)
        """
        for _ in range(len(MAIN_BAR_SIZES)):
            flexure = self.flexure_designer.design(
                moment=moment,
                width=section.width,
                effective_depth=section.effective_depth,
                compression_depth=section.compression_depth,
                fc=fc,
                fy=fy,
                rho_min=SLAB_RHO_MIN if slab else None,
                allow_doubly=not slab,
            )
            if slab:
                main = self.selector.select_slab_bars(flexure.required_ast, section.height)
            else:
                main = self.selector.select_bars(flexure.required_ast)

            if main.diameter <= section.main_bar:
                break
            logger.debug(
                "Selected D%d larger than assumed D%g; redesigning", main.diameter, section.main_bar
            )
            candidate = section.with_bar(main.diameter)
            if candidate.effective_depth <= 0:
                break
            section = candidate

        if main.diameter != section.main_bar:
            candidate = section.with_bar(main.diameter)
            if candidate.effective_depth > 0:
                section = candidate
            else:
                warnings.append(
                    f"D{main.diameter} bars leave no effective depth; "
                    f"verified with D{section.main_bar:g}"
                )

        warnings.extend(flexure.warnings)
        self._note_selection(main, "main", warnings)
        return flexure, main, section

    def _note_selection(self, selection: BarSelection, role: str, warnings: List[str]) -> None:
        if not selection.within_range:
            warnings.append(
                f"No practical {role} bar arrangement found; "
                f"{selection.label} used outside the usual range"
            )

    def _shear_reinforcement(self, shear: ShearResult) -> ShearReinforcement:
        return ShearReinforcement(
            diameter=shear.stirrup_dia,
            legs=shear.stirrup_legs,
            spacing=shear.spacing,
            area=shear.Av,
            area_per_metre=shear.Av * 1000 / shear.spacing,
        )

    def _development(self, bar_dia: float, fc: float, fy: float) -> DevelopmentLengths:
        return DevelopmentLengths(**self.code.get_development_lengths(bar_dia, fc, fy))

    def _advisory_warnings(self, inputs: DesignInput, section: SectionGeometry) -> List[str]:
        """Warnings that never affect the checks."""
        warnings = []
        exposure = inputs.constraints.exposure
        cover = self.code.get_minimum_cover(exposure.value)

        if section.cover < cover.nominal_cover:
            warnings.append(
                f"Clear cover {section.cover:g} mm is below {cover.nominal_cover:g} mm "
                f"for {exposure.value} exposure"
            )
        if inputs.material.fc < cover.min_fc:
            warnings.append(
                f"fc = {inputs.material.fc:g} MPa is below {cover.min_fc:g} MPa "
                f"for {exposure.value} exposure"
            )

        torsion = abs(inputs.forces.torsion)
        if torsion and hasattr(self.code, "get_torsion_threshold"):
            threshold = self.code.get_torsion_threshold(
                inputs.material.fc, section.gross_area, section.perimeter
            ) / 1e6
            if torsion > threshold:
                warnings.append(
                    f"Torsion {torsion:.1f} kNm exceeds the threshold {threshold:.1f} kNm; "
                    f"torsion reinforcement is not designed"
                )

        if inputs.forces.moment_y or inputs.forces.shear_y:
            warnings.append("Weak-axis moment and shear are not designed (uniaxial design)")
        return warnings

    def _build_result(
        self,
        inputs: DesignInput,
        section: SectionGeometry,
        reinforcement: Reinforcement,
        checks: DesignChecks,
        summary: str,
        warnings: List[str],
        steps: List[CalculationStep],
        is_doubly: bool = False,
    ) -> DesignResult:
        warnings = warnings + self._advisory_warnings(inputs, section)
        cost = estimate_cost(section, reinforcement, inputs.material.fc, inputs.unit_prices)

        result = DesignResult(
            id=inputs.id,
            element=ElementInfo(
                kind=section.kind.value,
                width=section.width,
                height=section.height,
                span=section.span,
                effective_depth=round(section.effective_depth, 1),
                concrete_grade=inputs.material.concrete_grade,
                steel_grade=inputs.material.steel_grade,
            ),
            reinforcement=reinforcement,
            checks=checks,
            cost=cost,
            is_doubly_reinforced=is_doubly,
            summary=summary,
            design_code=self.code.code_name,
            warnings=warnings,
            calculation_steps=_renumber(steps),
        )

        if not result.is_valid:
            logger.info("%s failed checks: %s", inputs.id or summary, ", ".join(checks.failed))
        return result


_DEFAULT_ENGINE = DesignEngine()


def design(inputs: Union[DesignInput, Mapping[str, Any]]) -> DesignResult:
    """Design one element with the ACI 318 engine."""
    return _DEFAULT_ENGINE.design(inputs)
