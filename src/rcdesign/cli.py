"""Command-line interface for the RC member design engine.

Usage::

    rcdesign run <input_yaml> [-o results.json] [--workers N] [--verbose]
    rcdesign template
    rcdesign validate <input_yaml>
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from rcdesign.batch import design_many, format_summary, load_batch
from rcdesign.exceptions import DesignInputError
from rcdesign.models.inputs import DesignInput


# ---------------------------------------------------------------------------
# Top-level group
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(package_name="rc-member-design")
def main():
    """RC member design - beams, columns and slabs per ACI 318."""


def _load_or_exit(input_path: Path) -> list[dict]:
    try:
        return load_batch(input_path)
    except yaml.YAMLError as exc:
        click.secho(f"YAML syntax error:\n  {exc}", fg="red", err=True)
        raise SystemExit(1) from exc
    except DesignInputError as exc:
        click.secho(f"Error parsing input: {exc}", fg="red", err=True)
        raise SystemExit(1) from exc


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------

@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-o", "--output",
    default="results.json",
    show_default=True,
    help="JSON file for the design results.",
)
@click.option("--workers", type=int, default=None, help="Number of worker threads.")
@click.option("-v", "--verbose", is_flag=True, help="Log design progress.")
def run(input_file: str, output: str, workers: int | None, verbose: bool) -> None:
    """Design every element listed in INPUT_FILE."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    input_path = Path(input_file)
    click.echo(f"Reading input file: {input_path}")
    elements = _load_or_exit(input_path)
    click.echo(f"  {len(elements)} element(s) found.")

    items = design_many(elements, max_workers=workers)
    click.echo("")
    click.echo(format_summary(items))

    records = []
    for item in items:
        record = {"id": item.id}
        if item.result is not None:
            record["result"] = item.result.model_dump(mode="json")
        else:
            record["error"] = {"field": item.error.field, "message": item.error.message}
        records.append(record)

    output_path = Path(output)
    with open(output_path, "w", encoding="utf-8") as fh:
        json.dump(records, fh, indent=2)

    click.echo(f"\nResults saved to {output_path.resolve()}")


# ---------------------------------------------------------------------------
# template
# ---------------------------------------------------------------------------

_SAMPLE_YAML = """\
# RC Member Design Input File
# ===========================
# Lengths in mm, strengths in MPa, forces in kN and kN.m.
# Loads are unfactored line loads in kN/m (service moments);
# forces are factored design actions.

elements:
  - id: "B1"
    element_kind: beam            # beam | column | slab
    geometry:
      width: 300
      height: 500
      span: 6000                  # optional
      clear_cover: 40
    material:
      fc: 30
      fy: 400
    loads:
      dead: 15
      live: 10
    forces:
      moment_x: 180
      shear_x: 120
    constraints:
      deflection_limit: 360       # span / N
      crack_width: 0.33           # mm
      exposure: moderate          # mild | moderate | severe | very_severe | extreme

  - id: "C1"
    element_kind: column
    geometry:
      width: 400
      height: 400
      span: 3500
      clear_cover: 40
    material:
      fc: 30
      fy: 400
    forces:
      axial: 1200
      moment_x: 80
      shear_x: 40

  - id: "S1"
    element_kind: slab            # one-metre strip, width ignored
    geometry:
      width: 1000
      height: 150
      span: 4000
      clear_cover: 20
    material:
      fc: 25
      fy: 400
    loads:
      dead: 5
      live: 3
    forces:
      moment_x: 20
      shear_x: 25
    constraints:
      exposure: mild
"""


@main.command()
def template() -> None:
    """Print a sample input YAML to stdout."""
    click.echo(_SAMPLE_YAML)


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------

def _validate_elements(elements: list[dict]) -> list[str]:
    """Return a list of validation error strings (empty means valid)."""
    errors: list[str] = []
    for i, element in enumerate(elements):
        label = element.get("id") or f"element-{i + 1}"
        try:
            DesignInput.model_validate(element)
        except ValidationError as exc:
            for err in exc.errors():
                loc = ".".join(str(part) for part in err["loc"])
                errors.append(f"{label}: {loc}: {err['msg']}")
    return errors


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
def validate(input_file: str) -> None:
    """Validate an input YAML file without running the design."""
    input_path = Path(input_file)
    click.echo(f"Validating: {input_path}")

    elements = _load_or_exit(input_path)
    errors = _validate_elements(elements)
    if errors:
        click.secho(f"\nFound {len(errors)} issue(s):\n", fg="yellow")
        for i, err in enumerate(errors, 1):
            click.echo(f"  {i}. {err}")
        raise SystemExit(1)

    click.secho(f"\nInput file is valid ({len(elements)} element(s)).", fg="green")


# ---------------------------------------------------------------------------
# Allow ``python -m rcdesign.cli``
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
