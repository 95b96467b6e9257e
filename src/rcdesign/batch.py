"""
Batch design of many elements.

Elements are independent, so they are designed concurrently on a thread
pool. Results come back in input order; an element with invalid input is
reported with its error instead of aborting the batch.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence, Union

import yaml

from rcdesign.core.design import DesignEngine
from rcdesign.exceptions import DesignInputError
from rcdesign.models.inputs import DesignInput
from rcdesign.models.outputs import DesignResult

logger = logging.getLogger(__name__)

ElementInput = Union[DesignInput, Mapping[str, Any]]


@dataclass
class BatchItem:
    """Outcome of one element in a batch."""
    index: int
    id: str
    result: DesignResult | None = None
    error: DesignInputError | None = None

    @property
    def ok(self) -> bool:
        """True when the element was designed and every check passes."""
        return self.result is not None and self.result.is_valid


@dataclass
class BatchSummary:
    """Aggregate figures of a batch run."""
    total: int
    designed: int
    passed: int
    failed_ids: list[str] = field(default_factory=list)
    error_ids: list[str] = field(default_factory=list)
    total_cost: float = 0.0

    @property
    def pass_rate(self) -> float:
        return self.passed / self.designed if self.designed else 0.0


def _element_id(element: ElementInput, index: int) -> str:
    if isinstance(element, DesignInput):
        element_id = element.id
    elif isinstance(element, Mapping):
        element_id = element.get("id")
    else:
        element_id = None
    return str(element_id) if element_id else f"element-{index + 1}"


def design_many(
    inputs: Iterable[ElementInput],
    max_workers: int | None = None,
    engine: DesignEngine | None = None,
) -> list[BatchItem]:
    """Design every element of *inputs* concurrently.

    Parameters
    ----------
    inputs : iterable of DesignInput or mapping
        Elements to design.
    max_workers : int, optional
        Thread pool size (``ThreadPoolExecutor`` default when omitted).
    engine : DesignEngine, optional
        Engine shared by all workers; a default ACI 318 engine otherwise.

    Returns
    -------
    list[BatchItem]
        One item per input, in input order.
    """
    elements = list(inputs)
    engine = engine or DesignEngine()

    def _run(job: tuple[int, ElementInput]) -> BatchItem:
        index, element = job
        item = BatchItem(index=index, id=_element_id(element, index))
        try:
            item.result = engine.design(element)
        except DesignInputError as exc:
            logger.warning("%s: invalid input (%s)", item.id, exc)
            item.error = exc
        return item

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        items = list(pool.map(_run, enumerate(elements)))

    logger.info("Designed %d element(s)", len(items))
    return items


def load_batch(path: str | Path) -> list[dict]:
    """Read the ``elements`` list of a batch YAML file.

    Raises
    ------
    DesignInputError
        If the file does not hold an ``elements`` list of mappings.
    """
    with open(path, encoding="utf-8") as fh:
        data = yaml.safe_load(fh)

    if not isinstance(data, dict) or not isinstance(data.get("elements"), list):
        raise DesignInputError("elements", "input file must contain an 'elements' list")
    for i, element in enumerate(data["elements"]):
        if not isinstance(element, dict):
            raise DesignInputError(f"elements.{i}", "each element must be a mapping")
    return data["elements"]


def summarise_results(items: Sequence[BatchItem]) -> BatchSummary:
    """Counts, failing ids and total cost of a batch."""
    designed = [item for item in items if item.result is not None]
    return BatchSummary(
        total=len(items),
        designed=len(designed),
        passed=sum(1 for item in designed if item.result.is_valid),
        failed_ids=[item.id for item in designed if not item.result.is_valid],
        error_ids=[item.id for item in items if item.error is not None],
        total_cost=sum(item.result.cost.total for item in designed),
    )


# ---------------------------------------------------------------------------
# summary
# ---------------------------------------------------------------------------

def format_summary(items: Sequence[BatchItem]) -> str:
    """Return a formatted text table of a batch."""
    w = 96
    lines = [
        "=" * w,
        "MEMBER DESIGN SUMMARY",
        "=" * w,
        f"{'Element':<16} {'Kind':<7} {'Main steel':<12} {'Status':<7} "
        f"{'Failed checks':<34} {'Cost':>16}",
        "-" * w,
    ]
    for item in items:
        if item.result is None:
            lines.append(f"{item.id:<16} {'':<7} {'':<12} {'ERROR':<7} {str(item.error)[:51]}")
            continue
        result = item.result
        status = "PASS" if result.is_valid else "FAIL"
        failed = ", ".join(result.checks.failed)
        lines.append(
            f"{item.id:<16} "
            f"{result.element.kind:<7} "
            f"{result.reinforcement.main.label:<12} "
            f"{status:<7} "
            f"{failed[:34]:<34} "
            f"{result.cost.total:>16,.0f}"
        )

    summary = summarise_results(items)
    lines.append("-" * w)
    lines.append(f"Elements      : {summary.total} ({summary.designed} designed)")
    lines.append(f"Pass rate     : {summary.pass_rate:.0%}")
    lines.append(f"Total cost    : {summary.total_cost:,.0f}")
    if summary.failed_ids:
        lines.append(f"Failing       : {', '.join(summary.failed_ids)}")
    if summary.error_ids:
        lines.append(f"Input errors  : {', '.join(summary.error_ids)}")
    lines.append("=" * w)
    return "\n".join(lines)
