"""Check evaluation engine.

Runs every selected check against one shared :class:`~complyscan.utils.ScanData`.
Detectors are blocking functions, so each one runs in a worker thread; a
semaphore bounds how many run at once and ``asyncio.wait_for`` bounds how
long each may take.  Whatever happens inside a detector, the engine turns it
into a :class:`~complyscan.models.CheckResult`.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Iterable
from typing import TYPE_CHECKING

from complyscan.models import CheckDefinition, CheckResult, DetectorOutcome, Status

if TYPE_CHECKING:
    from complyscan.config import AuditConfig
    from complyscan.utils import ScanData

logger = logging.getLogger(__name__)


async def evaluate(
    definitions: Iterable[CheckDefinition],
    scan: ScanData,
    config: AuditConfig,
    deadline: float,
) -> list[CheckResult]:
    """Run *definitions* concurrently and return results in the same order.

    Args:
        definitions: Checks to run, already filtered for skips and level.
        scan: Scan data shared read-only by every detector.
        config: Validated audit configuration.
        deadline: ``time.monotonic()`` value at which the audit budget ends.

    Returns:
        One :class:`CheckResult` per definition.  Never raises for detector
        errors or timeouts.
    """
    semaphore = asyncio.Semaphore(config.concurrency)

    async def limited(definition: CheckDefinition) -> CheckResult:
        async with semaphore:
            return await run_check(definition, scan, config, deadline)

    return list(await asyncio.gather(*(limited(d) for d in definitions)))


async def run_check(
    definition: CheckDefinition,
    scan: ScanData,
    config: AuditConfig,
    deadline: float,
) -> CheckResult:
    """Run one check under ``min(check_timeout, remaining audit budget)``."""
    remaining = deadline - time.monotonic()
    if remaining <= 0:
        logger.warning("Audit time budget exhausted before %s could run", definition.id)
        return CheckResult(
            definition,
            Status.FAIL,
            ("Audit time budget exhausted before the check could run",),
            ("Increase the audit timeout or skip categories to reduce the work",),
        )

    budget = min(config.check_timeout, remaining)
    started = time.monotonic()
    logger.debug("Running %s %s", definition.id, definition.name)
    try:
        outcome = await asyncio.wait_for(
            asyncio.to_thread(definition.detector, scan, config),
            timeout=budget,
        )
    except asyncio.TimeoutError:
        logger.warning("%s exceeded its time budget of %.1fs", definition.id, budget)
        return CheckResult(
            definition,
            Status.FAIL,
            (f"Check exceeded time budget ({budget:.1f}s)",),
            ("Re-run with a larger check timeout or a smaller file limit",),
        )
    except Exception as exc:
        logger.warning("%s raised %s: %s", definition.id, type(exc).__name__, exc)
        logger.debug("Detector traceback for %s", definition.id, exc_info=True)
        return CheckResult(
            definition,
            Status.FAIL,
            (f"Check could not be completed: {exc}",),
        )

    if not isinstance(outcome, DetectorOutcome):
        logger.warning("%s returned %r instead of a DetectorOutcome", definition.id, outcome)
        return CheckResult(
            definition,
            Status.FAIL,
            (f"Check could not be completed: unexpected detector result {outcome!r}",),
        )

    logger.debug(
        "%s -> %s (%.0f ms)",
        definition.id,
        outcome.status.value,
        (time.monotonic() - started) * 1000,
    )
    return CheckResult.from_outcome(definition, outcome)
