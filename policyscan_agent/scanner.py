"""
Batch orchestration: query both engines per URL, classify, keep input order.
"""
from __future__ import annotations

import asyncio
from collections import Counter
from typing import Any

from .classifier import classify
from .engines import FortiGuardEngine, ReputationEngine, TalosEngine
from .logger import get_logger
from .models import EngineFragments, ScanResult

logger = get_logger(__name__)


class EmptyBatchError(ValueError):
    """The request did not carry a non-empty list of URLs."""


class EngineQueryError(RuntimeError):
    def __init__(self, engines: list[ReputationEngine]):
        self.engines = engines
        super().__init__(", ".join(e.name for e in engines))


def _display_names(engines: list[ReputationEngine]) -> str:
    return "/".join(e.display_name for e in engines)


def _error_result(url: str, engines: list[ReputationEngine]) -> ScanResult:
    return ScanResult(
        url=url,
        status="unknown",
        label="Unsure",
        reason=f"Error querying {_display_names(engines)}.",
    )


async def _query_engines(url: str, talos: ReputationEngine, fortiguard: ReputationEngine):
    engines = [talos, fortiguard]
    outcomes = await asyncio.gather(
        talos.query(url),
        fortiguard.query(url),
        return_exceptions=True,
    )

    failed: list[ReputationEngine] = []
    for engine, outcome in zip(engines, outcomes):
        if not isinstance(outcome, BaseException):
            continue
        if not isinstance(outcome, Exception):
            raise outcome
        logger.error("scan_failed", url=url, engine=engine.name, error=repr(outcome))
        failed.append(engine)

    if failed:
        raise EngineQueryError(failed)
    return outcomes[0], outcomes[1]


async def scan_url(url: str, talos: ReputationEngine, fortiguard: ReputationEngine) -> ScanResult:
    """Scan a single URL. Never raises for engine or classification failures."""
    try:
        talos_fragment, fortiguard_fragment = await _query_engines(url, talos, fortiguard)
        verdict = classify(url, talos_fragment, fortiguard_fragment)
        return ScanResult(
            url=url,
            status=verdict.status,
            label=verdict.label,
            reason=verdict.reason,
            fragments=EngineFragments(talos=talos_fragment, fortiguard=fortiguard_fragment),
        )
    except EngineQueryError as e:
        return _error_result(url, e.engines)
    except Exception as e:
        logger.exception("scan_failed", url=url, error=repr(e))
        return _error_result(url, [talos, fortiguard])


async def scan(
    urls: Any,
    talos: TalosEngine,
    fortiguard: FortiGuardEngine,
    *,
    concurrency: int = 1,
) -> list[ScanResult]:
    """Scan every URL in `urls` and return one result per entry, in input order.

    URLs are processed one after another unless `concurrency` > 1, in which case
    up to that many URLs are in flight at once. Duplicates are scanned
    independently.

    Raises EmptyBatchError if `urls` is not a non-empty list.
    """
    if not isinstance(urls, list) or not urls:
        raise EmptyBatchError("No URLs provided.")

    batch = [str(u) for u in urls]

    if concurrency <= 1:
        results = [await scan_url(u, talos, fortiguard) for u in batch]
    else:
        semaphore = asyncio.Semaphore(concurrency)

        async def _bounded(u: str) -> ScanResult:
            async with semaphore:
                return await scan_url(u, talos, fortiguard)

        results = list(await asyncio.gather(*(_bounded(u) for u in batch)))

    counts = Counter(r.status for r in results)
    logger.info("scan_batch_completed", urls=len(results), **dict(counts))
    return results
