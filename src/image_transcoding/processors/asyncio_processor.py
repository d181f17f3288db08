"""AsyncIO fan-out - transforms run in worker threads driven by an event loop."""

import asyncio
from typing import List, Optional

from ..core import SizeSpec, VariantOutcome, get_logger
from ..core.protocols import TransformFunction


async def run_variants_async(
    transform_fn: TransformFunction,
    specs: List[SizeSpec],
    max_workers: Optional[int] = None,
) -> List[VariantOutcome]:
    """Run all transforms concurrently and collect them as they finish."""
    logger = get_logger("asyncio-processor")
    semaphore = asyncio.Semaphore(max_workers) if max_workers else None

    async def run_one(spec: SizeSpec) -> VariantOutcome:
        try:
            if semaphore is None:
                return await asyncio.to_thread(transform_fn, spec)
            async with semaphore:
                return await asyncio.to_thread(transform_fn, spec)
        except Exception as e:
            logger.error(f"[{spec.label}] Unexpected transform failure: {e}", exc_info=True)
            return VariantOutcome.failed(spec.label, str(e))

    outcomes: List[VariantOutcome] = []
    for next_done in asyncio.as_completed([run_one(spec) for spec in specs]):
        outcomes.append(await next_done)
    return outcomes


def run_variants(
    transform_fn: TransformFunction,
    specs: List[SizeSpec],
    max_workers: Optional[int] = None,
) -> List[VariantOutcome]:
    """
    Run one transform per size spec using asyncio.

    This is the synchronous wrapper that runs the async function, so it
    must not be called from inside a running event loop.

    Args:
        transform_fn: Callable producing the tagged outcome of one spec
        specs: Size specs to fan out over
        max_workers: Optional cap on concurrently running transforms

    Returns:
        One outcome per spec, in completion order
    """
    if not specs:
        return []
    return asyncio.run(run_variants_async(transform_fn, specs, max_workers))
