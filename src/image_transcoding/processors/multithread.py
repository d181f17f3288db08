"""Multithreaded fan-out - one pool thread per size spec."""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional

from ..core import SizeSpec, VariantOutcome, get_logger
from ..core.protocols import TransformFunction


def run_variants(
    transform_fn: TransformFunction,
    specs: List[SizeSpec],
    max_workers: Optional[int] = None,
) -> List[VariantOutcome]:
    """
    Run one transform per size spec on a thread pool.

    Args:
        transform_fn: Callable producing the tagged outcome of one spec
        specs: Size specs to fan out over
        max_workers: Pool size cap (defaults to one thread per spec)

    Returns:
        One outcome per spec, in completion order
    """
    if not specs:
        return []

    logger = get_logger("multithread-processor")
    outcomes: List[VariantOutcome] = []
    workers = min(max_workers or len(specs), len(specs))

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="variant") as executor:
        future_to_spec = {executor.submit(transform_fn, spec): spec for spec in specs}

        # No cancellation: every future is awaited even after a failure
        for future in as_completed(future_to_spec):
            spec = future_to_spec[future]
            try:
                outcomes.append(future.result())
            except Exception as e:
                logger.error(f"[{spec.label}] Unexpected transform failure: {e}", exc_info=True)
                outcomes.append(VariantOutcome.failed(spec.label, str(e)))

    return outcomes
