"""Fan-out strategies running one variant transform per size spec."""

from typing import Dict

from ..core.protocols import FanOutFunction
from .asyncio_processor import run_variants as asyncio_run_variants
from .multithread import run_variants as multithread_run_variants

FAN_OUT_STRATEGIES: Dict[str, FanOutFunction] = {
    "multithread": multithread_run_variants,
    "asyncio": asyncio_run_variants,
}


def get_fan_out(processor: str) -> FanOutFunction:
    """Look up a fan-out strategy by its configured name."""
    try:
        return FAN_OUT_STRATEGIES[processor]
    except KeyError:
        raise ValueError(f"Unknown processor: {processor}") from None


__all__ = [
    "FAN_OUT_STRATEGIES",
    "get_fan_out",
    "multithread_run_variants",
    "asyncio_run_variants",
]
