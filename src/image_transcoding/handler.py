"""AWS Lambda entry point for storage-triggered transcoding."""

from functools import lru_cache
from typing import Any, Dict, Optional

from .config import TranscodingSettings
from .core import JobFailedError, JobStatus
from .core.factories import TranscodingPipelineFactory
from .core.services import InvocationSignal, TranscodingOrchestrator


@lru_cache(maxsize=1)
def get_pipeline() -> TranscodingOrchestrator:
    """Build the pipeline once per warm container."""
    config = TranscodingSettings().to_config()
    return TranscodingPipelineFactory.create_pipeline(config=config)


def lambda_handler(
    event: Dict[str, Any],
    context: Any,
    pipeline: Optional[TranscodingOrchestrator] = None,
) -> Dict[str, Any]:
    """
    Transcode the image named by ``event``.

    Returns a summary for succeeded and skipped jobs. A failed job raises
    ``JobFailedError`` carrying the terminal failure message so the runtime
    records the invocation as failed.
    """
    pipeline = pipeline or get_pipeline()
    signal = InvocationSignal()
    report = pipeline.run(event, signal)

    if report.status is JobStatus.FAILED:
        raise JobFailedError(report.message)

    variants = report.outcome.produced_variants if report.outcome else []
    return {
        "status": report.status.value,
        "message": report.message,
        "variants": [variant.model_dump() for variant in variants],
    }
