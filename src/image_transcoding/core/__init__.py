"""Core utilities and shared components for image transcoding."""

from .image_utils import (
    compute_scaling_factor,
    compute_target_dimensions,
    encode_image,
    probe_image,
    resize_image,
    round_half_up,
    variant_key,
)
from .logging_config import get_logger, set_debug, setup_logger
from .exceptions import (
    AggregationError,
    ConfigurationError,
    DownloadError,
    EventFormatError,
    ImageTranscodingError,
    JobFailedError,
    ProbeError,
    PublishError,
    S3Error,
    SignalAlreadySentError,
    TransformError,
    UnsupportedTypeError,
)
from .locator import derive_dest_bucket, infer_image_type, locate_job
from .models import (
    DEFAULT_SIZE_SPECS,
    ImageType,
    Job,
    JobOutcome,
    JobReport,
    JobStatus,
    NotificationMessage,
    SizeSpec,
    SourceImage,
    TranscodingConfig,
    TransformSettings,
    VariantOutcome,
    VariantResult,
    VariantStatus,
)
from .quality import estimate_quality, observed_density

__all__ = [
    "DEFAULT_SIZE_SPECS",
    "ImageType",
    "Job",
    "JobOutcome",
    "JobReport",
    "JobStatus",
    "NotificationMessage",
    "SizeSpec",
    "SourceImage",
    "TranscodingConfig",
    "TransformSettings",
    "VariantOutcome",
    "VariantResult",
    "VariantStatus",
    "compute_scaling_factor",
    "compute_target_dimensions",
    "encode_image",
    "probe_image",
    "resize_image",
    "round_half_up",
    "variant_key",
    "derive_dest_bucket",
    "infer_image_type",
    "locate_job",
    "estimate_quality",
    "observed_density",
    "setup_logger",
    "get_logger",
    "set_debug",
    "ImageTranscodingError",
    "ConfigurationError",
    "EventFormatError",
    "UnsupportedTypeError",
    "S3Error",
    "DownloadError",
    "ProbeError",
    "TransformError",
    "PublishError",
    "AggregationError",
    "SignalAlreadySentError",
    "JobFailedError",
]
