"""Shared data models for image transcoding."""

from dataclasses import dataclass
from enum import Enum
from typing import List, Literal, Optional

from PIL import Image
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TOPIC_ARN = "arn:aws:sns:us-east-1:352985362696:image-transcoding-finished"


class ImageType(str, Enum):
    """Raster types the pipeline transcodes; output format matches input."""

    JPEG = "jpeg"
    PNG = "png"

    @classmethod
    def from_extension(cls, extension: str) -> Optional["ImageType"]:
        """Map a key extension (without the dot) to an image type."""
        return _EXTENSIONS.get(extension)

    @property
    def pillow_format(self) -> str:
        return "JPEG" if self is ImageType.JPEG else "PNG"

    @property
    def supports_quality(self) -> bool:
        """Whether the encoder has a lossy quality axis."""
        return self is ImageType.JPEG


_EXTENSIONS = {"jpg": ImageType.JPEG, "png": ImageType.PNG}


class SizeSpec(BaseModel):
    """One target variant: the longest side never exceeds ``max_dimension``."""

    model_config = ConfigDict(frozen=True)

    max_dimension: int = Field(gt=0)
    label: str
    enabled: bool = True


DEFAULT_SIZE_SPECS = (
    SizeSpec(max_dimension=1366, label="XXL", enabled=False),
    SizeSpec(max_dimension=1200, label="XL", enabled=False),
    SizeSpec(max_dimension=960, label="L"),
    SizeSpec(max_dimension=640, label="M"),
    SizeSpec(max_dimension=380, label="S"),
    SizeSpec(max_dimension=260, label="XS"),
    SizeSpec(max_dimension=128, label="thumbnail"),
)


class TranscodingConfig(BaseModel):
    """Configuration passed explicitly into the transcoding pipeline."""

    model_config = ConfigDict(frozen=True)

    topic_arn: str = DEFAULT_TOPIC_ARN
    bucket_delimiter: str = Field(default="-in", min_length=1)
    size_specs: List[SizeSpec] = Field(default_factory=lambda: list(DEFAULT_SIZE_SPECS))
    max_file_size: int = Field(default=500 * 1024, gt=0)
    reference_resolution: int = Field(default=960, gt=0)
    density_factor: float = Field(default=0.75, gt=0)
    min_quality: int = Field(default=80, ge=0, le=100)
    processor: Literal["multithread", "asyncio"] = "multithread"
    max_workers: Optional[int] = Field(default=None, gt=0)
    debug: bool = False

    @property
    def active_size_specs(self) -> List[SizeSpec]:
        """Enabled size specs, largest first, in table order."""
        return [spec for spec in self.size_specs if spec.enabled]

    @property
    def ceiling_density(self) -> float:
        """Bytes-per-pixel budget of the reference resolution."""
        return self.max_file_size / (
            self.reference_resolution * self.reference_resolution * self.density_factor
        )


class Job(BaseModel):
    """One invocation's unit of work, derived from the triggering event."""

    model_config = ConfigDict(frozen=True)

    source_bucket: str
    source_key: str
    dest_bucket: str
    image_type: ImageType


@dataclass(frozen=True)
class SourceImage:
    """The downloaded and decoded source, shared read-only by every variant."""

    body: bytes
    content_length: int
    content_type: str
    image: Image.Image
    width: int
    height: int


class TransformSettings(BaseModel):
    """Per-job encoder settings threaded into every variant transform."""

    model_config = ConfigDict(frozen=True)

    quality: Optional[int] = Field(default=None, ge=0, le=100)


class VariantResult(BaseModel):
    """Final dimensions of one produced variant."""

    label: str
    width: int
    height: int


class VariantStatus(str, Enum):
    PRODUCED = "produced"
    SKIPPED = "skipped"
    FAILED = "failed"


class VariantOutcome(BaseModel):
    """Tagged result of one variant transform."""

    label: str
    status: VariantStatus
    result: Optional[VariantResult] = None
    error: str = ""

    @classmethod
    def produced(cls, result: VariantResult) -> "VariantOutcome":
        return cls(label=result.label, status=VariantStatus.PRODUCED, result=result)

    @classmethod
    def skipped(cls, label: str) -> "VariantOutcome":
        return cls(label=label, status=VariantStatus.SKIPPED)

    @classmethod
    def failed(cls, label: str, error: str) -> "VariantOutcome":
        return cls(label=label, status=VariantStatus.FAILED, error=error)


class JobOutcome(BaseModel):
    """Fan-in product: every target size resolved to exactly one bucket."""

    job_id: str
    produced_variants: List[VariantResult] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.produced_variants) + len(self.skipped) + len(self.errors)


class NotificationMessage(BaseModel):
    """Completion message body published to the notification topic."""

    job_id: str = Field(serialization_alias="jobId")
    sources: List[VariantResult] = Field(default_factory=list)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


class JobStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"


class JobReport(BaseModel):
    """What one invocation ended with, returned to the entry point."""

    status: JobStatus
    message: str
    job: Optional[Job] = None
    outcome: Optional[JobOutcome] = None
    errors: List[str] = Field(default_factory=list)
