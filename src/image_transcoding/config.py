"""
Environment-driven settings for the Lambda handler and the CLI.

Reads ``TRANSCODING_*`` environment variables (or a .env file) and turns them
into the explicit ``TranscodingConfig`` handed to the pipeline. Nothing below
the entry points reads the environment.
"""

from typing import Any, List, Literal, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.exceptions import ConfigurationError
from .core.models import DEFAULT_SIZE_SPECS, DEFAULT_TOPIC_ARN, SizeSpec, TranscodingConfig


class TranscodingSettings(BaseSettings):
    # ── Notification ────────────────────────────────────────────
    topic_arn: str = DEFAULT_TOPIC_ARN

    # ── Buckets ─────────────────────────────────────────────────
    bucket_delimiter: str = "-in"  # "photos-in" writes to "photos"

    # ── Quality ─────────────────────────────────────────────────
    max_file_size: int = 500 * 1024
    min_quality: int = 80

    # ── Sizes ───────────────────────────────────────────────────
    enabled_labels: str = ""  # comma separated presets to switch on, e.g. "XL,XXL"

    # ── Fan-out ─────────────────────────────────────────────────
    processor: Literal["multithread", "asyncio"] = "multithread"
    max_workers: Optional[int] = None

    debug: bool = False

    model_config = SettingsConfigDict(
        env_prefix="TRANSCODING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def size_specs(self) -> List[SizeSpec]:
        """Default size table with any requested presets enabled."""
        requested = {label.strip() for label in self.enabled_labels.split(",") if label.strip()}
        known = {spec.label for spec in DEFAULT_SIZE_SPECS}
        unknown = requested - known
        if unknown:
            raise ConfigurationError(f"Unknown size labels: {sorted(unknown)}")

        return [
            spec.model_copy(update={"enabled": True}) if spec.label in requested else spec
            for spec in DEFAULT_SIZE_SPECS
        ]

    def to_config(self, **overrides: Any) -> TranscodingConfig:
        """Build the pipeline config; ``None`` overrides are ignored."""
        values = {
            "topic_arn": self.topic_arn,
            "bucket_delimiter": self.bucket_delimiter,
            "max_file_size": self.max_file_size,
            "min_quality": self.min_quality,
            "size_specs": self.size_specs(),
            "processor": self.processor,
            "max_workers": self.max_workers,
            "debug": self.debug,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return TranscodingConfig(**values)
