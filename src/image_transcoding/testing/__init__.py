"""Testing utilities and fakes for image transcoding."""

from .fakes import (
    FakeS3Client,
    FakeSNSClient,
    FakeLogger,
    RecordingSignal,
    S3Object,
    S3Bucket,
    create_test_image,
    setup_test_s3_environment,
)

__all__ = [
    "FakeS3Client",
    "FakeSNSClient",
    "FakeLogger",
    "RecordingSignal",
    "S3Object",
    "S3Bucket",
    "create_test_image",
    "setup_test_s3_environment",
]
