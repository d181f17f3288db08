import pytest

from image_transcoding.core.exceptions import (
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


@pytest.mark.parametrize(
    "error_cls",
    [
        ConfigurationError,
        EventFormatError,
        UnsupportedTypeError,
        S3Error,
        DownloadError,
        ProbeError,
        TransformError,
        PublishError,
        AggregationError,
        SignalAlreadySentError,
        JobFailedError,
    ],
)
def test_every_error_is_an_image_transcoding_error(error_cls) -> None:
    with pytest.raises(ImageTranscodingError, match="boom"):
        raise error_cls("boom")


def test_download_error_is_an_s3_error() -> None:
    assert issubclass(DownloadError, S3Error)


def test_unsupported_type_is_not_a_configuration_error() -> None:
    assert not issubclass(UnsupportedTypeError, ConfigurationError)
