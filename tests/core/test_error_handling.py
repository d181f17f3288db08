# tests/core/test_error_handling.py

import logging
from unittest import mock

import pytest
from botocore.exceptions import ClientError as BotocoreClientError
from botocore.exceptions import EndpointConnectionError
from PIL import UnidentifiedImageError as PILUnidentifiedImageError

from image_transcoding.core import error_handling
from image_transcoding.core.error_handling import (
    BatchOperationContextManager,
    with_error_handling,
)
from image_transcoding.core.exceptions import (
    ConfigurationError,
    DownloadError,
    ProbeError,
    PublishError,
)


@pytest.fixture
def mock_logger():
    """Patch the logging module seen by error_handling; the global one stays real."""
    with mock.patch.object(error_handling, "logging") as mock_logging:
        mock_log_instance = mock.Mock()
        mock_logging.getLogger.return_value = mock_log_instance
        yield mock_log_instance


def test_mock_logger_leaves_global_logging_alone(mock_logger):
    assert isinstance(logging.getLogger(), logging.Logger)
    assert error_handling.logging.getLogger("x") is mock_logger


# --- Tests for @with_error_handling decorator ---

def test_with_error_handling_wraps_generic_error(mock_logger):
    @with_error_handling(DownloadError)
    def fetch():
        raise ValueError("Original error")

    with pytest.raises(DownloadError, match="fetch failed: Original error") as excinfo:
        fetch()

    assert isinstance(excinfo.value.__cause__, ValueError)
    mock_logger.error.assert_called_once()
    _, kwargs = mock_logger.error.call_args
    assert kwargs.get("exc_info") is True


def test_with_error_handling_maps_botocore_client_error(mock_logger):
    @with_error_handling(DownloadError)
    def fetch():
        raise BotocoreClientError(
            {"Error": {"Code": "NoSuchKey", "Message": "The specified key does not exist."}},
            "GetObject",
        )

    with pytest.raises(DownloadError, match="AWS operation failed in fetch"):
        fetch()
    mock_logger.error.assert_called_once()


def test_with_error_handling_maps_botocore_core_error(mock_logger):
    @with_error_handling(PublishError)
    def send():
        raise EndpointConnectionError(endpoint_url="https://sns.us-east-1.amazonaws.com")

    with pytest.raises(PublishError, match="AWS operation failed in send"):
        send()


def test_with_error_handling_maps_unreadable_image(mock_logger):
    @with_error_handling(ProbeError)
    def probe():
        raise PILUnidentifiedImageError("cannot identify image file")

    with pytest.raises(ProbeError, match="Failed to identify image in probe"):
        probe()


def test_with_error_handling_passes_pipeline_errors_through(mock_logger):
    @with_error_handling(DownloadError)
    def locate():
        raise ConfigurationError("bucket loop")

    with pytest.raises(ConfigurationError, match="bucket loop"):
        locate()
    mock_logger.error.assert_not_called()


def test_with_error_handling_returns_value_on_success():
    @with_error_handling(DownloadError)
    def fetch(bucket, key="k"):
        return f"{bucket}/{key}"

    assert fetch("photos-in", key="a.jpg") == "photos-in/a.jpg"
    assert fetch.__name__ == "fetch"


# --- Tests for BatchOperationContextManager ---

def test_batch_context_without_errors(mock_logger):
    with BatchOperationContextManager("imageTranscoding of a.jpg") as batch:
        pass

    assert batch.errors == []
    assert batch.error_messages == []
    mock_logger.info.assert_any_call("imageTranscoding of a.jpg completed successfully.")
    mock_logger.error.assert_not_called()


def test_batch_context_logs_each_error(mock_logger):
    with BatchOperationContextManager("imageTranscoding of a.jpg") as batch:
        batch.add_error("[S] upload failed", "S")
        batch.add_error("publish failed", "arn:topic")

    assert batch.error_messages == ["[S] upload failed", "publish failed"]
    assert batch.errors[0] == {"item": "S", "error": "[S] upload failed"}
    mock_logger.warning.assert_called_once_with(
        "imageTranscoding of a.jpg completed with 2 error(s)."
    )
    assert mock_logger.error.call_count == 2


def test_batch_context_does_not_suppress_exceptions(mock_logger):
    with pytest.raises(RuntimeError, match="fan-in broke"):
        with BatchOperationContextManager("imageTranscoding of a.jpg"):
            raise RuntimeError("fan-in broke")

    _, kwargs = mock_logger.error.call_args
    assert kwargs["exc_info"][0] is RuntimeError


def test_batch_context_default_item_identifier():
    batch = BatchOperationContextManager()
    batch.add_error(ValueError("bad"))

    assert batch.errors == [{"item": "Unknown item", "error": "bad"}]
    assert batch.operation_name == "Batch Operation"
    assert isinstance(batch.logger, logging.Logger)
