"""Custom exceptions for image transcoding."""


class ImageTranscodingError(Exception):
    """Base exception for all image transcoding errors."""


class ConfigurationError(ImageTranscodingError):
    """Error raised for invalid configuration, e.g. a write-back bucket loop."""


class EventFormatError(ConfigurationError):
    """Error raised when the triggering event matches no known shape."""


class UnsupportedTypeError(ImageTranscodingError):
    """Raised when the source key has no supported image extension.

    Jobs failing with this error are skipped, not reported as failures.
    """


class S3Error(ImageTranscodingError):
    """Error raised for object store failures."""


class DownloadError(S3Error):
    """Error raised when the source object cannot be fetched."""


class ProbeError(ImageTranscodingError):
    """Error raised when the source dimensions cannot be determined."""


class TransformError(ImageTranscodingError):
    """Error raised when one variant fails to resize, encode or upload."""


class PublishError(ImageTranscodingError):
    """Error raised when the completion notification cannot be published."""


class AggregationError(ImageTranscodingError):
    """Error raised when variant outcomes are missing, unknown or duplicated."""


class SignalAlreadySentError(ImageTranscodingError):
    """Error raised when a terminal signal is emitted more than once."""


class JobFailedError(ImageTranscodingError):
    """Raised by entry points to mark the invocation as failed."""
