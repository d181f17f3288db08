"""Protocol definitions for dependency injection and testability."""

from typing import Any, Callable, Dict, List, Optional, Protocol

from .models import SizeSpec, VariantOutcome


class S3ClientProtocol(Protocol):
    """Protocol for S3 client operations."""

    def get_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        """Get object from S3."""
        ...

    def put_object(
        self, Bucket: str, Key: str, Body: bytes, ContentType: str
    ) -> Dict[str, Any]:
        """Put object to S3."""
        ...


class SNSClientProtocol(Protocol):
    """Protocol for SNS client operations."""

    def publish(self, TopicArn: str, Message: str) -> Dict[str, Any]:
        """Publish a message to a topic."""
        ...


class TerminalSignalProtocol(Protocol):
    """The invoking runtime's terminal call, made exactly once per job."""

    def succeed(self, message: str) -> None:
        ...

    def fail(self, message: str) -> None:
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Optional[Any] = None, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, context: Optional[Any] = None, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, context: Optional[Any] = None, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, context: Optional[Any] = None, **kwargs: Any) -> None:
        """Log error message."""
        ...


# One transform per size spec; must return a tagged outcome instead of raising.
TransformFunction = Callable[[SizeSpec], VariantOutcome]


class FanOutFunction(Protocol):
    """Runs one transform per spec concurrently, returning outcomes in completion order."""

    def __call__(
        self,
        transform_fn: TransformFunction,
        specs: List[SizeSpec],
        max_workers: Optional[int] = None,
    ) -> List[VariantOutcome]:
        ...
