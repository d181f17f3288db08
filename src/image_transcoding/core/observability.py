"""Observability utilities for structured, correlated logging."""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Context information for structured logging."""

    correlation_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    operation: str = ""
    component: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def with_operation(self, operation: str) -> "LogContext":
        """Create new context with operation set."""
        return LogContext(
            correlation_id=self.correlation_id,
            operation=operation,
            component=self.component,
            metadata=self.metadata.copy(),
        )

    def with_metadata(self, **kwargs: Any) -> "LogContext":
        """Create new context with additional metadata."""
        new_metadata = self.metadata.copy()
        new_metadata.update(kwargs)
        return LogContext(
            correlation_id=self.correlation_id,
            operation=self.operation,
            component=self.component,
            metadata=new_metadata,
        )


def format_message(message: str, context: Optional[LogContext] = None, **kwargs: Any) -> str:
    """Render a message with its correlation id, operation and metadata."""
    if context is None:
        if not kwargs:
            return message
        return f"{message} ({', '.join(f'{k}={v}' for k, v in kwargs.items())})"

    formatted_message = f"[{context.correlation_id}] {message}"
    if context.operation:
        formatted_message = f"[{context.operation}] {formatted_message}"

    extra = {**context.metadata, **kwargs}
    if extra:
        metadata_str = ", ".join(f"{k}={v}" for k, v in extra.items())
        formatted_message = f"{formatted_message} ({metadata_str})"
    return formatted_message
