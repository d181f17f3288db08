# src/image_transcoding/core/error_handling.py

import functools
import logging
from typing import Any, Callable, Dict, List, Type, TypeVar

from botocore.exceptions import BotoCoreError, ClientError as BotocoreClientError
from PIL import UnidentifiedImageError as PILUnidentifiedImageError

from .exceptions import ImageTranscodingError

F = TypeVar("F", bound=Callable[..., Any])


def with_error_handling(error_cls: Type[ImageTranscodingError]) -> Callable[[F], F]:
    """
    A decorator factory translating collaborator failures into ``error_cls``.

    Pipeline errors pass through untouched. Anything else raised by the
    wrapped call (boto errors, Pillow decode errors, fake client errors) is
    logged with its traceback and re-raised as ``error_cls``.
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            logger = logging.getLogger(func.__module__ + "." + func.__name__)
            try:
                return func(*args, **kwargs)
            except ImageTranscodingError:
                raise
            except (BotocoreClientError, BotoCoreError) as e:
                logger.error(f"AWS call failed in '{func.__name__}': {e}", exc_info=True)
                raise error_cls(f"AWS operation failed in {func.__name__}: {e}") from e
            except PILUnidentifiedImageError as e:
                logger.error(f"Unreadable image in '{func.__name__}': {e}", exc_info=True)
                raise error_cls(f"Failed to identify image in {func.__name__}: {e}") from e
            except Exception as e:  # noqa: BLE001
                logger.error(f"Error in '{func.__name__}': {e}", exc_info=True)
                raise error_cls(f"{func.__name__} failed: {e}") from e

        return wrapper  # type: ignore[return-value]

    return decorator


class BatchOperationContextManager:
    """
    Context manager collecting the recoverable errors of one job and
    surfacing each of them individually when the block exits.
    """

    def __init__(self, operation_name: str = "Batch Operation"):
        self.operation_name = operation_name
        self.errors: List[Dict[str, str]] = []
        self.logger = logging.getLogger(self.__class__.__module__ + "." + self.__class__.__name__)

    def __enter__(self) -> "BatchOperationContextManager":
        self.logger.info(f"Starting {self.operation_name}.")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if self.errors:
            self.logger.warning(
                f"{self.operation_name} completed with {len(self.errors)} error(s)."
            )
            for i, error_detail in enumerate(self.errors):
                self.logger.error(
                    f"  Error {i + 1}/{len(self.errors)} for item "
                    f"'{error_detail['item']}': {error_detail['error']}"
                )
        elif exc_type:
            self.logger.error(
                f"{self.operation_name} failed due to an unhandled exception: {exc_val}",
                exc_info=(exc_type, exc_val, exc_tb),
            )
        else:
            self.logger.info(f"{self.operation_name} completed successfully.")

        # Never suppress exceptions raised inside the block
        return False

    def add_error(self, error_message: str, item_identifier: str = "Unknown item") -> None:
        """
        Report an error for a specific item within the 'with' block.

        Args:
            error_message: The error message or exception string.
            item_identifier: A string identifying the failed item (variant label, topic).
        """
        self.errors.append({"item": item_identifier, "error": str(error_message)})
        self.logger.debug(
            f"Error added for item '{item_identifier}' in {self.operation_name}: {error_message}"
        )

    @property
    def error_messages(self) -> List[str]:
        """Collected error messages in reporting order."""
        return [error_detail["error"] for error_detail in self.errors]
