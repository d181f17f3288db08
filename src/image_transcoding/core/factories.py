"""Factory classes for creating configured service instances."""

import logging
from typing import Any, Optional

import boto3

from ..processors import get_fan_out
from .logging_config import DEFAULT_LOGGER_NAME, setup_logger
from .models import TranscodingConfig
from .observability import LogContext, format_message
from .protocols import LoggerProtocol, S3ClientProtocol, SNSClientProtocol
from .services import (
    CompletionNotifier,
    SourceLoader,
    TranscodingOrchestrator,
    VariantTransformer,
)


class LoggerAdapter:
    """Adapter to make standard logger compatible with LoggerProtocol."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def debug(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        """Log debug message."""
        self._logger.debug(format_message(message, context, **kwargs))

    def info(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        """Log info message."""
        self._logger.info(format_message(message, context, **kwargs))

    def warning(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        """Log warning message."""
        self._logger.warning(format_message(message, context, **kwargs))

    def error(self, message: str, context: Optional[LogContext] = None, **kwargs: Any) -> None:
        """Log error message."""
        self._logger.error(format_message(message, context, **kwargs))


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(
        name: str = DEFAULT_LOGGER_NAME, level: Optional[str] = None
    ) -> LoggerAdapter:
        """Create a configured logger instance."""
        return LoggerAdapter(setup_logger(name, level=level))


class S3ClientFactory:
    """Factory for creating S3 client instances."""

    @staticmethod
    def create_s3_client(**kwargs: Any) -> S3ClientProtocol:
        """Create S3 client with optional configuration."""
        session = boto3.Session()
        return session.client("s3", **kwargs)  # type: ignore


class SNSClientFactory:
    """Factory for creating SNS client instances."""

    @staticmethod
    def create_sns_client(**kwargs: Any) -> SNSClientProtocol:
        """Create SNS client with optional configuration."""
        session = boto3.Session()
        return session.client("sns", **kwargs)  # type: ignore


class TranscodingPipelineFactory:
    """Factory for creating the complete transcoding pipeline."""

    @staticmethod
    def create_pipeline(
        config: Optional[TranscodingConfig] = None,
        s3_client: Optional[S3ClientProtocol] = None,
        sns_client: Optional[SNSClientProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
    ) -> TranscodingOrchestrator:
        """Create a fully configured transcoding pipeline."""
        if config is None:
            config = TranscodingConfig()

        if s3_client is None:
            s3_client = S3ClientFactory.create_s3_client()

        if sns_client is None:
            sns_client = SNSClientFactory.create_sns_client()

        if logger is None:
            logger = LoggerFactory.create_logger(
                DEFAULT_LOGGER_NAME, level="DEBUG" if config.debug else None
            )

        return TranscodingOrchestrator(
            source_loader=SourceLoader(s3_client, logger),
            transformer=VariantTransformer(s3_client, logger),
            notifier=CompletionNotifier(sns_client, logger),
            fan_out=get_fan_out(config.processor),
            logger=logger,
            config=config,
        )
