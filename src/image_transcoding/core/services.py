"""Pure service implementations for the transcoding pipeline."""

from functools import partial
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .error_handling import BatchOperationContextManager, with_error_handling
from .exceptions import (
    AggregationError,
    ConfigurationError,
    DownloadError,
    EventFormatError,
    ProbeError,
    PublishError,
    SignalAlreadySentError,
    TransformError,
    UnsupportedTypeError,
)
from .image_utils import (
    compute_target_dimensions,
    encode_image,
    probe_image,
    resize_image,
    variant_key,
)
from .locator import locate_job, read_event_location
from .models import (
    ImageType,
    Job,
    JobOutcome,
    JobReport,
    JobStatus,
    NotificationMessage,
    SizeSpec,
    SourceImage,
    TranscodingConfig,
    TransformSettings,
    VariantOutcome,
    VariantResult,
    VariantStatus,
)
from .observability import LogContext
from .protocols import (
    FanOutFunction,
    LoggerProtocol,
    S3ClientProtocol,
    SNSClientProtocol,
    TerminalSignalProtocol,
)
from .quality import estimate_quality


class SourceLoader:
    """Downloads the source object once and probes its dimensions once."""

    def __init__(self, s3_client: S3ClientProtocol, logger: LoggerProtocol):
        self._s3_client = s3_client
        self._logger = logger

    @with_error_handling(DownloadError)
    def download(self, bucket: str, key: str) -> Tuple[bytes, int, Optional[str]]:
        """Fetch the object body with its length and content type."""
        response = self._s3_client.get_object(Bucket=bucket, Key=key)
        body = response["Body"]
        image_bytes = body.read() if hasattr(body, "read") else bytes(body)
        content_length = response.get("ContentLength", len(image_bytes))
        return image_bytes, content_length, response.get("ContentType")

    @with_error_handling(ProbeError)
    def probe(self, image_bytes: bytes) -> Any:
        """Decode the image; fails rather than guessing dimensions."""
        image = probe_image(image_bytes)
        width, height = image.size
        if width <= 0 or height <= 0:
            raise ProbeError(f"Image reports empty dimensions {width}x{height}")
        return image

    def load(self, job: Job, log_context: Optional[LogContext] = None) -> SourceImage:
        context = (log_context or LogContext()).with_operation("download_image")
        self._logger.debug(
            f"Downloading s3://{job.source_bucket}/{job.source_key}", context
        )
        image_bytes, content_length, content_type = self.download(
            job.source_bucket, job.source_key
        )

        self._logger.debug("Probing image dimensions", context.with_operation("probe_image"))
        image = self.probe(image_bytes)
        width, height = image.size

        self._logger.info(
            f"Loaded source image {width}x{height}",
            context,
            content_length=content_length,
        )
        return SourceImage(
            body=image_bytes,
            content_length=content_length,
            content_type=content_type or _default_content_type(job.image_type),
            image=image,
            width=width,
            height=height,
        )


def _default_content_type(image_type: ImageType) -> str:
    return f"image/{image_type.value}"


class VariantTransformer:
    """Resizes, re-encodes and uploads one variant; never raises."""

    def __init__(self, s3_client: S3ClientProtocol, logger: LoggerProtocol):
        self._s3_client = s3_client
        self._logger = logger

    @with_error_handling(TransformError)
    def resize_and_encode(
        self,
        source: SourceImage,
        size: Tuple[int, int],
        image_type: ImageType,
        settings: TransformSettings,
    ) -> bytes:
        resized = resize_image(source.image, size)
        return encode_image(resized, image_type, settings.quality)

    @with_error_handling(TransformError)
    def upload(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        self._s3_client.put_object(
            Bucket=bucket, Key=key, Body=data, ContentType=content_type
        )

    def transform(
        self,
        job: Job,
        source: SourceImage,
        spec: SizeSpec,
        settings: TransformSettings,
        log_context: Optional[LogContext] = None,
    ) -> VariantOutcome:
        """Produce, skip or fail one variant of ``source``."""
        context = (log_context or LogContext()).with_operation(
            "transform_variant"
        ).with_metadata(label=spec.label, max_dimension=spec.max_dimension)

        dimensions = compute_target_dimensions(
            source.width, source.height, spec.max_dimension
        )
        if dimensions is None:
            self._logger.info(
                f"Skipping because resolution of input image is below {spec.max_dimension}",
                context,
            )
            return VariantOutcome.skipped(spec.label)

        width, height = dimensions
        dest_key = variant_key(spec.label, job.source_key)

        try:
            self._logger.debug(f"Resizing to {width}x{height}", context)
            data = self.resize_and_encode(source, dimensions, job.image_type, settings)

            self._logger.debug(
                f"Uploading to s3://{job.dest_bucket}/{dest_key}", context
            )
            self.upload(job.dest_bucket, dest_key, data, source.content_type)
        except TransformError as e:
            self._logger.error(f"Variant failed: {e}", context)
            return VariantOutcome.failed(spec.label, f"[{spec.label}] {e}")

        self._logger.info(f"Successfully completed: {dest_key}", context)
        return VariantOutcome.produced(
            VariantResult(label=spec.label, width=width, height=height)
        )


class OutcomeAggregator:
    """
    Fan-in barrier over the size spec table.

    Every expected label must report exactly once. Outcomes are kept in the
    order they were recorded, which is completion order.
    """

    def __init__(self, expected_labels: Iterable[str]):
        self._expected: List[str] = list(expected_labels)
        if len(set(self._expected)) != len(self._expected):
            raise AggregationError(f"Size spec labels are not unique: {self._expected}")
        self._outcomes: Dict[str, VariantOutcome] = {}

    def record(self, outcome: VariantOutcome) -> None:
        if outcome.label not in self._expected:
            raise AggregationError(f"Unexpected outcome for size '{outcome.label}'")
        if outcome.label in self._outcomes:
            raise AggregationError(f"Size '{outcome.label}' reported more than once")
        self._outcomes[outcome.label] = outcome

    @property
    def pending(self) -> List[str]:
        return [label for label in self._expected if label not in self._outcomes]

    @property
    def complete(self) -> bool:
        return not self.pending

    @property
    def outcomes(self) -> List[VariantOutcome]:
        return list(self._outcomes.values())

    def build(self, job_id: str) -> JobOutcome:
        """Produce the job outcome once every size has reported."""
        if not self.complete:
            raise AggregationError(f"Sizes never reported: {self.pending}")

        job_outcome = JobOutcome(job_id=job_id)
        for outcome in self._outcomes.values():
            if outcome.status is VariantStatus.PRODUCED and outcome.result is not None:
                job_outcome.produced_variants.append(outcome.result)
            elif outcome.status is VariantStatus.SKIPPED:
                job_outcome.skipped.append(outcome.label)
            else:
                job_outcome.errors.append(outcome.error or f"[{outcome.label}] failed")
        return job_outcome


class CompletionNotifier:
    """Publishes the single completion message of a job."""

    def __init__(self, sns_client: SNSClientProtocol, logger: LoggerProtocol):
        self._sns_client = sns_client
        self._logger = logger

    @with_error_handling(PublishError)
    def send(self, topic_arn: str, message: str) -> Dict[str, Any]:
        return self._sns_client.publish(TopicArn=topic_arn, Message=message)

    def publish(
        self,
        outcome: JobOutcome,
        topic_arn: str,
        log_context: Optional[LogContext] = None,
    ) -> Dict[str, Any]:
        """Publish ``{"jobId", "sources"}``; raises PublishError on failure."""
        context = (log_context or LogContext()).with_operation("publish_notification")
        message = NotificationMessage(
            job_id=outcome.job_id, sources=outcome.produced_variants
        )
        self._logger.debug(f"Publishing to {topic_arn}", context)
        response = self.send(topic_arn, message.to_json()) or {}
        self._logger.info(
            "Published completion notification",
            context,
            message_id=response.get("MessageId", ""),
        )
        return response


class InvocationSignal:
    """Exactly-once terminal signal recorded for the invoking runtime."""

    def __init__(self) -> None:
        self.status: Optional[JobStatus] = None
        self.message: Optional[str] = None

    @property
    def sent(self) -> bool:
        return self.status is not None

    def succeed(self, message: str) -> None:
        self._emit(JobStatus.SUCCEEDED, message)

    def fail(self, message: str) -> None:
        self._emit(JobStatus.FAILED, message)

    def _emit(self, status: JobStatus, message: str) -> None:
        if self.sent:
            raise SignalAlreadySentError(
                f"Terminal signal already sent ({self.status.value}): {self.message}"
            )
        self.status = status
        self.message = message


class TranscodingOrchestrator:
    """Runs one job: locate, load, fan out, fan in, notify, signal."""

    def __init__(
        self,
        source_loader: SourceLoader,
        transformer: VariantTransformer,
        notifier: CompletionNotifier,
        fan_out: FanOutFunction,
        logger: LoggerProtocol,
        config: TranscodingConfig,
    ):
        self._source_loader = source_loader
        self._transformer = transformer
        self._notifier = notifier
        self._fan_out = fan_out
        self._logger = logger
        self._config = config

    @property
    def config(self) -> TranscodingConfig:
        return self._config

    def run(
        self, event: Mapping[str, Any], signal: TerminalSignalProtocol
    ) -> JobReport:
        """Process one triggering event and emit its terminal signal."""
        self._logger.debug(f"Reading options from event: {dict(event)}")

        try:
            job = locate_job(event, self._config)
        except UnsupportedTypeError as e:
            self._logger.info(str(e))
            return JobReport(status=JobStatus.SKIPPED, message=str(e))
        except EventFormatError as e:
            self._logger.error(str(e))
            return self._fail(signal, f"Configuration error during imageTranscoding: {e}", None, [str(e)])
        except ConfigurationError as e:
            # The event was readable, only the bucket pair was rejected
            _, source_key = read_event_location(event)
            self._logger.error(str(e))
            return self._fail(
                signal,
                f"Configuration error during imageTranscoding on {source_key}: {e}",
                None,
                [str(e)],
            )

        log_context = LogContext(
            correlation_id=job.source_key, component="transcoding_orchestrator"
        ).with_metadata(source_bucket=job.source_bucket, dest_bucket=job.dest_bucket)

        try:
            source = self._source_loader.load(job, log_context)
        except (DownloadError, ProbeError) as e:
            self._logger.error(
                f"Unable to load {job.source_bucket}/{job.source_key}: {e}", log_context
            )
            return self._fail(
                signal,
                f"Fatal {type(e).__name__} during imageTranscoding on {job.source_key}: {e}",
                job,
                [str(e)],
            )

        settings = TransformSettings(
            quality=estimate_quality(
                source.content_length, source.width, source.height, self._config
            )
        )
        if settings.quality is not None:
            self._logger.info(f"Quality: {settings.quality}", log_context)

        specs = self._config.active_size_specs
        aggregator = OutcomeAggregator(spec.label for spec in specs)
        transform_fn = partial(
            self._transformer.transform,
            job,
            source,
            settings=settings,
            log_context=log_context,
        )

        with BatchOperationContextManager(
            operation_name=f"imageTranscoding of {job.source_key}"
        ) as batch:
            for outcome in self._fan_out(transform_fn, specs, self._config.max_workers):
                aggregator.record(outcome)
            job_outcome = aggregator.build(job.source_key)

            for outcome in aggregator.outcomes:
                if outcome.status is VariantStatus.FAILED:
                    batch.add_error(outcome.error, outcome.label)

            try:
                self._notifier.publish(job_outcome, self._config.topic_arn, log_context)
            except PublishError as e:
                batch.add_error(str(e), self._config.topic_arn)

        errors = batch.error_messages
        if errors:
            self._logger.error(
                f"Unable to resize {job.source_bucket}/{job.source_key} and upload to "
                f"{job.dest_bucket} due to {len(errors)} error(s)!",
                log_context,
            )
            return self._fail(
                signal,
                f"There were {len(errors)} error(s) during imageTranscoding on {job.source_key}",
                job,
                errors,
                job_outcome,
            )

        self._logger.info(
            f"Successfully resized {job.source_bucket}/{job.source_key} and uploaded to "
            f"{job.dest_bucket}",
            log_context,
            produced=len(job_outcome.produced_variants),
            skipped=len(job_outcome.skipped),
        )
        message = (
            f"Successful completion of imageTranscoding on {job.source_key} "
            f"({job.source_bucket} -> {job.dest_bucket})"
        )
        signal.succeed(message)
        return JobReport(
            status=JobStatus.SUCCEEDED, message=message, job=job, outcome=job_outcome
        )

    @staticmethod
    def _fail(
        signal: TerminalSignalProtocol,
        message: str,
        job: Optional[Job],
        errors: List[str],
        outcome: Optional[JobOutcome] = None,
    ) -> JobReport:
        signal.fail(message)
        return JobReport(
            status=JobStatus.FAILED, message=message, job=job, outcome=outcome, errors=errors
        )
