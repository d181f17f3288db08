"""Derive the job's source and destination locations from the triggering event."""

from typing import Any, Dict, Mapping, Tuple
from urllib.parse import unquote_plus

from .exceptions import ConfigurationError, EventFormatError, UnsupportedTypeError
from .models import ImageType, Job, TranscodingConfig


def read_event_location(event: Mapping[str, Any]) -> Tuple[str, str]:
    """
    Extract ``(bucket, key)`` from a storage-change or direct invocation event.

    Storage-change keys are URL encoded with ``+`` standing for a space.
    """
    records = event.get("Records")
    if records:
        try:
            s3_record: Dict[str, Any] = records[0]["s3"]
            bucket = s3_record["bucket"]["name"]
            raw_key = s3_record["object"]["key"]
        except (KeyError, IndexError, TypeError) as e:
            raise EventFormatError(f"Malformed storage event record: {e}") from e
        return bucket, unquote_plus(raw_key)

    bucket = event.get("container")
    key = event.get("name")
    if not bucket or not key:
        raise EventFormatError(
            "Event carries neither a storage record nor a container/name pair"
        )
    return bucket, key


def derive_dest_bucket(source_bucket: str, delimiter: str) -> str:
    """
    Strip the last occurrence of ``delimiter`` and everything after it.

    Raises:
        ConfigurationError: If nothing is stripped, which would write variants
            back into the source bucket and retrigger the pipeline.
    """
    head, found, _ = source_bucket.rpartition(delimiter)
    dest_bucket = head if found else source_bucket

    if dest_bucket == source_bucket:
        raise ConfigurationError(
            "the source and destination buckets must be different: "
            f"src = {source_bucket}, dest = {dest_bucket}"
        )
    return dest_bucket


def infer_image_type(key: str) -> ImageType:
    """Image type from the text after the key's last dot."""
    _, dot, extension = key.rpartition(".")
    if not dot:
        raise UnsupportedTypeError(f"unable to infer image type for key {key}")

    image_type = ImageType.from_extension(extension)
    if image_type is None:
        raise UnsupportedTypeError(f"skipping non-image {key}")
    return image_type


def locate_job(event: Mapping[str, Any], config: TranscodingConfig) -> Job:
    """Build the immutable job for one invocation."""
    source_bucket, source_key = read_event_location(event)
    dest_bucket = derive_dest_bucket(source_bucket, config.bucket_delimiter)
    image_type = infer_image_type(source_key)

    return Job(
        source_bucket=source_bucket,
        source_key=source_key,
        dest_bucket=dest_bucket,
        image_type=image_type,
    )
