"""Main module for the image transcoding CLI."""

import sys
import argparse

from . import __version__
from .config import TranscodingSettings
from .core import JobStatus, get_logger, set_debug
from .core.factories import TranscodingPipelineFactory
from .core.services import InvocationSignal


def build_parser() -> argparse.ArgumentParser:
    """
    Build the ``image-transcoding`` argument parser.

    The ``transcode`` command submits a direct invocation (bucket plus key)
    through the same pipeline the storage trigger uses, for backfills and
    manual re-runs.
    """
    parser = argparse.ArgumentParser(
        prog="image-transcoding",
        description="Image Transcoding - resize one S3 image into fixed-size variants",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Re-run the variants of one source image
  image-transcoding transcode --bucket photos-in --key vacation.jpg

  # Use the asyncio fan-out and a different completion topic
  image-transcoding transcode --bucket photos-in --key vacation.jpg \\
                              --processor asyncio --topic-arn arn:aws:sns:...

  # Read from "photos-upload" and write to "photos"
  image-transcoding transcode --bucket photos-upload --key vacation.jpg \\
                              --bucket-delimiter=-upload

  # Show version
  image-transcoding version
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    transcode_parser = subparsers.add_parser(
        "transcode", help="Transcode one source image into its variants"
    )
    transcode_parser.add_argument("--bucket", required=True, help="Source S3 bucket")
    transcode_parser.add_argument("--key", required=True, help="Source S3 key")
    transcode_parser.add_argument(
        "--topic-arn", default=None, help="SNS topic for the completion notification"
    )
    transcode_parser.add_argument(
        "--bucket-delimiter",
        default=None,
        help="Suffix stripped from the source bucket to name the destination bucket; "
        "pass values starting with a dash as --bucket-delimiter=-in",
    )
    transcode_parser.add_argument(
        "--processor",
        type=str,
        default=None,
        choices=["multithread", "asyncio"],
        help="Fan-out strategy to use (default: multithread)",
    )
    transcode_parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )

    subparsers.add_parser("version", help="Show version information")
    return parser


def run_transcode(args: argparse.Namespace) -> int:
    """Run one direct invocation and return the process exit code."""
    logger = get_logger("cli")
    try:
        config = TranscodingSettings().to_config(
            topic_arn=args.topic_arn,
            bucket_delimiter=args.bucket_delimiter,
            processor=args.processor,
            debug=args.debug or None,
        )
        if config.debug:
            set_debug(logger)

        pipeline = TranscodingPipelineFactory.create_pipeline(config=config)
        signal = InvocationSignal()
        report = pipeline.run({"container": args.bucket, "name": args.key}, signal)
    except KeyboardInterrupt:
        logger.warning("Transcoding interrupted by user.")
        return 130
    except Exception as e:
        logger.error(f"Transcoding failed: {e}", exc_info=True)
        return 1

    print(report.message)
    return 1 if report.status is JobStatus.FAILED else 0


def main() -> None:
    """Entry point for the ``image-transcoding`` command."""
    parser = build_parser()
    args: argparse.Namespace = parser.parse_args()

    if args.command == "transcode":
        sys.exit(run_transcode(args))

    elif args.command == "version":
        print("Image Transcoding CLI")
        print(f"Version {__version__}")
        print("S3 image variants with SNS completion notifications")
        sys.exit(0)

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
