"""Main CLI entry point for the contextual-encode command-line tool.

Reads text of one media type and writes it encoded as a single value for a
container of another media type.
"""

import argparse
import io
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from contextual_encoding.media.context import EncodingContext
from contextual_encoding.media.types import Doctype, MediaType, Serialization
from contextual_encoding.shared.config import ConfigError, ConfigValidationError, EncodingConfig
from contextual_encoding.shared.errors import EncodingError
from contextual_encoding.shared.logging import get_logger, new_stream_id
from contextual_encoding.writer.media_writer import new_media_writer

logger = get_logger(__name__, None, "cli")

PRESETS = {
    "compact": EncodingConfig.compact,
    "pretty": EncodingConfig.pretty,
    "translation_debug": EncodingConfig.translation_debug,
}


def parse_media_type(value: str) -> MediaType:
    """Resolve a media type from a member name or a content-type label."""
    try:
        return MediaType[value.strip().upper().replace("-", "_")]
    except KeyError:
        pass
    try:
        return MediaType.from_content_type(value)
    except ValueError:
        names = ", ".join(media_type.name.lower() for media_type in MediaType)
        raise argparse.ArgumentTypeError(
            f"unknown media type {value!r} (choose from {names} or a content type)"
        ) from None


def load_config(preset: str, config_path: Optional[Path] = None) -> EncodingConfig:
    """Load configuration from a preset, overridden by a JSON file.

    Raises:
        ConfigError: If the file cannot be read or holds invalid settings
    """
    config = PRESETS[preset]()
    if config_path is None:
        return config
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Could not read config file {config_path}: {e}") from e
    try:
        overrides = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
    if not isinstance(overrides, dict):
        raise ConfigValidationError("Configuration JSON must be an object")

    # Components named in the file are merged field by field into the preset
    data = config.to_dict()
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(data.get(key), dict):
            data[key].update(value)
        else:
            data[key] = value
    return EncodingConfig.from_dict(data)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="contextual-encode",
        description="Encode text of one media type for embedding in another"
    )

    parser.add_argument("--version", action="version", version="0.1.0")

    parser.add_argument(
        "--content",
        type=parse_media_type,
        required=True,
        help="Media type of the input (e.g. text, url, javascript)"
    )
    parser.add_argument(
        "--container",
        type=parse_media_type,
        required=True,
        help="Media type the output is embedded in (e.g. xhtml, xhtml_attribute)"
    )
    parser.add_argument(
        "--serialization",
        choices=[serialization.value for serialization in Serialization],
        default=Serialization.SGML.value,
        help="Markup serialization (default: sgml)"
    )
    parser.add_argument(
        "--doctype",
        choices=[doctype.value for doctype in Doctype],
        default=Doctype.HTML5.value,
        help="Document type (default: html5)"
    )
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        default="compact",
        help="Configuration preset"
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        help="JSON configuration file overriding the preset"
    )
    parser.add_argument(
        "--input", "-i",
        type=Path,
        help="Input file (default: stdin)"
    )
    parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    verbosity.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log errors"
    )

    return parser


def encode_text(
    text: str,
    content_type: MediaType,
    container_type: MediaType,
    context: EncodingContext = EncodingContext.DEFAULT,
    config: Optional[EncodingConfig] = None,
    correlation_id: Optional[str] = None
) -> str:
    """Encode ``text`` as one complete value, prefix and suffix included."""
    buffer = io.StringIO()
    writer = new_media_writer(
        context, content_type, container_type, buffer, config, correlation_id
    )
    writer.write_prefix()
    writer.write(text)
    writer.write_suffix()
    return buffer.getvalue()


def cmd_encode(args: argparse.Namespace) -> int:
    """Encode the input and write the result."""
    try:
        config = load_config(args.preset, args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    context = EncodingContext(
        doctype=Doctype(args.doctype),
        serialization=Serialization(args.serialization),
    )

    try:
        if args.input:
            text = args.input.read_text(encoding="utf-8")
        else:
            text = sys.stdin.read()
    except OSError as e:
        print(f"Error: Could not read input: {e}", file=sys.stderr)
        return 1

    stream_id = new_stream_id()
    try:
        encoded = encode_text(text, args.content, args.container, context, config, stream_id)
    except EncodingError as e:
        logger.for_stream(stream_id).error(
            "Encoding failed",
            extra={"content_type": args.content.name, "container_type": args.container.name}
        )
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        if args.output:
            args.output.write_text(encoded, encoding="utf-8")
        else:
            sys.stdout.write(encoded)
    except OSError as e:
        print(f"Error: Could not write output: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    # Set up logging verbosity
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    try:
        return cmd_encode(args)
    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
