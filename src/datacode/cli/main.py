# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Command line entry point for the ``datacode`` executable."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from ..errors import (
    CompressionError,
    DuplicateIdentifierError,
    FormatError,
    InvalidIdentifierError,
    OutputExistsError,
    PackageResolutionError,
)
from ..formatting import RuffFormatter
from ..generator import generate
from ..logging import StructuredLogger, configure_logging, get_logger
from ..model import GenerationRequest
from ..output import ensure_writable, write_output
from ..packages import ImportPackageResolver, PackageResolver
from ..payload import Encoding
from .config import ConfigError, DatacodeConfig, load_config

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_IO = 3
EXIT_GENERATION = 4
EXIT_FORMAT = 5


def main(
    argv: Sequence[str] | None = None,
    *,
    resolver: PackageResolver | None = None,
) -> int:
    """Run the datacode CLI."""

    parser = _build_parser()
    try:
        args = parser.parse_args(list(argv) if argv is not None else None)
    except SystemExit as exc:  # argparse exits with code 2 on errors
        code = exc.code if isinstance(exc.code, int) else 2
        return int(code)

    configure_logging(level=args.log_level, json_mode=args.json_logs)
    logger = get_logger(__name__)

    if not args.paths:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: error: no input files given", file=sys.stderr)
        return EXIT_USAGE

    try:
        config_path = Path(args.config) if args.config is not None else None
        config = load_config(config_path, cli_overrides=_cli_overrides(args))
    except ConfigError as error:
        logger.error(
            "Invalid configuration",
            event="datacode.cli.config_error",
            context={"error": str(error)},
        )
        return EXIT_USAGE

    return _run(config, args.paths, resolver or ImportPackageResolver(), logger)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="datacode",
        description="Embed files in a Python module as byte-returning functions.",
    )
    _ = parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="Files to embed; one function is generated per file.",
    )
    _ = parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output file (default: data.py).",
    )
    _ = parser.add_argument(
        "--prefix",
        default=None,
        help="Prefix to strip from paths when naming functions.",
    )
    _ = parser.add_argument(
        "--suffix",
        default=None,
        help="Suffix to strip from paths when naming functions.",
    )
    _ = parser.add_argument(
        "--compress",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="DEFLATE compress embedded data (default: on).",
    )
    _ = parser.add_argument(
        "--level",
        type=int,
        default=None,
        help="Compression level: -2 Huffman only, -1 default, 0-9 (default: -1).",
    )
    _ = parser.add_argument(
        "--encoding",
        choices=tuple(member.value for member in Encoding),
        default=None,
        help="Textual form of embedded data (default: base64).",
    )
    _ = parser.add_argument(
        "--package",
        default=None,
        help="Override the package name resolved from the output directory.",
    )
    _ = parser.add_argument(
        "--fmt",
        dest="format_output",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Run the output through the formatter (default: on).",
    )
    _ = parser.add_argument(
        "--format-command",
        default=None,
        help="Formatter command reading stdin; {filename} is the output path.",
    )
    _ = parser.add_argument(
        "-f",
        "--force",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Overwrite the output file if it exists.",
    )
    _ = parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Configuration file (TOML or YAML; default: ./datacode.toml).",
    )
    _ = parser.add_argument(
        "--log-level",
        choices=("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"),
        default=None,
        help="Override the log level emitted by the CLI.",
    )
    _ = parser.add_argument(
        "--json-logs",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Emit structured JSON logs (default: DATACODE_LOG_FORMAT).",
    )
    return parser


def _cli_overrides(args: argparse.Namespace) -> dict[str, object]:
    return {
        "output": args.output,
        "prefix": args.prefix,
        "suffix": args.suffix,
        "compress": args.compress,
        "level": args.level,
        "encoding": args.encoding,
        "package": args.package,
        "format_output": args.format_output,
        "format_command": args.format_command,
        "force": args.force,
    }


def _run(
    config: DatacodeConfig,
    paths: Sequence[str],
    resolver: PackageResolver,
    logger: StructuredLogger,
) -> int:
    output = config.output
    log = logger.bind(output=str(output))

    try:
        ensure_writable(output, force=config.force)
    except OutputExistsError as error:
        log.error(str(error), event="datacode.cli.output_exists")
        return EXIT_USAGE

    try:
        package = config.package or resolver.resolve_package_name(output.parent)
        request = GenerationRequest.from_paths(
            paths,
            package_name=package,
            prefix=config.prefix,
            suffix=config.suffix,
            compress=config.compress,
            compress_level=config.level,
            encoding=config.encoding,
            format_output=config.format_output,
        )
        formatter = RuffFormatter(
            filename=str(output),
            command=config.format_command,
            policy=config.format_failure,
        )
        source = generate(request, formatter=formatter, logger=log)
    except (
        InvalidIdentifierError,
        DuplicateIdentifierError,
        CompressionError,
        PackageResolutionError,
    ) as error:
        log.error(
            "Generation failed",
            event="datacode.cli.generation_error",
            context={"error": str(error)},
        )
        return EXIT_GENERATION
    except FormatError as error:
        log.error(
            "Formatting failed",
            event="datacode.cli.format_error",
            context={"error": str(error)},
        )
        if error.source is not None:
            _ = sys.stderr.write(error.source)
        return EXIT_FORMAT
    except OSError as error:
        log.error(
            "Cannot read input",
            event="datacode.cli.input_error",
            context={"path": error.filename, "error": error.strerror or str(error)},
        )
        return EXIT_IO

    try:
        write_output(output, source, force=config.force)
    except OutputExistsError as error:
        log.error(str(error), event="datacode.cli.output_exists")
        return EXIT_USAGE
    except OSError as error:
        log.error(
            "Cannot write output",
            event="datacode.cli.output_error",
            context={"error": str(error)},
        )
        return EXIT_IO

    log.info(
        "Wrote data module.",
        event="datacode.cli.written",
        context={"functions": len(paths), "package": request.package_name},
    )
    return EXIT_OK
