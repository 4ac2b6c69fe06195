"""Console entry point: checksum one file and compare against given values."""

import argparse
import logging
import re
import sys
from pathlib import Path
from typing import List, Optional

from filechecksum.common import ConfigLoader, ConfigurationError, LogContext, setup_logging

from .algorithms import AlgorithmId
from .comparison import compare, describe
from .config import FileChecksumConfig, MAX_CHUNK_SIZE, MIN_CHUNK_SIZE
from .engine import ChecksumEngine
from .errors import InvalidBufferSizeError, WorkerFailedError
from .normalizer import normalize
from .progress import ProgressReporter
from .result import ChecksumResult, RunStatus, SlotStatus
from .worker import ChecksumWorker

APP_NAME = "filechecksum"

EXIT_SUCCESS = 0  # every supplied checksum matched
EXIT_FAILURE = 1  # mismatch, unreadable file, bad arguments, or cancelled
EXIT_UNKNOWN = 2  # nothing was compared

_BUFFER_SIZE_PATTERN = re.compile(r"(\d{1,9})(|b|k|kb|kib|m|mb|mib)", re.IGNORECASE)

_SELECTION_FLAGS = ("md5", "sha1", "sha256", "sha512")

_POLL_INTERVAL = 0.1

logger = logging.getLogger(__package__ or __name__)


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser whose usage errors use the tool's failure status."""

    def error(self, message: str) -> None:
        self.print_usage(sys.stderr)
        self.exit(EXIT_FAILURE, f"{self.prog}: error: {message}\n")


def parse_buffer_size(text: str) -> int:
    """Parse a buffer size such as "65536", "64k", "64KiB" or "16mb".

    Raises:
        InvalidBufferSizeError: If the syntax is wrong or the size is
            outside 256 bytes to 64 MiB
    """
    match = _BUFFER_SIZE_PATTERN.fullmatch(text.strip())
    if not match:
        raise InvalidBufferSizeError(f"Invalid buffer size: {text}", value=text)

    size = int(match.group(1))
    suffix = match.group(2).lower()
    if suffix.startswith("k"):
        size *= 0x400
    elif suffix.startswith("m"):
        size *= 0x100000

    if size < MIN_CHUNK_SIZE or size > MAX_CHUNK_SIZE:
        raise InvalidBufferSizeError(
            f"Buffer size must be from 256 bytes to 64 MB: {text}", value=text
        )
    return size


def apply_selection(enabled: set[AlgorithmId], selection: Optional[List[str]]) -> set[AlgorithmId]:
    """Apply --md5/--sha1/--sha256/--sha512/--all/--none flags left to right."""
    enabled = set(enabled)
    for flag in selection or []:
        if flag == "all":
            enabled |= {AlgorithmId(name) for name in _SELECTION_FLAGS}
        elif flag == "none":
            enabled -= {AlgorithmId(name) for name in _SELECTION_FLAGS}
        else:
            enabled.add(AlgorithmId(flag))
    enabled.add(AlgorithmId.CRC32)
    return enabled


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog=APP_NAME,
        description="Compute CRC32, MD5, SHA file checksums and compare them with given values",
    )
    parser.add_argument("file", type=Path, help="File to checksum")
    parser.add_argument(
        "checksums",
        nargs="*",
        metavar="CHECKSUM",
        help="Checksums to compare against (spaces, dashes, colons etc. are ignored)",
    )

    for name in _SELECTION_FLAGS:
        parser.add_argument(
            f"--{name}",
            dest="selection",
            action="append_const",
            const=name,
            help=f"Compute the {name.upper()} checksum",
        )
    parser.add_argument("--all", dest="selection", action="append_const", const="all",
                        help="Compute every supported checksum")
    parser.add_argument("--none", dest="selection", action="append_const", const="none",
                        help="Compute only CRC32 (later flags can add more)")

    parser.add_argument(
        "-b", "--buffer-size",
        help="Input buffer size, 256 bytes to 64 MB (e.g. 64k, 1mb); overrides config",
    )
    parser.add_argument("--timeout", type=float, help="Cancel the run after this many seconds")
    parser.add_argument("--progress", action="store_true", help="Log read progress to stderr")
    parser.add_argument("--config", type=Path, help="Path to config file (defaults.toml)")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Log level (overrides config)",
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Show debug information")
    return parser


def format_report(result: ChecksumResult) -> List[str]:
    """Lines describing each requested checksum."""
    lines = []
    for algorithm in result.requested:
        slot = result.slots[algorithm]
        if slot.status is SlotStatus.COMPUTED:
            value = slot.hex
        elif slot.status is SlotStatus.UNAVAILABLE:
            value = "(unavailable)"
        else:
            value = "(error)"
        lines.append(f"{algorithm.label + ' checksum':>15}: {value}")
    return lines


def run_checksum(worker: ChecksumWorker, path: Path, enabled: set[AlgorithmId],
                 timeout: Optional[float] = None) -> Optional[ChecksumResult]:
    """Run the worker to completion; Ctrl+C cancels the run cooperatively.

    Raises:
        WorkerFailedError: If the run crashed instead of producing a result
    """
    worker.start(path, enabled)
    if timeout is not None:
        worker.cancel_after(timeout)

    while True:
        try:
            result = worker.wait(_POLL_INTERVAL)
        except KeyboardInterrupt:
            worker.cancel()
            result = worker.wait()
        if result is not None or not worker.is_running:
            return result


def checksum_command(config: FileChecksumConfig, args: argparse.Namespace) -> int:
    """Checksum ``args.file`` and compare against ``args.checksums``.

    Returns:
        EXIT_SUCCESS, EXIT_FAILURE or EXIT_UNKNOWN
    """
    try:
        chunk_size = (
            parse_buffer_size(args.buffer_size)
            if args.buffer_size is not None
            else config.checksum.chunk_size
        )
    except InvalidBufferSizeError as e:
        print(e.message, file=sys.stderr)
        return EXIT_FAILURE

    enabled = apply_selection(config.checksum.enabled_algorithms(), args.selection)

    progress = ProgressReporter(
        log_interval_percent=config.checksum.progress_log_interval if args.progress else None
    )
    if args.progress:
        logging.getLogger(ProgressReporter.__module__).setLevel(logging.INFO)

    worker = ChecksumWorker(ChecksumEngine(chunk_size=chunk_size), progress=progress)

    print(f"{'file name':>15}: {args.file.name}")
    try:
        print(f"{'file bytes':>15}: {args.file.stat().st_size:,}")
    except OSError:
        pass  # reported by the run itself

    with LogContext(file_path=str(args.file)):
        try:
            result = run_checksum(worker, args.file, enabled, timeout=args.timeout)
        except WorkerFailedError as e:
            print(e.message, file=sys.stderr)
            return EXIT_FAILURE

    if result is None or result.status is RunStatus.FAILED:
        print(result.error.message if result is not None and result.error else "Can't read from file", file=sys.stderr)
        return EXIT_FAILURE
    if result.status is RunStatus.CANCELLED:
        print("Checksum calculation cancelled.", file=sys.stderr)
        return EXIT_FAILURE

    for line in format_report(result):
        print(line)

    if not args.checksums:
        return EXIT_UNKNOWN

    status = EXIT_SUCCESS
    for raw in args.checksums:
        candidate = normalize(raw)
        outcome = compare(candidate, result)
        print(describe(outcome, candidate))
        if not outcome.is_match:
            status = EXIT_FAILURE
    return status


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the filechecksum command."""
    parser = build_parser()
    args = parser.parse_args(argv)

    loader = ConfigLoader(app_name=APP_NAME, config_class=FileChecksumConfig)
    try:
        config = loader.load(defaults_path=args.config)
    except ConfigurationError as e:
        print(e.message, file=sys.stderr)
        return EXIT_FAILURE

    setup_logging(config.logging, level="DEBUG" if args.debug else args.log_level)

    return checksum_command(config, args)


if __name__ == "__main__":
    sys.exit(main())
