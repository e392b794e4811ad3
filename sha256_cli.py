"""Line-oriented SHA-256 tool.

Each input line is a hex-encoded byte string; the SHA-256 digest of those
bytes is printed as 64 lowercase hex characters, one per line.

Usage:
    python sha256_cli.py                  # read lines from stdin
    python sha256_cli.py inputs.txt       # read lines from one or more files
    python sha256_cli.py --format yaml --trace inputs.txt
    python sha256_cli.py --config settings.yaml -

Exit status is 0 on success, 1 on malformed input, an unreadable file or a
bad config file.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import BinaryIO, Dict, Iterable, Iterator, List, Optional, TextIO, Tuple

import yaml

from config import FORMATS, ConfigError, Settings, load_settings
from hexcodec import InvalidEncoding, decode_hex, encode_hex
from sha256 import finalize_digest, intermediate_states, sha256


logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Print the SHA-256 digest of each hex-encoded input line"
    )
    parser.add_argument(
        "files",
        nargs="*",
        help="Input files, one hex string per line ('-' or nothing reads stdin)",
    )
    parser.add_argument(
        "--format",
        choices=FORMATS,
        default=None,
        help="Output format: text or yaml (default: text)",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        default=None,
        help="With --format yaml, include every intermediate hash state",
    )
    parser.add_argument(
        "--skip-invalid",
        action="store_true",
        default=None,
        help="Report malformed lines on stderr and keep going",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML settings file (flags override its values)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def _read_lines(paths: List[str]) -> Iterator[Tuple[str, int, bytes]]:
    """Yield (source, line number, raw line) for every line of every input.

    Lines are read as bytes so that undecodable input reaches `decode_hex`
    and is reported like any other malformed line.
    """
    if not paths:
        paths = ["-"]

    for path in paths:
        if path == "-":
            yield from _numbered("<stdin>", sys.stdin.buffer)
            continue
        with open(path, "rb") as f:
            yield from _numbered(path, f)


def _numbered(source: str, stream: BinaryIO) -> Iterator[Tuple[str, int, bytes]]:
    for number, line in enumerate(stream, start=1):
        yield source, number, line


def _record(source: str, line_number: int, message: bytes, trace: bool) -> Dict:
    """Build the YAML record for one hashed line."""
    states = intermediate_states(message)
    entry: Dict = {
        "source": source,
        "line": line_number,
        "message_hex": encode_hex(message),
        "message_bytes": len(message),
        "blocks": len(states) - 1,
        "digest_hex": encode_hex(finalize_digest(states[-1])),
    }
    if trace:
        entry["states"] = [[f"{word:08x}" for word in state] for state in states]
    return entry


def run(settings: Settings, lines: Iterable[Tuple[str, int, bytes]], out: TextIO) -> int:
    """Hash every line and write the results to `out`.

    Returns the process exit status. In yaml mode the records collected so
    far are written even if reading a later input fails.
    """
    status = 0
    records: List[Dict] = []

    try:
        for source, number, line in lines:
            try:
                message = decode_hex(line)
            except InvalidEncoding as e:
                sys.stderr.write(f"{source}:{number}: {e}\n")
                status = 1
                if settings.skip_invalid:
                    continue
                break

            if settings.format == "yaml":
                records.append(_record(source, number, message, settings.trace))
            else:
                out.write(encode_hex(sha256(message)) + "\n")
                out.flush()
    finally:
        if settings.format == "yaml":
            yaml.dump(records, out, default_flow_style=False, sort_keys=False)

    logger.debug("finished with exit status %d", status)
    return status


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    args = _build_parser().parse_args(argv)

    try:
        settings = load_settings(
            args.config,
            format=args.format,
            trace=args.trace,
            skip_invalid=args.skip_invalid,
            log_level="DEBUG" if args.verbose else None,
        )
    except ConfigError as e:
        sys.stderr.write(f"{e}\n")
        return 1

    logging.basicConfig(
        level=settings.log_level_number,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    logger.debug("settings: %s", settings)

    try:
        return run(settings, _read_lines(args.files), sys.stdout)
    except OSError as e:
        sys.stderr.write(f"Error reading input: {e}\n")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
