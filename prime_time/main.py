"""
Command-line entrypoint.

Subcommands:
- serve: run the isPrime server until interrupted
- check: ask a running server about numbers given on the command line
- check-file: ask a running server about every number in a text file or archive
"""

import argparse
from pathlib import Path
import sys
from typing import List, Optional

from pydantic import BaseModel, Field, FilePath, IPvAnyAddress, ValidationError

from prime_time.client.client import Number, PrimeClient
from prime_time.common.logger import configure_logging, logger
from prime_time.common.parser import load_json
from prime_time.server.server import PrimeServer


class ServeArgs(BaseModel):
    """
    Pydantic model used to validate the serve arguments.

    Attributes
    ----------
    host : IPvAnyAddress
        Interface to listen on.
    port : int
        TCP port to listen on.
    workers : int
        Maximum number of concurrent sessions.
    log_level : str
        Logging level name.
    """

    host: IPvAnyAddress
    port: int = Field(ge=0, le=65535)
    workers: int = Field(ge=1)
    log_level: str = Field(pattern=r"(?i)^(debug|info|warning|error|critical)$")


class CheckArgs(BaseModel):
    """Validated arguments of the check subcommand."""

    host: IPvAnyAddress
    port: int = Field(ge=1, le=65535)


class CheckFileArgs(BaseModel):
    """Validated arguments of the check-file subcommand."""

    host: IPvAnyAddress
    port: int = Field(ge=1, le=65535)
    file_path: FilePath
    output_path: Optional[Path] = None


def build_output_path(input_path: Path) -> Path:
    """
    Construct a safe output file path based on the input file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: resources/numbers.7z
    output: resources/numbers_7z_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    stem: str = input_path.name[: -len("".join(input_path.suffixes))] if input_path.suffixes else input_path.name
    suffix_safe: str = "".join(input_path.suffixes).replace(".", "_")
    return input_path.with_name(f"{stem}{suffix_safe}_results.txt")


def build_parser() -> argparse.ArgumentParser:
    """
    Build the command-line parser.

    :return: Parser with serve, check and check-file subcommands
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(prog="prime-time", description="isPrime TCP server and client")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the isPrime server")
    serve.add_argument("--host", default="0.0.0.0", help="Interface to listen on")
    serve.add_argument("--port", default=9000, help="TCP port to listen on")
    serve.add_argument("--workers", default=10, help="Maximum number of concurrent sessions")
    serve.add_argument("--log-level", default="INFO", help="Logging level")

    check = subparsers.add_parser("check", help="Ask a server whether numbers are prime")
    check.add_argument("--host", default="127.0.0.1", help="Server host address")
    check.add_argument("--port", default=9000, help="Server TCP port")
    check.add_argument("numbers", nargs="+", help="Numbers to test")

    check_file = subparsers.add_parser("check-file", help="Check every number in a file or archive")
    check_file.add_argument("--host", default="127.0.0.1", help="Server host address")
    check_file.add_argument("--port", default=9000, help="Server TCP port")
    check_file.add_argument("file_path", help="Text file or archive with one number per line")
    check_file.add_argument("output_path", nargs="?", help="Where to write the results")

    return parser


def run_serve(args: ServeArgs) -> None:
    """Run the server in the foreground until interrupted."""
    configure_logging(args.log_level)
    server = PrimeServer(host=args.host, port=args.port, workers=args.workers)
    try:
        server.start()
    except KeyboardInterrupt:
        logger.info("🖥️ Interrupted, shutting down")
        server.shutdown()


def run_check(args: CheckArgs, numbers: List[Number]) -> None:
    """Print one result line per number."""
    client = PrimeClient(host=args.host, port=args.port)
    for number, prime in zip(numbers, client.check(numbers)):
        print(f"{number} -> {'prime' if prime else 'composite'}")


def run_check_file(args: CheckFileArgs) -> None:
    """Check a file of numbers and write the results next to it."""
    output_path: Path = args.output_path or build_output_path(args.file_path)
    client = PrimeClient(host=args.host, port=args.port)
    client.send_file(args.file_path, output_path)
    print(f"Results written to {output_path}")


def main(argv: Optional[List[str]] = None) -> None:
    """
    Parse the command line and run the requested subcommand.

    :param argv: Arguments, defaults to sys.argv[1:]
    """
    parser = build_parser()
    ns = parser.parse_args(argv)

    try:
        if ns.command == "serve":
            run_serve(ServeArgs(host=ns.host, port=ns.port, workers=ns.workers, log_level=ns.log_level))
        elif ns.command == "check":
            try:
                numbers = [load_json(text) for text in ns.numbers]
            except ValueError as exc:
                parser.error(f"invalid number: {exc}")
            run_check(CheckArgs(host=ns.host, port=ns.port), numbers)
        else:
            run_check_file(
                CheckFileArgs(host=ns.host, port=ns.port, file_path=ns.file_path, output_path=ns.output_path)
            )
    except ValidationError as exc:
        parser.error(str(exc))
    except (OSError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
