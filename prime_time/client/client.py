"""TCP client."""
import json
from pathlib import Path
import socket
import tarfile
import tempfile
from typing import Callable, Dict, List, Optional, Sequence, Union
import zipfile

import py7zr
from pydantic import BaseModel, ConfigDict, Field, FilePath, IPvAnyAddress, ValidationError

from prime_time.common.models import PrimeResponse
from prime_time.common.parser import load_json

Number = Union[int, float]


class MalformedResponseError(ValueError):
    """Raised when the server answers with anything but a conforming response."""


class PrimeClient(BaseModel):
    """
    TCP client asking the server whether numbers are prime.

    The TCP client:
    - pipelines one isPrime request per number over a single connection
    - reads back one response per request, in request order
    - can read numbers from a plain text file or an archive and write results to an output file
    """

    # Make the Pydantic instance immutable (read-only), to prevent errors
    # that could be caused by changes to the network configuration during execution.
    model_config = ConfigDict(frozen=True)

    host: IPvAnyAddress = Field(default="127.0.0.1", description="Server host address")
    port: int = Field(default=9000, ge=1, le=65535, description="Server TCP port")
    timeout: float = Field(default=30.0, gt=0, description="Socket timeout in seconds")

    @staticmethod
    def encode_request(number: Number) -> bytes:
        """
        Build one request line.

        :param number: Number to ask about

        :return: JSON request followed by a newline
        :rtype: bytes
        :raises ValueError: If number is not an int or a float
        """
        if isinstance(number, bool) or not isinstance(number, (int, float)):
            raise ValueError(f"Not a number: {number!r}")
        return (json.dumps({"method": "isPrime", "number": number}) + "\n").encode("utf-8")

    @staticmethod
    def decode_response(line: bytes) -> bool:
        """
        Read the primality result out of one response line.

        :param bytes line: Response line from the server

        :return: Primality result
        :rtype: bool
        :raises MalformedResponseError: If the line is not a conforming response
        """
        try:
            return PrimeResponse.model_validate_json(line).prime
        except ValidationError as exc:
            raise MalformedResponseError(f"Server rejected the request: {line!r}") from exc

    def check(self, numbers: Sequence[Number]) -> List[bool]:
        """
        Ask the server about every number over one connection.

        :param numbers: Numbers to test

        :return: One result per number, in the same order
        :rtype: List[bool]
        :raises ConnectionError: If the server closes before answering every request
        :raises MalformedResponseError: If the server rejects a request
        """
        payload: bytes = b"".join(self.encode_request(n) for n in numbers)
        results: List[bool] = []

        with socket.create_connection((str(self.host), self.port), timeout=self.timeout) as s:
            # Send every request before reading any answer
            s.sendall(payload)
            # Signal that no more requests will be sent
            s.shutdown(socket.SHUT_WR)

            with s.makefile("rb") as reader:
                for _ in numbers:
                    line: bytes = reader.readline()
                    if not line:
                        raise ConnectionError(
                            f"Server closed the connection after {len(results)} of {len(numbers)} responses"
                        )
                    results.append(self.decode_response(line))
        return results

    def send_file(self,
        input_file: FilePath,
        output_file: Path,
    ) -> None:
        """
        Check every number of an input file and write one result line per number to an output file.

        :param FilePath input_file: Path to the input file or archive, one JSON number per line
        :param Path output_file: Path where results will be written

        :return: None
        :raises ValueError: If a line is not a number, or the archive format is unsupported or contains no .txt file
        """
        # Load numbers from file or archive
        if input_file.suffix == ".txt":
            content = input_file.read_text()
        else:
            content = self._extract_archive(input_file)

        lines: List[str] = [line.strip() for line in content.splitlines() if line.strip()]
        numbers: List[Number] = [self._parse_number(line) for line in lines]
        results: List[bool] = self.check(numbers)

        with output_file.open("w", encoding="utf-8") as f_out:
            for line, prime in zip(lines, results):
                f_out.write(f"{line} -> {'prime' if prime else 'composite'}\n")

    @staticmethod
    def _parse_number(text: str) -> Number:
        """
        Parse one input line as a JSON number.

        :param str text: Input line

        :return: Parsed number
        :raises ValueError: If the line is not a JSON number
        """
        value = load_json(text)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"Not a number: {text!r}")
        return value

    def _extract_archive(self, archive_path: FilePath) -> str:
        """
        Return the content of the numbers file (first .txt member) of a supported archive.

        :param FilePath archive_path: Path to a .zip, .tar.xz or .7z archive

        :return: Content of the numbers file
        :rtype: str
        :raises ValueError: If the format is unsupported or the archive holds no .txt file
        """
        extractor = ARCHIVE_EXTRACTORS.get(archive_format(archive_path))
        if extractor is None:
            raise ValueError(f"📄❌ Cannot read numbers from {archive_path.name}: unsupported archive format")

        # Extract into a throwaway directory, only the numbers file is kept in memory
        with tempfile.TemporaryDirectory() as tmpdir:
            numbers_file = extractor(archive_path, Path(tmpdir))
            if numbers_file is None:
                raise ValueError(f"📄❌ No .txt numbers file in {archive_path.name}")
            return numbers_file.read_text()


def _extract_zip(archive_path: Path, target: Path) -> Optional[Path]:
    with zipfile.ZipFile(archive_path, "r") as zf:
        names = [name for name in zf.namelist() if name.endswith(".txt")]
        if not names:
            return None
        return Path(zf.extract(names[0], path=target))


def _extract_tar_xz(archive_path: Path, target: Path) -> Optional[Path]:
    with tarfile.open(archive_path, "r:xz") as tf:
        members = [m for m in tf.getmembers() if m.isfile() and m.name.endswith(".txt")]
        if not members:
            return None
        tf.extract(members[0], path=target, filter="data")
        return target / members[0].name


def _extract_7z(archive_path: Path, target: Path) -> Optional[Path]:
    with py7zr.SevenZipFile(archive_path, mode="r") as archive:
        names = [name for name in archive.getnames() if name.endswith(".txt")]
        if not names:
            return None
        archive.extract(path=target, targets=[names[0]])
        return target / names[0]


# Archive suffix -> extractor returning the extracted numbers file, or None when there is none
ARCHIVE_EXTRACTORS: Dict[str, Callable[[Path, Path], Optional[Path]]] = {
    ".zip": _extract_zip,
    ".tar.xz": _extract_tar_xz,
    ".7z": _extract_7z,
}


def archive_format(path: Path) -> str:
    """
    Archive suffix of a path, matching multi-part suffixes like .tar.xz.

    :param Path path: Archive path

    :return: Known archive suffix, else the last suffix of the path
    :rtype: str
    """
    for suffix in ARCHIVE_EXTRACTORS:
        if path.name.endswith(suffix):
            return suffix
    return path.suffix
