"""Session handler serving isPrime requests on one client connection."""
import socket
from typing import BinaryIO

from pydantic import BaseModel, ConfigDict, Field

from prime_time.common.encoder import ResponseEncoder
from prime_time.common.logger import logger
from prime_time.common.parser import MalformedRequestError, RequestParser
from prime_time.common.primality import is_prime


class PrimeSession(BaseModel):
    """
    Owns one client connection from accept to close.

    Lifecycle:
        - Reads one newline-terminated request at a time
        - Answers every valid request in order, flushing after each response
        - Answers a malformed request with {} and closes
        - Closes silently on end of stream or on any I/O error
    """

    # Make the Pydantic instance immutable (read-only) for safety
    # Allow arbitrary types like socket.socket
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    conn: socket.socket = Field(..., description="Connected client socket owned by this session")
    peer: str = Field(default="unknown", description="Client address, used for logging")

    def run(self) -> None:
        """
        Serve the connection until it closes.

        :return: None
        """
        logger.info(f"🔌 Session started for {self.peer}")
        served: int = 0

        try:
            with self.conn, self.conn.makefile("rb") as reader, self.conn.makefile("wb") as writer:
                served = self._serve(reader, writer)
        except OSError as exc:
            logger.warning(f"🔌❌ Connection error with {self.peer}: {exc}")

        logger.info(f"🔌 Session closed for {self.peer} after {served} request(s)")

    def _serve(self, reader: BinaryIO, writer: BinaryIO) -> int:
        """
        Request loop over buffered reader and writer.

        :param BinaryIO reader: Buffered reader on the connection
        :param BinaryIO writer: Buffered writer on the connection

        :return: Number of requests answered with a result
        :rtype: int
        """
        served: int = 0
        while True:
            line: bytes = reader.readline()
            if not line:
                # Peer closed the stream
                return served

            try:
                number: int = RequestParser.parse(line)
            except MalformedRequestError as exc:
                logger.warning(f"📨❌ Malformed request from {self.peer}: {exc}")
                writer.write(ResponseEncoder.malformed())
                writer.flush()
                return served

            writer.write(ResponseEncoder.conforming(is_prime(number)))
            writer.flush()
            served += 1
