"""TCP server answering isPrime requests with a bounded worker pool."""
import socket
import threading
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, IPvAnyAddress, PrivateAttr

from prime_time.common.logger import logger
from prime_time.server.pool import WorkerPool
from prime_time.server.session import PrimeSession


class PrimeServer(BaseModel):
    """
    TCP socket server answering newline-delimited isPrime requests.

    Features:
        - One accept loop hands every connection to a fixed-size worker pool.
        - At most `workers` sessions run at once, extra connections wait in the pool queue.
        - Accepting is never blocked by busy workers.
        - A silent client keeps its worker for as long as it stays connected.
    """

    # Allow arbitrary types like socket.socket
    # Validate defaults so the default host is an address object too
    model_config = ConfigDict(arbitrary_types_allowed=True, validate_default=True)

    host: IPvAnyAddress = Field(default="0.0.0.0", description="Interface to listen on")
    port: int = Field(default=9000, ge=0, le=65535, description="Server TCP port, 0 picks a free one")
    workers: int = Field(default=10, ge=1, description="Maximum number of concurrent sessions")
    poll_interval: float = Field(default=0.5, gt=0, description="Seconds between shutdown checks")

    _listener: Optional[socket.socket] = PrivateAttr(default=None)
    _pool: Optional[WorkerPool] = PrivateAttr(default=None)
    _stopped: threading.Event = PrivateAttr(default_factory=threading.Event)

    @property
    def pool(self) -> Optional[WorkerPool]:
        """Worker pool, created on the first call to serve_forever()."""
        return self._pool

    def bind(self) -> Tuple[str, int]:
        """
        Create the listening socket.

        :return: Bound (host, port), useful when port is 0
        :rtype: Tuple[str, int]
        """
        family = socket.AF_INET6 if self.host.version == 6 else socket.AF_INET
        listener = socket.socket(family, socket.SOCK_STREAM)
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            listener.bind((str(self.host), self.port))
            listener.listen()
        except OSError:
            listener.close()
            raise
        # Accept wakes up regularly to notice shutdown()
        listener.settimeout(self.poll_interval)
        self._listener = listener

        address: Tuple[str, int] = listener.getsockname()[:2]
        logger.info(f"🖥️ Server listening on {address[0]}:{address[1]} with {self.workers} workers")
        return address

    def serve_forever(self) -> None:
        """
        Accept connections and submit one session per connection until shutdown().

        :return: None
        """
        if self._listener is None:
            self.bind()
        if self._pool is None:
            self._pool = WorkerPool(worker_count=self.workers, name="session")

        with self._listener:
            while not self._stopped.is_set():
                try:
                    conn, addr = self._listener.accept()
                except socket.timeout:
                    continue
                except OSError as exc:
                    if self._stopped.is_set():
                        break
                    logger.error(f"🖥️❌ Accept failed: {exc}")
                    continue

                peer: str = f"{addr[0]}:{addr[1]}"
                logger.info(f"🔌 Incoming connection from {peer}")
                self._pool.submit(PrimeSession(conn=conn, peer=peer).run)

        self._listener = None
        logger.info("🖥️ Server stopped")

    def start(self) -> None:
        """
        Bind, listen and serve until interrupted.

        Steps:
            1. Bind and listen on the configured host and port.
            2. Start the worker pool.
            3. Accept connections and queue one session per connection.

        :return: None
        """
        logger.info(f"🖥️ Starting server on {self.host}:{self.port}")
        self.bind()
        self.serve_forever()

    def shutdown(self) -> None:
        """
        Stop the accept loop. Running sessions are left to finish on their own.

        :return: None
        """
        self._stopped.set()
