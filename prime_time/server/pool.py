"""Fixed-size pool of worker threads fed by an unbounded task queue."""
import queue
import threading
from typing import Any, Callable, List, Tuple

from prime_time.common.logger import logger

Task = Tuple[Callable[..., Any], Tuple[Any, ...]]


class WorkerPool:
    """
    Run submitted tasks on a fixed number of long-lived worker threads.

    Lifecycle:
        - All workers are started on construction and live as long as the process
        - submit() only enqueues, it never waits for a free worker
        - Each worker takes the next queued task whenever it becomes free
        - An exception escaping a task is logged and the worker moves on
    """

    def __init__(self, worker_count: int = 10, name: str = "worker"):
        if worker_count < 1:
            raise ValueError("worker_count must be at least 1")
        self.worker_count = worker_count
        self._tasks: "queue.Queue[Task]" = queue.Queue()
        self._workers: List[threading.Thread] = []

        for index in range(worker_count):
            thread = threading.Thread(target=self._work, name=f"{name}-{index}", daemon=True)
            thread.start()
            self._workers.append(thread)

    @property
    def pending(self) -> int:
        """Number of tasks waiting for a free worker."""
        return self._tasks.qsize()

    def submit(self, fn: Callable[..., Any], *args: Any) -> None:
        """
        Queue fn(*args) for the first free worker.

        :param Callable fn: Task to run
        :param args: Positional arguments for the task

        :return: None
        """
        self._tasks.put((fn, args))

    def _work(self) -> None:
        """Worker loop: take a task, run it, repeat forever."""
        while True:
            fn, args = self._tasks.get()
            try:
                fn(*args)
            except Exception:
                logger.exception("👷❌ Task crashed, worker keeps running")
            finally:
                self._tasks.task_done()
