import queue
import threading

from intake.logging.logger import Log
from intake.worker.job_runner import JobRunner
from intake.worker.jobs import StageJob


class Worker:
    """Consumes stage jobs from an in-process queue.

    ``start`` launches ``threads`` consumer threads; ``run`` consumes on the
    calling thread, which tests use to process queued jobs deterministically.
    """

    def __init__(self, job_runner: JobRunner, threads: int = 2) -> None:
        self._job_runner = job_runner
        self._thread_count = max(1, threads)
        self._queue: queue.Queue[StageJob | None] = queue.Queue()
        self._threads: list[threading.Thread] = []

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def submit(self, job: StageJob) -> None:
        self._queue.put(job)
        Log.info(f"Queued job for document {job.document_id}")

    def start(self) -> None:
        if self._threads:
            return
        for index in range(self._thread_count):
            thread = threading.Thread(
                target=self.run,
                name=f"intake-worker-{index + 1}",
                daemon=True,
            )
            thread.start()
            self._threads.append(thread)
        Log.info(f"Started {self._thread_count} worker threads")

    def stop(self, timeout: float | None = None) -> None:
        """Let queued jobs finish, then stop the consumer threads."""
        for _ in self._threads:
            self._queue.put(None)
        for thread in self._threads:
            thread.join(timeout)
        self._threads = []

    def join(self) -> None:
        """Block until every queued job has been processed."""
        self._queue.join()

    def run(self, max_jobs: int | None = None) -> None:
        """Consume jobs until a stop signal arrives.

        If max_jobs is set, stop after processing that many jobs (for testing).
        """
        Log.info("Worker started, waiting for jobs")
        jobs_done = 0
        try:
            while max_jobs is None or jobs_done < max_jobs:
                job = self._queue.get()
                try:
                    if job is None:
                        break
                    self._job_runner.run(job)
                    jobs_done += 1
                finally:
                    self._queue.task_done()
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully")
