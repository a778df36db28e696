from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, TypeVar

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from intake.logging.logger import Log
from intake.processor.exceptions import CapabilityTimeoutError, TransientCapabilityError

T = TypeVar("T")


class CapabilityCaller:
    """Runs external capability calls under a deadline and retries transient failures.

    Each attempt runs on a dedicated executor thread; if it does not finish
    within ``timeout_seconds`` the caller stops waiting and raises
    ``CapabilityTimeoutError``. Timeouts and other ``TransientCapabilityError``
    subclasses are retried with exponential backoff up to ``max_attempts``.
    """

    def __init__(
        self,
        *,
        timeout_seconds: float,
        max_attempts: int = 3,
        retry_wait_seconds: float = 0.5,
        max_workers: int = 8,
    ) -> None:
        self._timeout_seconds = timeout_seconds
        self._max_attempts = max(1, max_attempts)
        self._retry_wait_seconds = retry_wait_seconds
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="capability",
        )

    def call(self, capability: str, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        retrying = Retrying(
            retry=retry_if_exception_type(TransientCapabilityError),
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential(multiplier=self._retry_wait_seconds, max=8),
            before_sleep=self._log_retry(capability),
            reraise=True,
        )
        return retrying(self._call_with_deadline, capability, fn, *args, **kwargs)

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _call_with_deadline(
        self,
        capability: str,
        fn: Callable[..., T],
        *args: Any,
        **kwargs: Any,
    ) -> T:
        future = self._executor.submit(fn, *args, **kwargs)
        try:
            return future.result(timeout=self._timeout_seconds)
        except FutureTimeoutError as exc:
            future.cancel()
            error = CapabilityTimeoutError(
                f"{capability} call did not finish within {self._timeout_seconds}s"
            )
            error.capability = capability
            raise error from exc

    @staticmethod
    def _log_retry(capability: str) -> Callable[[RetryCallState], None]:
        def log(state: RetryCallState) -> None:
            exc = state.outcome.exception() if state.outcome is not None else None
            Log.warning(
                f"{capability} attempt {state.attempt_number} failed, retrying: {exc}"
            )

        return log
