"""Backends that run the independent branches of an analysis.

After scoring, the clustering branch and the Pareto/recommendation branch
only read the scored frames, so they can run inline or on a small thread
pool. Both backends return the same results; only wall-clock time differs.
"""

from __future__ import annotations

import logging
import os
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Mapping

from .errors import ConfigurationError

LOGGER = logging.getLogger(__name__)

BACKEND_ENV_VAR = "SUSTAINGRAPH_EXECUTION_BACKEND"
THRESHOLD_ENV_VAR = "SUSTAINGRAPH_PARALLEL_THRESHOLD"

BACKEND_ALIASES: Dict[str, str] = {
    "auto": "auto",
    "sync": "sync",
    "sequential": "sync",
    "serial": "sync",
    "thread": "thread",
    "threads": "thread",
}

Branch = Callable[[], Any]


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, ""))
    except (TypeError, ValueError):
        return default


DEFAULT_PARALLEL_THRESHOLD = _env_int(THRESHOLD_ENV_VAR, 4)


def resolve_backend_name(preferred: str | None = None) -> str:
    """Canonical backend name from ``preferred`` or ``SUSTAINGRAPH_EXECUTION_BACKEND``."""

    raw = preferred if preferred is not None else os.getenv(BACKEND_ENV_VAR, "auto")
    token = str(raw).strip().lower() or "auto"
    try:
        return BACKEND_ALIASES[token]
    except KeyError:
        choices = ", ".join(sorted(BACKEND_ALIASES))
        raise ConfigurationError(f"Unknown execution backend {raw!r}; expected one of: {choices}") from None


def _timed(name: str, branch: Branch) -> Branch:
    def runner() -> Any:
        started = time.perf_counter()
        try:
            return branch()
        finally:
            LOGGER.debug("Branch %s finished in %.3fs", name, time.perf_counter() - started)

    return runner


class ExecutionBackend:
    """Runs named zero-argument branches and hands back their results."""

    name = "base"

    def submit(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        raise NotImplementedError

    def run_branches(self, branches: Mapping[str, Branch]) -> Dict[str, Any]:
        """Submit every branch, then collect results in submission order.

        The first branch that raised re-raises its exception here.
        """

        futures = {name: self.submit(_timed(name, branch)) for name, branch in branches.items()}
        return {name: future.result() for name, future in futures.items()}

    def shutdown(self) -> None:
        return None

    def __enter__(self) -> "ExecutionBackend":
        return self

    def __exit__(self, _exc_type, _exc, _tb) -> None:
        self.shutdown()


class _ResolvedFuture(Future):
    def __init__(self, value: Any = None, error: BaseException | None = None) -> None:
        super().__init__()
        if error is not None:
            self.set_exception(error)
        else:
            self.set_result(value)


class SynchronousBackend(ExecutionBackend):
    """Runs each branch immediately in the calling thread."""

    name = "sync"

    def submit(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        try:
            result = func(*args, **kwargs)
        except Exception as exc:
            return _ResolvedFuture(error=exc)
        return _ResolvedFuture(result)


class ThreadPoolBackend(ExecutionBackend):
    """Runs branches concurrently on a private thread pool."""

    name = "thread"

    def __init__(self, max_workers: int = 2) -> None:
        self.max_workers = max(1, int(max_workers))
        self._executor = ThreadPoolExecutor(
            max_workers=self.max_workers,
            thread_name_prefix="sustaingraph",
        )

    def submit(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        return self._executor.submit(func, *args, **kwargs)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)


def create_backend(
    task_count: int,
    *,
    preferred: str | None = None,
    threshold: int | None = None,
    max_workers: int | None = None,
) -> ExecutionBackend:
    """Pick a backend for ``task_count`` branches.

    ``"sync"`` always runs inline and ``"thread"`` always uses a pool. With
    ``"auto"`` a pool is used once ``task_count`` reaches ``threshold``
    (``SUSTAINGRAPH_PARALLEL_THRESHOLD``, 4 by default). Unknown names raise
    :class:`~sustaingraph.modules.errors.ConfigurationError`.
    """

    name = resolve_backend_name(preferred)
    limit = DEFAULT_PARALLEL_THRESHOLD if threshold is None else threshold
    workers = max_workers or max(1, min(task_count, os.cpu_count() or 1))

    if name == "thread" or (name == "auto" and task_count >= limit):
        backend: ExecutionBackend = ThreadPoolBackend(max_workers=workers)
    else:
        backend = SynchronousBackend()

    LOGGER.debug("Execution backend %s selected for %d branch(es)", backend.name, task_count)
    return backend


__all__ = [
    "BACKEND_ALIASES",
    "BACKEND_ENV_VAR",
    "DEFAULT_PARALLEL_THRESHOLD",
    "ExecutionBackend",
    "SynchronousBackend",
    "THRESHOLD_ENV_VAR",
    "ThreadPoolBackend",
    "create_backend",
    "resolve_backend_name",
]
