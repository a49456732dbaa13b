"""Background readiness waits for freshly provisioned previews.

After ``/preview`` the cluster has accepted the resources but pods may still
be pulling images. :class:`ReadinessTracker` runs one background task per
namespace that polls its workloads until they are ready or time runs out.
The task never reports back to the command that started it; its last state
is observable through :meth:`ReadinessTracker.state` and shows up in
``/status``.

Usage
-----
>>> tracker = ReadinessTracker(gateway, timeout=180, poll_interval=10)
>>> tracker.start("preview-pr-7-myapp", ["myapp"])
>>> tracker.state("preview-pr-7-myapp")
<ReadinessState.PENDING: 'pending'>

"""

from __future__ import annotations

import asyncio
import typing as typ

from prpreviews.cluster.errors import ClusterError, ReadinessTimeoutError
from prpreviews.logging import get_logger, log_exception
from prpreviews.previews.models import ReadinessState
from prpreviews.previews.observability import PreviewEventLogger

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from prpreviews.cluster.protocol import ClusterGateway

logger = get_logger(__name__)


def _classify(outcomes: list[object]) -> tuple[ReadinessState, str | None]:
    for outcome in outcomes:
        if isinstance(outcome, ReadinessTimeoutError):
            return ReadinessState.TIMED_OUT, str(outcome)
    for outcome in outcomes:
        if isinstance(outcome, ClusterError):
            return ReadinessState.FAILED, str(outcome)
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    return ReadinessState.READY, None


class ReadinessTracker:
    """Own the background readiness tasks, keyed by namespace.

    Parameters
    ----------
    gateway
        Gateway used to poll workload status.
    timeout
        Seconds each workload is given to become ready.
    poll_interval
        Seconds between polls.
    event_logger
        Receives one ``previews.readiness.finished`` event per wait.

    """

    def __init__(
        self,
        gateway: ClusterGateway,
        *,
        timeout: float = 180,
        poll_interval: float = 10,
        event_logger: PreviewEventLogger | None = None,
    ) -> None:
        """Configure the tracker; no tasks run until :meth:`start`."""
        self._gateway = gateway
        self._timeout = timeout
        self._poll_interval = poll_interval
        self._events = event_logger or PreviewEventLogger()
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._states: dict[str, ReadinessState] = {}

    def start(self, namespace: str, workloads: cabc.Sequence[str]) -> None:
        """Begin waiting for ``workloads`` in ``namespace``.

        Replaces any wait already running for the namespace. With no
        workloads there is nothing to wait for and the state is ``ready``.
        """
        self.cancel(namespace)
        if not workloads:
            self._states[namespace] = ReadinessState.READY
            return
        self._states[namespace] = ReadinessState.PENDING
        task = asyncio.create_task(
            self._wait(namespace, tuple(workloads)),
            name=f"readiness:{namespace}",
        )
        self._tasks[namespace] = task
        task.add_done_callback(lambda done: self._forget(namespace, done))

    def state(self, namespace: str) -> ReadinessState | None:
        """Return the last known state, or ``None`` if never tracked."""
        return self._states.get(namespace)

    def is_running(self, namespace: str) -> bool:
        """Return True while a wait for ``namespace`` is in flight."""
        return namespace in self._tasks

    def cancel(self, namespace: str) -> bool:
        """Cancel the wait for ``namespace``; return True if one was running."""
        task = self._tasks.pop(namespace, None)
        if task is None or task.done():
            return False
        task.cancel()
        self._states[namespace] = ReadinessState.CANCELLED
        return True

    def forget(self, namespace: str) -> None:
        """Cancel any wait and drop the recorded state for ``namespace``."""
        self.cancel(namespace)
        self._states.pop(namespace, None)

    async def wait(self, namespace: str) -> ReadinessState | None:
        """Await the running wait for ``namespace`` and return its state."""
        task = self._tasks.get(namespace)
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)
        return self.state(namespace)

    async def shutdown(self) -> None:
        """Cancel every running wait and let the tasks unwind."""
        tasks = list(self._tasks.values())
        for namespace in list(self._tasks):
            self.cancel(namespace)
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _wait(self, namespace: str, workloads: tuple[str, ...]) -> None:
        coroutines = [
            self._gateway.wait_for_workload_ready(
                namespace,
                name,
                timeout=self._timeout,
                poll_interval=self._poll_interval,
            )
            for name in workloads
        ]
        gathered = await asyncio.gather(*coroutines, return_exceptions=True)
        state, detail = _classify(gathered)
        self._states[namespace] = state
        self._events.log_readiness_finished(
            namespace=namespace, state=state, detail=detail
        )

    def _forget(self, namespace: str, task: asyncio.Task[None]) -> None:
        if self._tasks.get(namespace) is task:
            del self._tasks[namespace]
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._states[namespace] = ReadinessState.FAILED
            log_exception(logger, f"Readiness wait for {namespace} crashed", exc)
