from __future__ import annotations

from collections.abc import Callable
import threading
from typing import Any

from loguru import logger
from PySide6.QtCore import QObject, QRunnable, QThreadPool, Signal

from app.viewmodels.library_vm import LibraryVM
from core.services.dbscan import ClusteringCancelled

Job = Callable[[Callable[[], bool]], Any]


class TaskSignals(QObject):
    """Signals shared by all workflow tasks; every signal carries the task token."""

    progress = Signal(str, str)
    finished = Signal(str, object)
    failed = Signal(str, str)
    cancelled = Signal(str)


class WorkflowTask(QRunnable):
    """QRunnable running one workflow phase off the GUI thread.

    The job receives a `should_cancel` callable and its return value is
    emitted with `signals.finished(token, result)`.
    """

    def __init__(self, *, token: str, job: Job, signals: TaskSignals) -> None:
        super().__init__()
        self._token = token
        self._job = job
        self._signals = signals
        self._cancel = threading.Event()

    @property
    def token(self) -> str:
        return self._token

    def cancel(self) -> None:
        """Request cancellation; honoured at the next engine iteration."""
        self._cancel.set()

    def is_cancelled(self) -> bool:
        return self._cancel.is_set()

    def run(self) -> None:  # type: ignore[override]
        self._signals.progress.emit(self._token, "started")
        try:
            result = self._job(self.is_cancelled)
        except ClusteringCancelled:
            logger.info("Task {} cancelled", self._token)
            self._signals.cancelled.emit(self._token)
            return
        except Exception as ex:  # pylint: disable=broad-exception-caught
            logger.error("Task {} failed: {}", self._token, ex)
            self._signals.failed.emit(self._token, str(ex))
            return
        self._signals.finished.emit(self._token, result)


class WorkflowTaskRunner:
    """Dispatches workflow phases to the global thread pool.

    Tokens keep the format "<phase>|<argument>":
    - "locations|{path}"
    - "scan|{folder}"
    - "cluster|all"
    """

    def __init__(
        self, *, vm: LibraryVM, signals: TaskSignals, pool: QThreadPool | None = None
    ) -> None:
        self._vm = vm
        self._signals = signals
        self._pool = pool or QThreadPool.globalInstance()
        self._active: dict[str, WorkflowTask] = {}
        self._signals.finished.connect(self._forget)
        self._signals.failed.connect(self._forget)
        self._signals.cancelled.connect(self._forget)

    def _forget(self, token: str, *_args: object) -> None:
        self._active.pop(token, None)

    def _start(self, token: str, job: Job) -> WorkflowTask:
        task = WorkflowTask(token=token, job=job, signals=self._signals)
        self._active[token] = task
        self._pool.start(task)
        return task

    def import_location_history(self, path: str) -> WorkflowTask:
        """Import a location log in the background. Result: number of photos matched."""
        return self._start(
            f"locations|{path}", lambda _cancel: self._vm.import_location_history(path)
        )

    def scan_folder(self, folder: str) -> WorkflowTask:
        """Scan `folder` in the background. Result: number of photos found."""
        token = f"scan|{folder}"

        def job(_cancel: Callable[[], bool]) -> int:
            def report(count: int) -> None:
                if count % 100 == 0:
                    self._signals.progress.emit(token, f"{count} photos")

            return self._vm.scan_folder(folder, progress=report)

        return self._start(token, job)

    def run_clustering(self) -> WorkflowTask:
        """Match and run both passes. Result: (spatial, temporal) results."""
        return self._start("cluster|all", self._vm.run_all)

    def cancel(self, token: str | None = None) -> None:
        """Cancel the task with `token`, or every active task."""
        tasks = list(self._active.values()) if token is None else [self._active.get(token)]
        for task in tasks:
            if task is not None:
                task.cancel()
