from __future__ import annotations
import logging
import threading
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)


class SaveStatus:
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


class LayoutSaver:
    """Fire-and-forget saves of the full item blob.

    Each ``submit`` starts a save without waiting for earlier ones. Only the
    newest submission is allowed to settle the status, so a slow early save
    cannot report "saved" over a newer failure. There is no retry loop; the
    next edit submits again. `on_status` is called with the internal lock
    held, so it must hand off rather than call `submit` itself.
    """

    def __init__(self, save: Callable[[List[Any]], bool],
                 on_status: Optional[Callable[[str], None]] = None,
                 executor: Optional[Executor] = None):
        self._save = save
        self._on_status = on_status
        self._own_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="layout-save")
        self._lock = threading.Lock()
        self._seq = 0
        self.status = SaveStatus.IDLE
        self.last_error: Optional[BaseException] = None

    def submit(self, blob: List[Any]) -> Future:
        with self._lock:
            self._seq += 1
            seq = self._seq
            self._set_status(SaveStatus.SAVING)
        fut = self._executor.submit(self._save, blob)
        fut.add_done_callback(lambda f, s=seq: self._settle(s, f))
        return fut

    def _settle(self, seq: int, fut: Future):
        err = fut.exception()
        # check and publish under one lock so a newer submit cannot slip in between
        with self._lock:
            if seq != self._seq:
                return
            if err is not None:
                logger.error("layout save failed: %s", err)
                self.last_error = err
                self._set_status(SaveStatus.ERROR)
            elif not fut.result():
                logger.error("layout save was rejected by the settings store")
                self._set_status(SaveStatus.ERROR)
            else:
                self.last_error = None
                self._set_status(SaveStatus.SAVED)

    def _set_status(self, status: str):
        self.status = status
        if self._on_status:
            self._on_status(status)

    def shutdown(self, wait: bool = False):
        if self._own_executor:
            self._executor.shutdown(wait=wait)
