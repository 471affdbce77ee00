import logging
import queue
import threading
import time

logger = logging.getLogger(__name__)

_CLOSE = object()


class FrameScheduler:
    """
    Runs scheduled callbacks one at a time on a background thread.

    Each callback waits for the next refresh slot, ``interval`` seconds after
    the previous one started. Callbacks are never timed out: a slow one just
    pushes the next slot back.
    """

    def __init__(self, interval=1 / 30, name="frame-scheduler"):
        self.interval = interval
        self._queue = queue.Queue()
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self._started = False

    def __call__(self, callback):
        if not self._started:
            self._started = True
            self._thread.start()
        self._queue.put(callback)

    def _run(self):
        next_slot = time.monotonic()
        while True:
            callback = self._queue.get()
            if callback is _CLOSE:
                break
            delay = next_slot - time.monotonic()
            if delay > 0:
                time.sleep(delay)
            next_slot = time.monotonic() + self.interval
            callback()
        logger.debug("Scheduler thread exiting")

    def close(self, timeout=2.0):
        if not self._started:
            return
        self._queue.put(_CLOSE)
        if self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("Scheduler thread did not stop in time")
