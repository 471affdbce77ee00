import logging
import threading
from enum import Enum

from overlay import Overlay

logger = logging.getLogger(__name__)

NO_FACE_STATUS = "No face detected"


class LoopState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class FrameLoop:
    """
    The detect -> draw -> tally cycle.

    ``tick`` runs one iteration and hands itself back to ``schedule`` for the
    next one, so the loop never exits on its own. What ``schedule`` does with
    the callback (a refresh timer, a window's key loop, a test's list) is up
    to the driver.
    """

    def __init__(self, camera, detector, tally, overlay=None, schedule=None):
        self.camera = camera
        self.detector = detector
        self.tally = tally
        self.overlay = overlay if overlay is not None else Overlay()
        self._schedule = schedule
        self.state = LoopState.IDLE
        self.frames = 0
        self.errors = 0

        self._lock = threading.Lock()
        self._status = ""
        self._latest_frame = None
        self._latest_detections = []

    @property
    def status(self):
        with self._lock:
            return self._status

    def start(self, schedule=None):
        if schedule is not None:
            self._schedule = schedule
        if self._schedule is None:
            raise RuntimeError("FrameLoop needs a scheduler to start")
        if self.state is not LoopState.IDLE:
            raise RuntimeError(f"cannot start a loop that is {self.state.value}")
        self.state = LoopState.RUNNING
        logger.info("Frame loop started")
        self._schedule(self.tick)

    def stop(self):
        if self.state is LoopState.STOPPED:
            return
        self.state = LoopState.STOPPED
        logger.info("Frame loop stopped after %d frames (%d errors)", self.frames, self.errors)

    def tick(self):
        if self.state is not LoopState.RUNNING:
            return
        try:
            self.process_frame()
        except Exception:
            self.errors += 1
            logger.exception("Emotion detection error")
        finally:
            # A bad frame only costs one iteration
            if self.state is LoopState.RUNNING:
                self._schedule(self.tick)

    def process_frame(self):
        frame = self.camera.read()
        detections = self.detector.detect(frame)

        height, width = frame.shape[:2]
        self.overlay.resize(width, height)
        self.overlay.clear()

        status = NO_FACE_STATUS
        results = []
        for detection in detections:
            if not detection.emotions:
                logger.warning("Skipping face at %s with no expression scores", detection.box)
                continue
            label = detection.dominant
            self.overlay.draw_box(detection.box, label)
            status = label
            self.tally.record(label)
            results.append((detection, label))

        composed = self.overlay.compose(frame)
        with self._lock:
            self._status = status
            self._latest_frame = composed
            self._latest_detections = results
        self.frames += 1

    def latest(self):
        """Return ``(frame, status, [(detection, dominant), ...])`` from the last pass."""
        with self._lock:
            frame = self._latest_frame.copy() if self._latest_frame is not None else None
            return frame, self._status, list(self._latest_detections)
