import logging

import cv2

from errors import CameraError

logger = logging.getLogger(__name__)


class Camera:
    """A live camera stream read through OpenCV."""

    def __init__(self, index=0):
        self.index = index
        self.width = 0
        self.height = 0
        self._cap = None

    @property
    def is_open(self):
        return self._cap is not None and self._cap.isOpened()

    def open(self):
        if self.is_open:
            return self
        logger.info("Opening webcam %s...", self.index)
        cap = cv2.VideoCapture(self.index)
        if not cap.isOpened():
            cap.release()
            raise CameraError(
                f"Unable to access webcam {self.index}. "
                "Please check permissions and try again."
            )
        self._cap = cap
        self.width = int(cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self.height = int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        logger.info("Webcam ready (%dx%d)", self.width, self.height)
        return self

    def read(self):
        if self._cap is None:
            raise CameraError("Webcam is not open")
        ret, frame = self._cap.read()
        if not ret or frame is None:
            raise CameraError("Could not read frame from webcam")
        # Native resolution can change while streaming
        self.height, self.width = frame.shape[:2]
        return frame

    def release(self):
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logger.info("Webcam released")

    def __enter__(self):
        return self.open()

    def __exit__(self, *exc):
        self.release()
