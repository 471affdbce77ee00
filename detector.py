import logging
from dataclasses import dataclass, field
from typing import Dict, List

from emotions import dominant_emotion
from errors import DetectorNotLoadedError, ModelLoadError

logger = logging.getLogger(__name__)


@dataclass
class Box:
    x: int
    y: int
    width: int
    height: int


@dataclass
class Detection:
    """One face: its bounding box and per-label confidence scores."""

    box: Box
    emotions: Dict[str, float] = field(default_factory=dict)

    @property
    def dominant(self) -> str:
        return dominant_emotion(self.emotions)


class EmotionDetector:
    """Face detection and expression classification backed by FER."""

    def __init__(self, mtcnn=False):
        self.mtcnn = mtcnn
        self._fer = None

    @property
    def loaded(self):
        return self._fer is not None

    def load(self):
        if self._fer is not None:
            return
        logger.info("Loading FER models (mtcnn=%s)...", self.mtcnn)
        try:
            from fer import FER

            self._fer = FER(mtcnn=self.mtcnn)
        except Exception as e:
            raise ModelLoadError(f"Failed to load emotion detection models: {e}") from e
        logger.info("Models loaded successfully")

    def detect(self, frame) -> List[Detection]:
        if self._fer is None:
            raise DetectorNotLoadedError("call load() before detect()")

        detections = []
        for face in self._fer.detect_emotions(frame):
            x, y, w, h = (int(v) for v in face["box"])
            # Convert numpy scalars to plain floats, keeping FER's key order
            emotions = {label: float(score) for label, score in face["emotions"].items()}
            detections.append(Detection(Box(x, y, w, h), emotions))
        return detections
