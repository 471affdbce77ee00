import threading
from enum import Enum
from typing import Dict, Mapping, Union


class Emotion(str, Enum):
    """Labels counted by the tally, in chart and tie-break order."""

    HAPPY = "happy"
    SAD = "sad"
    ANGRY = "angry"
    NEUTRAL = "neutral"
    SURPRISE = "surprise"


_RANK = {emotion.value: i for i, emotion in enumerate(Emotion)}


def dominant_emotion(scores: Mapping[str, float]) -> str:
    """
    Return the label with the highest confidence.

    Labels are scanned in canonical order: known emotions in ``Emotion``
    order first, then any other labels in the order the mapping yields them.
    On a tie the first label scanned wins, so ``{"happy": .5, "sad": .5}``
    is always ``"happy"`` no matter how the detector ordered its keys.
    """
    if not scores:
        raise ValueError("cannot pick a dominant emotion from empty scores")
    # sorted() is stable, so unknown labels keep their mapping order
    ordered = sorted(scores, key=lambda label: _RANK.get(label, len(_RANK)))
    return max(ordered, key=scores.get)


class EmotionTally:
    """Running count of dominant emotions for the session."""

    def __init__(self):
        self._lock = threading.Lock()
        self._counts = {emotion: 0 for emotion in Emotion}

    def record(self, label: Union[Emotion, str]) -> bool:
        # Labels outside the known set are ignored
        try:
            emotion = Emotion(label)
        except ValueError:
            return False
        with self._lock:
            self._counts[emotion] += 1
        return True

    def count(self, label: Union[Emotion, str]) -> int:
        with self._lock:
            return self._counts[Emotion(label)]

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return {emotion.value: n for emotion, n in self._counts.items()}

    def total(self) -> int:
        with self._lock:
            return sum(self._counts.values())

    @staticmethod
    def labels():
        return [emotion.value for emotion in Emotion]
