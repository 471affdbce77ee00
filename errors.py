class EmotionTrendsError(Exception):
    """Base class for errors raised by the demo."""


class ModelLoadError(EmotionTrendsError):
    pass


class CameraError(EmotionTrendsError):
    pass


class DetectorNotLoadedError(EmotionTrendsError):
    pass
