import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


def _flag(name, default="0"):
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


CAMERA_INDEX = int(os.getenv("CAMERA_INDEX", "0"))
USE_MTCNN = _flag("USE_MTCNN")
# One callback slot per display refresh (~30 Hz)
FRAME_INTERVAL = float(os.getenv("FRAME_INTERVAL", str(1 / 30)))
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
JPEG_QUALITY = int(os.getenv("JPEG_QUALITY", "80"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class Settings:
    camera_index: int = CAMERA_INDEX
    use_mtcnn: bool = USE_MTCNN
    frame_interval: float = FRAME_INTERVAL
    jpeg_quality: int = JPEG_QUALITY


def setup_logging(level=LOG_LEVEL):
    logging.basicConfig(level=level, format=LOG_FORMAT)
