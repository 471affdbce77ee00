import argparse
import logging
import sys

import cv2

import config
from camera import Camera
from detector import EmotionDetector
from emotions import EmotionTally
from errors import EmotionTrendsError
from loop import FrameLoop

logger = logging.getLogger(__name__)

WINDOW_NAME = "Live Emotion Detection"


def draw_hud(frame, status, counts):
    cv2.putText(frame, status, (10, 30), cv2.FONT_HERSHEY_SIMPLEX, 0.9, (0, 255, 0), 2)
    for i, (label, n) in enumerate(counts.items()):
        cv2.putText(frame, f"{label}: {n}", (10, 60 + i * 22),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.6, (255, 255, 255), 1)
    return frame


def run(camera_index=0, mtcnn=False):
    detector = EmotionDetector(mtcnn=mtcnn)
    camera = Camera(camera_index)
    try:
        detector.load()
        camera.open()
    except EmotionTrendsError:
        logger.exception("Initialization failed")
        camera.release()
        raise

    tally = EmotionTally()
    # Callbacks queued by the loop run between waitKey calls
    pending = []
    loop = FrameLoop(camera, detector, tally, schedule=pending.append)

    print("Press 'q' to quit.")
    loop.start()
    try:
        while pending:
            pending.pop(0)()

            frame, status, _ = loop.latest()
            if frame is not None:
                cv2.imshow(WINDOW_NAME, draw_hud(frame, status, tally.snapshot()))

            if cv2.waitKey(1) & 0xFF == ord('q'):
                loop.stop()
                break
    finally:
        loop.stop()
        camera.release()
        cv2.destroyAllWindows()

    return tally


if __name__ == "__main__":
    ap = argparse.ArgumentParser(description="Live emotion detection in an OpenCV window.")
    ap.add_argument("--camera", type=int, default=config.CAMERA_INDEX, help="Camera index")
    ap.add_argument("--mtcnn", action="store_true", default=config.USE_MTCNN)
    args = ap.parse_args()

    config.setup_logging()
    try:
        totals = run(args.camera, args.mtcnn)
    except EmotionTrendsError as e:
        print(f"Failed to start emotion detection: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Session totals: {totals.snapshot()}")
