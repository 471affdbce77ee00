import argparse
import logging
import os
import time
from contextlib import asynccontextmanager
from typing import Dict, List, Optional

import cv2
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import HTMLResponse, StreamingResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

import config
from camera import Camera
from detector import EmotionDetector
from emotions import EmotionTally
from loop import FrameLoop, LoopState
from scheduling import FrameScheduler

logger = logging.getLogger(__name__)

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


class FaceResult(BaseModel):
    box: List[int]
    emotions: Dict[str, float]
    dominant: str


class EmotionsResponse(BaseModel):
    status: str
    detections: List[FaceResult]


class TallyResponse(BaseModel):
    labels: List[str]
    counts: List[int]
    total: int


class StatsResponse(BaseModel):
    state: str
    frames: int
    errors: int
    total: int


class AppState:
    def __init__(self, settings, detector, camera, scheduler):
        self.settings = settings
        self.detector = detector
        self.camera = camera
        self.scheduler = scheduler
        self.tally = EmotionTally()
        self.loop: Optional[FrameLoop] = None


def startup(state: AppState):
    # Models first, then camera; either failing aborts startup
    try:
        state.detector.load()
    except Exception:
        logger.exception("Error loading models")
        raise
    try:
        state.camera.open()
    except Exception:
        logger.exception("Error accessing webcam")
        raise

    state.loop = FrameLoop(state.camera, state.detector, state.tally)
    state.loop.start(state.scheduler)


def shutdown(state: AppState):
    if state.loop is not None:
        state.loop.stop()
    close = getattr(state.scheduler, "close", None)
    if close is not None:
        close()
    state.camera.release()


def create_app(settings=None, detector=None, camera=None, scheduler=None) -> FastAPI:
    if settings is None:
        settings = config.Settings()
    if detector is None:
        detector = EmotionDetector(mtcnn=settings.use_mtcnn)
    if camera is None:
        camera = Camera(settings.camera_index)
    if scheduler is None:
        scheduler = FrameScheduler(settings.frame_interval)
    state = AppState(settings, detector, camera, scheduler)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        startup(state)
        try:
            yield
        finally:
            shutdown(state)

    app = FastAPI(title="Emotion Trends", lifespan=lifespan)
    app.state.demo = state
    templates = Jinja2Templates(directory=os.path.join(BASE_DIR, "templates"))

    static_dir = os.path.join(BASE_DIR, "static")
    if os.path.isdir(static_dir):
        app.mount("/static", StaticFiles(directory=static_dir), name="static")

    def running_loop() -> FrameLoop:
        if state.loop is None:
            raise HTTPException(status_code=503, detail="Emotion detection is not running")
        return state.loop

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request):
        return templates.TemplateResponse(
            request, "index.html", {"labels": state.tally.labels()}
        )

    @app.get("/video_feed")
    async def video_feed():
        loop = running_loop()
        encode_params = [int(cv2.IMWRITE_JPEG_QUALITY), settings.jpeg_quality]

        def frame_generator():
            while loop.state is LoopState.RUNNING:
                frame, _, _ = loop.latest()
                if frame is not None:
                    ok, buffer = cv2.imencode(".jpg", frame, encode_params)
                    if ok:
                        yield (b"--frame\r\n"
                               b"Content-Type: image/jpeg\r\n\r\n" + buffer.tobytes() + b"\r\n")
                time.sleep(settings.frame_interval)

        return StreamingResponse(frame_generator(), media_type="multipart/x-mixed-replace; boundary=frame")

    @app.get("/emotions", response_model=EmotionsResponse)
    async def get_emotions():
        _, status, detections = running_loop().latest()
        return EmotionsResponse(
            status=status,
            detections=[
                FaceResult(
                    box=[d.box.x, d.box.y, d.box.width, d.box.height],
                    emotions=d.emotions,
                    dominant=dominant,
                )
                for d, dominant in detections
            ],
        )

    @app.get("/tally", response_model=TallyResponse)
    async def get_tally():
        counts = state.tally.snapshot()
        return TallyResponse(labels=list(counts), counts=list(counts.values()), total=sum(counts.values()))

    @app.get("/stats", response_model=StatsResponse)
    async def get_stats():
        loop = state.loop
        return StatsResponse(
            state=loop.state.value if loop else LoopState.IDLE.value,
            frames=loop.frames if loop else 0,
            errors=loop.errors if loop else 0,
            total=state.tally.total(),
        )

    return app


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Live webcam emotion trends in the browser.")
    ap.add_argument("--camera", type=int, default=config.CAMERA_INDEX, help="Camera index")
    ap.add_argument("--mtcnn", action="store_true", default=config.USE_MTCNN,
                    help="Use the MTCNN face detector (slower, more accurate)")
    ap.add_argument("--host", default=config.HOST)
    ap.add_argument("--port", type=int, default=config.PORT)
    return ap.parse_args(argv)


if __name__ == "__main__":
    import uvicorn

    args = parse_args()
    config.setup_logging()
    app = create_app(config.Settings(camera_index=args.camera, use_mtcnn=args.mtcnn))
    # uvicorn exits non-zero if startup raises
    uvicorn.run(app, host=args.host, port=args.port, access_log=False)
