import cv2
import numpy as np

BOX_COLOR = (0, 255, 0)  # #00FF00 in BGR
BOX_THICKNESS = 2


class Overlay:
    """
    Drawing surface kept apart from the video frame.

    The canvas holds annotation pixels and the mask marks which of them are
    painted, so ``compose`` can lay the overlay over any frame of the same size.
    """

    def __init__(self, width=0, height=0):
        self.width = 0
        self.height = 0
        self.boxes = 0
        self.canvas = None
        self.mask = None
        self.resize(width, height)

    def resize(self, width, height):
        if (width, height) == (self.width, self.height) and self.canvas is not None:
            return
        self.width, self.height = int(width), int(height)
        self.canvas = np.zeros((self.height, self.width, 3), dtype=np.uint8)
        self.mask = np.zeros((self.height, self.width), dtype=np.uint8)
        self.boxes = 0

    def clear(self):
        self.canvas[:] = 0
        self.mask[:] = 0
        self.boxes = 0

    def draw_box(self, box, label=None):
        top_left = (box.x, box.y)
        bottom_right = (box.x + box.width, box.y + box.height)
        cv2.rectangle(self.canvas, top_left, bottom_right, BOX_COLOR, BOX_THICKNESS)
        cv2.rectangle(self.mask, top_left, bottom_right, 255, BOX_THICKNESS)
        if label:
            origin = (box.x, max(box.y - 10, 0))
            cv2.putText(self.canvas, label, origin, cv2.FONT_HERSHEY_SIMPLEX, 0.7, BOX_COLOR, 2)
            cv2.putText(self.mask, label, origin, cv2.FONT_HERSHEY_SIMPLEX, 0.7, 255, 2)
        self.boxes += 1

    def compose(self, frame):
        if frame.shape[:2] != self.mask.shape:
            raise ValueError(
                f"frame is {frame.shape[1]}x{frame.shape[0]}, overlay is {self.width}x{self.height}"
            )
        out = frame.copy()
        painted = self.mask > 0
        out[painted] = self.canvas[painted]
        return out
