import unittest
from unittest import mock

from camera import Camera
from errors import CameraError
from tests.fakes import blank_frame


def fake_capture(opened=True, frames=()):
    cap = mock.MagicMock()
    cap.isOpened.return_value = opened
    cap.get.side_effect = lambda prop: {3: 640, 4: 480}.get(prop, 0)
    cap.read.side_effect = list(frames)
    return cap


class TestCamera(unittest.TestCase):
    def test_open_failure(self):
        cap = fake_capture(opened=False)
        with mock.patch("camera.cv2.VideoCapture", return_value=cap):
            with self.assertRaises(CameraError):
                Camera(1).open()
        cap.release.assert_called_once()

    def test_read_tracks_native_resolution(self):
        cap = fake_capture(frames=[(True, blank_frame(320, 240)), (True, blank_frame(160, 120))])
        with mock.patch("camera.cv2.VideoCapture", return_value=cap):
            camera = Camera().open()
            self.assertEqual((camera.width, camera.height), (640, 480))
            camera.read()
            self.assertEqual((camera.width, camera.height), (320, 240))
            camera.read()
            self.assertEqual((camera.width, camera.height), (160, 120))

    def test_failed_grab_raises(self):
        cap = fake_capture(frames=[(False, None)])
        with mock.patch("camera.cv2.VideoCapture", return_value=cap):
            camera = Camera().open()
            with self.assertRaises(CameraError):
                camera.read()

    def test_read_before_open(self):
        with self.assertRaises(CameraError):
            Camera().read()

    def test_context_manager_releases(self):
        cap = fake_capture()
        with mock.patch("camera.cv2.VideoCapture", return_value=cap):
            with Camera() as camera:
                self.assertTrue(camera.is_open)
        cap.release.assert_called_once()


if __name__ == "__main__":
    unittest.main()
