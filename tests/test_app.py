import unittest
from unittest import mock

import app
from errors import ModelLoadError
from tests.fakes import FakeCamera, FakeDetector, blank_frame, face


class TestWindowDemo(unittest.TestCase):
    def setUp(self):
        self.camera = FakeCamera()
        patches = [
            mock.patch("app.Camera", return_value=self.camera),
            mock.patch("app.cv2.imshow"),
            mock.patch("app.cv2.destroyAllWindows"),
        ]
        for p in patches:
            p.start()
            self.addCleanup(p.stop)

    def test_runs_until_q(self):
        detector = FakeDetector([[face(happy=0.9)], [face(sad=0.6, happy=0.4)], [face(happy=1.0)]])
        with mock.patch("app.EmotionDetector", return_value=detector), \
                mock.patch("app.cv2.waitKey", side_effect=[-1, ord("q")]) as wait_key:
            tally = app.run()

        # Quits on the same pass that saw q
        self.assertEqual(wait_key.call_count, 2)
        self.assertEqual(detector.calls, 2)
        self.assertEqual(tally.snapshot()["happy"], 1)
        self.assertEqual(tally.snapshot()["sad"], 1)
        self.assertTrue(self.camera.released)
        app.cv2.destroyAllWindows.assert_called_once()

    def test_startup_failure_is_raised(self):
        with mock.patch("app.EmotionDetector", return_value=FakeDetector(fail_load=True)):
            with self.assertLogs("app", level="ERROR"):
                with self.assertRaises(ModelLoadError):
                    app.run()
        self.assertFalse(self.camera.opened)

    def test_draw_hud_writes_on_frame(self):
        frame = blank_frame(200, 200)
        app.draw_hud(frame, "happy", {"happy": 3, "sad": 0})
        self.assertTrue(frame.any())


if __name__ == "__main__":
    unittest.main()
