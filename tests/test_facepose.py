"""
Test cases for the webcam head pose source with a mocked camera and face mesh.
"""
import importlib.util
import math
import unittest
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest import mock

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from bobble.config import CameraConfig, FaceMeshConfig
from bobble.exceptions import DeviceUnavailableError, StreamError
from bobble.pose import MODEL_POINTS_3D, POSE_LANDMARKS_INDICES, camera_matrix

HAVE_CAMERA_STACK = all(importlib.util.find_spec(name) is not None for name in ("cv2", "mediapipe"))

if HAVE_CAMERA_STACK:
    import cv2
    from bobble.facepose import FacePoseSampleSource

WIDTH, HEIGHT = 640, 480
FACE_MESH_SIZE = 468


def blank_frame() -> np.ndarray:
    return np.zeros((HEIGHT, WIDTH, 3), dtype=np.uint8)


def no_face() -> SimpleNamespace:
    return SimpleNamespace(multi_face_landmarks=None)


def frontal_face() -> SimpleNamespace:
    """Face mesh result for a face 1m away looking straight at the camera."""
    image_points, _ = cv2.projectPoints(
        MODEL_POINTS_3D,
        np.array([math.pi, 0.0, 0.0]),
        np.array([0.0, 0.0, 1000.0]),
        camera_matrix(WIDTH, HEIGHT),
        np.zeros((4, 1)),
    )
    landmarks = [SimpleNamespace(x=0.5, y=0.5) for _ in range(FACE_MESH_SIZE)]
    for idx, (x, y) in zip(POSE_LANDMARKS_INDICES, image_points.reshape(-1, 2)):
        landmarks[idx] = SimpleNamespace(x=x / WIDTH, y=y / HEIGHT)
    return SimpleNamespace(multi_face_landmarks=[SimpleNamespace(landmark=landmarks)])


@unittest.skipUnless(HAVE_CAMERA_STACK, "opencv-python and mediapipe not installed")
class TestFacePoseSampleSource(unittest.IsolatedAsyncioTestCase):
    """Drive the source with a fake capture device and face mesh."""

    def setUp(self):
        self.cap = mock.MagicMock()
        self.cap.isOpened.return_value = True
        self.cap.read.return_value = (True, blank_frame())

        self.face_mesh = mock.MagicMock()
        self.face_mesh.process.return_value = no_face()

        capture = mock.patch("bobble.facepose.cv2.VideoCapture", return_value=self.cap)
        self.video_capture = capture.start()
        self.addCleanup(capture.stop)

        mp = mock.patch("bobble.facepose.mp")
        mp.start().solutions.face_mesh.FaceMesh.return_value = self.face_mesh
        self.addCleanup(mp.stop)

        self.source = FacePoseSampleSource(
            CameraConfig(index=0, width=WIDTH, height=HEIGHT, fps=30),
            FaceMeshConfig(max_num_faces=1, refine_landmarks=True,
                           min_detection_confidence=0.5, min_tracking_confidence=0.5),
        )

    async def first_sample(self):
        async for sample in self.source.samples():
            return sample

    async def test_unopened_camera_is_unavailable(self):
        self.cap.isOpened.return_value = False

        with self.assertRaises(DeviceUnavailableError):
            await self.source.start()
        self.cap.release.assert_called_once()
        self.assertIsNone(self.source.cap)

    async def test_start_configures_capture(self):
        await self.source.start()

        self.video_capture.assert_called_once_with(0)
        self.cap.set.assert_any_call(cv2.CAP_PROP_FRAME_WIDTH, WIDTH)
        self.cap.set.assert_any_call(cv2.CAP_PROP_FPS, 30)
        self.assertIs(self.source.face_mesh, self.face_mesh)

    async def test_stop_releases_once(self):
        await self.source.start()

        await self.source.stop()
        await self.source.stop()

        self.cap.release.assert_called_once()
        self.face_mesh.close.assert_called_once()

    async def test_samples_before_start(self):
        with self.assertRaises(StreamError):
            await self.first_sample()

    async def test_read_failure_is_stream_error(self):
        self.cap.read.return_value = (False, None)
        await self.source.start()

        with self.assertRaises(StreamError):
            await self.first_sample()

    async def test_frames_without_face_are_skipped(self):
        self.face_mesh.process.side_effect = [no_face(), no_face(), frontal_face()]
        await self.source.start()

        sample = await self.first_sample()

        self.assertEqual(self.face_mesh.process.call_count, 3)
        self.assertAlmostEqual(sample.pitch, 0.0, delta=0.05)
        self.assertAlmostEqual(sample.yaw, 0.0, delta=0.05)
        self.assertGreater(sample.timestamp, 0.0)

    async def test_processing_failure_is_stream_error(self):
        self.face_mesh.process.side_effect = RuntimeError("graph crashed")
        await self.source.start()

        with self.assertRaises(StreamError) as ctx:
            await self.first_sample()
        self.assertIsInstance(ctx.exception.__cause__, RuntimeError)


if __name__ == '__main__':
    unittest.main()
