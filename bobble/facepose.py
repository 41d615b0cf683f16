"""
Webcam head pose sample source using MediaPipe Face Mesh.
"""
import asyncio
import logging
import time
import cv2
import mediapipe as mp
import numpy as np
from typing import AsyncIterator, Optional

from .config import CameraConfig, FaceMeshConfig
from .exceptions import DeviceUnavailableError, StreamError
from .pose import MODEL_POINTS_3D, POSE_LANDMARKS_INDICES, camera_matrix, head_angles
from .types import OrientationSample

logger = logging.getLogger(__name__)


class FacePoseSampleSource:
    """Estimates head pitch and yaw from webcam frames."""

    def __init__(self, camera: CameraConfig, face_mesh: FaceMeshConfig):
        """
        Initialize the face pose source.

        Args:
            camera: Camera index, resolution and frame rate
            face_mesh: MediaPipe Face Mesh settings
        """
        self.camera = camera
        self.face_mesh_cfg = face_mesh
        self.mp_face_mesh = mp.solutions.face_mesh
        self.face_mesh = None
        self.cap: Optional[cv2.VideoCapture] = None
        self._running = False

    def is_available(self) -> bool:
        cap = cv2.VideoCapture(self.camera.index)
        try:
            return cap.isOpened()
        finally:
            cap.release()

    async def start(self) -> None:
        # Opening a capture device can block for seconds
        cap = await asyncio.to_thread(cv2.VideoCapture, self.camera.index)
        if not cap.isOpened():
            cap.release()
            raise DeviceUnavailableError(f"camera {self.camera.index}", "failed to open")

        cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.camera.width)
        cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.camera.height)
        cap.set(cv2.CAP_PROP_FPS, self.camera.fps)
        self.cap = cap

        self.face_mesh = self.mp_face_mesh.FaceMesh(
            static_image_mode=False,
            max_num_faces=self.face_mesh_cfg.max_num_faces,
            refine_landmarks=self.face_mesh_cfg.refine_landmarks,
            min_detection_confidence=self.face_mesh_cfg.min_detection_confidence,
            min_tracking_confidence=self.face_mesh_cfg.min_tracking_confidence
        )
        self._running = True
        logger.info(f"📷 Camera {self.camera.index} opened, tracking head pose")

    async def stop(self) -> None:
        self._running = False
        if self.cap is not None:
            self.cap.release()
            self.cap = None
        if self.face_mesh is not None:
            self.face_mesh.close()
            self.face_mesh = None

    async def samples(self) -> AsyncIterator[OrientationSample]:
        if self.cap is None:
            raise StreamError("Face pose source used before start()")

        while self._running:
            ret, frame = await asyncio.to_thread(self.cap.read)
            if not self._running:
                return
            if not ret:
                raise StreamError("Failed to read frame from camera")

            t_now = time.time()
            try:
                angles = await asyncio.to_thread(self.estimate, frame)
            except Exception as e:
                raise StreamError(f"Frame processing failed: {e}") from e
            if angles is None:
                # No face in frame
                continue
            pitch, yaw = angles
            yield OrientationSample(pitch=pitch, yaw=yaw, timestamp=t_now)

    def estimate(self, frame_bgr: np.ndarray) -> Optional[tuple]:
        """
        Estimate head (pitch, yaw) in radians for one frame.

        Args:
            frame_bgr: Input frame in BGR format

        Returns:
            (pitch, yaw), or None if no face detected
        """
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self.face_mesh.process(frame_rgb)
        if not results.multi_face_landmarks:
            return None

        face_landmarks = results.multi_face_landmarks[0]
        height, width = frame_bgr.shape[:2]
        image_points = np.array([
            [face_landmarks.landmark[idx].x * width,
             face_landmarks.landmark[idx].y * height]
            for idx in POSE_LANDMARKS_INDICES
        ], dtype=np.float64)

        success, rotation_vector, _ = cv2.solvePnP(
            MODEL_POINTS_3D,
            image_points,
            camera_matrix(width, height),
            np.zeros((4, 1)),
            flags=cv2.SOLVEPNP_ITERATIVE
        )
        if not success:
            return None

        return head_angles(rotation_vector)
