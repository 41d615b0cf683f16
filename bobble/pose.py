"""
Head pose geometry shared by camera-based sample sources.
"""
import numpy as np
from typing import Tuple
from scipy.spatial.transform import Rotation

# MediaPipe Face Mesh indices used for solvePnP: nose, chin, eye corners, mouth corners
POSE_LANDMARKS_INDICES = [1, 152, 33, 263, 61, 291]

# 3D canonical face model (in millimeters, centered at nose, +y up, +z out of the face)
MODEL_POINTS_3D = np.array([
    (0.0, 0.0, 0.0),           # Nose tip
    (0.0, -330.0, -65.0),      # Chin
    (-225.0, 170.0, -135.0),   # Left eye left corner
    (225.0, 170.0, -135.0),    # Right eye right corner
    (-150.0, -150.0, -125.0),  # Left mouth corner
    (150.0, -150.0, -125.0)    # Right mouth corner
], dtype=np.float64)

# Direction the face points in model coordinates
FACE_FORWARD = np.array([0.0, 0.0, 1.0])


def camera_matrix(frame_width: int, frame_height: int) -> np.ndarray:
    """Approximate pinhole intrinsics for an uncalibrated webcam."""
    focal_length = frame_width * 1.0
    center = (frame_width / 2, frame_height / 2)
    return np.array([
        [focal_length, 0, center[0]],
        [0, focal_length, center[1]],
        [0, 0, 1]
    ], dtype=np.float64)


def head_angles(rotation_vector: np.ndarray) -> Tuple[float, float]:
    """
    Convert a solvePnP rotation vector into head (pitch, yaw) in radians.

    Camera coordinates are x right, y down, z away from the camera, so a face
    looking straight at the camera points along -z and maps to (0, 0).
    Pitch is negative when looking down.
    """
    forward = Rotation.from_rotvec(np.asarray(rotation_vector, dtype=np.float64).reshape(3)).apply(FACE_FORWARD)
    fx, fy, fz = forward
    yaw = float(np.arctan2(fx, -fz))
    pitch = float(np.arctan2(-fy, np.hypot(fx, fz)))
    return pitch, yaw
