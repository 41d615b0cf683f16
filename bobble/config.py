"""
Configuration management for head gesture detection.
"""
import yaml
from pathlib import Path
from typing import Optional, Dict, Any
from dataclasses import dataclass

from .exceptions import ConfigError, InvalidArgumentError
from .types import DetectionMode

MIN_SENSITIVITY = 0.1
MAX_SENSITIVITY = 1.0
MIN_TIMEOUT_S = 1.0
MAX_TIMEOUT_S = 300.0

# Linear sensitivity -> threshold maps (radians)
NOD_THRESHOLD_BASE = 0.075
NOD_THRESHOLD_SCALE = 0.25
SHAKE_THRESHOLD_BASE = 0.195
SHAKE_THRESHOLD_SCALE = 0.35

GESTURE_TIME_WINDOW_S = 1.2
COOLDOWN_PERIOD_S = 0.5
NOD_RETURN_FRACTION = 0.3
SMOOTHING_WINDOW = 3

_MODE_ALIASES = {
    "both": DetectionMode.BOTH,
    "any": DetectionMode.BOTH,
    "nod": DetectionMode.NOD_ONLY,
    "yes": DetectionMode.NOD_ONLY,
    "nod_only": DetectionMode.NOD_ONLY,
    "shake": DetectionMode.SHAKE_ONLY,
    "no": DetectionMode.SHAKE_ONLY,
    "shake_only": DetectionMode.SHAKE_ONLY,
}


def nod_pitch_threshold(sensitivity: float) -> float:
    """Pitch threshold in radians (~6 to ~19 degrees)."""
    return NOD_THRESHOLD_BASE + sensitivity * NOD_THRESHOLD_SCALE


def shake_yaw_threshold(sensitivity: float) -> float:
    """Yaw threshold in radians (~13 to ~33 degrees)."""
    return SHAKE_THRESHOLD_BASE + sensitivity * SHAKE_THRESHOLD_SCALE


def clamp_sensitivity(sensitivity: float) -> float:
    return max(MIN_SENSITIVITY, min(MAX_SENSITIVITY, sensitivity))


def parse_mode(value: str) -> DetectionMode:
    """
    Map a gesture name to a detection mode.

    Accepts 'nod'/'yes', 'shake'/'no' and 'both'/'any' (case-insensitive).
    """
    try:
        return _MODE_ALIASES[value.strip().lower()]
    except KeyError:
        raise InvalidArgumentError(
            f"gesture must be 'nod', 'shake', or 'both' (got {value!r})"
        ) from None


def validate_sensitivity(sensitivity: float) -> float:
    if not MIN_SENSITIVITY <= sensitivity <= MAX_SENSITIVITY:
        raise InvalidArgumentError(
            f"Sensitivity must be between {MIN_SENSITIVITY} and {MAX_SENSITIVITY}"
        )
    return sensitivity


def validate_timeout(timeout_s: float) -> float:
    if not MIN_TIMEOUT_S <= timeout_s <= MAX_TIMEOUT_S:
        raise InvalidArgumentError(
            f"Timeout must be between {MIN_TIMEOUT_S:g} and {MAX_TIMEOUT_S:g} seconds"
        )
    return timeout_s


@dataclass(frozen=True)
class GestureConfig:
    """Per-session gesture thresholds and timing."""
    nod_pitch_threshold: float
    shake_yaw_threshold: float
    gesture_time_window: float = GESTURE_TIME_WINDOW_S
    cooldown_period: float = COOLDOWN_PERIOD_S
    mode: DetectionMode = DetectionMode.BOTH

    @classmethod
    def from_sensitivity(cls, sensitivity: float = 0.5,
                         mode: DetectionMode = DetectionMode.BOTH) -> "GestureConfig":
        """
        Derive thresholds from a sensitivity scalar.

        0.1 is very sensitive, 1.0 is least sensitive. Out-of-range values
        are clamped.
        """
        sensitivity = clamp_sensitivity(sensitivity)
        return cls(
            nod_pitch_threshold=nod_pitch_threshold(sensitivity),
            shake_yaw_threshold=shake_yaw_threshold(sensitivity),
            mode=mode,
        )


@dataclass
class GesturesConfig:
    """Default gesture settings."""
    sensitivity: float
    mode: DetectionMode


@dataclass
class SessionConfig:
    """Detection session settings."""
    timeout_s: float
    sample_rate_hz: float


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int
    width: int
    height: int
    fps: int


@dataclass
class FaceMeshConfig:
    """MediaPipe Face Mesh configuration settings."""
    max_num_faces: int
    refine_landmarks: bool
    min_detection_confidence: float
    min_tracking_confidence: float


@dataclass
class Cfg:
    """Main configuration class."""
    gestures: GesturesConfig
    session: SessionConfig
    camera: CameraConfig
    face_mesh: FaceMeshConfig


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses the bundled config.default.yaml

    Returns:
        Configuration object with all settings
    """
    if path is None:
        path = Path(__file__).parent / "config.default.yaml"

    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file is empty or not a mapping: {config_path}")

    try:
        return _dict_to_config(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ConfigError(f"Invalid config in {config_path}: {e}") from e


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object."""
    gestures_data = data['gestures']
    try:
        gestures = GesturesConfig(
            sensitivity=validate_sensitivity(float(gestures_data['sensitivity'])),
            mode=parse_mode(str(gestures_data['mode']))
        )
        session_data = data['session']
        session = SessionConfig(
            timeout_s=validate_timeout(float(session_data['timeout_s'])),
            sample_rate_hz=float(session_data['sample_rate_hz'])
        )
    except InvalidArgumentError as e:
        raise ConfigError(str(e)) from e

    camera_data = data['camera']
    camera = CameraConfig(
        index=int(camera_data['index']),
        width=int(camera_data['width']),
        height=int(camera_data['height']),
        fps=int(camera_data['fps'])
    )

    fm_data = data['face_mesh']
    face_mesh = FaceMeshConfig(
        max_num_faces=int(fm_data['max_num_faces']),
        refine_landmarks=bool(fm_data['refine_landmarks']),
        min_detection_confidence=float(fm_data['min_detection_confidence']),
        min_tracking_confidence=float(fm_data['min_tracking_confidence'])
    )

    return Cfg(
        gestures=gestures,
        session=session,
        camera=camera,
        face_mesh=face_mesh
    )
