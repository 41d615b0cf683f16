"""
Signal conditioning: moving-average smoothing and baseline calibration.
"""
import logging
import statistics
from collections import deque
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import SMOOTHING_WINDOW
from .types import OrientationSample

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Baseline:
    """Reference orientation captured at session start."""
    pitch: float
    yaw: float


class SignalConditioner:
    """
    Converts raw orientation into smoothed, baseline-relative pitch and yaw.

    The first sample only calibrates the baseline. The baseline is never
    recomputed, so a head that starts tilted offsets every later reading.
    """

    def __init__(self, window: int = SMOOTHING_WINDOW):
        self.pitch_history: deque[float] = deque(maxlen=window)
        self.yaw_history: deque[float] = deque(maxlen=window)
        self.baseline: Optional[Baseline] = None

    def condition(self, sample: OrientationSample) -> Optional[Tuple[float, float]]:
        """
        Smooth a sample and return (relative_pitch, relative_yaw).

        Returns None for the calibration sample.
        """
        self.pitch_history.append(sample.pitch)
        self.yaw_history.append(sample.yaw)

        # statistics.mean is exact, so a constant window averages to its own value
        smoothed_pitch = statistics.mean(self.pitch_history)
        smoothed_yaw = statistics.mean(self.yaw_history)

        if self.baseline is None:
            self.baseline = Baseline(pitch=smoothed_pitch, yaw=smoothed_yaw)
            logger.info(f"📍 Baseline set - pitch: {smoothed_pitch:.2f}, yaw: {smoothed_yaw:.2f}")
            return None

        return (smoothed_pitch - self.baseline.pitch,
                smoothed_yaw - self.baseline.yaw)
