"""
Gesture recognition state machines that turn head motion into yes/no events.
"""
import logging
from typing import Optional

from .conditioning import SignalConditioner
from .config import GestureConfig, NOD_RETURN_FRACTION
from .types import GestureEvent, NodState, OrientationSample, ShakeState

logger = logging.getLogger(__name__)

# Relative motion (radians) above which verbose runs log the reading
MOTION_LOG_THRESHOLD = 0.15


def _in_cooldown(last_gesture_time: Optional[float], t_now: float, cooldown: float) -> bool:
    return last_gesture_time is not None and t_now - last_gesture_time <= cooldown


class NodDetector:
    """
    Detects a nod on relative pitch.

    A nod is the head pitching down past the threshold and then coming back
    above 30% of that threshold within the gesture time window.
    """

    def __init__(self, cfg: GestureConfig):
        self.cfg = cfg
        self.state = NodState.IDLE
        self.nod_start_time: float = 0.0
        self.last_nod_gesture_time: Optional[float] = None

    def update(self, relative_pitch: float, t_now: float) -> Optional[GestureEvent]:
        """
        Advance the state machine with one pitch reading.

        Args:
            relative_pitch: Baseline-relative pitch in radians
            t_now: Current timestamp in seconds

        Returns:
            GestureEvent.NOD when a nod completes, None otherwise
        """
        threshold = self.cfg.nod_pitch_threshold

        if self.state is NodState.IDLE:
            if _in_cooldown(self.last_nod_gesture_time, t_now, self.cfg.cooldown_period):
                return None
            # Looking for downward pitch
            if relative_pitch < -threshold:
                self.state = NodState.DETECTING_DOWN
                self.nod_start_time = t_now
                logger.debug(f"Nod: down motion detected (pitch: {relative_pitch:.2f})")
            return None

        if t_now - self.nod_start_time > self.cfg.gesture_time_window:
            logger.debug("Nod: timeout in down state, resetting")
            self.state = NodState.IDLE
            return None

        # Head coming back up, not necessarily past neutral
        if relative_pitch > -threshold * NOD_RETURN_FRACTION:
            logger.info(f"✅ NOD DETECTED - YES (pitch returned: {relative_pitch:.2f})")
            self.last_nod_gesture_time = t_now
            self.state = NodState.IDLE
            return GestureEvent.NOD

        return None


class ShakeDetector:
    """
    Detects a shake on relative yaw.

    Either rotation direction may start the gesture; it completes on a full
    threshold crossing in the opposite direction.
    """

    def __init__(self, cfg: GestureConfig):
        self.cfg = cfg
        self.state = ShakeState.IDLE
        self.shake_start_time: float = 0.0
        self.last_shake_gesture_time: Optional[float] = None

    def update(self, relative_yaw: float, t_now: float) -> Optional[GestureEvent]:
        """
        Advance the state machine with one yaw reading.

        Args:
            relative_yaw: Baseline-relative yaw in radians
            t_now: Current timestamp in seconds

        Returns:
            GestureEvent.SHAKE when a shake completes, None otherwise
        """
        threshold = self.cfg.shake_yaw_threshold

        if self.state is ShakeState.IDLE:
            if _in_cooldown(self.last_shake_gesture_time, t_now, self.cfg.cooldown_period):
                return None
            if relative_yaw < -threshold:
                self._begin(ShakeState.DETECTING_LEFT, t_now)
                logger.debug(f"Shake: left rotation detected (yaw: {relative_yaw:.2f})")
            elif relative_yaw > threshold:
                self._begin(ShakeState.DETECTING_RIGHT, t_now)
                logger.debug(f"Shake: right rotation detected (yaw: {relative_yaw:.2f})")
            return None

        if t_now - self.shake_start_time > self.cfg.gesture_time_window:
            logger.debug(f"Shake: timeout in {self.state.value} state, resetting")
            self.state = ShakeState.IDLE
            return None

        if self.state is ShakeState.DETECTING_LEFT:
            completed = relative_yaw > threshold
        else:
            completed = relative_yaw < -threshold

        if completed:
            logger.info(f"✅ SHAKE DETECTED - NO (yaw: {relative_yaw:.2f})")
            self.last_shake_gesture_time = t_now
            self.state = ShakeState.IDLE
            return GestureEvent.SHAKE

        return None

    def _begin(self, state: ShakeState, t_now: float) -> None:
        self.state = state
        self.shake_start_time = t_now


class GestureClassifier:
    """
    Main classifier that conditions samples and runs the nod and shake detectors.

    Nod is evaluated first, so it wins when both complete on the same sample.
    """

    def __init__(self, cfg: GestureConfig):
        """Initialize classifier with configuration."""
        self.cfg = cfg
        self.conditioner = SignalConditioner()
        self.nod_detector = NodDetector(cfg)
        self.shake_detector = ShakeDetector(cfg)

    def classify(self, sample: OrientationSample, t_now: float) -> Optional[GestureEvent]:
        """
        Process a sample and return a gesture if one completed.

        Args:
            sample: Raw orientation sample
            t_now: Current timestamp in seconds

        Returns:
            GestureEvent.NOD, GestureEvent.SHAKE, or None
        """
        relative = self.conditioner.condition(sample)
        if relative is None:
            return None
        relative_pitch, relative_yaw = relative

        if abs(relative_pitch) > MOTION_LOG_THRESHOLD or abs(relative_yaw) > MOTION_LOG_THRESHOLD:
            logger.debug(f"Motion - pitch: {relative_pitch:.2f}, yaw: {relative_yaw:.2f}")

        if self.cfg.mode.detects_nod:
            event = self.nod_detector.update(relative_pitch, t_now)
            if event is not None:
                return event

        if self.cfg.mode.detects_shake:
            return self.shake_detector.update(relative_yaw, t_now)

        return None
