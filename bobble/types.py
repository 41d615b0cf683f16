"""
Type definitions for head gesture recognition.
"""
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import AsyncIterator, Protocol, runtime_checkable


@dataclass(frozen=True)
class OrientationSample:
    """Head orientation reading at a point in time."""
    pitch: float  # radians, negative = looking down
    yaw: float  # radians
    timestamp: float  # seconds


class GestureEvent(IntEnum):
    """Terminal result of a detection session. Values double as exit codes."""
    NOD = 0  # YES
    SHAKE = 1  # NO
    TIMEOUT = 2  # No gesture detected
    ERROR = 3  # Device unavailable or stream failure

    @property
    def exit_code(self) -> int:
        return int(self.value)


class DetectionMode(Enum):
    """Which gestures a session listens for."""
    BOTH = "both"
    NOD_ONLY = "nod_only"
    SHAKE_ONLY = "shake_only"

    @property
    def detects_nod(self) -> bool:
        return self in (DetectionMode.BOTH, DetectionMode.NOD_ONLY)

    @property
    def detects_shake(self) -> bool:
        return self in (DetectionMode.BOTH, DetectionMode.SHAKE_ONLY)


class NodState(Enum):
    IDLE = "idle"
    DETECTING_DOWN = "detecting_down"


class ShakeState(Enum):
    IDLE = "idle"
    DETECTING_LEFT = "detecting_left"
    DETECTING_RIGHT = "detecting_right"


@runtime_checkable
class SampleSource(Protocol):
    """Producer of orientation samples for one session."""

    async def start(self) -> None:
        """Acquire the device. Raises DeviceUnavailableError."""
        ...

    def samples(self) -> AsyncIterator[OrientationSample]:
        """Yield samples until stopped. Raises StreamError on failure."""
        ...

    async def stop(self) -> None:
        """Release the device. Safe to call more than once."""
        ...

    def is_available(self) -> bool:
        """Report whether the device can be started."""
        ...


@runtime_checkable
class ResultSink(Protocol):
    """Consumer of the terminal session result."""

    async def deliver(self, event: GestureEvent) -> None:
        """Receive the session outcome."""
        ...
