"""
Bobble - Head Gesture Recognition

Classifies a stream of head orientation samples into a nod (yes) or a
shake (no), for use as a hands-free yes/no input channel.
"""

__version__ = "1.0.0"
__author__ = "Bobble Team"

from .types import OrientationSample, GestureEvent, DetectionMode, SampleSource, ResultSink
from .config import load_config, Cfg, GestureConfig, nod_pitch_threshold, shake_yaw_threshold
from .conditioning import SignalConditioner
from .gestures import NodDetector, ShakeDetector, GestureClassifier
from .session import DetectionSession, run_session
from .sinks import LoggingResultSink, MockResultSink
from .sources import ReplaySampleSource

__all__ = [
    "OrientationSample",
    "GestureEvent",
    "DetectionMode",
    "SampleSource",
    "ResultSink",
    "load_config",
    "Cfg",
    "GestureConfig",
    "nod_pitch_threshold",
    "shake_yaw_threshold",
    "SignalConditioner",
    "NodDetector",
    "ShakeDetector",
    "GestureClassifier",
    "DetectionSession",
    "run_session",
    "LoggingResultSink",
    "MockResultSink",
    "ReplaySampleSource",
]
