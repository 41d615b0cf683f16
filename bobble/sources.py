"""
Replay sample source for recorded or scripted orientation streams.
"""
import asyncio
import json
import logging
import math
from pathlib import Path
from typing import AsyncIterator, Iterable, List, Optional, Union

from .exceptions import DeviceUnavailableError, StreamError
from .types import OrientationSample

logger = logging.getLogger(__name__)


def parse_sample_line(line: str, line_no: int = 0) -> OrientationSample:
    """
    Parse one JSON-lines record into an OrientationSample.

    Args:
        line: JSON object with pitch, yaw and timestamp keys
        line_no: Line number used in error messages

    Returns:
        Parsed sample
    """
    try:
        record = json.loads(line)
        values = [float(record[key]) for key in ("pitch", "yaw", "timestamp")]
    except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
        raise StreamError(f"Malformed sample on line {line_no}: {e}") from e

    # json accepts NaN and Infinity literals
    if not all(math.isfinite(v) for v in values):
        raise StreamError(f"Non-finite value in sample on line {line_no}")

    pitch, yaw, timestamp = values
    return OrientationSample(pitch=pitch, yaw=yaw, timestamp=timestamp)


class ReplaySampleSource:
    """
    Feeds a fixed sequence of samples to a session.

    Samples come either from memory or from a JSON-lines file read lazily
    while streaming. With pacing enabled, consecutive samples are delayed by
    the difference between their timestamps.
    """

    def __init__(self, samples: Optional[Iterable[OrientationSample]] = None,
                 path: Optional[Union[str, Path]] = None, paced: bool = False):
        if (samples is None) == (path is None):
            raise ValueError("Provide exactly one of samples or path")
        self._samples: Optional[List[OrientationSample]] = list(samples) if samples is not None else None
        self.path = Path(path) if path is not None else None
        self.paced = paced
        self._running = False

    @classmethod
    def from_file(cls, path: Union[str, Path], paced: bool = True) -> "ReplaySampleSource":
        return cls(path=path, paced=paced)

    def is_available(self) -> bool:
        return self._samples is not None or self.path.is_file()

    async def start(self) -> None:
        if not self.is_available():
            raise DeviceUnavailableError(str(self.path), "file not found")
        self._running = True
        logger.info(f"▶️ Replay source started ({self.path or 'in-memory'})")

    async def stop(self) -> None:
        if self._running:
            logger.debug("Replay source stopped")
        self._running = False

    async def samples(self) -> AsyncIterator[OrientationSample]:
        if not self._running:
            raise StreamError("Replay source used before start()")

        previous: Optional[OrientationSample] = None
        for sample in self._iter_samples():
            if not self._running:
                return
            if self.paced and previous is not None:
                await asyncio.sleep(max(0.0, sample.timestamp - previous.timestamp))
            else:
                # Yield control so a deadline can fire between samples
                await asyncio.sleep(0)
            previous = sample
            yield sample

    def _iter_samples(self) -> Iterable[OrientationSample]:
        if self._samples is not None:
            yield from self._samples
            return

        try:
            with open(self.path, "r") as f:
                for line_no, line in enumerate(f, start=1):
                    line = line.strip()
                    if not line or line.startswith("#"):
                        continue
                    yield parse_sample_line(line, line_no)
        except OSError as e:
            raise StreamError(f"Failed reading {self.path}: {e}") from e
