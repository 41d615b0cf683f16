"""
Detection session: races gesture classification against a deadline.
"""
import asyncio
import logging
from typing import Optional

from .config import GestureConfig
from .exceptions import BobbleError
from .gestures import GestureClassifier
from .types import GestureEvent, ResultSink, SampleSource

logger = logging.getLogger(__name__)


class DetectionSession:
    """
    One yes/no question: owns the classifier, drives the source and reports
    exactly one result to the sink.

    Outcomes:
    - NOD / SHAKE when the classifier completes a gesture
    - TIMEOUT when the deadline passes first, or a finite stream runs out
    - ERROR when the source cannot start or fails mid-session
    """

    def __init__(self, source: SampleSource, sink: ResultSink,
                 cfg: GestureConfig, timeout_s: float):
        self.source = source
        self.sink = sink
        self.cfg = cfg
        self.timeout_s = timeout_s
        self.classifier = GestureClassifier(cfg)
        self.result: Optional[GestureEvent] = None

    async def run(self) -> GestureEvent:
        """Run the session to completion and deliver its result."""
        if self.result is not None:
            raise RuntimeError("Detection session has already finished")

        try:
            result = await asyncio.wait_for(self._detect(), timeout=self.timeout_s)
        except asyncio.TimeoutError:
            result = GestureEvent.TIMEOUT
        except BobbleError as e:
            logger.error(f"❌ {e}")
            result = GestureEvent.ERROR
        except Exception:
            logger.exception("❌ Unexpected failure during detection")
            result = GestureEvent.ERROR
        finally:
            await self.source.stop()

        self.result = result
        await self.sink.deliver(result)
        return result

    async def _detect(self) -> GestureEvent:
        await self.source.start()
        logger.info(f"👂 Waiting for gesture (timeout: {self.timeout_s:g}s, mode: {self.cfg.mode.value})")

        async for sample in self.source.samples():
            event = self.classifier.classify(sample, sample.timestamp)
            if event is not None:
                return event

        logger.info("Sample stream ended without a gesture")
        return GestureEvent.TIMEOUT


async def run_session(source: SampleSource, sink: ResultSink,
                      cfg: GestureConfig, timeout_s: float) -> GestureEvent:
    """Convenience wrapper that builds and runs a single session."""
    session = DetectionSession(source, sink, cfg, timeout_s)
    return await session.run()
