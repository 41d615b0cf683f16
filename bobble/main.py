"""
Command-line entry point: ask a yes/no question, answer with a nod or a shake.

Exit codes:
    0 - Nod detected (YES) / sample source available (with --check)
    1 - Shake detected (NO)
    2 - Timeout (no gesture detected)
    3 - Error (device not available or invalid arguments)
"""
import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import (Cfg, GestureConfig, load_config, parse_mode,
                     validate_sensitivity, validate_timeout)
from .exceptions import ConfigError, DeviceUnavailableError, InvalidArgumentError
from .prompt import speak_prompt
from .session import run_session
from .sinks import LoggingResultSink
from .sources import ReplaySampleSource
from .types import GestureEvent, SampleSource

logger = logging.getLogger(__name__)

EPILOG = """\
exit codes:
  0  nod detected (YES) / source available (with --check)
  1  shake detected (NO)
  2  timeout (no gesture detected)
  3  error (device not available or invalid arguments)

examples:
  bobble --timeout 10
  bobble --gesture nod --timeout 15
  bobble --gesture shake --sensitivity 0.3 --verbose
  bobble --prompt "Do you want to proceed?"
"""


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports errors as InvalidArgumentError instead of exiting with 2."""

    def error(self, message):
        raise InvalidArgumentError(message)


def _float(value: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number, got {value!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="bobble",
        description="Detect head nods (yes) and shakes (no) from head orientation.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-c", "--check", action="store_true",
                        help="check if the sample source is available and exit")
    parser.add_argument("-t", "--timeout", type=_float, metavar="SECONDS",
                        help="timeout in seconds (default: 30, range: 1-300)")
    parser.add_argument("-s", "--sensitivity", type=_float, metavar="VALUE",
                        help="0.1 (very sensitive) to 1.0 (less sensitive), default: 0.5")
    parser.add_argument("-g", "--gesture", metavar="TYPE",
                        help="gesture to detect: 'nod', 'shake', or 'both' (default: both)")
    parser.add_argument("-p", "--prompt", metavar="TEXT",
                        help="speak this prompt before detecting the gesture")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="enable verbose logging to stderr")
    parser.add_argument("--replay", metavar="FILE",
                        help="read samples from a JSON-lines file instead of the camera")
    parser.add_argument("--no-pace", action="store_true",
                        help="replay samples as fast as possible")
    parser.add_argument("--config", metavar="PATH",
                        help="path to a YAML config file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse and validate command-line arguments. Raises InvalidArgumentError."""
    args = build_parser().parse_args(argv)
    if args.timeout is not None:
        validate_timeout(args.timeout)
    if args.sensitivity is not None:
        validate_sensitivity(args.sensitivity)
    args.mode = parse_mode(args.gesture) if args.gesture is not None else None
    return args


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(asctime)s] %(message)s",
        stream=sys.stderr,
        force=True,
    )


def build_source(args: argparse.Namespace, cfg: Cfg) -> SampleSource:
    """Pick the sample source for this run."""
    if args.replay:
        return ReplaySampleSource.from_file(args.replay, paced=not args.no_pace)

    try:
        from .facepose import FacePoseSampleSource
    except ImportError as e:
        raise DeviceUnavailableError("camera", f"camera support not installed: {e}") from e
    return FacePoseSampleSource(cfg.camera, cfg.face_mesh)


def main(argv: Optional[List[str]] = None) -> int:
    """Run one detection and return the process exit code."""
    try:
        args = parse_args(argv)
    except InvalidArgumentError as e:
        print(f"Error: {e}", file=sys.stderr)
        print("Use --help for usage information", file=sys.stderr)
        return GestureEvent.ERROR.exit_code

    configure_logging(args.verbose)

    try:
        cfg = load_config(args.config)
        source = build_source(args, cfg)
    except (ConfigError, DeviceUnavailableError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return GestureEvent.ERROR.exit_code

    if args.check:
        if source.is_available():
            logger.info("Sample source available")
            return 0
        logger.info("Sample source not available")
        return GestureEvent.ERROR.exit_code

    if args.prompt:
        speak_prompt(args.prompt)

    sensitivity = args.sensitivity if args.sensitivity is not None else cfg.gestures.sensitivity
    mode = args.mode if args.mode is not None else cfg.gestures.mode
    timeout_s = args.timeout if args.timeout is not None else cfg.session.timeout_s

    gesture_cfg = GestureConfig.from_sensitivity(sensitivity, mode)
    logger.debug(
        f"Thresholds - nod: {gesture_cfg.nod_pitch_threshold:.3f} rad, "
        f"shake: {gesture_cfg.shake_yaw_threshold:.3f} rad"
    )

    sink = LoggingResultSink()
    try:
        result = asyncio.run(run_session(source, sink, gesture_cfg, timeout_s))
    except KeyboardInterrupt:
        print("\nDetection interrupted by user", file=sys.stderr)
        return GestureEvent.ERROR.exit_code
    except Exception as e:
        logger.exception("❌ Detection crashed")
        print(f"Error: {e}", file=sys.stderr)
        return GestureEvent.ERROR.exit_code
    return result.exit_code


def cli() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    cli()
