"""
Test cases for the command-line entry point and exit-code mapping.
"""
import io
import json
import tempfile
import unittest
import sys
from contextlib import redirect_stderr
from pathlib import Path
from typing import List, Tuple
from unittest import mock

sys.path.insert(0, str(Path(__file__).parent.parent))

from bobble import main as cli_main
from bobble.exceptions import InvalidArgumentError
from bobble.sources import ReplaySampleSource
from bobble.types import DetectionMode, OrientationSample


def write_trace(directory: str, name: str, values: List[Tuple[float, float]]) -> str:
    path = Path(directory) / name
    with open(path, "w") as f:
        for i, (pitch, yaw) in enumerate(values):
            f.write(json.dumps({"pitch": pitch, "yaw": yaw, "timestamp": i / 60.0}) + "\n")
    return str(path)


class TestParseArgs(unittest.TestCase):

    def test_defaults_come_from_config(self):
        args = cli_main.parse_args([])

        self.assertIsNone(args.timeout)
        self.assertIsNone(args.sensitivity)
        self.assertIsNone(args.mode)
        self.assertFalse(args.verbose)

    def test_short_flags(self):
        args = cli_main.parse_args(["-t", "15", "-s", "0.3", "-g", "yes", "-v", "-p", "Proceed?"])

        self.assertEqual(args.timeout, 15.0)
        self.assertEqual(args.sensitivity, 0.3)
        self.assertEqual(args.mode, DetectionMode.NOD_ONLY)
        self.assertTrue(args.verbose)
        self.assertEqual(args.prompt, "Proceed?")

    def test_rejects_bad_values(self):
        for argv in (["-t", "0"], ["-t", "301"], ["-s", "1.5"], ["-s", "abc"],
                     ["-g", "wink"], ["--bogus"], ["-t"]):
            with self.subTest(argv=argv):
                with self.assertRaises(InvalidArgumentError):
                    cli_main.parse_args(argv)


class TestMain(unittest.TestCase):
    """Run the CLI against recorded traces."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.nod = write_trace(self.tmp.name, "nod.jsonl",
                               [(0.0, 0.0)] + [(-0.30, 0.0)] * 4 + [(0.0, 0.0)] * 6)
        self.shake = write_trace(self.tmp.name, "shake.jsonl",
                                 [(0.0, 0.0)] + [(0.0, -0.50)] * 4 + [(0.0, 0.50)] * 6)
        self.still = write_trace(self.tmp.name, "still.jsonl", [(0.0, 0.0)] * 20)

    def run_main(self, argv: List[str]) -> int:
        with redirect_stderr(io.StringIO()):
            return cli_main.main(argv)

    def test_nod_exits_0(self):
        self.assertEqual(self.run_main(["--replay", self.nod, "--no-pace"]), 0)

    def test_shake_exits_1(self):
        self.assertEqual(self.run_main(["--replay", self.shake, "--no-pace"]), 1)

    def test_no_gesture_exits_2(self):
        self.assertEqual(self.run_main(["--replay", self.still, "--no-pace"]), 2)

    def test_gesture_filter(self):
        self.assertEqual(self.run_main(["--replay", self.nod, "--no-pace", "-g", "shake"]), 2)

    def test_missing_replay_exits_3(self):
        missing = str(Path(self.tmp.name) / "missing.jsonl")

        self.assertEqual(self.run_main(["--replay", missing, "--no-pace"]), 3)

    def test_invalid_argument_exits_3(self):
        self.assertEqual(self.run_main(["--sensitivity", "2.0"]), 3)
        self.assertEqual(self.run_main(["--unknown"]), 3)

    def test_missing_config_exits_3(self):
        missing = str(Path(self.tmp.name) / "missing.yaml")

        self.assertEqual(self.run_main(["--replay", self.nod, "--config", missing]), 3)

    def test_check(self):
        missing = str(Path(self.tmp.name) / "missing.jsonl")

        self.assertEqual(self.run_main(["--check", "--replay", self.nod]), 0)
        self.assertEqual(self.run_main(["--check", "--replay", missing]), 3)

    def test_prompt_spoken_before_detection(self):
        with mock.patch.object(cli_main, "speak_prompt") as speak:
            code = self.run_main(["--replay", self.nod, "--no-pace", "-p", "Proceed?"])

        self.assertEqual(code, 0)
        speak.assert_called_once_with("Proceed?")

    def test_verbose_run(self):
        self.assertEqual(self.run_main(["--replay", self.shake, "--no-pace", "-v"]), 1)

    def test_source_crash_exits_3(self):
        class BrokenSource(ReplaySampleSource):
            async def samples(self):
                raise OSError("camera unplugged")
                yield

        source = BrokenSource([OrientationSample(0.0, 0.0, 0.0)])
        with mock.patch.object(cli_main, "build_source", return_value=source):
            self.assertEqual(self.run_main(["--timeout", "5"]), 3)

    def test_unexpected_failure_exits_3(self):
        with mock.patch.object(cli_main, "run_session", side_effect=RuntimeError("boom")):
            self.assertEqual(self.run_main(["--replay", self.nod, "--no-pace"]), 3)


class TestSpeakPrompt(unittest.TestCase):

    def test_missing_command_is_skipped(self):
        from bobble.prompt import speak_prompt

        with mock.patch("bobble.prompt.shutil.which", return_value=None):
            self.assertFalse(speak_prompt("hello"))

    def test_runs_command(self):
        from bobble.prompt import speak_prompt

        with mock.patch("bobble.prompt.shutil.which", return_value="/usr/bin/say"), \
                mock.patch("bobble.prompt.subprocess.run") as run:
            self.assertTrue(speak_prompt("hello"))
        run.assert_called_once_with(["/usr/bin/say", "hello"], check=True)

    def test_failure_does_not_raise(self):
        from bobble.prompt import speak_prompt

        with mock.patch("bobble.prompt.shutil.which", return_value="/usr/bin/say"), \
                mock.patch("bobble.prompt.subprocess.run", side_effect=OSError("boom")):
            self.assertFalse(speak_prompt("hello"))


if __name__ == '__main__':
    unittest.main()
