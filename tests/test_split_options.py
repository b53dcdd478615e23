import unittest
from datetime import timedelta
from decimal import Decimal
from fractions import Fraction
from pathlib import Path
import sys

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from pipeline.errors import InvalidConfigError
from pipeline.models import SplitOptions, minutes_to_duration, to_seconds


class TestSplitOptions(unittest.TestCase):
    def test_duration_conversions_are_exact(self) -> None:
        self.assertEqual(to_seconds(timedelta(minutes=10)), 600)
        self.assertEqual(to_seconds(timedelta(milliseconds=1500)), Fraction(3, 2))
        self.assertEqual(to_seconds(0.1), Fraction(1, 10))
        self.assertEqual(to_seconds(Decimal("2.25")), Fraction(9, 4))
        self.assertEqual(to_seconds(7), 7)
        self.assertEqual(minutes_to_duration(10), timedelta(seconds=600))

    def test_validate_returns_seconds(self) -> None:
        options = SplitOptions(input_path="in.wav", chunk_duration=timedelta(minutes=1))
        self.assertEqual(options.validate(), 60)

    def test_rejects_bad_values(self) -> None:
        cases = [
            dict(input_path="in.wav", chunk_duration=0),
            dict(input_path="in.wav", chunk_duration=-3),
            dict(input_path="in.wav", chunk_duration=timedelta(0)),
            dict(input_path="in.wav", chunk_duration=float("nan")),
            dict(input_path="in.wav", chunk_duration=True),
            dict(input_path="in.wav", chunk_duration="10"),
            dict(input_path="", chunk_duration=10),
            dict(input_path="in.wav", chunk_duration=10, output_dir=""),
            dict(input_path="in.wav", chunk_duration=10, prefix=""),
            dict(input_path="in.wav", chunk_duration=10, prefix="a/b"),
            dict(input_path="in.wav", chunk_duration=10, packet_frames=0),
        ]
        for kwargs in cases:
            with self.subTest(kwargs=kwargs):
                with self.assertRaises(InvalidConfigError) as ctx:
                    SplitOptions(**kwargs).validate()
                self.assertEqual(ctx.exception.stage, "config")


if __name__ == "__main__":
    unittest.main()
