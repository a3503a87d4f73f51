import argparse
import importlib.util
import io
import sys
import tempfile
import unittest
import unittest.mock
from datetime import date
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from solver_helpers import Solution

SCRIPT_PATH = SRC_DIR / "01_solve_date.py"


def load_solve_date_module():
    spec = importlib.util.spec_from_file_location("solve_date", SCRIPT_PATH)
    if spec is None or spec.loader is None:
        raise RuntimeError("Failed to load 01_solve_date.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


FAKE_SOLUTIONS = [Solution((0x0F00, 0x0F)), Solution((0x0F, 0x0F00))]


class SolveDateScriptTests(unittest.TestCase):
    def run_main(self, module, argv):
        stdout = io.StringIO()
        with unittest.mock.patch.object(sys, "argv", ["01_solve_date.py", *argv]), unittest.mock.patch(
            "sys.stdout", stdout
        ):
            module.main()
        return stdout.getvalue()

    def test_parse_date(self) -> None:
        module = load_solve_date_module()
        self.assertEqual(module.parse_date("12-01"), date(2020, 12, 1))
        self.assertEqual(module.parse_date("02-29"), date(2020, 2, 29))
        self.assertEqual(module.parse_date("2023-03-04"), date(2023, 3, 4))
        with self.assertRaises(argparse.ArgumentTypeError):
            module.parse_date("13-01")

    def test_first_prints_one_solution(self) -> None:
        module = load_solve_date_module()

        def fake_iter(variant, day, max_solutions=None):
            return iter(FAKE_SOLUTIONS[: max_solutions or len(FAKE_SOLUTIONS)])

        with unittest.mock.patch.object(module, "iter_date_solutions", side_effect=fake_iter) as iter_mock:
            output = self.run_main(module, ["--date", "12-01"])

        self.assertEqual(iter_mock.call_args.kwargs["max_solutions"], 1)
        self.assertIn("**** 12-01 ****", output)
        self.assertIn("B B B B . . # #\nA A A A . . # #\n. . . . . . . #", output)
        # Off-grid cells print as blocked, uncovered board cells stay free.
        self.assertIn(". . . # # # # #\n# # # # # # # #", output)
        self.assertNotIn("has", output)

    def test_all_prints_every_solution_and_count(self) -> None:
        module = load_solve_date_module()
        with unittest.mock.patch.object(
            module, "iter_date_solutions", return_value=iter(FAKE_SOLUTIONS)
        ):
            output = self.run_main(module, ["--date", "12-01", "--print", "all"])

        self.assertIn("B B B B . . # #", output)
        self.assertIn("A A A A . . # #\nB B B B . . # #", output)
        self.assertIn("12-01 has 2 solutions", output)

    def test_count_and_check(self) -> None:
        module = load_solve_date_module()
        with unittest.mock.patch.object(module, "count_for_date", return_value=64):
            output = self.run_main(module, ["--date", "12-01", "--print", "count"])
        self.assertEqual(output.strip(), "12-01 has 64 solutions")

        with unittest.mock.patch.object(module, "has_solution_for_date", return_value=False):
            output = self.run_main(
                module, ["--date", "2021-06-30", "--variant", "weekday", "--print", "check"]
            )
        self.assertEqual(output.strip(), "06-30 solvable: 0")

    def test_writes_image(self) -> None:
        module = load_solve_date_module()
        with tempfile.TemporaryDirectory() as temp_dir:
            out_path = Path(temp_dir) / "nested" / "first.png"
            with unittest.mock.patch.object(
                module, "iter_date_solutions", return_value=iter(FAKE_SOLUTIONS[:1])
            ), unittest.mock.patch.object(module, "render_solution_image") as render_mock:
                self.run_main(module, ["--date", "12-01", "--image-out", str(out_path)])

            self.assertTrue(out_path.parent.is_dir())
        args, kwargs = render_mock.call_args
        self.assertEqual(args[1], FAKE_SOLUTIONS[0])
        self.assertEqual(args[2], str(out_path))
        self.assertIn("labels", kwargs)


if __name__ == "__main__":
    unittest.main()
