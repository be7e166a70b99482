import io
import unittest
from contextlib import redirect_stdout

from shenzhen_core.cli import main


class TestCli(unittest.TestCase):
    def _run(self, *argv):
        buf = io.StringIO()
        with redirect_stdout(buf):
            main(list(argv))
        return buf.getvalue()

    def test_given_step_flag_when_running_then_prints_steps(self):
        out = self._run('--seed', '1', '--step', '3')
        self.assertIn('Dealt 40 cards (seed=1)', out)
        self.assertIn('step 1: depth=0', out)
        self.assertIn('step 3:', out)

    def test_given_small_state_limit_when_solving_then_reports_outcome(self):
        out = self._run('--seed', '2', '--max-states', '200')
        self.assertTrue(
            'Gave up after' in out or 'Solved in' in out or 'No solution' in out,
            out,
        )


if __name__ == "__main__":
    unittest.main(verbosity=2)
