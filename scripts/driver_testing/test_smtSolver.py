#     The Certora Prover
#     Copyright (C) 2025  Certora Ltd.
#
#     This program is free software: you can redistribute it and/or modify
#     it under the terms of the GNU General Public License as published by
#     the Free Software Foundation, version 3 of the License.
#
#     This program is distributed in the hope that it will be useful,
#     but WITHOUT ANY WARRANTY; without even the implied warranty of
#     MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
#     GNU General Public License for more details.
#
#     You should have received a copy of the GNU General Public License
#     along with this program.  If not, see <https://www.gnu.org/licenses/>.

import subprocess
import sys
import unittest
from pathlib import Path
from typing import List
from unittest import mock

scripts_dir_path = Path(__file__).parent.parent.resolve()  # the scripts directory
sys.path.insert(0, str(scripts_dir_path))

from Shared import solcUtils as Util
from SolcDriver import solcSmtSolver as SmtSolver


class TestSolve(unittest.TestCase):
    @mock.patch("SolcDriver.solcSmtSolver.Util.which", return_value=None)
    def test_no_solver_installed(self, _which: mock.MagicMock) -> None:
        with self.assertRaises(Util.SmtSolverError) as cm:
            SmtSolver.solve("(check-sat)")
        self.assertEqual(str(cm.exception), "No SMT solver available. Assertion checking will not be performed.")

    @mock.patch("SolcDriver.solcSmtSolver.subprocess.run")
    def test_query_is_passed_as_a_file(self, run: mock.MagicMock) -> None:
        seen: List[str] = []

        def fake_run(cmd: List[str], **kwargs: object) -> subprocess.CompletedProcess:
            seen.append(Path(cmd[-1]).read_text())
            return subprocess.CompletedProcess(cmd, 0, stdout="unsat\n", stderr="")

        run.side_effect = fake_run
        z3 = SmtSolver.get_solver("z3")
        self.assertEqual(SmtSolver.solve("(check-sat)", z3), "unsat\n")
        self.assertEqual(seen, ["(check-sat)"])
        self.assertEqual(run.call_args.args[0][0], "z3")
        self.assertFalse(Path(run.call_args.args[0][-1]).exists())

    @mock.patch("SolcDriver.solcSmtSolver.Util.which", side_effect=lambda cmd: cmd if cmd == "cvc5" else None)
    @mock.patch("SolcDriver.solcSmtSolver.subprocess.run")
    def test_first_installed_solver_is_used(self, run: mock.MagicMock, _which: mock.MagicMock) -> None:
        run.return_value = subprocess.CompletedProcess([], 0, stdout="sat\n", stderr="")
        self.assertEqual(SmtSolver.solve("(check-sat)"), "sat\n")
        self.assertEqual(run.call_args.args[0][0], "cvc5")

    @mock.patch("SolcDriver.solcSmtSolver.subprocess.run")
    def test_timeout_without_answer(self, run: mock.MagicMock) -> None:
        run.side_effect = subprocess.TimeoutExpired(["eld"], SmtSolver.TIMEOUT_SECONDS, output=b"")
        with self.assertRaises(Util.SmtSolverError):
            SmtSolver.solve("(check-sat)", SmtSolver.get_solver("eld"))

    @mock.patch("SolcDriver.solcSmtSolver.subprocess.run")
    def test_failure_with_an_answer_is_still_an_answer(self, run: mock.MagicMock) -> None:
        run.return_value = subprocess.CompletedProcess([], 1, stdout="unknown\n", stderr="resource limit")
        self.assertEqual(SmtSolver.solve("(check-sat)", SmtSolver.get_solver("cvc4")), "unknown\n")

    @mock.patch("SolcDriver.solcSmtSolver.subprocess.run")
    def test_error_output_is_not_an_answer(self, run: mock.MagicMock) -> None:
        run.return_value = subprocess.CompletedProcess([], 1, stdout="error: unknown parameter 'rlimit'\n",
                                                       stderr="")
        with self.assertRaises(Util.SmtSolverError) as cm:
            SmtSolver.solve("(check-sat)", SmtSolver.get_solver("z3"))
        self.assertIn("z3 exited with code 1", str(cm.exception))

    @mock.patch("SolcDriver.solcSmtSolver.subprocess.run")
    def test_timeout_with_error_output(self, run: mock.MagicMock) -> None:
        run.side_effect = subprocess.TimeoutExpired(["z3"], SmtSolver.TIMEOUT_SECONDS, output=b"(error \"oops\")")
        with self.assertRaises(Util.SmtSolverError):
            SmtSolver.solve("(check-sat)", SmtSolver.get_solver("z3"))

    def test_get_solver(self) -> None:
        self.assertIsNone(SmtSolver.get_solver(None))
        eld = SmtSolver.get_solver("eld")
        assert eld is not None
        self.assertEqual(eld.name, "Eldarica")
        with self.assertRaises(Util.SolcUserInputError):
            SmtSolver.get_solver("yices")


if __name__ == '__main__':
    unittest.main()
