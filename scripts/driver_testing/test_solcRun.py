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

import io
import json
import sys
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

scripts_dir_path = Path(__file__).parent.parent.resolve()  # the scripts directory
sys.path.insert(0, str(scripts_dir_path))

import solcRun
from Shared import solcUtils as Util
from driverTestUtils import FakeEngine, contract_json, error_json, output_json, write_file

ABI = [{"inputs": [], "name": "f", "outputs": [], "stateMutability": "nonpayable", "type": "function"}]


class TestDirectMode(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)
        self.out_dir = self.root / "out"
        self.source = str(write_file(self.root / "contracts" / "Token.sol", "contract Token {}"))

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def run_direct(self, engine: FakeEngine, *flags: str) -> tuple:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            exit_code = solcRun.run_solc([self.source, "--base-path", str(self.root), "-o", str(self.out_dir),
                                          *flags], engine)
        return exit_code, out.getvalue(), err.getvalue()

    def test_artifacts_are_written(self) -> None:
        engine = FakeEngine([output_json(contracts={"contracts/Token.sol": {"Token": contract_json(ABI, "6080ff")}},
                                         errors=[error_json("unused variable", "warning", "Warning")])])
        exit_code, out, _ = self.run_direct(engine, "--bin", "--abi")

        self.assertEqual(exit_code, 0)
        self.assertIn("Warning: unused variable", out)
        self.assertEqual((self.out_dir / "contracts_Token_sol_Token.bin").read_text(), "6080ff")
        self.assertEqual(json.loads((self.out_dir / "contracts_Token_sol_Token.abi").read_text()), ABI)
        request = json.loads(engine.inputs[0])
        self.assertEqual(list(request["sources"]), ["contracts/Token.sol"])
        self.assertIsNotNone(engine.callbacks[0])

    def test_only_requested_kinds_are_written(self) -> None:
        engine = FakeEngine([output_json(contracts={"contracts/Token.sol": {"Token": contract_json(ABI)}})])
        self.assertEqual(self.run_direct(engine, "--abi")[0], 0)
        self.assertEqual(sorted(p.name for p in self.out_dir.iterdir()), ["contracts_Token_sol_Token.abi"])

    def test_compiler_errors_fail_the_run(self) -> None:
        engine = FakeEngine([output_json(errors=[error_json("Expected ';'", error_type="ParserError")])])
        exit_code, _, err = self.run_direct(engine, "--bin")
        self.assertEqual(exit_code, 1)
        self.assertIn("ParserError: Expected ';'", err)

    def test_running_twice_gives_the_same_files(self) -> None:
        answer = output_json(contracts={"contracts/Token.sol": {"Token": contract_json(ABI, "6080")}})
        for _ in range(2):
            self.assertEqual(self.run_direct(FakeEngine([answer]), "--bin")[0], 0)
        self.assertEqual([p.name for p in self.out_dir.iterdir()], ["contracts_Token_sol_Token.bin"])
        self.assertEqual((self.out_dir / "contracts_Token_sol_Token.bin").read_text(), "6080")

    def test_verbose_prints_the_request(self) -> None:
        engine = FakeEngine([output_json(contracts={})])
        _, out, _ = self.run_direct(engine, "--bin", "--verbose")
        self.assertTrue(out.startswith(">>> Compiling:\n"))

    def test_no_output_from_compiler(self) -> None:
        with self.assertRaises(Util.NoCompilerOutputError):
            self.run_direct(FakeEngine([""]), "--bin")

    def test_missing_mode(self) -> None:
        with self.assertRaises(Util.SolcUserInputError):
            self.run_direct(FakeEngine([]))


class TestStandardJsonMode(unittest.TestCase):
    def run_standard_json(self, engine: FakeEngine, request: str, *flags: str) -> tuple:
        out = io.StringIO()
        with mock.patch("sys.stdin", io.StringIO(request)), redirect_stdout(out):
            exit_code = solcRun.run_solc(["--standard-json", *flags], engine)
        return exit_code, out.getvalue()

    def test_output_is_printed_as_is(self) -> None:
        request = json.dumps({"language": "Solidity", "sources": {"A.sol": {"content": "contract A {}"}}})
        answer = output_json(contracts={"A.sol": {"A": contract_json()}})
        engine = FakeEngine([answer])
        exit_code, out = self.run_standard_json(engine, request)
        self.assertEqual(exit_code, 0)
        self.assertEqual(out, answer + "\n")
        self.assertEqual(engine.inputs, [request])
        self.assertIsNone(engine.callbacks[0])

    def test_errors_still_exit_zero(self) -> None:
        engine = FakeEngine([output_json(errors=[error_json("broken")])])
        self.assertEqual(self.run_standard_json(engine, "{}")[0], 0)

    def test_unknown_smt_solver(self) -> None:
        with self.assertRaises(Util.SolcUserInputError):
            self.run_standard_json(FakeEngine([]), "{}", "--smt-solver", "yices")


class TestVersion(unittest.TestCase):
    def test_version(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out):
            self.assertEqual(solcRun.run_solc(["--version"], FakeEngine([], version="0.8.21+commit.d9974bed")), 0)
        self.assertEqual(out.getvalue(), "0.8.21+commit.d9974bed\n")


class TestEntryPoint(unittest.TestCase):
    def test_user_error_exits_with_one(self) -> None:
        err = io.StringIO()
        with mock.patch.object(sys, "argv", ["solcRun", "--bin", "--debug"]), redirect_stderr(err):
            with self.assertRaises(SystemExit) as cm:
                solcRun.entry_point()
        self.assertEqual(cm.exception.code, 1)

    def test_success_exits_with_zero(self) -> None:
        with mock.patch.object(sys, "argv", ["solcRun", "--version", "--debug"]), \
                mock.patch.object(solcRun, "CompilerEngineSol", lambda solc: FakeEngine([], version="0.8.21")), \
                redirect_stdout(io.StringIO()):
            with self.assertRaises(SystemExit) as cm:
                solcRun.entry_point()
        self.assertEqual(cm.exception.code, 0)

    def test_debug_shows_the_traceback(self) -> None:
        engine = FakeEngine([])
        engine.version = mock.MagicMock(side_effect=RuntimeError("kaboom"))  # type: ignore[method-assign]
        err = io.StringIO()
        with mock.patch.object(sys, "argv", ["solcRun", "--version", "--debug"]), \
                mock.patch.object(solcRun, "CompilerEngineSol", lambda solc: engine), redirect_stderr(err):
            with self.assertRaises(SystemExit) as cm:
                solcRun.entry_point()
        self.assertEqual(cm.exception.code, 1)
        self.assertIn("Traceback", err.getvalue())
        self.assertIn("RuntimeError: kaboom", err.getvalue())


if __name__ == '__main__':
    unittest.main()
