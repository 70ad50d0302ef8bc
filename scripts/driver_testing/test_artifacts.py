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
from pathlib import Path

scripts_dir_path = Path(__file__).parent.parent.resolve()  # the scripts directory
sys.path.insert(0, str(scripts_dir_path))

from Shared import solcUtils as Util
from SolcDriver.solcArtifacts import ArtifactWriter, artifact_file_name_key, collect_artifacts
from SolcDriver.solcDataClasses import Artifact, ArtifactKind, CompilationOutput
from SolcDriver.solcDiagnostics import DiagnosticReporter
from driverTestUtils import contract_json, error_json, output_json, write_file

ABI = [{"inputs": [], "name": "f", "outputs": [], "stateMutability": "nonpayable", "type": "function"}]


def parse(output: str) -> CompilationOutput:
    parsed = CompilationOutput.from_json(output)
    assert parsed is not None
    return parsed


class TestArtifactNames(unittest.TestCase):
    def test_separators_become_underscores(self) -> None:
        self.assertEqual(artifact_file_name_key("a/b.sol", "Foo"), "a_b_sol_Foo")
        self.assertEqual(artifact_file_name_key("C:\\x\\y.sol", "Bar"), "C__x_y_sol_Bar")
        self.assertEqual(artifact_file_name_key("/abs/T.sol", "T"), "_abs_T_sol_T")

    def test_collected_per_requested_kind(self) -> None:
        output = parse(output_json(contracts={"a/b.sol": {"Foo": contract_json(ABI, "6080aa"),
                                                          "Bar": contract_json([], "")}}))
        artifacts = collect_artifacts(output, {ArtifactKind.BIN, ArtifactKind.ABI})
        self.assertEqual([a.file_name for a in artifacts],
                         ["a_b_sol_Foo.bin", "a_b_sol_Foo.abi", "a_b_sol_Bar.bin", "a_b_sol_Bar.abi"])
        self.assertEqual(artifacts[0].content, "6080aa")
        self.assertEqual(json.loads(artifacts[1].content), ABI)
        self.assertNotIn(" ", artifacts[1].content)
        self.assertEqual(artifacts[2].content, "")

        only_abi = collect_artifacts(output, {ArtifactKind.ABI}, pretty_json=True)
        self.assertEqual([a.kind for a in only_abi], [ArtifactKind.ABI, ArtifactKind.ABI])
        self.assertIn("\n    ", only_abi[0].content)


class TestArtifactWriter(unittest.TestCase):
    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_output_dir_is_created(self) -> None:
        out = self.root / "build" / "nested"
        failures = ArtifactWriter(out).write_all([Artifact("A_sol_A", ArtifactKind.BIN, "6080")])
        self.assertEqual(failures, [])
        self.assertEqual((out / "A_sol_A.bin").read_text(), "6080")

    def test_writing_twice_overwrites(self) -> None:
        for content in ("old", "new"):
            self.assertEqual(ArtifactWriter(self.root).write_all([Artifact("A_sol_A", ArtifactKind.BIN, content)]), [])
        self.assertEqual((self.root / "A_sol_A.bin").read_text(), "new")

    def test_failed_write_does_not_stop_the_others(self) -> None:
        (self.root / "A_sol_A.bin").mkdir()
        failures = ArtifactWriter(self.root).write_all([Artifact("A_sol_A", ArtifactKind.BIN, "6080"),
                                                        Artifact("A_sol_A", ArtifactKind.ABI, "[]")])
        self.assertEqual([f.path for f in failures], [str(self.root / "A_sol_A.bin")])
        self.assertTrue(str(failures[0]).startswith(f"Failed to write {self.root / 'A_sol_A.bin'}: "))
        self.assertEqual((self.root / "A_sol_A.abi").read_text(), "[]")

    def test_output_dir_that_is_a_file(self) -> None:
        blocker = write_file(self.root / "out")
        with self.assertRaises(Util.SolcUserInputError):
            ArtifactWriter(blocker / "sub").write_all([])


class TestDiagnosticReporter(unittest.TestCase):
    def report(self, output: str) -> tuple:
        out, err = io.StringIO(), io.StringIO()
        has_error = DiagnosticReporter(out, err).report(parse(output))
        return has_error, out.getvalue(), err.getvalue()

    def test_warnings_go_to_stdout(self) -> None:
        has_error, out, err = self.report(output_json(errors=[error_json("unused", "warning", "Warning")]))
        self.assertFalse(has_error)
        self.assertEqual(out, "Warning: unused\n\n")
        self.assertEqual(err, "")

    def test_errors_go_to_stderr(self) -> None:
        has_error, out, err = self.report(output_json(errors=[error_json("bad type"),
                                                              error_json("unused", "warning", "Warning")]))
        self.assertTrue(has_error)
        self.assertEqual(err, "TypeError: bad type\n\n")
        self.assertEqual(out, "Warning: unused\n\n")

    def test_info_fails_the_run(self) -> None:
        has_error, _, err = self.report(output_json(errors=[error_json("just so you know", "info", "Info")]))
        self.assertTrue(has_error)
        self.assertIn("just so you know", err)

    def test_no_diagnostics(self) -> None:
        self.assertEqual(self.report(output_json(contracts={})), (False, "", ""))

    def test_no_output_at_all(self) -> None:
        self.assertIsNone(CompilationOutput.from_json(""))
        self.assertIsNone(CompilationOutput.from_json("null"))
        with self.assertRaises(Util.NoCompilerOutputError):
            DiagnosticReporter().report(None)

    def test_output_that_is_not_an_object(self) -> None:
        with self.assertRaises(Util.CompilerEngineError):
            CompilationOutput.from_json("[1, 2]")


if __name__ == '__main__':
    unittest.main()
