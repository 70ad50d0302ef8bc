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

import logging
import re
from pathlib import Path
from typing import AbstractSet, List

from SolcDriver.solcDataClasses import Artifact, ArtifactKind, ArtifactWriteFailure, CompilationOutput
from Shared import solcUtils as Util

io_logger = logging.getLogger("file")

UNSAFE_FILE_NAME_CHARS_RE = re.compile(r"[:./\\]")


def artifact_file_name_key(file_key: str, contract_name: str) -> str:
    """
    A flat, filesystem safe name for a contract, e.g. a/b.sol + Foo -> a_b_sol_Foo.
    Two contracts may end up with the same name (a/b.sol and a_b.sol for instance), the later one wins.
    """
    return UNSAFE_FILE_NAME_CHARS_RE.sub("_", f"{file_key}:{contract_name}")


def collect_artifacts(output: CompilationOutput, kinds: AbstractSet[ArtifactKind],
                      pretty_json: bool = False) -> List[Artifact]:
    artifacts = []
    for file_key, contract in output.contract_items():
        key = artifact_file_name_key(file_key, contract.name)
        if ArtifactKind.BIN in kinds:
            artifacts.append(Artifact(key, ArtifactKind.BIN, contract.bytecode))
        if ArtifactKind.ABI in kinds:
            artifacts.append(Artifact(key, ArtifactKind.ABI, Util.to_formatted_json(contract.abi, pretty_json)))
    return artifacts


class ArtifactWriter:
    """
    Writes artifacts to one output directory. A failed write does not stop the others; failures are kept in
    [failures] for the caller to report.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir
        self.failures: List[ArtifactWriteFailure] = []

    def ensure_output_dir(self) -> None:
        try:
            Util.safe_create_dir(self.output_dir)
        except OSError as e:
            raise Util.SolcUserInputError(f"Failed to create output directory {self.output_dir}: {e}") from e

    def write(self, artifact: Artifact) -> None:
        path = self.output_dir / artifact.file_name
        try:
            path.write_text(artifact.content, encoding="utf-8")
            io_logger.debug(f"wrote {path}")
        except OSError as e:
            self.failures.append(ArtifactWriteFailure(str(path), str(e)))

    def write_all(self, artifacts: List[Artifact]) -> List[ArtifactWriteFailure]:
        self.ensure_output_dir()
        for artifact in artifacts:
            self.write(artifact)
        return self.failures
