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

import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

scripts_dir_path = Path(__file__).parent.parent.resolve()  # the scripts directory
sys.path.insert(0, str(scripts_dir_path))

from SolcDriver.Compiler.CompilerEngine import CompilerEngine, CompilerCallbacks

SOURCE_NOT_FOUND = "6275"

# either a canned output, or a function from the input document to the output
FakeAnswer = Union[str, Callable[[str], str]]


class FakeEngine(CompilerEngine):
    """
    A compiler engine that answers from a script instead of running solc. Every call is recorded.
    """

    def __init__(self, answers: List[FakeAnswer], version: str = "0.8.21+commit.d9974bed.Linux.g++") -> None:
        self.answers = list(answers)
        self.inputs: List[str] = []
        self.callbacks: List[Optional[CompilerCallbacks]] = []
        self._version = version

    def version(self) -> str:
        return self._version

    def compile(self, input_json: str, callbacks: Optional[CompilerCallbacks] = None) -> str:
        self.inputs.append(input_json)
        self.callbacks.append(callbacks)
        if not self.answers:
            raise AssertionError(f"unexpected compile call number {len(self.inputs)}")
        answer = self.answers.pop(0)
        if callable(answer):
            return answer(input_json)
        return answer


def contract_json(abi: Any = None, bytecode: str = "6080") -> Dict[str, Any]:
    return {"abi": abi if abi is not None else [], "evm": {"bytecode": {"object": bytecode}}}


def error_json(message: str, severity: str = "error", error_type: str = "TypeError",
               error_code: Optional[str] = None) -> Dict[str, Any]:
    error = {
        "component": "general",
        "formattedMessage": f"{error_type}: {message}\n",
        "message": message,
        "severity": severity,
        "type": error_type
    }
    if error_code:
        error["errorCode"] = error_code
    return error


def output_json(contracts: Optional[Dict[str, Dict[str, Any]]] = None, errors: Optional[List[Dict[str, Any]]] = None,
                queries: Optional[Dict[str, str]] = None) -> str:
    output: Dict[str, Any] = {"sources": {}}
    if contracts is not None:
        output["contracts"] = contracts
    if errors is not None:
        output["errors"] = errors
    if queries is not None:
        output["auxiliaryInputRequested"] = {"smtlib2queries": queries}
    return json.dumps(output)


def write_file(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path
