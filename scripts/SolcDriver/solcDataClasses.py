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
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from SolcDriver.solcCompilerParameters import SolcParameters
from Shared import solcUtils as Util

CONTRACTS = "contracts"
ERRORS = "errors"
SOURCES = "sources"
SETTINGS = "settings"
LANGUAGE = "language"

WARNING_SEVERITY = "warning"
ERROR_SEVERITY = "error"

# every contract of every file, ABI and creation bytecode only
DEFAULT_OUTPUT_SELECTION: Dict[str, Dict[str, List[str]]] = {"*": {"*": ["abi", "evm.bytecode"]}}


@dataclass(frozen=True)
class SourceDescriptor:
    path: str
    content: str

    def as_dict(self) -> Dict[str, Any]:
        return {"content": self.content}


@dataclass(frozen=True)
class CompilationRequest:
    """
    A standard json input document. Built once per compile invocation and never changed afterwards.
    """
    sources: Tuple[SourceDescriptor, ...]
    optimizer: SolcParameters
    language: str = Util.SOLIDITY_LANGUAGE

    def as_dict(self) -> Dict[str, Any]:
        return {
            LANGUAGE: self.language,
            SETTINGS: {
                "optimizer": self.optimizer.as_dict(),
                "outputSelection": DEFAULT_OUTPUT_SELECTION
            },
            SOURCES: {source.path: source.as_dict() for source in self.sources}
        }

    def to_json(self, pretty: bool = False) -> str:
        return Util.to_formatted_json(self.as_dict(), pretty)


@dataclass(frozen=True)
class Diagnostic:
    severity: str
    message: str
    formatted_message: str
    component: str
    type: str = ""

    @property
    def is_warning(self) -> bool:
        return self.severity == WARNING_SEVERITY

    @staticmethod
    def from_dict(error: Dict[str, Any]) -> "Diagnostic":
        message = error.get("message", "")
        return Diagnostic(severity=error.get("severity", ERROR_SEVERITY),
                          message=message,
                          formatted_message=error.get("formattedMessage", message),
                          component=error.get("component", ""),
                          type=error.get("type", ""))

    def as_dict(self) -> Dict[str, Any]:
        return {
            "component": self.component,
            "formattedMessage": self.formatted_message,
            "message": self.message,
            "severity": self.severity,
            "type": self.type
        }


@dataclass(frozen=True)
class ContractOutput:
    name: str
    abi: Any
    bytecode: str

    @staticmethod
    def from_dict(name: str, contract: Dict[str, Any]) -> "ContractOutput":
        bytecode = contract.get("evm", {}).get("bytecode", {}).get("object", "")
        return ContractOutput(name, contract.get("abi", []), bytecode)


@dataclass(frozen=True)
class CompilationOutput:
    """
    A parsed standard json output document.
    [errors] is None when the compiler reported no diagnostics at all.
    [contracts] keeps the order in which files and contracts appear in the document.
    """
    errors: Optional[Tuple[Diagnostic, ...]]
    contracts: Dict[str, Dict[str, ContractOutput]] = field(default_factory=dict)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "CompilationOutput":
        errors = None
        if data.get(ERRORS) is not None:
            errors = tuple(Diagnostic.from_dict(e) for e in data[ERRORS])
        contracts: Dict[str, Dict[str, ContractOutput]] = {}
        for file_key, file_contracts in (data.get(CONTRACTS) or {}).items():
            contracts[file_key] = {name: ContractOutput.from_dict(name, contract)
                                   for name, contract in file_contracts.items()}
        return CompilationOutput(errors, contracts)

    @staticmethod
    def from_json(output: Optional[str]) -> Optional["CompilationOutput"]:
        """
        @return None if the compiler produced nothing, or the document is JSON null
        """
        if not output or not output.strip():
            return None
        data = json.loads(output)
        if data is None:
            return None
        if not isinstance(data, dict):
            raise Util.CompilerEngineError(f"unexpected compiler output, expected a JSON object: {output[:200]}")
        return CompilationOutput.from_dict(data)

    def diagnostics(self) -> Tuple[Diagnostic, ...]:
        return self.errors or ()

    def contract_items(self) -> List[Tuple[str, ContractOutput]]:
        return [(file_key, contract) for file_key, file_contracts in self.contracts.items()
                for contract in file_contracts.values()]


class ArtifactKind(Enum):
    BIN = "bin"
    ABI = "abi"


@dataclass(frozen=True)
class Artifact:
    file_name_key: str
    kind: ArtifactKind
    content: str

    @property
    def file_name(self) -> str:
        return f"{self.file_name_key}.{self.kind.value}"


@dataclass(frozen=True)
class ArtifactWriteFailure:
    path: str
    reason: str

    def __str__(self) -> str:
        return f"Failed to write {self.path}: {self.reason}"
