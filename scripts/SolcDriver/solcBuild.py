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
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Set, Tuple

from SolcDriver.Compiler.CompilerEngine import CompilerEngine, CompilerCallbacks
from SolcDriver.solcCompilerParameters import SolcParameters
from SolcDriver.solcContext import SolcContext
from SolcDriver.solcDataClasses import ArtifactKind, CompilationOutput, CompilationRequest, Diagnostic, \
    SourceDescriptor, ERRORS, WARNING_SEVERITY, ERROR_SEVERITY
from SolcDriver.solcImportResolver import ImportResolver
from SolcDriver.solcPathNormalizer import strip_base_path
from SolcDriver.solcSmtChecker import handle_smt_queries
from SolcDriver import solcSmtSolver as SmtSolver
from Shared import solcUtils as Util

# logger for running the Solidity compiler and reporting any errors it emits
compiler_logger = logging.getLogger("compiler")
# logger for the verification query round trip
smt_logger = logging.getLogger("smt")

GENERAL_COMPONENT = "general"


def get_callbacks(context: SolcContext) -> Optional[CompilerCallbacks]:
    """
    Imports are resolved from the filesystem unless this is a standard json run without a base path. In that case the
    request has to carry every source it needs.
    """
    if context.base_path or not context.standard_json:
        return CompilerCallbacks(import_callback=ImportResolver(context.base_path, context.include_path))
    compiler_logger.debug("import resolution is disabled")
    return None


def collect_sources(files: Sequence[str], base_path: Optional[str] = None,
                    include_paths: Optional[Sequence[str]] = None) -> Tuple[SourceDescriptor, ...]:
    """
    Reads every file given on the command line and keys it by its source unit name.
    A file given twice (under the same key) is read twice, and the later read wins.
    """
    sources: Dict[str, SourceDescriptor] = {}
    for file in files:
        try:
            content = Path(file).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise Util.SolcUserInputError(f"Error reading {file}: {e}") from None
        key = strip_base_path(file, base_path, include_paths)
        compiler_logger.debug(f"source {file} is keyed {key}")
        sources[key] = SourceDescriptor(key, content)
    return tuple(sources.values())


def build_request(context: SolcContext) -> CompilationRequest:
    optimizer_runs = context.optimize_runs
    if optimizer_runs is None and context.optimize:
        optimizer_runs = Util.DEFAULT_OPTIMIZER_RUNS
    return CompilationRequest(sources=collect_sources(context.files, context.base_path, context.include_path),
                              optimizer=SolcParameters(bool(context.optimize), optimizer_runs))


def compile_direct(context: SolcContext, engine: CompilerEngine) -> Optional[CompilationOutput]:
    """
    Compiles the files given on the command line, requesting the ABI and bytecode of every contract
    @return: the parsed compiler output, or None if the compiler returned nothing
    """
    request = build_request(context)
    if context.verbose:
        print(f">>> Compiling:{Util.NEW_LINE}{request.to_json(pretty=True)}{Util.NEW_LINE}")
    output = engine.compile(request.to_json(), get_callbacks(context))
    try:
        return CompilationOutput.from_json(output)
    except json.JSONDecodeError as e:
        raise Util.CompilerEngineError(f"Failed to parse the compiler output: {e}") from e


def general_diagnostic(message: str, severity: str = WARNING_SEVERITY) -> Diagnostic:
    return Diagnostic(severity=severity, message=message, formatted_message=message, component=GENERAL_COMPONENT,
                      type="Warning" if severity == WARNING_SEVERITY else "CompilerError")


def describe_failure(e: Exception) -> str:
    return str(e) or type(e).__name__


def append_general_warning(output: str, message: str) -> str:
    """
    @return: [output] with one more "general" warning at the end of its error list
    """
    try:
        output_json: Any = json.loads(output)
    except json.JSONDecodeError:
        output_json = {}
    if not isinstance(output_json, dict):
        output_json = {}
    if not isinstance(output_json.get(ERRORS), list):
        output_json[ERRORS] = []
    output_json[ERRORS].append(general_diagnostic(message).as_dict())
    return Util.to_formatted_json(output_json)


def run_smt_round_trip(input_text: str, output: str, engine: CompilerEngine,
                       callbacks: Optional[CompilerCallbacks],
                       solver: Optional[SmtSolver.SmtSolver] = None) -> str:
    """
    If the first pass asked for SMT queries to be answered, answers them and compiles again
    @return: the output of the second pass, or [output] itself if nothing was asked
    """
    input_json = json.loads(input_text)
    output_json = json.loads(output)
    answered_input = handle_smt_queries(input_json, output_json, SmtSolver.solve, solver)
    if answered_input is None:
        return output
    smt_logger.debug("compiling again with the SMT responses")
    return engine.compile(Util.to_formatted_json(answered_input), callbacks)


def compile_standard_json(input_text: str, engine: CompilerEngine, callbacks: Optional[CompilerCallbacks],
                          solver: Optional[SmtSolver.SmtSolver] = None, pretty_json: bool = False) -> str:
    """
    Compiles a standard json request. Never fails: problems are reported inside the returned document.
    @return: the output document to print
    """
    try:
        output = engine.compile(input_text, callbacks)
    except Util.CompilerEngineError as e:
        compiler_logger.debug(f"the compiler failed on the first pass: {e}")
        failure = general_diagnostic(describe_failure(e), severity=ERROR_SEVERITY)
        return Util.to_formatted_json({ERRORS: [failure.as_dict()]}, pretty_json)

    try:
        output = run_smt_round_trip(input_text, output, engine, callbacks, solver)
    except Exception as e:
        smt_logger.debug(f"the verification query round trip failed: {e!r}")
        output = append_general_warning(output, describe_failure(e))

    if pretty_json:
        try:
            output = Util.to_formatted_json(json.loads(output), pretty=True)
        except json.JSONDecodeError:
            compiler_logger.debug("the compiler output is not JSON, printing it as is")
    return output


def get_artifact_kinds(context: SolcContext) -> Set[ArtifactKind]:
    kinds = set()
    if context.bin:
        kinds.add(ArtifactKind.BIN)
    if context.abi:
        kinds.add(ArtifactKind.ABI)
    return kinds
