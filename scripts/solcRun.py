#!/usr/bin/env python3
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

import sys
import logging
from pathlib import Path
from typing import List, Optional
from rich.console import Console

scripts_dir_path = Path(__file__).parent.resolve()  # containing directory
sys.path.insert(0, str(scripts_dir_path))
from Shared import solcUtils as Util
from Shared.solcLogging import LoggingManager

import SolcDriver.solcContext as Ctx
from SolcDriver import solcBuild as Build
from SolcDriver.Compiler.CompilerEngine import CompilerEngine
from SolcDriver.Compiler.CompilerEngineSol import CompilerEngineSol
from SolcDriver.solcArtifacts import ArtifactWriter, collect_artifacts
from SolcDriver.solcDiagnostics import DiagnosticReporter
from SolcDriver.solcSmtSolver import get_solver

# logger for issues regarding the general run flow.
# Also serves as the default logger for errors originating from unexpected places.
run_logger = logging.getLogger("run")


def run_standard_json(context: Ctx.SolcContext, engine: CompilerEngine) -> int:
    """
    Reads a standard json request from stdin and prints the response to stdout.
    Whatever happens during compilation ends up inside the response, so this always succeeds.
    """
    solver = get_solver(context.smt_solver)
    input_text = sys.stdin.read()
    run_logger.debug(f"read {len(input_text)} characters from stdin")
    output = Build.compile_standard_json(input_text, engine, Build.get_callbacks(context), solver,
                                         context.pretty_json)
    print(output)
    return 0


def run_direct(context: Ctx.SolcContext, engine: CompilerEngine) -> int:
    """
    Compiles the files given on the command line, prints the diagnostics and writes the requested artifacts.
    @return: 1 if the compiler reported anything that is not a warning, 0 otherwise
    """
    Ctx.check_mode_of_operation(context)
    output = Build.compile_direct(context, engine)
    has_error = DiagnosticReporter().report(output)
    assert output is not None

    writer = ArtifactWriter(Path(context.output_dir))
    artifacts = collect_artifacts(output, Build.get_artifact_kinds(context), context.pretty_json)
    failures = writer.write_all(artifacts)
    for failure in failures:
        run_logger.error(str(failure))
    run_logger.debug(f"wrote {len(artifacts) - len(failures)} of {len(artifacts)} artifacts to {context.output_dir}")

    return 1 if has_error else 0


def run_solc(args: List[str], engine: Optional[CompilerEngine] = None) -> int:
    """
    The main function that is responsible for the general flow of the script.
    The general flow is:
    1. Parse program arguments
    2. Print the compiler version, or compile a standard json request, or compile files to artifacts
    @param engine: the compiler to use. If None, the solc executable from the arguments is run
    @return: the exit code
    """
    logging_manager = LoggingManager()
    try:
        context = Ctx.get_args(args)  # Parse arguments
        logging_manager.set_log_level_and_format(debug=context.debug,
                                                 debug_topics=context.debug_topics,
                                                 show_debug_topics=context.show_debug_topics)
        if engine is None:
            engine = CompilerEngineSol(context.solc)

        if context.version:
            print(engine.version())
            return 0
        if context.standard_json:
            return run_standard_json(context, engine)
        return run_direct(context, engine)
    except Exception:
        run_logger.debug("run failed", exc_info=True)
        raise
    finally:
        logging_manager.tear_down()


def entry_point() -> None:
    """
    This function is the entry point of the solcRun console script, as well as this script.
    Every failure of the run is handled here, and turned into a message and an exit code.
    """
    args = sys.argv[1:]
    # If we are not in debug mode, we do not want to print the traceback in case of exceptions.
    if '--debug' not in args:
        sys.tracebacklimit = 0

    try:
        sys.exit(run_solc(args))
    except KeyboardInterrupt:
        Console(stderr=True).print("[bold red]\nInterrupted by user")
        sys.exit(1)
    except Util.SolcUserInputError as e:
        if e.more_info:
            print(f"\n{e.more_info.strip()}", file=sys.stderr)
        Util.print_fatal_message(str(e))
        sys.exit(1)
    except Exception as e:
        Util.print_fatal_message(str(e) or repr(e))
        sys.exit(1)


if __name__ == '__main__':
    entry_point()
