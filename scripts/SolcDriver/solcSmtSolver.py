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
import subprocess
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from Shared import solcUtils as Util

# logger for the SMT solver processes
smt_logger = logging.getLogger("smt")

TIMEOUT_SECONDS = 10
# a solver that timed out or failed may still have printed an answer
ANSWER_PREFIXES = ("sat", "unsat", "unknown")


@dataclass(frozen=True)
class SmtSolver:
    name: str
    command: str
    params: List[str]

    def cmd(self, query_file: Path) -> List[str]:
        return [self.command] + self.params + [str(query_file)]


POTENTIAL_SOLVERS = [
    SmtSolver("z3", "z3", ["-smt2", "rlimit=20000000", "rewriter.pull_cheap_ite=true",
                           "fp.spacer.q3.use_qgen=true", "fp.spacer.mbqi=false", "fp.spacer.ground_pobs=false"]),
    SmtSolver("Eldarica", "eld", ["-horn", f"-t:{TIMEOUT_SECONDS}", "-hsmt"]),
    SmtSolver("cvc4", "cvc4", ["--lang=smt2", f"--tlimit={TIMEOUT_SECONDS * 1000}"]),
    SmtSolver("cvc5", "cvc5", ["--lang=smt2", f"--tlimit={TIMEOUT_SECONDS * 1000}"]),
]
SOLVER_COMMANDS = [solver.command for solver in POTENTIAL_SOLVERS]


def available_solvers() -> List[SmtSolver]:
    return [solver for solver in POTENTIAL_SOLVERS if Util.which(solver.command)]


def get_solver(command: Optional[str]) -> Optional[SmtSolver]:
    """
    @return the solver run by [command], or None to pick the first installed solver when a query comes
    """
    if command is None:
        return None
    for solver in POTENTIAL_SOLVERS:
        if solver.command == command:
            return solver
    raise Util.SolcUserInputError(f"unknown SMT solver {command}, expected one of {', '.join(SOLVER_COMMANDS)}")


def as_text(output: Union[str, bytes, None]) -> str:
    if output is None:
        return ""
    if isinstance(output, bytes):
        return output.decode("utf-8", errors="replace")
    return output


def solve(query: str, solver: Optional[SmtSolver] = None) -> str:
    """
    Answers one SMT-LIB2 query
    @param query: the query text
    @param solver: the solver to run. If None, the first installed one is used
    @return: whatever the solver printed
    @raises SmtSolverError if no solver is installed, or the solver failed without an answer
    """
    if solver is None:
        solvers = available_solvers()
        if not solvers:
            raise Util.SmtSolverError("No SMT solver available. Assertion checking will not be performed.")
        solver = solvers[0]

    with tempfile.NamedTemporaryFile("w", suffix=".smt2", delete=False, encoding="utf-8") as query_file:
        query_file.write(query)
    query_path = Path(query_file.name)
    cmd = solver.cmd(query_path)
    smt_logger.debug(f"Running cmd {' '.join(cmd)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, encoding="utf-8", timeout=TIMEOUT_SECONDS)
        solver_output = result.stdout
        if result.returncode and not solver_output.startswith(ANSWER_PREFIXES):
            raise Util.SmtSolverError(f"Failed to solve SMT query. {solver.name} exited with code "
                                      f"{result.returncode}: {result.stderr.strip()}")
    except subprocess.TimeoutExpired as e:
        solver_output = as_text(e.stdout)
        if not solver_output.startswith(ANSWER_PREFIXES):
            raise Util.SmtSolverError(f"Failed to solve SMT query. {solver.name} timed out after "
                                      f"{TIMEOUT_SECONDS} seconds") from e
    except OSError as e:
        raise Util.SmtSolverError(f"Failed to solve SMT query. Cannot run {solver.command}: {e}") from e
    finally:
        query_path.unlink(missing_ok=True)

    smt_logger.debug(f"{solver.name} answered {solver_output.splitlines()[:1]}")
    return solver_output
