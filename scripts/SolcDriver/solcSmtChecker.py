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
from typing import Any, Callable, Dict, Optional

from SolcDriver.solcSmtSolver import SmtSolver
from Shared import solcUtils as Util

smt_logger = logging.getLogger("smt")

AUX_INPUT_REQUESTED = "auxiliaryInputRequested"
AUX_INPUT = "auxiliaryInput"
SMTLIB2_QUERIES = "smtlib2queries"
SMTLIB2_RESPONSES = "smtlib2responses"

SolverFunction = Callable[[str, Optional[SmtSolver]], str]


def get_smt_queries(output_json: Any) -> Dict[str, str]:
    """
    @return: the queries the compiler asked to be answered, keyed by their hash. Empty if there are none
    """
    if not isinstance(output_json, dict):
        raise Util.CompilerEngineError(f"expected the compiler output to be a JSON object, "
                                       f"got {type(output_json).__name__}")
    aux_input_requested = output_json.get(AUX_INPUT_REQUESTED)
    if not aux_input_requested:
        return {}
    queries = aux_input_requested.get(SMTLIB2_QUERIES)
    return queries or {}


def handle_smt_queries(input_json: Any, output_json: Any, solver_function: SolverFunction,
                       solver: Optional[SmtSolver] = None) -> Optional[Dict[str, Any]]:
    """
    Answers the SMT queries embedded in a compiler output.
    @param input_json: the request that produced [output_json]. Updated in place when there are queries
    @param output_json: the compiler output
    @param solver_function: answers a single query
    @param solver: passed on to [solver_function]
    @return: the request with every answer in auxiliaryInput.smtlib2responses, or None if nothing was asked.
             The responses replace any that were in the request before; the compiler asks again for everything it
             still needs.
    """
    queries = get_smt_queries(output_json)
    if not queries:
        return None
    if not isinstance(input_json, dict):
        raise Util.CompilerEngineError(f"expected the compiler input to be a JSON object, "
                                       f"got {type(input_json).__name__}")

    smt_logger.debug(f"answering {len(queries)} SMT queries")
    responses = {query_hash: solver_function(query, solver) for query_hash, query in queries.items()}
    input_json[AUX_INPUT] = {SMTLIB2_RESPONSES: responses}
    return input_json
