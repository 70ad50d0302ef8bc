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

import json5
import logging
from pathlib import Path
from types import SimpleNamespace
from typing import Dict, Any

from Shared import solcUtils as Util

"""
This file is responsible for reading configuration files.
A configuration file is a JSON5 object whose keys are option names as they appear in the context (underscores,
not dashes), e.g. {"files": ["A.sol"], "bin": true, "base_path": "contracts"}
"""

# logger for issues regarding the general run flow.
run_logger = logging.getLogger("run")

CONF_KEYS = ["files", "optimize", "optimize_runs", "bin", "abi", "standard_json", "base_path", "include_path",
             "output_dir", "pretty_json", "verbose", "solc", "smt_solver"]


def read_from_conf_file(context: SimpleNamespace) -> None:
    """
    Read data from the configuration file and add each key to the context namespace if the key was not set in the
    command line (command line shadows conf data).
    @param context: A namespace containing options from the command line
    """
    conf_file_path = Path(context.conf)

    try:
        with conf_file_path.open() as conf_file:
            configuration = json5.load(conf_file, allow_duplicate_keys=False)
    except ValueError as e:
        raise Util.SolcUserInputError(f"Error when reading {conf_file_path}: {e}") from None

    if not isinstance(configuration, dict):
        raise Util.SolcUserInputError(f"Error when reading {conf_file_path}: expected a JSON object")
    try:
        check_conf_content(configuration, context)
    except Util.SolcUserInputError as e:
        raise Util.SolcUserInputError(f"Error when reading {conf_file_path}: {str(e)}", e.more_info) from None


def check_conf_content(conf: Dict[str, Any], context: SimpleNamespace) -> None:
    """
    validating content read from the conf file
    Note: a command line definition trumps the definition in the file.
    @param conf: A json object in the conf file format
    @param context: A namespace containing options from the command line, if any
    """
    for option in conf:
        if option not in CONF_KEYS:
            raise Util.SolcUserInputError(f"{option} appears in the conf file but is not a known attribute. ",
                                          more_info=f"Known attributes: {', '.join(CONF_KEYS)}")
        val = getattr(context, option, None)
        if val is None or val is False or val == []:
            setattr(context, option, conf[option])
        elif val != conf[option]:
            cli_val = ' '.join(map(str, val)) if isinstance(val, list) else str(val)
            conf_val = ' '.join(map(str, conf[option])) if isinstance(conf[option], list) else str(conf[option])
            run_logger.warning(f"Note: attribute {option} value in CLI ({cli_val}) overrides value stored in conf"
                               f" file ({conf_val})")
