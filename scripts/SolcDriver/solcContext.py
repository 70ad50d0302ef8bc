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

import argparse
import logging
import os
import sys
from types import SimpleNamespace
from typing import Any, List, NoReturn, Optional

from rich.console import Console

from Shared import solcUtils as Util
from Shared import solcValidateFuncs as Vf
from Shared.solcLogging import ALL_TOPICS
from SolcDriver.solcConfigIO import read_from_conf_file

context_logger = logging.getLogger("context")


class SolcContext(SimpleNamespace):
    pass


class SolcArgumentParser(argparse.ArgumentParser):
    """
    Reports bad arguments as SolcUserInputError, so they exit like every other input error
    """

    def error(self, message: str) -> NoReturn:
        prefix = 'unrecognized arguments: '
        is_single_dash_flag = False

        if message.startswith(prefix):
            flag = message[len(prefix):].split()[0]
            if len(flag) > 2 and flag[0] == '-' and flag[1] != '-':
                is_single_dash_flag = True
        self.print_usage(sys.stderr)
        if is_single_dash_flag:
            Console(stderr=True).print(f"{Util.NEW_LINE}[bold red]Please remember, long CLI flags should be "
                                       f"preceded with double dashes!{Util.NEW_LINE}")
        raise Util.SolcUserInputError(message)


def get_argparser() -> argparse.ArgumentParser:
    def formatter(prog: Any) -> argparse.HelpFormatter:
        return argparse.HelpFormatter(prog, max_help_position=40, width=120)

    parser = SolcArgumentParser(prog="solcRun", allow_abbrev=False, formatter_class=formatter,
                                description="Compiles Solidity files to bytecode and ABI, or runs a standard json "
                                            "request through the Solidity compiler")
    parser.add_argument('files', nargs='*', help='Solidity source files to compile')
    parser.add_argument('--version', action='store_true', help='Show the compiler version and exit')
    parser.add_argument('--optimize', action='store_true', help='Enable bytecode optimizer')
    parser.add_argument('--optimize-runs', type=Vf.validate_non_negative_integer,
                        help='The number of runs to optimize for [default: '
                             f'{Util.DEFAULT_OPTIMIZER_RUNS} when --optimize is set]')
    parser.add_argument('--bin', action='store_true', help='Binary of the contracts in hex')
    parser.add_argument('--abi', action='store_true', help='ABI of the contracts')
    parser.add_argument('--standard-json', action='store_true',
                        help='Turn on Standard JSON Input / Output mode')
    parser.add_argument('--base-path', help='Root of the project source tree. The import callback will attempt to '
                                            'interpret all import paths as relative to this directory')
    parser.add_argument('--include-path', action='append',
                        help='Extra source directory searched after the base path. Can be used multiple times. '
                             'Requires --base-path')
    parser.add_argument('-o', '--output-dir', help=f'Output directory for the contracts [default: '
                                                   f'{Util.DEFAULT_OUTPUT_DIR}]')
    parser.add_argument('-p', '--pretty-json', action='store_true', help='Pretty-print all JSON output')
    parser.add_argument('-v', '--verbose', action='store_true', help='More detailed console output')
    parser.add_argument('--solc', help=f'The solc executable to run [default: ${Util.ENVVAR_SOLC} or '
                                       f'{Util.DEFAULT_SOLC_COMPILER}]')
    parser.add_argument('--smt-solver', help='The SMT solver answering verification queries '
                                             '[default: the first installed of z3, eld, cvc4, cvc5]')
    parser.add_argument('--conf', type=Vf.validate_conf_file,
                        help='Read options from a .conf file. Command line options take precedence')
    parser.add_argument('--debug', action='store_true', help='Log debug messages')
    parser.add_argument('--debug-topics', nargs='+', help=f'Only log debug messages of these topics: '
                                                          f'{", ".join(ALL_TOPICS)}')
    parser.add_argument('--show-debug-topics', action='store_true', help='Show the topic of every log message')
    return parser


def get_args(args_list: Optional[List[str]] = None) -> SolcContext:
    """
    Compiles a SolcContext from the given list of command line arguments, merged with the .conf file if one was
    given, and validated.
    """

    if args_list is None:
        args_list = sys.argv[1:]

    parser = get_argparser()
    args = parser.parse_args(args_list)
    context = SolcContext(**vars(args))
    context.args_list = args_list

    if context.conf:
        read_from_conf_file(context)

    validate_context(context)
    set_defaults(context)

    context_logger.debug("parsed args successfully.")
    context_logger.debug(f"args= {context}")
    return context


def validate_context(context: SolcContext) -> None:
    if context.optimize_runs is not None:
        context.optimize_runs = Vf.validate_non_negative_integer(context.optimize_runs)
    if context.include_path:
        context.include_path = Vf.validate_string_list(context.include_path, "include_path")
        if not context.base_path:
            raise Util.SolcUserInputError("--include-path option requires a non-empty base path")
        for include_path in context.include_path:
            Vf.validate_dir(include_path)
    if context.base_path:
        Vf.validate_dir(context.base_path)
    if context.output_dir:
        Vf.validate_output_dir(context.output_dir)
    if context.files:
        context.files = Vf.validate_string_list(context.files, "files")


def set_defaults(context: SolcContext) -> None:
    # applied after the .conf file was read
    context.files = context.files or []
    context.output_dir = context.output_dir or Util.DEFAULT_OUTPUT_DIR
    context.solc = context.solc or os.environ.get(Util.ENVVAR_SOLC) or Util.DEFAULT_SOLC_COMPILER


def check_mode_of_operation(context: SolcContext) -> None:
    """
    Checks the direct mode (non standard json) has something to compile and something to write
    """
    if not context.files:
        raise Util.SolcUserInputError("Must provide a file")
    if not (context.bin or context.abi):
        raise Util.SolcUserInputError("Invalid option selected, must specify either --bin or --abi")
