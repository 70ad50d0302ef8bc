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
import os
import platform
import shutil
import logging
from pathlib import Path
from typing import Any, Optional, Union

from rich.console import Console
from rich.markup import escape

io_logger = logging.getLogger("file")

# bash colors
BASH_ORANGE_COLOR = "\033[33m"
BASH_END_COLOR = "\033[0m"
BASH_RED_COLOR = "\033[31m"

DEFAULT_SOLC_COMPILER = "solc"
ENVVAR_SOLC = "SOLC_DRIVER_SOLC"
SOLIDITY_LANGUAGE = "Solidity"
DEFAULT_OUTPUT_DIR = "."
DEFAULT_OPTIMIZER_RUNS = 200
CONF_EXT = ".conf"
NEW_LINE = '\n'  # for new lines in f strings


class SolcUserInputError(Exception):
    def __init__(self, message: str, more_info: str = '') -> None:
        super().__init__(message)
        self.more_info = more_info


class CompilerEngineError(Exception):
    """
    The compiler engine could not be run, or did not answer with something we can hand back
    """
    pass


class NoCompilerOutputError(Exception):
    pass


class SmtSolverError(Exception):
    pass


def __colored_text(txt: str, color: str) -> str:
    return color + txt + BASH_END_COLOR


def orange_text(txt: str) -> str:
    return __colored_text(txt, BASH_ORANGE_COLOR)


def red_text(txt: str) -> str:
    return __colored_text(txt, BASH_RED_COLOR)


def print_fatal_message(txt: str) -> None:
    Console(stderr=True).print(f"[bold red]{escape(txt)}")


def is_windows() -> bool:
    return platform.system() == 'Windows'


def as_posix(path: str) -> str:
    """
    Converts path from windows to unix
    :param path: Path to translate
    :return: A unix path
    """
    return path.replace("\\", "/")


def abs_norm_path(file_path: Union[str, Path]) -> Path:
    """
    This functions returns normalized version of the path which is absolute path without . and .. path parts
    Unlike th pathlib function resolve() this function does not resolve symbolic links since Solidity imports
    refer to paths that may include symbolic links
    """
    path_str = str(file_path) if isinstance(file_path, Path) else file_path
    norm_path = os.path.normpath(os.path.abspath(path_str))
    return Path(norm_path)


def safe_create_dir(path: Path) -> None:
    if path.is_dir():
        io_logger.debug(f"directory {path} already exists")
        return
    path.mkdir(parents=True, exist_ok=True)


def which(filename: str) -> Optional[str]:
    if is_windows() and not filename.endswith(".exe"):
        filename += ".exe"
    return shutil.which(filename)


def to_formatted_json(data: Any, pretty: bool = False) -> str:
    """
    Serializes [data] the way the compiler does: no whitespace at all, or 4-space indentation when [pretty] is set
    """
    if pretty:
        return json.dumps(data, indent=4, ensure_ascii=False)
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def version_triplet_regex(prefix: str = "", suffix: str = "") -> str:
    """
    @return: the regex pattern for a version triplet (xx.yy.zz)
    """
    return fr'^{prefix}(\d+)\.(\d+)\.(\d+){suffix}'
