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

import os
from pathlib import Path
from typing import Any, List, Union

from Shared import solcUtils as Util


def validate_non_negative_integer(string: Union[str, int]) -> int:
    """
    :param string: A string
    :return: The integer value, if the string represents a non-negative integer
    :raises SolcUserInputError if the string does not represent a non-negative integer
    """
    try:
        number = int(string)
        if number < 0:
            raise ValueError
    except ValueError as e:
        raise Util.SolcUserInputError(f'expected a non-negative integer, instead given {string}') from e
    return number


def validate_readable_file(filename: str, extensions: Union[str, tuple] = '') -> str:
    file_path = Path(filename)
    if not file_path.exists():
        raise Util.SolcUserInputError(f"file {filename} not found")
    if file_path.is_dir():
        raise Util.SolcUserInputError(f"'{filename}' is a directory and not a file")
    if not os.access(filename, os.R_OK):
        raise Util.SolcUserInputError(f"no read permissions for {filename}")
    if extensions and not filename.lower().endswith(extensions):
        raise Util.SolcUserInputError(f"{filename} does not end with {extensions}")

    return filename


def validate_dir(dirname: str) -> str:
    """
    Unlike most validators this one keeps the value as given. The base path is used as a plain string prefix for
    imports, so it must not be rewritten here.
    """
    dir_path = Path(dirname)
    if not dir_path.exists():
        raise Util.SolcUserInputError(f"path {dirname} does not exist")
    if dir_path.is_file():
        raise Util.SolcUserInputError(f"{dirname} is a file and not a directory")
    if not os.access(dirname, os.R_OK):
        raise Util.SolcUserInputError(f"no read permissions to {dirname}")
    return dirname


def validate_output_dir(dirname: str) -> str:
    # the output directory does not have to exist
    dir_path = Path(dirname)
    if dir_path.exists() and not dir_path.is_dir():
        raise Util.SolcUserInputError(f"{dirname} is not a directory")
    return dirname


def validate_conf_file(file_name: str) -> str:
    validate_readable_file(file_name, Util.CONF_EXT)
    return file_name


def validate_string_list(value: Any, attr_name: str) -> List[str]:
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise Util.SolcUserInputError(f"'{attr_name}' should be a string or a list of strings, got {value}")
    return value
