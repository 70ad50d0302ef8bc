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
from typing import List, Optional, Sequence, Union

from Shared import solcUtils as Util

"""
Source unit names.
The compiler identifies every source by a string key, and uses forward slashes in that key no matter the host.
The key of a file given on the command line is its path relative to the base path, or the absolute path when the file
is outside the base path.
"""


def with_unix_path_separators(path: str) -> str:
    # On unix a backslash is a legal part of a file name, so only windows paths are converted
    if not Util.is_windows():
        return path
    return Util.as_posix(path)


def relative_to_root(abs_source_path: Path, root: Union[str, Path]) -> Optional[str]:
    """
    @return the path of [abs_source_path] relative to [root], or None if that would step outside of [root]
    """
    abs_root = Util.abs_norm_path(root)
    try:
        relative = os.path.relpath(abs_source_path, abs_root)
    except ValueError:
        # different drives on windows
        return None
    if relative == os.pardir or relative.startswith(os.pardir + os.sep):
        return None
    return relative


def strip_base_path(source_path: Union[str, Path], base_path: Optional[str] = None,
                    include_paths: Optional[Sequence[str]] = None) -> str:
    """
    Returns the source unit name of [source_path].
    Neither path has its symbolic links resolved, only '.' and '..' segments are collapsed. The roots are tried in
    order: the base path (the working directory if no base path is given), then each include path.
    Never fails: if the file is under none of the roots, its absolute path is the key.
    """
    abs_source_path = Util.abs_norm_path(source_path)
    roots: List[Union[str, Path]] = [base_path if base_path else Path.cwd()]
    roots.extend(include_paths or [])
    for root in roots:
        relative = relative_to_root(abs_source_path, root)
        if relative is not None:
            return with_unix_path_separators(relative)
    return with_unix_path_separators(str(abs_source_path))
