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
from pathlib import Path
from typing import Dict, List, Optional, Sequence

# logger for issues regarding file IO
io_logger = logging.getLogger("file")

ImportResult = Dict[str, str]
CONTENTS = "contents"
ERROR = "error"


class ImportResolver:
    """
    The import callback handed to the compiler engine.
    Every call goes to the filesystem: the compiler may ask for the same path more than once, and the answer must
    reflect the file as it is at that moment.
    """

    def __init__(self, base_path: Optional[str] = None, include_paths: Optional[Sequence[str]] = None) -> None:
        self.base_path = base_path
        self.include_paths = list(include_paths or [])

    def candidate_paths(self, import_path: str) -> List[str]:
        """
        The base path is a plain string prefix, joined with a single slash. No normalization happens here.
        """
        prefixes: List[Optional[str]] = [self.base_path] + list(self.include_paths)
        candidates = []
        for prefix in prefixes:
            candidate = f"{prefix}/{import_path}" if prefix else import_path
            if candidate not in candidates:
                candidates.append(candidate)
        return candidates

    def resolve(self, import_path: str) -> ImportResult:
        candidates = self.candidate_paths(import_path)
        for candidate in candidates:
            if not Path(candidate).exists():
                continue
            try:
                contents = Path(candidate).read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                io_logger.debug(f"failed to read import {candidate}: {e}")
                return {ERROR: f"Error reading {candidate}: {e}"}
            io_logger.debug(f"resolved import {import_path} to {candidate}")
            return {CONTENTS: contents}

        io_logger.debug(f"import {import_path} not found, tried {candidates}")
        return {ERROR: f"File not found at {' or '.join(candidates)}"}

    def __call__(self, import_path: str) -> ImportResult:
        return self.resolve(import_path)
