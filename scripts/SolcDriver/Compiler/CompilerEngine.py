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

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional

# maps an import path to {"contents": ...} or {"error": ...}
ImportCallback = Callable[[str], Dict[str, str]]


@dataclass(frozen=True)
class CompilerCallbacks:
    import_callback: Optional[ImportCallback] = None


class CompilerEngine(ABC):
    """
    A compiler that speaks the standard json protocol: a request document in, a response document out.
    Compilation problems are reported inside the response document. Exceptions are only for failing to run the
    compiler at all, and are of type CompilerEngineError.
    """

    @abstractmethod
    def version(self) -> str:
        pass

    @abstractmethod
    def compile(self, input_json: str, callbacks: Optional[CompilerCallbacks] = None) -> str:
        """
        @param input_json: a standard json request document
        @param callbacks: if it has an import callback, every source the compiler cannot find is looked up with it
        @return: the standard json response document, as text
        """
        pass
