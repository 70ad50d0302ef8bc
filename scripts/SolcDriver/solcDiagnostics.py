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
import sys
from typing import Optional, TextIO

from SolcDriver.solcDataClasses import CompilationOutput, Diagnostic
from Shared import solcUtils as Util

compiler_logger = logging.getLogger("compiler")


class DiagnosticReporter:
    """
    Prints the diagnostics of a compilation: warnings to stdout, everything else to stderr.
    Anything that is not a warning (errors, but also infos) fails the run.
    """

    def __init__(self, out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> None:
        self.out = out
        self.err = err
        self.has_error = False

    def report_one(self, diagnostic: Diagnostic) -> None:
        if diagnostic.is_warning:
            print(diagnostic.formatted_message, file=self.out or sys.stdout)
        else:
            print(diagnostic.formatted_message, file=self.err or sys.stderr)
            self.has_error = True

    def report(self, output: Optional[CompilationOutput]) -> bool:
        """
        @return: True if at least one diagnostic was not a warning
        @raises NoCompilerOutputError if there is no output at all
        """
        if output is None:
            raise Util.NoCompilerOutputError("No output from compiler")
        for diagnostic in output.diagnostics():
            self.report_one(diagnostic)
        compiler_logger.debug(f"reported {len(output.diagnostics())} diagnostics, has_error={self.has_error}")
        return self.has_error
