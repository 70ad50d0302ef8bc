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
import logging
import re
import subprocess
import time
from functools import lru_cache
from typing import Any, Dict, List, Optional, Tuple

from SolcDriver.Compiler.CompilerEngine import CompilerEngine, CompilerCallbacks
from Shared import solcUtils as Util

# logger for running the Solidity compiler and reporting any errors it emits
compiler_logger = logging.getLogger("compiler")
# logger for issues calling/shelling out to external functions
process_logger = logging.getLogger("rpc")

CompilerVersion = Tuple[int, int, int]

# the error code of solc for a source that could not be loaded
SOURCE_NOT_FOUND_ERROR_CODE = "6275"
SOURCE_NOT_FOUND_RE = re.compile(r'^Source "(.+?)" not found')
NO_CALLBACK_REASON = "File import callback not supported."
# first version that can be told to never touch the filesystem by itself
NO_IMPORT_CALLBACK_VERSION: CompilerVersion = (0, 8, 14)


def error_entries(output_json: Dict[str, Any]) -> List[Dict[str, Any]]:
    errors = output_json.get("errors")
    if not isinstance(errors, list):
        return []
    return [error for error in errors if isinstance(error, dict)]


class CompilerEngineSol(CompilerEngine):
    """
    Runs a native solc executable in --standard-json mode.

    solc cannot call back into this process, so imports are served in rounds: every source solc reports as missing is
    looked up with the import callback and added to the request, which is then compiled again. This ends once a round
    adds nothing new. On versions that support it solc runs with --no-import-callback, so the callback is the only way
    a source gets loaded.
    """

    def __init__(self, solc: str = Util.DEFAULT_SOLC_COMPILER) -> None:
        self.solc = solc

    @lru_cache(maxsize=1)
    def __version_output(self) -> str:
        process_logger.debug(f"Running cmd {self.solc} --version")
        try:
            result = subprocess.run([self.solc, "--version"], capture_output=True, text=True, encoding="utf-8")
        except OSError as e:
            raise Util.CompilerEngineError(f"Cannot run {self.solc}: {e}") from e
        except UnicodeDecodeError as e:
            raise Util.CompilerEngineError(f"{self.solc} printed something that is not UTF-8 text: {e}") from e
        if result.returncode:
            raise Util.CompilerEngineError(f"Failed to run {self.solc} --version, exit code {result.returncode}:"
                                           f"{Util.NEW_LINE}{result.stderr}")
        return result.stdout

    def version(self) -> str:
        """
        @return: the full version string, e.g. 0.8.21+commit.d9974bed.Linux.g++
        """
        version_output = self.__version_output()
        match = re.search(r'^Version: (\S+)', version_output, re.MULTILINE)
        if not match:
            msg = f"Couldn't extract Solidity version from output {version_output}, giving up"
            compiler_logger.debug(msg)
            raise Util.CompilerEngineError(msg)
        return match.group(1)

    def version_triplet(self) -> CompilerVersion:
        version_output = self.__version_output()
        version_matches = re.findall(Util.version_triplet_regex(prefix="Version: "), version_output, re.MULTILINE)
        if len(version_matches) != 1:
            msg = f"Couldn't extract Solidity version from output {version_output}, giving up"
            compiler_logger.debug(msg)
            raise Util.CompilerEngineError(msg)
        match = version_matches[0]
        return int(match[0]), int(match[1]), int(match[2])

    def compile_cmd(self) -> List[str]:
        cmd = [self.solc, "--standard-json"]
        if self.version_triplet() >= NO_IMPORT_CALLBACK_VERSION:
            cmd.append("--no-import-callback")
        else:
            compiler_logger.debug(f"{self.solc} does not support --no-import-callback, it may read imports by itself")
        return cmd

    def run_standard_json(self, input_json: str) -> str:
        cmd = self.compile_cmd()
        process_logger.debug(f"Running cmd {' '.join(cmd)}")
        build_start = time.perf_counter()
        try:
            result = subprocess.run(cmd, input=input_json, capture_output=True, text=True, encoding="utf-8")
        except OSError as e:
            raise Util.CompilerEngineError(f"Cannot run {self.solc}: {e}") from e
        except UnicodeDecodeError as e:
            raise Util.CompilerEngineError(f"{self.solc} printed something that is not UTF-8 text: {e}") from e
        if result.returncode:
            raise Util.CompilerEngineError(f"Failed to run {' '.join(cmd)}, exit code {result.returncode}:"
                                           f"{Util.NEW_LINE}{result.stderr}")
        build_end = time.perf_counter()
        process_logger.debug(f"Solc run {' '.join(cmd)} time: {round(build_end - build_start, 4)}")
        return result.stdout

    @staticmethod
    def missing_sources(output: str) -> List[str]:
        """
        @return: the source unit names solc reported it could not find, in the order reported
        """
        try:
            output_json = json.loads(output)
        except json.JSONDecodeError:
            return []
        if not isinstance(output_json, dict):
            return []
        missing = []
        for error in error_entries(output_json):
            if error.get("errorCode") != SOURCE_NOT_FOUND_ERROR_CODE:
                continue
            match = SOURCE_NOT_FOUND_RE.match(str(error.get("message", "")))
            if match and match.group(1) not in missing:
                missing.append(match.group(1))
        return missing

    @staticmethod
    def annotate_failed_imports(output: str, failures: Dict[str, str]) -> str:
        """
        Replaces solc's generic reason for a missing source with the reason the import callback gave
        """
        try:
            output_json: Any = json.loads(output)
        except json.JSONDecodeError:
            return output
        if not isinstance(output_json, dict):
            return output
        changed = False
        for error in error_entries(output_json):
            if error.get("errorCode") != SOURCE_NOT_FOUND_ERROR_CODE:
                continue
            for path, reason in failures.items():
                generic = f'Source "{path}" not found: {NO_CALLBACK_REASON}'
                for key in ("message", "formattedMessage"):
                    if isinstance(error.get(key), str) and generic in error[key]:
                        error[key] = error[key].replace(generic, f'Source "{path}" not found: {reason}')
                        changed = True
        return Util.to_formatted_json(output_json) if changed else output

    def compile(self, input_json: str, callbacks: Optional[CompilerCallbacks] = None) -> str:
        output = self.run_standard_json(input_json)
        if callbacks is None or callbacks.import_callback is None:
            return output

        try:
            request = json.loads(input_json)
        except json.JSONDecodeError:
            # solc already reported the broken input in its output
            return output
        if not isinstance(request, dict) or not isinstance(request.get("sources"), dict):
            return output

        attempted = set()
        failures: Dict[str, str] = {}
        while True:
            missing = [path for path in self.missing_sources(output)
                       if path not in attempted and path not in request["sources"]]
            if not missing:
                break
            added = False
            for path in missing:
                attempted.add(path)
                result = callbacks.import_callback(path)
                if "contents" in result:
                    request["sources"][path] = {"content": result["contents"]}
                    added = True
                else:
                    compiler_logger.debug(f"import callback could not provide {path}: {result.get('error')}")
                    failures[path] = result.get("error", "")
            if not added:
                break
            compiler_logger.debug(f"compiling again with {len(request['sources'])} sources")
            output = self.run_standard_json(Util.to_formatted_json(request))

        if failures:
            output = self.annotate_failed_imports(output, failures)
        return output
