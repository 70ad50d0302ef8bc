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

from typing import Dict, Any, Optional


class SolcParameters:
    """
    The "optimizer" entry of the standard json settings
    """
    def __init__(self, optimizer_on: bool, optimizer_runs: Optional[int]):
        self.optimizer_on = optimizer_on
        self.optimizer_runs = optimizer_runs

    def as_dict(self) -> Dict[str, Any]:
        as_dict: Dict[str, Any] = {"enabled": self.optimizer_on}
        if self.optimizer_runs is not None:
            as_dict["runs"] = self.optimizer_runs
        return as_dict

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, SolcParameters):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __hash__(self) -> int:
        return hash((self.optimizer_on, self.optimizer_runs))

    def __repr__(self) -> str:
        return repr(self.as_dict())
