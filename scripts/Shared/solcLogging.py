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
from typing import Iterable, List, Optional, Set

from Shared.solcUtils import red_text, orange_text

ALL_TOPICS = ["compiler", "context", "file", "rpc", "run", "smt"]


class ColoredString(logging.Formatter):
    def __init__(self, msg_fmt: str = "%(name)s - %(message)s") -> None:
        super().__init__(msg_fmt)

    def format(self, record: logging.LogRecord) -> str:
        to_ret = super().format(record)
        if record.levelno == logging.WARN:
            return orange_text("WARNING") + ": " + to_ret
        elif record.levelno >= logging.ERROR:  # aka ERROR, FATAL, and CRITICAL
            return red_text(record.levelname) + ": " + to_ret
        else:  # aka INFO, and DEBUG
            return record.levelname + ": " + to_ret


class TopicFilter(logging.Filter):
    def __init__(self, names: Iterable[str]) -> None:
        super().__init__()
        self.logged_names = set(names)

    def filter(self, record: logging.LogRecord) -> bool:
        return (record.name in self.logged_names) or record.levelno >= logging.WARN


class LoggingManager():
    """
    A class that manages the log output of a run. Used for:
    * Setting log levels and output format
    * Restricting debug output to a set of topics
    * Checking whether we are in debug mode via LoggingManager().is_debugging

    All log records go to stderr. In standard json mode stdout carries the compiler output document and nothing else,
    and in direct mode stdout carries the compiler warnings.
    """

    def __init__(self, debug: bool = False, debug_topics: Optional[List[str]] = None,
                 show_debug_topics: bool = False) -> None:
        self.stderr_handler = logging.StreamHandler(stream=sys.stderr)
        self.handlers: Set[logging.Handler] = set()
        self.is_debugging = False

        root_logger = logging.root
        self.orig_root_log_level = root_logger.level  # used to restore the root logger's level after exit
        root_logger.setLevel(logging.NOTSET)

        self.__add_handler(self.stderr_handler)
        self.set_log_level_and_format(debug, debug_topics, show_debug_topics)

    def tear_down(self) -> None:
        """
        Releases all handlers and restores the root logger to the state it was in before this class was constructed
        """
        root_logger = logging.root
        root_logger.setLevel(self.orig_root_log_level)

        while self.handlers:
            _handler = next(iter(self.handlers))
            self.__remove_handler(_handler)

    def __add_handler(self, handler: logging.Handler) -> None:
        if handler not in self.handlers:
            self.handlers.add(handler)
            logging.root.addHandler(handler)
        else:
            logging.warning(f"Tried to add a handler that was already active: {handler}")

    def __remove_handler(self, handler: logging.Handler) -> None:
        if handler in self.handlers:
            try:
                handler.close()
            except Exception as e:
                logging.warning(f"Failed to close {handler}: {repr(e)}")
            self.handlers.remove(handler)
            logging.root.removeHandler(handler)
        else:
            logging.warning(f"Tried to remove a handler that is not active: {handler}")

    def set_log_level_and_format(
            self,
            debug: bool = False,
            debug_topics: Optional[List[str]] = None,
            show_debug_topics: bool = False) -> None:
        """
        Sets the logging level and log message format.
        @param debug: if true, we show debug information
        @param debug_topics:
            Ignored if debug is False.
            Only debug messages related to loggers of those topics are recorded.
            If it is None or an empty list, we record ALL topics.
        @param show_debug_topics: If True, sets the logging message format to show the topic of the logger that
                                  sent them.
        """
        self.__format_log_messages(show_debug_topics)
        if debug:
            self.stderr_handler.setLevel(logging.DEBUG)
            self.is_debugging = True
        else:
            self.stderr_handler.setLevel(logging.INFO)
            self.is_debugging = False
        self.__set_topics_filter(debug_topics)

    def __format_log_messages(self, show_debug_topics: bool) -> None:
        if show_debug_topics:
            base_message = "%(name)s - %(message)s"
        else:
            base_message = "%(message)s"

        if sys.stderr.isatty():
            self.stderr_handler.setFormatter(ColoredString(base_message))
        else:
            self.stderr_handler.setFormatter(logging.Formatter(f'%(levelname)s: {base_message}'))

    def __set_topics_filter(self, debug_topics: Optional[List[str]] = None) -> None:
        for _filter in list(self.stderr_handler.filters):
            self.stderr_handler.removeFilter(_filter)
        if self.is_debugging and debug_topics:
            topics = [n.strip() for n in debug_topics]
            self.stderr_handler.addFilter(TopicFilter(topics))
