"""
LineScanner
===========

First pass over IPPcode23 source: removes comments, skips blank lines and
validates the mandatory header.

Rules
-----
+------------------------------------------------+------------------------------+
| Condition                                      | Action                       |
+================================================+==============================+
| Line contains ``#``                            | Count one comment, drop the  |
|                                                | text from ``#`` onwards      |
+------------------------------------------------+------------------------------+
| Nothing but whitespace left                    | Skip                         |
+------------------------------------------------+------------------------------+
| First remaining line                           | Must be the header (any      |
|                                                | case), else fail             |
+------------------------------------------------+------------------------------+
| Every later remaining line                     | Yield ``(line_no, text)``    |
+------------------------------------------------+------------------------------+

Line numbers are physical and 1-based: blank and comment-only lines are
counted so that diagnostics point at the real position in the file.
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, Iterator, Tuple

from ..errors import MissingHeaderError

logger = logging.getLogger(__name__)

DEFAULT_HEADER = ".IPPcode23"
COMMENT_MARKER = "#"

_BLANKS = " \t\n\r\f\v"


class LineScanner:
    """
    Stateful scanner for one source.  Create a new instance per file; the
    counters are read after :meth:`run` has been exhausted.

    Parameters
    ----------
    header:
        The header token required on the first content line.
    """

    def __init__(self, header: str = DEFAULT_HEADER) -> None:
        self.header = header
        self._header_re = re.compile(rf"^{re.escape(header)}$", re.IGNORECASE)
        self.comment_count = 0
        self.line_number = 0
        self.header_seen = False

    def run(self, lines: Iterable[str]) -> Iterator[Tuple[int, str]]:
        """
        Yield ``(line_number, content)`` for every instruction line.

        Raises
        ------
        MissingHeaderError
            When the first content line is not the header, or the input ends
            before any content line is found.
        """
        for raw in lines:
            self.line_number += 1
            content = self.strip_comment(raw).strip(_BLANKS)
            if not content:
                continue

            if not self.header_seen:
                if not self._header_re.match(content):
                    raise MissingHeaderError(self.line_number)
                self.header_seen = True
                logger.debug("Header found on line %d", self.line_number)
                continue

            yield self.line_number, content

        if not self.header_seen:
            raise MissingHeaderError()

    def strip_comment(self, line: str) -> str:
        """Drop everything from the first ``#``, counting the comment."""
        pos = line.find(COMMENT_MARKER)
        if pos < 0:
            return line
        self.comment_count += 1
        return line[:pos]
