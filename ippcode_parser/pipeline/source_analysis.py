"""
SourceAnalysis
==============

Full IPPcode23 parsing pipeline.

Combines :class:`~ippcode_parser.passes.line_scanner.LineScanner` (comments,
blank lines, header) with
:class:`~ippcode_parser.parser.instruction_parser.InstructionParser`
(instruction validation) and hands the finished
:class:`~ippcode_parser.models.ParsedProgram` to the serializer and the
statistics engine.

Parsing is fail-fast: the first error propagates and nothing is returned.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Iterable, List

from ..errors import InputOpenError
from ..models import Instruction, ParsedProgram
from ..output.xml_serializer import DEFAULT_LANGUAGE, XMLSerializer
from ..parser.instruction_parser import InstructionParser
from ..passes.line_scanner import DEFAULT_HEADER, LineScanner
from ..stats.engine import StatisticsEngine

logger = logging.getLogger(__name__)


class SourceAnalysis:
    """
    High-level facade for IPPcode23 source analysis.

    Parameters
    ----------
    header:
        Header token required on the first content line.
    language:
        Language name written into the XML root element.
    """

    def __init__(
        self,
        header: str = DEFAULT_HEADER,
        language: str = DEFAULT_LANGUAGE,
    ) -> None:
        self.header = header
        self.language = language
        self._serializer = XMLSerializer(language=language)

    # ------------------------------------------------------------------
    # Primary API
    # ------------------------------------------------------------------

    def analyze_lines(
        self,
        lines: Iterable[str],
        source_name: str = "<inline>",
    ) -> ParsedProgram:
        """
        Parse a sequence of source lines.

        Parameters
        ----------
        lines:
            Any iterable of lines (an open file, a list of strings, ...).
        source_name:
            Name recorded in the returned program.

        Returns
        -------
        ParsedProgram
        """
        scanner = LineScanner(header=self.header)
        parser = InstructionParser()
        instructions: List[Instruction] = []

        for line_no, text in scanner.run(lines):
            instructions.append(parser.parse(text, line=line_no))

        logger.info(
            "Parsed %s: %d instructions, %d comments",
            source_name,
            len(instructions),
            scanner.comment_count,
        )
        return ParsedProgram(
            instructions=tuple(instructions),
            comment_count=scanner.comment_count,
            source_name=source_name,
        )

    def analyze_text(
        self,
        source: str,
        source_name: str = "<inline>",
    ) -> ParsedProgram:
        """
        Parse IPPcode23 source supplied as a **string**.

        Lines are split exactly as a file read in text mode would split them,
        so U+2028 and similar characters stay inside string constants.
        """
        return self.analyze_lines(io.StringIO(source, newline=None), source_name)

    def analyze_file(self, file_path: str) -> ParsedProgram:
        """
        Parse an IPPcode23 source **file**.

        Raises
        ------
        InputOpenError
            When the file cannot be opened or decoded.
        """
        logger.info("Parsing file: %s", file_path)
        try:
            with Path(file_path).open(encoding="utf-8") as fh:
                return self.analyze_lines(fh, source_name=file_path)
        except (OSError, UnicodeDecodeError) as exc:
            raise InputOpenError(f"Unable to open file {file_path}: {exc}") from exc

    # ------------------------------------------------------------------
    # Consumers of a finished program
    # ------------------------------------------------------------------

    def to_xml(self, program: ParsedProgram) -> str:
        return self._serializer.serialize(program)

    @staticmethod
    def statistics(program: ParsedProgram) -> StatisticsEngine:
        return StatisticsEngine(program)
