"""
InstructionParser
=================

Parses one comment-free IPPcode23 line into an
:class:`~ippcode_parser.models.Instruction`.

Line format::

    OPCODE  [ARG1  [ARG2  [ARG3]]]

Tokens are separated by runs of ASCII whitespace only, so a string constant
may carry characters such as U+00A0.  Checks are applied in order and
the first failure aborts the whole file:

+-----------------------------------------------+-----------------------------+
| Check                                         | Error                       |
+===============================================+=============================+
| Opcode token contains at least one letter     | MalformedOpcodeError        |
+-----------------------------------------------+-----------------------------+
| Opcode exists in the instruction table        | UnknownOpcodeError          |
+-----------------------------------------------+-----------------------------+
| Argument count equals the signature length    | ArityMismatchError          |
+-----------------------------------------------+-----------------------------+
| Each argument matches its expected kind       | InvalidArgumentError        |
+-----------------------------------------------+-----------------------------+

Each parser instance owns the order counter for one file; orders start at 1
and are never shared between files.
"""
from __future__ import annotations

import logging
import re
from typing import List, Optional

from ..errors import (
    ArityMismatchError,
    InvalidArgumentError,
    MalformedOpcodeError,
    UnknownOpcodeError,
)
from ..models import Argument, Instruction
from .argument_parser import ArgumentParser
from .instruction_table import signature

logger = logging.getLogger(__name__)

_TOKEN_SEPARATOR = re.compile(r"[ \t\n\r\f\v]+")


class InstructionParser:
    """
    Converts instruction lines into :class:`Instruction` objects, numbering
    them consecutively.

    Parameters
    ----------
    argument_parser:
        Validator used for every argument slot.  A fresh one is created when
        omitted.
    """

    def __init__(self, argument_parser: Optional[ArgumentParser] = None) -> None:
        self._arguments = argument_parser or ArgumentParser()
        self._letter_re = re.compile(r"[A-Za-z]")
        self._next_order = 1

    @property
    def next_order(self) -> int:
        """The order the next successfully parsed instruction will receive."""
        return self._next_order

    def parse(self, text: str, line: Optional[int] = None) -> Instruction:
        """
        Parse *text* (comment already removed, not blank) into an instruction.

        Parameters
        ----------
        text:
            The instruction line, e.g. ``"ADD GF@sum GF@sum int@1"``.
        line:
            Source line number attached to any error raised.

        Returns
        -------
        Instruction
        """
        tokens = [t for t in _TOKEN_SEPARATOR.split(text) if t]
        if not tokens:
            raise ValueError("cannot parse an empty line")

        opcode_token, arg_tokens = tokens[0], tokens[1:]
        if not self._letter_re.search(opcode_token):
            raise MalformedOpcodeError(opcode_token, line)

        opcode = opcode_token.upper()
        try:
            kinds = signature(opcode)
        except UnknownOpcodeError:
            raise UnknownOpcodeError(opcode_token, line) from None

        if len(arg_tokens) != len(kinds):
            raise ArityMismatchError(opcode, len(kinds), len(arg_tokens), line)

        args: List[Argument] = []
        for index, (kind, token) in enumerate(zip(kinds, arg_tokens), start=1):
            arg = self._arguments.parse(kind, token)
            if arg is None:
                raise InvalidArgumentError(index, kind, token, line)
            args.append(arg)

        instr = Instruction(opcode=opcode, args=tuple(args), order=self._next_order)
        self._next_order += 1
        logger.debug("line %s: %r", line, instr)
        return instr
