"""
ArgumentParser
==============

Builds one typed argument from a raw token, given the kind the instruction
table expects in that slot.

+---------+------------------------------------------------------------------+
| Kind    | Accepted syntax                                                  |
+=========+==================================================================+
| var     | ``GF@name`` / ``LF@name`` / ``TF@name`` (exactly one ``@``)      |
+---------+------------------------------------------------------------------+
| symb    | a ``var``, otherwise a constant ``kind@value``                   |
+---------+------------------------------------------------------------------+
| label   | an identifier                                                    |
+---------+------------------------------------------------------------------+
| type    | ``int`` / ``bool`` / ``string``                                  |
+---------+------------------------------------------------------------------+

Constants:

* ``int@`` – signed decimal (``-12``, ``1_000``), hex (``0x1F``, ``-0X_ff``)
  or octal (``017``, ``0o17``); underscores only between digits.
* ``bool@true`` / ``bool@false``
* ``string@...`` – a backslash must start a three-digit escape (``\\032``).
* ``nil@nil``

Identifiers start with a letter or one of ``_ - $ & % * ! ?``; digits are
allowed after the first character.  Parentheses are not identifier
characters, although some IPPcode23 tools have accepted them.
"""
from __future__ import annotations

import re
from typing import Callable, Dict, Optional

from ..models import (
    FRAMES,
    TYPE_NAMES,
    Argument,
    Constant,
    Label,
    TypeName,
    Variable,
)
from .instruction_table import LABEL, SYMB, TYPE, VAR

_SPECIAL = r"_\-$&%*!?"


class ArgumentParser:
    """
    Validates and constructs arguments.  Each literal family has its own
    small validator so the rules can be exercised one at a time.
    """

    def __init__(self) -> None:
        self._identifier_re = re.compile(rf"[A-Za-z{_SPECIAL}][A-Za-z0-9{_SPECIAL}]*")
        self._int_re = re.compile(
            r"[+-]?(?:"
            r"0[xX](?:_?[0-9a-fA-F])+"      # hex
            r"|0[oO]?(?:_?[0-7])+"          # octal
            r"|[1-9](?:_?[0-9])*"           # decimal
            r"|0"
            r")"
        )
        self._string_re = re.compile(r"(?:[^\\]|\\[0-9]{3})*")
        self._constant_validators: Dict[str, Callable[[str], bool]] = {
            "int": self.is_int_literal,
            "bool": self.is_bool_literal,
            "string": self.is_string_literal,
            "nil": self.is_nil_literal,
        }

    # ------------------------------------------------------------------
    # Public interface
    # ------------------------------------------------------------------

    def parse(self, kind: str, token: str) -> Optional[Argument]:
        """
        Build an argument of *kind* from *token*.

        Returns
        -------
        Argument | None
            The argument, or *None* when *token* is not valid for *kind*.
        """
        if kind == VAR:
            return self.parse_variable(token)
        if kind == SYMB:
            return self.parse_symbol(token)
        if kind == LABEL:
            return self.parse_label(token)
        if kind == TYPE:
            return self.parse_type(token)
        raise ValueError(f"unknown argument kind {kind!r}")

    def parse_variable(self, token: str) -> Optional[Variable]:
        if token.count("@") != 1:
            return None
        frame, name = token.split("@")
        if frame not in FRAMES or not self.is_identifier(name):
            return None
        return Variable(frame=frame, name=name)

    def parse_symbol(self, token: str) -> Optional[Argument]:
        return self.parse_variable(token) or self.parse_constant(token)

    def parse_constant(self, token: str) -> Optional[Constant]:
        kind, sep, value = token.partition("@")
        if not sep:
            return None
        validator = self._constant_validators.get(kind)
        if validator is None or not validator(value):
            return None
        return Constant(kind=kind, literal=value)

    def parse_label(self, token: str) -> Optional[Label]:
        if not self.is_identifier(token):
            return None
        return Label(name=token)

    def parse_type(self, token: str) -> Optional[TypeName]:
        if token not in TYPE_NAMES:
            return None
        return TypeName(name=token)

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    def is_identifier(self, text: str) -> bool:
        return self._identifier_re.fullmatch(text) is not None

    def is_int_literal(self, text: str) -> bool:
        return self._int_re.fullmatch(text) is not None

    @staticmethod
    def is_bool_literal(text: str) -> bool:
        return text in ("true", "false")

    def is_string_literal(self, text: str) -> bool:
        return self._string_re.fullmatch(text) is not None

    @staticmethod
    def is_nil_literal(text: str) -> bool:
        return text == "nil"
