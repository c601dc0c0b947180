"""
IPPcode23 instruction table.

Maps every opcode (upper case) to the ordered tuple of argument kinds it
expects.  Used by :class:`~ippcode_parser.parser.instruction_parser.InstructionParser`
to enforce arity and to pick the validator for each argument slot.

Argument kinds
--------------
``var``    variable reference, ``GF@name``
``symb``   variable or constant
``label``  label name
``type``   one of ``int``, ``bool``, ``string``
"""
from __future__ import annotations

from types import MappingProxyType
from typing import FrozenSet, Mapping, Tuple

from ..errors import UnknownOpcodeError

VAR = "var"
SYMB = "symb"
LABEL = "label"
TYPE = "type"

ARGUMENT_KINDS: FrozenSet[str] = frozenset({VAR, SYMB, LABEL, TYPE})

_ARITH = (VAR, SYMB, SYMB)
_COND_JUMP = (LABEL, SYMB, SYMB)

INSTRUCTIONS: Mapping[str, Tuple[str, ...]] = MappingProxyType(
    {
        # ── Frames and function calls ────────────────────────────────────
        "MOVE": (VAR, SYMB),
        "CREATEFRAME": (),
        "PUSHFRAME": (),
        "POPFRAME": (),
        "DEFVAR": (VAR,),
        "CALL": (LABEL,),
        "RETURN": (),
        # ── Data stack ───────────────────────────────────────────────────
        "PUSHS": (SYMB,),
        "POPS": (VAR,),
        # ── Arithmetic, relational, boolean and conversion ───────────────
        "ADD": _ARITH,
        "SUB": _ARITH,
        "MUL": _ARITH,
        "IDIV": _ARITH,
        "LT": _ARITH,
        "GT": _ARITH,
        "EQ": _ARITH,
        "AND": _ARITH,
        "OR": _ARITH,
        "NOT": (VAR, SYMB),
        "INT2CHAR": (VAR, SYMB),
        "STRI2INT": _ARITH,
        # ── Input / output ───────────────────────────────────────────────
        "READ": (VAR, TYPE),
        "WRITE": (SYMB,),
        # ── Strings ──────────────────────────────────────────────────────
        "CONCAT": _ARITH,
        "STRLEN": (VAR, SYMB),
        "GETCHAR": _ARITH,
        "SETCHAR": _ARITH,
        # ── Types ────────────────────────────────────────────────────────
        "TYPE": (VAR, SYMB),
        # ── Program flow ─────────────────────────────────────────────────
        "LABEL": (LABEL,),
        "JUMP": (LABEL,),
        "JUMPIFEQ": _COND_JUMP,
        "JUMPIFNEQ": _COND_JUMP,
        "EXIT": (SYMB,),
        # ── Debugging ────────────────────────────────────────────────────
        "DPRINT": (SYMB,),
        "BREAK": (),
    }
)

# Opcodes whose first operand names a control-flow target
JUMP_OPCODES: FrozenSet[str] = frozenset({"JUMP", "JUMPIFEQ", "JUMPIFNEQ", "CALL"})

# Opcode that defines a label
LABEL_OPCODE = "LABEL"

# Opcodes after which control never falls through to the next instruction
TERMINATOR_OPCODES: FrozenSet[str] = frozenset({"JUMP", "RETURN", "EXIT"})


def signature(opcode: str) -> Tuple[str, ...]:
    """
    Return the argument kinds expected by *opcode* (compared case-insensitively).

    Raises
    ------
    UnknownOpcodeError
        When *opcode* is not part of the language.
    """
    try:
        return INSTRUCTIONS[opcode.upper()]
    except KeyError:
        raise UnknownOpcodeError(opcode) from None
