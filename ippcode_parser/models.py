"""
Core data models for the IPPcode23 parser.

Arguments form a closed tagged union of four frozen dataclasses.  A *symbol*
argument is not stored as its own type: the parser resolves it to either a
:class:`Variable` or a :class:`Constant`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple, Union


# ---------------------------------------------------------------------------
# Argument variants
# ---------------------------------------------------------------------------

FRAMES = ("GF", "LF", "TF")
CONSTANT_KINDS = ("int", "bool", "string", "nil")
TYPE_NAMES = ("int", "bool", "string")


@dataclass(frozen=True)
class Variable:
    """``GF@counter`` – a frame tag plus a variable name."""

    frame: str
    name: str

    @property
    def type_tag(self) -> str:
        return "var"

    @property
    def text(self) -> str:
        return f"{self.frame}@{self.name}"


@dataclass(frozen=True)
class Constant:
    """``int@42``, ``string@a\\032b``, ``bool@true``, ``nil@nil``."""

    kind: str
    literal: str

    @property
    def type_tag(self) -> str:
        return self.kind

    @property
    def text(self) -> str:
        return self.literal


@dataclass(frozen=True)
class Label:
    name: str

    @property
    def type_tag(self) -> str:
        return "label"

    @property
    def text(self) -> str:
        return self.name


@dataclass(frozen=True)
class TypeName:
    """The operand of ``READ``: one of ``int``, ``bool``, ``string``."""

    name: str

    @property
    def type_tag(self) -> str:
        return "type"

    @property
    def text(self) -> str:
        return self.name


Argument = Union[Variable, Constant, Label, TypeName]


# ---------------------------------------------------------------------------
# Instruction
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Instruction:
    """A single validated instruction with its 1-based sequence order."""

    opcode: str
    args: Tuple[Argument, ...]
    order: int

    def __repr__(self) -> str:
        return (
            f"Instruction(order={self.order}, opcode={self.opcode!r}, "
            f"args={[a.text for a in self.args]})"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "order": self.order,
            "opcode": self.opcode,
            "args": [
                {"type": arg.type_tag, "value": arg.text} for arg in self.args
            ],
        }


# ---------------------------------------------------------------------------
# ParsedProgram – the result of parsing one source
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParsedProgram:
    """
    The finished, immutable instruction sequence of one source together with
    the number of lines that carried a comment.
    """

    instructions: Tuple[Instruction, ...]
    comment_count: int
    source_name: str = "<inline>"

    def __len__(self) -> int:
        return len(self.instructions)

    def __repr__(self) -> str:
        return (
            f"ParsedProgram(source={self.source_name!r}, "
            f"instructions={len(self.instructions)}, "
            f"comments={self.comment_count})"
        )

    def opcodes(self) -> List[str]:
        return [instr.opcode for instr in self.instructions]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_file": self.source_name,
            "instruction_count": len(self.instructions),
            "comment_count": self.comment_count,
            "instructions": [i.to_dict() for i in self.instructions],
        }
