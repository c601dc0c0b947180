"""
Error types for the IPPcode23 parser.

Every error is fatal to the current run.  Each class carries the stable
process exit code that :mod:`ippcode_parser.cli` reports for it.

+--------------------------+------+-------------------------------------------+
| Exception                | Code | Raised when                               |
+==========================+======+===========================================+
| ParameterError           | 10   | Bad command-line usage                    |
+--------------------------+------+-------------------------------------------+
| UnknownStatisticError    | 10   | A requested statistic name is unknown     |
+--------------------------+------+-------------------------------------------+
| InputOpenError           | 11   | The source cannot be opened               |
+--------------------------+------+-------------------------------------------+
| OutputOpenError          | 12   | An output file cannot be written          |
+--------------------------+------+-------------------------------------------+
| MissingHeaderError       | 21   | ``.IPPcode23`` header missing / invalid   |
+--------------------------+------+-------------------------------------------+
| UnknownOpcodeError       | 22   | Opcode not in the instruction table       |
+--------------------------+------+-------------------------------------------+
| MalformedOpcodeError     | 23   | Opcode token has no letter at all         |
+--------------------------+------+-------------------------------------------+
| ArityMismatchError       | 23   | Too many / too few arguments              |
+--------------------------+------+-------------------------------------------+
| InvalidArgumentError     | 23   | Argument does not match its expected kind |
+--------------------------+------+-------------------------------------------+
"""
from __future__ import annotations

from typing import Optional


class IppcodeError(Exception):
    """Base class for all parser errors."""

    exit_code: int = 99

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ParameterError(IppcodeError):
    exit_code = 10


class UnknownStatisticError(IppcodeError):
    exit_code = 10

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown statistic: {name}")
        self.name = name


class InputOpenError(IppcodeError):
    exit_code = 11


class OutputOpenError(IppcodeError):
    exit_code = 12


# ---------------------------------------------------------------------------
# Source errors – always tied to a line of the input
# ---------------------------------------------------------------------------


class SourceError(IppcodeError):
    """An error located on a specific (1-based) source line."""

    def __init__(self, message: str, line: Optional[int] = None) -> None:
        self.line = line
        if line is not None:
            message = f"{message} on line {line}"
        super().__init__(message)


class MissingHeaderError(SourceError):
    exit_code = 21

    def __init__(self, line: Optional[int] = None) -> None:
        super().__init__("Missing or invalid header", line)


class UnknownOpcodeError(SourceError):
    exit_code = 22

    def __init__(self, opcode: str, line: Optional[int] = None) -> None:
        super().__init__(f"Unknown opcode {opcode!r}", line)
        self.opcode = opcode


class MalformedOpcodeError(SourceError):
    """The opcode token contains no letter; parsing cannot continue at all."""

    exit_code = 23

    def __init__(self, token: str, line: Optional[int] = None) -> None:
        super().__init__(f"Invalid opcode {token!r}", line)
        self.token = token


class ArityMismatchError(SourceError):
    exit_code = 23

    def __init__(
        self,
        opcode: str,
        expected: int,
        given: int,
        line: Optional[int] = None,
    ) -> None:
        self.opcode = opcode
        self.expected = expected
        self.given = given
        self.too_many = given > expected
        what = "Too many" if self.too_many else "Too few"
        super().__init__(
            f"{what} arguments for {opcode} (expected {expected}, got {given})",
            line,
        )


class InvalidArgumentError(SourceError):
    exit_code = 23

    def __init__(
        self,
        index: int,
        expected_kind: str,
        token: str,
        line: Optional[int] = None,
    ) -> None:
        self.index = index
        self.expected_kind = expected_kind
        self.token = token
        super().__init__(
            f"Wrong type of argument number {index} "
            f"(expected {expected_kind}, got {token!r})",
            line,
        )
