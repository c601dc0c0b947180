"""
StatisticsEngine
================

Read-only analysis of a finished :class:`~ippcode_parser.models.ParsedProgram`.

Two derived maps are built once, in the constructor, before any query runs:

* ``label_positions`` – label name → orders of every ``LABEL`` defining it
  (repeated definitions are all kept).
* ``jump_sites`` – order → target label, for ``JUMP``, ``JUMPIFEQ``,
  ``JUMPIFNEQ`` and ``CALL``.

Jump classification
-------------------
+---------------+-------------------------------------------------------------+
| Metric        | A jump site counts when ...                                 |
+===============+=============================================================+
| bad           | its target has no definition anywhere                       |
+---------------+-------------------------------------------------------------+
| forward       | some definition of its target lies at a greater order       |
+---------------+-------------------------------------------------------------+
| backward      | some definition of its target lies at a smaller order       |
+---------------+-------------------------------------------------------------+

Forward and backward are independent: a site with definitions on both sides
counts once in each.

Statistic names
---------------
``loc comments labels jumps fwjumps backjumps badjumps frequent eol`` and
``print=TEXT``.  ``jumps`` counts ``JUMP JUMPIFEQ JUMPIFNEQ CALL RETURN``.
"""
from __future__ import annotations

import logging
from collections import Counter, defaultdict
from typing import Callable, Dict, FrozenSet, Iterable, List, Set

from ..errors import UnknownStatisticError
from ..models import Label, ParsedProgram
from ..parser.instruction_table import JUMP_OPCODES, LABEL_OPCODE

logger = logging.getLogger(__name__)

JUMP_GROUP_OPCODES = ("JUMP", "JUMPIFEQ", "JUMPIFNEQ", "CALL", "RETURN")

PRINT_PREFIX = "print="


class StatisticsEngine:
    """
    Computes statistics over one parsed program.

    Parameters
    ----------
    program:
        The finished program; it is never modified.
    """

    def __init__(self, program: ParsedProgram) -> None:
        self._program = program
        self.label_positions: Dict[str, FrozenSet[int]] = {}
        self.jump_sites: Dict[int, str] = {}
        self._build_label_and_jump_maps()
        self._metrics: Dict[str, Callable[[], str]] = {
            "loc": lambda: f"{self.instruction_count()}\n",
            "comments": lambda: f"{self.comment_count()}\n",
            "labels": lambda: f"{self.label_count()}\n",
            "jumps": lambda: f"{self.opcode_group_count(*JUMP_GROUP_OPCODES)}\n",
            "fwjumps": lambda: f"{self.forward_jump_count()}\n",
            "backjumps": lambda: f"{self.backward_jump_count()}\n",
            "badjumps": lambda: f"{self.bad_jump_count()}\n",
            "frequent": lambda: ",".join(self.most_frequent_opcodes()) + "\n",
            "eol": lambda: "\n",
        }

    @property
    def program(self) -> ParsedProgram:
        return self._program

    # ------------------------------------------------------------------
    # Counts
    # ------------------------------------------------------------------

    def instruction_count(self) -> int:
        return len(self._program.instructions)

    def comment_count(self) -> int:
        return self._program.comment_count

    def label_count(self) -> int:
        """Number of distinct label names defined (not definitions)."""
        return len(self.label_positions)

    def opcode_group_count(self, *names: str) -> int:
        """
        Number of instructions whose opcode is any of *names*.

        Names are compared case-insensitively; repeating a name does not
        count its instructions twice.
        """
        wanted: Set[str] = {n.upper() for n in names}
        return sum(1 for i in self._program.instructions if i.opcode in wanted)

    def most_frequent_opcodes(self) -> List[str]:
        """All opcodes tied for the highest count, sorted; ``[]`` if empty."""
        counts = Counter(self._program.opcodes())
        if not counts:
            return []
        top = max(counts.values())
        return sorted(op for op, n in counts.items() if n == top)

    # ------------------------------------------------------------------
    # Jumps
    # ------------------------------------------------------------------

    def bad_jump_count(self) -> int:
        return sum(
            1 for target in self.jump_sites.values()
            if target not in self.label_positions
        )

    def forward_jump_count(self) -> int:
        return sum(
            1 for order, target in self.jump_sites.items()
            if any(pos > order for pos in self.label_positions.get(target, ()))
        )

    def backward_jump_count(self) -> int:
        return sum(
            1 for order, target in self.jump_sites.items()
            if any(pos < order for pos in self.label_positions.get(target, ()))
        )

    def undefined_targets(self) -> List[str]:
        """Sorted names of jump targets that no ``LABEL`` defines."""
        return sorted(
            {t for t in self.jump_sites.values() if t not in self.label_positions}
        )

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def compute_statistics(self, names: Iterable[str]) -> str:
        """
        Render the requested statistics, one value per line, in request order.

        ``print=TEXT`` emits *TEXT* verbatim and ``eol`` an empty line.

        Raises
        ------
        UnknownStatisticError
            For any unrecognised name.  No partial text is returned.
        """
        parts: List[str] = []
        for name in names:
            if name.startswith(PRINT_PREFIX):
                parts.append(name[len(PRINT_PREFIX):])
                continue
            metric = self._metrics.get(name)
            if metric is None:
                raise UnknownStatisticError(name)
            parts.append(metric())
        return "".join(parts)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _build_label_and_jump_maps(self) -> None:
        positions: Dict[str, Set[int]] = defaultdict(set)
        for instr in self._program.instructions:
            if not instr.args or not isinstance(instr.args[0], Label):
                continue
            target = instr.args[0].name
            if instr.opcode == LABEL_OPCODE:
                positions[target].add(instr.order)
            elif instr.opcode in JUMP_OPCODES:
                self.jump_sites[instr.order] = target

        self.label_positions = {name: frozenset(p) for name, p in positions.items()}

        for target in self.undefined_targets():
            logger.info("Jump to undefined label %r", target)
