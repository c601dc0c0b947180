"""
cfg_builder.py
==============

Build and render an instruction-level **Control Flow Graph** (CFG) of a
:class:`~ippcode_parser.models.ParsedProgram` as a :class:`networkx.DiGraph`.

Graph semantics
---------------
* **Nodes** – one per instruction, keyed by its order, plus one ``missing``
  node per jump target that no ``LABEL`` defines.
* **Edges**

  ==========  =============================================================
  Kind        Meaning
  ==========  =============================================================
  ``next``    Fall-through to the following instruction (not emitted after
              ``JUMP``, ``RETURN`` or ``EXIT``).
  ``jump``    ``JUMP`` / ``JUMPIFEQ`` / ``JUMPIFNEQ`` to a label definition.
  ``call``    ``CALL`` to a label definition.
  ==========  =============================================================

  Jump and call edges carry ``direction``: ``forward``, ``backward`` or
  ``bad`` (target undefined).

* **Color coding**

  ===========  =======  ============================================
  Status       Color    Meaning
  ===========  =======  ============================================
  ``entry``    Blue     First instruction of the program.
  ``label``    Green    ``LABEL`` definition.
  ``jump``     Orange   Jump or call site.
  ``plain``    Grey     Any other instruction.
  ``missing``  Red      Target label referenced but never defined.
  ===========  =======  ============================================

Outputs
-------
* **DOT** (Graphviz) – renderable with ``dot -Tsvg -o out.svg graph.dot``.
* **JSON** – machine-readable graph for web renderers or further processing.
* **Mermaid** – embeddable in GitHub Markdown / Notion / Confluence.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Set

import networkx as nx

from ..models import Instruction, Label, ParsedProgram
from ..parser.instruction_table import JUMP_OPCODES, LABEL_OPCODE, TERMINATOR_OPCODES

# ---------------------------------------------------------------------------
# Colour + shape constants
# ---------------------------------------------------------------------------

_FILL = {
    "entry":   "#2E86AB",   # steel blue
    "label":   "#27AE60",   # emerald green
    "jump":    "#E67E22",   # carrot orange
    "plain":   "#7F8C8D",   # asbestos grey
    "missing": "#E74C3C",   # alizarin red
}
_DOT_SHAPE = {
    "entry":   "doubleoctagon",
    "label":   "cds",
    "jump":    "box",
    "plain":   "box",
    "missing": "box",
}
_EDGE_COLOR = {
    "next": "#444444",
    "jump": "#E67E22",
    "call": "#2E86AB",
}


def _missing_id(label: str) -> str:
    return f"missing:{label}"


def _describe(instr: Instruction) -> str:
    args = " ".join(a.text for a in instr.args)
    return f"{instr.order}: {instr.opcode} {args}".rstrip()


# ---------------------------------------------------------------------------
# CFGBuilder
# ---------------------------------------------------------------------------


class CFGBuilder:
    """Build a :class:`networkx.DiGraph` from a parsed program and render it."""

    def build(self, program: ParsedProgram) -> nx.DiGraph:
        """
        Build the instruction-level graph.

        Node ids are instruction orders (``int``) and ``"missing:<label>"``
        strings for undefined targets.
        """
        graph = nx.DiGraph(source=program.source_name)
        instructions = program.instructions

        definitions: Dict[str, List[int]] = {}
        for instr in instructions:
            if instr.opcode == LABEL_OPCODE:
                definitions.setdefault(instr.args[0].text, []).append(instr.order)

        for index, instr in enumerate(instructions):
            if index == 0:
                status = "entry"
            elif instr.opcode == LABEL_OPCODE:
                status = "label"
            elif instr.opcode in JUMP_OPCODES:
                status = "jump"
            else:
                status = "plain"
            graph.add_node(
                instr.order,
                label=_describe(instr),
                opcode=instr.opcode,
                status=status,
            )

        for index, instr in enumerate(instructions):
            if index + 1 < len(instructions) and instr.opcode not in TERMINATOR_OPCODES:
                graph.add_edge(instr.order, instructions[index + 1].order, kind="next")

            if instr.opcode not in JUMP_OPCODES or not isinstance(instr.args[0], Label):
                continue

            target = instr.args[0].name
            kind = "call" if instr.opcode == "CALL" else "jump"
            targets = definitions.get(target)
            if not targets:
                node_id = _missing_id(target)
                if node_id not in graph:
                    graph.add_node(node_id, label=target, opcode="", status="missing")
                graph.add_edge(instr.order, node_id, kind=kind, direction="bad")
                continue
            for dest in targets:
                direction = "forward" if dest > instr.order else "backward"
                graph.add_edge(instr.order, dest, kind=kind, direction=direction)

        return graph

    @staticmethod
    def unreachable(graph: nx.DiGraph) -> List[int]:
        """Orders of instructions that cannot be reached from the first one."""
        orders = sorted(n for n in graph.nodes if isinstance(n, int))
        if not orders:
            return []
        reached: Set[Any] = nx.descendants(graph, orders[0]) | {orders[0]}
        return [o for o in orders if o not in reached]

    # ------------------------------------------------------------------
    # DOT (Graphviz) renderer
    # ------------------------------------------------------------------

    def to_dot(self, graph: nx.DiGraph, title: str = "") -> str:
        """Render *graph* as a Graphviz DOT string."""
        title = title or f"{graph.graph.get('source', 'program')} Control Flow Graph"
        lines: List[str] = [
            'digraph "IPPcode23_CFG" {',
            f'    label="{_dot_escape(title)}";',
            '    labelloc=t;',
            '    rankdir=TB;',
            '    node [fontname="Courier New", fontsize=11, margin="0.2,0.1"];',
            '    edge [fontname="Courier New", fontsize=9];',
            '',
        ]

        for node_id, data in graph.nodes(data=True):
            status = data["status"]
            node_label = _dot_escape(data["label"])
            if status == "missing":
                node_label += "\\n[NOT DEFINED]"
            style = "filled,dashed" if status == "missing" else "filled"
            lines.append(
                f'    "{_dot_escape(str(node_id))}" [label="{node_label}", '
                f'shape={_DOT_SHAPE[status]}, style="{style}", '
                f'fillcolor="{_FILL[status]}", fontcolor="white"];'
            )

        lines.append('')

        for src, dest, data in graph.edges(data=True):
            kind = data["kind"]
            attrs = [f'color="{_EDGE_COLOR[kind]}"']
            if kind != "next":
                attrs.append(f'label="{kind} ({data["direction"]})"')
            if data.get("direction") == "bad":
                attrs.append("style=dashed")
            lines.append(
                f'    "{_dot_escape(str(src))}" -> "{_dot_escape(str(dest))}" '
                f'[{", ".join(attrs)}];'
            )

        lines.append('}')
        return '\n'.join(lines) + '\n'

    # ------------------------------------------------------------------
    # JSON renderer
    # ------------------------------------------------------------------

    def to_json(self, graph: nx.DiGraph) -> Dict[str, Any]:
        """Render *graph* as a JSON-serialisable dictionary."""
        return {
            "source": graph.graph.get("source", ""),
            "nodes": [
                {
                    "id": node_id,
                    "label": data["label"],
                    "opcode": data["opcode"],
                    "status": data["status"],
                    "color": _FILL[data["status"]],
                }
                for node_id, data in graph.nodes(data=True)
            ],
            "edges": [
                {
                    "from": src,
                    "to": dest,
                    "kind": data["kind"],
                    "direction": data.get("direction", ""),
                    "color": _EDGE_COLOR[data["kind"]],
                }
                for src, dest, data in graph.edges(data=True)
            ],
            "unreachable": self.unreachable(graph),
        }

    def to_json_str(self, graph: nx.DiGraph, indent: int = 2) -> str:
        """Return *graph* serialised to a JSON string."""
        return json.dumps(self.to_json(graph), indent=indent)

    # ------------------------------------------------------------------
    # Mermaid renderer
    # ------------------------------------------------------------------

    def to_mermaid(self, graph: nx.DiGraph, title: str = "") -> str:
        """
        Render *graph* as a Mermaid flowchart (embeddable in GitHub Markdown).

        Colour coding uses ``classDef`` directives.
        """
        title = title or f"{graph.graph.get('source', 'program')} Control Flow Graph"
        lines: List[str] = [
            "---",
            f'title: "{title}"',
            "---",
            "flowchart TD",
        ]

        for node_id, data in graph.nodes(data=True):
            lbl = data["label"].replace('"', "'")
            if data["status"] == "missing":
                lbl += "\\nNOT DEFINED"
            lines.append(f'    {_mermaid_id(node_id)}["{lbl}"]:::{data["status"]}')

        lines.append('')

        for src, dest, data in graph.edges(data=True):
            kind = data["kind"]
            if kind == "next":
                lines.append(f"    {_mermaid_id(src)} --> {_mermaid_id(dest)}")
            elif data["direction"] == "bad":
                lines.append(f'    {_mermaid_id(src)} -.->|"{kind}"| {_mermaid_id(dest)}')
            else:
                lines.append(f'    {_mermaid_id(src)} ==>|"{kind}"| {_mermaid_id(dest)}')

        lines.append('')
        for status, colour in _FILL.items():
            lines.append(f"    classDef {status} fill:{colour},color:#fff")

        return '\n'.join(lines) + '\n'


def _dot_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"')


def _mermaid_id(node_id: Any) -> str:
    if isinstance(node_id, int):
        return f"I{node_id}"
    name = str(node_id).split(":", 1)[1]
    return "M_" + "".join(c if c.isalnum() else f"_{ord(c):x}_" for c in name)
