"""
xml_serializer.py
=================

Render a :class:`~ippcode_parser.models.ParsedProgram` as the canonical XML
document::

    <?xml version="1.0" encoding="UTF-8"?>
    <program language="IPPcode23">
    	<instruction opcode="WRITE" order="1">
    		<arg1 type="string">a&lt;b</arg1>
    	</instruction>
    	<instruction opcode="BREAK" order="2">
    	</instruction>
    </program>

* Instructions appear in sequence order, arguments as ``arg1`` .. ``argN``.
* ``& < > " '`` inside values are replaced by entities.  ``type`` arguments
  are written verbatim since they can only be ``int``, ``bool`` or ``string``.
* An instruction without arguments is always an open/close pair with no
  children, never a self-closing tag.
"""
from __future__ import annotations

from typing import List
from xml.sax.saxutils import escape, quoteattr

from ..models import Argument, Instruction, ParsedProgram, TypeName

DEFAULT_LANGUAGE = "IPPcode23"

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_value(text: str) -> str:
    """Escape the five reserved markup characters."""
    return escape(text, _ENTITIES)


class XMLSerializer:
    """
    Stateless XML renderer.

    Parameters
    ----------
    language:
        Value of the ``language`` attribute on the root element.
    indent:
        Indentation unit for nested elements.
    """

    def __init__(self, language: str = DEFAULT_LANGUAGE, indent: str = "\t") -> None:
        self.language = language
        self.indent = indent

    def serialize(self, program: ParsedProgram) -> str:
        """Return the whole document, newline terminated."""
        lines: List[str] = [
            XML_DECLARATION,
            f"<program language={quoteattr(self.language)}>",
        ]
        for instr in program.instructions:
            lines.extend(self._instruction_lines(instr))
        lines.append("</program>")
        return "\n".join(lines) + "\n"

    # ------------------------------------------------------------------

    def _instruction_lines(self, instr: Instruction) -> List[str]:
        pad = self.indent
        lines = [f'{pad}<instruction opcode="{instr.opcode}" order="{instr.order}">']
        for position, arg in enumerate(instr.args, start=1):
            lines.append(f"{pad * 2}{self._argument_element(position, arg)}")
        lines.append(f"{pad}</instruction>")
        return lines

    @staticmethod
    def _argument_element(position: int, arg: Argument) -> str:
        value = arg.text if isinstance(arg, TypeName) else escape_value(arg.text)
        tag = f"arg{position}"
        return f'<{tag} type="{arg.type_tag}">{value}</{tag}>'
