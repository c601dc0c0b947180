"""
Tests for XMLSerializer.

The rendered document is re-read with ElementTree to check that opcode,
order and every argument's type and value survive.
"""
from __future__ import annotations

import textwrap
import xml.etree.ElementTree as ET

import pytest

from ippcode_parser import SourceAnalysis
from ippcode_parser.output.xml_serializer import XMLSerializer, escape_value


@pytest.fixture
def analysis():
    return SourceAnalysis()


def _render(analysis, body: str) -> str:
    program = analysis.analyze_text(".IPPcode23\n" + textwrap.dedent(body))
    return analysis.to_xml(program)


def _root(xml: str) -> ET.Element:
    return ET.fromstring(xml.encode("utf-8"))


# ─────────────────────────────────────────────────────────────────────────────
# Document layout
# ─────────────────────────────────────────────────────────────────────────────


class TestLayout:
    def test_empty_program(self, analysis):
        xml = _render(analysis, "")
        assert xml == (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<program language="IPPcode23">\n'
            "</program>\n"
        )

    def test_exact_rendering(self, analysis):
        xml = _render(analysis, """\
            DEFVAR GF@x
            BREAK
        """)
        assert xml == (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            '<program language="IPPcode23">\n'
            '\t<instruction opcode="DEFVAR" order="1">\n'
            '\t\t<arg1 type="var">GF@x</arg1>\n'
            "\t</instruction>\n"
            '\t<instruction opcode="BREAK" order="2">\n'
            "\t</instruction>\n"
            "</program>\n"
        )

    def test_zero_argument_instruction_not_self_closing(self, analysis):
        xml = _render(analysis, "CREATEFRAME\n")
        assert "/>" not in xml
        assert len(_root(xml)[0]) == 0

    def test_custom_language(self, analysis):
        program = analysis.analyze_text(".IPPcode23\nBREAK\n")
        xml = XMLSerializer(language="Other").serialize(program)
        assert _root(xml).get("language") == "Other"

    def test_argument_positions(self, analysis):
        xml = _render(analysis, "JUMPIFEQ end GF@a int@0\n")
        instr = _root(xml)[0]
        assert [child.tag for child in instr] == ["arg1", "arg2", "arg3"]
        assert [child.get("type") for child in instr] == ["label", "var", "int"]


# ─────────────────────────────────────────────────────────────────────────────
# Escaping
# ─────────────────────────────────────────────────────────────────────────────


class TestEscaping:
    def test_escape_value(self):
        assert escape_value("<a & 'b' \"c\">") == "&lt;a &amp; &apos;b&apos; &quot;c&quot;&gt;"

    def test_string_constant_escaped(self, analysis):
        xml = _render(analysis, "WRITE string@<b>&\"'\n")
        assert '<arg1 type="string">&lt;b&gt;&amp;&quot;&apos;</arg1>' in xml

    def test_variable_name_escaped(self, analysis):
        xml = _render(analysis, "DEFVAR GF@a&b\n")
        assert '<arg1 type="var">GF@a&amp;b</arg1>' in xml

    def test_label_escaped(self, analysis):
        xml = _render(analysis, "LABEL &x\n")
        assert '<arg1 type="label">&amp;x</arg1>' in xml

    def test_escape_sequences_left_alone(self, analysis):
        xml = _render(analysis, "WRITE string@a\\032b\n")
        assert '<arg1 type="string">a\\032b</arg1>' in xml

    def test_type_written_verbatim(self, analysis):
        xml = _render(analysis, "READ GF@x bool\n")
        assert '<arg2 type="type">bool</arg2>' in xml


# ─────────────────────────────────────────────────────────────────────────────
# Structural round trip
# ─────────────────────────────────────────────────────────────────────────────


class TestRoundTrip:
    SOURCE = """\
        DEFVAR GF@a&b
        MOVE GF@a&b string@<tag>\\032"q"'x'&amp
        READ LF@in int
        JUMPIFNEQ $end GF@a&b nil@nil
        PUSHS bool@false
        PUSHS int@-0x1F
        MOVE GF@a&b string@
        LABEL $end
        RETURN
    """

    def test_round_trip(self, analysis):
        program = analysis.analyze_text(".IPPcode23\n" + textwrap.dedent(self.SOURCE))
        root = _root(analysis.to_xml(program))

        assert root.tag == "program"
        assert len(root) == len(program.instructions)
        for element, instr in zip(root, program.instructions):
            assert element.tag == "instruction"
            assert element.get("opcode") == instr.opcode
            assert int(element.get("order")) == instr.order
            assert len(element) == len(instr.args)
            for position, (child, arg) in enumerate(zip(element, instr.args), start=1):
                assert child.tag == f"arg{position}"
                assert child.get("type") == arg.type_tag
                assert (child.text or "") == arg.text
