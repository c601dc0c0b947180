"""
IPPcode23 Parser
================

A Python parser and static analyzer for IPPcode23 source.  It validates every
instruction against the language's opcode table, builds a typed instruction
sequence, renders it as the canonical XML document and computes label / jump
statistics over it.

Quick start
-----------
>>> from ippcode_parser import SourceAnalysis
>>> analysis = SourceAnalysis()
>>> program = analysis.analyze_text(".IPPcode23\\nLABEL top\\nJUMP top\\n")
>>> xml = analysis.to_xml(program)
>>> analysis.statistics(program).compute_statistics(["loc", "backjumps"])
'2\\n1\\n'
"""

from .errors import IppcodeError
from .models import (
    Argument,
    Constant,
    Instruction,
    Label,
    ParsedProgram,
    TypeName,
    Variable,
)
from .output.cfg_builder import CFGBuilder
from .output.xml_serializer import XMLSerializer
from .parser.argument_parser import ArgumentParser
from .parser.instruction_parser import InstructionParser
from .passes.line_scanner import LineScanner
from .pipeline.source_analysis import SourceAnalysis
from .stats.engine import StatisticsEngine

__version__ = "0.1.0"
__all__ = [
    "Argument",
    "ArgumentParser",
    "CFGBuilder",
    "Constant",
    "Instruction",
    "InstructionParser",
    "IppcodeError",
    "Label",
    "LineScanner",
    "ParsedProgram",
    "SourceAnalysis",
    "StatisticsEngine",
    "TypeName",
    "Variable",
    "XMLSerializer",
]
