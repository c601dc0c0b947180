"""
IPPcode23 Parser – command-line interface
=========================================

Usage
-----
::

    python -m ippcode_parser.cli [OPTIONS] [--stats=FILE --STAT ...]...

Options
-------
--source, -i          IPPcode23 source file (default: stdin).
--output, -o          Output file for the program document (default: stdout).
--format, -f          Output format: ``xml`` (default) or ``json``.
--cfg FILE            Also write the control flow graph to FILE.
--cfg-format          CFG format: dot (default), json, or mermaid.
--verbose, -v         Enable DEBUG logging.
--help, -h            Show help; must be the only argument.

Statistics
----------
Each ``--stats=FILE`` starts a group; every following ``--NAME`` up to the
next ``--stats=`` is written to FILE in order:

``--loc --comments --labels --jumps --fwjumps --backjumps --badjumps
--frequent --eol --print=TEXT``

Options must come before the first ``--stats=`` group.

Exit codes
----------
0 success, 10 bad parameters / unknown statistic, 11 input file error,
12 output file error, 21 missing header, 22 unknown opcode, 23 other
lexical or syntax error.

Examples
--------
::

    python -m ippcode_parser.cli < prog.ippcode
    python -m ippcode_parser.cli -i prog.ippcode -o prog.xml --stats=s.txt --loc --jumps
    python -m ippcode_parser.cli -i prog.ippcode --cfg cfg.dot --cfg-format dot
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Tuple

from .errors import InputOpenError, IppcodeError, OutputOpenError, ParameterError
from .output.cfg_builder import CFGBuilder
from .pipeline.source_analysis import SourceAnalysis

STATS_PREFIX = "--stats="

StatsGroup = Tuple[str, List[str]]


class _ArgumentParser(argparse.ArgumentParser):
    """Reports usage errors as :class:`ParameterError` instead of exiting."""

    def error(self, message: str) -> NoReturn:
        raise ParameterError(message)


def _build_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(
        prog="ippcode_parser",
        description=(
            "IPPcode23 Parser – validate IPPcode23 source read from stdin "
            "and emit its XML representation"
        ),
        epilog=(
            "Statistics: --stats=FILE followed by any of --loc --comments "
            "--labels --jumps --fwjumps --backjumps --badjumps --frequent "
            "--eol --print=TEXT"
        ),
    )
    p.add_argument(
        "--source", "-i",
        default="-",
        metavar="FILE",
        help="IPPcode23 source file (default: stdin)",
    )
    p.add_argument(
        "--output", "-o",
        default="-",
        metavar="FILE",
        help="Output file (default: stdout)",
    )
    p.add_argument(
        "--format", "-f",
        choices=["xml", "json"],
        default="xml",
        help="Output format (default: xml)",
    )
    p.add_argument(
        "--cfg",
        default="",
        metavar="FILE",
        help="Also write the instruction-level control flow graph to FILE",
    )
    p.add_argument(
        "--cfg-format",
        choices=["dot", "json", "mermaid"],
        default="dot",
        metavar="FMT",
        help="CFG output format when --cfg is set: dot (default), json, or mermaid",
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    return p


def _split_stats_groups(argv: List[str]) -> Tuple[List[str], List[StatsGroup]]:
    """
    Separate ``--stats=FILE`` groups from the ordinary options.

    Returns the ordinary options and an ordered list of ``(file, names)``.
    """
    options: List[str] = []
    groups: List[StatsGroup] = []
    seen: set[str] = set()

    i = 0
    while i < len(argv):
        arg = argv[i]
        if not arg.startswith(STATS_PREFIX):
            if groups:
                raise ParameterError(f"Unknown parameter: {arg}")
            options.append(arg)
            i += 1
            continue

        file_name = arg[len(STATS_PREFIX):]
        if not file_name:
            raise ParameterError("--stats= requires a file name")
        if file_name in seen:
            raise OutputOpenError(
                f"Cannot write more than one group of statistics to the same file! ({file_name})"
            )
        seen.add(file_name)

        names: List[str] = []
        i += 1
        while i < len(argv) and not argv[i].startswith(STATS_PREFIX):
            if not argv[i].startswith("--"):
                raise ParameterError(f"Unknown parameter: {argv[i]}")
            names.append(argv[i][2:])
            i += 1
        groups.append((file_name, names))

    return options, groups


def _write_output(destination: str, text: str, what: str) -> None:
    if destination == "-":
        sys.stdout.write(text)
        return
    try:
        Path(destination).write_text(text, encoding="utf-8")
    except OSError as exc:
        raise OutputOpenError(f"Unable to write {what} to {destination}: {exc}") from exc
    print(f"{what} written to {destination}", file=sys.stderr)


def _run(argv: List[str]) -> int:
    if "--help" in argv or "-h" in argv:
        if len(argv) > 1:
            raise ParameterError("--help cannot be used with any other parameters!")

    options, groups = _split_stats_groups(argv)
    args = _build_parser().parse_args(options)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    analysis = SourceAnalysis()
    if args.source == "-":
        try:
            program = analysis.analyze_lines(sys.stdin, source_name="<stdin>")
        except UnicodeDecodeError as exc:
            raise InputOpenError(f"Unable to read standard input: {exc}") from exc
    else:
        program = analysis.analyze_file(args.source)

    # Every statistics group is rendered before anything is written so that
    # an unknown statistic leaves no partial output behind.
    engine = analysis.statistics(program)
    rendered = [(file_name, engine.compute_statistics(names)) for file_name, names in groups]

    if args.format == "json":
        output_text = json.dumps(program.to_dict(), indent=2) + "\n"
    else:
        output_text = analysis.to_xml(program)
    _write_output(args.output, output_text, "Output")

    if args.cfg:
        builder = CFGBuilder()
        graph = builder.build(program)
        fmt = args.cfg_format
        if fmt == "mermaid":
            cfg_text = builder.to_mermaid(graph)
        elif fmt == "json":
            cfg_text = builder.to_json_str(graph) + "\n"
        else:
            cfg_text = builder.to_dot(graph)
        _write_output(args.cfg, cfg_text, "CFG")

    for file_name, text in rendered:
        _write_output(file_name, text, "Statistics")

    return 0


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    try:
        return _run(list(argv))
    except IppcodeError as exc:
        print(f"error: {exc.message}", file=sys.stderr)
        return exc.exit_code


if __name__ == "__main__":
    sys.exit(main())
