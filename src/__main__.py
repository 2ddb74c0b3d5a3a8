#!/usr/bin/env python3
"""
minimessage - Tag markup parser for styled text

Parses messages written in <tag:arg>...</tag> markup into styled text
components and writes a report of each message's element tree and
plain text.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Input format:
    One message per line. Blank lines and lines starting with '#' are
    skipped.

Usage:
    minimessage inputdir/ outputdir/ --inputFile messages.mm

    The report is written to outputdir/ as <stem>.txt, with an optional
    <stem>.html syntax-highlighted view of the source.

Examples:
    # Basic rendering
    minimessage . output/ --inputFile messages.mm

    # With placeholders and strict parsing
    minimessage . output/ --inputFile messages.mm --placeholders names.yml --strict

    # Verbose output plus highlighted source
    minimessage . output/ --inputFile messages.mm --highlight -vv
"""

import sys
from pathlib import Path
from typing import List
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from pygments import highlight
from pygments.formatters import HtmlFormatter

from .config import appsettings
from .lib import MiniMessage, Compiler, ParsingError, StructureError, __version__, LOG, state_connectToLogger
from .lib.lexer import MiniMessageLexer
from .lib.placeholders import PlaceholderError, placeholders_load
from .models import ProgramState, ParsedMessage, pipeline, plain_text
from .models.component import component_describe


DISPLAY_TITLE = r"""
           _       _
 _ __ ___ (_)_ __ (_)_ __ ___   ___  ___ ___  __ _  __ _  ___
| '_ ` _ \| | '_ \| | '_ ` _ \ / _ \/ __/ __|/ _` |/ _` |/ _ \
| | | | | | | | | | | | | | | |  __/\__ \__ \ (_| | (_| |  __/
|_| |_| |_|_|_| |_|_|_| |_| |_|\___||___/___/\__,_|\__, |\___|
                                                   |___/
  Tag markup parser for styled text
"""

COMMENT = "#"

# Define CLI arguments
parser = ArgumentParser(
    description="minimessage - Tag markup parser for styled text",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Message file, one message per line (relative to inputdir)"
)

parser.add_argument(
    "--placeholders",
    default=None,
    type=str,
    help="YAML file mapping placeholder names to replacement text (relative to inputdir)",
)

parser.add_argument(
    "--strict",
    action="store_true",
    default=False,
    help="Reject unclosed tags and <reset> instead of recovering",
)

parser.add_argument(
    "--highlight",
    action="store_true",
    default=False,
    help="Also write a syntax-highlighted HTML view of the message file",
)

parser.add_argument(
    "--outputSubdir",
    default=".",
    type=str,
    help="Subdirectory within outputdir for the report",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Verifies that the message file and the optional placeholder file
    exist, then creates the output directory.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the message file
            - placeholdersFile: Resolved path to the placeholder file, if any
            - resultOutputdir: Created output directory path
            - envOK: True if environment is valid

    Exits:
        1 if the message file or the placeholder file is not found
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile

    if not input_file.exists():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    if state.placeholders:
        placeholders_file = state.inputdir / state.placeholders
        if not placeholders_file.exists():
            print(f"Error: Placeholder file not found: {placeholders_file}", file=sys.stderr)
            state.envOK = False
            sys.exit(1)
        state.placeholdersFile = placeholders_file
        LOG(f"Placeholder file: {placeholders_file}", level=2)

    state.resultOutputdir = state.outputdir / state.outputSubdir
    state.resultOutputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.resultOutputdir}", level=2)

    state.envOK = True
    return state


def messages_read(source: str) -> List[ParsedMessage]:
    """Split source into messages, skipping blank and comment lines"""
    messages: List[ParsedMessage] = []
    for number, line in enumerate(source.splitlines(), start=1):
        if not line.strip() or line.lstrip().startswith(COMMENT):
            continue
        messages.append(ParsedMessage(line_number=number, source=line))
    return messages


def source_parse(inputstate: ProgramState) -> ProgramState:
    """
    Read the message file and parse each message into an element tree.

    A message that fails to parse is recorded with its error; the
    remaining messages are still parsed.

    Args:
        inputstate: Program state with inputSourceFile path set

    Returns:
        ProgramState with added field:
            - parsedMessages: List[ParsedMessage] in file order

    Exits:
        1 if the message file or the placeholder file cannot be read
    """

    state = inputstate.copy()

    LOG("Reading message file...", level=1)

    try:
        source = state.inputSourceFile.read_text(encoding="utf-8")
        LOG(f"Read {len(source)} characters from {state.inputSourceFile.name}", level=2)
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    placeholders = None
    if state.placeholdersFile:
        try:
            placeholders = placeholders_load(state.placeholdersFile)
            LOG(f"Loaded {len(placeholders)} placeholders", level=2)
        except PlaceholderError as e:
            print(f"Placeholder error: {e}", file=sys.stderr)
            sys.exit(1)

    mm = MiniMessage(strict=state.strict or appsettings.strict_mode, placeholders=placeholders)

    LOG("Parsing messages...", level=1)
    state.parsedMessages = messages_read(source)
    for message in state.parsedMessages:
        try:
            message.tree = mm.deserialize_tree(message.source)
        except ParsingError as e:
            message.error = str(e)
            LOG(f"Line {message.line_number}: parse failed", level=2)
    LOG(f"Parsed {len(state.parsedMessages)} messages", level=2)
    return state


def message_report(message: ParsedMessage) -> str:
    """Render one message's section of the report"""
    lines = [f"[line {message.line_number}] {message.source}"]
    if message.tree is not None and message.error is None:
        lines.append(str(message.tree).rstrip("\n"))
        try:
            component = Compiler(message.tree).compile()
            lines.append(component_describe(component))
            lines.append(f"plain: {plain_text(component)}")
        except StructureError as e:
            message.error = str(e)
    if message.error is not None:
        lines.append(f"error: {message.error}")
    return "\n".join(lines) + "\n"


def messages_render(inputstate: ProgramState) -> ProgramState:
    """
    Compile each parsed message and write the report.

    Args:
        inputstate: Program state with parsedMessages

    Returns:
        ProgramState with added field:
            - renderResult: Dict containing:
                - output_file: str (path to the report)
                - highlight_file: Optional[str] (path to the HTML view)
                - message_count: int
                - failures: int (messages with an error)

    Exits:
        1 if parsedMessages is None or the report cannot be written
    """

    state = inputstate.copy()

    LOG("Rendering messages...", level=1)

    if state.parsedMessages is None:
        print("Error: No parsed messages available", file=sys.stderr)
        sys.exit(1)

    report = "\n".join(message_report(message) for message in state.parsedMessages)
    stem = state.inputSourceFile.stem
    output_file = state.resultOutputdir / f"{stem}.txt"
    highlight_file = None

    try:
        output_file.write_text(report, encoding="utf-8")
        if state.highlight:
            highlight_file = state.resultOutputdir / f"{stem}.html"
            source = state.inputSourceFile.read_text(encoding="utf-8")
            html = highlight(source, MiniMessageLexer(), HtmlFormatter(full=True, title=stem))
            highlight_file.write_text(html, encoding="utf-8")
    except OSError as e:
        print(f"Error writing output: {e}", file=sys.stderr)
        sys.exit(1)

    state.renderResult = {
        "output_file": str(output_file),
        "highlight_file": str(highlight_file) if highlight_file else None,
        "message_count": len(state.parsedMessages),
        "failures": sum(1 for message in state.parsedMessages if message.error is not None),
    }
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display rendering results to user.

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if renderResult is None or any message failed
    """
    state: ProgramState = inputstate.copy()
    if not state.renderResult:
        print("Error: Rendering failed", file=sys.stderr)
        sys.exit(1)

    LOG(f"  Output: {state.renderResult['output_file']}", level=1)
    if state.renderResult["highlight_file"]:
        LOG(f"  Highlighted: {state.renderResult['highlight_file']}", level=1)
    LOG(f"  Messages: {state.renderResult['message_count']}", level=1)

    if state.renderResult["failures"]:
        for message in state.parsedMessages or []:
            if message.error is not None:
                print(f"Line {message.line_number}: {message.error}", file=sys.stderr)
        print(f"Error: {state.renderResult['failures']} message(s) failed", file=sys.stderr)
        sys.exit(1)
    return state


@chris_plugin(
    parser=parser,
    title="minimessage - Tag markup parser for styled text",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - parse a message file and write its report.

    Orchestrates the full pipeline:
        1. env_check: Validate paths and environment
        2. source_parse: Read and parse each message to an element tree
        3. messages_render: Compile trees and write the report
        4. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing the message file
        outputdir: Directory where the report will be written
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    pipeline(state, env_check, source_parse, messages_render, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
