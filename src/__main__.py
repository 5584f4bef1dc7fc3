#!/usr/bin/env python3
"""
docscheck - Validator for colon-fenced directive Markdown

Lints every Markdown document below an input directory and writes a JSON
diagnostics report per document plus a summary report.

Runs as a ChRIS plugin: the chris_plugin wrapper supplies inputdir and
outputdir, so the same entry point serves the CLI and a ChRIS compute node.

Checks:
    - Directive blocks: closing fences, names, arguments, parameters, content
    - applies_to: lifecycle syntax, version ranges, overlaps, keys
    - Frontmatter: schema fields, types, enums, products
    - Substitutions: undefined {{variables}}, literal values with a substitution

Usage:
    docscheck inputdir/ outputdir/

    For each inputdir/path/doc.md a report outputdir/path/doc.diagnostics.json
    is written, and outputdir/docscheck-report.json summarizes the run.

Examples:
    # Lint every Markdown file
    docscheck docs/ reports/

    # Only one subtree, failing on warnings too
    docscheck docs/ reports/ --pattern "reference/**/*.md" --strict

    # Verbose output
    docscheck docs/ reports/ -vv

Exit status:
    0 if no document has errors (or, with --strict, warnings), else 1
"""

import sys
import json
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter
from typing import Dict, List, Optional

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import DocumentLinter, __version__, LOG, state_connectToLogger
from .lib.substitutions import DocsetError, docset_find, docset_load
from .models import Diagnostic, ProgramState, Severity, pipeline


# Define CLI arguments
parser = ArgumentParser(
    description="docscheck - Validator for colon-fenced directive Markdown",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--pattern",
    default="**/*.md",
    type=str,
    help="Glob selecting documents to lint (relative to inputdir)",
)

parser.add_argument(
    "--strict",
    action="store_true",
    default=False,
    help="Fail on warnings as well as errors (also DOCSCHECK_STRICT_MODE)",
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
    Validate environment and pair every document with its report path.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - documentPairs: (document, report) paths, sorted by document
            - envOK: True if environment is valid

    Exits:
        1 if inputdir does not exist
    """

    state = inputstate.copy()

    LOG("Checking environment...", level=2)

    if not state.inputdir.is_dir():
        print(f"Error: Input directory not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.outputdir.mkdir(parents=True, exist_ok=True)

    documents = sorted(path for path in state.inputdir.glob(state.pattern) if path.is_file())
    state.documentPairs = [
        (document, state.outputdir / document.relative_to(state.inputdir).with_suffix(appsettings.report_suffix))
        for document in documents
    ]

    LOG(f"Input directory: {state.inputdir}", level=2)
    LOG(f"Output directory: {state.outputdir}", level=2)
    LOG(f"Found {len(state.documentPairs)} documents matching '{state.pattern}'", level=1)

    state.envOK = True
    return state


def documentSubstitutions_get(document: Path, cache: Dict[Path, Dict[str, str]]) -> Dict[str, str]:
    """
    Shared substitutions for a document from its nearest docset file.

    Exits:
        1 if the docset exists but cannot be loaded
    """
    docset: Optional[Path] = docset_find(document, appsettings.docset_filenames)
    if docset is None:
        return {}
    if docset not in cache:
        try:
            cache[docset] = docset_load(docset)
        except DocsetError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    return cache[docset]


def documents_lint(inputstate: ProgramState) -> ProgramState:
    """
    Lint every document found by env_check.

    Args:
        inputstate: Program state with documentPairs set

    Returns:
        ProgramState with added field:
            - lintResults: Diagnostics keyed by document path relative to inputdir

    Exits:
        1 if a document cannot be read
    """

    state = inputstate.copy()

    LOG("Linting documents...", level=1)

    docsets: Dict[Path, Dict[str, str]] = {}
    results: Dict[str, List[Diagnostic]] = {}

    for document, _ in state.documentPairs:
        try:
            text = document.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error reading document {document}: {e}", file=sys.stderr)
            sys.exit(1)

        linter = DocumentLinter(
            text,
            path=document,
            substitutions=documentSubstitutions_get(document, docsets),
        )
        results[str(document.relative_to(state.inputdir))] = linter.lint()

    state.lintResults = results
    return state


def severity_count(results: Dict[str, List[Diagnostic]]) -> Dict[str, int]:
    """Diagnostics per severity across all documents"""
    counts = {severity.value: 0 for severity in Severity}
    for diagnostics in results.values():
        for diagnostic in diagnostics:
            counts[diagnostic.severity.value] += 1
    return counts


def report_write(inputstate: ProgramState) -> ProgramState:
    """
    Write per-document diagnostics and the summary report.

    Args:
        inputstate: Program state with lintResults populated

    Returns:
        ProgramState with added fields:
            - summary: Diagnostic counts per severity
            - reportFile: Path of the summary report

    Exits:
        1 if lintResults is missing or a report cannot be written
    """

    state = inputstate.copy()

    if state.lintResults is None:
        print("Error: No lint results available", file=sys.stderr)
        sys.exit(1)

    LOG("Writing reports...", level=2)

    state.summary = severity_count(state.lintResults)
    state.reportFile = state.outputdir / appsettings.report_filename

    try:
        for document, report in state.documentPairs:
            key = str(document.relative_to(state.inputdir))
            report.parent.mkdir(parents=True, exist_ok=True)
            diagnostics = [d.to_dict() for d in state.lintResults.get(key, [])]
            report.write_text(json.dumps(
                {"document": key, "diagnostics": diagnostics}, indent=2
            ), encoding="utf-8")
            LOG(f"  {key}: {len(diagnostics)} diagnostics → {report}", level=2)

        state.reportFile.write_text(json.dumps({
            "version": __version__,
            "documents": {key: len(value) for key, value in state.lintResults.items()},
            "summary": state.summary,
        }, indent=2), encoding="utf-8")
    except OSError as e:
        print(f"Error writing report: {e}", file=sys.stderr)
        sys.exit(1)

    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display the run summary and set the exit status.

    Args:
        inputstate: Program state with summary populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if any error was found, or any warning in strict mode
    """
    state: ProgramState = inputstate.copy()
    if state.summary is None or state.lintResults is None:
        print("Error: Linting failed", file=sys.stderr)
        sys.exit(1)

    for key, diagnostics in state.lintResults.items():
        for diagnostic in diagnostics:
            position = f"{diagnostic.range.start_line + 1}:{diagnostic.range.start_char + 1}"
            LOG(f"{key}:{position} {diagnostic.severity.value} [{diagnostic.code}] {diagnostic.message}", level=1)

    LOG(f"\nLinted {len(state.lintResults)} documents", level=1)
    for severity, count in state.summary.items():
        LOG(f"  {severity}: {count}", level=1)
    LOG(f"  Report: {state.reportFile}", level=1)

    strict = state.strict or appsettings.strict_mode
    failed = state.summary[Severity.ERROR.value] > 0 or (
        strict and state.summary[Severity.WARNING.value] > 0
    )
    if failed:
        print("docscheck: problems found", file=sys.stderr)
        sys.exit(1)
    return state


@chris_plugin(
    parser=parser,
    title="docscheck - Directive Markdown validator",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - lint Markdown documents and write diagnostics reports.

    Orchestrates the full lint pipeline:
        1. env_check: Validate paths, pair documents with report paths
        2. documents_lint: Lint each document with its docset substitutions
        3. report_write: Write per-document and summary JSON reports
        4. results_report: Display results and set the exit status

    Args:
        options: CLI arguments from argparse
            - pattern: str - Glob selecting documents
            - strict: bool - Fail on warnings
            - verbosity: int - Logging verbosity level (1-3)
        inputdir: Directory containing Markdown documents
        outputdir: Directory where reports will be written

    Note:
        @chris_plugin parses the CLI, resolves inputdir/outputdir and
        calls this function with the results.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    # Execute lint pipeline
    pipeline(state, env_check, documents_lint, report_write, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
