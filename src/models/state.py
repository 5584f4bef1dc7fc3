"""
Run state for the docscheck CLI

ProgramState is the single value threaded through the CLI stages. Each stage
receives a state, copies it, fills in its own fields and returns the copy, so
stages compose with pipeline() and can be tested one at a time.
"""

import dataclasses
from argparse import Namespace
from dataclasses import dataclass, field
from functools import reduce
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar


PS = TypeVar("PS", bound="ProgramState")

Stage = Callable[["ProgramState"], "ProgramState"]


@dataclass
class ProgramState:
    """
    Everything one lint run knows, stage by stage

    Fields by the stage that sets them:
        CLI:            inputdir, outputdir, verbosity, pattern, strict
        env_check:      envOK, documentPairs
        documents_lint: lintResults
        report_write:   summary, reportFile

    Attributes:
        inputdir: Root of the documentation tree
        outputdir: Where reports are written, mirroring inputdir's layout
        verbosity: LOG() threshold (1-3)
        pattern: Glob of documents to lint, relative to inputdir
        strict: Warnings fail the run as well as errors
        envOK: Input exists and output is writable
        documentPairs: (document, report path) per matched document
        lintResults: Diagnostics keyed by document path relative to inputdir
        summary: Diagnostic count per severity value
        reportFile: Summary report path
    """

    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    pattern: str = field(default="**/*.md")
    strict: bool = field(default=False)

    envOK: bool = field(default=False)
    documentPairs: List[Tuple[Path, Path]] = field(default_factory=list)
    lintResults: Optional[Dict[str, List[Any]]] = field(default=None)
    summary: Optional[Dict[str, int]] = field(default=None)
    reportFile: Optional[Path] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type[PS], options: Namespace, inputdir: Path, outputdir: Path
    ) -> PS:
        """
        Build the first state of a run from parsed CLI options

        Options that are not ProgramState fields (e.g. ones added by the
        plugin wrapper) are ignored.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        options_known = {k: v for k, v in vars(options).items() if k in known}
        return cls(**{**options_known, "inputdir": inputdir, "outputdir": outputdir})

    def copy(self: PS) -> PS:
        """Shallow copy, for a stage to modify"""
        return dataclasses.replace(self)


def pipeline(initial_state: ProgramState, *stages: Stage) -> ProgramState:
    """
    Run stages left to right, each on the previous stage's result

    Example:
        pipeline(state, env_check, documents_lint)
        # same as documents_lint(env_check(state))
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
