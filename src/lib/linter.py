"""
Document linter

Runs every enabled checker over one document and merges their diagnostics.

Checkers, in merge order:
    1. directives     DirectiveParser + DirectiveValidator
    2. frontmatter    FrontmatterValidator
    3. applies_to     AppliesScanner over the document body
    4. substitutions  SubstitutionChecker

Each checker is isolated: if one raises, the exception is logged and that
checker contributes nothing, while the others still report. The merged list
is sorted stably by start position.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..config.settings import appsettings
from ..models.diagnostics import Diagnostic
from ..models.parser import ParseResult
from .appliesto import AppliesScanner
from .directives import DirectiveRegistry, DirectiveValidator
from .frontmatter import FrontmatterValidator, frontmatter_extract, frontmatter_load
from .log import LOG, LOG_exception
from .parser import DirectiveParser, lines_split
from .substitutions import SubstitutionChecker, productSubstitutions_get


class DocumentLinter:
    """
    Lints one Markdown document

    Usage:
        linter = DocumentLinter(text, path=Path("docs/index.md"))
        for diagnostic in linter.lint():
            print(diagnostic.range.start_line, diagnostic.message)
    """

    def __init__(
        self,
        text: str,
        path: Optional[Path] = None,
        substitutions: Optional[Mapping[str, Any]] = None,
        registry: Optional[DirectiveRegistry] = None,
    ):
        """
        Args:
            text: Full document text
            path: Document path, used for log messages only
            substitutions: Shared substitutions (e.g. from a docset). They are
                layered over the built-in `product.<id>` names, and the
                frontmatter `sub:` mapping is layered over them
            registry: Directive registry, defaults to the built-in directives
        """
        self.text = text
        self.path = path
        self.lines = lines_split(text)
        self.registry = registry if registry is not None else DirectiveRegistry()
        self.substitutions: Dict[str, Any] = dict(substitutions or {})

        frontmatter = frontmatter_extract(self.lines)
        self.body_start = frontmatter.end_line + 1 if frontmatter else 0
        self.parsed: Optional[ParseResult] = None

    def lint(self) -> List[Diagnostic]:
        """
        Run all enabled checkers

        Returns:
            Diagnostics sorted by (line, character); equal positions keep
            checker order
        """
        name = str(self.path) if self.path else "<text>"
        LOG(f"Linting {name}", level=2)

        checkers: List[Callable[[], List[Diagnostic]]] = []
        if appsettings.validate_directives:
            checkers.append(self.directives_check)
        if appsettings.validate_frontmatter:
            checkers.append(self.frontmatter_check)
        if appsettings.validate_applies_to:
            checkers.append(self.appliesTo_check)
        if appsettings.validate_substitutions:
            checkers.append(self.substitutions_check)

        diagnostics: List[Diagnostic] = []
        for checker in checkers:
            diagnostics.extend(self.checker_run(checker))

        diagnostics.sort(key=lambda d: (d.range.start_line, d.range.start_char))
        LOG(f"{name}: {len(diagnostics)} diagnostics", level=2)
        return diagnostics

    def checker_run(self, checker: Callable[[], List[Diagnostic]]) -> List[Diagnostic]:
        try:
            return checker()
        except Exception:
            LOG_exception(f"Checker {checker.__name__} failed on {self.path or '<text>'}")
            return []

    def parse_result(self) -> ParseResult:
        """Directive blocks, parsed once and shared between checkers"""
        if self.parsed is None:
            self.parsed = DirectiveParser(self.text).parse()
        return self.parsed

    def directives_check(self) -> List[Diagnostic]:
        return DirectiveValidator(self.registry).blocks_validate(self.parse_result().blocks)

    def frontmatter_check(self) -> List[Diagnostic]:
        return FrontmatterValidator(self.lines).validate()

    def appliesTo_check(self) -> List[Diagnostic]:
        scanner = AppliesScanner(self.lines, self.parse_result().blocks, self.body_start)
        return scanner.scan()

    def substitutions_check(self) -> List[Diagnostic]:
        substitutions = productSubstitutions_get()
        substitutions.update(self.substitutions)
        local = frontmatter_load(self.lines).get('sub')
        if isinstance(local, dict):
            substitutions.update(local)
        return SubstitutionChecker(self.lines, substitutions, self.body_start).check()
