"""
Directive registry and block validation

DirectiveRegistry gives read-only name lookup over the static DIRECTIVES data.
DirectiveValidator checks one parsed DirectiveBlock against it and returns
diagnostics.
"""

from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional

from ..models.diagnostics import Diagnostic, DiagnosticCode, Severity
from ..models.directives import DIRECTIVES, DirectiveDefinition
from ..models.parser import DirectiveBlock
from .log import LOG

SOURCE = "directives"


class DirectiveRegistry:
    """
    Registry of directive definitions

    Maps directive names to DirectiveDefinition records. Built from the static
    DIRECTIVES tuple unless another set of definitions is given.
    """

    def __init__(self, definitions: Optional[Iterable[DirectiveDefinition]] = None) -> None:
        """Index the definitions by name"""
        if definitions is None:
            definitions = DIRECTIVES
        self.specs: Mapping[str, DirectiveDefinition] = MappingProxyType(
            {definition.name: definition for definition in definitions}
        )

    def get(self, name: str) -> Optional[DirectiveDefinition]:
        """Get a directive definition by name, or None if unknown"""
        return self.specs.get(name)

    def names_list(self) -> List[str]:
        """All registered directive names, in registration order"""
        return list(self.specs)

    def __contains__(self, name: object) -> bool:
        return name in self.specs

    def __len__(self) -> int:
        return len(self.specs)


class DirectiveValidator:
    """
    Validates directive blocks against a registry

    Rules, all applied in order:
    1. No closing fence: one error, nothing else is checked
    2. Opening/closing colon counts differ: error
    3. Unknown directive name: warning
    4. Required argument missing: error
    5. Unknown parameter: one warning per parameter
    6. Content shape rule (e.g. button content must be a Markdown link): error
    7. Malformed opening: error, worded per malformation
    """

    def __init__(self, registry: Optional[DirectiveRegistry] = None) -> None:
        self.registry = registry if registry is not None else DirectiveRegistry()

    def blocks_validate(self, blocks: Iterable[DirectiveBlock]) -> List[Diagnostic]:
        """Validate every block, concatenating diagnostics in block order"""
        diagnostics: List[Diagnostic] = []
        for block in blocks:
            diagnostics.extend(self.block_validate(block))
        return diagnostics

    def block_validate(self, block: DirectiveBlock) -> List[Diagnostic]:
        """
        Validate one directive block

        Args:
            block: A block produced by DirectiveParser

        Returns:
            Diagnostics for this block, in rule order

        Example:
            For ":::{dropdown}\\ntext\\n:::" (no argument):
            [Diagnostic(code="missing_argument", severity=ERROR, ...)]
        """
        diagnostics: List[Diagnostic] = []

        if not block.is_closed:
            diagnostics.append(Diagnostic(
                range=block.opening_range,
                message=f"Missing closing directive. Expected {':' * block.opening_colons}",
                severity=Severity.ERROR,
                code=DiagnosticCode.MISSING_CLOSING_DIRECTIVE,
                source=SOURCE,
            ))
            return diagnostics

        if block.opening_colons != block.closing_colons:
            diagnostics.append(Diagnostic(
                range=block.closing_range or block.opening_range,
                message=(
                    f"Mismatched colon count. Opening has {block.opening_colons} colons, "
                    f"closing has {block.closing_colons}"
                ),
                severity=Severity.ERROR,
                code=DiagnosticCode.MISMATCHED_COLON_COUNT,
                source=SOURCE,
            ))

        definition = self.registry.get(block.name)
        if definition is None:
            diagnostics.append(Diagnostic(
                range=block.name_range,
                message=f"Unknown directive '{block.name}'",
                severity=Severity.WARNING,
                code=DiagnosticCode.UNKNOWN_DIRECTIVE,
                source=SOURCE,
            ))
        else:
            diagnostics.extend(self.definition_check(block, definition))

        if block.is_malformed:
            if block.missing_closing_brace:
                message = 'Malformed directive opening. Missing closing brace }'
                code = DiagnosticCode.MALFORMED_MISSING_BRACE
            else:
                message = 'Malformed directive opening. Expected :::{name} format with braces'
                code = DiagnosticCode.MALFORMED_MISSING_BRACES
            diagnostics.append(Diagnostic(
                range=block.opening_range,
                message=message,
                severity=Severity.ERROR,
                code=code,
                source=SOURCE,
            ))

        LOG(f"Directive '{block.name}': {len(diagnostics)} diagnostics", level=3)
        return diagnostics

    def definition_check(
        self, block: DirectiveBlock, definition: DirectiveDefinition
    ) -> List[Diagnostic]:
        """Rules that need the registry entry: argument, parameters, content shape"""
        diagnostics: List[Diagnostic] = []

        if definition.has_argument and not block.argument:
            diagnostics.append(Diagnostic(
                range=block.opening_range,
                message=f"Directive '{block.name}' requires an argument",
                severity=Severity.ERROR,
                code=DiagnosticCode.MISSING_ARGUMENT,
                source=SOURCE,
            ))

        for parameter in block.parameters:
            if parameter.name not in definition.parameters:
                diagnostics.append(Diagnostic(
                    range=parameter.range,
                    message=f"Unknown parameter '{parameter.name}' for directive '{block.name}'",
                    severity=Severity.WARNING,
                    code=DiagnosticCode.UNKNOWN_PARAMETER,
                    source=SOURCE,
                ))

        if definition.content_pattern is not None:
            content = '\n'.join(line.strip() for line in block.content if line.strip())
            if not definition.content_pattern.fullmatch(content):
                diagnostics.append(Diagnostic(
                    range=block.opening_range,
                    message=(
                        f"Directive '{block.name}' content must be exactly "
                        f"{definition.content_hint or definition.content_pattern.pattern}"
                    ),
                    severity=Severity.ERROR,
                    code=DiagnosticCode.INVALID_DIRECTIVE_CONTENT,
                    source=SOURCE,
                ))

        return diagnostics
