"""
Frontmatter validation

The frontmatter is the YAML block between a first-line `---` and the next
`---` line. It is loaded with yaml.safe_load and checked against the
FRONTMATTER_FIELDS schema, the applies_to key space and the product ids.

YAML gives values but no positions, so diagnostics are placed by locating
the key text again inside the frontmatter lines (FrontmatterLocator).
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import yaml

from ..config.settings import appsettings
from ..models.diagnostics import Diagnostic, DiagnosticCode, Severity, SourceRange
from ..models.frontmatter import FRONTMATTER_FIELDS, PRODUCT_IDS
from .appliesto import appliesKey_validate, appliesValue_validate, nestedKey_validate
from .log import LOG

SOURCE = "frontmatter"

FENCE_PATTERN = re.compile(r'^---\s*$')

PYTHON_TYPES = {
    'string': str,
    'array': list,
    'object': dict,
}


@dataclass(frozen=True)
class Frontmatter:
    """
    Location and text of a frontmatter block

    Attributes:
        range: From the opening fence to the start of the closing fence
        start_line: First line after the opening fence
        end_line: Line of the closing fence
        text: The YAML between the fences
    """
    range: SourceRange
    start_line: int
    end_line: int
    text: str


def frontmatter_extract(lines: List[str]) -> Optional[Frontmatter]:
    """
    Find the frontmatter block

    Returns:
        Frontmatter, or None if line 0 is not `---` or there is no closing fence
    """
    if len(lines) < 2 or not FENCE_PATTERN.match(lines[0]):
        return None

    for index in range(1, len(lines)):
        if FENCE_PATTERN.match(lines[index]):
            return Frontmatter(
                range=SourceRange(0, 0, index, 0),
                start_line=1,
                end_line=index,
                text='\n'.join(lines[1:index]),
            )
    return None


def frontmatter_load(lines: List[str]) -> Dict[str, Any]:
    """
    Parsed frontmatter mapping, or {} when absent, invalid or not a mapping

    For callers that only need values (e.g. the `sub:` mapping) and leave
    reporting to FrontmatterValidator.
    """
    frontmatter = frontmatter_extract(lines)
    if frontmatter is None:
        return {}
    try:
        data = yaml.safe_load(frontmatter.text)
    except yaml.YAMLError as error:
        LOG(f"Frontmatter not loadable: {error}", level=3)
        return {}
    return data if isinstance(data, dict) else {}


class FrontmatterLocator:
    """Finds key and value positions inside the frontmatter lines"""

    def __init__(self, lines: List[str], frontmatter: Frontmatter):
        self.lines = lines
        self.start = frontmatter.start_line
        self.end = frontmatter.end_line
        self.fallback = SourceRange.point(frontmatter.start_line)

    def key_line(self, key: str, after: Optional[int] = None) -> Optional[int]:
        """First line at or after `after` where `key:` appears"""
        pattern = re.compile(rf'^\s*(?:-\s+)?{re.escape(key)}\s*:')
        for index in range(after if after is not None else self.start, self.end):
            if pattern.match(self.lines[index]):
                return index
        return None

    def key_range(self, key: str, after: Optional[int] = None) -> SourceRange:
        line = self.key_line(key, after)
        if line is None:
            return self.fallback
        text = self.lines[line]
        start = text.index(key, len(text) - len(text.lstrip()))
        return SourceRange(line, start, line, start + len(key))

    def value_range(self, key: str, after: Optional[int] = None) -> SourceRange:
        """Range of the inline value after `key:`, or the key itself when the value is on later lines"""
        line = self.key_line(key, after)
        if line is None:
            return self.fallback
        text = self.lines[line]
        colon = text.index(':', text.index(key))
        rest = text[colon + 1:]
        value = rest.strip()
        if not value:
            return self.key_range(key, after)
        start = colon + 1 + (len(rest) - len(rest.lstrip()))
        return SourceRange(line, start, line, start + len(value))

    def item_range(self, key: str, index: int) -> SourceRange:
        """Range of the index-th `- ` item under a block sequence key"""
        line = self.key_line(key)
        if line is None:
            return self.fallback
        seen = 0
        for number in range(line + 1, self.end):
            text = self.lines[number]
            if text.lstrip().startswith('-'):
                if seen == index:
                    return SourceRange.line_span(number, text)
                seen += 1
        return self.key_range(key)


class FrontmatterValidator:
    """
    Validates a document's frontmatter

    Usage:
        diagnostics = FrontmatterValidator(lines).validate()
    """

    def __init__(self, lines: List[str]):
        self.lines = lines
        self.frontmatter = frontmatter_extract(lines)
        self.diagnostics: List[Diagnostic] = []

    def error_add(self, range: SourceRange, message: str, code: str,
                  severity: Severity = Severity.ERROR) -> None:
        self.diagnostics.append(Diagnostic(
            range=range, message=message, severity=severity, code=code, source=SOURCE,
        ))

    def validate(self) -> List[Diagnostic]:
        """
        Run every frontmatter check

        A document without frontmatter gets no diagnostics. Invalid YAML gets a
        single yaml_syntax_error over the whole block and nothing else.
        """
        self.diagnostics = []
        if self.frontmatter is None:
            return self.diagnostics

        try:
            data = yaml.safe_load(self.frontmatter.text)
        except yaml.YAMLError as error:
            problem = getattr(error, 'problem', None) or str(error)
            self.error_add(
                self.frontmatter.range,
                f"Invalid YAML syntax: {problem}",
                DiagnosticCode.YAML_SYNTAX_ERROR,
            )
            return self.diagnostics

        if data is None:
            data = {}
        if not isinstance(data, dict):
            self.error_add(
                self.frontmatter.range,
                f"Frontmatter must be a mapping of fields, found {type(data).__name__}",
                DiagnosticCode.TYPE_ERROR,
            )
            return self.diagnostics

        locator = FrontmatterLocator(self.lines, self.frontmatter)

        self.required_check(data)
        for name, value in data.items():
            self.field_check(str(name), value, locator)

        applies_to = data.get('applies_to')
        if isinstance(applies_to, dict):
            self.appliesTo_check(applies_to, locator)

        products = data.get('products')
        if isinstance(products, list):
            self.products_check(products, locator)

        LOG(f"Frontmatter: {len(self.diagnostics)} diagnostics", level=3)
        return self.diagnostics

    def required_check(self, data: Dict[str, Any]) -> None:
        if appsettings.require_applies_to and not data.get('applies_to'):
            self.error_add(
                SourceRange.point(self.frontmatter.start_line),
                'Missing required field: applies_to',
                DiagnosticCode.MISSING_REQUIRED_FIELD,
            )

    def field_check(self, name: str, value: Any, locator: FrontmatterLocator) -> None:
        """Schema checks for one top-level field: known, type, enum, length"""
        schema = FRONTMATTER_FIELDS.get(name)
        if schema is None:
            self.error_add(
                locator.key_range(name),
                f"Unknown field: {name}",
                DiagnosticCode.UNKNOWN_FIELD,
                Severity.WARNING,
            )
            return

        expected = PYTHON_TYPES.get(schema.type)
        if expected is not None and value is not None and not isinstance(value, expected):
            self.error_add(
                locator.value_range(name),
                f"Expected {schema.type} value for field: {name}",
                DiagnosticCode.TYPE_ERROR,
            )
            return

        if schema.enum is not None and value not in schema.enum:
            self.error_add(
                locator.value_range(name),
                f"Invalid value '{value}' for field '{name}'. Expected one of: {', '.join(schema.enum)}",
                DiagnosticCode.INVALID_ENUM_VALUE,
            )

        if schema.max_length is not None and isinstance(value, str) and len(value) > schema.max_length:
            self.error_add(
                locator.value_range(name),
                f"Field '{name}' exceeds maximum length of {schema.max_length} characters",
                DiagnosticCode.MAX_LENGTH_EXCEEDED,
                Severity.WARNING,
            )

    def appliesTo_check(self, applies_to: Dict[Any, Any], locator: FrontmatterLocator) -> None:
        """Keys, nested keys and lifecycle values under applies_to"""
        section = locator.key_line('applies_to')
        for raw_key, value in applies_to.items():
            key = str(raw_key)
            key_line = locator.key_line(key, section)
            self.diagnostics.extend(appliesKey_validate(key, locator.key_range(key, section)))

            if isinstance(value, dict):
                for raw_nested, nested_value in value.items():
                    nested = str(raw_nested)
                    self.diagnostics.extend(
                        nestedKey_validate(key, nested, locator.key_range(nested, key_line))
                    )
                    if nested_value is not None:
                        self.diagnostics.extend(appliesValue_validate(
                            str(nested_value), locator.value_range(nested, key_line)
                        ))
            elif value is not None:
                self.diagnostics.extend(
                    appliesValue_validate(str(value), locator.value_range(key, section))
                )

    def products_check(self, products: List[Any], locator: FrontmatterLocator) -> None:
        """Each item must be a mapping with a known `id`"""
        for index, product in enumerate(products):
            product_id = product.get('id') if isinstance(product, dict) else None
            if not isinstance(product_id, str) or not product_id:
                self.error_add(
                    locator.item_range('products', index),
                    'Product item must be an object with an "id" field',
                    DiagnosticCode.INVALID_PRODUCT_FORMAT,
                )
                continue

            if product_id not in PRODUCT_IDS:
                item = locator.item_range('products', index)
                self.error_add(
                    locator.value_range('id', item.start_line),
                    f"Invalid product ID '{product_id}'. Valid IDs: {', '.join(sorted(PRODUCT_IDS))}",
                    DiagnosticCode.INVALID_PRODUCT_ID,
                )
