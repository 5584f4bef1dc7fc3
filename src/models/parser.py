"""
Parser-specific data models

Type-safe structures for the directive block parser and its return values.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .diagnostics import SourceRange


@dataclass
class DirectiveParameter:
    """
    A `:name: value` line directly inside a directive block

    Attributes:
        name: Parameter name (e.g., "alt", "applies_to")
        value: Text after the second colon, or None when absent
        range: Whole-line range of the parameter

    Example:
        For line 3 ":width: 250px":
        DirectiveParameter(name="width", value="250px", range=SourceRange(3, 0, 3, 13))
    """
    name: str
    value: Optional[str]
    range: SourceRange


@dataclass
class DirectiveBlock:
    """
    One `:::{name}` ... `:::` construct found in a document

    Created by DirectiveParser when it meets an opening line. The parser fills
    in parameters, content and the closing fields while it scans; once the
    parse is finished the block is not modified again.

    Attributes:
        name: Directive identifier (e.g., "note", "tab-set")
        opening_colons: Width of the opening fence
        opening_range: Whole-line range of the opening line
        name_range: Range of the directive name on the opening line
        argument: Trailing text on the opening line, None when absent or blank
        argument_range: Range of the argument, if any
        closing_colons: Width of the closing fence, None while unclosed
        closing_range: Whole-line range of the closing fence, if any
        parameters: Parameter lines attached to this block, in order
        content_lines: 0-based indices of content lines attached to this block
        content: Text of those content lines (parallel to content_lines)
        is_malformed: Opening line is syntactically broken
        missing_closing_brace: Malformed as `:::{name` rather than `:::name`

    Example:
        For ":::{dropdown} Details\\n:open:\\nHidden text\\n:::" the parser yields
        DirectiveBlock(name="dropdown", opening_colons=3, closing_colons=3,
                       argument="Details", parameters=[open], content_lines=[2], ...)
    """
    name: str
    opening_colons: int
    opening_range: SourceRange
    name_range: SourceRange
    argument: Optional[str] = None
    argument_range: Optional[SourceRange] = None
    closing_colons: Optional[int] = None
    closing_range: Optional[SourceRange] = None
    parameters: List[DirectiveParameter] = field(default_factory=list)
    content_lines: List[int] = field(default_factory=list)
    content: List[str] = field(default_factory=list)
    is_malformed: bool = False
    missing_closing_brace: bool = False

    @property
    def is_closed(self) -> bool:
        """A block is closed iff a closing fence was matched to it"""
        return self.closing_colons is not None


@dataclass
class ParseResult:
    """
    Result of parsing one document

    Attributes:
        blocks: Every directive block in the order its opening line appeared
        unclosed: Blocks still open at end of document (subset of blocks)
    """
    blocks: List[DirectiveBlock]
    unclosed: List[DirectiveBlock]
