"""
Parser for colon-fenced directive blocks

Discovers `:::{name} argument` ... `:::` blocks in a Markdown document.

The parser makes a single forward pass over the lines with one explicit stack
of open blocks. Each line is tried, in priority order, as:
1. A well-formed opening   `:::{name} argument`
2. A malformed opening     `:::{name argument`  (missing closing brace)
3. A malformed opening     `:::name argument`   (missing braces)
4. A closing fence         `:::`                (only while a block is open)
5. A parameter line        `:name: value`, else a content line

Key features:
- Closing fences match by width, not by nesting depth
- Malformed constructs become flagged blocks, never exceptions
- Unclosed blocks are still reported, plus a side list of them

Example:
    >>> result = DirectiveParser(":::{note}\\nHello\\n:::").parse()
    >>> result.blocks[0].name
    'note'
    >>> result.blocks[0].is_closed
    True
"""

import re
from typing import List, Optional

from ..models.diagnostics import SourceRange
from ..models.parser import DirectiveBlock, DirectiveParameter, ParseResult
from .log import LOG

BOM = "\ufeff"

NAME = r'[a-zA-Z][a-zA-Z0-9_-]*'

OPENING_PATTERN = re.compile(rf'^(:{{3,}})\{{({NAME})\}}(?:\s+(.*))?$')
MISSING_BRACE_PATTERN = re.compile(rf'^(:{{3,}})\{{({NAME})(?:\s+(.*))?$')
NO_BRACES_PATTERN = re.compile(rf'^(:{{3,}})({NAME})(?:\s+(.*))?$')
CLOSING_PATTERN = re.compile(r'^(:+)\s*$')
PARAMETER_PATTERN = re.compile(rf'^:({NAME}):(?:\s+(.*))?$')


def lines_split(text: str) -> List[str]:
    """
    Split document text into lines

    Splits on newlines and drops a trailing carriage return from each line,
    so CRLF documents address the same lines as LF ones. A leading UTF-8 byte
    order mark is dropped.
    """
    if text.startswith(BOM):
        text = text[1:]
    return [line[:-1] if line.endswith('\r') else line for line in text.split('\n')]


class DirectiveParser:
    """
    Line-oriented parser for directive blocks

    Handles:
    - Nested blocks with fences of any width >= 3
    - Crossed fences of different widths
    - Malformed openings (missing brace / braces)
    - Parameters and content attached to the innermost open block
    """

    def __init__(self, source: str):
        """
        Initialize parser with document text

        Args:
            source: Raw document text

        Attributes:
            lines: Document split into lines
            blocks: Every block discovered so far, in order
            stack: Blocks currently open, innermost last
        """
        self.source = source
        self.lines: List[str] = lines_split(source)
        self.blocks: List[DirectiveBlock] = []
        self.stack: List[DirectiveBlock] = []

    def parse(self) -> ParseResult:
        """
        Parse the document into directive blocks

        Returns:
            ParseResult with all blocks in discovery order and the blocks left
            open at end of document.

        Example:
            >>> result = DirectiveParser("::::{tab-set}\\n:::{tab-item} A\\n:::\\n::::").parse()
            >>> [b.name for b in result.blocks]
            ['tab-set', 'tab-item']
        """
        self.blocks = []
        self.stack = []

        for line_num, line_text in enumerate(self.lines):
            if self.opening_process(line_num, line_text):
                continue
            if self.malformed_process(line_num, line_text):
                continue
            if self.closing_process(line_num, line_text):
                continue
            self.contentOrParameter_process(line_num, line_text)

        unclosed = list(self.stack)
        LOG(f"Found {len(self.blocks)} directive blocks, {len(unclosed)} unclosed", level=3)
        return ParseResult(blocks=list(self.blocks), unclosed=unclosed)

    def opening_process(self, line_num: int, line_text: str) -> bool:
        """
        Handle a well-formed opening line `:::{name} argument`

        Returns:
            True if the line was consumed as an opening
        """
        match = OPENING_PATTERN.match(line_text)
        if not match:
            return False

        block = self.block_create(line_num, line_text, match, name_offset=1)
        self.block_push(block)
        return True

    def malformed_process(self, line_num: int, line_text: str) -> bool:
        """
        Handle an opening line with a missing closing brace or no braces

        `:::{name` is checked before `:::name`; both push a flagged block so
        the rest of the document is still attributed correctly.

        Returns:
            True if the line was consumed as a malformed opening
        """
        match = MISSING_BRACE_PATTERN.match(line_text)
        if match:
            block = self.block_create(line_num, line_text, match, name_offset=1)
            block.is_malformed = True
            block.missing_closing_brace = True
            self.block_push(block)
            return True

        match = NO_BRACES_PATTERN.match(line_text)
        if match:
            block = self.block_create(line_num, line_text, match, name_offset=0)
            block.is_malformed = True
            self.block_push(block)
            return True

        return False

    def closing_process(self, line_num: int, line_text: str) -> bool:
        """
        Handle a closing fence

        Scans the open stack from the top for the nearest unclosed block whose
        opening width equals the fence width. That block is closed and popped
        together with everything opened after it; blocks popped this way stay
        unclosed. A fence that matches nothing is consumed without effect.

        Returns:
            True if the line is a fence and a block is open
        """
        match = CLOSING_PATTERN.match(line_text)
        if not match or not self.stack:
            return False

        colon_count = len(match.group(1))

        for index in range(len(self.stack) - 1, -1, -1):
            block = self.stack[index]
            if block.opening_colons == colon_count and not block.is_closed:
                block.closing_colons = colon_count
                block.closing_range = SourceRange.line_span(line_num, line_text)
                del self.stack[index:]
                LOG(f"Line {line_num}: closed '{block.name}'", level=3)
                return True

        LOG(f"Line {line_num}: dangling {colon_count}-colon fence", level=3)
        return True

    def contentOrParameter_process(self, line_num: int, line_text: str) -> None:
        """
        Attach a parameter or content line to the innermost open block

        Lines outside of any block are ignored.
        """
        if not self.stack:
            return

        current = self.stack[-1]
        match = PARAMETER_PATTERN.match(line_text)
        if match:
            current.parameters.append(DirectiveParameter(
                name=match.group(1),
                value=match.group(2),
                range=SourceRange.line_span(line_num, line_text),
            ))
        else:
            current.content_lines.append(line_num)
            current.content.append(line_text)

    def block_create(
        self,
        line_num: int,
        line_text: str,
        match: re.Match,
        name_offset: int,
    ) -> DirectiveBlock:
        """
        Build a block record from an opening-line match

        Args:
            line_num: Line of the opening
            line_text: Text of the opening line
            match: Match with groups (colons, name, argument)
            name_offset: Characters between the colons and the name (1 for "{")
        """
        colons = match.group(1)
        name = match.group(2)
        argument = self.argument_clean(match.group(3))

        name_start = len(colons) + name_offset
        block = DirectiveBlock(
            name=name,
            opening_colons=len(colons),
            opening_range=SourceRange.line_span(line_num, line_text),
            name_range=SourceRange(line_num, name_start, line_num, name_start + len(name)),
        )

        if argument is not None:
            block.argument = argument
            block.argument_range = SourceRange(line_num, match.start(3), line_num, len(line_text))

        return block

    def block_push(self, block: DirectiveBlock) -> None:
        """Record a new block and make it the innermost open block"""
        self.blocks.append(block)
        self.stack.append(block)
        LOG(
            f"Line {block.opening_range.start_line}: opened '{block.name}' "
            f"({block.opening_colons} colons, malformed={block.is_malformed})",
            level=3,
        )

    @staticmethod
    def argument_clean(argument: Optional[str]) -> Optional[str]:
        """Normalize a captured argument: blank becomes None"""
        if argument is None:
            return None
        argument = argument.strip()
        return argument or None
