"""
Nesting parser tests - verify fence matching by width

Closing fences match the nearest open block of the same width, scanning the
open stack from the top. Tests cover:
- Wider outer fences around narrower inner ones
- Same-width nesting (innermost closes first)
- Crossed fences of different widths
- Content attachment to the innermost open block
"""

from docscheck.lib.parser import DirectiveParser


def blocks_byName(source):
    return {block.name: block for block in DirectiveParser(source).parse().blocks}


class TestWidthNesting:
    """Test outer blocks with wider fences"""

    def test_inner_closes_before_outer(self):
        """:::: outer around ::: inner, closed in order"""
        source = "::::{tab-set}\n:::{tab-item} A\nx\n:::\n::::"
        blocks = blocks_byName(source)

        assert blocks["tab-item"].closing_range.start_line == 3
        assert blocks["tab-set"].closing_range.start_line == 4
        assert blocks["tab-item"].closing_colons == 3
        assert blocks["tab-set"].closing_colons == 4

    def test_discovery_order(self):
        """Blocks are listed in the order their openings appear"""
        source = ":::::{stepper}\n::::{step} One\n::::\n::::{step} Two\n::::\n:::::"
        result = DirectiveParser(source).parse()

        assert [b.name for b in result.blocks] == ["stepper", "step", "step"]
        assert [b.argument for b in result.blocks] == [None, "One", "Two"]
        assert all(b.is_closed for b in result.blocks)

    def test_content_goes_to_innermost(self):
        """Lines belong to the innermost block open at that point"""
        source = "::::{tab-set}\n:group: langs\nbefore\n:::{tab-item} A\n:sync: a\ninside\n:::\nafter\n::::"
        blocks = blocks_byName(source)

        assert blocks["tab-set"].content == ["before", "after"]
        assert [p.name for p in blocks["tab-set"].parameters] == ["group"]
        assert blocks["tab-item"].content == ["inside"]
        assert [p.name for p in blocks["tab-item"].parameters] == ["sync"]

    def test_outer_fence_closes_unclosed_inner(self):
        """A wider fence pops narrower blocks opened inside it, leaving them unclosed"""
        source = "::::{tab-set}\n:::{tab-item} A\ntext\n::::"
        result = DirectiveParser(source).parse()
        blocks = {b.name: b for b in result.blocks}

        assert blocks["tab-set"].is_closed
        assert not blocks["tab-item"].is_closed
        assert result.unclosed == []


class TestSameWidthNesting:
    """Test nested blocks sharing a fence width"""

    def test_innermost_closes_first(self):
        source = ":::{note}\n:::{tip}\nx\n:::\n:::"
        blocks = blocks_byName(source)

        assert blocks["tip"].closing_range.start_line == 3
        assert blocks["note"].closing_range.start_line == 4

    def test_only_inner_closed(self):
        """One fence for two same-width blocks leaves the outer open"""
        result = DirectiveParser(":::{note}\n:::{tip}\nx\n:::").parse()
        blocks = {b.name: b for b in result.blocks}

        assert blocks["tip"].is_closed
        assert not blocks["note"].is_closed
        assert result.unclosed == [blocks["note"]]


class TestCrossedFences:
    """Test fences that do not nest cleanly"""

    def test_crossed_widths(self):
        """The outer fence closes outer; the inner fence then has nothing to close"""
        source = "::::{outer}\n:::{inner}\nx\n::::\n:::"
        result = DirectiveParser(source).parse()
        blocks = {b.name: b for b in result.blocks}

        assert blocks["outer"].is_closed
        assert blocks["outer"].closing_range.start_line == 3
        assert not blocks["inner"].is_closed

    def test_unclosed_wide_block_keeps_narrow_one_working(self):
        """A narrow block inside an unclosed wide one still closes"""
        source = "::::{outer}\n:::{inner}\nx\n:::"
        result = DirectiveParser(source).parse()
        blocks = {b.name: b for b in result.blocks}

        assert blocks["inner"].is_closed
        assert not blocks["outer"].is_closed
        assert result.unclosed == [blocks["outer"]]

    def test_reparse_is_identical(self):
        """Parsing the same text twice gives equal results"""
        source = "::::{outer}\n:::{inner}\nx\n::::\n:::\n:::{note\n:::"
        assert DirectiveParser(source).parse() == DirectiveParser(source).parse()
