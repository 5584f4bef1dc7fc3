"""
Frontmatter validation tests

Tests extraction of the frontmatter block, YAML errors, schema field checks,
applies_to keys and values, and products.
"""

from docscheck.lib.frontmatter import (
    FrontmatterValidator,
    frontmatter_extract,
    frontmatter_load,
)
from docscheck.lib.parser import lines_split
from docscheck.models import Severity, SourceRange


def validate(*lines):
    return FrontmatterValidator(list(lines)).validate()


def codes(diagnostics):
    return [d.code for d in diagnostics]


class TestExtraction:
    """Test locating the frontmatter block"""

    def test_block(self):
        frontmatter = frontmatter_extract(lines_split("---\ntitle: Page\n---\n# Body"))

        assert frontmatter.range == SourceRange(0, 0, 2, 0)
        assert frontmatter.start_line == 1
        assert frontmatter.end_line == 2
        assert frontmatter.text == "title: Page"

    def test_not_on_first_line(self):
        assert frontmatter_extract(["", "---", "title: x", "---"]) is None

    def test_unclosed(self):
        assert frontmatter_extract(["---", "title: x"]) is None

    def test_byte_order_mark(self):
        frontmatter = frontmatter_extract(lines_split("\ufeff---\ntitle: Page\n---\n# Body"))

        assert frontmatter is not None
        assert frontmatter.end_line == 2

    def test_load(self):
        assert frontmatter_load(["---", "sub:", "  version: '9.1'", "---"]) == {"sub": {"version": "9.1"}}
        assert frontmatter_load(["---", "title: [oops", "---"]) == {}
        assert frontmatter_load(["# No frontmatter"]) == {}


class TestDocumentLevel:
    """Test whole-frontmatter outcomes"""

    def test_valid(self):
        assert validate(
            "---",
            "title: Page",
            "description: Short",
            "layout: landing-page",
            "applies_to:",
            "  stack: ga 9.1+",
            "  deployment:",
            "    ece: ga",
            "products:",
            "  - id: kibana",
            "---",
            "# Body",
        ) == []

    def test_no_frontmatter(self):
        assert validate("# Just a heading", "text") == []

    def test_yaml_error_is_single_diagnostic(self):
        diagnostics = validate("---", "title: [unclosed", "foo: bar", "---")

        assert codes(diagnostics) == ["yaml_syntax_error"]
        assert diagnostics[0].severity is Severity.ERROR
        assert diagnostics[0].range == SourceRange(0, 0, 3, 0)
        assert diagnostics[0].message.startswith("Invalid YAML syntax:")

    def test_not_a_mapping(self):
        assert codes(validate("---", "- a", "- b", "---")) == ["type_error"]

    def test_missing_applies_to(self):
        diagnostics = validate("---", "title: Page", "---")

        assert codes(diagnostics) == ["missing_required_field"]
        assert diagnostics[0].message == "Missing required field: applies_to"
        assert diagnostics[0].range == SourceRange(1, 0, 1, 0)

    def test_empty_frontmatter_misses_applies_to(self):
        assert codes(validate("---", "---")) == ["missing_required_field"]


class TestFields:
    """Test schema checks of top-level fields"""

    def test_unknown_field(self):
        diagnostics = validate("---", "applies_to:", "  stack: ga", "foo: bar", "---")

        assert codes(diagnostics) == ["unknown_field"]
        assert diagnostics[0].severity is Severity.WARNING
        assert diagnostics[0].range == SourceRange(3, 0, 3, 3)

    def test_string_type(self):
        diagnostics = validate("---", "applies_to:", "  stack: ga", "title:", "  - a", "---")

        assert codes(diagnostics) == ["type_error"]
        assert diagnostics[0].message == "Expected string value for field: title"

    def test_array_type(self):
        diagnostics = validate("---", "applies_to:", "  stack: ga", "mapped_pages: /one", "---")

        assert codes(diagnostics) == ["type_error"]
        assert diagnostics[0].range == SourceRange(3, 14, 3, 18)

    def test_object_type(self):
        assert codes(validate("---", "applies_to: ga 9.1", "---")) == ["type_error"]

    def test_enum(self):
        diagnostics = validate("---", "applies_to:", "  stack: ga", "layout: poster", "---")

        assert codes(diagnostics) == ["invalid_enum_value"]
        assert diagnostics[0].range == SourceRange(3, 8, 3, 14)
        assert "Expected one of: landing-page, not-found, archive" in diagnostics[0].message

    def test_max_length(self):
        diagnostics = validate("---", "applies_to:", "  stack: ga", "description: " + "x" * 201, "---")

        assert codes(diagnostics) == ["max_length_exceeded"]
        assert diagnostics[0].severity is Severity.WARNING

    def test_max_length_boundary(self):
        assert validate("---", "applies_to:", "  stack: ga", "description: " + "x" * 200, "---") == []


class TestAppliesTo:
    """Test applies_to inside frontmatter"""

    def test_unknown_key(self):
        diagnostics = validate("---", "applies_to:", "  stacks: ga", "---")

        assert codes(diagnostics) == ["unknown_applies_key"]
        assert diagnostics[0].range == SourceRange(2, 2, 2, 8)

    def test_unknown_nested_key(self):
        diagnostics = validate(
            "---", "applies_to:", "  deployment:", "    ece: ga", "    foo: ga", "---"
        )

        assert codes(diagnostics) == ["unknown_nested_key"]
        assert diagnostics[0].range == SourceRange(4, 4, 4, 7)

    def test_invalid_value(self):
        diagnostics = validate("---", "applies_to:", "  stack: bogus", "---")

        assert codes(diagnostics) == ["invalid_lifecycle_value"]
        assert diagnostics[0].range == SourceRange(2, 9, 2, 14)

    def test_semantic_diagnostics(self):
        diagnostics = validate("---", "applies_to:", "  stack: ga 9.0-9.5, preview 9.3-9.8", "---")
        assert codes(diagnostics) == ["overlapping_versions"]

    def test_nested_value(self):
        diagnostics = validate(
            "---", "applies_to:", "  serverless:", "    security: beta 9.5-9.2", "---"
        )
        assert codes(diagnostics) == ["invalid_version_range"]
        assert diagnostics[0].range.start_line == 3

    def test_numeric_value(self):
        """A bare number is not a lifecycle value"""
        assert codes(validate("---", "applies_to:", "  stack: 9.1", "---")) == ["invalid_lifecycle_value"]


class TestProducts:
    """Test the products list"""

    def test_invalid_product_id(self):
        diagnostics = validate(
            "---", "applies_to:", "  stack: ga", "products:", "  - id: kibana", "  - id: nope", "---"
        )

        assert codes(diagnostics) == ["invalid_product_id"]
        assert diagnostics[0].range == SourceRange(5, 8, 5, 12)
        assert diagnostics[0].message.startswith("Invalid product ID 'nope'. Valid IDs: apm,")

    def test_invalid_product_format(self):
        diagnostics = validate(
            "---", "applies_to:", "  stack: ga", "products:", "  - kibana", "  - name: x", "---"
        )

        assert codes(diagnostics) == ["invalid_product_format", "invalid_product_format"]
        assert [d.range.start_line for d in diagnostics] == [4, 5]

    def test_non_string_id_keeps_other_diagnostics(self):
        """A list id is a format error and the rest of the frontmatter is still checked"""
        diagnostics = validate(
            "---", "title: x", "bogus_field: 1", "layout: nope", "products:", "  - id: [a, b]", "---"
        )

        assert codes(diagnostics) == [
            "missing_required_field",
            "unknown_field",
            "invalid_enum_value",
            "invalid_product_format",
        ]
        assert diagnostics[-1].range.start_line == 5

    def test_empty_id(self):
        diagnostics = validate("---", "applies_to:", "  stack: ga", "products:", "  - id: ''", "---")
        assert codes(diagnostics) == ["invalid_product_format"]
