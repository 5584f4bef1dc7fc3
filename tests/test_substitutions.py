"""
Substitution tests

Tests substitution expression parsing, mutation operators and chains, the
undefined / literal-value checks and docset loading.
"""

import pytest

from docscheck.lib.mutations import (
    MUTATORS,
    mutation_apply,
    mutationChain_apply,
    mutationChain_describe,
    semver_parse,
)
from docscheck.lib.substitutions import (
    DocsetError,
    SubstitutionChecker,
    docset_find,
    docset_load,
    productSubstitutions_get,
    shorthand_resolve,
    substitution_parse,
    substitutions_order,
)
from docscheck.models import MUTATION_OPERATORS, Severity, SourceRange, SubstitutionExpression


class TestSubstitutionParse:
    """Test splitting `{{ ... }}` content"""

    def test_name_only(self):
        assert substitution_parse(" version ") == SubstitutionExpression("version", [])

    def test_chain(self):
        expression = substitution_parse("name | lc | trim")
        assert expression.variable_name == "name"
        assert expression.mutations == ["lc", "trim"]

    def test_empty_segments_dropped(self):
        assert substitution_parse("name || lc |").mutations == ["lc"]

    def test_empty_name(self):
        assert substitution_parse("| uc").variable_name == ""


class TestTextMutations:
    """Test case and trim operators"""

    @pytest.mark.parametrize("operator,value,expected", [
        ("lc", "Hello World", "hello world"),
        ("uc", "Hello World", "HELLO WORLD"),
        ("tc", "hello world", "Hello World"),
        ("c", "hello world", "Hello world"),
        ("c", "", ""),
        ("kc", "Hello World", "hello-world"),
        ("kc", "camelCase_value", "camel-case-value"),
        ("sc", "Hello World", "hello_world"),
        ("sc", "camelCase-value", "camel_case_value"),
        ("cc", "Hello World", "helloWorld"),
        ("cc", "some-kebab_name", "someKebabName"),
        ("pc", "hello world", "HelloWorld"),
        ("trim", "  Hello World!  ", "Hello World"),
        ("trim", "--x--", "x"),
    ])
    def test_operator(self, operator, value, expected):
        assert mutation_apply(value, operator) == expected


class TestVersionMutations:
    """Test version operators"""

    @pytest.mark.parametrize("operator,expected", [
        ("M", "9"),
        ("M.x", "9.x"),
        ("M.M", "9.1"),
        ("M+1", "10"),
        ("M.M+1", "9.2"),
    ])
    def test_operator(self, operator, expected):
        assert mutation_apply("9.1.5", operator) == expected

    def test_missing_components_are_zero(self):
        assert mutation_apply("9", "M.M") == "9.0"
        assert semver_parse("9.1-SNAPSHOT") == (9, 1, 0)

    def test_non_version_unchanged(self):
        assert mutation_apply("latest", "M+1") == "latest"


class TestMutationChain:
    """Test operator chains"""

    def test_intermediates(self):
        assert mutationChain_apply("Hello World", ["kc", "uc"]) == [
            "Hello World",
            "hello-world",
            "HELLO-WORLD",
        ]

    def test_empty_chain(self):
        assert mutationChain_apply("x", []) == ["x"]

    def test_unknown_operator_passes_through(self):
        assert mutationChain_apply("Value", ["bogus", "lc"]) == ["Value", "Value", "value"]

    def test_describe(self):
        assert mutationChain_describe(["lc", "zz"]) == (
            "**lc**: LowerCase - converts all characters to lowercase\n\n"
            "**zz**: Unknown operator"
        )
        assert mutationChain_describe([]) == ""

    def test_every_documented_operator_is_implemented(self):
        assert set(MUTATORS) == set(MUTATION_OPERATORS)


class TestResolution:
    """Test variable lookup"""

    def test_plain_name(self):
        assert shorthand_resolve("version", {"version": "9.1"}) == "version"

    def test_shorthand(self):
        subs = {"product.kibana": "Kibana"}
        assert shorthand_resolve(".kibana", subs) == "product.kibana"
        assert shorthand_resolve("kibana", subs) is None

    def test_product_names(self):
        products = productSubstitutions_get()

        assert products["product.kibana"] == "Kibana"
        assert shorthand_resolve(".elasticsearch", products) == "product.elasticsearch"
        assert all(key.startswith("product.") for key in products)

    def test_empty_value_is_undefined(self):
        assert shorthand_resolve("version", {"version": ""}) is None

    def test_order_longest_value_first(self):
        ordered = substitutions_order({"a": "x", "b": "longer", "c": None, "d": 9.1})
        assert list(ordered.items()) == [("b", "longer"), ("d", "9.1"), ("a", "x")]


class TestUndefinedCheck:
    """Test undefined_sub diagnostics"""

    def test_undefined(self):
        checker = SubstitutionChecker(["Use {{version}} and {{missing | lc}}"], {"version": "9.1"})
        diagnostics = checker.undefined_check()

        assert len(diagnostics) == 1
        assert diagnostics[0].code == "undefined_sub"
        assert diagnostics[0].severity is Severity.INFORMATION
        assert diagnostics[0].message == "Undefined substitution variable: 'missing'"
        assert diagnostics[0].range == SourceRange(0, 20, 0, 36)

    def test_shorthand_defined(self):
        checker = SubstitutionChecker(["{{.kibana}}"], {"product.kibana": "Kibana"})
        assert checker.undefined_check() == []


class TestLiteralCheck:
    """Test use_sub diagnostics"""

    def test_literal_value(self):
        checker = SubstitutionChecker(["Install Elasticsearch 9.1 now"], {"version": "9.1"})
        diagnostics = checker.literal_check()

        assert len(diagnostics) == 1
        assert diagnostics[0].code == "use_sub"
        assert diagnostics[0].severity is Severity.WARNING
        assert diagnostics[0].message == "Use substitute `{{version}}` instead of `9.1`"
        assert diagnostics[0].range == SourceRange(0, 22, 0, 25)

    def test_word_bounded(self):
        checker = SubstitutionChecker(["version 19.10 and 9.15"], {"version": "9.1"})
        assert checker.literal_check() == []

    def test_line_edges(self):
        checker = SubstitutionChecker(["9.1", "9.1."], {"version": "9.1"})
        assert [d.range.start_line for d in checker.literal_check()] == [0, 1]

    def test_contained_match_reported_once(self):
        """The longer value claims the text; the shorter one inside it is skipped"""
        checker = SubstitutionChecker(
            ["Use Elastic Stack today"],
            {"short": "Stack", "full": "Elastic Stack"},
        )
        diagnostics = checker.literal_check()

        assert len(diagnostics) == 1
        assert "{{full}}" in diagnostics[0].message
        assert diagnostics[0].range == SourceRange(0, 4, 0, 17)

    def test_lines_before_body_skipped(self):
        lines = ["---", "sub:", "  version: 9.1", "---", "Version 9.1"]
        checker = SubstitutionChecker(lines, {"version": "9.1"}, body_start=4)
        assert [d.range.start_line for d in checker.literal_check()] == [4]


class TestDocsets:
    """Test docset discovery and loading"""

    def test_nearest_docset(self, tmp_path):
        (tmp_path / "docset.yml").write_text("subs:\n  version: '9.1'\n")
        inner = tmp_path / "guide"
        inner.mkdir()
        (inner / "_docset.yml").write_text("subs:\n  version: '9.2'\n")
        document = inner / "page" / "index.md"
        document.parent.mkdir()
        document.write_text("# Page\n")

        found = docset_find(document, ["docset.yml", "_docset.yml"])
        assert found == (inner / "_docset.yml").resolve()
        assert docset_load(found) == {"version": "9.2"}

    def test_name_order_within_directory(self, tmp_path):
        (tmp_path / "docset.yml").write_text("subs: {}\n")
        (tmp_path / "_docset.yml").write_text("subs: {}\n")
        document = tmp_path / "index.md"
        document.write_text("")

        assert docset_find(document, ["docset.yml", "_docset.yml"]).name == "docset.yml"

    def test_load_orders_by_value_length(self, tmp_path):
        docset = tmp_path / "docset.yml"
        docset.write_text("subs:\n  es: Elasticsearch\n  stack: Elastic Stack 9\n  v: 9\n")
        assert list(docset_load(docset)) == ["stack", "es", "v"]

    def test_without_subs(self, tmp_path):
        docset = tmp_path / "docset.yml"
        docset.write_text("project: docs\n")
        assert docset_load(docset) == {}

    @pytest.mark.parametrize("content", ["subs: [unclosed\n", "subs:\n  - a\n  - b\n"])
    def test_bad_docset(self, tmp_path, content):
        docset = tmp_path / "docset.yml"
        docset.write_text(content)
        with pytest.raises(DocsetError):
            docset_load(docset)

    def test_missing_docset(self, tmp_path):
        with pytest.raises(DocsetError):
            docset_load(tmp_path / "nope.yml")
