"""Unit tests for the template engine.

Tests cover:
- Substitution (braced, unbraced, nested paths, list indexes, scalars)
- Filters and filter chains
- #set, #foreach (loop metadata, scoping), #if/#else
- Comments and escapes
- Compile-time and render-time failures with source positions
- Reference collection
"""

import pytest

from src.application.templating import FILTERS, compile_template
from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.errors import TemplateError


def render(source: str, **context) -> str:
    """Compile and render, failing the test on any error."""
    match compile_template(source):
        case Success(value=template):
            pass
        case Failure(error=error):
            pytest.fail(f"compile failed: {error}")
    match template.render(context):
        case Success(value=text):
            return text
        case Failure(error=error):
            pytest.fail(f"render failed: {error}")


def render_error(source: str, **context) -> TemplateError:
    """Compile and render, returning the render-time error."""
    template = compile_template(source).value
    result = template.render(context)
    assert isinstance(result, Failure)
    return result.error


def compile_error(source: str) -> TemplateError:
    result = compile_template(source)
    assert isinstance(result, Failure)
    return result.error


@pytest.mark.unit
class TestSubstitution:
    """Test ${...} and $name substitution."""

    def test_braced_and_unbraced_references(self):
        """Test both reference forms resolve from the context."""
        assert render("Hello ${name}, $name.", name="World") == "Hello World, World."

    def test_nested_path(self):
        """Test dotted segments walk nested mappings."""
        result = {"Item": {"id": {"S": "001-001-001"}}}
        assert render("${result.Item.id.S}", result=result) == "001-001-001"

    def test_list_index_segment(self):
        """Test numeric segments index into lists."""
        assert render("${items.1}", items=["a", "b"]) == "b"

    def test_scalars_render_as_text(self):
        """Test numbers and booleans render in JSON spelling."""
        assert render("$n/$flag/$none", n=3, flag=True, none=None) == "3/true/"

    def test_dollar_without_identifier_is_literal(self):
        """Test '$' not followed by a name stays literal."""
        assert render("costs $5") == "costs $5"

    def test_unresolved_reference_reports_position(self):
        """Test missing value fails with line and column of the reference."""
        error = render_error("line1\n  ${missing}")

        assert error.code == ErrorCode.TEMPLATE_REFERENCE_UNRESOLVED
        assert error.line == 2
        assert error.column == 3
        assert "missing" in error.message

    def test_unresolved_nested_segment(self):
        """Test a missing segment below a present root is unresolved."""
        error = render_error("${result.Item.id.S}", result={})

        assert error.code == ErrorCode.TEMPLATE_REFERENCE_UNRESOLVED

    def test_object_without_json_filter_is_type_mismatch(self):
        """Test mappings cannot be substituted as plain text."""
        error = render_error("${value}", value={"a": 1})

        assert error.code == ErrorCode.TEMPLATE_TYPE_MISMATCH

    def test_render_is_deterministic(self):
        """Test identical context produces identical output."""
        template = compile_template('{"ids": ${ids|json}}').value
        context = {"ids": ["b", "a"]}

        assert template.render(context) == template.render(context)


@pytest.mark.unit
class TestFilters:
    """Test the built-in filter set."""

    def test_filter_set_is_closed(self):
        """Test exactly the documented filters exist."""
        assert set(FILTERS) == {
            "escape_quotes",
            "lower",
            "upper",
            "json",
            "escape_json",
            "split",
            "parse_json",
            "default",
        }

    def test_json_encodes_structures(self):
        """Test json filter emits JSON text."""
        assert render("${value|json}", value={"a": [1, "b"]}) == '{"a": [1, "b"]}'

    def test_json_quotes_strings(self):
        """Test json filter quotes and escapes strings."""
        assert render("${id|json}", id='say "hi"') == '"say \\"hi\\""'

    def test_escape_json_escapes_without_quotes(self):
        """Test escape_json yields a string body for splicing into quotes."""
        assert render('"${v|escape_json}"', v='a"b\\c') == '"a\\"b\\\\c"'

    def test_escape_quotes(self):
        """Test escape_quotes replaces double quotes with entities."""
        assert render("${v|escape_quotes}", v='say "hi"') == "say &quot;hi&quot;"

    def test_chained_filters_apply_left_to_right(self):
        """Test lower then upper ends uppercase."""
        assert render("${v|lower|upper}", v="MiXeD") == "MIXED"

    def test_lower_rejects_non_string(self):
        """Test string filters reject other types."""
        error = render_error("${v|lower}", v=3)

        assert error.code == ErrorCode.TEMPLATE_TYPE_MISMATCH

    def test_split_default_and_custom_separator(self):
        """Test split uses ',' unless given a separator."""
        source = "#foreach($x in $a|split)[$x]#end #foreach($y in $b|split:\";\")<$y>#end"

        assert render(source, a="1,2", b="x;y") == "[1][2] <x><y>"

    def test_parse_json_exposes_embedded_structure(self):
        """Test parse_json turns embedded JSON text into values."""
        assert render("#set($d = $data|parse_json)${d.0.text}", data='[{"text": "hi"}]') == "hi"

    def test_parse_json_invalid(self):
        """Test invalid embedded JSON is its own error code."""
        error = render_error("${data|parse_json|json}", data="{not json")

        assert error.code == ErrorCode.TEMPLATE_JSON_INVALID

    def test_default_replaces_missing_and_empty(self):
        """Test default tolerates unresolved references."""
        assert render('${missing|default:"none"}') == "none"
        assert render('${empty|default:"none"}', empty="") == "none"
        assert render('${present|default:"none"}', present="x") == "x"

    def test_only_default_tolerates_missing(self):
        """Test other filters fail on an unresolved reference."""
        error = render_error("${missing|lower}")

        assert error.code == ErrorCode.TEMPLATE_REFERENCE_UNRESOLVED


@pytest.mark.unit
class TestDirectives:
    """Test #set, #foreach and #if."""

    def test_set_binds_value(self):
        """Test #set makes a name available to later nodes."""
        assert render('#set($greeting = "hi")$greeting there') == "hi there"

    def test_foreach_loop_metadata(self):
        """Test $foreach exposes index, count and hasNext."""
        source = "#foreach($x in $xs)${foreach.index}:${foreach.count}:$x#if($foreach.hasNext),#end#end"

        assert render(source, xs=["a", "b", "c"]) == "0:1:a,1:2:b,2:3:c"

    def test_foreach_first_and_last(self):
        """Test first/last flags."""
        source = "#foreach($x in $xs)#if($foreach.first)[#end$x#if($foreach.last)]#end#end"

        assert render(source, xs=["a", "b"]) == "[ab]"

    def test_foreach_over_empty_list_renders_nothing(self):
        """Test an empty sequence renders no body."""
        assert render("<#foreach($x in $xs)$x#end>", xs=[]) == "<>"

    def test_foreach_bindings_do_not_leak(self):
        """Test names set inside a loop body are scoped to the iteration."""
        source = '#foreach($x in $xs)#set($seen = $x)#end${seen|default:"none"}/${x|default:"none"}'

        assert render(source, xs=["a"]) == "none/none"

    def test_set_rebinds_an_outer_name(self):
        """Test #set inside a block updates a name bound before it."""
        source = '#set($last = "none")#foreach($x in $xs)#if($x != "")#set($last = $x)#end#end$last'

        assert render(source, xs=["a", "b", ""]) == "b"

    def test_foreach_requires_list(self):
        """Test iterating a string is a type mismatch."""
        error = render_error("#foreach($x in $s)$x#end", s="abc")

        assert error.code == ErrorCode.TEMPLATE_TYPE_MISMATCH

    def test_if_else(self):
        """Test truthy and empty conditions choose branches."""
        source = "#if($flag)yes#{else}no#end"

        assert render(source, flag="x") == "yes"
        assert render(source, flag="") == "no"

    def test_if_treats_unresolved_as_empty(self):
        """Test a missing reference in a condition is false, not an error."""
        assert render("#if($missing)yes#{else}no#end") == "no"

    def test_if_equality(self):
        """Test == and != compare text forms."""
        source = '#if($lang == "en")EN#end#if($lang != "en")other#end'

        assert render(source, lang="en") == "EN"
        assert render(source, lang="es") == "other"


@pytest.mark.unit
class TestLexicalFeatures:
    """Test comments and escapes."""

    def test_line_and_block_comments_are_dropped(self):
        """Test ## and #* *# comments produce no output."""
        assert render("a## ignored\nb#* also\nignored *#c") == "abc"

    def test_escaped_markers_are_literal(self):
        """Test \\$ and \\# emit the marker characters."""
        assert render("\\$name \\#if", name="x") == "$name #if"


@pytest.mark.unit
class TestCompileErrors:
    """Test malformed templates fail at compile time."""

    def test_unknown_filter(self):
        """Test an unknown filter name is rejected."""
        error = compile_error("${x|bogus}")

        assert error.code == ErrorCode.TEMPLATE_SYNTAX_INVALID
        assert "bogus" in error.message

    def test_filter_argument_count(self):
        """Test default requires exactly one argument."""
        assert compile_error("${x|default}").code == ErrorCode.TEMPLATE_SYNTAX_INVALID

    def test_unclosed_foreach(self):
        """Test a missing #end is reported at the opening directive."""
        error = compile_error("ok\n#foreach($x in $xs)$x")

        assert error.code == ErrorCode.TEMPLATE_SYNTAX_INVALID
        assert error.line == 2
        assert error.column == 1

    def test_stray_end(self):
        """Test #end without an open block."""
        assert compile_error("text#end").code == ErrorCode.TEMPLATE_SYNTAX_INVALID

    def test_unclosed_substitution(self):
        """Test '${' without '}'."""
        assert compile_error("${name").code == ErrorCode.TEMPLATE_SYNTAX_INVALID

    def test_unclosed_block_comment(self):
        """Test '#*' without '*#'."""
        assert compile_error("#* never closed").code == ErrorCode.TEMPLATE_SYNTAX_INVALID


@pytest.mark.unit
class TestReferences:
    """Test Template.references."""

    def test_collects_context_roots_only(self):
        """Test names bound by #set/#foreach are not context references."""
        source = (
            "#set($sep = \",\")"
            "#foreach($k in $ids|split)${k}$sep${foreach.index}#end"
            "${result.Item|json}#if($flag)x#end"
        )
        template = compile_template(source).value

        assert template.references == frozenset({"ids", "result", "flag"})
