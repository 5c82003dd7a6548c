"""Tests for the template grammar parser."""

import pytest

from pren.prompts import (
    Argument,
    Literal,
    ParseTemplateError,
    PromptReference,
    VariablePromptReference,
    is_valid_identifier,
    parse_template,
)

pytestmark = pytest.mark.unit


class TestParseLiterals:
    """Tests for literal runs and escaped literals."""

    def test_empty_content(self) -> None:
        """Test empty content parses to zero parts."""
        assert parse_template("") == ()

    def test_plain_text(self) -> None:
        """Test text without braces is a single literal."""
        assert parse_template("This is the prompt content") == (
            Literal("This is the prompt content"),
        )

    def test_single_braces_are_literal(self) -> None:
        """Test single braces and lone closing braces stay literal."""
        assert parse_template("json: {\"a\": 1} and }} too") == (
            Literal("json: {\"a\": 1} and }} too"),
        )

    def test_escaped_literal(self) -> None:
        """Test four braces escape their content verbatim."""
        assert parse_template("{{{{hello world}}}} more text") == (
            Literal("hello world"),
            Literal(" more text"),
        )

    def test_escaped_literal_keeps_placeholders(self) -> None:
        """Test placeholders inside an escape are not interpreted."""
        assert parse_template("{{{{hello{{username}}bye}}}}") == (
            Literal("hello{{username}}bye"),
        )

    def test_escaped_literal_takes_shortest_span(self) -> None:
        """Test the escape ends at the first closing quadruple brace."""
        assert parse_template("{{{{a}}}}{{{{b}}}}") == (Literal("a"), Literal("b"))

    def test_escaped_literal_spanning_lines(self) -> None:
        """Test escaped content may contain newlines."""
        assert parse_template("{{{{line one\nline two}}}}") == (
            Literal("line one\nline two"),
        )

    def test_escaped_braces_around_argument_name(self) -> None:
        """Test six braces render as a literal double-braced name."""
        parts = parse_template("Hello {{{{{{name}}}}}}, you are {{age}} years old!")
        assert parts == (
            Literal("Hello "),
            Literal("{{name"),
            Literal("}}, you are "),
            Argument("age"),
            Literal(" years old!"),
        )


class TestParsePlaceholders:
    """Tests for arguments and prompt references."""

    def test_argument(self) -> None:
        """Test a lone argument."""
        assert parse_template("{{username}}") == (Argument("username"),)

    def test_prompt_reference(self) -> None:
        """Test a prompt reference."""
        assert parse_template("{{prompt:basic_prompt}} is the prompt") == (
            PromptReference("basic_prompt"),
            Literal(" is the prompt"),
        )

    def test_variable_prompt_reference(self) -> None:
        """Test a variable prompt reference."""
        assert parse_template("{{prompt_var:target}}") == (VariablePromptReference("target"),)

    def test_prompt_is_a_valid_argument_name(self) -> None:
        """Test 'prompt' without a colon is an ordinary argument."""
        assert parse_template("{{prompt}}") == (Argument("prompt"),)

    def test_mixed_template(self) -> None:
        """Test a template mixing every construct keeps source order."""
        content = "Hello {{name}}, welcome to {{prompt:greeting}}! {{{{literal_braces}}}}"
        assert parse_template(content) == (
            Literal("Hello "),
            Argument("name"),
            Literal(", welcome to "),
            PromptReference("greeting"),
            Literal("! "),
            Literal("literal_braces"),
        )

    def test_identifier_characters(self) -> None:
        """Test identifiers accept letters, digits, hyphens and underscores."""
        assert parse_template("{{my-arg_2}}") == (Argument("my-arg_2"),)

    def test_identifier_max_length(self) -> None:
        """Test a 64 character identifier is accepted."""
        name = "a" * 64
        assert parse_template(f"{{{{{name}}}}}") == (Argument(name),)

    def test_adjacent_placeholders(self) -> None:
        """Test placeholders directly next to each other."""
        assert parse_template("{{a}}{{b}}") == (Argument("a"), Argument("b"))


class TestParseErrors:
    """Tests for malformed templates."""

    @pytest.mark.parametrize(
        "content",
        [
            "Hello {{name",
            "{{Hello world!",
            "text {{",
            "{{prompt:greeting",
            "{{{{never closed",
            "{{{{almost}}}",
        ],
    )
    def test_unterminated_constructs(self, content: str) -> None:
        """Test that missing closing braces fail the parse."""
        with pytest.raises(ParseTemplateError):
            parse_template(content)

    @pytest.mark.parametrize(
        "content",
        [
            "{{}}",
            "{{ name }}",
            "{{na.me}}",
            "{{prompt:}}",
            "{{prompt_var:}}",
            "{{prompt:bad name}}",
            "{{other:thing}}",
            "{{{name}}}",
            "{{" + "a" * 65 + "}}",
        ],
    )
    def test_invalid_placeholders(self, content: str) -> None:
        """Test that placeholders with invalid identifiers fail the parse."""
        with pytest.raises(ParseTemplateError, match="invalid placeholder"):
            parse_template(content)

    def test_error_reports_position(self) -> None:
        """Test the error points at the offending braces."""
        with pytest.raises(ParseTemplateError) as exc_info:
            parse_template("Hello {{bad name}}")
        assert exc_info.value.position == 6

    def test_unterminated_escape_message(self) -> None:
        """Test unterminated escapes are reported as such."""
        with pytest.raises(ParseTemplateError, match="unterminated escaped literal"):
            parse_template("{{{{oops")

    def test_unterminated_placeholder_message(self) -> None:
        """Test unterminated placeholders are reported as such."""
        with pytest.raises(ParseTemplateError, match="unterminated placeholder"):
            parse_template("Hello {{name")

    def test_error_string_prefix(self) -> None:
        """Test str() of the error carries the parse error prefix."""
        with pytest.raises(ParseTemplateError) as exc_info:
            parse_template("{{")
        assert str(exc_info.value).startswith("Parse template error:")


class TestIsValidIdentifier:
    """Tests for is_valid_identifier."""

    @pytest.mark.parametrize("name", ["a", "greeting", "my-prompt_01", "A" * 64])
    def test_valid(self, name: str) -> None:
        """Test names accepted by the grammar."""
        assert is_valid_identifier(name)

    @pytest.mark.parametrize("name", ["", "has space", "dot.name", "../etc", "a" * 65, "x\n"])
    def test_invalid(self, name: str) -> None:
        """Test names rejected by the grammar."""
        assert not is_valid_identifier(name)
