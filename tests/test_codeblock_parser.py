"""
Codeblock parser tests

Tests property extraction, multi-line values, fenced content, the
transition table and every parse error.
"""

import pytest

from calloutforge.lib.parser import (
    ENTRY_ACTIONS,
    TRANSITIONS,
    CodeblockParser,
    codeblock_serialize,
    parse_codeblock,
    transition_next,
)
from calloutforge.lib.exceptions import (
    CalloutForgeError,
    CodeblockSyntaxError,
    DuplicateKeyError,
    InputError,
    UnknownTransitionError,
)
from calloutforge.models.codeblock import (
    ACCEPTING_STATES,
    LineCategory,
    LineMatch,
    ParserState,
    Property,
    TERMINAL_STATES,
)


def pairs(properties):
    return [(prop.key, prop.value) for prop in properties]


class TestSimpleProperties:
    """Test single-line and multi-line properties"""

    def test_single_property(self):
        """One declaration line"""
        assert pairs(parse_codeblock("title: Hello World")) == [("title", "Hello World")]

    def test_multiple_properties_keep_order(self):
        """Properties come out in declaration order"""
        source = "title: Hello\ncontent: World\nfooter: Bye"

        assert pairs(parse_codeblock(source)) == [
            ("title", "Hello"),
            ("content", "World"),
            ("footer", "Bye"),
        ]

    def test_multiline_value(self):
        """Continuation lines are joined with newlines"""
        source = "description: First line\nSecond line\nThird line"

        assert pairs(parse_codeblock(source)) == [
            ("description", "First line\nSecond line\nThird line"),
        ]

    def test_empty_first_segment(self):
        """Value may start on the line after the key"""
        source = "content:\nbody text"

        assert pairs(parse_codeblock(source)) == [("content", "\nbody text")]

    def test_lines_are_stripped(self):
        """Indentation around lines is not kept"""
        source = """
            title: Example
            description: starts here
              continues here
            footer: done
        """

        assert pairs(parse_codeblock(source)) == [
            ("title", "Example"),
            ("description", "starts here\ncontinues here"),
            ("footer", "done"),
        ]

    def test_blank_lines_kept_in_value(self):
        """Blank continuation lines are value lines too"""
        assert pairs(parse_codeblock("body: a\n\nb")) == [("body", "a\n\nb")]

    def test_crlf_line_endings(self):
        """Windows line endings split like unix ones"""
        assert pairs(parse_codeblock("a: 1\r\nb: 2")) == [("a", "1"), ("b", "2")]

    @pytest.mark.parametrize("separator", ["\x0c", "\x1c", "\x85", "\u2028", "\u2029", "\v"])
    def test_only_newline_separates_lines(self, separator):
        """Other Unicode line boundaries stay inside the value"""
        props = parse_codeblock(f"a: x{separator}b: y")

        assert pairs(props) == [("a", f"x{separator}b: y")]

    def test_line_numbers_count_newlines_only(self):
        """Error line numbers ignore other line boundaries"""
        with pytest.raises(CodeblockSyntaxError) as info:
            parse_codeblock("a: x\u2028y\n```\ncode")

        assert info.value.line_number == 3

    def test_returns_property_records(self):
        """Result items are frozen Property records"""
        props = parse_codeblock("title: Hello")

        assert props == [Property(key="title", value="Hello")]
        with pytest.raises(AttributeError):
            props[0].value = "changed"

    def test_property_str(self):
        """Text form is key, colon, newline, value"""
        assert str(Property("note", "a\nb")) == "note:\na\nb"


class TestFencedContent:
    """Test code fences inside property values"""

    def test_fence_lines_kept_in_value(self):
        """Fence delimiters are value content"""
        source = "example: some code\n```\nconst x = 42;\nconsole.log(x);\n```"

        assert pairs(parse_codeblock(source)) == [
            ("example", "some code\n```\nconst x = 42;\nconsole.log(x);\n```"),
        ]

    def test_property_lookalike_inside_fence(self):
        """A key: value line inside a fence is not a property"""
        source = "note: intro\n```\ncode: 1\n```"

        assert pairs(parse_codeblock(source)) == [("note", "intro\n```\ncode: 1\n```")]

    def test_fence_with_language_tag(self):
        """Opening line may carry a language tag and is kept verbatim"""
        source = "snippet: see below\n```python\nx: int = 1\n```\nafter: yes"

        assert pairs(parse_codeblock(source)) == [
            ("snippet", "see below\n```python\nx: int = 1\n```"),
            ("after", "yes"),
        ]

    def test_longer_fence_contains_shorter_fence(self):
        """A four-backtick fence is not closed by three backticks"""
        source = "doc: text\n````markdown\n```\ninner: 1\n```\n````\nnext: value"

        assert pairs(parse_codeblock(source)) == [
            ("doc", "text\n````markdown\n```\ninner: 1\n```\n````"),
            ("next", "value"),
        ]

    def test_fence_directly_after_declaration(self):
        """PropertyDeclared -> FenceOpen"""
        source = "code:\n```\nprint(1)\n```"

        assert pairs(parse_codeblock(source)) == [("code", "\n```\nprint(1)\n```")]

    def test_empty_fence(self):
        """FenceOpen -> FenceClose with nothing between"""
        assert pairs(parse_codeblock("a: 1\n```\n```")) == [("a", "1\n```\n```")]

    def test_text_after_fence_close(self):
        """FenceClose -> PropertyText"""
        source = "a: 1\n```\nx\n```\ntrailing text"

        assert pairs(parse_codeblock(source)) == [("a", "1\n```\nx\n```\ntrailing text")]

    def test_second_fence_after_close(self):
        """FenceClose -> FenceOpen"""
        source = "a: 1\n```\nx\n```\n```\ny\n```"

        assert pairs(parse_codeblock(source)) == [("a", "1\n```\nx\n```\n```\ny\n```")]

    def test_multiple_properties_and_fences(self):
        """Mixed document"""
        source = (
            "title: Example\n"
            "description: starts here\n"
            "continues here\n"
            "```\n"
            "code block line\n"
            "another line\n"
            "```\n"
            "footer: done"
        )

        assert pairs(parse_codeblock(source)) == [
            ("title", "Example"),
            ("description", "starts here\ncontinues here\n```\ncode block line\nanother line\n```"),
            ("footer", "done"),
        ]


class TestErrors:
    """Test parse failures"""

    @pytest.mark.parametrize("source", ["", "   \n   \n", "\t"])
    def test_empty_input(self, source):
        """Empty or whitespace-only input fails before parsing"""
        with pytest.raises(InputError, match="empty or has only whitespaces"):
            parse_codeblock(source)

    def test_must_start_with_property(self):
        """First line must be a property"""
        with pytest.raises(CodeblockSyntaxError, match="must start with a property") as info:
            parse_codeblock("no-colon here\ntitle: x")

        assert info.value.line_number == 1

    def test_cannot_start_with_fence(self):
        """A fence cannot open the codeblock"""
        with pytest.raises(CodeblockSyntaxError, match="must start with a property"):
            parse_codeblock("```\ncode\n```")

    def test_unclosed_fence(self):
        """End of input inside a fence"""
        with pytest.raises(CodeblockSyntaxError, match="unclosed code fence opened at line 2") as info:
            parse_codeblock("code: intro\n```\nfunction()")

        assert info.value.line_number == 3

    def test_unclosed_fence_right_after_open(self):
        """End of input in FenceOpen"""
        with pytest.raises(CodeblockSyntaxError, match="unclosed code fence"):
            parse_codeblock("code: intro\n```")

    def test_mismatched_fence_never_closes(self):
        """Closing with a different run leaves the fence open"""
        with pytest.raises(CodeblockSyntaxError, match="unclosed code fence"):
            parse_codeblock("code: intro\n````\nx\n```")

    def test_syntax_error_is_builtin_syntax_error(self):
        """Codeblock syntax errors are also SyntaxError and CalloutForgeError"""
        with pytest.raises(SyntaxError):
            parse_codeblock("text first")
        with pytest.raises(CalloutForgeError):
            parse_codeblock("text first")

    def test_duplicate_key(self):
        """A repeated key is rejected"""
        with pytest.raises(DuplicateKeyError, match="Duplicate keys found: title") as info:
            parse_codeblock("title: a\ntitle: b")

        assert info.value.keys == ["title"]

    def test_all_duplicates_reported_in_first_seen_order(self):
        """Every duplicated key is named, in first-seen order"""
        source = "b: 1\na: 1\nc: 1\na: 2\nb: 2\nb: 3"

        with pytest.raises(DuplicateKeyError) as info:
            parse_codeblock(source)

        assert info.value.keys == ["b", "a"]
        assert str(info.value) == "Duplicate keys found: b, a"

    def test_duplicate_inside_fence_is_not_duplicate(self):
        """Fenced lookalikes do not count as keys"""
        assert len(parse_codeblock("a: 1\n```\na: 2\n```")) == 1

    def test_unknown_transition_is_distinct(self):
        """A missing table entry is an implementation error, not a syntax error"""
        parser = CodeblockParser("a: 1")
        parser.state = ParserState.PROPERTY_TEXT
        fake = LineMatch(
            category=LineCategory.FENCE_CLOSE,
            content="```",
            line_number=2,
            fence="```",
        )

        with pytest.raises(UnknownTransitionError, match="Line 2") as info:
            parser.transition_resolve(fake)

        assert not isinstance(info.value, CodeblockSyntaxError)
        assert info.value.state == "PropertyText"
        assert parser.state == ParserState.ERROR


class TestTransitionTable:
    """Test the flat transition table"""

    def test_start_only_accepts_property(self):
        """Start has exactly one outgoing transition"""
        assert transition_next(ParserState.START, LineCategory.PROPERTY_START) == ParserState.PROPERTY_DECLARED
        assert transition_next(ParserState.START, LineCategory.TEXT) is None
        assert transition_next(ParserState.START, LineCategory.FENCE_OPEN) is None

    @pytest.mark.parametrize("state", [ParserState.FENCE_OPEN, ParserState.FENCE_TEXT])
    def test_fence_states_absorb_everything_but_close(self, state):
        """Inside a fence everything except the terminator is fence text"""
        for category in (LineCategory.PROPERTY_START, LineCategory.FENCE_OPEN, LineCategory.TEXT):
            assert transition_next(state, category) == ParserState.FENCE_TEXT
        assert transition_next(state, LineCategory.FENCE_CLOSE) == ParserState.FENCE_CLOSE

    @pytest.mark.parametrize("state", [
        ParserState.PROPERTY_DECLARED,
        ParserState.PROPERTY_TEXT,
        ParserState.FENCE_CLOSE,
    ])
    def test_outside_fence_states(self, state):
        """Outside a fence states share their outgoing transitions"""
        assert transition_next(state, LineCategory.PROPERTY_START) == ParserState.PROPERTY_DECLARED
        assert transition_next(state, LineCategory.FENCE_OPEN) == ParserState.FENCE_OPEN
        assert transition_next(state, LineCategory.TEXT) == ParserState.PROPERTY_TEXT
        assert transition_next(state, LineCategory.FENCE_CLOSE) is None

    def test_terminal_states_have_no_transitions(self):
        """End and Error are terminal"""
        for (state, _category) in TRANSITIONS:
            assert state not in TERMINAL_STATES

    def test_accepting_states(self):
        """Only PropertyDeclared, PropertyText and FenceClose accept"""
        assert ACCEPTING_STATES == {
            ParserState.PROPERTY_DECLARED,
            ParserState.PROPERTY_TEXT,
            ParserState.FENCE_CLOSE,
        }

    def test_every_reachable_state_has_entry_actions(self):
        """Each target state has an entry in the action table"""
        for target in set(TRANSITIONS.values()):
            assert target in ENTRY_ACTIONS


class TestParserInstances:
    """Test parser reuse and isolation"""

    def test_parse_twice_same_result(self):
        """Parsing resets state on every call"""
        parser = CodeblockParser("a: 1\n```\nx\n```\nb: 2")

        assert parser.parse() == parser.parse()

    def test_failed_parse_does_not_leak_fence(self):
        """A fence left open by one parse does not affect the next"""
        with pytest.raises(CodeblockSyntaxError):
            parse_codeblock("a: 1\n```\nopen")

        assert pairs(parse_codeblock("a: 1\nb: 2")) == [("a", "1"), ("b", "2")]


class TestSerialization:
    """Test codeblock_serialize round trips"""

    @pytest.mark.parametrize("source", [
        "title: Hello\ncontent: World",
        "description: First line\nSecond line",
        "note: intro\n```\ncode: 1\n```\nfooter: done",
        "content:\nbody\n\nmore",
    ])
    def test_reparse_is_identity(self, source):
        """Serializing and re-parsing yields the same properties"""
        properties = parse_codeblock(source)

        assert parse_codeblock(codeblock_serialize(properties)) == properties
