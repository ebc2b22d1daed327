"""
Line matcher tests

Tests line classification priority and the fence terminator slot.
"""

import pytest

from calloutforge.lib.matcher import LineMatcher
from calloutforge.models.codeblock import LineCategory


class TestPropertyLines:
    """Test property declaration lines"""

    def test_simple_property(self):
        """key: value captures key and value"""
        match = LineMatcher().line_match("title: Hello World", 1)

        assert match.category == LineCategory.PROPERTY_START
        assert match.key == "title"
        assert match.value == "Hello World"
        assert match.line_number == 1

    def test_dashed_key_and_loose_colon(self):
        """Dashes in key, spaces around the colon"""
        match = LineMatcher().line_match("note-body   :   text: with colon", 3)

        assert match.category == LineCategory.PROPERTY_START
        assert match.key == "note-body"
        assert match.value == "text: with colon"

    def test_empty_value(self):
        """Declaration with nothing after the colon"""
        match = LineMatcher().line_match("content:", 1)

        assert match.category == LineCategory.PROPERTY_START
        assert match.value == ""

    def test_uppercase_key_is_text(self):
        """Keys are lowercase only"""
        match = LineMatcher().line_match("Title: Hello", 1)
        assert match.category == LineCategory.TEXT

    def test_surrounding_whitespace_ignored(self):
        """Lines are stripped before matching"""
        match = LineMatcher().line_match("   title: Hello   ", 1)

        assert match.category == LineCategory.PROPERTY_START
        assert match.content == "title: Hello"


class TestFenceLines:
    """Test fence open/close classification"""

    @pytest.mark.parametrize("line", ["```", "````", "```python", "``` js"])
    def test_fence_open(self, line):
        """Three or more backticks, optional language tag"""
        match = LineMatcher().line_match(line, 1)
        assert match.category == LineCategory.FENCE_OPEN

    def test_fence_open_captures_run(self):
        """Captured fence is the backtick run only"""
        match = LineMatcher().line_match("````python", 1)
        assert match.fence == "````"

    @pytest.mark.parametrize("line", ["``", "``` two words", "text ```"])
    def test_not_fence_open(self, line):
        """Too few backticks or extra words are plain text"""
        match = LineMatcher().line_match(line, 1)
        assert match.category == LineCategory.TEXT

    def test_fence_close_disabled_without_open_fence(self):
        """No open fence means no fence-close category"""
        matcher = LineMatcher()

        assert not matcher.fence_isOpen
        assert matcher.line_match("```", 1).category == LineCategory.FENCE_OPEN

    def test_fence_close_requires_exact_run(self):
        """A four-backtick fence only closes on four backticks"""
        matcher = LineMatcher()
        matcher.fence_open("````")

        assert matcher.line_match("```", 2).category == LineCategory.FENCE_OPEN
        assert matcher.line_match("`````", 3).category == LineCategory.FENCE_OPEN
        assert matcher.line_match("````", 4).category == LineCategory.FENCE_CLOSE

    def test_fence_close_with_language_is_not_close(self):
        """Closing line must hold nothing but the backticks"""
        matcher = LineMatcher()
        matcher.fence_open("```")

        assert matcher.line_match("```python", 2).category == LineCategory.FENCE_OPEN

    def test_fence_close_beats_property(self):
        """Fence-close has the highest priority"""
        matcher = LineMatcher()
        matcher.fence_open("```")

        assert matcher.line_match("```", 2).category == LineCategory.FENCE_CLOSE

    def test_fence_close_clears_slot(self):
        """After fence_close the terminator is forgotten"""
        matcher = LineMatcher()
        matcher.fence_open("```")
        matcher.fence_close()

        assert not matcher.fence_isOpen
        assert matcher.line_match("```", 2).category == LineCategory.FENCE_OPEN

    def test_matchers_do_not_share_fence_state(self):
        """Each matcher owns its own terminator"""
        first = LineMatcher()
        second = LineMatcher()
        first.fence_open("```")

        assert first.fence_isOpen
        assert not second.fence_isOpen


class TestTextLines:
    """Test the generic fallback"""

    @pytest.mark.parametrize("line", ["", "just text", "no-colon here", "{{ title }}"])
    def test_text(self, line):
        """Anything else is text"""
        match = LineMatcher().line_match(line, 1)

        assert match.category == LineCategory.TEXT
        assert match.key is None
        assert match.fence is None
