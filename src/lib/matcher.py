"""
Line matcher for codeblock sources

Classifies a single codeblock line into a LineCategory, testing the
categories in fixed priority order:

    1. fence-close     only while a fence is open; exactly the backtick run
                       that opened it and nothing else
    2. property-start  key: value  (key made of lowercase letters and dashes)
    3. fence-open      three or more backticks, optional language tag
    4. text            anything else

The matcher remembers the terminator of the currently open fence. A matcher
belongs to a single parse; never share one between parses.
"""

import re
from typing import Optional, Pattern

from ..models.codeblock import LineCategory, LineMatch
from .log import LOG


PROPERTY_PATTERN: Pattern[str] = re.compile(r'^([a-z\-]+)\s*:\s*(.*)$')
FENCE_OPEN_PATTERN: Pattern[str] = re.compile(r'^(`{3,})(?:\s*[^\s]+)?\s*$')


class LineMatcher:
    """
    Priority-ordered line classifier with a fence-terminator slot

    Example:
        >>> matcher = LineMatcher()
        >>> matcher.line_match("title: Hello", 1).category
        <LineCategory.PROPERTY_START: 'property-start'>
        >>> matcher.fence_open("````")
        >>> matcher.line_match("```", 2).category
        <LineCategory.FENCE_OPEN: 'fence-open'>
        >>> matcher.line_match("````", 3).category
        <LineCategory.FENCE_CLOSE: 'fence-close'>
    """

    def __init__(self) -> None:
        self.fence_terminator: Optional[Pattern[str]] = None

    @property
    def fence_isOpen(self) -> bool:
        """True while a code fence is open"""
        return self.fence_terminator is not None

    def fence_open(self, backticks: str) -> None:
        """Remember the exact backtick run that must close the current fence"""
        self.fence_terminator = re.compile(f'^({re.escape(backticks)})$')

    def fence_close(self) -> None:
        """Forget the fence terminator"""
        self.fence_terminator = None

    def line_match(self, line: str, line_number: int) -> LineMatch:
        """
        Classify one line

        Args:
            line: Line text (surrounding whitespace is ignored)
            line_number: 1-based line number, carried into the result

        Returns:
            LineMatch with the winning category and its captures
        """
        content = line.strip()

        if self.fence_terminator is not None:
            match = self.fence_terminator.match(content)
            if match:
                return self.match_log(LineMatch(
                    category=LineCategory.FENCE_CLOSE,
                    content=content,
                    line_number=line_number,
                    fence=match.group(1),
                ))

        match = PROPERTY_PATTERN.match(content)
        if match:
            return self.match_log(LineMatch(
                category=LineCategory.PROPERTY_START,
                content=content,
                line_number=line_number,
                key=match.group(1),
                value=match.group(2),
            ))

        match = FENCE_OPEN_PATTERN.match(content)
        if match:
            return self.match_log(LineMatch(
                category=LineCategory.FENCE_OPEN,
                content=content,
                line_number=line_number,
                fence=match.group(1),
            ))

        # Anything else is value text
        return self.match_log(LineMatch(
            category=LineCategory.TEXT,
            content=content,
            line_number=line_number,
        ))

    @staticmethod
    def match_log(match: LineMatch) -> LineMatch:
        LOG(f"Line {match.line_number}: {match.category.value}", level=3)
        return match
