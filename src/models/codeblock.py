"""
Codeblock data models

Type-safe structures shared by the line matcher and the codeblock parser:
the properties a codeblock yields, the line categories the matcher reports
and the states of the parser's finite state machine.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional


@dataclass(frozen=True)
class Property:
    """
    One finalized key/value entry of a codeblock

    Properties are produced by the parser in declaration order and never
    change afterwards. Multi-line values are joined with newlines.

    Attributes:
        key: Property name, lowercase letters and dashes (e.g. "title")
        value: Property value, possibly spanning several lines

    Example:
        For the source "note: intro\\nmore text":
        Property(key="note", value="intro\\nmore text")
    """
    key: str
    value: str

    def __str__(self) -> str:
        return f"{self.key}:\n{self.value}"


@dataclass
class PropertyBuffer:
    """
    Property under construction

    Holds the key and the lines gathered so far while the parser is still
    inside the property. Lines can only be appended; finalize() freezes the
    buffer into a Property.

    Attributes:
        key: Property name captured from the declaration line
        lines: Value lines, the first one being the declaration remainder
        line_number: Source line of the declaration (for error reporting)
    """
    key: str
    lines: List[str] = field(default_factory=list)
    line_number: int = 0

    def line_append(self, line: str) -> None:
        """Append one line of text to the value"""
        self.lines.append(line)

    def finalize(self) -> Property:
        """Freeze the buffer into an immutable Property"""
        return Property(key=self.key, value="\n".join(self.lines))


class LineCategory(Enum):
    """
    Categories a codeblock line can fall into

    Listed in matcher priority order: the first category whose pattern
    matches a line wins.
    """
    FENCE_CLOSE = "fence-close"          # ``` (same run as the open fence)
    PROPERTY_START = "property-start"    # key: value
    FENCE_OPEN = "fence-open"            # ```lang
    TEXT = "text"                        # anything else


@dataclass(frozen=True)
class LineMatch:
    """
    Result of classifying one codeblock line

    Attributes:
        category: Which LineCategory matched
        content: The stripped line text
        line_number: 1-based line number in the trimmed source
        key: Captured property key (PROPERTY_START only)
        value: Captured first value segment (PROPERTY_START only)
        fence: Captured backtick run (FENCE_OPEN and FENCE_CLOSE only)
    """
    category: LineCategory
    content: str
    line_number: int
    key: Optional[str] = None
    value: Optional[str] = None
    fence: Optional[str] = None


class ParserState(Enum):
    """States of the codeblock parser"""
    START = "Start"
    PROPERTY_DECLARED = "PropertyDeclared"
    PROPERTY_TEXT = "PropertyText"
    FENCE_OPEN = "FenceOpen"
    FENCE_TEXT = "FenceText"
    FENCE_CLOSE = "FenceClose"
    END = "End"
    ERROR = "Error"


# States in which reaching end of input completes the parse
ACCEPTING_STATES: FrozenSet[ParserState] = frozenset({
    ParserState.PROPERTY_DECLARED,
    ParserState.PROPERTY_TEXT,
    ParserState.FENCE_CLOSE,
})

# States with no outgoing transitions
TERMINAL_STATES: FrozenSet[ParserState] = frozenset({
    ParserState.END,
    ParserState.ERROR,
})
