"""
Parser for codeblock sources

Turns a codeblock of ``key: value`` lines into an ordered list of Property
records. The parser is a finite state machine driven line by line by the
LineMatcher:

    Start ──property──▶ PropertyDeclared ──text──▶ PropertyText
                               │                        │
                               └──fence-open──▶ FenceOpen ──▶ FenceText
                                                    │             │
                                                    └─fence-close─┴──▶ FenceClose

Transitions live in a flat ``(state, category) -> state`` table; what happens
on entering a state lives in a second table of entry actions. Fenced content
is opaque: inside a fence, property-looking and fence-looking lines are plain
value text, and the fence delimiter lines themselves are kept in the value.

Example:
    >>> properties = parse_codeblock("title: Hello\\ncontent: World")
    >>> [(p.key, p.value) for p in properties]
    [('title', 'Hello'), ('content', 'World')]
"""

from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..models.codeblock import (
    ACCEPTING_STATES,
    LineCategory,
    LineMatch,
    ParserState,
    Property,
    PropertyBuffer,
)
from .exceptions import (
    CalloutForgeError,
    CodeblockSyntaxError,
    DuplicateKeyError,
    InputError,
    UnknownTransitionError,
)
from .log import LOG
from .matcher import LineMatcher


S = ParserState
C = LineCategory

TRANSITIONS: Dict[Tuple[ParserState, LineCategory], ParserState] = {
    (S.START, C.PROPERTY_START): S.PROPERTY_DECLARED,

    (S.PROPERTY_DECLARED, C.PROPERTY_START): S.PROPERTY_DECLARED,
    (S.PROPERTY_DECLARED, C.FENCE_OPEN): S.FENCE_OPEN,
    (S.PROPERTY_DECLARED, C.TEXT): S.PROPERTY_TEXT,

    (S.PROPERTY_TEXT, C.PROPERTY_START): S.PROPERTY_DECLARED,
    (S.PROPERTY_TEXT, C.FENCE_OPEN): S.FENCE_OPEN,
    (S.PROPERTY_TEXT, C.TEXT): S.PROPERTY_TEXT,

    (S.FENCE_OPEN, C.PROPERTY_START): S.FENCE_TEXT,
    (S.FENCE_OPEN, C.FENCE_OPEN): S.FENCE_TEXT,
    (S.FENCE_OPEN, C.FENCE_CLOSE): S.FENCE_CLOSE,
    (S.FENCE_OPEN, C.TEXT): S.FENCE_TEXT,

    (S.FENCE_TEXT, C.PROPERTY_START): S.FENCE_TEXT,
    (S.FENCE_TEXT, C.FENCE_OPEN): S.FENCE_TEXT,
    (S.FENCE_TEXT, C.FENCE_CLOSE): S.FENCE_CLOSE,
    (S.FENCE_TEXT, C.TEXT): S.FENCE_TEXT,

    (S.FENCE_CLOSE, C.PROPERTY_START): S.PROPERTY_DECLARED,
    (S.FENCE_CLOSE, C.FENCE_OPEN): S.FENCE_OPEN,
    (S.FENCE_CLOSE, C.TEXT): S.PROPERTY_TEXT,
}


class EntryAction(Enum):
    """Side effects performed when the parser enters a state"""
    PROPERTY_START = "property-start"    # finalize the buffer, open a new one
    LINE_APPEND = "line-append"          # append the line to the buffer
    FENCE_OPEN = "fence-open"            # remember the fence terminator
    FENCE_CLOSE = "fence-close"          # forget the fence terminator
    PROPERTY_FINALIZE = "finalize"       # finalize the buffer


ENTRY_ACTIONS: Dict[ParserState, Tuple[EntryAction, ...]] = {
    S.PROPERTY_DECLARED: (EntryAction.PROPERTY_START,),
    S.PROPERTY_TEXT: (EntryAction.LINE_APPEND,),
    S.FENCE_OPEN: (EntryAction.LINE_APPEND, EntryAction.FENCE_OPEN),
    S.FENCE_TEXT: (EntryAction.LINE_APPEND,),
    S.FENCE_CLOSE: (EntryAction.LINE_APPEND, EntryAction.FENCE_CLOSE),
    S.END: (EntryAction.PROPERTY_FINALIZE,),
    S.ERROR: (),
}


def transition_next(state: ParserState, category: LineCategory) -> Optional[ParserState]:
    """
    Look up the state reached from ``state`` on a line of ``category``

    Returns:
        The next state, or None when the table has no entry
    """
    return TRANSITIONS.get((state, category))


class CodeblockParser:
    """
    Finite state machine parser for codeblock sources

    Each parse() call works on fresh state: a new LineMatcher, an empty
    property list and no buffered property.
    """

    def __init__(self, source: str, debug: bool = False):
        """
        Initialize parser with source text

        Args:
            source: Raw codeblock text
            debug: Enable debug output for parser operations

        Attributes:
            source: Source text being parsed
            debug: Debug mode flag
            state: Current ParserState
            line_number: 1-based number of the line being handled
            properties: Finalized properties, in declaration order
            buffer: Property currently being accumulated
            matcher: Line classifier owned by the current parse
            fence_lineNumber: Line that opened the current fence
        """
        self.source = source
        self.debug = debug
        self.state = ParserState.START
        self.line_number = 0
        self.properties: List[Property] = []
        self.buffer: Optional[PropertyBuffer] = None
        self.matcher = LineMatcher()
        self.fence_lineNumber = 0

        self.actions: Dict[EntryAction, Callable[[LineMatch], None]] = {
            EntryAction.PROPERTY_START: self.property_start,
            EntryAction.LINE_APPEND: self.line_append,
            EntryAction.FENCE_OPEN: self.fence_open,
            EntryAction.FENCE_CLOSE: self.fence_close,
            EntryAction.PROPERTY_FINALIZE: self.property_finalize,
        }

    def parse(self) -> List[Property]:
        """
        Parse source text into an ordered list of properties

        Returns:
            Properties in declaration order

        Raises:
            InputError: Source is empty or whitespace-only
            CodeblockSyntaxError: Source does not start with a property, or a
                                  code fence is still open at end of input
            UnknownTransitionError: A line category has no transition from
                                    the current state
            DuplicateKeyError: One or more keys are declared more than once

        Example:
            >>> CodeblockParser("note: intro\\n```\\ncode: 1\\n```").parse()
            [Property(key='note', value='intro\\n```\\ncode: 1\\n```')]
        """
        trimmed = self.source.strip()
        if not trimmed:
            raise InputError("Codeblock is empty or has only whitespaces.")

        self.state = ParserState.START
        self.properties = []
        self.buffer = None
        self.matcher = LineMatcher()

        lines = trimmed.split("\n")
        LOG(f"Parsing codeblock of {len(lines)} lines", level=2)

        for line_number, line in enumerate(lines, start=1):
            self.line_number = line_number
            match = self.matcher.line_match(line, self.line_number)
            self.state_enter(self.transition_resolve(match), match)

        self.input_end()
        self.keys_validate()

        LOG(f"Parsed {len(self.properties)} properties", level=2)
        return list(self.properties)

    def transition_resolve(self, match: LineMatch) -> ParserState:
        """
        Resolve the state to enter for a classified line

        Raises:
            CodeblockSyntaxError: First line is not a property declaration
            UnknownTransitionError: No table entry for (state, category)
        """
        next_state = transition_next(self.state, match.category)
        if next_state is not None:
            return next_state

        previous = self.state
        self.state = ParserState.ERROR
        if previous is ParserState.START:
            raise CodeblockSyntaxError(
                "Codeblock must start with a property (key: value).",
                line_number=match.line_number,
            )
        raise UnknownTransitionError(
            line_number=match.line_number,
            category=match.category.value,
            state=previous.value,
        )

    def state_enter(self, state: ParserState, match: Optional[LineMatch]) -> None:
        """Switch to ``state`` and run its entry actions for ``match``"""
        if self.debug:
            LOG(f"{self.state.value} -> {state.value}", level=3)
        self.state = state
        for action in ENTRY_ACTIONS[state]:
            self.actions[action](match)

    def input_end(self) -> None:
        """
        Handle end of input

        Raises:
            CodeblockSyntaxError: Input ended inside a code fence
        """
        if self.state in ACCEPTING_STATES:
            self.state_enter(ParserState.END, None)
            return

        self.state = ParserState.ERROR
        if self.matcher.fence_isOpen:
            raise CodeblockSyntaxError(
                f"Unexpected end of input: unclosed code fence opened at line {self.fence_lineNumber}.",
                line_number=self.line_number,
            )
        raise CodeblockSyntaxError(
            "Unexpected end of input.",
            line_number=self.line_number,
        )

    def property_start(self, match: LineMatch) -> None:
        """Finalize the buffered property and start a new one from ``match``"""
        self.property_finalize(match)
        self.buffer = PropertyBuffer(key=match.key or "", line_number=match.line_number)
        self.buffer.line_append(match.value or "")

    def property_finalize(self, match: Optional[LineMatch]) -> None:
        """Push the buffered property, if any, onto the result list"""
        if self.buffer is not None:
            self.properties.append(self.buffer.finalize())
            self.buffer = None

    def line_append(self, match: LineMatch) -> None:
        """Append the stripped line to the buffered property's value"""
        if self.buffer is None:
            raise CalloutForgeError(
                f"Line {match.line_number}: no active property to append to."
            )
        self.buffer.line_append(match.content)

    def fence_open(self, match: LineMatch) -> None:
        """Arm the matcher with the exact backtick run of this fence"""
        self.matcher.fence_open(match.fence or "")
        self.fence_lineNumber = match.line_number

    def fence_close(self, match: LineMatch) -> None:
        """Disarm the matcher's fence terminator"""
        self.matcher.fence_close()
        self.fence_lineNumber = 0

    def keys_validate(self) -> None:
        """
        Reject duplicated keys

        Raises:
            DuplicateKeyError: Names every duplicated key in first-seen order
        """
        counts: Dict[str, int] = {}
        for prop in self.properties:
            counts[prop.key] = counts.get(prop.key, 0) + 1

        duplicates = [key for key, count in counts.items() if count > 1]
        if duplicates:
            raise DuplicateKeyError(duplicates)


def parse_codeblock(text: str, debug: bool = False) -> List[Property]:
    """Parse a codeblock into its ordered list of properties"""
    return CodeblockParser(text, debug=debug).parse()


def codeblock_serialize(properties: Iterable[Property]) -> str:
    """
    Render properties back to codeblock source

    Each property becomes a ``key: value`` line followed by the remaining
    value lines, so the result parses back to the same list.
    """
    return "\n".join(f"{prop.key}: {prop.value}" for prop in properties)
