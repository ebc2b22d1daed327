"""
Models package for calloutforge

Contains data structures and type definitions for the parse/compile pipeline.
"""

from .state import ForgeState, pipeline
from .codeblock import (
    Property,
    PropertyBuffer,
    LineCategory,
    LineMatch,
    ParserState,
    ACCEPTING_STATES,
    TERMINAL_STATES,
)
from .tokens import (
    TokenKind,
    TextToken,
    RequiredToken,
    OptionalToken,
    FallbackToken,
    Token,
    PlaceholderToken,
)

__all__ = [
    "ForgeState",
    "pipeline",
    "Property",
    "PropertyBuffer",
    "LineCategory",
    "LineMatch",
    "ParserState",
    "ACCEPTING_STATES",
    "TERMINAL_STATES",
    "TokenKind",
    "TextToken",
    "RequiredToken",
    "OptionalToken",
    "FallbackToken",
    "Token",
    "PlaceholderToken",
]
