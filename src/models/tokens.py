"""
Template token models

A tokenized template is an ordered list of tokens: literal text segments
interleaved with typed placeholders. Each placeholder variant carries its own
resolution rule for when no property matches its name:

    RequiredToken   {{ name }}            no fallback, absence is an error
    OptionalToken   {{ name? }}           falls back to the empty string
    FallbackToken   {{ name | default }}  falls back to the literal default
"""

from enum import Enum
from dataclasses import dataclass
from typing import Optional, Union


class TokenKind(Enum):
    """Variant tag of a token"""
    TEXT = "text"
    REQUIRED = "required"
    OPTIONAL = "optional"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class TextToken:
    """Literal template text, emitted verbatim"""
    content: str

    @property
    def kind(self) -> TokenKind:
        return TokenKind.TEXT

    def __str__(self) -> str:
        return self.content


@dataclass(frozen=True)
class RequiredToken:
    """Placeholder that must be resolved by a property"""
    name: str

    @property
    def kind(self) -> TokenKind:
        return TokenKind.REQUIRED

    @property
    def fallback(self) -> Optional[str]:
        return None

    def __str__(self) -> str:
        return f"{{{{ {self.name} }}}}"


@dataclass(frozen=True)
class OptionalToken:
    """Placeholder that compiles to nothing when unresolved"""
    name: str

    @property
    def kind(self) -> TokenKind:
        return TokenKind.OPTIONAL

    @property
    def fallback(self) -> Optional[str]:
        return ""

    def __str__(self) -> str:
        return f"{{{{ {self.name}? }}}}"


@dataclass(frozen=True)
class FallbackToken:
    """Placeholder carrying an explicit default for when it is unresolved"""
    name: str
    default: str

    @property
    def kind(self) -> TokenKind:
        return TokenKind.FALLBACK

    @property
    def fallback(self) -> Optional[str]:
        return self.default

    def __str__(self) -> str:
        return f"{{{{ {self.name} | {self.default} }}}}"


PlaceholderToken = Union[RequiredToken, OptionalToken, FallbackToken]
Token = Union[TextToken, RequiredToken, OptionalToken, FallbackToken]


def placeholder_is(token: Token) -> bool:
    """Check whether a token is a placeholder (anything but literal text)"""
    return token.kind is not TokenKind.TEXT


def tokens_conflictReason(first: PlaceholderToken, second: PlaceholderToken) -> Optional[str]:
    """
    Compare two placeholders sharing a name

    Two placeholders are equivalent only when they have the same variant and
    the same resolution data (for fallbacks, the same default).

    Args:
        first: Placeholder seen earlier in the template
        second: Placeholder seen later with the same name

    Returns:
        None when equivalent, otherwise a short description of the conflict

    Example:
        >>> tokens_conflictReason(FallbackToken("locale", "en"), FallbackToken("locale", "fr"))
        "is declared with defaults 'en' and 'fr'"
    """
    if first.kind is not second.kind:
        return f"is declared both as {first.kind.value} and {second.kind.value}"
    if first.kind is TokenKind.FALLBACK and first.fallback != second.fallback:
        return f"is declared with defaults '{first.fallback}' and '{second.fallback}'"
    return None


def tokens_equivalent(first: PlaceholderToken, second: PlaceholderToken) -> bool:
    """Check whether two placeholders may share a name without conflict"""
    return tokens_conflictReason(first, second) is None
