"""
Placeholder syntax registry

A placeholder syntax pairs a regular expression with a builder turning its
match into a placeholder token. A SyntaxRegistry holds an ordered, immutable
set of syntaxes and combines them into a single pattern with one named
alternative per syntax. Alternatives are tried in registration order, so the
stricter required syntax is tried before the looser ones.

Syntax patterns use numbered groups only; the registry owns the named groups.
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Iterator, Match, Pattern, Tuple

from ..models.tokens import FallbackToken, OptionalToken, PlaceholderToken, RequiredToken
from .exceptions import SyntaxRegistryError, TokenizeError


@dataclass(frozen=True)
class PlaceholderSyntax:
    """
    One placeholder syntax

    Attributes:
        name: Syntax name, used as the named group of the combined pattern
        pattern: Regular expression source matching the whole placeholder
        build: Turns a match of ``pattern`` into a placeholder token
    """
    name: str
    pattern: str
    build: Callable[[Match[str]], PlaceholderToken]


def required_build(match: Match[str]) -> PlaceholderToken:
    return RequiredToken(name=match.group(1).strip())


def optional_build(match: Match[str]) -> PlaceholderToken:
    return OptionalToken(name=match.group(1).strip())


def fallback_build(match: Match[str]) -> PlaceholderToken:
    return FallbackToken(name=match.group(1).strip(), default=match.group(2).strip())


REQUIRED_SYNTAX = PlaceholderSyntax(
    name="required",
    pattern=r'\{\{\s*([a-zA-Z\-]+)\s*\}\}',
    build=required_build,
)

OPTIONAL_SYNTAX = PlaceholderSyntax(
    name="optional",
    pattern=r'\{\{\s*([a-zA-Z\-]+)\s*\?\s*\}\}',
    build=optional_build,
)

FALLBACK_SYNTAX = PlaceholderSyntax(
    name="fallback",
    pattern=r'\{\{\s*([a-zA-Z\-]+)\s*\|\s*([^\}]+)\s*\}\}',
    build=fallback_build,
)


class SyntaxRegistry:
    """
    Ordered, immutable collection of placeholder syntaxes

    Conflicts (two syntaxes with the same name or the same pattern) are
    rejected once, at construction.

    Example:
        >>> registry = SyntaxRegistry([REQUIRED_SYNTAX, OPTIONAL_SYNTAX])
        >>> registry.names
        ('required', 'optional')
        >>> len(registry.extend(FALLBACK_SYNTAX))
        3
    """

    def __init__(self, syntaxes: Iterable[PlaceholderSyntax]) -> None:
        """
        Build and validate a registry

        Args:
            syntaxes: Syntaxes in priority order

        Raises:
            SyntaxRegistryError: Duplicate name or pattern, a name that cannot
                                 name a regex group, or a pattern that does
                                 not compile
        """
        self._syntaxes: Tuple[PlaceholderSyntax, ...] = tuple(syntaxes)
        self._patterns: Dict[str, Pattern[str]] = {}

        seen_patterns: Dict[str, str] = {}
        for syntax in self._syntaxes:
            if not syntax.name.isidentifier():
                raise SyntaxRegistryError(
                    f"Placeholder syntax name '{syntax.name}' is not a valid identifier."
                )
            if syntax.name in self._patterns:
                raise SyntaxRegistryError(
                    f"Placeholder syntax with name '{syntax.name}' already exists."
                )
            if syntax.pattern in seen_patterns:
                raise SyntaxRegistryError(
                    f"Placeholder syntax with pattern '{syntax.pattern}' already exists "
                    f"(registered as '{seen_patterns[syntax.pattern]}')."
                )
            try:
                self._patterns[syntax.name] = re.compile(syntax.pattern)
            except re.error as e:
                raise SyntaxRegistryError(
                    f"Placeholder syntax '{syntax.name}' has an invalid pattern: {e}"
                ) from e
            seen_patterns[syntax.pattern] = syntax.name

        self._combined: Pattern[str] = re.compile(
            "|".join(f"(?P<{s.name}>{s.pattern})" for s in self._syntaxes)
        ) if self._syntaxes else re.compile(r'(?!)')

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(syntax.name for syntax in self._syntaxes)

    @property
    def combined(self) -> Pattern[str]:
        """Single pattern with one named alternative per syntax"""
        return self._combined

    def extend(self, syntax: PlaceholderSyntax) -> "SyntaxRegistry":
        """Return a new registry with ``syntax`` appended at lowest priority"""
        return SyntaxRegistry(self._syntaxes + (syntax,))

    def syntax_identify(self, match: Match[str]) -> PlaceholderSyntax:
        """
        Find which syntax produced a match of the combined pattern

        Raises:
            TokenizeError: No named alternative took part in the match
        """
        for syntax in self._syntaxes:
            if match.group(syntax.name) is not None:
                return syntax
        raise TokenizeError("No placeholder syntax in this registry matched.")

    def token_build(self, match: Match[str]) -> PlaceholderToken:
        """
        Build the placeholder token for a match of the combined pattern

        The matched text is re-run through its own syntax pattern so the
        builder sees that syntax's numbered groups.

        Raises:
            TokenizeError: The syntax pattern does not match its own text
        """
        syntax = self.syntax_identify(match)
        inner = self._patterns[syntax.name].fullmatch(match.group(0))
        if inner is None:
            raise TokenizeError(
                f"Placeholder syntax '{syntax.name}' did not match its own text: {match.group(0)!r}"
            )
        return syntax.build(inner)

    def __iter__(self) -> Iterator[PlaceholderSyntax]:
        return iter(self._syntaxes)

    def __len__(self) -> int:
        return len(self._syntaxes)

    def __repr__(self) -> str:
        return f"SyntaxRegistry({', '.join(self.names)})"


# Default registry: required, optional, fallback
DEFAULT_SYNTAXES = SyntaxRegistry([REQUIRED_SYNTAX, OPTIONAL_SYNTAX, FALLBACK_SYNTAX])
