"""
Template tokenizer

Scans a template (typically HTML) for placeholders and splits it into an
ordered list of tokens: literal TextTokens interleaved with typed
placeholder tokens, in left-to-right source order.

    "<h1>{{ title }}</h1>{{ body | empty }}"
        → [TextToken("<h1>"), RequiredToken("title"),
           TextToken("</h1>"), FallbackToken("body", "empty")]

A ``{{ ... }}`` run that matches no registered syntax stays literal text.
"""

from typing import Dict, Iterable, List, Optional

from ..models.codeblock import Property
from ..models.tokens import PlaceholderToken, TextToken, Token, placeholder_is, tokens_conflictReason
from .exceptions import TokenConflictError, TokenizeError
from .log import LOG
from .syntax import DEFAULT_SYNTAXES, SyntaxRegistry


class TemplateTokenizer:
    """
    Splits template text into tokens using a SyntaxRegistry

    A tokenizer holds no per-call state and may be reused.
    """

    def __init__(self, registry: Optional[SyntaxRegistry] = None) -> None:
        """
        Args:
            registry: Placeholder syntaxes to recognize (default: required,
                      optional and fallback)
        """
        self.registry = registry if registry is not None else DEFAULT_SYNTAXES

    def tokenize(self, source: str) -> List[Token]:
        """
        Tokenize template text

        The source is stripped of surrounding whitespace first. Empty
        literal segments are never emitted, so no two TextTokens are
        adjacent.

        Args:
            source: Template text

        Returns:
            Tokens in source order (empty list for empty source)

        Raises:
            TokenizeError: A syntax failed to build its token

        Example:
            >>> TemplateTokenizer().tokenize("Hello {{ name? }}!")
            [TextToken(content='Hello '), OptionalToken(name='name'), TextToken(content='!')]
        """
        text = source.strip()
        tokens: List[Token] = []
        index = 0

        for match in self.registry.combined.finditer(text):
            if match.start() > index:
                tokens.append(TextToken(text[index:match.start()]))
            tokens.append(self.registry.token_build(match))
            index = match.end()

        if index < len(text):
            tokens.append(TextToken(text[index:]))

        LOG(f"Tokenized template into {len(tokens)} tokens", level=2)
        return tokens


class Template:
    """
    Tokenized template with a catalogue of its placeholders

    The catalogue lists one placeholder per distinct name. Building it checks
    that every reuse of a name is equivalent to its first occurrence.

    Attributes:
        source: Stripped template text
        tokens: Tokens in source order
    """

    def __init__(self, source: str, tokenizer: Optional[TemplateTokenizer] = None) -> None:
        self.source = source.strip()
        self.tokens: List[Token] = (tokenizer or TemplateTokenizer()).tokenize(self.source)
        self._placeholders: Optional[List[PlaceholderToken]] = None

    @classmethod
    def fromString(cls, source: str) -> "Template":
        return cls(source)

    @property
    def placeholders(self) -> List[PlaceholderToken]:
        """
        Distinct placeholders in first-appearance order

        Raises:
            TokenConflictError: A name is reused with a different variant or
                                a different default
        """
        if self._placeholders is None:
            catalogue: Dict[str, PlaceholderToken] = {}
            for token in self.tokens:
                if not placeholder_is(token):
                    continue
                existing = catalogue.get(token.name)
                if existing is None:
                    catalogue[token.name] = token
                    continue
                reason = tokens_conflictReason(existing, token)
                if reason is not None:
                    raise TokenConflictError(token.name, reason)
            self._placeholders = list(catalogue.values())
        return self._placeholders

    def placeholders_validate(self) -> None:
        """Raise TokenConflictError if any placeholder name is reused incompatibly"""
        self.placeholders

    def token_has(self, name: str) -> bool:
        return any(token.name == name for token in self.placeholders)

    def token_get(self, name: str) -> PlaceholderToken:
        for token in self.placeholders:
            if token.name == name:
                return token
        raise TokenizeError(f"Placeholder '{name}' not found in the template.")

    @property
    def normalized(self) -> str:
        """Template text with every placeholder rewritten as ``{{ name }}``"""
        return "".join(
            f"{{{{ {token.name} }}}}" if placeholder_is(token) else token.content
            for token in self.tokens
        )

    def compile(self, properties: Iterable[Property]) -> str:
        """Compile this template against ``properties``"""
        from .compiler import compile_template
        return compile_template(self.tokens, properties)

    def __str__(self) -> str:
        return "".join(str(token) for token in self.tokens)


def tokenize_template(text: str, registry: Optional[SyntaxRegistry] = None) -> List[Token]:
    """Tokenize template text with the given (or default) syntax registry"""
    return TemplateTokenizer(registry).tokenize(text)
