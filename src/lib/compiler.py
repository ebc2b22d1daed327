"""
Compiler for tokenized templates

Resolves every placeholder token of a tokenized template against a set of
properties and joins the result into the final string.

Resolution per placeholder occurrence:
    property present  → the property value
    OptionalToken     → ""
    FallbackToken     → its own default
    RequiredToken     → missing (reported after the whole template is scanned)

Emitted values are never re-scanned for placeholders, and repeated
placeholders are resolved independently.
"""

from typing import Dict, Iterable, List, Mapping, Union

from ..models.codeblock import Property
from ..models.tokens import Token, placeholder_is
from .exceptions import MissingRequiredError
from .log import LOG


PropertySource = Union[Iterable[Property], Mapping[str, str]]


class TemplateCompiler:
    """
    Compiles tokenized templates to strings

    Properties not referenced by any placeholder are ignored.
    """

    def compile(self, tokens: Iterable[Token], properties: PropertySource) -> str:
        """
        Compile tokens against properties

        Args:
            tokens: Tokenized template, in source order
            properties: Properties (or a key → value mapping) with values
                        already rendered

        Returns:
            Compiled string

        Raises:
            MissingRequiredError: Names every required placeholder without a
                                  matching property, in document order

        Example:
            >>> tokens = tokenize_template("<h1>{{ title }}</h1><p>{{ content | nothing }}</p>")
            >>> TemplateCompiler().compile(tokens, [Property("title", "Hello")])
            '<h1>Hello</h1><p>nothing</p>'
        """
        values = self.values_lookup(properties)
        parts: List[str] = []
        missing: List[str] = []

        for token in tokens:
            if not placeholder_is(token):
                parts.append(token.content)
                continue

            if token.name in values:
                parts.append(values[token.name])
                continue

            fallback = token.fallback
            if fallback is None:
                if token.name not in missing:
                    missing.append(token.name)
                continue
            parts.append(fallback)

        if missing:
            raise MissingRequiredError(missing)

        LOG(f"Compiled {len(parts)} segments", level=2)
        return "".join(parts)

    @staticmethod
    def values_lookup(properties: PropertySource) -> Dict[str, str]:
        """Build the key → value lookup used to resolve placeholders"""
        if isinstance(properties, Mapping):
            return dict(properties)
        return {prop.key: prop.value for prop in properties}


def compile_template(tokens: Iterable[Token], properties: PropertySource) -> str:
    """Compile a tokenized template against properties"""
    return TemplateCompiler().compile(tokens, properties)
