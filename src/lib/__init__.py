"""
calloutforge - Codeblock-to-template forge

Parses key/value codeblocks and fills HTML templates carrying
{{ placeholders }} with their values.
"""

__version__ = "1.0.0"

from .parser import CodeblockParser, parse_codeblock
from .tokenizer import Template, TemplateTokenizer, tokenize_template
from .compiler import TemplateCompiler, compile_template
from .syntax import SyntaxRegistry, PlaceholderSyntax, DEFAULT_SYNTAXES
from .forge import forge, forge_callout
from .log import LOG, state_connectToLogger, state_disconnectFromLogger

__all__ = [
    "CodeblockParser",
    "parse_codeblock",
    "Template",
    "TemplateTokenizer",
    "tokenize_template",
    "TemplateCompiler",
    "compile_template",
    "SyntaxRegistry",
    "PlaceholderSyntax",
    "DEFAULT_SYNTAXES",
    "forge",
    "forge_callout",
    "LOG",
    "state_connectToLogger",
    "state_disconnectFromLogger",
    "__version__",
]
