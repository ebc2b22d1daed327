"""
calloutforge - Codeblock-to-template forge

Turns small key/value codeblocks into filled HTML templates.
"""

__version__ = "1.0.0"

from .lib import (
    CodeblockParser,
    parse_codeblock,
    Template,
    TemplateTokenizer,
    tokenize_template,
    TemplateCompiler,
    compile_template,
    forge,
    forge_callout,
    LOG,
    state_connectToLogger,
)

__all__ = [
    "CodeblockParser",
    "parse_codeblock",
    "Template",
    "TemplateTokenizer",
    "tokenize_template",
    "TemplateCompiler",
    "compile_template",
    "forge",
    "forge_callout",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
