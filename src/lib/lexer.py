"""
Custom Pygments lexers for calloutforge sources

Provides syntax highlighting for codeblock sources and placeholder templates
when displaying them, e.g. in error callouts.

Codeblock token types:
- Name.Attribute: Property keys (e.g., title, note-body)
- Punctuation: The key/value colon
- String: Property values
- String.Backtick: Fence delimiters
- Name.Label: Fence language tags
- String.Doc: Fenced content

Template token types:
- Name.Variable: Placeholder names
- Operator: The optional marker (?) and the fallback bar (|)
- String: Fallback defaults
- Name.Builtin: HTML tags (passed through)
"""

import re

from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer, RegexLexer, bygroups
from pygments.lexers import get_lexer_by_name, TextLexer
from pygments.token import (
    Comment,
    Name,
    Operator,
    Punctuation,
    String,
    Text,
    Whitespace,
)
from pygments.util import ClassNotFound


class CodeblockLexer(RegexLexer):
    """
    Lexer for calloutforge codeblock sources

    Example:
        title: Hello
        body: Some text
        ```python
        x: 1
        ```

    Tokens:
        title → Name.Attribute
        : → Punctuation
        Hello → String
        ``` → String.Backtick
        python → Name.Label
        x: 1 → String.Doc (fenced content is never a property)
    """

    name = 'Calloutforge Codeblock'
    aliases = ['calloutforge', 'codeblock']
    filenames = []

    flags = re.MULTILINE

    tokens = {
        'root': [
            # Fenced block closed by the same backtick run
            (r'^([ \t]*)(`{3,})([^\n]*)(\n)((?s:.*?))^([ \t]*)(\2)([ \t]*)$',
             bygroups(Whitespace, String.Backtick, Name.Label, Whitespace,
                      String.Doc, Whitespace, String.Backtick, Whitespace)),

            # Property declaration
            (r'^([ \t]*)([a-z\-]+)([ \t]*)(:)([ \t]*)(.*)$',
             bygroups(Whitespace, Name.Attribute, Whitespace, Punctuation, Whitespace, String)),

            # Continuation lines (and unclosed fences)
            (r'.+', String),
            (r'\n', Whitespace),
        ],
    }


class TemplateLexer(RegexLexer):
    """
    Lexer for HTML templates carrying {{ placeholders }}

    Example:
        <h1>{{ title }}</h1>{{ subtitle? }}{{ footer | none }}
    """

    name = 'Calloutforge Template'
    aliases = ['calloutforge-template', 'cftemplate']
    filenames = []

    tokens = {
        'root': [
            # HTML comments
            (r'<!--.*?-->', Comment),

            # Required placeholder
            (r'(\{\{)(\s*)([a-zA-Z\-]+)(\s*)(\}\})',
             bygroups(Punctuation, Whitespace, Name.Variable, Whitespace, Punctuation)),

            # Optional placeholder
            (r'(\{\{)(\s*)([a-zA-Z\-]+)(\s*)(\?)(\s*)(\}\})',
             bygroups(Punctuation, Whitespace, Name.Variable, Whitespace, Operator, Whitespace, Punctuation)),

            # Fallback placeholder
            (r'(\{\{)(\s*)([a-zA-Z\-]+)(\s*)(\|)(\s*)([^\}]+)(\}\})',
             bygroups(Punctuation, Whitespace, Name.Variable, Whitespace, Operator, Whitespace, String, Punctuation)),

            # HTML tags (pass through as-is)
            (r'<[^>]+>', Name.Builtin),

            # Everything else is text
            (r'[^{<]+', Text),
            (r'.', Text),
            (r'\n', Text),
        ],
    }


def lexer_get(language: str) -> Lexer:
    """
    Get a lexer by language name

    Args:
        language: "codeblock", "template" or any Pygments language alias

    Returns:
        Lexer instance, TextLexer for unknown languages
    """
    if language.lower() in CodeblockLexer.aliases:
        return CodeblockLexer()
    if language.lower() in TemplateLexer.aliases + ['template']:
        return TemplateLexer()
    try:
        return get_lexer_by_name(language)
    except ClassNotFound:
        return TextLexer()


def source_highlight(source: str, language: str = "codeblock", style: str = "default") -> str:
    """
    Highlight a source as standalone HTML (inline styles, no stylesheet)

    Args:
        source: Text to highlight
        language: Lexer to use (see lexer_get)
        style: Pygments style name

    Returns:
        Highlighted HTML
    """
    formatter = HtmlFormatter(style=style, noclasses=True)
    return highlight(source, lexer_get(language), formatter)
