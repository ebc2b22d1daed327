"""
Forge pipeline: codeblock source to filled template

Orchestrates the full forge as a functional pipeline over ForgeState:
    1. codeblock_parse: Parse the codeblock into properties
    2. templateName_resolve: Pick the template named by the codeblock
    3. template_load: Load the template text through the loader
    4. template_tokenize: Tokenize the template (and check it in strict mode)
    5. values_render: Render property values through the renderer
    6. template_compile: Fill the template with the rendered values

Usage:
    from calloutforge.lib.forge import forge
    from calloutforge.lib.loader import FileTemplateLoader

    html = forge("template: note\\ntitle: Hello", FileTemplateLoader("vault"))
"""

import html
from typing import Any, Optional

from ..models.state import ForgeState, pipeline
from .compiler import compile_template
from .exceptions import CalloutForgeError, TemplateNotFoundError
from .lexer import source_highlight
from .loader import TemplateLoader
from .log import LOG, state_connectToLogger, state_disconnectFromLogger
from .parser import parse_codeblock
from .renderer import MarkdownRenderer, WrapRenderer, properties_render
from .tokenizer import Template


def codeblock_parse(inputstate: ForgeState) -> ForgeState:
    """
    Parse the codeblock source into properties.

    Returns:
        ForgeState with added field:
            - properties: List[Property] in declaration order
    """
    state = inputstate.copy()

    LOG("Parsing codeblock...", level=1)
    state.properties = parse_codeblock(state.source, debug=(state.verbosity >= 3))
    LOG(f"Keys: {', '.join(prop.key for prop in state.properties)}", level=2)
    return state


def templateName_resolve(inputstate: ForgeState) -> ForgeState:
    """
    Resolve the template named by the codeblock.

    Returns:
        ForgeState with added fields:
            - templateName: Value of the template property
            - templatePath: Loader path of the template

    Raises:
        TemplateNotFoundError: The codeblock has no (or an empty) template property
    """
    state = inputstate.copy()
    key = state.settings.template_key

    name = next((prop.value.strip() for prop in state.properties if prop.key == key), "")
    if not name:
        raise TemplateNotFoundError(f"Codeblock has no {key} property.")

    state.templateName = name
    state.templatePath = state.settings.templatePath_make(name)
    LOG(f"Template: {state.templatePath}", level=2)
    return state


def template_load(inputstate: ForgeState) -> ForgeState:
    """
    Load the template text.

    Returns:
        ForgeState with added field:
            - templateSource: Template text
    """
    state = inputstate.copy()

    LOG("Loading template...", level=1)
    state.templateSource = state.loader.load(state.templatePath)
    LOG(f"Read {len(state.templateSource)} characters from {state.templatePath}", level=2)
    return state


def template_tokenize(inputstate: ForgeState) -> ForgeState:
    """
    Tokenize the template; in strict mode also validate its placeholders.

    Returns:
        ForgeState with added field:
            - tokens: List[Token] in source order

    Raises:
        TokenConflictError: Strict mode only, a placeholder name is reused
                            incompatibly
    """
    state = inputstate.copy()

    LOG("Tokenizing template...", level=1)
    template = Template(state.templateSource)
    if state.strict:
        template.placeholders_validate()
        LOG(f"Placeholders: {', '.join(str(t) for t in template.placeholders)}", level=2)
    state.tokens = template.tokens
    return state


def values_render(inputstate: ForgeState) -> ForgeState:
    """
    Render property values for substitution.

    Returns:
        ForgeState with added field:
            - renderedProperties: Properties with rendered values
    """
    state = inputstate.copy()

    if state.renderer is None:
        state.renderedProperties = list(state.properties)
        return state

    LOG("Rendering property values...", level=1)
    state.renderedProperties = properties_render(state.properties, state.renderer)
    return state


def template_compile(inputstate: ForgeState) -> ForgeState:
    """
    Compile the template against the rendered properties.

    Returns:
        ForgeState with added field:
            - output: Final string
    """
    state = inputstate.copy()

    LOG("Compiling template...", level=1)
    state.output = compile_template(state.tokens, state.renderedProperties)
    LOG(f"Compiled {len(state.output)} characters", level=2)
    return state


def forge(
    source: str,
    loader: TemplateLoader,
    renderer: Optional[MarkdownRenderer] = None,
    settings: Any = None,
) -> str:
    """
    Fill the template named by a codeblock with the codeblock's values.

    Args:
        source: Raw codeblock text (must contain the template property)
        loader: Template loader collaborator
        renderer: Renderer applied to property values (default: WrapRenderer)
        settings: AppSettings instance (default: the singleton)

    Returns:
        Compiled template

    Raises:
        CalloutForgeError: Any parse, load, tokenize or compile failure
    """
    state = ForgeState.state_createFromSettings(
        source=source,
        loader=loader,
        renderer=renderer,
        settings=settings,
    )
    if state.renderer is None:
        state.renderer = WrapRenderer(state.settings.markdown_class)

    # Logging follows this state only while the pipeline runs
    token = state_connectToLogger(state)
    try:
        final = pipeline(
            state,
            codeblock_parse,
            templateName_resolve,
            template_load,
            template_tokenize,
            values_render,
            template_compile,
        )
    finally:
        state_disconnectFromLogger(token)
    return final.output or ""


def errorCallout_build(message: str, source: Optional[str] = None, settings: Any = None) -> str:
    """
    Build the error callout shown in place of a failed forge.

    Args:
        message: Error message
        source: Codeblock source to show highlighted (None to omit)
        settings: AppSettings instance (default: the singleton)

    Returns:
        Callout HTML
    """
    if settings is None:
        from ..config import appsettings
        settings = appsettings

    parts = [
        '<div class="callout callout-danger">',
        '<div class="callout-title">CalloutForge Error</div>',
        f'<div class="callout-content">{html.escape(message)}</div>',
    ]
    if source is not None and settings.error_source_highlight:
        parts.append(
            f'<div class="callout-source">{source_highlight(source, "codeblock", settings.pygments_style)}</div>'
        )
    parts.append('</div>')
    return "".join(parts)


def forge_callout(
    source: str,
    loader: TemplateLoader,
    renderer: Optional[MarkdownRenderer] = None,
    settings: Any = None,
) -> str:
    """
    Forge a codeblock for display, turning failures into an error callout.

    Returns:
        The compiled template, or the error callout, inside a
        ``callout-forge-wrapper`` div
    """
    try:
        content = forge(source, loader, renderer=renderer, settings=settings)
    except CalloutForgeError as e:
        LOG(f"Callout Forge Error: {e}", level=1)
        content = errorCallout_build(str(e), source, settings)
    return f'<div class="callout-forge-wrapper">{content}</div>'
