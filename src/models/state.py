"""
Forge state model and pipeline helper

Defines ForgeState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from typing import Any, Callable, List, Optional, Type, TypeVar, TYPE_CHECKING
from dataclasses import dataclass, field

from .codeblock import Property

# Forward references for type hints - avoid circular import
if TYPE_CHECKING:
    from ..lib.loader import TemplateLoader
    from ..lib.renderer import MarkdownRenderer


FS = TypeVar("FS", bound="ForgeState")


@dataclass
class ForgeState:
    """
    Central state container for the forge pipeline (state bus pattern).

    This dataclass carries all state through the functional pipeline,
    with each stage adding new fields as the forge progresses.

    Pipeline stages and their state additions:
        - Initial: source, loader, renderer, settings, verbosity, strict
        - codeblock_parse: properties
        - templateName_resolve: templateName, templatePath
        - template_load: templateSource
        - template_tokenize: tokens
        - values_render: renderedProperties
        - template_compile: output

    Attributes:
        source: Raw codeblock text
        loader: Template loader collaborator
        renderer: Markdown renderer collaborator applied to property values
        settings: AppSettings driving template lookup
        verbosity: Logging verbosity level (1-3)
        strict: Validate the placeholder catalogue for conflicts
        properties: Parsed codeblock properties
        templateName: Template name taken from the codeblock
        templatePath: Loader path built from templateName
        templateSource: Template text returned by the loader
        tokens: Tokenized template
        renderedProperties: Properties with rendered values
        output: Final compiled string
    """

    # Inputs
    source: str = field(default="")
    loader: Optional["TemplateLoader"] = field(default=None)
    renderer: Optional["MarkdownRenderer"] = field(default=None)
    settings: Any = field(default=None)
    verbosity: int = field(default=1)
    strict: bool = field(default=False)

    # Pipeline state
    properties: List[Property] = field(default_factory=list)
    templateName: str = field(default="")
    templatePath: str = field(default="")
    templateSource: str = field(default="")
    tokens: List[Any] = field(default_factory=list)  # List[Token] at runtime
    renderedProperties: List[Property] = field(default_factory=list)
    output: Optional[str] = field(default=None)

    @classmethod
    def state_createFromSettings(
        cls: Type["ForgeState"],
        source: str,
        loader: "TemplateLoader",
        renderer: Optional["MarkdownRenderer"] = None,
        settings: Any = None,
    ) -> "ForgeState":
        """
        Create ForgeState from application settings and the forge inputs.

        Args:
            source: Raw codeblock text
            loader: Template loader collaborator
            renderer: Markdown renderer collaborator (None keeps values raw)
            settings: AppSettings instance (defaults to the singleton)

        Returns:
            ForgeState ready for the first pipeline stage
        """
        if settings is None:
            from ..config import appsettings
            settings = appsettings
        return cls(
            source=source,
            loader=loader,
            renderer=renderer,
            settings=settings,
            verbosity=settings.verbosity,
            strict=settings.strict_mode,
        )

    def copy(self: FS) -> FS:
        """
        Creates a shallow copy of the ForgeState instance.

        Returns:
            A new ForgeState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ForgeState, *stages: Callable[[ForgeState], ForgeState]
) -> ForgeState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ForgeState) -> ForgeState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ForgeState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ForgeState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            codeblock_parse,
            template_load,
            template_compile,
        )

    This is equivalent to:
        template_compile(template_load(codeblock_parse(initial_state)))

    But reads left-to-right instead of inside-out.
    """
    from functools import reduce
    return reduce(lambda state, stage: stage(state), stages, initial_state)
