"""
Template loaders

A loader returns the text of a template given its name (a path relative to
the loader's root). Loaders raise TemplateNotFoundError when a template does
not exist. No caching is performed.
"""

from pathlib import Path
from typing import Mapping, Protocol, Union

from .exceptions import TemplateNotFoundError
from .log import LOG


class TemplateLoader(Protocol):
    """Anything that can load template text by name"""

    def load(self, name: str) -> str:
        ...


class FileTemplateLoader:
    """
    Loads templates from a directory tree

    Names are resolved against ``root`` and may not escape it.

    Example:
        >>> loader = FileTemplateLoader("vault")
        >>> loader.load("HTML/note.html")   # reads vault/HTML/note.html
    """

    def __init__(self, root: Union[str, Path], encoding: str = "utf-8") -> None:
        self.root = Path(root)
        self.encoding = encoding

    def path_resolve(self, name: str) -> Path:
        """
        Resolve a template name to a file path under root

        Raises:
            TemplateNotFoundError: Name points outside root
        """
        root = self.root.resolve()
        path = (root / name).resolve()
        if path != root and root not in path.parents:
            raise TemplateNotFoundError(f"Template path '{name}' is outside the template root.")
        return path

    def load(self, name: str) -> str:
        """
        Read a template file

        Raises:
            TemplateNotFoundError: File does not exist or cannot be read
        """
        path = self.path_resolve(name)
        if not path.is_file():
            raise TemplateNotFoundError(f"Template file '{name}' does not exist.")
        try:
            text = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateNotFoundError(f"Template file '{name}' could not be read: {e}") from e
        LOG(f"Loaded template {path}", level=2)
        return text


class DictTemplateLoader:
    """Serves templates from an in-memory name → text mapping"""

    def __init__(self, templates: Mapping[str, str]) -> None:
        self.templates = dict(templates)

    def load(self, name: str) -> str:
        if name not in self.templates:
            raise TemplateNotFoundError(f"Template file '{name}' does not exist.")
        return self.templates[name]
