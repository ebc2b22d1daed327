"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use CALLOUTFORGE_ prefix (e.g., CALLOUTFORGE_STRICT_MODE=true).

Settings can also be loaded from a .env file in the project root.
"""

from pathlib import PurePosixPath

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use CALLOUTFORGE_ prefix.

    Examples:
        CALLOUTFORGE_TEMPLATE_DIR=Templates/HTML
        CALLOUTFORGE_TEMPLATE_SUFFIX=.md
        CALLOUTFORGE_VERBOSITY=3
    """

    model_config = SettingsConfigDict(
        env_prefix="CALLOUTFORGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Template lookup
    template_dir: str = Field(
        default="HTML",
        description="Directory holding the HTML templates, relative to the loader root",
    )

    template_suffix: str = Field(
        default=".html",
        description="File suffix appended to the template name taken from the codeblock",
    )

    template_key: str = Field(
        default="template",
        description="Codeblock property that names the template to fill",
    )

    # Rendering
    markdown_class: str = Field(
        default="cf-markdown",
        description="CSS class of the div wrapping property values for later markdown rendering",
    )

    strict_mode: bool = Field(
        default=False,
        description="Strict mode: reject templates reusing a placeholder name with conflicting syntax",
    )

    # Diagnostics
    verbosity: int = Field(
        default=1,
        description="Logging verbosity for forge pipelines (1=normal, 2=verbose, 3=trace)",
    )

    pygments_style: str = Field(
        default="default",
        description="Pygments style used when highlighting sources in error callouts",
    )

    error_source_highlight: bool = Field(
        default=True,
        description="Include the highlighted codeblock source in error callouts",
    )

    def templatePath_make(self, name: str) -> str:
        """
        Build the loader path of a template from its codeblock name.

        Args:
            name: Template name as written in the codeblock (e.g. "note")

        Returns:
            Normalized POSIX path (e.g. "HTML/note.html")

        Example:
            >>> settings = AppSettings()
            >>> settings.templatePath_make("note")
            'HTML/note.html'
        """
        return str(PurePosixPath(self.template_dir) / f"{name.strip()}{self.template_suffix}")


# Singleton instance - import this in your code
appsettings = AppSettings()
