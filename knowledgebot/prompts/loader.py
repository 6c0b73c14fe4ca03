"""Prompt template loader and renderer."""

from pathlib import Path

_PROMPTS_DIR = Path(__file__).parent


class PromptLoader:
    """Loads and renders prompt templates from markdown files.

    Templates live next to this module (``system.md``); partials live in
    ``partials/``. Partials are returned with surrounding whitespace
    stripped so they can be joined without stray blank lines.
    """

    def __init__(self, prompts_dir: Path | None = None):
        self._dir = prompts_dir or _PROMPTS_DIR

    def load_template(self, name: str = "system") -> str:
        return (self._dir / f"{name}.md").read_text(encoding="utf-8")

    def load_partial(self, name: str) -> str:
        return (self._dir / "partials" / f"{name}.md").read_text(encoding="utf-8").strip()

    def render(self, template: str, **kwargs: str) -> str:
        """Render a template by substituting {variable} placeholders.

        Substituted values are inserted as-is; braces inside them are not
        treated as placeholders.
        """
        return template.format(**kwargs)
