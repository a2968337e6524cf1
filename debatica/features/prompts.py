"""
Prompt template store

One markdown file per feature, named ``<feature>.md``.
"""

import re
from pathlib import Path
from typing import Optional

import structlog

from debatica.core.exceptions import PromptNotFoundError

logger = structlog.get_logger(__name__)

BUNDLED_TEMPLATES = Path(__file__).parent / "templates"

_FEATURE_ID = re.compile(r"^[A-Za-z0-9_-]+$")


class PromptStore:
    """Loads system prompts for features from a directory"""

    def __init__(self, directory: Optional[Path] = None):
        self.directory = Path(directory) if directory else BUNDLED_TEMPLATES

    def _path(self, feature: str) -> Path:
        if not feature or not _FEATURE_ID.match(feature):
            raise PromptNotFoundError(feature)
        return self.directory / f"{feature}.md"

    def exists(self, feature: str) -> bool:
        try:
            return self._path(feature).is_file()
        except PromptNotFoundError:
            return False

    def load(self, feature: str) -> str:
        """Return the template text, or raise PromptNotFoundError"""
        path = self._path(feature)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.warning("Prompt template missing", feature=feature, path=str(path))
            raise PromptNotFoundError(feature) from None

        logger.debug("Prompt template loaded", feature=feature, chars=len(text))
        return text

    def list_features(self) -> list[str]:
        if not self.directory.is_dir():
            return []
        return sorted(
            p.stem for p in self.directory.glob("*.md")
            if _FEATURE_ID.match(p.stem)
        )
