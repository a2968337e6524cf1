"""Assemble the user input sent to the model from text plus connected files"""

from typing import Iterable, Optional

from pydantic import BaseModel, Field

UNEXTRACTED_PLACEHOLDER = "[File content could not be extracted]"
DEFAULT_USER_INPUT = "Please provide a comprehensive analysis."

# Browser placeholder for files it could not read
_NO_CONTENT = "No content available"


class ConnectedFile(BaseModel):
    """A file attached to a feature run"""

    name: str = Field(min_length=1, max_length=500)
    content: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None

    @property
    def has_content(self) -> bool:
        return bool(self.content and self.content.strip() and self.content != _NO_CONTENT)


def _file_block(file: ConnectedFile) -> str:
    body = file.content if file.has_content else UNEXTRACTED_PLACEHOLDER
    return f"\n\n--- FILE: {file.name} ---\n{body}\n--- END FILE ---"


def enhance_user_input(user_input: str, files: Iterable[ConnectedFile] = ()) -> str:
    """Append connected file contents to the user's input"""
    files = list(files)
    if not files:
        return user_input

    blocks = "\n".join(_file_block(f) for f in files)
    return f"{user_input}\n\n{blocks}"
