"""Feature invocation: prompts, inputs, file extraction"""

from .extractor import extract_pdf_text, is_pdf
from .inputs import ConnectedFile, enhance_user_input
from .prompts import PromptStore
from .runner import FeatureRunner

__all__ = [
    "extract_pdf_text",
    "is_pdf",
    "ConnectedFile",
    "enhance_user_input",
    "PromptStore",
    "FeatureRunner",
]
