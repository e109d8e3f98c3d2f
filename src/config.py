"""
Global settings for PDF Study Assistant.
"""

import os

# Page
PAGE_TITLE = "PDF Analyzer & Learning Assistant"
PAGE_ICON = "📄"
PAGE_SUBTITLE = "Upload a PDF to generate summaries, learning plans, and quizzes with AI."

# Palette
ACCENT = "#6366F1"          # Indigo
ACCENT_HOVER = "#4F46E5"
BG_PAGE = "#111827"
CARD_BG = "#1F2937"
TEXT = "#E5E7EB"
TEXT_MUTED = "#9CA3AF"
ERROR_BG = "rgba(127,29,29,0.5)"

# Upload limits
PDF_MIME_TYPE = "application/pdf"
MAX_UPLOAD_BYTES = 50 * 1024 * 1024  # 50MB

# Prompt limits
MAX_TEXT_LENGTH = 50_000
QUIZ_QUESTION_COUNT = 5

# Model
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_TEMPERATURE = 0.4

# Environment
API_KEY_ENV = "OPENAI_API_KEY"
MODEL_ENV = "PDF_ASSISTANT_MODEL"
LOG_LEVEL_ENV = "PDF_ASSISTANT_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# Tabs
TAB_LABELS = {
    "summary": "Summary",
    "strategy": "4-Week Strategy",
    "quiz": "Quiz",
}


class ConfigurationError(RuntimeError):
    """Raised when a required setting is missing at startup."""


def require_api_key() -> str:
    """
    Return the API key for the hosted model.

    Raises:
        ConfigurationError: If the environment variable is unset or blank.
    """
    key = (os.environ.get(API_KEY_ENV) or "").strip()
    if not key:
        raise ConfigurationError(f"{API_KEY_ENV} environment variable not set.")
    return key


def model_name() -> str:
    return (os.environ.get(MODEL_ENV) or "").strip() or DEFAULT_MODEL


def log_level() -> str:
    return (os.environ.get(LOG_LEVEL_ENV) or "").strip().upper() or "INFO"
