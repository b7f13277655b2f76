"""
Overlay translator - configuration and settings persistence.
"""
import json
import logging
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

PROVIDER_ENV_VARS: Dict[str, str] = {
    "openai": "OPENAI_API_KEY",
    "gemini": "GEMINI_API_KEY",
    "google": "GOOGLE_TRANSLATE_API_KEY",
}

DEFAULT_SETTINGS_PATH = Path.home() / ".config" / "PDFOverlayTranslator" / "settings.json"


def env_api_key(provider: str) -> Optional[str]:
    env_var = PROVIDER_ENV_VARS.get(provider)
    return os.getenv(env_var) if env_var else None


@dataclass
class EngineConfig:
    """Configuration for extraction, translation and export."""

    # Rendering
    scale: float = 1.5
    font_path: Optional[str] = None

    # OCR
    ocr_language: str = "eng"
    min_ocr_confidence: float = 50

    # Translation
    target_lang: str = "es"
    provider: str = "free"
    api_key: Optional[str] = None

    # Export
    export_image_format: str = "PNG"

    def __post_init__(self):
        """Load the provider's API key from the environment if not provided."""
        if self.api_key is None:
            self.api_key = env_api_key(self.provider)

    def apply_settings(self, settings: "Settings"):
        """Take persisted user choices; an environment key still wins over a stored one."""
        self.provider = settings.provider
        self.target_lang = settings.target_lang
        self.api_key = env_api_key(self.provider) or settings.api_key or None


@dataclass
class Settings:
    """User choices persisted between runs."""
    api_key: str = ""
    provider: str = "free"
    target_lang: str = "es"
    ocr: bool = False


class SettingsStore:
    """JSON-file load/save capability for Settings."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path else DEFAULT_SETTINGS_PATH

    def load(self) -> Settings:
        """Stored settings, or defaults when the file is missing or unreadable."""
        if not self.path.exists():
            return Settings()
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            known = {k: v for k, v in data.items() if k in Settings.__dataclass_fields__}
            return Settings(**known)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable settings file {self.path}: {e}")
            return Settings()

    def save(self, settings: Settings):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(asdict(settings), f, indent=2, ensure_ascii=False)
        logger.debug(f"Settings saved to {self.path}")


# Target languages offered on the command line
LANGUAGES: Dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese (Simplified)",
    "vi": "Vietnamese",
    "ar": "Arabic",
}

