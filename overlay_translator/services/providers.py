"""
Translation service provider implementations.
"""
import html
import json
import logging
import time
from typing import Any, Dict, List, Optional, Type

import requests

from overlay_translator.core.errors import TranslationFailure
from .base import (
    FreeTranslationService,
    PaidTranslationService,
    ServiceStatus,
    TranslationServiceBase,
)

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30
ERROR_PREFIX = "[Error] "


def build_prompt(texts: List[str], target_lang: str) -> str:
    return (
        f"Translate the following array of text strings into {target_lang}. "
        "Return ONLY a JSON array of strings. Maintain original order exactly. \n\n"
        f"{json.dumps(texts, ensure_ascii=False)}"
    )


def parse_json_response(content: str, originals: List[str]) -> List[str]:
    """
    Parse an LLM reply holding a JSON array of strings.

    Markdown code fences are stripped first. A reply that is not a JSON array
    yields ``"[Error] " + original`` for every item instead of raising.
    """
    cleaned = (content or "").replace("```json", "").replace("```", "").strip()
    try:
        parsed = json.loads(cleaned)
    except ValueError:
        parsed = None

    if not isinstance(parsed, list):
        logger.warning(f"Unparseable translation reply: {cleaned[:80]!r}")
        return [ERROR_PREFIX + text for text in originals]
    return [item if isinstance(item, str) or item is None else str(item) for item in parsed]


class MockTranslationService(FreeTranslationService):
    """Offline stand-in: tags every text with the target language."""

    @property
    def name(self) -> str:
        return "Mock"

    @property
    def service_id(self) -> str:
        return "mock"

    def translate(self, texts: List[str], target_lang: str) -> List[str]:
        return [f"[{target_lang.upper()}] {text}" for text in texts]


class MyMemoryService(FreeTranslationService):
    """MyMemory public API, one request per text."""

    API_URL = "https://api.mymemory.translated.net/get"

    def __init__(
        self,
        source_lang: str = "en",
        request_delay: float = 0.2,
        config: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(config)
        self.source_lang = source_lang
        self.request_delay = request_delay

    @property
    def name(self) -> str:
        return "MyMemory (Free)"

    @property
    def service_id(self) -> str:
        return "free"

    def translate(self, texts: List[str], target_lang: str) -> List[str]:
        translated = []
        pair = f"{self.source_lang}|{target_lang}"
        for text in texts:
            if not text.strip():
                translated.append(text)
                continue
            try:
                response = requests.get(
                    self.API_URL,
                    params={"q": text, "langpair": pair},
                    timeout=REQUEST_TIMEOUT,
                )
                data = response.json()
                if data.get("responseStatus") == 200:
                    translated.append(data["responseData"]["translatedText"])
                else:
                    logger.warning(f"MyMemory status {data.get('responseStatus')} for {text[:30]!r}")
                    translated.append(text)
            except (requests.RequestException, ValueError, KeyError) as e:
                logger.warning(f"MyMemory request failed, keeping original: {e}")
                translated.append(text)
            if self.request_delay:
                time.sleep(self.request_delay)
        return translated


class OpenAIService(PaidTranslationService):
    """OpenAI chat-completion translation service."""

    DEFAULT_MODEL = "gpt-3.5-turbo"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.3,
        config: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(api_key, config)
        self.model = model
        self.temperature = temperature
        self._client = None

    @property
    def name(self) -> str:
        return "OpenAI GPT"

    @property
    def service_id(self) -> str:
        return "openai"

    @property
    def api_key_env_var(self) -> str:
        return "OPENAI_API_KEY"

    @property
    def client(self):
        """OpenAI client (created on first use)"""
        if self._client is None:
            from openai import OpenAI
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def translate(self, texts: List[str], target_lang: str) -> List[str]:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": "You are a helpful translator helper."},
                    {"role": "user", "content": build_prompt(texts, target_lang)},
                ],
                temperature=self.temperature,
            )
            content = response.choices[0].message.content
        except Exception as e:
            raise TranslationFailure(f"OpenAI request failed: {e}") from e
        return parse_json_response(content, texts)


class GeminiService(PaidTranslationService):
    """Google Gemini translation service (Generative Language REST API)."""

    BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
    DEFAULT_MODEL = "gemini-1.5-flash"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        config: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(api_key, config)
        self.model = model

    @property
    def name(self) -> str:
        return "Google Gemini"

    @property
    def service_id(self) -> str:
        return "gemini"

    @property
    def api_key_env_var(self) -> str:
        return "GEMINI_API_KEY"

    def translate(self, texts: List[str], target_lang: str) -> List[str]:
        model = self.model.split("/")[-1]
        url = f"{self.BASE_URL}/models/{model}:generateContent"
        payload = {"contents": [{"parts": [{"text": build_prompt(texts, target_lang)}]}]}
        try:
            response = requests.post(
                url, params={"key": self.api_key}, json=payload, timeout=REQUEST_TIMEOUT
            )
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise TranslationFailure(f"Gemini request failed: {e}") from e

        candidates = data.get("candidates")
        if not candidates:
            message = data.get("error", {}).get("message", "No candidates")
            raise TranslationFailure(f"Gemini: {message}")
        try:
            content = candidates[0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError) as e:
            raise TranslationFailure(f"Gemini: malformed candidate: {e}") from e
        return parse_json_response(content, texts)


class GoogleCloudService(PaidTranslationService):
    """Google Cloud Translation v2."""

    API_URL = "https://translation.googleapis.com/language/translate/v2"

    @property
    def name(self) -> str:
        return "Google Cloud Translation"

    @property
    def service_id(self) -> str:
        return "google"

    @property
    def api_key_env_var(self) -> str:
        return "GOOGLE_TRANSLATE_API_KEY"

    def translate(self, texts: List[str], target_lang: str) -> List[str]:
        try:
            response = requests.post(
                self.API_URL,
                params={"key": self.api_key},
                json={"q": texts, "target": target_lang, "format": "text"},
                timeout=REQUEST_TIMEOUT,
            )
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise TranslationFailure(f"Google request failed: {e}") from e

        if "error" in data:
            raise TranslationFailure(f"Google: {data['error'].get('message', data['error'])}")
        try:
            translations = data["data"]["translations"]
        except KeyError as e:
            raise TranslationFailure(f"Google: malformed response, missing {e}") from e
        return [html.unescape(t.get("translatedText", "")) for t in translations]


# Registry of all supported services
SUPPORTED_SERVICES: Dict[str, Type[TranslationServiceBase]] = {
    "mock": MockTranslationService,
    "free": MyMemoryService,
    "openai": OpenAIService,
    "gemini": GeminiService,
    "google": GoogleCloudService,
}


def detect_provider(provider: str, api_key: Optional[str]) -> str:
    """Switch provider when the key obviously belongs to another one."""
    if not api_key:
        return provider
    if api_key.startswith("AIza") and provider == "openai":
        logger.info("Gemini key detected, switching provider to gemini")
        return "gemini"
    if api_key.startswith("sk-") and provider != "openai":
        logger.info("OpenAI key detected, switching provider to openai")
        return "openai"
    return provider


def get_translation_service(
    service_id: str,
    api_key: Optional[str] = None,
    **kwargs
) -> Optional[TranslationServiceBase]:
    """
    Get a translation service instance by ID.

    A paid service that ends up without a key (argument or environment)
    resolves to the mock service so a run still completes.
    """
    service_class = SUPPORTED_SERVICES.get(service_id)
    if service_class is None:
        return None

    if issubclass(service_class, PaidTranslationService):
        service = service_class(api_key=api_key, **kwargs)
        if service.check_availability() == ServiceStatus.REQUIRES_API_KEY:
            logger.warning(f"{service.name} has no API key, using mock translations")
            return MockTranslationService()
        return service
    return service_class(**kwargs)
