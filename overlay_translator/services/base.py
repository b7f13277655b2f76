"""
Base classes for translation services.

Every service satisfies one capability: ``translate(texts, target_lang)``
returns a list of the same length and order as ``texts``.
"""
import os
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Optional


class ServiceStatus(Enum):
    """Translation service status."""
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    REQUIRES_API_KEY = "requires_api_key"
    ERROR = "error"


class TranslationServiceBase(ABC):
    """Abstract base class for translation services."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        self.config = config or {}
        self._status = ServiceStatus.UNAVAILABLE

    @property
    @abstractmethod
    def name(self) -> str:
        """Service display name."""
        pass

    @property
    @abstractmethod
    def service_id(self) -> str:
        """Service identifier used in settings and on the command line."""
        pass

    @property
    def requires_api_key(self) -> bool:
        return False

    @property
    def api_key_env_var(self) -> Optional[str]:
        """Environment variable name for the API key."""
        return None

    @abstractmethod
    def translate(self, texts: List[str], target_lang: str) -> List[str]:
        """
        Translate a batch of strings.

        Raises:
            TranslationFailure: the backend call failed
        """
        pass

    def check_availability(self) -> ServiceStatus:
        self._status = ServiceStatus.AVAILABLE
        return self._status

    def get_status(self) -> ServiceStatus:
        return self._status

    def __call__(self, texts: List[str], target_lang: str) -> List[str]:
        return self.translate(texts, target_lang)


class FreeTranslationService(TranslationServiceBase):
    """Base class for services that need no API key."""


class PaidTranslationService(TranslationServiceBase):
    """Base class for paid translation services (API key required)."""

    def __init__(self, api_key: Optional[str] = None, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        self.api_key = api_key

    @property
    def requires_api_key(self) -> bool:
        return True

    def check_availability(self) -> ServiceStatus:
        if not self.api_key and self.api_key_env_var:
            self.api_key = os.getenv(self.api_key_env_var)
        if self.api_key:
            self._status = ServiceStatus.AVAILABLE
        else:
            self._status = ServiceStatus.REQUIRES_API_KEY
        return self._status
