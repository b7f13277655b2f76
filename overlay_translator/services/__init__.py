"""
Services module - Translation service providers and interfaces.
"""
from .base import ServiceStatus, TranslationServiceBase
from .providers import (
    SUPPORTED_SERVICES,
    detect_provider,
    get_translation_service,
    parse_json_response,
)

__all__ = [
    "ServiceStatus",
    "TranslationServiceBase",
    "SUPPORTED_SERVICES",
    "detect_provider",
    "get_translation_service",
    "parse_json_response",
]
