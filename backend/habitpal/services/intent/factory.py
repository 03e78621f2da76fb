"""Intent source factory."""
from __future__ import annotations

import logging
from functools import lru_cache

from habitpal.core.config import settings
from habitpal.services.intent.base import IntentSource
from habitpal.services.intent.llm import OpenAIIntentSource
from habitpal.services.intent.rule_based import RuleBasedIntentSource

logger = logging.getLogger(__name__)


@lru_cache
def get_intent_source() -> IntentSource:
    provider = settings.intent_provider.lower()
    if provider == "openai":
        if settings.openai_api_key:
            return OpenAIIntentSource(settings.openai_api_key, settings.openai_model)
        logger.warning("INTENT_PROVIDER is openai but OPENAI_API_KEY is missing; using rule-based intents.")
    return RuleBasedIntentSource()
