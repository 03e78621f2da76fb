"""OpenAI-backed habit intent extraction."""
from __future__ import annotations

import json
import logging
from typing import List, Optional

import openai
from pydantic import BaseModel, Field, ValidationError

from habitpal.observability.metrics import log_metric
from habitpal.observability.tracing import annotate, trace
from habitpal.services.intent.base import HabitIntent, IntentExtraction, IntentSource
from habitpal.services.intent.rule_based import RuleBasedIntentSource

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You extract habit commitments from a conversation for a habit-tracking assistant. "
    "Respond with JSON only."
)

USER_PROMPT_TEMPLATE = """Analyze this conversation and extract any habit commitments the user has made.

Conversation:
{conversation}

User timezone: {timezone}

Return JSON with keys:
- habits: array of objects with activity (string), frequency_type (daily|weekly|biweekly|monthly),
  days_of_week (array of MO,TU,WE,TH,FR,SA,SU; only for weekly), preferred_start_time (HH:MM, 24-hour),
  preferred_end_time (HH:MM, optional), duration_minutes (integer, optional), confidence (0 to 1),
  raw_text (the exact sentence describing the habit)
- needs_clarification: boolean
- clarification_question: string, only when needs_clarification is true

Set confidence 0.8-1.0 when the user explicitly commits and time and frequency are clear,
0.5-0.7 when details are vague, 0.2-0.4 when habits are only discussed in general.
If the time of day or the days are missing, set needs_clarification and ask one short question."""


class _LLMExtraction(BaseModel):
    habits: List[HabitIntent] = Field(default_factory=list)
    needs_clarification: bool = False
    clarification_question: Optional[str] = None


class OpenAIIntentSource(IntentSource):
    name = "openai"

    def __init__(self, api_key: str, model: str, fallback: Optional[IntentSource] = None) -> None:
        self._api_key = api_key
        self._model = model
        self._fallback = fallback or RuleBasedIntentSource()

    def extract(self, conversation_text: str, timezone: str) -> IntentExtraction:
        metadata = {
            "model": self._model,
            "timezone": timezone,
            "llm_input_text": (conversation_text or "")[:500],
        }
        with trace("intent.extract", metadata=metadata) as intent_trace:
            try:
                extraction = self._extract_via_llm(conversation_text, timezone)
            except (openai.OpenAIError, ValueError, ValidationError, IndexError) as exc:
                logger.warning("LLM intent extraction failed, using %s: %s", self._fallback.name, exc)
                log_metric("intent.llm.fallback", 1, metadata={"model": self._model})
                extraction = self._fallback.extract(conversation_text, timezone)
            annotate(
                intent_trace,
                source=extraction.source,
                habits=len(extraction.habits),
                needs_clarification=extraction.needs_clarification,
            )
        return extraction

    def _extract_via_llm(self, conversation_text: str, timezone: str) -> IntentExtraction:
        client = openai.OpenAI(api_key=self._api_key)
        response = client.chat.completions.create(
            model=self._model,
            response_format={"type": "json_object"},
            temperature=0,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": USER_PROMPT_TEMPLATE.format(conversation=conversation_text, timezone=timezone),
                },
            ],
        )
        content = response.choices[0].message.content or "{}"
        parsed = _LLMExtraction.model_validate(json.loads(content))
        return IntentExtraction(
            habits=parsed.habits,
            needs_clarification=parsed.needs_clarification,
            clarification_question=parsed.clarification_question if parsed.needs_clarification else None,
            source=self.name,
        )
