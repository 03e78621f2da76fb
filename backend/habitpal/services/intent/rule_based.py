"""Keyword and pattern heuristics for spotting habit commitments."""
from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from habitpal.services.intent.base import HabitIntent, IntentExtraction, IntentSource

ACTIVITY_KEYWORDS: Dict[str, str] = {
    "meditate": "meditate",
    "meditation": "meditate",
    "run": "run",
    "running": "run",
    "jog": "jog",
    "walk": "walk",
    "yoga": "yoga",
    "exercise": "exercise",
    "workout": "workout",
    "work out": "workout",
    "gym": "gym",
    "stretch": "stretch",
    "read": "read",
    "reading": "read",
    "journal": "journal",
    "study": "study",
    "practice guitar": "practice guitar",
    "practice piano": "practice piano",
    "write": "write",
    "writing": "write",
    "swim": "swim",
}

INTENT_KEYWORDS = ["i want", "i'd like", "i plan", "i will", "i'll", "i'm going to", "remind me", "schedule", "help me"]

WEEKDAY_PATTERNS: List[Tuple[str, str]] = [
    ("MO", r"mondays?"),
    ("TU", r"tuesdays?"),
    ("WE", r"wednesdays?"),
    ("TH", r"thursdays?"),
    ("FR", r"fridays?"),
    ("SA", r"saturdays?"),
    ("SU", r"sundays?"),
]

_TIME_12H_RE = re.compile(r"\b(\d{1,2})(?::(\d{2}))?\s*(am|pm)\b")
_TIME_24H_RE = re.compile(r"\b([01]?\d|2[0-3]):([0-5]\d)\b")
_MINUTES_RE = re.compile(r"\b(\d+)\s*(?:minutes?|mins?)\b")
_HOURS_RE = re.compile(r"\b(\d+(?:\.\d+)?)\s*(?:hours?|hrs?)\b")


def _split_sentences(text: str) -> List[str]:
    parts = re.split(r"[.!?\n]+(?!\d)|(?<!\d)[.!?\n]+", text)
    return [p.strip() for p in parts if p.strip()]


def _find_activity(lowered: str) -> Optional[str]:
    for keyword in sorted(ACTIVITY_KEYWORDS, key=len, reverse=True):
        if re.search(rf"\b{re.escape(keyword)}\b", lowered):
            return ACTIVITY_KEYWORDS[keyword]
    return None


def _find_days(lowered: str) -> List[str]:
    if re.search(r"\bweekdays\b", lowered):
        return ["MO", "TU", "WE", "TH", "FR"]
    if re.search(r"\bweekends?\b", lowered):
        return ["SA", "SU"]
    return [code for code, pattern in WEEKDAY_PATTERNS if re.search(rf"\b{pattern}\b", lowered)]


def _find_frequency(lowered: str, days: List[str]) -> Tuple[str, bool]:
    """Return ``(frequency, explicit)``."""
    if re.search(r"every other week|every two weeks|biweekly|bi-weekly|fortnight", lowered):
        return "biweekly", True
    if re.search(r"monthly|every month|once a month", lowered):
        return "monthly", True
    if days or re.search(r"weekly|every week|once a week", lowered):
        return "weekly", True
    if re.search(r"daily|every day|everyday|each day|every (?:morning|evening|night)|each (?:morning|evening|night)", lowered):
        return "daily", True
    return "daily", False


def _to_24h(hour: int, minute: int, meridiem: str) -> Optional[str]:
    if hour < 1 or hour > 12 or minute > 59:
        return None
    is_pm = meridiem.startswith("p")
    if hour == 12:
        hour = 0
    if is_pm:
        hour += 12
    return f"{hour:02d}:{minute:02d}"


def _find_times(lowered: str) -> List[str]:
    found: List[Tuple[int, str]] = []
    for match in _TIME_12H_RE.finditer(lowered):
        converted = _to_24h(int(match.group(1)), int(match.group(2) or 0), match.group(3))
        if converted:
            found.append((match.start(), converted))
    for match in _TIME_24H_RE.finditer(lowered):
        if any(start <= match.start() < start + 8 for start, _ in found):
            continue
        found.append((match.start(), f"{int(match.group(1)):02d}:{match.group(2)}"))
    if not found:
        if re.search(r"\bnoon\b", lowered):
            found.append((0, "12:00"))
        elif re.search(r"\bmidnight\b", lowered):
            found.append((0, "00:00"))
    return [value for _, value in sorted(found)]


def _find_duration(lowered: str) -> Optional[int]:
    minutes = _MINUTES_RE.search(lowered)
    if minutes:
        return int(minutes.group(1)) or None
    hours = _HOURS_RE.search(lowered)
    if hours:
        return int(float(hours.group(1)) * 60) or None
    if "half an hour" in lowered or "half hour" in lowered:
        return 30
    if re.search(r"\b(?:an|one) hour\b", lowered):
        return 60
    return None


def _confidence(lowered: str, has_time: bool, explicit_frequency: bool) -> float:
    score = 0.3
    if any(keyword in lowered for keyword in INTENT_KEYWORDS):
        score += 0.3
    if has_time:
        score += 0.2
    if explicit_frequency:
        score += 0.2
    return round(min(score, 1.0), 2)


class RuleBasedIntentSource(IntentSource):
    name = "rules"

    def extract(self, conversation_text: str, timezone: str) -> IntentExtraction:
        habits: List[HabitIntent] = []
        seen = set()
        for sentence in _split_sentences(conversation_text or ""):
            lowered = sentence.lower()
            activity = _find_activity(lowered)
            if not activity or activity in seen:
                continue
            seen.add(activity)

            days = _find_days(lowered)
            frequency, explicit = _find_frequency(lowered, days)
            times = _find_times(lowered)
            habits.append(
                HabitIntent(
                    activity=activity,
                    frequency_type=frequency,
                    days_of_week=days if frequency == "weekly" else [],
                    preferred_start_time=times[0] if times else None,
                    preferred_end_time=times[1] if len(times) > 1 else None,
                    duration_minutes=_find_duration(lowered),
                    confidence=_confidence(lowered, bool(times), explicit),
                    raw_text=sentence,
                )
            )

        missing_time = [habit.activity for habit in habits if not habit.is_schedulable]
        question = None
        if missing_time:
            question = f"What time of day would you like to {missing_time[0]}?"
        return IntentExtraction(
            habits=habits,
            needs_clarification=bool(missing_time),
            clarification_question=question,
            source=self.name,
        )
