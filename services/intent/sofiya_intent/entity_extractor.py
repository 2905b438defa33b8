"""Intent-specific entity extraction"""

from datetime import datetime
import math
import re
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import structlog

from . import lexicon
from .arithmetic import EvaluationError, evaluate, find_expression
from .models import (
    CalculationEntity,
    CallEntity,
    DurationEntity,
    Entity,
    IntentId,
    Lang,
    MediaEntity,
    MessageEntity,
    PersonalityEntity,
    PersonalityMode,
    QueryEntity,
    SceneEntity,
    SmartHomeEntity,
    SocialEntity,
    TaskEntity,
    TimeDateEntity,
    VolumeEntity,
)

logger = structlog.get_logger(__name__)

_EDGE_PUNCTUATION = ".,!?;\"'()[]{}।"

# Longest timer accepted; anything beyond asks for a new duration
MAX_DURATION_MS = 7 * 24 * lexicon.UNIT_MS["hour"]


def _unit_pattern() -> re.Pattern:
    aliases = []
    for unit, words in lexicon.DURATION_UNITS.items():
        for word in words:
            aliases.append((word, unit))
    aliases.sort(key=lambda item: len(item[0]), reverse=True)
    body = "|".join(re.escape(word) for word, _ in aliases)
    return re.compile(rf"(\d+(?:\.\d+)?)\s*({body})(?![\wऀ-ॿ])", re.IGNORECASE)


_DURATION_RE = _unit_pattern()
_UNIT_BY_ALIAS: Dict[str, str] = {
    word: unit for unit, words in lexicon.DURATION_UNITS.items() for word in words
}
_BARE_NUMBER_RE = re.compile(r"(?<![\d.])(\d+(?:\.\d+)?)(?![\d.])")

_DEVICE_WORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("light", ("light", "lights", "batti", "bulb", "lamp", "bijli", "बत्ती", "लाइट")),
    ("fan", ("fan", "pankha", "पंखा")),
)
_ON_WORDS = ("on", "chalu", "jalao", "start", "chala", "चालू", "जलाओ")
_OFF_WORDS = ("off", "band", "bujhao", "stop", "बंद", "बुझाओ")

_PERSONALITY_WORDS: Tuple[Tuple[PersonalityMode, Tuple[str, ...]], ...] = (
    (PersonalityMode.SASS, ("sass", "sassy", "attitude", "masti")),
    (PersonalityMode.FOCUS, ("focus", "dhyan mode")),
    (PersonalityMode.STORYTELLER, ("storyteller", "story", "narrator", "kahani")),
)
_FACT_WORDS = ("fact", "facts", "interesting", "did you know", "rochak", "gyaan", "gyan")
_PARTY_WORDS = ("party",)


def _tokens(text: str) -> List[str]:
    """Whitespace tokens with edge punctuation removed, original casing kept"""
    tokens = []
    for raw in (text or "").split():
        token = raw.strip(_EDGE_PUNCTUATION)
        if token:
            tokens.append(token)
    return tokens


def _contains(text: str, words: Iterable[str]) -> bool:
    lowered = text.lower()
    for word in words:
        if re.search(rf"(?<![\wऀ-ॿ]){re.escape(word)}(?![\wऀ-ॿ])", lowered):
            return True
    return False


def strip_fillers(text: str, filler_words: Iterable[str]) -> str:
    """Remove command/filler words from both ends of ``text``

    Multi-word fillers ("look up", "can you") are honoured. Interior words
    are left alone so that "songs of the sea" keeps its "of the".
    """
    fillers = sorted({word.lower() for word in filler_words}, key=len, reverse=True)
    tokens = _tokens(text)

    changed = True
    while tokens and changed:
        changed = False
        lowered = [token.lower() for token in tokens]
        for filler in fillers:
            parts = filler.split()
            size = len(parts)
            if lowered[:size] == parts:
                tokens = tokens[size:]
                changed = True
                break
            if len(lowered) >= size and lowered[-size:] == parts:
                tokens = tokens[:-size]
                changed = True
                break

    return " ".join(tokens)


class EntityExtractor:
    """Dispatches on intent id to a dedicated extractor

    Extraction never raises: malformed input yields a partially populated
    entity flagged with ``needs_clarification`` where it matters.
    """

    def __init__(self):
        self._extractors: Dict[IntentId, Callable[..., Optional[Entity]]] = {
            IntentId.COMM_MESSAGE_DRAFT: self._extract_message,
            IntentId.COMM_CALL_START: self._extract_call,
            IntentId.TIMER: self._extract_duration,
            IntentId.CALCULATION: self._extract_calculation,
            IntentId.SEARCH_QUERY: self._extract_search_query,
            IntentId.YOUTUBE_SEARCH: self._extract_youtube_query,
            IntentId.MEDIA_PLAY: self._extract_media,
            IntentId.MEDIA_PAUSE: self._extract_media_state,
            IntentId.MEDIA_RESUME: self._extract_media_state,
            IntentId.TASK_ADD: self._extract_task,
            IntentId.SMART_HOME_ACTION: self._extract_smart_home,
            IntentId.SMART_HOME_SCENE: self._extract_scene,
            IntentId.VOLUME_UP: self._extract_volume,
            IntentId.VOLUME_DOWN: self._extract_volume,
            IntentId.VOLUME_MUTE: self._extract_volume,
            IntentId.VOLUME_UNMUTE: self._extract_volume,
            IntentId.PERSONALITY_CHANGE: self._extract_personality,
            IntentId.SOCIAL: self._extract_social,
            IntentId.TIME_DATE: self._extract_time_date,
        }

    def supports(self, intent_id: IntentId) -> bool:
        return intent_id in self._extractors

    def extract(
        self,
        intent_id: IntentId,
        raw_text: str,
        language: Lang = Lang.ENGLISH,
        now: Optional[datetime] = None,
    ) -> Optional[Entity]:
        """Extract the entity for ``intent_id``; intents without data give None"""
        extractor = self._extractors.get(intent_id)
        if extractor is None:
            return None

        try:
            return extractor(
                intent_id=intent_id,
                text=raw_text or "",
                language=language,
                now=now or datetime.now(),
            )
        except Exception as e:
            logger.error("Entity extraction failed", intent=intent_id.value, error=str(e))
            return None

    # ------------------------------------------------------------------
    # Communication
    # ------------------------------------------------------------------

    def _extract_message(self, text: str, language: Lang, **_) -> MessageEntity:
        tokens = _tokens(text)
        lowered = [token.lower() for token in tokens]
        contact = ""
        contact_index = -1

        # "message to Mom saying ..."
        for index, token in enumerate(lowered[:-1]):
            if token in lexicon.CONTACT_MARKERS_EN and lowered[index + 1] not in lexicon.MESSAGE_COMMAND_WORDS:
                contact, contact_index = tokens[index + 1], index + 1
                break

        # "Mom ko message bhejo ki ..."
        if not contact:
            for index, token in enumerate(lowered):
                if index > 0 and token in lexicon.CONTACT_MARKERS_HI:
                    candidate = lowered[index - 1]
                    if candidate not in lexicon.MESSAGE_COMMAND_WORDS:
                        contact, contact_index = tokens[index - 1], index
                        break

        # "text Rahul that ..."
        if not contact:
            for index, token in enumerate(lowered):
                if token in lexicon.BODY_MARKERS_EN or token in lexicon.BODY_MARKERS_HI:
                    break
                if token not in lexicon.MESSAGE_COMMAND_WORDS and token not in lexicon.CONTACT_MARKERS_EN:
                    contact, contact_index = tokens[index], index
                    break

        body = self._message_body(tokens, lowered, contact_index, language)
        contact = contact.rstrip(":")

        return MessageEntity(
            contact=contact,
            body=body,
            channel="whatsapp" if "whatsapp" in lowered else "message",
            needs_clarification=not contact,
        )

    @staticmethod
    def _message_body(tokens: List[str], lowered: List[str], after: int, language: Lang) -> str:
        markers = lexicon.BODY_MARKERS_HI + lexicon.BODY_MARKERS_EN
        if language == Lang.ENGLISH:
            markers = lexicon.BODY_MARKERS_EN + lexicon.BODY_MARKERS_HI

        start = after + 1
        for marker in markers:
            for index in range(start, len(lowered)):
                if lowered[index] == marker:
                    return " ".join(tokens[index + 1:])

        # A trailing colon is glued to the previous token: "to Mom: hi"
        if 0 <= after < len(tokens) and tokens[after].endswith(":"):
            return " ".join(tokens[after + 1:])

        remainder = [
            token for token, low in zip(tokens[start:], lowered[start:])
            if low not in lexicon.MESSAGE_COMMAND_WORDS and low not in lexicon.CONTACT_MARKERS_HI
        ]
        return " ".join(remainder)

    def _extract_call(self, text: str, **_) -> CallEntity:
        tokens = _tokens(text)
        contact_tokens: List[str] = []
        for token in tokens:
            lowered = token.lower()
            if lowered in lexicon.CALL_SELF_WORDS:
                break
            if lowered in lexicon.CALL_COMMAND_WORDS or lowered in lexicon.CALL_STOP_WORDS:
                if contact_tokens:
                    break
                continue
            contact_tokens.append(token)

        contact = " ".join(contact_tokens)
        return CallEntity(contact=contact, needs_clarification=not contact)

    # ------------------------------------------------------------------
    # Numbers
    # ------------------------------------------------------------------

    def _extract_duration(self, text: str, **_) -> DurationEntity:
        total_ms = 0.0
        found_unit = False
        for amount, alias in _DURATION_RE.findall(text):
            unit = _UNIT_BY_ALIAS.get(alias.lower(), "minute")
            total_ms += float(amount) * lexicon.UNIT_MS[unit]
            found_unit = True

        if not found_unit:
            bare = _BARE_NUMBER_RE.search(text)
            if bare:
                total_ms = float(bare.group(1)) * lexicon.UNIT_MS["minute"]

        if not math.isfinite(total_ms) or total_ms > MAX_DURATION_MS:
            total_ms = 0.0
        duration_ms = int(round(total_ms))
        label = strip_fillers(_DURATION_RE.sub(" ", text), lexicon.TIMER_FILLER_WORDS)
        return DurationEntity(
            duration_ms=duration_ms,
            label=label.title() if label and not label.isdigit() else "Timer",
            needs_clarification=duration_ms <= 0,
        )

    def _extract_calculation(self, text: str, **_) -> CalculationEntity:
        expression = find_expression(text)
        if expression is None:
            return CalculationEntity(expression="", result="error", error="No arithmetic expression found")

        try:
            result = evaluate(expression)
        except EvaluationError as e:
            logger.info("Arithmetic rejected", error=str(e))
            return CalculationEntity(expression=expression, result="error", error=str(e))

        return CalculationEntity(expression=expression, result=result)

    # ------------------------------------------------------------------
    # Free text
    # ------------------------------------------------------------------

    def _extract_search_query(self, text: str, **_) -> QueryEntity:
        query = strip_fillers(text, lexicon.SEARCH_FILLER_WORDS)
        return QueryEntity(query=query, needs_clarification=not query)

    def _extract_youtube_query(self, text: str, **_) -> QueryEntity:
        query = strip_fillers(text, lexicon.YOUTUBE_FILLER_WORDS)
        return QueryEntity(query=query, needs_clarification=not query)

    def _extract_media(self, text: str, **_) -> MediaEntity:
        title = strip_fillers(text, lexicon.MEDIA_FILLER_WORDS)
        if len(title) <= 1:
            title = lexicon.DEFAULT_MEDIA_TITLE
        return MediaEntity(title=title, is_playing=True)

    def _extract_media_state(self, intent_id: IntentId, **_) -> MediaEntity:
        return MediaEntity(is_playing=intent_id == IntentId.MEDIA_RESUME)

    def _extract_task(self, text: str, **_) -> TaskEntity:
        task = strip_fillers(text, lexicon.TASK_FILLER_WORDS)
        return TaskEntity(task=task, needs_clarification=not task)

    # ------------------------------------------------------------------
    # Device and mode switches
    # ------------------------------------------------------------------

    def _extract_smart_home(self, text: str, **_) -> SmartHomeEntity:
        device = "light"
        for name, words in _DEVICE_WORDS:
            if _contains(text, words):
                device = name
                break

        if _contains(text, _OFF_WORDS):
            return SmartHomeEntity(device=device, action="off", state=False)
        if _contains(text, _ON_WORDS):
            return SmartHomeEntity(device=device, action="on", state=True)
        return SmartHomeEntity(device=device, needs_clarification=True)

    def _extract_scene(self, text: str, **_) -> SceneEntity:
        if _contains(text, _PARTY_WORDS):
            return SceneEntity(scene="party")
        return SceneEntity(scene="movie_night")

    def _extract_volume(self, intent_id: IntentId, **_) -> VolumeEntity:
        direction = {
            IntentId.VOLUME_UP: "up",
            IntentId.VOLUME_DOWN: "down",
            IntentId.VOLUME_MUTE: "mute",
            IntentId.VOLUME_UNMUTE: "unmute",
        }[intent_id]
        return VolumeEntity(direction=direction)

    def _extract_personality(self, text: str, **_) -> PersonalityEntity:
        for mode, words in _PERSONALITY_WORDS:
            if _contains(text, words):
                return PersonalityEntity(mode=mode)
        return PersonalityEntity(mode=PersonalityMode.DEFAULT)

    def _extract_social(self, text: str, **_) -> SocialEntity:
        return SocialEntity(kind="fact" if _contains(text, _FACT_WORDS) else "joke")

    def _extract_time_date(self, now: datetime, language: Lang = Lang.ENGLISH, **_) -> TimeDateEntity:
        if language == Lang.HINDI:
            # Lexicon names, independent of the process locale
            meridiem = lexicon.HINDI_MERIDIEM["AM" if now.hour < 12 else "PM"]
            return TimeDateEntity(
                time=f"{now.strftime('%I:%M')} {meridiem}",
                date=f"{lexicon.HINDI_WEEKDAYS[now.weekday()]}, {now.day:02d} "
                     f"{lexicon.HINDI_MONTHS[now.month - 1]} {now.year}",
            )
        return TimeDateEntity(
            time=now.strftime("%I:%M %p"),
            date=now.strftime("%A, %d %B %Y"),
        )
