"""Command processing pipeline

sanitize -> scan -> score -> classify -> extract -> assemble, with the
fallback chain taking over when no rule matches. ``process`` is the only
entry point and never raises for ordinary failures.
"""

import time
from typing import Optional, Union
from urllib.parse import quote_plus

import structlog

from .config import settings
from .entity_extractor import EntityExtractor
from .fallback import FallbackChain, web_search_url
from .intent_classifier import IntentClassifier
from .language_scorer import LanguageScorer
from .metrics import record_blocked, record_command, record_fallback
from .models import (
    CommandResult,
    EmotionTag,
    Entity,
    IntentId,
    Lang,
    PersonalityMode,
    QueryEntity,
    Utterance,
)
from .responses import RESPONSE_TEMPLATES, ResponseBuilder
from .security import SecuritySanitizer

logger = structlog.get_logger(__name__)


class CommandProcessor:
    """Turns one utterance into one CommandResult"""

    def __init__(
        self,
        sanitizer: Optional[SecuritySanitizer] = None,
        scorer: Optional[LanguageScorer] = None,
        classifier: Optional[IntentClassifier] = None,
        extractor: Optional[EntityExtractor] = None,
        fallback: Optional[FallbackChain] = None,
        responses: Optional[ResponseBuilder] = None
    ):
        self.sanitizer = sanitizer or SecuritySanitizer()
        self.scorer = scorer or LanguageScorer(Lang(settings.default_language))
        self.classifier = classifier or IntentClassifier()
        self.extractor = extractor or EntityExtractor()
        self.responses = responses or ResponseBuilder()
        self.fallback = fallback or FallbackChain(responses=self.responses)

    async def process(
        self,
        utterance: Union[Utterance, str],
        active_language: Optional[Lang] = None,
        active_personality: Optional[PersonalityMode] = None
    ) -> CommandResult:
        """Process one finalized utterance

        ``active_language`` breaks language-scoring ties and
        ``active_personality`` only selects the response family.
        """
        start_time = time.perf_counter()
        if isinstance(utterance, str):
            utterance = Utterance(text=utterance)
        language = active_language or Lang(settings.default_language)
        personality = active_personality or PersonalityMode(settings.default_personality)

        confidence = None
        try:
            result, confidence = await self._process(utterance, language, personality)
        except Exception as e:
            logger.error("Command processing failed", error=str(e), error_type=type(e).__name__)
            result = self._error_result(language)

        duration = time.perf_counter() - start_time
        record_command(
            result.action_type.value,
            result.language.value,
            duration,
            confidence=confidence,
            needs_clarification=result.needs_clarification,
        )
        logger.info(
            "Command processed",
            action_type=result.action_type.value,
            language=result.language.value,
            needs_clarification=result.needs_clarification,
            duration_ms=round(duration * 1000, 2),
        )
        return result

    async def _process(self, utterance: Utterance, active_language: Lang, personality: PersonalityMode):
        sanitized = self.sanitizer.sanitize_markup(utterance.text)

        # The scan sees the untruncated text; later stages see the capped text
        verdict = self.sanitizer.scan(sanitized)
        text = sanitized[:settings.max_utterance_length]
        seed = f"{text}|{utterance.captured_at.isoformat()}"

        if verdict.blocked:
            # Language only picks the alert wording
            language = self.scorer.score(text, active_language).language
            record_blocked(verdict.category.value)
            return self.responses.build(IntentId.SECURITY_ALERT, language, personality, seed=seed), None

        if not text.strip():
            return self.responses.unknown(active_language, personality), None

        scored = self.scorer.score(text, active_language)
        match = self.classifier.classify(text)

        if match is None:
            result = await self.fallback.resolve(text, scored.language, personality, seed=seed)
            record_fallback("completion" if result.action_type == IntentId.AI_RESPONSE else "web_search")
            return result, scored.confidence

        data = self.extractor.extract(match.intent, text, scored.language, now=utterance.captured_at)
        if data is None and self.extractor.supports(match.intent):
            # Extractor failed; nothing to act on
            return self.responses.unknown(scored.language, personality), scored.confidence

        result = self.responses.build(
            match.intent,
            scored.language,
            personality,
            data=data,
            utterance_text=text,
            now=utterance.captured_at,
            external_url=self._external_url(match.intent, data),
            seed=seed,
        )
        return result, scored.confidence

    @staticmethod
    def _external_url(intent: IntentId, data: Optional[Entity]) -> Optional[str]:
        if not isinstance(data, QueryEntity) or not data.query:
            return None
        if intent == IntentId.YOUTUBE_SEARCH:
            return settings.youtube_search_url.format(query=quote_plus(data.query))
        if intent == IntentId.SEARCH_QUERY:
            return web_search_url(data.query)
        return None

    @staticmethod
    def _error_result(language: Lang) -> CommandResult:
        message = RESPONSE_TEMPLATES[IntentId.ERROR][language]
        return CommandResult(
            action_type=IntentId.ERROR,
            response=message,
            spoken_response=message,
            language=language,
            emotion=EmotionTag.NEUTRAL,
        )
