"""Per-conversation gate in front of the command processor"""

import asyncio
from typing import Optional

import structlog

from .metrics import record_superseded
from .models import CommandResult, IntentId, Lang, PersonalityEntity, PersonalityMode, Utterance
from .processor import CommandProcessor

logger = structlog.get_logger(__name__)


class CommandSession:
    """Feeds final transcripts to the processor one at a time

    Interim transcripts are dropped. Final ones run in arrival order, and a
    newer final utterance cancels the one still in flight, including an
    outstanding fallback network call. The session also carries the UI
    state (active language and personality) that the processor takes as
    explicit parameters.
    """

    def __init__(
        self,
        processor: CommandProcessor,
        language: Lang = Lang.ENGLISH,
        personality: PersonalityMode = PersonalityMode.DEFAULT
    ):
        self.processor = processor
        self.language = language
        self.personality = personality
        self._lock = asyncio.Lock()
        self._current: Optional[asyncio.Task] = None

    @property
    def busy(self) -> bool:
        return self._current is not None and not self._current.done()

    async def submit(self, utterance: Utterance) -> Optional[CommandResult]:
        """Process a transcript; None for interim or superseded utterances"""
        if not utterance.is_final:
            return None

        if self.busy:
            logger.info("Superseding in-flight utterance")
            self._current.cancel()
            record_superseded()

        task = asyncio.ensure_future(self._run(utterance))
        self._current = task
        try:
            return await task
        except asyncio.CancelledError:
            if task.cancelled() and self._current is not task:
                return None
            raise

    async def cancel(self):
        """Abort whatever is in flight, e.g. when the client disconnects"""
        if self.busy:
            self._current.cancel()
            await asyncio.gather(self._current, return_exceptions=True)

    async def _run(self, utterance: Utterance) -> CommandResult:
        async with self._lock:
            result = await self.processor.process(utterance, self.language, self.personality)
            self._apply(result)
            return result

    def _apply(self, result: CommandResult):
        if result.action_type == IntentId.PERSONALITY_CHANGE and isinstance(result.data, PersonalityEntity):
            self.personality = result.data.mode
        elif result.action_type == IntentId.ROUTINE_NIGHT:
            self.personality = PersonalityMode.FOCUS
