"""Fallback chain for utterances no rule claims

Stage 1 asks a remote chat-completion endpoint for an answer. Stage 2 turns
the utterance into a web-search link and cannot fail.
"""

import asyncio
from typing import Optional, Protocol
from urllib.parse import quote_plus

import httpx
import structlog
from jinja2 import Template

from . import lexicon
from .config import settings
from .entity_extractor import strip_fillers
from .models import CommandResult, IntentId, Lang, PersonalityMode, QueryEntity
from .responses import ResponseBuilder
from .utils.http_client import post_json

logger = structlog.get_logger(__name__)

SYSTEM_PROMPTS = {
    Lang.ENGLISH: Template(
        "You are {{ assistant }}, a helpful and intelligent bilingual AI assistant. "
        "Provide concise and clear responses."
        "{% if personality == 'FOCUS' %} Answer in as few words as possible.{% endif %}"
    ),
    Lang.HINDI: Template(
        "आप {{ assistant_hi }} हैं, एक मददगार और बुद्धिमान द्विभाषी एआई सहायक। "
        "संक्षिप्त और स्पष्ट उत्तर दें।"
        "{% if personality == 'FOCUS' %} जितना हो सके कम शब्दों में उत्तर दें।{% endif %}"
    ),
}


class CompletionUnavailable(Exception):
    """Stage 1 could not produce an answer"""


class CompletionClient(Protocol):
    async def complete(self, system_prompt: str, user_text: str) -> str:
        ...


class RemoteCompletionClient:
    """OpenAI-compatible chat completion over the shared httpx pool"""

    def __init__(
        self,
        api_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None
    ):
        self.api_url = api_url or settings.completion_api_url
        self.api_key = settings.completion_api_key if api_key is None else api_key
        self.model = model or settings.completion_model
        self.max_tokens = max_tokens or settings.completion_max_tokens
        self.timeout = timeout or settings.completion_timeout_seconds

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def complete(self, system_prompt: str, user_text: str) -> str:
        if not self.configured:
            raise CompletionUnavailable("No completion credential configured")

        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_text},
            ],
            "max_tokens": self.max_tokens,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": settings.completion_referer,
            "X-Title": settings.completion_title,
        }

        try:
            data = await post_json(self.api_url, payload, headers=headers, timeout=self.timeout)
        except httpx.HTTPError as e:
            raise CompletionUnavailable(f"Completion request failed: {type(e).__name__}") from e
        except ValueError as e:
            raise CompletionUnavailable("Completion response was not JSON") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise CompletionUnavailable("Malformed completion response") from e

        if not content or not str(content).strip():
            raise CompletionUnavailable("Empty completion")
        return str(content).strip()


def web_search_url(query: str) -> str:
    return settings.web_search_url.format(query=quote_plus(query))


class FallbackChain:
    """Stage 1 remote completion, then Stage 2 web search

    ``resolve`` always returns a CommandResult. Only task cancellation
    escapes it, since that belongs to whoever owns the task.
    """

    def __init__(
        self,
        client: Optional[CompletionClient] = None,
        responses: Optional[ResponseBuilder] = None,
        timeout: Optional[float] = None
    ):
        self.client = client if client is not None else RemoteCompletionClient()
        self.responses = responses or ResponseBuilder()
        self.timeout = timeout or settings.completion_timeout_seconds

    def system_prompt(self, language: Lang, personality: PersonalityMode = PersonalityMode.DEFAULT) -> str:
        return SYSTEM_PROMPTS[language].render(
            assistant="Sofiya",
            assistant_hi="सोफिया",
            personality=personality.value,
        )

    async def resolve(
        self,
        raw_text: str,
        language: Lang,
        personality: PersonalityMode = PersonalityMode.DEFAULT,
        seed: Optional[str] = None
    ) -> CommandResult:
        """Resolve an unmatched utterance; never raises except on cancellation"""
        try:
            answer = await asyncio.wait_for(
                self.client.complete(self.system_prompt(language, personality), raw_text),
                timeout=self.timeout,
            )
            logger.info("Fallback resolved by completion", stage=1, language=language.value)
            return self.responses.build(
                IntentId.AI_RESPONSE,
                language,
                personality,
                utterance_text=raw_text,
                seed=seed,
                text=answer,
            )
        except CompletionUnavailable as e:
            logger.info("Completion unavailable, using web search", reason=str(e))
        except asyncio.TimeoutError:
            logger.warning("Completion timed out, using web search", timeout=self.timeout)
        except Exception as e:
            logger.error("Completion failed, using web search", error=str(e))

        return self.web_search(raw_text, language, personality, seed=seed)

    def web_search(
        self,
        raw_text: str,
        language: Lang,
        personality: PersonalityMode = PersonalityMode.DEFAULT,
        seed: Optional[str] = None
    ) -> CommandResult:
        """Stage 2: always produces a search link"""
        query = strip_fillers(raw_text, lexicon.SEARCH_FILLER_WORDS) or (raw_text or "").strip()
        url = web_search_url(query or "Sofiya")
        logger.info("Fallback resolved by web search", stage=2, language=language.value)
        return self.responses.build(
            IntentId.SEARCH_QUERY,
            language,
            personality,
            data=QueryEntity(query=query),
            utterance_text=raw_text,
            external_url=url,
            seed=seed,
        )
