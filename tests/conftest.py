import asyncio

import pytest

from sofiya_intent.fallback import CompletionUnavailable, FallbackChain
from sofiya_intent.processor import CommandProcessor
from sofiya_intent.responses import ResponseBuilder


class FakeCompletionClient:
    """Stands in for the remote completion endpoint"""

    def __init__(self, answer="Paris is the capital of France.", error=None, delay=0.0):
        self.answer = answer
        self.error = error
        self.delay = delay
        self.calls = 0
        self.prompts = []
        self.cancelled = False

    async def complete(self, system_prompt, user_text):
        self.calls += 1
        self.prompts.append((system_prompt, user_text))
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        if self.error is not None:
            raise self.error
        return self.answer


def make_processor(client):
    responses = ResponseBuilder()
    return CommandProcessor(
        fallback=FallbackChain(client=client, responses=responses, timeout=2.0),
        responses=responses,
    )


@pytest.fixture
def offline_client():
    return FakeCompletionClient(error=CompletionUnavailable("No completion credential configured"))


@pytest.fixture
def answering_client():
    return FakeCompletionClient()


@pytest.fixture
def processor(offline_client):
    return make_processor(offline_client)
