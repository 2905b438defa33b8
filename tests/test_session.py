import asyncio

import pytest

from sofiya_intent.models import CommandResult, IntentId, Lang, PersonalityMode, Utterance
from sofiya_intent.session import CommandSession

from conftest import FakeCompletionClient, make_processor


class RecordingProcessor:
    """Echoes utterances back after an optional delay"""

    def __init__(self, delay=0.0):
        self.delay = delay
        self.started = []
        self.finished = []

    async def process(self, utterance, language, personality):
        self.started.append(utterance.text)
        await asyncio.sleep(self.delay)
        self.finished.append(utterance.text)
        return CommandResult(
            action_type=IntentId.AI_RESPONSE,
            response=utterance.text,
            spoken_response=utterance.text,
            language=language,
        )


def test_interim_transcripts_are_dropped():
    processor = RecordingProcessor()
    session = CommandSession(processor)

    result = asyncio.run(session.submit(Utterance(text="play mus", is_final=False)))

    assert result is None
    assert processor.started == []


def test_final_transcripts_run_in_order():
    processor = RecordingProcessor()
    session = CommandSession(processor)

    async def scenario():
        first = await session.submit(Utterance(text="one"))
        second = await session.submit(Utterance(text="two"))
        return first, second

    first, second = asyncio.run(scenario())
    assert (first.response, second.response) == ("one", "two")
    assert processor.finished == ["one", "two"]


def test_newer_utterance_supersedes_in_flight_one():
    processor = RecordingProcessor(delay=0.2)
    session = CommandSession(processor)

    async def scenario():
        first = asyncio.create_task(session.submit(Utterance(text="one")))
        await asyncio.sleep(0.01)
        assert session.busy
        second = await session.submit(Utterance(text="two"))
        return await first, second

    first, second = asyncio.run(scenario())
    assert first is None
    assert second.response == "two"
    assert processor.finished == ["two"]
    assert not session.busy


def test_superseding_cancels_the_fallback_call():
    slow_client = FakeCompletionClient(delay=1.0)
    session = CommandSession(make_processor(slow_client))

    async def scenario():
        first = asyncio.create_task(session.submit(Utterance(text="Who wrote Hamlet?")))
        await asyncio.sleep(0.05)
        second = await session.submit(Utterance(text="Volume up"))
        return await first, second

    first, second = asyncio.run(scenario())
    assert first is None
    assert second.action_type == IntentId.VOLUME_UP
    assert slow_client.cancelled


def test_cancel_aborts_in_flight_work():
    processor = RecordingProcessor(delay=1.0)
    session = CommandSession(processor)

    async def scenario():
        pending = asyncio.create_task(session.submit(Utterance(text="one")))
        await asyncio.sleep(0.01)
        await session.cancel()
        with pytest.raises(asyncio.CancelledError):
            await pending

    asyncio.run(scenario())
    assert processor.finished == []
    assert not session.busy


def test_personality_change_sticks(offline_client):
    session = CommandSession(make_processor(offline_client))

    async def scenario():
        await session.submit(Utterance(text="Activate sass mode"))
        return await session.submit(Utterance(text="Volume up"))

    result = asyncio.run(scenario())
    assert session.personality == PersonalityMode.SASS
    assert result.response == "Increasing volume."
    assert result.spoken_response != result.response
    assert result.spoken_response.startswith("Increasing volume. ")


def test_night_routine_enables_focus(offline_client):
    session = CommandSession(make_processor(offline_client), language=Lang.ENGLISH)
    result = asyncio.run(session.submit(Utterance(text="Good night")))

    assert result.action_type == IntentId.ROUTINE_NIGHT
    assert session.personality == PersonalityMode.FOCUS
