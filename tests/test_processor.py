import asyncio
from datetime import datetime

import pytest

from sofiya_intent.models import EmotionTag, IntentId, Lang, PersonalityMode, Utterance
from sofiya_intent.processor import CommandProcessor

from conftest import make_processor


def run(processor, text, language=Lang.ENGLISH, personality=PersonalityMode.DEFAULT, at=None):
    utterance = Utterance(text=text, captured_at=at) if at else Utterance(text=text)
    return asyncio.run(processor.process(utterance, language, personality))


@pytest.mark.parametrize("text, intent", [
    ("Play lo-fi music", IntentId.MEDIA_PLAY),
    ("Turn on the lights", IntentId.SMART_HOME_ACTION),
    ("Set timer for 5 minutes", IntentId.TIMER),
    ("Call Mom", IntentId.COMM_CALL_START),
    ("Show me the news", IntentId.NEWS_FETCH),
    ("Help me", IntentId.HELP),
])
def test_rule_matches_flow_through(processor, text, intent):
    result = run(processor, text)
    assert result.action_type == intent
    assert result.response


def test_timer_response(processor):
    result = run(processor, "Set timer for 5 minutes")
    assert result.response == "Timer set for 5 minutes."
    assert result.data.duration_ms == 300_000


def test_calculation_response(processor):
    result = run(processor, "45 * 8")
    assert result.action_type == IntentId.CALCULATION
    assert result.response == "The result of 45 * 8 is 360"


def test_security_alert_short_circuits(answering_client):
    processor = make_processor(answering_client)
    result = run(processor, "What is my password?")

    assert result.action_type == IntentId.SECURITY_ALERT
    assert result.response == "Security Alert: Request for sensitive data has been blocked."
    assert result.data is None
    assert result.external_url is None
    assert result.emotion == EmotionTag.FEAR
    assert answering_client.calls == 0


def test_security_alert_in_hindi(processor):
    result = run(processor, "मेरा पासवर्ड क्या है", Lang.ENGLISH)
    assert result.action_type == IntentId.SECURITY_ALERT
    assert result.language == Lang.HINDI
    assert result.response.startswith("सुरक्षा चेतावनी")


def test_card_number_is_blocked(processor):
    result = run(processor, "remember 4111 1111 1111 1111 for me")
    assert result.action_type == IntentId.SECURITY_ALERT


def test_time_comes_from_capture_timestamp(processor):
    result = run(processor, "What time is it?", at=datetime(2024, 1, 15, 9, 5))
    assert result.response == "The current time is 09:05 AM. Today is Monday, 15 January 2024."


@pytest.mark.parametrize("hour, greeting", [(9, "Good Morning!"), (14, "Good Afternoon!"), (20, "Good Evening!")])
def test_status_greeting_follows_the_hour(processor, hour, greeting):
    result = run(processor, "Status report", at=datetime(2024, 1, 15, hour, 0))
    assert result.action_type == IntentId.SYSTEM_STATUS
    assert result.response.startswith(greeting)


def test_personality_changes_spoken_response_only(processor):
    result = run(processor, "Awaaz kam karo", Lang.HINDI, PersonalityMode.SASS)
    assert result.action_type == IntentId.VOLUME_DOWN
    assert result.language == Lang.HINDI
    assert result.response == "आवाज़ कम कर रही हूँ।"
    assert result.spoken_response.endswith("और कुछ? या मैं आराम करूँ?")


def test_same_utterance_same_result(processor):
    at = datetime(2024, 3, 1, 18, 30)
    first = run(processor, "Tell me a joke", at=at)
    second = run(processor, "Tell me a joke", at=at)
    assert first == second
    assert first.emotion == EmotionTag.JOY


def test_unmatched_goes_to_web_search_when_offline(processor):
    result = run(processor, "Who wrote Hamlet?")
    assert result.action_type == IntentId.SEARCH_QUERY
    assert result.external_url.startswith("https://www.google.com/search?q=")


def test_unmatched_uses_completion_when_available(answering_client):
    result = run(make_processor(answering_client), "Who wrote Hamlet?")
    assert result.action_type == IntentId.AI_RESPONSE
    assert result.response == "Paris is the capital of France."
    assert answering_client.prompts[0][1] == "Who wrote Hamlet?"


def test_youtube_search_link(processor):
    result = run(processor, "Search YouTube for cats")
    assert result.action_type == IntentId.YOUTUBE_SEARCH
    assert result.external_url == "https://www.youtube.com/results?search_query=cats"


def test_incomplete_entity_asks_a_question(processor):
    result = run(processor, "send a message")
    assert result.action_type == IntentId.COMM_MESSAGE_DRAFT
    assert result.needs_clarification
    assert result.response == "Who should I send the message to?"


@pytest.mark.parametrize("text", ["", "   ", "<script>alert(1)</script>"])
def test_empty_input_asks_to_rephrase(processor, text):
    result = run(processor, text)
    assert result.action_type == IntentId.ERROR
    assert result.needs_clarification


def test_markup_is_stripped_before_matching(processor):
    result = run(processor, "<script>alert(1)</script>Play some music")
    assert result.action_type == IntentId.MEDIA_PLAY


def test_internal_failure_becomes_error_result(offline_client):
    class BrokenClassifier:
        def classify(self, text):
            raise RuntimeError("rule table corrupted")

    processor = make_processor(offline_client)
    processor.classifier = BrokenClassifier()

    result = run(processor, "Play music")
    assert result.action_type == IntentId.ERROR
    assert result.response == "I encountered a system error. Please try again."
    assert not result.needs_clarification


def test_plain_string_input(processor):
    result = asyncio.run(processor.process("Volume up"))
    assert result.action_type == IntentId.VOLUME_UP


def test_result_serializes_with_camel_case_keys(processor):
    payload = run(processor, "Search YouTube for cats").model_dump(mode="json", by_alias=True)
    assert payload["actionType"] == "YOUTUBE_SEARCH"
    assert payload["externalUrl"].endswith("cats")
    assert payload["needsClarification"] is False
    assert "spokenResponse" in payload


def test_default_wiring():
    processor = CommandProcessor()
    assert processor.fallback.responses is processor.responses


@pytest.mark.parametrize("text", [
    "tell me about this " * 55 + "my password is hunter2",
    "q" * 985 + " 4111 1111 1111 1111",
])
def test_sensitive_text_past_the_length_cap_is_blocked(answering_client, text):
    assert len(text) > 1000
    result = run(make_processor(answering_client), text)

    assert result.action_type == IntentId.SECURITY_ALERT
    assert result.external_url is None
    assert answering_client.calls == 0


def test_oversized_timer_asks_for_a_duration(processor):
    result = run(processor, "set timer for " + "9" * 400 + " hours")
    assert result.action_type == IntentId.TIMER
    assert result.needs_clarification
    assert result.response == "How long should the timer run?"


def test_failed_extraction_asks_to_rephrase(offline_client):
    class EmptyExtractor:
        def supports(self, intent_id):
            return True

        def extract(self, intent_id, raw_text, language=Lang.ENGLISH, now=None):
            return None

    processor = make_processor(offline_client)
    processor.extractor = EmptyExtractor()

    result = run(processor, "Set timer for 5 minutes")
    assert result.action_type == IntentId.ERROR
    assert result.needs_clarification


def test_call_to_self_asks_who_to_call(processor):
    result = run(processor, "Call me at 5")
    assert result.action_type == IntentId.COMM_CALL_START
    assert result.needs_clarification
    assert result.response == "Who should I call?"


def test_hindi_date_uses_hindi_names(processor):
    result = run(processor, "Abhi kya samay hai?", Lang.HINDI, at=datetime(2024, 1, 15, 9, 5))
    assert result.language == Lang.HINDI
    assert result.response == "अभी का समय है 09:05 पूर्वाह्न। आज की तारीख सोमवार, 15 जनवरी 2024 है।"
