from datetime import datetime

import pytest

from sofiya_intent.entity_extractor import EntityExtractor, strip_fillers
from sofiya_intent.models import IntentId, Lang, PersonalityMode


@pytest.fixture
def extractor():
    return EntityExtractor()


@pytest.mark.parametrize("text, duration_ms", [
    ("set a 1 hour 30 minute timer", 5_400_000),
    ("Set timer for 5 minutes", 300_000),
    ("Set timer for 2 hours", 7_200_000),
    ("30 minutes and 1 hour", 5_400_000),
    ("timer for 90 seconds", 90_000),
    ("1.5 hours ka timer", 5_400_000),
    ("5 minat ka timer lagao", 300_000),
    ("10 मिनट का टाइमर", 600_000),
    ("timer 10", 600_000),
])
def test_duration(extractor, text, duration_ms):
    entity = extractor.extract(IntentId.TIMER, text)
    assert entity.duration_ms == duration_ms
    assert not entity.needs_clarification


def test_duration_without_number_needs_clarification(extractor):
    entity = extractor.extract(IntentId.TIMER, "set a timer")
    assert entity.duration_ms == 0
    assert entity.needs_clarification


def test_duration_label(extractor):
    assert extractor.extract(IntentId.TIMER, "Set timer for 5 minutes").label == "Timer"
    assert extractor.extract(IntentId.TIMER, "set a tea timer for 5 minutes").label == "Tea"


def test_calculation(extractor):
    entity = extractor.extract(IntentId.CALCULATION, "45 * 8")
    assert entity.result == 360
    assert entity.expression == "45 * 8"
    assert entity.error is None


def test_calculation_error_is_a_sentinel(extractor):
    entity = extractor.extract(IntentId.CALCULATION, "what is 10 divided by 0")
    assert entity.result == "error"
    assert "zero" in entity.error.lower()

    entity = extractor.extract(IntentId.CALCULATION, "calculate something")
    assert entity.result == "error"


@pytest.mark.parametrize("text, language, contact, body", [
    ("Send message to Mom", Lang.ENGLISH, "Mom", ""),
    ("Send a message to Rahul saying I'll be late", Lang.ENGLISH, "Rahul", "I'll be late"),
    ("text Priya that dinner is ready", Lang.ENGLISH, "Priya", "dinner is ready"),
    ("message for Dad: call me back", Lang.ENGLISH, "Dad", "call me back"),
    ("Mom ko message bhejo ki main late hoon", Lang.HINDI, "Mom", "main late hoon"),
])
def test_message(extractor, text, language, contact, body):
    entity = extractor.extract(IntentId.COMM_MESSAGE_DRAFT, text, language)
    assert entity.contact == contact
    assert entity.body == body
    assert not entity.needs_clarification


def test_message_without_contact_needs_clarification(extractor):
    entity = extractor.extract(IntentId.COMM_MESSAGE_DRAFT, "send a message")
    assert entity.contact == ""
    assert entity.needs_clarification


def test_whatsapp_channel(extractor):
    entity = extractor.extract(IntentId.COMM_MESSAGE_DRAFT, "whatsapp to Raj saying hello")
    assert entity.channel == "whatsapp"
    assert entity.contact == "Raj"


@pytest.mark.parametrize("text, contact", [
    ("Call Mom", "Mom"),
    ("Mom ko call karo", "Mom"),
    ("please call John Smith", "John Smith"),
])
def test_call(extractor, text, contact):
    entity = extractor.extract(IntentId.COMM_CALL_START, text)
    assert entity.contact == contact


def test_call_without_contact(extractor):
    assert extractor.extract(IntentId.COMM_CALL_START, "call karo").needs_clarification


def test_queries(extractor):
    assert extractor.extract(IntentId.YOUTUBE_SEARCH, "Search YouTube for cats").query == "cats"
    assert extractor.extract(IntentId.YOUTUBE_SEARCH, "cats videos on youtube").query == "cats"
    assert extractor.extract(IntentId.SEARCH_QUERY, "search for best pizza near me").query == "best pizza near me"
    assert extractor.extract(IntentId.SEARCH_QUERY, "google").needs_clarification


def test_media_title(extractor):
    assert "lo-fi" in extractor.extract(IntentId.MEDIA_PLAY, "Play lo-fi music").title
    assert extractor.extract(IntentId.MEDIA_PLAY, "Gaana bajao").title == "Chill Lo-Fi Beats"
    assert extractor.extract(IntentId.MEDIA_PAUSE, "pause the music").is_playing is False
    assert extractor.extract(IntentId.MEDIA_RESUME, "resume").is_playing is True


def test_task(extractor):
    assert extractor.extract(IntentId.TASK_ADD, "Add task buy groceries").task == "buy groceries"
    assert extractor.extract(IntentId.TASK_ADD, "Remind me to call mom").task == "call mom"
    assert extractor.extract(IntentId.TASK_ADD, "add task").needs_clarification


@pytest.mark.parametrize("text, device, state", [
    ("Turn on the lights", "light", True),
    ("Batti band karo", "light", False),
    ("Batti jalao", "light", True),
    ("turn off the fan", "fan", False),
    ("pankha chalu karo", "fan", True),
])
def test_smart_home(extractor, text, device, state):
    entity = extractor.extract(IntentId.SMART_HOME_ACTION, text)
    assert entity.device == device
    assert entity.state is state


def test_smart_home_without_action_needs_clarification(extractor):
    entity = extractor.extract(IntentId.SMART_HOME_ACTION, "the lights")
    assert entity.state is None
    assert entity.needs_clarification


@pytest.mark.parametrize("text, mode", [
    ("Activate sass mode", PersonalityMode.SASS),
    ("Turn on focus mode", PersonalityMode.FOCUS),
    ("Activate storyteller mode", PersonalityMode.STORYTELLER),
    ("Reset to default", PersonalityMode.DEFAULT),
])
def test_personality(extractor, text, mode):
    assert extractor.extract(IntentId.PERSONALITY_CHANGE, text).mode == mode


def test_volume_scene_and_social(extractor):
    assert extractor.extract(IntentId.VOLUME_DOWN, "awaaz kam karo").direction == "down"
    assert extractor.extract(IntentId.SMART_HOME_SCENE, "movie night").scene == "movie_night"
    assert extractor.extract(IntentId.SMART_HOME_SCENE, "party mode on").scene == "party"
    assert extractor.extract(IntentId.SOCIAL, "tell me a joke").kind == "joke"
    assert extractor.extract(IntentId.SOCIAL, "tell me a fact").kind == "fact"


def test_time_date_uses_the_given_clock(extractor):
    entity = extractor.extract(IntentId.TIME_DATE, "what time is it", now=datetime(2024, 1, 15, 9, 5))
    assert entity.time == "09:05 AM"
    assert entity.date == "Monday, 15 January 2024"


def test_intents_without_entities(extractor):
    assert extractor.extract(IntentId.HELP, "help") is None
    assert extractor.extract(IntentId.WEATHER_FETCH, "weather") is None


def test_extraction_never_raises(extractor):
    for intent in IntentId:
        extractor.extract(intent, None)
        extractor.extract(intent, "((((((")


def test_strip_fillers_keeps_interior_words():
    assert strip_fillers("play songs of the sea please", ("play", "please", "the")) == "songs of the sea"
    assert strip_fillers("look up the moon", ("look up", "the")) == "moon"


@pytest.mark.parametrize("text", [
    "set timer for " + "9" * 400 + " hours",
    "set timer for 200 hours",
])
def test_oversized_duration_needs_clarification(extractor, text):
    entity = extractor.extract(IntentId.TIMER, text)
    assert entity.duration_ms == 0
    assert entity.needs_clarification


def test_hindi_timer_label_drops_fillers(extractor):
    entity = extractor.extract(IntentId.TIMER, "5 मिनट का टाइमर लगाओ", Lang.HINDI)
    assert entity.duration_ms == 300_000
    assert entity.label == "Timer"


@pytest.mark.parametrize("text, contact", [
    ("Call me at 5", ""),
    ("call me", ""),
    ("Call Mom at 5", "Mom"),
    ("Call Mom for me", "Mom"),
    ("tomorrow call Mom", "Mom"),
])
def test_call_contact_stops_at_pronouns_and_times(extractor, text, contact):
    entity = extractor.extract(IntentId.COMM_CALL_START, text)
    assert entity.contact == contact
    assert entity.needs_clarification is (not contact)


def test_hindi_time_date(extractor):
    entity = extractor.extract(IntentId.TIME_DATE, "aaj kya tarikh hai", Lang.HINDI, now=datetime(2024, 1, 15, 21, 5))
    assert entity.time == "09:05 अपराह्न"
    assert entity.date == "सोमवार, 15 जनवरी 2024"
