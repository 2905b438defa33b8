import pytest

from sofiya_intent.language_scorer import LanguageScorer, tokenize
from sofiya_intent.models import Lang


@pytest.fixture
def scorer():
    return LanguageScorer()


@pytest.mark.parametrize("text, expected", [
    ("What time is it?", Lang.ENGLISH),
    ("Turn on the lights", Lang.ENGLISH),
    ("Good morning", Lang.ENGLISH),
    ("Abhi kya samay hai?", Lang.HINDI),
    ("Namaste Sofiya", Lang.HINDI),
    ("Awaaz kam karo", Lang.HINDI),
    ("Batti band karo", Lang.HINDI),
    ("Mausam kaisa hai?", Lang.HINDI),
])
def test_detects_language(scorer, text, expected):
    assert scorer.score(text).language == expected


def test_devanagari_is_definitive(scorer):
    result = scorer.score("नमस्ते सोफिया", Lang.ENGLISH)
    assert result.language == Lang.HINDI
    assert result.confidence == 1.0


@pytest.mark.parametrize("default", [Lang.ENGLISH, Lang.HINDI])
def test_ties_go_to_active_language(scorer, default):
    result = scorer.score("42", default)
    assert result.language == default
    assert result.confidence == 0.0


def test_latin_baseline_only_without_strong_words(scorer):
    result = scorer.score("zzz qqq", Lang.HINDI)
    assert result.language == Lang.ENGLISH
    assert result.scores.english == 0.25
    assert result.scores.target == 0.0


def test_confidence_is_normalized_margin(scorer):
    result = scorer.score("What time is it?")
    english, target = result.scores.english, result.scores.target
    assert result.confidence == round(abs(english - target) / (english + target), 4)
    assert 0.0 <= result.confidence <= 1.0


def test_ergative_marker_is_discontiguous_and_ordered(scorer):
    in_order = scorer.lexical_score(["ram", "ne", "shyam", "ko"])
    assert in_order.target == 0.5 + 0.5 + 2.0

    reversed_order = scorer.lexical_score(["ko", "shyam", "ne", "ram"])
    assert reversed_order.target == 0.5 + 0.5


def test_possessive_and_locative_bonuses(scorer):
    assert scorer.lexical_score(["ghar", "ka"]).target == 0.5 + 0.5 + 1.5
    assert scorer.lexical_score(["ghar", "mein"]).target == 0.5 + 0.5 + 1.5


def test_scoring_is_deterministic(scorer):
    first = scorer.score("Mera music play karo", Lang.HINDI)
    second = scorer.score("Mera music play karo", Lang.HINDI)
    assert first == second


def test_tokenize_drops_punctuation():
    assert tokenize("What's the time, Sofiya?") == ["what's", "the", "time", "sofiya"]


def test_devanagari_reports_the_computed_totals(scorer):
    text = "please play गाना"
    result = scorer.score(text, Lang.ENGLISH)
    assert result.language == Lang.HINDI
    assert result.confidence == 1.0
    assert result.scores == scorer.lexical_score(tokenize(text), text)
