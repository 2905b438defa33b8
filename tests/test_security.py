import pytest

from sofiya_intent.models import BlockCategory
from sofiya_intent.security import SecuritySanitizer


@pytest.fixture
def sanitizer():
    return SecuritySanitizer()


@pytest.mark.parametrize("text, category", [
    ("My password is 12345", BlockCategory.CREDENTIALS),
    ("my password is 1234", BlockCategory.CREDENTIALS),
    ("MY OTP IS 654321", BlockCategory.CREDENTIALS),
    ("What's my PIN", BlockCategory.CREDENTIALS),
    ("send me the cvv", BlockCategory.CREDENTIALS),
    ("मेरा पासवर्ड क्या है", BlockCategory.CREDENTIALS),
    ("read my credit card details", BlockCategory.FINANCIAL),
    ("bank details bhejo", BlockCategory.FINANCIAL),
    ("My card number is 4532123456789", BlockCategory.FINANCIAL),
    ("4532 1234 5678 9010", BlockCategory.FINANCIAL),
    ("4532-1234-5678-9010", BlockCategory.FINANCIAL),
])
def test_blocks_sensitive_input(sanitizer, text, category):
    verdict = sanitizer.scan(text)
    assert verdict.blocked
    assert verdict.category == category


@pytest.mark.parametrize("text", [
    "spinning class at six",
    "the pinnacle of design",
    "add shopping to my list",
    "Set timer for 5 minutes",
    "Call 919876543210",
    "What is 45 * 8?",
    "",
])
def test_word_boundaries_avoid_false_positives(sanitizer, text):
    verdict = sanitizer.scan(text)
    assert not verdict.blocked
    assert verdict.category is None


def test_credentials_reported_before_financial(sanitizer):
    verdict = sanitizer.scan("my card number and password")
    assert verdict.category == BlockCategory.CREDENTIALS


def test_verdict_is_fresh_per_call(sanitizer):
    assert sanitizer.scan("my otp is 1234").blocked
    assert not sanitizer.scan("play some music").blocked


def test_custom_blocklist():
    sanitizer = SecuritySanitizer({BlockCategory.CREDENTIALS: ("secret word",)})
    assert sanitizer.scan("the SECRET   WORD is swordfish").blocked
    assert not sanitizer.scan("my password").blocked


def test_sanitize_markup_strips_script_and_handlers():
    cleaned = SecuritySanitizer.sanitize_markup("<script>alert(1)</script> Play lo-fi music ")
    assert cleaned == "Play lo-fi music"
    assert "javascript:" not in SecuritySanitizer.sanitize_markup("javascript:alert(1)")
    assert "onclick=" not in SecuritySanitizer.sanitize_markup('<b onclick="x()">hi</b>')
    assert SecuritySanitizer.sanitize_markup(None) == ""
