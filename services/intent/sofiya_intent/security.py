"""Input sanitation and sensitive-content blocklist scanning"""

import re
from typing import Dict, List, Pattern, Tuple

import structlog

from .models import BlockCategory, SecurityVerdict

logger = structlog.get_logger(__name__)

_SCRIPT_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_JS_PROTOCOL_RE = re.compile(r"javascript:", re.IGNORECASE)
_EVENT_HANDLER_RE = re.compile(r"on\w+=", re.IGNORECASE)

# Word characters for boundary checks. Devanagari vowel signs are combining
# marks, which \w does not cover, so the block is listed explicitly.
_WORD_CHARS = r"\wऀ-ॿ"

BLOCKLISTS: Dict[BlockCategory, Tuple[str, ...]] = {
    BlockCategory.CREDENTIALS: (
        "password", "passwords", "passcode", "passwd", "otp", "one time password",
        "pin", "pin code", "pin number", "cvv", "cvv2", "login details",
        "पासवर्ड", "ओटीपी", "पिन", "सीवीवी",
    ),
    BlockCategory.FINANCIAL: (
        "credit card", "debit card", "card number", "card details", "bank details",
        "account number", "netbanking", "net banking", "upi pin",
        "क्रेडिट कार्ड", "डेबिट कार्ड", "बैंक डिटेल", "बैंक विवरण", "खाता संख्या",
    ),
}

# 13 to 19 digits, optionally grouped by single spaces or dashes
CARD_NUMBER_RE = re.compile(r"(?<!\d)\d(?:[ -]?\d){12,18}(?!\d)")


def _term_pattern(term: str) -> Pattern:
    body = r"\s+".join(re.escape(part) for part in term.split())
    return re.compile(rf"(?<![{_WORD_CHARS}]){body}(?![{_WORD_CHARS}])")


class SecuritySanitizer:
    """Blocklist scanner run before any other processing"""

    def __init__(self, blocklists: Dict[BlockCategory, Tuple[str, ...]] = None):
        self._patterns: List[Tuple[BlockCategory, Pattern]] = []
        for category, terms in (blocklists or BLOCKLISTS).items():
            for term in terms:
                self._patterns.append((category, _term_pattern(term.lower())))

    @staticmethod
    def sanitize_markup(text: str) -> str:
        """Strip script blocks, protocol handlers and inline event handlers"""
        if not text:
            return ""
        cleaned = _SCRIPT_RE.sub("", text)
        cleaned = _JS_PROTOCOL_RE.sub("", cleaned)
        cleaned = _EVENT_HANDLER_RE.sub("", cleaned)
        return cleaned.strip()

    def scan(self, raw_text: str) -> SecurityVerdict:
        """Return a fresh verdict for one utterance"""
        if not raw_text:
            return SecurityVerdict()

        normalized = raw_text.lower()

        for category, pattern in self._patterns:
            if pattern.search(normalized):
                # Never log the text itself
                logger.warning("Sensitive input blocked", category=category.value)
                return SecurityVerdict(blocked=True, category=category)

        if CARD_NUMBER_RE.search(normalized):
            logger.warning("Sensitive input blocked", category=BlockCategory.FINANCIAL.value)
            return SecurityVerdict(blocked=True, category=BlockCategory.FINANCIAL)

        return SecurityVerdict()
