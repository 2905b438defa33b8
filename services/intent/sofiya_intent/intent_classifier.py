"""Ordered rule-based intent classification

Rules are evaluated strictly in table order and the first rule that matches
wins. There is no scoring between intents: the table order *is* the
disambiguation policy, and exclusion patterns carve out the known overlaps.
"""

from dataclasses import dataclass, field
import re
from typing import Dict, List, Optional, Pattern, Sequence, Tuple

import structlog

from .models import IntentId, IntentMatch, Lang

logger = structlog.get_logger(__name__)

_WORD_CHARS = r"\wऀ-ॿ"

_UNIT_WORDS = (
    r"hours?|hrs?|minutes?|mins?|seconds?|secs?|ghant[aeo]n?|minat|mint|sekand|"
    r"मिनट|घंटे|घंटा|सेकंड"
)


def phrases(*words: str) -> Pattern:
    """Compile a boundary-aware alternation of words/phrases"""
    alternatives = sorted(
        (r"\s+".join(re.escape(part) for part in word.split()) for word in words),
        key=len,
        reverse=True,
    )
    body = "|".join(alternatives)
    return re.compile(rf"(?<![{_WORD_CHARS}])(?:{body})(?![{_WORD_CHARS}])", re.IGNORECASE)


@dataclass(frozen=True)
class IntentRule:
    """One entry of the static, ordered rule table"""

    id: IntentId
    priority: int
    positive_patterns: Tuple[Pattern, ...] = ()
    exclusion_patterns: Tuple[Pattern, ...] = ()
    bilingual_keywords: Dict[Lang, Tuple[str, ...]] = field(default_factory=dict)
    _keyword_patterns: Tuple[Tuple[Lang, Pattern], ...] = field(default=(), repr=False, compare=False)

    def keyword_hit(self, text: str) -> Tuple[bool, Optional[Lang], Optional[str]]:
        """Test each language's keyword set on its own"""
        if not self._keyword_patterns:
            return True, None, None
        for language, pattern in self._keyword_patterns:
            match = pattern.search(text)
            if match:
                return True, language, match.group(0)
        return False, None, None

    def match(self, text: str) -> Optional[IntentMatch]:
        hit, language, keyword = self.keyword_hit(text)
        if not hit:
            return None

        captures: List[str] = []
        for pattern in self.positive_patterns:
            found = pattern.search(text)
            if not found:
                return None
            groups = [group for group in found.groups() if group]
            captures.extend(groups or [found.group(0)])

        for pattern in self.exclusion_patterns:
            if pattern.search(text):
                logger.debug("Rule excluded", intent=self.id.value, exclusion=pattern.pattern[:60])
                return None

        if not captures and keyword:
            captures.append(keyword)

        return IntentMatch(
            intent=self.id,
            priority=self.priority,
            captures=tuple(captures),
            matched_language=language,
        )


def build_rules(definitions: Sequence[dict]) -> Tuple[IntentRule, ...]:
    rules = []
    for priority, definition in enumerate(definitions):
        keywords: Dict[Lang, Tuple[str, ...]] = {}
        keyword_patterns = []
        for language in (Lang.ENGLISH, Lang.HINDI):
            words = tuple(definition.get(language.value, ()))
            if words:
                keywords[language] = words
                keyword_patterns.append((language, phrases(*words)))

        rule = IntentRule(
            id=definition["id"],
            priority=priority,
            positive_patterns=tuple(definition.get("require", ())),
            exclusion_patterns=tuple(definition.get("exclude", ())),
            bilingual_keywords=keywords,
            _keyword_patterns=tuple(keyword_patterns),
        )
        if not rule.bilingual_keywords and not rule.positive_patterns:
            raise ValueError(f"Rule {rule.id.value} can never be selective")
        rules.append(rule)
    return tuple(rules)


TIMER_DURATION = re.compile(rf"\d+(?:\.\d+)?\s*(?:{_UNIT_WORDS})(?![{_WORD_CHARS}])", re.IGNORECASE)
ARITHMETIC_RUN = re.compile(
    r"\d+(?:\.\d+)?\s*\)?\s*"
    r"(?:[-+*/x×÷]|plus|minus|times|multiplied\s+by|divided\s+by|into|over|guna|jod|ghata|bhag|aur)"
    r"\s*\(?\s*-?\d",
    re.IGNORECASE,
)

_MEDIA_NOUNS = phrases("music", "song", "songs", "gaana", "gaane", "media", "audio", "playback", "sangeet", "playing")
_DEVICE_NOUNS = phrases("light", "lights", "batti", "fan", "pankha", "bulb", "lamp", "बत्ती", "पंखा")
_TASK_NOUNS = phrases("task", "tasks", "todo", "to-do", "kaam", "list", "remind", "reminder", "yaad", "plan")
_INFO_NOUNS = phrases("weather", "mausam", "news", "samachar", "khabar", "मौसम", "समाचार")

RULE_DEFINITIONS: Tuple[dict, ...] = (
    {
        "id": IntentId.PERSONALITY_CHANGE,
        "en": ("sass", "sassy", "attitude", "storyteller", "story mode", "narrator",
               "focus mode", "normal mode", "default mode", "back to normal", "reset", "default"),
        "hi": ("masti mode", "kahani mode", "dhyan mode"),
        "exclude": (phrases("timer", "alarm", "password"),),
    },
    {
        "id": IntentId.SYSTEM_STATUS,
        "en": ("status", "report", "system", "online", "alive", "how are you",
               "hello sofiya", "hi sofiya", "hey sofiya"),
        "hi": ("kaisi ho", "kaisi hain", "kaise ho", "namaste sofiya", "नमस्ते सोफिया", "नमस्ते सोफ़िया"),
        "exclude": (phrases("health", "sehat", "weather", "mausam", "news", "samachar"),),
    },
    {
        "id": IntentId.ROUTINE_MORNING,
        "en": ("good morning",),
        "hi": ("suprabhat", "सुप्रभात"),
    },
    {
        "id": IntentId.ROUTINE_NIGHT,
        "en": ("good night",),
        "hi": ("shubh ratri", "शुभ रात्रि"),
    },
    {
        "id": IntentId.TIME_DATE,
        "en": ("time", "clock", "date", "today", "what day"),
        "hi": ("samay", "waqt", "baje", "tarikh", "din", "aaj", "समय", "तारीख"),
        # "10 minutes" belongs to the timer, "today's weather" to the forecast
        "exclude": (
            TIMER_DURATION,
            phrases("timer", "countdown", "alarm", "remind", "reminder", "task", "todo"),
            _INFO_NOUNS,
        ),
    },
    {
        "id": IntentId.VOLUME_UP,
        "en": ("volume", "sound"),
        "hi": ("awaaz", "awaz", "आवाज़", "आवाज"),
        "require": (phrases("up", "increase", "raise", "louder", "badhao", "badha", "tez", "zyada", "बढ़ाओ"),),
    },
    {
        "id": IntentId.VOLUME_DOWN,
        "en": ("volume", "sound"),
        "hi": ("awaaz", "awaz", "आवाज़", "आवाज"),
        "require": (phrases("down", "decrease", "lower", "reduce", "softer", "kam", "dheere",
                            "ghatao", "ghata", "कम"),),
    },
    {
        "id": IntentId.VOLUME_MUTE,
        "en": ("volume", "sound", "audio", "mute"),
        "hi": ("awaaz", "awaz", "chup", "आवाज़", "आवाज"),
        "require": (phrases("mute", "band", "chup", "silent", "quiet", "off", "बंद"),),
    },
    {
        "id": IntentId.VOLUME_UNMUTE,
        "en": ("volume", "sound", "audio", "unmute"),
        "hi": ("awaaz", "awaz", "आवाज़", "आवाज"),
        "require": (phrases("unmute", "chalu", "on", "restore", "wapas", "चालू"),),
    },
    {
        "id": IntentId.DRAWING_MODE,
        "en": ("draw", "sketch", "paint", "canvas", "drawing"),
        "hi": ("bana", "banao", "chitra", "tasveer"),
        "exclude": (_TASK_NOUNS, phrases("khana", "chai")),
    },
    {
        "id": IntentId.MEDIA_PLAY,
        "en": ("play", "music", "song", "songs", "listen"),
        "hi": ("gaana", "gaane", "bajao", "chalao", "suno", "sunao", "sangeet", "गाना", "संगीत"),
        "exclude": (
            phrases("stop", "pause", "roko", "band", "youtube", "video", "videos"),
            phrases("joke", "jokes", "chutkula", "mazak", "fact", "facts", "kahani", "story",
                    "movie", "film", "cinema"),
            _DEVICE_NOUNS,
            _INFO_NOUNS,
        ),
    },
    {
        "id": IntentId.MEDIA_PAUSE,
        "en": ("stop", "pause"),
        "hi": ("roko", "ruko", "band"),
        "require": (_MEDIA_NOUNS,),
    },
    {
        "id": IntentId.MEDIA_RESUME,
        "en": ("resume", "unpause", "continue playing"),
        "hi": ("wapas chalao", "phir se chalao", "phir se chala", "dobara"),
    },
    {
        "id": IntentId.COMM_MESSAGE_DRAFT,
        "en": ("message", "msg", "text", "whatsapp"),
        "hi": ("sandesh", "संदेश", "मैसेज"),
        "exclude": (phrases("remind", "reminder", "task", "todo"),),
    },
    {
        "id": IntentId.COMM_CALL_START,
        "en": ("call", "phone", "ring", "dial"),
        "hi": ("phone karo", "call karo", "call lagao", "fon", "कॉल", "फ़ोन"),
        "exclude": (phrases("volume", "control", "remind", "reminder", "task", "todo"),),
    },
    {
        "id": IntentId.SMART_HOME_ACTION,
        "en": ("light", "lights", "bulb", "lamp", "fan"),
        "hi": ("batti", "bijli", "pankha", "बत्ती", "लाइट", "पंखा"),
    },
    {
        "id": IntentId.SMART_HOME_SCENE,
        "en": ("movie night", "movie", "cinema", "film", "party mode"),
        "hi": ("filam", "फ़िल्म", "फिल्म"),
    },
    {
        "id": IntentId.SOCIAL,
        "en": ("joke", "jokes", "funny", "fact", "facts", "interesting", "did you know"),
        "hi": ("mazak", "chutkula", "hasao", "hasa", "rochak", "gyaan", "gyan", "चुटकुला"),
    },
    {
        "id": IntentId.HEALTH_SHOW,
        "en": ("health", "heart", "heart rate", "pulse", "fitness", "steps", "calories", "sleep"),
        "hi": ("sehat", "dil", "swasthya", "स्वास्थ्य"),
    },
    {
        "id": IntentId.MINDFULNESS_START,
        "en": ("breathe", "breathing", "meditate", "meditation", "relax", "calm"),
        "hi": ("dhyan", "shant", "saans", "ध्यान"),
    },
    {
        "id": IntentId.SENTRY_MODE,
        "en": ("sentry", "security", "guard", "surveillance"),
        "hi": ("suraksha", "nigrani", "सुरक्षा"),
    },
    {
        "id": IntentId.WEATHER_FETCH,
        "en": ("weather", "temperature", "temp", "rain", "sunny", "forecast", "humidity"),
        "hi": ("mausam", "baarish", "barish", "garmi", "sardi", "मौसम"),
    },
    {
        "id": IntentId.NEWS_FETCH,
        "en": ("news", "headlines", "latest"),
        "hi": ("samachar", "khabar", "khabren", "समाचार", "ख़बर"),
    },
    {
        "id": IntentId.TASK_ADD,
        "en": ("task", "tasks", "todo", "to-do", "remind", "reminder"),
        "hi": ("kaam", "yaad"),
        "require": (phrases("add", "new", "create", "remind me", "jodo", "banao", "likho",
                            "dilao", "dilana"),),
    },
    {
        "id": IntentId.TASK_SHOW,
        "en": ("task", "tasks", "todo", "to-do", "remind", "reminder", "reminders"),
        "hi": ("kaam", "yaad"),
    },
    {
        "id": IntentId.TIMER,
        "en": ("timer", "countdown", "alarm", "stopwatch", "hour", "hours", "minute", "minutes",
               "min", "mins", "second", "seconds", "sec", "secs"),
        "hi": ("ghanta", "ghante", "minat", "मिनट", "घंटा", "घंटे", "सेकंड"),
        "require": (re.compile(r"(\d+(?:\.\d+)?)"),),
    },
    {
        "id": IntentId.YOUTUBE_SEARCH,
        "en": ("youtube", "video", "videos", "watch"),
        "hi": ("dekho", "dekhna", "यूट्यूब"),
    },
    {
        "id": IntentId.CALCULATION,
        "require": (ARITHMETIC_RUN,),
    },
    {
        "id": IntentId.HELP,
        "en": ("help", "what can you do", "capabilities", "features", "commands"),
        "hi": ("madad", "sahayata", "kya kar sakti", "kya kar sakte", "मदद"),
    },
    {
        "id": IntentId.SEARCH_QUERY,
        "en": ("search", "google", "look up", "find"),
        "hi": ("dhundo", "khojo", "खोजो", "ढूंढो"),
    },
)

INTENT_RULES: Tuple[IntentRule, ...] = build_rules(RULE_DEFINITIONS)


class IntentClassifier:
    """First-match-wins walk over the ordered rule table"""

    def __init__(self, rules: Sequence[IntentRule] = INTENT_RULES):
        self._rules = tuple(sorted(rules, key=lambda rule: rule.priority))

    def classify(self, normalized_text: str) -> Optional[IntentMatch]:
        """Return the first matching rule, or None to hand over to the fallback chain"""
        text = (normalized_text or "").lower()
        if not text.strip():
            return None

        for rule in self._rules:
            result = rule.match(text)
            if result is not None:
                logger.debug("Intent matched", intent=result.intent.value, priority=result.priority)
                return result

        logger.debug("No intent matched")
        return None

    def rules(self) -> Tuple[IntentRule, ...]:
        """The rule table in evaluation order"""
        return self._rules

    def get_supported_intents(self) -> List[str]:
        """Get list of supported intents in priority order"""
        return [rule.id.value for rule in self._rules]

    def get_keywords(self) -> Dict[str, Dict[str, List[str]]]:
        return {
            rule.id.value: {lang.value: list(words) for lang, words in rule.bilingual_keywords.items()}
            for rule in self._rules
        }
