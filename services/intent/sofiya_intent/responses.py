"""Bilingual response templates, personality personaliser and emotion tagging"""

from datetime import datetime
import re
import zlib
from typing import Any, Dict, Optional, Sequence

from jinja2 import Template

from . import lexicon
from .models import (
    CommandResult,
    DurationEntity,
    EmotionTag,
    Entity,
    IntentId,
    Lang,
    PersonalityMode,
    SocialEntity,
)


RESPONSE_TEMPLATES: Dict[IntentId, Dict[Lang, str]] = {
    IntentId.SECURITY_ALERT: {
        Lang.ENGLISH: "Security Alert: Request for sensitive data has been blocked.",
        Lang.HINDI: "सुरक्षा चेतावनी: संवेदनशील डेटा का अनुरोध अस्वीकृत।",
    },
    IntentId.PERSONALITY_CHANGE: {
        Lang.ENGLISH: (
            "{% if data.mode == 'SASS' %}Sass Mode activated."
            "{% elif data.mode == 'FOCUS' %}Focus Mode engaged."
            "{% elif data.mode == 'STORYTELLER' %}Storyteller Mode activated."
            "{% else %}Restoring default settings.{% endif %}"
        ),
        Lang.HINDI: (
            "{% if data.mode == 'SASS' %}सैस मोड सक्रिय।"
            "{% elif data.mode == 'FOCUS' %}फोकस मोड सक्रिय।"
            "{% elif data.mode == 'STORYTELLER' %}कहानी मोड सक्रिय।"
            "{% else %}सोफिया को रीसेट कर रही हूँ।{% endif %}"
        ),
    },
    IntentId.SYSTEM_STATUS: {
        Lang.ENGLISH: "{{ greeting }}! All systems nominal. I'm fully operational and ready to assist. Version 4.2 active.",
        Lang.HINDI: "{{ greeting }}! सभी सिस्टम ठीक हैं। मैं पूरी तरह से तैयार हूँ। वर्शन 4.2 सक्रिय है।",
    },
    IntentId.ROUTINE_MORNING: {
        Lang.ENGLISH: "Good morning! Starting your morning routine with the weather, the news and today's tasks.",
        Lang.HINDI: "सुप्रभात! सुबह की दिनचर्या शुरू: मौसम, समाचार और आज के कार्य।",
    },
    IntentId.ROUTINE_NIGHT: {
        Lang.ENGLISH: "Good night. Lights off, playback paused and Focus Mode on.",
        Lang.HINDI: "शुभ रात्रि। लाइट्स बंद, संगीत रोका गया और फोकस मोड चालू।",
    },
    IntentId.TIME_DATE: {
        Lang.ENGLISH: "The current time is {{ data.time }}. Today is {{ data.date }}.",
        Lang.HINDI: "अभी का समय है {{ data.time }}। आज की तारीख {{ data.date }} है।",
    },
    IntentId.VOLUME_UP: {
        Lang.ENGLISH: "Increasing volume.",
        Lang.HINDI: "आवाज़ बढ़ा रही हूँ।",
    },
    IntentId.VOLUME_DOWN: {
        Lang.ENGLISH: "Decreasing volume.",
        Lang.HINDI: "आवाज़ कम कर रही हूँ।",
    },
    IntentId.VOLUME_MUTE: {
        Lang.ENGLISH: "Sound muted.",
        Lang.HINDI: "आवाज़ बंद।",
    },
    IntentId.VOLUME_UNMUTE: {
        Lang.ENGLISH: "Sound restored.",
        Lang.HINDI: "आवाज़ चालू।",
    },
    IntentId.DRAWING_MODE: {
        Lang.ENGLISH: "Opening the drawing canvas.",
        Lang.HINDI: "ड्रॉइंग कैनवास खोल रही हूँ।",
    },
    IntentId.MEDIA_PLAY: {
        Lang.ENGLISH: "Playing {{ data.title }}.",
        Lang.HINDI: "{{ data.title }} बजा रही हूँ।",
    },
    IntentId.MEDIA_PAUSE: {
        Lang.ENGLISH: "Playback paused.",
        Lang.HINDI: "संगीत रोका गया।",
    },
    IntentId.MEDIA_RESUME: {
        Lang.ENGLISH: "Resuming playback.",
        Lang.HINDI: "फिर से शुरू कर रही हूँ।",
    },
    IntentId.COMM_MESSAGE_DRAFT: {
        Lang.ENGLISH: "Message to {{ data.contact }} drafted.",
        Lang.HINDI: "{{ data.contact }} को संदेश तैयार किया गया।",
    },
    IntentId.COMM_CALL_START: {
        Lang.ENGLISH: "Calling {{ data.contact }}.",
        Lang.HINDI: "{{ data.contact }} को कॉल कर रही हूँ।",
    },
    IntentId.SMART_HOME_ACTION: {
        Lang.ENGLISH: "{% if data.device == 'fan' %}Fan{% else %}Lights{% endif %} turned {{ data.action }}.",
        Lang.HINDI: "{% if data.device == 'fan' %}पंखा{% else %}लाइट्स{% endif %} {% if data.state %}चालू{% else %}बंद{% endif %}।",
    },
    IntentId.SMART_HOME_SCENE: {
        Lang.ENGLISH: "{% if data.scene == 'party' %}Executing Party Mode protocol.{% else %}Executing Movie Night protocol.{% endif %}",
        Lang.HINDI: "{% if data.scene == 'party' %}पार्टी मोड सीन सक्रिय किया गया।{% else %}मूवी नाइट सीन सक्रिय किया गया।{% endif %}",
    },
    IntentId.SOCIAL: {
        Lang.ENGLISH: "{% if data.kind == 'fact' %}Interesting fact: {% endif %}{{ line }}",
        Lang.HINDI: "{% if data.kind == 'fact' %}रोचक तथ्य: {% endif %}{{ line }}",
    },
    IntentId.HEALTH_SHOW: {
        Lang.ENGLISH: "Opening biometrics dashboard.",
        Lang.HINDI: "स्वास्थ्य डैशबोर्ड खोल रही हूँ।",
    },
    IntentId.MINDFULNESS_START: {
        Lang.ENGLISH: "Initiating breathing sequence.",
        Lang.HINDI: "साँस लेने का व्यायाम शुरू कर रही हूँ।",
    },
    IntentId.SENTRY_MODE: {
        Lang.ENGLISH: "Sentry Mode activated.",
        Lang.HINDI: "निगरानी मोड सक्रिय।",
    },
    IntentId.WEATHER_FETCH: {
        Lang.ENGLISH: "Fetching meteorological data...",
        Lang.HINDI: "मौसम की जानकारी ला रही हूँ...",
    },
    IntentId.NEWS_FETCH: {
        Lang.ENGLISH: "Accessing global news feeds...",
        Lang.HINDI: "समाचार फीड लोड हो रही है...",
    },
    IntentId.TASK_ADD: {
        Lang.ENGLISH: 'Task added: "{{ data.task }}"',
        Lang.HINDI: 'कार्य जोड़ा गया: "{{ data.task }}"',
    },
    IntentId.TASK_SHOW: {
        Lang.ENGLISH: "Displaying task list.",
        Lang.HINDI: "कार्य सूची दिख रही है।",
    },
    IntentId.TIMER: {
        Lang.ENGLISH: "Timer set for {{ duration }}.",
        Lang.HINDI: "{{ duration }} का टाइमर सेट किया गया।",
    },
    IntentId.YOUTUBE_SEARCH: {
        Lang.ENGLISH: 'Searching YouTube for "{{ query }}".',
        Lang.HINDI: 'YouTube पर "{{ query }}" खोज रही हूँ।',
    },
    IntentId.CALCULATION: {
        Lang.ENGLISH: (
            "{% if data.result == 'error' %}I couldn't calculate that. Please check the numbers."
            "{% else %}The result of {{ data.expression }} is {{ data.result }}{% endif %}"
        ),
        Lang.HINDI: (
            "{% if data.result == 'error' %}मैं इसकी गणना नहीं कर सकी। कृपया संख्याएँ जाँचें।"
            "{% else %}{{ data.expression }} का उत्तर है {{ data.result }}{% endif %}"
        ),
    },
    IntentId.HELP: {
        Lang.ENGLISH: (
            "I can help you with: Media playback, Smart Home, Weather, News, Health, Tasks, "
            "Timers, Calculations, Communication, Jokes, and more. Just ask!"
        ),
        Lang.HINDI: (
            "मैं इन चीजों में मदद कर सकती हूँ: संगीत, स्मार्ट होम, मौसम, समाचार, स्वास्थ्य, "
            "कार्य, टाइमर, गणना, संचार, मजाक और बहुत कुछ।"
        ),
    },
    IntentId.SEARCH_QUERY: {
        Lang.ENGLISH: 'Searching the web for "{{ query }}"',
        Lang.HINDI: 'खोज रही हूँ: "{{ query }}"',
    },
    IntentId.AI_RESPONSE: {
        Lang.ENGLISH: "{{ text }}",
        Lang.HINDI: "{{ text }}",
    },
    IntentId.ERROR: {
        Lang.ENGLISH: "I encountered a system error. Please try again.",
        Lang.HINDI: "सिस्टम में त्रुटि हुई। कृपया पुन: प्रयास करें।",
    },
}

CLARIFICATION_TEMPLATES: Dict[IntentId, Dict[Lang, str]] = {
    IntentId.COMM_MESSAGE_DRAFT: {
        Lang.ENGLISH: "Who should I send the message to?",
        Lang.HINDI: "संदेश किसे भेजना है?",
    },
    IntentId.COMM_CALL_START: {
        Lang.ENGLISH: "Who should I call?",
        Lang.HINDI: "किसे कॉल करना है?",
    },
    IntentId.TIMER: {
        Lang.ENGLISH: "How long should the timer run?",
        Lang.HINDI: "टाइमर कितनी देर का लगाऊँ?",
    },
    IntentId.TASK_ADD: {
        Lang.ENGLISH: "What task should I add?",
        Lang.HINDI: "कौन सा कार्य जोड़ूँ?",
    },
    IntentId.SMART_HOME_ACTION: {
        Lang.ENGLISH: "Should I turn the {{ data.device }} on or off?",
        Lang.HINDI: "{% if data.device == 'fan' %}पंखा{% else %}लाइट{% endif %} चालू करूँ या बंद?",
    },
    IntentId.SEARCH_QUERY: {
        Lang.ENGLISH: "What should I search for?",
        Lang.HINDI: "मैं क्या खोजूँ?",
    },
    IntentId.YOUTUBE_SEARCH: {
        Lang.ENGLISH: "What should I look for on YouTube?",
        Lang.HINDI: "YouTube पर क्या खोजूँ?",
    },
}

UNKNOWN_COMMAND: Dict[Lang, str] = {
    Lang.ENGLISH: "I'm not sure I understand. Could you rephrase that for me?",
    Lang.HINDI: "मुझे समझ नहीं आया। क्या आप इसे थोड़ा अलग तरीके से कह सकते हैं?",
}

# Intents whose delivery is upbeat even when the user's words are neutral
_INTENT_EMOTIONS: Dict[IntentId, EmotionTag] = {
    IntentId.SOCIAL: EmotionTag.JOY,
    IntentId.ROUTINE_MORNING: EmotionTag.JOY,
    IntentId.SECURITY_ALERT: EmotionTag.FEAR,
}

_UNIT_NAMES = {
    Lang.ENGLISH: (("hour", "hours"), ("minute", "minutes"), ("second", "seconds")),
    Lang.HINDI: (("घंटा", "घंटे"), ("मिनट", "मिनट"), ("सेकंड", "सेकंड")),
}


def _compile(table: Dict[IntentId, Dict[Lang, str]]) -> Dict[IntentId, Dict[Lang, Template]]:
    return {
        intent: {language: Template(source) for language, source in sources.items()}
        for intent, sources in table.items()
    }


def pick(options: Sequence[str], seed: str) -> str:
    """Stable choice: the same seed always selects the same option"""
    if not options:
        return ""
    return options[zlib.crc32(seed.encode("utf-8")) % len(options)]


def format_duration(duration_ms: int, language: Lang) -> str:
    """Render milliseconds as "1 hour 30 minutes" / "1 घंटा 30 मिनट" """
    seconds_total = max(int(duration_ms // 1000), 0)
    hours, remainder = divmod(seconds_total, 3600)
    minutes, seconds = divmod(remainder, 60)

    parts = []
    names = _UNIT_NAMES[language]
    for amount, (singular, plural) in zip((hours, minutes, seconds), names):
        if amount:
            parts.append(f"{amount} {singular if amount == 1 else plural}")
    return " ".join(parts) or f"0 {names[2][1]}"


def greeting_for(now: datetime, language: Lang) -> str:
    if now.hour < 12:
        return "सुप्रभात" if language == Lang.HINDI else "Good Morning"
    if now.hour < 17:
        return "नमस्ते" if language == Lang.HINDI else "Good Afternoon"
    return "शुभ संध्या" if language == Lang.HINDI else "Good Evening"


class ResponseBuilder:
    """Renders localized responses and assembles CommandResult records"""

    def __init__(self):
        self.templates = _compile(RESPONSE_TEMPLATES)
        self.clarifications = _compile(CLARIFICATION_TEMPLATES)
        self._emotion_patterns = [
            (EmotionTag(name), re.compile(
                r"(?<![\wऀ-ॿ])(?:" + "|".join(re.escape(word) for word in words) + r")(?![\wऀ-ॿ])",
                re.IGNORECASE,
            ))
            for name, words in lexicon.EMOTION_WORDS
        ]

    def render(
        self,
        intent: IntentId,
        language: Lang,
        data: Optional[Entity] = None,
        now: Optional[datetime] = None,
        seed: str = "",
        **context: Any
    ) -> str:
        """Render the base (un-personalised) response for ``intent``"""
        now = now or datetime.now()
        values: Dict[str, Any] = {
            "data": data.model_dump(mode="json") if data is not None else {},
            "greeting": greeting_for(now, language),
            "query": getattr(data, "query", ""),
        }

        if isinstance(data, DurationEntity):
            values["duration"] = format_duration(data.duration_ms, language)
        if isinstance(data, SocialEntity):
            bank = lexicon.FACTS if data.kind == "fact" else lexicon.JOKES
            values["line"] = pick(bank[language.value], seed or now.isoformat())

        values.update(context)
        return self.templates[intent][language].render(**values).strip()

    def clarification(self, intent: IntentId, language: Lang, data: Optional[Entity] = None) -> Optional[str]:
        """Localized follow-up question for an incomplete entity"""
        templates = self.clarifications.get(intent)
        if not templates:
            return None
        values = {"data": data.model_dump(mode="json") if data is not None else {}}
        return templates[language].render(**values).strip()

    def unknown(self, language: Lang, personality: PersonalityMode = PersonalityMode.DEFAULT) -> CommandResult:
        """Ask the user to rephrase an utterance with nothing to act on"""
        response = UNKNOWN_COMMAND[language]
        return CommandResult(
            action_type=IntentId.ERROR,
            response=response,
            spoken_response=self.personalize(response, personality, language),
            language=language,
            emotion=EmotionTag.NEUTRAL,
            needs_clarification=True,
        )

    def personalize(self, text: str, personality: PersonalityMode, language: Lang, seed: str = "") -> str:
        """Apply the active personality to a base response"""
        seed = seed or text

        if language == Lang.HINDI:
            if personality == PersonalityMode.SASS:
                return f"{text} और कुछ? या मैं आराम करूँ?"
            if personality == PersonalityMode.STORYTELLER:
                return f"सुनिए, {text} यह जानकारी आपके लिए विशेष रूप से तैयार की गई है।"
            return text

        if personality == PersonalityMode.FOCUS:
            for phrase in lexicon.FOCUS_STRIP_PHRASES:
                text = text.replace(phrase, "")
            return text.strip()
        if personality == PersonalityMode.SASS:
            return f"{text} {pick(lexicon.SASS_SUFFIXES, seed)}"
        if personality == PersonalityMode.STORYTELLER:
            return f"{pick(lexicon.STORYTELLER_INTROS, seed)}{text.lower()}"
        return text

    def detect_emotion(self, text: str) -> EmotionTag:
        """Family with the most keyword hits; earlier families win ties"""
        best, best_hits = EmotionTag.NEUTRAL, 0
        for tag, pattern in self._emotion_patterns:
            hits = len(pattern.findall(text or ""))
            if hits > best_hits:
                best, best_hits = tag, hits
        return best

    def build(
        self,
        intent: IntentId,
        language: Lang,
        personality: PersonalityMode = PersonalityMode.DEFAULT,
        data: Optional[Entity] = None,
        utterance_text: str = "",
        now: Optional[datetime] = None,
        external_url: Optional[str] = None,
        seed: Optional[str] = None,
        **context: Any
    ) -> CommandResult:
        """Assemble the final result record

        ``seed`` drives the stable choice of jokes, facts and personality
        flourishes; it defaults to the utterance text.
        """
        seed = seed or utterance_text or intent.value
        needs_clarification = bool(data is not None and data.needs_clarification)

        response = self.clarification(intent, language, data) if needs_clarification else None
        if response is None:
            response = self.render(intent, language, data, now=now, seed=seed, **context)

        emotion = self.detect_emotion(utterance_text)
        if emotion == EmotionTag.NEUTRAL:
            emotion = _INTENT_EMOTIONS.get(intent, EmotionTag.NEUTRAL)

        return CommandResult(
            action_type=intent,
            response=response,
            spoken_response=self.personalize(response, personality, language, seed),
            language=language,
            data=data,
            external_url=None if needs_clarification else external_url,
            emotion=emotion,
            needs_clarification=needs_clarification,
        )
