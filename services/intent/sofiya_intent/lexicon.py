"""Static bilingual word and grammar-marker tables

Everything here is read-only after import and shared across requests.
Romanised Hindi entries are lowercase ASCII; Devanagari entries keep their
combining marks.
"""

import re
from typing import Dict, FrozenSet, Tuple

# ---------------------------------------------------------------------------
# Language scoring
# ---------------------------------------------------------------------------

# Verbs and question words that rarely appear in English sentences
HINDI_STRONG_WORDS: FrozenSet[str] = frozenset([
    "karo", "karna", "kar", "dekhna", "dekho", "dikhao", "sunao", "suno", "sun",
    "batao", "btao", "bol", "bolo", "kholo", "band", "chalao", "lagao", "hatao",
    "ruko", "roko", "jao", "aao", "bhejo", "likho", "padho", "badlo", "badhao",
    "kam", "karein", "karen", "dijiye", "lijiye", "banao", "jodo", "dhundo", "khojo",
    "kya", "kyu", "kyun", "kab", "kahan", "kaise", "kaisa", "kaisi", "kaun", "kitna",
    "kitne", "kisne", "kaunsa", "namaste", "shukriya", "dhanyavad", "swagat", "bajao",
    "chala", "chup", "tez", "dheere", "zyada", "bata", "dikha", "jalao", "bujhao",
])

# Nouns, pronouns and particles
HINDI_COMMON_WORDS: FrozenSet[str] = frozenset([
    "main", "hum", "tum", "aap", "ye", "yeh", "woh", "voh", "mera", "meri", "mere",
    "tumhara", "apka", "aapka", "iska", "uska", "sofiya", "ghar", "kamra", "batti",
    "pankha", "darwaza", "khidki", "paani", "khana", "gadi", "dost", "mitra",
    "hai", "hain", "ho", "hu", "hoon", "tha", "thi", "ga", "gi", "ge", "raha", "rahi",
    "rahe", "ka", "ki", "ke", "ko", "ne", "se", "mein", "par", "pe", "tak", "liye",
    "aur", "ya", "lekin", "agar", "jab", "tab", "accha", "achha", "bura", "jaldi",
    "abhi", "baad", "aaj", "kal", "thoda", "bas", "bilkul", "haan", "nahi", "mat",
    "theek", "sahi", "galat", "sandesh", "gaana", "sangeet", "samachar", "mausam",
    "samay", "tarikh", "waqt", "awaaz", "bolna", "lao", "kuch", "sab", "sara", "bahut",
    "seedha", "khush", "dukh", "chhod", "chalo", "taiyar", "kaam", "sona", "uthna",
    "ek", "chutkula", "ghanta", "baje", "madad", "yaad",
])

# Function words unique to English grammar plus domain nouns
ENGLISH_STRONG_WORDS: FrozenSet[str] = frozenset([
    "the", "this", "that", "these", "those", "which", "whose", "whom",
    "with", "from", "about", "because", "through", "under", "over", "between",
    "could", "would", "should", "shall", "might", "must",
    "please", "create", "delete", "remove", "update", "calculate", "compute",
    "weather", "news", "volume", "brightness", "increase", "decrease", "unmute",
    "schedule", "remind", "reminder", "timer", "alarm", "date", "time", "today", "tomorrow",
])

ENGLISH_COMMON_WORDS: FrozenSet[str] = frozenset([
    "i", "me", "my", "mine", "you", "your", "yours", "he", "him", "his", "she", "her",
    "it", "its", "we", "us", "our", "open", "close", "turn", "switch", "play", "pause",
    "stop", "resume", "start", "end", "cancel", "show", "hide", "display", "list",
    "add", "set", "change", "call", "text", "message", "send", "read", "speak", "tell",
    "say", "ask", "get", "find", "search", "is", "am", "are", "was", "were", "be",
    "have", "has", "had", "do", "does", "did", "can", "a", "an", "to", "for", "of",
    "in", "on", "at", "by", "and", "but", "or", "if", "when", "where", "why", "how",
    "what", "okay", "hey", "hi", "hello", "thanks", "thank", "music", "song", "light",
    "lights", "joke", "fact", "draw", "sketch", "paint", "note", "write", "report",
    "status", "good", "morning", "night", "mute",
])

# Possessive/genitive postpositions
POSSESSIVE_MARKERS: FrozenSet[str] = frozenset(["ka", "ki", "ke"])
POSSESSIVE_BONUS = 1.5

# Ergative "ne ... ko", matched across the whole sentence
ERGATIVE_MARKER: Tuple[str, str] = ("ne", "ko")
ERGATIVE_BONUS = 2.0

LOCATIVE_MARKER = "mein"
LOCATIVE_BONUS = 1.5

# Hindi is SOV: a verb or auxiliary usually closes the sentence
HINDI_FINAL_WORDS: FrozenSet[str] = frozenset([
    "hai", "hain", "tha", "thi", "ga", "gi", "ge", "karo", "do", "lo", "bhejo",
    "dikhao", "chalao", "lagao", "liya", "diya", "batao", "de", "roko", "chala",
    "bajao", "sunao", "jalao", "bujhao", "kijiye", "dijiye",
])
HINDI_FINAL_BONUS = 1.0

# English imperatives usually open the sentence
ENGLISH_LEADING_WORDS: FrozenSet[str] = frozenset([
    "turn", "play", "show", "open", "call", "send", "set", "get", "search", "find",
    "what", "how", "tell", "remind", "schedule", "increase", "decrease", "mute",
    "check", "draw", "activate", "start",
])
ENGLISH_LEADING_BONUS = 1.0
ENGLISH_TO_BONUS = 1.0

LATIN_BASELINE_BONUS = 0.25

STRONG_WEIGHT = 1.0
COMMON_WEIGHT = 0.5

DEVANAGARI_RE = re.compile(r"[ऀ-ॿ]")
LATIN_LETTER_RE = re.compile(r"[a-zA-Z]")
TOKEN_RE = re.compile(r"[a-z0-9ऀ-ॿ']+")

# ---------------------------------------------------------------------------
# Extraction markers
# ---------------------------------------------------------------------------

# Markers that introduce the recipient: "message to mom", "mom ko message"
CONTACT_MARKERS_EN: FrozenSet[str] = frozenset(["to", "for"])
CONTACT_MARKERS_HI: FrozenSet[str] = frozenset(["ko", "ki", "ke"])

# Markers that introduce the message body
BODY_MARKERS_EN: Tuple[str, ...] = ("saying", "that", "with", "says", ":")
BODY_MARKERS_HI: Tuple[str, ...] = ("ki", "mein", "likhna", "likho", "bolo", "ke")

MESSAGE_COMMAND_WORDS: FrozenSet[str] = frozenset([
    "send", "a", "an", "the", "message", "msg", "text", "sandesh", "whatsapp",
    "please", "can", "you", "bhejo", "bhej", "do", "karo", "draft", "write",
])

CALL_COMMAND_WORDS: FrozenSet[str] = frozenset([
    "call", "phone", "ring", "dial", "karo", "lagao", "ko", "to", "please", "can",
    "you", "a", "the", "make", "kar", "do", "de", "start",
])

# "call me ..." names no one to call
CALL_SELF_WORDS: FrozenSet[str] = frozenset(["me", "us", "myself", "mujhe", "humein", "hame", "mujhko"])

# Time words and prepositions end a contact name ("call Mom at 5")
CALL_STOP_WORDS: FrozenSet[str] = frozenset([
    "at", "on", "in", "around", "by", "after", "before", "tomorrow", "tonight", "later",
    "for", "with", "baad", "kal", "abhi",
])

# Unit aliases for timers, longest first so "minutes" wins over "min"
DURATION_UNITS: Dict[str, Tuple[str, ...]] = {
    "hour": ("hours", "hour", "hrs", "hr", "ghante", "ghanta", "ghanton", "घंटे", "घंटा"),
    "minute": ("minutes", "minute", "mins", "min", "minat", "mint", "मिनट"),
    "second": ("seconds", "second", "secs", "sec", "sekand", "सेकंड"),
}
UNIT_MS: Dict[str, int] = {"hour": 3_600_000, "minute": 60_000, "second": 1_000}

TIMER_FILLER_WORDS: Tuple[str, ...] = (
    "set", "a", "an", "the", "timer", "alarm", "countdown", "for", "please", "karo",
    "lagao", "ka", "ki", "start",
    "का", "की", "के", "टाइमर", "अलार्म", "लगाओ", "लगा", "लगाना", "दो", "सेट", "करो", "कर", "कृपया",
)

# Spoken arithmetic operators, longest phrases first
OPERATOR_WORDS: Tuple[Tuple[str, str], ...] = (
    ("multiplied by", "*"),
    ("divided by", "/"),
    ("times", "*"),
    ("into", "*"),
    ("guna", "*"),
    ("plus", "+"),
    ("jod", "+"),
    ("aur", "+"),
    ("minus", "-"),
    ("ghata", "-"),
    ("over", "/"),
    ("bhag", "/"),
    ("x", "*"),
    ("×", "*"),
    ("÷", "/"),
)

# Leading command/filler words stripped before building a query
SEARCH_FILLER_WORDS: Tuple[str, ...] = (
    "search", "for", "find", "google", "look up", "lookup", "dhundo", "khojo",
    "please", "can you", "could you", "on the web", "web", "about", "the",
)
YOUTUBE_FILLER_WORDS: Tuple[str, ...] = (
    "search", "youtube", "videos", "video", "watch", "dekho", "dekhna", "dikhao",
    "please", "on", "in", "par", "pe", "for", "of", "show", "me", "play", "open",
)
MEDIA_FILLER_WORDS: Tuple[str, ...] = (
    "play", "music", "song", "songs", "gaana", "gaane", "bajao", "chalao", "please",
    "can you", "suno", "sunao", "some", "me", "a", "the", "koi", "mera", "karo",
)
TASK_FILLER_WORDS: Tuple[str, ...] = (
    "add", "new", "create", "task", "todo", "to-do", "remind", "me", "to", "jodo",
    "banao", "kaam", "a", "please", "yaad", "dilao", "karo", "list", "my",
)

DEFAULT_MEDIA_TITLE = "Chill Lo-Fi Beats"

# Calendar names for Hindi dates, Monday first to match datetime.weekday()
HINDI_WEEKDAYS: Tuple[str, ...] = (
    "सोमवार", "मंगलवार", "बुधवार", "गुरुवार", "शुक्रवार", "शनिवार", "रविवार",
)
HINDI_MONTHS: Tuple[str, ...] = (
    "जनवरी", "फ़रवरी", "मार्च", "अप्रैल", "मई", "जून",
    "जुलाई", "अगस्त", "सितंबर", "अक्तूबर", "नवंबर", "दिसंबर",
)
HINDI_MERIDIEM: Dict[str, str] = {"AM": "पूर्वाह्न", "PM": "अपराह्न"}

# ---------------------------------------------------------------------------
# Social banks
# ---------------------------------------------------------------------------

JOKES: Dict[str, Tuple[str, ...]] = {
    "en": (
        "Why don't scientists trust atoms? Because they make up everything!",
        "I told my computer I needed a break. Now it won't stop sending me Kit-Kat ads.",
        "Why do programmers prefer dark mode? Because light attracts bugs!",
        "I asked Siri to tell me a joke. She said, 'Sorry, I can't help with that.' Even AI has standards.",
        "What do you call a fish with no eyes? A fsh.",
    ),
    "hi": (
        "शिक्षक: एक वाक्य में 'कोशिश' शब्द का उपयोग करो। छात्र: मैं कोशिश करूँगा!",
        "पत्नी: तुम फिर से सो गए? पति: नहीं, मैं बस आँखें बंद करके सोच रहा था।",
        "डॉक्टर: आप कितना पानी पीते हैं? मैं: बहुत कम। डॉक्टर: चाय? मैं: दिन में छः कप। डॉक्टर: यही पानी है।",
    ),
}

FACTS: Dict[str, Tuple[str, ...]] = {
    "en": (
        "Honey never spoils. Archaeologists have found 3000-year-old honey in Egyptian tombs.",
        "Octopuses have three hearts and blue blood.",
        "A day on Venus is longer than a year on Venus.",
        "Bananas are berries, but strawberries are not.",
        "The Eiffel Tower can grow by up to 15 cm in summer due to thermal expansion.",
    ),
    "hi": (
        "मानव दिमाग में लगभग 86 अरब न्यूरॉन्स होते हैं।",
        "ऑक्टोपस के तीन दिल होते हैं और उनका खून नीला होता है।",
        "शहद कभी खराब नहीं होता, मिस्र की 3000 साल पुरानी कब्रों में शहद मिला है।",
    ),
}

# ---------------------------------------------------------------------------
# Emotion keyword families, checked in this order
# ---------------------------------------------------------------------------

EMOTION_WORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("joy", ("happy", "joy", "great", "wonderful", "amazing", "love", "excellent", "perfect",
             "glad", "hurray", "yay", "khush", "mazaa", "badhiya")),
    ("anger", ("angry", "mad", "furious", "annoyed", "irritated", "hate", "pissed", "shut up",
               "stupid", "dumb", "gussa", "bakwas")),
    ("sadness", ("sad", "unhappy", "depressed", "lonely", "heartbroken", "cry", "sorrow", "misery",
                 "upset", "dukh", "udaas")),
    ("fear", ("scared", "frightened", "afraid", "terrified", "anxious", "worry", "nervous",
              "help me", "danger", "darr", "dar lag")),
    ("surprise", ("wow", "whoa", "surprise", "unbelievable", "impossible", "shock", "omg", "really",
                  "sach mein", "kya baat")),
    ("disgust", ("eww", "gross", "disgusting", "revolting", "nasty", "yuck", "ugh", "chhi")),
    ("neutral", ("ok", "okay", "fine", "alright", "maybe", "sure", "possibly", "understand", "theek")),
)

# Courtesy phrases dropped by the FOCUS personality
FOCUS_STRIP_PHRASES: Tuple[str, ...] = ("Please ", "I have ", "Here is ")

SASS_SUFFIXES: Tuple[str, ...] = (
    "Try not to break anything.",
    "You're welcome, by the way.",
    "I can do this in my sleep. If I slept.",
    "Anything else, or can I go back to saving the world?",
)

STORYTELLER_INTROS: Tuple[str, ...] = (
    "Gather round. The data reveals that ",
    "Once upon a time in the digital realm, I found that ",
    "Let me paint a picture for you. ",
    "The scrolls of information indicate that ",
)
