"""Data models for the command-understanding service"""

from datetime import datetime
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Lang(str, Enum):
    """Languages the scorer can decide between"""
    ENGLISH = "en"
    HINDI = "hi"


class PersonalityMode(str, Enum):
    """Response template family selected by the UI"""
    DEFAULT = "DEFAULT"
    FOCUS = "FOCUS"
    STORYTELLER = "STORYTELLER"
    SASS = "SASS"


class IntentId(str, Enum):
    """Action types understood by the UI state machine"""
    PERSONALITY_CHANGE = "PERSONALITY_CHANGE"
    SYSTEM_STATUS = "SYSTEM_STATUS"
    ROUTINE_MORNING = "ROUTINE_MORNING"
    ROUTINE_NIGHT = "ROUTINE_NIGHT"
    TIME_DATE = "TIME_DATE"
    VOLUME_UP = "VOLUME_UP"
    VOLUME_DOWN = "VOLUME_DOWN"
    VOLUME_MUTE = "VOLUME_MUTE"
    VOLUME_UNMUTE = "VOLUME_UNMUTE"
    DRAWING_MODE = "DRAWING_MODE"
    MEDIA_PLAY = "MEDIA_PLAY"
    MEDIA_PAUSE = "MEDIA_PAUSE"
    MEDIA_RESUME = "MEDIA_RESUME"
    COMM_MESSAGE_DRAFT = "COMM_MESSAGE_DRAFT"
    COMM_CALL_START = "COMM_CALL_START"
    SMART_HOME_ACTION = "SMART_HOME_ACTION"
    SMART_HOME_SCENE = "SMART_HOME_SCENE"
    SOCIAL = "SOCIAL"
    HEALTH_SHOW = "HEALTH_SHOW"
    MINDFULNESS_START = "MINDFULNESS_START"
    SENTRY_MODE = "SENTRY_MODE"
    WEATHER_FETCH = "WEATHER_FETCH"
    NEWS_FETCH = "NEWS_FETCH"
    TASK_ADD = "TASK_ADD"
    TASK_SHOW = "TASK_SHOW"
    TIMER = "TIMER"
    YOUTUBE_SEARCH = "YOUTUBE_SEARCH"
    CALCULATION = "CALCULATION"
    HELP = "HELP"
    SEARCH_QUERY = "SEARCH_QUERY"
    # Not produced by rules
    SECURITY_ALERT = "SECURITY_ALERT"
    AI_RESPONSE = "AI_RESPONSE"
    ERROR = "ERROR"


class BlockCategory(str, Enum):
    """Blocklist category that tripped the sanitizer"""
    CREDENTIALS = "CREDENTIALS"
    FINANCIAL = "FINANCIAL"


class EmotionTag(str, Enum):
    """Emotion hint for TTS delivery"""
    JOY = "joy"
    ANGER = "anger"
    SADNESS = "sadness"
    FEAR = "fear"
    SURPRISE = "surprise"
    DISGUST = "disgust"
    NEUTRAL = "neutral"


class CamelModel(BaseModel):
    """Base model serialised with camelCase keys for the UI"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Utterance(CamelModel):
    """One finalized unit of user input"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    text: str
    is_final: bool = True
    captured_at: datetime = Field(default_factory=datetime.now)


class LexicalScore(BaseModel):
    """Accumulated per-language score"""
    english: float = 0.0
    target: float = 0.0


class LanguageResult(BaseModel):
    """Language decision for one utterance"""
    language: Lang
    confidence: float
    scores: LexicalScore


class SecurityVerdict(BaseModel):
    """Outcome of the blocklist scan"""
    blocked: bool = False
    category: Optional[BlockCategory] = None


class IntentMatch(BaseModel):
    """Winning rule and the groups its patterns captured"""
    intent: IntentId
    priority: int
    captures: Tuple[str, ...] = ()
    matched_language: Optional[Lang] = None


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------

class EntityBase(CamelModel):
    needs_clarification: bool = False


class SmartHomeEntity(EntityBase):
    entity_type: Literal["smart_home"] = "smart_home"
    device: str
    action: str = ""  # on, off, or empty when unclear
    state: Optional[bool] = None


class DurationEntity(EntityBase):
    entity_type: Literal["duration"] = "duration"
    duration_ms: int = 0
    label: str = "Timer"


class CalculationEntity(EntityBase):
    entity_type: Literal["calculation"] = "calculation"
    expression: str = ""
    result: Union[int, float, str] = "error"
    error: Optional[str] = None


class MessageEntity(EntityBase):
    entity_type: Literal["message"] = "message"
    contact: str = ""
    body: str = ""
    channel: str = "message"


class CallEntity(EntityBase):
    entity_type: Literal["call"] = "call"
    contact: str = ""


class QueryEntity(EntityBase):
    entity_type: Literal["query"] = "query"
    query: str = ""


class MediaEntity(EntityBase):
    entity_type: Literal["media"] = "media"
    title: str = ""
    is_playing: bool = True


class TaskEntity(EntityBase):
    entity_type: Literal["task"] = "task"
    task: str = ""


class VolumeEntity(EntityBase):
    entity_type: Literal["volume"] = "volume"
    direction: str


class PersonalityEntity(EntityBase):
    entity_type: Literal["personality"] = "personality"
    mode: PersonalityMode


class SceneEntity(EntityBase):
    entity_type: Literal["scene"] = "scene"
    scene: str


class SocialEntity(EntityBase):
    entity_type: Literal["social"] = "social"
    kind: str  # joke, fact


class TimeDateEntity(EntityBase):
    entity_type: Literal["time_date"] = "time_date"
    time: str
    date: str


Entity = Annotated[
    Union[
        SmartHomeEntity,
        DurationEntity,
        CalculationEntity,
        MessageEntity,
        CallEntity,
        QueryEntity,
        MediaEntity,
        TaskEntity,
        VolumeEntity,
        PersonalityEntity,
        SceneEntity,
        SocialEntity,
        TimeDateEntity,
    ],
    Field(discriminator="entity_type"),
]


class CommandResult(CamelModel):
    """The sole output contract consumed by the UI and TTS layers"""
    action_type: IntentId
    response: str
    spoken_response: str
    language: Lang
    data: Optional[Entity] = None
    external_url: Optional[str] = None
    emotion: Optional[EmotionTag] = None
    needs_clarification: bool = False


# ---------------------------------------------------------------------------
# API payloads
# ---------------------------------------------------------------------------

class ProcessRequest(CamelModel):
    """Command processing request"""
    text: str
    is_final: bool = True
    language: Optional[Lang] = None
    personality: Optional[PersonalityMode] = None


class ClassifyRequest(BaseModel):
    """Classification-only request"""
    text: str


class ClassifyResponse(BaseModel):
    """Classification-only response"""
    intent: Optional[IntentId] = None
    priority: Optional[int] = None
    captures: List[str] = []
    blocked: bool = False


class ExtractRequest(BaseModel):
    """Entity extraction request"""
    intent: IntentId
    text: str
    language: Lang = Lang.ENGLISH


class IntentCatalog(BaseModel):
    """Ordered rule table summary"""
    intents: List[str]
    keywords: Dict[str, Dict[str, List[str]]] = {}


class ExtractResponse(BaseModel):
    """Entity extraction response"""
    intent: IntentId
    entity: Optional[Entity] = None
    blocked: bool = False
