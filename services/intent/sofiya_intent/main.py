"""
Sofiya Command Service
Bilingual command understanding: security scan, language scoring, ordered
intent rules, entity extraction and the completion/web-search fallback
"""

import asyncio
import json
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError
import structlog

from .config import settings
from .entity_extractor import EntityExtractor
from .fallback import FallbackChain, RemoteCompletionClient
from .intent_classifier import IntentClassifier
from .language_scorer import LanguageScorer
from .metrics import metrics_endpoint
from .models import (
    ClassifyRequest,
    ClassifyResponse,
    CommandResult,
    ExtractRequest,
    ExtractResponse,
    IntentCatalog,
    Lang,
    LanguageResult,
    PersonalityMode,
    ProcessRequest,
    SecurityVerdict,
    Utterance,
)
from .processor import CommandProcessor
from .responses import ResponseBuilder
from .security import SecuritySanitizer
from .session import CommandSession
from .utils.http_client import http_pool
from .utils.logging import setup_logging

setup_logging()
logger = structlog.get_logger(__name__)


def build_processor() -> CommandProcessor:
    """Wire the pipeline from settings"""
    responses = ResponseBuilder()
    client = RemoteCompletionClient()
    if not client.configured:
        logger.info("No completion credential configured, fallback goes straight to web search")
    return CommandProcessor(
        sanitizer=SecuritySanitizer(),
        scorer=LanguageScorer(Lang(settings.default_language)),
        classifier=IntentClassifier(),
        extractor=EntityExtractor(),
        fallback=FallbackChain(client=client, responses=responses),
        responses=responses,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("🧠 Starting Sofiya Command Service")

    app.state.processor = build_processor()
    await http_pool.initialize()

    logger.info("✅ Rule table loaded", intents=len(app.state.processor.classifier.rules()))

    yield

    logger.info("🛑 Shutting down Sofiya Command Service")
    await http_pool.close()


app = FastAPI(
    title="Sofiya Command Service",
    description="Rule-based bilingual (English/Hindi) command understanding",
    version="1.0.0",
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/process", response_model=CommandResult)
async def process_command(request: ProcessRequest):
    """Run the full pipeline on one utterance"""
    if not request.is_final:
        raise HTTPException(status_code=422, detail="Only final transcripts are processed")
    try:
        return await app.state.processor.process(
            Utterance(text=request.text, is_final=True),
            request.language,
            request.personality,
        )
    except Exception as e:
        logger.error("Command processing failed", error=str(e))
        raise HTTPException(status_code=500, detail="Command processing failed")


@app.post("/classify", response_model=ClassifyResponse)
async def classify_intent(request: ClassifyRequest):
    """Classify intent from text"""
    processor: CommandProcessor = app.state.processor
    try:
        text = processor.sanitizer.sanitize_markup(request.text)
        if processor.sanitizer.scan(text).blocked:
            return ClassifyResponse(blocked=True)

        match = processor.classifier.classify(text)
        if match is None:
            return ClassifyResponse()
        return ClassifyResponse(intent=match.intent, priority=match.priority, captures=list(match.captures))
    except Exception as e:
        logger.error("Intent classification failed", error=str(e))
        raise HTTPException(status_code=500, detail="Intent classification failed")


@app.post("/detect-language", response_model=LanguageResult)
async def detect_language(request: ProcessRequest):
    """Score an utterance as English or Hindi"""
    processor: CommandProcessor = app.state.processor
    try:
        text = processor.sanitizer.sanitize_markup(request.text)
        return processor.scorer.score(text, request.language)
    except Exception as e:
        logger.error("Language detection failed", error=str(e))
        raise HTTPException(status_code=500, detail="Language detection failed")


@app.post("/extract-entities", response_model=ExtractResponse)
async def extract_entities(request: ExtractRequest):
    """Extract the entity for a given intent"""
    processor: CommandProcessor = app.state.processor
    try:
        text = processor.sanitizer.sanitize_markup(request.text)
        if processor.sanitizer.scan(text).blocked:
            return ExtractResponse(intent=request.intent, blocked=True)

        entity = processor.extractor.extract(request.intent, text, request.language)
        return ExtractResponse(intent=request.intent, entity=entity)
    except Exception as e:
        logger.error("Entity extraction failed", error=str(e))
        raise HTTPException(status_code=500, detail="Entity extraction failed")


@app.post("/scan", response_model=SecurityVerdict)
async def scan_text(request: ClassifyRequest):
    """Run only the sensitive-content scan"""
    processor: CommandProcessor = app.state.processor
    return processor.sanitizer.scan(processor.sanitizer.sanitize_markup(request.text))


@app.get("/intents", response_model=IntentCatalog)
async def get_supported_intents():
    """Get list of supported intents in priority order"""
    classifier: IntentClassifier = app.state.processor.classifier
    return IntentCatalog(
        intents=classifier.get_supported_intents(),
        keywords=classifier.get_keywords(),
    )


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    processor: CommandProcessor = app.state.processor
    client = processor.fallback.client
    return {
        "status": "healthy",
        "service": "intent",
        "rules_loaded": len(processor.classifier.rules()),
        "completion_configured": bool(getattr(client, "configured", True)),
    }


app.add_api_route("/metrics", metrics_endpoint, methods=["GET"])


class TranscriptStream:
    """Routes one WebSocket connection's messages into a CommandSession"""

    def __init__(self, websocket: WebSocket, session: CommandSession, connection_id: str):
        self.websocket = websocket
        self.session = session
        self.connection_id = connection_id
        self.tasks: Set[asyncio.Task] = set()
        self.message_handlers = {
            "transcript": self._handle_transcript,
            "settings": self._handle_settings,
            "ping": self._handle_ping,
        }

    async def route(self, message: Dict[str, Any]):
        handler = self.message_handlers.get(message.get("type"))
        if handler is None:
            await self.send_error(f"Unknown message type: {message.get('type')}")
            return
        await handler(message)

    async def close(self):
        await self.session.cancel()
        for task in self.tasks:
            task.cancel()
        await asyncio.gather(*self.tasks, return_exceptions=True)

    async def _handle_transcript(self, message: Dict[str, Any]):
        utterance = Utterance(
            text=str(message.get("text", "")),
            is_final=bool(message.get("isFinal", message.get("is_final", False))),
        )
        if not utterance.is_final:
            return

        # Submitted in the background so a newer utterance can supersede it
        task = asyncio.create_task(self._submit(utterance))
        self.tasks.add(task)
        task.add_done_callback(self.tasks.discard)

    async def _submit(self, utterance: Utterance):
        result = await self.session.submit(utterance)
        if result is None:
            return
        try:
            await self.websocket.send_json({
                "type": "command_result",
                "result": result.model_dump(mode="json", by_alias=True),
            })
        except Exception as e:
            logger.warning("Failed to deliver command result", error=str(e), connection_id=self.connection_id)

    async def _handle_settings(self, message: Dict[str, Any]):
        try:
            if message.get("language"):
                self.session.language = Lang(message["language"])
            if message.get("personality"):
                self.session.personality = PersonalityMode(message["personality"])
        except ValueError as e:
            await self.send_error(str(e))
            return
        await self.websocket.send_json({
            "type": "settings",
            "language": self.session.language.value,
            "personality": self.session.personality.value,
        })

    async def _handle_ping(self, message: Dict[str, Any]):
        await self.websocket.send_json({"type": "pong"})

    async def send_error(self, detail: str):
        await self.websocket.send_json({"type": "error", "detail": detail})


@app.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """Streaming transcripts: interim ones are ignored, final ones processed in order"""
    connection_id = str(uuid.uuid4())
    await websocket.accept()
    logger.info("WebSocket connected", connection_id=connection_id)

    session = CommandSession(
        app.state.processor,
        language=Lang(settings.default_language),
        personality=PersonalityMode(settings.default_personality),
    )
    stream = TranscriptStream(websocket, session, connection_id)

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except json.JSONDecodeError:
                await stream.send_error("Invalid JSON format")
                continue
            if not isinstance(message, dict):
                await stream.send_error("Expected a JSON object")
                continue
            try:
                await stream.route(message)
            except ValidationError as e:
                await stream.send_error(f"Invalid message: {e.error_count()} error(s)")
    except WebSocketDisconnect:
        logger.info("WebSocket disconnected", connection_id=connection_id)
    except Exception as e:
        logger.error("WebSocket error", error=str(e), connection_id=connection_id)
    finally:
        await stream.close()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
