from typing import Optional

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Command service metrics
command_requests_total = Counter('command_requests_total', 'Total processed utterances', ['action_type', 'language'])
command_duration_seconds = Histogram('command_duration_seconds', 'Utterance processing duration')
language_confidence_score = Histogram('language_confidence_score', 'Language scorer confidence margins')
blocked_inputs_total = Counter('blocked_inputs_total', 'Utterances blocked by the sanitizer', ['category'])
fallback_stage_total = Counter('fallback_stage_total', 'Fallback chain resolutions', ['stage'])
clarifications_total = Counter('clarifications_total', 'Results asking the user for missing details', ['action_type'])
superseded_requests_total = Counter('superseded_requests_total', 'In-flight requests cancelled by a newer utterance')

def record_command(action_type: str, language: str, duration: float, confidence: Optional[float] = None,
                   needs_clarification: bool = False):
    """Record command processing metrics"""
    command_requests_total.labels(action_type=action_type, language=language).inc()
    command_duration_seconds.observe(duration)
    if confidence is not None:
        language_confidence_score.observe(confidence)
    if needs_clarification:
        clarifications_total.labels(action_type=action_type).inc()

def record_blocked(category: str):
    blocked_inputs_total.labels(category=category).inc()

def record_fallback(stage: str):
    fallback_stage_total.labels(stage=stage).inc()

def record_superseded():
    superseded_requests_total.inc()

async def metrics_endpoint():
    """Prometheus metrics endpoint"""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
