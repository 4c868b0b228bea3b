from __future__ import annotations

import uuid
from typing import Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from intake.config import CC_MAX_TEXT_CHARS
from intake.lexicon.store import get_lexicon
from intake.nlu.chief_complaint import (
    FAILURE_EMPTY_COMPLAINT,
    FAILURE_EMPTY_TEXT,
    FAILURE_NO_DURATION,
    parse,
)
from intake.nlu.schema import DurationRange, ParseResult
from intake.observability.logs import log_event
from intake.observability.metrics import (
    timer_start, timer_observe_ms, record_outcome, record_result, record_error
)

router = APIRouter(tags=["nlp"])

_OUTCOMES = {
    None: "ok",
    FAILURE_NO_DURATION: "no_duration",
    FAILURE_EMPTY_COMPLAINT: "empty_complaint",
    FAILURE_EMPTY_TEXT: "empty_text",
}


class ParseIn(BaseModel):
    text: Optional[str] = None
    complaint: Optional[str] = None   # older clients send the form field name

    def body_text(self) -> str:
        return self.text if self.text is not None else (self.complaint or "")


class ParseOut(BaseModel):
    success: bool = True
    data: ParseResult


def _reject(status_code: int, message: str, outcome: str, request_id: str,
            failure_reason: Optional[str] = None) -> JSONResponse:
    record_outcome(outcome)
    log_event("chief_complaint_rejected", request_id=request_id, outcome=outcome, status_code=status_code)
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "failure_reason": failure_reason},
    )


@router.post("/chief-complaint/parse", response_model=ParseOut)
def parse_chief_complaint(payload: ParseIn):
    t0 = timer_start()
    request_id = str(uuid.uuid4())

    try:
        text = payload.body_text()
        if not text.strip():
            return _reject(400, "Text is required", "empty_text", request_id, FAILURE_EMPTY_TEXT)
        if len(text) > CC_MAX_TEXT_CHARS:
            return _reject(413, f"Text exceeds {CC_MAX_TEXT_CHARS} characters", "too_long", request_id)

        # Fresh copies per call; the parser must never see shared mutable state
        lexicon = get_lexicon()
        result = parse(text, synonyms=dict(lexicon.synonyms), known_symptoms=set(lexicon.known_symptoms))

        if result.failure_reason == FAILURE_EMPTY_TEXT:
            return _reject(400, "Text is required", "empty_text", request_id, FAILURE_EMPTY_TEXT)

        elapsed_ms = timer_observe_ms(t0)
        unit = result.duration_unit.value if result.duration_unit else None
        record_outcome(_OUTCOMES.get(result.failure_reason, "ok"))
        record_result(result.confidence, unit)

        # do not log raw complaint text
        log_event(
            "chief_complaint_parsed",
            request_id=request_id,
            text_chars=len(text),
            has_complaint=bool(result.complaint_text),
            duration_unit=unit or "N/A",
            is_range=isinstance(result.duration_value, DurationRange),
            confidence=round(result.confidence, 3),
            failure_reason=result.failure_reason,
            elapsed_ms=round(elapsed_ms, 2),
        )
        return ParseOut(data=result)

    except Exception as e:
        timer_observe_ms(t0)
        record_error(type(e).__name__)
        log_event(
            "chief_complaint_error",
            request_id=request_id,
            error_type=type(e).__name__,
        )
        raise
