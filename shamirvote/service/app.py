"""Recovery service FastAPI application.

Endpoints:
- POST /recover  – decode a share document and run the majority vote
- GET  /audit    – hash-chained log of every recovery event
- GET  /health   – liveness probe

Each recovery runs under a wall-clock budget polled between combinations,
and jobs whose C(n, k) exceeds ``MAX_COMBINATIONS`` are refused up front.
"""

from __future__ import annotations

import time
import uuid
from typing import Any, Dict, List

from fastapi import Body, FastAPI, HTTPException
from pydantic import BaseModel

from shamirvote.audit import RecoveryLog
from shamirvote.codec.decoder import encode_decimal, parse_share_document
from shamirvote.config import DEFAULT_WORKERS, MAX_COMBINATIONS, RECOVER_TIMEOUT_SECONDS
from shamirvote.crypto.combinations import count_combinations
from shamirvote.crypto.reconstruct import reconstruct, reconstruct_parallel
from shamirvote.models import (
    InvalidDigit,
    InvalidShareSet,
    ReconstructionCancelled,
    SecretNotFound,
)

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------

app = FastAPI(title="ShamirVote Recovery Service")

# ---------------------------------------------------------------------------
# In-memory state
# ---------------------------------------------------------------------------

_audit = RecoveryLog()

# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class Candidate(BaseModel):
    secret: str
    count: int


class RecoverResponse(BaseModel):
    request_id: str
    secret: str  # decimal string; secrets exceed JSON number precision
    votes: int
    valid_combinations: int
    total_combinations: int
    candidates: List[Candidate]


class AuditResponse(BaseModel):
    entries: List[Dict[str, Any]]
    chain_valid: bool


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.post("/recover", response_model=RecoverResponse)
def recover(document: Dict[str, Any] = Body(...)):
    """Recover the secret from a share document."""
    request_id = uuid.uuid4().hex
    try:
        share_set = parse_share_document(document)
    except (InvalidDigit, InvalidShareSet) as exc:
        _audit.append("rejected", {"request_id": request_id, "reason": str(exc)})
        raise HTTPException(422, str(exc))

    total = count_combinations(share_set.n, share_set.k)
    if total > MAX_COMBINATIONS:
        _audit.append("rejected", {"request_id": request_id, "combinations": total})
        raise HTTPException(
            413, f"{total} combinations exceeds the limit of {MAX_COMBINATIONS}"
        )

    def on_event(event: str, data: Dict[str, Any]) -> None:
        if "secret" in data:
            data = {**data, "secret": encode_decimal(data["secret"])}
        _audit.append(event, {"request_id": request_id, **data})

    deadline = time.monotonic() + RECOVER_TIMEOUT_SECONDS

    def should_cancel() -> bool:
        return time.monotonic() > deadline

    try:
        if DEFAULT_WORKERS > 1:
            result = reconstruct_parallel(
                share_set, DEFAULT_WORKERS, on_event=on_event, should_cancel=should_cancel
            )
        else:
            result = reconstruct(share_set, on_event=on_event, should_cancel=should_cancel)
    except SecretNotFound as exc:
        raise HTTPException(404, str(exc))
    except ReconstructionCancelled:
        _audit.append("cancelled", {"request_id": request_id})
        raise HTTPException(504, f"Recovery exceeded {RECOVER_TIMEOUT_SECONDS}s")

    return RecoverResponse(
        request_id=request_id,
        secret=encode_decimal(result.secret),
        votes=result.votes,
        valid_combinations=result.valid_combinations,
        total_combinations=result.total_combinations,
        candidates=[
            Candidate(secret=encode_decimal(c["secret"]), count=c["count"])
            for c in result.candidates()
        ],
    )


@app.get("/audit", response_model=AuditResponse)
async def audit():
    return AuditResponse(entries=_audit.entries(), chain_valid=_audit.verify_chain())


@app.get("/health")
async def health():
    return {"status": "ok"}
