from __future__ import annotations

import logging
import math
import os
import re
import time
import uuid
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from starlette.middleware.base import BaseHTTPMiddleware

import config
from engine.installments import apply_installment, compute_installment
from engine.tokens import resolve_tokens
from firms import get_firm, list_firms
from models import (
    DOCUMENT_RECORD_KINDS,
    BundleRequest,
    DocumentRecordMismatchError,
    DocumentType,
    DocumentTypeInfo,
    InstallmentRequest,
    InstallmentResponse,
    OrganizationRecord,
    IndividualRecord,
    RenderedDocument,
    RenderRequest,
    TokenPreviewRequest,
    TokenPreviewResponse,
)
from models_firm import FirmConfig
from reporting.clauses import get_template
from reporting.page_shell import build_document_html
from services.document_service import render_bundle, render_document

# Shared with the service layer so request and render lines interleave in one log
_LOG = logging.getLogger("uvicorn.error")

app = FastAPI(title="Legal Document Engine", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


_REQUEST_ID = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


class RequestLogMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id (the caller's X-Request-Id when well formed) and log it on completion."""

    async def dispatch(self, request: Request, call_next):
        incoming = request.headers.get("X-Request-Id", "").strip()
        rid = incoming if _REQUEST_ID.match(incoming) else uuid.uuid4().hex[:8]
        request.state.request_id = rid
        start = time.perf_counter()
        response = await call_next(request)
        _LOG.info(
            "REQUEST rid=%s method=%s path=%s status=%s duration_ms=%.1f",
            rid,
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - start) * 1000,
        )
        response.headers["X-Request-Id"] = rid
        return response


app.add_middleware(RequestLogMiddleware)


@app.on_event("startup")
def startup_log() -> None:
    port = os.environ.get("PORT", "8010")
    host = os.environ.get("HOST", "127.0.0.1")
    _LOG.info("BOOT version=%s host=%s port=%s firm=%s", config.version(), host, port, config.default_firm_id())
    if get_firm(config.default_firm_id()) is None:
        _LOG.warning("DEFAULT_FIRM_ID=%s is not registered; requests must pass firm_id", config.default_firm_id())


def _finite(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def _rid(request: Request) -> str:
    return getattr(request.state, "request_id", None) or "no-rid"


def _firm_or_400(firm_id: Optional[str]) -> FirmConfig:
    """Requested firm, or the DEFAULT_FIRM_ID one when the request names none."""
    resolved = (firm_id or "").strip() or config.default_firm_id()
    firm = get_firm(resolved)
    if firm is None:
        raise HTTPException(status_code=400, detail=f"Unknown firm_id: {resolved}")
    return firm


@app.get("/health")
def health():
    return {"status": "ok", "version": config.version()}


@app.get("/version")
def version():
    return {"version": config.version(), "render_git_commit": os.getenv("RENDER_GIT_COMMIT", "")}


@app.get("/firms", response_model=list[FirmConfig])
def firms() -> list[FirmConfig]:
    return list_firms()


@app.get("/documents/types", response_model=list[DocumentTypeInfo])
def document_types() -> list[DocumentTypeInfo]:
    out = []
    for document_type in DocumentType:
        template = get_template(document_type)
        out.append(
            DocumentTypeInfo(
                document_type=document_type,
                title=template.title,
                record_kinds=list(DOCUMENT_RECORD_KINDS[document_type]),
                has_financial_table=template.has_financial_table,
            )
        )
    return out


@app.post("/documents/render", response_model=RenderedDocument)
def render(body: RenderRequest, request: Request) -> RenderedDocument:
    firm = _firm_or_400(body.firm_id)
    rid = _rid(request)
    try:
        return render_document(
            body.document_type,
            body.record,
            firm=firm,
            profile=config.capacity_profile(),
            viewport_width=body.viewport_width,
            zoom=body.zoom,
            overrides=body.clause_overrides,
            rid=rid,
        )
    except DocumentRecordMismatchError as e:
        _LOG.info("RENDER_ERR rid=%s doc_type=%s err=%s", rid, body.document_type.value, e)
        raise HTTPException(status_code=422, detail=str(e)) from e


@app.post("/documents/bundle", response_model=list[RenderedDocument])
def render_document_bundle(body: BundleRequest, request: Request) -> list[RenderedDocument]:
    firm = _firm_or_400(body.firm_id)
    rid = _rid(request)
    try:
        return render_bundle(
            body.bundle,
            body.record,
            firm=firm,
            profile=config.capacity_profile(),
            viewport_width=body.viewport_width,
            zoom=body.zoom,
            rid=rid,
        )
    except DocumentRecordMismatchError as e:
        _LOG.info("RENDER_ERR rid=%s bundle=%s err=%s", rid, body.bundle.value, e)
        raise HTTPException(status_code=422, detail=str(e)) from e


@app.post("/documents/preview", response_class=HTMLResponse)
def preview(body: RenderRequest, request: Request) -> HTMLResponse:
    document = render(body, request)
    firm = _firm_or_400(body.firm_id)
    html = build_document_html([document], firm, config.capacity_profile())
    return HTMLResponse(content=html, headers={"X-Page-Count": str(document.page_count)})


@app.post("/installments", response_model=InstallmentResponse)
def installments(body: InstallmentRequest) -> InstallmentResponse:
    record = body.record
    if not isinstance(record, (IndividualRecord, OrganizationRecord)):
        raise HTTPException(status_code=400, detail="Installments apply to fee agreement records only")
    quote = compute_installment(
        record.total_value,
        record.down_payment,
        record.installment_count,
        record.payment_method,
    )
    updated = apply_installment(record)
    return InstallmentResponse(
        installment_amount=updated.installment_amount,
        derived=quote is not None,
        base=_finite(quote.base) if quote else None,
        amount=_finite(quote.amount) if quote else None,
    )


@app.post("/tokens/preview", response_model=TokenPreviewResponse)
def tokens_preview(body: TokenPreviewRequest) -> TokenPreviewResponse:
    return TokenPreviewResponse(tokens=resolve_tokens(apply_installment(body.record)))
