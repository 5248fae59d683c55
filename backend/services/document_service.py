"""
Render pipeline: record -> derived installment -> content blocks -> pages.

Every call works on its own inputs only; the viewport width is a snapshot
argument and affects the preview scale, not costs or capacity.
"""
from __future__ import annotations

import logging
import time
from typing import Mapping, Optional

from engine.installments import apply_installment
from engine.pagination import CapacityProfile, display_scale, paginate_with_profile
from models import BUNDLE_DOCUMENTS, DocumentBundle, DocumentType, RenderedDocument
from models_firm import FirmConfig
from reporting.clauses import get_template
from reporting.document_builder import build_blocks, check_record_kind

_LOG = logging.getLogger("uvicorn.error")


def render_document(
    document_type: DocumentType,
    record,
    *,
    firm: FirmConfig,
    profile: CapacityProfile,
    viewport_width: float = 1280.0,
    zoom: int = 100,
    overrides: Optional[Mapping[str, str]] = None,
    rid: str = "no-rid",
) -> RenderedDocument:
    start = time.perf_counter()
    _LOG.info(
        "RENDER_START rid=%s doc_type=%s kind=%s",
        rid,
        document_type.value,
        record.record_kind.value,
    )
    record = apply_installment(record)
    blocks = build_blocks(document_type, record, firm=firm, profile=profile, overrides=overrides)
    pages = paginate_with_profile(blocks, profile)
    for page in pages:
        if page.overflow:
            _LOG.info(
                "PAGINATE_OVERFLOW rid=%s doc_type=%s page=%s reason=%s cost=%.1f capacity=%.1f",
                rid,
                document_type.value,
                page.number,
                page.overflow,
                page.cost,
                profile.capacity,
            )
    duration_ms = (time.perf_counter() - start) * 1000
    _LOG.info(
        "RENDER_DONE rid=%s doc_type=%s blocks=%s pages=%s duration_ms=%.1f",
        rid,
        document_type.value,
        len(blocks),
        len(pages),
        duration_ms,
    )
    return RenderedDocument(
        document_type=document_type,
        title=get_template(document_type).title,
        pages=pages,
        page_count=len(pages),
        capacity=profile.capacity,
        scale=display_scale(viewport_width, zoom, profile.page_width),
    )


def render_bundle(
    bundle: DocumentBundle,
    record,
    *,
    firm: FirmConfig,
    profile: CapacityProfile,
    viewport_width: float = 1280.0,
    zoom: int = 100,
    rid: str = "no-rid",
) -> list[RenderedDocument]:
    """Render every document of a bundle, in bundle order. Kind is checked up front for all of them."""
    documents = BUNDLE_DOCUMENTS[bundle]
    for document_type in documents:
        check_record_kind(document_type, record)
    return [
        render_document(
            document_type,
            record,
            firm=firm,
            profile=profile,
            viewport_width=viewport_width,
            zoom=zoom,
            rid=rid,
        )
        for document_type in documents
    ]
