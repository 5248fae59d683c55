"""
Deterministic content-block builder for legal documents.

Turns a document type plus a client record into the ordered block sequence
the paginator consumes. Every block carries print-ready markup and an
estimated cost in page points from the capacity profile.
"""
from __future__ import annotations

import html
import logging
import re
from typing import Any, Mapping, Optional

from engine.pagination import DEFAULT_PROFILE, CapacityProfile
from engine.tokens import find_unknown_tokens, render_plain, resolve_tokens, substitute
from models import (
    DOCUMENT_RECORD_KINDS,
    ContentBlock,
    DocumentRecordMismatchError,
    DocumentType,
    FinancialTableBlock,
    ParagraphBlock,
    SignatureBlock,
    Signatory,
    SpacerBlock,
    TableRow,
    TitleBlock,
)
from models_firm import FirmConfig
from reporting.clauses import DocumentTemplate, Segment, get_template
from reporting.format_utils import PLACEHOLDER

_LOG = logging.getLogger("uvicorn.error")
_WS = re.compile(r"\s+")


def _esc(value: Any) -> str:
    return html.escape(str(value if value is not None else ""), quote=True)


def _visible_length(text: str) -> int:
    return len(_WS.sub(" ", text).strip())


def check_record_kind(document_type: DocumentType, record) -> None:
    if record.record_kind not in DOCUMENT_RECORD_KINDS[document_type]:
        raise DocumentRecordMismatchError(document_type, record.record_kind)


def _title_block(segment: Segment, profile: CapacityProfile) -> TitleBlock:
    level = 1 if segment.kind == "title" else 2
    tag = "h1" if level == 1 else "h2"
    css = "doc-title" if level == 1 else "section-title"
    return TitleBlock(
        key=segment.key,
        text=segment.text,
        level=level,
        markup=f'<{tag} class="{css}">{_esc(segment.text)}</{tag}>',
        cost=profile.text_cost(_visible_length(segment.text), title=True),
    )


def _paragraph_block(
    segment: Segment,
    template: str,
    record,
    extras: Mapping[str, str],
    profile: CapacityProfile,
) -> ParagraphBlock:
    unknown = find_unknown_tokens(template, extras.keys())
    if unknown:
        _LOG.warning("TEMPLATE_UNKNOWN_TOKEN clause=%s tokens=%s", segment.key, ",".join(unknown))
    # Escape the literal clause text first; tokens contain no HTML specials.
    text = substitute(html.escape(template, quote=False), record, extra_values=extras)
    plain = render_plain(template, record, extra_values=extras)
    css = "clause highlighted" if segment.highlighted else "clause"
    return ParagraphBlock(
        key=segment.key,
        text=text,
        highlighted=segment.highlighted,
        markup=f'<p class="{css}">{text}</p>',
        cost=profile.text_cost(_visible_length(plain)),
    )


def financial_rows(record) -> tuple[TableRow, ...]:
    tokens = resolve_tokens(record)
    count = tokens["/VEZES DE PARCELAS/"]
    amount = tokens["/VALOR DA PARCELA/"]
    due_day = tokens["/DATA DE PAGAMENTO DAS PARCELAS/"]
    if count == PLACEHOLDER and amount == PLACEHOLDER:
        schedule = PLACEHOLDER
    else:
        schedule = f"{count}x de {amount}"
    return (
        TableRow(label="Valor total", value=tokens["/VALOR TOTAL/"]),
        TableRow(label="Entrada", value=tokens["/ENTRADA/"]),
        TableRow(label="Data da entrada", value=tokens["/DATA DE ENTRADA/"]),
        TableRow(label="Parcelas", value=schedule),
        TableRow(
            label="Vencimento",
            value=PLACEHOLDER if due_day == PLACEHOLDER else f"Todo dia {due_day}",
        ),
        TableRow(label="Forma de pagamento", value=tokens["/FORMA DE PAGAMENTO/"]),
    )


def _table_block(segment: Segment, record, profile: CapacityProfile) -> FinancialTableBlock:
    rows = financial_rows(record)
    body = "".join(
        f'<tr><th scope="row">{_esc(r.label)}</th><td>{_esc(r.value)}</td></tr>' for r in rows
    )
    return FinancialTableBlock(
        key=segment.key,
        rows=rows,
        markup=f'<table class="financial-table"><caption>Cronograma financeiro</caption>{body}</table>',
        cost=profile.table_cost,
    )


def _signature_block(
    template: DocumentTemplate,
    record,
    extras: Mapping[str, str],
    profile: CapacityProfile,
) -> SignatureBlock:
    place_and_date = render_plain(template.place_and_date, record, extra_values=extras)
    signatories = tuple(
        Signatory(
            role=s.role,
            name=render_plain(s.name, record, extra_values=extras),
            detail=render_plain(s.detail, record, extra_values=extras),
        )
        for s in template.signatories
    )
    lines = "".join(
        f"""
        <div class="signature">
          <div class="signature-line"></div>
          <p class="signature-name">{_esc(s.name)}</p>
          <p class="signature-role">{_esc(s.role)}{f' · {_esc(s.detail)}' if s.detail else ''}</p>
        </div>
        """
        for s in signatories
    )
    place = f'<p class="place-date">{_esc(place_and_date)}</p>' if place_and_date else ""
    return SignatureBlock(
        key="assinaturas",
        place_and_date=place_and_date,
        signatories=signatories,
        markup=f'<div class="signature-block">{place}<div class="signature-row">{lines}</div></div>',
        cost=profile.signature_cost,
    )


def build_blocks(
    document_type: DocumentType,
    record,
    *,
    firm: FirmConfig,
    profile: CapacityProfile = DEFAULT_PROFILE,
    overrides: Optional[Mapping[str, str]] = None,
) -> list[ContentBlock]:
    """
    Ordered blocks for one document.

    `overrides` replaces the template text of paragraph clauses by key (a
    manually edited clause); the replacement is still token-substituted.
    """
    check_record_kind(document_type, record)
    template = get_template(document_type)
    extras = firm.token_values()
    overrides = overrides or {}

    blocks: list[ContentBlock] = []
    for segment in template.segments:
        if segment.kind in ("title", "subtitle"):
            blocks.append(_title_block(segment, profile))
        elif segment.kind == "paragraph":
            text = overrides.get(segment.key, segment.text)
            blocks.append(_paragraph_block(segment, text, record, extras, profile))
        elif segment.kind == "table":
            blocks.append(_table_block(segment, record, profile))
        elif segment.kind == "spacer":
            blocks.append(
                SpacerBlock(
                    key=segment.key,
                    markup=f'<div class="spacer" style="height:{segment.height:.0f}pt"></div>',
                    cost=segment.height,
                )
            )
        else:
            raise ValueError(f"Unknown segment kind: {segment.kind}")
    blocks.append(_signature_block(template, record, extras, profile))
    return blocks
