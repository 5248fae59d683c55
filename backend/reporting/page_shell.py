"""
Print-preview HTML for paginated documents.

Each page is a fixed A4 sheet with the firm header and footer repeated; the
body is the concatenated markup of the page's blocks. Scale only affects the
on-screen preview (a CSS transform), never the print layout.
"""
from __future__ import annotations

import html
from typing import Any, Sequence

from engine.pagination import DEFAULT_PROFILE, CapacityProfile
from models import Page, RenderedDocument
from models_firm import FirmConfig


def _esc(value: Any) -> str:
    return html.escape(str(value if value is not None else ""), quote=True)


def _page_css(firm: FirmConfig, profile: CapacityProfile, scale: float) -> str:
    accent = firm.accent_color
    return f"""
    @page {{
      size: A4 portrait;
      margin: 0;
    }}
    * {{ box-sizing: border-box; }}
    html, body {{
      margin: 0;
      padding: 0;
      font-family: "Times New Roman", Georgia, serif;
      color: #1f2937;
      background: #f3f4f6;
      -webkit-print-color-adjust: exact;
      print-color-adjust: exact;
    }}
    .pdf-page {{
      width: {profile.page_width:.0f}pt;
      height: {profile.page_height:.0f}pt;
      padding: {profile.page_padding:.0f}pt;
      margin: 0 auto 20pt auto;
      display: flex;
      flex-direction: column;
      background: #fff;
      transform: scale({scale:.4f});
      transform-origin: top center;
      break-after: page;
      page-break-after: always;
      overflow: hidden;
    }}
    .page-header {{ height: {profile.header_height:.0f}pt; text-align: center; }}
    .monogram {{ font-size: 28pt; font-weight: 800; color: {accent}; }}
    .firm-name {{ font-size: 7pt; letter-spacing: 0.3em; text-transform: uppercase; color: {accent}; }}
    .page-content {{ flex: 1; overflow: hidden; font-size: 10pt; line-height: 1.5; text-align: justify; }}
    .doc-title {{ text-align: center; font-size: 12pt; text-decoration: underline; text-transform: uppercase; }}
    .section-title {{ font-size: 11pt; text-transform: uppercase; color: {accent}; margin: 8pt 0 4pt 0; }}
    .clause {{ margin: 0 0 10pt 0; }}
    .clause.highlighted {{ padding: 8pt; border-left: 3pt solid {accent}; background: #f9fafb; }}
    .token-value {{ font-weight: 700; color: #111827; }}
    .financial-table {{ width: 100%; border-collapse: collapse; margin: 6pt 0 12pt 0; }}
    .financial-table th, .financial-table td {{ border-bottom: 1px solid #e5e7eb; padding: 4pt; text-align: left; }}
    .signature-row {{ display: flex; justify-content: space-around; margin-top: 28pt; }}
    .signature {{ text-align: center; }}
    .signature-line {{ width: 160pt; border-top: 1px solid #000; margin-bottom: 4pt; }}
    .signature-name {{ font-weight: 700; margin: 0; }}
    .signature-role {{ font-size: 8pt; text-transform: uppercase; margin: 0; }}
    .page-footer {{
      height: {profile.footer_height:.0f}pt;
      border-top: 1px solid {accent}33;
      display: flex;
      justify-content: space-between;
      align-items: flex-end;
      font-size: 7pt;
      color: #6b7280;
    }}
    @media print {{
      body {{ background: #fff; }}
      .pdf-page {{ transform: none; margin: 0; }}
    }}
    """


def _build_page_shell(
    *,
    page: Page,
    firm: FirmConfig,
    total_pages: int,
    kind: str,
) -> str:
    body_html = "".join(block.markup for block in page.blocks)
    overflow = f' data-overflow="{_esc(page.overflow)}"' if page.overflow else ""
    return f"""
    <section class="pdf-page" data-kind="{_esc(kind)}" data-page="{page.number}"{overflow}>
      <header class="page-header">
        <div class="monogram">{_esc(firm.monogram or firm.firm_name[:2])}</div>
        <div class="firm-name">{_esc(firm.firm_name)}</div>
      </header>
      <div class="page-content">{body_html}</div>
      <footer class="page-footer">
        <div>
          <p>{_esc(firm.address)}</p>
          <p>{_esc(firm.phone)} · {_esc(firm.email)}</p>
        </div>
        <div>
          <p><strong>{_esc(firm.attorney_name.upper())}</strong></p>
          <p>{_esc(firm.bar_registration)} · Página {page.number} de {total_pages}</p>
        </div>
      </footer>
    </section>
    """.strip()


def build_document_html(
    documents: Sequence[RenderedDocument],
    firm: FirmConfig,
    profile: CapacityProfile = DEFAULT_PROFILE,
) -> str:
    if not documents or not any(doc.pages for doc in documents):
        return "<!doctype html><html><body><h1>Nenhum conteúdo para exibir</h1></body></html>"
    scale = documents[0].scale
    page_html = []
    for doc in documents:
        for page in doc.pages:
            page_html.append(
                _build_page_shell(
                    page=page,
                    firm=firm,
                    total_pages=doc.page_count,
                    kind=doc.document_type.value,
                )
            )
    title = documents[0].title if len(documents) == 1 else firm.firm_name
    return f"""
<!doctype html>
<html lang="pt-BR">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{_esc(title)}</title>
  <style>{_page_css(firm, profile, scale)}</style>
</head>
<body>
  {''.join(page_html)}
</body>
</html>
    """.strip()
