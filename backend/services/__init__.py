"""Backend services."""

from services.document_service import render_bundle, render_document

__all__ = [
    "render_bundle",
    "render_document",
]
