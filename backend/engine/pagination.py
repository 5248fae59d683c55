"""
Greedy page packing for document content blocks.

Blocks arrive in reading order with an estimated cost in page points. One
pass fills pages in order:

- a block goes on the current page when it fits under capacity;
- a title is pushed to the next page when the current page is already past
  the high-water mark, so headings never sit alone at the bottom;
- the trailing signature block may overflow capacity by at most the
  configured tolerance instead of opening a near-empty last page;
- a block larger than the whole capacity gets a page of its own.

Blocks are never split, so a financial table always stays on one page.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

from models import ContentBlock, Page, SignatureBlock, TitleBlock

# A4 in CSS points at 72 dpi, the size the print shell lays pages out at.
A4_WIDTH_PT = 595.0
A4_HEIGHT_PT = 842.0


@dataclass(frozen=True)
class CapacityProfile:
    """Page geometry and cost calibration for 10pt justified clause text."""

    page_width: float = A4_WIDTH_PT
    page_height: float = A4_HEIGHT_PT
    page_padding: float = 48.0
    header_height: float = 72.0
    footer_height: float = 52.0
    chars_per_line: int = 92
    line_height: float = 15.0
    paragraph_overhead: float = 12.0
    title_chars_per_line: int = 60
    title_line_height: float = 18.0
    title_overhead: float = 20.0
    table_cost: float = 170.0
    signature_cost: float = 120.0
    high_water_fraction: float = 0.85
    signature_tolerance: float = 24.0

    @property
    def capacity(self) -> float:
        return max(
            1.0,
            self.page_height - (2.0 * self.page_padding) - self.header_height - self.footer_height,
        )

    @property
    def content_width(self) -> float:
        return max(1.0, self.page_width - (2.0 * self.page_padding))

    @property
    def high_water(self) -> float:
        return self.capacity * self.high_water_fraction

    def text_cost(self, chars: int, *, title: bool = False) -> float:
        """Overhead plus wrapped lines; non-decreasing in `chars`."""
        per_line = self.title_chars_per_line if title else self.chars_per_line
        line_height = self.title_line_height if title else self.line_height
        overhead = self.title_overhead if title else self.paragraph_overhead
        lines = max(1, math.ceil(max(0, chars) / max(1, per_line)))
        return overhead + lines * line_height


DEFAULT_PROFILE = CapacityProfile()


def _page(number: int, blocks: list[ContentBlock], cost: float, capacity: float, overflow: Optional[str]) -> Page:
    if overflow is None and cost > capacity:
        overflow = "oversized_block"
    return Page(number=number, blocks=list(blocks), cost=round(cost, 4), overflow=overflow)


def paginate(
    blocks: Sequence[ContentBlock],
    capacity: float,
    *,
    high_water: Optional[float] = None,
    signature_tolerance: float = 0.0,
) -> list[Page]:
    """
    Partition `blocks` into pages under `capacity`.

    `high_water` is the accumulated cost after which a title starts a new
    page (defaults to capacity, which disables the rule). Concatenating the
    returned pages reproduces `blocks` exactly.
    """
    if capacity <= 0:
        raise ValueError("capacity must be positive")
    mark = capacity if high_water is None else high_water
    tolerance = max(0.0, signature_tolerance)

    pages: list[Page] = []
    current: list[ContentBlock] = []
    used = 0.0
    overflow: Optional[str] = None
    last_index = len(blocks) - 1

    for idx, block in enumerate(blocks):
        cost = float(block.cost)
        if current:
            fits = used + cost <= capacity
            orphan = isinstance(block, TitleBlock) and used > mark
            squeeze = (
                not fits
                and idx == last_index
                and isinstance(block, SignatureBlock)
                and used <= capacity
                and used + cost <= capacity + tolerance
            )
            if squeeze:
                overflow = "signature_tolerance"
            elif not fits or orphan:
                pages.append(_page(len(pages) + 1, current, used, capacity, overflow))
                current = []
                used = 0.0
                overflow = None
        current.append(block)
        used += cost

    if current:
        pages.append(_page(len(pages) + 1, current, used, capacity, overflow))
    return pages


def paginate_with_profile(blocks: Sequence[ContentBlock], profile: CapacityProfile = DEFAULT_PROFILE) -> list[Page]:
    return paginate(
        blocks,
        profile.capacity,
        high_water=profile.high_water,
        signature_tolerance=profile.signature_tolerance,
    )


def display_scale(viewport_width: float, zoom: int = 100, page_width: float = A4_WIDTH_PT) -> float:
    """
    Preview scale for a viewport. Narrow (mobile) viewports reserve 32px of
    padding, wider ones 96px. Costs and capacity never depend on this.
    """
    padding = 32.0 if viewport_width < 768 else 96.0
    available = viewport_width - padding
    container = min(page_width, available) if available > 0 else page_width
    zoom = max(50, min(200, int(zoom)))
    return round((container / page_width) * (zoom / 100.0), 4)
