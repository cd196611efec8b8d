"""Draw the quotation document onto a Pillow image.

Layout follows the on-screen preview at a fixed desktop width. All
coordinates below are in CSS-like pixels and multiplied by `scale`.
"""

from __future__ import annotations

from typing import Any

from PIL import Image, ImageDraw, ImageFont

BACKGROUND = "#ffffff"
INK = "#1e293b"
MUTED = "#64748b"
RULE = "#e2e8f0"
HEADER_FILL = "#e2e8f0"

MARGIN = 60
# (header, width, right-aligned) for a 1080px content width
COLUMNS = (("#", 50, False), ("DESCRIPTION", 530, False), ("QTY", 120, True), ("PRICE", 190, True), ("TOTAL", 190, True))


class _Page:
    def __init__(self, width: int, scale: float) -> None:
        self.scale = scale
        self.width = width
        self.y = MARGIN
        self.image = Image.new("RGB", (self._px(width), self._px(1600)), BACKGROUND)
        self.draw = ImageDraw.Draw(self.image)
        self._fonts: dict[int, Any] = {}

    def _px(self, v: float) -> int:
        return int(round(v * self.scale))

    def font(self, size: int):
        if size not in self._fonts:
            self._fonts[size] = ImageFont.load_default(size=self._px(size))
        return self._fonts[size]

    def line_height(self, size: int) -> float:
        return size * 1.45

    def ensure(self, bottom: float) -> None:
        needed = self._px(bottom + MARGIN)
        if needed <= self.image.height:
            return
        grown = Image.new("RGB", (self.image.width, max(needed, self.image.height * 2)), BACKGROUND)
        grown.paste(self.image, (0, 0))
        self.image = grown
        self.draw = ImageDraw.Draw(grown)

    def text_width(self, text: str, size: int) -> float:
        return self.draw.textlength(text, font=self.font(size)) / self.scale

    def text(self, x: float, y: float, text: str, size: int, *, fill: str = INK, align_right: bool = False) -> None:
        if align_right:
            x -= self.text_width(text, size)
        self.ensure(y + self.line_height(size))
        self.draw.text((self._px(x), self._px(y)), text, fill=fill, font=self.font(size))

    def wrap(self, text: str, size: int, max_width: float) -> list[str]:
        lines: list[str] = []
        current = ""
        for word in text.split():
            candidate = f"{current} {word}".strip()
            if current and self.text_width(candidate, size) > max_width:
                lines.append(current)
                current = word
            else:
                current = candidate
        if current:
            lines.append(current)
        return lines or [""]

    def paragraph(self, text: str, size: int, *, x: float = MARGIN, max_width: float | None = None, fill: str = INK) -> None:
        max_width = max_width or (self.width - x - MARGIN)
        for line in self.wrap(text, size, max_width):
            self.text(x, self.y, line, size, fill=fill)
            self.y += self.line_height(size)

    def rule(self, y: float, *, fill: str = RULE, width: float = 1) -> None:
        self.ensure(y)
        self.draw.line(
            [(self._px(MARGIN), self._px(y)), (self._px(self.width - MARGIN), self._px(y))],
            fill=fill,
            width=max(1, self._px(width)),
        )

    def box(self, top: float, bottom: float, fill: str) -> None:
        self.ensure(bottom)
        self.draw.rectangle(
            [self._px(MARGIN), self._px(top), self._px(self.width - MARGIN), self._px(bottom)],
            fill=fill,
        )

    def finish(self) -> Image.Image:
        return self.image.crop((0, 0, self.image.width, self._px(self.y + MARGIN)))


def _header(page: _Page, ctx: dict[str, Any]) -> None:
    company = ctx["company"]
    right = page.width - MARGIN
    top = page.y

    page.text(MARGIN, top, company["name"], 26)
    y = top + page.line_height(26) + 4
    for value in (company["address"], company["phone"], company["email"], company["pvt"]):
        if value:
            page.text(MARGIN, y, value, 14, fill=MUTED)
            y += page.line_height(14)

    page.text(right, top, "QUOTATION", 34, align_right=True)
    meta_y = top + page.line_height(34) + 4
    page.text(right, meta_y, f"Quotation# {ctx['quotation_number']}", 14, align_right=True)
    page.text(right, meta_y + page.line_height(14), f"Date: {ctx['date']}", 14, align_right=True)

    page.y = max(y, meta_y + 2 * page.line_height(14)) + 12
    page.rule(page.y, fill=INK, width=2)
    page.y += 24


def _client(page: _Page, ctx: dict[str, Any]) -> None:
    page.text(MARGIN, page.y, "To,", 15)
    page.y += page.line_height(15)
    page.text(MARGIN, page.y, ctx["client_name"], 16)
    page.y += page.line_height(16)
    for line in ctx["client_lines"]:
        page.paragraph(line, 14, fill=MUTED)
    page.y += 16
    page.paragraph(ctx["greeting"], 14)
    page.paragraph(ctx["intro"], 14)
    page.y += 12


def _table(page: _Page, ctx: dict[str, Any]) -> None:
    pad = 8
    head_h = page.line_height(13) + 2 * pad
    page.box(page.y, page.y + head_h, HEADER_FILL)
    x = MARGIN
    for title, width, right in COLUMNS:
        page.text(x + width - pad if right else x + pad, page.y + pad, title, 13, align_right=right)
        x += width
    page.y += head_h

    for row in ctx["rows"]:
        desc_width = COLUMNS[1][1] - 2 * pad
        desc_lines = page.wrap(row["description"], 14, desc_width)
        row_h = max(len(desc_lines), 2) * page.line_height(14) + 2 * pad
        top = page.y + pad
        x = MARGIN
        cells = (str(row["index"]), None, row["quantity"], row["price"], row["total"])
        for (title, width, right), value in zip(COLUMNS, cells):
            if value is None:
                for i, line in enumerate(desc_lines):
                    page.text(x + pad, top + i * page.line_height(14), line, 14)
            else:
                page.text(x + width - pad if right else x + pad, top, value, 14, align_right=right)
            x += width
        qty_right = MARGIN + COLUMNS[0][1] + COLUMNS[1][1] + COLUMNS[2][1] - pad
        page.text(qty_right, top + page.line_height(14), row["unit"], 11, fill=MUTED, align_right=True)
        page.y += row_h
        page.rule(page.y)


def _footer(page: _Page, ctx: dict[str, Any]) -> None:
    page.y += 16
    page.text(page.width - MARGIN, page.y, f"Grand Total: {ctx['grand_total']}", 18, align_right=True)
    page.y += page.line_height(18) + 16
    page.paragraph(ctx["closing"], 14)
    page.y += 16

    page.text(MARGIN, page.y, "Terms & Conditions:", 15)
    page.y += page.line_height(15)
    for n, term in enumerate(ctx["terms"], start=1):
        page.text(MARGIN, page.y, f"{n}.", 12)
        page.paragraph(term, 12, x=MARGIN + 20)
        page.y += 2

    page.y += 40
    page.text(MARGIN, page.y, ctx["signature"], 14)
    page.y += page.line_height(14)


def rasterize(context: dict[str, Any], *, width: int = 1200, scale: float = 2) -> Image.Image:
    """Render a context from build_context() into an RGB image."""
    page = _Page(width, scale)
    _header(page, context)
    _client(page, context)
    _table(page, context)
    _footer(page, context)
    return page.finish()
