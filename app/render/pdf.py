"""Single-page PDF export: the rendered document image scaled onto A4."""

from __future__ import annotations

import io
import logging
import re
from typing import Protocol

from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from app.editor.draft import Draft
from app.render.context import build_context
from app.render.raster import rasterize

logger = logging.getLogger(__name__)


class RenderError(Exception):
    """The document could not be rendered."""


class DocumentRenderer(Protocol):
    media_type: str

    def render(self, draft: Draft) -> bytes: ...


def export_filename(quotation_number: str) -> str:
    safe = re.sub(r"[\\/:*?\"<>|\s]+", "_", quotation_number).strip("_") or "quotation"
    return f"Quotation-{safe}.pdf"


def fit_to_page(
    image_width: float, image_height: float, page_width: float, page_height: float
) -> tuple[float, float, float, float]:
    """Scale to fit the page keeping aspect ratio, centered. Returns (x, y, w, h)."""
    if image_width <= 0 or image_height <= 0:
        raise RenderError("cannot place an empty image")
    image_ratio = image_width / image_height
    page_ratio = page_width / page_height
    if image_ratio > page_ratio:
        # wider than the page: fit to width
        width = page_width
        height = page_width / image_ratio
    else:
        height = page_height
        width = page_height * image_ratio
    return (page_width - width) / 2, (page_height - height) / 2, width, height


def image_to_pdf(image: Image.Image, *, title: str | None = None) -> bytes:
    buf = io.BytesIO()
    page_width, page_height = A4
    pdf = canvas.Canvas(buf, pagesize=A4)
    if title:
        pdf.setTitle(title)
    x, y, w, h = fit_to_page(image.width, image.height, page_width, page_height)
    pdf.drawImage(ImageReader(image), x, y, width=w, height=h)
    pdf.showPage()
    pdf.save()
    return buf.getvalue()


class PdfRenderer:
    media_type = "application/pdf"

    def __init__(self, *, width: int = 1200, scale: float = 2, currency: str = "Ksh") -> None:
        self.width = width
        self.scale = scale
        self.currency = currency

    def render(self, draft: Draft) -> bytes:
        try:
            context = build_context(draft, currency=self.currency)
            image = rasterize(context, width=self.width, scale=self.scale)
            logger.debug("Rasterized %s at %sx%s", draft.quotation_number, image.width, image.height)
            return image_to_pdf(image, title=f"Quotation {draft.quotation_number}")
        except (OSError, ValueError) as exc:
            raise RenderError(f"failed to render quotation {draft.quotation_number}: {exc}") from exc
