"""HTML preview of a draft, rendered with Jinja2."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from app.editor.draft import Draft
from app.render.context import build_context

TEMPLATE_DIR = Path(__file__).parent / "templates"


@lru_cache(maxsize=1)
def _env() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=select_autoescape(["html"]),
    )


def render_preview_html(draft: Draft, *, currency: str = "Ksh") -> str:
    template = _env().get_template("quotation.html")
    return template.render(**build_context(draft, currency=currency))
