"""Export a stored quotation as a PDF.

Usage:
  python scripts/export_quotation.py <quotation-number> [out_dir]

Examples:
  python scripts/export_quotation.py Quote-4821
  python scripts/export_quotation.py Quote-4821 /tmp/quotes

Requirements:
  - API server running (API_URL configured, e.g. via .env)
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional

from app.client.quotations import QuotationClient
from app.core.config import get_settings
from app.editor.draft import draft_from_record
from app.render.pdf import PdfRenderer, export_filename


async def export_quotation(quotation_number: str, out_dir: Path) -> Path:
    settings = get_settings()
    async with QuotationClient() as client:
        record = await client.get_by_number(quotation_number)
    draft = draft_from_record(record)
    content = PdfRenderer(currency=settings.CURRENCY).render(draft)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / export_filename(draft.quotation_number)
    path.write_bytes(content)
    return path


def main(argv: Optional[list[str]] = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        sys.exit(__doc__)
    quotation_number = argv[0]
    out_dir = Path(argv[1]) if len(argv) >= 2 else Path(get_settings().EXPORT_DIR)

    path = asyncio.run(export_quotation(quotation_number, out_dir))
    print({"quotation_number": quotation_number, "path": str(path)})


if __name__ == "__main__":
    main()
