import pytest
from PIL import Image
from reportlab.lib.pagesizes import A4

from app.editor.draft import add_item, update_client, update_item
from app.render.context import build_context, format_money
from app.render.pdf import PdfRenderer, RenderError, export_filename, fit_to_page, image_to_pdf
from app.render.preview import render_preview_html
from app.render.raster import rasterize


def _filled(draft):
    d = update_client(draft, "name", "Acme <Traders>")
    d = update_client(d, "phone", "0700 000 000")
    d = update_item(d, 0, "description", "Printer toner")
    d = update_item(d, 0, "quantity", 3)
    d = update_item(d, 0, "price", 1500)
    return add_item(d)


def test_format_money():
    assert format_money(1500) == "Ksh 1,500.00"
    assert format_money(None) == "Ksh 0.00"
    assert format_money(0.5, "USD") == "USD 0.50"


def test_context_uses_placeholders_and_totals(blank_draft):
    ctx = build_context(_filled(blank_draft))

    assert ctx["client_name"] == "Acme <Traders>"
    assert ctx["client_lines"] == ["0700 000 000"]
    assert [r["description"] for r in ctx["rows"]] == ["Printer toner", "Item description"]
    assert ctx["rows"][0]["total"] == "Ksh 4,500.00"
    assert ctx["grand_total"] == "Ksh 4,500.00"
    assert ctx["signature"] == "For, WIMWA TECH GENERAL SUPPLIES LIMITED"
    assert "wimwatech@gmail.com" in ctx["terms"][-1]

    assert build_context(blank_draft)["client_name"] == "Client Name"


def test_preview_html_escapes_and_lists_items(blank_draft):
    html = render_preview_html(_filled(blank_draft))

    assert "QUOTATION" in html
    assert blank_draft.quotation_number in html
    assert "Acme &lt;Traders&gt;" in html
    assert "Printer toner" in html
    assert "Grand Total: Ksh 4,500.00" in html


@pytest.mark.parametrize(
    "image,expected",
    [
        # wider than A4: full width, centered vertically
        ((2000, 1000), (0, (A4[1] - A4[0] / 2) / 2, A4[0], A4[0] / 2)),
        # taller than A4: full height, centered horizontally
        ((1000, 4000), ((A4[0] - A4[1] / 4) / 2, 0, A4[1] / 4, A4[1])),
    ],
)
def test_fit_to_page_keeps_ratio_and_centers(image, expected):
    x, y, w, h = fit_to_page(*image, *A4)

    assert (x, y, w, h) == pytest.approx(expected)
    assert w / h == pytest.approx(image[0] / image[1])


def test_fit_to_page_rejects_empty_image():
    with pytest.raises(RenderError):
        fit_to_page(0, 10, *A4)


def test_rasterize_grows_with_items(blank_draft):
    short = rasterize(build_context(blank_draft), scale=1)
    d = blank_draft
    for i in range(30):
        d = add_item(d)
        d = update_item(d, i + 1, "description", "Long description " * 6)
    tall = rasterize(build_context(d), scale=1)

    assert short.width == tall.width == 1200
    assert tall.height > short.height
    assert short.getpixel((0, 0)) == (255, 255, 255)


def test_image_to_pdf_is_single_page():
    pdf = image_to_pdf(Image.new("RGB", (120, 300), "white"), title="Quotation Quote-1")

    assert pdf.startswith(b"%PDF")
    assert b"/Count 1" in pdf


def test_pdf_renderer_produces_pdf(blank_draft):
    content = PdfRenderer(scale=1).render(_filled(blank_draft))
    assert content.startswith(b"%PDF")
    assert PdfRenderer.media_type == "application/pdf"


def test_export_filename():
    assert export_filename("Quote-4821") == "Quotation-Quote-4821.pdf"
    assert export_filename("Q 1/2") == "Quotation-Q_1_2.pdf"
