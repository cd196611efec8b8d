"""Quotation editor: current draft, notifications, save and export actions."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable

from app.client.quotations import ApiError, QuotationClient, ServerUnreachableError
from app.core.config import get_settings
from app.editor import draft as drafts
from app.editor.draft import Draft, DraftValidationError
from app.render.pdf import DocumentRenderer, PdfRenderer, export_filename
from app.render.preview import render_preview_html

logger = logging.getLogger(__name__)

SAVED_MESSAGE = "Quotation saved successfully to database!"
UNREACHABLE_MESSAGE = "Cannot connect to server. Make sure the database and server are running."
SAVE_FAILED_MESSAGE = "Failed to save to database. Check the server logs for details."
GENERATING_MESSAGE = "Generating PDF..."
EXPORTED_MESSAGE = "PDF downloaded successfully!"
EXPORT_FAILED_MESSAGE = "Failed to generate PDF. Please try again."


@dataclass(frozen=True)
class Notification:
    message: str
    kind: str = "success"  # success | error | info


@dataclass(frozen=True)
class ExportedDocument:
    filename: str
    content: bytes
    path: Path | None = None


class QuotationEditor:
    def __init__(
        self,
        client: QuotationClient,
        *,
        renderer: DocumentRenderer | None = None,
        export_dir: str | Path | None = None,
        reset_delay: float | None = None,
        draft_factory: Callable[[], Draft] | None = None,
        notification_timeout: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        settings = get_settings()
        self.client = client
        self.renderer = renderer or PdfRenderer(currency=settings.CURRENCY)
        self.export_dir = Path(export_dir if export_dir is not None else settings.EXPORT_DIR)
        self.reset_delay = settings.RESET_DELAY if reset_delay is None else reset_delay
        self._new_draft = draft_factory or drafts.new_draft
        self.draft: Draft = self._new_draft()
        self.notification_timeout = (
            settings.NOTIFICATION_TIMEOUT if notification_timeout is None else notification_timeout
        )
        self._clock = clock
        self._notification: Notification | None = None
        self._shown_at = 0.0
        self.is_exporting = False

    # Edits

    def _apply(self, fn: Callable[..., Draft], *args: Any) -> Draft:
        self.draft = fn(self.draft, *args)
        return self.draft

    def set_client_field(self, field_name: str, value: str) -> Draft:
        return self._apply(drafts.update_client, field_name, value)

    def set_item_field(self, index: int, field_name: str, value: Any) -> Draft:
        return self._apply(drafts.update_item, index, field_name, value)

    def add_item(self) -> Draft:
        return self._apply(drafts.add_item)

    def remove_item(self, index: int) -> Draft:
        return self._apply(drafts.remove_item, index)

    @property
    def subtotal(self) -> float:
        return drafts.subtotal(self.draft)

    def reset(self) -> Draft:
        self.draft = self._new_draft()
        return self.draft

    def preview_html(self) -> str:
        return render_preview_html(self.draft, currency=get_settings().CURRENCY)

    @property
    def notification(self) -> Notification | None:
        """The current notification, or None once it has been shown long enough."""
        if self._notification is not None and self.notification_timeout > 0:
            if self._clock() - self._shown_at >= self.notification_timeout:
                self._notification = None
        return self._notification

    def notify(self, message: str, kind: str = "success") -> None:
        self._notification = Notification(message, kind)
        self._shown_at = self._clock()

    def dismiss(self) -> None:
        self._notification = None

    # Actions

    async def save(self) -> bool:
        current = self.draft
        try:
            drafts.validate_for_save(current)
        except DraftValidationError as exc:
            self.notify(str(exc), "error")
            return False

        try:
            record = await self.client.create(drafts.to_payload(current))
        except ServerUnreachableError as exc:
            logger.warning("Save of %s failed, server unreachable: %s", current.quotation_number, exc)
            self.notify(UNREACHABLE_MESSAGE, "error")
            return False
        except ApiError as exc:
            logger.error("Save of %s rejected: %s", current.quotation_number, exc)
            if exc.status_code == 400:
                self.notify(exc.message, "error")
            else:
                self.notify(SAVE_FAILED_MESSAGE, "error")
            return False
        except Exception:
            logger.exception("Save of %s failed", current.quotation_number)
            self.notify(SAVE_FAILED_MESSAGE, "error")
            return False

        logger.info("Saved %s as id=%s", current.quotation_number, record.get("id"))
        self.notify(SAVED_MESSAGE)
        if self.reset_delay > 0:
            await asyncio.sleep(self.reset_delay)
        self.reset()
        return True

    async def export(self) -> ExportedDocument | None:
        if self.is_exporting:
            return None
        self.is_exporting = True
        self.notify(GENERATING_MESSAGE, "info")
        current = self.draft
        filename = export_filename(current.quotation_number)
        try:
            content = await asyncio.to_thread(self.renderer.render, current)
            self.export_dir.mkdir(parents=True, exist_ok=True)
            path = self.export_dir / filename
            path.write_bytes(content)
        except Exception:
            logger.exception("Export of %s failed", current.quotation_number)
            self.notify(EXPORT_FAILED_MESSAGE, "error")
            return None
        finally:
            self.is_exporting = False

        self.notify(EXPORTED_MESSAGE)
        return ExportedDocument(filename=filename, content=content, path=path)
