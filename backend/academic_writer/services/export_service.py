"""Export service: HTML rendering, simulated delivery, and plain-text download.

Delivery is behind the ``DeliveryChannel`` protocol. The only channel shipped
here is ``SimulatedDeliveryChannel``, which sends nothing and succeeds after
a fixed delay; real PDF/DOCX rendering and email transport plug in as other
channels.
"""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Protocol

from academic_writer.models import ExportOutcome, ExportRequest

logger = logging.getLogger(__name__)

EXPORT_FAILURE_MESSAGE = "Failed to export and send document. Please try again."

DOWNLOAD_FALLBACK_NAME = "paper"

PRINT_STYLES = """
        body { font-family: 'Times New Roman', serif; line-height: 1.6; margin: 40px; }
        h1 { text-align: center; margin-bottom: 30px; }
        h2 { margin-top: 30px; margin-bottom: 15px; }
        h3 { margin-top: 20px; margin-bottom: 10px; }
        p { margin-bottom: 15px; text-align: justify; }
"""

# Applied in order; heading markers must be handled before emphasis
_MARKUP_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^# (.+)$", re.MULTILINE), r"<h1>\1</h1>"),
    (re.compile(r"^## (.+)$", re.MULTILINE), r"<h2>\1</h2>"),
    (re.compile(r"^### (.+)$", re.MULTILINE), r"<h3>\1</h3>"),
    (re.compile(r"\n\n"), "</p><p>"),
    (re.compile(r"\*\*(.+?)\*\*"), r"<strong>\1</strong>"),
    (re.compile(r"\*(.+?)\*"), r"<em>\1</em>"),
)


def render_for_delivery(content: str, title: str) -> str:
    """Convert markdown-style paper text into a printable HTML document.

    Headings (``#``, ``##``, ``###``), blank-line paragraph breaks, and
    ``**bold**`` / ``*italic*`` are translated. Content is not HTML-escaped.
    """
    body = content
    for pattern, replacement in _MARKUP_RULES:
        body = pattern.sub(replacement, body)

    return f"""
    <!DOCTYPE html>
    <html>
    <head>
      <title>{title}</title>
      <style>{PRINT_STYLES}      </style>
    </head>
    <body>
      <h1>{title}</h1>
      <p>{body}</p>
    </body>
    </html>
  """


def download_filename(title: str) -> str:
    """Lower-cased title with every non-alphanumeric character replaced by ``_``."""
    safe = re.sub(r"[^a-zA-Z0-9]", "_", title).lower()
    return f"{safe or DOWNLOAD_FALLBACK_NAME}.txt"


def build_download(content: str, title: str) -> tuple[str, bytes]:
    """Raw text handed to the caller for local download.

    Returns:
        (filename, UTF-8 bytes)
    """
    return download_filename(title), content.encode("utf-8")


class DeliveryChannel(Protocol):
    """Sends a rendered document to its destination."""

    async def send(self, request: ExportRequest, html: str) -> None:
        ...


class SimulatedDeliveryChannel:
    """Pretends to render and email the document.

    Always succeeds after ``delay_seconds``. Nothing leaves the process.
    """

    def __init__(self, delay_seconds: float = 0.0):
        self._delay_seconds = delay_seconds

    async def send(self, request: ExportRequest, html: str) -> None:
        if self._delay_seconds > 0:
            await asyncio.sleep(self._delay_seconds)
        logger.info(
            "Simulated delivery of %s (%d bytes of HTML) to %s",
            request.format.value,
            len(html),
            request.email,
        )


class ExportDispatcher:
    """Renders an export request and hands it to a delivery channel."""

    def __init__(self, channel: DeliveryChannel):
        self._channel = channel

    async def deliver(self, request: ExportRequest) -> ExportOutcome:
        """Render and send. Failures become a generic failure outcome.

        Never raises; the pipeline result the content came from is not
        touched either way.
        """
        try:
            html = render_for_delivery(request.content, request.title)
            await self._channel.send(request, html)
        except Exception:
            logger.exception(f"Export of '{request.title}' to {request.email} failed")
            return ExportOutcome(success=False, message=EXPORT_FAILURE_MESSAGE)

        return ExportOutcome(
            success=True,
            message=f'Academic paper "{request.title}" has been generated and sent to {request.email}',
        )
