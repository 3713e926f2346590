"""
Document Extractor

This module fetches an optional reference document and turns it into a
bounded plain-text excerpt used to ground the generation request.

Design Goals
------------
- Grounding is an enhancement, never a requirement: every failure
  degrades to an empty excerpt and is logged, not raised
- Bounded resource usage: streamed download with a byte cap, a page cap
  on parsing, and a character cap on the result
- PDF parsing runs in a worker thread so concurrent requests keep moving
- Outcome is inspectable (`Extracted` vs `Unavailable`) for logs and tests
"""

from __future__ import annotations

import asyncio
import io
import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

import httpx
from pypdf import PdfReader

from ..config import Settings

logger = logging.getLogger("dials.extractor")

_TRAILING_SPACE = re.compile(r"[ \t\f\v]+\n")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


# ---------------------------------------------------------------------
# Result Types
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class Extracted:
    text: str


@dataclass(frozen=True)
class Unavailable:
    reason: str

    @property
    def text(self) -> str:
        return ""


ExtractionResult = Union[Extracted, Unavailable]


class DocumentTooLarge(ValueError):
    """Raised when a download exceeds the configured byte cap."""


# ---------------------------------------------------------------------
# Text helpers
# ---------------------------------------------------------------------

def normalize_whitespace(text: str) -> str:
    """
    Tidy extracted text.

    Strips trailing spaces before newlines, and collapses runs of three or
    more newlines into a single blank line.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _TRAILING_SPACE.sub("\n", text)
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    return text.strip()


def extract_pdf_text(data: bytes, max_pages: int) -> str:
    """
    Extract plain text from at most `max_pages` pages of a PDF.

    Raises
    ------
    pypdf.errors.PyPdfError
        If the bytes are not a readable PDF.
    """
    reader = PdfReader(io.BytesIO(data))
    pages_text = []
    for page in reader.pages[:max_pages]:
        page_text = page.extract_text()
        if page_text:
            pages_text.append(page_text)
    return "\n\n".join(pages_text)


# ---------------------------------------------------------------------
# Extractor
# ---------------------------------------------------------------------

class DocumentExtractor:
    """
    Fetches a document over HTTP and extracts a bounded text excerpt.

    The class holds no per-request state and is safe to share.
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Parameters
        ----------
        settings : Settings
            Supplies timeout and size limits.

        transport : Optional[httpx.AsyncBaseTransport]
            Optional transport override, used by tests.
        """
        self.timeout = settings.document_timeout
        self.max_bytes = settings.max_document_bytes
        self.max_pages = settings.max_document_pages
        self.max_chars = settings.max_document_chars
        self._transport = transport

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def fetch_text(self, url: str) -> ExtractionResult:
        """
        Download `url` and extract its text.

        Returns
        -------
        Extracted
            On success (the text may still be empty for image-only PDFs).

        Unavailable
            When there is no URL, the fetch fails, or the document cannot
            be parsed.
        """
        if not url:
            return Unavailable("no source url")

        result = await self._fetch_and_parse(url)
        if isinstance(result, Unavailable):
            logger.warning(
                "Grounding document unavailable: %s",
                result.reason,
                extra={"source_url": url, "reason": result.reason},
            )
        return result

    async def extract(self, url: str) -> str:
        """Return the grounding excerpt for `url`, or "" when it is unavailable."""
        return (await self.fetch_text(url)).text

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _fetch_and_parse(self, url: str) -> ExtractionResult:
        try:
            data = await self._download(url)
        except httpx.HTTPStatusError as exc:
            return Unavailable(f"fetch failed ({exc.response.status_code})")
        except DocumentTooLarge as exc:
            return Unavailable(str(exc))
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            # ValueError covers hosts that fail IDNA encoding
            return Unavailable(f"fetch failed ({type(exc).__name__})")

        try:
            raw_text = await asyncio.to_thread(extract_pdf_text, data, self.max_pages)
        except Exception as exc:
            # pypdf raises a wide range of errors on damaged input
            return Unavailable(f"unreadable document: {type(exc).__name__}")

        return Extracted(normalize_whitespace(raw_text)[: self.max_chars])

    async def _download(self, url: str) -> bytes:
        buffer = bytearray()
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            async with client.stream("GET", url) as response:
                response.raise_for_status()
                async for chunk in response.aiter_bytes():
                    buffer.extend(chunk)
                    if len(buffer) > self.max_bytes:
                        raise DocumentTooLarge(
                            f"document exceeds {self.max_bytes} bytes"
                        )
        return bytes(buffer)
