from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence
import sys

import fitz
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdfhtml.conversion_models import DrawOp, TextRun, Viewport  # noqa: E402
from pdfhtml.document import PageHandle, SourceDocument  # noqa: E402


class FakePage(PageHandle):
    """Page en mémoire : runs déjà à l'échelle du viewport."""

    def __init__(self, width: float = 400, height: float = 600, runs: Iterable[TextRun] = (),
                 ops: Iterable[DrawOp] = (), trace_error: Optional[Exception] = None,
                 text_error: Optional[Exception] = None):
        self.width = width
        self.height = height
        self.runs = list(runs)
        self.ops = list(ops)
        self.trace_error = trace_error
        self.text_error = text_error

    def get_viewport(self, scale: float = 1.5) -> Viewport:
        return Viewport(self.width, self.height, scale)

    def get_text_content(self, viewport: Viewport) -> List[TextRun]:
        if self.text_error is not None:
            raise self.text_error
        return list(self.runs)

    def get_operator_trace(self) -> List[DrawOp]:
        if self.trace_error is not None:
            raise self.trace_error
        return list(self.ops)


class FakeDocument(SourceDocument):

    def __init__(self, pages: Sequence[PageHandle]):
        self.pages = list(pages)
        self.closed = False

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def get_page(self, index: int) -> PageHandle:
        return self.pages[index - 1]

    def close(self) -> None:
        self.closed = True


def run(text: str, x: float = 10, y: float = 100, size: float = 12, font: Optional[str] = "Helvetica") -> TextRun:
    return TextRun(text=text, transform=(size, 0, 0, size, x, y), font_name=font)


@pytest.fixture()
def pdf_factory() -> Callable[..., bytes]:
    """Construit un PDF : une entrée par page ``{"texts": [((x, y), texte, police)], "images": n}``."""

    def _create(pages: Sequence[dict], width: float = 200, height: float = 300) -> bytes:
        doc = fitz.open()
        for spec in pages:
            page = doc.new_page(width=width, height=height)
            for point, text, fontname in spec.get("texts", []):
                page.insert_text(point, text, fontname=fontname, fontsize=12)
            for i in range(spec.get("images", 0)):
                pix = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, 8, 8), 0)
                pix.clear_with(200)
                top = 150 + i * 30
                page.insert_image(fitz.Rect(20, top, 40, top + 20), pixmap=pix)
        data = doc.tobytes()
        doc.close()
        return data

    return _create


@pytest.fixture()
def sample_pdf(pdf_factory) -> bytes:
    return pdf_factory([
        {"texts": [((50, 100), "Hello world", "helv"), ((50, 130), "Bold title", "tibo")]},
        {"texts": [((20, 40), "Second page", "cour")], "images": 2},
    ])
