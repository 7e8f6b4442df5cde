"""
Accès au document PDF via PyMuPDF (fitz).

Le pipeline ne dépend que de deux interfaces :
- ``SourceDocument`` : nombre de pages, accès à une page (index 1-based), fermeture
- ``PageHandle`` : viewport à une échelle donnée, runs de texte, trace des opérations de dessin

``FitzDocument`` / ``FitzPage`` les implémentent avec PyMuPDF. Un autre moteur
d'analyse peut être branché sans toucher au rendu ni à l'orchestrateur.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List

import fitz  # PyMuPDF

from .conversion_models import Viewport, TextRun, DrawOp, RENDER_SCALE


class PageHandle(ABC):
    """Une page d'un document analysé."""

    @abstractmethod
    def get_viewport(self, scale: float = RENDER_SCALE) -> Viewport:
        ...

    @abstractmethod
    def get_text_content(self, viewport: Viewport) -> List[TextRun]:
        """Runs de texte dans l'ordre d'extraction, matrices à l'échelle du viewport."""

    @abstractmethod
    def get_operator_trace(self) -> List[DrawOp]:
        """Opérations de dessin dans l'ordre du flux de contenu."""


class SourceDocument(ABC):
    """Document analysé, valable le temps d'une conversion."""

    @property
    @abstractmethod
    def page_count(self) -> int:
        ...

    @abstractmethod
    def get_page(self, index: int) -> PageHandle:
        """Page numéro ``index`` (à partir de 1)."""

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


class FitzPage(PageHandle):

    def __init__(self, page: "fitz.Page"):
        self._page = page

    def get_viewport(self, scale: float = RENDER_SCALE) -> Viewport:
        rect = self._page.rect
        return Viewport(width=rect.width * scale, height=rect.height * scale, scale=scale)

    def get_text_content(self, viewport: Viewport) -> List[TextRun]:
        scale = viewport.scale
        # get_text travaille sans /Rotate, page.rect l'applique : on ramène
        # origines et directions dans l'espace affiché avant mise à l'échelle
        rotation = self._page.rotation_matrix
        page_height = self._page.rect.height
        runs: List[TextRun] = []
        raw = self._page.get_text("dict", flags=fitz.TEXTFLAGS_DICT & ~fitz.TEXT_PRESERVE_IMAGES)
        for block in raw.get("blocks", []):
            if "lines" not in block:
                continue
            for line in block.get("lines", []):
                dx, dy = line.get("dir", (1.0, 0.0))
                rdx = dx * rotation.a + dy * rotation.c
                rdy = dx * rotation.b + dy * rotation.d
                # dir est exprimé en Y descendant ; on repasse en Y montant
                cos, sin = rdx, -rdy
                for span in line.get("spans", []):
                    size = span.get("size", 0.0) * scale
                    origin = fitz.Point(span.get("origin", (0.0, 0.0))) * rotation
                    runs.append(TextRun(
                        text=span.get("text", ""),
                        transform=(size * cos, size * sin, -size * sin, size * cos,
                                   origin.x * scale, (page_height - origin.y) * scale),
                        font_name=span.get("font") or None,
                    ))
        return runs

    def get_operator_trace(self) -> List[DrawOp]:
        return [DrawOp(name=kind, bbox=tuple(rect)) for kind, rect in self._page.get_bboxlog()]


class FitzDocument(SourceDocument):

    def __init__(self, doc: "fitz.Document"):
        self._doc = doc

    @property
    def page_count(self) -> int:
        return self._doc.page_count

    def get_page(self, index: int) -> PageHandle:
        if index < 1 or index > self.page_count:
            raise IndexError(f"Page {index} hors limites (1..{self.page_count})")
        return FitzPage(self._doc.load_page(index - 1))

    def close(self) -> None:
        if not self._doc.is_closed:
            self._doc.close()


def open_pdf_stream(buffer: bytearray) -> FitzDocument:
    """Analyse un tampon PDF. Le tampon appartient désormais au document."""
    doc = fitz.open(stream=buffer, filetype="pdf")
    if doc.needs_pass:
        doc.close()
        raise ValueError("Document chiffré : mot de passe requis")
    return FitzDocument(doc)
