from __future__ import annotations

import fitz
import pytest

from pdfhtml.document import FitzDocument, open_pdf_stream
from pdfhtml.conversion_models import IMAGE_PAINT_OPS


@pytest.fixture()
def doc(sample_pdf):
    document = open_pdf_stream(bytearray(sample_pdf))
    yield document
    document.close()


def test_page_count_and_bounds(doc):
    assert doc.page_count == 2
    doc.get_page(1)
    doc.get_page(2)
    with pytest.raises(IndexError):
        doc.get_page(0)
    with pytest.raises(IndexError):
        doc.get_page(3)


def test_viewport_is_scaled(doc):
    viewport = doc.get_page(1).get_viewport(1.5)
    assert viewport.width == pytest.approx(300)
    assert viewport.height == pytest.approx(450)
    assert viewport.scale == 1.5


def test_text_runs_in_scaled_page_space(doc):
    page = doc.get_page(1)
    viewport = page.get_viewport(1.5)
    runs = [r for r in page.get_text_content(viewport) if r.text.strip()]
    assert [r.text for r in runs] == ["Hello world", "Bold title"]

    hello = runs[0]
    assert hello.font_name == "Helvetica"
    assert hello.font_size == pytest.approx(18)
    assert hello.transform[4] == pytest.approx(75, abs=0.5)
    # ligne de base à y=100 depuis le haut → (300 - 100) * 1.5 en Y montant
    assert hello.transform[5] == pytest.approx(300, abs=0.5)
    assert viewport.height - hello.transform[5] == pytest.approx(150, abs=0.5)
    assert "Bold" in runs[1].font_name


def test_operator_trace_lists_image_paints(doc):
    trace = doc.get_page(2).get_operator_trace()
    assert sum(1 for op in trace if op.name in IMAGE_PAINT_OPS) == 2
    assert not any(op.name in IMAGE_PAINT_OPS for op in doc.get_page(1).get_operator_trace())


def _single_page(text: str, point, fontname: str = "helv") -> "fitz.Document":
    document = fitz.open()
    page = document.new_page(width=200, height=300)
    page.insert_text(point, text, fontname=fontname, fontsize=12)
    return document


def test_cropbox_offsets_runs():
    document = _single_page("Cropped", (50, 100))
    document[0].set_cropbox(fitz.Rect(20, 20, 200, 300))
    page = FitzDocument(document).get_page(1)
    viewport = page.get_viewport(1.5)
    assert viewport.width == pytest.approx(270)
    assert viewport.height == pytest.approx(420)

    (cropped,) = [r for r in page.get_text_content(viewport) if r.text.strip()]
    assert cropped.transform[4] == pytest.approx(45, abs=0.5)
    assert viewport.height - cropped.transform[5] == pytest.approx(120, abs=0.5)
    document.close()


@pytest.mark.parametrize("rotation", [90, 180, 270])
def test_rotated_page_runs_stay_inside_viewport(rotation):
    document = _single_page("Footer", (50, 280))
    document[0].set_rotation(rotation)
    page = FitzDocument(document).get_page(1)
    viewport = page.get_viewport(1.5)
    if rotation in (90, 270):
        assert (viewport.width, viewport.height) == (pytest.approx(450), pytest.approx(300))

    runs = [r for r in page.get_text_content(viewport) if r.text.strip()]
    assert [r.text for r in runs] == ["Footer"]
    for text_run in runs:
        assert 0 <= viewport.height - text_run.transform[5] <= viewport.height
        assert 0 <= text_run.transform[4] <= viewport.width
    document.close()


def test_rotated_page_turns_text_direction():
    document = _single_page("Footer", (50, 280))
    document[0].set_rotation(90)
    page = FitzDocument(document).get_page(1)
    (footer,) = [r for r in page.get_text_content(page.get_viewport(1.5)) if r.text.strip()]
    # texte vertical à l'affichage : la taille passe dans les termes b/c
    assert footer.transform[0] == pytest.approx(0, abs=1e-6)
    assert abs(footer.transform[1]) == pytest.approx(18)
    document.close()


def test_image_page_still_yields_text_only(doc):
    page = doc.get_page(2)
    runs = [r for r in page.get_text_content(page.get_viewport(1.5)) if r.text.strip()]
    assert [r.text for r in runs] == ["Second page"]
