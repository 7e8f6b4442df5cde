"""Rendu d'une page PDF en fragment HTML à positionnement absolu.

Un ``div.text-item`` par run de texte non vide, dans l'ordre d'extraction
(les recouvrements sont normaux : on reconstruit la mise en page, pas
l'ordre de lecture), plus un encart unique signalant les images détectées.
"""
from __future__ import annotations
import math
from typing import List

from .conversion_models import TextRun, Viewport, IMAGE_PAINT_OPS, RENDER_SCALE
from .document import PageHandle
from .exceptions import PageRenderError
from .fonts import classify_font
from .utils_html import escape_html, css_number, inline_style

PAGE_STYLE = "position: relative; margin: 20px auto; border: 1px solid #ddd; background: white; page-break-after: always;"

PLACEHOLDER_STYLE = ("position: absolute; top: 50%; left: 50%; transform: translate(-50%, -50%); "
                     "padding: 20px; background: rgba(240, 240, 240, 0.8); border: 2px dashed #999; "
                     "text-align: center; border-radius: 8px; color: #666;")


def _check_transform(run: TextRun, page_index: int) -> None:
    t = run.transform
    if len(t) != 6 or not all(isinstance(v, (int, float)) and math.isfinite(v) for v in t):
        raise PageRenderError(f"Matrice de texte invalide page {page_index}: {t!r}", page_index)


def render_text_run(run: TextRun, viewport: Viewport) -> str:
    """``div`` positionné pour un run. Une seule inversion de l'axe Y, ici."""
    x = run.transform[4]
    y = viewport.height - run.transform[5]
    font = classify_font(run.font_name)
    style = inline_style(position='absolute',
                         left=f"{css_number(x)}px",
                         top=f"{css_number(y)}px",
                         font_size=f"{css_number(run.font_size)}px",
                         font_family=font.family,
                         font_weight=font.weight,
                         font_style=font.style,
                         white_space='pre')
    return f'  <div class="text-item" style="{style}">{escape_html(run.text)}</div>\n'


def render_image_placeholder(count: int) -> str:
    return (f'  <div class="image-placeholder" style="{PLACEHOLDER_STYLE}">\n'
            f'    <div style="font-size: 14px; margin-bottom: 5px;">\U0001F4F7 {count} image(s) detected</div>\n'
            f'    <div style="font-size: 12px; color: #888;">(Image extraction not available)</div>\n'
            f'  </div>\n')


def count_image_paints(page: PageHandle, page_index: int) -> int:
    """Nombre d'images peintes sur la page ; 0 si la trace est illisible."""
    try:
        return sum(1 for op in page.get_operator_trace() if op.name in IMAGE_PAINT_OPS)
    except Exception as e:
        print(f"[WARN] Détection des images impossible page {page_index}: {e}")
        return 0


def render_page(page: PageHandle, viewport_scale: float = RENDER_SCALE, page_index: int = 1) -> str:
    """Fragment HTML d'une page (``page_index`` à partir de 1)."""
    viewport = page.get_viewport(viewport_scale)
    parts: List[str] = [
        f'<div id="page-{page_index}" class="page page-{page_index}" '
        f'style="width: {css_number(viewport.width)}px; height: {css_number(viewport.height)}px; {PAGE_STYLE}">\n'
    ]

    for run in page.get_text_content(viewport):
        if not run.text or not run.text.strip():
            continue
        _check_transform(run, page_index)
        if run.font_size <= 0:
            continue
        parts.append(render_text_run(run, viewport))

    image_count = count_image_paints(page, page_index)
    if image_count:
        parts.append(render_image_placeholder(image_count))

    parts.append('</div>\n')
    return ''.join(parts)
