"""Déduction famille CSS / gras / italique à partir du nom de police PDF."""
from __future__ import annotations
from functools import lru_cache
from typing import Optional

from .conversion_models import FontStyle, DEFAULT_FONT_FAMILY

# L'ordre compte : première sous-chaîne trouvée gagne
FONT_FAMILIES = (
    ('Arial', 'Arial, sans-serif'),
    ('Times', 'Times New Roman, serif'),
    ('Helvetica', 'Helvetica, Arial, sans-serif'),
    ('Courier', 'Courier New, monospace'),
    ('Symbol', 'Symbol, serif'),
    ('Verdana', 'Verdana, sans-serif'),
    ('Georgia', 'Georgia, serif'),
    ('Palatino', 'Palatino, serif'),
    ('Trebuchet', 'Trebuchet MS, sans-serif'),
    ('Comic', 'Comic Sans MS, cursive'),
)


def font_family(font_name: Optional[str]) -> str:
    if not font_name:
        return DEFAULT_FONT_FAMILY
    for key, family in FONT_FAMILIES:
        if key in font_name:
            return family
    return DEFAULT_FONT_FAMILY


@lru_cache(maxsize=512)
def classify_font(font_name: Optional[str]) -> FontStyle:
    """Famille, gras et italique pour ``font_name`` (absent → sans-serif normal)."""
    if not font_name:
        return FontStyle()
    lowered = font_name.lower()
    return FontStyle(family=font_family(font_name),
                     bold='bold' in lowered,
                     italic='italic' in lowered)
