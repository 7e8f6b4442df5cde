"""Modèles et constantes de conversion PDF → HTML positionné.
Séparé du pipeline pour que backend, rendu et hôte partagent les mêmes types.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import List, Optional, Tuple

# Zoom appliqué à la fois au conteneur de page et aux coordonnées des runs
RENDER_SCALE = 1.5

# Opérations de la trace qui peignent une image
IMAGE_PAINT_OPS = frozenset({'fill-image'})

DEFAULT_FONT_FAMILY = 'Arial, sans-serif'

Transform = Tuple[float, float, float, float, float, float]


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float
    scale: float = RENDER_SCALE


@dataclass
class TextRun:
    """Morceau de texte extrait avec sa matrice (a, b, c, d, e, f).

    La matrice est exprimée dans l'espace page (Y vers le haut) à l'échelle
    du viewport : ``e``/``f`` donnent l'origine de la ligne de base,
    ``|a|`` la taille de police.
    """
    text: str
    transform: Transform
    font_name: Optional[str] = None

    @property
    def font_size(self) -> float:
        return abs(self.transform[0])


@dataclass(frozen=True)
class DrawOp:
    name: str  # 'fill-path' / 'fill-text' / 'fill-image' ...
    bbox: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class FontStyle:
    family: str = DEFAULT_FONT_FAMILY
    bold: bool = False
    italic: bool = False

    @property
    def weight(self) -> str:
        return 'bold' if self.bold else 'normal'

    @property
    def style(self) -> str:
        return 'italic' if self.italic else 'normal'


@dataclass(frozen=True)
class ConversionProgress:
    step: str
    progress: int


@dataclass
class ConversionMetadata:
    title: str
    page_count: int
    file_size: str


@dataclass
class ConversionResult:
    html: str
    styles: str
    metadata: ConversionMetadata
    # Jamais rempli : les images sont détectées et comptées, pas extraites
    images: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def format_file_size(size: int) -> str:
    """Taille en Ko avec deux décimales (``"12.34 KB"``)."""
    return f"{size / 1024:.2f} KB"
