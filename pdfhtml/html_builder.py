"""Module de construction du HTML final.
Sépare la feuille de style et le squelette du document du rendu des pages.
Le document produit est autonome : style en ligne, aucun lien externe ni script.
"""
from __future__ import annotations

from .utils_html import escape_html

CSS_BASE = """
body { font-family: Arial, sans-serif; margin: 0; padding: 20px; background: #f5f5f5; color: #333; }
.page { box-shadow: 0 4px 20px rgba(0,0,0,0.1); margin-bottom: 30px; }
.text-item { line-height: 1.1; color: inherit; }
.image-placeholder { font-family: Arial, sans-serif; user-select: none; }
.table { border-collapse: collapse; width: 100%; margin: 10px 0; }
.table th, .table td { border: 1px solid #ddd; padding: 8px; text-align: left; }
.table th { background-color: #f2f2f2; }
@media print {
  .page { box-shadow: none; margin: 0; break-inside: avoid; }
  body { background: white; padding: 0; }
}
"""


def base_styles() -> str:
    """Feuille de style commune, identique pour tous les documents."""
    return CSS_BASE


def build_html(content: str, styles: str, title: str) -> str:
    """Enveloppe les fragments de page dans un document HTML complet.
    Les fragments ne sont pas validés : ils viennent tous de ``render_page``.
    """
    html_parts = ["<!DOCTYPE html>", "<html lang='en'>", "<head>", "<meta charset='utf-8'/>",
                  "<meta name='viewport' content='width=device-width, initial-scale=1.0'/>",
                  f"<title>{escape_html(title)}</title>",
                  f"<style>{styles}</style>", "</head>", "<body>",
                  content,
                  "</body>", "</html>"]
    return "\n".join(html_parts)
