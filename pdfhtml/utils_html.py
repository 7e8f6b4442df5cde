"""Utilitaires HTML utilisés par le rendu de page et l'assemblage."""
from __future__ import annotations


def escape_html(s: str) -> str:
    """Échappe les entités HTML basiques. Les espaces sont conservés tels quels."""
    return (s.replace("&", "&amp;")
             .replace("<", "&lt;")
             .replace(">", "&gt;")
             .replace('"', "&quot;"))


def css_number(value: float) -> str:
    """Nombre CSS sans perte : ``1188.0`` → ``1188``, ``12.5`` → ``12.5``."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def inline_style(**props) -> str:
    """Construit un attribut style (``font_size`` → ``font-size``), ordre conservé."""
    return " ".join(f"{name.replace('_', '-')}: {val};" for name, val in props.items())
