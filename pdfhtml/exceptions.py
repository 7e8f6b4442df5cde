"""Exceptions de la conversion PDF → HTML positionné.

Toutes dérivent de ``ConversionError`` : c'est la seule forme d'erreur que
l'hôte (CLI, serveur Flask) doit intercepter. Le message est destiné à
l'utilisateur final, la cause interne est chaînée (``raise ... from``).
"""
from __future__ import annotations
from typing import List, Optional


class ConversionError(RuntimeError):
    """Échec d'une conversion (message présentable à l'utilisateur)."""


class LoadError(ConversionError):
    """Le document n'a pas pu être analysé, même après la seconde tentative."""

    def __init__(self, message: str, attempts: Optional[List[BaseException]] = None):
        super().__init__(message)
        self.attempts = list(attempts or [])


class InvalidInputError(LoadError):
    """Octets vides ou qui ne ressemblent pas à un PDF. Jamais retenté."""


class PageRenderError(ConversionError):
    """Données de page inexploitables (ex: matrice de texte malformée)."""

    def __init__(self, message: str, page_index: int):
        super().__init__(message)
        self.page_index = page_index
