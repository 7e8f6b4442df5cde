"""Chargement du PDF en deux temps.

1. tentative principale dans un thread de travail (analyse déportée)
2. en cas d'erreur quelconque, seconde tentative synchrone dans le thread courant

Chaque tentative reçoit sa propre copie du tampon d'origine : une analyse
peut s'approprier son entrée, la tentative suivante ne doit pas en hériter.
"""
from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence, Tuple

from .document import SourceDocument, open_pdf_stream
from .exceptions import InvalidInputError, LoadError

EMPTY_MESSAGE = "PDF file appears to be empty or corrupted."
NOT_PDF_MESSAGE = "The file is not a recognizable PDF document."
FAILED_MESSAGE = "Failed to load PDF document. Please check if the file is valid and try again."

# La norme tolère des octets parasites avant l'en-tête, dans la limite de 1024
HEADER_MARKER = b"%PDF"
HEADER_WINDOW = 1024

Opener = Callable[[bytearray], SourceDocument]


def _parse_in_worker(opener: Opener, buffer: bytearray) -> SourceDocument:
    # Le document n'est utilisé par le thread appelant qu'après la fin du worker
    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="pdf-parse") as pool:
        return pool.submit(opener, buffer).result()


def _parse_in_process(opener: Opener, buffer: bytearray) -> SourceDocument:
    return opener(buffer)


STRATEGIES: Tuple[Tuple[str, Callable[[Opener, bytearray], SourceDocument]], ...] = (
    ("worker", _parse_in_worker),
    ("in-process", _parse_in_process),
)


def validate_input(data: Optional[bytes]) -> None:
    """Rejette les octets vides ou sans en-tête PDF, avant tout traitement."""
    if not data:
        raise InvalidInputError(EMPTY_MESSAGE)
    if HEADER_MARKER not in bytes(data[:HEADER_WINDOW]):
        raise InvalidInputError(NOT_PDF_MESSAGE)


def load_document(data: bytes, use_worker: bool = True, opener: Opener = open_pdf_stream,
                  strategies: Optional[Sequence] = None) -> SourceDocument:
    """Analyse ``data`` et retourne le document. Lève ``InvalidInputError`` ou ``LoadError``."""
    validate_input(data)
    if strategies is None:
        strategies = STRATEGIES if use_worker else STRATEGIES[1:]

    attempts: List[BaseException] = []
    for name, parse in strategies:
        # Copie neuve et indépendante pour chaque tentative
        buffer = bytearray(data)
        try:
            doc = parse(opener, buffer)
        except Exception as e:
            print(f"[LOADER] Échec analyse ({name}): {e}")
            attempts.append(e)
            continue
        if attempts:
            print(f"[LOADER] Document chargé en mode dégradé ({name})")
        return doc

    raise LoadError(FAILED_MESSAGE, attempts) from (attempts[-1] if attempts else None)
