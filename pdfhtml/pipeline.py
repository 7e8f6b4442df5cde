"""Orchestrateur de conversion PDF → HTML positionné.
Centralise les étapes: chargement → rendu page par page → assemblage HTML.
Utilisable par programme (``convert_pdf_bytes``), en CLI (``main``) ou par le serveur.
"""
from __future__ import annotations
import os
import sys
from pathlib import Path
from typing import Callable, List, Optional

from .conversion_models import (
    ConversionMetadata, ConversionProgress, ConversionResult, RENDER_SCALE, format_file_size,
)
from .exceptions import ConversionError
from .html_builder import base_styles, build_html
from .loader import load_document
from .page_renderer import render_page

GENERIC_FAILURE = "Conversion failed. Please try again with a different PDF file."

ProgressCallback = Callable[[ConversionProgress], None]


class ConversionOptions:
    def __init__(self,
                 scale: float = RENDER_SCALE,
                 use_worker: bool = True,
                 title: Optional[str] = None):
        self.scale = scale
        self.use_worker = use_worker
        self.title = title


class PDFConverter:
    """Convertit des octets PDF en ``ConversionResult``.

    ``on_progress`` reçoit un ``ConversionProgress`` à chaque jalon ; ses
    exceptions sont journalisées et n'interrompent pas la conversion.
    ``progress`` / ``current_step`` reflètent le jalon en cours et sont
    remis à zéro à la fin, que la conversion réussisse ou non.
    """

    def __init__(self, on_progress: Optional[ProgressCallback] = None,
                 options: Optional[ConversionOptions] = None):
        self.on_progress = on_progress
        self.options = options or ConversionOptions()
        self.progress = 0
        self.current_step = ''

    def report_progress(self, step: str, progress: float) -> None:
        self.current_step = step
        self.progress = int(progress)
        if self.on_progress is None:
            return
        try:
            self.on_progress(ConversionProgress(step=step, progress=self.progress))
        except Exception as e:
            print(f"[WARN] Callback de progression en erreur ({step}): {e}")

    def convert(self, data: bytes, title: str, file_size: Optional[int] = None) -> ConversionResult:
        try:
            return self._convert(data, title, file_size)
        except ConversionError as e:
            print(f"[ERREUR] {e}")
            raise
        except Exception as e:
            print(f"[ERREUR] Conversion interrompue: {e!r}")
            raise ConversionError(GENERIC_FAILURE) from e
        finally:
            self.progress = 0
            self.current_step = ''

    def _convert(self, data: bytes, title: str, file_size: Optional[int]) -> ConversionResult:
        doc = load_document(data, use_worker=self.options.use_worker)
        with doc:
            self.report_progress('Loading PDF document', 10)
            page_count = doc.page_count
            metadata = ConversionMetadata(
                title=title,
                page_count=page_count,
                file_size=format_file_size(len(data) if file_size is None else file_size),
            )

            styles = base_styles()
            self.report_progress('Extracting pages', 20)

            fragments: List[str] = []
            for page_num in range(1, page_count + 1):
                self.report_progress(f'Processing page {page_num}', 20 + (page_num / page_count) * 60)
                page = doc.get_page(page_num)
                fragments.append(render_page(page, self.options.scale, page_num))

        self.report_progress('Finalizing HTML', 90)
        html = build_html(''.join(fragments), styles, title)
        self.report_progress('Conversion complete', 100)
        print(f"[PIPELINE] {title}: {page_count} page(s) converties")
        return ConversionResult(html=html, styles=styles, metadata=metadata)


def convert_pdf_bytes(data: bytes, display_name: str, byte_size: Optional[int] = None,
                      on_progress: Optional[ProgressCallback] = None,
                      options: Optional[ConversionOptions] = None) -> ConversionResult:
    """Point d'entrée programmatique : octets PDF → ``ConversionResult``."""
    return PDFConverter(on_progress, options).convert(data, display_name, byte_size)


def output_filename(source_name: str) -> str:
    """``rapport.pdf`` → ``rapport_converted.html``."""
    stem = source_name[:-4] if source_name.lower().endswith('.pdf') else source_name
    return f"{stem}_converted.html"


def convert_pdf_to_html(pdf_path: str | Path, output_dir: str | Path, options: Optional[ConversionOptions] = None,
                        force: bool = False, on_progress: Optional[ProgressCallback] = None) -> Path:
    """Convertit un fichier PDF et écrit le HTML dans ``output_dir``. Retourne son chemin."""
    options = options or ConversionOptions()
    pdf_path = Path(pdf_path)
    out_dir = Path(output_dir)
    if not pdf_path.is_file():
        raise FileNotFoundError(f"Fichier PDF introuvable: {pdf_path}")

    # Seul le fichier cible est remplacé : le dossier peut contenir d'autres conversions
    html_file = out_dir / output_filename(pdf_path.name)
    if html_file.exists() and not force:
        raise FileExistsError(f"Fichier {html_file} existe déjà (utilisez --force pour écraser)")
    out_dir.mkdir(parents=True, exist_ok=True)

    data = pdf_path.read_bytes()
    print("[PIPELINE] Conversion...")
    result = convert_pdf_bytes(data, options.title or pdf_path.name, len(data), on_progress, options)

    html_file.write_text(result.html, encoding='utf-8')
    print(f"[PIPELINE] Terminé: {html_file}")
    return html_file


def _parse_cli_args(argv: Optional[List[str]] = None):
    import argparse
    ap = argparse.ArgumentParser(description="Conversion PDF → HTML positionné (document autonome)")
    ap.add_argument('pdf', help='Chemin du PDF source')
    ap.add_argument('--out', default='html_output', help='Dossier de sortie')
    ap.add_argument('--scale', type=float, default=RENDER_SCALE, help='Facteur de zoom des pages (défaut 1.5)')
    ap.add_argument('--title', default=None, help='Titre du document HTML (défaut: nom du fichier)')
    ap.add_argument('--no-worker', action='store_true', help="Analyse directement dans le processus, sans thread de travail")
    ap.add_argument('--force', action='store_true', help='Écrase le fichier HTML cible s’il existe déjà')
    return ap.parse_args(argv)


def _print_progress(event: ConversionProgress) -> None:
    print(f"[{event.progress:3d}%] {event.step}")


def main(argv: Optional[List[str]] = None):
    args = _parse_cli_args(argv)
    opts = ConversionOptions(scale=args.scale, use_worker=not args.no_worker, title=args.title)
    try:
        html_path = convert_pdf_to_html(args.pdf, args.out, opts, force=args.force, on_progress=_print_progress)
    except (FileNotFoundError, FileExistsError, ConversionError) as e:
        print(f"[ERREUR] {e}")
        sys.exit(1)
    print(f"[PIPELINE] HTML généré: {os.fspath(html_path)}")


if __name__ == '__main__':
    main()
