
from __future__ import annotations
import os
import uuid
from pathlib import Path
from flask import Flask, request, url_for, render_template_string, abort, jsonify, send_file
from werkzeug.utils import secure_filename
from pdfhtml.pipeline import convert_pdf_bytes, output_filename, GENERIC_FAILURE
from pdfhtml.exceptions import ConversionError, InvalidInputError

app = Flask(__name__)
app.config['OUTPUT_DIR'] = Path(os.environ.get('PDFHTML_OUTPUT_DIR', 'outputs'))

OUTPUT_PREFIX = 'output_'
INVALID_FILE = "Please select a valid PDF file"

INDEX_TMPL = """
<!doctype html><html lang=en><meta charset=utf-8><title>PDF to HTML Converter</title><body>
<h1>PDF to HTML Converter</h1>
<form method=post action="{{ url_for('convert') }}" enctype=multipart/form-data>
  <input type=file name=document accept=".pdf,application/pdf">
  <button type=submit>Convert to HTML</button>
</form>
</body></html>
"""


def _output_path(output_id: str) -> Path:
    # Identifiant issu de l'URL : on refuse tout ce qui sort du dossier de sortie
    safe_id = secure_filename(output_id)
    if not safe_id or safe_id != output_id or not safe_id.startswith(OUTPUT_PREFIX):
        abort(404)
    file_path = Path(app.config['OUTPUT_DIR']) / safe_id
    if not file_path.is_file():
        abort(404)
    return file_path


def _source_name(output_id: str) -> str:
    """``output_<hex>_rapport.html`` → ``rapport.pdf``."""
    stem = output_id[len(OUTPUT_PREFIX):].split('_', 1)[-1]
    return stem[:-5] + '.pdf' if stem.endswith('.html') else stem


def _is_pdf_upload(storage) -> bool:
    return bool(storage.filename) and (
        storage.mimetype == 'application/pdf' or storage.filename.lower().endswith('.pdf'))


@app.get('/')
def index():
    return render_template_string(INDEX_TMPL)


# Route pour servir le HTML converti (aperçu)
@app.route('/view/<output_id>')
def view_html(output_id):
    return send_file(_output_path(output_id), mimetype='text/html')


# Route pour télécharger le HTML converti
@app.route('/download/<output_id>')
def download_html(output_id):
    file_path = _output_path(output_id)
    return send_file(file_path, mimetype='text/html', as_attachment=True,
                     download_name=output_filename(_source_name(output_id)))


@app.post('/convert')
def convert():
    pdf_file = request.files.get('document')
    if pdf_file is None or not _is_pdf_upload(pdf_file):
        return jsonify(success=False, error=INVALID_FILE), 400

    data = pdf_file.read()
    steps = []
    try:
        result = convert_pdf_bytes(data, pdf_file.filename, len(data),
                                   on_progress=lambda p: steps.append({'step': p.step, 'progress': p.progress}))
    except InvalidInputError as e:
        return jsonify(success=False, error=str(e)), 400
    except ConversionError:
        return jsonify(success=False, error=GENERIC_FAILURE), 500

    outputs_dir = Path(app.config['OUTPUT_DIR'])
    outputs_dir.mkdir(parents=True, exist_ok=True)
    stem = secure_filename(Path(pdf_file.filename).stem) or 'document'
    out_name = f"{OUTPUT_PREFIX}{uuid.uuid4().hex}_{stem}.html"
    (outputs_dir / out_name).write_text(result.html, encoding='utf-8')

    return jsonify(success=True,
                   output_id=out_name,
                   preview_url=url_for('view_html', output_id=out_name),
                   download_url=url_for('download_html', output_id=out_name),
                   progress=steps,
                   result=result.to_dict())


if __name__ == '__main__':
    # Lancement développement
    port = int(os.environ.get('PORT', '5000'))
    app.run(host='127.0.0.1', port=port, debug=True)
