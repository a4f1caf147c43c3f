#!/usr/bin/env python3
"""
Resume Studio Web App - Flask Backend
Routes behind the resume editor: analysis, enhancement, job match, PDF
parsing, resume import and PDF export
"""

import io
import json
import logging
from datetime import datetime, timezone

from flask import Flask, Response, jsonify, render_template, request, send_file
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge

from config import configure_logging, get_settings
from job_match import analyze_job_match
from llm_manager import get_llm
from pdf_generator import pdf_filename, render_pdf_bytes
from resume_analyzer import analyze_resume
from resume_builder_templates import list_templates, render_html, suggest_template
from resume_enhancer import (
    apply_job_optimizations,
    apply_suggestion,
    generate_enhancements,
    normalize_enhancement_type,
    quick_enhance,
)
from resume_model import RESUME_TEMPLATES, coerce_resume, empty_resume, replace_with_extracted
from resume_parser import PDF_MIME, UploadError, import_resume, parse_pdf_upload

logger = logging.getLogger("WebApp")

settings = get_settings()

app = Flask(__name__)
CORS(app)

# Configuration
# Multipart overhead on top of the upload limit; the routes enforce the limit itself
app.config['MAX_CONTENT_LENGTH'] = settings.max_upload_bytes + 1024 * 1024
app.config['MAX_UPLOAD_BYTES'] = settings.max_upload_bytes

NO_CACHE = {'Cache-Control': 'no-cache'}


def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def _too_large_message() -> str:
    mb = app.config['MAX_UPLOAD_BYTES'] // (1024 * 1024)
    return f'File too large. Please upload a file smaller than {mb}MB.'


@app.errorhandler(RequestEntityTooLarge)
def handle_too_large(e):
    return jsonify({'error': _too_large_message()}), 400


@app.route('/')
def index():
    """Render main page"""
    llm = get_llm()
    return render_template('index.html', templates=list_templates(), provider=llm.provider)


@app.route('/api/health', methods=['GET'])
def health_check():
    """Health check endpoint"""
    llm = get_llm()
    return jsonify({
        'status': 'ok',
        'llm_available': llm.available,
        'llm_provider': llm.provider,
        'templates': list(RESUME_TEMPLATES),
        'max_upload_mb': app.config['MAX_UPLOAD_BYTES'] // (1024 * 1024),
    })


@app.route('/api/templates', methods=['GET'])
def templates():
    """Available templates, plus a suggestion when guided-setup answers are given"""
    return jsonify({
        'templates': list_templates(),
        'suggested': suggest_template(request.args.get('industry'), request.args.get('experience')),
    })


@app.route('/api/analyze-resume', methods=['POST'])
def analyze_resume_route():
    try:
        resume = coerce_resume(_payload().get('resumeData'))
        if resume is None:
            return jsonify({'error': 'Resume data is required'}), 400

        return jsonify(analyze_resume(resume, llm=get_llm()))

    except Exception:
        logger.exception("Resume analysis error")
        return jsonify({'error': 'Failed to analyze resume'}), 500


@app.route('/api/enhance-resume', methods=['POST'])
def enhance_resume_route():
    try:
        payload = _payload()
        resume = coerce_resume(payload.get('resumeData'))
        if resume is None:
            return jsonify({'error': 'Resume data is required'}), 400

        enhancement_type = normalize_enhancement_type(payload.get('enhancementType'))
        suggestions = generate_enhancements(resume, enhancement_type, llm=get_llm())
        return jsonify({
            'success': True,
            'suggestions': suggestions,
            'enhancementType': enhancement_type,
            'timestamp': _timestamp(),
        })

    except Exception as e:
        logger.exception("Resume enhancement error")
        return jsonify({
            'error': 'Failed to generate resume enhancements',
            'details': str(e),
        }), 500


@app.route('/api/job-match', methods=['POST'])
def job_match_route():
    try:
        payload = _payload()
        resume = coerce_resume(payload.get('resumeData'))
        job_description = payload.get('jobDescription')
        if resume is None or not isinstance(job_description, str) or not job_description.strip():
            return jsonify({'error': 'Resume data and job description are required'}), 400

        return jsonify(analyze_job_match(resume, job_description, llm=get_llm()))

    except Exception:
        logger.exception("Job match analysis error")
        return jsonify({'error': 'Failed to analyze job match'}), 500


@app.route('/api/parse-pdf', methods=['POST'])
def parse_pdf_route():
    try:
        upload = request.files.get('file')
        if not upload or not upload.filename:
            return jsonify({'error': 'No file provided'}), 400, NO_CACHE

        is_pdf = upload.mimetype == PDF_MIME or upload.filename.lower().endswith('.pdf')
        if not is_pdf:
            return jsonify({'error': 'Invalid file type. Please upload a PDF file.'}), 400, NO_CACHE

        data = upload.read()
        if len(data) > app.config['MAX_UPLOAD_BYTES']:
            return jsonify({'error': _too_large_message()}), 400, NO_CACHE

        try:
            result = parse_pdf_upload(upload.filename, data, llm=get_llm())
        except UploadError as e:
            logger.warning(f"PDF parsing failed: {e}")
            return jsonify({
                'error': (
                    'Unable to parse PDF. The file may be image-based or password-protected. '
                    'Please try uploading a DOCX or TXT file instead.'
                ),
                'details': str(e),
            }), 400, NO_CACHE

        logger.info(f"PDF parse successful, text length: {len(result['text'])}")
        return jsonify(result), 200, NO_CACHE

    except RequestEntityTooLarge:
        raise
    except Exception as e:
        logger.exception("PDF parsing API error")
        return jsonify({
            'error': (
                'PDF parsing service encountered an error. '
                'Please try uploading a DOCX or TXT file instead.'
            ),
            'details': str(e),
        }), 500, NO_CACHE


@app.route('/api/import-resume', methods=['POST'])
def import_resume_route():
    """Import a PDF/DOCX/TXT resume through the full parsing fallback chain"""
    try:
        upload = request.files.get('file')
        if not upload or not upload.filename:
            return jsonify({'success': False, 'error': 'No file provided'}), 400

        current = empty_resume()
        raw_current = request.form.get('resumeData')
        if raw_current:
            try:
                current = coerce_resume(json.loads(raw_current)) or current
            except ValueError:
                logger.debug("Ignoring malformed resumeData form field")

        extracted = import_resume(
            upload.filename,
            upload.read(),
            content_type=upload.mimetype,
            llm=get_llm(),
            max_bytes=app.config['MAX_UPLOAD_BYTES'],
        )
        resume = replace_with_extracted(current, extracted)
        return jsonify({'success': True, 'resumeData': resume.to_dict()})

    except UploadError as e:
        return jsonify({'success': False, 'error': str(e)}), 400
    except RequestEntityTooLarge:
        raise
    except Exception as e:
        logger.exception("Resume import failed")
        return jsonify({
            'success': False,
            'error': 'Failed to process file. Please try again or enter your information manually.',
            'details': str(e),
        }), 500


@app.route('/api/quick-enhance', methods=['POST'])
def quick_enhance_route():
    try:
        resume = coerce_resume(_payload().get('resumeData'))
        if resume is None:
            return jsonify({'success': False, 'error': 'Resume data is required'}), 400

        enhanced = quick_enhance(resume, llm=get_llm())
        return jsonify({'success': True, 'resumeData': enhanced.to_dict()})

    except Exception as e:
        logger.exception("Quick enhance failed")
        return jsonify({'success': False, 'error': 'Failed to enhance resume', 'details': str(e)}), 500


@app.route('/api/apply-suggestion', methods=['POST'])
def apply_suggestion_route():
    payload = _payload()
    resume = coerce_resume(payload.get('resumeData'))
    if resume is None:
        return jsonify({'success': False, 'error': 'Resume data is required'}), 400

    suggestion = payload.get('suggestion')
    applicable = payload.get('applicableData')
    if applicable is None and isinstance(suggestion, dict):
        applicable = suggestion.get('applicableData')

    try:
        updated = apply_suggestion(resume, applicable)
    except ValueError as e:
        return jsonify({'success': False, 'error': str(e)}), 400

    return jsonify({'success': True, 'resumeData': updated.to_dict()})


@app.route('/api/apply-job-optimizations', methods=['POST'])
def apply_job_optimizations_route():
    payload = _payload()
    resume = coerce_resume(payload.get('resumeData'))
    if resume is None:
        return jsonify({'success': False, 'error': 'Resume data is required'}), 400

    add = payload.get('addSkills')
    updated = apply_job_optimizations(
        resume,
        add_skills_list=[str(s) for s in add] if isinstance(add, list) else None,
        job_title=str(payload.get('jobTitle') or ''),
        enhance_summary=bool(payload.get('enhanceSummary')),
    )
    return jsonify({'success': True, 'resumeData': updated.to_dict()})


@app.route('/api/preview', methods=['POST'])
def preview_route():
    """HTML preview of the resume in its selected template"""
    payload = _payload()
    resume = coerce_resume(payload.get('resumeData'))
    if resume is None:
        return jsonify({'error': 'Resume data is required'}), 400
    return Response(render_html(resume, payload.get('template')), mimetype='text/html')


@app.route('/api/export-pdf', methods=['POST'])
def export_pdf_route():
    payload = _payload()
    resume = coerce_resume(payload.get('resumeData'))
    if resume is None:
        return jsonify({'error': 'Resume data is required'}), 400

    template = payload.get('template')
    if template in RESUME_TEMPLATES:
        resume.selectedTemplate = template

    pdf_bytes = render_pdf_bytes(resume)
    if pdf_bytes is None:
        return jsonify({'error': 'Failed to generate PDF'}), 500

    return send_file(
        io.BytesIO(pdf_bytes),
        mimetype='application/pdf',
        as_attachment=True,
        download_name=pdf_filename(resume),
    )


def run(host: str = '0.0.0.0', port: int = 5000, debug: bool = False) -> None:
    configure_logging()
    logger.info(f"Resume Studio starting on http://{host}:{port}")
    app.run(debug=debug, host=host, port=port)


if __name__ == '__main__':
    run(debug=True)
