#!/usr/bin/env python3
"""
CLI for Resume Studio: import, analyze, enhance, match and export resumes
from the terminal, or start the web app.
"""
import argparse
import json
import sys
from pathlib import Path

from config import configure_logging
from resume_model import RESUME_TEMPLATES


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def cmd_parse(args) -> int:
    from resume_parser import UploadError, import_resume
    from resume_utils import save_resume_data

    path = Path(args.file)
    try:
        resume = import_resume(path.name, path.read_bytes())
    except UploadError as e:
        print(f"Could not import {path}: {e}", file=sys.stderr)
        return 1

    if args.out:
        saved = save_resume_data(Path(args.out), resume)
        print(f"Resume data saved to: {saved}")
    else:
        _print_json(resume.to_dict())
    return 0


def cmd_analyze(args) -> int:
    from resume_analyzer import analyze_resume
    from resume_utils import load_resume_data

    _print_json(analyze_resume(load_resume_data(Path(args.resume))))
    return 0


def cmd_enhance(args) -> int:
    from resume_enhancer import generate_enhancements, normalize_enhancement_type
    from resume_utils import load_resume_data

    enhancement_type = normalize_enhancement_type(args.type)
    suggestions = generate_enhancements(load_resume_data(Path(args.resume)), enhancement_type)
    _print_json({"enhancementType": enhancement_type, "suggestions": suggestions})
    return 0


def cmd_match(args) -> int:
    from job_match import analyze_job_match
    from resume_utils import load_resume_data

    job_description = Path(args.job).read_text(encoding="utf-8")
    if not job_description.strip():
        print("Job description file is empty", file=sys.stderr)
        return 1
    _print_json(analyze_job_match(load_resume_data(Path(args.resume)), job_description))
    return 0


def cmd_export(args) -> int:
    from config import get_settings
    from pdf_generator import PDFGenerator, pdf_filename
    from resume_utils import load_resume_data

    resume = load_resume_data(Path(args.resume))
    if args.template:
        resume.selectedTemplate = args.template
    out = Path(args.out) if args.out else Path(get_settings().output_folder) / pdf_filename(resume)

    if not PDFGenerator(resume.selectedTemplate).generate_resume_pdf(resume, out):
        print("PDF generation failed", file=sys.stderr)
        return 1
    print(f"PDF saved to: {out}")
    return 0


def cmd_serve(args) -> int:
    from web_app import run

    run(host=args.host, port=args.port, debug=args.debug)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resume-studio",
        description="Resume Studio: AI-assisted resume builder",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  resume-studio parse my_resume.pdf --out resume.json
  resume-studio analyze resume.json
  resume-studio enhance resume.json --type skills
  resume-studio match resume.json --job job.txt
  resume-studio export resume.json --template classic
  resume-studio serve --port 5000
        """
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: LOG_LEVEL env or INFO)"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("parse", help="Import a PDF/DOCX/TXT resume into Resume Data JSON")
    p.add_argument("file", help="Resume file to import")
    p.add_argument("--out", help="Write Resume Data to this JSON/YAML file instead of stdout")
    p.set_defaults(func=cmd_parse)

    p = sub.add_parser("analyze", help="Score a resume and list issues and strengths")
    p.add_argument("resume", help="Resume Data file (JSON or YAML)")
    p.set_defaults(func=cmd_analyze)

    p = sub.add_parser("enhance", help="Suggest improvements for a resume")
    p.add_argument("resume", help="Resume Data file (JSON or YAML)")
    p.add_argument(
        "--type",
        default="comprehensive",
        help="comprehensive, skills, summary, experience or keywords"
    )
    p.set_defaults(func=cmd_enhance)

    p = sub.add_parser("match", help="Compare a resume with a job description")
    p.add_argument("resume", help="Resume Data file (JSON or YAML)")
    p.add_argument("--job", required=True, help="Text file with the job description")
    p.set_defaults(func=cmd_match)

    p = sub.add_parser("export", help="Render a resume to PDF")
    p.add_argument("resume", help="Resume Data file (JSON or YAML)")
    p.add_argument("--out", help="Output PDF path (default: OUTPUT_FOLDER/<Name>_<template>.pdf)")
    p.add_argument("--template", choices=RESUME_TEMPLATES, help="Override the selected template")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("serve", help="Start the web app")
    p.add_argument("--host", default="0.0.0.0")
    p.add_argument("--port", type=int, default=5000)
    p.add_argument("--debug", action="store_true")
    p.set_defaults(func=cmd_serve)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        return args.func(args)
    except FileNotFoundError as e:
        print(f"File not found: {e.filename}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130


if __name__ == "__main__":
    sys.exit(main())
