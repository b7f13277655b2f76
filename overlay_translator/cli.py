"""
Command-line entry point.

Usage:
    overlay-translate report.pdf scan.png -l fr -o out.zip
    overlay-translate report.pdf --ocr -p 1-3 -s openai --api-key sk-...
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from overlay_translator import __version__
from overlay_translator.app import TranslatorApp
from overlay_translator.config import LANGUAGES, EngineConfig
from overlay_translator.core.errors import ExportFailure
from overlay_translator.core.models import DocumentStatus
from overlay_translator.services import SUPPORTED_SERVICES
from overlay_translator.utils.helpers import format_file_size, get_output_filename

logger = logging.getLogger(__name__)

DEFAULT_ZIP_NAME = "translated_files.zip"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="overlay-translate",
        description="Translate PDFs and images in place, keeping the page layout",
    )

    parser.add_argument(
        "files",
        nargs="+",
        metavar="FILE",
        help="PDF or image files to translate"
    )

    parser.add_argument(
        "--output", "-o",
        help=f"Output file (default: <name>_translated.pdf for one input, {DEFAULT_ZIP_NAME} otherwise)"
    )

    parser.add_argument(
        "--lang", "-l",
        default="es",
        help="Target language code (default: es; e.g. " + ", ".join(sorted(LANGUAGES)) + ")"
    )

    parser.add_argument(
        "--service", "-s",
        default="free",
        choices=sorted(SUPPORTED_SERVICES),
        help="Translation service (default: free)"
    )

    parser.add_argument(
        "--api-key",
        help="API key for openai/gemini/google (default: from environment)"
    )

    parser.add_argument(
        "--ocr",
        action="store_true",
        help="Use OCR instead of the embedded text layer"
    )

    parser.add_argument(
        "--pages", "-p",
        default="",
        help="Pages to translate, e.g. 1-3,5 (default: all)"
    )

    parser.add_argument(
        "--scale",
        type=float,
        default=1.5,
        help="Render scale (default: 1.5)"
    )

    parser.add_argument(
        "--ocr-lang",
        default="eng",
        help="Tesseract language (default: eng)"
    )

    parser.add_argument(
        "--font",
        help="TrueType font used for replacement text"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = EngineConfig(
        scale=args.scale,
        font_path=args.font,
        ocr_language=args.ocr_lang,
        target_lang=args.lang,
        provider=args.service,
        api_key=args.api_key,
    )
    app = TranslatorApp(config)

    for name in args.files:
        path = Path(name)
        if not path.is_file():
            logger.error(f"File not found: {path}")
            continue
        app.add_path(path, use_ocr=args.ocr, page_range=args.pages)

    if not app.documents:
        return 1

    app.process_queue()
    app.translate_all()

    translated = [doc for doc in app.documents if doc.status == DocumentStatus.TRANSLATED]
    if not translated:
        logger.error("No document was translated")
        return 1

    try:
        if len(app.documents) == 1:
            doc = translated[0]
            output = Path(args.output or get_output_filename(doc.filename))
            data = app.export_document(doc.id)
        else:
            output = Path(args.output or DEFAULT_ZIP_NAME)
            data = app.export_all()
    except ExportFailure as e:
        logger.error(f"Export failed: {e}")
        return 1

    output.write_bytes(data)
    print(f"[OK] Saved {output} ({format_file_size(len(data))})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
