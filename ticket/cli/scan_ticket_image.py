#!/usr/bin/env python3
"""
Scan a movie ticket image and print the extracted fields as JSON.

Usage:
    ticket-scan <image> [--provider NAME] [--user-id N] [--ocr] [--log]
    ticket-scan --list-providers
"""
import argparse
import contextlib
import json
import logging
import sys
from pathlib import Path

from config.config_manager import ScannerConfig

from ..errors import ConfigurationError, TicketScanError
from ..orchestration import ScanContext
from ..pipeline import TicketParser, build_default_extractors
from ..ocr import OcrService
from .logger_utils import setup_output_capture

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ticket-scan",
        description="Extract structured fields from a movie ticket photo."
    )
    parser.add_argument("image", nargs="?", help="Path to the ticket image")
    parser.add_argument("--provider", help="Vision provider to use instead of the active one")
    parser.add_argument("--user-id", default="cli", help="Owner recorded on the scan outcome")
    parser.add_argument("--ocr", action="store_true",
                        help="Skip the vision providers and run the local OCR pipeline")
    parser.add_argument("--list-providers", action="store_true",
                        help="Show configured providers and their connectivity, then exit")
    parser.add_argument("--config", help="Path to a JSON or YAML scanner config file")
    parser.add_argument("--log", nargs="?", const=True, default=None, metavar="DIR",
                        help="Also write terminal output to <image>_scan_output.txt")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def list_providers(context: ScanContext) -> int:
    statuses = context.scanner.get_providers_status()
    if not statuses:
        print("No vision providers configured. Set OPENAI_API_KEY, ANTHROPIC_API_KEY, "
              "GEMINI_API_KEY or AZURE_API_KEY/AZURE_ENDPOINT.")
        return 1
    print(json.dumps(statuses, indent=2))
    return 0


def scan_with_ocr(context: ScanContext, image_path: str, user_id) -> int:
    parser = context.fallback_parser or TicketParser(
        OcrService(tesseract_cmd=context.config.tesseract_cmd,
                   max_size=tuple(context.config.ocr_max_size)),
        build_default_extractors(context.catalog_matcher)
    )
    outcome = parser.parse_ticket(image_path, user_id)
    if outcome is None:
        print("❌ The scanned image does not appear to be a movie ticket")
        return 1
    print(json.dumps(outcome.to_dict(), indent=2, default=str))
    return 0 if outcome.is_valid else 2


def scan_image(context: ScanContext, image_path: str, user_id, provider_name=None) -> int:
    outcome = context.scanner.scan(user_id, image_path, provider_name=provider_name)
    print(json.dumps(outcome.to_dict(), indent=2, default=str))
    if outcome.message:
        print(f"\n[!] {outcome.message}")
    return 0 if outcome.is_valid else 2


def run(args) -> int:
    config = ScannerConfig(config_path=args.config) if args.config else ScannerConfig()
    context = ScanContext(config)

    if args.list_providers:
        return list_providers(context)

    p = Path(args.image)
    if not p.exists():
        print(f"❌ Error: Image file not found: {args.image}")
        return 1

    print("\n" + "=" * 70)
    print(f"SCANNING TICKET IMAGE: {p.name}")
    print("=" * 70 + "\n")

    try:
        if args.ocr:
            return scan_with_ocr(context, str(p), args.user_id)
        return scan_image(context, str(p), args.user_id, provider_name=args.provider)
    except ConfigurationError as e:
        print(f"❌ Configuration error: {e}")
        return 1
    except TicketScanError as e:
        print(f"❌ Scan failed: {e}")
        return 1


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.image and not args.list_providers:
        parser.error("an image path is required unless --list-providers is given")

    if args.log and args.image:
        log_dir = None if args.log is True else args.log
        capture = setup_output_capture(args.image, log_dir)
    else:
        capture = contextlib.nullcontext()

    with capture:
        # Configured inside the capture so log records reach the tee
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        return run(args)


if __name__ == "__main__":
    sys.exit(main())
