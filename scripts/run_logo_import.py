"""
Run the website logo import from CLI.
"""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import os
import signal
import sys
import threading

from logo_importer.config import get_importer_settings, get_optional_str_env
from logo_importer.connectors import StoryblokAuthError
from logo_importer.logging_utils import configure_logging
from logo_importer.scraping import BatchCancelledError
from logo_importer.services import ImportRequest, InputSourceError, LogoImportService

logger = logging.getLogger(__name__)

PROGRESS_LABELS = {
    "scrape": "sites scraped",
    "reconcile": "Stories saved",
}


def _prompt(label: str, *, default: str | None = None, secret: bool = False) -> str:
    if not sys.stdin.isatty():
        return default or ""
    suffix = f" ({default})" if default else ""
    reader = getpass.getpass if secret else input
    answer = reader(f"{label}{suffix}: ").strip()
    return answer or (default or "")


def _print_progress(phase: str, completed: int, total: int) -> None:
    end = "\n" if completed >= total else ""
    sys.stdout.write(f"\r{completed} of {total} {PROGRESS_LABELS.get(phase, phase)}.{end}")
    sys.stdout.flush()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Scrape website logos and import them into Storyblok.")
    parser.add_argument("--oauth-token", default=get_optional_str_env("STORYBLOK_OAUTH_TOKEN"))
    parser.add_argument("--input-file", default=None, help="CSV with name,url columns.")
    parser.add_argument("--space-id", default=get_optional_str_env("STORYBLOK_SPACE_ID"))
    parser.add_argument(
        "--folder-id",
        default=get_optional_str_env("STORYBLOK_FOLDER_ID"),
        help="Optional parent folder story id.",
    )
    parser.add_argument("--concurrency", type=int, default=None)
    parser.add_argument("--data-dir", default=None, help="Overrides LOGO_IMPORT_DATA_DIR.")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(os.getenv("LOG_LEVEL"))
    if args.data_dir:
        os.environ["LOGO_IMPORT_DATA_DIR"] = args.data_dir
        get_importer_settings.cache_clear()
    settings = get_importer_settings()

    oauth_token = args.oauth_token or _prompt("Please enter your OAUTH Token", secret=True)
    input_file = args.input_file or _prompt(
        "Please enter the input file path", default=settings.input_file
    )
    space_id = args.space_id or _prompt("Please enter the Space Id")
    folder_id = args.folder_id or _prompt("Please enter the Folder Id") or None
    if not oauth_token or not space_id:
        print("An OAuth token and a space id are required.", file=sys.stderr)
        return 1

    cancel_event = threading.Event()
    signal.signal(signal.SIGINT, lambda *_: cancel_event.set())

    service = LogoImportService(
        settings=settings,
        on_progress=_print_progress,
        cancel_event=cancel_event,
    )
    try:
        report = service.run(
            ImportRequest(
                oauth_token=oauth_token,
                space_id=space_id,
                folder_id=folder_id,
                input_file=input_file,
                concurrency_limit=args.concurrency,
            )
        )
    except (InputSourceError, StoryblokAuthError) as exc:
        print(f"Import failed: {exc}", file=sys.stderr)
        return 1
    except BatchCancelledError as exc:
        print(f"\n{exc} The cache was not written.", file=sys.stderr)
        return 1

    payload = {
        "websites": report.websites,
        "logos_found": report.logos_found,
        "from_cache": report.from_cache,
        "created": report.reconcile.created,
        "updated": report.reconcile.updated,
        "failed": len(report.reconcile.failures),
        "cancelled": report.reconcile.cancelled,
        "failure_log": str(settings.log_path),
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
