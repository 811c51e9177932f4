import argparse
import logging
import sys
from pathlib import Path

from . import config
from .config import OrganizerSettings
from .core import ImageOrganizerApp
from .exceptions import ConfigurationError
from .reporting import ReportGenerator


def setup_logging(verbose: bool):
    """Console logging; the per-action log file is handled by ActionLog."""
    log_level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    # Silence chatty libraries
    logging.getLogger("exifread").setLevel(logging.ERROR)
    logging.getLogger("PIL").setLevel(logging.WARNING)


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Image Organizer: rename images by capture date and remove duplicates")

    p.add_argument("root", type=Path, nargs="?", default=Path.cwd(), help="Directory to organize (default: cwd)")

    p.add_argument("--organized-folder", default=config.DEFAULT_ORGANIZED_FOLDER,
                   help="Folder (under root) for full-size images")
    p.add_argument("--thumbnail-folder", default=config.DEFAULT_THUMBNAIL_FOLDER,
                   help="Folder (under root) for small images")
    p.add_argument("--thumbnail-size", type=int, default=config.THUMBNAIL_MAX_DIMENSION,
                   help="Images narrower AND shorter than this many pixels count as thumbnails")
    p.add_argument("--log-file", type=Path, default=Path(config.DEFAULT_LOG_FILE),
                   help="Action log (relative paths are placed under root)")
    p.add_argument("--overwrite-log", action="store_true", help="Truncate the action log instead of appending")
    p.add_argument("--timezone", default=config.DEFAULT_TIMEZONE,
                   help="Time zone for Unix-timestamp filenames, e.g. Europe/London")
    p.add_argument("--dry-run", action="store_true",
                   help="Simulate actions without modifying disk (a log file under root is not written)")
    p.add_argument("--confirm", action="store_true", help="Ask before every move or delete")
    p.add_argument("--report-csv", type=Path, default=None, help="Write a CSV of every decision")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.verbose)

    settings = OrganizerSettings(
        root=args.root.resolve(),
        organized_folder=args.organized_folder,
        thumbnail_folder=args.thumbnail_folder,
        log_file=args.log_file,
        append_log=not args.overwrite_log,
        timezone=args.timezone,
        dry_run=args.dry_run,
        confirm=args.confirm,
        thumbnail_max_dimension=args.thumbnail_size,
    )

    logging.info("=== Image Organizer Started ===")
    logging.info(f"Root: {settings.root}")

    app = ImageOrganizerApp(settings)
    try:
        summary = app.organize()
    except ConfigurationError as e:
        logging.error(f"Configuration error: {e}")
        sys.exit(2)
    except KeyboardInterrupt:
        logging.warning("Operation cancelled by user.")
        sys.exit(1)
    except Exception:
        logging.exception("Fatal error during organization.")
        sys.exit(1)

    if args.report_csv:
        ReportGenerator().write_decisions_csv(summary.decisions, args.report_csv)

    logging.info(summary.describe())


if __name__ == "__main__":
    main()
