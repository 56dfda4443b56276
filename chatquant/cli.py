"""
CLI interface for chatquant
"""

import sys
import json
import logging
import argparse

from . import config
from .exceptions import FormatError
from .parsers import PLATFORMS, validate_export
from .pipeline import run_full_analysis

logger = logging.getLogger(__name__)


def analyze_files(paths, platform=None, output_file=None) -> dict:
    """
    Analyze one conversation export (several files for multi-part exports).

    Args:
        paths: Export file paths
        platform: Force a platform instead of auto-detecting it
        output_file: Optional output JSON file

    Returns:
        Report dict with "conversation" and "analysis" keys
    """
    logger.info(f"Analyzing: {', '.join(str(p) for p in paths)}")

    valid, msg = config.validate_config()
    if not valid:
        logger.error(f"Configuration error: {msg}")
        sys.exit(1)

    try:
        report = run_full_analysis(paths, platform=platform)
    except FormatError as e:
        logger.error(f"Failed to decode export: {e}")
        sys.exit(1)
    except OSError as e:
        logger.error(f"Failed to read export: {e}")
        sys.exit(1)

    if output_file:
        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(report, f, indent=2, ensure_ascii=False)
        logger.info(f"Report saved to {output_file}")
    else:
        print(json.dumps(report, indent=2, ensure_ascii=False))

    return report


def validate_files(paths, platform=None) -> bool:
    all_valid = True
    for path in paths:
        valid, msg = validate_export(path, platform)
        print(f"{path}: Valid: {valid} - {msg}")
        all_valid = all_valid and valid
    return all_valid


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="chatquant - quantitative analysis of chat exports"
    )

    parser.add_argument(
        "command",
        choices=["analyze", "validate"],
        help="Command to run"
    )

    parser.add_argument(
        "paths",
        nargs="+",
        help="Export file(s); several files are merged into one conversation"
    )

    parser.add_argument(
        "--platform",
        choices=PLATFORMS,
        help="Export platform (auto-detected when omitted)"
    )

    parser.add_argument(
        "-o", "--output",
        dest="output_file",
        help="Output JSON file path"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose logging"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.command == "validate":
        sys.exit(0 if validate_files(args.paths, args.platform) else 1)

    report = analyze_files(args.paths, args.platform, args.output_file)
    conversation = report["conversation"]
    logger.info(
        f"Analysis complete: {conversation['total_messages']} messages, "
        f"{len(conversation['participants'])} participants"
    )


if __name__ == "__main__":
    main()
