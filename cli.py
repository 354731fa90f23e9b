# cli.py

import argparse
import logging
import sys

from config import SystemConfig
from core.coordinator import DedupCoordinator, DedupSummary
from core.exceptions import DedupError
from core.image_hasher import HASH_FUNCTIONS, ImageHasher
from utils.console_reporter import PROGRESS_STYLES, ConsoleReporter
from utils.file_utils import list_directory_files
from utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def dedup_command(args, config: SystemConfig, stream=None) -> DedupSummary:
    """Classify every image in a directory and optionally delete inferior copies"""
    dedup = config.dedup
    logger.info(f"Scanning for duplicates in: {args.directory}")

    image_paths = list_directory_files(args.directory)
    logger.info(f"Found {len(image_paths)} files")

    hasher = ImageHasher(
        algorithm=dedup.hash_algorithm,
        hash_size=dedup.hash_size,
        max_image_pixels=dedup.max_image_pixels
    )
    coordinator = DedupCoordinator(
        hasher,
        hash_threshold=dedup.hash_threshold,
        delete_enabled=dedup.delete,
        n_workers=config.n_workers
    )

    reporter = ConsoleReporter(
        stream=stream,
        color=config.color,
        progress_style=config.progress_style
    )
    coordinator.add_listener(reporter.on_event)

    try:
        summary = coordinator.run(image_paths)
    finally:
        reporter.close()

    reporter.print_summary(summary)
    return summary


def apply_overrides(config: SystemConfig, args) -> SystemConfig:
    """Command line flags take precedence over the config file"""
    if args.delete:
        config.dedup.delete = True
    if args.threshold is not None:
        config.dedup.hash_threshold = args.threshold
    if args.algorithm is not None:
        config.dedup.hash_algorithm = args.algorithm
    if args.workers is not None:
        config.n_workers = args.workers
    if args.no_color:
        config.color = False
    if args.progress is not None:
        config.progress_style = args.progress
    if args.log_level is not None:
        config.log_level = args.log_level
    return config


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1"""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: '{value}'")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="image-dedup",
        description="Classify images in a directory as duplicate, similar or unique"
    )
    parser.add_argument('directory', help='Directory to scan (not recursive)')
    parser.add_argument('-d', '--delete', action='store_true',
                        help='Delete the inferior file of every matched pair')
    parser.add_argument('-t', '--threshold', type=int, default=None,
                        help='Max differing hash bits for similar images (default: 5)')
    parser.add_argument('-a', '--algorithm', choices=sorted(HASH_FUNCTIONS), default=None,
                        help='Perceptual hash algorithm (default: phash)')
    parser.add_argument('-w', '--workers', type=positive_int, default=None,
                        help='Number of hashing threads (default: CPU count)')
    parser.add_argument('-c', '--config', default='config.yaml',
                        help='YAML configuration file')
    parser.add_argument('--no-color', action='store_true',
                        help='Disable ANSI colors')
    parser.add_argument('--progress', choices=PROGRESS_STYLES, default=None,
                        help='Progress display style')
    parser.add_argument('--log-level', default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Console log level')
    return parser


def main_cli(argv=None) -> int:
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = apply_overrides(SystemConfig.load(args.config), args)
    setup_logging(config.log_level, config.log_dir)

    try:
        dedup_command(args, config)
    except DedupError as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main_cli())
