# utils/logging_config.py

import logging
import logging.handlers
import sys
from pathlib import Path

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'


def setup_logging(level: str = "WARNING", log_dir: str = "") -> logging.Logger:
    """
    Setup application logging

    Console output goes to stderr so it never mixes with the progress
    lines on stdout. When log_dir is given a rotating DEBUG log file is
    written there as well.
    """
    console_level = getattr(logging, level.upper(), logging.WARNING)

    root = logging.getLogger()
    root.setLevel(logging.DEBUG if log_dir else console_level)

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    # Pillow logs every decoded chunk at DEBUG
    logging.getLogger('PIL').setLevel(logging.INFO)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(console_handler)

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        # File handler (rotating)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path / "image_dedup.log",
            maxBytes=10*1024*1024,  # 10 MB
            backupCount=5
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
        root.addHandler(file_handler)

    return root
