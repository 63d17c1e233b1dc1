"""idlc-doc - syntax highlighting for the IDL compiler documentation.

Post-processes the HTML pages Doxygen writes: annotated fragments become
language-tagged code blocks, the blocks are highlighted with Pygments
(including the custom ``idl`` and ``cmake-ext`` grammars), and each
highlighted block gets a copy-to-clipboard button.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

__version__ = "0.1.0"


def _setup_logging(log_dir: Path | None = None, *, to_file: bool = True) -> None:
    """Configure logging to both console and rotating file."""
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if to_file:
        log_dir = log_dir or Path("logs")
        log_dir.mkdir(parents=True, exist_ok=True)
        log_file = log_dir / f"idlcdoc.{os.getpid()}.log"

        # File handler - detailed logging with rotation (10MB, keep 5 backups)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    # Console handler - less verbose
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_formatter = logging.Formatter("%(levelname)s: %(message)s")
    console_handler.setFormatter(console_formatter)
    root_logger.addHandler(console_handler)

    if to_file:
        logging.debug("Logging configured. Log file: %s", log_file.absolute())
