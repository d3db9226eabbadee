"""
Logging utilities for linkleaf.
Contains helper functions for consistent logging across modules.
"""
import logging
import os
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

logger = logging.getLogger(__name__)

CONSOLE_HANDLER_NAME = 'linkleaf-console'
FILE_HANDLER_NAME = 'linkleaf-file'
LOG_FILE_NAME = 'linkleaf.log'


def log_feed_loaded(logger: logging.Logger, path: str, link_count: int) -> None:
    """
    Log a successful feed load.

    Args:
        logger: Logger instance to use
        path: Feed file that was read
        link_count: Number of links in the feed
    """
    logger.info(f"Loaded feed from {path}: {link_count} links")


def log_feed_saved(logger: logging.Logger, path: str, link_count: int, size: int) -> None:
    """
    Log a successful feed save.

    Args:
        logger: Logger instance to use
        path: Feed file that was written
        link_count: Number of links written
        size: Size of the encoded feed in bytes
    """
    logger.info(f"Saved feed to {path}: {link_count} links ({size} bytes)")


def log_link_added(logger: logging.Logger, link_id: str, title: str, derived: bool) -> None:
    """
    Log a link being prepended to a feed.

    Args:
        logger: Logger instance to use
        link_id: Identifier assigned to the link
        title: Link title
        derived: Whether the id was derived from url and date
    """
    source = "derived" if derived else "explicit"
    logger.info(f"Added link [{link_id}] ({source} id): {title}")


def log_text_import(logger: logging.Logger, path: str, link_count: int, backfilled: int) -> None:
    """
    Log the result of importing a text-form feed.

    Args:
        logger: Logger instance to use
        path: Binary feed file that was written
        link_count: Number of links imported
        backfilled: Number of links that received a derived id
    """
    logger.info(f"Imported {link_count} links into {path}")

    if backfilled > 0:
        logger.debug(f"Backfilled ids for {backfilled} links")


def setup_logging(log_level: str = "WARNING", log_dir: Optional[str] = None) -> logging.Logger:
    """
    Configure console and, optionally, file logging.

    Calling this again replaces the handlers it installed earlier.

    Args:
        log_level: Minimum logging level (e.g., "INFO", "DEBUG")
        log_dir: Directory to store log files, or None for console only

    Returns:
        The configured root logger instance.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.WARNING))

    for handler in list(root_logger.handlers):
        if handler.get_name() in (CONSOLE_HANDLER_NAME, FILE_HANDLER_NAME):
            root_logger.removeHandler(handler)
            handler.close()

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.set_name(CONSOLE_HANDLER_NAME)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    root_logger.addHandler(console_handler)

    # File handler (daily rotation)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = TimedRotatingFileHandler(os.path.join(log_dir, LOG_FILE_NAME), when='midnight', interval=1, backupCount=7)
        file_handler.set_name(FILE_HANDLER_NAME)
        file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
        root_logger.addHandler(file_handler)

    logger.debug(f"Logging configured to level {log_level.upper()}. Log directory: {log_dir}")
    return root_logger
