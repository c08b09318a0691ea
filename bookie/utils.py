"""
Utility functions for bookie.

This module contains helper functions that are used across the system but
are not directly related to parsing or reporting transactions.
"""

import os
import sys
import logging

logger = logging.getLogger(__name__)

# Longest line (without terminator) that is parsed as a whole
MAX_LINE_LENGTH = 100

def setup_logging(debug=False, log_level=None):
    """Configure logging for the application.

    Diagnostics go to stderr. When BOOKIE_LOG_FILE is set they are also
    written to that file.

    Args:
        debug (bool): Log everything, overrides log_level
        log_level (str, optional): Level name. Defaults to BOOKIE_LOG_LEVEL,
            or 'warning' when that is not set either

    Returns:
        str or None: Path of the log file, if any
    """
    # Determine log level
    if debug:
        level = logging.DEBUG
    else:
        log_level = log_level or os.getenv('BOOKIE_LOG_LEVEL', 'warning')
        level = getattr(logging, log_level.upper(), logging.WARNING)

    format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    handlers = [logging.StreamHandler(sys.stderr)]

    log_file = os.getenv('BOOKIE_LOG_FILE')
    if log_file:
        # Create log directory if needed
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format=format,
        handlers=handlers,
        force=True
    )

    return log_file

def open_input(path):
    """
    Open the ledger to read.

    Args:
        path (str or None): File name, '-' or None for standard input

    Returns:
        file object or None: The open stream, or None if the file cannot be
        opened (the error is logged)
    """
    if path is None or path == '-':
        return sys.stdin

    try:
        # Only '\n' ends a line; a '\r' before it stays part of the line
        return open(path, 'r', encoding='utf-8', errors='replace', newline='\n')
    except OSError as e:
        logger.error(f"Cannot open {path}: {e.strerror or e}")
        return None

def read_lines(stream, max_length=MAX_LINE_LENGTH):
    """
    Read a stream line by line.

    Args:
        stream: Text stream
        max_length (int): Number of characters kept from each line

    Yields:
        tuple: (line_number, text, length) where line_number starts at 1,
        text is the line without its '\\n' cut to max_length characters and
        length is the length of the whole line
    """
    for line_number, raw in enumerate(stream, start=1):
        if raw.endswith('\n'):
            raw = raw[:-1]
        yield line_number, raw[:max_length], len(raw)
