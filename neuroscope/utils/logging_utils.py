"""
Logging configuration for applications embedding NeuroScope

The engine itself only emits records through the standard logging module;
this helper gives scripts and host applications a consistent format.
"""

import logging


def setup_logging(debug: bool = False) -> None:
    """
    Configure root logging

    INFO shows adapter-level events (filters applied, band powers computed),
    DEBUG adds the short-signal fallbacks taken inside spectral estimation.

    Args:
        debug: If True, enable DEBUG level logging
    """
    log_level = logging.DEBUG if debug else logging.INFO

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    if debug:
        logging.info("Debug logging enabled")
    else:
        logging.info("Logging configured (INFO level)")
