import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(debug: bool = False, name: str = "aurorasubmit") -> logging.Logger:
    """Setup and configure the package logger."""
    _logger = logging.getLogger(name)

    if _logger.handlers:
        return _logger

    log_level = logging.DEBUG if debug else logging.INFO
    _logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    console_handler.setFormatter(formatter)
    _logger.addHandler(console_handler)
    _logger.propagate = False

    return _logger
