"""
Shared logging setup for the API process.
"""
import logging

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """
    Configure the root logger with a single console handler.

    Parameters
    ----------
    level : str
        Name of the logging level, e.g. "INFO" or "DEBUG".
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Clear existing handlers so repeated calls do not duplicate output
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    console_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.addHandler(console_handler)
