import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(message)s'

def setup_logger(name: str = "hostsnap", log_file: Optional[str] = None,
                 level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger(name)
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    if not logger.handlers:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    if log_file and not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        try:
            file_handler = logging.FileHandler(log_file)
        except OSError as e:
            logger.warning("cannot open log file %s: %s", log_file, e)
        else:
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    for h in logger.handlers:
        h.setLevel(level)
    return logger
