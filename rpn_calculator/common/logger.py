"""Package-wide logger configured from the environment."""
import logging
import os

LOG_LEVEL_ENV_VAR = "RPN_CALCULATOR_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str = "rpn_calculator") -> logging.Logger:
    """
    Return a logger writing to stderr, configured once per name.

    The level is read from the RPN_CALCULATOR_LOG_LEVEL environment variable
    and defaults to INFO.

    :param str name: Logger name

    :return: Configured logger
    :rtype: logging.Logger
    """
    log = logging.getLogger(name)
    if not log.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
        log.setLevel(os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper())
    return log


logger: logging.Logger = get_logger()
