import logging
import sys

# Centralized logger name
LOGGER_NAME = "OslNodes"
# Module loggers live under the package name
PACKAGE_LOGGER_NAME = "osl_nodes"
BATCH_LOGGER_NAME = f"{LOGGER_NAME}.batch"


def get_logger() -> logging.Logger:
    """Get the standard logger for OSL node generation."""
    return logging.getLogger(LOGGER_NAME)


def setup_logger(level=logging.INFO):
    """
    Configure the console logger.

    Args:
        level: Logging level (default: INFO)
    """
    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(level)

    # Format: [OslNodes] [Level] Message
    formatter = logging.Formatter(f'[{LOGGER_NAME}] [%(levelname)s] %(message)s')
    ch.setFormatter(formatter)

    for name in (PACKAGE_LOGGER_NAME, LOGGER_NAME):
        logger = logging.getLogger(name)
        logger.setLevel(level)
        # Remove existing handlers to prevent duplicates
        if logger.handlers:
            logger.handlers.clear()
        logger.addHandler(ch)

    return get_logger()


def open_batch_log(path, level=logging.INFO) -> logging.Logger:
    """
    Attach a file handler for the consolidated batch log.

    The batch logger does not propagate, so per-definition detail stays out
    of the console.
    """
    logger = logging.getLogger(BATCH_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False
    close_batch_log(logger)

    fh = logging.FileHandler(str(path), mode='w', encoding='utf-8')
    fh.setLevel(level)
    fh.setFormatter(logging.Formatter('%(message)s'))
    logger.addHandler(fh)

    return logger


def close_batch_log(logger: logging.Logger):
    """Flush, close and detach every handler of the batch logger."""
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def log_info(msg: str):
    get_logger().info(msg)


def log_warning(msg: str):
    get_logger().warning(msg)


def log_error(msg: str):
    get_logger().error(msg)


def log_debug(msg: str):
    get_logger().debug(msg)
