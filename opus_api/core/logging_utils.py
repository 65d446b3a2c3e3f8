import logging

# Project logger (level and handlers come from logging_config)
LOGGER_NAME = "opus_api"
logger = logging.getLogger(LOGGER_NAME)


def log_info(message: str) -> None:
    """
    Neutral information message.
    """
    logger.info("%s", message)


def log_step(message: str) -> None:
    """
    Action step / store call in progress.
    """
    logger.info("→ %s", message)


def log_success(message: str) -> None:
    """
    Success message (write committed, server ready...).
    """
    logger.info("✅ %s", message)


def log_warning(message: str) -> None:
    """
    Warning / non-fatal problem (rejected batch, truncated fetch...).
    """
    logger.warning("⚠️ %s", message)


def log_error(message: str, exc_info: bool = False) -> None:
    """
    Error / failed operation. Pass exc_info=True from an except block to
    attach the traceback.
    """
    logger.error("❌ %s", message, exc_info=exc_info)
