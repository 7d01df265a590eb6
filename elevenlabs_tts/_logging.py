import logging

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger that stays silent by default.

    The logger uses Python's standard logging module and includes NullHandler
    by default so the library never prints on its own. Applications opt in by
    configuring logging levels and handlers.

    Args:
        name: Logger name, typically __name__ from the calling module.

    Returns:
        Configured logger instance.

    Examples:
        Enable debug logging in user code:
            import logging
            logging.basicConfig(level=logging.DEBUG)

        Only the transport layer:
            logging.getLogger("elevenlabs_tts._transport").setLevel(logging.DEBUG)
    """
    module_logger = logging.getLogger(name)
    module_logger.addHandler(logging.NullHandler())
    return module_logger


__all__ = ["get_logger"]
