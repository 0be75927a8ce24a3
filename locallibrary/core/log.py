import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def configure_logging(level: str = "INFO") -> logging.Logger:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logger = logging.getLogger("locallibrary")
    logger.setLevel(level.upper())
    return logger
