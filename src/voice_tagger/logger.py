import logging

from .settings import LoggingSettings


def setup_logger(config: LoggingSettings) -> logging.Logger:
    """
    Sets up root logging based on the provided configuration.
    """
    level = (config.level or "INFO").upper()
    log_format = config.format or "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(level=level, format=log_format)

    if config.file:
        file_handler = logging.FileHandler(config.file)
        file_handler.setFormatter(logging.Formatter(log_format))
        logging.getLogger().addHandler(file_handler)

    return logging.getLogger("voice_tagger")
