import logging
import colorlog

LOG_FORMAT = "%(asctime)s - %(name)s - %(log_color)s%(levelname)s - %(message)s%(reset)s"


def setup_logger(level: str | int = logging.INFO) -> logging.Logger:
    """Настройка корневого логгера с цветным выводом"""
    logger = logging.getLogger()

    # повторный вызов не должен дублировать вывод
    for handler in logger.handlers:
        if isinstance(handler.formatter, colorlog.ColoredFormatter):
            logger.setLevel(level)
            return logger

    handler = colorlog.StreamHandler()
    formatter = colorlog.ColoredFormatter(
        fmt=LOG_FORMAT,
        log_colors={
            "DEBUG": "green",
            "INFO": "white",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "red,bg_white",
        },
        secondary_log_colors={},
        style="%",
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)
    logger.setLevel(level)

    return logger
