import logging

from rich.logging import RichHandler

from utils import config


class CenteredFormatter(logging.Formatter):
    """Pads logger names to the widest name seen so far, so messages line up."""

    longest_name_length = 14

    def __init__(self, fmt=None, datefmt=None, style="%", initial_width=14):
        super().__init__(fmt, datefmt, style)
        CenteredFormatter.longest_name_length = initial_width

    def format(self, record):
        CenteredFormatter.longest_name_length = max(
            CenteredFormatter.longest_name_length, len(record.name)
        )
        record.name = record.name.center(CenteredFormatter.longest_name_length)
        return super().format(record)


def get_logger(name=None) -> logging.Logger:
    """
    Return the logger for `name`, attaching a RichHandler on first use.

    Level is DEBUG when the DEBUG env flag is set, INFO otherwise.
    """
    logger = logging.getLogger(name or "storefront")
    log_level = logging.DEBUG if config.DEBUG else logging.INFO
    logger.setLevel(log_level)

    if not logger.handlers:
        handler = RichHandler(
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(CenteredFormatter("[%(name)s]  %(message)s"))
        handler.setLevel(log_level)
        logger.addHandler(handler)

        logger.propagate = False
        logger.debug(f"Logger for '{logger.name}' initialized.")

    return logger
