"""Cache configuration"""

import logging
from dotenv import load_dotenv

from .cache import Cache, read_cache_section

load_dotenv()

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

cache = Cache(read_cache_section())


class Config:
    cache = cache


def configure_logging(level: int = logging.INFO) -> None:
    """
    Install the standard log format on the root logger.

    Only for applications that have no logging setup of their own; importing
    the package never touches the root logger.
    """
    logging.basicConfig(format=LOG_FORMAT, datefmt=DATE_FORMAT, level=level)
    logging.getLogger("discord").setLevel(logging.WARNING)


__all__ = ["cache", "Config", "configure_logging", "read_cache_section"]
