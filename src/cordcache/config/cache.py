import os
import tomllib
from pathlib import Path

CONFIG_PATH_ENV = "CORDCACHE_CONFIG"
DEFAULT_CONFIG_PATH = Path("config.toml")


def read_cache_section(path: str | Path | None = None) -> dict:
    """
    Return the ``[cordcache.cache]`` table of the TOML config file.

    The file is ``path``, else ``$CORDCACHE_CONFIG``, else ``./config.toml``.
    A missing file or section yields ``{}`` so every setting falls back to its
    environment variable.
    """
    target = Path(path or os.getenv(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH)
    if not target.is_file():
        return {}

    with target.open("rb") as handle:
        section = tomllib.load(handle).get("cordcache", {}).get("cache", {})
    if not isinstance(section, dict):
        raise ValueError(f"[cordcache.cache] in {target} must be a table")
    return section


class Cache:
    def __init__(self, section: dict | None = None) -> None:
        cache_cfg = section or {}

        # Seconds an attachment may sit unreferenced before clean() drops it.
        self.ATTACHMENT_LIFETIME: float = float(
            cache_cfg.get("attachment_lifetime", os.getenv("ATTACHMENT_LIFETIME", "300"))
        )
        # Attachment count above which clean() prunes least recently used entries.
        self.ATTACHMENT_PRUNE_THRESHOLD: int = int(
            cache_cfg.get("attachment_prune_threshold", os.getenv("ATTACHMENT_PRUNE_THRESHOLD", "1000"))
        )
        # Seconds between clean() passes when the optional cleaner task runs.
        self.CLEAN_INTERVAL: float = float(
            cache_cfg.get("clean_interval", os.getenv("CACHE_CLEAN_INTERVAL", "60"))
        )
