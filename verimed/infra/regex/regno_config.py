# verimed/infra/regex/regno_config.py
import logging
import os
import re
from functools import lru_cache

import yaml

from verimed.domain.validators import RegNoExtractor

log = logging.getLogger("verimed.regex")


def load_regno_extractor(cfg_path: str | None = None) -> RegNoExtractor:
    """
    Baca pola nomor registrasi dari YAML:

        patterns:
          - '(?i)(?:nafdac\\s*reg\\.?\\s*no\\.?\\s*[:#]?\\s*)([A-Z0-9-]+)'
          - '\\b([A-Z]{2}\\d{2,3}[A-Z]?\\d{3,4})\\b'

    File hilang / YAML invalid / regex invalid -> pakai DEFAULT_PATTERNS.
    """
    path = cfg_path or os.getenv("REGNO_CFG", "config/regno.yaml")
    cfg = {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        log.warning("load %s failed: %s (using default patterns)", path, e)

    pats = cfg.get("patterns") if isinstance(cfg, dict) else None
    if not pats:
        return RegNoExtractor()
    try:
        return RegNoExtractor([str(p) for p in pats])
    except re.error as e:
        log.warning("invalid pattern in %s: %s (using default patterns)", path, e)
        return RegNoExtractor()


@lru_cache
def default_regno_extractor() -> RegNoExtractor:
    """Satu extractor per proses, dibaca dari REGNO_CFG saat pertama dipakai."""
    return load_regno_extractor()
