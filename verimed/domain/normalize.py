# verimed/domain/normalize.py
"""
Normalisasi input obat: query teks, nomor registrasi NAFDAC, barcode,
sanitasi input user, dan deep-link ke halaman pencarian Greenbook.
Semua fungsi di sini pure (tanpa I/O).
"""
from __future__ import annotations

import hashlib
import os
import re
import time
import uuid
from datetime import datetime
from typing import Optional
from urllib.parse import quote

from verimed.infra.regex.regno_config import default_regno_extractor

REGISTRY_BASE_URL = os.getenv("REGISTRY_BASE_URL", "https://www.nafdac.gov.ng").rstrip("/")
REGISTRY_PRODUCTS_PATH = "/our-services/registered-products/"

MAX_INPUT_LEN = 200

_DISALLOWED_RE = re.compile(r"[^\w\s-]")
_WS_RE = re.compile(r"\s+")
_BARCODE_RE = re.compile(r"[0-9]{8,13}")
_ANGLE_RE = re.compile(r"[<>]")

# encodeURIComponent-compatible: spasi -> %20, '&' -> %26
_URI_SAFE = "!*'()"


def normalize_query(text: Optional[str]) -> str:
    # lower dulu, baru buang karakter; hasil akhirnya stabil kalau dinormalisasi ulang
    s = (text or "").lower()
    s = _DISALLOWED_RE.sub("", s)
    return _WS_RE.sub(" ", s).strip()


def extract_registration_number(text: Optional[str]) -> Optional[str]:
    return default_regno_extractor().extract(text).number


def format_registration_number(code: str) -> str:
    return _WS_RE.sub("", (code or "").upper())


def is_barcode(value: Optional[str]) -> bool:
    # EAN-8 .. EAN-13, hanya digit ASCII
    return bool(value) and _BARCODE_RE.fullmatch(value) is not None


def sanitize_input(raw: Optional[str]) -> str:
    s = (raw or "").strip()
    s = _ANGLE_RE.sub("", s)
    return s[:MAX_INPUT_LEN]


def build_search_link(query: str) -> str:
    encoded = quote((query or "").strip(), safe=_URI_SAFE)
    return f"{REGISTRY_BASE_URL}{REGISTRY_PRODUCTS_PATH}?search={encoded}"


def build_registration_link(code: str) -> str:
    formatted = quote(format_registration_number(code), safe=_URI_SAFE)
    return f"{REGISTRY_BASE_URL}{REGISTRY_PRODUCTS_PATH}?reg_no={formatted}"


def generate_lookup_id(value: str, input_type: str, now: Optional[datetime] = None) -> str:
    """
    16 karakter alfanumerik, unik per panggilan. Diturunkan dari value, tipe,
    dan waktu (now, default jam sistem dalam nanodetik); uuid4 sebagai salt
    supaya dua panggilan di tick jam yang sama tetap beda.
    """
    stamp = int(now.timestamp() * 1_000_000_000) if now is not None else time.time_ns()
    seed = f"{value}-{input_type}-{stamp}-{uuid.uuid4().hex}"
    return hashlib.sha256(seed.encode("utf-8")).hexdigest()[:16]
