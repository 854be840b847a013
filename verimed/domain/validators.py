# verimed/domain/validators.py
import re
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class RegNoMatch:
    number: Optional[str]
    pattern_id: Optional[str] = None


class RegNoExtractor:
    """
    Ekstraksi nomor registrasi NAFDAC dari teks bebas.
    Pola dicoba berurutan, match pertama menang:
      pat_0: "NAFDAC Reg. No.: 04-1234"
      pat_1: "Reg No 04-1234" (tanpa prefix regulator)
      pat_2: kode struktural AB12C345 di mana saja dalam teks
    """
    DEFAULT_PATTERNS = [
        r'(?i)(?:nafdac\s*reg\.?\s*no\.?\s*[:#]?\s*)([A-Z0-9-]+)',
        r'(?i)(?:reg\.?\s*no\.?\s*[:#]?\s*)([A-Z0-9-]+)',
        r'\b([A-Z]{2}\d{2,3}[A-Z]?\d{3,4})\b',
    ]

    def __init__(self, patterns: Optional[Iterable[str]] = None):
        pats = list(patterns) if patterns else self.DEFAULT_PATTERNS
        self.patterns = [re.compile(p) for p in pats]

    def extract(self, text: Optional[str]) -> RegNoMatch:
        if not text:
            return RegNoMatch(number=None)
        for i, pat in enumerate(self.patterns):
            m = pat.search(text)
            if not m:
                continue
            num = (m.group(1) if pat.groups else m.group(0)) or ""
            num = num.strip().upper()
            if num:
                return RegNoMatch(number=num, pattern_id=f"pat_{i}")
        return RegNoMatch(number=None)
