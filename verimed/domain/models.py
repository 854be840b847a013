# verimed/domain/models.py
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict


class InputType(str, Enum):
    """Tag operasional yang dikirim ke klien (OCR belum dipakai classifier)."""
    BARCODE = "barcode"
    OCR = "ocr"
    MANUAL = "manual"


class InputShape(str, Enum):
    BARCODE = "barcode"
    REGISTRATION_NUMBER = "registration_number"
    FREE_TEXT = "free_text"


class VerificationStatus(str, Enum):
    REGISTERED = "registered"
    NOT_FOUND = "not_found"
    ERROR = "error"


class RegistryProduct(BaseModel):
    """Satu produk dari registry (NAFDAC Greenbook atau mock)."""
    model_config = ConfigDict(frozen=True)

    title: str
    reg_no: Optional[str] = None
    manufacturer: Optional[str] = None
    category: Optional[str] = None
    status: Literal["registered", "not_found"] = "registered"
    link: Optional[str] = None


class Alert(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str
    link: Optional[str] = None


class VerificationRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: VerificationStatus
    title: Optional[str] = None
    reg_no: Optional[str] = None
    link: Optional[str] = None
    checked_at: datetime


class ProductLookup(BaseModel):
    """
    Hasil satu kali verifikasi. Immutable: verifikasi ulang menghasilkan
    ProductLookup baru dengan id baru.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    input_type: InputType
    input_value: str
    normalized_query: str
    verification: VerificationRecord
    alerts: List[Alert] = []
    created_at: datetime


class SearchResult(BaseModel):
    id: str
    title: str
    reg_no: Optional[str] = None
    manufacturer: Optional[str] = None
    category: Optional[str] = None


class Suggestion(BaseModel):
    text: str
    type: str
