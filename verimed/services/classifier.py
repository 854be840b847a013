# verimed/services/classifier.py
from dataclasses import dataclass
from typing import Optional

from verimed.domain.models import InputShape, InputType
from verimed.domain.normalize import is_barcode
from verimed.domain.validators import RegNoExtractor
from verimed.infra.regex.regno_config import default_regno_extractor


@dataclass(frozen=True)
class Classification:
    shape: InputShape
    input_type: InputType
    registration_number: Optional[str] = None


def classify(value: str, extractor: RegNoExtractor | None = None) -> Classification:
    """
    Urutan: barcode -> nomor registrasi -> teks bebas.
    Secara operasional hanya ada dua jalur: barcode vs manual. Nomor registrasi
    yang diketik user dan nama obat sama-sama dianggap "manual"; shape dan
    nomor hasil ekstraksi tetap dibawa sebagai field turunan.
    """
    if is_barcode(value):
        return Classification(InputShape.BARCODE, InputType.BARCODE)

    reg_no = (extractor or default_regno_extractor()).extract(value).number
    if reg_no:
        return Classification(InputShape.REGISTRATION_NUMBER, InputType.MANUAL, reg_no)
    return Classification(InputShape.FREE_TEXT, InputType.MANUAL)


def determine_input_type(value: str, extractor: RegNoExtractor | None = None) -> InputType:
    return classify(value, extractor).input_type
