# verimed/application/verify_use_case.py
from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from verimed.domain.errors import InvalidInputError, RegistryLookupError
from verimed.domain.models import (
    Alert, ProductLookup, RegistryProduct, VerificationRecord, VerificationStatus,
)
from verimed.domain.normalize import (
    build_search_link, generate_lookup_id, normalize_query, sanitize_input,
)
from verimed.domain.validators import RegNoExtractor
from verimed.infra.regex.regno_config import default_regno_extractor
from verimed.services.classifier import classify
from verimed.services.registry_service import RegistryService

from .commands import VerifyProductCommand

REPORT_SUSPICIOUS_URL = os.getenv(
    "REPORT_SUSPICIOUS_URL", "https://www.nafdac.gov.ng/report-suspicious-products/"
)
MAX_BATCH = 10
MISSING_INPUT_MSG = "At least one of barcode, reg_no, or name must be provided"

logger = logging.getLogger("verimed.verify")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def generate_alerts(status: VerificationStatus) -> List[Alert]:
    if status == VerificationStatus.REGISTERED:
        return [Alert(
            title="Medicine is Registered",
            description="This medicine is registered with NAFDAC. Always purchase from licensed pharmacies.",
        )]
    if status == VerificationStatus.NOT_FOUND:
        return [Alert(
            title="Medicine Not Found",
            description="This medicine was not found in NAFDAC database. Exercise extreme caution.",
            link=REPORT_SUSPICIOUS_URL,
        )]
    return [Alert(
        title="Verification Error",
        description="Unable to complete verification. Please try again or contact NAFDAC directly.",
    )]


@dataclass(frozen=True)
class BatchOutcome:
    result: Optional[ProductLookup] = None
    error: Optional[str] = None


class VerifyProductUseCase:
    """
    barcode / reg_no / name -> ProductLookup.

    Hanya InvalidInputError yang keluar dari execute(); kegagalan registry
    diserap jadi status "error" + deep-link pencarian manual.
    """

    def __init__(
        self,
        registry: RegistryService,
        *,
        extractor: RegNoExtractor | None = None,
        now: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.registry = registry
        self.extractor = extractor or default_regno_extractor()
        self.now = now

    async def execute(self, cmd: VerifyProductCommand) -> ProductLookup:
        if not (cmd.barcode or cmd.reg_no or cmd.name):
            raise InvalidInputError(MISSING_INPUT_MSG)

        barcode = sanitize_input(cmd.barcode) if cmd.barcode else ""
        reg_no = sanitize_input(cmd.reg_no) if cmd.reg_no else ""
        name = sanitize_input(cmd.name) if cmd.name else ""
        # "<>" saja -> kosong setelah sanitasi
        value = barcode or reg_no or name
        if not value:
            raise InvalidInputError(MISSING_INPUT_MSG)

        cls = classify(value, self.extractor)
        normalized_query = cls.registration_number or normalize_query(value)
        created_at = self.now()
        lookup_id = generate_lookup_id(value, cls.input_type.value, now=created_at)

        try:
            product = await self._dispatch(cls.registration_number, barcode, reg_no, name, normalized_query)
            status = VerificationStatus.REGISTERED if product else VerificationStatus.NOT_FOUND
        except RegistryLookupError:
            logger.exception("[verify] registry lookup failed id=%s value=%s", lookup_id, value)
            product = None
            status = VerificationStatus.ERROR

        checked_at = self.now()
        if product is not None:
            record = VerificationRecord(
                status=status,
                title=product.title,
                reg_no=product.reg_no,
                link=product.link,
                checked_at=checked_at,
            )
        else:
            record = VerificationRecord(
                status=status,
                title=value or "Unknown Medicine",
                link=build_search_link(value),
                checked_at=checked_at,
            )

        result = ProductLookup(
            id=lookup_id,
            input_type=cls.input_type,
            input_value=value,
            normalized_query=normalized_query,
            verification=record,
            alerts=generate_alerts(status),
            created_at=created_at,
        )
        logger.info(
            "[verify] id=%s input_type=%s shape=%s query=%s status=%s",
            lookup_id, cls.input_type.value, cls.shape.value, normalized_query, status.value,
        )
        return result

    async def _dispatch(
        self,
        extracted: Optional[str],
        barcode: str,
        reg_no: str,
        name: str,
        normalized_query: str,
    ) -> Optional[RegistryProduct]:
        code = (self.extractor.extract(reg_no).number or reg_no) if reg_no else extracted
        if code:
            return await self.registry.verify_by_reg_no(code)
        if name or normalized_query:
            return await self.registry.verify_by_name(name or normalized_query)
        if barcode:
            # barcode tanpa kode registrasi: coba sebagai nama
            return await self.registry.verify_by_name(barcode)
        return None

    async def execute_batch(self, cmds: Sequence[VerifyProductCommand]) -> List[BatchOutcome]:
        if not cmds:
            raise InvalidInputError("At least one verification request is required")
        if len(cmds) > MAX_BATCH:
            raise InvalidInputError(f"Maximum {MAX_BATCH} verification requests allowed per batch")

        async def _one(c: VerifyProductCommand) -> BatchOutcome:
            try:
                return BatchOutcome(result=await self.execute(c))
            except InvalidInputError as e:
                return BatchOutcome(error=str(e))

        return list(await asyncio.gather(*(_one(c) for c in cmds)))
