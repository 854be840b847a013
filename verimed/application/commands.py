# verimed/application/commands.py
from pydantic import BaseModel


class VerifyProductCommand(BaseModel):
    barcode: str | None = None
    reg_no: str | None = None
    name: str | None = None
