# verimed/domain/errors.py


class VerimedError(Exception):
    """Base class untuk semua error domain."""


class InvalidInputError(VerimedError):
    """Caller tidak memberikan barcode / reg_no / name yang bisa dipakai."""


class RegistryLookupError(VerimedError):
    """Registry eksternal gagal, timeout, atau mengembalikan data rusak."""

    def __init__(self, message: str, *, kind: str | None = None):
        super().__init__(message)
        self.kind = kind
