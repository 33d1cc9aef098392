from enum import Enum


class Anomaly(str, Enum):
    """Diagnostic flags raised by reconciliation. Not failures."""

    NO_OP_TRANSFER = "NO_OP_TRANSFER"
    MAPPING_MISSING = "MAPPING_MISSING"
    SIGNATURE_UNRESOLVED = "SIGNATURE_UNRESOLVED"
