"""Receipt workflows."""

from .scan import (
    ReceiptScanRequest,
    ReceiptScanResult,
    ScanStatus,
    run_fragment_parse,
    run_receipt_scan,
)

__all__ = [
    "ReceiptScanRequest",
    "ReceiptScanResult",
    "ScanStatus",
    "run_fragment_parse",
    "run_receipt_scan",
]
