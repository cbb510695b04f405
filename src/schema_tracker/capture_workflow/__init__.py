"""Capture workflow exports."""

from .capture_contracts import CaptureOutcome, CaptureRequest
from .capture_use_case import CaptureError, execute_capture

__all__ = [
    "CaptureRequest",
    "CaptureOutcome",
    "CaptureError",
    "execute_capture",
]
