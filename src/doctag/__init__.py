"""doctag package root."""

from doctag.doc_blocks import DocBlock, segment_blocks
from doctag.exceptions import MissingTagError, StepFailure
from doctag.validator import DocTagValidator, ValidationResult, Violation, validate

__all__ = [
    "__version__",
    "DocBlock",
    "DocTagValidator",
    "MissingTagError",
    "StepFailure",
    "ValidationResult",
    "Violation",
    "segment_blocks",
    "validate",
]

__version__ = "0.1.0"
