"""
Error taxonomy for the evaluation pipeline.

Every failure a caller can see is one EvaluationError carrying an ErrorKind.
The kind fixes both the HTTP status and the localized user-facing message;
`detail` and `context` are for server-side logs only.
"""

from enum import Enum
from typing import Any, Dict, Optional

from carcheck.domains.cars.messages import error_message


class ErrorKind(str, Enum):
    INVALID_REQUEST = "invalid_request"
    CHALLENGE_DETECTED = "challenge_detected"
    MISSING_FIELDS = "extraction_missing_fields"
    EXTRACTION_FAILED = "extraction_failed"
    NARRATION_FAILED = "narration_failed"
    INTERNAL_ERROR = "internal_error"


STATUS_CODES = {
    ErrorKind.INVALID_REQUEST: 400,
    ErrorKind.MISSING_FIELDS: 422,
    ErrorKind.CHALLENGE_DETECTED: 503,
    ErrorKind.EXTRACTION_FAILED: 502,
    ErrorKind.NARRATION_FAILED: 502,
    ErrorKind.INTERNAL_ERROR: 500,
}


class EvaluationError(Exception):
    """Base class for every failure surfaced to the caller"""

    def __init__(
        self,
        kind: ErrorKind,
        detail: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        message_key: Optional[str] = None,
    ):
        self.kind = kind
        self.detail = detail
        self.context = context or {}
        self.message_key = message_key or kind.value
        super().__init__(detail or kind.value)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]

    def message(self, language: str = "en") -> str:
        return error_message(self.message_key, language)

    def to_payload(self, language: str = "en", expose_detail: bool = False) -> Dict[str, Any]:
        payload = {"error": self.message(language), "kind": self.kind.value}
        if expose_detail and self.detail:
            payload["details"] = self.detail
        return payload


class ExtractionError(EvaluationError):
    """Listing extraction failed (challenge, missing fields, or anything else)"""
    pass


class NarrationError(EvaluationError):
    """The text-generation call or its reply could not be turned into a verdict"""

    def __init__(self, detail: Optional[str] = None, raw_response: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(ErrorKind.NARRATION_FAILED, detail=detail, context=context)
        self.raw_response = raw_response
