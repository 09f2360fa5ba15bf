# networkcontrol/errors.py
"""
Error taxonomy for the governance-message pipeline.

Every failure raised by the codec, the signature collector, the roster cache
and the submitter derives from NetworkControlError so the HTTP layer can
render one standard error envelope. Quorum problems are never raised; they
are reported as notes inside QuorumVerdict.
"""

from typing import Any, Dict, Optional


class NetworkControlError(Exception):
    """Standardized error envelope for pipeline failures."""

    default_code = "NETWORK_CONTROL_ERROR"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code or self.default_code
        self.original_error = original_error
        self.context = context or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to standardized error dict for API responses"""
        return {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context
        }


class DecodeError(NetworkControlError):
    """Malformed hex or wire bytes"""
    default_code = "DECODE_FAILED"


class ValidationError(NetworkControlError):
    """Bad chain ID length, bad enum tag or unparsable timestamp"""
    default_code = "VALIDATION_FAILED"


class SignatureError(NetworkControlError):
    """Cryptographic verification failure"""
    default_code = "SIGNATURE_INVALID"


class NetworkError(NetworkControlError):
    """Roster fetch or broadcast failure"""
    default_code = "NETWORK_ERROR"


class FetchError(NetworkError):
    """The authority roster could not be fetched"""
    default_code = "ROSTER_FETCH_FAILED"


__all__ = [
    "NetworkControlError",
    "DecodeError",
    "ValidationError",
    "SignatureError",
    "NetworkError",
    "FetchError",
]
