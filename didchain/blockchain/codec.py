"""
Shared Codec Tables
===================

Enumerations and helpers used by both backend codecs. Everything here is
a pure function of its input; nothing touches the network.

Version: 0.1.0
"""

import functools
import json
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from didchain.errors import ConversionError, LedgerError
from didchain.logging import get_logger
from didchain.models import AttributeValueType, DidDocStatus, DidDocument, InvokedDidDoc

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


def converts(func: F) -> F:
    """Report malformed input on decode as a conversion error."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except LedgerError:
            raise
        except (TypeError, ValueError) as e:
            raise ConversionError(f"{func.__name__}: {e}") from e

    return wrapper  # type: ignore[return-value]


@converts
def parse_did_document(invoked: InvokedDidDoc) -> DidDocument:
    """
    Decode the DID Document carried by a registration envelope.

    Raises:
        ConversionError: If ``did_doc`` is not a valid DID Document JSON
    """
    return DidDocument.model_validate_json(invoked.did_doc)


# =============================================================================
# Verification method key types
# =============================================================================

KEY_TYPE_DEFAULT = 0

KEY_TYPES: dict[str, int] = {
    "RsaVerificationKey2018": 0,
    "Secp256k1VerificationKey2018": 1,
    "Secp256r1VerificationKey2018": 2,
}

_KEY_TYPE_NAMES: dict[int, str] = {code: name for name, code in KEY_TYPES.items()}


def encode_key_type(name: str | None) -> int:
    """
    Map a key-type name to its on-chain integer.

    Unknown or missing names map to the untyped default (0).
    """
    if name is None:
        return KEY_TYPE_DEFAULT
    return KEY_TYPES.get(name, KEY_TYPE_DEFAULT)


def decode_key_type(code: int) -> str:
    """
    Map an on-chain key-type integer back to its name.

    Raises:
        ConversionError: If the integer is outside the fixed mapping
    """
    try:
        return _KEY_TYPE_NAMES[int(code)]
    except (KeyError, TypeError, ValueError) as e:
        raise ConversionError(f"Unknown verification key type: {code!r}") from e


# =============================================================================
# DID Document status
# =============================================================================

# Position in this tuple is the on-chain status code
DID_DOC_STATUS_CODES: tuple[DidDocStatus, ...] = (
    DidDocStatus.ACTIVATED,
    DidDocStatus.DEACTIVATED,
    DidDocStatus.REVOKED,
    DidDocStatus.TERMINATED,
)


def encode_did_doc_status(status: DidDocStatus) -> int:
    """Map a status to its on-chain integer."""
    return DID_DOC_STATUS_CODES.index(status)


def decode_did_doc_status(value: int | str, strict: bool = False) -> DidDocStatus:
    """
    Decode an on-chain DID Document status.

    Integers 0-3 map by position; raw status strings are accepted too.
    Anything else decodes to ACTIVATED with a warning, unless ``strict``.

    Args:
        value: Status integer or raw status string
        strict: Raise on unmapped values instead of falling back

    Returns:
        DidDocStatus

    Raises:
        ConversionError: In strict mode, if the value is unmapped
    """
    if isinstance(value, str) and not value.strip().lstrip("-").isdigit():
        try:
            return DidDocStatus(value.strip().lower())
        except ValueError:
            pass
    else:
        try:
            code = int(value)
        except (TypeError, ValueError):
            code = -1
        if 0 <= code < len(DID_DOC_STATUS_CODES):
            return DID_DOC_STATUS_CODES[code]

    if strict:
        raise ConversionError(f"Unmapped DID Document status: {value!r}")

    logger.warning("did_doc_status_fallback", raw_status=value, decoded="activated")
    return DidDocStatus.ACTIVATED


# =============================================================================
# ZKP attribute value types
# =============================================================================


def encode_attribute_type(value_type: AttributeValueType | None) -> str:
    """Attribute types default to String when unset."""
    return (value_type or AttributeValueType.STRING).value


def decode_attribute_type(raw: str) -> AttributeValueType:
    """
    Case-insensitive lookup by enum name.

    Raises:
        ConversionError: If the type is not a known attribute type
    """
    try:
        return AttributeValueType[str(raw).upper()]
    except KeyError as e:
        raise ConversionError(f"Unknown attribute type: {raw!r}") from e


# =============================================================================
# Internationalization and opaque blobs
# =============================================================================


def i18n_to_pairs(i18n: Mapping[str, str] | None) -> list[tuple[str, str]]:
    """Flatten a language->caption mapping into ordered pairs."""
    if not i18n:
        return []
    return [(language, value) for language, value in i18n.items()]


def i18n_from_pairs(pairs: Iterable[tuple[str, str]] | None) -> dict[str, str]:
    """Rebuild a language->caption mapping; duplicate languages are last-wins."""
    result: dict[str, str] = {}
    for language, value in pairs or ():
        result[language] = value
    return result


def dump_value_blob(value: Mapping[str, Any]) -> str:
    """Serialize an opaque value object for chain storage."""
    try:
        return json.dumps(value, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise ConversionError(f"Value is not JSON serializable: {e}") from e


def load_value_blob(raw: str) -> dict[str, Any]:
    """
    Parse an opaque value object read from the chain.

    Raises:
        ConversionError: If the blob is not a JSON object
    """
    try:
        value = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise ConversionError(f"Malformed value blob: {e}") from e

    if not isinstance(value, dict):
        raise ConversionError(f"Value blob must be a JSON object, got {type(value).__name__}")
    return value


def as_list(values: Iterable[Any] | None) -> list[Any]:
    """Materialize an absent collection as an empty list."""
    return list(values) if values else []


def require_bool(value: Any, field: str) -> bool:
    """
    Accept only a real boolean for a flag read from the chain.

    Raises:
        ConversionError: If ``value`` is not a bool
    """
    if not isinstance(value, bool):
        raise ConversionError(f"{field} must be a boolean, got {value!r}")
    return value
