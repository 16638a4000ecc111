from __future__ import annotations

import logging
import math
from typing import Any

from kube_credential.core.errors import CredentialValidationError
from kube_credential.core.time import is_canonical_iso
from kube_credential.models.credential import Credential

logger = logging.getLogger(__name__)

# (wire field, message when missing or not a non-empty string)
_REQUIRED_STRINGS = (
    ("id", "Credential ID is required and must be a string"),
    ("holderName", "Holder name is required and must be a string"),
    ("credentialType", "Credential type is required and must be a string"),
    ("issueDate", "Issue date is required and must be a string"),
    ("issuerName", "Issuer name is required and must be a string"),
)

_ISO_HINT = "ISO format (YYYY-MM-DDTHH:mm:ss.sssZ)"


def _non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _is_json_value(value: Any) -> bool:
    # json.loads accepts NaN and Infinity; JSON itself has no such numbers
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, dict):
        return all(_is_json_value(v) for v in value.values())
    if isinstance(value, list):
        return all(_is_json_value(v) for v in value)
    return True


def collect_errors(payload: Any) -> list[str]:
    """Return every shape/type problem with a credential payload."""
    if not isinstance(payload, dict):
        return ["Credential payload must be a JSON object"]

    errors = [
        message
        for field, message in _REQUIRED_STRINGS
        if not _non_empty_str(payload.get(field))
    ]

    data = payload.get("data")
    if not isinstance(data, dict):
        errors.append("Credential data is required and must be an object")
    elif not _is_json_value(data):
        errors.append("Credential data must contain only JSON values")

    issue_date = payload.get("issueDate")
    if _non_empty_str(issue_date) and not is_canonical_iso(issue_date):
        errors.append(f"Issue date must be in {_ISO_HINT}")

    expiry_date = payload.get("expiryDate")
    if expiry_date is not None and expiry_date != "":
        if not isinstance(expiry_date, str):
            errors.append("Expiry date must be a string")
        elif not is_canonical_iso(expiry_date):
            errors.append(f"Expiry date must be in {_ISO_HINT}")

    return errors


def validate_credential(payload: Any) -> Credential:
    """Validate a camelCase credential payload and build the domain value.

    Raises CredentialValidationError listing all problems found.
    """
    errors = collect_errors(payload)
    if errors:
        logger.warning("Rejected credential payload: %s", "; ".join(errors))
        raise CredentialValidationError(errors)

    credential = Credential.from_dict(payload)
    if credential.expiry_date == "":
        # An empty expiry means "none" everywhere downstream
        credential = Credential.from_dict({**payload, "expiryDate": None})
    return credential
