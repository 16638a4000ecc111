"""Field-by-field comparison of a candidate against the issued record."""

from __future__ import annotations

from kube_credential.models.credential import Credential, IssuedCredential, JsonValue


def json_equal(left: JsonValue, right: JsonValue) -> bool:
    """Structural equality over JSON values.

    Objects match on key set (order ignored) and recursively equal values.
    Arrays match element by element, so order matters.  Booleans are their
    own type: ``True`` never equals ``1`` even though Python says it does.
    """
    if left is None or right is None:
        return left is None and right is None

    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right

    if isinstance(left, dict) or isinstance(right, dict):
        if not (isinstance(left, dict) and isinstance(right, dict)):
            return False
        if left.keys() != right.keys():
            return False
        return all(json_equal(left[key], right[key]) for key in left)

    if isinstance(left, list) or isinstance(right, list):
        if not (isinstance(left, list) and isinstance(right, list)):
            return False
        if len(left) != len(right):
            return False
        return all(json_equal(a, b) for a, b in zip(left, right))

    if isinstance(left, str) or isinstance(right, str):
        return isinstance(left, str) and isinstance(right, str) and left == right

    # int/float: 1 and 1.0 are the same JSON number
    return left == right


def _normalize_expiry(value: str | None) -> str | None:
    return value or None


def mismatched_fields(candidate: Credential, issued: IssuedCredential) -> list[str]:
    """Names (wire spelling) of the fields where the candidate differs."""
    mismatches = [
        name
        for name, submitted, recorded in (
            ("id", candidate.id, issued.id),
            ("holderName", candidate.holder_name, issued.holder_name),
            ("credentialType", candidate.credential_type, issued.credential_type),
            ("issueDate", candidate.issue_date, issued.issue_date),
            ("issuerName", candidate.issuer_name, issued.issuer_name),
        )
        if submitted != recorded
    ]
    if not json_equal(candidate.data, issued.data):
        mismatches.append("data")
    if _normalize_expiry(candidate.expiry_date) != _normalize_expiry(issued.expiry_date):
        mismatches.append("expiryDate")
    return mismatches


def credentials_match(candidate: Credential, issued: IssuedCredential) -> bool:
    return not mismatched_fields(candidate, issued)
