"""AcmeCRM <-> internal contact mapping.

AcmeCRM uses prefixed snake_case fields (acme_first_name, acme_address as one
line of text, status as "Active"); the internal model uses camelCase fields, a
structured Address and lowercase statuses. An internal contact derived from an
AcmeCRM record links back to it through source="acmecrm" and sourceId=<acme id>.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

from src.contact_sync.contacts.schemas import (
    AcmeContact,
    Address,
    ContactSource,
    ContactStatus,
    ExternalContact,
    InternalContact,
    new_contact_id,
)
from src.contact_sync.core.errors import AppError, ErrorCode, ErrorType


def parse_address(address: str | None) -> Address | None:
    """Split a one-line address into its parts.

    Expected layout: "street, city, STATE ZIP, country"; missing trailing
    parts are left empty.

    >>> parse_address("123 Main St, San Francisco, CA 94105, USA").zip_code
    '94105'
    """
    if not address or not address.strip():
        return None

    parts = [part.strip() for part in address.split(",")]
    result = Address(street=parts[0])

    if len(parts) >= 2:
        result.city = parts[1]
    if len(parts) >= 3:
        state_zip = parts[2].split()
        if state_zip:
            result.state = state_zip[0]
        if len(state_zip) >= 2:
            result.zip_code = state_zip[1]
    if len(parts) >= 4:
        result.country = parts[3]

    return result


def format_address(address: Address | None) -> str:
    """Join an Address back into AcmeCRM's one-line form."""
    if address is None:
        return ""

    parts = [part for part in (address.street, address.city) if part]
    state_zip = " ".join(part for part in (address.state, address.zip_code) if part)
    if state_zip:
        parts.append(state_zip)
    if address.country:
        parts.append(address.country)
    return ", ".join(parts)


def _invalid(
    message: str, exc: ValidationError, code: ErrorCode = ErrorCode.INVALID_INPUT
) -> AppError:
    return AppError(
        message,
        ErrorType.BAD_REQUEST,
        code=code,
        details=exc.errors(include_url=False),
    )


def map_acme_to_internal(
    acme_contact: ExternalContact | AcmeContact,
    contact_id: str | None = None,
) -> InternalContact:
    """Derive an InternalContact from an AcmeCRM record.

    Args:
        acme_contact: AcmeCRM record (vendor field names).
        contact_id: Internal ID to assign; a new one is generated when omitted.

    Raises:
        AppError: BAD_REQUEST / INVALID_INPUT when the record is malformed,
            BAD_REQUEST / VALIDATION_ERROR when the mapped contact fails the
            internal contact rules (unknown status, over-long fields).
    """
    try:
        acme = (
            acme_contact
            if isinstance(acme_contact, AcmeContact)
            else AcmeContact.model_validate(acme_contact)
        )
    except ValidationError as exc:
        raise _invalid("Invalid AcmeCRM contact data", exc) from exc

    try:
        return InternalContact(
            id=contact_id or new_contact_id(),
            first_name=acme.acme_first_name,
            last_name=acme.acme_last_name,
            email=acme.acme_email,
            phone=acme.acme_phone,
            company=acme.acme_company,
            title=acme.acme_title,
            address=parse_address(acme.acme_address),
            notes=acme.acme_notes,
            status=(acme.acme_status or ContactStatus.ACTIVE.value).lower(),
            tags=acme.acme_tags,
            custom_fields=acme.acme_custom_fields,
            source=ContactSource.ACMECRM,
            source_id=acme.id,
            created_at=acme.acme_created_at,
            updated_at=acme.acme_updated_at,
        )
    except ValidationError as exc:
        raise _invalid(
            "Error mapping AcmeCRM contact to internal format",
            exc,
            ErrorCode.VALIDATION_ERROR,
        ) from exc


def map_internal_to_acme(contact: InternalContact) -> dict[str, Any]:
    """Render an InternalContact in AcmeCRM's field layout.

    The AcmeCRM id is the contact's sourceId.

    Raises:
        AppError: BAD_REQUEST / INVALID_INPUT when the contact has no sourceId.
    """
    if not contact.source_id:
        raise AppError(
            "Internal contact has no AcmeCRM source ID",
            ErrorType.BAD_REQUEST,
            code=ErrorCode.INVALID_INPUT,
            details={"id": contact.id},
        )

    return {
        "id": contact.source_id,
        "acme_first_name": contact.first_name,
        "acme_last_name": contact.last_name,
        "acme_email": contact.email,
        "acme_phone": contact.phone or "",
        "acme_company": contact.company or "",
        "acme_title": contact.title or "",
        "acme_address": format_address(contact.address),
        "acme_notes": contact.notes or "",
        "acme_status": contact.status.value.capitalize(),
        "acme_tags": list(contact.tags),
        "acme_custom_fields": dict(contact.custom_fields),
        "acme_created_at": contact.created_at,
        "acme_updated_at": contact.updated_at,
        "acme_version": contact.version,
    }
