"""Validation entry points for link payloads.

Every function here is total: bad input never raises, it comes back as a
``ValidationResult`` whose ``errors`` list the offending fields in order.
"""
from typing import Any

from src.links.constants import MAX_BULK_LINKS
from src.links.schemes import (
    CreateLinkRequest,
    DomainKeyParams,
    GetLinksQuery,
    LinksCountQuery,
    UpdateLinkRequest,
)
from src.validation import ErrorCode, FieldError, ValidationResult, validate_model


def validate_create(raw_body: Any) -> ValidationResult[CreateLinkRequest]:
    return validate_model(CreateLinkRequest, raw_body)


def validate_update(raw_body: Any) -> ValidationResult[UpdateLinkRequest]:
    # пустой PATCH допустим и ничего не меняет
    return validate_model(UpdateLinkRequest, {} if raw_body is None else raw_body)


def validate_bulk_create(raw_bodies: Any) -> ValidationResult[list[CreateLinkRequest]]:
    """Validate a batch of create payloads.

    Errors of all elements are collected, not only the first failing one.
    Their field paths are prefixed with the element index, e.g. ``"2.url"``.
    """
    if not isinstance(raw_bodies, list):
        return ValidationResult(errors=[FieldError(
            field="",
            code=ErrorCode.INVALID_VALUE,
            message="Expected a list of links"
        )])
    if not raw_bodies:
        return ValidationResult(errors=[FieldError(
            field="",
            code=ErrorCode.EMPTY_BATCH,
            message="No links created – you must provide at least one link."
        )])
    if len(raw_bodies) > MAX_BULK_LINKS:
        return ValidationResult(errors=[FieldError(
            field="",
            code=ErrorCode.BATCH_TOO_LARGE,
            message=f"You can only create up to {MAX_BULK_LINKS} links at a time.",
            context={"limit": MAX_BULK_LINKS, "size": len(raw_bodies)}
        )])

    links, errors = [], []
    for index, raw_body in enumerate(raw_bodies):
        result = validate_model(CreateLinkRequest, raw_body, prefix=str(index))
        if result.ok:
            links.append(result.value)
        else:
            errors.extend(result.errors)

    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(value=links)


def validate_links_query(raw_query: Any) -> ValidationResult[GetLinksQuery]:
    return validate_model(GetLinksQuery, raw_query)


def validate_links_count_query(raw_query: Any) -> ValidationResult[LinksCountQuery]:
    return validate_model(LinksCountQuery, raw_query)


def validate_domain_key(raw_params: Any) -> ValidationResult[DomainKeyParams]:
    return validate_model(DomainKeyParams, raw_params)
