"""Owner-scoped quote lifecycle.

The service trusts the requester id it is handed (resolved by the API's access
gate) and never takes ownership from the payload. Every mutation is a single
repository call; status changes are written conditionally on the status that
was read, so two racing transitions cannot both succeed.
"""
import logging
from typing import Any, Mapping

from pydantic import BaseModel, TypeAdapter, ValidationError as PydanticValidationError

from guardquote.core.errors import (
    Forbidden,
    ImmutableFieldError,
    InvalidTransition,
    NotFound,
    Unauthorized,
    ValidationError,
)
from guardquote.models.quote import Quote
from guardquote.models.user import User
from guardquote.repositories.quotes import QuoteRepository
from guardquote.repositories.users import UserRepository
from guardquote.services import quote_status
from guardquote.services.intake import build_quote_payload
from guardquote.services.validation import IMMUTABLE_FIELDS, ValidationResult, validate_create, validate_update

logger = logging.getLogger(__name__)
_int = TypeAdapter(int)


def _columns(values: Mapping[str, Any]) -> dict[str, Any]:
    # structured payloads live in JSON columns
    return {k: (v.model_dump(mode="json") if isinstance(v, BaseModel) else v) for k, v in values.items()}


def _changes_immutable(name: str, value: Any, stored: Any) -> bool:
    if name == "quote_type":
        return value != stored
    # ids compare as integers so 1, "1" and 1.0 all match a stored 1
    try:
        return _int.validate_python(value) != stored
    except PydanticValidationError:
        return True


def _raise_for(result: ValidationResult, message: str) -> None:
    if result.refused_transition:
        raise InvalidTransition(*result.refused_transition)
    if result.errors:
        raise ValidationError(message, errors=result.errors)


class QuoteService:
    def __init__(
        self,
        quotes: QuoteRepository,
        users: UserRepository,
        ownership_policy: str = "forbidden",
        newest_first: bool = False,
    ):
        self.quotes = quotes
        self.users = users
        self.ownership_policy = ownership_policy
        self.newest_first = newest_first

    def _resolve_owner(self, owner_id: int) -> User:
        owner = self.users.get_by_id(owner_id)
        if owner is None:
            raise Unauthorized("Unknown user")
        return owner

    def _deny(self, requester_id: int, quote_id: int):
        logger.warning("[quotes] user %s denied access to quote %s", requester_id, quote_id)
        if self.ownership_policy == "not_found":
            return NotFound("Quote not found")
        return Forbidden("Forbidden")

    def create(self, owner_id: int, payload: Mapping[str, Any]) -> Quote:
        owner = self._resolve_owner(owner_id)
        result = validate_create(payload)
        _raise_for(result, "Quote payload is invalid")
        record = result.payload
        values = _columns({name: getattr(record, name) for name in type(record).model_fields})
        values.update(user_id=owner.id, status=quote_status.PENDING, estimated_amount=None)
        quote_id = self.quotes.insert(values)
        logger.info("[quotes] user %s created %s quote %s", owner.id, values["quote_type"], quote_id)
        return self.quotes.get_by_id(quote_id)

    def intake(self, owner_id: int, answers: Mapping[str, Any], applicant_type: str | None = None) -> Quote:
        """Create a quote from raw form answers; the track defaults to the owner's user_type."""
        owner = self._resolve_owner(owner_id)
        payload = build_quote_payload(applicant_type or owner.user_type, answers)
        return self.create(owner.id, payload.model_dump(mode="json"))

    def get(self, requester_id: int, quote_id: int) -> Quote:
        quote = self.quotes.get_by_id(quote_id)
        if quote is None:
            raise NotFound("Quote not found")
        if quote.user_id != requester_id:
            raise self._deny(requester_id, quote_id)
        return quote

    def list_mine(self, requester_id: int) -> list[Quote]:
        return self.quotes.list_by_owner(requester_id, newest_first=self.newest_first)

    def update(self, requester_id: int, quote_id: int, partial: Mapping[str, Any]) -> Quote:
        quote = self.get(requester_id, quote_id)
        for name in IMMUTABLE_FIELDS:
            if name in partial and _changes_immutable(name, partial[name], getattr(quote, name)):
                raise ImmutableFieldError(f"'{name}' cannot be changed after creation", [name])

        result = validate_update(quote, partial)
        if result.refused_transition:
            logger.warning("[quotes] refused %s -> %s on quote %s", *result.refused_transition, quote.id)
        _raise_for(result, "Quote update is invalid")
        if not result.changes:
            return quote

        affected = self.quotes.update_by_id(quote.id, _columns(result.changes), expected_status=quote.status)
        if not affected:
            current = self.quotes.get_by_id(quote.id)
            if current is None:
                raise NotFound("Quote not found")
            raise InvalidTransition(
                current.status,
                result.target_status or current.status,
                message=f"Quote moved to '{current.status}' concurrently; reload and retry",
            )
        if result.target_status:
            logger.info("[quotes] quote %s %s -> %s", quote.id, quote.status, result.target_status)
        return self.quotes.get_by_id(quote.id)

    def expire(self, requester_id: int, quote_id: int) -> Quote:
        """Apply the externally triggered expiry. Expiring twice is a no-op."""
        return self.update(requester_id, quote_id, {"status": quote_status.EXPIRED})

    def delete(self, requester_id: int, quote_id: int) -> int:
        """Remove an owned quote; returns the number of rows removed (0 if already gone)."""
        quote = self.quotes.get_by_id(quote_id)
        if quote is None:
            return 0
        if quote.user_id != requester_id:
            error = self._deny(requester_id, quote_id)
            if isinstance(error, NotFound):
                # indistinguishable from deleting an id that does not exist
                return 0
            raise error
        affected = self.quotes.delete_by_id(quote_id, owner_id=requester_id)
        logger.info("[quotes] user %s deleted quote %s (%s row(s))", requester_id, quote_id, affected)
        return affected
