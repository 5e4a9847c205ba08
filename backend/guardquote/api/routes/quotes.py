from typing import Any

from fastapi import APIRouter, Body, Depends, status

from guardquote.api.deps import get_current_user_id, get_quote_service
from guardquote.schemas.quote import IntakeRequest, QuoteDeleted, QuoteOut
from guardquote.services.quote_service import QuoteService

router = APIRouter()

# Bodies are taken as plain objects: the validation layer reports field errors
# in its own format instead of FastAPI's default 422.

@router.post("", response_model=QuoteOut, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=QuoteOut, status_code=status.HTTP_201_CREATED)
def create_quote(
    payload: dict[str, Any] = Body(...),
    service: QuoteService = Depends(get_quote_service),
    user_id: int = Depends(get_current_user_id),
):
    """Create a quote from a typed payload (quote_type + that track's fields).

    status, estimated_amount and user_id in the body are ignored: new quotes
    are always pending and owned by the caller.
    """
    return service.create(user_id, payload)

@router.post("/intake", response_model=QuoteOut, status_code=status.HTTP_201_CREATED)
def submit_intake(
    body: IntakeRequest,
    service: QuoteService = Depends(get_quote_service),
    user_id: int = Depends(get_current_user_id),
):
    """Create a quote from raw form answers of the individual or business questionnaire."""
    return service.intake(user_id, body.answers, applicant_type=body.applicant_type)

@router.get("", response_model=list[QuoteOut])
@router.get("/", response_model=list[QuoteOut])
def my_quotes(service: QuoteService = Depends(get_quote_service), user_id: int = Depends(get_current_user_id)):
    return service.list_mine(user_id)

@router.get("/{quote_id}", response_model=QuoteOut)
def get_quote(quote_id: int, service: QuoteService = Depends(get_quote_service), user_id: int = Depends(get_current_user_id)):
    return service.get(user_id, quote_id)

@router.patch("/{quote_id}", response_model=QuoteOut)
def update_quote(
    quote_id: int,
    payload: dict[str, Any] = Body(...),
    service: QuoteService = Depends(get_quote_service),
    user_id: int = Depends(get_current_user_id),
):
    """Partial update.

    Rules:
    - Track fields can be edited while the quote is pending or in_review.
    - ``status`` moves along pending -> in_review -> quoted -> accepted; any
      non-terminal quote can be rejected or expired.
    - Moving to quoted requires ``estimated_amount`` in the same request.
    - user_id and quote_type never change.
    """
    return service.update(user_id, quote_id, payload)

@router.post("/{quote_id}/expire", response_model=QuoteOut)
def expire_quote(quote_id: int, service: QuoteService = Depends(get_quote_service), user_id: int = Depends(get_current_user_id)):
    return service.expire(user_id, quote_id)

@router.delete("/{quote_id}", response_model=QuoteDeleted)
def delete_quote(quote_id: int, service: QuoteService = Depends(get_quote_service), user_id: int = Depends(get_current_user_id)):
    # idempotent: a second delete reports zero rows instead of failing
    return {"deleted": service.delete(user_id, quote_id)}
