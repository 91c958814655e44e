# textile_orders/api/routers/drafts.py
from fastapi import APIRouter, Depends, HTTPException

from textile_orders.api.dependencies import get_draft_service, get_order_service
from textile_orders.domain.schemas import (
    AdjustmentsIn,
    DraftCreate,
    DraftOut,
    ItemIn,
    OrderOut,
    PaymentIn,
)
from textile_orders.services.draft_service import DraftService
from textile_orders.services.order_service import OrderService

router = APIRouter(prefix="/drafts", tags=["drafts"])


@router.post("/", response_model=DraftOut, status_code=201)
def create_draft(payload: DraftCreate, svc: DraftService = Depends(get_draft_service)):
    return svc.create_draft(payload)


@router.get("/{draft_id}", response_model=DraftOut)
def get_draft(draft_id: int, svc: DraftService = Depends(get_draft_service)):
    draft = svc.get_draft(draft_id)
    if not draft:
        raise HTTPException(status_code=404, detail="Draft order not found")
    return draft


@router.post("/{draft_id}/items", response_model=DraftOut)
def add_item(draft_id: int, payload: ItemIn, svc: DraftService = Depends(get_draft_service)):
    try:
        return svc.add_item(draft_id, payload)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{draft_id}/items/{index}", response_model=DraftOut)
def remove_item(draft_id: int, index: int, svc: DraftService = Depends(get_draft_service)):
    try:
        return svc.remove_item(draft_id, index)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{draft_id}/adjustments", response_model=DraftOut)
def set_adjustments(draft_id: int, payload: AdjustmentsIn, svc: DraftService = Depends(get_draft_service)):
    try:
        return svc.set_adjustments(draft_id, payload)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.put("/{draft_id}/payment", response_model=DraftOut)
def update_payment(draft_id: int, payload: PaymentIn, svc: DraftService = Depends(get_draft_service)):
    try:
        return svc.update_payment(draft_id, payload)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{draft_id}/submit", response_model=OrderOut, status_code=201)
def submit_draft(
    draft_id: int,
    svc: DraftService = Depends(get_draft_service),
    orders: OrderService = Depends(get_order_service),
):
    """
    Submits the draft as a sales order. On failure the draft stays as it was
    and can be submitted again.
    """
    try:
        created = svc.submit(draft_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return orders.get_order(created["order_id"])


@router.delete("/{draft_id}", response_model=DraftOut)
def cancel_draft(draft_id: int, svc: DraftService = Depends(get_draft_service)):
    try:
        return svc.cancel_draft(draft_id)
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
