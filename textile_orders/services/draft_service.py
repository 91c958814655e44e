# textile_orders/services/draft_service.py
from dataclasses import replace
from datetime import datetime, timezone, timedelta
from decimal import Decimal
from typing import Dict, Any

import requests
from kombu.exceptions import OperationalError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from textile_orders.data.models.draft import DraftOrderModel
from textile_orders.data.models.draft_item import DraftItemModel
from textile_orders.domain.errors import (
    CatalogUnavailable,
    ConcurrencyConflict,
    SubmissionError,
    SubmissionInProgress,
)
from textile_orders.domain.line_item import LineItem, LineItemCandidate, ProductReference, ProductType
from textile_orders.domain.money import round_currency
from textile_orders.domain.payment import ChequeDetails, ChequeStatus, PaymentMode, PaymentState, PaymentStatus
from textile_orders.domain.schemas import AdjustmentsIn, DraftCreate, ItemIn, PaymentIn
from textile_orders.domain.session import (
    CustomerRef,
    OrderCompositionSession,
    OrderPayload,
    PaymentChanged,
    SubmissionFailed,
    TotalsRecomputed,
)
from textile_orders.domain.totals import OrderAdjustments
from textile_orders.repos.draft_repo import DraftRepo
from textile_orders.services.catalog_client import CatalogClient
from textile_orders.services.lock_service import LockService
from textile_orders.services.order_service import OrderService
from textile_orders.utils.settings import DRAFT_TTL_SECONDS, SUBMIT_LOCK_TTL_SECONDS
from textile_orders.utils.logging import get_logger

logger = get_logger(__name__)


def _as_utc(value: datetime) -> datetime:
    #sqlite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class DraftService:
    """
    Use cases for draft orders.
    Each command rebuilds the composition session from the draft row, applies one
    change and writes it back under optimistic locking on the version column.
    Queries (get) only read.
    """

    def __init__(
        self,
        db: Session,
        catalog_client: CatalogClient,
        lock_service: LockService,
        order_service: OrderService,
    ):
        self.repo = DraftRepo(db)
        self.catalog_client = catalog_client
        self.lock_service = lock_service
        self.order_service = order_service

    #query
    def get_draft(self, draft_id: int) -> Dict[str, Any] | None:
        draft = self.repo.get_draft(draft_id)

        if not draft:
            return None

        return self._to_dict(draft, self._restore(draft))

    #commands
    def create_draft(self, payload: DraftCreate) -> Dict[str, Any]:
        draft = DraftOrderModel(
            status="ACTIVE",
            version=1,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=DRAFT_TTL_SECONDS),
            customer_name=payload.customer_name,
            customer_id=payload.customer_id,
            delivery_date=payload.delivery_date,
            delivery_address=payload.delivery_address,
            remarks=payload.remarks,
            order_discount=Decimal("0.00"),
            order_tax=Decimal("0.00"),
            payment_status=PaymentStatus.PENDING.value,
            payment_amount=Decimal("0.00"),
            payment_mode=PaymentMode.CASH.value,
        )
        created = self.repo.create_draft(draft)

        logger.info(f"Created draft order {created.id} for customer {created.customer_name}")

        return self.get_draft(created.id)

    def add_item(self, draft_id: int, item: ItemIn) -> Dict[str, Any]:
        draft = self._load_active(draft_id)
        session = self._restore(draft)

        logger.info(f"Fetching {item.product_type.value} product {item.product_id} from catalog")
        try:
            product = self.catalog_client.fetch_product(item.product_type, item.product_id)
        except LookupError as e:
            raise ValueError(str(e)) from e
        except requests.RequestException as e:
            #retries are already spent inside the client
            logger.error(f"Catalog lookup for {item.product_type.value} product {item.product_id} failed: {e}")
            raise CatalogUnavailable("Product catalog is unavailable, please try again") from e

        unit_price = item.unit_price if item.unit_price is not None else product.unit_price

        #stock snapshot is taken here, later catalog changes do not touch this line
        session.add_item(
            LineItemCandidate(
                product=ProductReference(
                    product_id=product.id,
                    product_type=product.product_type,
                    display_name=product.display_name,
                    inventory_reference=product.inventory_reference,
                ),
                quantity=item.quantity,
                unit_price=round_currency(unit_price),
                available_quantity=product.available_quantity,
                discount=round_currency(item.discount),
                tax=round_currency(item.tax),
            )
        )

        self._save(draft, session, items_changed=True)
        logger.info(f"Added {item.product_type.value} product {item.product_id} x{item.quantity} to draft {draft_id}")
        return self.get_draft(draft_id)

    def remove_item(self, draft_id: int, index: int) -> Dict[str, Any]:
        draft = self._load_active(draft_id)
        session = self._restore(draft)

        removed = session.remove_item(index)

        self._save(draft, session, items_changed=True)
        logger.info(f"Removed item {index} (product {removed.product.product_id}) from draft {draft_id}")
        return self.get_draft(draft_id)

    def set_adjustments(self, draft_id: int, payload: AdjustmentsIn) -> Dict[str, Any]:
        draft = self._load_active(draft_id)
        session = self._restore(draft)

        session.set_adjustments(OrderAdjustments.from_raw(payload.order_discount, payload.order_tax))

        self._save(draft, session)
        return self.get_draft(draft_id)

    def update_payment(self, draft_id: int, payload: PaymentIn) -> Dict[str, Any]:
        """
        Applies status first (which may derive the amount), then mode, then an
        explicit amount. Cheque fields are kept only while the mode is CHEQUE.
        """
        draft = self._load_active(draft_id)
        session = self._restore(draft)

        if payload.status is not None:
            session.change_payment_status(payload.status)

        cheque_fields = {
            k: v
            for k, v in {
                "cheque_number": payload.cheque_number,
                "bank": payload.bank,
                "branch": payload.branch,
                "status": payload.cheque_status,
            }.items()
            if v is not None
        }
        current = session.payment.cheque or ChequeDetails()
        cheque = replace(current, **cheque_fields) if cheque_fields else None

        if payload.mode is not None:
            session.set_payment_mode(payload.mode, cheque)
        elif cheque is not None and session.payment.mode == PaymentMode.CHEQUE:
            session.set_payment_mode(PaymentMode.CHEQUE, cheque)

        if payload.amount is not None:
            session.set_payment_amount(payload.amount)

        self._save(draft, session)
        return self.get_draft(draft_id)

    def submit(self, draft_id: int) -> Dict[str, Any]:
        draft = self._load_active(draft_id)
        session = self._restore(draft)
        draft_version = draft.version

        token = self.lock_service.acquire_submit_lock(draft_id, ttl=SUBMIT_LOCK_TTL_SECONDS)
        if not token:
            raise SubmissionInProgress("Order submission already in progress")

        def submit_and_close(payload: OrderPayload):
            result = self.order_service.submit_order(payload)

            #order rows and the closed draft go out in one commit
            rowcount = self.repo.update_draft_version(
                draft_id=draft_id,
                old_version=draft_version,
                new_data={
                    "status": "SUBMITTED",
                    "version": draft_version + 1,
                    "submitted_order_id": result.order_id,
                },
            )
            if rowcount == 0:
                self.repo.rollback()
                raise SubmissionError("Draft was modified by another operation, please retry")

            try:
                self.repo.commit()
            except SQLAlchemyError as e:
                self.repo.rollback()
                logger.error(f"Commit of order for draft {draft_id} failed: {e}")
                raise SubmissionError("Failed to create sales order") from e
            return result

        try:
            logger.info(f"Submitting draft {draft_id}")
            result = session.submit(submit_and_close)
        finally:
            self.lock_service.release_submit_lock(draft_id, token)

        if not result.ok:
            raise SubmissionError(result.reason or "Failed to create sales order")

        try:
            self.order_service.notify(result.order_id, result.order_number, draft.customer_name)
        except OperationalError as e:
            #order is already stored, a lost notification must not fail the request
            logger.warning(f"Could not queue notification for order {result.order_number}: {e}")

        return {"order_id": result.order_id, "order_number": result.order_number}

    def cancel_draft(self, draft_id: int) -> Dict[str, Any]:
        draft = self._load_active(draft_id)

        rowcount = self.repo.update_draft_version(
            draft_id=draft.id,
            old_version=draft.version,
            new_data={"status": "CANCELLED", "version": draft.version + 1},
        )
        if rowcount == 0:
            self.repo.rollback()
            raise ConcurrencyConflict("Concurrency conflict - draft was modified by another operation")

        self.repo.commit()
        logger.info(f"Draft {draft_id} cancelled")
        return self.get_draft(draft_id)

    # internals

    def _load_active(self, draft_id: int) -> DraftOrderModel:
        draft = self.repo.get_draft(draft_id)

        if not draft:
            raise LookupError("Draft order does not exist")

        if draft.status != "ACTIVE":
            raise ValueError("Draft order can no longer be modified")

        if _as_utc(draft.expires_at) < datetime.now(timezone.utc):
            raise ValueError("Draft order has expired")

        return draft

    def _restore(self, draft: DraftOrderModel) -> OrderCompositionSession:
        mode = PaymentMode(draft.payment_mode)
        cheque = None
        if mode == PaymentMode.CHEQUE:
            cheque = ChequeDetails(
                cheque_number=draft.cheque_number or "",
                bank=draft.bank or "",
                branch=draft.branch or "",
                status=ChequeStatus(draft.cheque_status or ChequeStatus.PENDING.value),
            )

        session = OrderCompositionSession(
            customer=CustomerRef(
                name=draft.customer_name,
                customer_id=draft.customer_id,
                delivery_date=draft.delivery_date,
                delivery_address=draft.delivery_address,
                remarks=draft.remarks,
            ),
            items=[
                LineItem(
                    product=ProductReference(
                        product_id=i.product_id,
                        product_type=ProductType(i.product_type),
                        display_name=i.display_name or "",
                        inventory_reference=i.inventory_reference,
                    ),
                    quantity=i.quantity,
                    unit_price=Decimal(i.unit_price),
                    item_discount=Decimal(i.discount),
                    item_tax=Decimal(i.tax),
                    available_quantity=i.available_quantity,
                    subtotal=Decimal(i.subtotal),
                )
                for i in draft.items
            ],
            adjustments=OrderAdjustments(
                order_discount=Decimal(draft.order_discount),
                order_tax=Decimal(draft.order_tax),
            ),
            payment=PaymentState(
                status=PaymentStatus(draft.payment_status),
                amount=Decimal(draft.payment_amount),
                mode=mode,
                cheque=cheque,
            ),
        )

        draft_id = draft.id
        session.events.subscribe(
            TotalsRecomputed,
            lambda e: logger.info(f"Draft {draft_id} total recomputed: {e.totals.total}"),
        )
        session.events.subscribe(
            PaymentChanged,
            lambda e: logger.info(f"Draft {draft_id} payment {e.payment.status.value} {e.payment.amount}"),
        )
        session.events.subscribe(
            SubmissionFailed,
            lambda e: logger.warning(f"Draft {draft_id} submission failed: {e.reason}"),
        )
        return session

    def _save(self, draft: DraftOrderModel, session: OrderCompositionSession, items_changed: bool = False) -> None:
        draft_id = draft.id
        version = draft.version

        if items_changed:
            self.repo.replace_items(
                draft,
                [
                    DraftItemModel(
                        position=position,
                        product_type=item.product.product_type.value,
                        product_id=item.product.product_id,
                        display_name=item.product.display_name,
                        inventory_reference=item.product.inventory_reference,
                        quantity=item.quantity,
                        available_quantity=item.available_quantity,
                        unit_price=item.unit_price,
                        discount=item.item_discount,
                        tax=item.item_tax,
                        subtotal=item.subtotal,
                    )
                    for position, item in enumerate(session.cart.items)
                ],
            )

        payment = session.payment
        cheque = payment.cheque

        # Optimistic locking, every change also extends the draft lifetime
        rowcount = self.repo.update_draft_version(
            draft_id=draft_id,
            old_version=version,
            new_data={
                "version": version + 1,
                "expires_at": datetime.now(timezone.utc) + timedelta(seconds=DRAFT_TTL_SECONDS),
                "order_discount": session.adjustments.order_discount,
                "order_tax": session.adjustments.order_tax,
                "payment_status": payment.status.value,
                "payment_amount": payment.amount,
                "payment_mode": payment.mode.value,
                "cheque_number": cheque.cheque_number if cheque else None,
                "bank": cheque.bank if cheque else None,
                "branch": cheque.branch if cheque else None,
                "cheque_status": cheque.status.value if cheque else None,
            },
        )

        if rowcount == 0:
            self.repo.rollback()
            raise ConcurrencyConflict("Concurrency conflict - draft was modified by another operation")

        self.repo.commit()

    def _to_dict(self, draft: DraftOrderModel, session: OrderCompositionSession) -> Dict[str, Any]:
        totals = session.totals
        payment = session.payment
        cheque = payment.cheque

        #dict shaped like DraftOut
        return {
            "draft_id": draft.id,
            "status": draft.status,
            "version": draft.version,
            "customer_name": draft.customer_name,
            "customer_id": draft.customer_id,
            "delivery_date": draft.delivery_date,
            "delivery_address": draft.delivery_address,
            "remarks": draft.remarks,
            "items": [
                {
                    "index": index,
                    "product_type": item.product.product_type,
                    "product_id": item.product.product_id,
                    "display_name": item.product.display_name,
                    "inventory_reference": item.product.inventory_reference,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "discount": item.item_discount,
                    "tax": item.item_tax,
                    "subtotal": item.subtotal,
                    "available_quantity": item.available_quantity,
                }
                for index, item in enumerate(session.cart.items)
            ],
            "totals": {
                "items_subtotal": totals.items_subtotal,
                "order_discount": totals.order_discount,
                "order_tax": totals.order_tax,
                "total": totals.total,
            },
            "payment": {
                "status": payment.status,
                "amount": payment.amount,
                "mode": payment.mode,
                "cheque_number": cheque.cheque_number if cheque else None,
                "bank": cheque.bank if cheque else None,
                "branch": cheque.branch if cheque else None,
                "cheque_status": cheque.status if cheque else None,
                "balance_due": session.balance_due,
            },
            "expires_at": draft.expires_at,
        }
