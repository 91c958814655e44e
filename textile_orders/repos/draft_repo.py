# textile_orders/repos/draft_repo.py
from datetime import datetime
from typing import Dict, Any, List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from textile_orders.data.models.draft import DraftOrderModel
from textile_orders.data.models.draft_item import DraftItemModel


class DraftRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_draft(self, draft_id: int) -> DraftOrderModel | None:
        return self.db.get(DraftOrderModel, draft_id)

    def create_draft(self, draft: DraftOrderModel) -> DraftOrderModel:
        self.db.add(draft)
        self.db.commit()
        self.db.refresh(draft)
        return draft

    def replace_items(self, draft: DraftOrderModel, items: List[DraftItemModel]) -> None:
        #whole list is rewritten, delete-orphan removes the old rows
        draft.items.clear()
        draft.items.extend(items)
        self.db.flush()

    def update_draft_version(self, draft_id: int, old_version: int, new_data: Dict[str, Any]) -> int:
        # UPDATE draft_orders SET ... WHERE id = :id AND version = :old_version
        result = self.db.execute(
            update(DraftOrderModel)
            .where(DraftOrderModel.id == draft_id, DraftOrderModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def get_expired_drafts(self, now: datetime) -> List[DraftOrderModel]:
        return list(
            self.db.execute(
                select(DraftOrderModel).where(
                    DraftOrderModel.status == "ACTIVE",
                    DraftOrderModel.expires_at < now,
                )
            ).scalars().all()
        )

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
