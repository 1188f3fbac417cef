# /namer/services/database_helpers/share_repository_sql.py

from typing import List, Dict, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from namer.db.database import utcnow
from namer.db.models.share_models import Share, ShareAccess, Export


class ShareRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Shares ---
    def add_share(self, record: Dict) -> Share:
        share = Share(**record)
        self.db.add(share)
        self.db.commit()
        self.db.refresh(share)
        return share

    def get_share(self, share_id: str) -> Optional[Share]:
        return self.db.query(Share).filter(Share.id == share_id).first()

    def get_shares_by_user(self, user_id: Optional[str], active_only: bool = False) -> List[Share]:
        query = self.db.query(Share).filter(Share.user_id == user_id)
        if active_only:
            query = query.filter(Share.is_active.is_(True))
        return query.order_by(Share.created_at.desc()).all()

    def save_share(self, share: Share) -> Share:
        self.db.add(share)
        self.db.commit()
        self.db.refresh(share)
        return share

    def delete_share(self, share_id: str) -> bool:
        share = self.get_share(share_id)
        if share:
            self.db.delete(share)
            self.db.commit()
            return True
        return False

    def record_share_access(
        self,
        share_id: str,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        referrer: Optional[str] = None,
    ) -> None:
        now = utcnow()
        self.db.query(Share).filter(Share.id == share_id).update(
            {Share.view_count: Share.view_count + 1, Share.last_viewed_at: now},
            synchronize_session=False,
        )
        self.db.add(ShareAccess(
            share_id=share_id,
            ip_address=ip_address,
            user_agent=user_agent,
            referrer=referrer,
            accessed_at=now,
        ))
        self.db.commit()

    def get_share_access_stats(self, share_id: str, recent_limit: int = 10) -> Dict:
        unique_visitors = (
            self.db.query(func.count(func.distinct(ShareAccess.ip_address)))
            .filter(ShareAccess.share_id == share_id)
            .scalar()
        ) or 0
        recent = (
            self.db.query(ShareAccess)
            .filter(ShareAccess.share_id == share_id)
            .order_by(ShareAccess.accessed_at.desc())
            .limit(recent_limit)
            .all()
        )
        return {"unique_visitors": unique_visitors, "recent": recent}

    def deactivate_expired_shares(self) -> int:
        updated = self.db.query(Share).filter(
            Share.is_active.is_(True),
            Share.expires_at.isnot(None),
            Share.expires_at <= utcnow(),
        ).update({Share.is_active: False, Share.updated_at: utcnow()}, synchronize_session=False)
        self.db.commit()
        return updated

    # --- Exports ---
    def add_export(self, record: Dict) -> Export:
        export = Export(**record)
        self.db.add(export)
        self.db.commit()
        self.db.refresh(export)
        return export

    def get_export(self, export_id: str) -> Optional[Export]:
        return self.db.query(Export).filter(Export.id == export_id).first()

    def get_exports_by_user(self, user_id: Optional[str]) -> List[Export]:
        return (
            self.db.query(Export)
            .filter(Export.user_id == user_id)
            .order_by(Export.created_at.desc())
            .all()
        )

    def save_export(self, export: Export) -> Export:
        self.db.add(export)
        self.db.commit()
        self.db.refresh(export)
        return export

    def increment_download_count(self, export_id: str) -> None:
        self.db.query(Export).filter(Export.id == export_id).update(
            {Export.download_count: Export.download_count + 1},
            synchronize_session=False,
        )
        self.db.commit()

    def delete_export(self, export_id: str) -> bool:
        """Deletes the row; the mapper listener removes the backing file."""
        export = self.get_export(export_id)
        if export:
            self.db.delete(export)
            self.db.commit()
            return True
        return False

    def get_expired_exports(self) -> List[Export]:
        return self.db.query(Export).filter(
            Export.expires_at.isnot(None),
            Export.expires_at <= utcnow(),
        ).all()
