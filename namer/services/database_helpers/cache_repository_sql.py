# /namer/services/database_helpers/cache_repository_sql.py

"""
Data access for the two time-boxed caches.

Rows are never updated in place: storing a value for a key whose row has
gone stale replaces that row. Expired rows stay in the table until a
maintenance cleanup removes them; lookups simply ignore them.
"""

from typing import Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from namer.db.database import utcnow
from namer.db.models.generation_models import GenerationCache, DomainCache


class CacheRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- Generation cache ---
    def get_fresh_generation_cache(self, input_hash: str) -> Optional[GenerationCache]:
        return (
            self.db.query(GenerationCache)
            .filter(
                GenerationCache.input_hash == input_hash,
                GenerationCache.cached_at >= GenerationCache.freshness_cutoff(),
            )
            .first()
        )

    def store_generation_cache(self, record: Dict) -> GenerationCache:
        fresh = self.get_fresh_generation_cache(record["input_hash"])
        if fresh is not None:
            return fresh
        # A stale row for the same hash is superseded by the new one.
        self.db.query(GenerationCache).filter(
            GenerationCache.input_hash == record["input_hash"]
        ).delete(synchronize_session=False)
        entry = GenerationCache(cached_at=utcnow(), **record)
        self.db.add(entry)
        try:
            self.db.commit()
        except IntegrityError:
            # Another worker stored the same hash first; keep its row.
            self.db.rollback()
            existing = self.db.query(GenerationCache).filter(
                GenerationCache.input_hash == record["input_hash"]
            ).first()
            if existing is None:
                raise
            return existing
        self.db.refresh(entry)
        return entry

    def delete_generation_cache(self, input_hash: str) -> bool:
        deleted = self.db.query(GenerationCache).filter(
            GenerationCache.input_hash == input_hash
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted > 0

    def clear_expired_generation_cache(self) -> int:
        deleted = self.db.query(GenerationCache).filter(
            GenerationCache.cached_at < GenerationCache.freshness_cutoff()
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted

    # --- Domain cache ---
    def get_fresh_domain_cache(self, domain: str) -> Optional[DomainCache]:
        return (
            self.db.query(DomainCache)
            .filter(
                DomainCache.domain == domain,
                DomainCache.checked_at >= DomainCache.freshness_cutoff(),
            )
            .first()
        )

    def store_domain_cache(self, domain: str, available: bool) -> DomainCache:
        self.db.query(DomainCache).filter(DomainCache.domain == domain).delete(synchronize_session=False)
        entry = DomainCache(domain=domain, available=available, checked_at=utcnow())
        self.db.add(entry)
        self.db.commit()
        self.db.refresh(entry)
        return entry

    def clear_expired_domain_cache(self) -> int:
        deleted = self.db.query(DomainCache).filter(
            DomainCache.checked_at < DomainCache.freshness_cutoff()
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted
