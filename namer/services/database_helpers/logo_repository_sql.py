# /namer/services/database_helpers/logo_repository_sql.py

from typing import List, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from namer.db.database import utcnow
from namer.db.models.logo_models import LogoGeneration, GeneratedLogo, LogoColorVariant
from namer.models.logo_model import LogoGenerationStatus


class LogoRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    # --- LogoGeneration ---
    def add_logo_generation(self, record: Dict) -> LogoGeneration:
        generation = LogoGeneration(**record)
        self.db.add(generation)
        self.db.commit()
        self.db.refresh(generation)
        return generation

    def get_logo_generation(self, generation_id: str) -> Optional[LogoGeneration]:
        return self.db.query(LogoGeneration).filter(LogoGeneration.id == generation_id).first()

    def set_logo_generation_status(
        self, generation_id: str, status: str, error_message: Optional[str] = None
    ) -> None:
        self.db.query(LogoGeneration).filter(LogoGeneration.id == generation_id).update(
            {
                LogoGeneration.status: status,
                LogoGeneration.error_message: error_message,
                LogoGeneration.updated_at: utcnow(),
            },
            synchronize_session=False,
        )
        self.db.commit()

    def increment_logos_completed(self, generation_id: str, cost_cents: int = 0) -> None:
        """
        Atomically bumps the completion counter (and cost) in SQL so that
        concurrent workers for the same generation never lose an update.
        """
        self.db.query(LogoGeneration).filter(LogoGeneration.id == generation_id).update(
            {
                LogoGeneration.logos_completed: LogoGeneration.logos_completed + 1,
                LogoGeneration.cost_cents: LogoGeneration.cost_cents + cost_cents,
                LogoGeneration.updated_at: utcnow(),
            },
            synchronize_session=False,
        )
        self.db.commit()

    def complete_if_all_logos_done(self, generation_id: str) -> bool:
        """Marks the generation completed only if the counter has reached the target."""
        updated = self.db.query(LogoGeneration).filter(
            LogoGeneration.id == generation_id,
            LogoGeneration.status == LogoGenerationStatus.PROCESSING.value,
            LogoGeneration.logos_completed >= LogoGeneration.total_logos_requested,
        ).update(
            {
                LogoGeneration.status: LogoGenerationStatus.COMPLETED.value,
                LogoGeneration.error_message: None,
                LogoGeneration.updated_at: utcnow(),
            },
            synchronize_session=False,
        )
        self.db.commit()
        return updated > 0

    # --- GeneratedLogo ---
    def add_generated_logo(self, record: Dict) -> GeneratedLogo:
        logo = GeneratedLogo(**record)
        self.db.add(logo)
        self.db.commit()
        self.db.refresh(logo)
        return logo

    def get_logos_for_generation(
        self, generation_id: str, logo_ids: Optional[List[int]] = None
    ) -> List[GeneratedLogo]:
        query = self.db.query(GeneratedLogo).filter(GeneratedLogo.logo_generation_id == generation_id)
        if logo_ids is not None:
            query = query.filter(GeneratedLogo.id.in_(logo_ids))
        return query.order_by(GeneratedLogo.id).all()

    def get_logo(self, generation_id: str, logo_id: int) -> Optional[GeneratedLogo]:
        return self.db.query(GeneratedLogo).filter(
            GeneratedLogo.logo_generation_id == generation_id,
            GeneratedLogo.id == logo_id,
        ).first()

    # --- LogoColorVariant ---
    def get_color_variant(self, logo_id: int, color_scheme: str) -> Optional[LogoColorVariant]:
        return self.db.query(LogoColorVariant).filter(
            LogoColorVariant.generated_logo_id == logo_id,
            LogoColorVariant.color_scheme == color_scheme,
        ).first()

    def add_color_variant(self, record: Dict) -> LogoColorVariant:
        """
        Inserts a variant. If another request created the same
        (logo, scheme) pair first, that row is returned instead.
        """
        variant = LogoColorVariant(**record)
        self.db.add(variant)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            existing = self.get_color_variant(record["generated_logo_id"], record["color_scheme"])
            if existing is None:
                raise
            return existing
        self.db.refresh(variant)
        return variant
