# /namer/services/database_helpers/mood_board_repository_sql.py

from typing import List, Dict, Optional

from sqlalchemy.orm import Session

from namer.db.models.logo_models import GeneratedLogo
from namer.db.models.mood_board_models import MoodBoard, MoodBoardItem


class MoodBoardRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    def add_mood_board(self, record: Dict) -> MoodBoard:
        new_board = MoodBoard(**record)
        self.db.add(new_board)
        self.db.commit()
        self.db.refresh(new_board)
        return new_board

    def get_mood_board(self, board_id: str) -> Optional[MoodBoard]:
        return self.db.query(MoodBoard).filter(MoodBoard.id == board_id).first()

    def get_mood_boards_by_user(self, user_id: Optional[str], project_id: Optional[str] = None) -> List[MoodBoard]:
        query = self.db.query(MoodBoard).filter(MoodBoard.user_id == user_id)
        if project_id is not None:
            query = query.filter(MoodBoard.project_id == project_id)
        return query.order_by(MoodBoard.updated_at.desc()).all()

    def save_mood_board(self, board: MoodBoard) -> MoodBoard:
        self.db.add(board)
        self.db.commit()
        self.db.refresh(board)
        return board

    def delete_mood_board(self, board_id: str) -> bool:
        board = self.get_mood_board(board_id)
        if board is None:
            return False
        self.db.delete(board)
        self.db.commit()
        return True

    def add_mood_board_items(self, board: MoodBoard, records: List[Dict]) -> MoodBoard:
        for record in records:
            board.items.append(MoodBoardItem(**record))
        return self.save_mood_board(board)

    def remove_mood_board_items(self, board: MoodBoard, logo_ids: List[int]) -> MoodBoard:
        """Drops the items and closes the gaps so positions stay 1..n."""
        removed = set(logo_ids)
        board.items = [item for item in board.items if item.generated_logo_id not in removed]
        for position, item in enumerate(sorted(board.items, key=lambda item: item.position), start=1):
            item.position = position
        return self.save_mood_board(board)

    def get_logos_by_ids(self, logo_ids: List[int]) -> List[GeneratedLogo]:
        if not logo_ids:
            return []
        return self.db.query(GeneratedLogo).filter(GeneratedLogo.id.in_(logo_ids)).all()
