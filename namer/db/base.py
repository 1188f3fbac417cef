# /namer/db/base.py

# Central registry for all SQLAlchemy models. Importing them here makes sure
# `Base.metadata` knows every table before `create_all` runs at startup.

from .database import Base

from .models.project_models import Project
from .models.generation_models import GenerationSession, GenerationCache, DomainCache
from .models.logo_models import LogoGeneration, GeneratedLogo, LogoColorVariant
from .models.share_models import Share, ShareAccess, Export
from .models.mood_board_models import MoodBoard, MoodBoardItem
