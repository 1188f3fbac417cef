# /namer/services/target_registry.py

"""
Resolves the tagged (kind, id) references used by shares and exports.

Each TargetKind maps to a loader that turns the referenced row into a
SharedContent (title, JSON-ready content and flat rows for tabular
exports) and an owner accessor used for authorization. Adding a shareable
kind means adding one entry to TARGETS.
"""

from typing import Callable, Dict, List, NamedTuple, Optional

from ..core.exceptions import NotFoundError, ForbiddenError
from ..models.share_model import SharedContent, TargetKind
from .database_service import DatabaseService


class TargetHandler(NamedTuple):
    fetch: Callable[[DatabaseService, str], object]
    load: Callable[[object], SharedContent]
    owner: Callable[[object], Optional[str]] = lambda record: record.user_id


def _iso(value) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _domain_columns(domains: Dict) -> Dict[str, str]:
    columns = {}
    for domain, result in (domains or {}).items():
        tld = domain.rsplit(".", 1)[-1]
        columns[f".{tld}"] = (result or {}).get("status", "unknown")
    return columns


# --- generation_session ---

def _load_generation_session(session) -> SharedContent:
    results = session.results or {}
    names: List[str] = list(results.get("names") or [])
    domains = results.get("domains") or {}
    description = session.business_description or ""
    title = description if len(description) <= 60 else f"{description[:57]}..."
    return SharedContent(
        kind=TargetKind.GENERATION_SESSION,
        target_id=session.id,
        title=f"Name ideas: {title}",
        description=description,
        content={
            "business_description": description,
            "generation_mode": session.generation_mode,
            "deep_thinking": session.deep_thinking,
            "status": session.status,
            "names": names,
            "domains": domains,
            "source": results.get("source"),
            "created_at": _iso(session.created_at),
            "completed_at": _iso(session.completed_at),
        },
        rows=[{"name": name, **_domain_columns(domains.get(name))} for name in names],
    )


# --- logo_generation ---

def _load_logo_generation(generation) -> SharedContent:
    logos = [
        {
            "id": logo.id,
            "business_name": logo.business_name,
            "style": logo.style,
            "variation_number": logo.variation_number,
            "file_size": logo.file_size,
            "image_width": logo.image_width,
            "image_height": logo.image_height,
            "color_schemes": ", ".join(variant.color_scheme for variant in logo.color_variants),
        }
        for logo in generation.logos
    ]
    return SharedContent(
        kind=TargetKind.LOGO_GENERATION,
        target_id=generation.id,
        title=f"{generation.business_name} logos",
        description=generation.business_description,
        content={
            "business_name": generation.business_name,
            "business_description": generation.business_description,
            "status": generation.status,
            "total_logos_requested": generation.total_logos_requested,
            "logos_completed": generation.logos_completed,
            "logos": logos,
            "created_at": _iso(generation.created_at),
        },
        rows=logos,
    )


# --- project ---

def _load_project(project) -> SharedContent:
    sessions = []
    rows = []
    for session in project.generation_sessions:
        names = list((session.results or {}).get("names") or [])
        sessions.append({
            "session_id": session.id,
            "business_description": session.business_description,
            "status": session.status,
            "names": names,
            "created_at": _iso(session.created_at),
        })
        rows.extend({"session_id": session.id, "name": name} for name in names)
    return SharedContent(
        kind=TargetKind.PROJECT,
        target_id=project.id,
        title=project.name,
        description=project.description,
        content={
            "name": project.name,
            "description": project.description,
            "selected_name": project.selected_name,
            "generation_sessions": sessions,
            "created_at": _iso(project.created_at),
        },
        rows=rows,
    )


# --- mood_board ---

def _load_mood_board(board) -> SharedContent:
    items = []
    for item in sorted(board.items, key=lambda item: item.position):
        logo = item.generated_logo
        items.append({
            "position": item.position,
            "logo_id": item.generated_logo_id,
            "business_name": logo.business_name if logo is not None else None,
            "style": logo.style if logo is not None else None,
            "variation_number": logo.variation_number if logo is not None else None,
            "x": item.x,
            "y": item.y,
            "width": item.width,
            "height": item.height,
            "rotation": item.rotation,
            "z_index": item.z_index,
            "notes": item.notes,
        })
    return SharedContent(
        kind=TargetKind.MOOD_BOARD,
        target_id=board.id,
        title=board.name,
        description=board.description,
        content={
            "name": board.name,
            "description": board.description,
            "project_id": board.project_id,
            "layout_type": board.layout_type,
            "layout_config": board.layout_config,
            "items": items,
            "created_at": _iso(board.created_at),
        },
        rows=items,
    )

TARGETS: Dict[TargetKind, TargetHandler] = {
    TargetKind.GENERATION_SESSION: TargetHandler(
        fetch=lambda db, target_id: db.get_generation_session(target_id),
        load=_load_generation_session,
    ),
    TargetKind.LOGO_GENERATION: TargetHandler(
        fetch=lambda db, target_id: db.get_logo_generation(target_id),
        load=_load_logo_generation,
    ),
    TargetKind.PROJECT: TargetHandler(
        fetch=lambda db, target_id: db.get_project(target_id),
        load=_load_project,
    ),
    TargetKind.MOOD_BOARD: TargetHandler(
        fetch=lambda db, target_id: db.get_mood_board(target_id),
        load=_load_mood_board,
    ),
}


def _handler(kind) -> TargetHandler:
    try:
        return TARGETS[TargetKind(kind)]
    except ValueError:
        raise ValueError(f"Unknown share target kind: {kind}") from None


def load_target(db: DatabaseService, kind, target_id: str) -> Optional[SharedContent]:
    """Returns the content of the target, or None when it no longer exists."""
    handler = _handler(kind)
    record = handler.fetch(db, target_id)
    if record is None:
        return None
    return handler.load(record)


def load_owned_target(db: DatabaseService, kind, target_id: str, user_id: Optional[str]) -> SharedContent:
    """Loads a target for its owner; raises NotFoundError or ForbiddenError otherwise."""
    handler = _handler(kind)
    record = handler.fetch(db, target_id)
    if record is None:
        raise NotFoundError(f"{TargetKind(kind).value} {target_id} not found.")
    owner = handler.owner(record)
    if owner is not None and owner != user_id:
        raise ForbiddenError("You do not have access to this resource.")
    return handler.load(record)
