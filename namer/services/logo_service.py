# /namer/services/logo_service.py

"""
Logo generation pipeline: LogoGeneration -> GeneratedLogo -> LogoColorVariant.

A generation plans a fixed set of (name, style, variation) tuples. The
background worker produces each missing tuple through the image provider,
stores the file, and bumps the completion counter with an atomic SQL update
so concurrent workers never lose a count. The generation only becomes
`completed` once every planned logo exists; otherwise it ends `failed` with
the logos produced so far still visible, and `retry_generation` fills in
the gaps.
"""

import logging
import os
import uuid
from typing import Dict, List, Optional, Tuple

from ..core.exceptions import (
    NotFoundError, ForbiddenError, InvalidTransitionError, LogoGenerationError, StorageFailureError,
)
from ..db.models.logo_models import slugify
from ..models.logo_model import LogoGenerationCreate, LogoGenerationStatus, LogoStyle
from . import prompt_library, storage_service
from .database_service import DatabaseService, open_db_service
from .logo_helpers import color_schemes, image_provider, logo_archive
from .logo_helpers.svg_color_processor import process_svg

logger = logging.getLogger(__name__)

STYLE_ORDER = [style.value for style in LogoStyle]
VARIATIONS_PER_STYLE = 3

PlanEntry = Tuple[str, str, int]


# --- Helpers ---

def _get_owned_generation(db: DatabaseService, generation_id: str, user_id: Optional[str]):
    generation = db.get_logo_generation(generation_id)
    if generation is None:
        raise NotFoundError(f"Logo generation {generation_id} not found.")
    if generation.user_id is not None and generation.user_id != user_id:
        raise ForbiddenError("You do not have access to this logo generation.")
    return generation


def build_logo_plan(generation) -> List[PlanEntry]:
    """Every (name, style, variation) tuple the generation should produce, in a stable order."""
    return [
        (name, style, variation)
        for name in generation.requested_names or []
        for style in generation.styles_requested or []
        for variation in range(1, (generation.variations_per_style or 1) + 1)
    ]


def _original_path(generation_id: str, business_name: str, style: str, variation: int, extension: str) -> str:
    slug = slugify(business_name)[:30].strip("-") or "logo"
    return f"logos/{generation_id}/originals/{slug}_{style}_v{variation}_{uuid.uuid4().hex[:8]}.{extension}"


def _variant_path(generation_id: str, original_path: str, color_scheme: str) -> str:
    stem = os.path.splitext(os.path.basename(original_path))[0]
    return f"logos/{generation_id}/customized/{stem}_{color_scheme}.svg"


# --- Request-path operations ---

def create_logo_generation(db: DatabaseService, request: LogoGenerationCreate, user_id: Optional[str]) -> Dict:
    if request.session_id:
        session = db.get_generation_session(request.session_id)
        if session is None:
            raise NotFoundError(f"Generation session {request.session_id} not found.")
        if session.user_id is not None and session.user_id != user_id:
            raise ForbiddenError("You do not have access to this generation session.")

    if request.selected_names:
        names = request.selected_names
        styles = list(STYLE_ORDER)
        variations = 1
    else:
        names = [request.business_name.strip()]
        styles = STYLE_ORDER[:request.count]
        variations = VARIATIONS_PER_STYLE

    generation_id = f"logo_{uuid.uuid4().hex[:16]}"
    generation = db.add_logo_generation({
        "id": generation_id,
        "user_id": user_id,
        "session_id": request.session_id,
        "business_name": request.business_name.strip(),
        "business_description": request.business_description,
        "requested_names": names,
        "styles_requested": styles,
        "variations_per_style": variations,
        "status": LogoGenerationStatus.PENDING.value,
        "total_logos_requested": len(names) * len(styles) * variations,
        "logos_completed": 0,
        "api_provider": "openai",
        "cost_cents": 0,
    })
    logger.info("Created logo generation %s for %d logo(s).", generation_id, generation.total_logos_requested)
    return {
        "logo_generation_id": generation.id,
        "status": LogoGenerationStatus.PENDING.value,
        "total_logos_requested": generation.total_logos_requested,
        "message": "Logo generation started successfully",
    }


def _status_message(generation) -> str:
    status = generation.status
    if status == LogoGenerationStatus.PENDING.value:
        return "Starting logo generation..."
    if status == LogoGenerationStatus.PROCESSING.value:
        remaining = generation.estimated_seconds_remaining
        if generation.logos_completed == 0 or not remaining:
            return "Generating your logos..."
        if remaining < 120:
            return f"Your logos will be ready in about {remaining} seconds"
        minutes = -(-remaining // 60)
        return f"Your logos will be ready in about {minutes} minute{'s' if minutes > 1 else ''}"
    if status == LogoGenerationStatus.COMPLETED.value:
        return "Your logos are ready!"
    return generation.error_message or "Generation failed. Please try again."


def get_generation_status(db: DatabaseService, generation_id: str, user_id: Optional[str]) -> Dict:
    generation = _get_owned_generation(db, generation_id, user_id)
    return {
        "id": generation.id,
        "status": generation.status,
        "progress_percentage": generation.completion_percentage,
        "logos_completed": generation.logos_completed,
        "total_logos_requested": generation.total_logos_requested,
        "message": _status_message(generation),
        "estimated_time_remaining": generation.estimated_seconds_remaining,
        "error_message": generation.error_message,
    }


def get_generation_details(db: DatabaseService, generation_id: str, user_id: Optional[str]):
    """Returns the ORM row; the router serialises it with LogoGenerationDetails."""
    return _get_owned_generation(db, generation_id, user_id)


def retry_generation(db: DatabaseService, generation_id: str, user_id: Optional[str]) -> Dict:
    generation = _get_owned_generation(db, generation_id, user_id)
    if generation.status != LogoGenerationStatus.FAILED.value:
        raise InvalidTransitionError("Only failed generations can be retried")
    db.set_logo_generation_status(generation_id, LogoGenerationStatus.PENDING.value, None)
    logger.info("Logo generation %s queued for retry.", generation_id)
    return {
        "logo_generation_id": generation_id,
        "status": LogoGenerationStatus.PENDING.value,
        "message": "Logo generation has been restarted.",
    }


# --- Worker ---

async def _produce_logo(db: DatabaseService, generation, entry: PlanEntry) -> None:
    business_name, style, variation = entry
    prompt = prompt_library.build_logo_prompt(business_name, generation.business_description, style, variation)
    image = await image_provider.generate_image(prompt)

    path = _original_path(generation.id, business_name, style, variation, image["extension"])
    file_size = storage_service.put(path, image["data"])
    db.add_generated_logo({
        "logo_generation_id": generation.id,
        "business_name": business_name,
        "style": style,
        "variation_number": variation,
        "prompt_used": prompt,
        "original_file_path": path,
        "file_size": file_size,
        "image_width": image["width"],
        "image_height": image["height"],
        "generation_time_ms": image["generation_time_ms"],
        "api_image_url": image["image_url"],
    })
    db.increment_logos_completed(generation.id, image["cost_cents"])


async def execute_logo_generation(db: DatabaseService, generation_id: str) -> None:
    generation = db.get_logo_generation(generation_id)
    if generation is None:
        logger.error("Logo generation %s vanished before processing.", generation_id)
        return
    if generation.status == LogoGenerationStatus.COMPLETED.value:
        return

    db.set_logo_generation_status(generation_id, LogoGenerationStatus.PROCESSING.value, None)
    produced = {(logo.business_name, logo.style, logo.variation_number) for logo in generation.logos}
    missing = [entry for entry in build_logo_plan(generation) if entry not in produced]
    logger.info("Logo generation %s: %d logo(s) to produce.", generation_id, len(missing))

    try:
        for entry in missing:
            try:
                await _produce_logo(db, generation, entry)
            except LogoGenerationError as e:
                if e.permanent:
                    raise
                logger.warning("Skipping logo %s for generation %s: %s", entry, generation_id, e)
            except StorageFailureError as e:
                logger.warning("Skipping logo %s for generation %s: %s", entry, generation_id, e)
    except Exception as e:
        logger.error("Logo generation %s failed: %s", generation_id, e, exc_info=True)
        db.session.rollback()
        db.set_logo_generation_status(generation_id, LogoGenerationStatus.FAILED.value, str(e))
        return

    if db.complete_logo_generation_if_done(generation_id):
        logger.info("Logo generation %s completed.", generation_id)
        return

    generation = db.get_logo_generation(generation_id)
    message = f"Generated {generation.logos_completed} of {generation.total_logos_requested} logos"
    db.set_logo_generation_status(generation_id, LogoGenerationStatus.FAILED.value, message)
    logger.warning("Logo generation %s incomplete: %s", generation_id, message)


async def run_logo_generation(generation_id: str) -> None:
    """Background-task entry point; owns its own database session."""
    with open_db_service() as db:
        await execute_logo_generation(db, generation_id)


# --- Customization & downloads ---

def customize_logos(
    db: DatabaseService,
    generation_id: str,
    logo_ids: List[int],
    color_scheme: str,
    user_id: Optional[str],
) -> Dict:
    _get_owned_generation(db, generation_id, user_id)
    palette = color_schemes.get_palette(color_scheme)
    if palette is None:
        raise ValueError(f"Invalid color scheme: {color_scheme}")

    requested = list(dict.fromkeys(logo_ids))
    logos = db.get_logos_for_generation(generation_id, requested)
    if len(logos) != len(requested):
        raise ValueError("Some logos not found or do not belong to this generation")

    customized = []
    for logo in logos:
        existing = db.get_color_variant(logo.id, color_scheme)
        if existing is not None:
            customized.append({
                "logo_id": logo.id,
                "color_scheme": color_scheme,
                "file_path": existing.file_path,
                "file_size": existing.file_size,
                "created": False,
            })
            continue

        try:
            svg = storage_service.get(logo.original_file_path).decode("utf-8")
        except (FileNotFoundError, StorageFailureError, UnicodeDecodeError) as e:
            logger.warning("Cannot read logo %s for customization: %s", logo.id, e)
            continue

        result = process_svg(svg, palette)
        if not result["success"]:
            error = LogoGenerationError.color_processing_failed("; ".join(result["errors"]))
            logger.warning("Logo %s: %s", logo.id, error)
            continue

        path = _variant_path(generation_id, logo.original_file_path, color_scheme)
        try:
            file_size = storage_service.put(path, result["svg"].encode("utf-8"))
        except StorageFailureError as e:
            logger.warning("Cannot store variant of logo %s: %s", logo.id, e)
            continue
        variant = db.add_color_variant({
            "generated_logo_id": logo.id,
            "color_scheme": color_scheme,
            "file_path": path,
            "file_size": file_size,
        })
        customized.append({
            "logo_id": logo.id,
            "color_scheme": color_scheme,
            "file_path": variant.file_path,
            "file_size": variant.file_size,
            "created": True,
        })

    return {
        "customized_logos": customized,
        "message": f"{len(customized)} logos customized successfully",
    }


def get_logo_file(
    db: DatabaseService,
    generation_id: str,
    logo_id: int,
    color_scheme: Optional[str],
    user_id: Optional[str],
) -> Dict:
    """Returns {data, filename, media_type} for an original or a color variant."""
    _get_owned_generation(db, generation_id, user_id)
    logo = db.get_logo(generation_id, logo_id)
    if logo is None:
        raise NotFoundError(f"Logo {logo_id} not found in generation {generation_id}.")

    if color_scheme:
        variant = db.get_color_variant(logo.id, color_scheme)
        if variant is None:
            raise NotFoundError(f"Logo {logo_id} has no '{color_scheme}' variant.")
        path = variant.file_path
        filename = logo.download_filename(color_scheme, "svg")
    else:
        path = logo.original_file_path
        filename = logo.download_filename()

    if not storage_service.exists(path):
        raise NotFoundError(str(LogoGenerationError.file_not_found(path)))
    return {
        "data": storage_service.get(path),
        "filename": filename,
        "media_type": logo_archive.mime_type_for(path),
    }


def build_logo_archive(
    db: DatabaseService,
    generation_id: str,
    color_scheme: Optional[str],
    user_id: Optional[str],
) -> Dict:
    """
    Zips every logo of the generation. With a color scheme, each logo's
    variant is used when one exists and the original otherwise.
    """
    generation = _get_owned_generation(db, generation_id, user_id)
    if color_scheme and not color_schemes.is_valid_scheme(color_scheme):
        raise ValueError(f"Invalid color scheme: {color_scheme}")

    entries = []
    for logo in db.get_logos_for_generation(generation_id):
        variant = logo.variant_for(color_scheme) if color_scheme else None
        if variant is not None and storage_service.exists(variant.file_path):
            entries.append((logo.download_filename(color_scheme, "svg"), storage_service.get(variant.file_path)))
        elif storage_service.exists(logo.original_file_path):
            entries.append((logo.download_filename(), storage_service.get(logo.original_file_path)))
        else:
            logger.warning("Logo %s file is missing from storage; leaving it out of the archive.", logo.id)

    if not entries:
        raise ValueError("No logos available for download")
    return {
        "data": logo_archive.build_zip(entries),
        "filename": logo_archive.archive_filename(generation.business_name, color_scheme),
        "media_type": "application/zip",
    }
