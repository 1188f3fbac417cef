# /namer/services/generation_service.py

"""
Session orchestration for multi-model business-name generation.

The request path creates a `pending` GenerationSession and hands its id to
`run_generation_session`, which the router schedules as a background task.
The worker drives the session through its state machine, dispatches the
requested models concurrently, merges their names, falls back to the
offline generator when every model fails, checks domains, and stores the
final payload.

Cancellation is cooperative. `cancel_session` flips the row to `cancelled`
and writes a short-lived flag; the worker polls `is_cancellation_requested`
at fixed checkpoints (before starting, after the model calls, after the
domain checks) and stops there. A provider call already in flight is not
interrupted.

Every public function takes the caller's `user_id` explicitly.
"""

import logging
import time
import uuid
from typing import Dict, List, Optional

from ..core import config
from ..core.cache import flag_cache
from ..core.exceptions import NotFoundError, ForbiddenError, InvalidTransitionError
from ..db.database import utcnow
from ..models.generation_model import GenerationCreate, GenerationStatus, ResultSource
from . import ai_provider_client, domain_service
from .database_service import DatabaseService, open_db_service
from .generation_helpers import model_catalog, name_cache
from .generation_helpers.fallback_names import generate_fallback_names
from .generation_helpers.name_parsing import merge_names

logger = logging.getLogger(__name__)

MODEL_PROGRESS_START = 10
MODEL_PROGRESS_END = 70
DOMAIN_PROGRESS = 75
FINALIZING_PROGRESS = 95


def cancellation_flag_key(session_id: str) -> str:
    return f"ai_generation_{session_id}"


# --- Ownership ---

def _get_owned_session(db: DatabaseService, session_id: str, user_id: Optional[str]):
    session = db.get_generation_session(session_id)
    if session is None:
        raise NotFoundError(f"Generation session {session_id} not found.")
    if session.user_id is not None and session.user_id != user_id:
        raise ForbiddenError("You do not have access to this generation session.")
    return session


def _verify_project_ownership(db: DatabaseService, project_id: str, user_id: Optional[str]) -> None:
    project = db.get_project(project_id)
    if project is None:
        raise NotFoundError(f"Project {project_id} not found.")
    if project.user_id != user_id:
        raise ForbiddenError("You do not have access to this project.")


# --- Request-path operations ---

def create_session(db: DatabaseService, request: GenerationCreate, user_id: Optional[str]) -> Dict:
    models = model_catalog.validate_requested_models(request.models)
    if request.project_id:
        _verify_project_ownership(db, request.project_id, user_id)

    session_id = f"session_{uuid.uuid4().hex}"
    db.add_generation_session({
        "id": session_id,
        "user_id": user_id,
        "project_id": request.project_id,
        "status": GenerationStatus.PENDING.value,
        "business_description": request.business_description.strip(),
        "generation_mode": request.generation_mode.value,
        "deep_thinking": request.deep_thinking,
        "requested_models": models,
        "generation_strategy": "parallel",
        "progress_percentage": 0,
        "current_step": "Queued",
    })
    logger.info("Created generation session %s with models %s.", session_id, models)
    return {
        "success": True,
        "session_id": session_id,
        "status": GenerationStatus.PENDING.value,
        "message": "Generation started",
    }


def get_session_status(db: DatabaseService, session_id: str, user_id: Optional[str]) -> Dict:
    return _get_owned_session(db, session_id, user_id).status_snapshot()


def get_session_details(db: DatabaseService, session_id: str, user_id: Optional[str]) -> Dict:
    return _get_owned_session(db, session_id, user_id).full_details()


def list_sessions(db: DatabaseService, user_id: Optional[str], scope: str = "all") -> List[Dict]:
    return [session.status_snapshot() for session in db.get_generation_sessions_by_user(user_id, scope)]


def cancel_session(db: DatabaseService, session_id: str, user_id: Optional[str]) -> Dict:
    """Raises CannotCancelError when the session already reached a terminal state."""
    session = _get_owned_session(db, session_id, user_id)
    session.mark_as_cancelled()
    db.save_generation_session(session)
    flag_cache.put(
        cancellation_flag_key(session_id),
        {"status": GenerationStatus.CANCELLED.value, "cancelled_at": utcnow().isoformat()},
    )
    logger.info("Generation session %s cancelled by user %s.", session_id, user_id)
    return {"success": True, "message": "Generation cancelled successfully"}


def delete_session(db: DatabaseService, session_id: str, user_id: Optional[str]) -> bool:
    session = _get_owned_session(db, session_id, user_id)
    if session.is_active:
        raise InvalidTransitionError("Cannot delete a generation that is still in progress.")

    input_hash = name_cache.generate_hash(
        session.business_description, session.generation_mode, session.deep_thinking
    )
    db.delete_generation_cache(input_hash)
    flag_cache.forget(cancellation_flag_key(session_id))
    return db.delete_generation_session(session_id)


# --- Worker ---

def is_cancellation_requested(db: DatabaseService, session) -> bool:
    """Checkpoint predicate. The caller must have saved pending changes first."""
    if flag_cache.has(cancellation_flag_key(session.id)):
        return True
    db.refresh_generation_session(session)
    return session.status == GenerationStatus.CANCELLED.value


def _build_execution_metadata(
    session,
    model_results: List[Dict],
    source: ResultSource,
    elapsed_ms: int,
) -> Dict:
    successful = [r for r in model_results if r["success"]]
    failed = [r for r in model_results if not r["success"]]
    response_times = [r["response_time_ms"] for r in model_results if r["response_time_ms"]]
    return {
        "total_models_requested": len(session.requested_models or []),
        "successful_models": len(successful),
        "failed_models": len(failed),
        "models_used": [r["model_id"] for r in successful],
        "model_status": {r["model_id"]: "completed" if r["success"] else "failed" for r in model_results},
        "model_metrics": {
            r["model_id"]: {
                "response_time_ms": r["response_time_ms"],
                "tokens_used": r["tokens_used"],
                "cost_cents": r["cost_cents"],
                "names_generated": len(r["names"]),
                "error": r["error"],
                "permanent_error": r["permanent_error"],
            }
            for r in model_results
        },
        "total_time_ms": elapsed_ms,
        "total_execution_time_ms": elapsed_ms,
        "average_response_time_ms": int(sum(response_times) / len(response_times)) if response_times else 0,
        "models_with_fallback": len(session.requested_models or []) if source == ResultSource.FALLBACK else 0,
        "cached_results": source == ResultSource.CACHE,
        "executed_at": utcnow().isoformat(),
    }


async def execute_generation(db: DatabaseService, session_id: str) -> None:
    """Runs one session to a terminal state using the given data access."""
    session = db.get_generation_session(session_id)
    if session is None:
        logger.error("Generation session %s vanished before processing.", session_id)
        return

    if is_cancellation_requested(db, session):
        logger.info("Generation session %s was cancelled before it started.", session_id)
        return
    if not session.mark_as_started():
        return
    db.save_generation_session(session)

    try:
        started = time.perf_counter()
        models = list(session.requested_models or [])
        input_hash = name_cache.generate_hash(
            session.business_description, session.generation_mode, session.deep_thinking
        )

        model_results: List[Dict] = []
        cached_names = name_cache.get_cached_names(db, input_hash)
        if cached_names:
            names = cached_names
            source = ResultSource.CACHE
            session.update_progress(MODEL_PROGRESS_END, "Loaded names from cache")
            db.save_generation_session(session)
        else:
            session.update_progress(MODEL_PROGRESS_START, f"Generating names with {len(models)} AI model(s)...")
            db.save_generation_session(session)

            finished = []

            def on_model_done(result: Dict) -> None:
                finished.append(result["model_id"])
                span = MODEL_PROGRESS_END - MODEL_PROGRESS_START
                pct = MODEL_PROGRESS_START + int(span * len(finished) / max(1, len(models)))
                session.update_progress(pct, f"Completed {len(finished)} of {len(models)} models")
                db.save_generation_session(session)

            model_results = await ai_provider_client.generate_multi_model_names(
                models,
                session.business_description,
                session.generation_mode,
                session.deep_thinking,
                on_model_done=on_model_done,
            )
            if is_cancellation_requested(db, session):
                logger.info("Generation session %s cancelled after model dispatch.", session_id)
                return

            names = merge_names([r["names"] for r in model_results if r["success"]])
            if names:
                source = ResultSource.AI
                name_cache.store_names(
                    db, input_hash, session.business_description,
                    session.generation_mode, session.deep_thinking, names,
                )
            else:
                logger.warning("All models failed for session %s; using fallback names.", session_id)
                source = ResultSource.FALLBACK
                names = generate_fallback_names(session.business_description, session.generation_mode)

        domains: Dict[str, Dict] = {}
        if config.ENABLE_DOMAIN_CHECKS:
            session.update_progress(DOMAIN_PROGRESS, "Checking domain availability...")
            db.save_generation_session(session)
            try:
                domains = await domain_service.check_names(db, names)
            except Exception as e:
                logger.warning("Domain checks failed for session %s: %s", session_id, e)
        domains = {name: domains.get(name, {}) for name in names}

        session.update_progress(FINALIZING_PROGRESS, "Finalizing results...")
        db.save_generation_session(session)
        if is_cancellation_requested(db, session):
            logger.info("Generation session %s cancelled before completion.", session_id)
            return

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        metadata = _build_execution_metadata(session, model_results, source, elapsed_ms)
        results = {
            "names": names,
            "model_results": {
                r["model_id"]: {"names": r["names"], "success": r["success"], "error": r["error"]}
                for r in model_results
            },
            "domains": domains,
            "source": source.value,
            "fallback_used": source == ResultSource.FALLBACK,
        }

        if model_results:
            session.total_response_time_ms = sum(r["response_time_ms"] for r in model_results)
            session.total_tokens_used = sum(r["tokens_used"] for r in model_results)
            session.total_cost_cents = sum(r["cost_cents"] for r in model_results)
        session.mark_as_completed(results, metadata)
        if not db.finish_generation_session_if_running(session):
            logger.info("Generation session %s was cancelled before its results were stored.", session_id)
            return
        logger.info(
            "Generation session %s completed with %d names (source=%s).", session_id, len(names), source.value
        )
    except InvalidTransitionError as e:
        # Another request moved the session to a terminal state first.
        logger.info("Generation session %s stopped: %s", session_id, e)
        db.session.rollback()
    except Exception as e:
        logger.error("Generation session %s failed: %s", session_id, e, exc_info=True)
        db.session.rollback()
        db.refresh_generation_session(session)
        if session.status == GenerationStatus.RUNNING.value:
            session.mark_as_failed(str(e) or e.__class__.__name__)
            db.finish_generation_session_if_running(session)


async def run_generation_session(session_id: str) -> None:
    """Background-task entry point; owns its own database session."""
    with open_db_service() as db:
        await execute_generation(db, session_id)
