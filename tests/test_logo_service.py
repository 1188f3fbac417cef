# /tests/test_logo_service.py

import io
import zipfile

import pytest
from PIL import Image
from unittest.mock import AsyncMock

from namer.core.exceptions import ForbiddenError, InvalidTransitionError, LogoGenerationError, NotFoundError
from namer.models.logo_model import LogoGenerationCreate
from namer.services import logo_service, storage_service
from namer.services.logo_helpers import image_provider

SVG_LOGO = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 10 10">'
    '<rect fill="#111111" width="10" height="10"/><circle fill="#EEEEEE" r="4"/></svg>'
)


def _png_bytes(width=8, height=6):
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), "white").save(buffer, "PNG")
    return buffer.getvalue()


def _image_result():
    return {
        "data": _png_bytes(),
        "extension": "png",
        "image_url": "https://images.example/abc.png",
        "width": 8,
        "height": 6,
        "generation_time_ms": 900,
        "cost_cents": 4,
    }


def _create(db_service, **overrides):
    payload = {"business_name": "Brew Co", "business_description": "Coffee subscription", "count": 1}
    payload.update(overrides)
    result = logo_service.create_logo_generation(db_service, LogoGenerationCreate(**payload), "user_1")
    return db_service.get_logo_generation(result["logo_generation_id"])


@pytest.fixture
def svg_generation(db_service):
    """A completed generation with two stored SVG logos."""
    generation = db_service.add_logo_generation({
        "id": "logo_svgfixture0001",
        "user_id": "user_1",
        "business_name": "Brew Co",
        "requested_names": ["Brew Co"],
        "styles_requested": ["minimalist"],
        "variations_per_style": 2,
        "status": "completed",
        "total_logos_requested": 2,
        "logos_completed": 2,
    })
    for variation in (1, 2):
        path = f"logos/{generation.id}/originals/brew-co_minimalist_v{variation}_abcd1234.svg"
        size = storage_service.put(path, SVG_LOGO.encode("utf-8"))
        db_service.add_generated_logo({
            "logo_generation_id": generation.id,
            "business_name": "Brew Co",
            "style": "minimalist",
            "variation_number": variation,
            "prompt_used": "prompt",
            "original_file_path": path,
            "file_size": size,
        })
    return db_service.get_logo_generation(generation.id)


# --- Planning ---

def test_single_name_flow_plans_styles_times_three(db_service):
    generation = _create(db_service, count=2)

    assert generation.status == "pending"
    assert generation.total_logos_requested == 6
    assert generation.styles_requested == ["minimalist", "modern"]
    assert logo_service.build_logo_plan(generation)[:3] == [
        ("Brew Co", "minimalist", 1), ("Brew Co", "minimalist", 2), ("Brew Co", "minimalist", 3),
    ]


def test_multi_name_flow_plans_every_style_once(db_service):
    generation = _create(db_service, selected_names=["Brewly", "Beanstalk"])

    assert generation.total_logos_requested == 8
    assert generation.variations_per_style == 1
    assert len(logo_service.build_logo_plan(generation)) == 8


def test_create_rejects_foreign_session(db_service, make_session):
    session = make_session(user_id="someone_else")

    with pytest.raises(ForbiddenError):
        _create(db_service, session_id=session.id)


# --- Worker ---

@pytest.mark.asyncio
async def test_execute_produces_every_planned_logo(db_service, mocker):
    generation = _create(db_service)
    mocker.patch.object(image_provider, "generate_image", AsyncMock(side_effect=lambda prompt: _image_result()))

    await logo_service.execute_logo_generation(db_service, generation.id)

    generation = db_service.get_logo_generation(generation.id)
    assert generation.status == "completed"
    assert generation.logos_completed == 3
    assert generation.cost_cents == 12
    assert len(generation.logos) == 3
    logo = generation.logos[0]
    assert logo.original_file_path.startswith(f"logos/{generation.id}/originals/brew-co_minimalist_v1_")
    assert logo.original_file_path.endswith(".png")
    assert storage_service.exists(logo.original_file_path)
    assert (logo.image_width, logo.image_height) == (8, 6)


@pytest.mark.asyncio
async def test_transient_errors_skip_the_logo_and_fail_the_generation(db_service, mocker):
    generation = _create(db_service)
    mocker.patch.object(
        image_provider,
        "generate_image",
        AsyncMock(side_effect=[_image_result(), LogoGenerationError.rate_limited(), _image_result()]),
    )

    await logo_service.execute_logo_generation(db_service, generation.id)

    generation = db_service.get_logo_generation(generation.id)
    assert generation.status == "failed"
    assert generation.error_message == "Generated 2 of 3 logos"
    assert len(generation.logos) == 2


@pytest.mark.asyncio
async def test_permanent_error_aborts_the_generation(db_service, mocker):
    generation = _create(db_service)
    provider = mocker.patch.object(
        image_provider,
        "generate_image",
        AsyncMock(side_effect=LogoGenerationError.authentication_failed()),
    )

    await logo_service.execute_logo_generation(db_service, generation.id)

    generation = db_service.get_logo_generation(generation.id)
    assert provider.await_count == 1
    assert generation.status == "failed"
    assert "API key" in generation.error_message


@pytest.mark.asyncio
async def test_retry_only_regenerates_missing_logos(db_service, mocker):
    generation = _create(db_service)
    mocker.patch.object(
        image_provider,
        "generate_image",
        AsyncMock(side_effect=[_image_result(), LogoGenerationError.invalid_response(), _image_result()]),
    )
    await logo_service.execute_logo_generation(db_service, generation.id)

    result = logo_service.retry_generation(db_service, generation.id, "user_1")
    assert result["status"] == "pending"

    provider = mocker.patch.object(image_provider, "generate_image", AsyncMock(return_value=_image_result()))
    await logo_service.execute_logo_generation(db_service, generation.id)

    generation = db_service.get_logo_generation(generation.id)
    assert provider.await_count == 1
    assert generation.status == "completed"
    assert sorted(logo.variation_number for logo in generation.logos) == [1, 2, 3]


def test_retry_requires_failed_generation(db_service):
    generation = _create(db_service)

    with pytest.raises(InvalidTransitionError, match="Only failed generations"):
        logo_service.retry_generation(db_service, generation.id, "user_1")


def test_counter_increments_atomically_and_gates_completion(db_service):
    generation = _create(db_service)
    db_service.set_logo_generation_status(generation.id, "processing")

    db_service.increment_logos_completed(generation.id, 4)
    db_service.increment_logos_completed(generation.id, 4)
    assert db_service.complete_logo_generation_if_done(generation.id) is False

    db_service.increment_logos_completed(generation.id, 4)
    assert db_service.complete_logo_generation_if_done(generation.id) is True

    generation = db_service.get_logo_generation(generation.id)
    assert generation.logos_completed == 3
    assert generation.cost_cents == 12
    assert generation.status == "completed"


def test_status_reports_progress(db_service):
    generation = _create(db_service)

    status = logo_service.get_generation_status(db_service, generation.id, "user_1")

    assert status["status"] == "pending"
    assert status["message"] == "Starting logo generation..."
    assert status["progress_percentage"] == 0
    assert status["estimated_time_remaining"] == 90


# --- Customization & downloads ---

def test_customize_creates_variant_once(db_service, svg_generation):
    logo_ids = [logo.id for logo in svg_generation.logos]

    first = logo_service.customize_logos(db_service, svg_generation.id, logo_ids, "ocean_blue", "user_1")
    second = logo_service.customize_logos(db_service, svg_generation.id, logo_ids, "ocean_blue", "user_1")

    assert first["message"] == "2 logos customized successfully"
    assert all(item["created"] for item in first["customized_logos"])
    assert not any(item["created"] for item in second["customized_logos"])
    variant_path = first["customized_logos"][0]["file_path"]
    assert variant_path == f"logos/{svg_generation.id}/customized/brew-co_minimalist_v1_abcd1234_ocean_blue.svg"
    assert "#003366" in storage_service.get(variant_path).decode("utf-8")


def test_customize_skips_logos_it_cannot_recolor(db_service, svg_generation):
    png_path = f"logos/{svg_generation.id}/originals/brew-co_modern_v1_abcd1234.png"
    png_logo = db_service.add_generated_logo({
        "logo_generation_id": svg_generation.id,
        "business_name": "Brew Co",
        "style": "modern",
        "variation_number": 1,
        "prompt_used": "prompt",
        "original_file_path": png_path,
        "file_size": storage_service.put(png_path, _png_bytes()),
    })
    svg_logo = svg_generation.logos[0]

    result = logo_service.customize_logos(
        db_service, svg_generation.id, [png_logo.id, svg_logo.id], "ocean_blue", "user_1"
    )

    assert result["message"] == "1 logos customized successfully"
    assert [item["logo_id"] for item in result["customized_logos"]] == [svg_logo.id]
    assert db_service.get_color_variant(png_logo.id, "ocean_blue") is None


def test_customize_rejects_unknown_scheme_and_foreign_logos(db_service, svg_generation):
    with pytest.raises(ValueError, match="Invalid color scheme"):
        logo_service.customize_logos(db_service, svg_generation.id, [svg_generation.logos[0].id], "neon", "user_1")
    with pytest.raises(ValueError, match="do not belong"):
        logo_service.customize_logos(db_service, svg_generation.id, [9999], "ocean_blue", "user_1")


def test_get_logo_file_returns_original_and_variant(db_service, svg_generation):
    logo = svg_generation.logos[0]
    original = logo_service.get_logo_file(db_service, svg_generation.id, logo.id, None, "user_1")
    assert original["filename"] == "brew-co-minimalist-1.svg"
    assert original["media_type"] == "image/svg+xml"

    with pytest.raises(NotFoundError):
        logo_service.get_logo_file(db_service, svg_generation.id, logo.id, "tech_blue", "user_1")

    logo_service.customize_logos(db_service, svg_generation.id, [logo.id], "tech_blue", "user_1")
    variant = logo_service.get_logo_file(db_service, svg_generation.id, logo.id, "tech_blue", "user_1")
    assert variant["filename"] == "brew-co-minimalist-1-tech_blue.svg"


def test_archive_falls_back_to_originals(db_service, svg_generation):
    first_logo = svg_generation.logos[0]
    logo_service.customize_logos(db_service, svg_generation.id, [first_logo.id], "forest_green", "user_1")

    archive = logo_service.build_logo_archive(db_service, svg_generation.id, "forest_green", "user_1")

    assert archive["filename"] == "brew-co-logos-forest_green.zip"
    with zipfile.ZipFile(io.BytesIO(archive["data"])) as bundle:
        assert sorted(bundle.namelist()) == ["brew-co-minimalist-1-forest_green.svg", "brew-co-minimalist-2.svg"]


def test_archive_of_empty_generation_is_rejected(db_service):
    generation = _create(db_service)

    with pytest.raises(ValueError, match="No logos"):
        logo_service.build_logo_archive(db_service, generation.id, None, "user_1")
