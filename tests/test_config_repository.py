"""
JSON configuration repository.
"""
import json
import os

from yardmap.domain.common.errors import ErrorCategory
from yardmap.domain.models.map_config import DEFAULT_MATCH_FIELD
from yardmap.infrastructure.config.json_config_repository import JsonConfigRepository


def write_config(tmp_path, data):
    path = tmp_path / "map_config.json"
    path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
    return str(path)


def test_missing_file_yields_defaults_and_is_not_created(tmp_path, logger):
    config_file = str(tmp_path / "absent.json")

    result = JsonConfigRepository(config_file, logger).load_config()

    assert result.is_success
    config = result.value
    assert config.popup_delay_ms == 200
    assert config.default_match_field == DEFAULT_MATCH_FIELD
    assert config.records_source is None
    assert not os.path.exists(config_file)


def test_relative_paths_resolve_against_config_directory(tmp_path, logger):
    config_file = write_config(tmp_path, {
        "mapImagePath": "yard.png",
        "regionsSource": "interactiveAreas.json",
    })

    config = JsonConfigRepository(config_file, logger).load_config().value

    assert config.map_image_path == os.path.join(str(tmp_path), "yard.png")
    assert config.regions_source == os.path.join(str(tmp_path), "interactiveAreas.json")


def test_inline_sources_pass_through(tmp_path, logger):
    areas = [{"name": "A1", "x": 0, "y": 0, "width": 1, "height": 1, "matchField": "причал"}]
    config_file = write_config(tmp_path, {
        "regionsSource": areas,
        "recordsSource": [{"причал": "A1"}],
    })

    config = JsonConfigRepository(config_file, logger).load_config().value

    assert json.loads(config.regions_source) == areas
    assert config.records_source == [{"причал": "A1"}]


def test_invalid_numbers_fall_back_to_defaults(tmp_path, logger):
    config_file = write_config(tmp_path, {"popupDelayMs": "soon", "fetchTimeoutSeconds": "2.5"})

    config = JsonConfigRepository(config_file, logger).load_config().value

    assert config.popup_delay_ms == 200
    assert config.fetch_timeout_seconds == 2.5
    assert logger.messages("WARNING")


def test_unknown_keys_are_ignored_with_warning(tmp_path, logger):
    config_file = write_config(tmp_path, {"mapImagePath": "yard.png", "colour": "blue"})

    result = JsonConfigRepository(config_file, logger).load_config()

    assert result.is_success
    assert any("colour" in message for message in logger.messages("WARNING"))


def test_malformed_file_fails(tmp_path, logger):
    path = tmp_path / "map_config.json"
    path.write_text("{not json", encoding="utf-8")

    result = JsonConfigRepository(str(path), logger).load_config()

    assert result.is_failure
    assert result.error.category == ErrorCategory.CONFIGURATION


def test_overrides_replace_file_values(tmp_path, logger):
    config_file = write_config(tmp_path, {"mapImagePath": "yard.png"})
    repository = JsonConfigRepository(config_file, logger)

    config = repository.apply_overrides({"mapImagePath": "/srv/other.png", "regionsSource": None}).value

    assert config.map_image_path == "/srv/other.png"
    assert repository.get_setting("mapImagePath") == "/srv/other.png"
    assert repository.apply_overrides({"zoom": 2}).is_failure


def test_bad_detail_fields_fail(tmp_path, logger):
    config_file = write_config(tmp_path, {"detailFields": [{"label": "no field"}]})

    assert JsonConfigRepository(config_file, logger).load_config().is_failure
