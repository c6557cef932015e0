import json

import pytest

from list_distributor.config import ConfigurationError, DistributorSettings, load_configuration, load_settings
from list_distributor.factory import build_service, build_store
from list_distributor.models import Agent
from list_distributor.store import InMemoryDistributionStore, JsonDistributionStore


def test_load_settings_from_yaml_resolves_relative_paths(tmp_path) -> None:
    (tmp_path / "roster.yaml").write_text(
        "agents:\n  - id: a3\n    name: Cy\n    isActive: false\n",
        encoding="utf-8",
    )
    config_path = tmp_path / "distributor.yaml"
    config_path.write_text(
        "store_path: data/snapshots\n"
        "max_upload_bytes: 2048\n"
        "roster_file: roster.yaml\n"
        "agents:\n"
        "  - id: a1\n"
        "    name: Ada\n"
        "  - id: 2\n"
        "    name: ' Bob '\n",
        encoding="utf-8",
    )

    settings = load_settings(config_path)

    assert settings.store_path == tmp_path / "data" / "snapshots"
    assert settings.max_upload_bytes == 2048
    assert settings.agents == [
        Agent(id="a1", name="Ada"),
        Agent(id="2", name="Bob"),
        Agent(id="a3", name="Cy", is_active=False),
    ]


def test_json_configuration_builds_in_memory_service(tmp_path) -> None:
    config_path = tmp_path / "distributor.json"
    config_path.write_text(json.dumps({"agents": [{"id": "a1", "name": "Ada"}]}), encoding="utf-8")

    settings = load_settings(config_path)
    service = build_service(settings)

    assert isinstance(service.store, InMemoryDistributionStore)
    assert service.distribute_rows([{"Phone": "555"}], "inline").assignments[0].agent_name == "Ada"


def test_build_store_uses_json_directory(tmp_path) -> None:
    store = build_store(DistributorSettings(store_path=tmp_path / "snapshots"))

    assert isinstance(store, JsonDistributionStore)
    assert (tmp_path / "snapshots").is_dir()


def test_missing_configuration_file(tmp_path) -> None:
    with pytest.raises(ConfigurationError):
        load_configuration(tmp_path / "missing.yaml")


def test_unsupported_configuration_extension(tmp_path) -> None:
    config_path = tmp_path / "distributor.toml"
    config_path.write_text("agents = []", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_configuration(config_path)


def test_malformed_configuration(tmp_path) -> None:
    config_path = tmp_path / "distributor.json"
    config_path.write_text("{oops", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        load_configuration(config_path)


@pytest.mark.parametrize(
    "entry",
    [
        {"name": "No Id"},
        {"id": "a1"},
        "not-a-mapping",
    ],
)
def test_invalid_agent_entries(entry) -> None:
    with pytest.raises(ConfigurationError):
        DistributorSettings.from_mapping({"agents": [entry]})


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (True, True),
        (False, False),
        ("false", False),
        (" No ", False),
        ("0", False),
        (0, False),
        ("TRUE", True),
        ("yes", True),
        (1, True),
    ],
)
def test_is_active_flag_values(value, expected) -> None:
    settings = DistributorSettings.from_mapping({"agents": [{"id": "a", "name": "A", "is_active": value}]})

    assert settings.agents[0].is_active is expected


@pytest.mark.parametrize("value", ["inactive", "", 2, None, [False]])
def test_is_active_rejects_unrecognised_values(value) -> None:
    with pytest.raises(ConfigurationError):
        DistributorSettings.from_mapping({"agents": [{"id": "a", "name": "A", "is_active": value}]})


def test_quoted_yaml_false_keeps_agent_inactive(tmp_path) -> None:
    config_path = tmp_path / "distributor.yaml"
    config_path.write_text(
        "agents:\n  - id: a1\n    name: Ada\n  - id: a2\n    name: Bob\n    is_active: \"false\"\n",
        encoding="utf-8",
    )

    service = build_service(load_settings(config_path))
    snapshot = service.distribute_rows([{"Phone": "1"}, {"Phone": "2"}], "inline")

    assert [assignment.agent_name for assignment in snapshot.assignments] == ["Ada"]
