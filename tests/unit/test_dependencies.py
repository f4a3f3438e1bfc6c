"""Unit tests for dependency wiring and logging setup."""

import logging

import pytest

from docmapper.application.services import SaveOrchestrator
from docmapper.config import Settings
from docmapper.infrastructure.dependencies import (
    get_registry,
    get_save_orchestrator,
    get_transport,
)
from docmapper.infrastructure.http import HttpTransport
from docmapper.infrastructure.logging.log_config import setup_logging


def _settings(**overrides) -> Settings:
    values = {"api_key": "key", "api_token": "token", **overrides}
    return Settings(_env_file=None, **values)


def test_get_transport_builds_new_instances():
    settings = _settings(dev_mode=True)

    first = get_transport(settings)
    second = get_transport(settings)

    assert isinstance(first, HttpTransport)
    assert first is not second


def test_get_transport_requires_credentials():
    with pytest.raises(ValueError):
        get_transport(Settings(_env_file=None, api_key="", api_token=""))


def test_get_save_orchestrator_uses_injected_transport(transport, models):
    orchestrator = get_save_orchestrator(transport)

    assert isinstance(orchestrator, SaveOrchestrator)
    orchestrator.get_repository(models.Customer).read()
    assert transport.calls_for("read")


def test_get_registry_loads_configured_schema(tmp_path):
    schema = tmp_path / "schema.yaml"
    schema.write_text("types:\n  - name: Note\n    fields: [body]\n", encoding="utf-8")

    registry = get_registry(_settings(schema_file=str(schema)))

    assert registry.type_names() == ["Note"]
    assert get_registry(_settings()).type_names() == []


def test_setup_logging_applies_category_levels():
    setup_logging(_settings(log_level_http="ERROR", log_level_orm="DEBUG"))

    assert logging.getLogger("httpx").level == logging.ERROR
    assert logging.getLogger("docmapper.application.services").level == logging.DEBUG


def test_setup_logging_falls_back_to_info_for_unknown_levels():
    setup_logging(_settings(log_level_transport="chatty"))

    assert logging.getLogger("docmapper.infrastructure.http").level == logging.INFO
