"""Dependency wiring: builds transports, registries and orchestrators from settings.

Each call returns fresh instances; nothing here is shared process-wide.
"""

from docmapper.application.interfaces import Transport
from docmapper.application.services import SaveOrchestrator, SchemaLoader
from docmapper.config import Settings, get_settings
from docmapper.domain.entities import RecordTypeRegistry
from docmapper.infrastructure.http import HttpTransport


def get_transport(settings: Settings | None = None) -> HttpTransport:
    """Provides an HttpTransport configured from settings."""
    settings = settings or get_settings()
    return HttpTransport(
        api_key=settings.api_key,
        api_token=settings.api_token,
        base_url=settings.api_base_url,
        version=settings.api_version,
        dev_mode=settings.dev_mode,
        timeout=settings.request_timeout,
    )


def get_registry(settings: Settings | None = None) -> RecordTypeRegistry:
    """Provides a registry, pre-populated from the configured schema file if any."""
    settings = settings or get_settings()
    registry = RecordTypeRegistry()
    if settings.schema_file:
        SchemaLoader(registry).load_file(settings.schema_file)
    return registry


def get_save_orchestrator(
    transport: Transport | None = None,
    settings: Settings | None = None,
) -> SaveOrchestrator:
    """Provides a SaveOrchestrator over the given transport, or a new HttpTransport."""
    return SaveOrchestrator(transport or get_transport(settings))
