# src/composition_root.py

import logging
from dataclasses import dataclass
from typing import Optional

from application.services.lexicon_service import LexiconService
from application.services.list_node_cache import ListNodeCache
from application.services.ontology_cache import OntologyCache
from application.services.query_templates import QueryTemplateResolver
from application.services.session_service import SessionService
from config.settings import Settings, get_settings
from domain.backend import ResourceBackend
from infrastructure.knora_backend import KnoraApiBackend

logger = logging.getLogger(__name__)


@dataclass
class LexiconContext:
    """Everything one client process shares: created once, passed to every consumer."""
    settings: Settings
    backend: ResourceBackend
    session: SessionService
    ontology_cache: OntologyCache
    list_cache: ListNodeCache
    templates: QueryTemplateResolver
    service: LexiconService

    async def aclose(self) -> None:
        await self.backend.aclose()

    async def __aenter__(self) -> "LexiconContext":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


def bootstrap_backend(settings: Settings) -> ResourceBackend:
    """Creates the resource API client for the configured server."""
    return KnoraApiBackend(base_url=settings.api_url, timeout=settings.timeout)


def bootstrap_lexicon(
    settings: Optional[Settings] = None,
    backend: Optional[ResourceBackend] = None,
) -> LexiconContext:
    """
    Wire settings, backend, caches, session and the lexicon service.

    Args:
        settings: Connection settings (defaults to get_settings())
        backend: Resource API to use instead of an HTTP client (tests, scripts)
    """
    settings = settings or get_settings()
    backend = backend or bootstrap_backend(settings)

    session = SessionService(backend)
    ontology_cache = OntologyCache(backend)
    list_cache = ListNodeCache(backend)
    templates = QueryTemplateResolver()
    service = LexiconService(
        backend=backend,
        settings=settings,
        ontology_cache=ontology_cache,
        list_cache=list_cache,
        templates=templates,
        session=session,
    )

    logger.info(f"Lexicon client wired for {settings.api_url} (ontology {settings.mls_ontology})")
    return LexiconContext(
        settings=settings,
        backend=backend,
        session=session,
        ontology_cache=ontology_cache,
        list_cache=list_cache,
        templates=templates,
        service=service,
    )
