"""Search layer — Solr connector, query builder, backend and backend assembly.

Backends are assembled once per process with ``BackendAssembler`` and shared
by every request::

    backend = assemble_backend(AUTHORITY_PROFILE, settings)
    collection = backend.search(Query(lookfor="Twain", handler="Heading"))
"""

from libdiscover.search.factory import (
    AUTHORITY_PROFILE,
    BIBLIO_PROFILE,
    BackendAssembler,
    BackendProfile,
    assemble_backend,
)
from libdiscover.search.query import Query, QueryGroup
from libdiscover.search.solr.backend import SolrBackend

__all__ = [
    "AUTHORITY_PROFILE",
    "BIBLIO_PROFILE",
    "BackendAssembler",
    "BackendProfile",
    "Query",
    "QueryGroup",
    "SolrBackend",
    "assemble_backend",
]
