"""Apache Solr implementation of the search layer."""

from libdiscover.search.solr.backend import IndexHealth, SolrBackend
from libdiscover.search.solr.connector import SolrConnector
from libdiscover.search.solr.query_builder import QueryBuilder

__all__ = ["IndexHealth", "QueryBuilder", "SolrBackend", "SolrConnector"]
