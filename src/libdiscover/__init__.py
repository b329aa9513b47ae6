"""libdiscover — Solr search backends and authority recommendations for library discovery."""

__version__ = "0.1.0"
