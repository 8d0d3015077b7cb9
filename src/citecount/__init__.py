"""
citecount: citation counts for bibliographic records.

Resolves a citation count for a record against one external provider
(Crossref, INSPIRE-HEP, Semantic Scholar, NASA ADS), trying DOI, arXiv
identifier and title/author/year lookups in order, and writes the result
into the record's ``extra`` field.
"""

__version__ = '0.1.0'
