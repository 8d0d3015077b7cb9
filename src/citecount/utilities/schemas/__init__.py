from citecount.utilities.schemas.records import BibliographicRecord, Creator

__all__ = ['BibliographicRecord', 'Creator']
