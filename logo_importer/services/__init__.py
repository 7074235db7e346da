"""
logo_importer/services package marker.
"""

from logo_importer.services.import_service import ImportReport, ImportRequest, LogoImportService
from logo_importer.services.input_source import InputSourceError, read_website_rows

__all__ = [
    "ImportReport",
    "ImportRequest",
    "InputSourceError",
    "LogoImportService",
    "read_website_rows",
]
