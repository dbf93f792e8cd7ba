"""Read-only access to the REST data store."""

from .client import FetchResult, Lookup, LookupState, RecordStore

__all__ = ["FetchResult", "Lookup", "LookupState", "RecordStore"]
