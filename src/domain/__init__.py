"""Domain layer - settings, profiles and exchanged documents."""
from domain.documents import (
    BuildingDocument,
    GridDocument,
    MalformedDocumentError,
    StationDocument,
    StreamlineDocument,
    WindGridDocument,
    join_wind,
    load_document,
    parse_document,
    save_document,
)
from domain.models import FlowSettings
from domain.profiles import (
    delete_profile,
    ensure_profiles_dir,
    list_profiles,
    load_profile,
    save_profile,
)

__all__ = [
    'BuildingDocument',
    'FlowSettings',
    'GridDocument',
    'MalformedDocumentError',
    'StationDocument',
    'StreamlineDocument',
    'WindGridDocument',
    'delete_profile',
    'ensure_profiles_dir',
    'join_wind',
    'list_profiles',
    'load_document',
    'load_profile',
    'parse_document',
    'save_document',
    'save_profile',
]
