"""Organize loosely structured link lists into a categorized Markdown directory."""

from .errors import (
    CategorizationFailure,
    ConfigLoadError,
    FileReadError,
    OrganizerError,
    SaveError,
)
from .services.organizer import RepairResult, RepairStatus, WebLinkOrganizer

__version__ = '1.0.0'
