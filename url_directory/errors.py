"""Error kinds raised by the URL directory pipeline."""


class OrganizerError(Exception):
    """Base class for errors surfaced to the command line."""


class ConfigLoadError(OrganizerError):
    """The category configuration could not be read or is malformed."""


class FileReadError(OrganizerError):
    """The input link file could not be read."""


class CategorizationFailure(OrganizerError):
    """No category could be determined for a new URL."""


class SaveError(OrganizerError):
    """The generated document could not be written."""
