"""
Custom exception hierarchy for the image organizer.

Startup problems raise ConfigurationError and abort the run. Everything else
is a per-file failure: the pipeline logs it and moves on to the next file.
"""


class ImageOrganizerError(Exception):
    """Base exception for all image organizer errors."""
    pass


class ConfigurationError(ImageOrganizerError):
    """Raised when the run cannot start (bad time zone, missing root, ...)."""
    pass


class ImageLoadError(ImageOrganizerError):
    """Raised when a file cannot be decoded as an image."""
    pass


class MetadataExtractionError(ImageOrganizerError):
    """Raised when metadata cannot be extracted from a file."""
    pass


class FileHashError(ImageOrganizerError):
    """Raised when file hashing fails."""
    pass


class FileOperationError(ImageOrganizerError):
    """Raised when file move/delete operations fail."""
    pass
