class ResourceScanError(RuntimeError):
    """Base class for every failure that aborts a resource scan."""


class MalformedLocationError(ResourceScanError, ValueError):
    """A root location cannot be decoded or does not match its package path."""


class ArchiveOpenError(ResourceScanError):
    """An archive container on the search path could not be opened."""


class TraversalError(ResourceScanError):
    """Listing a directory failed with an I/O error."""
