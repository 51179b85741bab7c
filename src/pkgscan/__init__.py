from .resource import Resource
from .roots import ArchiveRoot, PlainRoot, RootResolver, StaticRootResolver, SysPathRootResolver
from .scanner import ResourceScanner, scan
from .errors import ArchiveOpenError, MalformedLocationError, ResourceScanError, TraversalError
