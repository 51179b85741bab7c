import logging
from pathlib import Path
from typing import Any, Callable, Iterator, List, Optional, TypeVar, Union

from pathspec import PathSpec

from .errors import MalformedLocationError
from .paths import (
    SEPARATORS,
    decode_location,
    package_to_path,
    strip_leading_separator,
    strip_trailing_separator,
)
from .resource import Resource
from .roots import PLAIN_SCHEME, ArchiveRoot, Root, RootResolver, SysPathRootResolver
from .walker import ArchiveLister, DirectoryLister


logger = logging.getLogger(__name__)

R = TypeVar("R")
Mapper = Callable[[Resource], Optional[R]]


def load_ignore_spec(ignore_file: Optional[Path]) -> Optional[PathSpec]:
    if ignore_file is None:
        return None
    patterns = ignore_file.read_text(encoding="utf-8").splitlines()
    return PathSpec.from_lines("gitwildmatch", patterns)


class ResourceScanner:
    """
    Package resource scanner over directories and zip archives.

    Given a dotted package name, the scanner asks its root resolver for
    every search-path location holding the package directory, lists every
    regular file below each of them and hands each file to a mapper as a
    :class:`~pkgscan.resource.Resource`.

    Names are relative to the search-path entry, so a file
    ``org/example/scan/a.txt`` has the same name whether it lives in a
    directory or inside a zip file.

    Key features
    ------------
    - Directory and zip archive roots, mixed freely
    - Mapper driven: ``None`` results are dropped
    - Optional gitignore-style filtering on resource names
    - Archive handles are closed when the scan ends, even on error
    """

    def __init__(
            self,
            package: str,
            resolver: Optional[RootResolver] = None,
            ignore_file: Optional[Union[str, Path]] = None,
    ):
        """
        Create a new ResourceScanner instance.

        Parameters
        ----------
        package : str
            Dotted package name to scan, e.g. ``"org.example.scan"``.
        resolver : RootResolver, optional
            Source of package roots. Defaults to a
            :class:`~pkgscan.roots.SysPathRootResolver` over ``sys.path``.
        ignore_file : str | pathlib.Path, optional
            Path to a gitignore-style file. Resources whose name matches
            are skipped before the mapper is called.
        """
        self.package = package
        self.package_path = package_to_path(package)
        self.resolver = resolver if resolver is not None else SysPathRootResolver()

        self.ignore_file = (
            Path(ignore_file).expanduser().resolve()
            if ignore_file is not None
            else None
        )

        self._ignore_spec: Optional[Any] = None

    # --------
    # public
    # --------

    def scan(self, mapper: Mapper) -> List[R]:
        """
        Map every resource under the package and collect the results.

        Parameters
        ----------
        mapper : callable
            Called with each :class:`Resource`. A ``None`` return value
            skips the resource.

        Returns
        -------
        list
            Mapper results in traversal order. The order depends on the
            underlying filesystem; sort it if it matters.

        Raises
        ------
        ResourceScanError
            If a location is malformed, an archive cannot be opened or a
            directory cannot be listed. No partial result is returned.
        """
        if self._ignore_spec is None and self.ignore_file is not None:
            self._ignore_spec = load_ignore_spec(self.ignore_file)

        collector: List[R] = []
        roots = list(self.resolver.resolve(self.package_path))

        with ArchiveLister() as archives:
            directories = DirectoryLister()
            for root in roots:
                for res in self._scan_root(root, directories, archives):
                    r = mapper(res)
                    if r is not None:
                        collector.append(r)

        logger.info(
            "Scanned package %r: %d root(s), %d result(s)",
            self.package, len(roots), len(collector),
        )
        return collector

    # ----------------
    # internal logic
    # ----------------

    def _base_of(self, root: Root) -> str:
        location = strip_trailing_separator(decode_location(root.location))
        cut = len(location) - len(self.package_path)
        # the package path must start at a segment boundary
        if not location.endswith(self.package_path) or (
                self.package_path and location[cut - 1:cut] not in SEPARATORS
        ):
            raise MalformedLocationError(
                f"Location {location!r} does not end with {self.package_path!r}"
            )
        base = location[:cut]
        if base.startswith(PLAIN_SCHEME):
            base = base[len(PLAIN_SCHEME):]
        return strip_trailing_separator(base)

    def _scan_root(
            self,
            root: Root,
            directories: DirectoryLister,
            archives: ArchiveLister,
    ) -> Iterator[Resource]:
        base = self._base_of(root)
        is_archive = isinstance(root, ArchiveRoot)
        logger.debug(
            "Scanning %s root %s (base %s)",
            "archive" if is_archive else "plain", root.location, base,
        )

        lister = archives if is_archive else directories
        for path, is_file in lister.list_files(root):
            if not is_file:
                continue

            if is_archive:
                name = strip_leading_separator(path)
                res = Resource(base + "/" + name, name)
            else:
                name = strip_leading_separator(path[len(base):])
                res = Resource(PLAIN_SCHEME + path, name)

            if self._is_ignored(res):
                continue
            yield res

    def _is_ignored(self, res: Resource) -> bool:
        if self._ignore_spec is None:
            return False
        return bool(self._ignore_spec.match_file(res.name))


def scan(
        package: str,
        mapper: Mapper,
        *,
        resolver: Optional[RootResolver] = None,
        ignore_file: Optional[Union[str, Path]] = None,
) -> List[R]:
    """Shortcut for ``ResourceScanner(package, ...).scan(mapper)``."""
    scanner = ResourceScanner(package, resolver=resolver, ignore_file=ignore_file)
    return scanner.scan(mapper)
