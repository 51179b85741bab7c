import logging
import os
import sys
import zipfile
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Sequence, Union
from urllib.parse import quote

from .errors import ArchiveOpenError, MalformedLocationError


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

PLAIN_SCHEME = "file:"
ARCHIVE_SCHEME = "zip:"
ARCHIVE_SEPARATOR = "!/"


def _quote_path(path: Path) -> str:
    try:
        return quote(path.as_posix(), safe="/:")
    except UnicodeEncodeError as e:
        raise MalformedLocationError(f"Path is not valid UTF-8: {path!r}") from e


@dataclass(frozen=True)
class PlainRoot:
    """A package directory on the host filesystem."""

    path: Path

    def __post_init__(self):
        object.__setattr__(self, "path", Path(self.path).absolute())

    @property
    def location(self) -> str:
        return PLAIN_SCHEME + _quote_path(self.path)


@dataclass(frozen=True)
class ArchiveRoot:
    """A package directory ``inner`` inside the zip file ``container``."""

    container: Path
    inner: str

    def __post_init__(self):
        object.__setattr__(self, "container", Path(self.container).absolute())
        object.__setattr__(self, "inner", self.inner.strip("/"))

    @property
    def location(self) -> str:
        return (
            ARCHIVE_SCHEME
            + PLAIN_SCHEME
            + _quote_path(self.container)
            + ARCHIVE_SEPARATOR
            + quote(self.inner, safe="/")
        )


Root = Union[PlainRoot, ArchiveRoot]


class RootResolver(ABC):
    """
    Contract for finding the storage locations behind a package path.
    """

    @abstractmethod
    def resolve(self, relative_path: str) -> Iterable[Root]:
        """
        Return every root that holds ``relative_path`` as a directory.

        ``relative_path`` is slash separated, e.g. ``org/example``.
        """


class StaticRootResolver(RootResolver):
    """Returns a fixed list of roots, whatever the requested path."""

    def __init__(self, roots: Iterable[Root]):
        self.roots: List[Root] = list(roots)

    def resolve(self, relative_path: str) -> Iterable[Root]:
        return list(self.roots)


class SysPathRootResolver(RootResolver):
    """
    Resolve package roots from the module search path.

    Each entry is either a directory or a zip file, like the entries
    ``sys.path`` holds. A directory entry contributes a
    :class:`PlainRoot` when ``<entry>/<path>`` is a directory; a zip entry
    contributes an :class:`ArchiveRoot` when it has members under
    ``<path>/``.

    Parameters
    ----------
    search_path : sequence of str | pathlib.Path, optional
        Entries to search. Defaults to the live ``sys.path``, read at
        resolve time.
    """

    def __init__(self, search_path: Optional[Sequence[PathLike]] = None):
        self.search_path = (
            list(search_path) if search_path is not None else None
        )

    def resolve(self, relative_path: str) -> List[Root]:
        roots: List[Root] = []
        for entry in self._entries():
            if entry.is_dir():
                candidate = entry / relative_path if relative_path else entry
                if candidate.is_dir():
                    roots.append(PlainRoot(candidate))
            elif entry.is_file() and zipfile.is_zipfile(entry):
                if self._archive_has_dir(entry, relative_path):
                    roots.append(ArchiveRoot(entry, relative_path))
            else:
                logger.debug("Skipping search path entry %s", entry)
        return roots

    def _entries(self) -> Iterator[Path]:
        raw = sys.path if self.search_path is None else self.search_path
        seen = set()
        for item in raw:
            entry = Path(os.fspath(item) or os.curdir).expanduser().resolve()
            if entry in seen:
                continue
            seen.add(entry)
            yield entry

    @staticmethod
    def _archive_has_dir(container: Path, relative_path: str) -> bool:
        if not relative_path:
            return True
        prefix = relative_path + "/"
        try:
            with zipfile.ZipFile(container) as zf:
                return any(n.startswith(prefix) for n in zf.namelist())
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveOpenError(f"Cannot open archive {container}: {e}") from e
