import logging
import os
import zipfile
from abc import ABC, abstractmethod
from contextlib import ExitStack
from pathlib import Path
from typing import Dict, Iterator, Tuple

from .errors import ArchiveOpenError, TraversalError
from .roots import ArchiveRoot, PlainRoot, Root


logger = logging.getLogger(__name__)

# (absolute path, is regular file)
Entry = Tuple[str, bool]


class FileLister(ABC):
    """
    Contract for listing everything beneath a root.
    Abstracts os.walk vs zip member listing.
    """

    @abstractmethod
    def list_files(self, root: Root) -> Iterator[Entry]:
        """
        Yield ``(absolute_path, is_file)`` for every entry below ``root``.

        Paths use forward slashes. A root that does not exist yields
        nothing.
        """


class DirectoryLister(FileLister):
    """Lists a plain directory tree with os.walk."""

    def list_files(self, root: PlainRoot) -> Iterator[Entry]:
        if not root.path.is_dir():
            logger.debug("Root %s is not a directory, nothing to list", root.path)
            return

        for dirpath, dirnames, filenames in os.walk(root.path, onerror=self._on_error):
            for name in dirnames:
                yield Path(dirpath, name).as_posix(), False
            for name in filenames:
                file_path = Path(dirpath, name)
                yield file_path.as_posix(), file_path.is_file()

    @staticmethod
    def _on_error(err: OSError) -> None:
        # a directory removed while walking contributes no files
        if isinstance(err, FileNotFoundError):
            logger.debug("Skipping vanished directory %s", err.filename)
            return
        raise TraversalError(f"Cannot list {err.filename}: {err}") from err


class ArchiveLister(FileLister):
    """
    Lists members of zip archives.

    Every container is opened at most once; roots that share a container
    share its handle. All handles are closed by :meth:`close`, so use the
    lister as a context manager.
    """

    def __init__(self):
        self._stack = ExitStack()
        self._handles: Dict[Path, zipfile.ZipFile] = {}

    def __enter__(self) -> "ArchiveLister":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._handles.clear()
        self._stack.close()

    def open(self, container: Path) -> zipfile.ZipFile:
        handle = self._handles.get(container)
        if handle is not None:
            return handle
        try:
            handle = zipfile.ZipFile(container)
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveOpenError(f"Cannot open archive {container}: {e}") from e
        self._stack.enter_context(handle)
        self._handles[container] = handle
        logger.debug("Opened archive %s", container)
        return handle

    def list_files(self, root: ArchiveRoot) -> Iterator[Entry]:
        handle = self.open(root.container)
        prefix = f"{root.inner}/" if root.inner else ""
        for info in handle.infolist():
            member = info.filename
            if not member.startswith(prefix) or member == prefix:
                continue
            yield "/" + member.rstrip("/"), not info.is_dir()
