from dataclasses import dataclass


@dataclass(frozen=True)
class Resource:
    """
    A file discovered under a scanned package.

    Attributes
    ----------
    location : str
        Absolute location of the file. Plain files use ``file:<path>``,
        archive members use ``zip:file:<container>!/<member>``.
    name : str
        Path of the file relative to its search-path entry, with forward
        slashes and no leading separator, e.g. ``org/example/scan/a.txt``.
    """

    location: str
    name: str
