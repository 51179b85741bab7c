from importlib.resources import files


def test_package_importable():
    import pkgscan

    assert hasattr(pkgscan, "__file__")
    assert pkgscan.__file__ is not None
    assert callable(pkgscan.scan)


def test_package_resources_accessible():
    pkg_root = files("pkgscan")

    assert pkg_root.is_dir()
    assert (pkg_root / "scanner.py").is_file()
