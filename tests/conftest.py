import zipfile

import pytest

from pkgscan.roots import SysPathRootResolver


CLASS_FILES = [
    "org/example/scan/convert/ValueConverterBean.class",
    "org/example/scan/destroy/AnnotationDestroyBean.class",
    "org/example/scan/nested/OuterBean.class",
    "org/example/scan/nested/OuterBean$NestedBean.class",
    "org/example/scan/sub1/Sub1Bean.class",
    "org/example/scan/sub1/sub2/Sub2Bean.class",
    "org/example/scan/sub1/sub2/sub3/Sub3Bean.class",
    "jakarta/annotation/sub/AnnoScan.class",
]

TEXT_FILES = [
    "org/example/scan/sub1/sub1.txt",
    "org/example/scan/sub1/sub2/sub2.txt",
    "org/example/scan/sub1/sub2/sub3/sub3.txt",
]

ARCHIVE_FILES = [
    "META-INF/MANIFEST.MF",
    "jakarta/annotation/PostConstruct.class",
    "jakarta/annotation/PreDestroy.class",
    "jakarta/annotation/security/PermitAll.class",
    "jakarta/annotation/sql/DataSourceDefinition.class",
]


def class_name(res):
    name = res.name
    if name.endswith(".class"):
        return name[:-6].replace("/", ".").replace("\\", ".")
    return None


def write_tree(root, names):
    for name in names:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(name)
    return root


def write_archive(path, names, with_dirs=True):
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as zf:
        if with_dirs:
            dirs = set()
            for name in names:
                parts = name.split("/")[:-1]
                for i in range(1, len(parts) + 1):
                    dirs.add("/".join(parts[:i]) + "/")
            for d in sorted(dirs):
                zf.writestr(d, "")
        for name in names:
            zf.writestr(name, name)
    return path


@pytest.fixture
def classes_dir(tmp_path):
    return write_tree(tmp_path / "classes", CLASS_FILES + TEXT_FILES)


@pytest.fixture
def archive(tmp_path):
    return write_archive(tmp_path / "lib" / "jakarta.annotation-api.zip", ARCHIVE_FILES)


@pytest.fixture
def resolver(classes_dir, archive):
    return SysPathRootResolver([classes_dir, archive])
