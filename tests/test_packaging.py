import ast
import tarfile
import tomllib
from pathlib import Path

from packaging.specifiers import SpecifierSet

PYPROJECT = Path(__file__).resolve().parents[1] / "pyproject.toml"


def test_python_floor_has_tar_extraction_filters() -> None:
    # extract(filter=...) is missing before 3.10.12 / 3.11.4.
    data = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))
    spec = SpecifierSet(data["project"]["requires-python"])
    for version in ("3.10.11", "3.11.3"):
        assert version not in spec
    assert "3.12.0" in spec
    assert hasattr(tarfile, "data_filter")


def test_modules_open_with_responsibility_header() -> None:
    package = PYPROJECT.parent / "create_devx"
    for module in sorted(package.glob("*.py")):
        if module.name.startswith("__"):
            continue
        doc = ast.get_docstring(ast.parse(module.read_text(encoding="utf-8")))
        assert doc, module.name
        assert doc.startswith(f"{module.name}\n\nResponsibility: "), module.name
