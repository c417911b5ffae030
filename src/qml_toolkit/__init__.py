"""Top-level package for the QML question importer.

Provides subpackages:
- qml_toolkit.core – immutable question/outcome models, errors, schemas
- qml_toolkit.interpreter – condition-expression parser
- qml_toolkit.scoring – outcome aggregation, fractions and matches
- qml_toolkit.cloze – embedded-answer encoder and extractor
- qml_toolkit.importer – document reader, per-kind importers, pipeline
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("qml_toolkit")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
