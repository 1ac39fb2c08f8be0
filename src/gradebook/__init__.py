"""Top-level package for the gradebook.

Provides subpackages:
- gradebook.core – immutable record models and JSON schemas
- gradebook.store – the sorted, doubly-linked record store
- gradebook.statistics – mean/median/standard deviation queries
- gradebook.serialization – text format reader/writer and JSON report
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
                    # Parse: version = "0.1.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    # Fallback to importlib.metadata for installed package
    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("gradebook")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__copyright__ = "Copyright 2026 The gradebook authors"
__all__: list[str] = ["__version__", "__copyright__"]
