"""Top-level package for the Assessment Toolkit.

Provides subpackages:
- assessment_toolkit.core – canonical models, rich-text tokens, validator
- assessment_toolkit.normalize – schema detection, migration and defaulting
- assessment_toolkit.loading – bulk JSON/JSONL parsing
- assessment_toolkit.rendering – HTML preview and layout descriptors
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            content = pyproject.read_text(encoding="utf-8")
        except OSError:
            content = ""
        for line in content.splitlines():
            if line.strip().startswith("version"):
                # Parse: version = "5.1.0"
                return line.split("=")[1].strip().strip('"').strip("'")

    from importlib.metadata import PackageNotFoundError, version as pkg_version
    try:
        return pkg_version("assessment-toolkit")
    except PackageNotFoundError:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
