"""
create_devx package

This package implements `create-devx`, a CLI that scaffolds a new backend
project from a remote template archive.

Key responsibilities are split across modules:
- `validate.py`: npm-style project name validation
- `filesystem.py`: writability probe and "effectively empty" directory check
- `download.py`: streaming tarball download + extraction into the project root
- `install.py` / `online.py`: package manager install step and offline detection
- `git.py`: best-effort repository initialization
- `prompt.py`: interactive project name prompt
- `create_app.py`: the scaffolding pipeline (guard -> download -> install -> git)
- `cli.py`: CLI entrypoint, error policy and exit codes
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
