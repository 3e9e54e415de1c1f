"""
genpkgbuild package

Generate an Arch Linux PKGBUILD for a Go application from its import path.

Key responsibilities are split across modules:
- `resolver.py`: map an import path to its repository (URL, VCS, root import path)
- `version.py`: clone the repository into a temp dir and derive a pkgver string
- `prompter.py`: ask the user for naming choices on the controlling terminal
- `renderer.py`: render the fixed PKGBUILD template
- `config.py`: optional YAML configuration for defaults
- `cli.py`: CLI entrypoint and orchestration (resolve -> prompt/fetch -> render)
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
