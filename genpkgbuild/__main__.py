from __future__ import annotations

from genpkgbuild.cli import main

raise SystemExit(main())
