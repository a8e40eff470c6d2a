from __future__ import annotations

from tile_system.cli import main

raise SystemExit(main())
