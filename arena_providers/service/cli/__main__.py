"""``python -m arena_providers.service.cli`` entrypoint (same as ``arena-cli``)."""

from __future__ import annotations

from . import main

if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
