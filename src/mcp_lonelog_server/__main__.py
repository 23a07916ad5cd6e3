"""Module entrypoint.

Allows:
    python -m mcp_lonelog_server
"""

from __future__ import annotations

from mcp_lonelog_server.server.lonelog_server import main

if __name__ == "__main__":
    main()
