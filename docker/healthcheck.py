"""Container healthcheck: exit 0 once the API reports it is ready."""

from __future__ import annotations

import json
import os
import sys
import urllib.error
import urllib.request

port = os.environ.get("MEDINTAKE_API_PORT", "8080")


def main() -> int:
    try:
        with urllib.request.urlopen(f"http://localhost:{port}/ready", timeout=5) as resp:
            body = json.loads(resp.read() or b"{}")
    except (urllib.error.URLError, OSError, ValueError) as exc:
        print(f"healthcheck failed: {exc}", file=sys.stderr)
        return 1
    return 0 if body.get("status") == "ready" else 1


if __name__ == "__main__":
    sys.exit(main())
