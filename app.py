#!/usr/bin/env python3
"""Release Dashboard - Flask Backend

Serves release statistics computed from the release table written by
ingest_releases.py.
"""

import sys

from release_dashboard.cli import serve_main

if __name__ == "__main__":
    sys.exit(serve_main())
