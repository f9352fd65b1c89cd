#!/usr/bin/env python3
"""Fetch GitHub releases and regenerate release-raw.csv and release-stats.csv.

Usage:
    python ingest_releases.py                      # repos from config.json
    python ingest_releases.py owner/repo1 owner/repo2 ...
    python ingest_releases.py --all-days           # keep weekend releases in period stats
"""

import sys

from release_dashboard.cli import ingest_main

if __name__ == "__main__":
    sys.exit(ingest_main())
