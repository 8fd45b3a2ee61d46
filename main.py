#!/usr/bin/env python3
"""
Main entry point for running repo-insights as a GitHub Actions step.
"""

import sys

from repo_insights.cli import main

if __name__ == "__main__":
    # Inputs arrive as INPUT_* environment variables, so default to a sync
    sys.exit(main(sys.argv[1:] or ["sync"]))
