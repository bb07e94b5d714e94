"""
Entry point for the WordPress to Markdown conversion tool.
"""

from wp2md.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
