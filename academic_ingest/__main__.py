"""
Package entry point.

Allows running the application via:

    python -m academic_ingest

This simply forwards execution to academic_ingest.cli.main().
"""

from academic_ingest.cli import main

if __name__ == "__main__":
    main()
