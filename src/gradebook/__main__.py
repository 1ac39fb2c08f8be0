"""Allow ``python -m gradebook``."""

from gradebook.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
