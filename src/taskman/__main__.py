"""Allow running as ``python -m taskman``."""

from taskman.cli import main

if __name__ == "__main__":
    main()
