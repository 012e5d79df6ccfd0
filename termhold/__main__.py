"""Allow ``python -m termhold``."""

from termhold.cli import main

if __name__ == "__main__":
    main()
