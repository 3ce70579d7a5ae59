"""Allow ``python -m deskclean``."""

from deskclean.cli import main

if __name__ == "__main__":
    main()
