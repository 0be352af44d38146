"""Allow ``python -m expreval``."""

from expreval.cli import main

if __name__ == "__main__":
    main()
