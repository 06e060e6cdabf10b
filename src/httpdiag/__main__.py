"""Allow ``python -m httpdiag``."""

from httpdiag.http.cli import main

if __name__ == "__main__":
    main()
