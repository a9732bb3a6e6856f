"""Module entrypoint for ``python -m navshell``.

Argument parsing and runtime setup happen in ``navshell.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
