"""Entrypoint for `python -m stackq`."""

from .cli import main


if __name__ == "__main__":
    main()
