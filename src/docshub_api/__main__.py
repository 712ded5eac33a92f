"""Module entrypoint for ``python -m docshub_api``."""

from .main import start

if __name__ == "__main__":
    start()
