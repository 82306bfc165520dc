"""Allow ``python -m vecsearch``."""

from .adapters.inbound.cli.commands import app

if __name__ == "__main__":
    app()
