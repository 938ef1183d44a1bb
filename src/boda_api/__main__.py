"""Allow ``python -m boda_api`` to run the CLI."""

from boda_api.cli.main import app

if __name__ == "__main__":
    app()
