"""ertagent CLI entry point."""

from ertagent.cli import app

if __name__ == "__main__":
    app()
