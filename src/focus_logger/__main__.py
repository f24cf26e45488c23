"""Allow running as `python -m focus_logger`."""

from focus_logger.cli.main import app

if __name__ == "__main__":
    app()
