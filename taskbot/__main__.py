"""Allow running taskbot with ``python -m taskbot``."""

from taskbot.cli import run

if __name__ == "__main__":
    run()
