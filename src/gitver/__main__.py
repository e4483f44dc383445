"""Allow `python -m gitver`."""

from gitver.cli.main import cli

if __name__ == "__main__":
    cli()
