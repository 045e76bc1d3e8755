"""Compatibility entrypoint for the RaiseCoach server."""

from raisecoach.server import cli


if __name__ == "__main__":
    cli()
