"""CLI command implementations, registered on the app in :mod:`uaa.cli.main`."""
