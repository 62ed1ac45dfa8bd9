"""Command-line client for the air quality analytics service.

The Typer application lives in ``cli.app``; it is not re-exported here so that
``cli.app`` keeps resolving to the module when tests patch attributes on it.
"""
