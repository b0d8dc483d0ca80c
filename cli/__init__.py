"""Command line tools for the energy anomaly dashboard.

The Typer application lives in ``cli.app``.
"""
