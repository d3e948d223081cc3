"""Command implementations registered on the root Typer application."""
