"""
Notekeeper Modules.

- backend/: Notes service, procedure transport, REST API, database, configuration
- cli/: Command-line client (Typer + Rich)
"""
