"""
CLI Client Module.

Command-line client built with Typer for calling the notes backend.

Architecture:
- CLI is a thin presentation layer
- All business logic lives in the backend
- CLI calls the batched procedure transport via HTTP (httpx)
- Sends X-Frontend-ID: cli header for log routing

Usage:
    python cli.py --help
    python cli.py notes list
    python cli.py notes demo
    python cli.py health ping
"""
