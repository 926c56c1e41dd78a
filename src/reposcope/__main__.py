"""Entry point for running Reposcope as a module.

Usage:
    python -m reposcope [command] [options]

Example:
    python -m reposcope analyze ~/src/project
    python -m reposcope analyze https://github.com/pallets/click.git --format json
"""

from reposcope.cli import app

if __name__ == "__main__":
    app()
