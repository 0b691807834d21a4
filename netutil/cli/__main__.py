from __future__ import annotations

from .main import cli

if __name__ == "__main__":
    cli()
