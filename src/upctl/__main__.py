"""Allow ``python -m upctl`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m upctl`` behaves identically to the ``upctl`` console script.
"""

from __future__ import annotations

from upctl.cli.app import cli

if __name__ == "__main__":
    cli()
