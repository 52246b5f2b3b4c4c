"""idemdeploy CLI: Typer-based command-line interface.

Provides the ``idemdeploy`` command with subcommands for deploying a
manifest, planning a run without broadcasting, and computing addresses
offline.

Report rows are written plainly to stdout; status and errors go to stderr.
"""
