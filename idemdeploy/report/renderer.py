"""Fixed-width deployment report.

Output is consumed by scripts, so the layout is exact and uncoloured::

    State    Name   Address                                    Initcode hash
    Found    Token  0x5fbdb2315678afecb367f032d93f642f64180aa3 0x9c22...
    Creating Vault  0xe7f1725e7734ce288f8367e1bb143e90bb3f0512 0x1f6d...

Column widths
-------------
- state       : 9 cells
- name        : longest registered name + 1 cells
- address     : 43 cells
- fingerprint : unpadded

Widths are terminal cells as measured by ``rich.cells.cell_len``, so
multi-byte and wide names line up.
"""

from __future__ import annotations

from collections.abc import Iterable

from rich.cells import cell_len
from rich.console import Console

from idemdeploy.models.deployment import Deployment, DeploymentStatus

STATE_WIDTH = 9
ADDRESS_WIDTH = 43

HEADER_STATE = "State"
HEADER_NAME = "Name"
HEADER_ADDRESS = "Address"
HEADER_FINGERPRINT = "Initcode hash"

_STATE_LABELS: dict[DeploymentStatus, str] = {
    DeploymentStatus.FOUND: "Found",
    DeploymentStatus.CREATED: "Creating",
}


# ---------------------------------------------------------------------------
# Pure formatting
# ---------------------------------------------------------------------------


def pad(text: str, width: int) -> str:
    """Right-pad *text* with spaces to *width* terminal cells."""
    return text + " " * max(width - cell_len(text), 0)


def name_column_width(names: Iterable[str]) -> int:
    """Longest name in cells plus one."""
    return max((cell_len(n) for n in names), default=0) + 1


def state_label(status: DeploymentStatus) -> str:
    """``Found`` or ``Creating``; unresolved entries have no row label."""
    try:
        return _STATE_LABELS[status]
    except KeyError:
        raise ValueError(f"No report label for status {status.value!r}") from None


def format_header(name_width: int) -> str:
    return (
        pad(HEADER_STATE, STATE_WIDTH)
        # the header cell keeps one space after "Name" even when names are shorter
        + pad(HEADER_NAME, max(name_width, cell_len(HEADER_NAME) + 1))
        + pad(HEADER_ADDRESS, ADDRESS_WIDTH)
        + HEADER_FINGERPRINT
    )


def format_row(deployment: Deployment, name_width: int) -> str:
    return (
        pad(state_label(deployment.status), STATE_WIDTH)
        + pad(deployment.name, name_width)
        + pad(deployment.deployment_address, ADDRESS_WIDTH)
        + deployment.fingerprint_hex
    )


# ---------------------------------------------------------------------------
# Console writer
# ---------------------------------------------------------------------------


class DeployReport:
    """Writes report lines to a Rich console and keeps a copy of each.

    Parameters
    ----------
    console:
        Rich Console instance.  A new one is created if not provided.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.lines: list[str] = []

    def _emit(self, line: str) -> None:
        self.lines.append(line)
        self.console.print(line, markup=False, highlight=False, emoji=False, soft_wrap=True)

    def header(self, name_width: int) -> None:
        self._emit(format_header(name_width))

    def row(self, deployment: Deployment, name_width: int) -> None:
        self._emit(format_row(deployment, name_width))

    def separator(self) -> None:
        self._emit("")
