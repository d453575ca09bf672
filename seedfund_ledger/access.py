"""Capability checks for admin, holder and public operations."""

from enum import Enum

from seedfund_ledger.errors import AdminFrozen, NotAdmin, NotHolder
from seedfund_ledger.formatters import normalize_address
from seedfund_ledger.guards import UndoLog


class Capability(Enum):
    ADMIN = "admin"
    HOLDER = "holder"
    PUBLIC = "public"


class AccessGate:
    """Single place where every operation's required capability is checked.

    The admin identity is opaque (a key, a multisig, ...). Once frozen, no
    caller holds the ADMIN capability ever again.
    """

    def __init__(self, admin: str, journal: UndoLog | None = None) -> None:
        self._journal = journal if journal is not None else UndoLog()
        self._admin = normalize_address(admin)
        self._frozen = False

    @property
    def admin(self) -> str:
        return self._admin

    @property
    def frozen(self) -> bool:
        return self._frozen

    def is_admin(self, caller: str) -> bool:
        return not self._frozen and normalize_address(caller) == self._admin

    def require(self, capability: Capability, caller: str, *, holder: str | None = None) -> None:
        if capability is Capability.PUBLIC:
            return
        who = normalize_address(caller)
        if capability is Capability.ADMIN:
            if self._frozen:
                raise AdminFrozen("administrative operations are permanently disabled")
            if who != self._admin:
                raise NotAdmin(f"{who} is not the fund admin")
            return
        if holder is None or who != normalize_address(holder):
            raise NotHolder(f"{who} does not hold this record")

    def freeze(self, caller: str) -> None:
        self.require(Capability.ADMIN, caller)
        self._journal.set_attr(self, "_frozen", True)
