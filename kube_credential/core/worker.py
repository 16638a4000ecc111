from __future__ import annotations

import os
import secrets
import socket
from dataclasses import dataclass

from kube_credential.core.time import now_utc_iso


@dataclass(frozen=True, slots=True)
class WorkerInfo:
    """Identity of this service process.

    Stamped on every issued credential (``issued_by``) and every
    verification result (``verified_by``) so actions can be traced back to
    the replica that performed them.  Built once at app creation and
    stable for the process lifetime.
    """

    worker_id: str
    hostname: str
    started_at: str

    @staticmethod
    def generate(prefix: str) -> WorkerInfo:
        hostname = socket.gethostname()
        suffix = secrets.token_hex(3)
        return WorkerInfo(
            worker_id=f"{prefix}-{hostname}-{os.getpid()}-{suffix}",
            hostname=hostname,
            started_at=now_utc_iso(),
        )
