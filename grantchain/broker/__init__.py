"""Host-side collaborators answering probes, prompts and settings navigation."""

from .base import PermissionBroker
from .simulated import SimulatedBroker, BrokerCall, GRANT, DENY, DENY_FOREVER

__all__ = [
    "PermissionBroker",
    "SimulatedBroker",
    "BrokerCall",
    "GRANT",
    "DENY",
    "DENY_FOREVER",
]
