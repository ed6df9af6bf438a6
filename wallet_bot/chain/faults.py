"""Classify chain faults into resource exhaustion and everything else."""

import re

from ..errors import ChainError, ResourceInsufficient

# Structured error names reported by nodeos
_RESOURCE_ERROR_NAMES = {
    "tx_cpu_usage_exceeded": "cpu",
    "leeway_deadline_exception": "cpu",
    "deadline_exception": "cpu",
    "tx_net_usage_exceeded": "net",
    "ram_usage_exceeded": "ram",
}

# Last resort for faults that arrive without a name
_RESOURCE_MARKERS = re.compile(r"\b(cpu|net|ram)\b", re.IGNORECASE)


def classify_fault(error: ChainError) -> ChainError:
    """Return a ResourceInsufficient for CPU/NET/RAM exhaustion, else ``error``."""
    if isinstance(error, ResourceInsufficient):
        return error

    if error.name:
        resource = _RESOURCE_ERROR_NAMES.get(error.name)
        if resource:
            return ResourceInsufficient(str(error), resource, name=error.name)
        return error

    match = _RESOURCE_MARKERS.search(str(error))
    if match:
        return ResourceInsufficient(str(error), match.group(1).lower())
    return error
