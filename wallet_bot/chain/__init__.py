"""Blockchain boundary: chain API reads, signer contract, fault classification."""

from .client import ChainClient, KeyAccount, KeyPair, ResourceUsage, Signer
from .eos import EosChain, format_eos
from .faults import classify_fault
from .names import generate_account_name, is_valid_account_name
from .rpc import EosRpcClient

__all__ = [
    "ChainClient",
    "KeyAccount",
    "KeyPair",
    "ResourceUsage",
    "Signer",
    "EosChain",
    "EosRpcClient",
    "classify_fault",
    "format_eos",
    "generate_account_name",
    "is_valid_account_name",
]
