"""
CLI command modules.
"""

from distributor_cli.commands import generate, proof, verify

__all__ = ["generate", "proof", "verify"]
