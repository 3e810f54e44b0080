"""Provider integrations.

This package contains read-only integrations with external data services.
"""

from . import etherscan as etherscan  # re-export namespace

__all__ = ["etherscan"]
