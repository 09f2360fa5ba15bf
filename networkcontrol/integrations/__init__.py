# networkcontrol/integrations/__init__.py
"""Network Control External Integrations"""

from .factomd_client import FactomdClient, FactomdConfig

__all__ = [
    "FactomdClient",
    "FactomdConfig",
]
