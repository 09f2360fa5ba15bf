# networkcontrol/__init__.py
"""
Network Control - authority set management for factom networks

Build, co-sign, review and submit AddServer / RemoveServer messages that
change which nodes may produce blocks.
"""

__version__ = "1.0.0"
