"""
Wallet Agent - Single-session on-chain conversational agent service

Provisions one agent session with a signing keypair and streams
turn-based conversations through a LangGraph workflow.
"""

__version__ = "0.1.0"
