"""
Tools Package - Agent tools and capabilities
"""

from .base import BaseTool, ToolResult
from .wallet import WalletAddressTool, BalanceTool, SignMessageTool, create_wallet_tools

__all__ = [
    'BaseTool',
    'ToolResult',
    'WalletAddressTool',
    'BalanceTool',
    'SignMessageTool',
    'create_wallet_tools',
]
