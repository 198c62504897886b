"""
Strategies and builder turning raw entries into ordered messages.
"""

from .ai_service import AiServiceStrategy
from .base import BaseStrategy
from .composer import ComposerStrategy
from .conversation import ConversationBuilder, build_messages, default_strategies

__all__ = [
    "AiServiceStrategy",
    "BaseStrategy",
    "ComposerStrategy",
    "ConversationBuilder",
    "build_messages",
    "default_strategies",
]
