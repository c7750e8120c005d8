"""
LLM Gateway

Client for OpenAI-compatible chat-completion APIs with:
- Background context injection
- JSON envelope unwrapping of replies
"""

from .gateway import LLMGateway, build_messages, extract_text

__all__ = ["LLMGateway", "build_messages", "extract_text"]
