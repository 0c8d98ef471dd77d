"""
Tolerant HTML parser: tokenizer, tree builder and the element tables they share.
"""

from .tokenizer import Token, Tokenizer, TokenType

__all__ = ['Token', 'Tokenizer', 'TokenType']
