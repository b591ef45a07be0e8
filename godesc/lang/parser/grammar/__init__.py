"""Lexical grammar of the descriptor format."""

from .lexer import ESCAPES, Lexer, Token, TokenType, tokenize

__all__ = ["ESCAPES", "Lexer", "Token", "TokenType", "tokenize"]
