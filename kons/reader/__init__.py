"""Reader: Lexer -> Tokenizer -> Parser."""

from kons.reader.lexer import Lexer
from kons.reader.tokenizer import Tag, Token, Tokenizer, tokenize
from kons.reader.parser import Parser, parse

__all__ = ["Lexer", "Tag", "Token", "Tokenizer", "tokenize", "Parser", "parse"]
