"""
Lexical analyzer for rendered values

Tokenizes the prefix notation produced by rendering a Value.
"""

import re
from typing import List

from symval.errors import ParseError


class Token:
    """Token in the input stream"""

    def __init__(self, type: str, value: str, pos: int):
        self.type = type
        self.value = value
        self.pos = pos

    def __repr__(self):
        return f"Token({self.type}, {self.value!r}, {self.pos})"


class Lexer:
    """Lexical analyzer for rendered values"""

    TOKEN_PATTERNS = [
        ('LPAREN', r'\('),
        ('RPAREN', r'\)'),
        ('VAR', r'<[^<>]+:\d+>'),
        ('NUMBER', r'-?\d+'),
        ('TAG', r'[A-Za-z_][A-Za-z0-9_]*'),
        ('WHITESPACE', r'\s+'),
    ]

    _COMPILED = [(token_type, re.compile(pattern)) for token_type, pattern in TOKEN_PATTERNS]

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.tokens: List[Token] = []
        self._tokenize()

    def _tokenize(self):
        """Tokenize the input text"""
        while self.pos < len(self.text):
            for token_type, regex in self._COMPILED:
                match = regex.match(self.text, self.pos)
                if match:
                    if token_type != 'WHITESPACE':
                        self.tokens.append(Token(token_type, match.group(0), self.pos))
                    self.pos = match.end()
                    break
            else:
                raise ParseError(f"Invalid character at position {self.pos}: {self.text[self.pos]!r}")
