"""
The lexical vocabulary shared by the scanner, the parser, and every later pass.
Tokens are immutable; later passes hang on to them for diagnostics.
"""
from enum import Enum, auto
from typing import NamedTuple, Optional, Union

class TokenKind(Enum):
	# Single-character punctuation
	LEFT_PAREN = auto()
	RIGHT_PAREN = auto()
	LEFT_BRACE = auto()
	RIGHT_BRACE = auto()
	COMMA = auto()
	DOT = auto()
	MINUS = auto()
	PLUS = auto()
	SEMICOLON = auto()
	SLASH = auto()
	STAR = auto()

	# One or two character operators
	BANG = auto()
	BANG_EQUAL = auto()
	EQUAL = auto()
	EQUAL_EQUAL = auto()
	GREATER = auto()
	GREATER_EQUAL = auto()
	LESS = auto()
	LESS_EQUAL = auto()

	# Literals
	IDENTIFIER = auto()
	STRING = auto()
	NUMBER = auto()

	# Keywords
	AND = auto()
	CLASS = auto()
	ELSE = auto()
	FALSE = auto()
	FUN = auto()
	FOR = auto()
	IF = auto()
	NIL = auto()
	OR = auto()
	PRINT = auto()
	RETURN = auto()
	SUPER = auto()
	THIS = auto()
	TRUE = auto()
	VAR = auto()
	WHILE = auto()

	EOF = auto()

KEYWORDS = {
	kind.name.lower(): kind
	for kind in (
		TokenKind.AND, TokenKind.CLASS, TokenKind.ELSE, TokenKind.FALSE,
		TokenKind.FUN, TokenKind.FOR, TokenKind.IF, TokenKind.NIL,
		TokenKind.OR, TokenKind.PRINT, TokenKind.RETURN, TokenKind.SUPER,
		TokenKind.THIS, TokenKind.TRUE, TokenKind.VAR, TokenKind.WHILE,
	)
}

# The keywords that can begin a statement; the parser resynchronizes on these.
STATEMENT_STARTERS = frozenset([
	TokenKind.CLASS, TokenKind.FUN, TokenKind.VAR, TokenKind.FOR,
	TokenKind.IF, TokenKind.WHILE, TokenKind.PRINT, TokenKind.RETURN,
])

class Token(NamedTuple):
	kind: TokenKind
	lexeme: str
	literal: Optional[Union[float, str]]
	line: int
	offset: int = 0   # Character index into the source, for drawing diagnostics.

	def __repr__(self): return "<%s %r>" % (self.kind.name, self.lexeme)

	def is_eof(self) -> bool: return self.kind is TokenKind.EOF

def synthetic(kind:TokenKind, lexeme:str, like:Token) -> Token:
	""" A token the parser makes up, such as the `true` in `for(;;)`, located at a real one. """
	return Token(kind, lexeme, None, like.line, like.offset)
