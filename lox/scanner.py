"""
Turn source text into a flat list of tokens, ending with EOF.

This is a plain hand-written single pass with a character or two of lookahead.
Lexical errors are reported and then skipped; the scan always runs to the end.
"""
from .diagnostics import Report
from .tokens import Token, TokenKind, KEYWORDS

_PUNCTUATION = {
	'(': TokenKind.LEFT_PAREN,
	')': TokenKind.RIGHT_PAREN,
	'{': TokenKind.LEFT_BRACE,
	'}': TokenKind.RIGHT_BRACE,
	',': TokenKind.COMMA,
	'.': TokenKind.DOT,
	'-': TokenKind.MINUS,
	'+': TokenKind.PLUS,
	';': TokenKind.SEMICOLON,
	'*': TokenKind.STAR,
}

# Operators that may take a trailing '=': (alone, with-equals)
_COMPOUND = {
	'!': (TokenKind.BANG, TokenKind.BANG_EQUAL),
	'=': (TokenKind.EQUAL, TokenKind.EQUAL_EQUAL),
	'<': (TokenKind.LESS, TokenKind.LESS_EQUAL),
	'>': (TokenKind.GREATER, TokenKind.GREATER_EQUAL),
}

_WHITESPACE = frozenset(" \r\t")

def _is_digit(c:str) -> bool:
	return '0' <= c <= '9'

def _is_alpha(c:str) -> bool:
	return 'a' <= c <= 'z' or 'A' <= c <= 'Z' or c == '_'

def _is_alnum(c:str) -> bool:
	return _is_alpha(c) or _is_digit(c)

class Scanner:

	def __init__(self, source:str, report:Report):
		self._source = source
		self._report = report
		self._tokens = []
		self._start = 0
		self._current = 0
		self._line = 1

	def scan_tokens(self) -> list[Token]:
		while not self._at_end():
			self._start = self._current
			self._scan_token()
		self._tokens.append(Token(TokenKind.EOF, "", None, self._line, len(self._source)))
		return self._tokens

	def _scan_token(self):
		c = self._advance()
		if c in _PUNCTUATION:
			self._add(_PUNCTUATION[c])
		elif c in _COMPOUND:
			alone, with_equals = _COMPOUND[c]
			self._add(with_equals if self._match('=') else alone)
		elif c == '/':
			if self._match('/'): self._line_comment()
			elif self._match('*'): self._block_comment()
			else: self._add(TokenKind.SLASH)
		elif c in _WHITESPACE:
			pass
		elif c == '\n':
			self._line += 1
		elif c == '"':
			self._string()
		elif _is_digit(c):
			self._number()
		elif _is_alpha(c):
			self._identifier()
		else:
			self._report.lexical_error(self._line, self._start, "Unexpected character %r." % c)

	def _line_comment(self):
		while self._peek() != '\n' and not self._at_end():
			self._advance()

	def _block_comment(self):
		# Running off the end of the text inside a block comment is tolerated.
		while not self._at_end() and not (self._peek() == '*' and self._peek_next() == '/'):
			if self._advance() == '\n':
				self._line += 1
		if not self._at_end(): self._advance()
		if not self._at_end(): self._advance()

	def _string(self):
		while self._peek() != '"' and not self._at_end():
			if self._peek() == '\n':
				self._line += 1
			self._advance()
		if self._at_end():
			self._report.lexical_error(self._line, self._start, "Unterminated string.")
			return
		self._advance()  # The closing quote
		self._add(TokenKind.STRING, self._source[self._start+1:self._current-1])

	def _number(self):
		while _is_digit(self._peek()):
			self._advance()
		# A dot only belongs to the number if a digit follows it.
		if self._peek() == '.' and _is_digit(self._peek_next()):
			self._advance()
			while _is_digit(self._peek()):
				self._advance()
		self._add(TokenKind.NUMBER, float(self._source[self._start:self._current]))

	def _identifier(self):
		while _is_alnum(self._peek()):
			self._advance()
		text = self._source[self._start:self._current]
		self._add(KEYWORDS.get(text, TokenKind.IDENTIFIER))

	def _at_end(self) -> bool:
		return self._current >= len(self._source)

	def _advance(self) -> str:
		c = self._source[self._current]
		self._current += 1
		return c

	def _match(self, expected:str) -> bool:
		if self._at_end() or self._source[self._current] != expected:
			return False
		self._current += 1
		return True

	def _peek(self) -> str:
		return '' if self._at_end() else self._source[self._current]

	def _peek_next(self) -> str:
		index = self._current + 1
		return self._source[index] if index < len(self._source) else ''

	def _add(self, kind:TokenKind, literal=None):
		lexeme = self._source[self._start:self._current]
		self._tokens.append(Token(kind, lexeme, literal, self._line, self._start))

def scan(source:str, report:Report) -> list[Token]:
	return Scanner(source, report).scan_tokens()
