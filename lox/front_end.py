"""
Recursive-descent parser, from a token list to a list of statements.

Grammar, lowest precedence first:

	assignment -> logic_or -> logic_and -> equality -> comparison
	-> term -> factor -> unary -> call -> primary

On a syntax error, the parser reports it, abandons the current declaration,
and skips ahead to something that looks like the start of the next one.
That way a file yields about one complaint per broken statement.
"""
from typing import Optional
from . import syntax
from .diagnostics import Report
from .scanner import scan
from .tokens import Token, TokenKind, STATEMENT_STARTERS, synthetic

MAX_ARGS = 255

class LoxParseError(Exception):
	""" Internal: unwinds to the nearest declaration so the parser can resynchronize. """

_EQUALITY = (TokenKind.BANG_EQUAL, TokenKind.EQUAL_EQUAL)
_COMPARISON = (TokenKind.GREATER, TokenKind.GREATER_EQUAL, TokenKind.LESS, TokenKind.LESS_EQUAL)
_TERM = (TokenKind.MINUS, TokenKind.PLUS)
_FACTOR = (TokenKind.SLASH, TokenKind.STAR)
_UNARY = (TokenKind.BANG, TokenKind.MINUS)

class Parser:

	def __init__(self, tokens:list[Token], report:Report):
		assert tokens and tokens[-1].is_eof()
		self._tokens = tokens
		self._report = report
		self._current = 0

	def parse(self) -> list[syntax.Stmt]:
		statements = []
		while not self._at_end():
			stmt = self._declaration()
			if stmt is not None:
				statements.append(stmt)
		return statements

	# Declarations

	def _declaration(self) -> Optional[syntax.Stmt]:
		try:
			if self._match(TokenKind.CLASS): return self._class_declaration()
			if self._match(TokenKind.FUN): return self._function("function")
			if self._match(TokenKind.VAR): return self._var_declaration()
			return self._statement()
		except LoxParseError:
			self._synchronize()
			return None

	def _class_declaration(self) -> syntax.ClassDecl:
		name = self._consume(TokenKind.IDENTIFIER, "Expect class name.")
		superclass = None
		if self._match(TokenKind.LESS):
			self._consume(TokenKind.IDENTIFIER, "Expect superclass name.")
			superclass = syntax.Lookup(self._previous())
		self._consume(TokenKind.LEFT_BRACE, "Expect '{' before class body.")
		methods = []
		while not self._check(TokenKind.RIGHT_BRACE) and not self._at_end():
			methods.append(self._function("method"))
		self._consume(TokenKind.RIGHT_BRACE, "Expect '}' after class body.")
		return syntax.ClassDecl(name, superclass, methods)

	def _function(self, kind:str) -> syntax.FunctionDecl:
		name = self._consume(TokenKind.IDENTIFIER, "Expect %s name." % kind)
		self._consume(TokenKind.LEFT_PAREN, "Expect '(' after %s name." % kind)
		params = []
		if not self._check(TokenKind.RIGHT_PAREN):
			while True:
				if len(params) >= MAX_ARGS:
					self._report.too_many(self._peek(), "parameters")
				params.append(self._consume(TokenKind.IDENTIFIER, "Expect parameter name."))
				if not self._match(TokenKind.COMMA): break
		self._consume(TokenKind.RIGHT_PAREN, "Expect ')' after parameters.")
		self._consume(TokenKind.LEFT_BRACE, "Expect '{' before %s body." % kind)
		return syntax.FunctionDecl(name, params, self._block())

	def _var_declaration(self) -> syntax.VarDecl:
		name = self._consume(TokenKind.IDENTIFIER, "Expect variable name.")
		initializer = self._expression() if self._match(TokenKind.EQUAL) else None
		self._consume(TokenKind.SEMICOLON, "Expect ';' after variable declaration.")
		return syntax.VarDecl(name, initializer)

	# Statements

	def _statement(self) -> syntax.Stmt:
		if self._match(TokenKind.FOR): return self._for_statement()
		if self._match(TokenKind.IF): return self._if_statement()
		if self._match(TokenKind.PRINT): return self._print_statement()
		if self._match(TokenKind.RETURN): return self._return_statement()
		if self._match(TokenKind.WHILE): return self._while_statement()
		if self._match(TokenKind.LEFT_BRACE): return syntax.Block(self._block())
		return self._expression_statement()

	def _for_statement(self) -> syntax.Stmt:
		"""
		There is no for-loop node. The loop becomes a block holding the
		initializer and a while-loop, with the increment at the end of the body.
		"""
		keyword = self._previous()
		self._consume(TokenKind.LEFT_PAREN, "Expect '(' after 'for'.")
		if self._match(TokenKind.SEMICOLON): initializer = None
		elif self._match(TokenKind.VAR): initializer = self._var_declaration()
		else: initializer = self._expression_statement()

		condition = None if self._check(TokenKind.SEMICOLON) else self._expression()
		self._consume(TokenKind.SEMICOLON, "Expect ';' after loop condition.")

		increment = None if self._check(TokenKind.RIGHT_PAREN) else self._expression()
		self._consume(TokenKind.RIGHT_PAREN, "Expect ')' after for clauses.")

		body = self._statement()
		if increment is not None:
			body = syntax.Block([body, syntax.ExprStmt(increment)])
		if condition is None:
			condition = syntax.Literal(True, synthetic(TokenKind.TRUE, "true", keyword))
		body = syntax.WhileStmt(condition, body)
		if initializer is not None:
			body = syntax.Block([initializer, body])
		return body

	def _if_statement(self) -> syntax.IfStmt:
		self._consume(TokenKind.LEFT_PAREN, "Expect '(' after 'if'.")
		condition = self._expression()
		self._consume(TokenKind.RIGHT_PAREN, "Expect ')' after if condition.")
		then_part = self._statement()
		# The else goes with the nearest if, since we grab it eagerly right here.
		else_part = self._statement() if self._match(TokenKind.ELSE) else None
		return syntax.IfStmt(condition, then_part, else_part)

	def _print_statement(self) -> syntax.PrintStmt:
		value = self._expression()
		self._consume(TokenKind.SEMICOLON, "Expect ';' after value.")
		return syntax.PrintStmt(value)

	def _return_statement(self) -> syntax.ReturnStmt:
		keyword = self._previous()
		value = None if self._check(TokenKind.SEMICOLON) else self._expression()
		self._consume(TokenKind.SEMICOLON, "Expect ';' after return value.")
		return syntax.ReturnStmt(keyword, value)

	def _while_statement(self) -> syntax.WhileStmt:
		self._consume(TokenKind.LEFT_PAREN, "Expect '(' after 'while'.")
		condition = self._expression()
		self._consume(TokenKind.RIGHT_PAREN, "Expect ')' after condition.")
		return syntax.WhileStmt(condition, self._statement())

	def _block(self) -> list[syntax.Stmt]:
		statements = []
		while not self._check(TokenKind.RIGHT_BRACE) and not self._at_end():
			stmt = self._declaration()
			if stmt is not None:
				statements.append(stmt)
		self._consume(TokenKind.RIGHT_BRACE, "Expect '}' after block.")
		return statements

	def _expression_statement(self) -> syntax.ExprStmt:
		expr = self._expression()
		self._consume(TokenKind.SEMICOLON, "Expect ';' after expression.")
		return syntax.ExprStmt(expr)

	# Expressions

	def _expression(self) -> syntax.Expr:
		return self._assignment()

	def _assignment(self) -> syntax.Expr:
		expr = self._or()
		if self._match(TokenKind.EQUAL):
			equals = self._previous()
			value = self._assignment()
			if isinstance(expr, syntax.Lookup):
				return syntax.Assign(expr.name, value)
			elif isinstance(expr, syntax.FieldReference):
				return syntax.AssignField(expr.lhs, expr.field_name, value)
			# Not worth a resynchronize: the parser is not confused.
			self._report.invalid_assignment_target(equals)
		return expr

	def _or(self) -> syntax.Expr:
		expr = self._and()
		while self._match(TokenKind.OR):
			op = self._previous()
			expr = syntax.ShortCutExp(expr, op, self._and())
		return expr

	def _and(self) -> syntax.Expr:
		expr = self._equality()
		while self._match(TokenKind.AND):
			op = self._previous()
			expr = syntax.ShortCutExp(expr, op, self._equality())
		return expr

	def _binary(self, operand, kinds) -> syntax.Expr:
		expr = operand()
		while self._match(*kinds):
			op = self._previous()
			expr = syntax.BinExp(expr, op, operand())
		return expr

	def _equality(self): return self._binary(self._comparison, _EQUALITY)
	def _comparison(self): return self._binary(self._term, _COMPARISON)
	def _term(self): return self._binary(self._factor, _TERM)
	def _factor(self): return self._binary(self._unary, _FACTOR)

	def _unary(self) -> syntax.Expr:
		if self._match(*_UNARY):
			op = self._previous()
			return syntax.UnaryExp(op, self._unary())
		return self._call()

	def _call(self) -> syntax.Expr:
		expr = self._primary()
		while True:
			if self._match(TokenKind.LEFT_PAREN):
				expr = self._finish_call(expr)
			elif self._match(TokenKind.DOT):
				name = self._consume(TokenKind.IDENTIFIER, "Expect property name after '.'.")
				expr = syntax.FieldReference(expr, name)
			else:
				return expr

	def _finish_call(self, callee:syntax.Expr) -> syntax.Call:
		args = []
		if not self._check(TokenKind.RIGHT_PAREN):
			while True:
				if len(args) >= MAX_ARGS:
					self._report.too_many(self._peek(), "arguments")
				args.append(self._expression())
				if not self._match(TokenKind.COMMA): break
		paren = self._consume(TokenKind.RIGHT_PAREN, "Expect ')' after arguments.")
		return syntax.Call(callee, paren, args)

	def _primary(self) -> syntax.Expr:
		if self._match(TokenKind.FALSE): return syntax.Literal(False, self._previous())
		if self._match(TokenKind.TRUE): return syntax.Literal(True, self._previous())
		if self._match(TokenKind.NIL): return syntax.Literal(None, self._previous())
		if self._match(TokenKind.NUMBER, TokenKind.STRING):
			token = self._previous()
			return syntax.Literal(token.literal, token)
		if self._match(TokenKind.SUPER):
			keyword = self._previous()
			self._consume(TokenKind.DOT, "Expect '.' after 'super'.")
			method = self._consume(TokenKind.IDENTIFIER, "Expect superclass method name.")
			return syntax.SuperRef(keyword, method)
		if self._match(TokenKind.THIS): return syntax.ThisRef(self._previous())
		if self._match(TokenKind.IDENTIFIER): return syntax.Lookup(self._previous())
		if self._match(TokenKind.LEFT_PAREN):
			expr = self._expression()
			self._consume(TokenKind.RIGHT_PAREN, "Expect ')' after expression.")
			return syntax.Grouping(expr)
		raise self._error(self._peek(), "Expect expression.")

	# Machinery

	def _synchronize(self):
		self._advance()
		while not self._at_end():
			if self._previous().kind is TokenKind.SEMICOLON: return
			if self._peek().kind in STATEMENT_STARTERS: return
			self._advance()

	def _error(self, token:Token, message:str) -> LoxParseError:
		self._report.parse_error(token, message)
		return LoxParseError()

	def _consume(self, kind:TokenKind, message:str) -> Token:
		if self._check(kind): return self._advance()
		raise self._error(self._peek(), message)

	def _match(self, *kinds:TokenKind) -> bool:
		for kind in kinds:
			if self._check(kind):
				self._advance()
				return True
		return False

	def _check(self, kind:TokenKind) -> bool:
		return not self._at_end() and self._peek().kind is kind

	def _advance(self) -> Token:
		if not self._at_end(): self._current += 1
		return self._previous()

	def _at_end(self) -> bool: return self._peek().is_eof()
	def _peek(self) -> Token: return self._tokens[self._current]
	def _previous(self) -> Token: return self._tokens[self._current - 1]

def parse_tokens(tokens:list[Token], report:Report) -> list[syntax.Stmt]:
	return Parser(tokens, report).parse()

def parse_text(text:str, report:Report) -> list[syntax.Stmt]:
	""" Scan and parse. Check the report afterwards: broken statements are simply left out. """
	tokens = scan(text, report)
	report.info("Scanned %d tokens" % len(tokens))
	return parse_tokens(tokens, report)
