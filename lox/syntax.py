"""
The set of parse-nodes in simple form.

The parser calls these constructors as it descends. Nodes compare and hash by
identity, never by structure: the resolver keys its distance table on the
node itself, and two look-alike references in different places must not
collide.

Each node knows which token to blame for it in a diagnostic (`anchor`).
"""
from typing import Optional, Sequence, Union
from .tokens import Token

class Expr:
	def anchor(self) -> Token: raise NotImplementedError(type(self))

class Stmt:
	pass

###############################################################################
#  Expressions

class Literal(Expr):
	value: Union[None, bool, float, str]
	def __init__(self, value, token:Optional[Token]=None):
		self.value = value
		self._token = token
	def anchor(self): return self._token
	def __repr__(self): return "<Literal %r>" % (self.value,)

class Grouping(Expr):
	def __init__(self, inner:Expr): self.inner = inner
	def anchor(self): return self.inner.anchor()

class UnaryExp(Expr):
	def __init__(self, op:Token, arg:Expr):
		self.op, self.arg = op, arg
	def anchor(self): return self.op

class BinExp(Expr):
	def __init__(self, lhs:Expr, op:Token, rhs:Expr):
		self.lhs, self.op, self.rhs = lhs, op, rhs
	def anchor(self): return self.op

class ShortCutExp(Expr):
	""" `and` and `or`: the right side is evaluated only if needed. """
	def __init__(self, lhs:Expr, op:Token, rhs:Expr):
		self.lhs, self.op, self.rhs = lhs, op, rhs
	def anchor(self): return self.op

class Lookup(Expr):
	def __init__(self, name:Token): self.name = name
	def anchor(self): return self.name
	def __repr__(self): return "<ref:%s>" % self.name.lexeme

class Assign(Expr):
	def __init__(self, name:Token, value:Expr):
		self.name, self.value = name, value
	def anchor(self): return self.name

class Call(Expr):
	def __init__(self, fn_exp:Expr, paren:Token, args:Sequence[Expr]):
		self.fn_exp = fn_exp
		self.paren = paren   # The closing parenthesis, which locates run-time errors.
		self.args = args
	def anchor(self): return self.paren

class FieldReference(Expr):
	def __init__(self, lhs:Expr, field_name:Token):
		self.lhs, self.field_name = lhs, field_name
	def anchor(self): return self.field_name

class AssignField(Expr):
	def __init__(self, lhs:Expr, field_name:Token, value:Expr):
		self.lhs, self.field_name, self.value = lhs, field_name, value
	def anchor(self): return self.field_name

class ThisRef(Expr):
	def __init__(self, keyword:Token): self.keyword = keyword
	def anchor(self): return self.keyword
	def __repr__(self): return "<THIS>"

class SuperRef(Expr):
	def __init__(self, keyword:Token, method_name:Token):
		self.keyword, self.method_name = keyword, method_name
	def anchor(self): return self.keyword

###############################################################################
#  Statements

class ExprStmt(Stmt):
	def __init__(self, expr:Expr): self.expr = expr

class PrintStmt(Stmt):
	def __init__(self, expr:Expr): self.expr = expr

class VarDecl(Stmt):
	def __init__(self, name:Token, initializer:Optional[Expr]):
		self.name, self.initializer = name, initializer

class Block(Stmt):
	def __init__(self, statements:Sequence[Stmt]): self.statements = statements

class IfStmt(Stmt):
	def __init__(self, condition:Expr, then_part:Stmt, else_part:Optional[Stmt]):
		self.condition, self.then_part, self.else_part = condition, then_part, else_part

class WhileStmt(Stmt):
	def __init__(self, condition:Expr, body:Stmt):
		self.condition, self.body = condition, body

class FunctionDecl(Stmt):
	""" Serves for both free functions and methods. """
	def __init__(self, name:Token, params:Sequence[Token], body:Sequence[Stmt]):
		self.name, self.params, self.body = name, params, body
	def __repr__(self): return "<fun %s/%d>" % (self.name.lexeme, len(self.params))

class ReturnStmt(Stmt):
	def __init__(self, keyword:Token, value:Optional[Expr]):
		self.keyword, self.value = keyword, value

class ClassDecl(Stmt):
	def __init__(self, name:Token, superclass:Optional[Lookup], methods:Sequence[FunctionDecl]):
		self.name, self.superclass, self.methods = name, superclass, methods
	def __repr__(self): return "<class %s>" % self.name.lexeme
