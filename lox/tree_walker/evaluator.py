"""
The tree-walking interpreter proper.

Expressions evaluate to values. Statements execute for effect and hand back
an OUTCOME: None to carry on, or a `Returning` signal that each enclosing
statement passes outward until a function call absorbs it. Run-time errors,
on the other hand, are exceptions that unwind clean out of `interpret`.

The environment travels as an explicit argument. Entering a block means
passing a fresh child environment down, so the enclosing one is back in
force whichever way the block is left.
"""
import math
import operator
import sys
import time
from typing import Optional, Sequence, TextIO
from boozetools.support.foundation import Visitor
from .. import syntax
from ..diagnostics import Report
from ..environment import Environment
from ..tokens import Token, TokenKind
from .types import VALUE, OUTCOME, Returning, LoxRuntimeError
from .values import Callable, Closure, Primitive, LoxClass, Instance

###############################################################################

def is_truthy(value:VALUE) -> bool:
	""" Only nil and false are falsy. Zero and the empty string are true. """
	if value is None: return False
	if isinstance(value, bool): return value
	return True

def is_equal(a:VALUE, b:VALUE) -> bool:
	# Python thinks True == 1.0, but here they are different kinds of thing.
	if type(a) is not type(b): return False
	return a == b

def stringify(value:VALUE) -> str:
	if value is None: return "nil"
	if isinstance(value, bool): return "true" if value else "false"
	if isinstance(value, float):
		text = repr(value)
		return text[:-2] if text.endswith(".0") else text
	return str(value)

def _divide(a:float, b:float) -> float:
	# IEEE-754 semantics rather than ZeroDivisionError.
	if b == 0.0:
		if a == 0.0 or math.isnan(a): return math.nan
		return math.copysign(math.inf, a) * math.copysign(1.0, b)
	return a / b

def _clock() -> float:
	return time.time()

PRIMITIVE_BINARY = {
	TokenKind.MINUS: operator.sub,
	TokenKind.STAR: operator.mul,
	TokenKind.SLASH: _divide,
	TokenKind.GREATER: operator.gt,
	TokenKind.GREATER_EQUAL: operator.ge,
	TokenKind.LESS: operator.lt,
	TokenKind.LESS_EQUAL: operator.le,
}

SHORTCUT = {
	TokenKind.AND: False,
	TokenKind.OR: True,
}

def _is_number(x:VALUE) -> bool:
	return isinstance(x, float)

def _check_number_operands(op:Token, a:VALUE, b:VALUE):
	if not (_is_number(a) and _is_number(b)):
		raise LoxRuntimeError(op, "Operands of '%s' must be numbers." % op.lexeme)

###############################################################################

class Interpreter(Visitor):
	"""
	One of these lasts for a whole session, so that globals
	(and the distance table) persist from one REPL line to the next.

	The distance table only grows: a closure from an earlier line may still
	run, so every line's syntax tree stays alive as long as the session.
	"""
	globals: Environment
	_distances: dict[syntax.Expr, int]

	def __init__(self, report:Report, out:Optional[TextIO]=None):
		self._report = report
		self._out = out
		self._distances = {}
		self.globals = Environment()
		self.globals.define("clock", Primitive(_clock))

	def interpret(self, statements:Sequence[syntax.Stmt], distances:dict[syntax.Expr, int]) -> bool:
		""" Run a resolved program. Returns False if a run-time error stopped it. """
		self._distances.update(distances)
		try:
			for stmt in statements:
				outcome = self.execute(stmt, self.globals)
				assert outcome is None, "The resolver should have caught a top-level return."
		except LoxRuntimeError as ex:
			self._report.runtime_error(ex)
			return False
		return True

	def execute(self, stmt:syntax.Stmt, env:Environment) -> OUTCOME:
		return self.visit(stmt, env)

	def execute_block(self, statements:Sequence[syntax.Stmt], env:Environment) -> OUTCOME:
		for stmt in statements:
			outcome = self.execute(stmt, env)
			if outcome is not None:
				return outcome
		return None

	def evaluate(self, expr:syntax.Expr, env:Environment) -> VALUE:
		return self.visit(expr, env)

	def _look_up(self, name:Token, expr:syntax.Expr, env:Environment) -> VALUE:
		distance = self._distances.get(expr)
		if distance is None:
			return self.globals.get(name)
		return env.get_at(distance, name.lexeme)

	# Statements

	def visit_ExprStmt(self, stmt:syntax.ExprStmt, env:Environment):
		self.evaluate(stmt.expr, env)

	def visit_PrintStmt(self, stmt:syntax.PrintStmt, env:Environment):
		value = self.evaluate(stmt.expr, env)
		print(stringify(value), file=self._out or sys.stdout)

	def visit_VarDecl(self, stmt:syntax.VarDecl, env:Environment):
		value = None
		if stmt.initializer is not None:
			value = self.evaluate(stmt.initializer, env)
		env.define(stmt.name.lexeme, value)

	def visit_Block(self, stmt:syntax.Block, env:Environment) -> OUTCOME:
		return self.execute_block(stmt.statements, Environment(env))

	def visit_IfStmt(self, stmt:syntax.IfStmt, env:Environment) -> OUTCOME:
		if is_truthy(self.evaluate(stmt.condition, env)):
			return self.execute(stmt.then_part, env)
		elif stmt.else_part is not None:
			return self.execute(stmt.else_part, env)

	def visit_WhileStmt(self, stmt:syntax.WhileStmt, env:Environment) -> OUTCOME:
		while is_truthy(self.evaluate(stmt.condition, env)):
			outcome = self.execute(stmt.body, env)
			if outcome is not None:
				return outcome

	def visit_FunctionDecl(self, stmt:syntax.FunctionDecl, env:Environment):
		env.define(stmt.name.lexeme, Closure(stmt, env))

	def visit_ReturnStmt(self, stmt:syntax.ReturnStmt, env:Environment) -> Returning:
		value = None if stmt.value is None else self.evaluate(stmt.value, env)
		return Returning(value)

	def visit_ClassDecl(self, stmt:syntax.ClassDecl, env:Environment):
		superclass = None
		if stmt.superclass is not None:
			superclass = self.evaluate(stmt.superclass, env)
			if not isinstance(superclass, LoxClass):
				raise LoxRuntimeError(stmt.superclass.name, "Superclass must be a class.")
		# Pre-declare, so the name exists while the methods are built.
		env.define(stmt.name.lexeme, None)
		method_env = env
		if superclass is not None:
			method_env = Environment(env)
			method_env.define("super", superclass)
		methods = {
			fn.name.lexeme: Closure(fn, method_env, fn.name.lexeme == "init")
			for fn in stmt.methods
		}
		env.define(stmt.name.lexeme, LoxClass(stmt.name.lexeme, superclass, methods))

	# Expressions

	def visit_Literal(self, expr:syntax.Literal, env:Environment):
		return expr.value

	def visit_Grouping(self, expr:syntax.Grouping, env:Environment):
		return self.evaluate(expr.inner, env)

	def visit_UnaryExp(self, expr:syntax.UnaryExp, env:Environment):
		arg = self.evaluate(expr.arg, env)
		if expr.op.kind is TokenKind.BANG:
			return not is_truthy(arg)
		assert expr.op.kind is TokenKind.MINUS
		if not _is_number(arg):
			raise LoxRuntimeError(expr.op, "Operand of '-' must be a number.")
		return -arg

	def visit_BinExp(self, expr:syntax.BinExp, env:Environment):
		a = self.evaluate(expr.lhs, env)
		b = self.evaluate(expr.rhs, env)
		kind = expr.op.kind
		if kind is TokenKind.EQUAL_EQUAL: return is_equal(a, b)
		if kind is TokenKind.BANG_EQUAL: return not is_equal(a, b)
		if kind is TokenKind.PLUS:
			if _is_number(a) and _is_number(b): return a + b
			if isinstance(a, str) and isinstance(b, str): return a + b
			raise LoxRuntimeError(expr.op, "Operands of '+' must be two numbers or two strings.")
		_check_number_operands(expr.op, a, b)
		return PRIMITIVE_BINARY[kind](a, b)

	def visit_ShortCutExp(self, expr:syntax.ShortCutExp, env:Environment):
		lhs = self.evaluate(expr.lhs, env)
		if is_truthy(lhs) == SHORTCUT[expr.op.kind]:
			return lhs
		return self.evaluate(expr.rhs, env)

	def visit_Lookup(self, expr:syntax.Lookup, env:Environment):
		return self._look_up(expr.name, expr, env)

	def visit_Assign(self, expr:syntax.Assign, env:Environment):
		value = self.evaluate(expr.value, env)
		distance = self._distances.get(expr)
		if distance is None:
			self.globals.assign(expr.name, value)
		else:
			env.assign_at(distance, expr.name.lexeme, value)
		return value

	def visit_Call(self, expr:syntax.Call, env:Environment):
		callee = self.evaluate(expr.fn_exp, env)
		args = [self.evaluate(a, env) for a in expr.args]
		if not isinstance(callee, Callable):
			raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")
		if len(args) != callee.arity():
			pattern = "Expected %d arguments but got %d."
			raise LoxRuntimeError(expr.paren, pattern % (callee.arity(), len(args)))
		try: return callee.apply(self, args)
		except RecursionError:
			# Only the innermost call site sees the RecursionError itself.
			raise LoxRuntimeError(expr.paren, "Stack overflow.") from None

	def visit_FieldReference(self, expr:syntax.FieldReference, env:Environment):
		lhs = self.evaluate(expr.lhs, env)
		if isinstance(lhs, Instance):
			return lhs.get(expr.field_name)
		raise LoxRuntimeError(expr.field_name, "Only instances have properties.")

	def visit_AssignField(self, expr:syntax.AssignField, env:Environment):
		lhs = self.evaluate(expr.lhs, env)
		if not isinstance(lhs, Instance):
			raise LoxRuntimeError(expr.field_name, "Only instances have fields.")
		value = self.evaluate(expr.value, env)
		lhs.set(expr.field_name, value)
		return value

	def visit_ThisRef(self, expr:syntax.ThisRef, env:Environment):
		return self._look_up(expr.keyword, expr, env)

	def visit_SuperRef(self, expr:syntax.SuperRef, env:Environment):
		distance = self._distances[expr]
		superclass = env.get_at(distance, "super")
		# The `this` scope always sits just inside the `super` scope.
		instance = env.get_at(distance - 1, "this")
		method = superclass.find_method(expr.method_name.lexeme)
		if method is None:
			raise LoxRuntimeError(expr.method_name, "Undefined property '%s'." % expr.method_name.lexeme)
		return method.bind(instance)
