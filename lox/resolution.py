"""
All the definition resolution stuff goes here.

This pass runs after a clean parse and before any execution. For every
reference to a local variable (including `this` and `super`) it records how
many scopes out the definition lives. References it cannot find in any local
scope are left out of the table: those are globals, found by name at run-time.

Along the way it enforces the rules that only make sense with scopes in view:
no duplicate locals in one block, no reading a local in its own initializer,
and `return`, `this`, and `super` only where they mean something.
"""
from enum import Enum, auto
from typing import NamedTuple, Sequence
from boozetools.support.foundation import Visitor
from . import syntax
from .diagnostics import Report
from .front_end import parse_text
from .tokens import Token

class Yuck(Exception):
	"""
	The first argument will be the name of the pass fraught with error.
	The end-user might not care about this, but it's handy for testing.
	"""
	pass

class FunctionKind(Enum):
	NONE = auto()
	FUNCTION = auto()
	INITIALIZER = auto()
	METHOD = auto()

class ClassKind(Enum):
	NONE = auto()
	CLASS = auto()
	SUBCLASS = auto()

class TopDown(Visitor):
	"""
	Convenience base-class to handle the dreary bits of a
	perfectly ordinary top-down walk through a syntax tree.
	"""

	def visit_Literal(self, expr:syntax.Literal): pass

	def visit_Grouping(self, expr:syntax.Grouping):
		self.visit(expr.inner)

	def visit_UnaryExp(self, expr:syntax.UnaryExp):
		self.visit(expr.arg)

	def visit_BinExp(self, expr:syntax.BinExp):
		self.visit(expr.lhs)
		self.visit(expr.rhs)

	def visit_ShortCutExp(self, expr:syntax.ShortCutExp):
		self.visit(expr.lhs)
		self.visit(expr.rhs)

	def visit_Call(self, expr:syntax.Call):
		self.visit(expr.fn_exp)
		for a in expr.args:
			self.visit(a)

	def visit_FieldReference(self, expr:syntax.FieldReference):
		# Properties are found dynamically, so only the object needs resolving.
		self.visit(expr.lhs)

	def visit_AssignField(self, expr:syntax.AssignField):
		self.visit(expr.value)
		self.visit(expr.lhs)

	def visit_ExprStmt(self, stmt:syntax.ExprStmt):
		self.visit(stmt.expr)

	def visit_PrintStmt(self, stmt:syntax.PrintStmt):
		self.visit(stmt.expr)

	def visit_IfStmt(self, stmt:syntax.IfStmt):
		self.visit(stmt.condition)
		self.visit(stmt.then_part)
		if stmt.else_part is not None:
			self.visit(stmt.else_part)

	def visit_WhileStmt(self, stmt:syntax.WhileStmt):
		self.visit(stmt.condition)
		self.visit(stmt.body)

	def visit_statements(self, statements:Sequence[syntax.Stmt]):
		for stmt in statements:
			self.visit(stmt)

class Resolver(TopDown):
	"""
	The scope stack holds one dictionary per open block, mapping each name
	to whether its definition is complete. The global scope is deliberately
	not on the stack: globals may be redefined and referenced before they exist.
	"""
	distances: dict[syntax.Expr, int]
	_scopes: list[dict[str, bool]]
	_current_function: FunctionKind
	_current_class: ClassKind

	def __init__(self, report:Report):
		self._report = report
		self.distances = {}
		self._scopes = []
		self._current_function = FunctionKind.NONE
		self._current_class = ClassKind.NONE

	def _begin_scope(self):
		self._scopes.append({})

	def _end_scope(self):
		self._scopes.pop()

	def _declare(self, name:Token):
		if not self._scopes: return
		scope = self._scopes[-1]
		if name.lexeme in scope:
			self._report.already_declared(name)
		scope[name.lexeme] = False

	def _define(self, name:Token):
		if not self._scopes: return
		self._scopes[-1][name.lexeme] = True

	def _resolve_local(self, expr:syntax.Expr, name:str):
		for distance, scope in enumerate(reversed(self._scopes)):
			if name in scope:
				self.distances[expr] = distance
				return

	def _resolve_function(self, fn:syntax.FunctionDecl, kind:FunctionKind):
		enclosing_function = self._current_function
		self._current_function = kind
		self._begin_scope()
		for param in fn.params:
			self._declare(param)
			self._define(param)
		self.visit_statements(fn.body)
		self._end_scope()
		self._current_function = enclosing_function

	# Statements

	def visit_Block(self, stmt:syntax.Block):
		self._begin_scope()
		self.visit_statements(stmt.statements)
		self._end_scope()

	def visit_VarDecl(self, stmt:syntax.VarDecl):
		self._declare(stmt.name)
		if stmt.initializer is not None:
			self.visit(stmt.initializer)
		self._define(stmt.name)

	def visit_FunctionDecl(self, stmt:syntax.FunctionDecl):
		# Defined before the body, so a function can call itself.
		self._declare(stmt.name)
		self._define(stmt.name)
		self._resolve_function(stmt, FunctionKind.FUNCTION)

	def visit_ReturnStmt(self, stmt:syntax.ReturnStmt):
		if self._current_function is FunctionKind.NONE:
			self._report.return_at_top_level(stmt.keyword)
		if stmt.value is not None:
			if self._current_function is FunctionKind.INITIALIZER:
				self._report.return_value_from_initializer(stmt.keyword)
			self.visit(stmt.value)

	def visit_ClassDecl(self, stmt:syntax.ClassDecl):
		enclosing_class = self._current_class
		self._current_class = ClassKind.CLASS
		self._declare(stmt.name)
		self._define(stmt.name)

		if stmt.superclass is not None:
			if stmt.superclass.name.lexeme == stmt.name.lexeme:
				self._report.inherits_from_itself(stmt.superclass.name)
			self._current_class = ClassKind.SUBCLASS
			self.visit(stmt.superclass)
			self._begin_scope()
			self._scopes[-1]["super"] = True

		self._begin_scope()
		self._scopes[-1]["this"] = True
		for method in stmt.methods:
			kind = FunctionKind.INITIALIZER if method.name.lexeme == "init" else FunctionKind.METHOD
			self._resolve_function(method, kind)
		self._end_scope()

		if stmt.superclass is not None:
			self._end_scope()
		self._current_class = enclosing_class

	# Expressions

	def visit_Lookup(self, expr:syntax.Lookup):
		name = expr.name
		if self._scopes and self._scopes[-1].get(name.lexeme) is False:
			self._report.read_in_own_initializer(name)
		self._resolve_local(expr, name.lexeme)

	def visit_Assign(self, expr:syntax.Assign):
		self.visit(expr.value)
		self._resolve_local(expr, expr.name.lexeme)

	def visit_ThisRef(self, expr:syntax.ThisRef):
		if self._current_class is ClassKind.NONE:
			self._report.this_outside_class(expr.keyword)
			return
		self._resolve_local(expr, "this")

	def visit_SuperRef(self, expr:syntax.SuperRef):
		if self._current_class is ClassKind.NONE:
			self._report.super_outside_class(expr.keyword)
		elif self._current_class is not ClassKind.SUBCLASS:
			self._report.super_without_superclass(expr.keyword)
		self._resolve_local(expr, "super")

def resolve_program(statements:Sequence[syntax.Stmt], report:Report) -> dict[syntax.Expr, int]:
	""" Returns a fresh distance table; issues go to the report. """
	resolver = Resolver(report)
	resolver.visit_statements(statements)
	return resolver.distances

class Program(NamedTuple):
	statements: list[syntax.Stmt]
	distances: dict[syntax.Expr, int]

def compile_program(text:str, report:Report) -> Program:
	"""
	Everything short of running: scan, parse, and resolve.
	Raises Yuck if any of that turns up an issue, naming the phase.
	"""
	statements = parse_text(text, report)
	if report.sick(): raise Yuck("parse")
	report.info("Parsed %d top-level statements" % len(statements))
	distances = resolve_program(statements, report)
	if report.sick(): raise Yuck("resolve")
	report.info("Resolved %d local references" % len(distances))
	return Program(statements, distances)
