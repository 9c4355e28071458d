"""
Simplest possible environment concept.

This is the canonical list-structured search: each block gets a dictionary
and a link to the enclosing one, ending at the globals. Closures keep a plain
Python reference to the environment where they were born, so the garbage
collector keeps it alive exactly as long as somebody can still reach it.

Local variables never go through the name search. The resolver has already
counted how many links to follow, so those use `get_at` and `assign_at`.
Only globals are looked up by name.
"""
from typing import Optional
from .tokens import Token
from .tree_walker.types import VALUE, LoxRuntimeError

class Environment:
	def __init__(self, enclosing:Optional["Environment"]=None):
		self._bindings : dict[str, VALUE] = {}
		self.enclosing = enclosing

	def __contains__(self, name:str) -> bool:
		return name in self._bindings

	def define(self, name:str, value:VALUE):
		# Redefinition simply overwrites. The resolver forbids it where it matters.
		self._bindings[name] = value

	def get(self, name:Token) -> VALUE:
		env = self
		while env is not None:
			if name.lexeme in env._bindings:
				return env._bindings[name.lexeme]
			env = env.enclosing
		raise _undefined(name)

	def assign(self, name:Token, value:VALUE):
		env = self
		while env is not None:
			if name.lexeme in env._bindings:
				env._bindings[name.lexeme] = value
				return
			env = env.enclosing
		raise _undefined(name)

	def ancestor(self, distance:int) -> "Environment":
		env = self
		for _ in range(distance):
			env = env.enclosing
		return env

	def get_at(self, distance:int, name:str) -> VALUE:
		return self.ancestor(distance)._bindings[name]

	def assign_at(self, distance:int, name:str, value:VALUE):
		self.ancestor(distance)._bindings[name] = value

def _undefined(name:Token) -> LoxRuntimeError:
	return LoxRuntimeError(name, "Undefined variable '%s'." % name.lexeme)
