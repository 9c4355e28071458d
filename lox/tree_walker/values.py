"""
This module defines the specialized value-types that the tree-walker operates in terms of.
Basic primitive values play themselves, but special things like closures need more help.

None of these define __eq__, so they compare by identity.
"""
from abc import abstractmethod
from inspect import signature
from typing import Optional, Callable as HostFunction
from .. import syntax
from ..environment import Environment
from ..tokens import Token
from .types import ARGS, VALUE, LoxValue, LoxRuntimeError

###############################################################################

class Callable(LoxValue):
	""" A run-time object that can be applied with arguments. """
	@abstractmethod
	def arity(self) -> int: pass

	@abstractmethod
	def apply(self, interpreter, args: ARGS) -> VALUE: pass

class Closure(Callable):
	""" The run-time manifestation of a function or method: a callable value tied to its natal environment. """
	def __init__(self, fn: syntax.FunctionDecl, captures: Environment, is_initializer: bool = False):
		self._fn = fn
		self._captures = captures
		self._is_initializer = is_initializer

	def __str__(self):
		return "<fn %s>" % self._fn.name.lexeme

	def arity(self) -> int:
		return len(self._fn.params)

	def bind(self, instance: "Instance") -> "Closure":
		env = Environment(self._captures)
		env.define("this", instance)
		return Closure(self._fn, env, self._is_initializer)

	def apply(self, interpreter, args: ARGS) -> VALUE:
		inner = Environment(self._captures)
		for param, arg in zip(self._fn.params, args):
			inner.define(param.lexeme, arg)
		outcome = interpreter.execute_block(self._fn.body, inner)
		# An initializer always yields its instance, even after a bare `return;`.
		if self._is_initializer:
			return self._captures.get_at(0, "this")
		if outcome is not None:
			return outcome.value
		return None

class Primitive(Callable):
	""" A function supplied by the host. Arity comes from its Python signature. """
	def __init__(self, fn: HostFunction[..., VALUE]):
		self._fn = fn
		self._arity = len(signature(fn).parameters)

	def __str__(self):
		return "<native fn>"

	def arity(self) -> int:
		return self._arity

	def apply(self, interpreter, args: ARGS) -> VALUE:
		return self._fn(*args)

###############################################################################

class LoxClass(Callable):
	def __init__(self, name: str, superclass: Optional["LoxClass"], methods: dict[str, Closure]):
		self.name = name
		self.superclass = superclass
		self._methods = methods

	def __str__(self):
		return self.name

	def find_method(self, name: str) -> Optional[Closure]:
		klass = self
		while klass is not None:
			if name in klass._methods:
				return klass._methods[name]
			klass = klass.superclass
		return None

	def arity(self) -> int:
		init = self.find_method("init")
		return 0 if init is None else init.arity()

	def apply(self, interpreter, args: ARGS) -> "Instance":
		instance = Instance(self)
		init = self.find_method("init")
		if init is not None:
			init.bind(instance).apply(interpreter, args)
		return instance

class Instance(LoxValue):
	def __init__(self, klass: LoxClass):
		self.klass = klass
		self._fields: dict[str, VALUE] = {}

	def __str__(self):
		return "%s instance" % self.klass.name

	def get(self, name: Token) -> VALUE:
		# Fields shadow methods.
		if name.lexeme in self._fields:
			return self._fields[name.lexeme]
		method = self.klass.find_method(name.lexeme)
		if method is not None:
			return method.bind(self)
		raise LoxRuntimeError(name, "Undefined property '%s'." % name.lexeme)

	def set(self, name: Token, value: VALUE):
		self._fields[name.lexeme] = value
