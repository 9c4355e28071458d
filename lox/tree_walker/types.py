"""
This module aims to express an interface agreement
between the evaluator and various kinds of data.
"""

from abc import ABC
from typing import NamedTuple, Optional, Sequence, Union
from ..tokens import Token


class LoxValue(ABC):
	""" Root for classes that implement specialized run-time data structures """
	pass

# Nil is None; booleans, numbers, and strings play themselves.
NATIVE_DATA = Union[None, bool, float, str]
VALUE = Union[NATIVE_DATA, LoxValue]
ARGS = Sequence[VALUE]


class Returning(NamedTuple):
	"""
	Statement execution hands this back when a `return` runs.
	Every statement executor passes it outward untouched until a function call absorbs it.
	"""
	value: VALUE

# What executing a statement produces: None means "carry on".
OUTCOME = Optional[Returning]


class LoxRuntimeError(Exception):
	""" Unwinds all the way out of `Interpreter.interpret`, which reports it. """
	def __init__(self, token:Token, message:str):
		super().__init__(message)
		self.token = token
		self.message = message
