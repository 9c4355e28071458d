"""
Everything that goes wrong with a program gets reported through here.

Static issues (lexical, syntactic, and resolution) accumulate in a Report.
A runtime failure is kept separately: it is a different kind of trouble
and the driver maps it to a different exit status.
"""
import sys
from typing import Optional, Sequence
from boozetools.support.failureprone import SourceText, illustration

from .tokens import Token

class TooManyIssues(Exception):
	pass

class Annotation:
	""" Points at a stretch of source text, with an optional caption. """
	def __init__(self, source:Optional[SourceText], offset:int, width:int, caption:str="", *, limit:int=0):
		self.source = source
		self.limit = limit
		self.offset = offset
		self.width = width
		self.caption = caption

	def illustrate(self) -> Optional[str]:
		if self.source is None or self.offset >= self.limit:
			return None
		row, col = self.source.find_row_col(self.offset)
		single_line = self.source.line_of_text(row)
		return illustration(single_line, col, max(self.width, 1), prefix='% 6d |' % row, caption=self.caption)

class Pic:
	""" One issue: a headline in the traditional format, with pictures of the source below. """
	def __init__(self, line:int, where:str, message:str, anns:Sequence[Annotation]=()):
		self.line, self.where, self.message = line, where, message
		self._anns = list(anns)

	def headline(self) -> str:
		return "[line %d] Error%s: %s" % (self.line, self.where, self.message)

	def as_text(self) -> str:
		lines = [self.headline()]
		for ann in self._anns:
			picture = ann.illustrate()
			if picture: lines.append(picture)
		return '\n'.join(lines)

	def __repr__(self): return "<Pic %s>" % self.headline()

class RuntimeFailure:
	def __init__(self, message:str, token:Token):
		self.message = message
		self.line = token.line

	def as_text(self) -> str:
		return "%s\n[line %d]" % (self.message, self.line)

class Report:
	"""
	The session keeps one of these. Each run resets the static issues,
	so a broken REPL line does not spoil the lines after it.
	"""
	issues : list[Pic]
	runtime_failure : Optional[RuntimeFailure]

	def __init__(self, *, verbose:int=0, max_issues:Optional[int]=None):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._max_issues = max_issues
		self._source = None
		self._limit = 0
		self.issues = []
		self.runtime_failure = None

	def ok(self): return not self.issues
	def sick(self): return bool(self.issues)

	def issue(self, it:Pic):
		self.issues.append(it)
		if self._max_issues and len(self.issues) >= self._max_issues:
			raise TooManyIssues(self)

	def reset(self):
		self.issues.clear()
		self.runtime_failure = None

	def set_source(self, text:str, path=None):
		self._source = SourceText(text, filename=None if path is None else str(path))
		self._limit = len(text)

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		for pic in self.issues:
			print(pic.as_text(), file=sys.stderr)
		if self.runtime_failure is not None:
			print(self.runtime_failure.as_text(), file=sys.stderr)
		sys.stderr.flush()

	def _at(self, token:Token, message:str):
		if token.is_eof(): where = " at end"
		else: where = " at '%s'" % token.lexeme
		ann = Annotation(self._source, token.offset, len(token.lexeme), limit=self._limit)
		self.issue(Pic(token.line, where, message, [ann]))

	# Methods the scanner calls:
	def lexical_error(self, line:int, offset:int, message:str):
		self.issue(Pic(line, "", message, [Annotation(self._source, offset, 1, limit=self._limit)]))

	# Methods the parser calls:
	def parse_error(self, token:Token, message:str):
		self._at(token, message)

	def invalid_assignment_target(self, equals:Token):
		self._at(equals, "Invalid assignment target.")

	def too_many(self, token:Token, what:str):
		self._at(token, "Can't have more than 255 %s." % what)

	# Methods the resolver calls:
	def already_declared(self, name:Token):
		self._at(name, "Already a variable with this name in this scope.")

	def read_in_own_initializer(self, name:Token):
		self._at(name, "Can't read local variable in its own initializer.")

	def return_at_top_level(self, keyword:Token):
		self._at(keyword, "Can't return from top-level code.")

	def return_value_from_initializer(self, keyword:Token):
		self._at(keyword, "Can't return a value from an initializer.")

	def this_outside_class(self, keyword:Token):
		self._at(keyword, "Can't use 'this' outside of a class.")

	def super_outside_class(self, keyword:Token):
		self._at(keyword, "Can't use 'super' outside of a class.")

	def super_without_superclass(self, keyword:Token):
		self._at(keyword, "Can't use 'super' in a class with no superclass.")

	def inherits_from_itself(self, name:Token):
		self._at(name, "A class can't inherit from itself.")

	# The interpreter calls this one:
	def runtime_error(self, error):
		self.runtime_failure = RuntimeFailure(error.message, error.token)
