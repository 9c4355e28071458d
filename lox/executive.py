"""
The overall control for running programs: text in, effects out, and an exit status.

A Session is the state a driver threads through its loop. The interpreter
(and so the global environment) lives as long as the session does, while
each run starts with a clean slate of static issues.
"""
import sys
from pathlib import Path
from typing import Optional, TextIO
from .diagnostics import Report, TooManyIssues
from .resolution import compile_program, Yuck
from .tree_walker.evaluator import Interpreter

# Conventional sysexits.h values
EX_OK = 0
EX_DATAERR = 65
EX_NOINPUT = 66
EX_SOFTWARE = 70

# Each Lox call takes about a dozen Python frames.
RECURSION_LIMIT = 5000

class Session:
	def __init__(self, report:Report, out:Optional[TextIO]=None):
		if sys.getrecursionlimit() < RECURSION_LIMIT:
			sys.setrecursionlimit(RECURSION_LIMIT)
		self.report = report
		self.interpreter = Interpreter(report, out)

	def run(self, text:str, path:Optional[Path]=None, *, check_only:bool=False) -> int:
		report = self.report
		report.reset()
		report.set_source(text, path)
		try:
			program = compile_program(text, report)
		except Yuck as ex:
			report.info("Stopped after the %s phase" % ex.args[0])
			return EX_DATAERR
		except TooManyIssues:
			return EX_DATAERR
		if check_only:
			return EX_OK
		if self.interpreter.interpret(program.statements, program.distances):
			return EX_OK
		return EX_SOFTWARE

	def run_file(self, path:Path, *, check_only:bool=False) -> int:
		self.report.info("Loading", path)
		try:
			with open(path, "r", encoding="utf-8") as fh:
				text = fh.read()
		except OSError as ex:
			self.report.info(ex)
			return EX_NOINPUT
		return self.run(text, path, check_only=check_only)
