"""Handles interactive mode. Uses cmd as backend."""

import cmd

from .executive import Session


class Shell(cmd.Cmd):
	"""
	Every line runs through the same session, so variables, functions,
	and classes defined on one line are still there on the next.
	"""
	intro = "Lox interpreter. Type 'exit' or end-of-file to leave."
	prompt = "> "

	def __init__(self, session:Session, *args, **kwargs):
		super().__init__(*args, **kwargs)
		self.session = session
		self.last_status = 0

	def onecmd(self, line):
		# Lox names like `exit` or `help` must not be taken for shell commands.
		command = line.strip()
		if not command: return self.emptyline()
		if command == "EOF": return self.do_EOF("")
		if command == "exit": return self.do_exit("")
		return self.default(line)

	def default(self, line):
		self.last_status = self.session.run(line)
		if self.last_status:
			self.session.report.complain_to_console()

	def emptyline(self):
		"""Do not repeat previous command on empty line."""
		return False

	def do_EOF(self, arg):
		"""Exits interpreter."""
		print(file=self.stdout)
		return True

	def do_exit(self, arg):
		"""Exits interpreter."""
		return True
