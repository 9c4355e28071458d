"""
This is an interpreter for the Lox programming language.

For example:

    lox program.lox

will run program.lox if possible, or else try to explain why not.

    lox

with no program starts an interactive prompt.

    lox -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

parser = argparse.ArgumentParser(
	prog="lox",
	description="Interpreter for the Lox programming language.",
)
parser.add_argument("program", nargs="?", help="script to run; omit for an interactive prompt.")
parser.add_argument('-c', "--check", action="store_true", help="Check the program but do not actually execute it.")
parser.add_argument('-p', "--print-ast", action="store_true", help="Print the syntax tree of each top-level statement before anything else.")
parser.add_argument('-v', "--verbose", action="count", help="Say more about what is going on.")
parser.add_argument("--max-issues", type=int, default=None, help="Give up after this many static issues.")

def run(args):
	from .diagnostics import Report
	from .executive import Session, EX_OK, EX_NOINPUT
	report = Report(verbose=args.verbose, max_issues=args.max_issues)
	session = Session(report)
	if args.program is None:
		from .shell import Shell
		Shell(session).cmdloop()
		return EX_OK
	path = Path.cwd() / args.program
	if args.print_ast:
		_print_ast(path, report)
		report.reset()
	status = session.run_file(path, check_only=args.check)
	if status == EX_NOINPUT:
		print("Could not read %s" % path, file=sys.stderr)
	elif status:
		report.complain_to_console()
	elif args.check:
		print("Looks plausible to me.", file=sys.stderr)
	return status

def _print_ast(path:Path, report):
	from .front_end import parse_text
	from .printer import render
	try:
		with open(path, "r", encoding="utf-8") as fh:
			text = fh.read()
	except OSError:
		return
	report.set_source(text, path)
	for stmt in parse_text(text, report):
		print(render(stmt))

def main():
	sys.exit(run(parser.parse_args()))
