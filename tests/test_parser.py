import unittest

from lox import syntax
from lox.diagnostics import Report
from lox.front_end import parse_text
from lox.printer import render

class ParserTests(unittest.TestCase):

	def setUp(self) -> None:
		self.report = Report()

	def parse(self, text):
		return parse_text(text, self.report)

	def assertRenders(self, expect, text):
		statements = self.parse(text)
		assert self.report.ok(), self.report.issues
		self.assertEqual(expect, [render(s) for s in statements])

	def test_precedence(self):
		self.assertRenders(["(; (* (group (+ 1.0 2.0)) 3.0))"], "(1+2)*3;")
		self.assertRenders(["(; (- (+ 1.0 (* 2.0 3.0)) 4.0))"], "1 + 2 * 3 - 4;")
		self.assertRenders(["(; (== (< 1.0 2.0) true))"], "1 < 2 == true;")
		self.assertRenders(["(; (! (- x)))"], "!-x;")
		self.assertRenders(["(; (or a (and b c)))"], "a or b and c;")

	def test_assignment_is_right_associative(self):
		self.assertRenders(["(; (= a (= b c)))"], "a = b = c;")

	def test_property_assignment(self):
		self.assertRenders(["(; (= (. a b) c 1.0))"], "a.b.c = 1;")
		statements = self.parse("a.b.c = 1;")
		self.assertIsInstance(statements[0].expr, syntax.AssignField)

	def test_calls_and_gets_chain(self):
		self.assertRenders(["(; (call (. (call f 1.0) g)))"], "f(1).g();")

	def test_for_loop_desugars_to_while(self):
		self.assertRenders(
			["(block (var i = 0.0) (while (< i 3.0) (block (print i) (; (= i (+ i 1.0))))))"],
			"for (var i = 0; i < 3; i = i + 1) print i;",
		)
		self.assertRenders(["(while true (; x))"], "for (;;) x;")

	def test_else_binds_to_nearest_if(self):
		self.assertRenders(["(if a (if-else b (; x) (; y)))"], "if (a) if (b) x; else y;")

	def test_declarations(self):
		self.assertRenders(["(var a)", "(fun f (x y) (return (+ x y)))"], "var a; fun f(x, y) { return x + y; }")
		statements = self.parse("class B < A { init(x) { this.x = x; } go() { return super.go(); } }")
		klass = statements[0]
		self.assertIsInstance(klass, syntax.ClassDecl)
		self.assertEqual("A", klass.superclass.name.lexeme)
		self.assertEqual(["init", "go"], [m.name.lexeme for m in klass.methods])
		self.assertIsInstance(klass.methods[1].body[0].value.fn_exp, syntax.SuperRef)

	def test_invalid_assignment_target_does_not_stop_the_parse(self):
		statements = self.parse("1 = 2; print 3;")
		self.assertEqual(2, len(statements))
		self.assertEqual(["Invalid assignment target."], [i.message for i in self.report.issues])

	def test_recovery_gives_one_issue_per_broken_statement(self):
		statements = self.parse("var = 1; print 2; var x = ; print 3;")
		self.assertEqual(2, len(self.report.issues))
		self.assertEqual(["(print 2.0)", "(print 3.0)"], [render(s) for s in statements])

	def test_error_at_end(self):
		self.parse("print 1")
		self.assertEqual("[line 1] Error at end: Expect ';' after value.", self.report.issues[0].headline())

	def test_error_names_the_token(self):
		self.parse("print (1;")
		self.assertEqual("[line 1] Error at ';': Expect ')' after expression.", self.report.issues[0].headline())

	def test_too_many_arguments_is_reported_but_parsed(self):
		args = ", ".join(["1"] * 256)
		statements = self.parse("f(%s);" % args)
		self.assertEqual(["Can't have more than 255 arguments."], [i.message for i in self.report.issues])
		self.assertEqual(256, len(statements[0].expr.args))

	def test_too_many_parameters_is_reported_but_parsed(self):
		params = ", ".join("p%d" % i for i in range(256))
		statements = self.parse("fun f(%s) {}" % params)
		self.assertEqual(["Can't have more than 255 parameters."], [i.message for i in self.report.issues])
		self.assertEqual(256, len(statements[0].params))

	def test_identical_references_are_distinct_nodes(self):
		statements = self.parse("a; a;")
		first, second = statements[0].expr, statements[1].expr
		self.assertIsNot(first, second)
		self.assertNotEqual(first, second)
		self.assertEqual(2, len({first, second}))

if __name__ == '__main__':
	unittest.main()
