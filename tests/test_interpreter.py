import io
import unittest
from unittest import mock

from lox.diagnostics import Report
from lox.executive import Session, EX_OK, EX_DATAERR, EX_SOFTWARE
from lox.tree_walker.evaluator import stringify, is_truthy, is_equal

class Silence(Report):
	def __init__(self):
		super().__init__(verbose=False)
		self.complain_to_console = mock.Mock()

class InterpreterTestCase(unittest.TestCase):

	def setUp(self) -> None:
		self.out = io.StringIO()
		self.report = Silence()
		self.session = Session(self.report, self.out)

	def run_lox(self, text):
		return self.session.run(text)

	def printed(self):
		return self.out.getvalue().splitlines()

	def assertPrints(self, expect, text):
		status = self.run_lox(text)
		self.assertEqual(EX_OK, status, self.report.issues or self.report.runtime_failure and self.report.runtime_failure.as_text())
		self.assertEqual(expect, self.printed())

	def assertRuntimeError(self, message, text):
		self.assertEqual(EX_SOFTWARE, self.run_lox(text))
		self.assertEqual(message, self.report.runtime_failure.message)

class ExpressionTests(InterpreterTestCase):

	def test_arithmetic(self):
		self.assertPrints(["9", "2.5", "-3", "7"], "print (1+2)*3; print 5/2; print -3; print 10 - 6 / 2;")

	def test_string_concatenation(self):
		self.assertPrints(["ab"], 'print "a" + "b";')

	def test_plus_rejects_mixed_operands(self):
		self.assertRuntimeError("Operands of '+' must be two numbers or two strings.", 'print 1 + "a";')

	def test_arithmetic_needs_numbers(self):
		self.assertRuntimeError("Operands of '<' must be numbers.", 'print "a" < "b";')
		self.assertRuntimeError("Operands of '*' must be numbers.", 'print nil * 2;')
		self.assertRuntimeError("Operand of '-' must be a number.", 'print -"x";')

	def test_comparison(self):
		self.assertPrints(["true", "false", "true", "true"], "print 1 < 2; print 2 <= 1; print 3 > 2; print 3 >= 3;")

	def test_equality_never_errors(self):
		self.assertPrints(
			["true", "true", "true", "false", "false", "false", "true"],
			'print 1 == 1; print "a" == "a"; print nil == nil; print true == 1; print nil == false; print "1" == 1; print 1 != 2;',
		)

	def test_truthiness(self):
		self.assertPrints(["zero", "empty", "falsy"], """
			if (0) print "zero";
			if ("") print "empty";
			if (nil) print "nil"; else print "falsy";
		""")
		self.assertPrints(["zero", "empty", "falsy", "false", "true"], "print !true; print !nil;")

	def test_logical_operators_return_an_operand(self):
		self.assertPrints(["x", "2", "false", "nil"], 'print nil or "x"; print 1 and 2; print false and oops; print nil and 1;')

	def test_division_by_zero_is_not_a_crash(self):
		self.assertPrints(["true", "true"], "print 1/0 > 1000000; print -1/0 < 0;")

	def test_stringify(self):
		self.assertPrints(
			["3", "0.1", "<fn f>", "<native fn>", "A", "A instance", "nil", "hello"],
			'fun f() {} class A {} print 3; print 0.1; print f; print clock; print A; print A(); print nil; print "hello";',
		)

class StatementTests(InterpreterTestCase):

	def test_shadowing_is_restored_on_block_exit(self):
		self.assertPrints(["2", "1"], "var a=1; { var a=2; print a; } print a;")

	def test_assignment_reaches_enclosing_scope(self):
		self.assertPrints(["2"], "var a = 1; { a = 2; } print a;")

	def test_uninitialized_variable_is_nil(self):
		self.assertPrints(["nil"], "var a; print a;")

	def test_global_redeclaration(self):
		self.assertPrints(["2"], "var a = 1; var a = 2; print a;")

	def test_for_and_while(self):
		self.assertPrints(["0", "1", "2", "3"], "for (var i = 0; i < 3; i = i + 1) print i; var j = 3; while (j < 4) { print j; j = j + 1; }")

	def test_undefined_variable(self):
		self.assertRuntimeError("Undefined variable 'y'.", "print y;")
		self.assertRuntimeError("Undefined variable 'y'.", "y = 1;")

	def test_runtime_error_halts_the_rest(self):
		status = self.run_lox('print 1; print -"x"; print 2;')
		self.assertEqual(EX_SOFTWARE, status)
		self.assertEqual(["1"], self.printed())
		self.assertEqual(1, self.report.runtime_failure.line)

	def test_runtime_error_reports_its_line(self):
		self.run_lox('print 1;\n\nprint nope;')
		self.assertEqual("Undefined variable 'nope'.\n[line 3]", self.report.runtime_failure.as_text())

class FunctionTests(InterpreterTestCase):

	def test_recursion(self):
		self.assertPrints(["55"], "fun fib(n) { if (n < 2) return n; return fib(n-1) + fib(n-2); } print fib(10);")

	def test_return_from_inside_a_loop(self):
		self.assertPrints(["4"], """
			fun first_over(n) {
				var i = 0;
				while (true) { if (i > n) return i; i = i + 1; }
			}
			print first_over(3);
		""")

	def test_function_without_return_gives_nil(self):
		self.assertPrints(["nil", "nil"], "fun f() {} fun g() { return; } print f(); print g();")

	def test_counters_are_independent(self):
		self.assertPrints(["1", "2", "1", "3"], """
			fun make_counter() {
				var i = 0;
				fun count() { i = i + 1; return i; }
				return count;
			}
			var c1 = make_counter();
			var c2 = make_counter();
			print c1(); print c1(); print c2(); print c1();
		""")

	def test_sibling_closures_share_a_variable(self):
		self.assertPrints(["2"], """
			fun pair() {
				var n = 0;
				fun inc() { n = n + 1; }
				fun get() { return n; }
				inc(); inc();
				return get;
			}
			print pair()();
		""")

	def test_closure_binds_where_it_was_defined(self):
		self.assertPrints(["global", "global"], """
			var a = "global";
			{
				fun show_a() { print a; }
				show_a();
				var a = "block";
				show_a();
			}
		""")

	def test_deep_recursion(self):
		self.assertPrints(["200"], """
			fun count(n) { if (n == 0) return 0; return 1 + count(n - 1); }
			print count(200);
		""")

	def test_runaway_recursion_is_a_runtime_error(self):
		self.assertRuntimeError("Stack overflow.", "fun f(n) { return f(n + 1); }\nf(0);")
		self.assertEqual(1, self.report.runtime_failure.line)
		self.assertPrints(["ok"], 'print "ok";')

	def test_arity_mismatch(self):
		self.assertRuntimeError("Expected 2 arguments but got 1.", "fun f(a, b) {} f(1);")
		self.assertRuntimeError("Expected 2 arguments but got 3.", "fun f(a, b) {} f(1, 2, 3);")

	def test_calling_a_non_callable(self):
		self.assertRuntimeError("Can only call functions and classes.", "5();")
		self.assertRuntimeError("Can only call functions and classes.", '"f"();')

	def test_clock(self):
		self.assertPrints(["true"], "var t = clock(); print t > 0;")
		self.assertRuntimeError("Expected 0 arguments but got 1.", "clock(1);")

class ClassTests(InterpreterTestCase):

	def test_fields(self):
		self.assertPrints(["1", "2"], "class P {} var p = P(); p.x = 1; print p.x; p.x = p.x + 1; print p.x;")

	def test_initializer(self):
		self.assertPrints(["5", "7"], """
			class P { init(x) { this.x = x; return; this.x = 0; } }
			var p = P(5);
			print p.x;
			print p.init(7).x;
		""")

	def test_class_arity_follows_init(self):
		self.assertRuntimeError("Expected 2 arguments but got 1.", "class A { init(a, b) {} } A(1);")
		self.assertRuntimeError("Expected 0 arguments but got 1.", "class A {} A(1);")

	def test_bound_method_remembers_this(self):
		self.assertPrints(["1"], "class A { init() { this.v = 1; } get() { return this.v; } } var m = A().get; print m();")

	def test_fields_shadow_methods(self):
		self.assertPrints(["field"], 'class A { m() { return "method"; } } var a = A(); a.m = "field"; print a.m;')

	def test_inherited_method_sees_the_subclass_instance(self):
		self.assertPrints(["B", "A"], """
			class A { name() { return "A"; } describe() { return this.name(); } }
			class B < A { name() { return "B"; } }
			print B().describe();
			print A().describe();
		""")

	def test_super(self):
		self.assertPrints(["hi from A via B", "hi from A via B via C"], """
			class A { greet() { return "hi from A"; } }
			class B < A { greet() { return super.greet() + " via B"; } }
			class C < B { greet() { return super.greet() + " via C"; } }
			print B().greet();
			print C().greet();
		""")

	def test_inherited_initializer(self):
		self.assertPrints(["3"], "class A { init(n) { this.n = n; } } class B < A {} print B(3).n;")

	def test_instances_compare_by_identity(self):
		self.assertPrints(["true", "false"], "class A {} var a = A(); var b = A(); print a == a; print a == b;")

	def test_class_can_name_itself_in_methods(self):
		self.assertPrints(["A instance"], "class A { make() { return A(); } } print A().make();")

	def test_property_errors(self):
		self.assertRuntimeError("Undefined property 'x'.", "class A {} print A().x;")
		self.assertRuntimeError("Only instances have properties.", "var x = 1; print x.y;")
		self.assertRuntimeError("Only instances have fields.", "var x = 1; x.y = 2;")
		self.assertRuntimeError("Undefined property 'nope'.", "class A {} class B < A { m() { return super.nope; } } B().m();")

	def test_superclass_must_be_a_class(self):
		self.assertRuntimeError("Superclass must be a class.", "var NotAClass = 1; class B < NotAClass {}")

class SessionTests(InterpreterTestCase):

	def test_static_errors_skip_execution(self):
		self.assertEqual(EX_DATAERR, self.run_lox("print 1; print ;"))
		self.assertEqual([], self.printed())
		self.assertEqual(EX_DATAERR, self.run_lox("print 1; { var a = 1; var a = 2; }"))
		self.assertEqual([], self.printed())

	def test_globals_persist_between_runs(self):
		self.assertEqual(EX_OK, self.run_lox("var a = 1; fun inc(x) { return x + 1; }"))
		self.assertEqual(EX_DATAERR, self.run_lox("print ;"))
		self.assertEqual(EX_SOFTWARE, self.run_lox("print nope;"))
		self.assertEqual(EX_OK, self.run_lox("print inc(a);"))
		self.assertEqual(["2"], self.printed())
		assert self.report.ok()
		self.assertIsNone(self.report.runtime_failure)

	def test_check_only_does_not_run(self):
		self.assertEqual(EX_OK, self.session.run("print 1;", check_only=True))
		self.assertEqual([], self.printed())

class HelperTests(unittest.TestCase):

	def test_helpers(self):
		self.assertFalse(is_truthy(None))
		self.assertFalse(is_truthy(False))
		self.assertTrue(is_truthy(0.0))
		self.assertTrue(is_truthy(""))
		self.assertFalse(is_equal(True, 1.0))
		self.assertTrue(is_equal(None, None))
		self.assertEqual("-0", stringify(-0.0))
		self.assertEqual("100", stringify(100.0))

if __name__ == '__main__':
	unittest.main()
