import io
import unittest

from gokid.lang.parser import parse
from gokid.runtime.environment import Environment
from gokid.runtime.evaluator import Evaluator, is_truthy
from gokid.runtime.objects import Error, ErrorKind, FALSE, NULL, TRUE, Integer, String


def run(source, output=None):
    program, errors = parse(source)
    assert not errors, errors
    return Evaluator(output if output is not None else io.StringIO()).eval(program, Environment())


class EvaluatorTestCase(unittest.TestCase):

    def assert_results(self, cases):
        for case, expected in cases.items():
            result = run(case)
            self.assertNotIsInstance(result, Error, f"{case}: {result.inspect()}")
            self.assertEqual(expected, result.inspect(), case)

    def assert_errors(self, cases):
        for case, expected in cases.items():
            result = run(case)
            self.assertIsInstance(result, Error, case)
            self.assertEqual(expected, result.message, case)


class ArithmeticTestCase(EvaluatorTestCase):

    def test_integers(self):
        self.assert_results({
            "5": "5",
            "-10": "-10",
            "5 + 3 * 2": "11",
            "(5 + 3) * 2": "16",
            "2 ** 3 * 2": "16",
            "10 / 4": "2",
            "-7 / 2": "-3",
            "-7 % 2": "-1",
            "7 % -2": "1",
            "2 ** 10": "1024",
            "2 ** 63": "-9223372036854775808",
            "9223372036854775807 + 1": "-9223372036854775808",
            "-9223372036854775807 - 2": "9223372036854775807",
        })

    def test_floats(self):
        self.assert_results({
            "10.0 / 4": "2.5",
            "1.5 + 1": "2.5",
            "2.0 * 3": "6.0",
            "0.1 + 0.2": "0.30000000000000004",
            "-2.5": "-2.5",
            "7.5 % 2": "1.5",
            "2 ** -1": "0.5",
            "2.0 ** 0.5": "1.4142135623730951",
        })

    def test_comparisons(self):
        self.assert_results({
            "1 < 2": "true",
            "1 > 2": "false",
            "2 <= 2": "true",
            "3 >= 4": "false",
            "3 > 2.5": "true",
            "1 == 1.0": "true",
            "1 < 2 == true": "true",
            '"a" == "a"': "true",
            '"a" != "b"': "true",
            "true == false": "false",
            "true != false": "true",
            "null == null": "true",
            '1 == "1"': "false",
            '1 != "1"': "true",
            "[1] == [1]": "false",
            "null == false": "false",
        })

    def test_strings(self):
        self.assert_results({
            '"foo" + "bar"': "foobar",
            '"" + ""': "",
        })

    def test_division_by_zero(self):
        self.assert_errors({
            "1 / 0": "division by zero",
            "1 % 0": "division by zero",
            "1.0 / 0": "division by zero",
            "1 / 0.0": "division by zero",
            "0 ** -1": "division by zero",
        })

    def test_operator_errors(self):
        self.assert_errors({
            '1 + "a"': "type mismatch: INTEGER + STRING",
            "true + 1": "type mismatch: BOOLEAN + INTEGER",
            '1.5 - "a"': "type mismatch: FLOAT - STRING",
            '"a" - "b"': "unknown operator: STRING - STRING",
            "true + false": "unknown operator: BOOLEAN + BOOLEAN",
            "-true": "unknown operator: -BOOLEAN",
            '-"a"': "unknown operator: -STRING",
            "[1] + [2]": "unknown operator: ARRAY + ARRAY",
            "5 + true; 5": "type mismatch: INTEGER + BOOLEAN",
        })


class LogicTestCase(EvaluatorTestCase):

    def test_truthiness(self):
        self.assertFalse(is_truthy(NULL))
        self.assertFalse(is_truthy(FALSE))
        self.assertTrue(is_truthy(TRUE))
        self.assertTrue(is_truthy(Integer(0)))
        self.assertTrue(is_truthy(String("")))

    def test_bang(self):
        self.assert_results({
            "!true": "false",
            "!false": "true",
            "!5": "false",
            "!null": "true",
            "!!0": "true",
            '!""': "false",
            "!!true": "true",
        })

    def test_and_or(self):
        self.assert_results({
            "true && false": "false",
            "true || false": "true",
            "1 && 0": "true",
            "0 || null": "true",
            "null || false": "false",
        })
        # both sides are always evaluated
        self.assert_errors({"false && x": "identifier not found: x", "true || 1 / 0": "division by zero"})

    def test_if(self):
        self.assert_results({
            "if (true) { 10 }": "10",
            "if (false) { 10 }": "null",
            "if (1) { 10 }": "10",
            "if (0) { 1 } else { 2 }": "1",
            "if (null) { 1 } else { 2 }": "2",
            "if (1 > 2) { 10 } else { 20 }": "20",
            "if (true) { }": "null",
        })

    def test_ternary(self):
        self.assert_results({
            '1 < 2 ? "yes" : "no"': "yes",
            '1 > 2 ? "yes" : "no"': "no",
            "false ? 1 : true ? 2 : 3": "2",
            "null ? 1 : 2": "2",
        })


class BindingTestCase(EvaluatorTestCase):

    def test_declarations(self):
        self.assert_results({
            "let a = 5; a": "5",
            "let a = 5 * 5; a": "25",
            "let a = 5; let b = a; let c = a + b + 5; c": "15",
            "const c = 3; c": "3",
            "var v; v": "null",
            "var v = 2; v": "2",
            "let a = 1; let a = 2; a": "2",
            "const c = 3; c = 4; c": "4",
        })

    def test_assignment(self):
        self.assert_results({
            "let x = 1; x = 2; x": "2",
            "let x = 10; x -= 3; x *= 2; x /= 7; x": "2",
            'let s = "a"; s += "b"; s': "ab",
            "let a = 0; let b = 0; a = b = 5; a + b": "10",
            "y = 3; y": "3",
            "let x = 1; x += 1": "2",
        })
        self.assert_errors({
            "x += 1": "identifier not found: x",
            'let x = 1; x += "a"': "type mismatch: INTEGER + STRING",
        })

    def test_identifier_not_found(self):
        self.assert_errors({
            "foobar": "identifier not found: foobar",
            "let a = [1, x, 3]": "identifier not found: x",
        })

    def test_scoping(self):
        self.assert_results({
            # for loops get their own scope, so assignments inside them shadow
            "let x = 1; for (let i = 0; i < 3; i += 1) { x = x + 1; } x": "1",
            # while and if share the enclosing scope
            "let x = 1; let i = 0; while (i < 3) { x = x + 1; i += 1; } x": "4",
            "let x = 1; if (true) { x = 2; } x": "2",
            # function bodies update what they captured
            "let x = 1; let f = fn() { x = 5; }; f(); x": "5",
            "let x = 1; let f = fn() { let x = 5; }; f(); x": "1",
            "let f = fn(x) { x = x + 1; x }; let x = 1; f(x) + x": "3",
        })
        self.assert_errors({
            "for (let i = 0; i < 3; i += 1) { } i": "identifier not found: i",
            "try { throw 1; } catch (e) { let inner = e; } inner": "identifier not found: inner",
        })

    def test_builtins_first(self):
        self.assert_results({"len": "<builtin len>", "type(print)": "builtin"})


class FunctionTestCase(EvaluatorTestCase):

    def test_functions(self):
        self.assert_results({
            "let identity = fn(x) { x; }; identity(5);": "5",
            "let identity = fn(x) { return x; }; identity(5);": "5",
            "let double = fn(x) { x * 2; }; double(5);": "10",
            "let add = fn(x, y) { x + y; }; add(5 + 5, add(5, 5));": "20",
            "fn(x) { x; }(5)": "5",
            "fn() { 42 }()": "42",
            "let f = fn() { }; f()": "null",
            "fn(a, b) { a }": "<function(a, b)>",
            "function add(a, b) { return a + b; } add(2, 3)": "5",
            "function named() { 1 }": "<function named()>",
        })

    def test_return(self):
        self.assert_results({
            "return 10; 9;": "10",
            "9; return 2 * 5; 9;": "10",
            "if (10 > 1) { if (10 > 1) { return 10; } return 1; }": "10",
            "let f = fn(x) { if (x > 0) { return 1; } return -1; }; f(5) + f(-5) * 10": "-9",
            "let f = fn() { while (true) { return 7; } }; f()": "7",
        })

    def test_closures(self):
        self.assert_results({
            "let newAdder = fn(x) { fn(y) { x + y } }; let addTwo = newAdder(2); addTwo(3)": "5",
        })

        source = ("let makeCounter = fn() { let count = 0; return fn() { count = count + 1; return count; }; };"
                  "let counter = makeCounter();"
                  "[counter(), counter(), counter()]")
        self.assert_results({source: "[1, 2, 3]"})

        source = ("let makeCounter = fn() { let count = 0; return fn() { count += 1; count }; };"
                  "let a = makeCounter(); let b = makeCounter();"
                  "a(); a(); [a(), b()]")
        self.assert_results({source: "[3, 1]"})

    def test_recursion(self):
        source = "function fib(n) { if (n < 2) { return n; } return fib(n - 1) + fib(n - 2); } fib(15)"
        self.assert_results({source: "610"})

        source = "let fact = fn(n) { n <= 1 ? 1 : n * fact(n - 1) }; fact(20)"
        self.assert_results({source: "2432902008176640000"})

    def test_call_errors(self):
        self.assert_errors({
            "5()": "not a function: INTEGER",
            '"f"(1)': "not a function: STRING",
            "fn(a) { a }(1, 2)": "wrong number of arguments: want=1, got=2",
            "fn(a, b) { a }(1)": "wrong number of arguments: want=2, got=1",
            "let f = fn() { x }; f()": "identifier not found: x",
            "fn(a) { a }(1 / 0)": "division by zero",
        })


class LoopTestCase(EvaluatorTestCase):

    def test_while(self):
        self.assert_results({
            "let i = 0; let sum = 0; while (i < 10) { i += 1; if (i % 2 == 0) { continue; } sum += i; } sum": "25",
            "let i = 0; while (true) { i += 1; if (i == 5) { break; } } i": "5",
            "let i = 0; while (i < 3) { i += 1; }": "3",
            "while (false) { 1 }": "null",
        })

    def test_for(self):
        source = ("let f = fn() { let s = [0];"
                  "for (let i = 0; i < 10; i += 1) { if (i == 3) { continue; } if (i == 6) { break; } s[0] += i; }"
                  "return s[0]; }; f()")
        self.assert_results({
            source: "12",
            "let n = [0]; for (let i = 0; i < 4; i += 1) { n[0] = n[0] + i; } n[0]": "6",
            "let n = [0]; for (;;) { n[0] += 1; if (n[0] == 3) { break; } } n": "[3]",
            "let i = 100; for (let i = 0; i < 3; i += 1) { } i": "100",
        })

    def test_continue_in_function_loop(self):
        source = "let f = fn() { let i = 0; while (i < 2) { i += 1; continue; } return i; }; f()"
        self.assert_results({source: "2"})

    def test_loop_errors(self):
        self.assert_errors({
            "while (x) { }": "identifier not found: x",
            "let i = 0; while (i < 3) { i += 1; y; }": "identifier not found: y",
            "for (let i = 0; i < 3; i += z) { }": "identifier not found: z",
        })


class CollectionTestCase(EvaluatorTestCase):

    def test_arrays(self):
        self.assert_results({
            "[1, 2 * 2, 3 + 3]": "[1, 4, 6]",
            "[]": "[]",
            "[1, 2, 3][0]": "1",
            "[1, 2, 3][2]": "3",
            "let i = 0; [1][i];": "1",
            "let a = [1, 2, 3]; a[0] + a[1] + a[2]": "6",
            "[1, 2, 3][3]": "null",
            "[1, 2, 3][-1]": "null",
            "let a = [1, 2, 3]; a[5]": "null",
            "let a = [1, 2, 3]; a[1] = 9; a": "[1, 9, 3]",
            "let a = [1]; let b = a; b[0] = 2; a[0]": "2",
            "let a = [1, [2, 3]]; a[1][0]": "2",
        })
        self.assert_errors({
            "let a = [1, 2, 3]; a[5] = 9": "index out of range: 5",
            "let a = [1]; a[-1] = 0": "index out of range: -1",
            '[1]["a"]': "index operator not supported: ARRAY",
            "5[0]": "index operator not supported: INTEGER",
            "let n = 5; n[0] = 1": "index operator not supported: INTEGER",
        })

    def test_hashes(self):
        self.assert_results({
            '{"one": 1, "two": 2}': "{one: 1, two: 2}",
            "{}": "{}",
            '{"a": 1}["a"]': "1",
            '{"a": 1}["b"]': "null",
            "{1: 2}[1]": "2",
            "{true: 5}[true]": "5",
            '{"a": 1, "a": 2}["a"]': "2",
            'let key = "k"; {key: 1}["k"]': "1",
            'let h = {"a": 1}; h.a': "1",
            'let h = {"a": 1}; h.missing': "null",
            'let h = {"a": 1}; h["b"] = 2; h.b + h["a"]': "3",
            'let h = {"type": 1, "default": 2}; h.type + h.default': "3",
            'let h = {"n": 0}; h["n"] += 5; h.n': "5",
            'let h = {}; let g = h; g["x"] = 1; h.x': "1",
            'let h = {"inner": {"v": 7}}; h.inner.v': "7",
        })
        self.assert_errors({
            "{[1]: 2}": "unusable as hash key: ARRAY",
            '{"a": 1}[[1]]': "unusable as hash key: ARRAY",
            "let h = {}; h[fn() {}] = 1": "unusable as hash key: FUNCTION",
            "let n = 5; n.a": "property access not supported: INTEGER",
        })


class StatementTestCase(EvaluatorTestCase):

    def test_switch(self):
        source = ('let f = fn(x) { switch (x) { case 1: { return "one"; } case 2: { "two" } default: { "many" } } };'
                  "[f(1), f(2), f(3)]")
        self.assert_results({
            source: "[one, two, many]",
            'switch (1) { case 1: { break; "no" } }': "null",
            "switch (5) { case 1: { 1 } }": "null",
            'switch ("a") { case "a": { 1 } case "a": { 2 } }': "1",
        })
        self.assert_errors({"switch (1) { case x: { 1 } }": "identifier not found: x"})

    def test_try(self):
        self.assert_results({
            'try { throw "boom"; } catch (e) { "caught " + e }': "caught boom",
            "try { 1 / 0; } catch (e) { e }": "division by zero",
            "try { 1 } catch (e) { 2 }": "1",
            'let h = {"n": 0}; try { 1 } finally { h["n"] = 1; } h.n': "1",
            'let h = {"n": 0}; try { throw 1; } catch (e) { h["n"] = e + 1; } finally { h["n"] *= 10; } h.n': "20",
            "let f = fn() { try { return 1; } finally { return 2; } }; f()": "2",
            "let f = fn() { throw [1, 2]; }; try { f(); } catch (e) { len(e) }": "2",
        })
        self.assert_errors({
            "throw 5": "5",
            'try { 1 } finally { throw "late"; }': "late",
            "try { throw 1; } catch (e) { throw e + 1; }": "2",
        })

    def test_thrown_value(self):
        result = run('throw {"code": 7}')
        self.assertIsInstance(result, Error)
        self.assertIs(ErrorKind.THROWN, result.kind)
        self.assertEqual("{code: 7}", result.value.inspect())

    def test_unsupported(self):
        self.assert_errors({
            'import "math";': "unsupported statement: import",
            "export let x = 1;": "unsupported statement: export",
        })


class BuiltinTestCase(EvaluatorTestCase):

    def test_len(self):
        self.assert_results({
            'len("")': "0",
            'len("four")': "4",
            'len("héllo")': "5",
            "len([1, 2, 3])": "3",
            'len({"a": 1})': "1",
        })
        self.assert_errors({
            "len(1)": "argument not supported: len(INTEGER)",
            'len("one", "two")': "wrong number of arguments: want=1, got=2",
            "len()": "wrong number of arguments: want=1, got=0",
        })

    def test_type(self):
        self.assert_results({
            "type(1)": "integer",
            "type(1.5)": "float",
            'type("s")': "string",
            "type(true)": "boolean",
            "type(null)": "null",
            "type([])": "array",
            "type({})": "object",
            "type(fn() {})": "function",
            "type(len)": "builtin",
        })

    def test_print(self):
        output = io.StringIO()
        result = run('print("a", 1, [1, 2.5], {"k": true}); print(); print(null)', output)

        self.assertIs(NULL, result)
        self.assertEqual("a 1 [1, 2.5] {k: true}\n\nnull\n", output.getvalue())


class NodeTestCase(unittest.TestCase):

    def test_unknown_node(self):
        result = Evaluator().eval(None, Environment())
        self.assertIsInstance(result, Error)
        self.assertEqual("unknown node type: NoneType", result.message)

    def test_empty_program(self):
        self.assertIs(NULL, run(""))
        self.assertIs(NULL, run("break;"))

    def test_persistent_env(self):
        env = Environment()
        evaluator = Evaluator(io.StringIO())

        evaluator.eval(parse("let x = 2;")[0], env)
        self.assertEqual("4", evaluator.eval(parse("x * 2")[0], env).inspect())


if __name__ == "__main__":
    unittest.main()
