"""Tree-walking evaluator for the GoKid language.

eval(node, env) dispatches on the node's class and returns an Object. Control flow does not use Python exceptions:
return, break, continue and runtime errors are Objects (ReturnValue, Break, Continue, Error) which every composite step
checks for and hands straight back to its caller, until the construct that consumes them is reached (a function call
for ReturnValue, a loop or switch for Break/Continue, a try statement or the caller of eval for Error).

Evaluation order follows the source left to right. Note that both operands of && and || are always evaluated.
"""

import math
import sys

from gokid.lang import ast
from gokid.runtime.builtins import BUILTINS
from gokid.runtime.objects import (
    Array, BREAK, Boolean, Break, Builtin, CONTINUE, Continue, Error, ErrorKind, FALSE, Float, Function, Hash,
    Hashable, Integer, NULL, ReturnValue, SIGNALS, String, TRUE, is_error, native_bool)


COMPOUND_ASSIGNMENT = {"+=": "+", "-=": "-", "*=": "*", "/=": "/"}


def is_truthy(obj):
    """NULL and FALSE are falsy, everything else (0 and "" included) is truthy."""
    return obj is not NULL and obj is not FALSE


def _int_div(left, right):
    """Integer division truncating toward zero."""
    quotient = abs(left) // abs(right)
    return quotient if (left >= 0) == (right >= 0) else -quotient


def _float_pow(left, right):
    try:
        return Float(math.pow(left, right))
    except OverflowError:
        return Float(math.inf)
    except ValueError:
        if left == 0:
            return Error.new(ErrorKind.DIVISION_BY_ZERO)
        return Float(math.nan)


class Evaluator:
    """Walks a syntax tree. output is the stream the print builtin writes to."""

    def __init__(self, output=None):
        self.output = output if output is not None else sys.stdout

        self.dispatch = {
            ast.Program: self.eval_program,
            ast.ExpressionStatement: self.eval_expression_statement,
            ast.LetStatement: self.eval_binding,
            ast.ConstStatement: self.eval_binding,
            ast.VarStatement: self.eval_binding,
            ast.ReturnStatement: self.eval_return_statement,
            ast.BlockStatement: self.eval_block_statement,
            ast.WhileStatement: self.eval_while_statement,
            ast.ForStatement: self.eval_for_statement,
            ast.BreakStatement: lambda node, env: BREAK,
            ast.ContinueStatement: lambda node, env: CONTINUE,
            ast.SwitchStatement: self.eval_switch_statement,
            ast.TryStatement: self.eval_try_statement,
            ast.ThrowStatement: self.eval_throw_statement,
            ast.ImportStatement: self.eval_unsupported,
            ast.ExportStatement: self.eval_unsupported,

            ast.Identifier: self.eval_identifier,
            ast.IntegerLiteral: lambda node, env: Integer(node.value),
            ast.FloatLiteral: lambda node, env: Float(node.value),
            ast.StringLiteral: lambda node, env: String(node.value),
            ast.BooleanLiteral: lambda node, env: native_bool(node.value),
            ast.NullLiteral: lambda node, env: NULL,
            ast.ArrayLiteral: self.eval_array_literal,
            ast.ObjectLiteral: self.eval_object_literal,
            ast.PrefixExpression: self.eval_prefix_expression,
            ast.InfixExpression: self.eval_infix_expression,
            ast.AssignmentExpression: self.eval_assignment_expression,
            ast.FunctionLiteral: self.eval_function_literal,
            ast.CallExpression: self.eval_call_expression,
            ast.IndexExpression: self.eval_index_expression,
            ast.DotExpression: self.eval_dot_expression,
            ast.TernaryExpression: self.eval_ternary_expression,
            ast.IfExpression: self.eval_if_expression,
        }

    def eval(self, node, env):
        """Evaluates node in env. Unknown nodes (including the None a failed parse leaves behind) yield an Error."""
        eval_fn = self.dispatch.get(type(node))
        if eval_fn is None:
            return Error.new(ErrorKind.UNKNOWN_NODE_TYPE, type(node).__name__)
        return eval_fn(node, env)

    # -----------------------------------------------------------------------------------------------------------------
    # statements

    def eval_program(self, program, env):
        result = NULL
        for stmt in program.statements:
            result = self.eval(stmt, env)

            if isinstance(result, ReturnValue):
                return result.value
            elif isinstance(result, Error):
                return result

        if isinstance(result, (Break, Continue)):
            return NULL
        return result

    def eval_block_statement(self, block, env):
        """Runs statements in env (blocks do not open a scope). Any control signal stops the block."""
        result = NULL
        for stmt in block.statements:
            result = self.eval(stmt, env)
            if isinstance(result, SIGNALS):
                return result
        return result

    def eval_expression_statement(self, stmt, env):
        return self.eval(stmt.expression, env)

    def eval_binding(self, stmt, env):
        """let/const/var. const is not enforced, and var without initializer binds null."""
        value = NULL
        if stmt.value is not None:
            value = self.eval(stmt.value, env)
            if is_error(value):
                return value
        return env.set(stmt.name.value, value)

    def eval_return_statement(self, stmt, env):
        value = self.eval(stmt.return_value, env)
        if is_error(value):
            return value
        return ReturnValue(value)

    def _loop_body(self, body, env):
        """Runs one loop iteration. Returns (result, stop): stop is set when the loop must end with result."""
        result = self.eval(body, env)
        if isinstance(result, (ReturnValue, Error)):
            return result, True
        elif isinstance(result, Break):
            return NULL, True
        elif isinstance(result, Continue):
            return NULL, False
        return result, False

    def eval_while_statement(self, stmt, env):
        result = NULL
        while True:
            condition = self.eval(stmt.condition, env)
            if is_error(condition):
                return condition
            if not is_truthy(condition):
                return result

            result, stop = self._loop_body(stmt.body, env)
            if stop:
                return result

    def eval_for_statement(self, stmt, env):
        """One scope for the whole loop holds the initializer's bindings. The increment also runs after continue."""
        loop_env = env.enclosed(loop=True)

        if stmt.initializer is not None:
            init = self.eval(stmt.initializer, loop_env)
            if is_error(init):
                return init

        result = NULL
        while True:
            if stmt.condition is not None:
                condition = self.eval(stmt.condition, loop_env)
                if is_error(condition):
                    return condition
                if not is_truthy(condition):
                    return result

            result, stop = self._loop_body(stmt.body, loop_env)
            if stop:
                return result

            if stmt.increment is not None:
                increment = self.eval(stmt.increment, loop_env)
                if is_error(increment):
                    return increment

    def eval_switch_statement(self, stmt, env):
        """Runs the first case equal to the value, else default. No fall-through; break leaves the switch."""
        value = self.eval(stmt.value, env)
        if is_error(value):
            return value

        body = None
        for clause in stmt.cases:
            case_value = self.eval(clause.value, env)
            if is_error(case_value):
                return case_value
            if self.eval_infix("==", value, case_value) is TRUE:
                body = clause.body
                break
        else:
            if stmt.default is not None:
                body = stmt.default.body

        if body is None:
            return NULL

        result = self.eval(body, env)
        if isinstance(result, Break):
            return NULL
        return result

    def eval_throw_statement(self, stmt, env):
        value = self.eval(stmt.value, env)
        if is_error(value):
            return value
        return Error(value.inspect(), ErrorKind.THROWN, value)

    def eval_try_statement(self, stmt, env):
        """Errors leaving the try block run the catch block, with the parameter bound in a child scope to the thrown
        value (or to the message of a runtime error). finally always runs, and a control signal from it wins.
        """
        result = self.eval(stmt.body, env)

        if is_error(result) and stmt.catch is not None:
            catch_env = env.enclosed()
            thrown = result.value if result.value is not None else String(result.message)
            catch_env.set(stmt.catch.parameter.value, thrown)
            result = self.eval(stmt.catch.body, catch_env)

        if stmt.finally_ is not None:
            final = self.eval(stmt.finally_.body, env)
            if isinstance(final, SIGNALS):
                return final

        return result

    def eval_unsupported(self, stmt, env):
        return Error.new(ErrorKind.UNSUPPORTED_STATEMENT, stmt.token_literal())

    # -----------------------------------------------------------------------------------------------------------------
    # expressions

    def eval_identifier(self, node, env):
        builtin = BUILTINS.get(node.value)
        if builtin is not None:
            return builtin

        value, found = env.get(node.value)
        if not found:
            return Error.new(ErrorKind.IDENTIFIER_NOT_FOUND, node.value)
        return value

    def eval_expressions(self, nodes, env):
        """Evaluates nodes left to right. Returns the list of values, or the first Error."""
        values = []
        for node in nodes:
            value = self.eval(node, env)
            if is_error(value):
                return value
            values.append(value)
        return values

    def eval_array_literal(self, node, env):
        elements = self.eval_expressions(node.elements, env)
        if is_error(elements):
            return elements
        return Array(elements)

    def eval_object_literal(self, node, env):
        result = Hash()
        for key_node, value_node in node.pairs:
            key = self.eval(key_node, env)
            if is_error(key):
                return key
            if not isinstance(key, Hashable):
                return Error.new(ErrorKind.UNUSABLE_AS_HASH_KEY, key.KIND)

            value = self.eval(value_node, env)
            if is_error(value):
                return value

            result.set(key, value)
        return result

    def eval_prefix_expression(self, node, env):
        right = self.eval(node.right, env)
        if is_error(right):
            return right

        if node.operator == "!":
            return FALSE if is_truthy(right) else TRUE
        elif node.operator == "-" and isinstance(right, Integer):
            return Integer(-right.value)
        elif node.operator == "-" and isinstance(right, Float):
            return Float(-right.value)
        return Error.new(ErrorKind.UNKNOWN_OPERATOR, f"{node.operator}{right.KIND}")

    def eval_infix_expression(self, node, env):
        left = self.eval(node.left, env)
        if is_error(left):
            return left

        right = self.eval(node.right, env)
        if is_error(right):
            return right

        return self.eval_infix(node.operator, left, right)

    def eval_infix(self, operator, left, right):
        """Applies a binary operator to two evaluated operands, dispatching on their kinds."""
        if operator == "&&":
            return native_bool(is_truthy(left) and is_truthy(right))
        elif operator == "||":
            return native_bool(is_truthy(left) or is_truthy(right))

        numeric = (Integer, Float)
        if isinstance(left, Integer) and isinstance(right, Integer):
            return self.eval_integer_infix(operator, left.value, right.value)
        elif isinstance(left, numeric) and isinstance(right, numeric):
            return self.eval_float_infix(operator, float(left.value), float(right.value))
        elif isinstance(left, String) and isinstance(right, String):
            return self.eval_string_infix(operator, left, right)
        elif isinstance(left, Boolean) and isinstance(right, Boolean):
            if operator == "==":
                return native_bool(left is right)
            elif operator == "!=":
                return native_bool(left is not right)
        elif operator == "==":
            return native_bool(left is right)
        elif operator == "!=":
            return native_bool(left is not right)
        elif left.KIND != right.KIND:
            return Error.new(ErrorKind.TYPE_MISMATCH, f"{left.KIND} {operator} {right.KIND}")

        return Error.new(ErrorKind.UNKNOWN_OPERATOR, f"{left.KIND} {operator} {right.KIND}")

    @staticmethod
    def eval_integer_infix(operator, left, right):
        if operator == "+":
            return Integer(left + right)
        elif operator == "-":
            return Integer(left - right)
        elif operator == "*":
            return Integer(left * right)
        elif operator in ("/", "%"):
            if right == 0:
                return Error.new(ErrorKind.DIVISION_BY_ZERO)
            quotient = _int_div(left, right)
            return Integer(quotient if operator == "/" else left - right * quotient)
        elif operator == "**":
            if right < 0:
                return _float_pow(float(left), float(right))
            return Integer(pow(left, right, 2 ** 64))
        elif operator == "<":
            return native_bool(left < right)
        elif operator == ">":
            return native_bool(left > right)
        elif operator == "<=":
            return native_bool(left <= right)
        elif operator == ">=":
            return native_bool(left >= right)
        elif operator == "==":
            return native_bool(left == right)
        elif operator == "!=":
            return native_bool(left != right)
        return Error.new(ErrorKind.UNKNOWN_OPERATOR, f"INTEGER {operator} INTEGER")

    @staticmethod
    def eval_float_infix(operator, left, right):
        if operator == "+":
            return Float(left + right)
        elif operator == "-":
            return Float(left - right)
        elif operator == "*":
            return Float(left * right)
        elif operator in ("/", "%"):
            if right == 0:
                return Error.new(ErrorKind.DIVISION_BY_ZERO)
            return Float(left / right if operator == "/" else math.fmod(left, right))
        elif operator == "**":
            return _float_pow(left, right)
        elif operator == "<":
            return native_bool(left < right)
        elif operator == ">":
            return native_bool(left > right)
        elif operator == "<=":
            return native_bool(left <= right)
        elif operator == ">=":
            return native_bool(left >= right)
        elif operator == "==":
            return native_bool(left == right)
        elif operator == "!=":
            return native_bool(left != right)
        return Error.new(ErrorKind.UNKNOWN_OPERATOR, f"FLOAT {operator} FLOAT")

    @staticmethod
    def eval_string_infix(operator, left, right):
        if operator == "+":
            return String(left.value + right.value)
        elif operator == "==":
            return native_bool(left.value == right.value)
        elif operator == "!=":
            return native_bool(left.value != right.value)
        return Error.new(ErrorKind.UNKNOWN_OPERATOR, f"STRING {operator} STRING")

    def eval_assignment_expression(self, node, env):
        """Evaluates to the stored value. Identifier targets are rebound with Environment.assign; index targets
        update the Array or Hash in place.
        """
        if node.operator != "=" and node.operator not in COMPOUND_ASSIGNMENT:
            return Error.new(ErrorKind.UNKNOWN_ASSIGNMENT_OPERATOR, node.operator)

        if isinstance(node.target, ast.IndexExpression):
            return self.eval_index_assignment(node, env)

        value = self.eval(node.value, env)
        if is_error(value):
            return value

        name = node.target.value
        if node.operator in COMPOUND_ASSIGNMENT:
            current, found = env.get(name)
            if not found:
                return Error.new(ErrorKind.IDENTIFIER_NOT_FOUND, name)
            value = self.eval_infix(COMPOUND_ASSIGNMENT[node.operator], current, value)
            if is_error(value):
                return value

        return env.assign(name, value)

    def eval_index_assignment(self, node, env):
        container = self.eval(node.target.left, env)
        if is_error(container):
            return container

        index = self.eval(node.target.index, env)
        if is_error(index):
            return index

        value = self.eval(node.value, env)
        if is_error(value):
            return value

        if node.operator in COMPOUND_ASSIGNMENT:
            current = self.index(container, index)
            if is_error(current):
                return current
            value = self.eval_infix(COMPOUND_ASSIGNMENT[node.operator], current, value)
            if is_error(value):
                return value

        if isinstance(container, Array) and isinstance(index, Integer):
            if not 0 <= index.value < len(container.elements):
                return Error.new(ErrorKind.INDEX_OUT_OF_RANGE, index.value)
            container.elements[index.value] = value
        elif isinstance(container, Hash):
            if not isinstance(index, Hashable):
                return Error.new(ErrorKind.UNUSABLE_AS_HASH_KEY, index.KIND)
            container.set(index, value)
        else:
            return Error.new(ErrorKind.INDEX_NOT_SUPPORTED, container.KIND)

        return value

    def eval_index_expression(self, node, env):
        left = self.eval(node.left, env)
        if is_error(left):
            return left

        index = self.eval(node.index, env)
        if is_error(index):
            return index

        return self.index(left, index)

    @staticmethod
    def index(container, index):
        """container[index]. Out of bounds array indexes and missing hash keys give NULL."""
        if isinstance(container, Array) and isinstance(index, Integer):
            if 0 <= index.value < len(container.elements):
                return container.elements[index.value]
            return NULL
        elif isinstance(container, Hash):
            if not isinstance(index, Hashable):
                return Error.new(ErrorKind.UNUSABLE_AS_HASH_KEY, index.KIND)
            value = container.get(index)
            return value if value is not None else NULL
        return Error.new(ErrorKind.INDEX_NOT_SUPPORTED, container.KIND)

    def eval_dot_expression(self, node, env):
        """obj.name reads the "name" key of a Hash."""
        left = self.eval(node.left, env)
        if is_error(left):
            return left

        if not isinstance(left, Hash):
            return Error.new(ErrorKind.PROPERTY_NOT_SUPPORTED, left.KIND)

        value = left.get(String(node.property.value))
        return value if value is not None else NULL

    def eval_ternary_expression(self, node, env):
        condition = self.eval(node.condition, env)
        if is_error(condition):
            return condition

        if is_truthy(condition):
            return self.eval(node.consequence, env)
        return self.eval(node.alternative, env)

    def eval_if_expression(self, node, env):
        condition = self.eval(node.condition, env)
        if is_error(condition):
            return condition

        if is_truthy(condition):
            return self.eval(node.consequence, env)
        elif node.alternative is not None:
            return self.eval(node.alternative, env)
        return NULL

    def eval_function_literal(self, node, env):
        """Captures env by reference. A named declaration also binds the function in env."""
        name = node.name.value if node.name is not None else None
        function = Function(node.parameters, node.body, env, name)
        if name is not None:
            env.set(name, function)
        return function

    def eval_call_expression(self, node, env):
        function = self.eval(node.function, env)
        if is_error(function):
            return function

        args = self.eval_expressions(node.arguments, env)
        if is_error(args):
            return args

        return self.apply_function(function, args)

    def apply_function(self, function, args):
        if isinstance(function, Function):
            if len(args) != len(function.parameters):
                return Error.new(ErrorKind.WRONG_ARGUMENT_COUNT, f"want={len(function.parameters)}, got={len(args)}")

            call_env = function.env.enclosed()
            for param, arg in zip(function.parameters, args):
                call_env.set(param.value, arg)

            result = self.eval(function.body, call_env)
            if isinstance(result, ReturnValue):
                return result.value
            elif isinstance(result, (Break, Continue)):
                return NULL  # break/continue cannot leave a function body
            return result

        elif isinstance(function, Builtin):
            return function.fn(self, args)

        return Error.new(ErrorKind.NOT_A_FUNCTION, function.KIND)


def evaluate(program, env, output=None):
    """Evaluates a parsed Program in env and returns the resulting Object."""
    return Evaluator(output).eval(program, env)
