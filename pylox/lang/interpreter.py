"""Tree-walking evaluator for Lox.

Basic program flow (see session.py):
    1. Scanner: source text => tokens
    2. Parser: tokens => statement trees (syntax errors are reported and recovered from)
    3. Resolver: static analysis that records, for every local variable reference, how many scopes separate it from
       its declaration, and rejects misplaced return/break/this
    4. Interpreter: walks the trees, using the Resolver's distances to find local variables without searching

Steps 3 and 4 must push scopes at exactly the same places (blocks, function calls, the `this` scope of methods),
otherwise the recorded distances point at the wrong Environment.
"""

import math
import sys
from functools import singledispatchmethod

from pylox.lang.completion import NORMAL, Completion, Flow
from pylox.lang.environment import Environment
from pylox.lang.error import LoxRuntimeError, NativeError
from pylox.lang.natives import ListInstance, define_globals
from pylox.lang.objects import LoxCallable, LoxClass, LoxFunction, LoxInstance, stringify
from pylox.syntax import nodes
from pylox.syntax.tokens import TokenType


def is_truthy(value):
    """nil and false are falsy, everything else is truthy."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left, right):
    """Never raises. Values of different types are never equal (in particular true != 1), and objects are compared by
    identity since none of them define __eq__.
    """
    if type(left) is not type(right):
        return False
    return left == right


def is_number(value):
    return isinstance(value, float)


def divide(left, right):
    """IEEE division: Python raises where IEEE gives an infinity or nan."""
    try:
        return left / right
    except ZeroDivisionError:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


class Interpreter:
    """Holds all runtime state of one program: globals and resolved distances. Separate Interpreters share nothing."""

    def __init__(self, error_handler, out=None):
        self.error_handler = error_handler
        self.out = out if out is not None else sys.stdout

        self.globals = Environment()
        self.environment = self.globals
        self.locals = {}  # expr node: binding distance, filled in by the Resolver

        define_globals(self.globals)
        self.list_class = self.globals.get_at(0, "List")  # list literals keep working if List is reassigned

    def interpret(self, statements, echo=False):
        """Executes statements in order. A runtime error is reported and stops the run. If echo (command-line mode),
        the value of each top-level expression statement is printed.
        """
        try:
            for stmt in statements:
                if echo and isinstance(stmt, nodes.Expression):
                    print(stringify(self.evaluate(stmt.expression)), file=self.out)
                    continue

                completion = self.execute(stmt)
                if not completion.is_normal:
                    # the Resolver rejects break/return outside of loops/functions
                    raise LoxRuntimeError(
                        completion.keyword, f"'{completion.keyword.lexeme}' escaped to top level.", internal=True
                    )

        except LoxRuntimeError as error:
            self.error_handler.runtime_error(error)

    def resolve(self, expr, depth):
        """Called by the Resolver for every local variable reference."""
        self.locals[expr] = depth

    # statements

    @singledispatchmethod
    def execute(self, stmt):
        """Executes stmt and returns its Completion."""
        raise TypeError(f"unknown statement type '{type(stmt).__name__}'")

    @execute.register(nodes.Expression)
    def _execute_expression(self, stmt):
        self.evaluate(stmt.expression)
        return NORMAL

    @execute.register(nodes.Print)
    def _execute_print(self, stmt):
        print(stringify(self.evaluate(stmt.expression)), file=self.out)
        return NORMAL

    @execute.register(nodes.Var)
    def _execute_var(self, stmt):
        value = None
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)

        self.environment.define(stmt.name.lexeme, value)
        return NORMAL

    @execute.register(nodes.Block)
    def _execute_block(self, stmt):
        return self.execute_block(stmt.statements, Environment(self.environment))

    @execute.register(nodes.If)
    def _execute_if(self, stmt):
        if is_truthy(self.evaluate(stmt.condition)):
            return self.execute(stmt.then_branch)
        elif stmt.else_branch is not None:
            return self.execute(stmt.else_branch)
        return NORMAL

    @execute.register(nodes.While)
    def _execute_while(self, stmt):
        while is_truthy(self.evaluate(stmt.condition)):
            completion = self.execute(stmt.body)
            if completion.flow is Flow.BREAK:
                break
            if completion.flow is Flow.RETURN:
                return completion
        return NORMAL

    @execute.register(nodes.Break)
    def _execute_break(self, stmt):
        return Completion.broken(stmt.keyword)

    @execute.register(nodes.Function)
    def _execute_function(self, stmt):
        self.environment.define(stmt.name.lexeme, LoxFunction(stmt, self.environment))
        return NORMAL

    @execute.register(nodes.Return)
    def _execute_return(self, stmt):
        value = None
        if stmt.value is not None:
            value = self.evaluate(stmt.value)
        return Completion.returned(stmt.keyword, value)

    @execute.register(nodes.Class)
    def _execute_class(self, stmt):
        self.environment.define(stmt.name.lexeme, None)

        methods = {}
        for method in stmt.methods:
            is_initializer = method.name.lexeme == "init"
            methods[method.name.lexeme] = LoxFunction(method, self.environment, is_initializer)

        self.environment.assign(stmt.name, LoxClass(stmt.name.lexeme, methods))
        return NORMAL

    def execute_block(self, statements, environment):
        """Executes statements in environment, restoring the current environment however they exit. Stops at the
        first statement that doesn't complete normally and returns its Completion.
        """
        previous = self.environment
        try:
            self.environment = environment
            for stmt in statements:
                completion = self.execute(stmt)
                if not completion.is_normal:
                    return completion
            return NORMAL
        finally:
            self.environment = previous

    # expressions

    @singledispatchmethod
    def evaluate(self, expr):
        raise TypeError(f"unknown expression type '{type(expr).__name__}'")

    @evaluate.register(nodes.Literal)
    def _evaluate_literal(self, expr):
        return expr.value

    @evaluate.register(nodes.Grouping)
    def _evaluate_grouping(self, expr):
        return self.evaluate(expr.expression)

    @evaluate.register(nodes.Variable)
    def _evaluate_variable(self, expr):
        return self.look_up_variable(expr.name, expr)

    @evaluate.register(nodes.This)
    def _evaluate_this(self, expr):
        return self.look_up_variable(expr.keyword, expr)

    @evaluate.register(nodes.Assign)
    def _evaluate_assign(self, expr):
        value = self.evaluate(expr.value)

        distance = self.locals.get(expr)
        if distance is not None:
            self.environment.assign_at(distance, expr.name, value)
        else:
            self.globals.assign(expr.name, value)

        return value

    @evaluate.register(nodes.Logical)
    def _evaluate_logical(self, expr):
        left = self.evaluate(expr.left)

        if expr.operator.type is TokenType.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left

        return self.evaluate(expr.right)

    @evaluate.register(nodes.Unary)
    def _evaluate_unary(self, expr):
        right = self.evaluate(expr.right)

        if expr.operator.type is TokenType.BANG:
            return not is_truthy(right)
        if expr.operator.type is TokenType.MINUS:
            self.check_number_operands(expr.operator, right)
            return -right

        raise LoxRuntimeError(expr.operator, f"Unknown unary operator '{expr.operator.lexeme}'.", internal=True)

    @evaluate.register(nodes.Binary)
    def _evaluate_binary(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator

        if operator.type is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if operator.type is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if operator.type is TokenType.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            if isinstance(left, str) and isinstance(right, str):
                return left + right
            raise LoxRuntimeError(operator, "Operands must be two numbers or two strings.")

        self.check_number_operands(operator, left, right)

        if operator.type is TokenType.MINUS:
            return left - right
        if operator.type is TokenType.STAR:
            return left * right
        if operator.type is TokenType.SLASH:
            return divide(left, right)
        if operator.type is TokenType.GREATER:
            return left > right
        if operator.type is TokenType.GREATER_EQUAL:
            return left >= right
        if operator.type is TokenType.LESS:
            return left < right
        if operator.type is TokenType.LESS_EQUAL:
            return left <= right

        raise LoxRuntimeError(operator, f"Unknown binary operator '{operator.lexeme}'.", internal=True)

    @evaluate.register(nodes.Call)
    def _evaluate_call(self, expr):
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions and classes.")

        if len(arguments) != callee.arity():
            raise LoxRuntimeError(expr.paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")

        try:
            return callee.call(self, arguments)
        except NativeError as error:
            raise LoxRuntimeError(expr.paren, error.msg)
        except RecursionError:
            raise LoxRuntimeError(expr.paren, "Stack overflow.")

    @evaluate.register(nodes.Get)
    def _evaluate_get(self, expr):
        obj = self.evaluate(expr.obj)
        if isinstance(obj, LoxInstance):
            return obj.get(expr.name)

        raise LoxRuntimeError(expr.name, "Only instances have properties.")

    @evaluate.register(nodes.Set)
    def _evaluate_set(self, expr):
        obj = self.evaluate(expr.obj)
        if not isinstance(obj, LoxInstance):
            raise LoxRuntimeError(expr.name, "Only instances have fields.")

        value = self.evaluate(expr.value)
        obj.set(expr.name, value)
        return value

    @evaluate.register(nodes.ListLiteral)
    def _evaluate_list(self, expr):
        elements = [self.evaluate(element) for element in expr.elements]
        return ListInstance(self.list_class, elements)

    # helpers

    def look_up_variable(self, name, expr):
        distance = self.locals.get(expr)
        if distance is not None:
            return self.environment.get_at(distance, name.lexeme)
        return self.globals.get(name)

    @staticmethod
    def check_number_operands(operator, *operands):
        if all(is_number(operand) for operand in operands):
            return
        if len(operands) == 1:
            raise LoxRuntimeError(operator, "Operand must be a number.")
        raise LoxRuntimeError(operator, "Operands must be numbers.")
