"""Static resolution pass for Lox, run after parsing and before interpreting.

For every local variable reference (Variable, Assign, This), the Resolver counts the scopes between the reference
and the declaration and hands that distance to the Interpreter. References that aren't found in any scope are left
unrecorded and looked up in the globals at runtime. The global scope itself is never tracked here.

Along the way it reports static errors: reading a local in its own initializer, declaring a name twice in one local
scope, and return/break/this outside of a function/loop/method.
"""

from enum import Enum, auto
from functools import singledispatchmethod

from pylox.syntax import nodes


class FunctionType(Enum):
    NONE = auto()
    FUNCTION = auto()
    INITIALIZER = auto()
    METHOD = auto()


class ClassType(Enum):
    NONE = auto()
    CLASS = auto()


class LoopType(Enum):
    NONE = auto()
    LOOP = auto()


class Resolver:

    def __init__(self, interpreter, error_handler):
        self.interpreter = interpreter
        self.error_handler = error_handler

        self.scopes = []  # innermost last; name: whether its initializer has finished
        self.current_function = FunctionType.NONE
        self.current_class = ClassType.NONE
        self.current_loop = LoopType.NONE

    def resolve_all(self, statements):
        for stmt in statements:
            self.resolve(stmt)

    @singledispatchmethod
    def resolve(self, node):
        raise TypeError(f"cannot resolve '{type(node).__name__}'")

    # statements

    @resolve.register(nodes.Block)
    def _resolve_block(self, stmt):
        self.begin_scope()
        self.resolve_all(stmt.statements)
        self.end_scope()

    @resolve.register(nodes.Class)
    def _resolve_class(self, stmt):
        enclosing_class = self.current_class
        self.current_class = ClassType.CLASS

        self.declare(stmt.name)
        self.define(stmt.name)

        # mirrors LoxFunction.bind: methods close over a scope that defines only 'this'
        self.begin_scope()
        self.scopes[-1]["this"] = True

        for method in stmt.methods:
            kind = FunctionType.INITIALIZER if method.name.lexeme == "init" else FunctionType.METHOD
            self.resolve_function(method, kind)

        self.end_scope()
        self.current_class = enclosing_class

    @resolve.register(nodes.Expression)
    @resolve.register(nodes.Print)
    def _resolve_expression_stmt(self, stmt):
        self.resolve(stmt.expression)

    @resolve.register(nodes.Function)
    def _resolve_function_stmt(self, stmt):
        # defined before its body is resolved, so that it can call itself
        self.declare(stmt.name)
        self.define(stmt.name)
        self.resolve_function(stmt, FunctionType.FUNCTION)

    @resolve.register(nodes.If)
    def _resolve_if(self, stmt):
        self.resolve(stmt.condition)
        self.resolve(stmt.then_branch)
        if stmt.else_branch is not None:
            self.resolve(stmt.else_branch)

    @resolve.register(nodes.Return)
    def _resolve_return(self, stmt):
        if self.current_function is FunctionType.NONE:
            self.error_handler.token_error(stmt.keyword, "Can't return from top-level code.")

        if stmt.value is not None:
            if self.current_function is FunctionType.INITIALIZER:
                self.error_handler.token_error(stmt.keyword, "Can't return a value from an initializer.")
            self.resolve(stmt.value)

    @resolve.register(nodes.Break)
    def _resolve_break(self, stmt):
        if self.current_loop is LoopType.NONE:
            self.error_handler.token_error(stmt.keyword, "Can only break out of loops.")

    @resolve.register(nodes.Var)
    def _resolve_var(self, stmt):
        self.declare(stmt.name)
        if stmt.initializer is not None:
            self.resolve(stmt.initializer)
        self.define(stmt.name)

    @resolve.register(nodes.While)
    def _resolve_while(self, stmt):
        self.resolve(stmt.condition)

        enclosing_loop = self.current_loop
        self.current_loop = LoopType.LOOP
        self.resolve(stmt.body)
        self.current_loop = enclosing_loop

    # expressions

    @resolve.register(nodes.Variable)
    def _resolve_variable(self, expr):
        if self.scopes and self.scopes[-1].get(expr.name.lexeme) is False:
            self.error_handler.token_error(expr.name, "Can't read local variable in its own initializer.")
        self.resolve_local(expr, expr.name)

    @resolve.register(nodes.Assign)
    def _resolve_assign(self, expr):
        self.resolve(expr.value)
        self.resolve_local(expr, expr.name)

    @resolve.register(nodes.This)
    def _resolve_this(self, expr):
        if self.current_class is ClassType.NONE:
            self.error_handler.token_error(expr.keyword, "Can't use 'this' outside of a class.")
            return
        self.resolve_local(expr, expr.keyword)

    @resolve.register(nodes.Binary)
    @resolve.register(nodes.Logical)
    def _resolve_binary(self, expr):
        self.resolve(expr.left)
        self.resolve(expr.right)

    @resolve.register(nodes.Unary)
    def _resolve_unary(self, expr):
        self.resolve(expr.right)

    @resolve.register(nodes.Grouping)
    def _resolve_grouping(self, expr):
        self.resolve(expr.expression)

    @resolve.register(nodes.Call)
    def _resolve_call(self, expr):
        self.resolve(expr.callee)
        for argument in expr.arguments:
            self.resolve(argument)

    @resolve.register(nodes.Get)
    def _resolve_get(self, expr):
        # property names are looked up dynamically, only the object is resolved
        self.resolve(expr.obj)

    @resolve.register(nodes.Set)
    def _resolve_set(self, expr):
        self.resolve(expr.value)
        self.resolve(expr.obj)

    @resolve.register(nodes.ListLiteral)
    def _resolve_list(self, expr):
        for element in expr.elements:
            self.resolve(element)

    @resolve.register(nodes.Literal)
    def _resolve_literal(self, expr):
        pass

    # helpers

    def begin_scope(self):
        self.scopes.append({})

    def end_scope(self):
        self.scopes.pop()

    def declare(self, name):
        """Adds name to the innermost scope as not ready yet."""
        if not self.scopes:
            return

        scope = self.scopes[-1]
        if name.lexeme in scope:
            self.error_handler.token_error(name, "Already a variable with this name in this scope.")
        scope[name.lexeme] = False

    def define(self, name):
        if not self.scopes:
            return
        self.scopes[-1][name.lexeme] = True

    def resolve_local(self, expr, name):
        for depth, scope in enumerate(reversed(self.scopes)):
            if name.lexeme in scope:
                self.interpreter.resolve(expr, depth)
                return

    def resolve_function(self, function, kind):
        """Functions get one scope for their parameters, and the body's statements go straight into it. Loop context
        doesn't carry over into a function body.
        """
        enclosing_function = self.current_function
        enclosing_loop = self.current_loop
        self.current_function = kind
        self.current_loop = LoopType.NONE

        self.begin_scope()
        for param in function.params:
            self.declare(param)
            self.define(param)
        self.resolve_all(function.body)
        self.end_scope()

        self.current_function = enclosing_function
        self.current_loop = enclosing_loop
