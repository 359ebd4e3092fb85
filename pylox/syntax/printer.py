"""Lisp-style rendering of Lox expression trees, e.g. `1 + 2 * 3` => `(+ 1 (* 2 3))`. Used for debugging in the shell
(see `ast` command) and in parser tests.
"""

from functools import singledispatchmethod

from pylox.syntax import nodes


class AstPrinter:

    def print(self, expr):
        return self.render(expr)

    @singledispatchmethod
    def render(self, expr):
        raise TypeError(f"cannot print '{type(expr).__name__}'")

    @render.register(nodes.Literal)
    def _render_literal(self, expr):
        if expr.value is None:
            return "nil"
        if isinstance(expr.value, bool):
            return str(expr.value).lower()
        if isinstance(expr.value, float) and expr.value.is_integer():
            return str(int(expr.value))
        return str(expr.value)

    @render.register(nodes.Variable)
    def _render_variable(self, expr):
        return expr.name.lexeme

    @render.register(nodes.Assign)
    def _render_assign(self, expr):
        return self.parenthesize(f"= {expr.name.lexeme}", expr.value)

    @render.register(nodes.Binary)
    @render.register(nodes.Logical)
    def _render_binary(self, expr):
        return self.parenthesize(expr.operator.lexeme, expr.left, expr.right)

    @render.register(nodes.Unary)
    def _render_unary(self, expr):
        return self.parenthesize(expr.operator.lexeme, expr.right)

    @render.register(nodes.Grouping)
    def _render_grouping(self, expr):
        return self.parenthesize("group", expr.expression)

    @render.register(nodes.Call)
    def _render_call(self, expr):
        return self.parenthesize("call", expr.callee, *expr.arguments)

    @render.register(nodes.Get)
    def _render_get(self, expr):
        return self.parenthesize(f". {expr.name.lexeme}", expr.obj)

    @render.register(nodes.Set)
    def _render_set(self, expr):
        return self.parenthesize(f"= .{expr.name.lexeme}", expr.obj, expr.value)

    @render.register(nodes.This)
    def _render_this(self, expr):
        return "this"

    @render.register(nodes.ListLiteral)
    def _render_list(self, expr):
        return self.parenthesize("list", *expr.elements)

    def parenthesize(self, name, *exprs):
        parts = [name] + [self.render(expr) for expr in exprs]
        return f"({' '.join(parts)})"
