"""Recursive-descent parser for Lox: converts a list of Tokens into a list of statement trees.

Formally, the grammar (lowest to highest precedence) is

```
program     ::= declaration* EOF
declaration ::= classDecl | funDecl | varDecl | statement
classDecl   ::= "class" IDENTIFIER "{" function* "}"        ; no fields: they are created by assignment
funDecl     ::= "fun" function
function    ::= IDENTIFIER "(" parameters? ")" block        ; at most 255 parameters
varDecl     ::= "var" IDENTIFIER ( "=" expression )? ";"

statement   ::= exprStmt | forStmt | ifStmt | printStmt | returnStmt | whileStmt | breakStmt | block
forStmt     ::= "for" "(" ( varDecl | exprStmt | ";" ) expression? ";" expression? ")" statement
                                                            ; desugared into a while loop inside a block
ifStmt      ::= "if" "(" expression ")" statement ( "else" statement )?
returnStmt  ::= "return" expression? ";"
breakStmt   ::= "break" ";"
block       ::= "{" declaration* "}"

expression  ::= assignment
assignment  ::= ( call "." )? IDENTIFIER "=" assignment | logic_or
logic_or    ::= logic_and ( "or" logic_and )*
logic_and   ::= equality ( "and" equality )*
equality    ::= comparison ( ( "!=" | "==" ) comparison )*
comparison  ::= term ( ( ">" | ">=" | "<" | "<=" ) term )*
term        ::= factor ( ( "-" | "+" ) factor )*
factor      ::= unary ( ( "/" | "*" ) unary )*
unary       ::= ( "!" | "-" ) unary | call
call        ::= primary ( "(" arguments? ")" | "." IDENTIFIER )*
primary     ::= "true" | "false" | "nil" | "this" | NUMBER | STRING | IDENTIFIER
              | "(" expression ")" | "[" ( expression ( "," expression )* )? "]"
```

Syntax errors are reported to the ErrorHandler as soon as they are found. The parser then unwinds to the enclosing
declaration with a ParseError, skips ahead to the next statement boundary and carries on, so one run reports every
independent error and still produces a best-effort tree.

Sources: https://craftinginterpreters.com/parsing-expressions.html,
         https://craftinginterpreters.com/statements-and-state.html
"""

from pylox.lang.error import ParseError
from pylox.syntax import nodes
from pylox.syntax.tokens import TokenType


MAX_ARGS = 255

# statement keywords that are safe to resume parsing at
BOUNDARIES = {
    TokenType.CLASS, TokenType.FUN, TokenType.VAR, TokenType.FOR, TokenType.IF,
    TokenType.WHILE, TokenType.PRINT, TokenType.RETURN, TokenType.BREAK,
}


class Parser:
    """Parses one list of tokens. Parser objects are single-use."""

    def __init__(self, tokens, error_handler):
        self.tokens = tokens
        self.error_handler = error_handler
        self.current = 0

    def parse(self):
        """Returns the list of statements in self.tokens. Statements that failed to parse are left out."""
        statements = []
        while not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)
        return statements

    def parse_expression(self):
        """Parses a single expression, or returns None after reporting a syntax error."""
        try:
            expr = self.expression()
            if not self.is_at_end():
                raise self.error(self.peek(), "Expect end of expression.")
            return expr
        except ParseError:
            return None

    # declarations

    def declaration(self):
        try:
            if self.match(TokenType.CLASS):
                return self.class_declaration()
            if self.match(TokenType.FUN):
                return self.function("function")
            if self.match(TokenType.VAR):
                return self.var_declaration()
            return self.statement()

        except ParseError:
            self.synchronize()
            return None

    def class_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expect class name.")
        self.consume(TokenType.LEFT_BRACE, "Expect '{' before class body.")

        methods = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            methods.append(self.function("method"))

        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after class body.")
        return nodes.Class(name, methods)

    def function(self, kind):
        """kind is "function" or "method", and only used for error messages."""
        name = self.consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        self.consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")

        params = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGS} parameters.")
                params.append(self.consume(TokenType.IDENTIFIER, "Expect parameter name."))
                if not self.match(TokenType.COMMA):
                    break
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")

        self.consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        return nodes.Function(name, params, self.block())

    def var_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return nodes.Var(name, initializer)

    # statements

    def statement(self):
        if self.match(TokenType.FOR):
            return self.for_statement()
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if self.match(TokenType.RETURN):
            return self.return_statement()
        if self.match(TokenType.BREAK):
            return self.break_statement()
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.LEFT_BRACE):
            return nodes.Block(self.block())
        return self.expression_statement()

    def for_statement(self):
        """for loops have no node of their own:

            for (init; cond; incr) body   =>   { init; while (cond) { body; incr; } }

        The initializer is declared once for the whole loop, so closures created in the body share one binding.
        """
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()

        if increment is not None:
            body = nodes.Block([body, nodes.Expression(increment)])
        if condition is None:
            condition = nodes.Literal(True)
        body = nodes.While(condition, body)
        if initializer is not None:
            body = nodes.Block([initializer, body])

        return body

    def if_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.statement()
        else_branch = None
        if self.match(TokenType.ELSE):
            else_branch = self.statement()

        return nodes.If(condition, then_branch, else_branch)

    def print_statement(self):
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return nodes.Print(value)

    def return_statement(self):
        keyword = self.previous()

        value = None
        if not self.check(TokenType.SEMICOLON):
            value = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return nodes.Return(keyword, value)

    def break_statement(self):
        keyword = self.previous()
        self.consume(TokenType.SEMICOLON, "Expect ';' after 'break'.")
        return nodes.Break(keyword)

    def while_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        return nodes.While(condition, self.statement())

    def block(self):
        """Parses declarations up to the closing brace. Assumes the opening brace has been consumed."""
        statements = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            stmt = self.declaration()
            if stmt is not None:
                statements.append(stmt)

        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def expression_statement(self):
        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return nodes.Expression(expr)

    # expressions

    def expression(self):
        return self.assignment()

    def assignment(self):
        """The target is parsed as an ordinary expression first, then checked once '=' is seen. An invalid target is
        reported but doesn't unwind: the parser isn't confused, so the right-hand side is returned instead.
        """
        expr = self.logic_or()

        if self.match(TokenType.EQUAL):
            equals = self.previous()
            value = self.assignment()

            if isinstance(expr, nodes.Variable):
                return nodes.Assign(expr.name, value)
            elif isinstance(expr, nodes.Get):
                return nodes.Set(expr.obj, expr.name, value)

            self.error(equals, "Invalid assignment target.")
            return value

        return expr

    def logic_or(self):
        expr = self.logic_and()
        while self.match(TokenType.OR):
            operator = self.previous()
            expr = nodes.Logical(expr, operator, self.logic_and())
        return expr

    def logic_and(self):
        expr = self.equality()
        while self.match(TokenType.AND):
            operator = self.previous()
            expr = nodes.Logical(expr, operator, self.equality())
        return expr

    def equality(self):
        return self.left_associative(self.comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def comparison(self):
        return self.left_associative(
            self.term, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL
        )

    def term(self):
        return self.left_associative(self.factor, TokenType.MINUS, TokenType.PLUS)

    def factor(self):
        return self.left_associative(self.unary, TokenType.SLASH, TokenType.STAR)

    def left_associative(self, operand, *token_types):
        """Builds a left-associative chain of Binary nodes iteratively, so that long operator chains don't recurse."""
        expr = operand()
        while self.match(*token_types):
            operator = self.previous()
            expr = nodes.Binary(expr, operator, operand())
        return expr

    def unary(self):
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous()
            return nodes.Unary(operator, self.unary())
        return self.call()

    def call(self):
        expr = self.primary()

        while True:
            if self.match(TokenType.LEFT_PAREN):
                expr = self.finish_call(expr)
            elif self.match(TokenType.DOT):
                name = self.consume(TokenType.IDENTIFIER, "Expect property name after '.'.")
                expr = nodes.Get(expr, name)
            else:
                break

        return expr

    def finish_call(self, callee):
        arguments = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGS} arguments.")
                arguments.append(self.expression())
                if not self.match(TokenType.COMMA):
                    break

        paren = self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return nodes.Call(callee, paren, arguments)

    def primary(self):
        if self.match(TokenType.FALSE):
            return nodes.Literal(False)
        if self.match(TokenType.TRUE):
            return nodes.Literal(True)
        if self.match(TokenType.NIL):
            return nodes.Literal(None)

        if self.match(TokenType.NUMBER, TokenType.STRING):
            return nodes.Literal(self.previous().literal)

        if self.match(TokenType.THIS):
            return nodes.This(self.previous())

        if self.match(TokenType.IDENTIFIER):
            return nodes.Variable(self.previous())

        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return nodes.Grouping(expr)

        if self.match(TokenType.LEFT_BRACKET):
            return self.list_literal()

        raise self.error(self.peek(), "Expect expression.")

    def list_literal(self):
        bracket = self.previous()

        elements = []
        if not self.check(TokenType.RIGHT_BRACKET):
            while True:
                elements.append(self.expression())
                if not self.match(TokenType.COMMA):
                    break

        self.consume(TokenType.RIGHT_BRACKET, "Expect ']' after list elements.")
        return nodes.ListLiteral(bracket, elements)

    # helpers

    def match(self, *token_types):
        """Consumes the current token if it has any of token_types."""
        for token_type in token_types:
            if self.check(token_type):
                self.advance()
                return True
        return False

    def consume(self, token_type, message):
        if self.check(token_type):
            return self.advance()
        raise self.error(self.peek(), message)

    def check(self, token_type):
        if self.is_at_end():
            return False
        return self.peek().type is token_type

    def advance(self):
        if not self.is_at_end():
            self.current += 1
        return self.previous()

    def is_at_end(self):
        return self.peek().type is TokenType.EOF

    def peek(self):
        return self.tokens[self.current]

    def previous(self):
        return self.tokens[self.current - 1]

    def error(self, token, message):
        """Reports message at token and returns (doesn't raise) a ParseError, so the caller decides whether to
        unwind.
        """
        self.error_handler.token_error(token, message)
        return ParseError(message)

    def synchronize(self):
        """Discards tokens until the start of the next statement."""
        self.advance()

        while not self.is_at_end():
            if self.previous().type is TokenType.SEMICOLON:
                return
            if self.peek().type in BOUNDARIES:
                return
            self.advance()
