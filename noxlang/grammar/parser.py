"""Recursive-descent parser for the Nox language: turns a list of Tokens into a list of statement nodes.

Grammar, from lowest to highest precedence:

```
<program>     ::= <declaration>* EOF
<declaration> ::= <class_decl> | <fun_decl> | <var_decl> | <statement>
<class_decl>  ::= "class" IDENT ( "<" IDENT ( "," IDENT )* )? "{" ( <var_decl> | <function> )* "}"
<fun_decl>    ::= "fun" <function>
<function>    ::= IDENT "(" ( IDENT ( "," IDENT )* )? ")" <block>
<var_decl>    ::= "var" IDENT ( "=" <expression> )? ";"
<statement>   ::= <expr_stmt> | <print_stmt> | <block> | <if_stmt> | <while_stmt> | <for_stmt> | <return_stmt>
<for_stmt>    ::= "for" "(" ( <var_decl> | <expr_stmt> | ";" ) <expression>? ";" <expression>? ")" <statement>
                                                ; desugared into a block holding a while loop
<expression>  ::= <assignment>
<assignment>  ::= ( <call> "." )? IDENT "=" <assignment> | <logic_or>
<logic_or>    ::= <logic_and> ( "or" <logic_and> )*
<logic_and>   ::= <equality> ( "and" <equality> )*
<equality>    ::= <comparison> ( ( "!=" | "==" ) <comparison> )*
<comparison>  ::= <term> ( ( ">" | ">=" | "<" | "<=" ) <term> )*
<term>        ::= <factor> ( ( "-" | "+" ) <factor> )*
<factor>      ::= <unary> ( ( "/" | "*" ) <unary> )*
<unary>       ::= ( "!" | "-" ) <unary> | <call>
<call>        ::= <primary> ( "(" ( <expression> ( "," <expression> )* )? ")" | "." IDENT )*
<primary>     ::= NUMBER | STRING | "true" | "false" | "nil" | "this" | IDENT | "(" <expression> ")"
```

Syntax errors are reported to the ErrorHandler. A failed declaration puts the parser in panic mode: tokens are
discarded up to the next statement boundary and parsing resumes, so independent errors are all reported in one pass.
"""

from noxlang.grammar import nodes
from noxlang.lang.error import ParseError
from noxlang.tokens import TokenType


MAX_ARGUMENTS = 255

# tokens that begin a declaration: safe points to resume parsing at after a syntax error
SYNC_TOKENS = {
    TokenType.CLASS,
    TokenType.FUN,
    TokenType.VAR,
    TokenType.FOR,
    TokenType.IF,
    TokenType.WHILE,
    TokenType.PRINT,
    TokenType.RETURN,
}


class Parser:
    """Parses one list of Tokens (as returned by Lexer.scan_tokens). See module docstring for the grammar."""

    def __init__(self, tokens, error_handler):
        self.tokens = tokens
        self.error_handler = error_handler
        self.current = 0

        self.function_depth = 0  # number of enclosing function bodies, for return checks
        self.class_depth = 0     # number of enclosing class bodies, for this checks

    def parse(self):
        """Returns list of statements. Statements that failed to parse are left out."""
        statements = []
        while not self.at_end():
            statement = self.declaration()
            if statement is not None:
                statements.append(statement)
        return statements

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
        except RecursionError:
            self.error(self.peek(), "Expression nesting too deep.")
            self.synchronize()
            return None

    def class_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expected class name.")

        parents = []
        if self.match(TokenType.LESS):
            while True:
                parent = self.consume(TokenType.IDENTIFIER, "Expected parent class name.")
                if parent.lexeme == name.lexeme:
                    self.error(parent, "A class can't inherit from itself.")
                parents.append(nodes.Variable(parent))
                if not self.match(TokenType.COMMA):
                    break

        self.consume(TokenType.LEFT_BRACE, "Expected '{' before class body.")

        fields = []
        methods = []
        self.class_depth += 1
        try:
            while not self.check(TokenType.RIGHT_BRACE) and not self.at_end():
                if self.match(TokenType.VAR):
                    fields.append(self.var_declaration())
                else:
                    methods.append(self.function("method"))
        finally:
            self.class_depth -= 1

        self.consume(TokenType.RIGHT_BRACE, "Expected '}' after class body.")
        return nodes.Class(name, tuple(parents), tuple(fields), tuple(methods))

    def function(self, kind):
        name = self.consume(TokenType.IDENTIFIER, f"Expected {kind} name.")
        self.consume(TokenType.LEFT_PAREN, f"Expected '(' after {kind} name.")

        params = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGUMENTS} parameters.")
                params.append(self.consume(TokenType.IDENTIFIER, "Expected parameter name."))
                if not self.match(TokenType.COMMA):
                    break

        self.consume(TokenType.RIGHT_PAREN, "Expected ')' after parameters.")
        self.consume(TokenType.LEFT_BRACE, f"Expected '{{' before {kind} body.")
        self.function_depth += 1
        try:
            body = self.block()
        finally:
            self.function_depth -= 1
        return nodes.Function(name, tuple(params), tuple(body))

    def var_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expected variable name.")

        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()

        self.consume(TokenType.SEMICOLON, "Expected ';' after variable declaration.")
        return nodes.Var(name, initializer)

    # statements

    def statement(self):
        if self.match(TokenType.FOR):
            return self.for_statement()
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if keyword := self.match(TokenType.RETURN):
            return self.return_statement(keyword)
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.LEFT_BRACE):
            return nodes.Block(tuple(self.block()))
        return self.expression_statement()

    def block(self):
        """Parses declarations up to the closing brace. Assumes the opening brace has been consumed."""
        statements = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.at_end():
            statement = self.declaration()
            if statement is not None:
                statements.append(statement)

        self.consume(TokenType.RIGHT_BRACE, "Expected '}' after block.")
        return statements

    def for_statement(self):
        """Desugars `for (init; cond; incr) body` into `{ init; while (cond) { body; incr; } }`."""
        self.consume(TokenType.LEFT_PAREN, "Expected '(' after 'for'.")

        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.expression()
        self.consume(TokenType.SEMICOLON, "Expected ';' after loop condition.")

        increment = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expected ')' after for clauses.")

        body = self.statement()

        if increment is not None:
            if isinstance(body, nodes.Block):
                body = nodes.Block(body.statements + (nodes.Expression(increment),))
            else:
                body = nodes.Block((body, nodes.Expression(increment)))

        if condition is None:
            condition = nodes.Literal(True)
        body = nodes.While(condition, body)

        if initializer is not None:
            body = nodes.Block((initializer, body))
        return body

    def if_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expected '(' after 'if'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expected ')' after if condition.")

        then_branch = self.statement()
        else_branch = None
        if self.match(TokenType.ELSE):
            else_branch = self.statement()
        return nodes.If(condition, then_branch, else_branch)

    def print_statement(self):
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expected ';' after value.")
        return nodes.Print(value)

    def return_statement(self, keyword):
        if not self.function_depth:
            self.error(keyword, "Can't return from top-level code.")

        value = None
        if not self.check(TokenType.SEMICOLON):
            value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expected ';' after return value.")
        return nodes.Return(keyword, value)

    def while_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expected '(' after 'while'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expected ')' after condition.")
        return nodes.While(condition, self.statement())

    def expression_statement(self):
        expression = self.expression()
        self.consume(TokenType.SEMICOLON, "Expected ';' after expression.")
        return nodes.Expression(expression)

    # expressions

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.logic_or()

        if equals := self.match(TokenType.EQUAL):
            value = self.assignment()
            if isinstance(expr, nodes.Variable):
                return nodes.Assign(expr.name, value)
            if isinstance(expr, nodes.Get):
                return nodes.Set(expr.object, expr.name, value)
            self.error(equals, "Invalid assignment target.")  # reported, but no need to resynchronize

        return expr

    def logic_or(self):
        expr = self.logic_and()
        while operator := self.match(TokenType.OR):
            expr = nodes.Logical(expr, operator, self.logic_and())
        return expr

    def logic_and(self):
        expr = self.equality()
        while operator := self.match(TokenType.AND):
            expr = nodes.Logical(expr, operator, self.equality())
        return expr

    def equality(self):
        expr = self.comparison()
        while operator := self.match(TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL):
            expr = nodes.Binary(expr, operator, self.comparison())
        return expr

    def comparison(self):
        expr = self.term()
        while operator := self.match(TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS,
                                     TokenType.LESS_EQUAL):
            expr = nodes.Binary(expr, operator, self.term())
        return expr

    def term(self):
        expr = self.factor()
        while operator := self.match(TokenType.MINUS, TokenType.PLUS):
            expr = nodes.Binary(expr, operator, self.factor())
        return expr

    def factor(self):
        expr = self.unary()
        while operator := self.match(TokenType.SLASH, TokenType.STAR):
            expr = nodes.Binary(expr, operator, self.unary())
        return expr

    def unary(self):
        if operator := self.match(TokenType.BANG, TokenType.MINUS):
            return nodes.Unary(operator, self.unary())
        return self.call()

    def call(self):
        expr = self.primary()

        while True:
            if self.match(TokenType.LEFT_PAREN):
                expr = self.finish_call(expr)
            elif self.match(TokenType.DOT):
                name = self.consume(TokenType.IDENTIFIER, "Expected property name after '.'.")
                expr = nodes.Get(expr, name)
            else:
                break

        return expr

    def finish_call(self, callee):
        arguments = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= MAX_ARGUMENTS:
                    self.error(self.peek(), f"Can't have more than {MAX_ARGUMENTS} arguments.")
                arguments.append(self.expression())
                if not self.match(TokenType.COMMA):
                    break

        paren = self.consume(TokenType.RIGHT_PAREN, "Expected ')' after arguments.")
        return nodes.Call(callee, paren, tuple(arguments))

    def primary(self):
        if self.match(TokenType.FALSE):
            return nodes.Literal(False)
        if self.match(TokenType.TRUE):
            return nodes.Literal(True)
        if self.match(TokenType.NIL):
            return nodes.Literal(None)
        if token := self.match(TokenType.NUMBER, TokenType.STRING):
            return nodes.Literal(token.literal)
        if keyword := self.match(TokenType.THIS):
            if not self.class_depth:
                self.error(keyword, "Can't use 'this' outside of a class.")
            return nodes.This(keyword)
        if name := self.match(TokenType.IDENTIFIER):
            return nodes.Variable(name)
        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expected ')' after expression.")
            return nodes.Grouping(expr)

        raise self.error(self.peek(), "Expected expression.")

    # helpers

    def synchronize(self):
        """Discards tokens until just past a ';' or up to the start of the next declaration. Every declaration
        consumes its leading keyword before it can fail, so this always makes progress.
        """
        while not self.at_end():
            if self.match(TokenType.SEMICOLON):
                return
            if self.peek().kind in SYNC_TOKENS:
                return
            self.advance()

    def consume(self, kind, message):
        if token := self.match(kind):
            return token
        raise self.error(self.peek(), message)

    def match(self, *kinds):
        """Consumes and returns the next token if it has one of kinds, else returns None."""
        if self.peek().kind in kinds:
            return self.advance()
        return None

    def check(self, kind):
        return self.peek().kind is kind

    def advance(self):
        token = self.peek()
        if not self.at_end():
            self.current += 1
        return token

    def peek(self):
        return self.tokens[self.current]

    def at_end(self):
        return self.peek().kind is TokenType.EOF

    def error(self, token, message):
        """Reports a syntax error and returns the ParseError to raise if the caller needs to unwind."""
        self.error_handler.token_error(token, message)
        return ParseError(message, token)
