"""Tree-walking interpreter for the Nox language.

Statements are executed and expressions evaluated directly on the syntax tree built by the parser, against a
current Environment. Two unwinding channels exist and never mix:
    1. Return: execute returns a Completion; a Returned completion short-circuits every enclosing block/if/while
       until the nearest function call turns it into that call's value.
    2. Runtime errors: NoxRuntimeError is raised, aborts the current top-level statement and is reported to the
       ErrorHandler by interpret.
"""

from noxlang.grammar import nodes
from noxlang.lang.environment import Environment
from noxlang.lang.error import NoxRuntimeError
from noxlang.lang.values import NoxCallable, NoxClass, NoxFunction, NoxInstance, is_equal, is_truthy, stringify
from noxlang.tokens import TokenType


class Completion:
    """Outcome of executing a statement: NORMAL, or Returned when a return statement is unwinding."""
    returning = False
    value = None

    def __repr__(self):
        return "NORMAL"


NORMAL = Completion()


class Returned(Completion):
    returning = True

    def __init__(self, value):
        self.value = value

    def __repr__(self):
        return f"Returned({self.value!r})"


class Interpreter:
    """Executes parsed statements. Keeps global state between calls to interpret, so one Interpreter can serve a whole
    command-line session.
    """

    def __init__(self, error_handler, out=None):
        self.error_handler = error_handler
        self.out = out  # stream print writes to, sys.stdout if None

        self.globals = Environment()
        self.environment = self.globals

    def interpret(self, statements):
        """Executes statements in order. A runtime error is reported and aborts only the statement it occurred in."""
        for statement in statements:
            try:
                self.execute(statement)
            except NoxRuntimeError as error:
                self.error_handler.runtime_error(error)

    # statements

    def execute(self, stmt):
        """Executes stmt in the current environment and returns its Completion."""
        match stmt:
            case nodes.Expression(expression):
                self.evaluate(expression)

            case nodes.Print(expression):
                print(stringify(self.evaluate(expression)), file=self.out)

            case nodes.Var(name, initializer):
                value = None
                if initializer is not None:
                    value = self.evaluate(initializer)
                self.environment.define(name, value)

            case nodes.Block(statements):
                return self.execute_block(statements, Environment(self.environment))

            case nodes.If(condition, then_branch, else_branch):
                if is_truthy(self.evaluate(condition)):
                    return self.execute(then_branch)
                if else_branch is not None:
                    return self.execute(else_branch)

            case nodes.While(condition, body):
                while is_truthy(self.evaluate(condition)):
                    completion = self.execute(body)
                    if completion.returning:
                        return completion

            case nodes.Function(name):
                self.environment.define(name, NoxFunction(stmt, self.environment))

            case nodes.Return(_, value):
                return Returned(None if value is None else self.evaluate(value))

            case nodes.Class():
                self.declare_class(stmt)

            case _:
                raise TypeError(f"cannot execute {stmt!r}")

        return NORMAL

    def execute_block(self, statements, environment):
        """Executes statements with environment as the current environment. The previous environment is restored on
        every exit path: normal completion, return and runtime error.
        """
        previous = self.environment
        self.environment = environment
        try:
            for statement in statements:
                completion = self.execute(statement)
                if completion.returning:
                    return completion
        finally:
            self.environment = previous

        return NORMAL

    def declare_class(self, stmt):
        parents = []
        for parent in stmt.parents:
            klass = self.evaluate(parent)
            if not isinstance(klass, NoxClass):
                raise NoxRuntimeError(parent.name, "Parent must be a class.")
            parents.append(klass)

        methods = {}
        for method in stmt.methods:
            is_initializer = method.name.lexeme == NoxClass.INITIALIZER
            methods[method.name.lexeme] = NoxFunction(method, self.environment, is_initializer)

        klass = NoxClass(stmt.name.lexeme, parents, methods, stmt.fields, self.environment)
        self.environment.define(stmt.name, klass)

    # expressions

    def evaluate(self, expr):
        """Evaluates expr in the current environment and returns its runtime value."""
        match expr:
            case nodes.Literal(value):
                return value

            case nodes.Grouping(expression):
                return self.evaluate(expression)

            case nodes.Unary(operator, right):
                return self.unary(operator, self.evaluate(right))

            case nodes.Binary(left, operator, right):
                return self.binary(operator, self.evaluate(left), self.evaluate(right))

            case nodes.Logical(left, operator, right):
                value = self.evaluate(left)
                if operator.kind is TokenType.OR:
                    if is_truthy(value):
                        return value
                elif not is_truthy(value):
                    return value
                return self.evaluate(right)

            case nodes.Variable(name):
                return self.environment.get(name)

            case nodes.Assign(name, value):
                result = self.evaluate(value)
                self.environment.assign(name, result)
                return result

            case nodes.Call(callee, paren, arguments):
                return self.call(self.evaluate(callee), paren, [self.evaluate(argument) for argument in arguments])

            case nodes.Get(obj, name):
                instance = self.evaluate(obj)
                if not isinstance(instance, NoxInstance):
                    raise NoxRuntimeError(name, "Only instances have properties.")
                return instance.get(name)

            case nodes.Set(obj, name, value):
                instance = self.evaluate(obj)
                if not isinstance(instance, NoxInstance):
                    raise NoxRuntimeError(name, "Only instances have fields.")
                result = self.evaluate(value)
                instance.set(name, result)
                return result

            case nodes.This(keyword):
                return self.environment.get(keyword)

        raise TypeError(f"cannot evaluate {expr!r}")

    def evaluate_in(self, expr, environment):
        """Evaluates expr with environment as the current environment, restoring the previous one afterwards."""
        previous = self.environment
        self.environment = environment
        try:
            return self.evaluate(expr)
        finally:
            self.environment = previous

    def call(self, callee, paren, arguments):
        if not isinstance(callee, NoxCallable):
            raise NoxRuntimeError(paren, "Can only call functions and classes.")

        if len(arguments) != callee.arity():
            raise NoxRuntimeError(paren, f"Expected {callee.arity()} arguments but got {len(arguments)}.")

        try:
            return callee.call(self, arguments)
        except RecursionError:
            raise NoxRuntimeError(paren, "Stack overflow.") from None

    def unary(self, operator, right):
        if operator.kind is TokenType.MINUS:
            self.check_numbers(operator, right)
            return -right
        return not is_truthy(right)

    def binary(self, operator, left, right):
        match operator.kind:
            case TokenType.PLUS:
                return self.add(operator, left, right)
            case TokenType.MINUS:
                self.check_numbers(operator, left, right)
                return left - right
            case TokenType.STAR:
                self.check_numbers(operator, left, right)
                return left * right
            case TokenType.SLASH:
                self.check_numbers(operator, left, right)
                if right == 0.0:
                    raise NoxRuntimeError(operator, "Division by zero.")
                return left / right
            case TokenType.GREATER:
                self.check_numbers(operator, left, right)
                return left > right
            case TokenType.GREATER_EQUAL:
                self.check_numbers(operator, left, right)
                return left >= right
            case TokenType.LESS:
                self.check_numbers(operator, left, right)
                return left < right
            case TokenType.LESS_EQUAL:
                self.check_numbers(operator, left, right)
                return left <= right
            case TokenType.EQUAL_EQUAL:
                return is_equal(left, right)
            case TokenType.BANG_EQUAL:
                return not is_equal(left, right)

        raise TypeError(f"unknown binary operator {operator.lexeme!r}")

    @staticmethod
    def add(operator, left, right):
        if isinstance(left, float) and isinstance(right, float):
            return left + right
        if isinstance(left, str) and isinstance(right, str):
            return left + right
        if isinstance(left, str) and isinstance(right, float):
            return left + stringify(right)
        raise NoxRuntimeError(operator, "Invalid addition operands.")

    @staticmethod
    def check_numbers(operator, *operands):
        if all(isinstance(operand, float) for operand in operands):
            return
        if len(operands) == 1:
            raise NoxRuntimeError(operator, "Operand must be a number.")
        raise NoxRuntimeError(operator, "Operands must be numbers.")
