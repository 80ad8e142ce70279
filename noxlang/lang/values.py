"""Runtime values of the Nox language.

Numbers, strings, booleans and nil are represented directly by Python's float, str, bool and None. Functions and
classes are NoxCallables; class instances are NoxInstances.
"""

from abc import abstractmethod, ABC

from noxlang.lang.environment import Environment
from noxlang.lang.error import NoxRuntimeError


def stringify(value):
    """Returns the text print writes for value."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        text = str(value)
        if text.endswith(".0"):
            text = text[:-2]
        return text
    return str(value)


def is_truthy(value):
    """nil is false, booleans are themselves, everything else is true."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left, right):
    """Value equality. Values of different runtime types are never equal, so `true == 1` is false."""
    if left is None and right is None:
        return True
    if left is None or right is None:
        return False
    if type(left) is not type(right):
        return False
    return left == right


class NoxCallable(ABC):
    """Superclass for values that can be called with '(' arguments ')'."""

    @abstractmethod
    def arity(self):
        """Number of arguments this callable must be called with."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Calls this callable with already evaluated arguments. Arity has been checked by the caller."""


class NoxFunction(NoxCallable):
    """User-defined function or method: its declaration plus the Environment it closes over."""

    def __init__(self, declaration, closure, is_initializer=False):
        self.declaration = declaration
        self.closure = closure
        self.is_initializer = is_initializer

    @property
    def name(self):
        return self.declaration.name.lexeme

    def arity(self):
        return len(self.declaration.params)

    def bind(self, instance):
        """Returns a copy of this function whose closure has instance bound as the receiver."""
        environment = Environment(self.closure)
        environment.bind(instance)
        return NoxFunction(self.declaration, environment, self.is_initializer)

    def call(self, interpreter, arguments):
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param, argument)

        completion = interpreter.execute_block(self.declaration.body, environment)

        if self.is_initializer:
            return self.closure.values[Environment.RECEIVER]
        return completion.value

    def __str__(self):
        return f"<fn {self.name}>"


class NoxClass(NoxCallable):
    """Class value. Calling it creates a NoxInstance, materializes declared fields and runs init (if any)."""
    INITIALIZER = "init"

    def __init__(self, name, parents, methods, fields=(), closure=None):
        self.name = name
        self.parents = parents  # list of NoxClasses, in declared order
        self.methods = methods  # dict of name: NoxFunction
        self.fields = fields    # tuple of Var stmts
        self.closure = closure  # Environment field initializers are evaluated in

    def find_method(self, name):
        """Returns the unbound method called name, searching this class first and then its parents depth-first in
        declared order. Returns None if no class in the hierarchy defines it.
        """
        if name in self.methods:
            return self.methods[name]

        for parent in self.parents:
            method = parent.find_method(name)
            if method is not None:
                return method

        return None

    def field_declarations(self):
        """Yields (declaring class, Var stmt) pairs: parents' fields first (depth-first, declared order), then this
        class's own, so that a subclass's field initializer wins over its parents'.
        """
        for parent in self.parents:
            yield from parent.field_declarations()
        for field in self.fields:
            yield self, field

    def arity(self):
        initializer = self.find_method(NoxClass.INITIALIZER)
        if initializer is None:
            return 0
        return initializer.arity()

    def call(self, interpreter, arguments):
        instance = NoxInstance(self)

        for klass, field in self.field_declarations():
            value = None
            if field.initializer is not None:
                environment = Environment(klass.closure)
                environment.bind(instance)
                value = interpreter.evaluate_in(field.initializer, environment)
            instance.fields[field.name.lexeme] = value

        initializer = self.find_method(NoxClass.INITIALIZER)
        if initializer is not None:
            initializer.bind(instance).call(interpreter, arguments)

        return instance

    def __str__(self):
        return self.name


class NoxInstance:
    """Instance of a NoxClass, with its own field map."""

    def __init__(self, klass):
        self.klass = klass
        self.fields = {}

    def get(self, name):
        """Returns field name, else the method name bound to this instance."""
        if name.lexeme in self.fields:
            return self.fields[name.lexeme]

        method = self.klass.find_method(name.lexeme)
        if method is not None:
            return method.bind(self)

        raise NoxRuntimeError(name, f"Undefined property '{name.lexeme}'.")

    def set(self, name, value):
        self.fields[name.lexeme] = value

    def __str__(self):
        return f"{self.klass.name} instance"
