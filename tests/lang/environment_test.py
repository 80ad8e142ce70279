import unittest

from noxlang.lang.environment import Environment
from noxlang.lang.error import NoxRuntimeError
from noxlang.tokens import Token, TokenType as T


def name(lexeme):
    return Token(T.IDENTIFIER, lexeme, None, 1, 1)


class EnvironmentTestCase(unittest.TestCase):

    def test_define_and_get(self):
        environment = Environment()
        environment.define(name("a"), 1.0)
        environment.define(name("b"), None)
        self.assertEqual(1.0, environment.get(name("a")))
        self.assertIsNone(environment.get(name("b")))

    def test_redefinition(self):
        environment = Environment()
        environment.define(name("a"), 1.0)
        with self.assertRaises(NoxRuntimeError) as context:
            environment.define(name("a"), 2.0)
        self.assertEqual("Variable 'a' is already defined in this scope.", context.exception.message)
        self.assertEqual(1.0, environment.get(name("a")))

    def test_shadowing(self):
        outer = Environment()
        outer.define(name("a"), "outer")
        inner = Environment(outer)
        inner.define(name("a"), "inner")

        self.assertEqual("inner", inner.get(name("a")))
        self.assertEqual("outer", outer.get(name("a")))

    def test_assign_walks_chain(self):
        outer = Environment()
        outer.define(name("a"), 1.0)
        inner = Environment(Environment(outer))

        inner.assign(name("a"), 2.0)
        self.assertEqual(2.0, outer.get(name("a")))
        self.assertNotIn("a", inner.values)
        self.assertIs(outer, inner.find("a"))

    def test_undefined(self):
        environment = Environment(Environment())
        for operation in (lambda: environment.get(name("x")), lambda: environment.assign(name("x"), 1.0)):
            with self.assertRaises(NoxRuntimeError) as context:
                operation()
            self.assertEqual("Undefined variable 'x'.", context.exception.message)
            self.assertEqual("x", context.exception.token.lexeme)

    def test_bind(self):
        environment = Environment()
        receiver = object()
        environment.bind(receiver)
        self.assertIs(receiver, Environment(environment).get(Token(T.THIS, "this", None, 1, 1)))

    def test_repr(self):
        environment = Environment(Environment())
        environment.define(name("b"), 1.0)
        environment.define(name("a"), 2.0)
        self.assertEqual("Environment(names=['a', 'b'], depth=1)", repr(environment))


if __name__ == '__main__':
    unittest.main()
