"""Debugging aid: renders syntax trees in a parenthesized prefix form, e.g. `(* (- 123) (group 45.67))`."""

from noxlang.grammar import nodes
from noxlang.lang.values import stringify


class AstPrinter:

    def print(self, node):
        """Returns node (an Expr or Stmt) rendered as text."""
        if isinstance(node, nodes.Stmt):
            return self.statement(node)
        return self.expression(node)

    def display(self, statements):
        """Returns statements rendered one per line."""
        return "\n".join(self.statement(statement) for statement in statements)

    def statement(self, stmt):
        match stmt:
            case nodes.Expression(expression):
                return self.parenthesize(";", expression)
            case nodes.Print(expression):
                return self.parenthesize("print", expression)
            case nodes.Var(name, None):
                return f"(var {name.lexeme})"
            case nodes.Var(name, initializer):
                return self.parenthesize(f"var {name.lexeme}", initializer)
            case nodes.Block(statements):
                return self.parenthesize("block", *statements)
            case nodes.If(condition, then_branch, None):
                return self.parenthesize("if", condition, then_branch)
            case nodes.If(condition, then_branch, else_branch):
                return self.parenthesize("if-else", condition, then_branch, else_branch)
            case nodes.While(condition, body):
                return self.parenthesize("while", condition, body)
            case nodes.Function(name, params, body):
                params = " ".join(param.lexeme for param in params)
                return self.parenthesize(f"fun {name.lexeme}({params})", *body)
            case nodes.Return(_, None):
                return "(return)"
            case nodes.Return(_, value):
                return self.parenthesize("return", value)
            case nodes.Class(name, parents, fields, methods):
                header = f"class {name.lexeme}"
                if parents:
                    header += " < " + ", ".join(parent.name.lexeme for parent in parents)
                return self.parenthesize(header, *fields, *methods)

        raise TypeError(f"cannot print {stmt!r}")

    def expression(self, expr):
        match expr:
            case nodes.Literal(str() as value):
                return f"\"{value}\""
            case nodes.Literal(value):
                return stringify(value)
            case nodes.Grouping(expression):
                return self.parenthesize("group", expression)
            case nodes.Unary(operator, right):
                return self.parenthesize(operator.lexeme, right)
            case nodes.Binary(left, operator, right) | nodes.Logical(left, operator, right):
                return self.parenthesize(operator.lexeme, left, right)
            case nodes.Variable(name):
                return name.lexeme
            case nodes.Assign(name, value):
                return self.parenthesize(f"= {name.lexeme}", value)
            case nodes.Call(callee, _, arguments):
                return self.parenthesize("call", callee, *arguments)
            case nodes.Get(obj, name):
                return self.parenthesize(f". {name.lexeme}", obj)
            case nodes.Set(obj, name, value):
                return self.parenthesize(f"= .{name.lexeme}", obj, value)
            case nodes.This():
                return "this"

        raise TypeError(f"cannot print {expr!r}")

    def parenthesize(self, name, *parts):
        result = f"({name}"
        for part in parts:
            result += " " + self.print(part)
        return result + ")"
