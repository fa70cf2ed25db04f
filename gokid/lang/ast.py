"""Abstract syntax tree for the GoKid language. Pure data: nodes are built once by the parser and only read afterwards.

Grammar, loosely:

```
<program>    ::= <statement>*
<statement>  ::= ("let" | "const") <ident> "=" <expr> [";"]
               | "var" <ident> ["=" <expr>] [";"]
               | "return" <expr> [";"]
               | "function" [<ident>] "(" <params> ")" <block>
               | "while" "(" <expr> ")" <block>
               | "for" "(" [<statement>] ";" [<expr>] ";" [<expr>] ")" <block>
               | "break" [";"] | "continue" [";"]
               | "switch" "(" <expr> ")" "{" ("case" <expr> ":" <block> | "default" ":" <block>)* "}"
               | "try" <block> ["catch" "(" <ident> ")" <block>] ["finally" <block>]
               | "throw" <expr> [";"]
               | "import" <string> ["as" <ident>] [";"] | "export" <statement>
               | <expr> [";"]
<block>      ::= "{" <statement>* "}"
```

Expressions are parsed by precedence climbing, see parser.py. Note that `if` is an expression.
"""

from dataclasses import dataclass, field, fields
from typing import List, Optional, Tuple

from gokid.lang.tokens import Token


class Node:
    """Superclass of every syntax tree node. Subclasses are dataclasses whose first field is the originating token."""
    token: Token

    def token_literal(self):
        return self.token.literal

    def children(self):
        """Direct child nodes, in field order. Missing (None) children are skipped."""
        result = []
        for attr in fields(self):
            value = getattr(self, attr.name)
            if isinstance(value, Node):
                result.append(value)
            elif isinstance(value, list):
                for item in value:
                    if isinstance(item, tuple):
                        result.extend(node for node in item if isinstance(node, Node))
                    elif isinstance(item, Node):
                        result.append(item)
        return result

    def display(self, indents=0):
        """Recursively displays the tree with readable format.

        Format:
        <Node>(expr='<expr>', nodes=[
            <Node>(expr='<expr>', nodes=[
                ...
                <Node>(expr='<expr>')  # <-- if there are no child nodes
            ])
        ])
        """
        result = f"{'    ' * indents}{type(self).__name__}(expr='{self}'"
        nodes = self.children()
        if nodes:
            result += ", nodes=["
            for node in nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"


class Statement(Node):
    pass


class Expression(Node):
    pass


def _str(node):
    """str(node), tolerating the None left behind by a failed sub-parse."""
    return "" if node is None else str(node)


# ---------------------------------------------------------------------------------------------------------------------
# Program and statements

@dataclass
class Program(Node):
    statements: List[Optional[Statement]] = field(default_factory=list)
    token: Optional[Token] = None

    def token_literal(self):
        if self.statements and self.statements[0] is not None:
            return self.statements[0].token_literal()
        return ""

    def __str__(self):
        return "".join(_str(stmt) for stmt in self.statements)


@dataclass
class LetStatement(Statement):
    token: Token
    name: "Identifier"
    value: Optional[Expression] = None

    def __str__(self):
        return f"{self.token_literal()} {self.name} = {_str(self.value)};"


@dataclass
class ConstStatement(LetStatement):
    pass


@dataclass
class VarStatement(LetStatement):

    def __str__(self):
        if self.value is None:
            return f"{self.token_literal()} {self.name};"
        return super().__str__()


@dataclass
class ReturnStatement(Statement):
    token: Token
    return_value: Optional[Expression] = None

    def __str__(self):
        return f"{self.token_literal()} {_str(self.return_value)};"


@dataclass
class ExpressionStatement(Statement):
    token: Token
    expression: Optional[Expression] = None

    def __str__(self):
        return _str(self.expression)


@dataclass
class BlockStatement(Statement):
    token: Token
    statements: List[Optional[Statement]] = field(default_factory=list)

    def __str__(self):
        return "{ " + " ".join(_str(stmt) for stmt in self.statements) + " }"


@dataclass
class WhileStatement(Statement):
    token: Token
    condition: Optional[Expression] = None
    body: Optional[BlockStatement] = None

    def __str__(self):
        return f"while ({_str(self.condition)}) {_str(self.body)}"


@dataclass
class ForStatement(Statement):
    token: Token
    initializer: Optional[Statement] = None
    condition: Optional[Expression] = None
    increment: Optional[Expression] = None
    body: Optional[BlockStatement] = None

    def __str__(self):
        init = _str(self.initializer).rstrip(";")
        return f"for ({init}; {_str(self.condition)}; {_str(self.increment)}) {_str(self.body)}"


@dataclass
class BreakStatement(Statement):
    token: Token

    def __str__(self):
        return "break;"


@dataclass
class ContinueStatement(Statement):
    token: Token

    def __str__(self):
        return "continue;"


@dataclass
class CaseClause(Statement):
    token: Token
    value: Optional[Expression] = None
    body: Optional[BlockStatement] = None

    def __str__(self):
        return f"case {_str(self.value)}: {_str(self.body)}"


@dataclass
class DefaultClause(Statement):
    token: Token
    body: Optional[BlockStatement] = None

    def __str__(self):
        return f"default: {_str(self.body)}"


@dataclass
class SwitchStatement(Statement):
    token: Token
    value: Optional[Expression] = None
    cases: List[CaseClause] = field(default_factory=list)
    default: Optional[DefaultClause] = None

    def __str__(self):
        clauses = [str(case) for case in self.cases]
        if self.default is not None:
            clauses.append(str(self.default))
        return f"switch ({_str(self.value)}) {{ {' '.join(clauses)} }}"


@dataclass
class CatchClause(Statement):
    token: Token
    parameter: Optional["Identifier"] = None
    body: Optional[BlockStatement] = None

    def __str__(self):
        return f"catch ({_str(self.parameter)}) {_str(self.body)}"


@dataclass
class FinallyClause(Statement):
    token: Token
    body: Optional[BlockStatement] = None

    def __str__(self):
        return f"finally {_str(self.body)}"


@dataclass
class TryStatement(Statement):
    token: Token
    body: Optional[BlockStatement] = None
    catch: Optional[CatchClause] = None
    finally_: Optional[FinallyClause] = None

    def __str__(self):
        parts = [f"try {_str(self.body)}"]
        if self.catch is not None:
            parts.append(str(self.catch))
        if self.finally_ is not None:
            parts.append(str(self.finally_))
        return " ".join(parts)


@dataclass
class ThrowStatement(Statement):
    token: Token
    value: Optional[Expression] = None

    def __str__(self):
        return f"throw {_str(self.value)};"


@dataclass
class ImportStatement(Statement):
    token: Token
    path: Optional["StringLiteral"] = None
    alias: Optional["Identifier"] = None

    def __str__(self):
        alias = f" as {self.alias}" if self.alias is not None else ""
        return f'import "{_str(self.path)}"{alias};'


@dataclass
class ExportStatement(Statement):
    token: Token
    value: Optional[Statement] = None

    def __str__(self):
        return f"export {_str(self.value)}"


# ---------------------------------------------------------------------------------------------------------------------
# Expressions

@dataclass
class Identifier(Expression):
    token: Token
    value: str

    def __str__(self):
        return self.value


@dataclass
class IntegerLiteral(Expression):
    token: Token
    value: int

    def __str__(self):
        return self.token_literal()


@dataclass
class FloatLiteral(Expression):
    token: Token
    value: float

    def __str__(self):
        return self.token_literal()


@dataclass
class StringLiteral(Expression):
    token: Token
    value: str

    def __str__(self):
        return self.value


@dataclass
class BooleanLiteral(Expression):
    token: Token
    value: bool

    def __str__(self):
        return self.token_literal()


@dataclass
class NullLiteral(Expression):
    token: Token

    def __str__(self):
        return "null"


@dataclass
class ArrayLiteral(Expression):
    token: Token
    elements: List[Optional[Expression]] = field(default_factory=list)

    def __str__(self):
        return "[" + ", ".join(_str(element) for element in self.elements) + "]"


@dataclass
class ObjectLiteral(Expression):
    """Hash literal. Pairs keep their source order."""
    token: Token
    pairs: List[Tuple[Expression, Expression]] = field(default_factory=list)

    def __str__(self):
        return "{" + ", ".join(f"{_str(key)}: {_str(value)}" for key, value in self.pairs) + "}"


@dataclass
class PrefixExpression(Expression):
    token: Token
    operator: str
    right: Optional[Expression] = None

    def __str__(self):
        return f"({self.operator}{_str(self.right)})"


@dataclass
class InfixExpression(Expression):
    token: Token
    left: Expression
    operator: str
    right: Optional[Expression] = None

    def __str__(self):
        return f"({_str(self.left)} {self.operator} {_str(self.right)})"


@dataclass
class AssignmentExpression(Expression):
    """Assignment to an Identifier or IndexExpression target."""
    token: Token
    target: Expression
    operator: str
    value: Optional[Expression] = None

    def __str__(self):
        return f"({_str(self.target)} {self.operator} {_str(self.value)})"


@dataclass
class FunctionLiteral(Expression):
    token: Token
    parameters: List["Identifier"] = field(default_factory=list)
    body: Optional[BlockStatement] = None
    name: Optional["Identifier"] = None

    def __str__(self):
        name = f" {self.name}" if self.name is not None else ""
        params = ", ".join(str(param) for param in self.parameters)
        return f"{self.token_literal()}{name}({params}) {_str(self.body)}"


@dataclass
class CallExpression(Expression):
    token: Token
    function: Expression
    arguments: List[Optional[Expression]] = field(default_factory=list)

    def __str__(self):
        return f"{_str(self.function)}(" + ", ".join(_str(arg) for arg in self.arguments) + ")"


@dataclass
class IndexExpression(Expression):
    token: Token
    left: Expression
    index: Optional[Expression] = None

    def __str__(self):
        return f"({_str(self.left)}[{_str(self.index)}])"


@dataclass
class DotExpression(Expression):
    token: Token
    left: Expression
    property: Optional[Identifier] = None

    def __str__(self):
        return f"({_str(self.left)}.{_str(self.property)})"


@dataclass
class TernaryExpression(Expression):
    token: Token
    condition: Expression
    consequence: Optional[Expression] = None
    alternative: Optional[Expression] = None

    def __str__(self):
        return f"({_str(self.condition)} ? {_str(self.consequence)} : {_str(self.alternative)})"


@dataclass
class IfExpression(Expression):
    token: Token
    condition: Optional[Expression] = None
    consequence: Optional[BlockStatement] = None
    alternative: Optional[BlockStatement] = None

    def __str__(self):
        result = f"if ({_str(self.condition)}) {_str(self.consequence)}"
        if self.alternative is not None:
            result += f" else {self.alternative}"
        return result
