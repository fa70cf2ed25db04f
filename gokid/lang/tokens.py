"""Token kinds and the reserved word table shared by the lexer and the parser.

Token kinds are plain string tags, so error messages can print them directly ("expected next token to be ), got EOF
instead"). Operators and delimiters use their own spelling as tag, keywords use their upper-case name.
"""

from dataclasses import dataclass
from enum import Enum


class TokenType(str, Enum):
    """Closed enumeration of every token kind the lexer can produce."""

    ILLEGAL = "ILLEGAL"
    EOF = "EOF"

    IDENT = "IDENT"
    INT = "INT"
    FLOAT = "FLOAT"
    STRING = "STRING"

    ASSIGN = "="
    PLUS = "+"
    MINUS = "-"
    ASTERISK = "*"
    SLASH = "/"
    MODULO = "%"
    POWER = "**"

    PLUS_ASSIGN = "+="
    MINUS_ASSIGN = "-="
    MULTIPLY_ASSIGN = "*="
    DIVIDE_ASSIGN = "/="

    EQ = "=="
    NOT_EQ = "!="
    LT = "<"
    GT = ">"
    LTE = "<="
    GTE = ">="

    AND = "&&"
    OR = "||"
    NOT = "!"

    SEMICOLON = ";"
    COLON = ":"
    COMMA = ","
    DOT = "."
    QUESTION = "?"

    LPAREN = "("
    RPAREN = ")"
    LBRACE = "{"
    RBRACE = "}"
    LBRACKET = "["
    RBRACKET = "]"

    AT = "@"
    HASH = "#"
    ARROW = "=>"

    LET = "LET"
    CONST = "CONST"
    VAR = "VAR"
    FUNCTION = "FUNCTION"
    RETURN = "RETURN"

    IF = "IF"
    ELSE = "ELSE"
    WHILE = "WHILE"
    FOR = "FOR"
    BREAK = "BREAK"
    CONTINUE = "CONTINUE"
    SWITCH = "SWITCH"
    CASE = "CASE"
    DEFAULT = "DEFAULT"

    TRUE = "TRUE"
    FALSE = "FALSE"
    NULL = "NULL"
    STRING_TYPE = "STRING_TYPE"
    INT_TYPE = "INT_TYPE"
    FLOAT_TYPE = "FLOAT_TYPE"
    BOOL_TYPE = "BOOL_TYPE"
    ARRAY_TYPE = "ARRAY_TYPE"
    OBJECT_TYPE = "OBJECT_TYPE"

    CLASS = "CLASS"
    THIS = "THIS"
    NEW = "NEW"
    EXTENDS = "EXTENDS"
    SUPER = "SUPER"

    TRY = "TRY"
    CATCH = "CATCH"
    THROW = "THROW"
    FINALLY = "FINALLY"

    IMPORT = "IMPORT"
    EXPORT = "EXPORT"
    FROM = "FROM"
    AS = "AS"

    GLOBAL = "GLOBAL"
    LOCAL = "LOCAL"

    PRINT = "PRINT"
    LEN = "LEN"
    TYPE = "TYPE"

    def __str__(self):
        return self.value


KEYWORDS = {
    "let": TokenType.LET,
    "const": TokenType.CONST,
    "var": TokenType.VAR,
    "fn": TokenType.FUNCTION,
    "function": TokenType.FUNCTION,
    "return": TokenType.RETURN,

    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "for": TokenType.FOR,
    "break": TokenType.BREAK,
    "continue": TokenType.CONTINUE,
    "switch": TokenType.SWITCH,
    "case": TokenType.CASE,
    "default": TokenType.DEFAULT,

    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "null": TokenType.NULL,

    "string": TokenType.STRING_TYPE,
    "int": TokenType.INT_TYPE,
    "float": TokenType.FLOAT_TYPE,
    "bool": TokenType.BOOL_TYPE,
    "array": TokenType.ARRAY_TYPE,
    "object": TokenType.OBJECT_TYPE,

    "class": TokenType.CLASS,
    "this": TokenType.THIS,
    "new": TokenType.NEW,
    "extends": TokenType.EXTENDS,
    "super": TokenType.SUPER,

    "try": TokenType.TRY,
    "catch": TokenType.CATCH,
    "throw": TokenType.THROW,
    "finally": TokenType.FINALLY,

    "import": TokenType.IMPORT,
    "export": TokenType.EXPORT,
    "from": TokenType.FROM,
    "as": TokenType.AS,

    "global": TokenType.GLOBAL,
    "local": TokenType.LOCAL,

    "print": TokenType.PRINT,
    "len": TokenType.LEN,
    "type": TokenType.TYPE,
}


@dataclass(frozen=True)
class Token:
    """Smallest lexical unit: a kind tag and the literal text it was read from."""
    type: TokenType
    literal: str

    def __repr__(self):
        return f"Token({self.type.value}, {self.literal!r})"


def lookup_ident(word):
    """Returns the keyword tag for word, or IDENT if word is not reserved."""
    return KEYWORDS.get(word, TokenType.IDENT)
