"""Lexical analysis for the GoKid language: converts raw source text into a lazily produced stream of tokens.

Token grammar, loosely:

```
<ident>   ::= (<letter> | "_")+                ; no digits inside identifiers
<int>     ::= <digit>+
<float>   ::= <digit>+ "." <digit>+            ; "1." lexes as INT 1 followed by DOT
<string>  ::= '"' <any char but '"'>* '"'      ; raw, no escape sequences
<comment> ::= "//" <any char but newline>*     ; skipped like whitespace
```

Two-character operators are recognized with one character of lookahead. A lone '&' or '|' is illegal, and so is a
string literal that reaches end of input before its closing quote.
"""

from gokid.lang.tokens import Token, TokenType, lookup_ident


WHITESPACE = frozenset(" \t\n\r")
LETTERS = frozenset("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_")
DIGITS = frozenset("0123456789")

SINGLE = {
    "=": TokenType.ASSIGN,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.ASTERISK,
    "/": TokenType.SLASH,
    "%": TokenType.MODULO,
    "!": TokenType.NOT,
    "<": TokenType.LT,
    ">": TokenType.GT,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    ".": TokenType.DOT,
    "?": TokenType.QUESTION,
    "@": TokenType.AT,
    "#": TokenType.HASH,
}

# first char -> {second char: token type}
DOUBLE = {
    "=": {"=": TokenType.EQ, ">": TokenType.ARROW},
    "+": {"=": TokenType.PLUS_ASSIGN},
    "-": {"=": TokenType.MINUS_ASSIGN},
    "*": {"*": TokenType.POWER, "=": TokenType.MULTIPLY_ASSIGN},
    "/": {"=": TokenType.DIVIDE_ASSIGN},
    "!": {"=": TokenType.NOT_EQ},
    "<": {"=": TokenType.LTE},
    ">": {"=": TokenType.GTE},
    "&": {"&": TokenType.AND},
    "|": {"|": TokenType.OR},
}


class Lexer:
    """Cursor over the source text. next_token can be called repeatedly; once input is exhausted it keeps returning
    the EOF token.
    """
    EOF = ""  # sentinel loaded into self.char past the end of input

    def __init__(self, source):
        self.source = source
        self.position = 0       # index of self.char
        self.read_position = 0  # index of the next char to load
        self.char = Lexer.EOF

        self.advance()

    def advance(self):
        """Moves the cursor one character forward."""
        if self.read_position >= len(self.source):
            self.char = Lexer.EOF
        else:
            self.char = self.source[self.read_position]
        self.position = self.read_position
        self.read_position += 1

    def peek(self):
        """Returns the character after self.char without consuming it."""
        if self.read_position >= len(self.source):
            return Lexer.EOF
        return self.source[self.read_position]

    def next_token(self):
        """Reads and returns the next token."""
        self.skip_ignored()

        char = self.char
        if char == Lexer.EOF:
            return Token(TokenType.EOF, "")

        if char == '"':
            return self.read_string()
        elif char in LETTERS:
            literal = self.read_identifier()
            return Token(lookup_ident(literal), literal)
        elif char in DIGITS:
            return self.read_number()

        pair = DOUBLE.get(char, {})
        if self.peek() in pair:
            self.advance()
            token = Token(pair[self.char], char + self.char)
        elif char in SINGLE:
            token = Token(SINGLE[char], char)
        else:
            token = Token(TokenType.ILLEGAL, char)

        self.advance()
        return token

    def skip_ignored(self):
        """Skips whitespace and // line comments."""
        while True:
            if self.char in WHITESPACE:
                self.advance()
            elif self.char == "/" and self.peek() == "/":
                while self.char not in (Lexer.EOF, "\n"):
                    self.advance()
            else:
                return

    def read_identifier(self):
        start = self.position
        while self.char in LETTERS:
            self.advance()
        return self.source[start:self.position]

    def read_number(self):
        """Reads an integer, reclassified as float only when '.' is followed by another digit."""
        start = self.position
        token_type = TokenType.INT

        while self.char in DIGITS:
            self.advance()

        if self.char == "." and self.peek() in DIGITS:
            token_type = TokenType.FLOAT
            self.advance()
            while self.char in DIGITS:
                self.advance()

        return Token(token_type, self.source[start:self.position])

    def read_string(self):
        start = self.position
        self.advance()
        while self.char not in (Lexer.EOF, '"'):
            self.advance()

        if self.char == Lexer.EOF:
            return Token(TokenType.ILLEGAL, self.source[start:])  # unterminated

        literal = self.source[start + 1:self.position]
        self.advance()  # closing quote
        return Token(TokenType.STRING, literal)

    def __iter__(self):
        """Yields every token up to, but not including, EOF."""
        token = self.next_token()
        while token.type != TokenType.EOF:
            yield token
            token = self.next_token()


def tokenize(source):
    """Returns the list of tokens in source, without the trailing EOF token."""
    return list(Lexer(source))
