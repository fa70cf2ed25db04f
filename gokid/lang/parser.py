"""Recursive-descent parser for the GoKid language, using precedence climbing (Pratt parsing) for expressions.

Each token kind has at most one prefix parse rule and at most one infix parse rule. Parsing an expression at
precedence P keeps applying infix rules while the next token binds tighter than P. From loosest to tightest:

```
assignment  =  +=  -=  *=  /=     (right-associative, target must be an identifier or an index expression)
ternary     ? :
or          ||
and         &&
equality    ==  !=
relational  <  >  <=  >=
additive    +  -
product     *  /  %
power       **
prefix      -x  !x
call/index  f(x)  a[i]  a.b
```

The parser never raises on malformed input: problems are recorded in self.errors and the offending construct parses
as None, so callers must check errors before trusting the tree.
"""

from enum import IntEnum

from gokid.lang import ast
from gokid.lang.lexical import Lexer
from gokid.lang.tokens import KEYWORDS, TokenType


class Precedence(IntEnum):
    LOWEST = 1
    ASSIGN = 2
    TERNARY = 3
    OR = 4
    AND = 5
    EQUALS = 6
    LESSGREATER = 7
    SUM = 8
    PRODUCT = 9
    POWER = 10
    PREFIX = 11
    CALL = 12
    INDEX = 13


PRECEDENCES = {
    TokenType.ASSIGN: Precedence.ASSIGN,
    TokenType.PLUS_ASSIGN: Precedence.ASSIGN,
    TokenType.MINUS_ASSIGN: Precedence.ASSIGN,
    TokenType.MULTIPLY_ASSIGN: Precedence.ASSIGN,
    TokenType.DIVIDE_ASSIGN: Precedence.ASSIGN,
    TokenType.QUESTION: Precedence.TERNARY,
    TokenType.OR: Precedence.OR,
    TokenType.AND: Precedence.AND,
    TokenType.EQ: Precedence.EQUALS,
    TokenType.NOT_EQ: Precedence.EQUALS,
    TokenType.LT: Precedence.LESSGREATER,
    TokenType.GT: Precedence.LESSGREATER,
    TokenType.LTE: Precedence.LESSGREATER,
    TokenType.GTE: Precedence.LESSGREATER,
    TokenType.PLUS: Precedence.SUM,
    TokenType.MINUS: Precedence.SUM,
    TokenType.SLASH: Precedence.PRODUCT,
    TokenType.ASTERISK: Precedence.PRODUCT,
    TokenType.MODULO: Precedence.PRODUCT,
    TokenType.POWER: Precedence.POWER,
    TokenType.LPAREN: Precedence.CALL,
    TokenType.LBRACKET: Precedence.INDEX,
    TokenType.DOT: Precedence.INDEX,
}

INT64_MAX = 2 ** 63 - 1


class Parser:
    """Consumes a Lexer two tokens at a time (current + lookahead) and builds a Program."""

    def __init__(self, lexer):
        self.lexer = lexer
        self.errors = []

        self.cur_token = None
        self.peek_token = None

        self.statement_fns = {
            TokenType.LET: self.parse_let_statement,
            TokenType.CONST: self.parse_const_statement,
            TokenType.VAR: self.parse_var_statement,
            TokenType.RETURN: self.parse_return_statement,
            TokenType.FUNCTION: self.parse_function_statement,
            TokenType.WHILE: self.parse_while_statement,
            TokenType.FOR: self.parse_for_statement,
            TokenType.BREAK: self.parse_break_statement,
            TokenType.CONTINUE: self.parse_continue_statement,
            TokenType.SWITCH: self.parse_switch_statement,
            TokenType.TRY: self.parse_try_statement,
            TokenType.THROW: self.parse_throw_statement,
            TokenType.IMPORT: self.parse_import_statement,
            TokenType.EXPORT: self.parse_export_statement,
        }

        self.prefix_fns = {
            TokenType.IDENT: self.parse_identifier,
            TokenType.INT: self.parse_integer_literal,
            TokenType.FLOAT: self.parse_float_literal,
            TokenType.STRING: self.parse_string_literal,
            TokenType.TRUE: self.parse_boolean_literal,
            TokenType.FALSE: self.parse_boolean_literal,
            TokenType.NULL: self.parse_null_literal,
            TokenType.NOT: self.parse_prefix_expression,
            TokenType.MINUS: self.parse_prefix_expression,
            TokenType.LPAREN: self.parse_grouped_expression,
            TokenType.IF: self.parse_if_expression,
            TokenType.FUNCTION: self.parse_function_literal,
            TokenType.LBRACKET: self.parse_array_literal,
            TokenType.LBRACE: self.parse_object_literal,

            # builtins are reserved words but evaluate like identifiers
            TokenType.PRINT: self.parse_identifier,
            TokenType.LEN: self.parse_identifier,
            TokenType.TYPE: self.parse_identifier,
        }

        self.infix_fns = {token_type: self.parse_infix_expression for token_type in (
            TokenType.PLUS, TokenType.MINUS, TokenType.SLASH, TokenType.ASTERISK, TokenType.MODULO, TokenType.POWER,
            TokenType.EQ, TokenType.NOT_EQ, TokenType.LT, TokenType.GT, TokenType.LTE, TokenType.GTE,
            TokenType.AND, TokenType.OR,
        )}
        self.infix_fns.update({token_type: self.parse_assignment_expression for token_type in (
            TokenType.ASSIGN, TokenType.PLUS_ASSIGN, TokenType.MINUS_ASSIGN, TokenType.MULTIPLY_ASSIGN,
            TokenType.DIVIDE_ASSIGN,
        )})
        self.infix_fns.update({
            TokenType.LPAREN: self.parse_call_expression,
            TokenType.LBRACKET: self.parse_index_expression,
            TokenType.DOT: self.parse_dot_expression,
            TokenType.QUESTION: self.parse_ternary_expression,
        })

        # read two tokens, so cur_token and peek_token are both set
        self.next_token()
        self.next_token()

    # -----------------------------------------------------------------------------------------------------------------
    # token helpers

    def next_token(self):
        self.cur_token = self.peek_token
        self.peek_token = self.lexer.next_token()

    def cur_token_is(self, token_type):
        return self.cur_token.type == token_type

    def peek_token_is(self, token_type):
        return self.peek_token.type == token_type

    def expect_peek(self, token_type):
        """Advances if the next token is token_type, otherwise records an error. Returns whether it advanced."""
        if self.peek_token_is(token_type):
            self.next_token()
            return True
        self.peek_error(token_type)
        return False

    def peek_precedence(self):
        return PRECEDENCES.get(self.peek_token.type, Precedence.LOWEST)

    def cur_precedence(self):
        return PRECEDENCES.get(self.cur_token.type, Precedence.LOWEST)

    def skip_semicolon(self):
        if self.peek_token_is(TokenType.SEMICOLON):
            self.next_token()

    # -----------------------------------------------------------------------------------------------------------------
    # errors

    def peek_error(self, token_type):
        self.errors.append(f"expected next token to be {token_type}, got {self.peek_token.type} instead")

    def no_prefix_parse_fn_error(self, token):
        if token.type == TokenType.ILLEGAL:
            self.errors.append(f"illegal token '{token.literal}'")
        else:
            self.errors.append(f"no prefix parse function for {token.type} found")

    # -----------------------------------------------------------------------------------------------------------------
    # statements

    def parse_program(self):
        """Parses statements until EOF. Statements that failed to parse are kept as None."""
        program = ast.Program()

        while not self.cur_token_is(TokenType.EOF):
            program.statements.append(self.parse_statement())
            self.next_token()

        return program

    def parse_statement(self):
        parse_fn = self.statement_fns.get(self.cur_token.type, self.parse_expression_statement)
        return parse_fn()

    def _parse_binding(self, node_cls, requires_value=True):
        """Shared body of let/const/var: <keyword> <ident> "=" <expr>."""
        token = self.cur_token
        if not self.expect_peek(TokenType.IDENT):
            return None

        stmt = node_cls(token, ast.Identifier(self.cur_token, self.cur_token.literal))

        if requires_value or self.peek_token_is(TokenType.ASSIGN):
            if not self.expect_peek(TokenType.ASSIGN):
                return None
            self.next_token()
            stmt.value = self.parse_expression(Precedence.LOWEST)

        self.skip_semicolon()
        return stmt

    def parse_let_statement(self):
        return self._parse_binding(ast.LetStatement)

    def parse_const_statement(self):
        return self._parse_binding(ast.ConstStatement)

    def parse_var_statement(self):
        return self._parse_binding(ast.VarStatement, requires_value=False)

    def parse_return_statement(self):
        stmt = ast.ReturnStatement(self.cur_token)

        self.next_token()
        stmt.return_value = self.parse_expression(Precedence.LOWEST)

        self.skip_semicolon()
        return stmt

    def parse_expression_statement(self):
        stmt = ast.ExpressionStatement(self.cur_token, self.parse_expression(Precedence.LOWEST))
        self.skip_semicolon()
        return stmt

    def parse_function_statement(self):
        """`function name(...) {...}` declares a function; an anonymous literal is an ordinary expression."""
        if not self.peek_token_is(TokenType.IDENT):
            return self.parse_expression_statement()

        token = self.cur_token
        self.next_token()
        name = ast.Identifier(self.cur_token, self.cur_token.literal)

        literal = self._parse_function_rest(ast.FunctionLiteral(token, name=name))
        self.skip_semicolon()
        return ast.ExpressionStatement(token, literal)

    def parse_block_statement(self):
        """Parses from the current '{' up to its matching '}'."""
        block = ast.BlockStatement(self.cur_token)

        self.next_token()
        while not self.cur_token_is(TokenType.RBRACE) and not self.cur_token_is(TokenType.EOF):
            block.statements.append(self.parse_statement())
            self.next_token()

        if self.cur_token_is(TokenType.EOF):
            self.errors.append(f"expected next token to be {TokenType.RBRACE}, got {TokenType.EOF} instead")
            return None

        return block

    def _parse_condition_block(self, node):
        """Fills node.condition and node.body from `"(" <expr> ")" <block>`."""
        if not self.expect_peek(TokenType.LPAREN):
            return None

        self.next_token()
        node.condition = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TokenType.RPAREN) or not self.expect_peek(TokenType.LBRACE):
            return None

        node.body = self.parse_block_statement()
        return node

    def parse_while_statement(self):
        return self._parse_condition_block(ast.WhileStatement(self.cur_token))

    def parse_for_statement(self):
        stmt = ast.ForStatement(self.cur_token)

        if not self.expect_peek(TokenType.LPAREN):
            return None

        self.next_token()
        if not self.cur_token_is(TokenType.SEMICOLON):
            stmt.initializer = self.parse_statement()
            # declarations and expression statements swallow their own ';'
            if not self.cur_token_is(TokenType.SEMICOLON) and not self.expect_peek(TokenType.SEMICOLON):
                return None

        self.next_token()
        if not self.cur_token_is(TokenType.SEMICOLON):
            stmt.condition = self.parse_expression(Precedence.LOWEST)
            if not self.expect_peek(TokenType.SEMICOLON):
                return None

        self.next_token()
        if not self.cur_token_is(TokenType.RPAREN):
            stmt.increment = self.parse_expression(Precedence.LOWEST)
            if not self.expect_peek(TokenType.RPAREN):
                return None

        if not self.expect_peek(TokenType.LBRACE):
            return None

        stmt.body = self.parse_block_statement()
        return stmt

    def parse_break_statement(self):
        stmt = ast.BreakStatement(self.cur_token)
        self.skip_semicolon()
        return stmt

    def parse_continue_statement(self):
        stmt = ast.ContinueStatement(self.cur_token)
        self.skip_semicolon()
        return stmt

    def parse_switch_statement(self):
        stmt = ast.SwitchStatement(self.cur_token)

        if not self.expect_peek(TokenType.LPAREN):
            return None

        self.next_token()
        stmt.value = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TokenType.RPAREN) or not self.expect_peek(TokenType.LBRACE):
            return None

        self.next_token()
        while not self.cur_token_is(TokenType.RBRACE) and not self.cur_token_is(TokenType.EOF):
            if self.cur_token_is(TokenType.CASE):
                clause = self.parse_case_clause()
                if clause is not None:
                    stmt.cases.append(clause)
            elif self.cur_token_is(TokenType.DEFAULT):
                stmt.default = self.parse_default_clause()
            else:
                self.errors.append(f"unexpected token {self.cur_token.type} in switch body")
            self.next_token()

        if self.cur_token_is(TokenType.EOF):
            self.errors.append(f"expected next token to be {TokenType.RBRACE}, got {TokenType.EOF} instead")
            return None

        return stmt

    def parse_case_clause(self):
        clause = ast.CaseClause(self.cur_token)

        self.next_token()
        clause.value = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TokenType.COLON) or not self.expect_peek(TokenType.LBRACE):
            return None

        clause.body = self.parse_block_statement()
        return clause

    def parse_default_clause(self):
        clause = ast.DefaultClause(self.cur_token)

        if not self.expect_peek(TokenType.COLON) or not self.expect_peek(TokenType.LBRACE):
            return None

        clause.body = self.parse_block_statement()
        return clause

    def parse_try_statement(self):
        stmt = ast.TryStatement(self.cur_token)

        if not self.expect_peek(TokenType.LBRACE):
            return None
        stmt.body = self.parse_block_statement()

        if self.peek_token_is(TokenType.CATCH):
            self.next_token()
            stmt.catch = self.parse_catch_clause()

        if self.peek_token_is(TokenType.FINALLY):
            self.next_token()
            stmt.finally_ = self.parse_finally_clause()

        return stmt

    def parse_catch_clause(self):
        clause = ast.CatchClause(self.cur_token)

        if not self.expect_peek(TokenType.LPAREN) or not self.expect_peek(TokenType.IDENT):
            return None

        clause.parameter = ast.Identifier(self.cur_token, self.cur_token.literal)

        if not self.expect_peek(TokenType.RPAREN) or not self.expect_peek(TokenType.LBRACE):
            return None

        clause.body = self.parse_block_statement()
        return clause

    def parse_finally_clause(self):
        clause = ast.FinallyClause(self.cur_token)

        if not self.expect_peek(TokenType.LBRACE):
            return None

        clause.body = self.parse_block_statement()
        return clause

    def parse_throw_statement(self):
        stmt = ast.ThrowStatement(self.cur_token)

        self.next_token()
        stmt.value = self.parse_expression(Precedence.LOWEST)

        self.skip_semicolon()
        return stmt

    def parse_import_statement(self):
        stmt = ast.ImportStatement(self.cur_token)

        if not self.expect_peek(TokenType.STRING):
            return None
        stmt.path = ast.StringLiteral(self.cur_token, self.cur_token.literal)

        if self.peek_token_is(TokenType.AS):
            self.next_token()
            if not self.expect_peek(TokenType.IDENT):
                return None
            stmt.alias = ast.Identifier(self.cur_token, self.cur_token.literal)

        self.skip_semicolon()
        return stmt

    def parse_export_statement(self):
        stmt = ast.ExportStatement(self.cur_token)

        self.next_token()
        stmt.value = self.parse_statement()
        return stmt

    # -----------------------------------------------------------------------------------------------------------------
    # expressions

    def parse_expression(self, precedence):
        prefix = self.prefix_fns.get(self.cur_token.type)
        if prefix is None:
            self.no_prefix_parse_fn_error(self.cur_token)
            return None
        left = prefix()

        while not self.peek_token_is(TokenType.SEMICOLON) and precedence < self.peek_precedence():
            infix = self.infix_fns.get(self.peek_token.type)
            if infix is None:
                return left

            self.next_token()
            left = infix(left)

        return left

    def parse_identifier(self):
        return ast.Identifier(self.cur_token, self.cur_token.literal)

    def parse_integer_literal(self):
        literal = self.cur_token.literal
        try:
            value = int(literal)
            if value > INT64_MAX:
                raise ValueError(literal)
        except ValueError:
            self.errors.append(f'could not parse "{literal}" as integer')
            return None
        return ast.IntegerLiteral(self.cur_token, value)

    def parse_float_literal(self):
        literal = self.cur_token.literal
        try:
            value = float(literal)
        except ValueError:
            self.errors.append(f'could not parse "{literal}" as float')
            return None
        return ast.FloatLiteral(self.cur_token, value)

    def parse_string_literal(self):
        return ast.StringLiteral(self.cur_token, self.cur_token.literal)

    def parse_boolean_literal(self):
        return ast.BooleanLiteral(self.cur_token, self.cur_token_is(TokenType.TRUE))

    def parse_null_literal(self):
        return ast.NullLiteral(self.cur_token)

    def parse_prefix_expression(self):
        expression = ast.PrefixExpression(self.cur_token, self.cur_token.literal)

        self.next_token()
        expression.right = self.parse_expression(Precedence.PREFIX)

        return expression

    def parse_grouped_expression(self):
        self.next_token()

        expression = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TokenType.RPAREN):
            return None
        return expression

    def parse_if_expression(self):
        expression = ast.IfExpression(self.cur_token)

        if not self.expect_peek(TokenType.LPAREN):
            return None

        self.next_token()
        expression.condition = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TokenType.RPAREN) or not self.expect_peek(TokenType.LBRACE):
            return None

        expression.consequence = self.parse_block_statement()

        if self.peek_token_is(TokenType.ELSE):
            self.next_token()

            if not self.expect_peek(TokenType.LBRACE):
                return None
            expression.alternative = self.parse_block_statement()

        return expression

    def parse_function_literal(self):
        return self._parse_function_rest(ast.FunctionLiteral(self.cur_token))

    def _parse_function_rest(self, literal):
        """Fills in parameters and body of literal, starting just before its '('."""
        if not self.expect_peek(TokenType.LPAREN):
            return None

        literal.parameters = self.parse_function_parameters()
        if literal.parameters is None:
            return None

        if not self.expect_peek(TokenType.LBRACE):
            return None

        literal.body = self.parse_block_statement()
        return literal

    def parse_function_parameters(self):
        identifiers = []

        if self.peek_token_is(TokenType.RPAREN):
            self.next_token()
            return identifiers

        if not self.expect_peek(TokenType.IDENT):
            return None
        identifiers.append(ast.Identifier(self.cur_token, self.cur_token.literal))

        while self.peek_token_is(TokenType.COMMA):
            self.next_token()
            if not self.expect_peek(TokenType.IDENT):
                return None
            identifiers.append(ast.Identifier(self.cur_token, self.cur_token.literal))

        if not self.expect_peek(TokenType.RPAREN):
            return None

        return identifiers

    def parse_array_literal(self):
        token = self.cur_token
        elements = self.parse_expression_list(TokenType.RBRACKET)
        if elements is None:
            return None
        return ast.ArrayLiteral(token, elements)

    def parse_object_literal(self):
        literal = ast.ObjectLiteral(self.cur_token)

        while not self.peek_token_is(TokenType.RBRACE) and not self.peek_token_is(TokenType.EOF):
            self.next_token()
            key = self.parse_expression(Precedence.LOWEST)

            if not self.expect_peek(TokenType.COLON):
                return None

            self.next_token()
            value = self.parse_expression(Precedence.LOWEST)
            literal.pairs.append((key, value))

            if not self.peek_token_is(TokenType.RBRACE) and not self.expect_peek(TokenType.COMMA):
                return None

        if not self.expect_peek(TokenType.RBRACE):
            return None

        return literal

    def parse_infix_expression(self, left):
        expression = ast.InfixExpression(self.cur_token, left, self.cur_token.literal)

        precedence = self.cur_precedence()
        self.next_token()
        expression.right = self.parse_expression(precedence)

        return expression

    def parse_assignment_expression(self, target):
        if not isinstance(target, (ast.Identifier, ast.IndexExpression)):
            self.errors.append(f"expected identifier, got {type(target).__name__}")
            return None

        expression = ast.AssignmentExpression(self.cur_token, target, self.cur_token.literal)

        # one level looser than ourselves, so `a = b = c` groups as `a = (b = c)`
        precedence = self.cur_precedence()
        self.next_token()
        expression.value = self.parse_expression(precedence - 1)

        return expression

    def parse_call_expression(self, function):
        token = self.cur_token
        arguments = self.parse_expression_list(TokenType.RPAREN)
        if arguments is None:
            return None
        return ast.CallExpression(token, function, arguments)

    def parse_index_expression(self, left):
        expression = ast.IndexExpression(self.cur_token, left)

        self.next_token()
        expression.index = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TokenType.RBRACKET):
            return None
        return expression

    def parse_dot_expression(self, left):
        """`obj.name`. Reserved words are accepted as names, so `h.type` reads the "type" key."""
        expression = ast.DotExpression(self.cur_token, left)

        if KEYWORDS.get(self.peek_token.literal) == self.peek_token.type:
            self.next_token()
        elif not self.expect_peek(TokenType.IDENT):
            return None

        expression.property = ast.Identifier(self.cur_token, self.cur_token.literal)
        return expression

    def parse_ternary_expression(self, condition):
        expression = ast.TernaryExpression(self.cur_token, condition)

        self.next_token()
        expression.consequence = self.parse_expression(Precedence.LOWEST)

        if not self.expect_peek(TokenType.COLON):
            return None

        self.next_token()
        expression.alternative = self.parse_expression(Precedence.ASSIGN)

        return expression

    def parse_expression_list(self, end):
        """Parses comma separated expressions up to the end token. Returns None on a missing terminator."""
        items = []

        if self.peek_token_is(end):
            self.next_token()
            return items

        self.next_token()
        items.append(self.parse_expression(Precedence.LOWEST))

        while self.peek_token_is(TokenType.COMMA):
            self.next_token()
            self.next_token()
            items.append(self.parse_expression(Precedence.LOWEST))

        if not self.expect_peek(end):
            return None

        return items


def parse(source):
    """Parses source into a Program. Returns (program, errors); a non-empty errors list means the program is unusable."""
    parser = Parser(Lexer(source))
    program = parser.parse_program()
    return program, parser.errors
