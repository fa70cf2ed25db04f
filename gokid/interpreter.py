"""GoKid interpreter core. Source text goes through three stages:
    1. Lexer (gokid/lang/lexical.py): produces tokens, see gokid/lang/tokens.py for the token kinds
    2. Parser (gokid/lang/parser.py): builds the syntax tree of gokid/lang/ast.py, collecting errors instead of raising
    3. Evaluator (gokid/runtime/evaluator.py): walks the tree in an Environment and returns a runtime Object
"""

from gokid.lang import lexical, parser
from gokid.lang.error import ParseError
from gokid.runtime.environment import Environment
from gokid.runtime.evaluator import Evaluator


def tokenize(source):
    """Returns the tokens of source, without the trailing EOF token."""
    return lexical.tokenize(source)


def parse(source):
    """Returns (program, errors). The program must not be evaluated unless errors is empty."""
    return parser.parse(source)


def evaluate(program, env=None, output=None):
    """Evaluates program in env (a fresh global Environment if None) and returns the resulting Object. A runtime error
    is returned as an Error object, not raised.
    """
    if env is None:
        env = Environment()
    return Evaluator(output).eval(program, env)


def run(source, env=None, output=None):
    """Parses and evaluates source. Raises ParseError if source does not parse."""
    program, errors = parse(source)
    if errors:
        raise ParseError(errors)
    return evaluate(program, env, output)
