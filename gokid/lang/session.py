"""Session control for the GoKid language. Runs the interpreter pipeline (lexer, parser, evaluator) on a source file
or, in command-line mode, on the lines typed into the shell.
"""

import sys

from gokid.lang.error import GenericException, ParseError
from gokid.lang.lexical import tokenize
from gokid.lang.parser import parse
from gokid.runtime.environment import Environment
from gokid.runtime.evaluator import Evaluator
from gokid.runtime.objects import is_error


class Session:
    """Governs a GoKid session. All code run in one session shares a single global Environment."""
    SH_FILE = "<in>"          # command-line interpreter filename
    EXTENSION = ".gokid"      # expected suffix of source files
    RECURSION_LIMIT = 10000   # Python recursion limit while evaluating

    def __init__(self, error_handler, path, cmd_line, output=None, show_tokens=False, show_ast=False):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path            # used for error messages
        self.cmd_line = cmd_line    # whether or not in command-line mode
        self.output = output if output is not None else sys.stdout

        self.show_tokens = show_tokens  # print the token stream before parsing
        self.show_ast = show_ast        # print the syntax tree before evaluating

        self.env = Environment()
        self.evaluator = Evaluator(self.output)
        self.source = None

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r", encoding="utf-8") as file:
                    self.source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path)
            except UnicodeDecodeError:
                raise GenericException("'{}' could not be decoded as UTF-8", path)

        elif not cmd_line:
            raise GenericException("'<in>' is a reserved filename")

    def execute(self, source, line_num=None):
        """Parses and evaluates source in the session Environment and returns the resulting Object. Raises ParseError
        if source does not parse, and GenericException if evaluation ends in a runtime error.
        """
        if line_num is not None:
            self.error_handler.register_line(self.path, source, line_num)  # in case error is raised

        if self.show_tokens:
            for token in tokenize(source):
                print(repr(token), file=self.output)

        program, errors = parse(source)
        if errors:
            raise ParseError(errors, None if self.cmd_line else self.path)

        if self.show_ast:
            print(program.display(), file=self.output)

        result = self.evaluator.eval(program, self.env)
        if is_error(result):
            raise GenericException("runtime error: {}", result.message)

        if line_num is not None:
            self.error_handler.remove_line(self.path)  # error was not raised
        return result

    def run(self):
        """Runs the file this session was opened with."""
        if self.source is None:
            raise GenericException("no file to run in command-line mode")
        return self.execute(self.source)
