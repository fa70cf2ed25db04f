"""Handles interactive/command-line mode for the GoKid interpreter. Uses cmd as backend."""

import cmd

from gokid.lang.lexical import tokenize
from gokid.lang.tokens import TokenType


BRACKETS = ((TokenType.LBRACE, TokenType.RBRACE), (TokenType.LBRACKET, TokenType.RBRACKET),
            (TokenType.LPAREN, TokenType.RPAREN))


class Shell(cmd.Cmd):
    """GoKid interpreter shell."""
    intro = ("\n"
             "    ____       _  ___     _\n"
             "   / ___| ___ | |/ (_) __| |\n"
             "  | |  _ / _ \\| ' /| |/ _` |\n"
             "  | |_| | (_) | . \\| | (_| |\n"
             "   \\____|\\___/|_|\\_\\_|\\__,_|\n"
             "\n"
             "Welcome to the GoKid programming language!\n"
             "Type 'help' for more information, 'exit' to quit.")
    prompt = ">> "
    secondary_prompt = ".. "  # used for line continuations
    _tmp_prompt = ">> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess

        self._tmp_line = ""
        self.line_num = 0

    @staticmethod
    def is_incomplete(line):
        """Whether line leaves a brace, bracket or parenthesis open, so input continues on the next line. Brackets
        inside string literals do not count, and an unterminated string ends the input so the parser can report it.
        """
        tokens = tokenize(line)
        if any(token.type == TokenType.ILLEGAL and token.literal.startswith('"') for token in tokens):
            return False

        kinds = [token.type for token in tokens]
        return any(kinds.count(open_) > kinds.count(close) for open_, close in BRACKETS)

    def default(self, line):
        """Executes arbitrary GoKid code and prints the result."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line = self._tmp_line + line + "\n"

            if self.is_incomplete(line):
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            result = self.sess.execute(line, self.line_num)
            print(result.inspect(), file=self.sess.output)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the GoKid interpreter!\n\n"
              "GoKid is a small dynamically typed scripting language. It supports integers, \n"
              "floats, strings, booleans, arrays and objects, let/const/var declarations, \n"
              "if/else, while and for loops, switch, try/catch/finally, and first-class \n"
              "functions with closures. Built-ins: print(), len(), type().\n\n"
              "Try it out by typing 'let add = fn(a, b) { a + b };'. This binds a function \n"
              "to the name 'add'. Next, try typing 'add(1, 2)', which gives 3.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
