"""Runs .gokid files or the interactive shell, using the error handling context manager. Called from the gokid
console script.
"""

import argparse
import sys

from gokid.lang.error import ErrorHandler, GenericException
from gokid.lang.session import Session
from gokid.lang.shell import Shell


VERSION = "1.0.0"
COMMANDS = ("run", "repl", "interactive", "version", "help")


def confirm(error_handler, path):
    """Asks before running a file without the .gokid extension. Returns whether to go on."""
    error_handler.warn("'{}' does not have the '{}' extension", [path, Session.EXTENSION])
    try:
        response = input("continue anyway? (y/N): ")
    except EOFError:
        response = ""
    return response.strip().lower() in ("y", "yes")


def build_parser():
    parser = argparse.ArgumentParser(prog="gokid", description="GoKid language interpreter")
    parser.add_argument("command", nargs="?",
                        help="one of 'run FILE', 'repl', 'version', 'help', or a file to run (if empty, goes to "
                             "command-line mode)")
    parser.add_argument("file", nargs="?", help="file to run with the 'run' command")
    parser.add_argument("--tokens", action="store_true", help="print the token stream of the program")
    parser.add_argument("--ast", action="store_true", help="print the syntax tree of the program")
    parser.add_argument("-y", "--yes", action="store_true",
                        help=f"run files without the '{Session.EXTENSION}' extension without asking")
    parser.add_argument("--recursion-limit", type=int, default=Session.RECURSION_LIMIT,
                        help="Python recursion limit while evaluating (default: %(default)s)")
    return parser


def main(argv=None):
    """Runs the GoKid interpreter. Called from the gokid console script."""
    with ErrorHandler() as error_handler:
        parser = build_parser()
        args = parser.parse_args(argv)

        command, path = args.command, args.file
        if command not in COMMANDS:
            command, path = "run", args.command

        if command == "version":
            print(f"GoKid language interpreter v{VERSION}")
            return
        elif command == "help":
            parser.print_help()
            return
        elif command == "run" and path is None and args.command is not None:
            raise GenericException("please specify a '{}' file to run", Session.EXTENSION)

        sys.setrecursionlimit(max(args.recursion_limit, 100))
        options = {"show_tokens": args.tokens, "show_ast": args.ast}

        if command == "run" and path is not None:
            if not path.endswith(Session.EXTENSION) and not args.yes and not confirm(error_handler, path):
                print("execution cancelled.")
                return

            Session(error_handler, path, cmd_line=False, **options).run()

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, **options)).cmdloop()


if __name__ == "__main__":
    main()
