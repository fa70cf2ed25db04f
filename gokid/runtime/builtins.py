"""Native functions available to every GoKid program. Builtin names are looked up before any user binding, so they
cannot be shadowed.
"""

from gokid.runtime.objects import (Array, Builtin, Error, ErrorKind, Hash, Integer, NULL, String)


TYPE_NAMES = {
    "INTEGER": "integer",
    "FLOAT": "float",
    "STRING": "string",
    "BOOLEAN": "boolean",
    "NULL": "null",
    "ARRAY": "array",
    "HASH": "object",
    "FUNCTION": "function",
    "BUILTIN": "builtin",
}


def _arity_error(args, want):
    return Error.new(ErrorKind.WRONG_ARGUMENT_COUNT, f"want={want}, got={len(args)}")


def builtin_print(evaluator, args):
    """Writes the textual form of each argument, space separated, followed by a newline."""
    print(" ".join(arg.inspect() for arg in args), file=evaluator.output)
    return NULL


def builtin_len(evaluator, args):
    if len(args) != 1:
        return _arity_error(args, 1)

    arg, = args
    if isinstance(arg, String):
        return Integer(len(arg.value))
    elif isinstance(arg, Array):
        return Integer(len(arg.elements))
    elif isinstance(arg, Hash):
        return Integer(len(arg.pairs))
    return Error.new(ErrorKind.BUILTIN_ARGUMENT, f"len({arg.KIND})")


def builtin_type(evaluator, args):
    if len(args) != 1:
        return _arity_error(args, 1)
    return String(TYPE_NAMES.get(args[0].KIND, args[0].KIND.lower()))


BUILTINS = {
    "print": Builtin("print", builtin_print),
    "len": Builtin("len", builtin_len),
    "type": Builtin("type", builtin_type),
}
