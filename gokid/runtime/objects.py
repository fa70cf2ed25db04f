"""Runtime value model for the GoKid language.

Every value the evaluator produces is an Object. Besides the user-visible values (integers, floats, strings, booleans,
null, arrays, hashes, functions, builtins) there are internal control signals (ReturnValue, Break, Continue, Error)
which travel through ordinary return values until the construct that consumes them is reached.

NULL, TRUE and FALSE are process-wide singletons and are compared by identity.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


INT64_MIN = -2 ** 63
INT64_MASK = 2 ** 64 - 1

FNV_OFFSET = 0xcbf29ce484222325
FNV_PRIME = 0x100000001b3


def wrap_int64(value):
    """Wraps a Python int into signed 64-bit range."""
    value &= INT64_MASK
    return value + 2 * INT64_MIN if value > -INT64_MIN - 1 else value


def fnv1a(text):
    """64-bit FNV-1a hash of text's UTF-8 bytes."""
    result = FNV_OFFSET
    for byte in text.encode("utf-8"):
        result ^= byte
        result = (result * FNV_PRIME) & INT64_MASK
    return result


class Object(ABC):
    """Superclass of every runtime value."""
    KIND = None

    @abstractmethod
    def inspect(self):
        """Textual form of this value, as printed by the shell and by print()."""

    def __str__(self):
        return self.inspect()

    def __repr__(self):
        return f"{type(self).__name__}({self.inspect()!r})"


@dataclass(frozen=True)
class HashKey:
    """Fixed-size key a Hashable value reduces to: its kind tag plus a 64-bit value."""
    kind: str
    value: int


class Hashable(ABC):
    """Capability of values that can be used as Hash keys."""

    @abstractmethod
    def hash_key(self):
        """Returns a HashKey that is equal for equal values of the same kind."""


class Integer(Object, Hashable):
    KIND = "INTEGER"

    def __init__(self, value):
        self.value = wrap_int64(value)

    def inspect(self):
        return str(self.value)

    def hash_key(self):
        return HashKey(self.KIND, self.value & INT64_MASK)


class Float(Object):
    KIND = "FLOAT"

    def __init__(self, value):
        self.value = float(value)

    def inspect(self):
        return repr(self.value)


class String(Object, Hashable):
    KIND = "STRING"

    def __init__(self, value):
        self.value = value

    def inspect(self):
        return self.value

    def hash_key(self):
        return HashKey(self.KIND, fnv1a(self.value))


class Boolean(Object, Hashable):
    KIND = "BOOLEAN"

    def __init__(self, value):
        self.value = value

    def inspect(self):
        return "true" if self.value else "false"

    def hash_key(self):
        return HashKey(self.KIND, 1 if self.value else 0)


class Null(Object):
    KIND = "NULL"

    def inspect(self):
        return "null"


NULL = Null()
TRUE = Boolean(True)
FALSE = Boolean(False)


def native_bool(value):
    """Maps a Python truth value onto the TRUE/FALSE singletons."""
    return TRUE if value else FALSE


class Array(Object):
    """Ordered, index-mutable sequence. Shared by reference between every variable that holds it."""
    KIND = "ARRAY"

    def __init__(self, elements):
        self.elements = elements

    def inspect(self):
        return "[" + ", ".join(element.inspect() for element in self.elements) + "]"


@dataclass
class HashPair:
    key: Object
    value: Object


class Hash(Object):
    """Mapping from HashKey to the original key object and its value. Shared by reference like Array."""
    KIND = "HASH"

    def __init__(self, pairs=None):
        self.pairs = pairs if pairs is not None else {}

    def get(self, key):
        """Returns the value stored under the Hashable key, or None."""
        pair = self.pairs.get(key.hash_key())
        return pair.value if pair is not None else None

    def set(self, key, value):
        self.pairs[key.hash_key()] = HashPair(key, value)

    def inspect(self):
        return "{" + ", ".join(f"{pair.key.inspect()}: {pair.value.inspect()}" for pair in self.pairs.values()) + "}"


class Function(Object):
    """User function: parameters and body from the syntax tree plus the Environment captured at definition."""
    KIND = "FUNCTION"

    def __init__(self, parameters, body, env, name=None):
        self.parameters = parameters
        self.body = body
        self.env = env
        self.name = name

    def inspect(self):
        params = ", ".join(param.value for param in self.parameters)
        name = f" {self.name}" if self.name else ""
        return f"<function{name}({params})>"


class Builtin(Object):
    """Native function. fn receives the evaluator and the list of evaluated arguments."""
    KIND = "BUILTIN"

    def __init__(self, name, fn):
        self.name = name
        self.fn = fn

    def inspect(self):
        return f"<builtin {self.name}>"


# ---------------------------------------------------------------------------------------------------------------------
# control signals

class ReturnValue(Object):
    KIND = "RETURN_VALUE"

    def __init__(self, value):
        self.value = value

    def inspect(self):
        return self.value.inspect()


class Break(Object):
    KIND = "BREAK"

    def inspect(self):
        return "break"


class Continue(Object):
    KIND = "CONTINUE"

    def inspect(self):
        return "continue"


BREAK = Break()
CONTINUE = Continue()


class ErrorKind(Enum):
    IDENTIFIER_NOT_FOUND = "identifier not found"
    TYPE_MISMATCH = "type mismatch"
    UNKNOWN_OPERATOR = "unknown operator"
    DIVISION_BY_ZERO = "division by zero"
    UNUSABLE_AS_HASH_KEY = "unusable as hash key"
    INDEX_NOT_SUPPORTED = "index operator not supported"
    INDEX_OUT_OF_RANGE = "index out of range"
    NOT_A_FUNCTION = "not a function"
    WRONG_ARGUMENT_COUNT = "wrong number of arguments"
    BUILTIN_ARGUMENT = "argument not supported"
    PROPERTY_NOT_SUPPORTED = "property access not supported"
    UNKNOWN_ASSIGNMENT_OPERATOR = "unknown assignment operator"
    UNKNOWN_NODE_TYPE = "unknown node type"
    UNSUPPORTED_STATEMENT = "unsupported statement"
    THROWN = "thrown"


class Error(Object):
    """Runtime error as a value. value holds the thrown object for errors raised by `throw`."""
    KIND = "ERROR"

    def __init__(self, message, kind, value=None):
        self.message = message
        self.kind = kind
        self.value = value

    @classmethod
    def new(cls, kind, detail=None):
        """Builds the message as '<kind>: <detail>', or just '<kind>' without detail."""
        message = kind.value if detail is None else f"{kind.value}: {detail}"
        return cls(message, kind)

    def inspect(self):
        return self.message


SIGNALS = (ReturnValue, Error, Break, Continue)


def is_error(obj):
    return isinstance(obj, Error)
