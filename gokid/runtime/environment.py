"""Chained variable scopes. A Function keeps a reference to the Environment it was defined in, so captured variables
stay alive (and shared) for as long as the closure does.

Two ways of writing a name exist:
- set: declarations (let/const/var) and parameter binding. Always writes into this scope.
- assign: the `=` family of operators. Updates the nearest scope that already binds the name, so a closure can update
  the variables it captured. The search stops at a loop scope: assigning to a name the loop scope does not bind creates
  a binding local to the loop, which disappears with it. A name bound nowhere is bound in this scope.

Function scopes are not barriers: assigning inside a function body to a name bound where the function was defined
updates that binding. Only for-loop scopes create shadows.
"""


class Environment:
    """Bindings for one scope plus an optional reference to the enclosing scope."""

    def __init__(self, outer=None, loop=False):
        self.store = {}
        self.outer = outer
        self.loop = loop  # for-loop scope: assignments do not reach past it

    def enclosed(self, loop=False):
        """Returns a new child scope of this one."""
        return Environment(self, loop)

    def get(self, name):
        """Searches this scope, then the enclosing ones. Returns (value, found)."""
        env = self
        while env is not None:
            if name in env.store:
                return env.store[name], True
            env = env.outer
        return None, False

    def set(self, name, value):
        """Binds name in this scope only, even when an enclosing scope already binds it."""
        if not name:
            raise ValueError("cannot bind the empty name")
        self.store[name] = value
        return value

    def assign(self, name, value):
        """Rebinds name where it is already bound, see module docstring."""
        env = self
        while env is not None:
            if name in env.store or env.loop:
                return env.set(name, value)
            env = env.outer
        return self.set(name, value)

    def __contains__(self, name):
        return self.get(name)[1]

    def __repr__(self):
        depth = 0
        env = self.outer
        while env is not None:
            depth += 1
            env = env.outer
        return f"Environment(names={sorted(self.store)}, depth={depth}, loop={self.loop})"
