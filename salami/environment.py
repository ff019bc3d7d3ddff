from typing import Any, Dict, Optional

from salami.errors import ErrorKind, EvaluationError


class Environment:
    """A scope mapping names to runtime values.

    A child keeps a live reference to its parent. Closures capture the
    environment itself, so several function values may share one parent.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}

    def lookup(self, name: str) -> Optional[Any]:
        env: Optional[Environment] = self
        while env is not None:
            if name in env.values:
                return env.values[name]
            env = env.parent
        return None

    def get(self, name: str) -> Any:
        value = self.lookup(name)
        if value is None:
            raise EvaluationError(ErrorKind.UNBOUND_IDENTIFIER, f'undefined variable {name}')
        return value

    def declare(self, name: str, value: Any) -> Any:
        # always binds here, never in a parent: inner declarations shadow
        self.values[name] = value
        return value

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None
