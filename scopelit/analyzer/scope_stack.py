"""Lexical scope tracking for identifier visibility."""
from typing import Dict, List, Tuple


class ScopeStackError(RuntimeError):
    """Raised when scope push/pop calls are unbalanced (a walker bug)."""


class ScopeStack:
    """Ordered stack of scope frames, file scope at the bottom.

    Each frame is an insertion-ordered set of names (a dict with ``None``
    values). Shadowing never hides anything: a name declared in an inner
    frame stays visible after the frame is popped if an outer frame also
    declared it, and both copies count as visible while the inner frame
    is open.
    """

    def __init__(self):
        """Create a stack holding only the file-level frame."""
        self._frames: List[Dict[str, None]] = [{}]

    def __len__(self) -> int:
        return len(self._frames)

    @property
    def depth(self) -> int:
        """Number of currently open frames (file frame included)."""
        return len(self._frames)

    def push(self):
        """Open an empty frame on top of the stack."""
        self._frames.append({})

    def pop(self):
        """Discard the innermost frame.

        Raises:
            ScopeStackError: If no frame is open
        """
        if not self._frames:
            raise ScopeStackError("pop() on empty scope stack: unbalanced push/pop")
        self._frames.pop()

    def declare(self, name: str):
        """Add a name to the innermost frame. Declaring twice is a no-op.

        Raises:
            ScopeStackError: If no frame is open
        """
        if not self._frames:
            raise ScopeStackError(f"declare({name!r}) with no open scope")
        self._frames[-1].setdefault(name, None)

    def visible_names(self) -> Tuple[str, ...]:
        """Return every visible name once, innermost frame first.

        Within a frame names keep declaration order, so the result is
        deterministic and doubles as the match tie-break order.
        """
        seen: Dict[str, None] = {}
        for frame in reversed(self._frames):
            for name in frame:
                seen.setdefault(name, None)
        return tuple(seen)

    def is_visible(self, name: str) -> bool:
        """Check whether any open frame declares ``name``."""
        return any(name in frame for frame in self._frames)
