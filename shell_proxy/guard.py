from __future__ import annotations

# NUL can never appear in an argv word, so this key cannot collide with a
# command or subcommand name.
RESERVED_KEY = "\x00chain"


class ReservedKeyViolation(AttributeError):
    pass


def is_reserved(name: object) -> bool:
    return name == RESERVED_KEY


def is_exempt(name: str) -> bool:
    """True for names that must never become chain segments.

    Underscore names are where Python keeps its reflection and debugging
    hooks (``__wrapped__``, ``__signature__``, ``_repr_html_``, ...). They
    resolve against the base object like ordinary data.
    """
    return name.startswith("_")


def check_writable(name: str, *, action: str) -> None:
    if is_reserved(name):
        raise ReservedKeyViolation(f"Cannot {action} reserved attribute {name!r}")
