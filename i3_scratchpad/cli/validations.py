"""Argument validation helpers."""

from typing import Optional, Sequence

from ..errors import ErrorCode, ScratchpadError


def validate_all_non_empty(args: Sequence[Optional[str]]) -> None:
    """Reject empty or whitespace-only positional arguments.

    Args:
        args: Positional arguments in order (None entries are skipped)

    Raises:
        ScratchpadError: Naming the first bad position (1-based)
    """
    for position, arg in enumerate(args, start=1):
        if arg is not None and not arg.strip():
            raise ScratchpadError(
                f"argument at position {position} is empty or whitespace",
                code=ErrorCode.INVALID_ARGUMENT,
                context={"position": position},
            )
