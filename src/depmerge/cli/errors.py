"""Translation of depmerge errors into CLI exits."""

from collections.abc import Callable
from functools import wraps
from typing import Any, NoReturn

import click

from depmerge.cli.output import user_output
from depmerge.core.errors import DepmergeError


def exit_with_error(error: DepmergeError | str) -> NoReturn:
    """Print a red "Error:" line and exit with status 1.

    Raises:
        SystemExit: Always (with exit code 1)
    """
    user_output(click.style("Error: ", fg="red") + str(error))
    raise SystemExit(1)


def handle_errors(func: Callable) -> Callable:
    """Decorator turning a propagated DepmergeError into `Error: <cause>` and exit 1.

    Anything that is not a DepmergeError is a bug and keeps its traceback.

    Example:
        @click.command("abort")
        @click.pass_obj
        @handle_errors
        def abort_cmd(ctx: DepmergeContext) -> None:
            ...
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except DepmergeError as e:
            exit_with_error(e)

    return wrapper
