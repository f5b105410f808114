"""
Helpers for converting methods into scripts, and filling in arguments with API clients.
"""

from functools import wraps
from inspect import cleandoc, signature
import logging
import sys
from typing import Any, Callable, cast, Dict, List, Optional, Union

from docopt import docopt

from .. import config
from ..plumbing.cc import CloudController


DocOptArgs = Dict[str, Union[bool, str, List[str], None]]

NoneType = type(None)


ENTRYPOINTS: List[str] = []


LOG = logging.getLogger(__name__)


def connect() -> CloudController:
    """
    Create an authenticated API client from environment settings, or exit if they're incomplete.
    """
    try:
        settings = config.load()
    except RuntimeError as ex:
        error(str(ex), exit=1)
    return config.connect(settings)


def _lookup(opts: DocOptArgs, name: str) -> Union[bool, str, List[str], None]:
    for key in (name.upper(), "<{}>".format(name), "--{}".format(name.replace("_", "-"))):
        if key in opts:
            return opts[key]
    raise RuntimeError("Missing argument {!r}".format(name))


def entrypoint(fn: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator to make an entrypoint out of a generic function.

    This uses `docopt` to parse arguments according to the method docstring, and will be formatted
    with `{script}` set to the script name.  At minimum, it should contain `Usage: {script}`.

    Functions may optionally accept arguments, but they must be annotated with a recognised type in
    order to be filled in.  The following types are fixed and always available:

    - `DocOptArgs` (a `dict` of input parameters parsed from the usage line)
    - `CloudController` (an API client authenticated using environment settings)

    Parameters annotated as `str` (or `Optional[str]`) are filled in from an input parameter
    matching the variable name, either in upper case, surrounded by arrow brackets, or as a long
    option (e.g. `NAME`, `<name>` or `--name`).

    An example function:

        @entrypoint
        def apply(client: CloudController, name: str):
            \"""
            Reconcile the named resource.

            Usage: {script} NAME
            \"""

    Any non-`None` return value, usually a `Result`, is printed on completion.  The wrapper itself
    returns `None`, as console scripts pass its return value to `sys.exit`.
    """
    label = "credhub-setup-{}-{}".format(fn.__module__.rsplit(".", 1)[-1],
                                         fn.__qualname__).replace("_", "-")

    @wraps(fn)
    def wrap(opts: Optional[DocOptArgs] = None):
        extra: Dict[str, Any] = {}
        if opts is None:
            script = "{} [--debug]".format(label)
            doc = cleandoc(fn.__doc__.format(script=script))
            opts = docopt(doc)
        opts = dict(opts)
        if opts.pop("--debug", False):
            logging.basicConfig(level=logging.DEBUG)
        for param in signature(fn).parameters.values():
            name = param.name
            cls = param.annotation
            if cls is DocOptArgs:
                extra[name] = opts
                continue
            elif cls is CloudController:
                extra[name] = connect()
                continue
            optional = False
            # Unpick Optional[X] by reading the type object arguments and removing type(None).
            if getattr(cls, "__origin__", None) is Union:
                cls_args = cls.__args__
                if NoneType in cls_args:
                    optional = True
                    cls = Union[tuple(arg for arg in cls_args if arg is not NoneType)]
            if cls is not str:
                raise RuntimeError("Bad parameter {!r} type {!r}".format(name, cls))
            value = _lookup(opts, name)
            if value is None and not optional:
                error("Missing value for parameter {!r}".format(name), exit=1)
            extra[name] = cast(Optional[str], value)
        LOG.debug("Running %s: %r", label, opts)
        result = fn(**extra)
        if result is not None:
            print(result)
    wrap.__doc__ = wrap.__doc__.format(script=label)
    # Create a console script line for setup.
    target = "{}:{}".format(fn.__module__, fn.__qualname__)
    ENTRYPOINTS.append("{}={}".format(label, target))
    return wrap


def error(msg: Optional[str] = None, *, exit: Optional[int] = None, colour: Optional[str] = None):
    """
    Print an error message and/or exit.
    """
    if msg:
        colour = colour or ("1" if exit else "3")
        print("\033[9{}m{}\033[0m".format(colour, msg), file=sys.stderr)
    if exit is not None:
        sys.exit(exit)
