"""CLI entry point: run `modlang file.mdl` or `python -m modlang file.mdl`."""

import sys
from pathlib import Path


def main(argv=None) -> int:
    import argparse
    import logging
    from .runtime.builtins import format_value
    from .runtime.session import Session
    from .shared.errors import LoadError, ModlangError, ModlangSourceError

    parser = argparse.ArgumentParser(prog="modlang", description="Run a modlang (.mdl) script.")
    parser.add_argument("file", type=Path, help="Path to .mdl source file")
    parser.add_argument("-L", "--library-path", dest="library_paths", action="append",
                        type=Path, default=[], metavar="DIR",
                        help="Directory searched for libraries (a::b -> DIR/a/b.mdl); repeatable")
    parser.add_argument("--exports", action="store_true",
                        help="Load the file as a module and print its exports instead of running it")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: WARNING)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(levelname)s %(name)s: %(message)s")

    path = args.file.resolve()
    if not path.exists():
        sys.stderr.write(f"modlang: error: file not found: {path}\n")
        return 1
    if not path.is_file():
        sys.stderr.write(f"modlang: error: not a file: {path}\n")
        return 1

    session = Session(library_paths=args.library_paths)
    try:
        if args.exports:
            exported = session.use(path)
            for name, value in exported.items():
                sys.stdout.write(f"{name} = {format_value(value)}\n")
        else:
            session.run_file(path)
    except LoadError as e:
        cause = e.__cause__
        if isinstance(cause, ModlangSourceError):
            sys.stderr.write(cause.format() + "\n")
        sys.stderr.write(f"modlang: error: {e.message}\n")
        return 1
    except ModlangSourceError as e:
        sys.stderr.write(e.format() + "\n")
        return 1
    except ModlangError as e:
        sys.stderr.write(f"modlang: error: {e}\n")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
