from __future__ import annotations

import sys


def _exit_code(code: object) -> int:
    if code is None:
        return 0
    return code if isinstance(code, int) else 1


def cli() -> int:
    """Runs main() and always hands back an integer exit code."""
    try:
        from .main import main  # type: ignore
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Failed to import epub_zh_converter.main: {exc}\n")
        return 1

    try:
        return _exit_code(main())
    except SystemExit as se:
        return _exit_code(se.code)
    except Exception as exc:  # pragma: no cover
        sys.stderr.write(f"Unhandled error: {exc}\n")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(cli())
