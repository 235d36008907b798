"""Local file access for uploads."""

from pathlib import Path

from envsh.errors import FileReadError


def read_bytes(path: Path) -> bytes:
    """Read a whole file, mapping OS failures to ``FileReadError``."""
    try:
        with open(path, "rb") as f:
            return f.read()
    except FileNotFoundError:
        raise FileReadError(path, "no such file")
    except IsADirectoryError:
        raise FileReadError(path, "is a directory")
    except PermissionError:
        raise FileReadError(path, "permission denied")
    except OSError as e:
        raise FileReadError(path, e.strerror or str(e))
