"""
Minimal runnable example: temp files removed at exit in reverse order, one removal cancelled.
Run with: python examples/minimal/cleanup_on_exit.py (from repo root).
"""
import os
import tempfile

import atexitreg


def remove_file(path):
    print(f"removing {path}")
    os.remove(path)


@atexitreg.exit_scope
def main():
    keep = None
    for name in ("first", "second", "third"):
        fd, path = tempfile.mkstemp(prefix=f"atexitreg-{name}-")
        os.close(fd)
        handle = atexitreg.register(remove_file, path)
        if name == "second":
            keep = (handle, path)
    # Keep the second file after all.
    atexitreg.unregister(keep[0])
    print(f"keeping {keep[1]}")


if __name__ == "__main__":
    main()
