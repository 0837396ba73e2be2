# tests/helpers.py
import subprocess


def completed(returncode=0, stdout="", stderr="", args=None):
    """Build a CompletedProcess as returned by subprocess.run."""
    return subprocess.CompletedProcess(
        args=args or [], returncode=returncode, stdout=stdout, stderr=stderr
    )
