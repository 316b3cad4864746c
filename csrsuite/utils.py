"""Utility functions for csrsuite"""

import getpass
import os
import secrets


def generate_tail(tail=5):
    """Returns random suffix"""
    return secrets.token_urlsafe(tail).translate(str.maketrans("", "", "-_")).lower()


def randomize(name, tail=5):
    "To avoid conflicts returns modified name with random suffix"
    return f"{name}-{generate_tail(tail)}"


def _whoami():
    """Returns username"""
    try:
        return getpass.getuser()
    # want to catch broad exception and fallback at any circumstance
    # pylint: disable=broad-except
    except Exception:
        return str(os.getuid())


def domain(name: str, suffix: str) -> str:
    """Returns randomized domain under the suffix, e.g. `csr-ab3de.example.com`"""
    return f"{randomize(name)}.{suffix.lstrip('.')}"
