#!/usr/bin/env python3
"""Compatibility shim for the face verification CLI entry point."""

import sys

from face_verify.cli import main

__all__ = ["main"]


if __name__ == "__main__":
    sys.exit(main())
