"""Setup script for backward compatibility.

All project metadata lives in pyproject.toml. This setup.py is provided for
older tools that still invoke it directly.
"""

from setuptools import setup

setup()
