"""
Appetit - a small automation scripting language.

A line-oriented interpreter for scripts made of statements such as:
- File and directory management (copy, move, delete, make)
- Archiving (zipfile, zipdirectory)
- Downloads
- Variables (set, ask) with #name substitution
"""

__version__ = "1.0.0"

LANG_NAME = "Appetit"

# The language version is a single integer; minver statements are checked
# against it.
LANG_VERSION = 1
