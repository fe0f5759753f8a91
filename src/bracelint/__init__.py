"""
bracelint - Whitespace lint rules for brace-delimited manifests

Checks (and optionally fixes) the spacing around opening braces and in
class headers by walking a lossless token stream.
"""

__version__ = "0.1.0"
__author__ = "bracelint contributors"

from bracelint.parser import TokenStream, TokenType
from bracelint.tools import Linter, LintOptions
