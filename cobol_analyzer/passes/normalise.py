"""
UppercaseNormalisePass
======================

First step before any keyword scanning: turns raw COBOL source text into a
list of trimmed, upper-cased lines.

COBOL keywords are case-insensitive, so every later marker test compares
against upper-case text only.  Any line-ending convention is accepted: the
text is split on ``\\n`` and the trim removes the ``\\r`` left behind by
CRLF files.
"""
from __future__ import annotations

from typing import List, Optional


class UppercaseNormalisePass:
    """Upper-cases source text and splits it into trimmed lines."""

    def run(self, content: Optional[str]) -> List[str]:
        """
        Apply the pass to a whole source text.

        Parameters
        ----------
        content:
            Raw file content.  ``None`` is treated as an empty file.

        Returns
        -------
        List[str]
            One entry per physical line, upper-cased and stripped of leading
            and trailing whitespace.  Blank lines are kept as ``""``.
        """
        if not content:
            return []
        return [line.strip() for line in content.upper().split("\n")]


def normalise_lines(content: Optional[str]) -> List[str]:
    """Shorthand for ``UppercaseNormalisePass().run(content)``."""
    return UppercaseNormalisePass().run(content)
