"""Extraction of the <output>...</output> block from model responses."""

import re
from typing import Optional

OUTPUT_PATTERN = re.compile(r"<output>\n*(.*?)\n*</output>", re.DOTALL)


def extract_output(text: str) -> Optional[str]:
    """Return the text inside the first <output> block, or None.

    Newlines directly after the opening tag and before the closing tag are
    dropped; everything else is returned as-is.
    """
    match = OUTPUT_PATTERN.search(text)
    if match is None:
        return None
    return match.group(1)
