import re
from typing import Optional

PIN_PATTERN = re.compile(r"<b[^>]*>(\d+)</b>")


def extract_pin(body_html: str) -> Optional[str]:
    match = PIN_PATTERN.search(body_html)
    return match.group(1) if match else None
