import re
import string
from datetime import datetime
from typing import List, Optional

# NLP
from nltk.tokenize import WhitespaceTokenizer
from dateutil import parser as date_parser

from cyberbot.config import DATE_DAYFIRST

_tokenizer = WhitespaceTokenizer()


def tokenize_words(text: str) -> List[str]:
    """Splits on whitespace and trims punctuation off each token; empty tokens are dropped."""
    tokens = (t.strip(string.punctuation) for t in _tokenizer.tokenize(text))
    return [t for t in tokens if t]


def is_valid_name(name: str) -> bool:
    if not name or not name.strip():
        return False
    return all(c.isalpha() or c == ' ' for c in name)


def first_int(text: str) -> Optional[int]:
    """None when there are no digits. Raises ValueError for a digit run too long for int()."""
    m = re.search(r"\d+", text)
    if not m:
        return None
    return int(m.group(0))


def parse_date(token: str, dayfirst: bool = DATE_DAYFIRST) -> Optional[datetime]:
    # Accepts 5/11/2026, 05-11-26, etc.; anything dateutil rejects is treated as "no date"
    try:
        return date_parser.parse(token, dayfirst=dayfirst)
    except (ValueError, OverflowError):
        return None
