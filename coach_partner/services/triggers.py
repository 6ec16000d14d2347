# Copyright (c) 2026 Heureum AI. All rights reserved.

"""
Message text triggers.

Pattern checks run on every incoming client message:
  - sign-off detection starts a session-level synthesis
  - coach mentions are flagged and suppress the AI reply
"""

import re
from typing import List, Pattern

from coach_partner.config import settings

GOODBYE_PATTERNS: List[Pattern[str]] = [
    re.compile(
        r"\b(bye|goodbye|goodnight|see you|talk later|gotta go|have to go|signing off|"
        r"logging off|heading out|ttyl|cya|later)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(thanks?|thank you).*(bye|later|now)\b", re.IGNORECASE),
    re.compile(r"\b(that'?s all|all for now|done for today|wrap up|wrapping up)\b", re.IGNORECASE),
]


def _mention_patterns(coach_name: str) -> List[Pattern[str]]:
    names = {"coach", "mentor", coach_name.strip().lower()}
    return [re.compile(rf"@{re.escape(name)}\b", re.IGNORECASE) for name in sorted(names) if name]


COACH_MENTION_PATTERNS: List[Pattern[str]] = _mention_patterns(settings.COACH_NAME)


def is_goodbye_message(content: str) -> bool:
    """Whether *content* reads as a sign-off that closes the session.

    Args:
        content (str): Message text.

    Returns:
        bool: ``True`` if any sign-off pattern matches.
    """
    return any(p.search(content) for p in GOODBYE_PATTERNS)


def detect_coach_mention(content: str) -> bool:
    """Whether *content* addresses the human coach with an @-mention.

    Args:
        content (str): Message text.

    Returns:
        bool: ``True`` if ``@coach``, ``@mentor`` or ``@<coach name>``
            appears in the text.
    """
    return any(p.search(content) for p in COACH_MENTION_PATTERNS)


def highlight_mentions(content: str) -> str:
    """Wrap every coach mention in bold markdown."""
    for pattern in COACH_MENTION_PATTERNS:
        content = pattern.sub(lambda m: f"**{m.group(0)}**", content)
    return content
