"""Contact detail extraction from free-form comment text.

Each field has its own rule. Rules are evaluated independently and in a
fixed order; only the first match of each rule is used. Name, title and
phone are only read from explicitly labeled lines such as ``Phone: ...``
so arbitrary prose is never mistaken for contact details.
"""

import logging
import re
from dataclasses import asdict, dataclass
from typing import Callable, Dict, Optional, Tuple

from .converters import canonical_us_phone

logger = logging.getLogger(__name__)


def _labeled_line(*labels: str) -> 're.Pattern[str]':
    """Build a pattern for ``<label>: <value>`` at the start of a line."""
    alternatives = '|'.join(re.escape(label) for label in labels)
    return re.compile(rf'^[ \t]*(?:{alternatives})[ \t]*:[ \t]*([^\n]+)', re.IGNORECASE | re.MULTILINE)


@dataclass(frozen=True)
class ContactRule:
    """Extraction rule for a single contact field."""

    field: str
    pattern: 're.Pattern[str]'
    group: int = 0
    convert: Optional[Callable[[str], Optional[str]]] = None

    def apply(self, text: str) -> Optional[str]:
        match = self.pattern.search(text)
        if not match:
            return None
        value = match.group(self.group).strip()
        if self.convert:
            value = self.convert(value)
        return value or None


CONTACT_RULES: Tuple[ContactRule, ...] = (
    ContactRule('email', re.compile(r'[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}', re.IGNORECASE)),
    ContactRule(
        'phone',
        _labeled_line('Phone Number', 'Phone', 'Mobile', 'Cell'),
        group=1,
        convert=canonical_us_phone,
    ),
    ContactRule(
        'name',
        _labeled_line('Contact (Main)', 'Contact Person', 'Primary Contact', 'Key Contact', 'Contact', 'Name'),
        group=1,
    ),
    ContactRule('title', _labeled_line('Title', 'Role', 'Position', 'Your Role'), group=1),
)


@dataclass(frozen=True)
class ContactInfo:
    """Contact details found in a piece of text."""

    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    title: Optional[str] = None

    def to_dict(self) -> Dict[str, str]:
        """Only the fields that were found."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    def __bool__(self) -> bool:
        return bool(self.to_dict())


def extract_contact_info(text: Optional[str], rules: Tuple[ContactRule, ...] = CONTACT_RULES) -> ContactInfo:
    """Extract labeled contact details from text.

    Args:
        text: Comment text, possibly several comments joined by newlines
        rules: Field rules to apply

    Returns:
        ContactInfo with the fields that were found

    Examples:
        >>> extract_contact_info("Name: Dana Reyes\\nPhone: (314) 555-0101").to_dict()
        {'name': 'Dana Reyes', 'phone': '+13145550101'}
    """
    if not text:
        return ContactInfo()

    found = {}
    for rule in rules:
        value = rule.apply(text)
        if value is not None:
            found[rule.field] = value
        else:
            logger.debug(f"No {rule.field} found")
    return ContactInfo(**found)
