"""Lookup of CRM custom fields by name."""

import logging
from typing import Dict, Iterable, Optional

from .models import CustomField

logger = logging.getLogger(__name__)

# CRM text/url field name -> CSV column copied verbatim
CSV_FIELD_COLUMNS = {
    'Address': 'Address',
    'City': 'City',
    'State': 'State',
    'ZIP Code': 'ZIP Code',
    'Company_Website': 'Website',
    'Twitter': 'Twitter',
    'LinkedIn': 'Linked-In',
    'Facebook': 'Facebook',
}

PHONE_FIELD = 'Contact (Main) Phone Number'
EMPLOYEE_COUNT_FIELD = 'Employee Count'

COMPANY_NAME_COLUMN = 'Company Name'
PHONE_COLUMN = 'Phone Number Combined'
EMPLOYEE_ACTUAL_COLUMN = 'Location Employee Size Actual'
EMPLOYEE_RANGE_COLUMN = 'Location Employee Size Range'

# Preferred field names per contact attribute, most specific first
CONTACT_FIELD_PREFERENCES = {
    'name': ('Contact (Main)', 'Contact', 'Contact 1'),
    'email': ('Contact (Main) Email', 'Contact 1 Email', 'Contact 2 Email', 'Contact 3 Email', 'Contact 4 Email'),
    'phone': ('Contact (Main) Phone Number', 'Contact 1 Phone', 'Contact 2 Phone', 'Contact 3 Phone',
              'Contact 4 Phone'),
    'title': ('Contact (Main) Title', 'Contact Title', 'Contact 1 Title', 'Contact 2 Title', 'Contact 3 Title',
              'Contact 4 Title'),
}


class FieldIndex:
    """Case-insensitive index of custom fields by name."""

    def __init__(self, fields: Iterable[CustomField]):
        self.fields = list(fields)
        self._by_name: Dict[str, CustomField] = {}
        for f in self.fields:
            self._by_name[f.name.lower()] = f

    def __len__(self) -> int:
        return len(self.fields)

    def get(self, name: str) -> Optional[CustomField]:
        return self._by_name.get(str(name).lower())

    def first(self, *names: str) -> Optional[CustomField]:
        """First field found among several candidate names."""
        for name in names:
            found = self.get(name)
            if found:
                return found
        return None

    def preferred_contact_fields(self) -> Dict[str, Optional[CustomField]]:
        """Resolve the fields contact details are written to.

        Returns:
            Mapping of contact attribute (name, email, phone, title) to the
            field to use, or None when the list has none of the names.
        """
        resolved = {attr: self.first(*names) for attr, names in CONTACT_FIELD_PREFERENCES.items()}
        missing = [attr for attr, f in resolved.items() if f is None]
        if missing:
            logger.warning(f"Missing expected contact fields: {', '.join(missing)}")
        return resolved
