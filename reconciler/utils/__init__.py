"""Utility functions and helpers."""

from .normalization import NameNormalizer, NormalizedName, Vocabulary, normalize_company_name
from .csv_table import load_table, read_table, table_to_frame
from .converters import EmployeeBucket, canonical_us_phone, employee_bucket
from .contacts import ContactInfo, extract_contact_info

__all__ = [
    'NameNormalizer',
    'NormalizedName',
    'Vocabulary',
    'normalize_company_name',
    'load_table',
    'read_table',
    'table_to_frame',
    'EmployeeBucket',
    'canonical_us_phone',
    'employee_bucket',
    'ContactInfo',
    'extract_contact_info'
]
