"""Plain data objects for ClickUp API payloads."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

TASK_URL_TEMPLATE = 'https://app.clickup.com/t/{task_id}'


@dataclass(frozen=True)
class FieldOption:
    id: str
    name: str


@dataclass
class CustomField:
    """Custom field definition of a ClickUp list."""

    id: str
    name: str
    type: str = ''
    options: List[FieldOption] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'CustomField':
        type_config = data.get('type_config') or {}
        options = [
            FieldOption(id=str(opt.get('id')), name=str(opt.get('name') or opt.get('label') or ''))
            for opt in type_config.get('options') or []
        ]
        return cls(
            id=str(data.get('id', '')),
            name=str(data.get('name') or ''),
            type=str(data.get('type') or type_config.get('type') or ''),
            options=options,
        )

    def option_id(self, name: str) -> Optional[str]:
        """Look up a drop-down option id by its (case-insensitive) name."""
        wanted = str(name).lower()
        for option in self.options:
            if option.name.lower() == wanted:
                return option.id
        return None

    def value_as_text(self, value: Any) -> str:
        """Render a stored value as text, resolving option ids to names."""
        if value is None:
            return ''
        names = {opt.id: opt.name for opt in self.options}
        field_type = self.type.lower()
        if field_type == 'labels' and isinstance(value, list):
            return ', '.join(names[v] for v in value if v in names)
        if field_type == 'drop_down':
            # Drop-down values may be an option id or its orderindex
            if str(value) in names:
                return names[str(value)]
            if isinstance(value, int) and 0 <= value < len(self.options):
                return self.options[value].name
        return str(value)


@dataclass
class CrmTask:
    """A CRM record as seen by the reconciler."""

    id: str
    name: str
    status: str = ''
    custom_fields: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'CrmTask':
        status = data.get('status') or {}
        if isinstance(status, dict):
            status = status.get('status') or status.get('name') or ''
        return cls(
            id=str(data.get('id', '')),
            name=str(data.get('name') or ''),
            status=str(status),
            custom_fields={
                str(cf.get('id')): cf.get('value')
                for cf in data.get('custom_fields') or []
            },
        )

    @property
    def url(self) -> str:
        return TASK_URL_TEMPLATE.format(task_id=self.id)

    def field_value(self, field_id: str) -> Any:
        return self.custom_fields.get(field_id)

    def has_value(self, field_id: str) -> bool:
        """True if the field currently holds a non-empty value."""
        value = self.field_value(field_id)
        return value not in (None, '', [], {})
