# intake/services/intake_form.py
"""In-progress car-reception form. Patches from the search flows are merged, never replaced."""

from typing import Any, Optional


class IntakeForm:
    def __init__(self, data: Optional[dict[str, Any]] = None):
        self._data: dict[str, Any] = dict(data or {})

    def get(self, field: str, default: Any = None) -> Any:
        return self._data.get(field, default)

    def apply(self, patch: dict[str, Any]) -> dict[str, Any]:
        """Merge patch into the form. Fields not named in the patch are kept."""
        self._data = {**self._data, **patch}
        return self.as_dict()

    def update(self, **fields: Any) -> dict[str, Any]:
        return self.apply(fields)

    def as_dict(self) -> dict[str, Any]:
        return dict(self._data)

    def __repr__(self):
        return f"<IntakeForm fields={sorted(self._data)}>"
