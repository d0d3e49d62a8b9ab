"""
pipelines/editor.py

Add/edit controller behind the Health Profile modal.

One draft at a time, for one of three record kinds:
    vitals    -> vital_signs       (flat row, matched by id)
    surgery   -> surgical_history  (flat row, matched by id)
    personal  -> patient_details   (nested row, matched by user_id)

Form values are kept as raw strings and only coerced on save(), so a
half-typed form (e.g. an empty number field) never errors on input.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Mapping, Optional

from pydantic import BaseModel

from pipelines.schemas import DRAFT_TYPES, Draft, PersonalDraft, SurgeryDraft, VitalsDraft
from storage.records import RecordStore, RecordStoreError

logger = logging.getLogger(__name__)

TABLES = {
    "vitals": "vital_signs",
    "surgery": "surgical_history",
    "personal": "patient_details",
}

TITLES = {
    "vitals": "Vital Signs",
    "surgery": "Surgical History",
    "personal": "Personal Information",
}

_PERSONAL_GROUPS = {
    "personal_info": ("date_of_birth", "gender", "address", "phone_number"),
    "physical_info": ("height_cm", "weight_kg", "blood_type"),
    "lifestyle_info": ("smoking_status", "alcohol_consumption"),
}


def _raw(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def _parse_int(raw: str, name: str) -> int:
    text = (raw or "").strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return int(float(text))
    except (ValueError, OverflowError):
        raise ValueError(f"{name} must be a whole number, got {raw!r}") from None


def _parse_float(raw: str, name: str) -> float:
    try:
        value = float((raw or "").strip())
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {raw!r}")
    return value


def _optional_float(raw: str, name: str) -> Optional[float]:
    return _parse_float(raw, name) if (raw or "").strip() else None


def _optional(raw: str) -> Optional[str]:
    return raw if raw else None


def draft_from_record(kind: str, record: Mapping[str, Any] | BaseModel | None) -> Draft:
    """Field-for-field copy of *record* into the draft shape for *kind*."""
    draft_type = DRAFT_TYPES[kind]
    if record is None:
        return draft_type()
    data = record.model_dump() if isinstance(record, BaseModel) else dict(record)

    if kind == "personal":
        flat: dict[str, Any] = {}
        for group, fields in _PERSONAL_GROUPS.items():
            section = data.get(group) or {}
            for field in fields:
                flat[field] = section.get(field)
        data = flat

    values = {name: _raw(data.get(name)) for name in draft_type.model_fields if name != "kind"}
    return draft_type(**values)


def build_record(draft: Draft, owner_id: str) -> dict[str, Any]:
    """Coerce a draft into the row shape its table stores."""
    if isinstance(draft, VitalsDraft):
        return {
            "patient_id": owner_id,
            "heart_rate": _parse_int(draft.heart_rate, "heart_rate"),
            "systolic_bp": _parse_int(draft.systolic_bp, "systolic_bp"),
            "diastolic_bp": _parse_int(draft.diastolic_bp, "diastolic_bp"),
            "body_temperature_celsius": _parse_float(draft.body_temperature_celsius, "body_temperature_celsius"),
            "respiratory_rate": _parse_int(draft.respiratory_rate, "respiratory_rate"),
            "notes": _optional(draft.notes),
        }
    if isinstance(draft, SurgeryDraft):
        return {
            "patient_id": owner_id,
            "procedure_name": draft.procedure_name,
            "surgery_date": draft.surgery_date,
            "surgeon_name": _optional(draft.surgeon_name),
            "hospital_name": _optional(draft.hospital_name),
            "notes": _optional(draft.notes),
        }
    if isinstance(draft, PersonalDraft):
        return {
            "user_id": owner_id,
            "personal_info": {
                "date_of_birth": _optional(draft.date_of_birth),
                "gender": _optional(draft.gender),
                "address": _optional(draft.address),
                "phone_number": _optional(draft.phone_number),
            },
            "physical_info": {
                "height_cm": _optional_float(draft.height_cm, "height_cm"),
                "weight_kg": _optional_float(draft.weight_kg, "weight_kg"),
                "blood_type": _optional(draft.blood_type),
            },
            "lifestyle_info": {
                "smoking_status": _optional(draft.smoking_status),
                "alcohol_consumption": _optional(draft.alcohol_consumption),
            },
        }
    raise TypeError(f"Unsupported draft type: {type(draft).__name__}")


class RecordEditor:
    def __init__(
        self,
        store: RecordStore,
        owner_id: str,
        on_saved: Optional[Callable[[], None]] = None,
    ):
        self.store = store
        self.owner_id = owner_id
        self.on_saved = on_saved
        self.draft: Optional[Draft] = None
        self.editing: Optional[dict[str, Any]] = None

    @property
    def is_open(self) -> bool:
        return self.draft is not None

    @property
    def kind(self) -> Optional[str]:
        return self.draft.kind if self.draft is not None else None

    @property
    def title(self) -> str:
        if self.draft is None:
            return ""
        action = "Edit" if self.editing is not None else "Add"
        return f"{action} {TITLES[self.draft.kind]}"

    def open(self, kind: str, existing: Mapping[str, Any] | BaseModel | None = None) -> Draft:
        """Start a new draft, discarding whatever was open before."""
        if kind not in DRAFT_TYPES:
            raise ValueError(f"Unknown record kind '{kind}'")
        if self.draft is not None:
            logger.debug("Discarding open %s draft", self.draft.kind)
        if existing is None:
            self.editing = None
        elif isinstance(existing, BaseModel):
            self.editing = existing.model_dump()
        else:
            self.editing = dict(existing)
        self.draft = draft_from_record(kind, existing)
        return self.draft

    def update_field(self, name: str, raw_value: str) -> None:
        if self.draft is None:
            raise RuntimeError("No record is being edited")
        if name == "kind" or name not in type(self.draft).model_fields:
            raise KeyError(f"'{name}' is not a field of a {self.draft.kind} record")
        self.draft = self.draft.model_copy(update={name: _raw(raw_value)})

    def close(self) -> None:
        self.draft = None
        self.editing = None

    def _match(self, kind: str) -> Optional[dict[str, Any]]:
        if kind == "personal":
            if self.editing is not None:
                return {"user_id": self.owner_id}
            # Upsert: one patient_details row per owner.
            existing = self.store.select(TABLES[kind], {"user_id": self.owner_id})
            return {"user_id": self.owner_id} if existing else None
        if self.editing is not None and self.editing.get("id") is not None:
            return {"id": self.editing["id"]}
        return None

    def save(self) -> bool:
        """
        Persist the open draft. Returns True on success (draft closed,
        on_saved called); on failure the error is logged and the draft is
        left open exactly as typed.
        """
        if self.draft is None:
            raise RuntimeError("No record is being edited")
        draft = self.draft
        table = TABLES[draft.kind]
        try:
            record = build_record(draft, self.owner_id)
            match = self._match(draft.kind)
            if match is not None:
                self.store.update(table, record, match)
                logger.info("Updated %s row matching %s", table, match)
            else:
                self.store.insert(table, record)
                logger.info("Inserted %s row for owner %s", table, self.owner_id)
        except (ValueError, RecordStoreError) as exc:
            logger.error("Error saving %s record: %s", draft.kind, exc)
            return False

        if self.on_saved is not None:
            self.on_saved()
        self.close()
        return True
