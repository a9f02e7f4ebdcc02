"""Loading a roster of family members from JSON exports or GEDCOM files."""

from dataclasses import replace
import json
import logging
from pathlib import Path

from models import Person
from parsing import load_gedcom, parse_date_string

logger = logging.getLogger(__name__)

# REST payload key -> Person field
FIELD_ALIASES = {
    "fatherId": "father_id",
    "motherId": "mother_id",
    "spouseIds": "spouse_ids",
    "birthDate": "birth_date",
    "deathDate": "death_date",
    "sex": "gender",
}

PERSON_FIELDS = {
    "id",
    "name",
    "gender",
    "birth_date",
    "death_date",
    "relationship",
    "father_id",
    "mother_id",
    "spouse_ids",
    "photo",
    "notes",
}

WRAPPER_KEYS = ("people", "familyMembers", "family")


def _normalize_date(value, field: str, index: int) -> str | None:
    if value is None or value == "":
        return None
    iso = parse_date_string(str(value))
    if iso is None:
        logger.debug("Roster record %d: dropping unparseable %s %r", index, field, value)
    return iso


def person_from_dict(data: dict, index: int = 0) -> Person:
    """
    Build a Person from one roster record.

    Dates are normalized to YYYY-MM-DD the same way GEDCOM dates are; ones
    that cannot be parsed are dropped. Unknown keys (userId...) are ignored.

    Raises:
        ValueError: if the record is not an object or lacks `id` or `name`.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Roster record {index} is not an object: {data!r}")

    kwargs = {}
    for key, value in data.items():
        name = FIELD_ALIASES.get(key, key)
        if name in PERSON_FIELDS:
            kwargs[name] = value

    for required in ("id", "name"):
        if kwargs.get(required) is None:
            raise ValueError(f"Roster record {index} is missing '{required}'")

    spouse_ids = kwargs.get("spouse_ids") or ()
    if not isinstance(spouse_ids, (list, tuple)):
        spouse_ids = (spouse_ids,)
    kwargs["spouse_ids"] = tuple(spouse_ids)
    kwargs["name"] = str(kwargs["name"])
    for field in ("birth_date", "death_date"):
        if field in kwargs:
            kwargs[field] = _normalize_date(kwargs[field], field, index)
    return Person(**kwargs)


def _parent_id(data) -> object:
    if not isinstance(data, dict):
        return None
    return data.get("parentId", data.get("parent_id"))


def link_single_parents(roster: list[Person], parent_ids: list) -> list[Person]:
    """
    Apply the family endpoint's single `parentId` link.

    It fills the mother slot when the parent is female and the father slot
    otherwise, and only for people without an explicit father or mother.
    """
    by_id = {p.id: p for p in roster}
    linked = []
    for person, parent_id in zip(roster, parent_ids):
        if parent_id is None or person.father_id is not None or person.mother_id is not None:
            linked.append(person)
            continue
        parent = by_id.get(parent_id)
        if parent is not None and parent.gender == "female":
            person = replace(person, mother_id=parent_id)
        else:
            person = replace(person, father_id=parent_id)
        logger.debug("Linked %s to parent %s from parentId", person.id, parent_id)
        linked.append(person)
    return linked


def roster_from_json(payload) -> list[Person]:
    """
    Accept a list of records, or an object wrapping one under `people`,
    `familyMembers` or `family` (the family endpoint's shape).

    Raises:
        ValueError: on an unrecognised payload, a bad record or a duplicate id.
    """
    if isinstance(payload, dict):
        for key in WRAPPER_KEYS:
            if key in payload:
                payload = payload[key]
                break
        else:
            keys = ", ".join(f"'{k}'" for k in WRAPPER_KEYS)
            raise ValueError(f"Roster object has none of the {keys} lists")

    if not isinstance(payload, list):
        raise ValueError(f"Roster must be a list of people, got {type(payload).__name__}")

    roster = [person_from_dict(record, i) for i, record in enumerate(payload)]

    seen = set()
    for p in roster:
        if p.id in seen:
            raise ValueError(f"Duplicate person id in roster: {p.id}")
        seen.add(p.id)
    return link_single_parents(roster, [_parent_id(record) for record in payload])


def load_roster(path: Path) -> list[Person]:
    """Load a roster from a .ged file or a JSON export."""
    path = Path(path)
    if path.suffix.lower() == ".ged":
        roster = load_gedcom(path)
    else:
        with path.open(encoding="utf-8") as f:
            try:
                payload = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"{path} is not valid JSON: {e}") from e
        roster = roster_from_json(payload)
    logger.debug("Loaded %d people from %s", len(roster), path)
    return roster
