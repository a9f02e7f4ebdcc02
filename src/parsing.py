"""GEDCOM parsing into a family roster."""

from pathlib import Path
import re

from ged4py import GedcomReader

from models import Person


MONTHS = {
    "JAN": 1,
    "FEB": 2,
    "MAR": 3,
    "APR": 4,
    "MAY": 5,
    "JUN": 6,
    "JUL": 7,
    "AUG": 8,
    "SEP": 9,
    "OCT": 10,
    "NOV": 11,
    "DEC": 12,
}

QUALIFIERS = re.compile(
    r"^(ABT|ABOUT|BEF|BEFORE|AFT|AFTER|EST|CAL|FROM|TO|BET|CIRCA|CA|AROUND)\.?:?\s*",
    flags=re.IGNORECASE,
)


def extract_numeric_id(xref_id: str) -> int:
    """Extract numeric part from GEDCOM xref_id like '@I_347421849@' or 'I674624289'."""
    digits = re.sub(r"[^0-9]", "", xref_id)
    if not digits:
        raise ValueError(f"No numeric ID found in: {xref_id}")
    return int(digits)


def _month(name: str) -> int | None:
    # "SEPT", "September" and "Sep." all start with the three-letter code
    return MONTHS.get(name.upper().rstrip(".")[:3])


def parse_date_string(date_str: str | None) -> str | None:
    """
    Normalize a GEDCOM date into ISO format (YYYY-MM-DD).

    Handles "25 NOV 1954", "NOV 1954", "ABT 1905", "April 17, 1850",
    "1839-08-29" and "05/15/1923" (US order). Missing day or month default
    to 01. Returns None for anything else.
    """
    if not date_str:
        return None

    s = date_str.strip().strip("()").rstrip("?")
    s = QUALIFIERS.sub("", s).strip()
    if not s:
        return None

    # "1839-08-29", "1746-00-00"
    match = re.match(r"^(\d{4})-(\d{2})-(\d{2})$", s)
    if match:
        year, month, day = (int(g) for g in match.groups())
        return _iso(year, month or 1, day or 1)

    # "05/15/1923", "01-27-1920"
    match = re.match(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$", s)
    if match:
        month, day, year = (int(g) for g in match.groups())
        return _iso(year, month, day)

    # "25 NOV 1954", "11 Aug. 1968", "02 May1838"
    match = re.match(r"^(\d{1,2})\s+([A-Za-z]+)\.?\s*(\d{4})$", s)
    if match:
        return _iso(int(match.group(3)), _month(match.group(2)), int(match.group(1)))

    # "April 17, 1850", "Oct.12,1929"
    match = re.match(r"^([A-Za-z]+)\.?\s*(\d{1,2}),\s*(\d{4})$", s)
    if match:
        return _iso(int(match.group(3)), _month(match.group(1)), int(match.group(2)))

    # "NOV 1954", "May, 1837"
    match = re.match(r"^([A-Za-z]+)\.?,?\s*(\d{4})$", s)
    if match:
        return _iso(int(match.group(2)), _month(match.group(1)), 1)

    match = re.match(r"^(\d{4})$", s)
    if match:
        return _iso(int(match.group(1)), 1, 1)

    return None


def _iso(year: int, month: int | None, day: int) -> str | None:
    if month is None or not (1 <= month <= 12 and 1 <= day <= 31):
        return None
    return f"{year:04d}-{month:02d}-{day:02d}"


def extract_name(indi) -> str:
    """Full display name of an individual record."""
    name_rec = indi.sub_tag("NAME")
    if name_rec is None or name_rec.value is None:
        return "Unknown"

    # ged4py returns NAME as tuple: (given, surname, suffix)
    if isinstance(name_rec.value, tuple):
        parts = [p for p in name_rec.value if p]
        return " ".join(parts) if parts else "Unknown"

    return str(name_rec.value).replace("/", "").strip() or "Unknown"


def extract_event_date(indi, tag: str) -> str | None:
    event = indi.sub_tag(tag)
    if event is None:
        return None
    date_rec = event.sub_tag("DATE")
    # ged4py may return DateValue objects
    if date_rec and date_rec.value:
        return parse_date_string(str(date_rec.value))
    return None


def extract_gender(indi) -> str | None:
    sex_rec = indi.sub_tag("SEX")
    if sex_rec is None:
        return None
    return {"M": "male", "F": "female"}.get(sex_rec.value, "other")


def _xref(rec, tag: str) -> int | None:
    sub = rec.sub_tag(tag)
    if sub is None or not sub.xref_id:
        return None
    return extract_numeric_id(sub.xref_id)


def roster_from_gedcom(reader: GedcomReader) -> list[Person]:
    """
    Build the roster from INDI and FAM records.

    A child listed in several families keeps the first father and mother
    found. Spouses are ordered by family record order.
    """
    father_of: dict[int, int] = {}
    mother_of: dict[int, int] = {}
    spouses: dict[int, list[int]] = {}

    for fam in reader.records0("FAM"):
        husb_id = _xref(fam, "HUSB")
        wife_id = _xref(fam, "WIFE")

        if husb_id and wife_id:
            spouses.setdefault(husb_id, []).append(wife_id)
            spouses.setdefault(wife_id, []).append(husb_id)

        for child in fam.sub_tags("CHIL"):
            if not child.xref_id:
                continue
            child_id = extract_numeric_id(child.xref_id)
            if husb_id:
                father_of.setdefault(child_id, husb_id)
            if wife_id:
                mother_of.setdefault(child_id, wife_id)

    roster: list[Person] = []
    for rec in reader.records0("INDI"):
        if rec.xref_id is None:
            continue
        indi_id = extract_numeric_id(rec.xref_id)
        roster.append(
            Person(
                id=indi_id,
                name=extract_name(rec),
                gender=extract_gender(rec),
                birth_date=extract_event_date(rec, "BIRT"),
                death_date=extract_event_date(rec, "DEAT"),
                father_id=father_of.get(indi_id),
                mother_id=mother_of.get(indi_id),
                spouse_ids=tuple(dict.fromkeys(spouses.get(indi_id, []))),
            )
        )
    return roster


def load_gedcom(filepath: Path) -> list[Person]:
    """Parse a GEDCOM file and return its roster."""
    with GedcomReader(str(filepath)) as reader:
        return roster_from_gedcom(reader)
