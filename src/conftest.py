import pytest

from models import Person


@pytest.fixture
def nuclear_family() -> list[Person]:
    """Root (1) with father (2), mother (3) and one child (4)."""
    return [
        Person(id=1, name="Root", gender="male", father_id=2, mother_id=3),
        Person(id=2, name="Father", gender="male", spouse_ids=(3,)),
        Person(id=3, name="Mother", gender="female", spouse_ids=(2,)),
        Person(id=4, name="Child", gender="female", father_id=1),
    ]


@pytest.fixture
def half_siblings() -> list[Person]:
    """Father 2 has A, Root, B; mother 3 has Root, C."""
    return [
        Person(id=10, name="A", father_id=2),
        Person(id=1, name="Root", father_id=2, mother_id=3),
        Person(id=11, name="B", father_id=2),
        Person(id=12, name="C", mother_id=3),
        Person(id=2, name="F"),
        Person(id=3, name="M"),
    ]


@pytest.fixture
def labelled_family() -> list[Person]:
    return [
        Person(id=1, name="Me", relationship="Self"),
        Person(id=2, name="Dad", relationship="Father"),
        Person(id=3, name="Mum", relationship="Mother"),
        Person(id=4, name="Bro", relationship="Brother"),
        Person(id=5, name="Wife", relationship="Wife"),
        Person(id=6, name="Kid", relationship="Son"),
        Person(id=7, name="Gran", relationship="Grandmother"),
    ]
