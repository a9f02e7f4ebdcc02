import pytest

from models import Person
from relationships import (
    ExplicitResolver,
    FreeTextResolver,
    label_matches,
    make_resolver,
)


def ids(people):
    return [p.id for p in people]


class TestExplicitResolver:
    def test_parents_father_first(self, nuclear_family):
        resolver = ExplicitResolver(nuclear_family)
        assert ids(resolver.parents_of(1)) == [2, 3]
        assert resolver.parents_of(999) == []

    def test_children_in_roster_order(self, half_siblings):
        resolver = ExplicitResolver(half_siblings)
        assert ids(resolver.children_of(2)) == [10, 1, 11]
        assert ids(resolver.children_of(3)) == [1, 12]
        assert resolver.children_of(10) == []

    def test_spouses_include_one_sided_links(self):
        roster = [
            Person(id=1, name="Root", spouse_ids=(5,)),
            Person(id=5, name="Listed"),
            Person(id=6, name="Claims root", spouse_ids=(1,)),
        ]
        resolver = ExplicitResolver(roster)
        assert ids(resolver.spouses_of(1)) == [5, 6]

    def test_unknown_ids_are_skipped(self):
        resolver = ExplicitResolver([Person(id=1, name="Root", father_id=8, spouse_ids=(9,))])
        assert resolver.parents_of(1) == []
        assert resolver.spouses_of(1) == []
        assert resolver.person(None) is None

    def test_callbacks_override_lookups(self, nuclear_family):
        stranger = Person(id=50, name="Stranger")
        resolver = ExplicitResolver(
            nuclear_family,
            resolve_person=lambda pid: stranger if pid == 50 else None,
            resolve_children_of=lambda pid: [stranger],
        )
        assert resolver.person(50) is stranger
        assert resolver.person(1) is None
        assert resolver.children_of(1) == [stranger]


class TestFreeTextResolver:
    def test_self_from_label(self, labelled_family):
        assert FreeTextResolver(labelled_family).self_id == 1

    def test_self_defaults_to_unlabelled_person(self):
        roster = [Person(id=2, name="Dad", relationship="Father"), Person(id=1, name="Me")]
        assert FreeTextResolver(roster).self_id == 1

    def test_explicit_self_wins(self, labelled_family):
        assert FreeTextResolver(labelled_family, self_id=4).self_id == 4

    def test_relatives_of_self(self, labelled_family):
        resolver = FreeTextResolver(labelled_family)
        assert ids(resolver.parents_of(1)) == [2, 3, 7]
        assert ids(resolver.spouses_of(1)) == [5]
        assert ids(resolver.children_of(1)) == [6]

    def test_parents_of_self_have_self_and_siblings_as_children(self, labelled_family):
        resolver = FreeTextResolver(labelled_family)
        assert ids(resolver.children_of(2)) == [1, 4]
        assert ids(resolver.parents_of(4)) == [2, 3, 7]

    def test_others_resolve_to_nobody(self, labelled_family):
        resolver = FreeTextResolver(labelled_family)
        assert resolver.children_of(5) == []
        assert resolver.parents_of(6) == []
        assert resolver.spouses_of(2) == []

    def test_no_self_means_no_relatives(self):
        roster = [Person(id=2, name="Dad", relationship="Father")]
        resolver = FreeTextResolver(roster)
        assert resolver.self_id is None
        assert resolver.parents_of(2) == []
        assert resolver.children_of(2) == []

    def test_custom_keywords(self):
        roster = [
            Person(id=1, name="Me", relationship="self"),
            Person(id=2, name="Papa", relationship="Papa"),
        ]
        resolver = FreeTextResolver(roster, keywords={"parent": ("papa",)})
        assert ids(resolver.parents_of(1)) == [2]


@pytest.mark.parametrize(
    "label, keywords, expected",
    [
        ("Father", ("father",), True),
        ("MOTHER-in-law", ("mother",), True),
        # substring matching is kept as-is, false positives included
        ("Grandmother", ("parent", "father", "mother"), True),
        ("Stepbrother", ("brother",), True),
        ("Grandson", ("child", "son", "daughter"), True),
        ("Cousin", ("brother", "sister", "sibling"), False),
        (None, ("father",), False),
        ("", ("father",), False),
    ],
)
def test_label_matches(label, keywords, expected):
    assert label_matches(label, keywords) is expected


def test_make_resolver(nuclear_family):
    assert isinstance(make_resolver("explicit", nuclear_family), ExplicitResolver)
    assert isinstance(make_resolver("free-text", nuclear_family), FreeTextResolver)
    with pytest.raises(ValueError, match="Unknown resolver"):
        make_resolver("astrology", nuclear_family)
