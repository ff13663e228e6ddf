"""Shared fixtures: small in-memory family graphs."""

import pytest

from kinship.relationship.graph import FamilyGraph, ParentChildEdge, Person, Sex, Union

M, F, U = Sex.MALE, Sex.FEMALE, Sex.UNKNOWN


def build(people, edges=(), unions=()):
    return FamilyGraph(
        people=[Person(pid, sex, name) for pid, sex, name in people],
        edges=[ParentChildEdge(p, c) for p, c in edges],
        unions=[Union(f"u{i}", list(members)) for i, members in enumerate(unions)],
    )


@pytest.fixture
def family():
    """Three generations plus in-laws, a half-brother and a stranger.

    grandpa + grandma -> dad, uncle, aunt
    dad + mom -> me, sister; dad -> half_brother
    uncle -> cousin; me -> son
    unions: dad/mom, me/wife, aunt/aunt_husband
    mother_in_law -> wife; aunt_husband -> stepkid
    """
    return build(
        people=[
            ("grandpa", M, "Walter"),
            ("grandma", F, "Edith"),
            ("dad", M, "Tom"),
            ("mom", F, "Anne"),
            ("uncle", M, "Bill"),
            ("aunt", F, "Rose"),
            ("aunt_husband", M, "Frank"),
            ("me", M, "Sam"),
            ("sister", F, "Lily"),
            ("half_brother", M, "Max"),
            ("cousin", F, "Ivy"),
            ("son", M, "Leo"),
            ("wife", F, "Nora"),
            ("mother_in_law", F, "Ruth"),
            ("stepkid", M, "Ben"),
            ("stranger", U, None),
        ],
        edges=[
            ("grandpa", "dad"), ("grandma", "dad"),
            ("grandpa", "uncle"), ("grandma", "uncle"),
            ("grandpa", "aunt"), ("grandma", "aunt"),
            ("dad", "me"), ("mom", "me"),
            ("dad", "sister"), ("mom", "sister"),
            ("dad", "half_brother"),
            ("uncle", "cousin"),
            ("me", "son"),
            ("mother_in_law", "wife"),
            ("aunt_husband", "stepkid"),
        ],
        unions=[
            ("dad", "mom"),
            ("me", "wife"),
            ("aunt", "aunt_husband"),
        ],
    )


@pytest.fixture
def chain():
    """Straight line of descent p0 -> p1 -> ... -> p12."""
    ids = [f"p{i}" for i in range(13)]
    return build(
        people=[(pid, U, None) for pid in ids],
        edges=list(zip(ids, ids[1:])),
    )
