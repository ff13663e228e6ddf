"""Relationship vocabulary — i18n keys and English terms by sex.

Keys are what clients translate; terms feed the English narrative.
"""

from __future__ import annotations

from typing import NamedTuple

from kinship.relationship.graph import Sex


class Term(NamedTuple):
    key: str
    word: str

    @property
    def label(self) -> str:
        return self.word[:1].upper() + self.word[1:]


# base term -> (male, female, neutral)
_GENDERED: dict[str, tuple[Term, Term, Term]] = {
    "parent": (
        Term("relationship.father", "father"),
        Term("relationship.mother", "mother"),
        Term("relationship.parent", "parent"),
    ),
    "child": (
        Term("relationship.son", "son"),
        Term("relationship.daughter", "daughter"),
        Term("relationship.child", "child"),
    ),
    "spouse": (
        Term("relationship.husband", "husband"),
        Term("relationship.wife", "wife"),
        Term("relationship.spouse", "spouse"),
    ),
    "sibling": (
        Term("relationship.brother", "brother"),
        Term("relationship.sister", "sister"),
        Term("relationship.sibling", "sibling"),
    ),
    "grandparent": (
        Term("relationship.grandfather", "grandfather"),
        Term("relationship.grandmother", "grandmother"),
        Term("relationship.grandparent", "grandparent"),
    ),
    "grandchild": (
        Term("relationship.grandson", "grandson"),
        Term("relationship.granddaughter", "granddaughter"),
        Term("relationship.grandchild", "grandchild"),
    ),
    "pibling": (
        Term("relationship.uncle", "uncle"),
        Term("relationship.aunt", "aunt"),
        Term("relationship.auntOrUncle", "aunt/uncle"),
    ),
    "nibling": (
        Term("relationship.nephew", "nephew"),
        Term("relationship.niece", "niece"),
        Term("relationship.nieceOrNephew", "niece/nephew"),
    ),
    "stepparent": (
        Term("relationship.stepfather", "stepfather"),
        Term("relationship.stepmother", "stepmother"),
        Term("relationship.stepparent", "stepparent"),
    ),
    "stepchild": (
        Term("relationship.stepson", "stepson"),
        Term("relationship.stepdaughter", "stepdaughter"),
        Term("relationship.stepchild", "stepchild"),
    ),
    "parentInLaw": (
        Term("relationship.fatherInLaw", "father-in-law"),
        Term("relationship.motherInLaw", "mother-in-law"),
        Term("relationship.parentInLaw", "parent-in-law"),
    ),
    "childInLaw": (
        Term("relationship.sonInLaw", "son-in-law"),
        Term("relationship.daughterInLaw", "daughter-in-law"),
        Term("relationship.childInLaw", "child-in-law"),
    ),
    "siblingInLaw": (
        Term("relationship.brotherInLaw", "brother-in-law"),
        Term("relationship.sisterInLaw", "sister-in-law"),
        Term("relationship.siblingInLaw", "sibling-in-law"),
    ),
}

SELF = Term("relationship.self", "self")
COUSIN = Term("relationship.cousin", "cousin")
RELATED = Term("relationship.related", "relative")
BY_MARRIAGE = Term("relationship.relatedByMarriage", "relative by marriage")
NOT_RELATED = Term("relationship.notRelated", "not related")
DEPTH_EXCEEDED = Term("relationship.notFoundWithinDepth", "not found within search depth")


def gendered(base: str, sex: Sex) -> Term:
    """Pick the male/female/neutral variant of ``base``."""
    male, female, neutral = _GENDERED[base]
    if sex == Sex.MALE:
        return male
    if sex == Sex.FEMALE:
        return female
    return neutral


_EDGE_KEYS = {
    ("parent", Sex.MALE): "relationship.fatherOf",
    ("parent", Sex.FEMALE): "relationship.motherOf",
    ("parent", Sex.UNKNOWN): "relationship.parentOf",
    ("child", Sex.MALE): "relationship.sonOf",
    ("child", Sex.FEMALE): "relationship.daughterOf",
    ("child", Sex.UNKNOWN): "relationship.childOf",
}


def edge_key(edge: str, next_sex: Sex) -> str:
    """i18n key for a single path step, gendered by the person stepped to."""
    if edge == "spouse":
        return "relationship.spouseOf"
    return _EDGE_KEYS[(edge, next_sex)]


_ORDINALS = {
    1: "first", 2: "second", 3: "third", 4: "fourth",
    5: "fifth", 6: "sixth", 7: "seventh", 8: "eighth",
}


def ordinal(n: int) -> str:
    return _ORDINALS.get(n, f"{n}th")


def great_prefix(count: int) -> str:
    if count <= 0:
        return ""
    if count == 1:
        return "great-"
    if count == 2:
        return "great-great-"
    return f"{count}x great-"
