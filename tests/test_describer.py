"""Tests for path step classification and relationship naming."""

import pytest

from conftest import F, M, build
from kinship.relationship import terms
from kinship.relationship.classifier import Match
from kinship.relationship.describer import classify_edge, describe, term_for_edges
from kinship.relationship.errors import DataIntegrity
from kinship.relationship.graph import Sex

P, C, S = "parent", "child", "spouse"


class TestClassifyEdge:
    async def test_each_kind(self, family):
        assert await classify_edge(family, "me", "dad") == P
        assert await classify_edge(family, "dad", "me") == C
        assert await classify_edge(family, "me", "wife") == S

    async def test_no_edge(self, family):
        with pytest.raises(DataIntegrity, match="no edge"):
            await classify_edge(family, "me", "cousin")

    async def test_parent_and_spouse_is_ambiguous(self):
        g = build([("a", M, None), ("b", F, None)], edges=[("b", "a")], unions=[("a", "b")])
        with pytest.raises(DataIntegrity, match="parent/spouse"):
            await classify_edge(g, "a", "b")


class TestDescribe:
    async def test_sibling_narrative(self, family):
        match = Match("sibling", terms.gendered("sibling", Sex.FEMALE), ["me", "dad", "sister"], "dad")
        d = await describe(family, match)
        assert d.sentence == "Lily is Sam's sister"
        assert d.edges == [P, C]
        assert [n.relationship_to_next_key for n in d.nodes] == [
            "relationship.fatherOf",
            "relationship.daughterOf",
            None,
        ]
        assert d.common_ancestors[0].person_id == "dad"
        assert d.common_ancestors[0].generations_from_person1 == 1
        assert d.common_ancestors[0].generations_from_person2 == 1

    async def test_self_narrative(self, family):
        d = await describe(family, Match("self", terms.SELF, ["me"]))
        assert d.sentence == "Sam is the same person"
        assert d.nodes[0].edge_to_next is None

    async def test_name_falls_back_to_id(self, family):
        d = await describe(family, Match("self", terms.SELF, ["stranger"]))
        assert d.sentence == "stranger is the same person"

    async def test_distant_uses_path_term(self, family):
        match = Match("distant", terms.RELATED, ["son", "me", "dad", "grandpa", "uncle", "cousin"])
        d = await describe(family, match)
        assert d.term.word == "first cousin, 1 time removed"
        assert d.term.key == "relationship.cousin11xRemoved"
        assert d.sentence == "Ivy is Leo's first cousin, 1 time removed"
        assert d.common_ancestors[0].person_id == "grandpa"
        assert d.common_ancestors[0].name == "Walter"
        assert d.common_ancestors[0].generations_from_person1 == 3
        assert d.common_ancestors[0].generations_from_person2 == 2

    async def test_distant_spouse_path_has_no_common_ancestor(self, family):
        d = await describe(family, Match("distant", terms.RELATED, ["me", "wife", "mother_in_law"]))
        assert d.common_ancestors == []
        assert d.term.word == "mother-in-law"

    async def test_broken_path_raises(self, family):
        with pytest.raises(DataIntegrity):
            await describe(family, Match("distant", terms.RELATED, ["me", "stranger"]))

    async def test_repeated_person_raises(self, family):
        with pytest.raises(DataIntegrity, match="revisits"):
            await describe(family, Match("distant", terms.RELATED, ["me", "dad", "me"]))


class TestTermForEdges:
    @pytest.mark.parametrize(
        "edges,sex,word,key",
        [
            ([P, P, P], Sex.MALE, "great-grandfather", "relationship.greatGrandparent"),
            ([P, P, P, P], Sex.FEMALE, "great-great-grandmother", "relationship.greatGrandparent2"),
            ([C, C, C], Sex.UNKNOWN, "great-grandchild", "relationship.greatGrandchild"),
            ([P, C], Sex.MALE, "brother", "relationship.brother"),
            ([P, P, C], Sex.FEMALE, "aunt", "relationship.aunt"),
            ([P, P, P, C], Sex.MALE, "great-uncle", "relationship.greatPibling"),
            ([P, P, P, P, C], Sex.FEMALE, "great-great-aunt", "relationship.greatPibling2"),
            ([P, C, C], Sex.FEMALE, "niece", "relationship.niece"),
            ([P, C, C, C], Sex.MALE, "great-nephew", "relationship.greatNibling"),
            ([P, P, C, C], Sex.MALE, "first cousin", "relationship.cousin1"),
            ([P, P, P, C, C, C], Sex.MALE, "second cousin", "relationship.cousin2"),
            ([P, P, P, C, C, C, C], Sex.MALE, "second cousin, 1 time removed", "relationship.cousin21xRemoved"),
            ([S, P], Sex.MALE, "father-in-law", "relationship.fatherInLaw"),
            ([C, S], Sex.FEMALE, "daughter-in-law", "relationship.daughterInLaw"),
            ([S, C], Sex.MALE, "stepson", "relationship.stepson"),
            ([P, S], Sex.FEMALE, "stepmother", "relationship.stepmother"),
            ([S, P, C], Sex.FEMALE, "sister-in-law", "relationship.sisterInLaw"),
            ([P, C, S], Sex.MALE, "brother-in-law", "relationship.brotherInLaw"),
            ([S, P, P], Sex.MALE, "relative by marriage", "relationship.relatedByMarriage"),
            ([C, P], Sex.MALE, "relative", "relationship.related"),
        ],
    )
    def test_terms(self, edges, sex, word, key):
        t = term_for_edges(edges, sex)
        assert t.word == word
        assert t.key == key
