"""Action trie lookup and wildcard traversal tests."""

from __future__ import annotations

import pytest

from core.errors import MalformedDataError
from core.models import ActionRecord
from core.search.glob import compile_pattern
from core.search.trie import ActionTrie

S3_NAMES = [
    "PutObject",
    "GetObjectTagging",
    "GetObject",
    "ListBucket",
    "GetObjectAcl",
    "GetBucketPolicy",
]


def _trie(names: list[str] = S3_NAMES, service: str = "s3") -> ActionTrie:
    return ActionTrie.build([ActionRecord(service=service, name=name) for name in names])


def _names(trie: ActionTrie, raw: str) -> list[str]:
    return [record.name for record in trie.expand(compile_pattern(raw))]


def test_build_counts_distinct_names():
    trie = _trie(S3_NAMES + ["GetObject"])
    assert len(trie) == len(S3_NAMES)
    assert "GetObject" in trie
    assert "GetObj" not in trie


def test_exact_returns_record_even_when_prefix_is_shared():
    trie = _trie()
    record = trie.exact("GetObject")
    assert record is not None
    assert record.qualified == "s3:GetObject"
    assert trie.exact("Get") is None
    assert trie.exact("GetObjectAclX") is None


def test_literal_pattern_degenerates_to_exact():
    trie = _trie()
    assert _names(trie, "GetObject") == ["GetObject"]
    assert _names(trie, "Nope") == []


def test_star_returns_every_action_sorted():
    trie = _trie()
    assert _names(trie, "*") == sorted(S3_NAMES)


def test_prefix_star_collects_subtree():
    trie = _trie()
    assert _names(trie, "GetObject*") == ["GetObject", "GetObjectAcl", "GetObjectTagging"]


def test_middle_star_matches_only_suffix():
    trie = _trie()
    assert _names(trie, "Get*Acl") == ["GetObjectAcl"]


def test_question_mark_consumes_exactly_one_character():
    trie = _trie()
    assert _names(trie, "Get?bject") == ["GetObject"]
    assert _names(trie, "Get??bject") == []


def test_leading_star():
    trie = _trie()
    assert _names(trie, "*Object") == ["GetObject", "PutObject"]


def test_star_matches_zero_characters():
    trie = _trie()
    assert _names(trie, "GetObject*Acl") == ["GetObjectAcl"]
    assert _names(trie, "*GetObject") == ["GetObject"]


def test_repeated_letters_do_not_produce_duplicates():
    trie = _trie(["aaa", "aa", "a", "ba"], service="x")
    assert _names(trie, "*a*") == ["a", "aa", "aaa", "ba"]
    assert _names(trie, "*a*a*") == ["aa", "aaa"]


def test_matching_is_case_sensitive():
    trie = _trie()
    assert _names(trie, "getobject") == []
    assert _names(trie, "get*") == []


def test_empty_pattern_matches_nothing():
    trie = _trie()
    assert _names(trie, "") == []


def test_expand_is_deterministic():
    trie = _trie()
    assert _names(trie, "*e*") == _names(trie, "*e*")


def test_build_rejects_mixed_services():
    records = [ActionRecord(service="s3", name="GetObject"), ActionRecord(service="iam", name="GetRole")]
    with pytest.raises(MalformedDataError):
        ActionTrie.build(records)


def test_node_count_shares_prefixes():
    trie = _trie(["Get", "GetA"], service="x")
    # root + G, e, t, A
    assert trie.node_count() == 5
