"""
Tests for the protocol vocabulary
"""
import json
import os
from unittest.mock import patch

import pytest

from privacy_consent.core.errors import TokenKind
from privacy_consent.core.vocabulary import (DEFAULT_CATEGORIES, DEFAULT_PURPOSES, Vocabulary,
                                             get_vocabulary, load_vocabulary)


def test_builtin_catalogue(vocabulary):
    assert vocabulary.categories == DEFAULT_CATEGORIES == ("coo", "equ", "sfw", "geo")
    assert vocabulary.purposes == DEFAULT_PURPOSES == ("fcn", "per", "adm", "ana", "com", "trd", "loc")
    assert vocabulary.consent_header_name == "Privacy-Consent"
    assert vocabulary.ack_header_name == "Privacy-Consent-Ack"


def test_classify(vocabulary):
    assert vocabulary.classify("coo") is TokenKind.CATEGORY
    assert vocabulary.classify("ana") is TokenKind.PURPOSE
    assert vocabulary.classify("Coo") is None
    assert vocabulary.classify("tracking") is None


def test_vocabulary_is_immutable(vocabulary):
    with pytest.raises(Exception):
        vocabulary.categories = ("x",)


@pytest.mark.parametrize("categories,purposes", [
    ((), ("ana",)),
    (("coo",), ()),
    (("coo", "coo"), ("ana",)),
    (("coo",), ("coo",)),
    (("co o",), ("ana",)),
    (("coo",), ("a{na",)),
    (("tracking",), ("ana",)),
    (("coo",), ("NOT",)),
    (("coo", "geo2"), ("ana",)),
    (("coo",), ("an",)),
])
def test_invalid_vocabularies_rejected(categories, purposes):
    with pytest.raises(ValueError):
        Vocabulary(categories=categories, purposes=purposes)


def test_load_vocabulary(tmp_path):
    path = tmp_path / "vocabulary.json"
    path.write_text(json.dumps({"categories": ["one", "two"], "purposes": ["pur"]}), encoding="utf-8")

    vocabulary = load_vocabulary(path, consent_header_name="X-Consent")

    assert vocabulary.categories == ("one", "two")
    assert vocabulary.purposes == ("pur",)
    assert vocabulary.consent_header_name == "X-Consent"


def test_load_vocabulary_missing_key(tmp_path):
    path = tmp_path / "vocabulary.json"
    path.write_text(json.dumps({"categories": ["one"]}), encoding="utf-8")

    with pytest.raises(ValueError, match="purposes"):
        load_vocabulary(path)


def test_get_vocabulary_from_settings(tmp_path):
    path = tmp_path / "vocabulary.json"
    path.write_text(json.dumps({"categories": ["c1"], "purposes": ["p1", "p2"]}), encoding="utf-8")

    with patch.dict(os.environ, {
        "PRIVACY_VOCABULARY_FILE": str(path),
        "PRIVACY_CONSENT_HEADER_NAME": "X-Consent",
    }):
        vocabulary = get_vocabulary()

    assert vocabulary.categories == ("c1",)
    assert vocabulary.purposes == ("p1", "p2")
    assert vocabulary.consent_header_name == "X-Consent"


def test_get_vocabulary_is_cached():
    assert get_vocabulary() is get_vocabulary()


def test_width_error_names_the_widths():
    with pytest.raises(ValueError, match=r"\[2, 3\]"):
        Vocabulary(categories=("coo", "equ"), purposes=("an",))


def test_load_vocabulary_rejects_mixed_widths(tmp_path):
    path = tmp_path / "vocabulary.json"
    path.write_text(json.dumps({"categories": ["cookie"], "purposes": ["ana"]}), encoding="utf-8")

    with pytest.raises(ValueError, match="width"):
        load_vocabulary(path)
