from __future__ import annotations

import pytest

from bulkupload.reference import catalog
from bulkupload.reference.catalog import (
    LGAS_BY_STATE,
    STATES,
    catalog_has_entries_for,
    is_valid_lga,
    is_valid_state,
    lgas_for_state,
    normalize_state_key,
)


def test_catalog_has_36_states_plus_fct():
    assert len(STATES) == 37
    keys = [k for k, _ in STATES]
    assert len(set(keys)) == 37
    assert "fct" in keys


@pytest.mark.parametrize("value", ["lagos", "Lagos", " LAGOS ", "lAgOs"])
def test_is_valid_state_case_and_whitespace_insensitive(value):
    assert is_valid_state(value) is True


def test_is_valid_state_matches_labels():
    assert is_valid_state("Federal Capital Territory")
    assert is_valid_state("akwa ibom")
    assert is_valid_state("akwa-ibom")


@pytest.mark.parametrize("value", ["", "   ", "Atlantis", "lagos state", None])
def test_is_valid_state_rejects_unknown(value):
    assert is_valid_state(value) is False


def test_normalize_state_key():
    assert normalize_state_key(" Lagos ") == "lagos"
    assert normalize_state_key("Cross River") == "cross-river"
    assert normalize_state_key("Federal Capital Territory") == "fct"
    # unknown input passes through folded
    assert normalize_state_key(" Atlantis ") == "atlantis"


def test_is_valid_lga_catalogued_state():
    assert is_valid_lga("lagos", "Lagos Island") is True
    assert is_valid_lga("Lagos", "lagos island") is True
    assert is_valid_lga("LAGOS", "  Epe ") is True
    assert is_valid_lga("lagos", "Nonexistent LGA") is False
    assert is_valid_lga("lagos", "Timbuktu") is False


def test_is_valid_lga_fail_open_for_uncatalogued_state():
    assert catalog_has_entries_for("zamfara") is False
    assert lgas_for_state("zamfara") == ()
    assert is_valid_lga("zamfara", "AnyString") is True
    assert is_valid_lga("Kano", "Whatever") is True


def test_catalog_has_entries_for():
    assert catalog_has_entries_for("lagos")
    assert catalog_has_entries_for("Federal Capital Territory")
    assert not catalog_has_entries_for("")


def test_lga_lists_do_not_cross_states():
    # Surulere exists in Lagos and Oyo, Ikeja only in Lagos
    assert is_valid_lga("oyo", "Surulere")
    assert not is_valid_lga("oyo", "Ikeja")


def test_catalog_is_read_only():
    with pytest.raises(TypeError):
        LGAS_BY_STATE["kano"] = ("Nassarawa",)  # type: ignore[index]
    with pytest.raises(TypeError):
        catalog._STATE_LOOKUP["atlantis"] = "atlantis"  # type: ignore[index]
    assert isinstance(LGAS_BY_STATE["lagos"], tuple)
