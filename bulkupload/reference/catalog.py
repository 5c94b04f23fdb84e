from __future__ import annotations

from types import MappingProxyType
from collections.abc import Mapping

"""Nigerian administrative reference data (states and LGAs).

The catalog is built once at import time and only exposed through read-only
views, so it can be shared by concurrent validation calls without locking.

LGA lists are catalogued for a subset of states. For a state without entries
the LGA check is fail-open: an incomplete catalog must not block otherwise
valid data entry.
"""

__all__ = [
    "STATES",
    "LGAS_BY_STATE",
    "is_valid_state",
    "normalize_state_key",
    "catalog_has_entries_for",
    "lgas_for_state",
    "is_valid_lga",
]

# (key, label) pairs: 36 states + the Federal Capital Territory
STATES: tuple[tuple[str, str], ...] = (
    ("abia", "Abia"),
    ("adamawa", "Adamawa"),
    ("akwa-ibom", "Akwa Ibom"),
    ("anambra", "Anambra"),
    ("bauchi", "Bauchi"),
    ("bayelsa", "Bayelsa"),
    ("benue", "Benue"),
    ("borno", "Borno"),
    ("cross-river", "Cross River"),
    ("delta", "Delta"),
    ("ebonyi", "Ebonyi"),
    ("edo", "Edo"),
    ("ekiti", "Ekiti"),
    ("enugu", "Enugu"),
    ("fct", "Federal Capital Territory"),
    ("gombe", "Gombe"),
    ("imo", "Imo"),
    ("jigawa", "Jigawa"),
    ("kaduna", "Kaduna"),
    ("kano", "Kano"),
    ("katsina", "Katsina"),
    ("kebbi", "Kebbi"),
    ("kogi", "Kogi"),
    ("kwara", "Kwara"),
    ("lagos", "Lagos"),
    ("nasarawa", "Nasarawa"),
    ("niger", "Niger"),
    ("ogun", "Ogun"),
    ("ondo", "Ondo"),
    ("osun", "Osun"),
    ("oyo", "Oyo"),
    ("plateau", "Plateau"),
    ("rivers", "Rivers"),
    ("sokoto", "Sokoto"),
    ("taraba", "Taraba"),
    ("yobe", "Yobe"),
    ("zamfara", "Zamfara"),
)

_LGAS: dict[str, tuple[str, ...]] = {
    "lagos": (
        "Agege", "Ajeromi-Ifelodun", "Alimosho", "Amuwo-Odofin", "Apapa",
        "Badagry", "Epe", "Eti-Osa", "Ibeju-Lekki", "Ifako-Ijaiye", "Ikeja",
        "Ikorodu", "Kosofe", "Lagos Island", "Lagos Mainland", "Mushin", "Ojo",
        "Oshodi-Isolo", "Shomolu", "Surulere",
    ),
    "fct": (
        "Abaji", "Bwari", "Gwagwalada", "Kuje", "Kwali", "Municipal Area Council",
    ),
    "rivers": (
        "Abua/Odual", "Ahoada East", "Ahoada West", "Akuku-Toru", "Andoni",
        "Asari-Toru", "Bonny", "Degema", "Eleme", "Emuoha", "Etche", "Gokana",
        "Ikwerre", "Khana", "Obio/Akpor", "Ogba/Egbema/Ndoni", "Ogu/Bolo",
        "Okrika", "Omuma", "Opobo/Nkoro", "Oyigbo", "Port Harcourt", "Tai",
    ),
    "oyo": (
        "Afijio", "Akinyele", "Atiba", "Atisbo", "Egbeda", "Ibadan North",
        "Ibadan North-East", "Ibadan North-West", "Ibadan South-East",
        "Ibadan South-West", "Ibarapa Central", "Ibarapa East", "Ibarapa North",
        "Ido", "Irepo", "Iseyin", "Itesiwaju", "Iwajowa", "Kajola", "Lagelu",
        "Ogbomosho North", "Ogbomosho South", "Ogo Oluwa", "Olorunsogo",
        "Oluyole", "Ona Ara", "Orelope", "Ori Ire", "Oyo East", "Oyo West",
        "Saki East", "Saki West", "Surulere",
    ),
    "ogun": (
        "Abeokuta North", "Abeokuta South", "Ado-Odo/Ota", "Egbado North",
        "Egbado South", "Ewekoro", "Ifo", "Ijebu East", "Ijebu North",
        "Ijebu North East", "Ijebu Ode", "Ikenne", "Imeko Afon", "Ipokia",
        "Obafemi Owode", "Odeda", "Odogbolu", "Ogun Waterside", "Remo North",
        "Shagamu",
    ),
}

LGAS_BY_STATE: Mapping[str, tuple[str, ...]] = MappingProxyType(_LGAS)

# lower-cased key or label -> canonical key
_STATE_LOOKUP: Mapping[str, str] = MappingProxyType(
    {**{key: key for key, _ in STATES}, **{label.lower(): key for key, label in STATES}}
)


def _fold(value: str | None) -> str:
    return (value or "").strip().lower()


def is_valid_state(value: str | None) -> bool:
    """Return True iff value matches a state key or label (case/whitespace-insensitive)."""
    return _fold(value) in _STATE_LOOKUP


def normalize_state_key(value: str | None) -> str:
    """Return the canonical key for a state key or label.

    Unknown input is returned trimmed and lower-cased; callers are expected to
    check ``is_valid_state`` first.
    """
    folded = _fold(value)
    return _STATE_LOOKUP.get(folded, folded)


def catalog_has_entries_for(state: str | None) -> bool:
    return bool(LGAS_BY_STATE.get(normalize_state_key(state)))


def lgas_for_state(state: str | None) -> tuple[str, ...]:
    return LGAS_BY_STATE.get(normalize_state_key(state), ())


def is_valid_lga(state: str | None, lga: str | None) -> bool:
    """Check that ``lga`` belongs to ``state`` (key or label).

    Uncatalogued states accept any LGA (fail-open). Catalogued states require a
    case-insensitive exact match against one of their LGAs.
    """
    if not catalog_has_entries_for(state):
        return True
    candidate = _fold(lga)
    return any(entry.lower() == candidate for entry in lgas_for_state(state))
