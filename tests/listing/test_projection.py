from __future__ import annotations

import copy
import random

from hr_portal.core.enums import SortDirection
from hr_portal.listing.projection import ViewState, get_nested_value, matches_search, matches_status, project

STATUSES = ("pending", "approved", "rejected")
NAMES = ("Martin", "Dupont", "Bernard", "Marchand", "Petit", None)


def _random_collection(rng: random.Random, size: int):
    return [
        {
            "id": i,
            "status": rng.choice(STATUSES),
            "montant": rng.randint(0, 500),
            "employee": {"nom": rng.choice(NAMES)},
            "date_debut": f"2024-{rng.randint(1, 12):02d}-{rng.randint(1, 28):02d}",
        }
        for i in range(size)
    ]


def test_projection_keeps_exactly_the_matching_entities():
    rng = random.Random(1234)
    for _ in range(200):
        collection = _random_collection(rng, rng.randint(0, 15))
        view = ViewState(
            search=rng.choice(["", "mar", "  du ", "x", "PETIT"]),
            status=rng.choice(("all",) + STATUSES),
            sort_field=rng.choice([None, "montant", "date_debut", "employee.nom"]),
            direction=rng.choice(list(SortDirection)),
        )

        rows = project(collection, view, search_fields=("employee.nom",), status_field="status")

        expected = [
            e
            for e in collection
            if matches_status(e, view.status, "status") and matches_search(e, view.search, ("employee.nom",))
        ]
        assert sorted(r["id"] for r in rows) == sorted(e["id"] for e in expected)
        for r in rows:
            assert view.status == "all" or r["status"] == view.status
            term = view.search.strip().lower()
            assert not term or term in (r["employee"]["nom"] or "").lower()


def test_projection_is_deterministic_and_does_not_mutate():
    rng = random.Random(7)
    collection = _random_collection(rng, 30)
    snapshot = copy.deepcopy(collection)
    view = ViewState(search="a", sort_field="montant", direction=SortDirection.DESC)

    first = project(collection, view, search_fields=("employee.nom",), status_field="status")
    second = project(collection, view, search_fields=("employee.nom",), status_field="status")

    assert first == second
    assert collection == snapshot


def test_reversing_direction_reverses_output_without_ties():
    collection = [{"id": i, "montant": v} for i, v in enumerate([30, 10, 50, 20, 40])]

    asc = project(collection, ViewState(sort_field="montant"))
    desc = project(collection, ViewState(sort_field="montant", direction=SortDirection.DESC))

    assert [e["id"] for e in asc] == [1, 3, 0, 4, 2]
    assert desc == list(reversed(asc))


def test_ties_keep_input_order_in_both_directions():
    collection = [{"id": 1, "v": "b"}, {"id": 2, "v": "a"}, {"id": 3, "v": "b"}, {"id": 4, "v": "a"}]

    asc = project(collection, ViewState(sort_field="v"))
    desc = project(collection, ViewState(sort_field="v", direction=SortDirection.DESC))

    assert [e["id"] for e in asc] == [2, 4, 1, 3]
    assert [e["id"] for e in desc] == [1, 3, 2, 4]


def test_status_filter_scenario():
    collection = [{"id": 1, "status": "pending"}, {"id": 2, "status": "approved"}]

    rows = project(collection, ViewState(status="approved"), status_field="status")

    assert rows == [{"id": 2, "status": "approved"}]


def test_status_filter_is_case_insensitive():
    collection = [{"id": 1, "statut": "En Attente"}, {"id": 2, "statut": "approuve"}]

    rows = project(collection, ViewState(status="en attente"), status_field="statut")

    assert [r["id"] for r in rows] == [1]


def test_nested_search_scenario():
    collection = [{"id": 1, "employee": {"nom": "Martin"}}, {"id": 2, "employee": {"nom": "Dupont"}}]

    rows = project(collection, ViewState(search="mar"), search_fields=("employee.nom",))

    assert [r["id"] for r in rows] == [1]


def test_search_ignores_null_and_structured_values():
    collection = [
        {"id": 1, "motif": None},
        {"id": 2, "motif": {"nom": "mar"}},
        {"id": 3, "motif": ["mar"]},
        {"id": 4, "motif": "Mariage"},
    ]

    rows = project(collection, ViewState(search=" MAR "), search_fields=("motif", "missing.path"))

    assert [r["id"] for r in rows] == [4]


def test_dates_sort_chronologically_and_unparsable_last():
    collection = [
        {"id": 1, "date_debut": "2024-03-01"},
        {"id": 2, "date_debut": "pas une date"},
        {"id": 3, "date_debut": "2023-12-31T08:00:00Z"},
        {"id": 4, "date_debut": None},
        {"id": 5, "date_debut": "2024-01-15 10:00:00"},
    ]

    asc = project(collection, ViewState(sort_field="date_debut"))
    desc = project(collection, ViewState(sort_field="date_debut", direction=SortDirection.DESC))

    assert [e["id"] for e in asc] == [3, 5, 1, 2, 4]
    assert [e["id"] for e in desc] == [1, 5, 3, 2, 4]


def test_created_at_is_a_date_field():
    collection = [{"id": 1, "created_at": "2024-05-02"}, {"id": 2, "created_at": "2024-05-01"}]

    rows = project(collection, ViewState(sort_field="created_at"))

    assert [e["id"] for e in rows] == [2, 1]


def test_numbers_sort_numerically_not_lexically():
    collection = [{"id": 1, "montant": 100}, {"id": 2, "montant": 9}, {"id": 3, "montant": 25.5}]

    rows = project(collection, ViewState(sort_field="montant"))

    assert [e["id"] for e in rows] == [2, 3, 1]


def test_declared_numeric_field_accepts_strings_and_puts_garbage_last():
    collection = [{"id": 1, "montant": "1500.00"}, {"id": 2, "montant": "abc"}, {"id": 3, "montant": "250.50"}]

    asc = project(collection, ViewState(sort_field="montant"), numeric_fields=("montant",))
    desc = project(collection, ViewState(sort_field="montant", direction=SortDirection.DESC), numeric_fields=("montant",))

    assert [e["id"] for e in asc] == [3, 1, 2]
    assert [e["id"] for e in desc] == [1, 3, 2]


def test_text_sort_is_case_insensitive_and_none_is_empty():
    collection = [{"id": 1, "nom": "bernard"}, {"id": 2, "nom": None}, {"id": 3, "nom": "Alain"}]

    rows = project(collection, ViewState(sort_field="nom"))

    assert [e["id"] for e in rows] == [2, 3, 1]


def test_toggled_switches_direction_only_on_active_ascending_column():
    view = ViewState(sort_field="nom")

    assert view.toggled("nom").direction is SortDirection.DESC
    assert view.toggled("nom").toggled("nom") == ViewState(sort_field="nom", direction=SortDirection.ASC)
    assert view.toggled("date_debut") == ViewState(sort_field="date_debut")


def test_view_state_round_trips_through_query_args():
    view = ViewState.from_args({"q": "mar", "sort": "montant", "dir": "desc", "status": "approuve"})

    assert view.direction is SortDirection.DESC
    assert ViewState.from_args(view.to_args()) == view
    assert ViewState.from_args({}, default_sort="nom").sort_field == "nom"


def test_get_nested_value():
    entity = {"employe": {"nom": "Martin", "poste": None}}

    assert get_nested_value(entity, "employe.nom") == "Martin"
    assert get_nested_value(entity, "employe.poste", "x") is None
    assert get_nested_value(entity, "employe.nom.deep") is None
    assert get_nested_value(entity, "absent", "x") == "x"


def test_nan_and_infinite_numbers_sort_last():
    collection = [
        {"id": 1, "montant": 10.0},
        {"id": 2, "montant": float("nan")},
        {"id": 3, "montant": 5},
        {"id": 4, "montant": float("inf")},
    ]

    asc = project(collection, ViewState(sort_field="montant"))
    desc = project(collection, ViewState(sort_field="montant", direction=SortDirection.DESC))

    assert [e["id"] for e in asc] == [3, 1, 2, 4]
    assert [e["id"] for e in desc] == [1, 3, 2, 4]
