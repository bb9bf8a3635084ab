# tests/test_unit_generation.py

"""
Tests for the unit naming policy and the generation engine (no database).
"""

import inspect

import pytest

from core.errors import InvalidConfiguration
from models.property_configuration import NamingScheme, PropertyConfigurationBase
from services.unit_generation import (
    compute_floor_display,
    compute_unit_name,
    dedupe_units,
    format_width,
    generate_units,
    iter_candidate_units,
)


CONDO = "condo-1"


def make_config(naming_scheme=None, **layout):
    data = {"blocks": 1, "floors_per_block": 1, "units_per_floor": 2}
    data.update(layout)
    data["naming_scheme"] = naming_scheme or {}
    return PropertyConfigurationBase(**data)


def names(units):
    return [u.unit_number for u in units]


# ------------------------------------------------------------
# Floor labels
# ------------------------------------------------------------

@pytest.mark.parametrize("floor", [1, 2, 3])
def test_low_floors_display_their_number(floor):
    assert compute_floor_display(floor) == str(floor)


def test_fourth_floor_displays_as_3a():
    assert compute_floor_display(4) == "3A"


@pytest.mark.parametrize("floor", [5, 6, 13, 14, 40])
def test_floors_above_four_are_not_shifted(floor):
    assert compute_floor_display(floor) == str(floor)


def test_basement_floors_keep_their_number():
    assert compute_floor_display(0) == "0"
    assert compute_floor_display(-1) == "-1"


# ------------------------------------------------------------
# Naming helpers
# ------------------------------------------------------------

def test_format_width_counts_hashes():
    assert format_width("##") == 2
    assert format_width("###") == 3
    assert format_width("") == 0


def test_compute_unit_name_standard():
    assert compute_unit_name(1, "3A", 2, NamingScheme()) == "013A02"


def test_compute_unit_name_with_prefixes():
    scheme = NamingScheme(block_prefix="T", floor_prefix="-", unit_prefix="-")
    assert compute_unit_name(2, "12", 7, scheme) == "T02-12-07"


def test_compute_unit_name_detected_pattern():
    scheme = NamingScheme(scheme_type="analyze_existing", detected_pattern="A-1-1", start_unit=1)
    assert compute_unit_name(3, "3A", 4, scheme) == "C-3A-4"


def test_wider_values_are_not_truncated():
    scheme = NamingScheme(unit_format="#")
    assert compute_unit_name(1, "1", 12, scheme) == "010112"


# ------------------------------------------------------------
# Concrete scenarios
# ------------------------------------------------------------

def test_single_floor_two_units():
    units = generate_units(CONDO, make_config())

    assert names(units) == ["010101", "010102"]
    first = units[0]
    assert first.condo_id == CONDO
    assert first.block_number == "01"
    assert first.floor_number == 1
    assert first.unit_type == "residential"
    assert first.status == "vacant"
    assert first.excluded is False
    assert first.resident_emails == []
    assert first.notes is None


def test_fourth_floor_uses_3a_segment():
    units = generate_units(CONDO, make_config(floors_per_block=4))

    assert names(units) == [
        "010101", "010102",
        "010201", "010202",
        "010301", "010302",
        "013A01", "013A02",
    ]
    assert [u.floor_number for u in units if "3A" in u.unit_number] == [4, 4]


def test_excluded_unit_is_not_emitted():
    units = generate_units(CONDO, make_config(excluded_units=["010101"]))
    assert names(units) == ["010102"]


def test_colliding_names_keep_first_occurrence():
    # Unpadded segments make floor 1/unit 11 and floor 11/unit 1 both render "1111"
    scheme = {"block_format": "#", "floor_format": "#", "unit_format": "#"}
    config = make_config(scheme, floors_per_block=11, units_per_floor=11)

    units = generate_units(CONDO, config)

    assert len(units) == 11 * 11 - 1
    matches = [u for u in units if u.unit_number == "1111"]
    assert len(matches) == 1
    assert matches[0].floor_number == 1


def test_detected_pattern_uses_block_letters():
    scheme = {"scheme_type": "analyze_existing", "detected_pattern": "A-1-1"}
    units = generate_units(CONDO, make_config(scheme, blocks=2))

    assert names(units) == ["A-1-1", "A-1-2", "B-1-1", "B-1-2"]
    assert [u.block_number for u in units] == ["01", "01", "02", "02"]


def test_detected_pattern_relabels_fourth_floor():
    scheme = {"scheme_type": "analyze_existing", "detected_pattern": "A-1-1"}
    units = generate_units(CONDO, make_config(scheme, floors_per_block=5, units_per_floor=1))

    assert names(units) == ["A-1-1", "A-2-1", "A-3-1", "A-3A-1", "A-5-1"]


def test_analyze_existing_without_pattern_falls_back_to_standard():
    scheme = {"scheme_type": "analyze_existing"}
    units = generate_units(CONDO, make_config(scheme))
    assert names(units) == ["010101", "010102"]


# ------------------------------------------------------------
# Offsets and overrides
# ------------------------------------------------------------

def test_start_floor_offsets_actual_floor():
    units = generate_units(
        CONDO, make_config({"start_floor": 3}, floors_per_block=3, units_per_floor=1)
    )

    assert names(units) == ["010301", "013A01", "010501"]
    assert [u.floor_number for u in units] == [3, 4, 5]


def test_start_unit_offsets_unit_number():
    units = generate_units(CONDO, make_config({"start_unit": 5}))
    assert names(units) == ["010105", "010106"]


def test_unit_types_are_looked_up_by_final_name():
    config = make_config(unit_types={"010102": "commercial", "1": "penthouse"})
    units = generate_units(CONDO, config)

    assert [u.unit_type for u in units] == ["residential", "commercial"]


def test_legacy_boolean_unit_types_are_ignored():
    config = make_config(unit_types={"residential": True})
    assert config.unit_types == {}


# ------------------------------------------------------------
# Properties
# ------------------------------------------------------------

def test_generation_is_deterministic():
    config = make_config(blocks=3, floors_per_block=6, units_per_floor=4, excluded_units=["020301"])

    first = [u.model_dump() for u in generate_units(CONDO, config)]
    second = [u.model_dump() for u in generate_units(CONDO, config)]

    assert first == second


def test_output_respects_exclusions_uniqueness_and_count_bound():
    excluded = ["010101", "023A02", "030601", "not-a-unit"]
    config = make_config(blocks=3, floors_per_block=6, units_per_floor=4, excluded_units=excluded)

    units = generate_units(CONDO, config)
    generated = names(units)

    assert not set(excluded) & set(generated)
    assert len(generated) == len(set(generated))
    assert len(generated) == 3 * 6 * 4 - 3


def test_count_equals_product_without_exclusions():
    config = make_config(blocks=2, floors_per_block=10, units_per_floor=8)
    assert len(generate_units(CONDO, config)) == 2 * 10 * 8


def test_iteration_is_block_then_floor_then_position():
    units = generate_units(CONDO, make_config(blocks=2, floors_per_block=2, units_per_floor=2))
    assert names(units) == [
        "010101", "010102", "010201", "010202",
        "020101", "020102", "020201", "020202",
    ]


def test_candidates_are_yielded_lazily():
    stream = iter_candidate_units(CONDO, make_config())
    assert inspect.isgenerator(stream)
    assert next(stream).unit_number == "010101"


def test_dedupe_units_keeps_order():
    units = list(iter_candidate_units(CONDO, make_config()))
    assert names(dedupe_units(units + units)) == ["010101", "010102"]


# ------------------------------------------------------------
# Invalid input
# ------------------------------------------------------------

@pytest.mark.parametrize(
    "layout",
    [
        {"blocks": 0},
        {"blocks": -2},
        {"blocks": None},
        {"floors_per_block": 0},
        {"units_per_floor": None},
    ],
)
def test_non_positive_layout_is_rejected(layout):
    with pytest.raises(InvalidConfiguration):
        generate_units(CONDO, make_config(**layout))


def test_empty_condo_id_is_rejected():
    with pytest.raises(InvalidConfiguration):
        generate_units("", make_config())


def test_letter_blocks_are_capped_at_26():
    scheme = {"scheme_type": "analyze_existing", "detected_pattern": "A-1-1"}
    with pytest.raises(InvalidConfiguration):
        generate_units(CONDO, make_config(scheme, blocks=27, units_per_floor=1))


def test_standard_scheme_allows_more_than_26_blocks():
    units = generate_units(CONDO, make_config(blocks=27, units_per_floor=1))
    assert units[-1].unit_number == "270101"
