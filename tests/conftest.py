"""Shared inputs for the design tests."""
import copy

import pytest

from rcdesign import design


BEAM = {
    "id": "B1",
    "element_kind": "beam",
    "geometry": {"width": 300, "height": 500, "clear_cover": 40},
    "material": {"fc": 30, "fy": 400},
    "forces": {"moment_x": 180, "shear_x": 120},
}

COLUMN = {
    "id": "C1",
    "element_kind": "column",
    "geometry": {"width": 400, "height": 400, "span": 3500, "clear_cover": 40},
    "material": {"fc": 30, "fy": 400},
    "forces": {"axial": 1200, "moment_x": 80, "shear_x": 40},
}

SLAB = {
    "id": "S1",
    "element_kind": "slab",
    "geometry": {"width": 1000, "height": 150, "span": 4000, "clear_cover": 20},
    "material": {"fc": 25, "fy": 400},
    "loads": {"dead": 5, "live": 3},
    "forces": {"moment_x": 20, "shear_x": 25},
    "constraints": {"exposure": "mild"},
}


def make_input(base: dict, **sections) -> dict:
    """Deep copy of *base* with the given sections updated."""
    data = copy.deepcopy(base)
    for name, values in sections.items():
        if isinstance(values, dict) and isinstance(data.get(name), dict):
            data[name].update(values)
        else:
            data[name] = values
    return data


@pytest.fixture(scope="module")
def beam_result():
    """Reference beam 300x500, fc 30, fy 400, Mu 180 kNm, Vu 120 kN."""
    return design(BEAM)


@pytest.fixture(scope="module")
def column_result():
    return design(COLUMN)


@pytest.fixture(scope="module")
def slab_result():
    return design(SLAB)
