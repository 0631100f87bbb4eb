"""
Tests for the mission catalog and allocation.
"""

from crew_engine.missions import (
    MISSIONS, MISSIONS_BY_ID, OBJECTIVE_KINDS, SecretTrickCount, WinCards,
    allocate_missions,
)


def test_catalog_ids_are_unique():
    assert len(MISSIONS) == 96
    assert len(MISSIONS_BY_ID) == 96


def test_every_template_has_a_known_kind():
    for template in MISSIONS:
        assert isinstance(template, OBJECTIVE_KINDS)
        assert len(template.points) == 3


def test_lookup():
    template = MISSIONS_BY_ID['76']
    assert isinstance(template, WinCards)
    assert template.win == ('B1', 'B2', 'B3')
    assert template.points_for(4) == 3
    assert '999' not in MISSIONS_BY_ID


def test_secret_x_flags():
    assert MISSIONS_BY_ID['9'].has_secret_x
    assert not MISSIONS_BY_ID['9'].x_is_public
    assert MISSIONS_BY_ID['8'].x_is_public
    assert not MISSIONS_BY_ID['53'].has_secret_x
    assert sum(isinstance(m, SecretTrickCount) for m in MISSIONS) == 2


def test_allocation_is_first_fit():
    """Test a template that does not fit is skipped, not reordered."""
    shuffled = [MISSIONS_BY_ID[i] for i in ('88', '90', '91', '92')]
    chosen = allocate_missions(shuffled, 3, 2)
    assert [m.id for m in chosen] == ['90', '91']


def test_allocation_stops_at_end_of_catalog():
    chosen = allocate_missions(MISSIONS, 5, 10000)
    assert len(chosen) == 96


def test_zero_target_allocates_nothing():
    assert allocate_missions(MISSIONS, 3, 0) == []


def test_no_cost_column_allocates_nothing():
    """Test player counts outside 3-5 get no missions."""
    assert allocate_missions(MISSIONS, 2, 12) == []
    assert allocate_missions(MISSIONS, 6, 12) == []
