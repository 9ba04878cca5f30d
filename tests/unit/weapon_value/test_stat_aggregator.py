"""Tests for weapon_value/weapon_dps/stat_aggregator.py."""

import logging

import pytest

from weapon_value.result import FailureReason
from weapon_value.weapon_dps import (
    ModFragment,
    ModifierRecord,
    Provenance,
    WeaponListing,
    aggregate,
    parse_socket_count,
)
from weapon_value.weapon_dps.stat_aggregator import resolve_socket_count

pytestmark = pytest.mark.unit


def make_listing(**overrides) -> WeaponListing:
    values = dict(physical_damage_text="100-200", attacks_per_second_text="1.5")
    values.update(overrides)
    return WeaponListing(**values)


class TestParseSocketCount:
    """Tests for socket markup parsing."""

    def test_num_sockets_class(self):
        assert parse_socket_count('<div class="sockets numSockets3">') == 3

    def test_counts_rune_sockets(self):
        markup = '<div class="socket socket--rune"></div>' * 2
        assert parse_socket_count(markup) == 2

    def test_num_sockets_wins_over_markers(self):
        markup = 'numSockets1 <div class="socket socket--rune"></div>'
        assert parse_socket_count(markup + markup) == 1

    @pytest.mark.parametrize("markup", [None, "", "<div class='sockets'></div>"])
    def test_undeterminable(self, markup):
        assert parse_socket_count(markup) is None


class TestResolveSocketCount:
    """Tests for explicit count, markup and fallback precedence."""

    def test_explicit_count_wins(self):
        listing = make_listing(socket_count=1, socket_text="numSockets3")
        assert resolve_socket_count(listing) == 1

    def test_zero_is_explicit(self):
        assert resolve_socket_count(make_listing(socket_count=0)) == 0

    def test_markup_used_without_explicit_count(self):
        assert resolve_socket_count(make_listing(socket_text="numSockets3")) == 3

    def test_fallback_defaults_to_two(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="weapon_value.weapon_dps.stat_aggregator"):
            assert resolve_socket_count(make_listing()) == 2
        assert "assuming 2" in caplog.text

    def test_custom_fallback(self):
        assert resolve_socket_count(make_listing(), fallback=1) == 1

    def test_negative_count_raises(self):
        with pytest.raises(ValueError):
            resolve_socket_count(make_listing(socket_count=-1))

    def test_non_int_count_raises(self):
        with pytest.raises(TypeError):
            resolve_socket_count(make_listing(socket_count="2"))


class TestAggregate:
    """Tests for aggregate()."""

    def test_sample_listing(self, sample_listing):
        stats = aggregate(sample_listing).unwrap()

        assert stats.final.phys_min == 360
        assert stats.final.phys_max == 540
        assert stats.final.aps == pytest.approx(1.2)
        assert stats.mods == ModifierRecord(increased_phys_pct=50, quality_pct=20)
        assert stats.rune_mods.is_empty()
        assert stats.rune_slot_count == 2
        assert stats.crit_chance_pct is None

    def test_rune_mods_split_out(self, runed_listing):
        stats = aggregate(runed_listing).unwrap()

        assert stats.mods.increased_phys_pct == 68
        assert stats.rune_mods == ModifierRecord(increased_phys_pct=18)
        assert stats.non_rune_mods == ModifierRecord(increased_phys_pct=50, quality_pct=20)
        assert stats.rune_slot_count == 2

    def test_missing_physical_damage(self):
        result = aggregate(make_listing(physical_damage_text=None))
        assert result.is_err()
        assert result.reason is FailureReason.MISSING_DATA

    def test_missing_attack_rate(self):
        result = aggregate(make_listing(attacks_per_second_text="n/a"))
        assert result.is_err()
        assert result.reason is FailureReason.MISSING_DATA

    def test_negative_explicit_sockets_raise(self):
        with pytest.raises(ValueError):
            aggregate(make_listing(socket_count=-2))

    def test_no_quality_means_zero(self):
        assert aggregate(make_listing()).unwrap().mods.quality_pct == 0

    def test_critical_chance_parsed(self):
        stats = aggregate(make_listing(critical_chance_text="7.50%")).unwrap()
        assert stats.crit_chance_pct == pytest.approx(7.5)

    def test_elemental_from_flat_mods_when_not_displayed(self):
        listing = make_listing(
            fragments=(ModFragment("Adds 23 to 34 Fire Damage", Provenance.RUNE),),
        )
        final = aggregate(listing).unwrap().final
        assert final.element_range("fire") == (23, 34)
        assert final.element_range("cold") == (0, 0)

    def test_displayed_elemental_wins(self):
        listing = make_listing(
            elemental_damage_texts={"lightning": "1-60"},
            fragments=(ModFragment("Adds 1 to 50 Lightning Damage"),),
        )
        final = aggregate(listing).unwrap().final
        assert final.element_range("lightning") == (1, 60)

    def test_companion_attack_speed_excluded(self):
        listing = make_listing(
            fragments=(
                ModFragment("10% increased Attack Speed"),
                ModFragment("Companions have 10% increased Attack Speed"),
            ),
        )
        assert aggregate(listing).unwrap().mods.increased_attack_speed_pct == 10
