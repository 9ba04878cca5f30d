"""Tests for weapon_value/weapon_dps/evaluator.py - the evaluation pipeline."""

import logging
from dataclasses import FrozenInstanceError, replace

import pytest

from weapon_value.result import FailureReason
from weapon_value.weapon_dps import (
    ModFragment,
    WeaponEvaluator,
    WeaponListing,
    dps_per_price,
    rank_by_value,
)


class TestDpsPerPrice:
    """Tests for dps_per_price()."""

    def test_ratio(self):
        assert dps_per_price(540.0, 10.0) == pytest.approx(54.0)

    @pytest.mark.parametrize("price", [None, 0, -5])
    def test_no_positive_price(self, price):
        assert dps_per_price(540.0, price) is None


class TestEvaluate:
    """Tests for WeaponEvaluator.evaluate()."""

    def test_sample_listing(self, evaluator, sample_listing):
        evaluation = evaluator.evaluate(sample_listing).unwrap()

        assert evaluation.item_id == "sample"
        assert evaluation.base.phys_min == pytest.approx(200)
        assert evaluation.base.phys_max == pytest.approx(300)
        assert evaluation.current.total_dps == pytest.approx(540)
        assert evaluation.best_runes.configuration.as_dict() == {"greater-iron": 2}
        assert evaluation.best_dps == pytest.approx(669.6)
        assert evaluation.current_value_ratio == pytest.approx(54.0)
        assert evaluation.value_ratio == pytest.approx(66.96)
        assert evaluation.rune_status is None
        assert evaluation.notes == ()

    def test_evaluation_is_immutable(self, evaluator, sample_listing):
        evaluation = evaluator.evaluate(sample_listing).unwrap()
        with pytest.raises(FrozenInstanceError):
            evaluation.value_ratio = 0.0

    def test_socketed_runes_are_replaced(self, evaluator, runed_listing):
        """The current rune is stripped before trying alternatives."""
        evaluation = evaluator.evaluate(runed_listing).unwrap()

        assert evaluation.base.phys_min == pytest.approx(200)
        assert evaluation.current.total_dps == pytest.approx(604.8)
        assert evaluation.best_runes.modifiers.increased_phys_pct == pytest.approx(86)
        assert evaluation.best_dps == pytest.approx(669.6)
        assert evaluation.value_ratio == pytest.approx(133.92)

    def test_zero_sockets_keeps_current(self, evaluator, sample_listing):
        evaluation = evaluator.evaluate(replace(sample_listing, socket_count=0)).unwrap()

        assert evaluation.best_runes is None
        assert evaluation.rune_status is FailureReason.NO_RUNE_SOCKETS
        assert evaluation.best_dps == pytest.approx(540)
        assert evaluation.value_ratio == pytest.approx(54.0)
        assert evaluation.notes

    def test_unpriced_listing(self, evaluator, sample_listing):
        evaluation = evaluator.evaluate(replace(sample_listing, price_amount=None)).unwrap()
        assert evaluation.value_ratio is None
        assert evaluation.current_value_ratio is None
        assert any("price" in note for note in evaluation.notes)

    def test_missing_data(self, evaluator):
        result = evaluator.evaluate(
            WeaponListing(physical_damage_text=None, attacks_per_second_text="1.2")
        )
        assert result.reason is FailureReason.MISSING_DATA

    def test_inconsistent_modifiers(self, evaluator, sample_listing):
        listing = replace(
            sample_listing,
            quality_text=None,
            fragments=(ModFragment("100% reduced Physical Damage"),),
        )
        result = evaluator.evaluate(listing)
        assert result.is_err()
        assert result.reason is FailureReason.INCONSISTENT_MODIFIERS

    def test_listing_crit_chance_used(self, evaluator, sample_listing):
        evaluation = evaluator.evaluate(
            replace(sample_listing, critical_chance_text="10.00%")
        ).unwrap()
        assert evaluation.current.total_dps_with_crit == pytest.approx(540 * 1.05)

    def test_default_crit_chance(self, evaluator, sample_listing):
        evaluation = evaluator.evaluate(sample_listing).unwrap()
        assert evaluation.current.total_dps_with_crit == pytest.approx(540 * 1.025)

    def test_fallback_socket_count_configurable(self, sample_listing):
        listing = replace(sample_listing, socket_text=None)
        evaluation = WeaponEvaluator(fallback_socket_count=1).evaluate(listing).unwrap()

        assert evaluation.stats.rune_slot_count == 1
        assert evaluation.best_runes.candidates_evaluated == 4

    def test_negative_fallback_rejected(self):
        with pytest.raises(ValueError):
            WeaponEvaluator(fallback_socket_count=-1)

    def test_non_int_fallback_rejected(self):
        with pytest.raises(TypeError):
            WeaponEvaluator(fallback_socket_count=1.5)

    def test_injected_catalog(self, physical_catalog):
        listing = WeaponListing(
            physical_damage_text="100-100",
            attacks_per_second_text="1.00",
            socket_count=2,
            price_amount=2,
        )
        evaluation = WeaponEvaluator(catalog=physical_catalog).evaluate(listing).unwrap()

        assert evaluation.best_dps == pytest.approx(136)
        assert evaluation.value_ratio == pytest.approx(68)


class TestRanking:
    """Tests for evaluate_many() / rank()."""

    def test_rank_by_value_orders_descending(self, evaluator, sample_listing):
        listings = [
            replace(sample_listing, item_id="a", price_amount=30),
            replace(sample_listing, item_id="b", price_amount=10),
            replace(sample_listing, item_id="c", price_amount=20),
        ]
        ranked = evaluator.rank(listings)
        assert [e.item_id for e in ranked] == ["b", "c", "a"]

    def test_rank_limit_and_default_top_n(self, evaluator, sample_listing):
        listings = [
            replace(sample_listing, item_id=str(i), price_amount=float(i))
            for i in range(1, 9)
        ]
        assert len(evaluator.rank(listings)) == 5
        assert [e.item_id for e in evaluator.rank(listings, limit=2)] == ["1", "2"]

    def test_ties_keep_input_order(self, evaluator, sample_listing):
        listings = [replace(sample_listing, item_id=x) for x in ("x", "y", "z")]
        assert [e.item_id for e in evaluator.rank(listings)] == ["x", "y", "z"]

    def test_unpriced_excluded_from_ranking(self, evaluator, sample_listing):
        evaluations = evaluator.evaluate_many([
            replace(sample_listing, item_id="priced"),
            replace(sample_listing, item_id="free", price_amount=None),
        ])
        assert len(evaluations) == 2
        assert [e.item_id for e in rank_by_value(evaluations)] == ["priced"]

    def test_skips_unevaluable_and_warns_on_inconsistent(
        self, evaluator, sample_listing, caplog
    ):
        broken = replace(
            sample_listing,
            item_id="broken",
            quality_text=None,
            fragments=(ModFragment("100% reduced Physical Damage"),),
        )
        not_weapon = WeaponListing(
            physical_damage_text=None, attacks_per_second_text=None, item_id="ring"
        )

        with caplog.at_level(logging.WARNING):
            evaluations = evaluator.evaluate_many([sample_listing, broken, not_weapon])

        assert [e.item_id for e in evaluations] == ["sample"]
        assert "broken" in caplog.text
        assert "ring" not in caplog.text


class TestFromConfig:
    def test_uses_config_values(self, temp_config, physical_catalog):
        temp_config.fallback_socket_count = 3
        temp_config.crit_chance_pct = 12
        temp_config.set_rune_catalog(physical_catalog)

        evaluator = WeaponEvaluator.from_config(temp_config)

        assert evaluator.fallback_socket_count == 3
        assert evaluator.crit_chance_pct == 12
        assert [r.id for r in evaluator.catalog] == ["greater-iron", "quipolatl"]
