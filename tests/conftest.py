import time
from pathlib import Path

import pytest

from weapon_value.config import Config
from weapon_value.weapon_dps import (
    BaseStats,
    ModFragment,
    ModifierRecord,
    Provenance,
    RuneCatalog,
    RuneDefinition,
    RuneKind,
    WeaponEvaluator,
    WeaponListing,
)


@pytest.fixture
def temp_config(tmp_path):
    """
    Provide a fresh Config backed by a file under tmp_path.

    Fails loudly if the defaults leaked from somewhere else.
    """
    config_path = tmp_path / f"config_{id(tmp_path)}_{time.time_ns()}.json"
    config = Config(config_file=config_path)

    assert config.fallback_socket_count == 2, \
        f"FIXTURE CONTAMINATED! fallback={config.fallback_socket_count}, file={config.config_file}"
    assert config.data["runes"] is None, \
        f"FIXTURE CONTAMINATED! runes={config.data['runes']}, file={config.config_file}"

    return config


@pytest.fixture
def physical_catalog() -> RuneCatalog:
    """Catalog with only the physical and attack speed runes."""
    return RuneCatalog([
        RuneDefinition(
            id="greater-iron",
            name="Greater Iron Rune",
            kind=RuneKind.MULTIPLICATIVE_PHYSICAL,
            effect=ModifierRecord(increased_phys_pct=18),
        ),
        RuneDefinition(
            id="quipolatl",
            name="Soul Core of Quipolatl",
            kind=RuneKind.ATTACK_SPEED,
            effect=ModifierRecord(increased_attack_speed_pct=5),
        ),
    ])


@pytest.fixture
def plain_base() -> BaseStats:
    """100-100 physical, 1.0 attacks per second."""
    return BaseStats(phys_min=100, phys_max=100, aps=1.0)


@pytest.fixture
def evaluator() -> WeaponEvaluator:
    return WeaponEvaluator()


@pytest.fixture
def sample_listing() -> WeaponListing:
    """
    Two-socket weapon with 50% increased physical damage and 20% quality.

    Base 200-300 at 1.2 APS displays 360-540 (540 DPS).
    """
    return WeaponListing(
        physical_damage_text="360-540",
        attacks_per_second_text="1.20",
        quality_text="+20%",
        fragments=(ModFragment("50% increased Physical Damage"),),
        socket_text='<div class="sockets numSockets2"></div>',
        price_amount=10.0,
        price_currency="divine",
        item_id="sample",
    )


@pytest.fixture
def runed_listing() -> WeaponListing:
    """
    Same base as sample_listing with one Greater Iron Rune socketed.

    68% increased physical and 20% quality over 200-300 displays 403.2-604.8.
    """
    return WeaponListing(
        physical_damage_text="403.2-604.8",
        attacks_per_second_text="1.20",
        quality_text="+20%",
        fragments=(
            ModFragment("50% increased Physical Damage"),
            ModFragment("18% increased Physical Damage", Provenance.RUNE),
        ),
        socket_text=(
            '<div class="socket socket--rune"></div>'
            '<div class="socket socket--rune"></div>'
        ),
        price_amount=5.0,
        price_currency="exalted",
        item_id="runed",
    )


def pytest_collection_modifyitems(config, items):
    """Assign tier markers based on test location."""
    for item in items:
        path = Path(str(item.fspath)).as_posix()

        if "/tests/unit/" in path:
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.integration)
