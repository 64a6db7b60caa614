"""Tests for asset schema membership changes and historical reconstruction.

Key behaviors tested:
1. Every membership change appends one log entry and bumps the version
2. Duplicate adds are silent no-ops; removing a non-member fails
3. attributes_at_version() undoes log entries from the tail without
   touching the live state
4. Reconstruction agrees with a forward replay of the log for any history
"""

import random

import pytest

from schema_registry.assets.types import AssetSchema, ChangeEntry, ChangeKind
from schema_registry.attributes.types import AttributeRef
from schema_registry.errors import AttributeNotFoundError, InvalidArgumentError, InvalidVersionError


def keys(refs) -> set[tuple[str, int]]:
    return {ref.key for ref in refs}


def replay(initial, entries):
    """Apply change entries forward, oldest first."""
    members = list(initial)
    for entry in entries:
        if entry.kind is ChangeKind.ADD:
            members.append(entry.attribute)
        else:
            members = [m for m in members if not m.matches(entry.attribute)]
    return members


@pytest.fixture
def car(color, weight) -> AssetSchema:
    asset = AssetSchema(name="Car", attributes=[color])
    asset.add_attribute(weight)
    asset.remove_attribute(color)
    return asset


class TestMembershipChanges:
    def test_add_bumps_version_and_logs(self, color, weight):
        asset = AssetSchema(name="Car", attributes=[color])
        assert asset.add_attribute(weight) is True
        assert asset.version == 2
        assert keys(asset.attributes) == {color.key, weight.key}
        assert asset.change_history == [ChangeEntry(ChangeKind.ADD, weight)]

    def test_remove_bumps_version_and_logs(self, car, color, weight):
        assert car.version == 3
        assert keys(car.attributes) == {weight.key}
        assert car.change_history[-1] == ChangeEntry(ChangeKind.DELETE, color)

    def test_duplicate_add_is_noop(self, color):
        asset = AssetSchema(name="Car", attributes=[color])
        same = AttributeRef(name="COLOR", version=1, data_type="string")
        assert asset.add_attribute(same) is False
        assert asset.version == 1
        assert asset.change_history == []
        assert len(asset.attributes) == 1

    def test_add_twice_only_counts_once(self, weight):
        asset = AssetSchema(name="Car")
        asset.add_attribute(weight)
        asset.add_attribute(weight)
        assert asset.version == 2
        assert len(asset.attributes) == 1

    def test_other_version_of_same_name_is_added(self, color):
        asset = AssetSchema(name="Car", attributes=[color])
        color_v2 = AttributeRef(name="color", version=2, data_type="enum")
        assert asset.add_attribute(color_v2) is True
        assert keys(asset.attributes) == {("color", 1), ("color", 2)}

    def test_add_none_rejected(self):
        asset = AssetSchema(name="Car")
        with pytest.raises(InvalidArgumentError):
            asset.add_attribute(None)
        assert asset.version == 1

    def test_remove_none_rejected(self, color):
        asset = AssetSchema(name="Car", attributes=[color])
        with pytest.raises(InvalidArgumentError):
            asset.remove_attribute(None)
        assert asset.version == 1

    def test_remove_non_member_fails(self, color, weight):
        asset = AssetSchema(name="Car", attributes=[color])
        with pytest.raises(AttributeNotFoundError):
            asset.remove_attribute(weight)
        assert asset.version == 1
        assert asset.change_history == []
        assert asset.attributes == [color]

    def test_remove_requires_matching_version(self, color):
        asset = AssetSchema(name="Car", attributes=[color])
        with pytest.raises(AttributeNotFoundError):
            asset.remove_attribute(AttributeRef(name="color", version=2, data_type="enum"))

    def test_has_attribute_case_insensitive(self, car):
        assert car.has_attribute("WEIGHT")
        assert not car.has_attribute("color")

    def test_members_named_sorted_by_version(self, color):
        color_v3 = AttributeRef(name="Color", version=3, data_type="enum")
        asset = AssetSchema(name="Car", attributes=[color_v3, color])
        assert [m.version for m in asset.members_named("color")] == [1, 3]


class TestHistoricalReconstruction:
    def test_car_versions(self, car, color, weight):
        assert keys(car.attributes_at_version(1)) == {color.key}
        assert keys(car.attributes_at_version(2)) == {color.key, weight.key}
        assert keys(car.attributes_at_version(3)) == {weight.key}

    def test_current_version_equals_live_members(self, car):
        assert car.attributes_at_version(car.version) == car.attributes

    def test_current_version_returns_copy(self, car):
        result = car.attributes_at_version(car.version)
        result.clear()
        assert len(car.attributes) == 1

    @pytest.mark.parametrize("version", [0, -3, 4])
    def test_out_of_range(self, car, version):
        with pytest.raises(InvalidVersionError) as exc_info:
            car.attributes_at_version(version)
        assert exc_info.value.current_version == 3

    @pytest.mark.parametrize("version", [1.0, "1", True, None])
    def test_non_integer_version(self, car, version):
        with pytest.raises(InvalidVersionError):
            car.attributes_at_version(version)
        with pytest.raises(InvalidVersionError):
            car.changes_since(version)

    def test_does_not_mutate_state(self, car):
        attributes = list(car.attributes)
        history = list(car.change_history)
        car.attributes_at_version(1)
        assert car.attributes == attributes
        assert car.change_history == history
        assert car.version == 3

    def test_initial_attributes(self, car, color):
        assert keys(car.initial_attributes()) == {color.key}

    def test_re_added_attribute(self, color):
        asset = AssetSchema(name="Car", attributes=[color])
        asset.remove_attribute(color)
        asset.add_attribute(color)
        asset.remove_attribute(color)
        assert keys(asset.attributes_at_version(1)) == {color.key}
        assert keys(asset.attributes_at_version(2)) == set()
        assert keys(asset.attributes_at_version(3)) == {color.key}
        assert keys(asset.attributes_at_version(4)) == set()

    def test_changes_since(self, car, color, weight):
        assert car.changes_since(1) == [
            ChangeEntry(ChangeKind.ADD, weight),
            ChangeEntry(ChangeKind.DELETE, color),
        ]
        assert car.changes_since(2) == [ChangeEntry(ChangeKind.DELETE, color)]
        assert car.changes_since(3) == []
        with pytest.raises(InvalidVersionError):
            car.changes_since(0)


class TestHistoryProperties:
    """Random add/remove sequences checked against the log laws."""

    POOL = [
        AttributeRef(name=name, version=version, data_type="string")
        for name in ("color", "weight", "Length", "price")
        for version in (1, 2)
    ]

    def _random_asset(self, seed: int) -> tuple[AssetSchema, list[AttributeRef]]:
        rng = random.Random(seed)
        initial = rng.sample(self.POOL, k=rng.randint(0, 3))
        asset = AssetSchema(name="Random", attributes=list(initial))

        for _ in range(rng.randint(0, 40)):
            ref = rng.choice(self.POOL)
            before = (list(asset.attributes), asset.version)
            if rng.random() < 0.5:
                was_member = any(m.matches(ref) for m in asset.attributes)
                changed = asset.add_attribute(ref)
                assert changed is not was_member
            else:
                try:
                    asset.remove_attribute(ref)
                except AttributeNotFoundError:
                    assert (asset.attributes, asset.version) == before
            assert asset.version == len(asset.change_history) + 1

        return asset, initial

    @pytest.mark.parametrize("seed", range(25))
    def test_version_counts_log_entries(self, seed):
        asset, _ = self._random_asset(seed)
        assert asset.version == len(asset.change_history) + 1

    @pytest.mark.parametrize("seed", range(25))
    def test_forward_replay_matches_reconstruction(self, seed):
        asset, initial = self._random_asset(seed)
        for version in range(1, asset.version + 1):
            expected = replay(initial, asset.change_history[:version - 1])
            assert keys(asset.attributes_at_version(version)) == keys(expected)

    @pytest.mark.parametrize("seed", range(25))
    def test_round_trip_at_current_version(self, seed):
        asset, initial = self._random_asset(seed)
        assert keys(asset.attributes_at_version(asset.version)) == keys(asset.attributes)
        assert keys(replay(initial, asset.change_history)) == keys(asset.attributes)
