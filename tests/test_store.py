"""Tests for profile and recipe cache persistence."""

import json

from conftest import FIXED_NOW
from daily_recipes.models import Interaction, RecipeCacheEntry, UserProfile
from daily_recipes.store import (
    CACHE_KEY,
    PROFILE_KEY,
    SCHEMA_VERSION,
    JsonFileStore,
    MemoryStore,
    ProfileRepository,
    RecipeCache,
)
from daily_recipes.validation import parse_recipe


class BrokenStore:
    """Store whose every access fails."""

    def get(self, key):
        raise OSError("disk on fire")

    def put(self, key, value):
        raise OSError("disk on fire")


def _entry(recipe, day="2024-07-15"):
    return RecipeCacheEntry(date=day, recipe=recipe, context={"date": day})


class TestJsonFileStore:
    def test_round_trip(self, tmp_path):
        store = JsonFileStore(tmp_path / "data")
        store.put("thing", {"name": "Käse"})
        assert store.get("thing") == {"name": "Käse"}
        assert (tmp_path / "data" / "thing.json").exists()
        assert not (tmp_path / "data" / "thing.json.tmp").exists()

    def test_missing_key(self, tmp_path):
        assert JsonFileStore(tmp_path).get("nothing") is None


class TestProfileRepository:
    def test_empty_store_gives_defaults(self):
        record = ProfileRepository(MemoryStore()).load()
        assert record.user_profile == UserProfile()
        assert record.learned_preferences == {}
        assert record.interactions == []

    def test_save_and_load(self, sample_profile):
        store = MemoryStore()
        repo = ProfileRepository(store)
        interactions = [Interaction(type="rating", data={"rating": "love"}, timestamp=FIXED_NOW)]

        assert repo.save(sample_profile, {"vegetarian": 2}, interactions, now=FIXED_NOW)

        raw = store.get(PROFILE_KEY)
        assert raw["schemaVersion"] == SCHEMA_VERSION
        assert raw["interactionCount"] == 1
        assert raw["userProfile"]["dietaryRestrictions"] == ["vegetarian", "nut-free"]

        record = repo.load()
        assert record.user_profile == sample_profile
        assert record.learned_preferences == {"vegetarian": 2}
        assert record.interactions[0].type == "rating"
        assert record.last_updated == FIXED_NOW

    def test_corrupt_record_is_not_fatal(self):
        store = MemoryStore()
        store.put(PROFILE_KEY, {"userProfile": {"availableTime": -5}})
        record = ProfileRepository(store).load()
        assert record.user_profile == UserProfile()

    def test_corrupt_file_is_not_fatal(self, tmp_path):
        (tmp_path / f"{PROFILE_KEY}.json").write_text("{not json", encoding="utf-8")
        record = ProfileRepository(JsonFileStore(tmp_path)).load()
        assert record.learned_preferences == {}

    def test_non_numeric_weights_dropped(self):
        store = MemoryStore()
        store.put(PROFILE_KEY, {"learnedPreferences": {"spicy": 2, "odd": "x", "flag": True}})
        assert ProfileRepository(store).load().learned_preferences == {"spicy": 2}

    def test_failed_write_returns_false(self, sample_profile):
        assert ProfileRepository(BrokenStore()).save(sample_profile, {}, []) is False

    def test_failed_read_gives_defaults(self):
        assert ProfileRepository(BrokenStore()).load().user_profile == UserProfile()


class TestRecipeCache:
    def test_add_persists(self, recipe_json, sample_context):
        store = MemoryStore()
        cache = RecipeCache(store)
        cache.add(_entry(parse_recipe(recipe_json, sample_context)))

        raw = store.get(CACHE_KEY)
        assert len(raw["entries"]) == 1
        assert raw["entries"][0]["recipe"]["title"] == "Käsespätzle mit Röstzwiebeln"
        assert len(RecipeCache(store)) == 1

    def test_oldest_entry_evicted(self, recipe_data, sample_context):
        cache = RecipeCache(MemoryStore(), max_entries=50)
        for i in range(51):
            recipe_data["title"] = f"Recipe {i}"
            cache.add(_entry(parse_recipe(json.dumps(recipe_data), sample_context)))

        titles = [entry.recipe.title for entry in cache.entries()]
        assert len(titles) == 50
        assert titles[0] == "Recipe 1"
        assert cache.latest().recipe.title == "Recipe 50"

    def test_for_date(self, recipe_data, sample_context):
        cache = RecipeCache(MemoryStore())
        for day, title in [("2024-07-14", "Sunday"), ("2024-07-15", "Early"), ("2024-07-15", "Late")]:
            recipe_data["title"] = title
            cache.add(_entry(parse_recipe(json.dumps(recipe_data), sample_context), day))

        assert cache.for_date("2024-07-15").recipe.title == "Late"
        assert cache.for_date("2024-07-14").recipe.title == "Sunday"
        assert cache.for_date("2024-07-16") is None

    def test_unreadable_entries_dropped(self, recipe_json, sample_context):
        store = MemoryStore()
        good = _entry(parse_recipe(recipe_json, sample_context)).to_dict()
        store.put(CACHE_KEY, {"schemaVersion": 1, "entries": [{"date": "x"}, good]})
        assert len(RecipeCache(store)) == 1

    def test_write_failure_keeps_entry_in_memory(self, recipe_json, sample_context):
        cache = RecipeCache(BrokenStore())
        cache.add(_entry(parse_recipe(recipe_json, sample_context)))
        assert len(cache) == 1
