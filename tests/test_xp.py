"""Tests for XP awards and difficulty limits."""

import logging

import pytest

from prodigy_levels.db import Database
from prodigy_levels.errors import (
    InvalidXPAmountError,
    UserNotFoundError,
    XPRewardOutOfRangeError,
)
from prodigy_levels.levels import xp_required_for_level
from prodigy_levels.xp import (
    PROJECT_CREATE_XP,
    PROJECT_JOIN_XP,
    XP_LIMITS,
    award_project_created,
    award_project_joined,
    award_xp,
    complete_project,
    get_user_xp_info,
    get_xp_limits_for_difficulty,
    validate_project_xp,
)


@pytest.fixture
def db(tmp_path):
    database = Database(db_path=tmp_path / "test.db")
    yield database
    database.close()


class TestXpLimits:
    def test_known_difficulties(self):
        assert get_xp_limits_for_difficulty("beginner") == (50, 100)
        assert get_xp_limits_for_difficulty("intermediate") == (100, 300)
        assert get_xp_limits_for_difficulty("advanced") == (300, 600)
        assert get_xp_limits_for_difficulty("expert") == (600, 1000)

    def test_case_insensitive(self):
        assert get_xp_limits_for_difficulty("  Expert ") == (600, 1000)

    def test_unknown_falls_back_to_beginner(self):
        assert get_xp_limits_for_difficulty("legendary") == XP_LIMITS["beginner"]

    def test_none_falls_back_to_beginner(self):
        assert get_xp_limits_for_difficulty(None) == XP_LIMITS["beginner"]

    def test_ranges_ordered(self):
        for low, high in XP_LIMITS.values():
            assert 0 < low < high


class TestValidateProjectXp:
    def test_within_range(self):
        assert validate_project_xp("advanced", 450) == 450

    def test_bounds_inclusive(self):
        assert validate_project_xp("advanced", 300) == 300
        assert validate_project_xp("advanced", 600) == 600

    def test_below_min(self):
        with pytest.raises(XPRewardOutOfRangeError) as exc_info:
            validate_project_xp("advanced", 10)
        assert str(exc_info.value) == "XP reward must be between 300 and 600 for advanced difficulty"

    def test_above_max(self):
        with pytest.raises(XPRewardOutOfRangeError):
            validate_project_xp("beginner", 5000)

    def test_out_of_range_is_invalid_amount(self):
        with pytest.raises(InvalidXPAmountError):
            validate_project_xp("expert", 5000)

    def test_negative(self):
        with pytest.raises(InvalidXPAmountError) as exc_info:
            validate_project_xp("beginner", -5)
        assert not isinstance(exc_info.value, XPRewardOutOfRangeError)

    def test_unknown_difficulty_uses_beginner(self):
        with pytest.raises(XPRewardOutOfRangeError) as exc_info:
            validate_project_xp("legendary", 500)
        assert exc_info.value.difficulty == "beginner"
        assert (exc_info.value.low, exc_info.value.high) == (50, 100)


class TestAwardXp:
    def test_awards_without_level_up(self, db):
        user = db.create_user("ada")
        award = award_xp(db, user["id"], 100, reason="Project completed")
        assert award.xp_awarded == 100
        assert award.old_total_xp == 0
        assert award.new_total_xp == 100
        assert award.leveled_up is False
        assert award.old_level == award.new_level == 1
        assert award.reason == "Project completed"
        assert db.get_activity(user["id"]) == []

    def test_level_up_writes_activity(self, db):
        user = db.create_user("ada", total_xp=100)
        award = award_xp(db, user["id"], 300)
        assert award.leveled_up is True
        assert award.old_level == 1
        assert award.new_level == 3
        entries = db.get_activity(user["id"])
        assert len(entries) == 1
        assert entries[0]["action_type"] == "level_up"
        assert entries[0]["description"] == "Reached level 3!"
        assert entries[0]["data"] == {"new_level": 3, "old_level": 1, "xp_gained": 300}

    def test_progress_reflects_new_total(self, db):
        user = db.create_user("ada")
        award = award_xp(db, user["id"], xp_required_for_level(2))
        assert award.progress.current_level == 2
        assert award.progress.progress_xp == 0

    def test_persists_total(self, db):
        user = db.create_user("ada")
        award_xp(db, user["id"], 40)
        award_xp(db, user["id"], 60)
        assert db.get_user(user["id"])["total_xp"] == 100

    def test_negative_amount(self, db):
        user = db.create_user("ada")
        with pytest.raises(InvalidXPAmountError):
            award_xp(db, user["id"], -5)

    def test_unknown_user(self, db):
        with pytest.raises(UserNotFoundError):
            award_xp(db, 404, 10)

    def test_logs_award(self, db, caplog):
        user = db.create_user("ada")
        with caplog.at_level(logging.INFO, logger="prodigy_levels.xp"):
            award_xp(db, user["id"], 200, reason="demo")
        assert "XP awarded: 200 to user ada for demo" in caplog.text
        assert "leveled up" in caplog.text


class TestGetUserXpInfo:
    def test_returns_stats(self, db):
        user = db.create_user("ada", total_xp=350)
        stats = get_user_xp_info(db, user["id"])
        assert stats.username == "ada"
        assert stats.total_xp == 350
        assert stats.level == 3

    def test_unknown_user(self, db):
        with pytest.raises(UserNotFoundError):
            get_user_xp_info(db, 1)


class TestProjectAwards:
    def test_complete_awards_each_member(self, db):
        ada = db.create_user("ada")
        bob = db.create_user("bob", total_xp=100)
        awards = complete_project(db, [ada["id"], bob["id"]], 200, "Chat App", difficulty="intermediate")
        assert [a.username for a in awards] == ["ada", "bob"]
        assert db.get_user(ada["id"])["total_xp"] == 200
        assert db.get_user(bob["id"])["total_xp"] == 300

    def test_complete_writes_activity(self, db):
        ada = db.create_user("ada")
        complete_project(db, [ada["id"]], 250, "Chat App", difficulty="intermediate")
        entries = db.get_activity(ada["id"])
        assert entries[0]["action_type"] == "project_completed"
        assert entries[0]["description"] == 'Completed "Chat App" and earned 250 XP!'
        assert entries[0]["data"] == {
            "project_title": "Chat App",
            "xp_earned": 250,
            "difficulty": "intermediate",
        }
        assert entries[1]["action_type"] == "level_up"

    def test_complete_deduplicates_members(self, db):
        ada = db.create_user("ada")
        awards = complete_project(db, [ada["id"], ada["id"]], 80, "Todo")
        assert len(awards) == 1
        assert db.get_user(ada["id"])["total_xp"] == 80

    def test_complete_unknown_user_awards_nobody(self, db):
        ada = db.create_user("ada")
        with pytest.raises(UserNotFoundError):
            complete_project(db, [ada["id"], 404], 80, "Todo")
        assert db.get_user(ada["id"])["total_xp"] == 0
        assert db.get_activity(ada["id"]) == []

    def test_complete_rejects_out_of_range_reward(self, db):
        ada = db.create_user("ada")
        with pytest.raises(XPRewardOutOfRangeError):
            complete_project(db, [ada["id"]], 5000, "Todo", difficulty="beginner")
        assert db.get_user(ada["id"])["total_xp"] == 0

    def test_complete_rejects_negative_reward(self, db):
        ada = db.create_user("ada")
        with pytest.raises(InvalidXPAmountError):
            complete_project(db, [ada["id"]], -10, "Todo")

    def test_created_bonus(self, db):
        ada = db.create_user("ada")
        award = award_project_created(db, ada["id"], "Chat App")
        assert award.xp_awarded == PROJECT_CREATE_XP == 100
        assert award.reason == "Creating a new project"
        assert db.get_activity(ada["id"])[0]["action_type"] == "project_created"

    def test_joined_bonus(self, db):
        ada = db.create_user("ada")
        award = award_project_joined(db, ada["id"], "Chat App")
        assert award.xp_awarded == PROJECT_JOIN_XP == 25
        assert award.reason == "Joining a project"
        entry = db.get_activity(ada["id"])[0]
        assert entry["action_type"] == "project_joined"
        assert entry["data"] == {"project_title": "Chat App", "xp_earned": 25}
