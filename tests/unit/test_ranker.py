"""Unit tests for task recommendation ranking."""

from datetime import datetime, timezone

from taskhub_tag_matcher.core.models import Task, TaskStatus
from taskhub_tag_matcher.core.ranker import (
    following_tasks,
    nearby_people,
    nearby_tasks,
    rank_recommended_tasks,
    user_tasks,
)


def _task(task_id: str, tags: set[str], owner: str = "u2", status: str = "open", **kwargs) -> Task:
    return Task(id=task_id, owner_id=owner, status=status, tag_ids=frozenset(tags), **kwargs)


class TestRankRecommendedTasks:
    """rank_recommended_tasks関数のテスト."""

    def test_empty_user_tags_returns_open_tasks(self) -> None:
        """ユーザーのタグが空なら未完了タスクを入力順で全件返すこと."""
        tasks = [
            _task("1", {"A"}),
            _task("2", set(), status="completed"),
            _task("3", {"C"}, owner="u1"),
            _task("4", set(), status=TaskStatus.IN_PROGRESS),
        ]

        result = rank_recommended_tasks(tasks, set(), "u1")

        assert [t.id for t in result] == ["1", "3", "4"]

    def test_excludes_tasks_without_overlap(self) -> None:
        tasks = [_task("1", {"A", "B"}), _task("2", {"C"}), _task("3", {"B"})]

        result = rank_recommended_tasks(tasks, {"A"}, "u1")

        assert [t.id for t in result] == ["1"]

    def test_orders_by_match_count(self) -> None:
        tasks = [
            _task("1", {"A"}),
            _task("2", {"A", "B", "C"}),
            _task("3", {"A", "B"}),
        ]

        result = rank_recommended_tasks(tasks, {"A", "B", "C"}, "u1")

        assert [t.id for t in result] == ["2", "3", "1"]

    def test_ties_keep_input_order(self) -> None:
        tasks = [_task("1", {"B"}), _task("2", {"A", "X"}), _task("3", {"A"})]

        result = rank_recommended_tasks(tasks, {"A", "B"}, "u1")

        assert [t.id for t in result] == ["1", "2", "3"]

    def test_excludes_own_and_completed_tasks(self) -> None:
        tasks = [
            _task("1", {"A"}, owner="u1"),
            _task("2", {"A"}, status="completed"),
            _task("3", {"A"}),
        ]

        result = rank_recommended_tasks(tasks, {"A"}, "u1")

        assert [t.id for t in result] == ["3"]

    def test_does_not_mutate_input(self) -> None:
        tasks = [_task("1", {"A"}), _task("2", {"A", "B"})]
        snapshot = list(tasks)

        rank_recommended_tasks(tasks, {"A", "B"}, "u1")

        assert tasks == snapshot

    def test_empty_tasks(self) -> None:
        assert rank_recommended_tasks([], {"A"}, "u1") == []
        assert rank_recommended_tasks(None, None) == []

    def test_list_tag_ids(self) -> None:
        """tag_ids をリストで渡しても集合として扱われること."""
        tasks = [
            Task(id="1", owner_id="U2", status="open", tag_ids=["A", "B"]),
            Task(id="2", owner_id="U2", status="open", tag_ids=["A"]),
            Task(id="3", owner_id="U2", status="open", tag_ids=["C"]),
        ]

        result = rank_recommended_tasks(tasks, {"A", "B"}, "U1")

        assert [t.id for t in result] == ["1", "2"]
        assert tasks[0].tag_ids == frozenset({"A", "B"})

    def test_single_string_and_missing_tag_ids(self) -> None:
        tasks = [
            Task(id="1", owner_id="U2", status="open", tag_ids="A"),
            Task(id="2", owner_id="U2", status="open", tag_ids=None),
        ]

        assert [t.id for t in rank_recommended_tasks(tasks, ["A"], "U1")] == ["1"]
        assert tasks[1].tag_ids == frozenset()


class TestFollowingTasks:
    def test_newest_first(self) -> None:
        tasks = [
            _task("1", set(), owner="f1", created_at=datetime(2024, 1, 1, tzinfo=timezone.utc)),
            _task("2", set(), owner="f2", created_at=datetime(2024, 3, 1)),
            _task("3", set(), owner="f1", created_at=None),
            _task("4", set(), owner="other", created_at=datetime(2024, 5, 1)),
            _task("5", set(), owner="f2", status="completed", created_at=datetime(2024, 6, 1)),
        ]

        result = following_tasks(tasks, {"f1", "f2"})

        assert [t.id for t in result] == ["2", "1", "3"]

    def test_no_following(self) -> None:
        assert following_tasks([_task("1", set(), owner="f1")], set()) == []


class TestUserTasks:
    def test_owned_and_collaborating(self) -> None:
        tasks = [
            _task("1", set(), owner="u1"),
            _task("2", set(), owner="u2"),
            _task("3", set(), owner="u3"),
            _task("4", set(), owner="u1", status="completed"),
        ]

        assert [t.id for t in user_tasks(tasks, "u1", {"3"})] == ["1", "3"]
        assert [t.id for t in user_tasks(tasks, "u1", {"3"}, completed=True)] == ["4"]


class TestNearbyTasks:
    """nearby_tasks関数のテスト."""

    def test_same_city_newest_first(self) -> None:
        tasks = [
            _task("1", set(), location="Recife, PE", created_at=datetime(2024, 1, 1)),
            _task("2", set(), location=" recife ", created_at=datetime(2024, 4, 1)),
            _task("3", set(), location="Olinda, PE", created_at=datetime(2024, 5, 1)),
            _task("4", set(), owner="u1", location="Recife, PE"),
            _task("5", set(), status="completed", location="Recife, PE"),
            _task("6", set(), location=None),
        ]

        result = nearby_tasks(tasks, "RECIFE, Pernambuco", "u1")

        assert [t.id for t in result] == ["2", "1"]

    def test_no_user_location(self) -> None:
        tasks = [_task("1", set(), location="Recife, PE")]

        assert nearby_tasks(tasks, None, "u1") == []
        assert nearby_tasks(tasks, "", "u1") == []


class TestNearbyPeople:
    """nearby_people関数のテスト."""

    def test_distinct_creators_in_same_city(self) -> None:
        """作成者のプロフィール所在地で判定し、重複を除くこと."""
        tasks = [
            _task("1", set(), owner="u2", owner_location="Recife, PE", location="Olinda, PE"),
            _task("2", set(), owner="u3", owner_location="Olinda, PE", location="Recife, PE"),
            _task("3", set(), owner="u2", owner_location="Recife, PE"),
            _task("4", set(), owner="u4", status="completed", owner_location="recife"),
            _task("5", set(), owner="u1", owner_location="Recife, PE"),
        ]

        assert nearby_people(tasks, "Recife, PE", "u1") == ["u2", "u4"]

    def test_no_user_location(self) -> None:
        tasks = [_task("1", set(), owner_location="Recife, PE")]

        assert nearby_people(tasks, None, "u1") == []
