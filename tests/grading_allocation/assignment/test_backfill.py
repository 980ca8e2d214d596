from __future__ import annotations

from grading_allocation.assignment import AssignmentEntry, fill_missing, grader_pool
from grading_allocation.target import StudentTarget, TeamTarget


def team(team_id: str, *graders: str) -> AssignmentEntry:
    return AssignmentEntry(target=TeamTarget(id=team_id), grader_ids=list(graders))


class TestFillMissing:
    def test_orphans_receive_first_pool_grader(self):
        entries = [team("t1", "A"), team("t2"), team("t3")]

        filled = fill_missing(entries)

        assert [entry.grader_ids for entry in filled] == [["A"], ["A"], ["A"]]

    def test_pool_follows_target_order(self):
        entries = [team("t1"), team("t2", "B", "A"), team("t3", "C")]

        assert grader_pool(entries) == ["B", "A", "C"]
        assert fill_missing(entries)[0].grader_ids == ["B"]

    def test_assigned_targets_are_kept(self):
        entries = [team("t1", "A"), team("t2", "B", "C")]

        filled = fill_missing(entries)

        assert [entry.grader_ids for entry in filled] == [["A"], ["B", "C"]]

    def test_empty_pool_leaves_gap(self):
        entries = [team("t1"), team("t2")]

        filled = fill_missing(entries)

        assert all(entry.grader_ids == [] for entry in filled)

    def test_input_is_not_modified(self):
        entries = [team("t1", "A"), team("t2")]

        fill_missing(entries)

        assert entries[1].grader_ids == []

    def test_student_targets(self):
        entries = [
            AssignmentEntry(target=StudentTarget(id="s1"), grader_ids=[]),
            AssignmentEntry(target=StudentTarget(id="s2"), grader_ids=["B"]),
        ]

        assert fill_missing(entries)[0].grader_ids == ["B"]
