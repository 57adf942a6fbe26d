import uuid
from datetime import datetime, timedelta, timezone

import pytest

from todo_service.core.exceptions import AccessDeniedError, NotFoundError, ValidationError
from todo_service.models.task import TaskStatus
from todo_service.schemas.task import TaskSearchCriteria


@pytest.fixture
def owner():
    return uuid.uuid4()


@pytest.fixture
def stranger():
    return uuid.uuid4()


class TestCreate:
    def test_create_then_get_returns_same_fields(self, task_service, owner):
        due = datetime(2030, 1, 15, 9, 30)
        created = task_service.create(
            owner, title="Buy milk", status=TaskStatus.PENDING, description="2 litres", due_date=due
        )

        fetched = task_service.get_by_id(created.id, owner)

        assert fetched.id is not None
        assert fetched.created_at is not None
        assert fetched.title == "Buy milk"
        assert fetched.description == "2 litres"
        assert fetched.due_date == due
        assert fetched.status == TaskStatus.PENDING.value
        assert fetched.owner_id == owner

    def test_updated_at_equals_created_at_on_creation(self, task_service, owner):
        task = task_service.create(owner, title="Buy milk", status=TaskStatus.PENDING)
        assert task.updated_at == task.created_at

    def test_aware_due_date_is_stored_as_utc(self, task_service, owner):
        due = datetime(2030, 1, 15, 12, 0, tzinfo=timezone(timedelta(hours=2)))
        task = task_service.create(owner, title="Call home", status=TaskStatus.PENDING, due_date=due)
        assert task.due_date == datetime(2030, 1, 15, 10, 0)

    @pytest.mark.parametrize("length", [3, 100])
    def test_title_length_bounds_accepted(self, task_service, owner, length):
        task = task_service.create(owner, title="x" * length, status=TaskStatus.PENDING)
        assert len(task.title) == length

    @pytest.mark.parametrize("length", [2, 101])
    def test_title_length_bounds_rejected(self, task_service, owner, length):
        with pytest.raises(ValidationError) as exc_info:
            task_service.create(owner, title="x" * length, status=TaskStatus.PENDING)
        assert exc_info.value.field == "title"

    def test_blank_title_rejected(self, task_service, owner):
        with pytest.raises(ValidationError) as exc_info:
            task_service.create(owner, title="   ", status=TaskStatus.PENDING)
        assert exc_info.value.errors == {"title": "Title is required"}

    def test_description_over_500_rejected(self, task_service, owner):
        with pytest.raises(ValidationError) as exc_info:
            task_service.create(owner, title="Buy milk", status=TaskStatus.PENDING, description="d" * 501)
        assert exc_info.value.field == "description"

    def test_description_of_500_accepted(self, task_service, owner):
        task = task_service.create(owner, title="Buy milk", status=TaskStatus.PENDING, description="d" * 500)
        assert len(task.description) == 500

    def test_missing_status_rejected(self, task_service, owner):
        with pytest.raises(ValidationError) as exc_info:
            task_service.create(owner, title="Buy milk", status=None)
        assert exc_info.value.field == "status"

    def test_validation_happens_before_persistence(self, task_service, owner):
        with pytest.raises(ValidationError):
            task_service.create(owner, title="ab", status=TaskStatus.PENDING)
        assert task_service.get_all(owner) == []


class TestOwnership:
    @pytest.fixture
    def task(self, task_service, owner):
        return task_service.create(owner, title="Buy milk", status=TaskStatus.PENDING)

    def test_get_by_non_owner_denied(self, task_service, task, stranger):
        with pytest.raises(AccessDeniedError):
            task_service.get_by_id(task.id, stranger)

    def test_update_by_non_owner_denied(self, task_service, task, stranger):
        with pytest.raises(AccessDeniedError):
            task_service.update(task.id, stranger, title="Stolen", status=TaskStatus.COMPLETED)
        assert task_service.get_by_id(task.id, task.owner_id).title == "Buy milk"

    def test_update_status_by_non_owner_denied(self, task_service, task, stranger):
        with pytest.raises(AccessDeniedError):
            task_service.update_status(task.id, stranger, TaskStatus.COMPLETED)

    def test_delete_by_non_owner_denied(self, task_service, task, stranger):
        with pytest.raises(AccessDeniedError):
            task_service.delete(task.id, stranger)
        assert task_service.get_by_id(task.id, task.owner_id) is not None

    @pytest.mark.parametrize("caller", ["owner", "stranger"])
    def test_missing_task_is_not_found_for_any_caller(self, task_service, owner, stranger, caller):
        """Existence is checked before ownership."""
        caller_id = owner if caller == "owner" else stranger
        missing = uuid.uuid4()
        with pytest.raises(NotFoundError) as exc_info:
            task_service.get_by_id(missing, caller_id)
        assert exc_info.value.resource_id == missing
        with pytest.raises(NotFoundError):
            task_service.update(missing, caller_id, title="Whatever", status=TaskStatus.PENDING)
        with pytest.raises(NotFoundError):
            task_service.update_status(missing, caller_id, TaskStatus.COMPLETED)
        with pytest.raises(NotFoundError):
            task_service.delete(missing, caller_id)


class TestMutations:
    def test_update_replaces_fields_and_refreshes_updated_at(self, task_service, owner):
        task = task_service.create(
            owner, title="Buy milk", status=TaskStatus.PENDING, description="2 litres",
            due_date=datetime(2030, 1, 1),
        )
        created_at = task.created_at

        updated = task_service.update(task.id, owner, title="Buy oat milk", status=TaskStatus.IN_PROGRESS)

        assert updated.title == "Buy oat milk"
        assert updated.description is None
        assert updated.due_date is None
        assert updated.status == TaskStatus.IN_PROGRESS.value
        assert updated.created_at == created_at
        assert updated.updated_at >= created_at

    def test_update_validates_title(self, task_service, owner):
        task = task_service.create(owner, title="Buy milk", status=TaskStatus.PENDING)
        with pytest.raises(ValidationError):
            task_service.update(task.id, owner, title="x" * 101, status=TaskStatus.PENDING)

    def test_update_status_only_changes_status(self, task_service, owner):
        task = task_service.create(owner, title="Buy milk", status=TaskStatus.PENDING, description="2 litres")

        updated = task_service.update_status(task.id, owner, TaskStatus.COMPLETED)

        assert updated.status == TaskStatus.COMPLETED.value
        assert updated.title == "Buy milk"
        assert updated.description == "2 litres"

    def test_delete_removes_task(self, task_service, owner):
        task = task_service.create(owner, title="Buy milk", status=TaskStatus.PENDING)
        task_service.delete(task.id, owner)
        with pytest.raises(NotFoundError):
            task_service.get_by_id(task.id, owner)


class TestSearch:
    @pytest.fixture
    def tasks(self, task_service, owner, stranger):
        return {
            "milk": task_service.create(
                owner, title="Buy milk", status=TaskStatus.PENDING, due_date=datetime(2030, 1, 10)
            ),
            "report": task_service.create(
                owner, title="Write report", status=TaskStatus.COMPLETED,
                description="Quarterly MILK sales", due_date=datetime(2030, 2, 1),
            ),
            "gym": task_service.create(
                owner, title="Go to gym", status=TaskStatus.IN_PROGRESS, due_date=datetime(2030, 3, 1)
            ),
            "other": task_service.create(
                stranger, title="Buy milk too", status=TaskStatus.PENDING, due_date=datetime(2030, 1, 10)
            ),
        }

    @staticmethod
    def titles(found):
        return sorted(task.title for task in found)

    def test_term_matches_title_or_description_case_insensitively(self, task_service, owner, tasks):
        found = task_service.search(TaskSearchCriteria(search_term="milk"), owner)
        assert self.titles(found) == ["Buy milk", "Write report"]

    def test_term_wins_over_status(self, task_service, owner, tasks):
        criteria = TaskSearchCriteria(search_term="gym", status=TaskStatus.COMPLETED)
        assert self.titles(task_service.search(criteria, owner)) == ["Go to gym"]

    def test_empty_term_falls_through_to_status(self, task_service, owner, tasks):
        criteria = TaskSearchCriteria(search_term="", status=TaskStatus.COMPLETED)
        assert self.titles(task_service.search(criteria, owner)) == ["Write report"]

    def test_status_wins_over_date_range(self, task_service, owner, tasks):
        criteria = TaskSearchCriteria(
            status=TaskStatus.PENDING, from_date=datetime(2030, 3, 1), to_date=datetime(2030, 3, 31)
        )
        assert self.titles(task_service.search(criteria, owner)) == ["Buy milk"]

    def test_date_range_is_inclusive(self, task_service, owner, tasks):
        criteria = TaskSearchCriteria(from_date=datetime(2030, 1, 10), to_date=datetime(2030, 2, 1))
        assert self.titles(task_service.search(criteria, owner)) == ["Buy milk", "Write report"]

    def test_half_open_range_returns_everything(self, task_service, owner, tasks):
        criteria = TaskSearchCriteria(from_date=datetime(2030, 2, 15))
        assert len(task_service.search(criteria, owner)) == 3

    def test_no_criteria_returns_all_owned(self, task_service, owner, stranger, tasks):
        assert len(task_service.search(TaskSearchCriteria(), owner)) == 3
        assert self.titles(task_service.search(TaskSearchCriteria(), stranger)) == ["Buy milk too"]

    def test_wildcards_in_term_are_literal(self, task_service, owner, tasks):
        task_service.create(owner, title="100% done", status=TaskStatus.PENDING)
        assert self.titles(task_service.search(TaskSearchCriteria(search_term="%"), owner)) == ["100% done"]
        assert task_service.search(TaskSearchCriteria(search_term="_"), owner) == []

    def test_term_folds_non_ascii_case(self, task_service, owner):
        task_service.create(owner, title="Äpfel kaufen", status=TaskStatus.PENDING)
        task_service.create(owner, title="Brot", status=TaskStatus.PENDING, description="beim BÄCKER")

        assert self.titles(task_service.search(TaskSearchCriteria(search_term="äpfel"), owner)) == ["Äpfel kaufen"]
        assert self.titles(task_service.search(TaskSearchCriteria(search_term="bäcker"), owner)) == ["Brot"]

    def test_status_lifecycle_example(self, task_service, owner, stranger):
        task = task_service.create(owner, title="Buy milk", status=TaskStatus.PENDING)
        pending = TaskSearchCriteria(status=TaskStatus.PENDING)
        completed = TaskSearchCriteria(status=TaskStatus.COMPLETED)

        assert [t.id for t in task_service.search(pending, owner)] == [task.id]
        assert task_service.search(pending, stranger) == []

        task_service.update_status(task.id, owner, TaskStatus.COMPLETED)

        assert task_service.search(pending, owner) == []
        assert [t.id for t in task_service.search(completed, owner)] == [task.id]

    def test_get_by_status_is_owner_scoped(self, task_service, owner, stranger, tasks):
        assert self.titles(task_service.get_by_status(TaskStatus.PENDING, owner)) == ["Buy milk"]
        assert self.titles(task_service.get_by_status(TaskStatus.PENDING, stranger)) == ["Buy milk too"]

    def test_get_by_due_date_range_is_owner_scoped(self, task_service, owner, tasks):
        found = task_service.get_by_due_date_range(datetime(2030, 1, 1), datetime(2030, 1, 31), owner)
        assert self.titles(found) == ["Buy milk"]
