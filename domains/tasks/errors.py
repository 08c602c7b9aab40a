"""Task reminder exceptions."""


class ReminderError(Exception):
    """Base class for reminder subsystem errors."""


class ReminderStoreError(ReminderError):
    """A store operation (insert/query/update/delete) failed."""


class ReminderSchedulingError(ReminderError):
    """Some reminder inserts failed while scheduling a task.

    Records that were written stay written; ``created`` lists them and
    ``failures`` holds (recipient_id, offset_kind, error) for the rest.
    """

    def __init__(self, task_id: str, created: list, failures: list[tuple]):
        self.task_id = task_id
        self.created = created
        self.failures = failures
        super().__init__(
            f"{len(failures)} reminder insert(s) failed for task {task_id} "
            f"({len(created)} written)"
        )
