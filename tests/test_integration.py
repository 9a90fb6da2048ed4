"""End-to-end scenarios mixing tasks, handlers, helpers and the scheduler.

Network calls are simulated by a fake client whose requests suspend for a
number of ticks before answering, the way a body would wait on I/O.
"""

from cotask import Handler, Scheduler, Task, TaskStatus, TaskTimeoutError, async_, drive

TODOS = {
    1: {"id": 1, "title": "delectus aut autem", "completed": False},
    2: {"id": 2, "title": "quis ut nam facilis et officia qui", "completed": False},
    3: {"id": 3, "title": "fugiat veniam minus", "completed": False},
}


class FakeClient:
    def __init__(self, latency: dict[int, int] | None = None) -> None:
        self.latency = latency or {}
        self.log: list[str] = []

    def send(self, todo_id: int):
        for _ in range(self.latency.get(todo_id, 1)):
            self.log.append(f"waiting {todo_id}")
            yield
        if todo_id not in TODOS:
            raise ConnectionError(f"Could not resolve host for todo {todo_id}")
        self.log.append(f"done {todo_id}")
        return dict(TODOS[todo_id])


def test_scheduler_collects_results_from_interleaved_requests():
    client = FakeClient(latency={1: 3, 2: 1, 3: 2})
    results = {}

    def fetch(key, todo_id):
        def body():
            results[key] = yield from client.send(todo_id)

        return body

    scheduler = Scheduler()
    for key, todo_id in enumerate([2, 1, 3]):
        scheduler.spawn(Task(fetch(key, todo_id)))

    tasks = scheduler.run()

    assert all(task.get_status() is TaskStatus.COMPLETED for task in tasks)
    assert results == {0: TODOS[2], 1: TODOS[1], 2: TODOS[3]}
    # Requests finish in latency order, not spawn order.
    assert client.log.index("done 2") < client.log.index("done 3") < client.log.index("done 1")


def test_async_helpers_report_successes_and_failures_separately(log_lines):
    responses, errors = {}, {}

    def request(todo_id):
        def body():
            if todo_id not in TODOS:
                raise ConnectionError(f"Could not resolve host for todo {todo_id}")
            return TODOS[todo_id]

        return body

    for key, todo_id in enumerate([1, 99]):
        (
            async_(request(todo_id), Handler(logger=log_lines.append))
            .then(lambda response, key=key: responses.__setitem__(key, response))
            .catch(lambda error, key=key: errors.__setitem__(key, str(error)))
        )

    assert responses == {0: TODOS[1]}
    assert list(errors) == [1]
    assert "Could not resolve host" in errors[1]
    assert any("permanently failed" in line for line in log_lines)


def test_timeouts_are_retried_within_budget(log_lines):
    calls = {"count": 0}

    def body():
        calls["count"] += 1
        yield
        if calls["count"] < 3:
            raise TaskTimeoutError()
        return "eventually"

    handler = Handler(3, [TaskTimeoutError], logger=log_lines.append)
    task = Task(body, handler)

    assert drive(task) is TaskStatus.COMPLETED
    assert task.get_result() == "eventually"
    assert handler.retry_count("task_id") == 2
    assert [line for line in log_lines if line.startswith("Retrying")] == [
        "Retrying task task_id (attempt 1)...",
        "Retrying task task_id (attempt 2)...",
    ]
    assert "Operation timed out" in log_lines[0]


def test_cancel_mid_flight_stops_remaining_work():
    client = FakeClient(latency={1: 5})
    results = {}

    def body():
        results["todo"] = yield from client.send(1)

    task = Task(body)
    task.start()
    task.pause()
    task.cancel()

    assert task.get_status() is TaskStatus.CANCELED
    assert results == {}
    assert client.log == ["waiting 1"]
