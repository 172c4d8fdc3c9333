"""Todos — a JSON REST API built from plain handlers.

CRUD for a "todos" resource. Demonstrates paperplane end to end: a route
table, path parameters, parsed JSON bodies, validation errors as 400s,
raised ``NotFound`` for missing items, and the CORS wrapper.

Run:
    cd examples/todos && python app.py
"""

import threading
from dataclasses import dataclass

from paperplane import AppConfig, NotFound, Request, Response, json, mount, routes
from paperplane.handlers import CORSConfig, cors
from paperplane.validation import boolean, integer, max_length, required, string, validate

# ---------------------------------------------------------------------------
# In-memory storage
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Todo:
    id: int
    title: str
    done: bool


_todos: dict[int, Todo] = {}
_next_id = 1
_lock = threading.Lock()


def _get_next_id() -> int:
    global _next_id
    with _lock:
        n = _next_id
        _next_id += 1
        return n


def _to_dict(todo: Todo) -> dict:
    return {"id": todo.id, "title": todo.title, "done": todo.done}


def _lookup(request: Request) -> Todo:
    if integer(request.params["id"]) is not None:
        raise NotFound()
    with _lock:
        todo = _todos.get(int(request.params["id"]))
    if todo is None:
        raise NotFound(f"todo {request.params['id']} not found")
    return todo


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def list_todos(request: Request) -> Response:
    """List todos, optionally filtered with ``?done=true``."""
    with _lock:
        todos = sorted(_todos.values(), key=lambda t: t.id)
    done = request.query.get("done")
    if done in ("true", "false"):
        todos = [t for t in todos if t.done is (done == "true")]
    return json({"data": [_to_dict(t) for t in todos], "total": len(todos)})


def get_todo(request: Request) -> Response:
    return json({"data": _to_dict(_lookup(request))})


def create_todo(request: Request) -> Response:
    data = validate(
        request.body,
        {"title": [required, string, max_length(200)], "done": [boolean]},
    ).raise_for_errors()

    todo = Todo(id=_get_next_id(), title=data["title"].strip(), done=data.get("done", False))
    with _lock:
        _todos[todo.id] = todo
    return json({"data": _to_dict(todo)}, status=201).with_header(
        "location", f"/api/todos/{todo.id}"
    )


def update_todo(request: Request) -> Response:
    todo = _lookup(request)
    data = validate(
        request.body,
        {"title": [string, max_length(200)], "done": [boolean]},
    ).raise_for_errors()

    updated = Todo(
        id=todo.id,
        title=data["title"].strip() if "title" in data else todo.title,
        done=data.get("done", todo.done),
    )
    with _lock:
        _todos[todo.id] = updated
    return json({"data": _to_dict(updated)})


def delete_todo(request: Request) -> Response:
    todo = _lookup(request)
    with _lock:
        _todos.pop(todo.id, None)
    return Response(status=204)


app = mount(
    cors(
        routes(
            [
                ("GET", "/api/todos", list_todos),
                ("POST", "/api/todos", create_todo),
                ("GET", "/api/todos/:id", get_todo),
                ("PATCH", "/api/todos/:id", update_todo),
                ("DELETE", "/api/todos/:id", delete_todo),
            ]
        ),
        CORSConfig(
            allow_origins=("*",),
            allow_methods=("GET", "POST", "PATCH", "DELETE", "OPTIONS"),
            allow_headers=("Content-Type",),
        ),
    ),
    AppConfig(max_content_length=64 * 1024),
)


if __name__ == "__main__":
    app.run()
