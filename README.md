# fluxkit

fluxkit is a small library for building applications around the Flux
pattern: actions flow one way, from action creators through a dispatcher
and optional middleware, into stores that hold application state. An
action is a pair of a type string and a message of any kind.

It has no dependencies outside the standard library.

## Installation

```
pip install fluxkit
```

## Modules

- `fluxkit.hook`: `Signal`, an ordered list of callables with `connect`,
  `disconnect`, `disconnect_all` and `emit`; and `Hook`, the abstract base
  for objects placed between a dispatcher and its listeners.
- `fluxkit.listener`: `Listener`, a record of a callback, a listener id and
  the ids it must wait for, with a `dispatched` signal.
- `fluxkit.dispatcher`:
  - `Dispatcher` delivers actions to its listeners and then emits its
    `dispatched` signal. Calling `dispatch` while an action is still being
    delivered queues the new action, so actions arrive in order.
    `add_listener` takes a `Listener` or a `callback(type, message)` and
    returns an id; `remove_listener` takes that id; `wait_for(ids)`, called
    from inside a listener, delivers the current action to those listeners
    first. Setting the `hook` property routes every action through a `Hook`.
  - `AppDispatcher` is the shared dispatcher: `AppDispatcher.instance()`
    returns it, creating it on first use, and `AppDispatcher.reset()`
    forgets it.
  - `log_exception(error)` logs an exception as
    `file:line: Name: message` on the `fluxkit` logger and returns that text.
- `fluxkit.applistener`: `AppListener` registers with a dispatcher (the
  shared one by default) and re-emits actions on its `dispatched` signal,
  limited by `filter` / `filters`. `on(type, callback)` adds a
  `callback(message)` for one type, untouched by the filters;
  `remove_listener` and `remove_all_listener` take them away. A disabled
  listener receives nothing unless `always_on` is set. `close()` (or leaving
  a `with` block) unregisters it. `AppListenerGroup` makes every
  `AppListener` among its children wait for the group's own listener.
- `fluxkit.filter`: `Filter` attaches to any object with a `dispatched`
  signal and re-emits only the action types given by `type` or `types`.
- `fluxkit.actioncreator`: methods of an `ActionCreator` decorated with
  `action` dispatch an action named after the method, whose message maps
  each parameter name to its value; the method body is not run.
  `action_names()` lists the actions and `gen_key_table()` returns a
  key-table document with one string property per action.
- `fluxkit.store`: `Store` listens to a `Dispatcher` or an `ActionCreator`
  (`bind` or `bind_source`). Each action goes first to its child stores, then
  to `redispatch_targets`, then, with `filter_function_enabled`, to a method
  named after the action type (taking the message, or nothing), and finally
  to its `dispatched` signal. `Filter` children are attached automatically.
  `Container` is a plain holder of children.
- `fluxkit.middleware`: `Middleware` subclasses define
  `dispatch(type, message)` and call `next(type, message)` to pass the action
  on; an action never passed on is dropped. `MiddlewareList` installs a
  chain of middlewares on a dispatcher, or on an action creator's
  dispatcher, through a `MiddlewaresHook`.
- `fluxkit.hydrate`: `dehydrate(obj)` turns an object's public properties
  into a nested dict; `rehydrate(obj, data)` writes a dict back, logging
  keys that have no matching property.
- `fluxkit.keytable`: subclasses of `KeyTable` declare annotated
  properties; string properties left unset take their own name.
  `gen_header_file` and `gen_source_file` write the table out as a C++
  header and source pair. `PointF` and `RectF` are the point and rectangle
  value types it supports.

## Example

```python
from fluxkit.dispatcher import AppDispatcher
from fluxkit.actioncreator import ActionCreator, action
from fluxkit.store import Store


class TodoActions(ActionCreator):
    @action
    def add_task(self, task):
        ...


class TodoStore(Store):
    def __init__(self):
        super().__init__()
        self.filter_function_enabled = True
        self.tasks = []

    def add_task(self, message):
        self.tasks.append(message["task"])


actions = TodoActions()
store = TodoStore()
store.bind(AppDispatcher.instance())

actions.add_task("write docs")
assert store.tasks == ["write docs"]
```

A logging middleware:

```python
from fluxkit.dispatcher import Dispatcher
from fluxkit.middleware import Middleware, MiddlewareList


class Logger(Middleware):
    def dispatch(self, type, message):
        print(type, message)
        self.next(type, message)


dispatcher = Dispatcher()
middlewares = MiddlewareList([Logger()], apply_target=dispatcher)
dispatcher.dispatch("open", {"url": "file.txt"})
```

## What it does not do

fluxkit is a library only: it has no command line, no user interface and
no storage of its own. `dehydrate` and `rehydrate` produce and read plain
dicts; saving them is left to the application.

## Running the tests

```
pip install -e ".[test]"
pytest
```