# chanlimiter

A small, thread-safe limiter that passes a stream of items on at a fixed rate.
Producers may call `send` as often as they like. The consumer gets at most
`rate` items per second. When items arrive faster than that, the limiter keeps
only the newest one and drops the older ones.

## Installation

```
pip install chanlimiter
```

## Basic usage

```python
import threading
import time

from chanlimiter.limiter import Limiter

with Limiter(5) as limiter:          # 5 items per second
    def produce():
        for i in range(20):
            limiter.send(i)          # never blocks
            time.sleep(0.1)          # 10 items per second
        limiter.stop()

    threading.Thread(target=produce).start()

    for item in limiter:             # ends once the limiter is stopped
        print("received", item)
```

## How delivery works

A background thread takes items from the input buffer and holds only the
newest one. A second thread ticks every `1 / rate` seconds. On each tick, if
an item is held, it is moved to a one-item output slot. If that slot still
holds an item the consumer has not taken, the held item stays where it is and
is tried again on the next tick, unless a newer item replaces it first.

`limiter.interval` gives the number of seconds between ticks, and
`limiter.buffer_size` gives the size of the input buffer.

## Reading items

- `limiter.get(timeout=None)` returns the next item. It waits at most
  `timeout` seconds, or without limit if `timeout` is `None`. If nothing
  arrives in time it raises `TimeoutError`. Once the limiter is stopped and
  its output slot is empty, it raises `LimiterClosed`.
- Iterating over the limiter yields items until it is stopped and drained.

## Buffering

`send` puts items into an input buffer, which absorbs bursts. By default the
buffer holds `rate` items, but never fewer than 16 and never more than 1024.
Pass `buffer_size` to set it yourself. A value below 1 is ignored and the
default is used. When the buffer is full, `send` drops the new item.

A rate of zero or below is taken as 1 item per second.

## Cleanup of dropped items

If an item is a `Cleanable` (any object with a `cleanup()` method), the
limiter calls `cleanup()` whenever it drops that item. This happens:

- when `send` finds the input buffer full;
- when a newer item replaces a held item that was never delivered;
- during `stop()`. Every item still in the buffer is taken in and replaced in
  turn, and the item held last is cleaned up too.

An item already placed in the output slot is not cleaned up. It can still be
read with `get` or by iterating.

```python
from chanlimiter.limiter import Cleanable, Limiter

class Resource(Cleanable):
    def __init__(self, ident):
        self.ident = ident

    def cleanup(self):
        print("cleaning up resource", self.ident)

limiter = Limiter(1, buffer_size=1)
limiter.send(Resource(1))
limiter.send(Resource(2))   # buffer likely full: "cleaning up resource 2"
limiter.stop()              # "cleaning up resource 1"
```

## Stopping

`stop()` blocks until both background threads have finished and cleanup is
done, then closes the output. Any `send` after that is ignored. Calling
`stop()` again does nothing. Used as a context manager, the limiter stops
when the `with` block exits.

## Scope

The package is a library for use inside one process. It works with threads
and has no command-line tool and no asyncio interface.