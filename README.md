# carbonstore

Core pieces of a Graphite/Carbon metrics server, usable as a library. It has
no dependencies beyond the standard library.

## What is inside

- `carbonstore.points`: `Point` and `Points`, the plaintext line protocol
  (`parse_text`, which raises `ValueError` on a bad line), `one_point` and
  `now_point`, and text and delta-encoded binary serialisation to a binary
  stream (`Points.write_to`, `Points.write_binary_to`, both returning the
  number of bytes written).
- `carbonstore.glue`: `glue(exit_event, incoming, chunk_size, chunk_timeout,
  callback)` reads `Points` from a `queue.Queue` and hands plain text chunks of
  at most `chunk_size` bytes to `callback`. A chunk is also flushed every
  `chunk_timeout` seconds, and when `None` is taken from the queue, which
  ends the loop. Setting `exit_event` ends the loop without a flush.
- `carbonstore.counters`: a thread-safe wrapping `Counter` (`add`, `load`,
  `take`, `reset_if`) plus `send_value`, `send_and_subtract` and
  `send_and_zero_if_not_updated`. Each of these reports a counter through a
  `send(metric, value)` callback.
- `carbonstore.ini`: `parse_ini_file` reads the simple INI dialect of the
  storage configuration files into a list of section dicts and raises
  `IniError` with the line number on bad input.
- `carbonstore.schemas`: `read_whisper_schemas` reads `storage-schemas.conf`
  into `WhisperSchemas`, sorted by priority with ties kept in file order.
  `WhisperSchemas.match` returns the first matching `Schema` or `None`. The
  module also has `parse_retention_defs` and `parse_retention_def` (old
  `60:43200` and new `10s:24h` forms), `Retention` and `SchemaError`.
- `carbonstore.aggregation`: `read_whisper_aggregation` reads
  `storage-aggregation.conf` into `WhisperAggregation`. Its `match` falls
  back to a default rule: average with an xFilesFactor of 0.5. The module
  also has `AggregationMethod`, `AggregationItem` and `AggregationError`.
- `carbonstore.formats`: `ResponseFormat`, `KNOWN_FORMATS` and
  `lookup_format`, which maps request format names such as `json`,
  `pickle`, `protobuf` and `carbonapi_v3_pb` to a format.
- `carbonstore.intervals`: `IntervalSet.marshal_pickle` produces the pickle
  opcodes for a `graphite.intervals.IntervalSet` holding one interval.
- `carbonstore.trigram`: `extract`, `extract_trigrams` (trigrams of the
  literal parts of a glob query) and `TrigramIndex`, with `query_trigrams`
  and `prune`.
- `carbonstore.querycache`: `QueryCache`, an expiring cache of `QueryItem`s
  with an optional total size limit. `clean` drops expired entries and
  `run_cleaner` calls it periodically. `QueryItem.fetch_or_lock` makes the
  first caller the one that computes a result, while later callers wait for
  `store_and_unlock` or `store_abort`.

## Examples

Parse a line and write it back out:

```python
import io
from carbonstore.points import parse_text

p = parse_text("host.cpu.load 0.5 1422641531\n")
buf = io.BytesIO()
p.write_to(buf)
assert buf.getvalue() == b"host.cpu.load 0.5 1422641531\n"
```

Load storage schemas and find the one for a metric:

```python
from carbonstore.schemas import read_whisper_schemas

schemas = read_whisper_schemas("storage-schemas.conf")
schema = schemas.match("carbon.agents.cpu")
if schema is not None:
    print(schema.name, [r.seconds_per_point for r in schema.retentions])
```

Find documents by trigram:

```python
from carbonstore.trigram import TrigramIndex, extract_trigrams

index = TrigramIndex(["/foo/bar.wsp", "/foo/baz.wsp"])
print(index.query_trigrams(extract_trigrams("foo/bar*")))  # [0]
```

Compute a result once for concurrent callers:

```python
from carbonstore.querycache import QueryCache

cache = QueryCache()
item = cache.get_query_item("render&a.b&0&60", size=1024, expire=60)
data, ready = item.fetch_or_lock()
if not ready:
    data = "computed result"
    item.store_and_unlock(data)
```

## What this package does not do

There is no server, daemon or command-line program here. The package does not
read cache dump files back and does not rate-limit writes. It does not create,
update or read whisper files, and it does not scan a whisper directory to
serve find, list or render queries. It provides the parsing, configuration,
indexing and caching parts that such a program would be built from.

## Running the tests

```
pip install -e .[test]
pytest
```