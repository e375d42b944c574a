# logdistr

`logdistr` is a commit log that only grows at the end. Records are kept on disk
in numbered segments. Each segment is a store file plus a memory-mapped index
file. The package also has:

- a service layer that checks access before every produce or consume,
- a small JSON-over-HTTP log server that keeps its records in memory,
- a host-monitoring HTTP server that reports CPU, memory, disk, network and
  process data.

## Commands

### `logdistr-server`

```
logdistr-server [--addr HOST:PORT]
```

This starts the JSON HTTP log server. It listens on `:8080` unless you pass
`--addr`, and prints `start` once it is listening. Records live in memory only
and are lost when the server stops.

| Method | Path   | Request body                              | Response                                  |
|--------|--------|-------------------------------------------|-------------------------------------------|
| POST   | `/`    | `{"record": {"value": "<base64 bytes>"}}` | `{"offset": N}`                           |
| GET    | `/`    | `{"offset": N}`                           | `{"record": {"value": "<base64>", "offset": N}}` |
| GET    | `/get` | none                                      | the text `get`                            |

- Reading an offset that was never written returns 404 with the body
  `offset not found`.
- A body that is not valid JSON, has the wrong field types, or holds bad base64
  returns 400.
- A known path called with another method returns 405.
- Any other path returns 404.

### `logdistr-monitor`

```
logdistr-monitor [--dir DIRECTORY]
```

This starts the monitoring server. It reads `config.yml` from `DIRECTORY`, or
from the current directory if you give no `--dir`. If the file is missing, the
server writes one with these defaults:

```yaml
# api server port
port: 3000

#available modules
hostInfo: true
cpu: true
ram: true
disks: true
networkDevices: true
networkBandwidth: true
processes: true
```

The server starts with the configured integer port, or 3000 if none is set. If
that port cannot be bound, it tries the next port up and keeps going until one
works.

Endpoints:

- `/`: every module in one JSON document. Any path without its own handler is
  answered the same way.
- `/host`, `/cpu`, `/ram`, `/disks`, `/networks`, `/bandwidth`, `/processes`:
  one module each.
- `/mode`: an empty JSON string when `mode: true` is set in `config.yml`,
  otherwise a 500 reply.
- `/favicon.ico`: an empty 204 reply.

When a module is not set to `true`, its endpoint replies 500 with
`Error 500 - set <module> to 'true' in config.yml file`. Every JSON reply carries
`Access-Control-Allow-Origin: *`.

Bandwidth is measured over one second from `/proc/net/dev`. The loopback
interface is skipped.

## Library

### Log storage

- `logdistr.store.Store`: a file of length-prefixed records. Each record is an
  8-byte big-endian length followed by the bytes.
  - `append(data)` returns `(bytes_written, position)`.
  - `read(pos)` returns the record stored at `pos`.
  - `read_at(size, offset)` returns raw bytes.
  - `close()` flushes buffered writes and closes the file.
- `logdistr.index.Index`: fixed-width entries of `(relative offset, position)`,
  held in a memory-mapped file sized by `LogConfig.max_index_bytes`.
  - `read(-1)` returns the last entry.
  - `write` raises `EOFError` when the index is full.
- `logdistr.index.LogConfig`: the limits `max_store_bytes`, `max_index_bytes`
  and `initial_offset`.
- `logdistr.segment.Segment`: a store and an index paired under one base
  offset, kept in `<base>.store` and `<base>.index`.
  - It has `append`, `read`, `is_maxed`, `remove` and `close`.
  - Records are `logdistr.segment.Record(value, offset)`. They are encoded as an
    8-byte offset followed by the value.
- `logdistr.commitlog.Log(directory, config=None)`: a directory of segments.
  - Both limits default to 1024 bytes.
  - A new segment starts when the active one is full.
  - It has `append`, `read`, `lowest_offset`, `highest_offset`,
    `truncate(lowest)`, `reader()` (the raw bytes of every store in order),
    `close`, `remove` and `reset`.
  - Reading an offset outside the log raises
    `logdistr.errors.OffsetOutOfRangeError`, which carries `offset`, `code`
    (404) and `localized_message()`.

```python
from logdistr.commitlog import Log
from logdistr.segment import Record

with Log("/tmp/mylog") as log:
    off = log.append(Record(value=b"hello world"))
    assert log.read(off).value == b"hello world"
```

### Access and service

- `logdistr.auth.Authorizer(policy_file)`: reads a CSV policy of lines in the
  form `p, subject, object, action`. It allows exactly those triples.
  `authorize(subject, obj, action)` raises
  `logdistr.auth.PermissionDeniedError` for anything else.
- `logdistr.service.LogService(commit_log, authorizer)`: checks each call
  against the authorizer with object `*` and action `produce` or `consume`.
  - `produce(subject, record)` and `consume(subject, offset)` handle one record.
  - `produce_stream(subject, records)` yields the offset of each record.
  - `consume_stream(subject, offset, stop=None)` yields records from `offset`
    on. It waits for new records until the `threading.Event` `stop` is set.
- `logdistr.config`:
  - `config_file(name)` resolves certificate and policy file names, using
    `$CONFIG_DIR` when it is set and `~/.godistrserv/` otherwise.
  - `setup_tls_config(TLSConfig(...))` builds an `ssl.SSLContext`. A server
    given a CA requires client certificates. A client given a CA trusts only
    that CA.

### Monitoring (`logdistr.monitoring`)

- `settings.MonitorConfig`: `load(directory)` reads or creates `config.yml`.
  `available(module)` is true only for a boolean `true`. Keys are
  case-insensitive.
- `system`: `check_cpu`, `check_ram`, `check_disks`, `check_host_info`,
  `check_processes` and `parse_cpu_name`.
- `network`: `check_network_devices`, `check_network_bandwidth` and
  `bandwidth_between`.
- `netstats`: `collect_network_stats(lines)` parses `/proc/net/dev` text.
  `get_stats()` reads the live file.
- `web`: `MonitorServer` (`add_endpoint`, `route`, `serve`), `collect_data`,
  `port_from_config` and `find_available_port`.

## What it does not do

- `LogService` is a Python API only. No network server exposes the disk-backed
  commit log.
- The HTTP log server uses its own in-memory log, not `commitlog.Log`.
- There is no cluster membership and no replication between nodes.
- The authorizer reads policy lines only. It has no model file and no role or
  pattern matching.

## Tests

```
pip install -e .[test]
pytest
```