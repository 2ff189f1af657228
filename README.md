# vzlogger

The core of a smart-meter logger: OBIS identifiers, readings and their
identifiers, a per-channel buffer that can aggregate readings, meters and
channels configured from option lists, pushing collected values to HTTP
endpoints, and parsing of a JSON configuration file. It uses only the
standard library.

## Modules

- `vzlogger.obis` – `Obis`, an identifier of the form `A-B:C.D.E*F`
  (DIN EN 62056-61), and the alias table (`ObisAlias`, `get_aliases`,
  `lookup_alias`) with names such as `power`, `voltage-l1` or `counter`.
- `vzlogger.options` – `Option`, a key with a JSON-typed value
  (`OptionType`), with `as_str`, `as_int`, `as_float`, `as_bool` and
  `as_json`; the lookups `lookup`, `lookup_string`, `lookup_string_tolower`,
  `lookup_int`, `lookup_bool`, `lookup_double`, `lookup_json_array`,
  `lookup_json_object` and `dump`; and the errors `VZError`,
  `OptionNotFoundError`, `InvalidTypeError` and `MeterConnectionError`.
- `vzlogger.protocols` – `MeterProtocol`, `MeterDetails` and the protocol
  table (`get_protocols`, `lookup_protocol`, `get_details`).
- `vzlogger.reading` – `Reading` and the identifiers `ObisIdentifier`,
  `StringIdentifier`, `ChannelIdentifier` (`sensor<N>/power` or
  `sensor<N>/consumption`) and `NilIdentifier`, plus `parse_reading_id`.
- `vzlogger.buffer` – `Buffer`, a thread-safe list of readings with
  aggregation by `AggMode.MAX`, `AVG` (time weighted), `SUM` or `NONE`.
- `vzlogger.channel` – `Channel`, configured by the options `aggmode` and
  `duplicates`.
- `vzlogger.meter` – `Meter`, configured by the options `protocol`,
  `interval`, `aggtime`, `aggfixedinterval`, `enabled` and `allowskip`.
- `vzlogger.session` – `SessionProvider`, one session per key handed to one
  caller at a time; usable as a context manager.
- `vzlogger.push_data` – `PushDataList`, a thread-safe collection of
  `(time_ms, value)` per UUID, `PushDataServer`, which posts them as JSON to
  each configured URL, and `run_push_loop`.
- `vzlogger.api` – `json_tuples`, `parse_exception` for JSON error
  responses, and `user_agent`.
- `vzlogger.config` – `ConfigOptions`, which parses the configuration file
  into a list of `MeterMap` objects, plus `validate_uuid` and
  `is_ignorable_line`.

## OBIS identifiers

```python
from vzlogger.obis import Obis, lookup_alias

obis = Obis.from_string("1-0:1.8.1*255")
print(obis.unparse())                  # 1-0:1.8.1*255
print(obis.is_valid())                 # True
print(obis.is_manufacturer_specific()) # False

print(lookup_alias("power"))           # 1-0:1.7.255*255
```

Fields C and D are mandatory; fields not given are 255. The letters `C`,
`F`, `L` and `P` stand for 96, 97, 98 and 99. `Obis.from_string` also
accepts alias names; anything else raises `VZError`.

## Buffers and aggregation

```python
from vzlogger.buffer import AggMode, Buffer
from vzlogger.reading import Reading

buf = Buffer()
buf.aggmode = AggMode.MAX
buf.push(Reading(value=1.0, sec=10))
buf.push(Reading(value=3.0, sec=20))
buf.aggregate(aggtime=0, agg_fixed_interval=False)
print([r.value for r in buf])          # [3.0]
```

Aggregation keeps only the latest reading and gives it the aggregated
value. With `agg_fixed_interval` and a positive `aggtime`, its time is
rounded down to a multiple of `aggtime` seconds.

## Configuration

```python
from vzlogger.config import ConfigOptions

options = ConfigOptions("vzlogger.conf")   # default: /etc/vzlogger.conf
mappings = options.parse()
for mapping in mappings:
    print(mapping.meter.name, mapping.meter.protocol_id, len(mapping))
```

The file is one JSON object; `//` and `/* */` comments are allowed. Known
top-level keys are `log`, `retry`, `verbosity`, `local` (`enabled`, `port`,
`timeout`, `buffer`, `index`), `meters` or `sensors`, `push`, `daemon`
(only `true` is accepted) and `i_have_a_time_machine`; others are logged
and ignored. Each meter names its `protocol` and gives its channels under
`channels` or `channel`; each channel needs a valid `uuid` and may give
an `identifier` (default `NilIdentifier`) and an `api` (default
`volkszaehler`). Lines after the closing brace may only be blank or `//`
comments. Errors are raised as `VZError`.

```python
from vzlogger.config import validate_uuid, is_ignorable_line

validate_uuid("12345678-1234-1234-1234-123456789abc")  # True
is_ignorable_line("   // a comment")                   # True
```

## What this package does not do

It reads no meters: `Meter` holds a meter's configuration, but there is no
code that opens a device, file or program and reads values from it. It has
no client that sends readings to a middleware's data API (only the helpers
in `vzlogger.api`), no local HTTP server, no threads per meter or channel,
and no command-line program.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.