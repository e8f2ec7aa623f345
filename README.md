# linkstatus

A small HTTP service that tells you whether links are reachable.

Send it a set of links and it checks each one with a `HEAD` request and
answers with which are available. Every distinct set of links it sees gets a
number, so a later request can ask for a PDF report covering one or more
earlier sets.

## Installing

```
pip install .
```

## Running

```
linkstatus
linkstatus --data-dir /var/lib/linkstatus
```

The server listens on port 8080 unless the `APP_PORT` environment variable
names another one. A value that is not an integer is reported in the log and
the default is used instead.

Link sets are kept in memory while the service runs. When it starts they are
loaded from `hash_to_link_num.json` and `link_num_to_links.json` in the data
directory (`data` by default, or the one given with `--data-dir`); missing
files are skipped. If a file exists but cannot be read as expected, the error
is logged and the command exits with status 1. On SIGINT or SIGTERM the
server stops, giving requests in flight up to ten seconds to finish, and then
writes both files back.

## Endpoints

### `POST /links/get_status`

The body, sent as `application/json`, holds a list of links or a single link
as a string:

```json
{"links": ["example.com", "https://example.org/page"]}
```

```json
{"links": "example.com"}
```

The reply maps every link to `"available"` or `"not available"`, in sorted
order, and gives the number under which this set of links is stored:

```json
{"links":{"example.com":"available","https://example.org/page":"not available"},"links_num":1}
```

A link with no scheme is tried over both `http` and `https` at once, and
counts as available if either answers as available. A link with a scheme is
tried as given. Redirects are followed, and a final response with a 2xx or
3xx status counts as available; any other status, or a network failure,
does not. Each check gives up after two seconds.

Sets are numbered by their links after sorting, so the same links sent in a
different order get the same number.

### `POST /links/pdf`

The body names one or more numbers returned by earlier calls:

```json
{"links_list": [1, 2]}
```

The reply is an A4 PDF document, sent as the attachment
`products_report.pdf`, with a table of every distinct link in those sets,
sorted, each checked afresh. Numbers that were never handed out contribute
nothing. Text is written in Helvetica with the Windows-1252 character set;
characters outside it appear as `?`.

### Errors

A malformed body, a body sent with a content type other than
`application/json`, an empty list, or a missing field is answered with
status 400; a failure inside the service with status 500. Both carry a JSON
body:

```json
{"code":"BAD_REQUEST","message":"..."}
```

The codes are `BAD_REQUEST` and `INTERNAL_SERVER_ERROR`.

## Using it from Python

The parts can be put together without the command:

- `linkstatus.app.run(data_dir, port)` starts the whole service;
  `create_app(handler)` builds the `aiohttp` application around a handler.
- `linkstatus.handlers.LinkHandler(service, pdf_builder)` serves the two
  endpoints.
- `linkstatus.service.LinkService(repo, checker)` numbers link sets and
  checks links concurrently.
- `linkstatus.checker.SchemeFallbackChecker` and
  `linkstatus.client.HTTPLinkClient` do the checking.
- `linkstatus.repository.LinkRepository(data_dir)` holds the link sets and
  reads and writes the JSON files.
- `linkstatus.pdf.build_pdf(link_statuses)` returns the report as bytes.
- `linkstatus.models` parses request bodies and encodes responses.

## What it does not do

The service has no authentication, serves plain HTTP only, and keeps link
sets in memory between the load at start-up and the save at shutdown; data
is lost if the process ends without a termination signal.

## Tests

```
pip install ".[test]"
pytest
```