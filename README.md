# ginweb

Building blocks for an HTTP web framework, in plain Python: response
renderers, error collection, request log formatting, trusted-proxy handling,
URL path cleaning and the computations behind automatic redirects.

## Modules

- `ginweb.render.base` — the `Render` interface, `write_content_type`, the
  in-memory writer `ResponseRecorder`, a minimal `Request`, and the renderers
  `Data`, `String` (with `write_string`), `Reader` and `Redirect`.
- `ginweb.render.json` — `marshal`, `js_escape_string`, `write_json` and the
  renderers `JSON`, `IndentedJSON`, `SecureJSON`, `JsonpJSON`, `AsciiJSON` and
  `PureJSON`. Map keys are sorted and `<`, `>` and `&` are escaped, except in
  `PureJSON`.
- `ginweb.render.html` — `Delims`, `HTMLProduction`, `HTMLDebug` and `HTML`,
  rendering jinja2 templates. `HTMLDebug` reloads templates from `files`, a
  `glob` or a `file_system` with `patterns` every time `instance()` is called.
- `ginweb.render.formats` — `MsgPack` (with `write_msgpack`), `ProtoBuf`
  (any object with `SerializeToString()`), `TOML`, `XML` and `YAML`.
- `ginweb.errors` — `ErrorType` flags, `Error` and `ErrorList`, for collecting
  errors and turning them into JSON or a plain-text report.
- `ginweb.logger` — `LogFormatterParams`, `default_log_formatter`,
  `format_duration` and console colour control (`ColorMode`,
  `force_console_color`, `disable_console_color`, `console_color_mode`).
- `ginweb.proxies` — `parse_ip` and `TrustedProxies`, which finds the client
  address in an `X-Forwarded-For` style header.
- `ginweb.redirects` — `safe_prefix`, `trailing_slash_redirect_path` and
  `redirect_code`.
- `ginweb.path` — `clean_path`, the canonical form of a URL path.
- `ginweb.mode` — the run mode (`debug`, `release` or `test`) via `set_mode`,
  `mode` and `is_debugging`; the initial value comes from the `GIN_MODE`
  environment variable. An unknown mode raises `ValueError`.
- `ginweb.fs` — `DirFileSystem`, `OnlyFilesFS` (which hides directory
  listings), `TemplateFileSystem` and `dir_fs(root, list_directory)`.

## Installation

```
pip install .
```

## Examples

Rendering JSON into a recorder:

```python
from ginweb.render.base import ResponseRecorder
from ginweb.render.json import JSON, SecureJSON

w = ResponseRecorder()
JSON({"foo": "bar"}).render(w)
w.header()["Content-Type"]  # "application/json; charset=utf-8"
bytes(w.body)               # b'{"foo":"bar"}'

w = ResponseRecorder()
SecureJSON("while(1);", [1, 2]).render(w)
bytes(w.body)               # b"while(1);[1,2]"
```

Rendering a template:

```python
from ginweb.render.html import Delims, HTMLDebug

renderer = HTMLDebug(files=["templates/hello.tmpl"], delims=Delims("{[{", "}]}"))
renderer.instance("hello.tmpl", {"name": "world"}).render(w)
```

Cleaning a path:

```python
from ginweb.path import clean_path

clean_path("/abc/def/../ghi//")  # "/abc/ghi/"
```

Collecting errors:

```python
from ginweb.errors import Error, ErrorList, ErrorType

errs = ErrorList([Error(ValueError("first"), ErrorType.PRIVATE)])
errs.errors()  # ["first"]
errs.json()    # {"error": "first"}
```

Trusting only some proxies:

```python
from ginweb.proxies import TrustedProxies

proxies = TrustedProxies()
proxies.set(["10.0.0.0/8"])
proxies.validate_header("1.2.3.4, 10.0.0.1")  # "1.2.3.4"
```

Redirect helpers and durations:

```python
from datetime import timedelta
from ginweb.redirects import redirect_code, trailing_slash_redirect_path
from ginweb.logger import format_duration

trailing_slash_redirect_path("/foo")   # "/foo/"
trailing_slash_redirect_path("/foo/")  # "/foo"
redirect_code("GET")                   # 301
format_duration(timedelta(milliseconds=1.5))  # "1.5ms"
```

## What this package does not do

There is no router, no request dispatch, no middleware chain and no HTTP
server here: nothing listens on a socket or matches a request to a handler.
There is also no middleware that recovers from exceptions raised by handlers.
The pieces above are meant to be used by code that provides those things.

## Running the tests

```
pip install .[test]
pytest
```