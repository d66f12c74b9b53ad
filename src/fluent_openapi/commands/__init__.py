"""Built-in CLI sub-commands for fluent-openapi.

* :mod:`~fluent_openapi.commands.inspect` -- ``tree`` and ``paths``: show how
  a spec compiles.
* :mod:`~fluent_openapi.commands.call` -- ``call``: navigate the compiled
  client and send one request.
* :mod:`~fluent_openapi.commands.config` -- view and modify global settings.

``config`` is a :class:`typer.Typer` sub-application; the others are plain
callbacks registered directly on the root app.
"""
