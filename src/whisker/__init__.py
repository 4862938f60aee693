"""Whisker — push changed source files to live pages.

A directory is watched for changes; each changed file is resolved into a
resource record (URL + contents) and broadcast over websockets to every
attached client.  Clients decide per hostname whether updates apply and
report their connection status to a UI panel.

Quick start::

    import whisker

    whisker.serve("src/")                       # update server
    whisker.connect("localhost", "~/.whisker.json")  # terminal client

Custom resolvers turn a changed path into whatever the page should load::

    async def resolve(path):
        return whisker.ResourceRecord(resource_url=f"/static/{path}", contents=...)

    whisker.serve("src/", resolver=resolve)

"""

# PEP 703: Declare this module as free-threading safe
_Py_mod_gil = 0

__version__ = "0.1.0"
__all__ = [
    "ChangePipeline",
    "Controller",
    "ResourceRecord",
    "WhiskerConfig",
    "__version__",
    "connect",
    "serve",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import whisker`` fast; websockets and watchfiles are only
    imported when a server or client is actually used.
    """
    if name == "WhiskerConfig":
        from whisker.config import WhiskerConfig

        return WhiskerConfig

    if name == "ResourceRecord":
        from whisker.reactive.resolver import ResourceRecord

        return ResourceRecord

    if name == "ChangePipeline":
        from whisker.reactive.pipeline import ChangePipeline

        return ChangePipeline

    if name == "Controller":
        from whisker.client.controller import Controller

        return Controller

    if name == "serve":
        from whisker.app import serve

        return serve

    if name == "connect":
        from whisker.app import connect

        return connect

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
