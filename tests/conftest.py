import importlib
import os

import httpx
import pytest

CALLBACK = "_callbacks____inputtools"


@pytest.fixture
def anyio_backend():
    return "asyncio"


def jsonp(payload: str) -> str:
    return f"/*API*/{CALLBACK}({payload})"


def success_body(query: str, candidates) -> str:
    quoted = ",".join(f'"{c}"' for c in candidates)
    return jsonp(f'["SUCCESS",[["{query}",[{quoted}],[],{{}}]]]')


@pytest.fixture
def make_app():
    """Build an app from the current environment with the upstream replaced by `handler`."""

    def _make(handler, **env):
        env.setdefault("INITIAL_DEBOUNCE_MS", "0")
        env.setdefault("DEBOUNCE_MS", "0")
        for key, value in env.items():
            os.environ[key] = value
        import inputtools.core.config as config
        importlib.reload(config)
        import inputtools.main as main
        app = main.create_app()
        app.state.service.client.transport = httpx.MockTransport(handler)
        return app

    saved = dict(os.environ)
    yield _make
    os.environ.clear()
    os.environ.update(saved)
    import inputtools.core.config as config
    importlib.reload(config)
