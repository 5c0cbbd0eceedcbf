import pytest


@pytest.fixture(autouse=True, scope="session")
def _isolate_config():
    # Interpreter() loads a prelude from the environment; tests start clean
    mp = pytest.MonkeyPatch()
    for var in ("KONS_PRELUDE_PATH", "KONS_REPL_HOST", "KONS_REPL_PORT", "KONS_LOG_LEVEL"):
        mp.delenv(var, raising=False)
    yield
    mp.undo()
