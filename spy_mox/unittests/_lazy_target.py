"""Module loaded lazily by the module-mocking tests."""


def action() -> str:
    return "done"
