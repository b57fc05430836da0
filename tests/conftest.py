pytest_plugins = ["pullmaster.testing.conftest"]
