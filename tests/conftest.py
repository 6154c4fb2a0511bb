pytest_plugins = ["inject_kernel.testing.fixtures"]
