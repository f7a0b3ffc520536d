"""
Pytest configuration and shared fixtures for the objcexport test suite.
"""

import shutil
import sys
import tempfile
import textwrap
from pathlib import Path

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def project(temp_dir):
    """A project rooted in a fresh directory."""
    from objcexport.models import Project

    root = temp_dir / "MyApp"
    root.mkdir()
    return Project(name="MyApp", root=root)


@pytest.fixture
def memory_sink():
    from objcexport.console import MemorySink

    return MemorySink()


@pytest.fixture
def write_template(temp_dir):
    """Write an Ant template with the given default and targets, return its path."""

    def _write(default="Export-ObjectiveC-Files", targets=("Export-ObjectiveC-Files", "CLEANUP"), name="template.xml"):
        default_attr = f' default="{default}"' if default else ""
        body = "\n".join(f'    <target name="{target}"/>' for target in targets)
        path = temp_dir / name
        path.write_text(f'<?xml version="1.0"?>\n<project name="t"{default_attr}>\n{body}\n</project>\n')
        return path

    return _write


FAKE_ANT_SOURCE = textwrap.dedent(
    """
    import json
    import os
    import sys
    import time

    args = sys.argv[1:]
    build_file = None
    properties = {}
    target = None
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "-buildfile":
            build_file = args[i + 1]
            i += 2
            continue
        if arg.startswith("-D"):
            key, _, value = arg[2:].partition("=")
            properties[key] = value
        elif not arg.startswith("-"):
            target = arg
        i += 1

    record = os.environ.get("FAKE_ANT_RECORD")
    if record:
        with open(record, "w") as f:
            json.dump({"build_file": build_file, "target": target, "properties": properties,
                       "cwd": os.getcwd(), "build_file_exists": os.path.exists(build_file)}, f)

    print("Buildfile: " + build_file)
    print("")
    print(target + ":")
    if os.environ.get("FAKE_ANT_HANG"):
        time.sleep(60)
    print("     [echo] running " + target)
    print("")
    if os.environ.get("FAKE_ANT_FAIL"):
        print("BUILD FAILED")
        print(build_file + ":12: simulated failure")
        print("")
        print("Total time: 0 seconds")
        sys.exit(1)
    print("BUILD SUCCESSFUL")
    print("Total time: 0 seconds")
    """
)


@pytest.fixture
def fake_ant(temp_dir):
    """Command line for a Python stand-in that prints Ant default-logger output."""
    script = temp_dir / "fake_ant.py"
    script.write_text(FAKE_ANT_SOURCE)
    return [sys.executable, "-u", str(script)]


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically reset configuration state after each test."""
    yield

    from objcexport.config import reset_config_path

    reset_config_path()
