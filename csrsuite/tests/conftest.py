"""Root conftest"""

import signal

import pytest

from csrsuite.certificates import CFSSLClient
from csrsuite.config import settings
from csrsuite.utils import randomize, _whoami


def pytest_addoption(parser):
    """Add options to include various kinds of tests in testrun"""
    parser.addoption(
        "--enforce", action="store_true", default=False, help="Fails tests instead of skip, if capabilities are missing"
    )


def pytest_report_header(config):  # pylint: disable=unused-argument
    """Adds feature gates and issuers under test to pytest header output"""
    issuers = ", ".join(
        f"{issuer.get('kind', 'ClusterIssuer')}/{issuer['name']}" for issuer in settings.get("issuers") or []
    )
    return [f"Feature gates: {settings.get('feature_gates')}", f"Issuers: {issuers or 'none'}"]


@pytest.fixture(scope="session")
def skip_or_fail(request):
    """Skips or fails tests depending on --enforce option"""
    return pytest.fail if request.config.getoption("--enforce") else pytest.skip


@pytest.fixture(scope="session", autouse=True)
def term_handler():
    """
    This will handle ^C, cleanup won't be skipped
    https://github.com/pytest-dev/pytest/issues/9142
    """
    orig = signal.signal(signal.SIGTERM, signal.getsignal(signal.SIGINT))
    yield
    signal.signal(signal.SIGTERM, orig)


@pytest.fixture(scope="session")
def testconfig():
    """Testsuite settings"""
    return settings


@pytest.fixture(scope="session")
def blame(request):
    """Returns function that will add random identifier to the name"""
    if "tester" in settings:
        user = settings["tester"]
    else:
        user = _whoami()

    def _blame(name: str, tail: int = 3) -> str:
        """Create 'scoped' name within given test

        This returns unique name for object(s) to avoid conflicts

        Args:
            :param name: Base name, e.g. 'csr'
            :param tail: length of random suffix"""

        nodename = request.node.name
        if nodename.startswith("test_"):
            nodename = nodename[5:]

        context = nodename.lower().split("_")[0]
        if len(context) > 2:
            context = context[:2] + context[2:-1].translate(str.maketrans("", "", "aiyu")) + context[-1]

        if "." in context:
            context = context.split(".")[0]

        return randomize(f"{name[:8]}-{user[:8]}-{context[:9]}".lower(), tail=tail)

    return _blame


@pytest.fixture(scope="session")
def cluster(testconfig):
    """Kubernetes client for the primary namespace"""
    client = testconfig["cluster"]
    if not client.connected:
        pytest.fail("You are not logged into Kubernetes or the configured namespace doesn't exist")
    return client


@pytest.fixture(scope="session")
def cfssl(testconfig, skip_or_fail):
    """CFSSL client library"""
    client = CFSSLClient(binary=testconfig["cfssl"])
    if not client.exists:
        skip_or_fail("Skipping CFSSL tests as CFSSL binary path is not properly configured")
    return client
