"""Fixtures for tests of the suite machinery itself, none of them need a cluster"""

import pytest

from csrsuite.feature_gates import FeatureGates
from csrsuite.framework import Framework


class Recorder:
    """Records calls of the lifecycle hooks in order"""

    def __init__(self, signer_name="example.com/signer"):
        self.signer_name = signer_name
        self.calls = []

    def create_issuer(self, framework):  # pylint: disable=unused-argument
        """Returns configured signer name"""
        self.calls.append(("create",))
        return self.signer_name

    def delete_issuer(self, framework, signer_name):  # pylint: disable=unused-argument
        """Records deletion"""
        self.calls.append(("delete", signer_name))

    def body(self, signer_name):
        """Records body invocation"""
        self.calls.append(("body", signer_name))

    def count(self, name):
        """Returns how many times was the hook called"""
        return len([call for call in self.calls if call[0] == name])


@pytest.fixture
def recorder():
    """Lifecycle hooks recorder"""
    return Recorder()


@pytest.fixture
def enabled_gates():
    """Feature gates with the CertificateSigningRequest controllers enabled"""
    return FeatureGates.parse("ExperimentalCertificateSigningRequestControllers=true")


@pytest.fixture
def testconfig(enabled_gates):
    """Minimal settings, overrides the dynaconf settings"""
    return {
        "addons": {"ingress_controller": {"domain": "ingress.example.com"}},
        "feature_gates": enabled_gates,
    }


@pytest.fixture
def framework(testconfig):
    """Framework which is never set up, hooks of unit tests do not need the cluster"""
    return Framework("unit", testconfig)
