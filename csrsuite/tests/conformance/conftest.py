"""Builds conformance suites for every issuer configured in the settings"""

import pytest
from dynaconf import ValidationError

from csrsuite.cases import define
from csrsuite.config import settings
from csrsuite.framework import Framework
from csrsuite.issuers import build_suites


def pytest_generate_tests(metafunc):
    """Parametrizes conformance tests with every case of every configured issuer"""
    if "conformance_case" not in metafunc.fixturenames:
        return

    try:
        settings.validators.validate(only=["issuers"])
    except ValidationError as exc:
        pytest.fail(f"Invalid issuers configuration: {exc}")

    params = []
    for suite in build_suites(settings["issuers"]):
        framework = Framework(suite.name, settings)
        suite.complete(settings)
        define(suite, framework)
        for case in suite.registry:
            params.append(pytest.param((framework, case), id=f"{suite.name}: {case.name}"))

    metafunc.parametrize("conformance_case", params)


@pytest.fixture
def framework(conformance_case, cluster, cfssl, blame):
    """Framework of the suite the current case belongs to, set up for this case"""
    framework, _ = conformance_case
    framework.setup(cluster, cfssl, blame)
    return framework
