"""
Backend agnostic CertificateSigningRequest conformance cases.
Every case creates one or more CertificateSigningRequests with the signer name of the issuer under test,
approves them and verifies the certificate the issuer signed.
"""

import logging
from datetime import timedelta
from typing import Optional

from csrsuite.certificates import CertificateInfo
from csrsuite.featureset import Feature
from csrsuite.framework import Framework
from csrsuite.kubernetes.csr import CertificateSigningRequest, DEFAULT_USAGES
from csrsuite.suite import Suite
from csrsuite.utils import domain

logger = logging.getLogger(__name__)

DURATION = timedelta(hours=2)
DURATION_LEEWAY = timedelta(minutes=5)


# pylint: disable=too-many-arguments
def sign(
    suite: Suite,
    framework: Framework,
    signer_name: str,
    hosts: list[str],
    common_name: str = "",
    algorithm="rsa",
    size=2048,
    usages: Optional[list[str]] = None,
    expiration_seconds: Optional[int] = None,
) -> CertificateInfo:
    """Requests certificate from the signer and returns the parsed certificate it issued"""
    key = framework.cfssl.generate_key(common_name, hosts=hosts, algorithm=algorithm, size=size)
    csr = CertificateSigningRequest.create_instance(
        framework.cluster,
        framework.blame("csr"),
        key.csr,
        signer_name,
        usages=usages,
        expiration_seconds=expiration_seconds,
        labels={"app": "csrsuite"},
    )

    if suite.provision is not None:
        suite.provision(framework, csr, key)
    try:
        logger.info("Creating CertificateSigningRequest %s for %s", csr.name(), signer_name)
        csr.commit()
        csr.approve()
        csr.wait_for_signed()
        return framework.cfssl.certinfo(csr.certificate)
    finally:
        if suite.deprovision is not None:
            suite.deprovision(framework, csr)
        csr.delete()


def define(suite: Suite, framework: Framework):
    """Registers all cases for the suite, cases requiring unsupported features are left out"""

    def single_dns_name(signer_name):
        name = domain("csr", suite.domain_suffix)
        cert = sign(suite, framework, signer_name, [name])
        assert name in cert.sans

    def common_name(signer_name):
        name = domain("csr", suite.domain_suffix)
        cert = sign(suite, framework, signer_name, [name], common_name=name)
        assert cert.common_name == name
        assert name in cert.sans

    def multiple_dns_names(signer_name):
        names = [domain("csr", suite.domain_suffix), domain("csr", suite.domain_suffix)]
        cert = sign(suite, framework, signer_name, names)
        assert set(names) <= set(cert.sans)

    def wildcard(signer_name):
        name = "*." + domain("csr", suite.domain_suffix)
        cert = sign(suite, framework, signer_name, [name])
        assert name in cert.sans

    def ip_address(signer_name):
        cert = sign(suite, framework, signer_name, ["127.0.0.1"])
        assert "127.0.0.1" in cert.sans

    def ecdsa(signer_name):
        name = domain("csr", suite.domain_suffix)
        cert = sign(suite, framework, signer_name, [name], algorithm="ecdsa", size=256)
        assert name in cert.sans
        assert cert.key_algorithm == "ecdsa", f"Requested ECDSA key, but the certificate has {cert.key_algorithm} key"

    def duration(signer_name):
        name = domain("csr", suite.domain_suffix)
        cert = sign(suite, framework, signer_name, [name], expiration_seconds=int(DURATION.total_seconds()))
        assert (
            abs(cert.duration - DURATION) <= DURATION_LEEWAY
        ), f"Requested duration {DURATION}, but the certificate is valid for {cert.duration}"

    def key_usages(signer_name):
        name = domain("csr", suite.domain_suffix)
        usages = DEFAULT_USAGES + ["client auth", "content commitment"]
        cert = sign(suite, framework, signer_name, [name], usages=usages)
        assert name in cert.sans
        missing = {"client auth", "content commitment"} - set(cert.usages)
        assert not missing, f"Certificate is missing requested usages {missing}, it has {cert.usages}"

    suite.it(framework, "should issue a certificate for a single distinct DNS name", single_dns_name)
    suite.it(framework, "should issue a certificate that defines a common name", common_name, Feature.COMMON_NAME)
    suite.it(framework, "should issue a certificate that defines multiple DNS names", multiple_dns_names)
    suite.it(framework, "should issue a certificate for a wildcard DNS name", wildcard, Feature.WILDCARDS)
    suite.it(framework, "should issue a certificate that defines an IP address", ip_address, Feature.IP_ADDRESSES)
    suite.it(framework, "should issue an ECDSA certificate", ecdsa, Feature.ECDSA)
    suite.it(framework, "should issue a certificate with the requested duration", duration, Feature.DURATION)
    suite.it(framework, "should issue a certificate that defines key usages", key_usages, Feature.KEY_USAGES)
