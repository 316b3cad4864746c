"""Tests for reading key algorithm and usages out of issued certificates"""

from datetime import datetime, timedelta, timezone

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, rsa
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from csrsuite.certificates import key_algorithm, usages


def build_certificate(private_key, key_usage=None, extended_key_usage=None):
    """Self-signs certificate with the given extensions"""
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "csr.example.com")])
    now = datetime.now(timezone.utc)
    builder = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now)
        .not_valid_after(now + timedelta(hours=1))
    )
    if key_usage is not None:
        builder = builder.add_extension(key_usage, critical=True)
    if extended_key_usage is not None:
        builder = builder.add_extension(x509.ExtendedKeyUsage(extended_key_usage), critical=False)
    return builder.sign(private_key, hashes.SHA256())


@pytest.fixture(scope="module")
def ecdsa_key():
    """ECDSA P-256 private key"""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="module")
def rsa_key():
    """RSA private key"""
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


def test_key_algorithm(ecdsa_key, rsa_key):
    """Algorithm of the public key is recognized"""
    assert key_algorithm(build_certificate(ecdsa_key)) == "ecdsa"
    assert key_algorithm(build_certificate(rsa_key)) == "rsa"


def test_usages(ecdsa_key):
    """Key usages and extended key usages use CertificateSigningRequest names"""
    key_usage = x509.KeyUsage(
        digital_signature=True,
        content_commitment=True,
        key_encipherment=False,
        data_encipherment=False,
        key_agreement=False,
        key_cert_sign=False,
        crl_sign=False,
        encipher_only=False,
        decipher_only=False,
    )
    certificate = build_certificate(
        ecdsa_key, key_usage, [ExtendedKeyUsageOID.SERVER_AUTH, ExtendedKeyUsageOID.CLIENT_AUTH]
    )

    assert usages(certificate) == ["digital signature", "content commitment", "server auth", "client auth"]


def test_no_usages(rsa_key):
    """Certificate without usage extensions has no usages"""
    assert not usages(build_certificate(rsa_key))
