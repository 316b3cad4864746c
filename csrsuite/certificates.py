"""Module containing classes for generating certificate requests and inspecting issued certificates"""
import dataclasses
import json
import shutil
import subprocess
from datetime import datetime
from functools import cached_property
from typing import Optional, List, Dict, Collection, Literal

from cryptography import x509
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives.asymmetric import ec, ed25519, rsa
from cryptography.x509.extensions import ExtensionNotFound
from cryptography.x509.oid import ExtendedKeyUsageOID

# Kubernetes CertificateSigningRequest usage names
KEY_USAGES = {
    "digital_signature": "digital signature",
    "content_commitment": "content commitment",
    "key_encipherment": "key encipherment",
    "data_encipherment": "data encipherment",
    "key_agreement": "key agreement",
    "key_cert_sign": "cert sign",
    "crl_sign": "crl sign",
}
EXTENDED_KEY_USAGES = {
    ExtendedKeyUsageOID.SERVER_AUTH: "server auth",
    ExtendedKeyUsageOID.CLIENT_AUTH: "client auth",
    ExtendedKeyUsageOID.CODE_SIGNING: "code signing",
    ExtendedKeyUsageOID.EMAIL_PROTECTION: "email protection",
    ExtendedKeyUsageOID.TIME_STAMPING: "timestamping",
    ExtendedKeyUsageOID.OCSP_SIGNING: "ocsp signing",
}


class CFSSLException(Exception):
    """Common exception for CFSSL errors"""


@dataclasses.dataclass
class UnsignedKey:
    """Object representing generated key waiting to be signed"""
    key: str
    csr: str


@dataclasses.dataclass
class CertificateInfo:
    """Parsed details of an issued certificate"""
    common_name: str
    sans: List[str]
    not_before: datetime
    not_after: datetime
    signature_algorithm: str
    pem: str
    key_algorithm: str = ""
    usages: List[str] = dataclasses.field(default_factory=list)

    @property
    def duration(self):
        """Validity period of the certificate"""
        return self.not_after - self.not_before


def build_cert_request_json(common_name: str,
                            names: Optional[List[Dict[str, str]]] = None,
                            hosts: Optional[Collection[str]] = None,
                            algorithm: Literal["rsa", "ecdsa"] = "rsa",
                            size: int = 2048) -> dict:
    """
    Build certificate request for the CFSSL client
    :param common_name: certificate identifier
    :param names: certificate attributes
    :param hosts: certificate hosts, DNS names, IP addresses, emails or URIs
    :param algorithm: private key algorithm
    :param size: private key size, curve size in case of ecdsa
    :return: certificate request dictionary
    """
    return {
        "CN": common_name,
        "names": names,
        "hosts": hosts,
        "key": {
            "algo": algorithm,
            "size": size
        },
    }


def _parse_time(value: str) -> datetime:
    return datetime.fromisoformat(value)


def key_algorithm(certificate: x509.Certificate) -> str:
    """Returns algorithm of the certificate public key, e.g. rsa or ecdsa"""
    public_key = certificate.public_key()
    if isinstance(public_key, rsa.RSAPublicKey):
        return "rsa"
    if isinstance(public_key, ec.EllipticCurvePublicKey):
        return "ecdsa"
    if isinstance(public_key, ed25519.Ed25519PublicKey):
        return "ed25519"
    return type(public_key).__name__


def _extension(certificate: x509.Certificate, extension_class):
    try:
        return certificate.extensions.get_extension_for_class(extension_class).value
    except ExtensionNotFound:
        return None


def usages(certificate: x509.Certificate) -> List[str]:
    """Returns key usages and extended key usages of the certificate, named the same as in CertificateSigningRequest"""
    result = []
    key_usage = _extension(certificate, x509.KeyUsage)
    if key_usage is not None:
        result.extend(name for attribute, name in KEY_USAGES.items() if getattr(key_usage, attribute))
        # encipher_only and decipher_only are defined only together with key_agreement
        if key_usage.key_agreement and key_usage.encipher_only:
            result.append("encipher only")
        if key_usage.key_agreement and key_usage.decipher_only:
            result.append("decipher only")
    extended = _extension(certificate, x509.ExtendedKeyUsage)
    if extended is not None:
        result.extend(EXTENDED_KEY_USAGES.get(oid, oid.dotted_string) for oid in extended)
    return result


class CFSSLClient:
    """Client for working with CFSSL library"""
    DEFAULT_NAMES = [
        {
            "O": "cert-manager",
            "OU": "conformance",
        }
    ]

    def __init__(self, binary) -> None:
        super().__init__()
        self.binary = binary

    def _execute_command(self,
                         command: str,
                         *args: str,
                         stdin: Optional[str] = None,
                         env: Optional[Dict[str, str]] = None):
        args = (self.binary, command, *args)
        try:
            response = subprocess.run(args,
                                      stderr=subprocess.PIPE,
                                      stdout=subprocess.PIPE,
                                      input=stdin,
                                      universal_newlines=bool(stdin),
                                      check=False,
                                      env=env)
            if response.returncode != 0:
                raise CFSSLException(f"CFSSL command {args} returned non-zero response code, error {response.stderr}")
            return json.loads(response.stdout)
        except Exception as exception:
            # If some error occurs, first check if the binary exists to throw better error
            if not self.exists:
                raise AttributeError("CFSSL binary does not exist") from exception
            raise exception

    @cached_property
    def exists(self):
        """Returns true if the binary exists and is correctly set up"""
        return shutil.which(self.binary)

    def generate_key(self, common_name: str, names: Optional[List[Dict[str, str]]] = None,
                     hosts: Optional[Collection[str]] = None,
                     algorithm: Literal["rsa", "ecdsa"] = "rsa", size: int = 2048) -> UnsignedKey:
        """Generates private key and PEM encoded certificate request for it"""
        data = build_cert_request_json(common_name, names or self.DEFAULT_NAMES, hosts, algorithm, size)

        result = self._execute_command("genkey", "-", stdin=json.dumps(data))
        return UnsignedKey(key=result["key"], csr=result["csr"])

    def certinfo(self, certificate: str) -> CertificateInfo:
        """Parses PEM encoded certificate"""
        result = self._execute_command("certinfo", "-cert", "-", stdin=certificate)
        # certinfo does not report the public key nor the usages
        parsed = x509.load_pem_x509_certificate(certificate.encode("utf-8"), default_backend())
        return CertificateInfo(
            common_name=result["subject"].get("common_name", ""),
            sans=result.get("sans") or [],
            not_before=_parse_time(result["not_before"]),
            not_after=_parse_time(result["not_after"]),
            signature_algorithm=result.get("sigalg", ""),
            pem=result.get("pem", certificate),
            key_algorithm=key_algorithm(parsed),
            usages=usages(parsed),
        )
