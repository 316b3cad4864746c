"""Module containing CertificateSigningRequest related classes"""

import base64
from typing import Optional

import openshift_client as oc

from csrsuite.kubernetes import KubernetesObject

DEFAULT_USAGES = ["digital signature", "key encipherment", "server auth"]
REQUEST_DURATION_ANNOTATION = "experimental.cert-manager.io/request-duration"


def has_condition(condition_type, status="True"):
    """Returns function, that returns True if the CertificateSigningRequest has specific condition"""

    def _check(obj):
        for condition in obj.conditions:
            if condition["type"] == condition_type and condition["status"] == status:
                return True
        return False

    return _check


class CertificateSigningRequest(KubernetesObject):
    """Kubernetes certificates.k8s.io/v1 CertificateSigningRequest, cluster scoped"""

    @classmethod
    def create_instance(
        cls,
        cluster,
        name,
        request: str,
        signer_name: str,
        usages: list[str] = None,
        expiration_seconds: Optional[int] = None,
        labels: dict[str, str] = None,
        annotations: dict[str, str] = None,
    ):
        """Creates new CertificateSigningRequest from PEM encoded request"""
        model: dict = {
            "apiVersion": "certificates.k8s.io/v1",
            "kind": "CertificateSigningRequest",
            "metadata": {
                "name": name,
                "labels": labels,
                "annotations": dict(annotations or {}),
            },
            "spec": {
                "request": base64.b64encode(request.encode("utf-8")).decode("utf-8"),
                "signerName": signer_name,
                "usages": usages or DEFAULT_USAGES,
            },
        }

        if expiration_seconds is not None:
            model["spec"]["expirationSeconds"] = expiration_seconds
            model["metadata"]["annotations"][REQUEST_DURATION_ANNOTATION] = f"{expiration_seconds}s"

        return cls(model, context=cluster.context)

    @property
    def signer_name(self):
        """Signer which should sign this request"""
        return self.model.spec.signerName

    @property
    def conditions(self) -> list[dict]:
        """Status conditions of the request"""
        return self.as_dict().get("status", {}).get("conditions") or []

    @property
    def approved(self):
        """True if the request was approved"""
        return has_condition("Approved")(self)

    @property
    def failed(self):
        """True if the request was denied or the signer failed to sign it"""
        return has_condition("Denied")(self) or has_condition("Failed")(self)

    @property
    def signed(self):
        """True if the signer populated the certificate"""
        return bool(self.as_dict().get("status", {}).get("certificate"))

    @property
    def certificate(self) -> str:
        """PEM encoded issued certificate chain"""
        return base64.b64decode(self.as_dict()["status"]["certificate"]).decode("utf-8")

    def approve(self):
        """Approves the request, same as `kubectl certificate approve`"""
        with self.context:
            oc.invoke("certificate", ["approve", self.name()])
        self.refresh()
        assert self.approved, f"{self.kind()} {self.name()} was not approved: {self.conditions}"

    def wait_for_signed(self, timelimit=180):
        """Waits until the request is either signed or marked as failed"""
        success = self.wait_until(lambda obj: obj.signed or obj.failed, timelimit=timelimit)
        assert success, f"{self.kind()} {self.name()} was not signed in time, conditions: {self.conditions}"
        assert self.signed, f"{self.kind()} {self.name()} was not signed: {self.conditions}"
