"""Issuer hooks for cert-manager issuers which are already deployed on the cluster"""

import logging
from typing import Iterable, Literal, Optional

from csrsuite.featureset import FeatureSet
from csrsuite.suite import Suite

logger = logging.getLogger(__name__)


class PreexistingIssuer:
    """Issuer or ClusterIssuer which is already deployed prior to the testrun, so it is never deleted"""

    def __init__(self, name: str, kind: Literal["Issuer", "ClusterIssuer"] = "ClusterIssuer", namespace=None) -> None:
        if kind not in ("Issuer", "ClusterIssuer"):
            raise ValueError(f"Invalid issuer kind {kind}, the only supported values are 'Issuer' and 'ClusterIssuer'")
        self.name = name
        self.kind = kind
        self.namespace = namespace

    def signer_name(self, namespace: Optional[str] = None) -> str:
        """Signer name cert-manager controllers recognize for this issuer"""
        if self.kind == "ClusterIssuer":
            return f"clusterissuers.cert-manager.io/{self.name}"
        return f"issuers.cert-manager.io/{self.namespace or namespace}.{self.name}"

    def create(self, framework) -> str:
        """Verifies that the issuer exists and returns its signer name"""
        cluster = framework.cluster
        if self.kind == "Issuer" and self.namespace:
            cluster = cluster.change_project(self.namespace)
        assert cluster.resource_exists(
            f"{self.kind.lower()}.cert-manager.io", self.name
        ), f"{self.kind} {self.name} is not present on the cluster"
        signer_name = self.signer_name(cluster.project)
        logger.info("Using preexisting %s %s as %s", self.kind, self.name, signer_name)
        return signer_name

    def suite(
        self, name: Optional[str] = None, domain_suffix: str = "", unsupported_features: Iterable[str] = ()
    ) -> Suite:
        """Returns Suite which runs against this issuer"""
        return Suite(
            name=name or f"{self.kind}/{self.name}",
            create_issuer=self.create,
            domain_suffix=domain_suffix,
            unsupported_features=FeatureSet(unsupported_features),
        )


def build_suites(issuers: list[dict]) -> list[Suite]:
    """Builds Suite for every issuer item from the settings"""
    suites = []
    for item in issuers:
        issuer = PreexistingIssuer(item["name"], item.get("kind", "ClusterIssuer"), item.get("namespace"))
        suites.append(
            issuer.suite(
                item.get("suite_name"),
                domain_suffix=item.get("domain_suffix", ""),
                unsupported_features=item.get("unsupported_features", []),
            )
        )
    return suites
