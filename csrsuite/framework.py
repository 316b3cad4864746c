"""Framework handle shared by issuer hooks and case bodies of one Suite"""

from typing import Optional, Callable

from csrsuite.certificates import CFSSLClient
from csrsuite.kubernetes.client import KubernetesClient


class FrameworkNotReady(RuntimeError):
    """Framework was used before setup() populated it"""


class Framework:
    """
    Cases are registered during collection, long before any cluster connection exists.
    The test engine calls setup() before every case, so hooks and bodies always see the current cluster.
    """

    def __init__(self, base_name: str, settings) -> None:
        self.base_name = base_name
        self.config = settings
        self._cluster: Optional[KubernetesClient] = None
        self._cfssl: Optional[CFSSLClient] = None
        self._blame: Optional[Callable[[str], str]] = None

    def setup(self, cluster: KubernetesClient, cfssl: CFSSLClient, blame: Callable[[str], str]):
        """Populates the framework for the next case"""
        self._cluster = cluster
        self._cfssl = cfssl
        self._blame = blame

    def _ready(self, value):
        if value is None:
            raise FrameworkNotReady(f"Framework {self.base_name} was not set up")
        return value

    @property
    def cluster(self) -> KubernetesClient:
        """Kubernetes client for the namespace the suite runs in"""
        return self._ready(self._cluster)

    @property
    def cfssl(self) -> CFSSLClient:
        """CFSSL client used for generating requests"""
        return self._ready(self._cfssl)

    def blame(self, name: str) -> str:
        """Returns unique resource name"""
        return self._ready(self._blame)(name)
