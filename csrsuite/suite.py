"""Reusable CertificateSigningRequest conformance suite which can be run against any issuer implementation"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, TYPE_CHECKING

from csrsuite.feature_gates import EXPERIMENTAL_CSR_CONTROLLERS, FeatureGates
from csrsuite.featureset import Feature, FeatureSet

if TYPE_CHECKING:
    from csrsuite.certificates import UnsignedKey
    from csrsuite.framework import Framework
    from csrsuite.kubernetes.csr import CertificateSigningRequest

logger = logging.getLogger(__name__)


class SuiteNotCompleted(RuntimeError):
    """Case was registered or executed before Suite.complete() was called"""


class Status(enum.Enum):
    """Result of a single case execution"""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"

    def __str__(self):
        return str(self.value)


@dataclass(frozen=True)
class Outcome:
    """Result variant returned by Suite.run(), errors are carried to the test engine, never dropped"""

    status: Status
    reason: str = ""
    errors: tuple[BaseException, ...] = ()

    @classmethod
    def passed(cls) -> "Outcome":
        """Case body returned normally and the issuer was cleaned up"""
        return cls(Status.PASSED)

    @classmethod
    def skipped(cls, reason: str) -> "Outcome":
        """Case was aborted before any issuer was created"""
        return cls(Status.SKIPPED, reason)

    @classmethod
    def failed(cls, *errors: BaseException) -> "Outcome":
        """Case failed, errors are in the order they happened"""
        return cls(Status.FAILED, "; ".join(f"{type(e).__name__}: {e}" for e in errors), errors)

    @property
    def error(self) -> Optional[BaseException]:
        """Returns single exception representing the failure, or None if there is no failure"""
        if not self.errors:
            return None
        if len(self.errors) == 1:
            return self.errors[0]
        return ExceptionGroup("Case failed and the issuer could not be cleaned up", list(self.errors))


@dataclass
class Case:
    """Registered case waiting for the test engine to run it"""

    name: str
    thunk: Callable[[], Outcome]
    features: FeatureSet

    def __call__(self) -> Outcome:
        return self.thunk()


class CaseRegistry:
    """Named cases registered for later execution by the test engine"""

    def __init__(self) -> None:
        self.cases: dict[str, Case] = {}

    def register(self, name: str, thunk: Callable[[], Outcome], features: FeatureSet = FeatureSet()) -> Case:
        """Registers new case, names must be unique"""
        if name in self.cases:
            raise ValueError(f"Case '{name}' is already registered")
        case = Case(name, thunk, features)
        self.cases[name] = case
        return case

    def __iter__(self):
        return iter(self.cases.values())

    def __len__(self):
        return len(self.cases)


# pylint: disable=too-many-instance-attributes
@dataclass
class Suite:
    """
    Conformance suite bound to a single issuer implementation.

    Args:
        :param name: Name of the issuer being tested, e.g. SelfSigned, CA, ACME
        :param create_issuer: Provisions new issuer and returns the signer name
            which will be used on all CertificateSigningRequests of a case
        :param delete_issuer: Cleans up everything create_issuer created, runs whether the case passed or not
        :param provision: Runs just before each CertificateSigningRequest is created,
            prepares anything the issuer needs for signing it
        :param deprovision: Removes anything created by provision
        :param domain_suffix: Suffix used on all requested domains, defaults to the ingress controller domain
        :param unsupported_features: Features this issuer cannot satisfy, cases requiring them are skipped
        :param feature_gates: Enabled controller feature gates, defaults to the FEATURE_GATES setting
    """

    name: str
    create_issuer: Callable[["Framework"], str]
    delete_issuer: Optional[Callable[["Framework", str], None]] = None
    provision: Optional[Callable[["Framework", "CertificateSigningRequest", "UnsignedKey"], None]] = None
    deprovision: Optional[Callable[["Framework", "CertificateSigningRequest"], None]] = None
    domain_suffix: str = ""
    unsupported_features: FeatureSet = field(default_factory=FeatureSet)
    feature_gates: Optional[FeatureGates] = None
    registry: CaseRegistry = field(default_factory=CaseRegistry, repr=False)
    completed: bool = field(default=False, init=False)

    def __post_init__(self):
        if not self.name:
            raise ValueError("Suite name must be provided")
        if not callable(self.create_issuer):
            raise ValueError(f"Suite {self.name} requires create_issuer")
        self.unsupported_features = FeatureSet(self.unsupported_features or ())

    def complete(self, settings):
        """Fills in default values, has to be called before any case is registered"""
        if not self.domain_suffix:
            self.domain_suffix = settings["addons"]["ingress_controller"]["domain"]
        if self.feature_gates is None:
            self.feature_gates = settings.get("feature_gates") or FeatureGates()
        self.completed = True

    def check_features(self, *required: Feature | str) -> bool:
        """Returns True if all required features are supported and the case should run"""
        return len(self.unsupported_features.unsupported(required)) == 0

    def it(
        self, framework: "Framework", name: str, fn: Callable[[str], None], *required: Feature | str
    ) -> Optional[Case]:
        """Registers the case, unless it requires a feature the issuer does not support"""
        if not self.completed:
            raise SuiteNotCompleted(f"Suite {self.name} has to be completed before registering '{name}'")
        if not self.check_features(*required):
            logger.warning(
                "Skipping case '%s' of %s due to unsupported features: %s",
                name,
                self.name,
                self.unsupported_features.unsupported(required),
            )
            return None
        return self.registry.register(name, lambda: self.run(framework, name, fn), FeatureSet(required))

    def run(self, framework: "Framework", name: str, fn: Callable[[str], None]) -> Outcome:
        """Creates the issuer, runs the case body with its signer name and cleans the issuer up"""
        if not self.completed:
            raise SuiteNotCompleted(f"Suite {self.name} has to be completed before running '{name}'")
        if not self.feature_gates.enabled(EXPERIMENTAL_CSR_CONTROLLERS):
            return Outcome.skipped(
                f"Skipping CertificateSigningRequest controller test since FEATURE_GATE "
                f"{EXPERIMENTAL_CSR_CONTROLLERS} is not enabled"
            )

        logger.info("[%s] %s: Creating an issuer resource", self.name, name)
        try:
            signer_name = self.create_issuer(framework)
        except Exception as exc:  # pylint: disable=broad-except
            return Outcome.failed(exc)

        errors = []
        try:
            fn(signer_name)
        except Exception as exc:  # pylint: disable=broad-except
            errors.append(exc)
        except BaseException as interrupt:
            # Interrupts and pytest outcomes keep propagating, a cleanup error is only attached to them
            try:
                self._delete_issuer(framework, name, signer_name)
            except Exception as exc:  # pylint: disable=broad-except
                exc.add_note(f"Raised while cleaning up issuer {signer_name}")
                logger.error("[%s] %s: Unable to clean up issuer %s", self.name, name, signer_name, exc_info=exc)
                interrupt.add_note(f"Cleanup of issuer {signer_name} also failed: {exc!r}")
            raise

        try:
            self._delete_issuer(framework, name, signer_name)
        except Exception as exc:  # pylint: disable=broad-except
            exc.add_note(f"Raised while cleaning up issuer {signer_name}")
            errors.append(exc)

        if errors:
            return Outcome.failed(*errors)
        return Outcome.passed()

    def _delete_issuer(self, framework, name, signer_name):
        if self.delete_issuer is not None:
            logger.info("[%s] %s: Cleaning up the issuer resource", self.name, name)
            self.delete_issuer(framework, signer_name)
