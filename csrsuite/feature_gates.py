"""Parsing of the FEATURE_GATES value cert-manager controllers are started with"""

from typing import Mapping

EXPERIMENTAL_CSR_CONTROLLERS = "ExperimentalCertificateSigningRequestControllers"


class FeatureGates:
    """Set of name=value feature gate tokens, names are matched case-insensitively"""

    def __init__(self, gates: Mapping[str, bool] = None) -> None:
        self._gates = {name.lower(): enabled for name, enabled in (gates or {}).items()}

    @classmethod
    def parse(cls, value: str | None) -> "FeatureGates":
        """
        Parses comma-separated list of `name=value` tokens, e.g.
        `ExperimentalCertificateSigningRequestControllers=true,AdditionalCertificateOutputFormats=false`
        """
        gates = {}
        for token in (value or "").split(","):
            token = token.strip()
            if not token:
                continue
            name, sep, enabled = token.partition("=")
            if not sep or not name.strip():
                raise ValueError(f"Invalid feature gate token '{token}', expected name=value")
            gates[name.strip()] = enabled.strip().lower() == "true"
        return cls(gates)

    def enabled(self, name: str) -> bool:
        """Returns True only if the gate is explicitly set to true"""
        return self._gates.get(name.lower(), False)

    def __contains__(self, name):
        return self.enabled(name)

    def __repr__(self):
        return f"FeatureGates({self._gates!r})"
