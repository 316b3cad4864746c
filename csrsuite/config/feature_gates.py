"""Custom dynaconf loader which parses controller feature gates"""

import logging
import os

from csrsuite.feature_gates import FeatureGates

logger = logging.getLogger(__name__)


# pylint: disable=unused-argument
def load(obj, env=None, silent=True, key=None, filename=None):
    """
    Converts feature_gates setting into FeatureGates.
    CSRSUITE_FEATURE_GATES or the settings file take precedence over the FEATURE_GATES variable
    cert-manager itself is deployed with.
    """
    value = obj.get("feature_gates")
    if isinstance(value, FeatureGates):
        return
    if value is None:
        value = os.environ.get("FEATURE_GATES", "")
    if isinstance(value, dict):
        obj["feature_gates"] = FeatureGates({name: str(enabled).lower() == "true" for name, enabled in value.items()})
        return
    obj["feature_gates"] = FeatureGates.parse(str(value))
    logger.debug("Loaded feature gates %s", obj["feature_gates"])
