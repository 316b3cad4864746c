"""This module implements an KubernetesCLI interface using oc/kubectl binary commands."""

from functools import cached_property

import openshift_client as oc
from openshift_client import Context, OpenShiftPythonException


class KubernetesClient:
    """KubernetesClient is a helper class for invoking kubectl commands"""

    def __init__(self, project: str = None, api_url: str = None, token: str = None, kubeconfig_path: str = None):
        self._project = project
        self._api_url = api_url
        self._token = token
        self._kubeconfig_path = kubeconfig_path

    def change_project(self, project) -> "KubernetesClient":
        """Return new self with a different project"""
        return KubernetesClient(project, self._api_url, self._token, self._kubeconfig_path)

    @cached_property
    def context(self):
        """Prepare context for command execution"""
        context = Context()

        context.project_name = self._project
        context.api_server = self._api_url
        context.token = self._token
        context.kubeconfig_path = self._kubeconfig_path

        return context

    @property
    def project(self):
        """Returns real Kubernetes namespace name"""
        with self.context:
            return oc.get_project_name()

    @property
    def connected(self):
        """Returns True, if user is logged in and the project exists"""
        try:
            self.do_action("get", "ns", self._project)
        except OpenShiftPythonException:
            return False
        return True

    def resource_exists(self, kind: str, name: str) -> bool:
        """Returns True if resource of the given kind and name exists"""
        with self.context:
            return oc.selector(f"{kind}/{name}").count_existing() == 1

    def do_action(self, verb: str, *args, stdin_str=None, auto_raise: bool = True):
        """Run an oc command."""
        with self.context:
            return oc.invoke(verb, args, stdin_str=stdin_str, auto_raise=auto_raise)

