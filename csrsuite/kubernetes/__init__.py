"""Kubernetes common objects"""

from openshift_client import APIObject, timeout, OpenShiftPythonException

from csrsuite.lifecycle import LifecycleObject


class KubernetesObject(APIObject, LifecycleObject):
    """Custom APIObjects which can be committed to and deleted from the server"""

    def commit(self):
        """
        Creates object on the server and returns created entity.
        It will be the same class but attributes might differ, due to server adding/rejecting some of them.
        """
        self.create(["--save-config=true"])
        return self.refresh()

    def delete(self, ignore_not_found=True, cmd_args=None):
        """Deletes the resource, by default ignored not found"""
        with timeout(30):
            return super().delete(ignore_not_found, cmd_args)

    def wait_until(self, test_function, timelimit=60):
        """Waits until the test function succeeds for this object"""
        try:
            with timeout(timelimit):
                success, _, _ = self.self_selector().until_all(
                    success_func=lambda obj: test_function(self.__class__(obj.model))
                )
                self.refresh()
                return success
        except OpenShiftPythonException as e:
            if "Timeout" in e.msg:
                return False
            raise e
