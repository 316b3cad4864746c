"""Lifecycle related classes"""

import abc


class LifecycleObject(abc.ABC):
    """Any objects which has its lifecycle controlled by commit() and delete() methods"""

    @abc.abstractmethod
    def commit(self):
        """Commits resource.
        if there is some reconciliation needed, the method should wait until it is all reconciled"""

    @abc.abstractmethod
    def delete(self):
        """Removes resource,
        if there is some reconciliation needed, the method should wait until it is all reconciled"""
